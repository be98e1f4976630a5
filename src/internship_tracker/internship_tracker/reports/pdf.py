"""PDF rendering of a ReportTable (reportlab canvas, A4)."""

from __future__ import annotations

import io
from datetime import datetime
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .model import ReportTable

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_SIZE = 9
ROW_HEIGHT = 14
MARGIN = 1.5 * cm


def _fit(text: str, max_width: float, font: str = FONT, size: int = FONT_SIZE) -> str:
    """Truncate ``text`` with an ellipsis so it fits in ``max_width`` points."""
    if stringWidth(text, font, size) <= max_width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > max_width:
        text = text[:-1]
    return text + ellipsis


def _cell(value) -> str:
    if value is None or value == "":
        return "-"
    return " ".join(str(value).split())


def render_pdf(table: ReportTable, *, generated_at: Optional[datetime] = None) -> bytes:
    generated_at = generated_at or datetime.now()

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(table.title)
    width, height = A4

    usable = width - 2 * MARGIN
    total_share = sum(col.width for col in table.columns) or 1.0
    widths = [usable * col.width / total_share for col in table.columns]

    page = 1

    def header() -> float:
        y = height - MARGIN
        c.setFont(FONT_BOLD, 14)
        c.drawString(MARGIN, y, table.title)
        y -= 16
        c.setFont(FONT, 8)
        c.drawString(MARGIN, y, f"Generated {generated_at.strftime('%Y-%m-%d %H:%M')}  |  Page {page}")
        y -= 20

        c.setFont(FONT_BOLD, FONT_SIZE)
        x = MARGIN
        for col, w in zip(table.columns, widths):
            c.drawString(x, y, _fit(col.title, w - 4, FONT_BOLD))
            x += w
        y -= 4
        c.line(MARGIN, y, width - MARGIN, y)
        y -= ROW_HEIGHT - 4
        c.setFont(FONT, FONT_SIZE)
        return y

    y = header()

    if not table.rows:
        c.drawString(MARGIN, y, "No records found.")

    for row in table.rows:
        if y < MARGIN:
            c.showPage()
            page += 1
            y = header()

        x = MARGIN
        for col, w in zip(table.columns, widths):
            c.drawString(x, y, _fit(_cell(row.get(col.key)), w - 4))
            x += w
        y -= ROW_HEIGHT

    c.save()
    pdf = buffer.getvalue()
    buffer.close()
    return pdf
