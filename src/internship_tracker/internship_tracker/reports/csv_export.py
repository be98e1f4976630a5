from __future__ import annotations

import csv
import io

from .model import ReportTable


def render_csv(table: ReportTable) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=table.fieldnames, extrasaction="ignore")
    writer.writeheader()
    for row in table.rows:
        writer.writerow(row)

    # BOM so spreadsheet apps pick up UTF-8 names.
    return out.getvalue().encode("utf-8-sig")
