from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import fmt_clock, fmt_date
from ..core.enums import ReportEntity, Role
from ..core.exceptions import ValidationError
from ..identity.model import Caller
from ..identity.service import require_role
from ..journals.repository import JournalRepository
from ..leaves.repository import LeaveRepository
from ..scoping.visibility import scope_for
from .csv_export import render_csv
from .model import Column, ExportedDocument, ReportTable
from .pdf import render_pdf

logger = logging.getLogger(__name__)

ATTENDANCE_COLUMNS = (
    Column("identifier", "Identifier", 1.2),
    Column("full_name", "Name", 2.0),
    Column("date", "Date", 1.1),
    Column("check_in", "Check-in", 1.0),
    Column("check_out", "Check-out", 1.0),
    Column("status", "Status", 0.9),
)

LEAVE_COLUMNS = (
    Column("identifier", "Identifier", 1.2),
    Column("full_name", "Name", 2.0),
    Column("date", "Date", 1.1),
    Column("reason", "Reason", 2.6),
    Column("status", "Status", 1.0),
)

JOURNAL_COLUMNS = (
    Column("id", "#", 0.5),
    Column("identifier", "Identifier", 1.2),
    Column("full_name", "Name", 1.8),
    Column("date", "Date", 1.1),
    Column("activity", "Activity", 2.4),
    Column("hours", "Hours", 0.6),
    Column("status", "Status", 1.0),
    Column("comment", "Comment", 1.8),
)

TITLES = {
    ReportEntity.ATTENDANCE: "Attendance Report",
    ReportEntity.LEAVES: "Leave Report",
    ReportEntity.JOURNALS: "Journal Report",
}

FORMATS = {
    "pdf": ("application/pdf", render_pdf),
    "csv": ("text/csv", render_csv),
}


def parse_entity(value: str) -> ReportEntity:
    try:
        return ReportEntity((value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown report {value!r} (expected attendance, leaves or journals)")


class ReportService:
    """Role-scoped, date-descending projections of attendance, leaves and journals."""

    def __init__(self, attendance: AttendanceRepository, leaves: LeaveRepository, journals: JournalRepository):
        self._attendance = attendance
        self._leaves = leaves
        self._journals = journals

    def build_table(self, *, caller: Caller, entity: ReportEntity, on_date: Optional[date] = None) -> ReportTable:
        scope = scope_for(caller)
        title = TITLES[entity] + (f" - {fmt_date(on_date)}" if on_date else "")

        if entity == ReportEntity.ATTENDANCE:
            rows = [
                {
                    "identifier": r.identifier,
                    "full_name": r.full_name or "-",
                    "date": fmt_date(r.work_date),
                    "check_in": fmt_clock(r.check_in_time),
                    "check_out": fmt_clock(r.check_out_time),
                    "status": r.status.value,
                }
                for r in self._attendance.get_report_rows(scope=scope, work_date=on_date)
            ]
            return ReportTable(title=title, columns=ATTENDANCE_COLUMNS, rows=rows)

        if entity == ReportEntity.LEAVES:
            rows = [
                {
                    "id": r.request_id,
                    "identifier": r.identifier,
                    "full_name": r.full_name or "-",
                    "date": fmt_date(r.leave_date),
                    "reason": r.reason,
                    "status": r.status.value,
                }
                for r in self._leaves.get_report_rows(scope=scope, leave_date=on_date)
            ]
            return ReportTable(title=title, columns=LEAVE_COLUMNS, rows=rows)

        rows = [r.to_dict() for r in self._journals.get_report_rows(scope=scope, entry_date=on_date)]
        return ReportTable(title=title, columns=JOURNAL_COLUMNS, rows=rows)

    def list_scoped(self, *, caller: Caller, entity: ReportEntity, on_date: Optional[date] = None) -> list[dict]:
        return self.build_table(caller=caller, entity=entity, on_date=on_date).rows

    def export(
        self,
        *,
        caller: Caller,
        entity: ReportEntity,
        on_date: Optional[date] = None,
        fmt: str = "pdf",
    ) -> ExportedDocument:
        require_role(caller, {Role.ADMIN, Role.SUPERVISOR})

        fmt = (fmt or "pdf").strip().lower()
        if fmt not in FORMATS:
            raise ValidationError("format must be pdf or csv")
        mimetype, render = FORMATS[fmt]

        table = self.build_table(caller=caller, entity=entity, on_date=on_date)
        suffix = on_date.strftime("%Y%m%d") if on_date else "all"
        filename = f"{entity.value}_report_{suffix}.{fmt}"

        logger.info("%s exported %s (%s rows) as %s", caller.identifier, entity.value, len(table.rows), fmt)
        return ExportedDocument(content=render(table), mimetype=mimetype, filename=filename)
