from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, exists, fetchall, fetchone, lock_user_row
from ..scoping.sql import scope_clauses
from ..scoping.visibility import ScopeFilter
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, work_date, check_in_time, check_out_time, status, note"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        note: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if not lock_user_row(cur, user_id):
                raise NotFoundError("User not found")
            if exists(cur, "SELECT request_id FROM leave_requests WHERE user_id=%s AND leave_date=%s", (int(user_id), work_date)):
                raise ConflictError("A leave request already exists for this date")

            # Duplicate (user_id, work_date) is rejected by uq_attendance_user_date -> ConflictError.
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, check_in_time, status, note)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, check_in_time, status.value, note),
            )
            return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, int(attendance_id)),
            )
            return cur.rowcount > 0

    def count_for_date(self, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendance_records WHERE work_date=%s", (work_date,))
            r = fetchone(cur)
            return int(r["total"] or 0) if r else 0

    def stats_for_user(self, user_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS days,
                       SUM(CASE WHEN status=%s THEN 1 ELSE 0 END) AS late_days
                FROM attendance_records
                WHERE user_id=%s
                """,
                (AttendanceStatus.LATE.value, int(user_id)),
            )
            r = fetchone(cur) or {}
            return {"days": int(r.get("days") or 0), "late_days": int(r.get("late_days") or 0)}

    def get_report_rows(self, *, scope: ScopeFilter, work_date: Optional[date] = None) -> Sequence[AttendanceReportRow]:
        clauses, params = scope_clauses(scope, owner_column="u.user_id", supervisor_column="p.supervisor_id")
        if work_date is not None:
            clauses.append("ar.work_date=%s")
            params.append(work_date)

        where = " AND ".join(clauses) if clauses else "1=1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    u.user_id, u.identifier,
                    COALESCE(p.full_name, u.full_name) AS full_name,
                    ar.work_date, ar.check_in_time, ar.check_out_time, ar.status, ar.note
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                LEFT JOIN user_profiles p ON p.user_id = u.user_id
                WHERE {where}
                ORDER BY ar.work_date DESC, u.identifier ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    user_id=int(r["user_id"]),
                    identifier=r["identifier"],
                    full_name=r.get("full_name"),
                    work_date=r["work_date"],
                    check_in_time=r["check_in_time"],
                    check_out_time=r.get("check_out_time"),
                    status=AttendanceStatus(r["status"]),
                    note=r.get("note"),
                )
                for r in fetchall(cur)
            ]
