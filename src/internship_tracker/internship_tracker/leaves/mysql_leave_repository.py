from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ReviewStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, exists, fetchall, fetchone, lock_user_row
from ..scoping.sql import scope_clauses
from ..scoping.visibility import ScopeFilter
from .model import LeaveReportRow, LeaveRequest
from .repository import LeaveRepository

_COLUMNS = "request_id, user_id, leave_date, reason, status, created_at, decided_by, decided_at, reviewer_note"


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_date=r["leave_date"],
        reason=r["reason"],
        status=ReviewStatus(r["status"]),
        created_at=r.get("created_at"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        reviewer_note=r.get("reviewer_note"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def get_for_user_and_date(self, user_id: int, leave_date: date) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE user_id=%s AND leave_date=%s",
                (int(user_id), leave_date),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def create_leave(self, *, user_id: int, leave_date: date, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if not lock_user_row(cur, user_id):
                raise NotFoundError("User not found")
            if exists(cur, "SELECT attendance_id FROM attendance_records WHERE user_id=%s AND work_date=%s", (int(user_id), leave_date)):
                raise ConflictError("Attendance already recorded for this date")

            # Duplicate (user_id, leave_date) is rejected by uq_leave_user_date -> ConflictError.
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_date, reason, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), leave_date, reason, ReviewStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        request_id: int,
        status: ReviewStatus,
        decided_by: int,
        reviewer_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=NOW(), reviewer_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(decided_by), reviewer_note, int(request_id), ReviewStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY leave_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def get_report_rows(self, *, scope: ScopeFilter, leave_date: Optional[date] = None) -> Sequence[LeaveReportRow]:
        clauses, params = scope_clauses(scope, owner_column="u.user_id", supervisor_column="p.supervisor_id")
        if leave_date is not None:
            clauses.append("r.leave_date=%s")
            params.append(leave_date)

        where = " AND ".join(clauses) if clauses else "1=1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.request_id, u.user_id, u.identifier,
                       COALESCE(p.full_name, u.full_name) AS full_name,
                       r.leave_date, r.reason, r.status, r.reviewer_note
                FROM leave_requests r
                JOIN users u ON u.user_id = r.user_id
                LEFT JOIN user_profiles p ON p.user_id = u.user_id
                WHERE {where}
                ORDER BY r.leave_date DESC, u.identifier ASC
                """,
                tuple(params),
            )
            return [
                LeaveReportRow(
                    request_id=int(r["request_id"]),
                    user_id=int(r["user_id"]),
                    identifier=r["identifier"],
                    full_name=r.get("full_name"),
                    leave_date=r["leave_date"],
                    reason=r["reason"],
                    status=ReviewStatus(r["status"]),
                    reviewer_note=r.get("reviewer_note"),
                )
                for r in fetchall(cur)
            ]
