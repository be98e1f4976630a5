from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import ReviewStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..scoping.sql import scope_clauses
from ..scoping.visibility import ScopeFilter
from .model import JournalEntry, JournalReportRow
from .repository import JournalRepository

_COLUMNS = (
    "entry_id, user_id, entry_date, activity, description, hours_worked, obstacles, next_plan, "
    "status, reviewer_comment, reviewed_by, created_at"
)

_REPORT_SELECT = """
    SELECT j.entry_id, u.user_id, u.identifier,
           COALESCE(p.full_name, u.full_name) AS full_name,
           j.entry_date, j.activity, j.hours_worked, j.status, j.reviewer_comment
    FROM journals j
    JOIN users u ON u.user_id = j.user_id
    LEFT JOIN user_profiles p ON p.user_id = u.user_id
"""


def _to_entry(r: dict) -> JournalEntry:
    return JournalEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        entry_date=r["entry_date"],
        activity=r["activity"],
        description=r["description"],
        hours_worked=Decimal(str(r["hours_worked"])),
        obstacles=r.get("obstacles"),
        next_plan=r.get("next_plan"),
        status=ReviewStatus(r["status"]),
        reviewer_comment=r.get("reviewer_comment"),
        reviewed_by=r.get("reviewed_by"),
        created_at=r.get("created_at"),
    )


def _to_report_row(r: dict) -> JournalReportRow:
    return JournalReportRow(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        identifier=r["identifier"],
        full_name=r.get("full_name"),
        entry_date=r["entry_date"],
        activity=r["activity"],
        hours_worked=Decimal(str(r["hours_worked"])),
        status=ReviewStatus(r["status"]),
        reviewer_comment=r.get("reviewer_comment"),
    )


def _where(clauses: list[str]) -> str:
    return " AND ".join(clauses) if clauses else "1=1"


class MySQLJournalRepository(JournalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM journals WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create_entry(
        self,
        *,
        user_id: int,
        entry_date: date,
        activity: str,
        description: str,
        hours_worked: Decimal,
        obstacles: Optional[str] = None,
        next_plan: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO journals(user_id, entry_date, activity, description, hours_worked, obstacles, next_plan, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    entry_date,
                    activity,
                    description,
                    hours_worked,
                    obstacles,
                    next_plan,
                    ReviewStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def set_review(self, *, entry_id: int, status: ReviewStatus, comment: Optional[str], reviewed_by: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE journals SET status=%s, reviewer_comment=%s, reviewed_by=%s WHERE entry_id=%s",
                (status.value, comment, int(reviewed_by), int(entry_id)),
            )

    def list_for_user(self, user_id: int, *, limit: Optional[int] = None) -> Sequence[JournalEntry]:
        sql = f"SELECT {_COLUMNS} FROM journals WHERE user_id=%s ORDER BY entry_date DESC, entry_id DESC"
        params: list[object] = [int(user_id)]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]

    def stats_for_user(self, user_id: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total,
                       SUM(CASE WHEN status=%s THEN 1 ELSE 0 END) AS approved,
                       COALESCE(SUM(hours_worked), 0) AS total_hours
                FROM journals
                WHERE user_id=%s
                """,
                (ReviewStatus.APPROVED.value, int(user_id)),
            )
            r = fetchone(cur) or {}
            return {
                "total": int(r.get("total") or 0),
                "approved": int(r.get("approved") or 0),
                "total_hours": Decimal(str(r.get("total_hours") or 0)),
            }

    def count_by_status(self, status: ReviewStatus, *, scope: ScopeFilter) -> int:
        clauses, params = scope_clauses(scope, owner_column="j.user_id", supervisor_column="p.supervisor_id")
        clauses.append("j.status=%s")
        params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM journals j
                LEFT JOIN user_profiles p ON p.user_id = j.user_id
                WHERE {_where(clauses)}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return int(r["total"] or 0) if r else 0

    def latest_pending(self, *, scope: ScopeFilter, limit: int) -> Sequence[JournalReportRow]:
        clauses, params = scope_clauses(scope, owner_column="u.user_id", supervisor_column="p.supervisor_id")
        clauses.append("j.status=%s")
        params.append(ReviewStatus.PENDING.value)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REPORT_SELECT} WHERE {_where(clauses)} ORDER BY j.created_at DESC, j.entry_id DESC LIMIT %s",
                tuple(params),
            )
            return [_to_report_row(r) for r in fetchall(cur)]

    def get_report_rows(self, *, scope: ScopeFilter, entry_date: Optional[date] = None) -> Sequence[JournalReportRow]:
        clauses, params = scope_clauses(scope, owner_column="u.user_id", supervisor_column="p.supervisor_id")
        if entry_date is not None:
            clauses.append("j.entry_date=%s")
            params.append(entry_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REPORT_SELECT} WHERE {_where(clauses)} ORDER BY j.entry_date DESC, u.identifier ASC",
                tuple(params),
            )
            return [_to_report_row(r) for r in fetchall(cur)]
