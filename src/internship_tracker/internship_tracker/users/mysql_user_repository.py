from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import fmt_date
from ..core.enums import ReviewStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile, User
from .repository import UserRepository

_USER_COLUMNS = "user_id, identifier, email, password_hash, role, full_name, is_active, created_at"

_PROFILE_COLUMNS = (
    "user_id, full_name, phone, address, institution, faculty, program, cohort, division, "
    "supervisor_id, supervisor_name, start_date, end_date, photo_url"
)


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        identifier=row["identifier"],
        email=row.get("email"),
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        full_name=row.get("full_name"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


_UPSERT_PROFILE_SQL = """
INSERT INTO user_profiles (
    user_id, full_name, phone, address, institution, faculty, program, cohort,
    division, supervisor_id, supervisor_name, start_date, end_date, photo_url
) VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
ON DUPLICATE KEY UPDATE
    full_name=VALUES(full_name),
    phone=VALUES(phone),
    address=VALUES(address),
    institution=VALUES(institution),
    faculty=VALUES(faculty),
    program=VALUES(program),
    cohort=VALUES(cohort),
    division=VALUES(division),
    supervisor_id=VALUES(supervisor_id),
    supervisor_name=VALUES(supervisor_name),
    start_date=VALUES(start_date),
    end_date=VALUES(end_date),
    photo_url=IF(VALUES(photo_url) IS NOT NULL, VALUES(photo_url), photo_url)
"""


def _write_profile(cur, profile: Profile) -> None:
    cur.execute(
        _UPSERT_PROFILE_SQL,
        (
            int(profile.user_id),
            profile.full_name,
            profile.phone,
            profile.address,
            profile.institution,
            profile.faculty,
            profile.program,
            profile.cohort,
            profile.division,
            profile.supervisor_id,
            profile.supervisor_name,
            profile.start_date,
            profile.end_date,
            profile.photo_url,
        ),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_identifier(self, identifier: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE identifier=%s", (identifier,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def identifier_or_email_taken(self, identifier: str, email: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM users WHERE identifier=%s OR (email IS NOT NULL AND email=%s) LIMIT 1",
                (identifier, email),
            )
            return fetchone(cur) is not None

    def email_taken(self, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE email=%s LIMIT 1", (email,))
            return fetchone(cur) is not None

    def create_user(
        self,
        *,
        identifier: str,
        email: Optional[str],
        password_hash: str,
        role: Role,
        full_name: Optional[str],
        profile: Optional[Profile] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(identifier, email, password_hash, role, full_name, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (identifier, email, password_hash, role.value, full_name),
            )
            user_id = int(cur.lastrowid)
            if profile is not None:
                _write_profile(cur, replace(profile, user_id=user_id))
            return user_id

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users WHERE role=%s AND is_active=1", (role.value,))
            row = fetchone(cur)
            return int(row["total"] or 0) if row else 0

    def list_by_role(self, role: Role) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.identifier, u.email, u.is_active,
                       COALESCE(p.full_name, u.full_name) AS full_name,
                       p.phone, p.program, p.division, p.cohort
                FROM users u
                LEFT JOIN user_profiles p ON p.user_id = u.user_id
                WHERE u.role=%s
                ORDER BY u.user_id DESC
                """,
                (role.value,),
            )
            return [
                {
                    "user_id": int(r["user_id"]),
                    "identifier": r["identifier"],
                    "email": r.get("email"),
                    "full_name": r.get("full_name"),
                    "phone": r.get("phone"),
                    "program": r.get("program"),
                    "division": r.get("division"),
                    "cohort": r.get("cohort"),
                    "is_active": bool(r.get("is_active", True)),
                }
                for r in fetchall(cur)
            ]

    def get_student_detail(self, identifier: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.identifier, u.email, u.is_active,
                       COALESCE(p.full_name, u.full_name) AS full_name,
                       p.photo_url, p.phone, p.address, p.institution, p.faculty,
                       p.program, p.cohort, p.division, p.start_date, p.end_date,
                       p.supervisor_id,
                       COALESCE(sp.full_name, s.full_name, s.identifier, p.supervisor_name) AS supervisor_name
                FROM users u
                LEFT JOIN user_profiles p ON p.user_id = u.user_id
                LEFT JOIN users s ON s.user_id = p.supervisor_id
                LEFT JOIN user_profiles sp ON sp.user_id = s.user_id
                WHERE u.identifier=%s AND u.role=%s
                """,
                (identifier, Role.STUDENT.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return {
                "user_id": int(r["user_id"]),
                "identifier": r["identifier"],
                "email": r.get("email"),
                "full_name": r.get("full_name"),
                "is_active": bool(r.get("is_active", True)),
                "photo_url": r.get("photo_url"),
                "phone": r.get("phone"),
                "address": r.get("address"),
                "institution": r.get("institution"),
                "faculty": r.get("faculty"),
                "program": r.get("program"),
                "cohort": r.get("cohort"),
                "division": r.get("division"),
                "start_date": fmt_date(r.get("start_date")) if r.get("start_date") else None,
                "end_date": fmt_date(r.get("end_date")) if r.get("end_date") else None,
                "supervisor_id": r.get("supervisor_id"),
                "supervisor_name": r.get("supervisor_name"),
            }

    def list_students_of(self, supervisor_id: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.identifier, u.email,
                       COALESCE(p.full_name, u.full_name) AS full_name,
                       p.program, p.phone, p.division
                FROM user_profiles p
                JOIN users u ON u.user_id = p.user_id
                WHERE p.supervisor_id=%s AND u.role=%s
                ORDER BY u.user_id DESC
                """,
                (int(supervisor_id), Role.STUDENT.value),
            )
            return [
                {
                    "user_id": int(r["user_id"]),
                    "identifier": r["identifier"],
                    "email": r.get("email"),
                    "full_name": r.get("full_name"),
                    "program": r.get("program"),
                    "phone": r.get("phone"),
                    "division": r.get("division"),
                }
                for r in fetchall(cur)
            ]

    def supervisor_summary(self) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.identifier, u.email,
                       COALESCE(p.full_name, u.full_name) AS full_name,
                       (SELECT COUNT(*) FROM user_profiles sp WHERE sp.supervisor_id = u.user_id) AS total_students,
                       (SELECT COUNT(*) FROM journals j JOIN user_profiles sp ON sp.user_id = j.user_id
                         WHERE sp.supervisor_id = u.user_id AND j.status=%s) AS journals_pending,
                       (SELECT COUNT(*) FROM journals j JOIN user_profiles sp ON sp.user_id = j.user_id
                         WHERE sp.supervisor_id = u.user_id AND j.status=%s) AS journals_approved
                FROM users u
                LEFT JOIN user_profiles p ON p.user_id = u.user_id
                WHERE u.role=%s
                ORDER BY u.user_id DESC
                """,
                (ReviewStatus.PENDING.value, ReviewStatus.APPROVED.value, Role.SUPERVISOR.value),
            )
            return [
                {
                    "user_id": int(r["user_id"]),
                    "identifier": r["identifier"],
                    "email": r.get("email"),
                    "full_name": r.get("full_name"),
                    "total_students": int(r.get("total_students") or 0),
                    "journals_pending": int(r.get("journals_pending") or 0),
                    "journals_approved": int(r.get("journals_approved") or 0),
                }
                for r in fetchall(cur)
            ]

    def get_profile(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM user_profiles WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Profile(
                user_id=int(r["user_id"]),
                full_name=r.get("full_name"),
                phone=r.get("phone"),
                address=r.get("address"),
                institution=r.get("institution"),
                faculty=r.get("faculty"),
                program=r.get("program"),
                cohort=r.get("cohort"),
                division=r.get("division"),
                supervisor_id=r.get("supervisor_id"),
                supervisor_name=r.get("supervisor_name"),
                start_date=r.get("start_date"),
                end_date=r.get("end_date"),
                photo_url=r.get("photo_url"),
            )

    def upsert_profile(self, profile: Profile, *, email: Optional[str] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            if email is not None:
                cur.execute("UPDATE users SET email=%s WHERE user_id=%s", (email, int(profile.user_id)))
            _write_profile(cur, profile)

    def supervisor_of(self, student_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.supervisor_id
                FROM user_profiles p
                JOIN users u ON u.user_id = p.user_id
                WHERE p.user_id=%s AND u.role=%s
                """,
                (int(student_id), Role.STUDENT.value),
            )
            r = fetchone(cur)
            if not r or r.get("supervisor_id") is None:
                return None
            return int(r["supervisor_id"])
