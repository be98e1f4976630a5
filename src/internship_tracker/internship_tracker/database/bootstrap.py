from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", conn_factory.config.database)


def ensure_admin(conn_factory: DatabaseConnection, *, identifier: str, password: str) -> bool:
    """Create the first admin account. Returns False if it already exists."""

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT user_id FROM users WHERE identifier=%s", (identifier,))
        if cur.fetchone():
            logger.info("Admin %s already exists", identifier)
            return False

        cur.execute(
            """
            INSERT INTO users (identifier, password_hash, role, full_name, is_active)
            VALUES (%s, %s, %s, %s, 1)
            """,
            (identifier, generate_password_hash(password), Role.ADMIN.value, "Administrator"),
        )
        conn.commit()
        logger.info("Admin %s created", identifier)
        return True
    finally:
        conn.close()


def match_supervisor_names(supervisors: Iterable[dict], pending: Iterable[dict]) -> dict:
    """Pair profiles with supervisors whose display name matches exactly once.

    supervisors: rows with user_id and display_name.
    pending: profile rows with user_id and supervisor_name.
    """

    by_name: dict[str, list[int]] = {}
    for row in supervisors:
        by_name.setdefault(row["display_name"], []).append(int(row["user_id"]))

    result = {"links": [], "ambiguous": [], "unmatched": []}
    for row in pending:
        matches = by_name.get(row["supervisor_name"], [])
        if len(matches) == 1:
            result["links"].append((int(row["user_id"]), matches[0]))
        elif matches:
            result["ambiguous"].append(int(row["user_id"]))
        else:
            result["unmatched"].append(int(row["user_id"]))
    return result


def backfill_supervisor_ids(conn_factory: DatabaseConnection) -> dict:
    """Link legacy profiles to supervisors by display-name match.

    Profiles whose supervisor_name matches no supervisor, or more than one,
    are left untouched and reported.
    """

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute(
            """
            SELECT u.user_id, COALESCE(p.full_name, u.full_name, u.identifier) AS display_name
            FROM users u
            LEFT JOIN user_profiles p ON p.user_id = u.user_id
            WHERE u.role=%s
            """,
            (Role.SUPERVISOR.value,),
        )
        supervisors = cur.fetchall()

        cur.execute(
            """
            SELECT p.user_id, p.supervisor_name
            FROM user_profiles p
            JOIN users u ON u.user_id = p.user_id
            WHERE p.supervisor_id IS NULL AND p.supervisor_name IS NOT NULL AND u.role=%s
            """,
            (Role.STUDENT.value,),
        )
        matched = match_supervisor_names(supervisors, cur.fetchall())

        for user_id, supervisor_id in matched["links"]:
            cur.execute("UPDATE user_profiles SET supervisor_id=%s WHERE user_id=%s", (supervisor_id, user_id))
        conn.commit()

        if matched["ambiguous"]:
            logger.warning("Ambiguous supervisor names for profiles %s", matched["ambiguous"])
        return {"linked": len(matched["links"]), "ambiguous": matched["ambiguous"], "unmatched": matched["unmatched"]}
    finally:
        conn.close()


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
