from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_clock
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_LATE_CUTOFF, DEFAULT_TOKEN_EXPIRE_HOURS
from .database.bootstrap import apply_schema, ensure_admin, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .journals.controller import register as register_journals
from .leaves.controller import register as register_leaves
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    ``container`` lets tests inject services wired on in-memory repositories; in
    that case no database connection is made.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = DBConfig.from_dict(getattr(settings, "DB_CONFIG"))
        conn = DatabaseConnection(db_config)
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module, db_config.user, db_config.host, db_config.port, db_config.database,
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(conn, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%s)", len(list_tables(conn)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_admin(
                conn,
                identifier=getattr(settings, "ADMIN_IDENTIFIER", "admin"),
                password=getattr(settings, "ADMIN_PASSWORD"),
            )

        late_cutoff = getattr(settings, "LATE_CUTOFF", None)
        container = build_container(
            conn=conn,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            token_expire_hours=int(getattr(settings, "TOKEN_EXPIRE_HOURS", DEFAULT_TOKEN_EXPIRE_HOURS)),
            late_cutoff=parse_clock(late_cutoff) if late_cutoff else DEFAULT_LATE_CUTOFF,
        )

    app.extensions["container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_journals(app, container)
    register_reports(app, container)

    return app
