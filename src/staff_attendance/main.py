from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.decorators import CONTAINER_KEY
from .common.errors import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_HOURS
from .dashboards.controller import register as register_dashboards
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .leaves.controller import register as register_leaves
from .schedules.controller import register as register_schedules
from .users.controller import register as register_users

SQL_DIR = Path(__file__).resolve().parents[2] / "database"


def _prepare_database(app: Flask, settings, db_config: dict) -> None:
    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config, schema_path=SQL_DIR / "schema.sql")
        app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed_sql(db_config, seed_path=SQL_DIR / "seed.sql")
        ensure_demo_users(db_config)
        app.logger.info("demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing a ``container`` skips every database step (tests wire in-memory
    repositories this way).
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(
        hours=int(getattr(settings, "SESSION_LIFETIME_HOURS", DEFAULT_SESSION_HOURS))
    )

    level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.logger.setLevel(level)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(app, settings, db_config)
        container = build_container(db_config=db_config)

    app.extensions[CONTAINER_KEY] = container
    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_dashboards(app, container)
    register_schedules(app, container)

    return app
