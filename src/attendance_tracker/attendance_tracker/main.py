from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classrooms.controller import register as register_classrooms
from .container import Container, build_container
from .core.exceptions import ValidationError
from .database.bootstrap import apply_schema, list_tables
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def seed_demo_teacher(container: Container, settings) -> None:
    email = getattr(settings, "DEMO_TEACHER_EMAIL", "teacher@example.com")
    try:
        container.user_service.ensure_teacher(
            email=email,
            full_name=getattr(settings, "DEMO_TEACHER_NAME", "Demo Teacher"),
            password=getattr(settings, "DEMO_TEACHER_PASSWORD", "teacher123"),
        )
    except ValidationError as e:
        logger.warning("Demo teacher not seeded: %s", e)
        return
    logger.info("Demo teacher ready: %s", email)


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        backend = getattr(settings, "STORE_BACKEND", "mysql")
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s backend=%s db=%s@%s:%s/%s",
            settings_module,
            backend,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            backend=backend,
            student_count_workers=int(getattr(settings, "STUDENT_COUNT_WORKERS", 4)),
        )
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_demo_teacher(container, settings)

    app.extensions["attendance_tracker"] = container

    register_users(app, container)
    register_classrooms(app, container)
    register_students(app, container)
    register_attendance(app, container)

    return app
