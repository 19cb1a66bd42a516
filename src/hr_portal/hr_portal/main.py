from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .assistant.controller import register as register_assistant
from .auth.controller import register as register_auth
from .common.http import register_error_handlers
from .container import AssistantSettings, Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_user, list_tables
from .employees.controller import register as register_employees
from .projects.controller import register as register_projects
from .salaries.controller import register as register_salaries
from .tasks.controller import register as register_tasks

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass a prebuilt ``container`` to skip database wiring (tests)."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_user(db_config)

        container = build_container(
            db_config=db_config,
            assistant=AssistantSettings(
                api_key=getattr(settings, "GEMINI_API_KEY", ""),
                model=getattr(settings, "GEMINI_MODEL", AssistantSettings.model),
                timeout=float(getattr(settings, "ASSISTANT_TIMEOUT", AssistantSettings.timeout)),
                system_prompt=getattr(settings, "ASSISTANT_SYSTEM_PROMPT", AssistantSettings.system_prompt),
            ),
        )

    register_error_handlers(app)
    register_auth(app, container)
    register_employees(app, container)
    register_salaries(app, container)
    register_projects(app, container)
    register_tasks(app, container)
    register_assistant(app, container)

    return app
