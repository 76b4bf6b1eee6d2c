from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_PROGRESS_LOG_LIMIT
from .database.bootstrap import apply_schema, list_tables
from .goals.controller import register as register_goals

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    progress_log_limit = int(getattr(settings, "PROGRESS_LOG_LIMIT", DEFAULT_PROGRESS_LOG_LIMIT))

    if app.config["DEBUG"]:
        print(
            "[goal-tracker] settings=", settings_module,
            " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        if app.config["DEBUG"]:
            print(f"[goal-tracker] schema ready (tables={len(list_tables(db_config))})")

    container = build_container(db_config=db_config, progress_log_limit=progress_log_limit)
    app.extensions["goal_tracker"] = container

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"success": True})

    register_goals(app, container)

    return app
