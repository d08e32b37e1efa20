"""Poupeja application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

logger = get_logger(__name__)


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths registered under ``/api``."""

    yield "poupeja.blueprints.auth"
    yield "poupeja.blueprints.transactions"
    yield "poupeja.blueprints.schedule"
    yield "poupeja.blueprints.goals"
    yield "poupeja.blueprints.categories"
    yield "poupeja.blueprints.accounts"
    yield "poupeja.blueprints.dependents"
    yield "poupeja.blueprints.notes"
    yield "poupeja.blueprints.reminders"
    yield "poupeja.blueprints.subscription"


def create_app(config_name: str | None = None, *, notifier=None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name)
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["POUPEJA_CONFIG"] = config_obj

    setup_logging(config_obj)

    # Imported lazily so model classes can be imported without building an engine.
    from .context import create_app_context
    from .extensions import init_app

    ctx = create_app_context(config_obj, notifier=notifier)
    init_app(app, ctx)

    _register_blueprints(app)
    _register_error_handlers(app)
    _cli.init_app(app)

    if config_obj.SCHEDULER_ENABLED:
        from .scheduler import create_scheduler

        app.extensions["poupeja_scheduler"] = create_scheduler(ctx, auto_start=True)

    logger.info("Application created", extra={"config": config_cls.__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValueError)
    def _invalid_request(exc: ValueError):
        return jsonify(error="invalid_request", message=str(exc)), 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify(error=(exc.name or "error").lower().replace(" ", "_"),
                       message=exc.description), exc.code

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return jsonify(error="internal_error"), 500


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
