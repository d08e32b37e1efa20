"""Flask wiring for the application context."""

from __future__ import annotations

from flask import Flask, current_app

from .context import AppContext

EXTENSION_KEY = "poupeja"


def init_app(app: Flask, ctx: AppContext) -> None:
    """Attach the context to the app."""

    app.extensions[EXTENSION_KEY] = ctx


def get_context() -> AppContext:
    """Return the context of the active Flask app."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:  # pragma: no cover - app factory always installs it
        raise RuntimeError("Application context not initialized") from None
