"""Helpers shared by the API blueprints."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from functools import wraps
from typing import Any, Callable, Mapping, Optional, TypeVar
from zoneinfo import ZoneInfo

from flask import abort, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..extensions import get_context

F = TypeVar("F", bound=Callable[..., Any])

SESSION_USER_KEY = "user_id"


class PaymentRequired(HTTPException):
    """402 Payment Required; werkzeug defines no exception for this code."""

    code = 402
    description = "An active subscription is required"


def current_user_id() -> int:
    """Id of the logged-in user; aborts with 401 otherwise."""

    user_id = session.get(SESSION_USER_KEY)
    if user_id is None:
        abort(401, description="Login required")
    return int(user_id)


def login_required(view: F) -> F:
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def subscription_required(view: F) -> F:
    """Reject users without an active subscription when the app requires one."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        ctx = get_context()
        if ctx.config.REQUIRE_SUBSCRIPTION:
            from ..services.subscriptions import check_subscription_status

            status = check_subscription_status(ctx.session_factory, user_id=current_user_id())
            if not status.has_active_subscription:
                raise PaymentRequired()
        return view(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_body() -> dict[str, Any]:
    """Request JSON object or an empty dict; non-object bodies are rejected."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def not_found():
    return jsonify(error="not_found"), 404


def local_timezone() -> ZoneInfo:
    """Zone in which stored (naive) datetimes are expressed."""

    return ZoneInfo(get_context().config.TIMEZONE)


def parse_datetime(
    value: Any, field: str, *, required: bool = False, tz: Optional[tzinfo] = None
) -> Optional[datetime]:
    """Accept ``YYYY-MM-DD`` or full ISO-8601 values.

    Values carrying an offset (``Z``, ``-03:00``) are converted to ``tz``, or
    the configured zone, and returned naive.
    """

    if value in (None, ""):
        if required:
            raise ValueError(f"{field} is required")
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        raw = str(value).strip()
        try:
            if len(raw) == 10:
                return datetime.strptime(raw, "%Y-%m-%d")
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"{field} must be a valid date (YYYY-MM-DD or ISO-8601)") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz or local_timezone()).replace(tzinfo=None)
    return parsed


def parse_date(value: Any, field: str, *, required: bool = False) -> Optional[date]:
    parsed = parse_datetime(value, field, required=required)
    return parsed.date() if parsed else None


def parse_int(value: Any, field: str) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a whole number") from None


def parse_float(value: Any, field: str, *, required: bool = False) -> Optional[float]:
    if value in (None, ""):
        if required:
            raise ValueError(f"{field} is required")
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number") from None


def pick(data: Mapping[str, Any], *keys: str) -> dict[str, Any]:
    """Subset of ``data`` limited to the keys that are present."""

    return {key: data[key] for key in keys if key in data}
