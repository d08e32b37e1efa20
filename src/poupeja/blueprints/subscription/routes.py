"""Subscription status route."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...services.subscriptions import check_subscription_status
from ..common import current_user_id, login_required
from . import bp


@bp.get("/status")
@login_required
def status():
    result = check_subscription_status(get_context().session_factory, user_id=current_user_id())
    return jsonify(result.to_dict())
