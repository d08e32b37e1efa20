"""Reminder (lembrete) routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...services import reminders as reminder_service
from ..common import (
    current_user_id,
    json_body,
    login_required,
    not_found,
    parse_datetime,
    parse_float,
    pick,
)
from . import bp


@bp.get("")
@login_required
def list_reminders():
    rows = get_context().reminder_repo.list_all(user_id=current_user_id())
    return jsonify(items=[reminder_service.reminder_to_dict(r) for r in rows])


@bp.post("")
@login_required
def create_reminder():
    data = json_body()
    reminder = reminder_service.create_reminder(
        get_context().session_factory,
        user_id=current_user_id(),
        description=data.get("description", ""),
        date=parse_datetime(data.get("date"), "date", required=True),
        name=data.get("name"),
        amount=parse_float(data.get("amount"), "amount"),
        recurrence=data.get("recurrence"),
        phone=data.get("phone"),
    )
    return jsonify(reminder_service.reminder_to_dict(reminder)), 201


@bp.patch("/<int:reminder_id>")
@login_required
def update_reminder(reminder_id: int):
    data = json_body()
    changes = pick(data, "name", "description", "recurrence", "phone", "situacao")
    if "date" in data:
        changes["date"] = parse_datetime(data["date"], "date", required=True)
    if "amount" in data:
        changes["amount"] = parse_float(data["amount"], "amount")
    reminder = reminder_service.update_reminder(
        get_context().reminder_repo,
        user_id=current_user_id(),
        reminder_id=reminder_id,
        **changes,
    )
    if reminder is None:
        return not_found()
    return jsonify(reminder_service.reminder_to_dict(reminder))


@bp.delete("/<int:reminder_id>")
@login_required
def delete_reminder(reminder_id: int):
    if not get_context().reminder_repo.delete(reminder_id, user_id=current_user_id()):
        return not_found()
    return "", 204
