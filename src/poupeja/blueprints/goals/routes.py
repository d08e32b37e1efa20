"""Goal and spending-limit routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_context
from ...models.goal import Goal
from ...services import goals as goal_service
from ..common import (
    current_user_id,
    json_body,
    login_required,
    not_found,
    parse_date,
    parse_float,
    parse_int,
)
from . import bp

_DATE_FIELDS = ("start_date", "end_date", "deadline")


def _goal_dict(goal: Goal) -> dict:
    progress = goal_service.goal_progress(goal, get_context().transaction_repo)
    return {
        "id": goal.id,
        "name": goal.name,
        "type": goal.type,
        "target_amount": goal.target_amount,
        "current_amount": goal.current_amount,
        "start_date": goal.start_date.isoformat() if goal.start_date else None,
        "end_date": goal.end_date.isoformat() if goal.end_date else None,
        "deadline": goal.deadline.isoformat() if goal.deadline else None,
        "color": goal.color,
        "category_id": goal.category_id,
        "account_id": goal.account_id,
        "progress": progress.to_dict(),
    }


def _parse_fields(data: dict) -> dict:
    fields: dict = {}
    if "name" in data:
        fields["name"] = data["name"]
    if "target_amount" in data:
        fields["target_amount"] = parse_float(data["target_amount"], "target_amount", required=True)
    for key in _DATE_FIELDS:
        if key in data:
            fields[key] = parse_date(data[key], key)
    for key in ("category_id", "account_id"):
        if key in data:
            fields[key] = parse_int(data[key], key)
    if "color" in data:
        fields["color"] = data["color"]
    return fields


@bp.get("")
@login_required
def list_goals():
    goal_type = request.args.get("type") or None
    goals = get_context().goal_repo.list_all(user_id=current_user_id(), goal_type=goal_type)
    return jsonify(items=[_goal_dict(g) for g in goals])


@bp.post("")
@login_required
def create_goal():
    data = json_body()
    fields = _parse_fields(data)
    goal = goal_service.create_goal(
        get_context().goal_repo,
        user_id=current_user_id(),
        name=fields.pop("name", ""),
        target_amount=fields.pop("target_amount", None),
        goal_type=data.get("type", "income"),
        **fields,
    )
    return jsonify(_goal_dict(goal)), 201


@bp.get("/<int:goal_id>")
@login_required
def get_goal(goal_id: int):
    goal = get_context().goal_repo.get_by_id(goal_id, user_id=current_user_id())
    if goal is None:
        return not_found()
    return jsonify(_goal_dict(goal))


@bp.patch("/<int:goal_id>")
@login_required
def update_goal(goal_id: int):
    goal = goal_service.update_goal(
        get_context().goal_repo,
        user_id=current_user_id(),
        goal_id=goal_id,
        **_parse_fields(json_body()),
    )
    if goal is None:
        return not_found()
    return jsonify(_goal_dict(goal))


@bp.delete("/<int:goal_id>")
@login_required
def delete_goal(goal_id: int):
    if not get_context().goal_repo.delete(goal_id, user_id=current_user_id()):
        return not_found()
    return "", 204


@bp.post("/recalculate")
@login_required
def recalculate():
    goals = goal_service.recalculate_goal_amounts(
        get_context().session_factory, user_id=current_user_id()
    )
    return jsonify(items=[_goal_dict(g) for g in goals])
