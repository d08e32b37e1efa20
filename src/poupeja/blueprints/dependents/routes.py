"""Dependent routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...services import dependents as dependent_service
from ..common import current_user_id, json_body, login_required, not_found
from . import bp


@bp.get("")
@login_required
def list_dependents():
    rows = get_context().dependent_repo.list_all(user_id=current_user_id())
    return jsonify(items=[dependent_service.dependent_to_dict(d) for d in rows])


@bp.post("")
@login_required
def add_dependent():
    data = json_body()
    dependent = dependent_service.add_dependent(
        get_context().dependent_repo,
        user_id=current_user_id(),
        name=data.get("name", ""),
        phone=data.get("phone", ""),
    )
    return jsonify(dependent_service.dependent_to_dict(dependent)), 201


@bp.patch("/<int:dep_id>")
@login_required
def update_dependent(dep_id: int):
    data = json_body()
    dependent = dependent_service.update_dependent(
        get_context().dependent_repo,
        user_id=current_user_id(),
        dep_id=dep_id,
        name=data.get("name"),
        phone=data.get("phone"),
    )
    if dependent is None:
        return not_found()
    return jsonify(dependent_service.dependent_to_dict(dependent))


@bp.delete("/<int:dep_id>")
@login_required
def delete_dependent(dep_id: int):
    if not get_context().dependent_repo.delete(dep_id, user_id=current_user_id()):
        return not_found()
    return "", 204
