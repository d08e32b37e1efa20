"""Category routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_context
from ...models.category import Category
from ...services import categories as category_service
from ..common import current_user_id, json_body, login_required, not_found
from . import bp


def _category_dict(category: Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "type": category.type,
        "icon": category.icon,
        "color": category.color,
        "is_default": category.is_default,
        "shared": category.user_id is None,
    }


@bp.get("")
@login_required
def list_categories():
    categories = get_context().category_repo.list_all(
        user_id=current_user_id(), category_type=request.args.get("type") or None
    )
    return jsonify(items=[_category_dict(c) for c in categories])


@bp.post("")
@login_required
def create_category():
    data = json_body()
    category = category_service.create_category(
        get_context().category_repo,
        user_id=current_user_id(),
        name=data.get("name", ""),
        category_type=data.get("type", "expense"),
        icon=data.get("icon") or "circle",
        color=data.get("color") or "#607D8B",
    )
    return jsonify(_category_dict(category)), 201


@bp.patch("/<int:category_id>")
@login_required
def update_category(category_id: int):
    data = json_body()
    category = category_service.update_category(
        get_context().category_repo,
        user_id=current_user_id(),
        category_id=category_id,
        name=data.get("name"),
        icon=data.get("icon"),
        color=data.get("color"),
    )
    if category is None:
        return not_found()
    return jsonify(_category_dict(category))


@bp.delete("/<int:category_id>")
@login_required
def delete_category(category_id: int):
    if not get_context().category_repo.delete(category_id, user_id=current_user_id()):
        return not_found()
    return "", 204
