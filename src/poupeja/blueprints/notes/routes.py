"""Financial note routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_context
from ...services import notes as note_service
from ..common import current_user_id, json_body, login_required, not_found, parse_date
from . import bp


@bp.get("")
@login_required
def list_notes():
    rows = get_context().note_repo.list_all(
        user_id=current_user_id(), text=request.args.get("q") or None
    )
    return jsonify(items=[note_service.note_to_dict(n) for n in rows])


@bp.post("")
@login_required
def create_note():
    data = json_body()
    note = note_service.create_note(
        get_context().note_repo,
        user_id=current_user_id(),
        data=parse_date(data.get("data"), "data", required=True),
        descricao=data.get("descricao", ""),
        notas=data.get("notas", ""),
    )
    return jsonify(note_service.note_to_dict(note)), 201


@bp.patch("/<int:note_id>")
@login_required
def update_note(note_id: int):
    data = json_body()
    note = note_service.update_note(
        get_context().note_repo,
        user_id=current_user_id(),
        note_id=note_id,
        data=parse_date(data.get("data"), "data"),
        descricao=data.get("descricao"),
        notas=data.get("notas"),
    )
    if note is None:
        return not_found()
    return jsonify(note_service.note_to_dict(note))


@bp.delete("/<int:note_id>")
@login_required
def delete_note(note_id: int):
    if not get_context().note_repo.delete(note_id, user_id=current_user_id()):
        return not_found()
    return "", 204
