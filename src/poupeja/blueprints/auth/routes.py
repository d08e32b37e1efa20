"""Registration, login and session routes."""

from __future__ import annotations

from flask import jsonify, session

from ...extensions import get_context
from ...services import auth as auth_service
from ..common import SESSION_USER_KEY, current_user_id, json_body, login_required, not_found
from . import bp


@bp.post("/register")
def register():
    data = json_body()
    user = auth_service.create_user(
        email=data.get("email", ""),
        password=data.get("password", ""),
        name=data.get("name", ""),
        phone=data.get("phone"),
        session_factory=get_context().session_factory,
    )
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify(auth_service.user_to_dict(user)), 201


@bp.post("/login")
def login():
    data = json_body()
    user = auth_service.authenticate(
        email=data.get("email", ""),
        password=data.get("password", ""),
        session_factory=get_context().session_factory,
    )
    if user is None:
        return jsonify(error="invalid_credentials"), 401
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify(auth_service.user_to_dict(user))


@bp.post("/logout")
def logout():
    session.clear()
    return "", 204


@bp.get("/me")
@login_required
def me():
    user = auth_service.get_user(current_user_id(), get_context().session_factory)
    if user is None:
        session.clear()
        return not_found()
    return jsonify(auth_service.user_to_dict(user))


@bp.post("/password")
@login_required
def change_password():
    data = json_body()
    auth_service.change_password(
        user_id=current_user_id(),
        current_password=data.get("current_password", ""),
        new_password=data.get("new_password", ""),
        session_factory=get_context().session_factory,
    )
    return "", 204
