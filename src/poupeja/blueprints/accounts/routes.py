"""Account routes, balances and transfers."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...services import accounts as account_service
from ...services import balances
from ...services.transactions import transaction_to_dict
from ..common import (
    current_user_id,
    json_body,
    login_required,
    not_found,
    parse_datetime,
    parse_float,
    parse_int,
)
from . import bp


@bp.get("")
@login_required
def list_accounts():
    accounts = get_context().account_repo.list_all(user_id=current_user_id())
    return jsonify(items=[account_service.account_to_dict(a) for a in accounts])


@bp.post("")
@login_required
def create_account():
    data = json_body()
    account = account_service.create_account(
        get_context().account_repo,
        user_id=current_user_id(),
        name=data.get("name", ""),
        color=data.get("color") or "#607D8B",
        icon=data.get("icon") or "wallet",
    )
    return jsonify(account_service.account_to_dict(account)), 201


@bp.patch("/<int:account_id>")
@login_required
def update_account(account_id: int):
    data = json_body()
    account = account_service.update_account(
        get_context().account_repo,
        user_id=current_user_id(),
        account_id=account_id,
        name=data.get("name"),
        color=data.get("color"),
        icon=data.get("icon"),
    )
    if account is None:
        return not_found()
    return jsonify(account_service.account_to_dict(account))


@bp.delete("/<int:account_id>")
@login_required
def delete_account(account_id: int):
    if not get_context().account_repo.delete(account_id, user_id=current_user_id()):
        return not_found()
    return "", 204


@bp.get("/balances")
@login_required
def list_balances():
    ctx = get_context()
    return jsonify(
        items=balances.account_balances(
            ctx.account_repo, ctx.transaction_repo, user_id=current_user_id()
        )
    )


@bp.post("/transfer")
@login_required
def transfer():
    data = json_body()
    from_id = parse_int(data.get("from_account_id"), "from_account_id")
    to_id = parse_int(data.get("to_account_id"), "to_account_id")
    if from_id is None or to_id is None:
        raise ValueError("from_account_id and to_account_id are required")
    outgoing, incoming = balances.transfer(
        get_context().session_factory,
        user_id=current_user_id(),
        from_account_id=from_id,
        to_account_id=to_id,
        amount=parse_float(data.get("amount"), "amount", required=True),
        date=parse_datetime(data.get("date"), "date", required=True),
        description=data.get("description"),
    )
    return jsonify(outgoing=transaction_to_dict(outgoing), incoming=transaction_to_dict(incoming)), 201
