"""Scheduled transaction (agenda) routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_context
from ...models.transaction import TRANSACTION_STATUSES
from ...services import scheduling
from ...services import transactions as txn_service
from ...services.recurrence import recurrence_label
from ..common import (
    current_user_id,
    json_body,
    login_required,
    not_found,
    parse_datetime,
    pick,
    subscription_required,
)
from . import bp
from .forms import ScheduledTransactionForm


def _scheduled_dict(txn) -> dict:
    data = txn_service.transaction_to_dict(txn)
    data["recurrence_label"] = recurrence_label(txn.recurrence)
    return data


@bp.get("")
@login_required
@subscription_required
def list_scheduled():
    statuses = [s for s in request.args.getlist("status") if s]
    unknown = set(statuses) - set(TRANSACTION_STATUSES)
    if unknown:
        raise ValueError(f"Unknown status filter: {', '.join(sorted(unknown))}")
    rows = get_context().transaction_repo.list_scheduled(
        user_id=current_user_id(), statuses=statuses or None
    )
    return jsonify(items=[_scheduled_dict(t) for t in rows])


@bp.post("")
@login_required
@subscription_required
def create_schedule():
    form = ScheduledTransactionForm.from_mapping(json_body())
    if not form.validate():
        return jsonify(error="invalid_request", errors=form.errors), 400
    rows = scheduling.schedule_transaction(
        get_context().session_factory, form.to_input(current_user_id())
    )
    return jsonify(items=[_scheduled_dict(t) for t in rows]), 201


@bp.get("/series/<series_code>")
@login_required
@subscription_required
def list_series(series_code: str):
    rows = get_context().transaction_repo.list_series(series_code, user_id=current_user_id())
    return jsonify(items=[_scheduled_dict(t) for t in rows])


@bp.patch("/<int:transaction_id>")
@login_required
@subscription_required
def update_schedule(transaction_id: int):
    data = json_body()
    changes = pick(
        data, "type", "amount", "description", "category", "account_id", "goal_id",
        "recurrence", "situacao", "creator_name", "creator_phone",
    )
    if "date" in data:
        changes["date"] = parse_datetime(data["date"], "date", required=True)
    txn = scheduling.update_scheduled(
        get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
        **changes,
    )
    if txn is None:
        return not_found()
    return jsonify(_scheduled_dict(txn))


@bp.delete("/<int:transaction_id>")
@login_required
@subscription_required
def delete_schedule(transaction_id: int):
    deleted = txn_service.delete_transaction(
        get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
        scope=request.args.get("scope", "single"),
    )
    if not deleted:
        return not_found()
    return jsonify(deleted=deleted)


@bp.post("/<int:transaction_id>/settle")
@login_required
@subscription_required
def settle(transaction_id: int):
    result = scheduling.settle_transaction(
        get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
    )
    if result is None:
        return not_found()
    txn, successor = result
    return jsonify(
        transaction=_scheduled_dict(txn),
        successor=_scheduled_dict(successor) if successor else None,
    )
