"""Ledger transaction routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import get_context
from ...services import transactions as txn_service
from ..common import (
    current_user_id,
    json_body,
    login_required,
    not_found,
    parse_datetime,
    parse_int,
    pick,
)
from . import bp
from .forms import TransactionForm


@bp.get("")
@login_required
def list_transactions():
    ctx = get_context()
    args = request.args
    filters = txn_service.LedgerFilters(
        user_id=current_user_id(),
        start_date=parse_datetime(args.get("start"), "start"),
        end_date=parse_datetime(args.get("end"), "end"),
        category_id=parse_int(args.get("category_id"), "category_id"),
        account_id=parse_int(args.get("account_id"), "account_id"),
        text=args.get("q") or None,
        txn_type=args.get("type", "all"),
    )
    pagination = txn_service.Pagination(
        page=parse_int(args.get("page"), "page") or 1,
        per_page=parse_int(args.get("per_page"), "per_page") or 25,
    )
    rows = txn_service.filtered_transactions(ctx.transaction_repo, filters)
    page_rows, total = txn_service.paginate_transactions(rows, pagination)
    return jsonify(
        items=[txn_service.transaction_to_dict(t) for t in page_rows],
        total=total,
        page=max(1, pagination.page),
        per_page=max(1, pagination.per_page),
    )


@bp.post("")
@login_required
def create_transaction():
    form = TransactionForm.from_mapping(json_body())
    if not form.validate():
        return jsonify(error="invalid_request", errors=form.errors), 400
    txn = txn_service.create_transaction(
        get_context().session_factory,
        user_id=current_user_id(),
        txn_type=form.type,
        amount=form.amount,
        description=form.description,
        date=form.date,
        category=form.category,
        account_id=form.account_id,
        goal_id=form.goal_id,
    )
    return jsonify(txn_service.transaction_to_dict(txn)), 201


@bp.get("/<int:transaction_id>")
@login_required
def get_transaction(transaction_id: int):
    txn = get_context().transaction_repo.get_by_id(transaction_id, user_id=current_user_id())
    if txn is None:
        return not_found()
    return jsonify(txn_service.transaction_to_dict(txn))


@bp.patch("/<int:transaction_id>")
@login_required
def update_transaction(transaction_id: int):
    data = json_body()
    changes = pick(data, "type", "amount", "description", "category", "account_id", "goal_id")
    if "category_id" in data and "category" not in changes:
        changes["category"] = data["category_id"]
    if "date" in data:
        changes["date"] = parse_datetime(data["date"], "date", required=True)
    txn = txn_service.update_transaction(
        get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
        **changes,
    )
    if txn is None:
        return not_found()
    return jsonify(txn_service.transaction_to_dict(txn))


@bp.delete("/<int:transaction_id>")
@login_required
def delete_transaction(transaction_id: int):
    deleted = txn_service.delete_transaction(
        get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
        scope=request.args.get("scope", "single"),
    )
    if not deleted:
        return not_found()
    return jsonify(deleted=deleted)


@bp.get("/summary")
@login_required
def summary():
    ctx = get_context()
    user_id = current_user_id()
    rows = ctx.transaction_repo.search(
        user_id=user_id,
        start_date=parse_datetime(request.args.get("start"), "start"),
        end_date=parse_datetime(request.args.get("end"), "end"),
    )
    return jsonify(
        summary=txn_service.compute_summary(rows),
        by_category=txn_service.compute_spending_by_category(
            rows, ctx.category_repo.list_all(user_id=user_id)
        ),
    )


@bp.get("/upcoming")
@login_required
def upcoming():
    days = parse_int(request.args.get("days"), "days")
    rows = txn_service.upcoming_scheduled(
        get_context().transaction_repo,
        user_id=current_user_id(),
        days=7 if days is None else days,
    )
    return jsonify(items=[txn_service.transaction_to_dict(t) for t in rows])
