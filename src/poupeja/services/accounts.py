"""Account (conta) management."""

from __future__ import annotations

from typing import Optional

from ..domain.repositories import AccountRepository
from ..models.account import Account


def create_account(
    repo: AccountRepository,
    *,
    user_id: int,
    name: str,
    color: str = "#607D8B",
    icon: str = "wallet",
) -> Account:
    """Create an account whose name is unique among the user's accounts."""

    name = (name or "").strip()
    if not name:
        raise ValueError("Account name is required")
    if repo.name_taken(name, user_id=user_id):
        raise ValueError(f"Account '{name}' already exists")
    return repo.create(Account(name=name, color=color, icon=icon), user_id=user_id)


def update_account(
    repo: AccountRepository,
    *,
    user_id: int,
    account_id: int,
    name: Optional[str] = None,
    color: Optional[str] = None,
    icon: Optional[str] = None,
) -> Optional[Account]:
    """Edit one of the user's own accounts; shared defaults are read-only."""

    account = repo.get_by_id(account_id, user_id=user_id)
    if account is None or account.user_id != user_id:
        return None
    if name is not None:
        name = name.strip()
        if not name:
            raise ValueError("Account name is required")
        if repo.name_taken(name, user_id=user_id, exclude_id=account_id):
            raise ValueError(f"Account '{name}' already exists")
        account.name = name
    if color is not None:
        account.color = color
    if icon is not None:
        account.icon = icon
    return repo.update(account, user_id=user_id)


def account_to_dict(account: Account) -> dict[str, object]:
    return {
        "id": account.id,
        "name": account.name,
        "color": account.color,
        "icon": account.icon,
        "is_default": account.is_default,
        "shared": account.user_id is None,
    }
