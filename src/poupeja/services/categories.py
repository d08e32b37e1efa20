"""Category management and category resolution for new transactions."""

from __future__ import annotations

from typing import Optional, Union

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ..domain.repositories import CategoryRepository
from ..models.category import FALLBACK_CATEGORY_NAME, Category
from ..models.transaction import REMINDER_TYPES

CATEGORY_TYPES = ("income", "expense")


def _category_kind(transaction_type: str) -> str:
    return "income" if transaction_type == "income" else "expense"


def _visible(user_id: int):
    return or_(Category.user_id == user_id, Category.user_id.is_(None))  # type: ignore


def fallback_category(session: Session, *, user_id: int, category_type: str) -> Category:
    """Return the "Outros" category for the type, creating the user's own if needed."""

    existing = session.exec(
        select(Category)
        .where(_visible(user_id))
        .where(Category.type == category_type)
        .where(func.lower(Category.name) == FALLBACK_CATEGORY_NAME.lower())
    ).first()
    if existing is not None:
        return existing
    category = Category(
        user_id=user_id,
        name=FALLBACK_CATEGORY_NAME,
        type=category_type,
        is_default=True,
    )
    session.add(category)
    session.flush()
    return category


def resolve_category_id(
    session: Session,
    *,
    user_id: int,
    transaction_type: str,
    category: Union[int, str, None],
) -> Optional[int]:
    """Resolve a category reference given as id or name.

    Lookup order: an id visible to the user, then a name within the
    transaction's kind, then the fallback category. Reminders may stay
    uncategorized.
    """

    if category in (None, "") and transaction_type in REMINDER_TYPES:
        return None

    kind = _category_kind(transaction_type)
    if category not in (None, ""):
        as_id: Optional[int] = None
        if isinstance(category, int):
            as_id = category
        elif str(category).strip().isdigit():
            as_id = int(str(category).strip())
        if as_id is not None:
            found = session.exec(
                select(Category).where(Category.id == as_id).where(_visible(user_id))
            ).first()
            if found is not None:
                return found.id
        else:
            by_name = session.exec(
                select(Category)
                .where(_visible(user_id))
                .where(Category.type == kind)
                .where(func.lower(Category.name) == str(category).strip().lower())
            ).first()
            if by_name is not None:
                return by_name.id

    return fallback_category(session, user_id=user_id, category_type=kind).id


def create_category(
    repo: CategoryRepository,
    *,
    user_id: int,
    name: str,
    category_type: str = "expense",
    icon: str = "circle",
    color: str = "#607D8B",
) -> Category:
    """Create a category after validating type and per-user name uniqueness."""

    name = (name or "").strip()
    if not name:
        raise ValueError("Category name is required")
    if category_type not in CATEGORY_TYPES:
        raise ValueError(f"Invalid category type: {category_type}")
    if repo.name_taken(name, user_id=user_id):
        raise ValueError(f"Category '{name}' already exists")
    return repo.create(
        Category(name=name, type=category_type, icon=icon, color=color), user_id=user_id
    )


def update_category(
    repo: CategoryRepository,
    *,
    user_id: int,
    category_id: int,
    name: Optional[str] = None,
    icon: Optional[str] = None,
    color: Optional[str] = None,
) -> Optional[Category]:
    """Rename or restyle one of the user's categories; None when not owned."""

    category = repo.get_by_id(category_id, user_id=user_id)
    if category is None or category.user_id != user_id:
        return None
    if name is not None:
        name = name.strip()
        if not name:
            raise ValueError("Category name is required")
        if repo.name_taken(name, user_id=user_id, exclude_id=category_id):
            raise ValueError(f"Category '{name}' already exists")
        category.name = name
    if icon is not None:
        category.icon = icon
    if color is not None:
        category.color = color
    return repo.update(category, user_id=user_id)
