"""Dependents registered by a user."""

from __future__ import annotations

import re
from typing import Optional

from ..domain.repositories import DependentRepository
from ..models.dependent import Dependent

_NON_DIGITS = re.compile(r"\D")


def digits_only(phone: Optional[str]) -> str:
    return _NON_DIGITS.sub("", phone or "")


def add_dependent(repo: DependentRepository, *, user_id: int, name: str, phone: str) -> Dependent:
    """Register a dependent; the repository assigns the next ``dep_numero``."""

    name = (name or "").strip()
    if not name:
        raise ValueError("Dependent name is required")
    digits = digits_only(phone)
    if not digits:
        raise ValueError("Dependent phone is required")
    return repo.create(Dependent(dep_name=name, dep_phone=digits, dep_numero=0), user_id=user_id)


def update_dependent(
    repo: DependentRepository,
    *,
    user_id: int,
    dep_id: int,
    name: Optional[str] = None,
    phone: Optional[str] = None,
) -> Optional[Dependent]:
    dependent = repo.get_by_id(dep_id, user_id=user_id)
    if dependent is None:
        return None
    if name is not None:
        if not name.strip():
            raise ValueError("Dependent name is required")
        dependent.dep_name = name.strip()
    if phone is not None:
        digits = digits_only(phone)
        if not digits:
            raise ValueError("Dependent phone is required")
        dependent.dep_phone = digits
    return repo.update(dependent, user_id=user_id)


def dependent_to_dict(dependent: Dependent) -> dict[str, object]:
    return {
        "id": dependent.dep_id,
        "name": dependent.dep_name,
        "phone": dependent.dep_phone,
        "numero": dependent.dep_numero,
    }
