"""Reference-code allocation for transaction series."""

from __future__ import annotations

import re
from string import ascii_uppercase

from sqlalchemy import update
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.reference_sequence import SEQUENCE_NAME, SEQUENCE_START, ReferenceCodeSequence
from ..models.transaction import Transaction

logger = get_logger(__name__)

_LEADING_DIGITS = re.compile(r"^(\d+)")


def _highest_stored_code(session: Session) -> int:
    """Largest numeric base among stored reference codes (installment letters ignored)."""

    highest = SEQUENCE_START
    codes = session.exec(
        select(Transaction.reference_code).where(Transaction.reference_code.is_not(None))  # type: ignore
    ).all()
    for code in codes:
        match = _LEADING_DIGITS.match(code or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def seed_reference_sequence(session: Session) -> None:
    """Create the counter row if missing, starting after the highest stored code.

    Run once by ``init_database`` so allocations only ever UPDATE the row.
    """

    if session.get(ReferenceCodeSequence, SEQUENCE_NAME) is not None:
        return
    seed = _highest_stored_code(session)
    session.add(ReferenceCodeSequence(name=SEQUENCE_NAME, value=seed))
    session.flush()
    logger.info("Reference code sequence seeded", extra={"seed": seed})


def next_reference_code(session: Session) -> int:
    """Allocate the next code inside the caller's transaction.

    The counter is bumped with a single UPDATE, so concurrent writers are
    serialized by the database and never receive the same value. The
    allocation is rolled back together with the caller's writes.
    """

    bump = (
        update(ReferenceCodeSequence)
        .where(ReferenceCodeSequence.name == SEQUENCE_NAME)
        .values(value=ReferenceCodeSequence.value + 1)
        .execution_options(synchronize_session=False)
    )
    if not session.execute(bump).rowcount:
        seed_reference_sequence(session)
        session.execute(bump)
    value = session.exec(
        select(ReferenceCodeSequence.value).where(ReferenceCodeSequence.name == SEQUENCE_NAME)
    ).one()
    return int(value)


def installment_suffix(index: int) -> str:
    """Letters for the zero-based installment index: A..Z, then AA, AB, ..."""

    if index < 0:
        raise ValueError("Installment index cannot be negative")
    letters = ""
    number = index + 1
    while number:
        number, remainder = divmod(number - 1, 26)
        letters = ascii_uppercase[remainder] + letters
    return letters


def installment_code(base: int, index: int) -> str:
    """Per-installment reference code: the shared base followed by its letter."""

    return f"{base}{installment_suffix(index)}"
