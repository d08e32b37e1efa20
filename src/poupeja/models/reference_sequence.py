"""Counter row backing reference-code allocation."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel import Field, SQLModel

SEQUENCE_NAME = "reference_code"
SEQUENCE_START = 10_000_000


class ReferenceCodeSequence(SQLModel, table=True):
    """Holds the last issued value; incremented in place by the allocator."""

    __tablename__: ClassVar[str] = "poupeja_reference_sequence"

    name: str = Field(primary_key=True, max_length=32)
    value: int = Field(nullable=False)
