"""Free-form financial notes."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Note(SQLModel, table=True):
    __tablename__: ClassVar[str] = "financeiro_notas"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="poupeja_users.id", nullable=False, index=True)
    data: date = Field(nullable=False)
    descricao: str = Field(default="", max_length=255)
    notas: str = Field(default="")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )
    updated_at: Optional[datetime] = Field(default=None)
