"""Subscription status lookup."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import select

from ..infra.database import SessionFactory
from ..models.subscription import Subscription

ACTIVE_STATUSES = ("active", "trialing")


@dataclass(frozen=True)
class SubscriptionStatus:
    has_active_subscription: bool
    is_expired: bool
    exists: bool
    status: Optional[str] = None
    plan_type: Optional[str] = None
    current_period_end: Optional[datetime] = None

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        if self.current_period_end is not None:
            data["current_period_end"] = self.current_period_end.isoformat()
        return data


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def check_subscription_status(
    session_factory: SessionFactory, *, user_id: int, now: Optional[datetime] = None
) -> SubscriptionStatus:
    """Summarize the user's most recent subscription.

    A subscription is active when its status is active (or trialing) and its
    current period has not ended.
    """

    now = _as_utc(now or datetime.now(timezone.utc))
    with session_factory() as session:
        sub = session.exec(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .order_by(Subscription.id.desc())  # type: ignore
        ).first()
        if sub is not None:
            session.expunge(sub)

    if sub is None:
        return SubscriptionStatus(has_active_subscription=False, is_expired=False, exists=False)

    period_end = _as_utc(sub.current_period_end) if sub.current_period_end else None
    is_expired = period_end is not None and period_end < now
    return SubscriptionStatus(
        has_active_subscription=sub.status in ACTIVE_STATUSES and not is_expired,
        is_expired=is_expired,
        exists=True,
        status=sub.status,
        plan_type=sub.plan_type,
        current_period_end=sub.current_period_end,
    )
