"""Background task scheduler for the reminder sweep."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.background import BackgroundScheduler as APScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .logging_config import get_logger
from .services.reminders import dispatch_due, mark_overdue

if TYPE_CHECKING:
    from .context import AppContext

logger = get_logger("scheduler")


class BackgroundScheduler:
    """Runs notification dispatch on an interval and an overdue pass nightly."""

    def __init__(self, ctx: AppContext):
        """Initialize the scheduler with app context.

        Args:
            ctx: Application context with session factory, notifier and config
        """
        self.ctx = ctx
        self.scheduler: Optional[APScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        config = self.ctx.config
        self.scheduler = APScheduler(timezone=config.TIMEZONE)

        self.scheduler.add_job(
            func=self._dispatch,
            trigger=IntervalTrigger(minutes=config.SWEEP_INTERVAL_MINUTES),
            id="reminder_dispatch",
            name="Reminder Dispatch",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(
            "Scheduled reminder dispatch",
            extra={"interval_minutes": config.SWEEP_INTERVAL_MINUTES},
        )

        self.scheduler.add_job(
            func=self._mark_overdue,
            trigger=CronTrigger(hour=0, minute=5),
            id="overdue_check",
            name="Overdue Check",
            replace_existing=True,
        )
        logger.info("Scheduled overdue check at 00:05")

        self.scheduler.start()
        logger.info("Background scheduler started")

    def stop(self) -> None:
        """Stop the background scheduler gracefully."""
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def _dispatch(self) -> None:
        """Hand due items to the notifier."""
        try:
            dispatch_due(
                self.ctx.session_factory,
                self.ctx.notifier,
                window=timedelta(minutes=self.ctx.config.REMINDER_WINDOW_MINUTES),
            )
        except Exception:
            logger.exception("Scheduled reminder dispatch failed")

    def _mark_overdue(self) -> None:
        try:
            mark_overdue(self.ctx.session_factory)
        except Exception:
            logger.exception("Scheduled overdue check failed")


def create_scheduler(ctx: AppContext, *, auto_start: bool = False) -> BackgroundScheduler:
    """Create and optionally start a background scheduler.

    Args:
        ctx: Application context
        auto_start: Whether to start the scheduler immediately

    Returns:
        BackgroundScheduler instance
    """
    scheduler = BackgroundScheduler(ctx)
    if auto_start:
        scheduler.start()
    return scheduler
