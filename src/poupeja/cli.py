"""Flask CLI commands for Poupeja."""

from __future__ import annotations

from datetime import timedelta

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("poupeja-sweep")
    @click.option(
        "--now",
        "now_raw",
        default=None,
        help="Reference time as ISO-8601 (defaults to the current time).",
    )
    def poupeja_sweep(now_raw: str | None) -> None:
        """Send due notifications and mark past schedules overdue."""

        from .blueprints.common import parse_datetime
        from .extensions import get_context
        from .services.reminders import run_sweep

        try:
            now = parse_datetime(now_raw, "--now")
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--now") from exc

        ctx = get_context()
        result = run_sweep(
            ctx.session_factory,
            ctx.notifier,
            now=now,
            window=timedelta(minutes=ctx.config.REMINDER_WINDOW_MINUTES),
        )
        click.echo(
            f"Sent {result.sent} notification(s), {result.failed} failed, "
            f"{result.overdue} marked overdue."
        )

    @app.cli.command("poupeja-recalculate-goals")
    @click.option("--user-id", type=int, default=None, help="Only this user (default: all).")
    def poupeja_recalculate_goals(user_id: int | None) -> None:
        """Rebuild goal amounts from linked income transactions."""

        from sqlmodel import select

        from .extensions import get_context
        from .models.user import User
        from .services.goals import recalculate_goal_amounts

        ctx = get_context()
        if user_id is not None:
            user_ids = [user_id]
        else:
            with ctx.session_factory() as session:
                user_ids = list(session.exec(select(User.id)).all())

        total = 0
        for uid in user_ids:
            total += len(recalculate_goal_amounts(ctx.session_factory, user_id=uid))
        click.echo(f"Recalculated {total} goal(s) for {len(user_ids)} user(s).")
