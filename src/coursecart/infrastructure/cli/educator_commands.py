"""CLI commands for the educator dashboard."""

from __future__ import annotations

import click

from coursecart.domain.model.dashboard import EducatorDashboardSnapshot
from coursecart.infrastructure.bootstrap import Client
from coursecart.infrastructure.cli.runtime import ensure_success, run


def _require_educator(client: Client) -> None:
    if not client.session.is_educator:
        raise click.ClickException("Educator access required")


def _display_snapshot(label: str, snapshot: EducatorDashboardSnapshot) -> None:
    click.echo(f"{label}")
    click.echo(f"  Courses:     {snapshot.total_courses}")
    click.echo(f"  Enrollments: {snapshot.total_enrollments}")
    click.echo(f"  Earnings:    {snapshot.total_earnings}")
    for course in snapshot.published_courses:
        state = "published" if course.is_published else "draft"
        click.echo(
            f"    {course.title[:30]:<30} {state:<9} "
            f"{course.total_enrollments:>5} {str(course.total_earnings):>10}"
        )


@click.command("dashboard")
def educator_dashboard() -> None:
    """Show the educator dashboard."""

    async def action(client: Client) -> None:
        _require_educator(client)
        dashboard = client.dashboard
        if dashboard.fetched is None:
            raise click.ClickException(dashboard.last_error or "Dashboard unavailable")
        _display_snapshot("Dashboard", dashboard.fetched)
        if dashboard.synced is not None:
            _display_snapshot("Last sync", dashboard.synced)

    run(action, sign_in=True)


@click.command("sync")
def educator_sync() -> None:
    """Ask the server to recompute the dashboard totals."""

    async def action(client: Client) -> None:
        _require_educator(client)
        # Signing in already syncs an educator who has courses.
        if client.dashboard.synced is None:
            ensure_success(await client.dashboard.sync())
        _display_snapshot("Synced", client.dashboard.synced)

    run(action, sign_in=True)


@click.command("toggle")
@click.option("--course", "course_id", required=True, help="Course ID to publish/unpublish.")
def educator_toggle(course_id: str) -> None:
    """Flip a course between published and draft."""

    async def action(client: Client) -> None:
        ensure_success(await client.dashboard.toggle_publication(course_id))

    run(action, sign_in=True)


@click.command("students")
def educator_students() -> None:
    """List enrolled students, newest enrollment first."""

    async def action(client: Client) -> None:
        _require_educator(client)
        roster = client.dashboard.roster
        if not roster:
            click.echo("No enrolled students yet.")
            return

        click.echo(f"{'Student':<26} {'Course':<30} {'Enrolled':>17}")
        click.echo("-" * 75)
        for student in roster:
            when = student.enrolled_at.strftime("%Y-%m-%d %H:%M") if student.enrolled_at else "-"
            click.echo(f"{student.student_id:<26} {student.course_title[:30]:<30} {when:>17}")

    run(action, sign_in=True)
