"""Project CLI commands.

Commands for listing, inspecting, editing and deleting projects.
"""

from typing import Optional

import typer

from pmdesk.application.forms import FormController
from pmdesk.application.project_detail import ProjectDetailController, format_created, format_deadline
from pmdesk.domain.member import profession_label, role_label
from pmdesk.domain.project import ProjectFormValues, ProjectStatus, status_badge
from pmdesk.domain.shared import Err
from pmdesk.domain.task import STATUS_LABELS
from pmdesk.infrastructure.api import ApiError
from pmdesk.infrastructure.cache import QueryCache
from pmdesk.interfaces.cli.common import (
    CliNotifier,
    base_url_option,
    get_client,
    print_error,
    print_field_errors,
    print_header,
    print_info,
    run,
)

app = typer.Typer(help="Project commands")


# =============================================================================
# Commands
# =============================================================================


@app.command("list")
def list_projects(base_url: base_url_option = None) -> None:
    """List all projects."""

    async def _list():
        async with get_client(base_url) as api:
            return await api.list_projects()

    try:
        projects = run(_list())
    except ApiError as e:
        print_error(e.message or "Could not load projects")
        raise typer.Exit(1)

    if not projects:
        print_info("No projects found")
        return
    for project in projects:
        badge = status_badge(project.status)
        typer.echo(f"{project.id:>5}  {project.name:<40} {badge.label:<12} {project.progress:>3}%")


@app.command("show")
def show(
    project_id: int = typer.Argument(..., help="Project ID"),
    base_url: base_url_option = None,
) -> None:
    """Show a project with its tasks, team and recent activity."""
    notifier = CliNotifier()

    async def _load() -> ProjectDetailController:
        async with get_client(base_url) as api:
            controller = ProjectDetailController(api, QueryCache(), notify=notifier)
            await controller.load(project_id)
            return controller

    c = run(_load())
    project = c.project
    if project is None:
        error = c.project_error
        print_error(error.message or "Could not load project" if error else "Project not found")
        raise typer.Exit(1)

    print_header(f"{project.name}  [{c.status_badge.label}]")
    typer.echo(project.description or "No description")
    typer.echo(f"Progress: {project.progress}%")
    typer.echo(f"Deadline: {format_deadline(project.deadline)}")
    typer.echo(f"Created:  {format_created(project.created_at)}")

    typer.echo(f"\nTasks ({len(c.tasks)})")
    for task in c.tasks:
        mark = "x" if task.completed else " "
        typer.echo(f"  [{mark}] {task.id:>5}  {task.name}  ({STATUS_LABELS[task.status]})")
    if not c.tasks:
        typer.echo("  No tasks found")

    typer.echo(f"\nTeam ({len(c.members)})")
    for member in c.members:
        name = member.user.name if member.user else "Unknown user"
        typer.echo(f"  {name}  {role_label(member.role)}  {profession_label(member.profession)}")
    if not c.members:
        typer.echo("  No members found")

    typer.echo("\nRecent activity")
    for activity in c.recent_activities:
        typer.echo(f"  {activity.actor_name} {activity.action} {activity.subject}")
    if not c.activities:
        typer.echo("  No recent activity")


@app.command("update")
def update(
    project_id: int = typer.Argument(..., help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    status: Optional[ProjectStatus] = typer.Option(None, "--status", "-s", help="New status"),
    progress: Optional[int] = typer.Option(None, "--progress", help="Completion percentage"),
    deadline: Optional[str] = typer.Option(None, "--deadline", help="Deadline as YYYY-MM-DD"),
    base_url: base_url_option = None,
) -> None:
    """Edit a project. Options not given keep their current value.

    Example:
        pmdesk project update 7 --status testing --progress 80
    """
    notifier = CliNotifier()
    changes = {
        "name": name,
        "description": description,
        "status": status,
        "progress": progress,
        "deadline": deadline,
    }

    async def _update():
        async with get_client(base_url) as api:
            controller = ProjectDetailController(api, QueryCache(), notify=notifier)
            await controller.load(project_id)
            if controller.project is None:
                return None
            defaults = ProjectFormValues.from_project(controller.project)
            defaults.update({k: v for k, v in changes.items() if v is not None})
            form = FormController(ProjectFormValues, controller.update_project, defaults)
            return await form.submit()

    result = run(_update())
    if result is None:
        print_error("Project not found")
        raise typer.Exit(1)
    if isinstance(result, Err):
        print_field_errors(result.error)
        raise typer.Exit(1)
    if notifier.failed:
        raise typer.Exit(1)


@app.command("delete")
def delete(
    project_id: int = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip both confirmations"),
    base_url: base_url_option = None,
) -> None:
    """Delete a project after two confirmations."""
    if not yes:
        typer.confirm(
            f"Delete project {project_id}? This cannot be undone.", abort=True
        )
        typer.confirm(
            "Are you absolutely sure? All tasks and activity will be lost.", abort=True
        )

    notifier = CliNotifier()

    async def _delete():
        async with get_client(base_url) as api:
            controller = ProjectDetailController(api, QueryCache(), notify=notifier)
            controller.bind(project_id)
            await controller.request_delete()
            return await controller.request_delete()

    result = run(_delete())
    if isinstance(result, Err):
        raise typer.Exit(1)

