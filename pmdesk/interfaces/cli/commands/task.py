"""Task CLI commands.

Commands for creating tasks in a project and marking them done or not done.
"""

from typing import Optional

import typer

from pmdesk.application.forms import TaskFormController
from pmdesk.application.project_detail import ProjectDetailController
from pmdesk.domain.shared import Err
from pmdesk.domain.task import TaskPriority, TaskStatus
from pmdesk.infrastructure.cache import QueryCache
from pmdesk.interfaces.cli.common import (
    CliNotifier,
    base_url_option,
    get_client,
    print_error,
    print_field_errors,
    print_info,
    run,
)

app = typer.Typer(help="Task commands")


@app.command("create")
def create(
    name: str = typer.Argument(..., help="Task name"),
    project: int = typer.Option(..., "--project", "-p", help="Project ID", envvar="PMDESK_PROJECT"),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    priority: TaskPriority = typer.Option(TaskPriority.MEDIUM, "--priority", help="Task priority"),
    status: TaskStatus = typer.Option(TaskStatus.TODO, "--status", help="Initial status"),
    phase: Optional[int] = typer.Option(None, "--phase", help="Phase ID"),
    assignee: Optional[int] = typer.Option(None, "--assignee", "-a", help="User ID to assign"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date as YYYY-MM-DD"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag (repeatable, at most 8)"),
    base_url: base_url_option = None,
) -> None:
    """Create a task in a project.

    Example:
        pmdesk task create "Write report" -p 7 --priority high -t docs
    """
    notifier = CliNotifier()

    async def _create():
        async with get_client(base_url) as api:
            controller = ProjectDetailController(api, QueryCache(), notify=notifier)
            controller.bind(project)
            form = TaskFormController(
                on_submit=controller.create_task,
                project_id=project,
                defaults={
                    "description": description,
                    "priority": priority,
                    "status": status,
                    "phase_id": phase,
                    "assigned_to": assignee,
                    "due_date": due,
                },
            )
            form.set("name", name)
            for value in tag or []:
                added = form.tags.add(value)
                if isinstance(added, Err):
                    print_error(added.error)
            return await form.submit()

    result = run(_create())
    if isinstance(result, Err):
        print_field_errors(result.error)
        raise typer.Exit(1)
    if notifier.failed:
        raise typer.Exit(1)


def _set_completed(task_id: int, project: int, completed: bool, base_url: Optional[str]) -> None:
    notifier = CliNotifier()

    async def _toggle():
        async with get_client(base_url) as api:
            controller = ProjectDetailController(api, QueryCache(), notify=notifier)
            controller.bind(project)
            return await controller.set_task_status(task_id, completed)

    result = run(_toggle())
    if isinstance(result, Err):
        raise typer.Exit(1)
    print_info(f"Task {task_id} marked {'done' if completed else 'not done'}")


@app.command("done")
def done(
    task_id: int = typer.Argument(..., help="Task ID"),
    project: int = typer.Option(..., "--project", "-p", help="Project ID", envvar="PMDESK_PROJECT"),
    base_url: base_url_option = None,
) -> None:
    """Mark a task completed."""
    _set_completed(task_id, project, True, base_url)


@app.command("undo")
def undo(
    task_id: int = typer.Argument(..., help="Task ID"),
    project: int = typer.Option(..., "--project", "-p", help="Project ID", envvar="PMDESK_PROJECT"),
    base_url: base_url_option = None,
) -> None:
    """Move a completed task back to to-do."""
    _set_completed(task_id, project, False, base_url)
