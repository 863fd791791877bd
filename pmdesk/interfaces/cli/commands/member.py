"""Team member CLI commands."""

import typer

from pmdesk.application.forms import FormController
from pmdesk.application.project_detail import ProjectDetailController
from pmdesk.domain.member import AddMemberFormValues, MemberRole, Profession
from pmdesk.domain.shared import Err
from pmdesk.infrastructure.cache import QueryCache
from pmdesk.interfaces.cli.common import (
    CliNotifier,
    base_url_option,
    get_client,
    print_field_errors,
    run,
)

app = typer.Typer(help="Team member commands")


@app.command("add")
def add(
    user: int = typer.Argument(..., help="User ID to add"),
    project: int = typer.Option(..., "--project", "-p", help="Project ID", envvar="PMDESK_PROJECT"),
    role: MemberRole = typer.Option(MemberRole.MEMBER, "--role", "-r", help="Role in the project"),
    profession: Profession = typer.Option(Profession.OTHER, "--profession", help="Profession"),
    base_url: base_url_option = None,
) -> None:
    """Add a user to a project team."""
    notifier = CliNotifier()

    async def _add():
        async with get_client(base_url) as api:
            controller = ProjectDetailController(api, QueryCache(), notify=notifier)
            controller.bind(project)
            form = FormController(
                AddMemberFormValues,
                controller.add_member,
                {"user_id": user, "role": role, "profession": profession},
            )
            return await form.submit()

    result = run(_add())
    if isinstance(result, Err):
        print_field_errors(result.error)
        raise typer.Exit(1)
    if notifier.failed:
        raise typer.Exit(1)
