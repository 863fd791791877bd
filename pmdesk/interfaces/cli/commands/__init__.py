"""CLI command groups for pmdesk.

Command groups:
- project: list, show, update and delete projects
- task: create tasks and toggle their completion
- member: add members to a project team

Each command group is a Typer app registered with the main app using
app.add_typer().
"""

from pmdesk.interfaces.cli.commands import member, project, task

__all__ = ["member", "project", "task"]
