"""Team member list widget."""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.reactive import reactive
from textual.widgets import Static

from pmdesk.domain.member import ProjectMember, initials, profession_label, role_color, role_label


def format_member(member: ProjectMember) -> Text:
    name = member.user.name if member.user else ""
    text = Text()
    text.append(f"[{initials(name)}] ", style="bold cyan")
    text.append(name or "Unknown user", style="bold")
    if member.user and member.user.email:
        text.append(f"  {member.user.email}", style="dim")
    text.append("  ")
    text.append(f" {role_label(member.role)} ", style=f"black on {role_color(member.role)}")
    if member.profession:
        text.append(f"  {profession_label(member.profession)}", style="italic")
    return text


def format_member_strip(members: list[ProjectMember], extra: int) -> str:
    """Initials of the first members plus a count of the rest."""
    strip = " ".join(initials(m.user.name if m.user else None) for m in members)
    if extra:
        strip += f" +{extra}"
    return strip


class MemberList(Vertical):
    """List of project members with role and profession."""

    DEFAULT_CSS = """
    MemberList {
        height: auto;
    }

    MemberList .member-item {
        padding: 0 1;
        margin-bottom: 1;
    }

    MemberList .empty {
        color: $text-muted;
        text-align: center;
        padding: 1;
    }
    """

    members: reactive[list[ProjectMember]] = reactive(list, recompose=True)

    def __init__(self, id: Optional[str] = None) -> None:
        super().__init__(id=id)

    def compose(self) -> ComposeResult:
        if not self.members:
            yield Static("No members found", classes="empty")
            return
        for member in self.members:
            yield Static(format_member(member), classes="member-item")
