"""Team member domain models."""

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pmdesk.domain.shared.validation import FormSchema


class MemberRole(str, Enum):
    """Role of a user within a project."""

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class Profession(str, Enum):
    """Profession a member fills on the project team."""

    DEVELOPER = "developer"
    DESIGNER = "designer"
    SOCIAL_MEDIA = "social_media"
    MARKETING = "marketing"
    CONTENT_WRITER = "content_writer"
    PROJECT_MANAGER = "project_manager"
    QA_TESTER = "qa_tester"
    DEVOPS = "devops"
    PRODUCT_OWNER = "product_owner"
    DATA_ANALYST = "data_analyst"
    UI_UX = "ui_ux"
    BUSINESS_ANALYST = "business_analyst"
    OTHER = "other"


ROLE_LABELS = {
    MemberRole.ADMIN: "Administrator",
    MemberRole.MANAGER: "Manager",
    MemberRole.MEMBER: "Member",
}

ROLE_COLORS = {
    MemberRole.ADMIN: "magenta",
    MemberRole.MANAGER: "blue",
    MemberRole.MEMBER: "grey50",
}

PROFESSION_LABELS = {
    Profession.DEVELOPER: "Developer",
    Profession.DESIGNER: "Designer",
    Profession.SOCIAL_MEDIA: "Social Media",
    Profession.MARKETING: "Marketing",
    Profession.CONTENT_WRITER: "Content Writer",
    Profession.PROJECT_MANAGER: "Project Manager",
    Profession.QA_TESTER: "QA Tester",
    Profession.DEVOPS: "DevOps",
    Profession.PRODUCT_OWNER: "Product Owner",
    Profession.DATA_ANALYST: "Data Analyst",
    Profession.UI_UX: "UI/UX Designer",
    Profession.BUSINESS_ANALYST: "Business Analyst",
    Profession.OTHER: "Other",
}


class User(BaseModel):
    """A user account known to the server."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    email: str | None = None
    avatar: str | None = None


class ProjectMember(BaseModel):
    """Membership of a user in a project.

    ``role`` and ``profession`` stay raw strings so unknown server values
    still render through the label fallbacks.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: int | None = None
    user: User | None = None
    role: str = MemberRole.MEMBER.value
    profession: str | None = None


class AddMemberFormValues(FormSchema):
    """Validated values of the add-member dialog."""

    user_id: int = Field(ge=1)
    role: MemberRole = MemberRole.MEMBER
    profession: Profession = Profession.OTHER

    error_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("user_id", "missing"): "A user is required",
        ("user_id", "int_parsing"): "A user is required",
        ("user_id", "int_type"): "A user is required",
        ("user_id", "greater_than_equal"): "A user is required",
        ("role", "enum"): "Role must be admin, manager or member",
        ("profession", "enum"): "Select a valid profession",
    }


def role_label(role: str | None) -> str:
    """Display label for a member role; anything unknown reads as Member."""
    try:
        return ROLE_LABELS[MemberRole(role)]
    except ValueError:
        return ROLE_LABELS[MemberRole.MEMBER]


def role_color(role: str | None) -> str:
    try:
        return ROLE_COLORS[MemberRole(role)]
    except ValueError:
        return ROLE_COLORS[MemberRole.MEMBER]


def profession_label(profession: str | None) -> str:
    """Display label for a profession, falling back to Other."""
    try:
        return PROFESSION_LABELS[Profession(profession)]
    except ValueError:
        return PROFESSION_LABELS[Profession.OTHER]


def initials(name: str | None) -> str:
    """Two-letter avatar fallback for a user name."""
    if not name:
        return "U"
    return name[:2].upper()
