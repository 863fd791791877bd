"""Team member domain package."""

from pmdesk.domain.member.models import (
    PROFESSION_LABELS,
    ROLE_LABELS,
    AddMemberFormValues,
    MemberRole,
    Profession,
    ProjectMember,
    User,
    initials,
    profession_label,
    role_color,
    role_label,
)

__all__ = [
    "PROFESSION_LABELS",
    "ROLE_LABELS",
    "AddMemberFormValues",
    "MemberRole",
    "Profession",
    "ProjectMember",
    "User",
    "initials",
    "profession_label",
    "role_color",
    "role_label",
]
