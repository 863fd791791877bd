"""Query keys for the request cache.

Keys are tuples of ``(entity-kind, *ids)``. Invalidation matches by
prefix, so ``TASKS`` also covers ``MY_TASKS``.
"""

from collections.abc import Hashable

QueryKey = tuple[Hashable, ...]

PROJECTS: QueryKey = ("projects",)
TASKS: QueryKey = ("tasks",)
MY_TASKS: QueryKey = ("tasks", "user", "me")
USERS: QueryKey = ("users",)


def project(project_id: int) -> QueryKey:
    return ("project", project_id)


def project_tasks(project_id: int) -> QueryKey:
    return ("project-tasks", project_id)


def project_members(project_id: int) -> QueryKey:
    return ("project-members", project_id)


def project_activities(project_id: int) -> QueryKey:
    return ("project-activities", project_id)


def project_phases(project_id: int) -> QueryKey:
    return ("project-phases", project_id)
