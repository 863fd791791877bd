"""Tests for ProjectDetailController against the in-memory server."""

import asyncio

import pytest

from pmdesk.application.forms import TaskFormController
from pmdesk.application.project_detail import (
    CREATE_TASK_FALLBACK,
    UPDATE_PROJECT_FALLBACK,
    DeleteStep,
    format_created,
    format_deadline,
)
from pmdesk.domain.member import AddMemberFormValues, MemberRole, Profession
from pmdesk.domain.project import ProjectFormValues, ProjectStatus
from pmdesk.domain.shared import Err, Ok
from pmdesk.domain.task import TaskFormValues
from pmdesk.infrastructure.cache import keys


async def wait_for(predicate, timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.001)


class TestLoad:
    @pytest.mark.asyncio
    async def test_loads_project_and_collections(self, controller, server):
        await controller.load(7)
        assert controller.project.name == "Website Redesign"
        assert len(controller.tasks) == 6
        assert len(controller.members) == 4
        assert len(controller.activities) == 4
        assert not controller.project_loading
        assert not controller.tasks_loading
        assert not controller.members_loading
        assert not controller.activities_loading
        assert not controller.not_found

    @pytest.mark.asyncio
    async def test_collections_load_independently(self, controller, server):
        release = server.gate("GET", "/api/projects/7/tasks")
        loading = asyncio.create_task(controller.load(7))
        await wait_for(lambda: controller.project is not None)
        assert controller.tasks_loading
        assert not controller.project_loading
        release.set()
        await loading
        assert not controller.tasks_loading
        assert len(controller.tasks) == 6

    @pytest.mark.asyncio
    async def test_invalid_id_disables_queries(self, controller, server):
        await controller.load(0)
        assert server.requests == []
        assert not controller.project_loading
        assert not controller.tasks_loading

    @pytest.mark.asyncio
    async def test_missing_project(self, controller):
        await controller.load(999)
        assert controller.project is None
        assert controller.not_found
        assert controller.tasks == []

    @pytest.mark.asyncio
    async def test_project_error_exposed(self, controller, server):
        server.fail("GET", "/api/projects/7", 500, body={"message": "Database unavailable"})
        await controller.load(7)
        assert controller.project is None
        assert controller.project_error.message == "Database unavailable"

    @pytest.mark.asyncio
    async def test_malformed_project_is_stored_as_error(self, controller, server):
        del server.projects[7]["name"]
        await controller.load(7)
        assert controller.project is None
        assert controller.not_found
        assert controller.project_error.status_code == 200
        assert len(controller.tasks) == 6

    @pytest.mark.asyncio
    async def test_reading_flags_creates_no_entries(self, controller, cache):
        controller.bind(0)
        assert not controller.project_loading
        assert controller.project_error is None
        controller.bind(7)
        assert controller.project_loading
        assert controller.tasks_loading
        assert controller.project_error is None
        assert not controller.not_found
        assert cache.keys() == []

    @pytest.mark.asyncio
    async def test_listeners_notified(self, controller):
        changes = []
        controller.subscribe(lambda: changes.append(controller.project))
        await controller.load(7)
        assert changes[-1].id == 7

    @pytest.mark.asyncio
    async def test_superseded_load_is_discarded(self, controller, server, cache):
        release = server.gate("GET", "/api/projects/7")
        changes = []
        first = asyncio.create_task(controller.load(7))
        await wait_for(lambda: server.count("GET", "/api/projects/7") == 1)

        await controller.load(8)
        controller.subscribe(lambda: changes.append(controller.project_id))
        release.set()
        await first

        assert controller.project_id == 8
        assert controller.project.name == "Mobile App"
        assert changes == []
        # the late response is cached under its own project only
        await wait_for(lambda: cache.peek(keys.project(7)) is not None)
        assert cache.peek(keys.project(7)).name == "Website Redesign"
        assert controller.project.name == "Mobile App"

    @pytest.mark.asyncio
    async def test_refresh_refetches(self, controller, server):
        await controller.load(7)
        await controller.refresh()
        assert server.count("GET", "/api/projects/7") == 2
        assert server.count("GET", "/api/projects/7/tasks") == 2


class TestDerivedState:
    @pytest.mark.asyncio
    async def test_summary_slices(self, controller):
        await controller.load(7)
        assert [t.id for t in controller.recent_tasks] == [1, 2, 3, 4, 5]
        assert controller.has_more_tasks
        assert len(controller.recent_activities) == 3
        assert controller.has_more_activities
        assert len(controller.avatar_members) == 3
        assert controller.extra_member_count == 1

    @pytest.mark.asyncio
    async def test_badge_and_progress(self, controller):
        await controller.load(7)
        assert controller.status_badge.label == "In progress"
        assert controller.progress_color == "blue"

    @pytest.mark.asyncio
    async def test_unknown_status_shows_planning(self, controller, server):
        server.projects[7]["status"] = "unknown_value"
        await controller.load(7)
        assert controller.status_badge.label == "Planning"

    @pytest.mark.asyncio
    async def test_small_project_has_no_overflow(self, controller):
        await controller.load(8)
        assert not controller.has_more_tasks
        assert not controller.has_more_activities
        assert controller.extra_member_count == 0

    @pytest.mark.asyncio
    async def test_date_formats(self, controller):
        await controller.load(7)
        assert format_deadline(controller.project.deadline) == "30 June, 2025"
        assert format_created(controller.project.created_at) == "15/01/2025"
        assert format_deadline(None) == "Not set"
        assert format_created(None) == "Date unavailable"


class TestAddMember:
    @pytest.mark.asyncio
    async def test_users_fetched_only_while_dialog_open(self, controller, server):
        await controller.load(7)
        assert server.count("GET", "/api/users") == 0
        assert not controller.users_loading

        await controller.set_add_member_open(True)
        assert server.count("GET", "/api/users") == 1
        assert len(controller.users) == 5
        assert not controller.users_loading

        await controller.set_add_member_open(False)
        controller.cache.invalidate(keys.USERS)
        await controller.refresh()
        assert server.count("GET", "/api/users") == 1

    @pytest.mark.asyncio
    async def test_add_member_refreshes_team(self, controller, server, notifications):
        await controller.load(7)
        await controller.set_add_member_open(True)
        result = await controller.add_member(
            AddMemberFormValues(user_id=5, role=MemberRole.MANAGER, profession=Profession.DEVOPS)
        )
        assert isinstance(result, Ok)
        assert controller.add_member_open is False
        assert server.count("GET", "/api/projects/7/members") == 2
        assert [m.user.name for m in controller.members][-1] == "Eve Long"
        assert notifications.last["title"] == "Member added"

    @pytest.mark.asyncio
    async def test_add_member_failure_keeps_dialog(self, controller, server, notifications):
        await controller.load(7)
        await controller.set_add_member_open(True)
        server.fail("POST", "/api/projects/7/members", 409, body={"message": "Already a member"})
        result = await controller.add_member(AddMemberFormValues(user_id=1))
        assert isinstance(result, Err)
        assert controller.add_member_open is True
        assert notifications.errors[-1]["message"] == "Already a member"
        assert len(controller.members) == 4


class TestDelete:
    @pytest.mark.asyncio
    async def test_two_step_delete(self, controller, server, navigations, notifications):
        await controller.load(7)
        controller.open_delete()

        assert await controller.request_delete() is None
        assert controller.delete_step == DeleteStep.FINAL
        assert server.count("DELETE", "/api/projects/7") == 0

        result = await controller.request_delete()
        assert isinstance(result, Ok)
        assert server.count("DELETE", "/api/projects/7") == 1
        assert navigations == ["/projects"]
        assert notifications.last["title"] == "Project deleted"
        assert controller.delete_open is False
        assert controller.delete_step == DeleteStep.FIRST
        assert controller.cache.peek(keys.project(7)) is None

    @pytest.mark.asyncio
    async def test_reset_disarms(self, controller, server):
        await controller.load(7)
        await controller.request_delete()
        controller.reset_delete()
        assert controller.delete_step == DeleteStep.FIRST
        assert await controller.request_delete() is None
        assert server.count("DELETE", "/api/projects/7") == 0

    @pytest.mark.asyncio
    async def test_delete_invalidates_project_list(self, controller, cache):
        await cache.fetch(keys.PROJECTS, controller.api.list_projects)
        await controller.load(7)
        await controller.request_delete()
        await controller.request_delete()
        assert cache.is_stale(keys.PROJECTS)

    @pytest.mark.asyncio
    async def test_delete_failure(self, controller, server, navigations, notifications):
        await controller.load(7)
        server.fail("DELETE", "/api/projects/7", 500, body={"message": "Project has open invoices"})
        await controller.request_delete()
        result = await controller.request_delete()
        assert isinstance(result, Err)
        assert navigations == []
        assert notifications.errors[-1]["message"] == "Project has open invoices"
        assert controller.delete_step == DeleteStep.FINAL
        assert controller.project is not None


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_create_task_from_form(self, controller, server, cache, notifications):
        cache.set_data(keys.TASKS, [])
        cache.set_data(keys.MY_TASKS, [])
        await controller.load(7)
        controller.new_task_open = True

        form = TaskFormController(on_submit=controller.create_task, project_id=7)
        form.update({"name": "Write report", "priority": "medium", "status": "todo"})
        result = await form.submit()
        assert isinstance(result, Ok)

        body = server.bodies("POST", "/api/projects/7/tasks")[0]
        assert body["projectId"] == 7
        assert body["name"] == "Write report"
        assert body["priority"] == "medium"
        assert body["status"] == "todo"

        assert cache.is_stale(keys.TASKS)
        assert cache.is_stale(keys.MY_TASKS)
        assert server.count("GET", "/api/projects/7/tasks") == 2
        assert not cache.is_stale(keys.project_tasks(7))
        assert "Write report" in [t.name for t in controller.tasks]
        assert controller.new_task_open is False
        assert notifications.last["title"] == "Task created"

    @pytest.mark.asyncio
    async def test_project_id_comes_from_view(self, controller, server):
        await controller.load(7)
        form = TaskFormController(on_submit=controller.create_task, defaults={"project_id": 8})
        form.set("name", "Wrong project")
        await form.submit()
        assert server.count("POST", "/api/projects/7/tasks") == 1
        assert server.bodies("POST", "/api/projects/7/tasks")[0]["projectId"] == 7

    @pytest.mark.asyncio
    async def test_invalid_form_sends_nothing(self, controller, server):
        await controller.load(7)
        form = TaskFormController(on_submit=controller.create_task, project_id=7)
        form.set("name", "A")
        result = await form.submit()
        assert isinstance(result, Err)
        assert form.errors["name"] == "Name must be at least 2 characters"
        assert server.count("POST", "/api/projects/7/tasks") == 0

    @pytest.mark.asyncio
    async def test_failure_uses_server_message(self, controller, server, notifications):
        await controller.load(7)
        controller.new_task_open = True
        before = controller.tasks
        server.fail("POST", "/api/projects/7/tasks", 400, body={"message": "Phase is closed"})

        form = TaskFormController(on_submit=controller.create_task, project_id=7)
        form.set("name", "Write report")
        await form.submit()

        error = notifications.errors[-1]
        assert error["message"] == "Phase is closed"
        assert error["title"] == "Could not create task"
        assert controller.tasks == before
        assert controller.new_task_open is True
        assert server.count("GET", "/api/projects/7/tasks") == 1

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_fallback(self, controller, server, notifications):
        await controller.load(7)
        server.fail("POST", "/api/projects/7/tasks", 500)
        form = TaskFormController(on_submit=controller.create_task, project_id=7)
        form.set("name", "Write report")
        await form.submit()
        assert notifications.errors[-1]["message"] == CREATE_TASK_FALLBACK

    @pytest.mark.asyncio
    async def test_unexpected_created_body_uses_fallback(self, controller, server, notifications):
        await controller.load(7)
        controller.new_task_open = True
        server.fail("POST", "/api/projects/7/tasks", 201, body={"success": True})

        result = await controller.create_task(TaskFormValues(name="Write report", project_id=7))

        assert isinstance(result, Err)
        assert notifications.errors[-1]["message"] == CREATE_TASK_FALLBACK
        assert controller.new_task_open is True


class TestUpdates:
    @pytest.mark.asyncio
    async def test_update_project(self, controller, server, notifications):
        await controller.load(7)
        controller.edit_open = True
        result = await controller.update_project(
            ProjectFormValues(name="Website v2", status=ProjectStatus.TESTING, progress=85)
        )
        assert isinstance(result, Ok)
        assert controller.edit_open is False
        assert server.count("GET", "/api/projects/7") == 2
        assert controller.project.name == "Website v2"
        assert controller.progress_color == "green"
        assert notifications.last["title"] == "Project updated"

    @pytest.mark.asyncio
    async def test_update_project_failure(self, controller, server, notifications):
        await controller.load(7)
        controller.edit_open = True
        server.fail("PUT", "/api/projects/7", 500)
        await controller.update_project(ProjectFormValues(name="Website v2"))
        assert controller.edit_open is True
        assert controller.project.name == "Website Redesign"
        assert notifications.errors[-1]["message"] == UPDATE_PROJECT_FALLBACK

    @pytest.mark.asyncio
    async def test_toggle_task_status(self, controller, server):
        await controller.load(7)
        await controller.set_task_status(1, True)
        assert server.bodies("PUT", "/api/tasks/1") == [{"status": "completed"}]
        assert next(t for t in controller.tasks if t.id == 1).completed

        await controller.set_task_status(4, False)
        assert server.bodies("PUT", "/api/tasks/4") == [{"status": "todo"}]
        assert not next(t for t in controller.tasks if t.id == 4).completed
