"""Tests for form controllers and tag collection."""

import asyncio
import logging

import pytest

from pmdesk.application.forms import (
    FormController,
    TagCollector,
    TaskFormController,
    load_task_form_options,
)
from pmdesk.domain.project import ProjectFormValues
from pmdesk.domain.shared import Err, Ok
from pmdesk.domain.task import TaskFormValues, TaskPriority, TaskStatus
from pmdesk.infrastructure.cache import keys


class Recorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, values):
        self.calls.append(values)


class TestFormController:
    @pytest.mark.asyncio
    async def test_invalid_values_never_reach_callback(self):
        on_submit = Recorder()
        form = FormController(ProjectFormValues, on_submit, {"name": "A", "progress": 20})
        result = await form.submit()
        assert isinstance(result, Err)
        assert on_submit.calls == []
        assert form.errors == {"name": "Name must be at least 2 characters"}
        assert form.pending is False

    @pytest.mark.asyncio
    async def test_valid_values_passed_as_value_object(self):
        on_submit = Recorder()
        form = FormController(ProjectFormValues, on_submit, {"name": "Website", "progress": "40"})
        result = await form.submit()
        assert isinstance(result, Ok)
        assert len(on_submit.calls) == 1
        assert isinstance(on_submit.calls[0], ProjectFormValues)
        assert on_submit.calls[0].progress == 40

    @pytest.mark.asyncio
    async def test_set_clears_field_error(self):
        form = FormController(ProjectFormValues, Recorder(), {"name": "A"})
        await form.submit()
        assert "name" in form.errors
        form.set("name", "Website")
        assert "name" not in form.errors
        assert isinstance(await form.submit(), Ok)

    @pytest.mark.asyncio
    async def test_second_submit_refused_while_pending(self):
        release = asyncio.Event()
        calls = []

        async def slow_submit(values):
            calls.append(values)
            await release.wait()

        form = FormController(ProjectFormValues, slow_submit, {"name": "Website"})
        first = asyncio.create_task(form.submit())
        await asyncio.sleep(0)
        assert form.pending is True

        assert await form.submit() is None
        release.set()
        assert isinstance(await first, Ok)
        assert len(calls) == 1
        assert form.pending is False

    @pytest.mark.asyncio
    async def test_pending_cleared_when_callback_raises(self):
        async def broken(values):
            raise RuntimeError("boom")

        form = FormController(ProjectFormValues, broken, {"name": "Website"})
        with pytest.raises(RuntimeError):
            await form.submit()
        assert form.pending is False

    @pytest.mark.asyncio
    async def test_sync_callback_supported(self):
        seen = []
        form = FormController(ProjectFormValues, seen.append, {"name": "Website"})
        await form.submit()
        assert len(seen) == 1


class TestTagCollector:
    def test_trims_and_rejects_empty(self):
        tags = TagCollector()
        assert tags.add("  docs ") == Ok(["docs"])
        assert isinstance(tags.add("   "), Err)
        assert tags.items == ["docs"]

    def test_duplicates_ignore_case(self):
        tags = TagCollector(["Docs"])
        result = tags.add("docs")
        assert isinstance(result, Err)
        assert tags.items == ["Docs"]

    def test_at_most_eight_tags(self):
        tags = TagCollector(f"tag{i}" for i in range(8))
        assert len(tags.items) == 8
        result = tags.add("ninth")
        assert isinstance(result, Err)
        assert "8" in result.error
        assert len(tags.items) == 8

    def test_remove_and_clear(self):
        tags = TagCollector(["a1", "b2", "c3"])
        tags.remove("B2")
        assert tags.items == ["a1", "c3"]
        tags.clear()
        assert tags.items == []


class TestTaskFormController:
    def test_defaults(self):
        form = TaskFormController(Recorder())
        assert form.values["name"] == ""
        assert form.values["description"] == ""
        assert form.values["priority"] == TaskPriority.MEDIUM
        assert form.values["status"] == TaskStatus.TODO
        assert form.values["project_id"] == 0
        assert form.values["phase_id"] is None
        assert form.values["assigned_to"] is None
        assert form.project_locked is False

    def test_bound_project_locks_selector(self):
        form = TaskFormController(Recorder(), project_id=7)
        assert form.values["project_id"] == 7
        assert form.project_locked is True

    def test_default_project_wins_over_bound(self):
        form = TaskFormController(Recorder(), defaults={"project_id": 3}, project_id=7)
        assert form.values["project_id"] == 3

    def test_submit_label(self):
        assert TaskFormController(Recorder()).submit_label == "Create Task"
        edit = TaskFormController(Recorder(), defaults={"name": "Existing task"})
        assert edit.submit_label == "Update Task"
        edit.pending = True
        assert edit.submit_label == "Saving..."

    @pytest.mark.asyncio
    async def test_missing_project_rejected(self):
        on_submit = Recorder()
        form = TaskFormController(on_submit)
        form.set("name", "Write report")
        result = await form.submit()
        assert isinstance(result, Err)
        assert form.errors == {"project_id": "Select a project"}
        assert on_submit.calls == []

    @pytest.mark.asyncio
    async def test_tags_recorded_but_not_in_payload(self, caplog):
        on_submit = Recorder()
        form = TaskFormController(on_submit, project_id=7, tags=["docs", "q3"])
        form.set("name", "Write report")
        with caplog.at_level(logging.INFO, logger="pmdesk.application.forms"):
            result = await form.submit()

        assert isinstance(result, Ok)
        assert form.submitted_tags == ["docs", "q3"]
        assert "docs" in caplog.text
        submitted = on_submit.calls[0]
        assert isinstance(submitted, TaskFormValues)
        assert "tags" not in submitted.to_payload()

    @pytest.mark.asyncio
    async def test_tags_not_recorded_when_invalid(self):
        form = TaskFormController(Recorder(), project_id=7, tags=["docs"])
        await form.submit()
        assert form.submitted_tags == []


class TestTaskFormOptions:
    @pytest.mark.asyncio
    async def test_without_project_phases_not_requested(self, api, cache, server):
        options = await load_task_form_options(api, cache, None)
        assert [p.id for p in options.projects] == [7, 8]
        assert len(options.users) == 5
        assert options.phases == []
        assert not any(path.endswith("/phases") for _, path, _ in server.requests)

    @pytest.mark.asyncio
    async def test_with_project_loads_phases(self, api, cache, server):
        options = await load_task_form_options(api, cache, 7)
        assert [phase.name for phase in options.phases] == ["Discovery", "Build"]
        assert server.count("GET", "/api/projects/7/phases") == 1

    @pytest.mark.asyncio
    async def test_projects_and_users_fetched_once(self, api, cache, server):
        await load_task_form_options(api, cache, 7)
        await load_task_form_options(api, cache, 7)
        assert server.count("GET", "/api/projects") == 1
        assert server.count("GET", "/api/users") == 1
        assert cache.peek(keys.PROJECTS) is not None
