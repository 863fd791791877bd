"""Pytest fixtures for pmdesk.

FakeServer is an in-memory stand-in for the project-management API,
served to the real ApiClient through httpx.MockTransport. Tests can make
a route fail, hold a route until an event is set, and inspect every
request that was sent.
"""

import asyncio
import copy
import json
import logging
import re
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from pmdesk.application.project_detail import ProjectDetailController
from pmdesk.infrastructure.api import ApiClient
from pmdesk.infrastructure.cache import QueryCache

BASE_URL = "http://testserver"

USERS = [
    {"id": 1, "name": "Alice Martin", "email": "alice@example.com"},
    {"id": 2, "name": "Bob Stone", "email": "bob@example.com"},
    {"id": 3, "name": "carol", "email": None},
    {"id": 4, "name": "Dan Wu", "email": "dan@example.com"},
    {"id": 5, "name": "Eve Long", "email": "eve@example.com"},
]

PROJECTS = {
    7: {
        "id": 7,
        "name": "Website Redesign",
        "description": "New marketing site",
        "status": "in_progress",
        "progress": 45,
        "deadline": "2025-06-30T00:00:00",
        "createdAt": "2025-01-15T10:00:00",
    },
    8: {
        "id": 8,
        "name": "Mobile App",
        "description": None,
        "status": "planning",
        "progress": 10,
        "deadline": None,
        "createdAt": "2025-02-01T09:30:00",
    },
}


def _tasks() -> dict[int, list[dict]]:
    statuses = ["todo", "in_progress", "review", "completed", "todo", "todo"]
    return {
        7: [
            {
                "id": i + 1,
                "name": f"Task {i + 1}",
                "priority": "medium",
                "status": status,
                "projectId": 7,
            }
            for i, status in enumerate(statuses)
        ],
        8: [{"id": 50, "name": "Sketch screens", "priority": "high", "status": "todo", "projectId": 8}],
    }


def _members() -> dict[int, list[dict]]:
    return {
        7: [
            {"id": 11, "userId": 1, "user": USERS[0], "role": "admin", "profession": "project_manager"},
            {"id": 12, "userId": 2, "user": USERS[1], "role": "manager", "profession": "developer"},
            {"id": 13, "userId": 3, "user": USERS[2], "role": "member", "profession": "designer"},
            {"id": 14, "userId": 4, "user": USERS[3], "role": "member", "profession": "qa_tester"},
        ],
        8: [],
    }


def _activities() -> dict[int, list[dict]]:
    return {
        7: [
            {
                "id": 100 + i,
                "userId": 1,
                "user": USERS[0],
                "action": "updated",
                "subject": f"Task {i + 1}",
                "createdAt": "2025-03-01T12:00:00",
            }
            for i in range(4)
        ],
        8: [],
    }


class FakeServer:
    """In-memory project-management API."""

    def __init__(self) -> None:
        self.projects: dict[int, dict] = copy.deepcopy(PROJECTS)
        self.tasks = _tasks()
        self.members = _members()
        self.activities = _activities()
        self.phases = {
            7: [{"id": 1, "name": "Discovery", "projectId": 7}, {"id": 2, "name": "Build", "projectId": 7}],
            8: [],
        }
        self.users = copy.deepcopy(USERS)
        self.requests: list[tuple[str, str, Any]] = []
        self._failures: dict[tuple[str, str], tuple[int, Any, str]] = {}
        self._gates: dict[tuple[str, str], asyncio.Event] = {}
        self._next_id = 1000

    # Test controls

    def fail(self, method: str, path: str, status: int = 500, body: Any = None, text: str = "") -> None:
        """Make every request to a route fail."""
        self._failures[(method, path)] = (status, body, text)

    def recover(self, method: str, path: str) -> None:
        self._failures.pop((method, path), None)

    def gate(self, method: str, path: str) -> asyncio.Event:
        """Hold requests to a route until the returned event is set."""
        event = asyncio.Event()
        self._gates[(method, path)] = event
        return event

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _ in self.requests if m == method and p == path)

    def bodies(self, method: str, path: str) -> list[Any]:
        return [body for m, p, body in self.requests if m == method and p == path]

    # Transport

    async def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((method, path, body))

        gate = self._gates.get((method, path))
        if gate is not None:
            await gate.wait()

        failure = self._failures.get((method, path))
        if failure is not None:
            status, error_body, text = failure
            if error_body is not None:
                return httpx.Response(status, json=error_body)
            return httpx.Response(status, text=text)
        return self._route(method, path, body)

    def _id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _route(self, method: str, path: str, body: Any) -> httpx.Response:
        if path == "/api/projects" and method == "GET":
            return httpx.Response(200, json=list(self.projects.values()))
        if path == "/api/users" and method == "GET":
            return httpx.Response(200, json=self.users)

        match = re.fullmatch(r"/api/tasks/(\d+)", path)
        if match and method == "PUT":
            return self._update_task(int(match.group(1)), body)

        match = re.fullmatch(r"/api/projects/(\d+)(?:/(\w+))?", path)
        if not match:
            return httpx.Response(404, json={"message": "Route not found"})
        project_id, collection = int(match.group(1)), match.group(2)
        if project_id not in self.projects:
            return httpx.Response(404, json={"message": "Project not found"})

        if collection is None:
            if method == "GET":
                return httpx.Response(200, json=self.projects[project_id])
            if method == "PUT":
                self.projects[project_id].update(body)
                return httpx.Response(200, json=self.projects[project_id])
            if method == "DELETE":
                del self.projects[project_id]
                return httpx.Response(204)
        elif collection == "tasks":
            if method == "GET":
                return httpx.Response(200, json=self.tasks.get(project_id, []))
            if method == "POST":
                task = dict(body, id=self._id())
                self.tasks.setdefault(project_id, []).append(task)
                return httpx.Response(201, json=task)
        elif collection == "members":
            if method == "GET":
                return httpx.Response(200, json=self.members.get(project_id, []))
            if method == "POST":
                user = next((u for u in self.users if u["id"] == body["userId"]), None)
                member = dict(body, id=self._id(), user=user)
                self.members.setdefault(project_id, []).append(member)
                return httpx.Response(201, json=member)
        elif collection == "phases" and method == "GET":
            return httpx.Response(200, json=self.phases.get(project_id, []))
        elif collection == "activities" and method == "GET":
            return httpx.Response(200, json=self.activities.get(project_id, []))
        return httpx.Response(405, json={"message": "Method not allowed"})

    def _update_task(self, task_id: int, body: Any) -> httpx.Response:
        for tasks in self.tasks.values():
            for task in tasks:
                if task["id"] == task_id:
                    task.update(body)
                    return httpx.Response(200, json=task)
        return httpx.Response(404, json={"message": "Task not found"})


class Notifications:
    """Records notify(message, title=..., severity=...) calls."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def __call__(self, message: str, title: str = "", severity: str = "information", **_: Any) -> None:
        self.calls.append({"message": message, "title": title, "severity": severity})

    @property
    def errors(self) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["severity"] == "error"]

    @property
    def last(self) -> Optional[dict[str, Any]]:
        return self.calls[-1] if self.calls else None


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config and log files inside the test's temp directory."""
    monkeypatch.setenv("PMDESK_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("PMDESK_BASE_URL", raising=False)
    monkeypatch.delenv("PMDESK_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    """Remove handlers added by setup_logging and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if getattr(handler, "_pmdesk", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture()
def server() -> FakeServer:
    return FakeServer()


@pytest_asyncio.fixture()
async def api(server):
    client = ApiClient(BASE_URL, transport=httpx.MockTransport(server.handler))
    yield client
    await client.aclose()


@pytest.fixture()
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture()
def notifications() -> Notifications:
    return Notifications()


@pytest.fixture()
def navigations() -> list[str]:
    return []


@pytest.fixture()
def controller(api, cache, notifications, navigations) -> ProjectDetailController:
    return ProjectDetailController(api, cache, notify=notifications, navigate=navigations.append)
