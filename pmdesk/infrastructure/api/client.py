"""Async REST client for the project-management API.

Every endpoint the UI consumes is exposed as a coroutine that returns
pydantic models. Non-2xx responses, transport failures and bodies that do
not match the expected model are raised as ApiError, carrying the
server-provided message when there is one.
"""

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from pmdesk.domain.activity import Activity
from pmdesk.domain.member import AddMemberFormValues, ProjectMember, User
from pmdesk.domain.project import Phase, Project, ProjectFormValues
from pmdesk.domain.task import Task, TaskFormValues, TaskStatus
from pmdesk.infrastructure.api.errors import ApiError, InvalidResponseError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 30.0


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
        return ""
    if isinstance(body, str):
        return body
    return ""


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _validate(target: Any, data: Any, response: httpx.Response, label: str) -> Any:
    """Validate a decoded body, raising InvalidResponseError on a shape mismatch."""
    try:
        return TypeAdapter(target).validate_python(data)
    except ValidationError as e:
        logger.warning(f"{label} -> {response.status_code}: unexpected body ({e.error_count()} errors)")
        raise InvalidResponseError(response.status_code) from e


class ApiClient:
    """Client for the project-management REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _send(self, method: str, path: str, json: Any = None) -> httpx.Response:
        client = await self._get_client()
        logger.debug(f"{method} {path}")
        try:
            response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(None, str(e)) from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            if response.status_code == 404:
                raise NotFoundError(404, message)
            raise ApiError(response.status_code, message)
        return response

    async def request(self, method: str, path: str, json: Any = None) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method.
            path: Path below the base URL, e.g. ``/api/projects/7``.
            json: Optional JSON body.

        Returns:
            The decoded body, or None for an empty or non-JSON body.

        Raises:
            NotFoundError: The server answered 404.
            ApiError: Any other non-2xx answer or a transport failure.
        """
        return _decode(await self._send(method, path, json=json))

    async def _request_model(
        self, model: type[ModelT], method: str, path: str, json: Any = None
    ) -> ModelT:
        response = await self._send(method, path, json=json)
        return _validate(model, _decode(response), response, f"{method} {path}")

    async def _request_list(self, model: type[ModelT], path: str) -> list[ModelT]:
        response = await self._send("GET", path)
        data = _decode(response)
        # anything that is not a JSON array reads as an empty collection
        if not isinstance(data, list):
            return []
        return _validate(list[model], data, response, f"GET {path}")

    # =========================================================================
    # Projects
    # =========================================================================

    async def list_projects(self) -> list[Project]:
        return await self._request_list(Project, "/api/projects")

    async def get_project(self, project_id: int) -> Optional[Project]:
        """Fetch a project, returning None when it does not exist."""
        path = f"/api/projects/{project_id}"
        try:
            response = await self._send("GET", path)
        except NotFoundError:
            return None
        data = _decode(response)
        if not data:
            return None
        return _validate(Project, data, response, f"GET {path}")

    async def update_project(self, project_id: int, values: ProjectFormValues) -> Project:
        return await self._request_model(
            Project, "PUT", f"/api/projects/{project_id}", json=values.to_payload()
        )

    async def delete_project(self, project_id: int) -> None:
        await self._send("DELETE", f"/api/projects/{project_id}")

    # =========================================================================
    # Tasks
    # =========================================================================

    async def list_project_tasks(self, project_id: int) -> list[Task]:
        return await self._request_list(Task, f"/api/projects/{project_id}/tasks")

    async def create_task(self, project_id: int, values: TaskFormValues) -> Task:
        payload = values.to_payload()
        payload["projectId"] = project_id
        return await self._request_model(
            Task, "POST", f"/api/projects/{project_id}/tasks", json=payload
        )

    async def update_task_status(self, task_id: int, status: TaskStatus) -> Task:
        return await self._request_model(
            Task, "PUT", f"/api/tasks/{task_id}", json={"status": status.value}
        )

    # =========================================================================
    # Members, phases, activities, users
    # =========================================================================

    async def list_members(self, project_id: int) -> list[ProjectMember]:
        return await self._request_list(ProjectMember, f"/api/projects/{project_id}/members")

    async def add_member(self, project_id: int, values: AddMemberFormValues) -> ProjectMember:
        return await self._request_model(
            ProjectMember, "POST", f"/api/projects/{project_id}/members", json=values.to_payload()
        )

    async def list_phases(self, project_id: int) -> list[Phase]:
        return await self._request_list(Phase, f"/api/projects/{project_id}/phases")

    async def list_activities(self, project_id: int) -> list[Activity]:
        return await self._request_list(Activity, f"/api/projects/{project_id}/activities")

    async def list_users(self) -> list[User]:
        return await self._request_list(User, "/api/users")
