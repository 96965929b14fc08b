"""
Pydantic schemas for projects.

A project groups saved requests into named folders and remembers which
request is current. Folders keep insertion order, so the fallback to "the
first request" is deterministic.
"""

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .options import SelectOption
from .request import HttpMethod, PendingRequest, RequestItem


DEFAULT_FOLDER = "root"


def default_requests() -> dict[str, list[PendingRequest]]:
    return {DEFAULT_FOLDER: [PendingRequest()]}


class Project(BaseModel):
    """
    A named collection of saved requests.

    Attributes:
        id: Unique identifier for the project
        name: Human-readable name for the project
        base_url: Legacy base URL, superseded by Environment.base_url
        is_active: Whether this project is the selected one
        default_env: Environment selected together with this project
        requests: Folder name to ordered requests
        active_request_id: Request the user is editing
    """
    id: UUID = Field(default_factory=uuid4)
    name: str = "Unknown project"
    base_url: Optional[str] = None
    is_active: bool = False
    default_env: Optional[UUID] = None
    requests: dict[str, list[PendingRequest]] = Field(default_factory=default_requests)
    active_request_id: Optional[UUID] = None

    def __str__(self) -> str:
        return self.name

    def find_request(self, request_id: UUID) -> tuple[str, PendingRequest] | None:
        for folder, requests in self.requests.items():
            for request in requests:
                if request.id == request_id:
                    return folder, request
        return None

    def current_request(self) -> tuple[str, PendingRequest] | None:
        """
        Resolve the current request as (folder, request).

        The request matching active_request_id wins; otherwise the first
        request of the first non-empty folder.
        """
        if self.active_request_id is not None:
            found = self.find_request(self.active_request_id)
            if found is not None:
                return found

        for folder, requests in self.requests.items():
            if requests:
                return folder, requests[0]
        return None

    def current_request_id(self) -> UUID | None:
        current = self.current_request()
        return current[1].id if current else None

    def current_request_mut(self) -> PendingRequest | None:
        """
        Current request for editing.

        A project with no folders at all gets a "root" folder holding one
        default request. The resolved request is pinned as active.
        """
        if not self.requests:
            request = PendingRequest()
            self.requests[DEFAULT_FOLDER] = [request]
            self.active_request_id = request.id

        current = self.current_request()
        if current is None:
            return None

        self.active_request_id = current[1].id
        return current[1]

    def set_current_request(self, request_id: UUID) -> None:
        self.active_request_id = request_id

    def update_request_item(self, item: RequestItem, index: int, value: str, is_key: bool) -> None:
        request = self.current_request_mut()
        if request is None:
            return
        if is_key:
            request.update_item_key(item, index, value)
        else:
            request.update_item_value(item, index, value)

    def update_request_url(self, url: str) -> None:
        if request := self.current_request_mut():
            request.set_url(url)

    def update_request_method(self, method: HttpMethod) -> None:
        if request := self.current_request_mut():
            request.set_method(method)

    def add_request(self, folder: str, request: PendingRequest) -> None:
        """Append request to folder (created on demand) and make it current."""
        self.set_current_request(request.id)
        self.requests.setdefault(folder, []).append(request)

    def remove_request(self, folder: str, request_id: UUID) -> None:
        """Remove a request and re-resolve the current request id."""
        requests = self.requests.get(folder, [])
        for index, request in enumerate(requests):
            if request.id == request_id:
                del requests[index]
                break

        self.active_request_id = self.current_request_id()

    def set_default_env(self, env_id: UUID) -> None:
        self.default_env = env_id

    def remove_default_env(self) -> None:
        self.default_env = None

    def duplicate(self) -> "Project":
        """Independent copy with a fresh id; the copy is never active."""
        return self.model_copy(deep=True, update={"id": uuid4(), "is_active": False})

    def request_options(self) -> list[SelectOption]:
        return [
            request.to_option()
            for requests in self.requests.values()
            for request in requests
        ]

    def to_option(self) -> SelectOption:
        return SelectOption(label=self.name, value=str(self.id))


# API input schemas

class ProjectCreate(BaseModel):
    """Schema for creating a new project."""
    name: str


class ProjectUpdate(BaseModel):
    """Schema for updating the active project. All fields are optional."""
    name: str | None = None
    base_url: str | None = None


class DefaultEnvSelect(BaseModel):
    """Environment to pin as the active project's default, or None to clear."""
    env_id: UUID | None = None
