"""
Pydantic schemas for pending HTTP requests.

A PendingRequest is the editable, unsent description of one HTTP call.
Headers, cookies and queries share one shape: an ordered list of
(key, value) pairs that always ends with a blank pair the user can type
into.
"""

from enum import Enum
from typing import Callable, Literal, MutableMapping, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from .options import SelectOption


Pair = tuple[str, str]


def blank_pairs() -> list[Pair]:
    return [("", "")]


def update_pair(pairs: list[Pair], index: int, key: str | None = None, value: str | None = None) -> None:
    """
    Replace the key or value of pairs[index] in place.

    Editing the last pair appends a fresh blank pair. Indexes outside the
    list are ignored.
    """
    if not 0 <= index < len(pairs):
        return

    old_key, old_value = pairs[index]
    pairs[index] = (
        old_key if key is None else key,
        old_value if value is None else value,
    )

    if index + 1 == len(pairs):
        pairs.append(("", ""))


def remove_pair(pairs: list[Pair], index: int) -> None:
    """Drop pairs[index]; the trailing blank pair is not restored."""
    if 0 <= index < len(pairs):
        del pairs[index]


class HttpMethod(str, Enum):
    """HTTP methods supported by the system."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def label(self) -> str:
        """Display form, e.g. ``Get``."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> "HttpMethod":
        """Case-insensitive lookup, unknown methods fall back to GET."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.GET

    @classmethod
    def options(cls) -> list[SelectOption]:
        return [SelectOption(label=method.label, value=method.value) for method in cls]


class RequestItem(str, Enum):
    """Selector for the three pair collections of a request."""
    HEADER = "header"
    COOKIE = "cookie"
    QUERY = "query"


class Authorization(BaseModel):
    """Base for authorization shapes attached to a request."""

    def apply_to_headers(
        self,
        headers: MutableMapping[str, str],
        resolve: Callable[[str], str]
    ) -> None:
        raise NotImplementedError


class BearerAuthorization(Authorization):
    """``Authorization: <prefix> <token>``, skipped while the token is blank."""
    type: Literal["bearer"] = "bearer"
    prefix: str = "Bearer"
    token: str = ""

    def apply_to_headers(self, headers, resolve):
        token = resolve(self.token)
        if token.strip():
            headers["Authorization"] = f"{resolve(self.prefix)} {token}"


class Body(BaseModel):
    """Base for request body shapes."""

    @property
    def content_type(self) -> str | None:
        return None

    def render(self) -> str:
        raise NotImplementedError


class JsonBody(Body):
    """Raw JSON text sent as ``application/json``."""
    type: Literal["application_json"] = "application_json"
    content: str = ""

    @property
    def content_type(self) -> str:
        return "application/json"

    def render(self) -> str:
        return self.content


class PendingRequest(BaseModel):
    """
    Editable description of one HTTP call.

    Attributes:
        id: Unique identifier for the request
        name: Optional display name
        url: Target URL, may contain {{VAR}} placeholders and the project
            base URL sentinel
        method: HTTP method
        headers: Header pairs, last pair always blank after an edit
        cookies: Cookie pairs, same shape as headers
        queries: Query parameter pairs, same shape as headers
        authorization: Authorization shape
        body: Body shape
    """
    id: UUID = Field(default_factory=uuid4)
    name: Optional[str] = None
    url: str = "https://"
    method: HttpMethod = HttpMethod.GET
    headers: list[Pair] = Field(default_factory=blank_pairs)
    cookies: list[Pair] = Field(default_factory=blank_pairs)
    queries: list[Pair] = Field(default_factory=blank_pairs)
    authorization: BearerAuthorization = Field(default_factory=BearerAuthorization)
    body: JsonBody = Field(default_factory=JsonBody)

    def items(self, item: RequestItem) -> list[Pair]:
        if item is RequestItem.HEADER:
            return self.headers
        if item is RequestItem.COOKIE:
            return self.cookies
        return self.queries

    def add_item(self, item: RequestItem, key: str, value: str) -> None:
        self.items(item).append((key, value))

    def update_item_key(self, item: RequestItem, index: int, key: str) -> None:
        update_pair(self.items(item), index, key=key)

    def update_item_value(self, item: RequestItem, index: int, value: str) -> None:
        update_pair(self.items(item), index, value=value)

    def remove_item(self, item: RequestItem, index: int) -> None:
        remove_pair(self.items(item), index)

    def set_url(self, url: str) -> None:
        self.url = url

    def set_name(self, name: str | None) -> None:
        self.name = name

    def set_method(self, method: HttpMethod) -> None:
        self.method = method

    def set_auth(self, authorization: BearerAuthorization) -> None:
        self.authorization = authorization

    def set_body(self, body: JsonBody) -> None:
        self.body = body

    @property
    def label(self) -> str:
        return self.name or self.url

    def to_option(self) -> SelectOption:
        return SelectOption(label=self.label, value=str(self.id))


# API input schemas

class RequestCreate(BaseModel):
    """Schema for adding a request to the active project."""
    folder: str = "root"
    name: str | None = None
    url: str = "https://"
    method: HttpMethod = HttpMethod.GET

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, v):
        return HttpMethod.parse(v) if isinstance(v, str) else v


class RequestUpdate(BaseModel):
    """Schema for editing the current request. All fields are optional."""
    name: str | None = None
    url: str | None = None
    method: HttpMethod | None = None
    authorization: BearerAuthorization | None = None
    body: JsonBody | None = None

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, v):
        return HttpMethod.parse(v) if isinstance(v, str) else v


class UrlUpdate(BaseModel):
    """Schema for typing a URL; it is stored relative to the base URL."""
    url: str


class UrlResponse(BaseModel):
    """Stored (sentinel) and built forms of the current request URL."""
    stored: str
    built: str
    base_url: str


class ItemInput(BaseModel):
    """A single key or value typed into a pair row."""
    value: str
