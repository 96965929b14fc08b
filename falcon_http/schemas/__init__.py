"""
Pydantic schemas package.

Exports the domain entities and the API input/output schemas.
"""

from .options import SelectOption

from .request import (
    HttpMethod,
    RequestItem,
    Authorization,
    BearerAuthorization,
    Body,
    JsonBody,
    PendingRequest,
    RequestCreate,
    RequestUpdate,
    UrlUpdate,
    UrlResponse,
    ItemInput,
)

from .environment import (
    Environment,
    EnvironmentCreate,
    EnvironmentUpdate,
    PreviewRequest,
    PreviewResponse,
)

from .project import (
    DEFAULT_FOLDER,
    Project,
    ProjectCreate,
    ProjectUpdate,
    DefaultEnvSelect,
)

from .execute import (
    ResponseCookie,
    ResponseCapture,
    SendState,
)

__all__ = [
    "SelectOption",
    # Request schemas
    "HttpMethod",
    "RequestItem",
    "Authorization",
    "BearerAuthorization",
    "Body",
    "JsonBody",
    "PendingRequest",
    "RequestCreate",
    "RequestUpdate",
    "UrlUpdate",
    "UrlResponse",
    "ItemInput",
    # Environment schemas
    "Environment",
    "EnvironmentCreate",
    "EnvironmentUpdate",
    "PreviewRequest",
    "PreviewResponse",
    # Project schemas
    "DEFAULT_FOLDER",
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "DefaultEnvSelect",
    # Execute schemas
    "ResponseCookie",
    "ResponseCapture",
    "SendState",
]
