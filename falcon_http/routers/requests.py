"""
Request management API routes.

All operations target the active project: adding, selecting and removing
requests, and editing the current request's URL, method, pairs,
authorization and body.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..dependencies import get_store, get_writer, require_active_project
from ..exceptions import ResourceNotFoundError
from ..schemas.options import SelectOption
from ..schemas.project import DEFAULT_FOLDER
from ..schemas.request import (
    HttpMethod,
    ItemInput,
    PendingRequest,
    RequestCreate,
    RequestItem,
    RequestUpdate,
    UrlResponse,
    UrlUpdate,
)
from ..services.http_executor import resolve_base_url
from ..services.persistence import DebouncedWriter
from ..services.request_url import RequestUrl
from ..services.store import Store


router = APIRouter(prefix="/api/requests", tags=["requests"])


def _current_request(store: Store) -> PendingRequest:
    project = require_active_project(store)
    request = project.current_request_mut()
    if request is None:
        raise ResourceNotFoundError("Request", "current")
    return request


@router.get("", response_model=dict[str, list[PendingRequest]])
async def list_requests(store: Store = Depends(get_store)):
    """Folders of the active project with their requests, in order."""
    return require_active_project(store).requests


@router.get("/options", response_model=list[SelectOption])
async def request_options(store: Store = Depends(get_store)):
    return require_active_project(store).request_options()


@router.get("/methods", response_model=list[SelectOption])
async def method_options():
    """Supported HTTP methods with their display labels."""
    return HttpMethod.options()


@router.get("/current", response_model=PendingRequest)
async def get_current_request(store: Store = Depends(get_store)):
    """
    Get the request currently being edited.

    Raises:
        ResourceNotFoundError: 404 if the active project has no requests
    """
    current = require_active_project(store).current_request()
    if current is None:
        raise ResourceNotFoundError("Request", "current")
    return current[1]


@router.post("", response_model=PendingRequest, status_code=status.HTTP_201_CREATED)
async def create_request(
    request_data: RequestCreate,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Add a request to a folder of the active project.

    The folder is created if needed and the new request becomes current.
    """
    project = require_active_project(store)
    request = PendingRequest(
        name=request_data.name,
        url=request_data.url,
        method=request_data.method,
    )
    project.add_request(request_data.folder, request)
    writer.schedule()
    return request


@router.patch("/current", response_model=PendingRequest)
async def update_current_request(
    request_data: RequestUpdate,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Update fields of the current request.

    Only provided fields are replaced; url is stored exactly as given.
    """
    project = require_active_project(store)
    request = _current_request(store)

    update_data = request_data.model_dump(exclude_unset=True)
    if "name" in update_data:
        request.set_name(request_data.name)
    if request_data.url is not None:
        request.set_url(request_data.url)
    if request_data.method is not None:
        project.update_request_method(request_data.method)
    if request_data.authorization is not None:
        request.set_auth(request_data.authorization)
    if request_data.body is not None:
        request.set_body(request_data.body)

    writer.schedule()
    return request


@router.get("/current/url", response_model=UrlResponse)
async def get_current_url(store: Store = Depends(get_store)):
    """Stored form of the current URL and its form built against the base URL."""
    project = require_active_project(store)
    current = project.current_request()
    if current is None:
        raise ResourceNotFoundError("Request", "current")

    base_url = resolve_base_url(project, store.active_env())
    stored = current[1].url
    return UrlResponse(stored=stored, built=RequestUrl(stored).build(base_url), base_url=base_url)


@router.put("/current/url", response_model=UrlResponse)
async def set_current_url(
    url_data: UrlUpdate,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Store a typed URL relative to the active base URL.

    A prefix equal to the base URL (or to its ``{{NAME[args]}}`` form) is
    replaced with the project base URL sentinel.
    """
    project = require_active_project(store)
    base_url = resolve_base_url(project, store.active_env())
    stored = RequestUrl(url_data.url).extract(base_url)

    project.update_request_url(stored)
    writer.schedule()
    return UrlResponse(stored=stored, built=RequestUrl(stored).build(base_url), base_url=base_url)


@router.post("/{request_id}/select", response_model=PendingRequest)
async def select_request(
    request_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    project = require_active_project(store)
    found = project.find_request(request_id)
    if found is None:
        raise ResourceNotFoundError("Request", request_id)

    project.set_current_request(request_id)
    writer.schedule()
    return found[1]


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    request_id: UUID,
    folder: str = DEFAULT_FOLDER,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Remove a request from a folder of the active project.

    The current request is re-resolved afterwards.
    """
    project = require_active_project(store)
    found = project.find_request(request_id)
    if found is None or found[0] != folder:
        raise ResourceNotFoundError("Request", request_id)

    project.remove_request(folder, request_id)
    writer.schedule()
    return None


# Pair endpoints

@router.put("/current/items/{item}/{index}/key", response_model=PendingRequest)
async def update_item_key(
    item: RequestItem,
    index: int,
    item_input: ItemInput,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Edit a header/cookie/query key; editing the last row appends a blank row."""
    project = require_active_project(store)
    project.update_request_item(item, index, item_input.value, is_key=True)
    writer.schedule()
    return _current_request(store)


@router.put("/current/items/{item}/{index}/value", response_model=PendingRequest)
async def update_item_value(
    item: RequestItem,
    index: int,
    item_input: ItemInput,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Edit a header/cookie/query value; editing the last row appends a blank row."""
    project = require_active_project(store)
    project.update_request_item(item, index, item_input.value, is_key=False)
    writer.schedule()
    return _current_request(store)


@router.delete("/current/items/{item}/{index}", response_model=PendingRequest)
async def remove_item(
    item: RequestItem,
    index: int,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    request = _current_request(store)
    request.remove_item(item, index)
    writer.schedule()
    return request
