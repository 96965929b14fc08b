"""
Environment management API routes.

Provides add, select, duplicate, delete and variable editing operations
for environments. Variable edits always target the active environment.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..dependencies import get_store, get_writer, require_active_env
from ..exceptions import ResourceNotFoundError
from ..schemas.environment import (
    Environment,
    EnvironmentCreate,
    EnvironmentUpdate,
    PreviewRequest,
    PreviewResponse,
)
from ..schemas.options import SelectOption
from ..schemas.request import ItemInput
from ..services.persistence import DebouncedWriter
from ..services.store import Store
from ..services.variable_substitution import substitute


router = APIRouter(prefix="/api/environments", tags=["environments"])


# Environment endpoints

@router.get("", response_model=list[Environment])
async def list_environments(store: Store = Depends(get_store)):
    """List all environments with their variables."""
    return store.envs


@router.get("/options", response_model=list[SelectOption])
async def environment_options(store: Store = Depends(get_store)):
    return store.env_options()


@router.get("/active", response_model=Environment)
async def get_active_environment(store: Store = Depends(get_store)):
    """
    Get the active environment.

    Raises:
        NoActiveResourceError: 404 if there are no environments
    """
    return require_active_env(store)


@router.post("", response_model=Environment, status_code=status.HTTP_201_CREATED)
async def create_environment(
    environment_data: EnvironmentCreate | None = None,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Create a blank environment and select it.

    The new environment holds a single blank variable row.
    """
    name = environment_data.name if environment_data else None
    env = store.create_env(name)
    writer.schedule()
    return env


@router.patch("/active", response_model=Environment)
async def update_active_environment(
    environment_data: EnvironmentUpdate,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Update the name and/or base URL of the active environment."""
    env = require_active_env(store)

    update_data = environment_data.model_dump(exclude_unset=True)
    if "name" in update_data and update_data["name"] is not None:
        env.set_name(update_data["name"])
    if "base_url" in update_data:
        env.set_base_url(update_data["base_url"])

    writer.schedule()
    return env


@router.post("/{environment_id}/select", response_model=Environment)
async def select_environment(
    environment_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Set an environment as the active environment.

    Only one environment can be active at a time.
    """
    env = store.get_env(environment_id)
    if env is None:
        raise ResourceNotFoundError("Environment", environment_id)

    store.set_active_env(environment_id)
    writer.schedule()
    return env


@router.post("/{environment_id}/duplicate", response_model=Environment, status_code=status.HTTP_201_CREATED)
async def duplicate_environment(
    environment_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    copy = store.duplicate_env(environment_id)
    if copy is None:
        raise ResourceNotFoundError("Environment", environment_id)

    writer.schedule()
    return copy


@router.delete("/{environment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_environment(
    environment_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Delete an environment by ID.

    Projects using it as their default environment lose the pointer.
    """
    if not store.delete_env(environment_id):
        raise ResourceNotFoundError("Environment", environment_id)

    writer.schedule()
    return None


# Variable endpoints

@router.put("/active/items/{index}/key", response_model=Environment)
async def update_variable_key(
    index: int,
    item: ItemInput,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Edit a variable key; editing the last row appends a blank row."""
    env = require_active_env(store)
    env.update_item_key(index, item.value)
    writer.schedule()
    return env


@router.put("/active/items/{index}/value", response_model=Environment)
async def update_variable_value(
    index: int,
    item: ItemInput,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Edit a variable value; editing the last row appends a blank row."""
    env = require_active_env(store)
    env.update_item_value(index, item.value)
    writer.schedule()
    return env


@router.delete("/active/items/{index}", response_model=Environment)
async def delete_variable(
    index: int,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    env = require_active_env(store)
    env.remove_item(index)
    writer.schedule()
    return env


@router.post("/active/preview", response_model=PreviewResponse)
async def preview_substitution(
    preview: PreviewRequest,
    store: Store = Depends(get_store)
):
    """
    Run text through the active environment without sending anything.

    Unknown placeholders are kept and reported in ``unmatched``.
    """
    env = require_active_env(store)
    result, unmatched = substitute(preview.input, env.variables())
    return PreviewResponse(result=result, unmatched=unmatched)
