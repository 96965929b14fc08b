"""
Project management API routes.

Provides add, select, duplicate, delete and edit operations for projects.
Every mutation schedules a debounced store write.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..dependencies import get_store, get_writer, require_active_project
from ..exceptions import ResourceNotFoundError
from ..schemas.options import SelectOption
from ..schemas.project import DefaultEnvSelect, Project, ProjectCreate, ProjectUpdate
from ..services.persistence import DebouncedWriter
from ..services.store import Store


router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(store: Store = Depends(get_store)):
    """List all projects with their requests."""
    return store.projects


@router.get("/options", response_model=list[SelectOption])
async def project_options(store: Store = Depends(get_store)):
    """Project id/name pairs for pick lists."""
    return store.into_options()


@router.get("/active", response_model=Project)
async def get_active_project(store: Store = Depends(get_store)):
    """
    Get the active project.

    The project flagged active wins, otherwise the first project.

    Raises:
        NoActiveResourceError: 404 if the store has no projects
    """
    return require_active_project(store)


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Create a new project and select it.

    The project starts with a "root" folder holding one default request.
    """
    project = store.add_project(project_data.name)
    writer.schedule()
    return project


@router.patch("/active", response_model=Project)
async def update_active_project(
    project_data: ProjectUpdate,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Update the name and/or legacy base URL of the active project."""
    project = require_active_project(store)

    update_data = project_data.model_dump(exclude_unset=True)
    if update_data.get("name") is not None:
        project.name = update_data["name"]
    if "base_url" in update_data:
        project.base_url = update_data["base_url"]

    writer.schedule()
    return project


@router.put("/active/default-env", response_model=Project)
async def select_default_env(
    selection: DefaultEnvSelect,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """
    Pin an environment as the active project's default.

    The chosen environment also becomes the active environment. A null
    env_id clears the pointer.
    """
    project = require_active_project(store)
    if selection.env_id is not None and store.get_env(selection.env_id) is None:
        raise ResourceNotFoundError("Environment", selection.env_id)

    store.select_default_env(selection.env_id)
    writer.schedule()
    return project


@router.post("/{project_id}/select", response_model=Project)
async def select_project(
    project_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Make a project the active one, clearing the flag on all others."""
    project = store.get_project(project_id)
    if project is None:
        raise ResourceNotFoundError("Project", project_id)

    store.set_active(project_id)
    writer.schedule()
    return project


@router.post("/{project_id}/duplicate", response_model=Project, status_code=status.HTTP_201_CREATED)
async def duplicate_project(
    project_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Copy a project, requests included, under a fresh id."""
    copy = store.duplicate_project(project_id)
    if copy is None:
        raise ResourceNotFoundError("Project", project_id)

    writer.schedule()
    return copy


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    store: Store = Depends(get_store),
    writer: DebouncedWriter = Depends(get_writer)
):
    """Delete a project and every request it owns."""
    if not store.delete_project(project_id):
        raise ResourceNotFoundError("Project", project_id)

    writer.schedule()
    return None
