"""
FastAPI dependencies giving routers access to the application state.

The store, writer and send controller are created by ``create_app`` and
live on ``app.state``.
"""

from fastapi import Request

from .exceptions import NoActiveResourceError
from .schemas.environment import Environment
from .schemas.project import Project
from .services.dispatch import SendController
from .services.persistence import DebouncedWriter
from .services.store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_writer(request: Request) -> DebouncedWriter:
    return request.app.state.writer


def get_sender(request: Request) -> SendController:
    return request.app.state.sender


def require_active_project(store: Store) -> Project:
    project = store.active()
    if project is None:
        raise NoActiveResourceError("project")
    return project


def require_active_env(store: Store) -> Environment:
    env = store.active_env()
    if env is None:
        raise NoActiveResourceError("environment")
    return env
