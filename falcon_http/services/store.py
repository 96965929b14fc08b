"""
Store: the root aggregate holding every project and environment.

Selection follows one rule for both collections: the entry flagged
``is_active`` is active, otherwise the first entry, otherwise nothing.
Selecting an entry clears the flag on all of its siblings.
"""

from typing import Any, Optional
from uuid import UUID

from ..schemas.environment import Environment
from ..schemas.options import SelectOption
from ..schemas.project import Project


class Store:
    """In-memory projects and environments, mutated on the event loop only."""

    def __init__(
        self,
        projects: Optional[list[Project]] = None,
        envs: Optional[list[Environment]] = None
    ):
        self.projects: list[Project] = projects if projects is not None else []
        self.envs: list[Environment] = envs if envs is not None else []

    @classmethod
    def with_defaults(cls) -> "Store":
        """Store used when nothing has been persisted yet."""
        return cls(projects=[Project()])

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Store":
        return cls(
            projects=[Project.model_validate(item) for item in document.get("projects") or []],
            envs=[Environment.model_validate(item) for item in document.get("envs") or []],
        )

    def snapshot(self) -> dict[str, Any]:
        """The whole store as a JSON-compatible document."""
        return {
            "projects": [project.model_dump(mode="json") for project in self.projects],
            "envs": [env.model_dump(mode="json") for env in self.envs],
        }

    # Projects

    def active(self) -> Project | None:
        for project in self.projects:
            if project.is_active:
                return project
        return self.projects[0] if self.projects else None

    def get_project(self, project_id: UUID) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def set_active(self, project_id: UUID) -> None:
        for project in self.projects:
            project.is_active = project.id == project_id

    def add(self, project: Project) -> None:
        if project.is_active:
            for other in self.projects:
                other.is_active = False
        self.projects.append(project)

    def add_project(self, name: str) -> Project:
        """Create a project with one default request and select it."""
        project = Project(name=name, is_active=True)
        self.add(project)
        return project

    def duplicate_project(self, project_id: UUID) -> Project | None:
        source = self.get_project(project_id)
        if source is None:
            return None
        copy = source.duplicate()
        self.projects.append(copy)
        return copy

    def delete_project(self, project_id: UUID) -> bool:
        before = len(self.projects)
        self.projects = [p for p in self.projects if p.id != project_id]
        return len(self.projects) != before

    def into_options(self) -> list[SelectOption]:
        return [project.to_option() for project in self.projects]

    # Environments

    def active_env(self) -> Environment | None:
        for env in self.envs:
            if env.is_active:
                return env
        return self.envs[0] if self.envs else None

    def get_env(self, env_id: UUID) -> Environment | None:
        return next((e for e in self.envs if e.id == env_id), None)

    def is_active_env(self, env_id: UUID) -> bool:
        env = self.active_env()
        return env is not None and env.id == env_id

    def set_active_env(self, env_id: UUID) -> None:
        for env in self.envs:
            env.is_active = env.id == env_id

    def add_env(self, env: Environment) -> None:
        if env.is_active:
            for other in self.envs:
                other.is_active = False
        self.envs.append(env)

    def create_env(self, name: str | None = None) -> Environment:
        """Add a blank environment and select it."""
        env = Environment() if name is None else Environment(name=name)
        self.add_env(env)
        self.set_active_env(env.id)
        return env

    def duplicate_env(self, env_id: UUID) -> Environment | None:
        source = self.get_env(env_id)
        if source is None:
            return None
        copy = source.duplicate()
        self.envs.append(copy)
        return copy

    def delete_env(self, env_id: UUID) -> bool:
        before = len(self.envs)
        self.envs = [e for e in self.envs if e.id != env_id]
        if len(self.envs) == before:
            return False
        for project in self.projects:
            if project.default_env == env_id:
                project.remove_default_env()
        return True

    def select_default_env(self, env_id: UUID | None) -> None:
        """Pin env_id on the active project; a given env also becomes active."""
        if env_id is not None:
            self.set_active_env(env_id)
        project = self.active()
        if project is None:
            return
        if env_id is None:
            project.remove_default_env()
        else:
            project.set_default_env(env_id)

    def env_options(self) -> list[SelectOption]:
        return [env.to_option() for env in self.envs]
