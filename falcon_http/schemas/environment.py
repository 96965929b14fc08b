"""
Pydantic schemas for environments.

An environment is a named bag of variables plus an optional base URL.
Variables are kept as ordered (key, value) pairs; keys need not be unique
and the last pair is the blank "add new" row.
"""

from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ..services.variable_substitution import replace_variables, variables_from_pairs
from .options import SelectOption
from .request import Pair, blank_pairs, remove_pair, update_pair


class Environment(BaseModel):
    """
    A named set of substitution variables.

    Attributes:
        id: Unique identifier for the environment
        name: Human-readable name for the environment
        is_active: Whether this environment is the selected one
        base_url: Optional base URL for requests using the base URL sentinel
        items: Ordered variable pairs
    """
    id: UUID = Field(default_factory=uuid4)
    name: str = "Default env"
    is_active: bool = False
    base_url: str | None = None
    items: list[Pair] = Field(default_factory=blank_pairs)

    def __str__(self) -> str:
        return self.name

    def update_item_key(self, index: int, key: str) -> None:
        update_pair(self.items, index, key=key)

    def update_item_value(self, index: int, value: str) -> None:
        update_pair(self.items, index, value=value)

    def remove_item(self, index: int) -> None:
        remove_pair(self.items, index)

    def add_item(self, key: str, value: str) -> None:
        self.items.append((key, value))

    def set_name(self, name: str) -> None:
        self.name = name

    def set_base_url(self, base_url: str | None) -> None:
        self.base_url = base_url

    def variables(self) -> dict[str, str]:
        return variables_from_pairs(self.items)

    def replace_variables(self, template: str) -> str:
        """Resolve every known {{KEY}} / {{KEY[args]}} placeholder in template."""
        return replace_variables(template, self.variables())

    def duplicate(self) -> "Environment":
        """Independent copy with a fresh id; the copy is never active."""
        return self.model_copy(deep=True, update={"id": uuid4(), "is_active": False})

    def to_option(self) -> SelectOption:
        return SelectOption(label=self.name, value=str(self.id))


# API input schemas

class EnvironmentCreate(BaseModel):
    """Schema for creating a new environment."""
    name: str | None = None


class EnvironmentUpdate(BaseModel):
    """Schema for updating the active environment. All fields are optional."""
    name: str | None = None
    base_url: str | None = None


class PreviewRequest(BaseModel):
    """Text to run through the active environment."""
    input: str


class PreviewResponse(BaseModel):
    result: str
    unmatched: list[str] = []
