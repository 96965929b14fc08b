"""Label/value pairs the UI feeds into pick lists."""

from pydantic import BaseModel


class SelectOption(BaseModel):
    label: str
    value: str
