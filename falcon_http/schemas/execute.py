"""
Pydantic schemas for request execution.

Defines the captured response of a send and the state of the send state
machine exposed to the UI.
"""

from datetime import datetime

from pydantic import BaseModel


class ResponseCookie(BaseModel):
    """A cookie set by the server."""
    name: str
    value: str | None = None
    http_only: bool = False
    expires: datetime | None = None


class ResponseCapture(BaseModel):
    """
    Schema for a captured response.

    Contains status, headers (duplicates preserved, in order), cookies, the
    body as text, timing and size information, and warnings from variable
    substitution.
    """
    status_code: int
    status_text: str
    headers: list[tuple[str, str]]
    cookies: list[ResponseCookie] = []
    body: str
    size_kb: float
    duration_ms: float
    duration: str
    warnings: list[str] = []

    def header(self, name: str) -> str | None:
        """First header value for name, case-insensitive."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None


class SendState(BaseModel):
    """
    State of the send state machine.

    ``is_sending`` is True between Sending and the terminal state. The
    last successful response is kept when a later send fails.
    """
    is_sending: bool = False
    response: ResponseCapture | None = None
    error: str | None = None
    error_type: str | None = None
