"""
Send state machine.

    Idle -> Sending -> Success(response) | Failed(message) -> Idle

The controller snapshots the active request and environment when a send
starts, so later edits to the store do not leak into the call in flight.
Only one call may be in flight; a second send while Sending is a no-op.
"""

from typing import Awaitable, Callable

import httpx

from ..exceptions import DispatchError
from ..logger import LOGGER
from ..schemas.environment import Environment
from ..schemas.execute import ResponseCapture, SendState
from ..schemas.request import PendingRequest
from . import http_executor
from .store import Store


log = LOGGER.getChild("dispatch")

Sender = Callable[..., Awaitable[ResponseCapture]]


class SendController:
    """Owns the in-flight flag, the last response and the last error."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sender: Sender = http_executor.send
    ):
        self.timeout = timeout
        self.transport = transport
        self.sender = sender
        self.is_sending = False
        self.response: ResponseCapture | None = None
        self.error: str | None = None
        self.error_type: str | None = None

    def state(self) -> SendState:
        return SendState(
            is_sending=self.is_sending,
            response=self.response,
            error=self.error,
            error_type=self.error_type,
        )

    def prepare(self, store: Store) -> tuple[PendingRequest, Environment, str] | None:
        """
        Snapshot what a send needs from the store.

        Returns None when there is no active project or it has no request.
        Without an active environment an empty one is used.
        """
        project = store.active()
        if project is None:
            return None
        current = project.current_request()
        if current is None:
            return None

        environment = store.active_env()
        base_url = http_executor.resolve_base_url(project, environment)
        request = current[1].model_copy(deep=True)
        environment = environment.model_copy(deep=True) if environment else Environment(items=[])
        return request, environment, base_url

    async def send(self, store: Store) -> SendState:
        """Run one send to completion unless another one is in flight."""
        if self.is_sending:
            return self.state()

        prepared = self.prepare(store)
        if prepared is None:
            self.error = "No request to send"
            self.error_type = "no_request"
            return self.state()

        request, environment, base_url = prepared
        self.is_sending = True
        try:
            response = await self.sender(
                request,
                environment,
                base_url,
                timeout=self.timeout,
                transport=self.transport,
            )
        except DispatchError as e:
            log.warning("Request failed: %s", e.message)
            self.error = e.message
            self.error_type = e.error_type
        else:
            self.response = response
            self.error = None
            self.error_type = None
        finally:
            self.is_sending = False

        return self.state()
