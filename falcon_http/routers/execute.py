"""
Request execution API routes.

Sends the active project's current request with the active environment.
Failures do not raise: they are reported through the send state, and the
previous successful response is kept.
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_sender, get_store
from ..schemas.execute import SendState
from ..services.dispatch import SendController
from ..services.store import Store


router = APIRouter(prefix="/api/send", tags=["execute"])


@router.post("", response_model=SendState)
async def send_current_request(
    store: Store = Depends(get_store),
    sender: SendController = Depends(get_sender)
):
    """
    Send the current request and wait for the outcome.

    While another send is in flight this is a no-op that returns the
    current state with ``is_sending`` set.
    """
    return await sender.send(store)


@router.get("", response_model=SendState)
async def get_send_state(sender: SendController = Depends(get_sender)):
    """Last response, last error and whether a send is in flight."""
    return sender.state()
