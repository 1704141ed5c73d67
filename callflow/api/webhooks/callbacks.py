"""Call Automation callback endpoint."""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from callflow.core.dependencies import get_event_dispatcher
from callflow.services.dispatcher import EventDispatcher

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/callbacks/{context_id}")
async def handle_callbacks(
    context_id: str,
    request: Request,
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    """
    Receive a batch of call lifecycle events.

    Always acknowledged with 200: a rejected delivery would only make the
    gateway redeliver, and the outcome cannot reach the original caller.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        logger.warning(f"[CALLBACK] Unreadable callback body - ContextId: {context_id}, Error: {e}")
        return Response(content="OK", media_type="text/plain")

    try:
        count = await dispatcher.dispatch_batch(payload)
        logger.debug(f"[CALLBACK] Dispatched {count} event(s) - ContextId: {context_id}")
    except Exception as e:
        logger.error(
            f"[CALLBACK] Error processing callback - ContextId: {context_id}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )

    # Still return OK to the gateway to avoid redelivery
    return Response(content="OK", media_type="text/plain")
