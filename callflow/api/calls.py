"""Outbound call endpoint."""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from callflow.core.config import settings
from callflow.core.dependencies import get_command_issuer, get_session_store
from callflow.core.exceptions import ConfigurationError, ProviderError
from callflow.services.call_session.store import CallSessionStore
from callflow.services.telephony.commands import CommandIssuer, build_callback_url

router = APIRouter()
logger = logging.getLogger(__name__)


class OutboundCallRequest(BaseModel):
    """Outbound call request body."""
    phoneNumber: Optional[Any] = None
    message: Optional[Any] = None


@router.post("/api/outboundCall")
async def create_outbound_call(
    call_request: Optional[OutboundCallRequest] = None,
    commands: CommandIssuer = Depends(get_command_issuer),
    store: CallSessionStore = Depends(get_session_store),
):
    """
    Place an outbound call to the given number.

    The call is greeted and transferred to the agent once the callee answers.
    """
    phone_number = call_request.phoneNumber if call_request else None
    if not isinstance(phone_number, str) or not phone_number.strip():
        logger.warning("[OUTBOUND CALL] Rejected request without a target phone number")
        return JSONResponse(
            status_code=400, content={"error": "Target phone number is required"}
        )

    if call_request.message:
        logger.info(f"[OUTBOUND CALL] Request message: {call_request.message}")

    callback_url = build_callback_url(settings.callback_uri)
    logger.info(
        f"[OUTBOUND CALL] Initiating call - To: {phone_number}, "
        f"Callback: {callback_url}"
    )

    try:
        session = await commands.place_outbound_call(phone_number, callback_url)
        await store.register(session)
    except (ConfigurationError, ProviderError) as e:
        logger.error(
            f"[OUTBOUND CALL] Error creating outbound call - To: {phone_number}, "
            f"Error: {type(e).__name__}: {str(e)}"
        )
        return JSONResponse(
            status_code=500, content={"error": "Failed to create outbound call"}
        )
    except Exception as e:
        logger.error(
            f"[OUTBOUND CALL] Error in outbound call endpoint - "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    logger.info(
        f"[OUTBOUND CALL] Outbound call initiated - CallConnectionId: {session.connection_id}"
    )
    return {
        "message": "Outbound call initiated successfully",
        "callId": session.connection_id,
    }
