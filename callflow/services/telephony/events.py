"""Callback event models for Call Automation webhooks."""
import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from callflow.services.workflow.phases import OperationContext

logger = logging.getLogger(__name__)

EVENT_TYPE_PREFIX = "Microsoft.Communication."


class CallEventType(str, Enum):
    """Lifecycle event types the call flow reacts to."""

    CALL_CONNECTED = "CallConnected"
    PLAY_COMPLETED = "PlayCompleted"
    CALL_TRANSFER_ACCEPTED = "CallTransferAccepted"
    CALL_TRANSFER_FAILED = "CallTransferFailed"
    CALL_DISCONNECTED = "CallDisconnected"

    def __str__(self) -> str:
        return self.value


class ResultInformation(BaseModel):
    """Error descriptor attached to failure events."""

    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None
    code: Optional[int] = None
    subCode: Optional[int] = None


class CallbackEvent(BaseModel):
    """A single event envelope from a callback batch."""

    model_config = ConfigDict(extra="allow")

    type: str
    data: Dict[str, Any] = {}

    @property
    def short_type(self) -> str:
        """Event type with the provider namespace removed."""
        if self.type.startswith(EVENT_TYPE_PREFIX):
            return self.type[len(EVENT_TYPE_PREFIX):]
        return self.type

    @property
    def event_type(self) -> Optional[CallEventType]:
        """The known event type, or None for types the flow does not handle."""
        try:
            return CallEventType(self.short_type)
        except ValueError:
            return None

    @property
    def raw_operation_context(self) -> Optional[str]:
        return self.data.get("operationContext")

    @property
    def operation_context(self) -> Optional[OperationContext]:
        return OperationContext.parse(self.raw_operation_context)

    @property
    def call_connection_id(self) -> Optional[str]:
        return self.data.get("callConnectionId")

    @property
    def result_information(self) -> Optional[ResultInformation]:
        info = self.data.get("resultInformation")
        if not isinstance(info, dict):
            return None
        try:
            return ResultInformation.model_validate(info)
        except ValidationError as e:
            logger.warning(f"[EVENTS] Unreadable resultInformation {info}: {e}")
            return None
