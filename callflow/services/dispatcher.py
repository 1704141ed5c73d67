"""Callback event dispatcher driving the call workflow."""
import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from callflow.core.config import Settings
from callflow.core.exceptions import NoActiveSession, ProviderError
from callflow.services.call_session.models import CallSession
from callflow.services.call_session.store import CallSessionStore
from callflow.services.telephony.commands import CommandIssuer
from callflow.services.telephony.events import CallbackEvent, CallEventType
from callflow.services.workflow.constants import GREETING_PROMPT, TRANSFER_FAILED_PROMPT
from callflow.services.workflow.phases import OperationContext
from callflow.services.workflow.transitions import log_transition, next_phase

logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    Reacts to Call Automation callbacks.

    Each inbound event triggers at most one outbound command. The dispatcher
    never raises: every failure is logged so the webhook can always be
    acknowledged.
    """

    def __init__(
        self,
        store: CallSessionStore,
        commands: CommandIssuer,
        settings: Settings,
    ):
        self.store = store
        self.commands = commands
        self.settings = settings

    async def dispatch_batch(self, payload: Any) -> int:
        """
        Dispatch every event of a callback batch in order.

        Returns:
            Number of envelopes that parsed and were dispatched
        """
        envelopes = payload if isinstance(payload, list) else [payload]
        dispatched = 0
        for raw in envelopes:
            event = self._parse(raw)
            if event is None:
                continue
            await self.dispatch(event)
            dispatched += 1
        return dispatched

    async def dispatch(self, event: CallbackEvent) -> None:
        """Handle a single event. Never raises."""
        logger.info(
            f"[DISPATCHER] Received callback event - Type: {event.type}, "
            f"Data: {json.dumps(event.data, default=str)}"
        )
        try:
            async with self.store.lock:
                await self._handle(event)
        except NoActiveSession as e:
            logger.warning(f"[DISPATCHER] Ignoring {event.short_type}: {e}")
        except Exception as e:
            logger.error(
                f"[DISPATCHER] Error handling {event.short_type} - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )

    async def _handle(self, event: CallbackEvent) -> None:
        event_type = event.event_type
        if event_type is None:
            logger.warning(f"[DISPATCHER] Unhandled event type: {event.type}")
            return

        if self._is_stale(event):
            return

        context = event.operation_context

        if event_type == CallEventType.CALL_CONNECTED:
            logger.info("[DISPATCHER] Received CallConnected event")
            session = self.store.current_session()
            await self.commands.play_prompt(
                session.media, GREETING_PROMPT, OperationContext.GREETING
            )

        elif event_type == CallEventType.PLAY_COMPLETED:
            logger.info(
                f"[DISPATCHER] Play completed event received - "
                f"Context: {event.raw_operation_context}"
            )
            if context == OperationContext.GREETING:
                await self._transfer(self.store.current_session())
            elif context == OperationContext.TRANSFER_FAILED:
                await self.commands.hang_up(self.store.current_session())
            else:
                logger.info("[DISPATCHER] No follow-up for this play context")
                return

        elif event_type == CallEventType.CALL_TRANSFER_ACCEPTED:
            logger.info("[DISPATCHER] Call transfer accepted event received")

        elif event_type == CallEventType.CALL_TRANSFER_FAILED:
            info = event.result_information
            logger.warning(
                "[DISPATCHER] Encountered error during call transfer, "
                f"message={info.message if info else None}, "
                f"code={info.code if info else None}, "
                f"subCode={info.subCode if info else None}"
            )
            session = self.store.current_session()
            await self.commands.play_prompt(
                session.media, TRANSFER_FAILED_PROMPT, OperationContext.TRANSFER_FAILED
            )

        elif event_type == CallEventType.CALL_DISCONNECTED:
            logger.info("[DISPATCHER] Received CallDisconnected event")

        self._advance(event_type, context)

    async def _transfer(self, session: CallSession) -> None:
        try:
            await self.commands.transfer_to_agent(session, self.settings.agent_phone_number)
        except ProviderError as e:
            # A CallTransferFailed event normally follows a rejected transfer.
            logger.error(f"[DISPATCHER] Transfer request failed: {e}")

    def _advance(
        self, event_type: CallEventType, context: Optional[OperationContext]
    ) -> None:
        if not self.store.has_session():
            return
        current = self.store.phase
        target = next_phase(current, event_type, context)
        log_transition(current, target)
        self.store.set_phase(target)

    def _is_stale(self, event: CallbackEvent) -> bool:
        """Whether the event belongs to a call other than the active one."""
        event_connection_id = event.call_connection_id
        if not event_connection_id or not self.store.has_session():
            return False
        active_id = self.store.current_session().connection_id
        if event_connection_id != active_id:
            logger.warning(
                f"[DISPATCHER] Ignoring {event.short_type} for stale call "
                f"{event_connection_id} (active: {active_id})"
            )
            return True
        return False

    @staticmethod
    def _parse(raw: Any) -> Optional[CallbackEvent]:
        try:
            return CallbackEvent.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"[DISPATCHER] Skipping malformed callback envelope: {e}")
            return None
