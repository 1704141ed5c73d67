"""Call Automation commands used by the call flow."""
import logging
import uuid
from typing import Any, Optional

from azure.communication.callautomation import PhoneNumberIdentifier, TextSource
from azure.communication.callautomation.aio import CallAutomationClient
from azure.core.exceptions import AzureError

from callflow.core.config import Settings
from callflow.core.exceptions import ConfigurationError, ProviderError
from callflow.services.call_session.models import CallSession
from callflow.services.workflow.phases import OperationContext

logger = logging.getLogger(__name__)


def create_call_automation_client(settings: Settings) -> CallAutomationClient:
    """Build the async Call Automation client from the connection string."""
    client = CallAutomationClient.from_connection_string(settings.connection_string)
    logger.info("[COMMANDS] Initialized Call Automation client")
    return client


def build_callback_url(base_url: str) -> str:
    """Callback URL unique to one call attempt."""
    return f"{base_url.rstrip('/')}/api/callbacks/{uuid.uuid4()}"


class CommandIssuer:
    """Translates workflow intents into Call Automation requests."""

    def __init__(self, client: CallAutomationClient, settings: Settings):
        self.client = client
        self.settings = settings

    async def place_outbound_call(
        self, target_number: str, callback_url: str
    ) -> CallSession:
        """
        Dial the target number from the configured source number.

        Args:
            target_number: Customer number in E.164 format
            callback_url: Where lifecycle events for this call are delivered

        Returns:
            A populated CallSession. The caller decides when to register it.

        Raises:
            ConfigurationError: The source number is not configured
            ProviderError: The gateway rejected the request
        """
        source_number = self.settings.acs_resource_phone_number
        if not source_number:
            raise ConfigurationError("ACS_RESOURCE_PHONE_NUMBER is not set")

        logger.info(
            f"[COMMANDS] Creating outbound call - To: {target_number}, "
            f"From: {source_number}, Callback: {callback_url}"
        )
        try:
            properties = await self.client.create_call(
                PhoneNumberIdentifier(target_number),
                callback_url,
                source_caller_id_number=PhoneNumberIdentifier(source_number),
                cognitive_services_endpoint=self.settings.cognitive_service_endpoint,
            )
            connection_id = properties.call_connection_id
            connection = self.client.get_call_connection(connection_id)
        except AzureError as e:
            raise ProviderError(f"Failed to create outbound call: {e}") from e

        logger.info(f"[COMMANDS] Outbound call created - CallConnectionId: {connection_id}")
        return CallSession(
            connection=connection,
            connection_id=connection_id,
            media=connection,
            customer_number=target_number,
        )

    async def play_prompt(
        self, media: Any, text: str, context: OperationContext
    ) -> bool:
        """
        Speak text to every participant on the call.

        Playback failures are logged and swallowed; returns False when the
        request was not accepted.
        """
        play_source = TextSource(text=text, voice_name=self.settings.voice_name)
        logger.info(f"[COMMANDS] Playing text: '{text}' - Context: {context.value}")
        try:
            await media.play_media(
                play_source=play_source,
                play_to="all",
                operation_context=context.value,
            )
        except Exception as e:
            logger.error(
                f"[COMMANDS] Error playing text - Context: {context.value}, "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return False
        return True

    async def transfer_to_agent(
        self, session: CallSession, agent_number: Optional[str] = None
    ) -> Any:
        """
        Transfer the customer leg to the agent number.

        Raises:
            ProviderError: The gateway rejected the transfer request
        """
        agent_number = agent_number or self.settings.agent_phone_number
        logger.info(
            f"[COMMANDS] Initiating transfer - CallConnectionId: {session.connection_id}, "
            f"Agent: {agent_number}"
        )
        try:
            result = await session.connection.transfer_call_to_participant(
                PhoneNumberIdentifier(agent_number),
                operation_context=OperationContext.TRANSFER_CALL_TO_AGENT.value,
                transferee=PhoneNumberIdentifier(session.customer_number),
            )
        except AzureError as e:
            raise ProviderError(f"Failed to transfer call to agent: {e}") from e

        logger.info(f"[COMMANDS] Transfer call initiated - Result: {result}")
        return result

    async def hang_up(self, session: CallSession) -> None:
        """Terminate the call for everyone. Errors are logged only."""
        logger.info(f"[COMMANDS] Hanging up call {session.connection_id}")
        try:
            await session.connection.hang_up(is_for_everyone=True)
        except Exception as e:
            logger.error(
                f"[COMMANDS] Error hanging up call {session.connection_id}: "
                f"{type(e).__name__}: {str(e)}"
            )
