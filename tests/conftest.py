"""Shared test fixtures and configuration."""
import os
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault(
    "CONNECTION_STRING",
    "endpoint=https://test.communication.azure.com/;accesskey=dGVzdC1rZXk=",
)
os.environ.setdefault("ACS_RESOURCE_PHONE_NUMBER", "+18005550100")
os.environ.setdefault("AGENT_PHONE_NUMBER", "+18005550199")
os.environ.setdefault("CALLBACK_URI", "https://callflow.example.com")

from callflow.main import app
from callflow.core.config import Settings
from callflow.core.dependencies import get_command_issuer, get_session_store
from callflow.services.call_session.store import CallSessionStore
from callflow.services.dispatcher import EventDispatcher
from callflow.services.telephony.commands import CommandIssuer
from tests.helpers import AGENT_NUMBER, CONNECTION_ID, CUSTOMER_NUMBER


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        connection_string="endpoint=https://test.communication.azure.com/;accesskey=dGVzdC1rZXk=",
        acs_resource_phone_number="+18005550100",
        agent_phone_number=AGENT_NUMBER,
        callback_uri="https://callflow.example.com/",
        cognitive_service_endpoint="https://test.cognitiveservices.azure.com/",
    )


@pytest.fixture
def mock_call_connection():
    """Mock CallConnectionClient."""
    connection = Mock()
    connection.play_media = AsyncMock(return_value=None)
    connection.transfer_call_to_participant = AsyncMock(
        return_value=Mock(operation_context="TransferCallToAgent")
    )
    connection.hang_up = AsyncMock(return_value=None)
    return connection


@pytest.fixture
def mock_acs_client(mock_call_connection):
    """Mock async CallAutomationClient."""
    client = Mock()
    client.create_call = AsyncMock(return_value=Mock(call_connection_id=CONNECTION_ID))
    client.get_call_connection = Mock(return_value=mock_call_connection)
    return client


@pytest.fixture
def command_issuer(mock_acs_client, test_settings):
    """Command issuer backed by the mock gateway client."""
    return CommandIssuer(mock_acs_client, test_settings)


@pytest.fixture
def mock_commands():
    """Command issuer double recording every command."""
    commands = Mock(spec=CommandIssuer)
    commands.place_outbound_call = AsyncMock()
    commands.play_prompt = AsyncMock(return_value=True)
    commands.transfer_to_agent = AsyncMock()
    commands.hang_up = AsyncMock()
    return commands


@pytest.fixture
def session_store():
    """Fresh call session store."""
    return CallSessionStore()


@pytest.fixture
async def active_session(session_store, mock_call_connection):
    """A started call session."""
    return await session_store.start_session(
        connection=mock_call_connection,
        connection_id=CONNECTION_ID,
        media=mock_call_connection,
        customer_number=CUSTOMER_NUMBER,
    )


@pytest.fixture
def dispatcher(session_store, mock_commands, test_settings):
    """Dispatcher wired to the recording command issuer."""
    return EventDispatcher(session_store, mock_commands, test_settings)


@pytest.fixture
def test_client(session_store, command_issuer):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_command_issuer] = lambda: command_issuer

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()
