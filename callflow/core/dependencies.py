"""FastAPI dependencies."""
from fastapi import Depends, Request

from callflow.core.config import settings
from callflow.services.call_session.store import CallSessionStore
from callflow.services.dispatcher import EventDispatcher
from callflow.services.telephony.commands import CommandIssuer

# Module-level session store (persists across requests)
_store = CallSessionStore()


def get_session_store() -> CallSessionStore:
    """Get the process-wide call session store."""
    return _store


def get_command_issuer(request: Request) -> CommandIssuer:
    """Get a command issuer bound to the app's Call Automation client."""
    return CommandIssuer(request.app.state.call_automation_client, settings)


def get_event_dispatcher(
    store: CallSessionStore = Depends(get_session_store),
    commands: CommandIssuer = Depends(get_command_issuer),
) -> EventDispatcher:
    """Get the callback event dispatcher."""
    return EventDispatcher(store, commands, settings)
