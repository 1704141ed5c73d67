"""In-memory store for the active call session."""
import asyncio
import logging
from typing import Any, Optional

from callflow.core.exceptions import NoActiveSession
from callflow.services.call_session.models import CallSession
from callflow.services.workflow.phases import WorkflowPhase

logger = logging.getLogger(__name__)


class CallSessionStore:
    """
    Holds the one active call session and its workflow phase.

    Only one call is tracked at a time: starting a new session replaces the
    previous one. ``lock`` guards reads and writes across concurrent
    requests; ``start_session`` takes it itself, other callers hold it around
    their own read/modify sequences.
    """

    def __init__(self):
        self._session: Optional[CallSession] = None
        self._phase = WorkflowPhase.IDLE
        self.lock = asyncio.Lock()

    async def start_session(
        self,
        connection: Any,
        connection_id: str,
        media: Any,
        customer_number: str,
    ) -> CallSession:
        """Replace the current session with a new one."""
        session = CallSession(
            connection=connection,
            connection_id=connection_id,
            media=media,
            customer_number=customer_number,
        )
        async with self.lock:
            if self._session is not None:
                logger.info(
                    f"[SESSION STORE] Replacing session {self._session.connection_id} "
                    f"with {connection_id}"
                )
            self._session = session
            self._phase = WorkflowPhase.CONNECTING
        return session

    async def register(self, session: CallSession) -> CallSession:
        """Make an already built session the active one."""
        return await self.start_session(
            session.connection,
            session.connection_id,
            session.media,
            session.customer_number,
        )

    def current_session(self) -> CallSession:
        """Return the active session or raise NoActiveSession."""
        if self._session is None:
            raise NoActiveSession()
        return self._session

    def has_session(self) -> bool:
        return self._session is not None

    @property
    def phase(self) -> WorkflowPhase:
        return self._phase

    def set_phase(self, phase: WorkflowPhase) -> None:
        self._phase = phase

    def clear(self) -> None:
        """Forget the active session."""
        self._session = None
        self._phase = WorkflowPhase.IDLE
