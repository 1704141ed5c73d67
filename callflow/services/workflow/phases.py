"""Workflow phase and operation context enumerations."""
from enum import Enum
from typing import Optional


class WorkflowPhase(str, Enum):
    """Phases of the connect, greet, transfer workflow."""

    IDLE = "idle"  # No call placed yet
    CONNECTING = "connecting"  # Outbound call created, waiting for answer
    GREETING = "greeting"  # Greeting prompt issued
    TRANSFERRING = "transferring"  # Transfer to agent requested
    TRANSFERRED = "transferred"  # Agent leg accepted the transfer
    TRANSFER_FAILED_PROMPT = "transfer_failed_prompt"  # Apology prompt issued
    TERMINATED = "terminated"  # Call hung up or disconnected

    def __str__(self) -> str:
        """Return the string value of the phase."""
        return self.value


class OperationContext(str, Enum):
    """Tags attached to outbound commands and echoed back on completion events."""

    GREETING = "Greeting"
    TRANSFER_FAILED = "TransferFailed"
    TRANSFER_CALL_TO_AGENT = "TransferCallToAgent"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["OperationContext"]:
        """Map a raw context string to a known context, or None."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None
