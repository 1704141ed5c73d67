"""Call session models."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CallSession:
    """The single in-flight call known to the process."""

    connection: Any  # CallConnectionClient used for call-level operations
    connection_id: str
    media: Any  # Handle used for playback commands
    customer_number: str
