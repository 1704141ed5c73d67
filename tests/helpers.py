"""Test data helpers."""

CUSTOMER_NUMBER = "+14255550123"
AGENT_NUMBER = "+18005550199"
CONNECTION_ID = "call-connection-123"


def make_event(event_type: str, **data) -> dict:
    """Build a callback envelope the way the gateway sends it."""
    return {
        "id": "event-id",
        "source": f"calling/callConnections/{CONNECTION_ID}",
        "type": f"Microsoft.Communication.{event_type}",
        "data": data,
        "time": "2026-10-18T10:00:00Z",
        "specversion": "1.0",
    }
