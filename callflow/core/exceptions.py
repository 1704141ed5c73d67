"""Call flow error taxonomy."""


class CallFlowError(Exception):
    """Base class for call flow errors."""


class ConfigurationError(CallFlowError):
    """A required setting is missing; fatal to the operation, not the process."""


class ProviderError(CallFlowError):
    """The communications gateway rejected or failed a command."""


class NoActiveSession(CallFlowError):
    """An event or command needs a call session but none has been started."""

    def __init__(self, message: str = "No outbound call has been started"):
        super().__init__(message)
