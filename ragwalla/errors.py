"""Exception hierarchy for the Ragwalla client."""


class RagwallaError(Exception):
    """Base class for all client errors."""


class ConfigurationError(RagwallaError, ValueError):
    """Invalid endpoint, missing credentials or connect parameters."""


class PreconditionError(RagwallaError):
    """A call was made whose preconditions do not hold."""


class NotConnectedError(PreconditionError):
    """An outbound call was made while the session is not open."""

    def __init__(self, message: str = "WebSocket is not connected"):
        super().__init__(message)


class ConnectionFailedError(RagwallaError):
    """The transport failed before the channel was established."""


class RagwallaAPIError(RagwallaError):
    """Error response returned by the REST API."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        type: str | None = None,
        code: str | None = None,
        param: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.type = type or "api_error"
        self.code = code
        self.param = param

    def __repr__(self) -> str:
        return (
            f"RagwallaAPIError(message={self.message!r}, status={self.status}, "
            f"type={self.type!r}, code={self.code!r})"
        )
