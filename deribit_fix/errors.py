"""Exception hierarchy for the FIX client."""

from __future__ import annotations


class DeribitFixError(Exception):
    """Base class of every error raised by the FIX client."""

    label = "Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class FixConnectionError(DeribitFixError):
    """The connection could not be made or is not usable."""

    label = "Connection error"


class AuthenticationError(DeribitFixError):
    """The server refused the credentials."""

    label = "Authentication error"


class MessageParsingError(DeribitFixError):
    """A received message could not be parsed."""

    label = "Message parsing error"


class MessageConstructionError(DeribitFixError):
    """A message could not be built."""

    label = "Message construction error"


class SessionError(DeribitFixError):
    """The session is in the wrong state for the request."""

    label = "Session error"


class ConfigError(DeribitFixError):
    """The configuration is invalid."""

    label = "Configuration error"


class FixTimeoutError(DeribitFixError):
    """An operation did not finish in time."""

    label = "Timeout error"


class ProtocolError(DeribitFixError):
    """The peer broke the FIX protocol."""

    label = "Protocol error"


class GenericError(DeribitFixError):
    """Any other failure."""

    label = "Error"


class _WrappingError(DeribitFixError):
    """An error that carries the lower-level exception that caused it."""

    def __init__(self, error: BaseException | str) -> None:
        if isinstance(error, BaseException):
            super().__init__(str(error))
            self.error: BaseException | None = error
            self.__cause__ = error
        else:
            super().__init__(error)
            self.error = None


class FixIOError(_WrappingError):
    """A network read or write failed."""

    label = "I/O error"


class JsonError(_WrappingError):
    """JSON encoding or decoding failed."""

    label = "JSON error"