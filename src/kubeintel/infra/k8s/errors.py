"""Error taxonomy for gateway operations.

Every failure surfaced by the gateway, the mutation operations and the
terminal launcher is a ``GatewayError`` subclass carrying a message and
optional details (usually the verbatim server or process message).
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base class for all gateway failures."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigError(GatewayError):
    """The kubeconfig could not be loaded or the context could not be selected."""


class ApiError(GatewayError):
    """The API server rejected the request or the transport failed."""

    def __init__(
        self,
        message: str,
        details: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class NotFoundError(GatewayError):
    """The requested object does not exist."""


class ConflictError(GatewayError):
    """An optimistic-concurrency precondition failed."""


class UnsupportedOperationError(GatewayError):
    """The operation is not valid for the resource type."""


class InvalidArgumentError(GatewayError):
    """Malformed caller input."""


class NoTerminalFoundError(GatewayError):
    """No terminal emulator could be found or started."""

    def __init__(self, message: str, details: str | None = None, attempt=None):
        super().__init__(message, details)
        self.attempt = attempt


class ProcessSpawnError(GatewayError):
    """A terminal process could not be spawned."""
