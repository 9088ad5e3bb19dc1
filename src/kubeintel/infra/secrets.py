"""Secret storage keyed by name within a service namespace.

Used for credentials the CLI needs to keep between runs (e.g. tokens for
clusters whose kubeconfig delegates to an external credential). Values are
opaque strings.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing_extensions import override

import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from loguru import logger

from kubeintel.infra.k8s.errors import GatewayError, InvalidArgumentError, NotFoundError

DEFAULT_SECRET_SERVICE = "io.kubeintel"


class SecretStoreError(GatewayError):
    """The OS credential store rejected or failed an operation."""


class SecretStore(ABC):
    """Abstract interface for secret storage backends."""

    def __init__(self, service: str = DEFAULT_SECRET_SERVICE) -> None:
        if not service or not service.strip():
            raise InvalidArgumentError("A secret service name is required")
        self.service = service

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        pass

    @abstractmethod
    def get(self, key: str) -> str:
        """Retrieve the value stored under ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``.

        Raises:
            NotFoundError: If nothing is stored under ``key``
        """
        pass


class KeyringSecretStore(SecretStore):
    """Secrets kept in the OS credential store via ``keyring``."""

    @override
    def put(self, key: str, value: str) -> None:
        _require_key(key)
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise SecretStoreError(f"Failed to store secret '{key}'", details=str(e)) from e
        logger.debug(f"Stored secret '{key}' in {self.service}")

    @override
    def get(self, key: str) -> str:
        _require_key(key)
        try:
            value = keyring.get_password(self.service, key)
        except KeyringError as e:
            raise SecretStoreError(f"Failed to read secret '{key}'", details=str(e)) from e
        if value is None:
            raise NotFoundError(f"No secret '{key}' in {self.service}")
        return value

    @override
    def delete(self, key: str) -> None:
        _require_key(key)
        try:
            keyring.delete_password(self.service, key)
        except PasswordDeleteError as e:
            raise NotFoundError(f"No secret '{key}' in {self.service}") from e
        except KeyringError as e:
            raise SecretStoreError(f"Failed to delete secret '{key}'", details=str(e)) from e
        logger.debug(f"Deleted secret '{key}' from {self.service}")


class InMemorySecretStore(SecretStore):
    """Process-local secret store for tests and headless environments."""

    def __init__(self, service: str = DEFAULT_SECRET_SERVICE) -> None:
        super().__init__(service)
        self._data: dict[str, str] = {}

    @override
    def put(self, key: str, value: str) -> None:
        _require_key(key)
        self._data[key] = value

    @override
    def get(self, key: str) -> str:
        _require_key(key)
        if key not in self._data:
            raise NotFoundError(f"No secret '{key}' in {self.service}")
        return self._data[key]

    @override
    def delete(self, key: str) -> None:
        _require_key(key)
        if self._data.pop(key, None) is None:
            raise NotFoundError(f"No secret '{key}' in {self.service}")


def _require_key(key: str) -> None:
    if not key or not key.strip():
        raise InvalidArgumentError("A secret key is required")
