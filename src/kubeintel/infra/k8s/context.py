"""Per-call cluster selection values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import InvalidArgumentError

ALL_NAMESPACES_TOKEN = "all"


@dataclass(frozen=True)
class ClusterContext:
    """Kubeconfig location plus the context selected within it.

    Built from caller input for a single operation and discarded when the
    operation returns. The gateway never caches it.
    """

    config_locator: Path
    context_name: str

    def __post_init__(self) -> None:
        if not str(self.config_locator).strip():
            raise InvalidArgumentError("A kubeconfig path is required")
        if not self.context_name or not self.context_name.strip():
            raise InvalidArgumentError("A context name is required")

    @classmethod
    def from_input(cls, config_locator: str | Path, context_name: str) -> ClusterContext:
        return cls(Path(config_locator).expanduser(), context_name)


@dataclass(frozen=True)
class NamespaceSelector:
    """A specific namespace, or every namespace when ``name`` is None."""

    name: str | None = None

    @classmethod
    def all(cls) -> NamespaceSelector:
        return cls(None)

    @classmethod
    def named(cls, name: str) -> NamespaceSelector:
        if not name or not name.strip():
            raise InvalidArgumentError("Namespace name must not be empty")
        return cls(name.strip())

    @classmethod
    def parse(cls, token: str | None) -> NamespaceSelector:
        """Parse a boundary token: None or "all" select every namespace."""
        if token is None or token.strip().lower() == ALL_NAMESPACES_TOKEN:
            return cls.all()
        return cls.named(token)

    @property
    def is_all(self) -> bool:
        return self.name is None

    def __str__(self) -> str:
        return self.name if self.name is not None else ALL_NAMESPACES_TOKEN
