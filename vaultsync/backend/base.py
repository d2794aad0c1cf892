"""Abstract base class for backend clients."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vaultsync.resources.base import EnableOptions


@dataclass(frozen=True)
class MountInfo:
    """
    One live mount as reported by the backend.

    Attributes:
        path: Mount path with trailing slash (e.g. "aws/")
        type: Backend type tag (e.g. "aws", "kv", "userpass")
        description: Free-form mount description
        options: Mount options (e.g. {"version": "2"} for KV v2)
    """
    path: str
    type: str
    description: str = ""
    options: Optional[Dict[str, Any]] = None

    @classmethod
    def from_listing(cls, path: str, entry: Dict[str, Any]) -> "MountInfo":
        return cls(
            path=path,
            type=entry.get("type", ""),
            description=entry.get("description") or "",
            options=entry.get("options"),
        )


@dataclass
class SecretResponse:
    """
    Result of a read or write call.

    Attributes:
        data: The response "data" payload
        warnings: Warnings returned by the backend
    """
    data: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


class BaseBackendClient(ABC):
    """
    Abstract base class that all backend clients must implement.

    One logical operation per call. Implementations raise BackendError on
    failure and return None from read/list when the path does not exist.
    """

    @abstractmethod
    def read(self, path: str) -> Optional[SecretResponse]:
        """Read a path. Returns None if nothing exists there."""
        pass

    @abstractmethod
    def write(self, path: str, data: Optional[Dict[str, Any]] = None) -> Optional[SecretResponse]:
        """Write data to a path. Returns the response payload, if any."""
        pass

    @abstractmethod
    def list(self, path: str) -> Optional[List[str]]:
        """List keys under a path. Returns None if nothing exists there."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete a path."""
        pass

    @abstractmethod
    def list_mounts(self) -> Dict[str, MountInfo]:
        """Return live secrets engine mounts keyed by path."""
        pass

    @abstractmethod
    def list_auth_methods(self) -> Dict[str, MountInfo]:
        """Return live auth method mounts keyed by path."""
        pass

    @abstractmethod
    def enable_mount(self, path: str, options: EnableOptions) -> None:
        """Enable a secrets engine at path."""
        pass

    @abstractmethod
    def enable_auth_method(self, path: str, options: EnableOptions) -> None:
        """Enable an auth method at path."""
        pass
