"""Abstract base class for secret backends."""

from abc import ABC, abstractmethod
from typing import Dict


class SecretBackend(ABC):
    """
    Abstract base class that all secret backends must implement.

    A backend hands back every secret stored under one logical path as a
    flat {key: value} map.
    """

    @abstractmethod
    def get_secrets(self, path: str) -> Dict[str, str]:
        """
        Retrieve all secrets stored at a path.

        Args:
            path: Logical secret path (e.g. "secret/vaultsync/auth_methods/github")

        Returns:
            Flat map of secret names to string values; empty if the path
            does not exist

        Raises:
            SecretParseError: If a stored value is not a string
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """
        Check if backend is accessible.

        Returns:
            True if healthy, False otherwise
        """
        pass
