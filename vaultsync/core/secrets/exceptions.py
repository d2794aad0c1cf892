"""Custom exceptions for secret substitution."""

from typing import List

from vaultsync.core.exceptions import VaultSyncError


class SecretBackendError(VaultSyncError):
    """Raised when a secret backend cannot be used."""
    pass


class SecretParseError(SecretBackendError):
    """Raised when a stored secret is not a flat string map."""
    pass


class SubstitutionIncompleteError(VaultSyncError):
    """Raised when placeholders remain after substitution."""

    def __init__(self, tokens: List[str], path: str):
        self.tokens = tokens
        self.path = path
        super().__init__(
            f"The following substitutions were detected but not found in "
            f"secret path [{path}]: {', '.join(tokens)}"
        )
