"""Secrets module - placeholder substitution backed by the KV store."""

from vaultsync.core.secrets.exceptions import (
    SecretBackendError,
    SecretParseError,
    SubstitutionIncompleteError,
)
from vaultsync.core.secrets.base import SecretBackend
from vaultsync.core.secrets.vault_backend import VaultKVSecretBackend
from vaultsync.core.secrets.resolver import SecretResolver, PLACEHOLDER_PATTERN

__all__ = [
    "SecretBackendError",
    "SecretParseError",
    "SubstitutionIncompleteError",
    "SecretBackend",
    "VaultKVSecretBackend",
    "SecretResolver",
    "PLACEHOLDER_PATTERN",
]
