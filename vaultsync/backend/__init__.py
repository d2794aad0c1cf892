"""Backend module - the client facade and KV path handling."""
from vaultsync.backend.base import BaseBackendClient, MountInfo, SecretResponse
from vaultsync.backend.exceptions import (
    BackendError,
    MountNotFoundError,
    NotAKvMountError,
)
from vaultsync.backend.kv import KVPathAdapter
from vaultsync.backend.vault_client import VaultBackendClient

__all__ = [
    "BaseBackendClient",
    "MountInfo",
    "SecretResponse",
    "BackendError",
    "MountNotFoundError",
    "NotAKvMountError",
    "KVPathAdapter",
    "VaultBackendClient",
]
