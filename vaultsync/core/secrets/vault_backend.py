"""Secret backend reading from the backend's own KV store."""

import logging
from typing import Any, Dict, Optional

from vaultsync.backend.base import BaseBackendClient
from vaultsync.backend.exceptions import BackendError
from vaultsync.backend.kv import KVPathAdapter
from vaultsync.core.secrets.base import SecretBackend
from vaultsync.core.secrets.exceptions import SecretParseError

logger = logging.getLogger(__name__)


class VaultKVSecretBackend(SecretBackend):
    """Reads flat secret maps from a KV v1 or v2 mount."""

    def __init__(self, client: BaseBackendClient, adapter: Optional[KVPathAdapter] = None):
        self.client = client
        self.adapter = adapter or KVPathAdapter(client)

    def get_secrets(self, path: str) -> Dict[str, str]:
        version = self.adapter.kv_version(path)
        wire_path = self.adapter.resolve_for_version(path, version)

        response = self.client.read(wire_path)
        if response is None:
            logger.debug(f"No secrets at [{wire_path}]")
            return {}

        for warning in response.warnings:
            logger.warning(f"Read secret warning: {warning}")

        data: Dict[str, Any] = response.data
        if version == 2:
            data = data.get("data") or {}

        secrets = {}
        for key, value in data.items():
            if not isinstance(value, str):
                raise SecretParseError(
                    f"Issue parsing secret [{wire_path}]: "
                    f"value for '{key}' is {type(value).__name__}, expected string"
                )
            secrets[key] = value
        return secrets

    def health_check(self) -> bool:
        try:
            self.client.list_mounts()
        except BackendError:
            return False
        return True
