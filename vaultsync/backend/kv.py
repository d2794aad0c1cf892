"""KV-version aware path adapter.

KV version 1 and version 2 mounts share the "kv" type tag but are wire
incompatible: v2 expects a literal "data" segment right after the mount
name. Every KV access goes through KVPathAdapter so no caller hardcodes
the path shape.
"""

import logging

from vaultsync.backend.base import BaseBackendClient, MountInfo
from vaultsync.backend.exceptions import MountNotFoundError, NotAKvMountError

logger = logging.getLogger(__name__)

KV_TYPE = "kv"


class KVPathAdapter:
    """
    Resolves logical KV paths to wire paths.

    Usage:
        adapter = KVPathAdapter(client)
        adapter.kv_version("secret/foo")   # 1 or 2
        adapter.resolve("secret/foo")      # "secret/data/foo" on v2
    """

    def __init__(self, client: BaseBackendClient):
        self.client = client

    def _owning_mount(self, path: str) -> MountInfo:
        mount_name = path.strip("/").split("/")[0] + "/"
        mounts = self.client.list_mounts()
        if mount_name not in mounts:
            raise MountNotFoundError(
                f"Cannot determine kv version; mountpoint '{mount_name}' not found",
                path=path,
            )
        return mounts[mount_name]

    def kv_version(self, path: str) -> int:
        """
        Determine the KV protocol version of the mount owning path.

        Raises:
            MountNotFoundError: If no mount owns the path
            NotAKvMountError: If the owning mount is not a KV store
        """
        mount = self._owning_mount(path)
        if mount.type != KV_TYPE:
            raise NotAKvMountError(
                f"Cannot determine kv version; mountpoint '{mount.path}' "
                f"is not a kv secret backend (type={mount.type})",
                path=path,
            )
        if mount.options and str(mount.options.get("version")) == "2":
            return 2
        return 1

    def resolve(self, path: str) -> str:
        """Return the wire path for a logical KV path."""
        return self.resolve_for_version(path, self.kv_version(path))

    @staticmethod
    def resolve_for_version(path: str, version: int) -> str:
        if version != 2:
            return path
        parts = path.split("/")
        parts.insert(1, "data")
        resolved = "/".join(parts)
        logger.debug(f"KV v2 path: {path} -> {resolved}")
        return resolved
