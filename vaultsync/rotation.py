"""Root credential rotation for cloud-credential secrets engines."""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Dict

from vaultsync.backend.base import BaseBackendClient
from vaultsync.backend.exceptions import BackendError

logger = logging.getLogger(__name__)

# Rotation-capable engine type -> response field naming the new key
ROTATION_KEY_FIELDS = {
    "aws": "access_key",
    "gcp": "private_key_id",
}


@dataclass
class RotationReport:
    """
    Per-mount outcome of a rotation run.

    Attributes:
        succeeded: Mount path -> new key identity
        failed: Mount path -> error message
    """
    succeeded: Dict[str, str] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)


class RotationJob:
    """
    Rotates root credentials of every live aws/gcp mount.

    Best effort: a failing mount is logged and the job moves on.

    Usage:
        report = RotationJob(client).run()
    """

    def __init__(self, client: BaseBackendClient):
        self.client = client

    def run(self) -> RotationReport:
        report = RotationReport()

        for path, mount in sorted(self.client.list_mounts().items()):
            key_field = ROTATION_KEY_FIELDS.get(mount.type)
            if key_field is None:
                continue

            rotate_path = posixpath.join(path, "config/rotate-root")
            try:
                response = self.client.write(rotate_path)
            except BackendError as e:
                logger.warning(f"Cannot rotate [{path}] {e}")
                report.failed[path] = str(e)
                continue

            key_id = str((response.data if response else {}).get(key_field, ""))
            logger.info(f"Rotated key for [{path}]. New {key_field.replace('_', ' ')}: {key_id}")
            report.succeeded[path] = key_id

        logger.info(
            f"Rotation finished: {len(report.succeeded)} succeeded, {len(report.failed)} failed"
        )
        return report
