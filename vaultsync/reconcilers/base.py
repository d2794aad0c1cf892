"""Abstract base classes for reconcilers."""

import logging
import posixpath
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from vaultsync.backend.base import BaseBackendClient, MountInfo
from vaultsync.reconcilers.exceptions import MountTypeMismatchError
from vaultsync.resources.base import EnableOptions
from vaultsync.tasks.models import DeleteTask, WriteTask
from vaultsync.tasks.pool import WritePool
from vaultsync.tasks.review import DeleteReviewQueue

logger = logging.getLogger(__name__)


class BaseReconciler(ABC):
    """
    Abstract base class that all reconcilers must implement.

    A reconciler runs in two phases for its resource kind:
    - apply(): enable or tune mounts synchronously, queue config writes
    - cleanup(): after the write barrier, re-list live state and queue
      deletion of everything live that is no longer declared

    Live state is fetched fresh in each phase and never carried over.
    """

    def __init__(
        self,
        client: BaseBackendClient,
        pool: WritePool,
        review: DeleteReviewQueue,
    ):
        self.client = client
        self.pool = pool
        self.review = review
        self.enabled: List[str] = []
        self.writes_submitted = 0
        self.deletes_proposed: List[str] = []

    @abstractmethod
    def list_live(self) -> Dict[str, MountInfo]:
        """Fetch the live mounts of this kind."""
        pass

    @abstractmethod
    def apply(self, declared: Dict[str, Any]) -> None:
        """Converge live state towards the declared descriptors."""
        pass

    @abstractmethod
    def cleanup(self, declared: Dict[str, Any]) -> None:
        """Propose deletion of live resources missing from declared."""
        pass

    def verify(self, declared: Dict[str, Any]) -> None:
        """
        Check declared mount types against live state without mutating it.

        Raises:
            MountTypeMismatchError: If a declared path is live with another type
        """
        live = self.list_live()
        for path, resource in sorted(declared.items()):
            live_mount = live.get(path)
            if live_mount is not None and live_mount.type != resource.options.type:
                raise MountTypeMismatchError(path, live_mount.type, resource.options.type)

    def submit_write(self, path: str, description: str, data: Dict[str, Any]) -> None:
        self.pool.submit(WriteTask(path=path, description=description, data=data))
        self.writes_submitted += 1

    def propose_delete(self, path: str, description: str) -> None:
        self.review.put(DeleteTask(path=path, description=description))
        self.deletes_proposed.append(path)

    def ensure_mount(
        self,
        path: str,
        options: EnableOptions,
        live: Dict[str, MountInfo],
        enable: Callable[[str, EnableOptions], None],
        sys_prefix: str,
        label: str,
    ) -> bool:
        """
        Enable a missing mount or queue a tune for an existing one.

        Args:
            path: Declared mount path
            options: Declared enable/tune options
            live: Live mounts snapshot for this phase
            enable: Backend call enabling this kind of mount
            sys_prefix: "sys/auth" or "sys/mounts"
            label: Human readable kind used in logs

        Returns:
            True if the mount was enabled by this call

        Raises:
            MountTypeMismatchError: If the path is live with another type
        """
        live_mount = live.get(path)
        if live_mount is None:
            logger.debug(f"{label} path {path} is not enabled, enabling")
            enable(path, options)
            logger.info(f"{label} enabled: {path} {options.type}")
            self.enabled.append(path)
            return True

        if live_mount.type != options.type:
            raise MountTypeMismatchError(path, live_mount.type, options.type)

        tune_path = posixpath.join(sys_prefix, path, "tune")
        self.submit_write(
            tune_path, f"{label} tune for [{tune_path}]", options.tune_payload()
        )
        return False


class EngineReconciler(ABC):
    """
    Type-specific half of secrets engine reconciliation.

    The owning reconciler handles the mount itself; subclasses handle
    config blocks and child collections (roles, role-sets).
    """

    #: Backend type tag handled by this class
    engine_type: str = ""

    def __init__(self, parent: BaseReconciler):
        self.parent = parent

    @property
    def client(self) -> BaseBackendClient:
        return self.parent.client

    @abstractmethod
    def configure(self, engine: Any, just_enabled: bool) -> None:
        """Queue config and child writes for one declared engine."""
        pass

    @abstractmethod
    def cleanup(self, engine: Any) -> None:
        """Propose deletion of live children missing from the declaration."""
        pass

    def writes_root_config(self, engine: Any, just_enabled: bool) -> bool:
        """
        Root credentials are written only on first enable or when forced,
        so credentials rotated on the backend are not clobbered.
        """
        if just_enabled or engine.overwrite_root_config:
            logger.debug(
                f"Writing root config for [{engine.path}]. JustEnabled={just_enabled}, "
                f"OverwriteRootCredentials={engine.overwrite_root_config}"
            )
            return True
        logger.debug(f"Root config exists for [{engine.path}], skipping...")
        return False

    def cleanup_collection(
        self, engine_path: str, list_segment: str, item_segment: str,
        declared: Dict[str, Any], label: str,
    ) -> None:
        existing = self.client.list(posixpath.join(engine_path, list_segment)) or []
        for name in existing:
            item_path = posixpath.join(engine_path, item_segment, name)
            if name in declared:
                logger.debug(f"[{item_path}] exists in configuration, no cleanup necessary")
            else:
                self.parent.propose_delete(item_path, f"{label} [{item_path}]")
