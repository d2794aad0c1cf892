"""Reconciler for secrets engine mounts."""

import logging
import posixpath
from typing import Any, Dict

from vaultsync.reconcilers.aws import AwsEngineReconciler
from vaultsync.reconcilers.base import BaseReconciler, EngineReconciler
from vaultsync.reconcilers.factory import register_reconciler
from vaultsync.reconcilers.gcp import GcpEngineReconciler

logger = logging.getLogger(__name__)


@register_reconciler("secrets_engines")
class SecretsEngineReconciler(BaseReconciler):
    """
    Enables/tunes engine mounts and delegates config and children to the
    engine type's EngineReconciler.

    Only mounts of a managed type (aws, gcp) are considered for cleanup;
    other live mounts (kv, sys, identity, ...) are outside this tool's
    namespace.
    """

    ENGINE_RECONCILERS = (AwsEngineReconciler, GcpEngineReconciler)

    def __init__(self, client, pool, review):
        super().__init__(client, pool, review)
        self.engines: Dict[str, EngineReconciler] = {
            cls.engine_type: cls(self) for cls in self.ENGINE_RECONCILERS
        }

    def list_live(self):
        return self.client.list_mounts()

    def apply(self, declared: Dict[str, Any]) -> None:
        logger.info("Syncing secrets engines")
        live = self.list_live()

        for path, engine in sorted(declared.items()):
            just_enabled = self.ensure_mount(
                path,
                engine.options,
                live,
                self.client.enable_mount,
                sys_prefix="sys/mounts",
                label="Secrets engine",
            )
            self.engines[engine.type].configure(engine, just_enabled)

    def cleanup(self, declared: Dict[str, Any]) -> None:
        live = self.list_live()

        for path, mount in sorted(live.items()):
            if mount.type not in self.engines:
                continue

            if path not in declared:
                mount_path = posixpath.join("sys/mounts", path)
                self.propose_delete(mount_path, f"Secrets engine [{mount_path}]")
                continue

            logger.debug(f"{path} exists in configuration, no cleanup necessary")
            self.engines[mount.type].cleanup(declared[path])
