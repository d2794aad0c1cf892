"""Reconciler for auth methods."""

import logging
import posixpath
from typing import Dict

from vaultsync.reconcilers.auth_hooks import get_auth_hook
from vaultsync.reconcilers.base import BaseReconciler
from vaultsync.reconcilers.factory import register_reconciler
from vaultsync.resources.auth_method import AuthMethod

logger = logging.getLogger(__name__)

# Always-present default identity mount; never proposed for deletion
DEFAULT_TOKEN_MOUNT = ("token/", "token")


@register_reconciler("auth_methods")
class AuthMethodReconciler(BaseReconciler):
    """
    Enables/tunes auth mounts, writes auth/<path>config and runs the
    type's post-configuration hook.
    """

    def list_live(self):
        return self.client.list_auth_methods()

    def apply(self, declared: Dict[str, AuthMethod]) -> None:
        logger.info("Syncing auth methods")
        live = self.list_live()

        for path, auth_method in sorted(declared.items()):
            self.ensure_mount(
                path,
                auth_method.options,
                live,
                self.client.enable_auth_method,
                sys_prefix="sys/auth",
                label="Auth mount",
            )

            if auth_method.config is not None:
                config_path = posixpath.join("auth", path, "config")
                self.submit_write(
                    config_path, f"Auth mount config for [{config_path}]", auth_method.config
                )

            hook = get_auth_hook(auth_method.type, self)
            if hook is None:
                logger.warning(
                    f'Auth type "{auth_method.type}" not currently supported, '
                    f"skipping additional configuration for [{path}]"
                )
                continue
            logger.info(f"Running additional configuration for [{path}]")
            hook.apply(auth_method)

    def cleanup(self, declared: Dict[str, AuthMethod]) -> None:
        live = self.list_live()

        for path, mount in sorted(live.items()):
            if (path, mount.type) == DEFAULT_TOKEN_MOUNT:
                continue

            if path not in declared:
                auth_path = posixpath.join("sys/auth", path)
                self.propose_delete(auth_path, f"Auth method [{auth_path}]")
                continue

            logger.debug(f"{path} exists in configuration, no cleanup necessary")
            hook = get_auth_hook(declared[path].type, self)
            if hook is not None:
                hook.cleanup(declared[path])
