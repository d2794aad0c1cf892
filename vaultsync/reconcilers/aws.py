"""AWS secrets engine configuration."""

import posixpath

from vaultsync.reconcilers.base import EngineReconciler
from vaultsync.resources.aws import AwsSecretsEngine


class AwsEngineReconciler(EngineReconciler):
    """Writes config/lease, config/root (guarded) and roles/<name>."""

    engine_type = "aws"

    def configure(self, engine: AwsSecretsEngine, just_enabled: bool) -> None:
        parent = self.parent

        if engine.root_config is not None and self.writes_root_config(engine, just_enabled):
            root_path = posixpath.join(engine.path, "config/root")
            parent.submit_write(
                root_path, f"AWS root config [{root_path}]", engine.root_config.to_wire()
            )

        if engine.config_lease is not None:
            lease_path = posixpath.join(engine.path, "config/lease")
            parent.submit_write(
                lease_path, f"AWS config lease [{lease_path}]", engine.config_lease.to_wire()
            )

        for role_name, role in sorted(engine.roles.items()):
            role_path = posixpath.join(engine.path, "roles", role_name)
            parent.submit_write(role_path, f"AWS role [{role_path}]", role.to_wire())

    def cleanup(self, engine: AwsSecretsEngine) -> None:
        self.cleanup_collection(engine.path, "roles", "roles", engine.roles, "AWS role")
