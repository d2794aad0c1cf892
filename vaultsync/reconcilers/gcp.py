"""GCP secrets engine configuration."""

import posixpath

from vaultsync.reconcilers.base import EngineReconciler
from vaultsync.resources.gcp import GcpSecretsEngine


class GcpEngineReconciler(EngineReconciler):
    """
    Writes <path>config and roleset/<name>.

    Lease settings and credentials share the config endpoint, so they go
    out as a single write; credentials are only included on first enable
    or when overwrite_root_config is set.
    """

    engine_type = "gcp"

    def configure(self, engine: GcpSecretsEngine, just_enabled: bool) -> None:
        parent = self.parent
        config_path = posixpath.join(engine.path, "config")

        payload = engine.config_lease.to_wire() if engine.config_lease else {}
        if engine.root_config is not None and self.writes_root_config(engine, just_enabled):
            payload.update(engine.root_config.to_wire())
        if payload:
            parent.submit_write(config_path, f"GCP config [{config_path}]", payload)

        for roleset_name, roleset in sorted(engine.rolesets.items()):
            roleset_path = posixpath.join(engine.path, "roleset", roleset_name)
            parent.submit_write(
                roleset_path, f"GCP roleset [{roleset_path}]", roleset.to_wire()
            )

    def cleanup(self, engine: GcpSecretsEngine) -> None:
        self.cleanup_collection(
            engine.path, "rolesets", "roleset", engine.rolesets, "GCP roleset"
        )
