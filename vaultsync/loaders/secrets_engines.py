"""Loader for secrets-engines/<mount>/ directories."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Tuple

from vaultsync.loaders.base import BaseLoader, UNSUPPORTED_EXTENSIONS
from vaultsync.loaders.exceptions import ConfigurationError, UnsupportedFormatError
from vaultsync.loaders.factory import register_loader
from vaultsync.resources.aws import AwsRole, AwsSecretsEngine
from vaultsync.resources.gcp import GcpRoleSet, GcpSecretsEngine

logger = logging.getLogger(__name__)


@register_loader("secrets_engines")
class SecretsEngineLoader(BaseLoader):
    """
    Loads one secrets engine per mount directory.

    Layout:
        secrets-engines/<mount>/aws.json + roles/*.json
        secrets-engines/<mount>/gcp.json + rolesets/*.json

    Each mount directory holds exactly one kind file. Secrets for the
    engine and its children come from <secret base path>secrets-engines/<mount>.
    """

    kind = "secrets-engines"

    def __init__(self, resolver):
        super().__init__(resolver)
        # engine type -> (child directory, builder)
        self._engine_kinds: Dict[str, Tuple[str, Callable]] = {
            "aws": ("roles", self._build_aws),
            "gcp": ("rolesets", self._build_gcp),
        }

    def load(self, config_root: Path) -> Dict[str, Any]:
        engines_dir = Path(config_root) / self.kind
        if not engines_dir.is_dir():
            logger.debug(f"No secrets engines found at {engines_dir}")
            return {}

        engines: Dict[str, Any] = {}
        for mount_dir in sorted(p for p in engines_dir.iterdir() if p.is_dir()):
            engine_type = self._detect_engine_type(mount_dir)
            child_dir, build = self._engine_kinds[engine_type]
            name = mount_dir.name
            secret_path = f"{self.kind}/{name}"

            data = self.read_resource(mount_dir / f"{engine_type}.json", secret_path)
            try:
                engine = build(name, data, mount_dir / child_dir, secret_path)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Error parsing secrets engine config for [{mount_dir}]: {e}"
                ) from e

            engines[engine.path] = engine
            logger.debug(f"Loaded secrets engine {engine.path} ({engine_type})")

        logger.info(f"Loaded {len(engines)} secrets engine(s)")
        return engines

    def _detect_engine_type(self, mount_dir: Path) -> str:
        for engine_type in self._engine_kinds:
            for ext in UNSUPPORTED_EXTENSIONS:
                if (mount_dir / f"{engine_type}{ext}").exists():
                    raise UnsupportedFormatError(
                        f"Configuration file [{mount_dir / (engine_type + ext)}] "
                        f"is not valid: YAML is not yet supported"
                    )

        found = [t for t in self._engine_kinds if (mount_dir / f"{t}.json").is_file()]
        if len(found) != 1:
            expected = ", ".join(f"{t}.json" for t in self._engine_kinds)
            raise ConfigurationError(
                f"Secrets engine directory [{mount_dir}] must contain exactly one of: "
                f"{expected} (found {len(found)})"
            )
        return found[0]

    def _build_aws(
        self, name: str, data: Dict[str, Any], roles_dir: Path, secret_path: str
    ) -> AwsSecretsEngine:
        roles = {
            role_name: AwsRole(policy=self.read_substituted(file_path, secret_path))
            for role_name, file_path in self.discover(roles_dir).items()
        }
        return AwsSecretsEngine.from_dict(name, data, roles=roles)

    def _build_gcp(
        self, name: str, data: Dict[str, Any], rolesets_dir: Path, secret_path: str
    ) -> GcpSecretsEngine:
        rolesets = {
            roleset_name: GcpRoleSet.from_dict(self.read_resource(file_path, secret_path))
            for roleset_name, file_path in self.discover(rolesets_dir).items()
        }
        return GcpSecretsEngine.from_dict(name, data, rolesets=rolesets)
