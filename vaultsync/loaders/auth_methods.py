"""Loader for auth_methods/<name>.json."""

import logging
from pathlib import Path
from typing import Any, Dict

from vaultsync.loaders.base import BaseLoader
from vaultsync.loaders.exceptions import ConfigurationError
from vaultsync.loaders.factory import register_loader
from vaultsync.reconcilers.auth_hooks import validate_auth_method
from vaultsync.resources.auth_method import AuthMethod

logger = logging.getLogger(__name__)

# Config keys naming a PEM file; the file text is inlined under the target key
CERTIFICATE_FILE_KEYS = {
    "kubernetes_ca_cert_file": "kubernetes_ca_cert",
    "certificate_file": "certificate",
    "oidc_discovery_ca_pem_file": "oidc_discovery_ca_pem",
}


@register_loader("auth_methods")
class AuthMethodLoader(BaseLoader):
    """
    Loads one AuthMethod per JSON file.

    The filename is the mount name; secrets come from
    <secret base path>auth_methods/<name>.
    """

    kind = "auth_methods"

    def load(self, config_root: Path) -> Dict[str, AuthMethod]:
        config_root = Path(config_root)
        auth_methods: Dict[str, AuthMethod] = {}

        for name, file_path in self.discover(config_root / self.kind).items():
            data = self.read_resource(file_path, f"{self.kind}/{name}")
            if isinstance(data.get("config"), dict):
                data["config"] = self._inline_certificates(data["config"], config_root, file_path)

            try:
                auth_method = AuthMethod.from_dict(name, data)
                validate_auth_method(auth_method)
            except (AttributeError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Error parsing auth method [{file_path}]: {e}") from e
            if not auth_method.type:
                raise ConfigurationError(f"Auth method [{file_path}] has no auth_options.type")

            auth_methods[auth_method.path] = auth_method
            logger.debug(f"Loaded auth method {auth_method.path} ({auth_method.type})")

        logger.info(f"Loaded {len(auth_methods)} auth method(s)")
        return auth_methods

    def _inline_certificates(
        self, config: Dict[str, Any], config_root: Path, source: Path
    ) -> Dict[str, Any]:
        config = dict(config)
        for file_key, target_key in CERTIFICATE_FILE_KEYS.items():
            if file_key not in config:
                continue
            cert_path = config_root / config.pop(file_key)
            try:
                config[target_key] = cert_path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(
                    f"Auth method [{source}] references unreadable {file_key} [{cert_path}]: {e}"
                ) from e
        return config
