"""
Settings loader for vaultsync.
Loads an optional YAML settings file, applies an environment overlay and
environment variable overrides.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from vaultsync.core.exceptions import SettingsError

logger = logging.getLogger(__name__)

# Environment variable -> dotted settings key
ENV_OVERRIDES = {
    "VAULT_ADDR": "vault.addr",
    "VAULT_TOKEN": "vault.token",
    "VAULT_NAMESPACE": "vault.namespace",
    "VAULTSYNC_CONFIGURATION_PATH": "sync.configuration_path",
    "VAULTSYNC_SECRET_BASE_PATH": "sync.secret_base_path",
    "VAULTSYNC_WORKERS": "sync.workers",
    "VAULTSYNC_CONFIRM_ATTEMPTS": "sync.confirm_attempts",
    "VAULTSYNC_LOG_LEVEL": "logging.level",
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """
    Resolved runtime settings.

    Attributes:
        vault_addr: Backend address
        vault_token: Token for backend calls
        vault_namespace: Enterprise namespace, if any
        verify_tls: Verify backend TLS certificates
        http_retries: Transport retries for transient HTTP failures
        configuration_path: Root of the configuration tree
        secret_base_path: Prefix of the per-resource secret namespace
        workers: Size of the write worker pool
        confirm_attempts: Invalid answers tolerated per deletion prompt
        assume_no: Decline every deletion without prompting
        log_level: Logging level name
    """
    vault_addr: str = "http://127.0.0.1:8200"
    vault_token: Optional[str] = None
    vault_namespace: Optional[str] = None
    verify_tls: bool = True
    http_retries: int = 3
    configuration_path: str = "./config"
    secret_base_path: str = "secret/vaultsync/"
    workers: int = 5
    confirm_attempts: int = 3
    assume_no: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.secret_base_path and not self.secret_base_path.endswith("/"):
            self.secret_base_path += "/"
        self.workers = int(self.workers)
        if self.workers < 1:
            raise SettingsError(f"workers must be at least 1, got {self.workers}")
        self.confirm_attempts = int(self.confirm_attempts)
        self.http_retries = int(self.http_retries)


class Config:
    """
    Settings loader.

    Usage:
        config = Config.load("vaultsync.yaml")
        workers = config.get("sync.workers")
        settings = config.settings()
    """

    def __init__(self, raw: Optional[Dict[str, Any]] = None):
        self._config: Dict[str, Any] = raw or {}

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        env: Optional[str] = None,
        dotenv_path: Optional[str] = ".env",
    ) -> "Config":
        """
        Load settings from YAML file and environment.

        Args:
            config_path: Path to a settings file; optional
            env: Environment name (loads <dir>/environments/{env}.yaml as override)
            dotenv_path: .env file loaded into the environment when present

        Returns:
            Config instance

        Raises:
            SettingsError: If config_path is given but missing
        """
        if dotenv_path and Path(dotenv_path).exists():
            load_dotenv(dotenv_path)

        instance = cls()

        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise SettingsError(f"Settings file not found: {config_path}")

            with open(path, "r") as f:
                instance._config = yaml.safe_load(f) or {}
            logger.info(f"Loaded settings from {config_path}")

            if env:
                env_path = path.parent / "environments" / f"{env}.yaml"
                if env_path.exists():
                    with open(env_path, "r") as f:
                        env_config = yaml.safe_load(f) or {}
                    instance._config = instance._merge_configs(instance._config, env_config)
                    logger.info(f"Applied environment override: {env}")
                else:
                    logger.warning(f"Environment file not found: {env_path}")
        elif env:
            logger.warning(f"Environment '{env}' ignored: no settings file given")

        instance._apply_env_overrides()
        return instance

    def _apply_env_overrides(self) -> None:
        for env_key, dotted in ENV_OVERRIDES.items():
            value = os.environ.get(env_key)
            if value is not None:
                self.set(dotted, value)
        if "VAULT_SKIP_VERIFY" in os.environ:
            self.set("vault.verify_tls", not _as_bool(os.environ["VAULT_SKIP_VERIFY"]))

    def _merge_configs(self, base: dict, override: dict) -> dict:
        """Deep merge override into base config."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value using dot notation.

        Example:
            config.get("sync.workers")         # Returns 5
            config.get("sync.missing", 100)    # Returns 100
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation, creating sections as needed."""
        keys = key.split(".")
        section = self._config
        for k in keys[:-1]:
            section = section.setdefault(k, {})
        section[keys[-1]] = value

    def settings(self) -> Settings:
        """Build typed settings, falling back to defaults."""
        defaults = Settings()
        return Settings(
            vault_addr=self.get("vault.addr", defaults.vault_addr),
            vault_token=self.get("vault.token", defaults.vault_token),
            vault_namespace=self.get("vault.namespace", defaults.vault_namespace),
            verify_tls=_as_bool(self.get("vault.verify_tls", defaults.verify_tls)),
            http_retries=self.get("vault.http_retries", defaults.http_retries),
            configuration_path=self.get("sync.configuration_path", defaults.configuration_path),
            secret_base_path=self.get("sync.secret_base_path", defaults.secret_base_path),
            workers=self.get("sync.workers", defaults.workers),
            confirm_attempts=self.get("sync.confirm_attempts", defaults.confirm_attempts),
            assume_no=_as_bool(self.get("sync.assume_no", defaults.assume_no)),
            log_level=str(self.get("logging.level", defaults.log_level)).upper(),
        )

    @property
    def raw(self) -> Dict[str, Any]:
        """Get raw config dict."""
        return self._config
