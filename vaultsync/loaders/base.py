"""Abstract base class for resource loaders."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from vaultsync.core.secrets.resolver import SecretResolver
from vaultsync.loaders.exceptions import ConfigurationError, UnsupportedFormatError

logger = logging.getLogger(__name__)

# Structured formats that are recognized but not implemented
UNSUPPORTED_EXTENSIONS = (".yaml", ".yml")


def parse_json_object(text: str, source: str) -> Dict[str, Any]:
    """
    Parse text as a JSON object.

    Raises:
        ConfigurationError: If text is not valid JSON or not an object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file [{source}] is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file [{source}] must contain a JSON object")
    return data


class BaseLoader(ABC):
    """
    Abstract base class that all resource loaders must implement.

    A loader turns one kind's slice of the configuration tree into typed
    descriptors keyed by mount path. Any malformed file is fatal for the
    whole run: a partially loaded set would make the cleanup diff unsafe.
    """

    #: Directory under the configuration root, also the secret namespace kind
    kind: str = ""

    def __init__(self, resolver: SecretResolver):
        self.resolver = resolver

    @abstractmethod
    def load(self, config_root: Path) -> Dict[str, Any]:
        """
        Load every declared resource of this kind.

        Args:
            config_root: Root of the configuration tree

        Returns:
            Descriptors keyed by mount path

        Raises:
            ConfigurationError: If any file is unreadable or malformed
            SubstitutionIncompleteError: If a placeholder has no secret
        """
        pass

    def supported_extensions(self) -> List[str]:
        return [".json"]

    def can_load(self, file_path: Path) -> bool:
        """Check if this loader can handle the given file."""
        return file_path.suffix.lower() in self.supported_extensions()

    def discover(self, directory: Path) -> Dict[str, Path]:
        """
        Map logical names (filename without extension) to files.

        Files with unknown extensions are skipped with a warning.

        Raises:
            UnsupportedFormatError: If a YAML file is present
            ConfigurationError: If two files share a logical name
        """
        if not directory.is_dir():
            logger.debug(f"No configuration found at {directory}")
            return {}

        files: Dict[str, Path] = {}
        for file_path in sorted(directory.iterdir()):
            if not file_path.is_file():
                continue

            if file_path.suffix.lower() in UNSUPPORTED_EXTENSIONS:
                raise UnsupportedFormatError(
                    f"Configuration file [{file_path}] is not valid: YAML is not yet supported"
                )

            if not self.can_load(file_path):
                logger.warning(
                    f"Configuration file [{file_path}] does not have a valid json "
                    f"extension and will not be processed"
                )
                continue

            name = file_path.stem
            if name in files:
                raise ConfigurationError(
                    f"Configuration files [{files[name]}] and [{file_path}] "
                    f"both declare '{name}'"
                )
            files[name] = file_path

        return files

    def read_substituted(self, file_path: Path, secret_path: str) -> str:
        """
        Read one configuration file and substitute its placeholders.

        The text must be valid JSON both before and after substitution.
        """
        try:
            raw = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Error reading file [{file_path}]: {e}") from e

        parse_json_object(raw, str(file_path))
        content = self.resolver.substitute(raw, secret_path)
        parse_json_object(content, f"{file_path} after secret substitution")
        return content

    def read_resource(self, file_path: Path, secret_path: str) -> Dict[str, Any]:
        """Read, substitute and parse one configuration file."""
        return json.loads(self.read_substituted(file_path, secret_path))
