"""Secret resolver - substitutes %{KEY}% placeholders in raw config text."""

import logging
import re
from typing import Dict, List

from vaultsync.core.secrets.base import SecretBackend
from vaultsync.core.secrets.exceptions import SubstitutionIncompleteError

logger = logging.getLogger(__name__)

# Pattern to match %{KEY_NAME}%
PLACEHOLDER_PATTERN = re.compile(r"%\{([a-zA-Z0-9_]+)\}%")


class SecretResolver:
    """
    Resolves %{KEY}% placeholders against a resource-scoped secret path.

    Substitution is all-or-nothing: after replacing every known key the
    text is scanned again and every leftover placeholder is reported.

    Usage:
        resolver = SecretResolver(backend, base_path="secret/vaultsync/")
        text = resolver.substitute(raw_text, "auth_methods/github")
    """

    def __init__(self, backend: SecretBackend, base_path: str = ""):
        """
        Args:
            backend: Where secrets are fetched from
            base_path: Prefix joined in front of every resource secret path
        """
        self.backend = backend
        self.base_path = base_path
        logger.info(f"Initialized SecretResolver with base path: {base_path!r}")

    def secret_path(self, resource_path: str) -> str:
        return f"{self.base_path}{resource_path}"

    def substitute(self, content: str, resource_path: str) -> str:
        """
        Replace every %{KEY}% in content with secrets from the resource path.

        Args:
            content: Raw configuration text
            resource_path: "<resource kind>/<resource name>"

        Returns:
            Content with all placeholders replaced

        Raises:
            SubstitutionIncompleteError: If any placeholder has no secret
        """
        if not self.find_placeholders(content):
            return content

        full_path = self.secret_path(resource_path)
        secrets = self.backend.get_secrets(full_path)

        for key, value in secrets.items():
            content = content.replace("%{" + key + "}%", value)

        leftovers = self.find_placeholders(content)
        if leftovers:
            raise SubstitutionIncompleteError(leftovers, full_path)

        logger.debug(f"Substituted {len(secrets)} secret(s) from [{full_path}]")
        return content

    @staticmethod
    def find_placeholders(content: str) -> List[str]:
        """Return placeholder tokens in order of first appearance, without duplicates."""
        seen: Dict[str, None] = {}
        for match in PLACEHOLDER_PATTERN.finditer(content):
            seen.setdefault(match.group(0), None)
        return list(seen)

    def health_check(self) -> bool:
        """Check if the secret backend is healthy."""
        return self.backend.health_check()
