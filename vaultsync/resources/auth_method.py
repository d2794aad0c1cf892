"""Auth method descriptor."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from vaultsync.resources.base import EnableOptions, mount_path


@dataclass(frozen=True)
class AuthMethod:
    """
    A declared auth method mount.

    Attributes:
        name: Logical name (configuration filename without extension)
        path: Mount path, always "<name>/"
        options: Enable/tune options; options.type is the auth type tag
        config: Body for auth/<path>config, if declared
        additional_config: Type-specific extras consumed by post-configuration hooks
    """
    name: str
    path: str
    options: EnableOptions
    config: Optional[Dict[str, Any]] = None
    additional_config: Optional[Dict[str, Any]] = None

    @property
    def type(self) -> str:
        return self.options.type

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "AuthMethod":
        """
        Raises:
            ValueError: If config or additional_config is not an object
        """
        for key in ("config", "additional_config"):
            if data.get(key) is not None and not isinstance(data[key], dict):
                raise ValueError(f"{key} must be an object, got {type(data[key]).__name__}")
        return cls(
            name=name,
            path=mount_path(name),
            options=EnableOptions.from_dict(data.get("auth_options")),
            config=data.get("config"),
            additional_config=data.get("additional_config"),
        )
