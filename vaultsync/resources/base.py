"""Shared pieces of every resource descriptor."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

# Mount tuning keys accepted inside an options "config" block
TUNING_KEYS = ("default_lease_ttl", "max_lease_ttl", "listing_visibility")


def mount_path(name: str) -> str:
    """Turn a logical resource name into a trailing-slash mount path."""
    return name.strip("/") + "/"


@dataclass(frozen=True)
class EnableOptions:
    """
    How a mount is enabled and tuned.

    Attributes:
        type: Backend type tag ("aws", "gcp", "userpass", ...)
        description: Mount description
        default_lease_ttl: Default lease TTL (e.g. "1h" or seconds)
        max_lease_ttl: Maximum lease TTL
        listing_visibility: "hidden" or "unauth"
        local: Local-only mount (not replicated)
        seal_wrap: Enable seal wrapping
        options: Mount options map (e.g. {"version": "2"})
    """
    type: str
    description: str = ""
    default_lease_ttl: Any = None
    max_lease_ttl: Any = None
    listing_visibility: Optional[str] = None
    local: bool = False
    seal_wrap: bool = False
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], default_type: str = "") -> "EnableOptions":
        """Build from the JSON shape {"type", "description", "config": {...}, ...}."""
        data = data or {}
        config = data.get("config") or {}
        return cls(
            type=data.get("type") or default_type,
            description=data.get("description") or "",
            **{key: config.get(key) for key in TUNING_KEYS},
            local=bool(data.get("local", False)),
            seal_wrap=bool(data.get("seal_wrap", False)),
            options=dict(data.get("options") or {}),
        )

    def tuning_config(self) -> Dict[str, Any]:
        """Tuning parameters that are actually set."""
        values = {key: getattr(self, key) for key in TUNING_KEYS}
        return {k: v for k, v in values.items() if v not in (None, "")}

    def tune_payload(self) -> Dict[str, Any]:
        """Body for a sys/.../tune write."""
        payload = self.tuning_config()
        payload["description"] = self.description
        return payload


def engine_options(mount: Optional[Mapping[str, Any]], engine_type: str) -> EnableOptions:
    """
    Enable options for a secrets engine whose type is fixed by its kind file.

    Raises:
        ValueError: If the mount block names a different type
    """
    declared_type = (mount or {}).get("type")
    if declared_type and declared_type != engine_type:
        raise ValueError(
            f"mount.type '{declared_type}' does not match engine type '{engine_type}'"
        )
    return EnableOptions.from_dict(mount, default_type=engine_type)
