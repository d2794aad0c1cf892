"""GCP secrets engine descriptor."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from vaultsync.resources.base import EnableOptions, engine_options, mount_path

ENGINE_TYPE = "gcp"


@dataclass(frozen=True)
class GcpRootConfig:
    """Service account credentials as a structured JSON object."""
    credentials: Any

    def to_wire(self) -> Dict[str, Any]:
        # The backend wants the credentials object as a JSON string
        if isinstance(self.credentials, str):
            return {"credentials": self.credentials}
        return {"credentials": json.dumps(self.credentials)}


@dataclass(frozen=True)
class GcpConfigLease:
    ttl: Optional[str] = None
    max_ttl: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        values = {"ttl": self.ttl, "max_ttl": self.max_ttl}
        return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class GcpBinding:
    resource: str
    roles: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GcpRoleSet:
    """
    A role-set: a GCP project plus IAM bindings.

    Bindings stay structured; bindings_hcl() is a one-way rendering used
    only when writing to the backend.
    """
    project: str
    secret_type: str = "access_token"
    bindings: Tuple[GcpBinding, ...] = ()
    token_scopes: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GcpRoleSet":
        bindings = tuple(
            GcpBinding(resource=b["resource"], roles=tuple(b.get("roles") or ()))
            for b in data.get("bindings") or ()
        )
        return cls(
            project=data["project"],
            secret_type=data.get("secret_type") or "access_token",
            bindings=bindings,
            token_scopes=tuple(data.get("token_scopes") or ()),
        )

    def bindings_hcl(self) -> str:
        """Render bindings as the HCL access-policy text the backend expects."""
        blocks = []
        for binding in self.bindings:
            roles = ",".join(json.dumps(role) for role in binding.roles)
            blocks.append(
                f'\nresource "{binding.resource}" {{\n  roles = [{roles}]\n}}'
            )
        return "".join(blocks)

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "project": self.project,
            "secret_type": self.secret_type,
            "bindings": self.bindings_hcl(),
        }
        if self.token_scopes:
            payload["token_scopes"] = list(self.token_scopes)
        return payload


@dataclass(frozen=True)
class GcpSecretsEngine:
    """
    A declared GCP secrets engine mount.

    Attributes:
        name: Logical name (mount directory name)
        path: Mount path, always "<name>/"
        options: Enable/tune options
        root_config: Service account credentials
        config_lease: ttl / max_ttl
        overwrite_root_config: Force credential writes on existing mounts
        rolesets: Declared role-sets keyed by name
    """
    name: str
    path: str
    options: EnableOptions
    root_config: Optional[GcpRootConfig] = None
    config_lease: Optional[GcpConfigLease] = None
    overwrite_root_config: bool = False
    rolesets: Dict[str, GcpRoleSet] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.options.type

    @classmethod
    def from_dict(
        cls,
        name: str,
        data: Dict[str, Any],
        rolesets: Optional[Dict[str, GcpRoleSet]] = None,
    ) -> "GcpSecretsEngine":
        root = data.get("root_config")
        lease = data.get("config_lease")
        return cls(
            name=name,
            path=mount_path(name),
            options=engine_options(data.get("mount"), ENGINE_TYPE),
            root_config=GcpRootConfig(credentials=root.get("credentials") or {}) if root else None,
            config_lease=GcpConfigLease(**lease) if lease else None,
            overwrite_root_config=bool(data.get("overwrite_root_config", False)),
            rolesets=dict(rolesets or {}),
        )
