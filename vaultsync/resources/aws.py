"""AWS secrets engine descriptor."""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from vaultsync.resources.base import EnableOptions, engine_options, mount_path

ENGINE_TYPE = "aws"


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class AwsRootConfig:
    """Credentials the engine uses to manage IAM."""
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    iam_endpoint: Optional[str] = None
    sts_endpoint: Optional[str] = None
    region: Optional[str] = None
    max_retries: Optional[int] = None

    def to_wire(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class AwsConfigLease:
    lease: Optional[str] = None
    lease_max: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class AwsRole:
    """A role; policy is the raw IAM policy document text."""
    policy: str

    def to_wire(self) -> Dict[str, Any]:
        return {"policy": self.policy}


@dataclass(frozen=True)
class AwsSecretsEngine:
    """
    A declared AWS secrets engine mount.

    Attributes:
        name: Logical name (mount directory name)
        path: Mount path, always "<name>/"
        options: Enable/tune options
        root_config: Root credentials, written only on first enable or overwrite
        config_lease: Lease settings, always written
        overwrite_root_config: Force root credential writes on existing mounts
        roles: Declared roles keyed by name
    """
    name: str
    path: str
    options: EnableOptions
    root_config: Optional[AwsRootConfig] = None
    config_lease: Optional[AwsConfigLease] = None
    overwrite_root_config: bool = False
    roles: Dict[str, AwsRole] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.options.type

    @classmethod
    def from_dict(
        cls,
        name: str,
        data: Dict[str, Any],
        roles: Optional[Dict[str, AwsRole]] = None,
    ) -> "AwsSecretsEngine":
        root = data.get("root_config")
        lease = data.get("config_lease")
        return cls(
            name=name,
            path=mount_path(name),
            options=engine_options(data.get("mount"), ENGINE_TYPE),
            root_config=AwsRootConfig(**root) if root else None,
            config_lease=AwsConfigLease(**lease) if lease else None,
            overwrite_root_config=bool(data.get("overwrite_root_config", False)),
            roles=dict(roles or {}),
        )
