"""Resource descriptors - typed, immutable views of the configuration tree."""
from vaultsync.resources.base import EnableOptions, engine_options, mount_path
from vaultsync.resources.auth_method import AuthMethod
from vaultsync.resources.aws import (
    AwsConfigLease,
    AwsRole,
    AwsRootConfig,
    AwsSecretsEngine,
)
from vaultsync.resources.gcp import (
    GcpBinding,
    GcpConfigLease,
    GcpRoleSet,
    GcpRootConfig,
    GcpSecretsEngine,
)

__all__ = [
    "EnableOptions",
    "engine_options",
    "mount_path",
    "AuthMethod",
    "AwsConfigLease",
    "AwsRole",
    "AwsRootConfig",
    "AwsSecretsEngine",
    "GcpBinding",
    "GcpConfigLease",
    "GcpRoleSet",
    "GcpRootConfig",
    "GcpSecretsEngine",
]
