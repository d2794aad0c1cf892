"""Reconcilers module - diff declared resources against live state."""
from vaultsync.reconcilers.base import BaseReconciler, EngineReconciler
from vaultsync.reconcilers.exceptions import MountTypeMismatchError
from vaultsync.reconcilers.factory import (
    ReconcilerFactory,
    register_reconciler,
    get_registered_reconcilers,
)
from vaultsync.reconcilers.auth_hooks import (
    AuthHook,
    get_auth_hook,
    get_registered_auth_hooks,
    validate_auth_method,
    register_auth_hook,
)

# Import reconcilers to trigger registration
from vaultsync.reconcilers.auth_methods import AuthMethodReconciler
from vaultsync.reconcilers.secrets_engines import SecretsEngineReconciler
from vaultsync.reconcilers.aws import AwsEngineReconciler
from vaultsync.reconcilers.gcp import GcpEngineReconciler

__all__ = [
    "BaseReconciler",
    "EngineReconciler",
    "MountTypeMismatchError",
    "ReconcilerFactory",
    "register_reconciler",
    "get_registered_reconcilers",
    "AuthHook",
    "get_auth_hook",
    "get_registered_auth_hooks",
    "validate_auth_method",
    "register_auth_hook",
    "AuthMethodReconciler",
    "SecretsEngineReconciler",
    "AwsEngineReconciler",
    "GcpEngineReconciler",
]
