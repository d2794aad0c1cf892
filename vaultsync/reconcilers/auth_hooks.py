"""Post-configuration hooks for auth methods that need more than a config write.

Hooks are looked up by auth type tag. Each hook owns named child
collections under auth/<path>: it writes every declared entry and, in the
cleanup pass, proposes deletion of live entries that are not declared. A
collection is only managed when its key appears in additional_config.
"""

import logging
import posixpath
from typing import Any, Callable, Dict, Optional, Type

from vaultsync.resources.auth_method import AuthMethod

logger = logging.getLogger(__name__)

# Registry to hold hook classes by auth type
_HOOK_REGISTRY: Dict[str, Type["AuthHook"]] = {}


def register_auth_hook(*auth_types: str) -> Callable:
    """
    Decorator to register a hook for one or more auth types.

    Usage:
        @register_auth_hook("jwt", "oidc")
        class JwtAuthHook(AuthHook):
            ...
    """
    def decorator(cls: Type["AuthHook"]) -> Type["AuthHook"]:
        for auth_type in auth_types:
            if auth_type in _HOOK_REGISTRY:
                logger.warning(f"Overwriting existing auth hook: {auth_type}")
            _HOOK_REGISTRY[auth_type] = cls
        return cls
    return decorator


def get_auth_hook(auth_type: str, reconciler) -> Optional["AuthHook"]:
    """Return a hook bound to reconciler, or None for unsupported types."""
    hook_class = _HOOK_REGISTRY.get(auth_type)
    if hook_class is None:
        return None
    return hook_class(reconciler)


def get_registered_auth_hooks():
    return list(_HOOK_REGISTRY.keys())


def validate_auth_method(auth_method: AuthMethod) -> None:
    """Check the shape of the collections the type's hook will manage."""
    hook_class = _HOOK_REGISTRY.get(auth_method.type)
    if hook_class is not None:
        hook_class.validate(auth_method)


class AuthHook:
    """Base hook: manages the collections listed in `collections`."""

    #: additional_config key -> path segment under auth/<path>
    collections: Dict[str, str] = {}
    label = "Auth"

    def __init__(self, reconciler):
        self.reconciler = reconciler

    @classmethod
    def validate(cls, auth_method: AuthMethod) -> None:
        """
        Raises:
            ValueError: If a managed collection is not an object of objects
        """
        extra = auth_method.additional_config or {}
        for key in cls.collections:
            entries = extra.get(key)
            if entries is None:
                continue
            if not isinstance(entries, dict):
                raise ValueError(
                    f"additional_config.{key} must be an object keyed by name, "
                    f"got {type(entries).__name__}"
                )
            for name, body in entries.items():
                if body is not None and not isinstance(body, dict):
                    raise ValueError(
                        f"additional_config.{key}.{name} must be an object, "
                        f"got {type(body).__name__}"
                    )

    def prepare(self, auth_method: AuthMethod, key: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Adjust an entry before it is written."""
        return body

    def _declared(self, auth_method: AuthMethod, key: str) -> Optional[Dict[str, Any]]:
        extra = auth_method.additional_config or {}
        if key not in extra:
            return None
        return extra.get(key) or {}

    def apply(self, auth_method: AuthMethod) -> None:
        for key, segment in self.collections.items():
            entries = self._declared(auth_method, key)
            if entries is None:
                continue
            for name, body in sorted(entries.items()):
                path = posixpath.join("auth", auth_method.path, segment, name)
                self.reconciler.submit_write(
                    path,
                    f"{self.label} {segment} [{path}]",
                    self.prepare(auth_method, key, dict(body or {})),
                )

    def cleanup(self, auth_method: AuthMethod) -> None:
        for key, segment in self.collections.items():
            entries = self._declared(auth_method, key)
            if entries is None:
                continue
            base = posixpath.join("auth", auth_method.path, segment)
            for name in self.reconciler.client.list(base) or []:
                path = posixpath.join(base, name)
                if name in entries:
                    logger.debug(f"[{path}] exists in configuration, no cleanup necessary")
                else:
                    self.reconciler.propose_delete(path, f"{self.label} {segment} [{path}]")


@register_auth_hook("userpass")
class UserpassAuthHook(AuthHook):
    collections = {"users": "users"}
    label = "Userpass"


@register_auth_hook("ldap")
class LdapAuthHook(AuthHook):
    collections = {"groups": "groups", "users": "users"}
    label = "LDAP"


@register_auth_hook("jwt", "oidc")
class JwtAuthHook(AuthHook):
    """
    JWT/OIDC roles. Discovery settings (oidc_discovery_url, client id and
    secret) travel in the mount config; roles default their role_type to
    the mount's type so jwt mounts do not end up with oidc roles.
    """
    collections = {"roles": "role"}
    label = "JWT/OIDC"

    def prepare(self, auth_method, key, body):
        body.setdefault("role_type", auth_method.type)
        return body


@register_auth_hook("kubernetes")
class KubernetesAuthHook(AuthHook):
    collections = {"roles": "role"}
    label = "Kubernetes"
