"""Factory for creating reconcilers with registry pattern."""

import logging
from typing import Callable, Dict, List, Type

from vaultsync.backend.base import BaseBackendClient
from vaultsync.reconcilers.base import BaseReconciler
from vaultsync.tasks.pool import WritePool
from vaultsync.tasks.review import DeleteReviewQueue

logger = logging.getLogger(__name__)

# Registry to hold reconciler classes
_RECONCILER_REGISTRY: Dict[str, Type[BaseReconciler]] = {}


def register_reconciler(name: str) -> Callable:
    """
    Decorator to register a reconciler class for a resource kind.

    Usage:
        @register_reconciler("auth_methods")
        class AuthMethodReconciler(BaseReconciler):
            ...
    """
    def decorator(cls: Type[BaseReconciler]) -> Type[BaseReconciler]:
        if name in _RECONCILER_REGISTRY:
            logger.warning(f"Overwriting existing reconciler: {name}")
        _RECONCILER_REGISTRY[name] = cls
        logger.debug(f"Registered reconciler: {name} -> {cls.__name__}")
        return cls
    return decorator


def get_registered_reconcilers() -> List[str]:
    """Return list of registered reconciler names."""
    return list(_RECONCILER_REGISTRY.keys())


class ReconcilerFactory:
    """
    Factory that creates the reconciler for a resource kind.

    Usage:
        reconciler = ReconcilerFactory.create("auth_methods", client, pool, review)
    """

    @classmethod
    def create(
        cls,
        kind: str,
        client: BaseBackendClient,
        pool: WritePool,
        review: DeleteReviewQueue,
    ) -> BaseReconciler:
        """
        Raises:
            ValueError: If no reconciler is registered for kind
        """
        if kind not in _RECONCILER_REGISTRY:
            raise ValueError(
                f"Unknown resource kind: '{kind}'. "
                f"Available: {get_registered_reconcilers()}"
            )
        return _RECONCILER_REGISTRY[kind](client, pool, review)
