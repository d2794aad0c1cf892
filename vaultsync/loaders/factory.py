"""Factory for creating resource loaders with registry pattern."""

import logging
from typing import Callable, Dict, List, Type

from vaultsync.core.secrets.resolver import SecretResolver
from vaultsync.loaders.base import BaseLoader

logger = logging.getLogger(__name__)

# Registry to hold loader classes
_LOADER_REGISTRY: Dict[str, Type[BaseLoader]] = {}


def register_loader(name: str) -> Callable:
    """
    Decorator to register a loader class for a resource kind.

    Usage:
        @register_loader("auth_methods")
        class AuthMethodLoader(BaseLoader):
            ...
    """
    def decorator(cls: Type[BaseLoader]) -> Type[BaseLoader]:
        if name in _LOADER_REGISTRY:
            logger.warning(f"Overwriting existing loader: {name}")
        _LOADER_REGISTRY[name] = cls
        logger.debug(f"Registered loader: {name} -> {cls.__name__}")
        return cls
    return decorator


def get_registered_loaders() -> List[str]:
    """Return list of registered loader names."""
    return list(_LOADER_REGISTRY.keys())


class LoaderFactory:
    """
    Factory that creates the loader for a resource kind.

    Usage:
        loader = LoaderFactory.create("auth_methods", resolver)
        auth_methods = loader.load(Path("./config"))
    """

    @classmethod
    def create(cls, kind: str, resolver: SecretResolver) -> BaseLoader:
        """
        Create a loader instance.

        Raises:
            ValueError: If no loader is registered for kind
        """
        if kind not in _LOADER_REGISTRY:
            raise ValueError(
                f"Unknown resource kind: '{kind}'. "
                f"Available: {get_registered_loaders()}"
            )
        return _LOADER_REGISTRY[kind](resolver)
