"""Resource loaders module - configuration tree to typed descriptors."""
from vaultsync.loaders.base import BaseLoader, parse_json_object
from vaultsync.loaders.exceptions import ConfigurationError, UnsupportedFormatError
from vaultsync.loaders.factory import (
    LoaderFactory,
    register_loader,
    get_registered_loaders,
)

# Import loaders to trigger registration
from vaultsync.loaders.auth_methods import AuthMethodLoader
from vaultsync.loaders.secrets_engines import SecretsEngineLoader

__all__ = [
    "BaseLoader",
    "parse_json_object",
    "ConfigurationError",
    "UnsupportedFormatError",
    "LoaderFactory",
    "register_loader",
    "get_registered_loaders",
    "AuthMethodLoader",
    "SecretsEngineLoader",
]
