"""vaultsync - declarative reconciler for Vault auth methods and secrets engines."""

__version__ = "0.1.0"
