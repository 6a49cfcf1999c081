"""Component registry access."""

from .client import BaseRegistryClient
from .client import DirectoryRegistryClient
from .client import HttpRegistryClient
from .client import RegistryClient
from .client import RegistryError
from .client import StaticRegistryClient
from .client import create_registry_client

__all__ = [
    "BaseRegistryClient",
    "DirectoryRegistryClient",
    "HttpRegistryClient",
    "RegistryClient",
    "RegistryError",
    "StaticRegistryClient",
    "create_registry_client",
]
