"""address.so wallet API client.

Resolves request paths for the coin -> wallet -> account hierarchy, signs
transfer and permission requests with the account's secret token, and sends
them through a ``requests`` session.
"""

from .client import AddressClient
from .config import DEFAULT_BASE_URL, ClientConfig
from .exceptions import (
    AddressAPIError,
    ConfigurationError,
    MissingIdentifierError,
    MissingSecretError,
    RequestFailedError,
    UnknownOperationError,
    ValidationError,
)
from .paths import resolve_path
from .signing import build_params, encode_params, sign
from .transport import RequestsTransport, Transport
from .types import (
    REVOKE_ALL_PERMISSIONS,
    Credentials,
    Operation,
    ParameterSet,
    PathContext,
    Permission,
    ResourceKind,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "AddressClient",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "RequestsTransport",
    "Transport",
    # Types and enums
    "Credentials",
    "Operation",
    "ParameterSet",
    "PathContext",
    "Permission",
    "ResourceKind",
    "REVOKE_ALL_PERMISSIONS",
    # Exceptions
    "AddressAPIError",
    "ConfigurationError",
    "MissingIdentifierError",
    "MissingSecretError",
    "RequestFailedError",
    "UnknownOperationError",
    "ValidationError",
    # Core helpers
    "build_params",
    "encode_params",
    "resolve_path",
    "sign",
]
