"""Type definitions and data models for the address.so wallet API."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ResourceKind(str, Enum):
    """Top-level resource families exposed by the API."""

    COINS = "coins"
    WALLET = "wallet"
    ACCOUNT = "account"


class Operation(str, Enum):
    """Operations addressable on a resource kind."""

    ALL = "all"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SEND = "send"
    PERMISSIONS = "permissions"
    TRANSACTIONS = "transactions"
    ARCHIVE = "archive"


class Permission(str, Enum):
    """Wallet permissions grantable to another user."""

    VIEW = "view"
    ORDER = "order"
    TRANSFER = "transfer"
    ADMIN = "admin"


# Sent as the only permissions entry to revoke everything; the API does not
# accept an empty array for this.
REVOKE_ALL_PERMISSIONS = "0"

Scalar = str | int | float | Decimal
ParamValue = Scalar | list[Scalar] | tuple[Scalar, ...]
ParameterSet = dict[str, ParamValue]


@dataclass(frozen=True)
class Credentials:
    """API token sent with every request plus the optional signing secret."""

    api_token: str
    secret_token: str | None = None

    def __repr__(self) -> str:
        secret = "***" if self.secret_token else None
        return f"Credentials(api_token='***', secret_token={secret!r})"


@dataclass(frozen=True)
class PathContext:
    """Coin plus optional wallet/account ids used to resolve a request path."""

    coin: str
    wallet_id: int | None = None
    account_id: int | None = None

    def resolve(self, kind: ResourceKind | str, operation: Operation | str) -> str:
        from .paths import resolve_path

        return resolve_path(kind, operation, self.coin, self.wallet_id, self.account_id)
