"""Resolution of API paths for the coin -> wallet -> account hierarchy."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from urllib.parse import quote

from .exceptions import MissingIdentifierError, UnknownOperationError, ValidationError
from .types import Operation, ResourceKind


class _Slot(Enum):
    """Placeholder segments filled in at resolution time."""

    COIN = "coin"
    WALLET = "wallet_id"
    ACCOUNT = "account_id"


Segment = str | _Slot

_COIN = ("coins", _Slot.COIN)
_WALLETS = (*_COIN, "wallets")
_WALLET = (*_WALLETS, _Slot.WALLET)
_ACCOUNTS = (*_WALLET, "accounts")
_ACCOUNT = (*_ACCOUNTS, _Slot.ACCOUNT)

PATH_TEMPLATES: Mapping[tuple[ResourceKind, Operation], tuple[Segment, ...]] = {
    (ResourceKind.COINS, Operation.ALL): ("coins",),
    (ResourceKind.COINS, Operation.READ): _COIN,
    (ResourceKind.WALLET, Operation.ALL): _WALLETS,
    (ResourceKind.WALLET, Operation.CREATE): _WALLETS,
    (ResourceKind.WALLET, Operation.READ): _WALLET,
    (ResourceKind.WALLET, Operation.UPDATE): _WALLET,
    (ResourceKind.WALLET, Operation.DELETE): _WALLET,
    (ResourceKind.WALLET, Operation.SEND): (*_WALLET, "send"),
    (ResourceKind.WALLET, Operation.PERMISSIONS): (*_WALLET, "permissions"),
    (ResourceKind.WALLET, Operation.TRANSACTIONS): (*_WALLET, "transactions"),
    (ResourceKind.ACCOUNT, Operation.ALL): _ACCOUNTS,
    (ResourceKind.ACCOUNT, Operation.CREATE): _ACCOUNTS,
    (ResourceKind.ACCOUNT, Operation.READ): _ACCOUNT,
    (ResourceKind.ACCOUNT, Operation.DELETE): _ACCOUNT,
    (ResourceKind.ACCOUNT, Operation.ARCHIVE): (*_ACCOUNTS, "archive"),
    (ResourceKind.ACCOUNT, Operation.SEND): (*_ACCOUNT, "send"),
    (ResourceKind.ACCOUNT, Operation.TRANSACTIONS): (*_ACCOUNT, "transactions"),
}

OPERATIONS_BY_KIND: Mapping[ResourceKind, frozenset[Operation]] = {
    ResourceKind.COINS: frozenset({Operation.ALL, Operation.READ}),
    ResourceKind.WALLET: frozenset(
        {
            Operation.ALL,
            Operation.READ,
            Operation.CREATE,
            Operation.UPDATE,
            Operation.DELETE,
            Operation.SEND,
            Operation.PERMISSIONS,
            Operation.TRANSACTIONS,
        }
    ),
    ResourceKind.ACCOUNT: frozenset(
        {
            Operation.ALL,
            Operation.READ,
            Operation.CREATE,
            Operation.DELETE,
            Operation.ARCHIVE,
            Operation.SEND,
            Operation.TRANSACTIONS,
        }
    ),
}


def _check_templates() -> None:
    declared = {(kind, op) for kind, ops in OPERATIONS_BY_KIND.items() for op in ops}
    if set(ResourceKind) != set(OPERATIONS_BY_KIND):
        raise RuntimeError("Every resource kind must declare its operations")
    if declared != set(PATH_TEMPLATES):
        missing = sorted(f"{k.value}.{o.value}" for k, o in declared - set(PATH_TEMPLATES))
        extra = sorted(f"{k.value}.{o.value}" for k, o in set(PATH_TEMPLATES) - declared)
        raise RuntimeError(f"Path template table mismatch: missing={missing} extra={extra}")


_check_templates()


def _coerce_pair(
    kind: ResourceKind | str, operation: Operation | str
) -> tuple[ResourceKind, Operation]:
    try:
        return ResourceKind(kind), Operation(operation)
    except ValueError as exc:
        raise UnknownOperationError(kind, operation) from exc


def _identifier(value: int | None, slot: _Slot, kind: ResourceKind, op: Operation) -> str:
    if value is None:
        raise MissingIdentifierError(slot.value, kind.value, op.value)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"{slot.value} must be a positive integer", field=slot.value, value=value
        )
    return str(value)


def _coin_segment(coin: str) -> str:
    if not isinstance(coin, str) or not coin:
        raise ValidationError("Coin symbol must be a non-empty string", field="coin", value=coin)
    return quote(coin, safe="")


def resolve_path(
    kind: ResourceKind | str,
    operation: Operation | str,
    coin: str,
    wallet_id: int | None = None,
    account_id: int | None = None,
) -> str:
    """Return the API path for ``operation`` on ``kind``.

    Paths are relative to the API base URL: no leading slash, and a trailing
    slash on every template except the coin listing.

    Raises:
        UnknownOperationError: If the pair has no template.
        MissingIdentifierError: If the template needs an id that is ``None``.
        ValidationError: If the coin or an identifier is malformed.
    """
    kind, operation = _coerce_pair(kind, operation)
    template = PATH_TEMPLATES.get((kind, operation))
    if template is None:
        raise UnknownOperationError(kind.value, operation.value)

    parts: list[str] = []
    for segment in template:
        if segment is _Slot.COIN:
            parts.append(_coin_segment(coin))
        elif segment is _Slot.WALLET:
            parts.append(_identifier(wallet_id, segment, kind, operation))
        elif segment is _Slot.ACCOUNT:
            parts.append(_identifier(account_id, segment, kind, operation))
        else:
            parts.append(segment)

    path = "/".join(parts)
    if (kind, operation) == (ResourceKind.COINS, Operation.ALL):
        return path
    return path + "/"
