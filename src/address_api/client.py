"""address.so wallet API client."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from .config import ClientConfig
from .exceptions import MissingSecretError, ValidationError
from .signing import SIGNATURE_FIELD, build_params, encode_pairs, with_signature
from .transport import RequestsTransport, Transport
from .types import (
    REVOKE_ALL_PERMISSIONS,
    Operation,
    ParameterSet,
    PathContext,
    Permission,
    ResourceKind,
)

logger = logging.getLogger(__name__)

API_TOKEN_HEADER = "X-Api-Token"
DEFAULT_TRANSACTION_LIMIT = 100

Amount = int | float | Decimal | str


class AddressClient:
    """Manage coins, wallets and accounts through the address.so REST API.

    Every call resolves its path from the configured coin plus the ids it is
    given, attaches the ``X-Api-Token`` header, and signs the form body with
    the secret token for transfers and permission changes.
    """

    def __init__(self, config: ClientConfig, transport: Transport | None = None) -> None:
        self._config = config
        if transport is None:
            transport = RequestsTransport(
                config.resolved_base_url(), timeout=config.request_timeout
            )
        self._transport: Transport = transport

    @classmethod
    def from_env(
        cls, coin: str | None = None, transport: Transport | None = None
    ) -> AddressClient:
        return cls(ClientConfig.from_env(coin), transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def coin(self) -> str:
        return self._config.coin

    def for_coin(self, coin: str) -> AddressClient:
        """Return a client for ``coin`` that shares this client's transport."""

        return AddressClient(self._config.with_coin(coin), self._transport)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> AddressClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Coins
    # ------------------------------------------------------------------
    def get_coins(self) -> Any:
        return self._request("GET", self._path(ResourceKind.COINS, Operation.ALL))

    def get_coin(self) -> Any:
        return self._request("GET", self._path(ResourceKind.COINS, Operation.READ))

    # ------------------------------------------------------------------
    # Wallets
    # ------------------------------------------------------------------
    def get_wallets(self) -> Any:
        return self._request("GET", self._path(ResourceKind.WALLET, Operation.ALL))

    def get_wallet(self, wallet_id: int) -> Any:
        return self._request("GET", self._path(ResourceKind.WALLET, Operation.READ, wallet_id))

    def create_wallet(self, label: str) -> Any:
        return self._request(
            "POST",
            self._path(ResourceKind.WALLET, Operation.CREATE),
            build_params(label=_label(label)),
        )

    def update_wallet(self, wallet_id: int, label: str) -> Any:
        return self._request(
            "PUT",
            self._path(ResourceKind.WALLET, Operation.UPDATE, wallet_id),
            build_params(label=_label(label)),
        )

    def delete_wallet(self, wallet_id: int) -> Any:
        return self._request(
            "DELETE", self._path(ResourceKind.WALLET, Operation.DELETE, wallet_id)
        )

    def get_wallet_transactions(
        self, wallet_id: int, limit: int = DEFAULT_TRANSACTION_LIMIT
    ) -> Any:
        return self._request(
            "GET",
            self._path(ResourceKind.WALLET, Operation.TRANSACTIONS, wallet_id),
            build_params(limit=_limit(limit)),
        )

    def send_from_wallet(
        self,
        wallet_id: int,
        amount: Amount,
        recepient: str,
        odd_address: str | None = None,
    ) -> Any:
        """Send ``amount`` from a wallet to ``recepient``.

        ``odd_address`` optionally receives the change. The request is signed.
        """
        return self._request(
            "POST",
            self._path(ResourceKind.WALLET, Operation.SEND, wallet_id),
            _send_params(amount, recepient, odd_address),
            signed=True,
        )

    def set_permissions(
        self,
        wallet_id: int,
        user_id: int,
        permissions: Iterable[Permission | str] = (),
    ) -> Any:
        """Grant ``user_id`` the given permissions on a wallet.

        Accepted permissions: view, order, transfer, admin.
        """
        return self._request(
            "POST",
            self._path(ResourceKind.WALLET, Operation.PERMISSIONS, wallet_id),
            build_params(
                user_id=_positive_int(user_id, "user_id"),
                permissions=_permissions(permissions),
            ),
            signed=True,
        )

    def remove_all_permissions(self, wallet_id: int, user_id: int) -> Any:
        """Revoke every permission ``user_id`` holds on a wallet."""
        return self._request(
            "POST",
            self._path(ResourceKind.WALLET, Operation.PERMISSIONS, wallet_id),
            remove_all_permissions_params(user_id),
            signed=True,
        )

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def get_accounts(self, wallet_id: int) -> Any:
        return self._request("GET", self._path(ResourceKind.ACCOUNT, Operation.ALL, wallet_id))

    def get_account(self, wallet_id: int, account_id: int) -> Any:
        return self._request(
            "GET", self._path(ResourceKind.ACCOUNT, Operation.READ, wallet_id, account_id)
        )

    def create_account(self, wallet_id: int) -> Any:
        return self._request(
            "POST", self._path(ResourceKind.ACCOUNT, Operation.CREATE, wallet_id)
        )

    def delete_account(self, wallet_id: int, account_id: int) -> Any:
        return self._request(
            "DELETE", self._path(ResourceKind.ACCOUNT, Operation.DELETE, wallet_id, account_id)
        )

    def archive_accounts(self, wallet_id: int, accounts: Iterable[int]) -> Any:
        return self._request(
            "DELETE",
            self._path(ResourceKind.ACCOUNT, Operation.ARCHIVE, wallet_id),
            build_params(accounts=[_positive_int(a, "accounts") for a in accounts]),
        )

    def get_account_transactions(
        self, wallet_id: int, account_id: int, limit: int = DEFAULT_TRANSACTION_LIMIT
    ) -> Any:
        return self._request(
            "GET",
            self._path(ResourceKind.ACCOUNT, Operation.TRANSACTIONS, wallet_id, account_id),
            build_params(limit=_limit(limit)),
        )

    def send_from_account(
        self,
        wallet_id: int,
        account_id: int,
        amount: Amount,
        recepient: str,
        odd_address: str | None = None,
    ) -> Any:
        """Send ``amount`` from an account to ``recepient``. The request is signed."""
        return self._request(
            "POST",
            self._path(ResourceKind.ACCOUNT, Operation.SEND, wallet_id, account_id),
            _send_params(amount, recepient, odd_address),
            signed=True,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _path(
        self,
        kind: ResourceKind,
        operation: Operation,
        wallet_id: int | None = None,
        account_id: int | None = None,
    ) -> str:
        return PathContext(self._config.coin, wallet_id, account_id).resolve(kind, operation)

    def _request(
        self,
        method: str,
        path: str,
        params: ParameterSet | None = None,
        *,
        signed: bool = False,
    ) -> Any:
        params = params or {}
        credentials = self._config.credentials
        if signed:
            if not credentials.secret_token:
                raise MissingSecretError(
                    f"{method} {path} must be signed but no secret token is set"
                )
            params = with_signature(params, credentials.secret_token)

        logger.debug(
            "%s %s params=%s signed=%s",
            method,
            path,
            [key for key in params if key != SIGNATURE_FIELD],
            signed,
        )
        return self._transport.request(
            method,
            path,
            headers={API_TOKEN_HEADER: credentials.api_token},
            data=encode_pairs(params),
        )


def _positive_int(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer", field=field, value=value)
    return value


def _limit(limit: int) -> int:
    return _positive_int(limit, "limit")


def _label(label: str) -> str:
    if not isinstance(label, str) or not label.strip():
        raise ValidationError("Wallet label must be a non-empty string", field="label", value=label)
    return label


def _send_params(amount: Amount, recepient: str, odd_address: str | None) -> ParameterSet:
    if not recepient:
        raise ValidationError("Recipient address is required", field="recepient", value=recepient)
    if amount is None or isinstance(amount, bool) or amount == "":
        raise ValidationError("Amount must be numeric", field="amount", value=amount)
    return build_params(amount=amount, recepient=recepient, odd_address=odd_address or None)


def _permissions(permissions: Iterable[Permission | str]) -> list[str]:
    names: list[str] = []
    for permission in permissions:
        try:
            names.append(Permission(permission).value)
        except ValueError as exc:
            allowed = ", ".join(p.value for p in Permission)
            raise ValidationError(
                f"Unknown permission '{permission}'. Must be one of: {allowed}",
                field="permissions",
                value=permission,
            ) from exc
    return names


def remove_all_permissions_params(user_id: int) -> ParameterSet:
    """Parameters revoking all of ``user_id``'s wallet permissions."""
    return build_params(
        user_id=_positive_int(user_id, "user_id"), permissions=[REVOKE_ALL_PERMISSIONS]
    )
