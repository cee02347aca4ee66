"""Tests for the AddressClient gateway."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

import pytest

from address_api.client import (
    API_TOKEN_HEADER,
    AddressClient,
    remove_all_permissions_params,
)
from address_api.config import ClientConfig
from address_api.exceptions import (
    MissingIdentifierError,
    MissingSecretError,
    RequestFailedError,
    ValidationError,
)
from address_api.signing import encode_params
from address_api.types import Credentials, Permission

API_TOKEN = "token-123"
SECRET = "mysecret"


class RecordingTransport:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = {"status": "ok"} if response is None else response
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def request(self, method, path, *, headers, data=()):
        self.calls.append(
            {"method": method, "path": path, "headers": dict(headers), "data": list(data)}
        )
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> dict[str, Any]:
        return self.calls[-1]


def _client(
    coin: str = "btc", secret: str | None = SECRET, **kwargs: Any
) -> tuple[AddressClient, RecordingTransport]:
    transport = RecordingTransport(**kwargs)
    config = ClientConfig(coin=coin, api_token=API_TOKEN, secret_token=secret)
    return AddressClient(config, transport), transport


def _expected_sign(pairs: list[tuple[str, str]]) -> str:
    message = encode_params({key: value for key, value in pairs})
    return hmac.new(SECRET.encode(), message.encode(), hashlib.sha256).hexdigest()


class TestUnsignedRequests:
    """Read and management calls map onto the right method and path."""

    @pytest.mark.parametrize(
        ("call", "method", "path", "data"),
        [
            (lambda c: c.get_coins(), "GET", "coins", []),
            (lambda c: c.get_coin(), "GET", "coins/btc/", []),
            (lambda c: c.get_wallets(), "GET", "coins/btc/wallets/", []),
            (lambda c: c.get_wallet(3), "GET", "coins/btc/wallets/3/", []),
            (
                lambda c: c.create_wallet("savings"),
                "POST",
                "coins/btc/wallets/",
                [("label", "savings")],
            ),
            (
                lambda c: c.update_wallet(3, "renamed"),
                "PUT",
                "coins/btc/wallets/3/",
                [("label", "renamed")],
            ),
            (lambda c: c.delete_wallet(3), "DELETE", "coins/btc/wallets/3/", []),
            (
                lambda c: c.get_wallet_transactions(3),
                "GET",
                "coins/btc/wallets/3/transactions/",
                [("limit", "100")],
            ),
            (lambda c: c.get_accounts(3), "GET", "coins/btc/wallets/3/accounts/", []),
            (lambda c: c.get_account(3, 8), "GET", "coins/btc/wallets/3/accounts/8/", []),
            (lambda c: c.create_account(3), "POST", "coins/btc/wallets/3/accounts/", []),
            (
                lambda c: c.delete_account(3, 8),
                "DELETE",
                "coins/btc/wallets/3/accounts/8/",
                [],
            ),
            (
                lambda c: c.archive_accounts(3, [8, 9]),
                "DELETE",
                "coins/btc/wallets/3/accounts/archive/",
                [("accounts[]", "8"), ("accounts[]", "9")],
            ),
            (
                lambda c: c.get_account_transactions(3, 8, limit=25),
                "GET",
                "coins/btc/wallets/3/accounts/8/transactions/",
                [("limit", "25")],
            ),
        ],
    )
    def test_request_shape(self, call, method, path, data) -> None:
        client, transport = _client()

        result = call(client)

        assert result == {"status": "ok"}
        assert transport.last == {
            "method": method,
            "path": path,
            "headers": {API_TOKEN_HEADER: API_TOKEN},
            "data": data,
        }

    def test_unsigned_calls_work_without_secret(self) -> None:
        client, transport = _client(secret=None)
        client.get_wallets()
        assert transport.last["data"] == []

    @pytest.mark.parametrize("limit", [0, -5, True, None])
    @pytest.mark.parametrize(
        "call",
        [
            lambda c, limit: c.get_wallet_transactions(3, limit=limit),
            lambda c, limit: c.get_account_transactions(3, 8, limit=limit),
        ],
    )
    def test_invalid_limit_rejected(self, call, limit) -> None:
        client, transport = _client()
        with pytest.raises(ValidationError):
            call(client, limit)
        assert transport.calls == []


class TestRequiredFields:
    """Required body fields are validated instead of being silently dropped."""

    @pytest.mark.parametrize(
        ("call", "field"),
        [
            (lambda c: c.remove_all_permissions(4, None), "user_id"),
            (lambda c: c.remove_all_permissions(4, 0), "user_id"),
            (lambda c: c.set_permissions(4, None, ["view"]), "user_id"),
            (lambda c: c.set_permissions(4, "11", ["view"]), "user_id"),
            (lambda c: c.create_wallet(None), "label"),
            (lambda c: c.create_wallet(""), "label"),
            (lambda c: c.update_wallet(3, "   "), "label"),
            (lambda c: c.archive_accounts(3, [8, None]), "accounts"),
            (lambda c: c.send_from_wallet(1, None, "dest"), "amount"),
            (lambda c: c.send_from_account(1, 2, "", "dest"), "amount"),
        ],
    )
    def test_missing_required_field_sends_nothing(self, call, field) -> None:
        client, transport = _client()
        with pytest.raises(ValidationError) as excinfo:
            call(client)
        assert excinfo.value.field == field
        assert transport.calls == []

    def test_remove_all_permissions_params_requires_user_id(self) -> None:
        with pytest.raises(ValidationError):
            remove_all_permissions_params(None)  # type: ignore[arg-type]


class TestSignedRequests:
    """Transfers and permission changes carry an HMAC ``sign`` field."""

    def test_send_from_account_end_to_end(self) -> None:
        client, transport = _client(coin="eth")

        client.send_from_account(5, 9, 1.5, "abc")

        call = transport.last
        assert call["method"] == "POST"
        assert call["path"] == "coins/eth/wallets/5/accounts/9/send/"
        assert [key for key, _ in call["data"]] == ["amount", "recepient", "sign"]
        expected = hmac.new(
            SECRET.encode(), b"amount=1.5&recepient=abc", hashlib.sha256
        ).hexdigest()
        assert call["data"][-1] == ("sign", expected)

    def test_send_from_wallet_with_odd_address(self) -> None:
        client, transport = _client()

        client.send_from_wallet(2, "0.25", "dest", odd_address="change")

        call = transport.last
        assert call["path"] == "coins/btc/wallets/2/send/"
        fields = call["data"][:-1]
        assert fields == [("amount", "0.25"), ("recepient", "dest"), ("odd_address", "change")]
        assert call["data"][-1] == ("sign", _expected_sign(fields))

    def test_send_from_account_with_odd_address(self) -> None:
        client, transport = _client()

        client.send_from_account(2, 6, 3, "dest", odd_address="change")

        call = transport.last
        assert call["path"] == "coins/btc/wallets/2/accounts/6/send/"
        fields = call["data"][:-1]
        assert fields == [("amount", "3"), ("recepient", "dest"), ("odd_address", "change")]
        assert call["data"][-1] == ("sign", _expected_sign(fields))

    def test_send_omits_empty_odd_address(self) -> None:
        client, transport = _client()
        client.send_from_wallet(2, 1, "dest", odd_address="")
        assert [key for key, _ in transport.last["data"]] == ["amount", "recepient", "sign"]

    def test_set_permissions(self) -> None:
        client, transport = _client()

        client.set_permissions(4, 11, [Permission.VIEW, "transfer"])

        call = transport.last
        assert call["path"] == "coins/btc/wallets/4/permissions/"
        fields = call["data"][:-1]
        assert fields == [
            ("user_id", "11"),
            ("permissions[]", "view"),
            ("permissions[]", "transfer"),
        ]
        expected = hmac.new(
            SECRET.encode(),
            encode_params({"user_id": 11, "permissions": ["view", "transfer"]}).encode(),
            hashlib.sha256,
        ).hexdigest()
        assert call["data"][-1] == ("sign", expected)

    def test_set_permissions_rejects_unknown_names(self) -> None:
        client, transport = _client()
        with pytest.raises(ValidationError) as excinfo:
            client.set_permissions(4, 11, ["view", "withdraw"])
        assert excinfo.value.value == "withdraw"
        assert transport.calls == []

    def test_remove_all_permissions_sends_sentinel(self) -> None:
        client, transport = _client()

        client.remove_all_permissions(4, 11)

        call = transport.last
        assert call["path"] == "coins/btc/wallets/4/permissions/"
        assert call["data"][:-1] == [("user_id", "11"), ("permissions[]", "0")]
        assert call["data"][-1][0] == "sign"

    def test_remove_all_permissions_params(self) -> None:
        assert remove_all_permissions_params(11) == {"user_id": 11, "permissions": ["0"]}

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.send_from_wallet(1, 1, "dest"),
            lambda c: c.send_from_account(1, 2, 1, "dest"),
            lambda c: c.set_permissions(1, 2, ["view"]),
            lambda c: c.remove_all_permissions(1, 2),
        ],
    )
    def test_signed_calls_require_secret(self, call) -> None:
        client, transport = _client(secret=None)
        with pytest.raises(MissingSecretError):
            call(client)
        assert transport.calls == []

    def test_send_requires_recipient(self) -> None:
        client, transport = _client()
        with pytest.raises(ValidationError):
            client.send_from_account(1, 2, 1, "")
        assert transport.calls == []


class TestClientBehaviour:
    """Contract errors, transport errors and lifecycle."""

    def test_missing_account_id_fails_before_request(self) -> None:
        client, transport = _client()
        with pytest.raises(MissingIdentifierError):
            client.get_account(3, None)  # type: ignore[arg-type]
        assert transport.calls == []

    def test_header_and_signature_come_from_credentials(self) -> None:
        class RotatedConfig(ClientConfig):
            @property
            def credentials(self) -> Credentials:
                return Credentials(api_token="rotated", secret_token="rotated-secret")

        transport = RecordingTransport()
        client = AddressClient(RotatedConfig(coin="btc", api_token=API_TOKEN), transport)

        client.send_from_wallet(1, "2", "dest")

        assert transport.last["headers"] == {API_TOKEN_HEADER: "rotated"}
        expected = hmac.new(b"rotated-secret", b"amount=2&recepient=dest", hashlib.sha256)
        assert transport.last["data"][-1] == ("sign", expected.hexdigest())

    def test_transport_errors_propagate(self) -> None:
        failure = RequestFailedError("boom", endpoint="coins", status_code=500)
        client, _ = _client(error=failure)
        with pytest.raises(RequestFailedError) as excinfo:
            client.get_coins()
        assert excinfo.value is failure

    def test_for_coin_shares_transport(self) -> None:
        client, transport = _client()

        ltc = client.for_coin("ltc")
        ltc.get_wallets()

        assert ltc.coin == "ltc"
        assert client.coin == "btc"
        assert transport.last["path"] == "coins/ltc/wallets/"

    def test_context_manager_closes_transport(self) -> None:
        client, transport = _client()
        with client as active:
            active.get_coins()
        assert transport.closed

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ADDRESS_API_TOKEN", "env-token")
        monkeypatch.setenv("ADDRESS_COIN", "doge")
        monkeypatch.delenv("ADDRESS_SECRET_TOKEN", raising=False)
        monkeypatch.delenv("ADDRESS_BASE_URL", raising=False)
        monkeypatch.delenv("ADDRESS_REQUEST_TIMEOUT", raising=False)
        monkeypatch.setattr("address_api.config.load_dotenv", lambda: False)
        transport = RecordingTransport()

        client = AddressClient.from_env(transport=transport)
        client.get_coin()

        assert transport.last["path"] == "coins/doge/"
        assert transport.last["headers"] == {API_TOKEN_HEADER: "env-token"}
