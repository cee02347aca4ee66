"""Configuration containers for the address.so API client."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .types import Credentials

DEFAULT_BASE_URL = "https://api.address.so/api/"
DEFAULT_REQUEST_TIMEOUT = 10.0
ENV_PREFIX = "ADDRESS_"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings shared by every request a client issues."""

    coin: str
    api_token: str
    secret_token: str | None = None
    base_url: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not isinstance(self.coin, str) or not self.coin:
            raise ConfigurationError(
                "Coin symbol must be a non-empty string", details={"coin": self.coin}
            )
        if not isinstance(self.api_token, str) or not self.api_token:
            raise ConfigurationError("An API token is required")
        timeout = self.request_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
            raise ConfigurationError(
                "Request timeout must be a positive number",
                details={"request_timeout": timeout},
            )

    def __repr__(self) -> str:
        return (
            f"ClientConfig(coin={self.coin!r}, base_url={self.resolved_base_url()!r}, "
            f"request_timeout={self.request_timeout!r}, signing={self.can_sign})"
        )

    @property
    def credentials(self) -> Credentials:
        return Credentials(api_token=self.api_token, secret_token=self.secret_token)

    @property
    def can_sign(self) -> bool:
        return bool(self.secret_token)

    def resolved_base_url(self) -> str:
        """Return the API base URL with exactly one trailing slash."""

        return (self.base_url or DEFAULT_BASE_URL).rstrip("/") + "/"

    def with_coin(self, coin: str) -> ClientConfig:
        """Return a copy of this configuration targeting ``coin``."""

        return replace(self, coin=coin)

    @classmethod
    def from_env(
        cls,
        coin: str | None = None,
        *,
        prefix: str = ENV_PREFIX,
        dotenv: bool = True,
    ) -> ClientConfig:
        """Build a configuration from ``<prefix>*`` environment variables.

        Reads API_TOKEN, SECRET_TOKEN, COIN, BASE_URL and REQUEST_TIMEOUT.
        A ``.env`` file is loaded first unless ``dotenv`` is false; values
        already present in the environment win.
        """

        if dotenv:
            load_dotenv()

        api_token = os.getenv(f"{prefix}API_TOKEN")
        if not api_token:
            raise ConfigurationError(f"{prefix}API_TOKEN not found in environment variables")

        coin = coin or os.getenv(f"{prefix}COIN")
        if not coin:
            raise ConfigurationError(f"{prefix}COIN not found in environment variables")

        raw_timeout = os.getenv(f"{prefix}REQUEST_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_REQUEST_TIMEOUT
        except ValueError as exc:
            raise ConfigurationError(
                f"{prefix}REQUEST_TIMEOUT must be a number",
                details={"value": raw_timeout},
            ) from exc

        return cls(
            coin=coin,
            api_token=api_token,
            secret_token=os.getenv(f"{prefix}SECRET_TOKEN") or None,
            base_url=os.getenv(f"{prefix}BASE_URL") or None,
            request_timeout=timeout,
        )
