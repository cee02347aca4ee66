"""HTTP transport used by the client to talk to the address.so API."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import requests

from .exceptions import RequestFailedError

logger = logging.getLogger(__name__)

_BODY_EXCERPT = 500


class Transport(Protocol):
    """Performs one HTTP exchange and returns the decoded JSON body."""

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str],
        data: Sequence[tuple[str, str]] = (),
    ) -> Any: ...

    def close(self) -> None: ...


class RequestsTransport:
    """``requests.Session`` backed transport sending form-encoded bodies."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") + "/"
        self._timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return self._base_url + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str],
        data: Sequence[tuple[str, str]] = (),
    ) -> Any:
        url = self.url_for(path)
        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=list(data) or None,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise RequestFailedError(
                f"{method} {path} failed: {exc}",
                endpoint=url,
                details={"error": str(exc)},
            ) from exc

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error("%s %s returned HTTP %s", method, url, response.status_code)
            raise RequestFailedError(
                f"{method} {path} returned HTTP {response.status_code}",
                endpoint=url,
                status_code=response.status_code,
                details={"body": response.text[:_BODY_EXCERPT]},
            ) from exc

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as exc:
            logger.error("%s %s returned a non-JSON body", method, url)
            raise RequestFailedError(
                f"{method} {path} returned malformed JSON",
                endpoint=url,
                status_code=response.status_code,
                details={"body": response.text[:_BODY_EXCERPT]},
            ) from exc

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
