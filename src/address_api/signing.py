"""Canonical parameter encoding and HMAC request signing."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from .exceptions import MissingSecretError, ValidationError
from .types import ParameterSet

SIGNATURE_FIELD = "sign"


def build_params(**fields: Any) -> ParameterSet:
    """Return an ordered parameter set, dropping fields whose value is ``None``.

    Keyword order is preserved, which keeps the signature input stable.
    """
    params: ParameterSet = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, list | tuple):
            params[key] = [_render_scalar(key, item) for item in value]
        else:
            params[key] = value
    return params


def _render_scalar(key: str, value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        value = Decimal(str(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValidationError(f"Parameter '{key}' must be finite", field=key, value=value)
        return format(value, "f")
    raise ValidationError(
        f"Unsupported value type for parameter '{key}': {type(value).__name__}",
        field=key,
        value=value,
    )


def encode_pairs(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten ``params`` into ordered form fields.

    Sequence values become repeated ``key[]`` fields in element order.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, list | tuple):
            for item in value:
                if isinstance(item, list | tuple | Mapping):
                    raise ValidationError(
                        f"Nested values are not supported for parameter '{key}'",
                        field=key,
                        value=value,
                    )
                pairs.append((f"{key}[]", _render_scalar(key, item)))
        else:
            pairs.append((key, _render_scalar(key, value)))
    return pairs


def encode_params(params: Mapping[str, Any]) -> str:
    """Return the form-url-encoded query string used as the signing input."""
    return urlencode(encode_pairs(params))


def sign(params: Mapping[str, Any], secret: str | None) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``params`` keyed by ``secret``.

    The input mapping is not modified; callers add the result under
    ``SIGNATURE_FIELD`` themselves.
    """
    if not secret:
        raise MissingSecretError()

    message = encode_params(params)
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def with_signature(params: Mapping[str, Any], secret: str | None) -> ParameterSet:
    """Return a copy of ``params`` with the signature appended as the last field."""
    signed: ParameterSet = dict(params)
    signed[SIGNATURE_FIELD] = sign(params, secret)
    return signed
