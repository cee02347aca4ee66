"""Exception hierarchy for the address.so wallet API client."""

from typing import Any


class AddressAPIError(Exception):
    """Base exception for all address.so client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MissingIdentifierError(AddressAPIError):
    """Raised when a path needs a wallet or account id that was not supplied."""

    def __init__(self, identifier: str, kind: str | None = None, operation: str | None = None):
        target = f" for {kind}.{operation}" if kind and operation else ""
        super().__init__(f"Missing required identifier '{identifier}'{target}")
        self.identifier = identifier
        self.kind = kind
        self.operation = operation


class MissingSecretError(AddressAPIError):
    """Raised when a signed request is attempted without a secret token."""

    def __init__(self, message: str = "A secret token is required to sign this request"):
        super().__init__(message)


class UnknownOperationError(AddressAPIError):
    """Raised when a resource kind / operation pair has no path template."""

    def __init__(self, kind: Any, operation: Any):
        super().__init__(f"No path template for {kind!s}.{operation!s}")
        self.kind = kind
        self.operation = operation


class ValidationError(AddressAPIError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigurationError(AddressAPIError):
    """Raised when client configuration is incomplete."""

    pass


class RequestFailedError(AddressAPIError):
    """Raised when the HTTP exchange with the API fails."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code

    @property
    def cause(self) -> BaseException | None:
        """Underlying exception that triggered the failure, if any."""
        return self.__cause__
