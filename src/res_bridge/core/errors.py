"""Failure types raised by the registry client."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from res_bridge.core.models import RegistryError

SERVICE_UNAVAILABLE_MESSAGE = "RES nacional service unavailable. Try again."


class RegistryUnavailableError(Exception):
    """Raised when a registry query could not be answered, whatever the reason."""

    def __init__(self, message: str = SERVICE_UNAVAILABLE_MESSAGE) -> None:
        super().__init__(message)


class RegistryProtocolError(RegistryUnavailableError):
    """Raised when the registry answered with a non-success status."""

    def __init__(
        self,
        errors: List["RegistryError"],
        message: str = SERVICE_UNAVAILABLE_MESSAGE,
    ) -> None:
        super().__init__(message)
        self.errors = list(errors)


class RegistryTransportError(RegistryUnavailableError):
    """
    Raised when the exchange with the registry could not be completed.

    Covers malformed endpoint configuration, connection failures, timeouts,
    SOAP faults and payloads that cannot be deserialized. The underlying
    exception, when there is one, is chained as ``__cause__``.
    """

    def __init__(
        self,
        detail: str,
        *,
        status_code: Optional[int] = None,
        message: str = SERVICE_UNAVAILABLE_MESSAGE,
    ) -> None:
        super().__init__(message)
        self.detail = detail
        self.status_code = status_code
