"""
Provider failure classification.

Every metadata provider operation either returns a complete result or
raises a ProviderError. Nothing in between.

Failure kinds:
- NotFound: requested id/key does not exist upstream
- TransportFailure: network or I/O failure reaching the provider
- MalformedDocument: provider returned data that cannot be parsed

A cache miss is NOT a failure. It is the normal trigger for a provider call.

INVARIANT: Provider errors are never cached. A later request for the same
key must reach the underlying provider again.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of provider failures."""

    NOT_FOUND = "not_found"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_DOCUMENT = "malformed_document"


class ProviderError(Exception):
    """
    Base class for failures raised by a metadata provider.

    Attributes:
        kind: Classification of the failure
        message: Human-readable explanation
        detail: Additional technical detail (URL, status code, parser output)
        retryable: Whether repeating the request may succeed
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        retryable: bool = True,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.retryable = retryable
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class NotFoundError(ProviderError):
    """
    The requested document does not exist upstream.

    Semantically permanent for most keys (an unknown version id will not
    start existing later) but still harmless to retry.
    """

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.NOT_FOUND, message=message, detail=detail)


class TransportError(ProviderError):
    """Network or I/O failure reaching the provider, timeouts included."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.TRANSPORT_FAILURE, message=message, detail=detail)


class MalformedDocumentError(ProviderError):
    """The provider returned data that does not fit the expected document shape."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(kind=FailureKind.MALFORMED_DOCUMENT, message=message, detail=detail)
