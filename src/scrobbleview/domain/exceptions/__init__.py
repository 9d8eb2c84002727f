"""Domain exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scrobbleview.domain.entities import Provider

GENERIC_ERROR_MESSAGE = "Something went wrong while talking to the scrobble service."
USER_NOT_FOUND_MESSAGE = "No such user"


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so the chat layer can show it without
    # parsing str(exception). Never raise this directly - pick a subclass so callers can catch
    # precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when a single entity lookup finds nothing."""

    # entity_type/entity_id stay separate so the renderer can say "No such track" without
    # string parsing. Detail lookups (track/album/artist info) raise this, list fetches never do.
    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Raised at import or startup time when static tables or provider wiring
    are incomplete.

    Example:
        raise ConfigurationError("No period string for listenbrainz/ONE_WEEK")
    """

    pass


class ValidationError(DomainException):
    """Input validation failed.

    Example:
        raise ValidationError("Chart size must be between 1 and 7, got 9")
    """

    pass


class UnsupportedOperationError(DomainException):
    """The provider has no endpoint for the requested operation.

    Example:
        raise UnsupportedOperationError("ListenBrainz has no track detail lookup")
    """

    pass


# =============================================================================
# Provider failures
# Everything below carries the provider it came from, so the renderer can pick
# provider specific wording. The facade re-raises these untouched.
# =============================================================================


class ScrobbleProviderError(DomainException):
    """Base class for failures while talking to a scrobble provider."""

    def __init__(self, message: str, provider: Provider | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderTransportError(ScrobbleProviderError):
    """Network, TLS or timeout failure. Never retried by the core.

    Example:
        raise ProviderTransportError("Timed out after 25.0s", provider=Provider.LASTFM)
    """

    pass


class ProviderHttpError(ScrobbleProviderError):
    """The provider answered with a non-2xx status.

    The message is already the human readable text for the status.
    """

    def __init__(
        self, message: str, status_code: int, provider: Provider | None = None
    ) -> None:
        super().__init__(message, provider)
        self.status_code = status_code


class UserNotFoundError(ProviderHttpError):
    """404 from the provider (or its body-level equivalent)."""

    def __init__(
        self, provider: Provider | None = None, message: str = USER_NOT_FOUND_MESSAGE
    ) -> None:
        super().__init__(message, 404, provider)


class PrivateProfileError(ProviderHttpError):
    """403 from the provider: the user hides their listening history."""

    def __init__(self, message: str, provider: Provider | None = None) -> None:
        super().__init__(message, 403, provider)


class ProviderApiError(ScrobbleProviderError):
    """The provider returned an error object inside a 200 response.

    Last.fm style APIs do this, e.g. ``{"error": 8, "message": "Operation failed"}``.
    """

    def __init__(
        self, message: str, error_code: int | None = None, provider: Provider | None = None
    ) -> None:
        super().__init__(message, provider)
        self.error_code = error_code


class MalformedResponseError(ScrobbleProviderError):
    """A 200 response whose body is not JSON or lacks a required object.

    Kept apart from ProviderHttpError so callers can tell "the provider says no
    such thing" from "the provider sent garbage".
    """

    pass


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "USER_NOT_FOUND_MESSAGE",
    # Base
    "DomainException",
    # Entity exceptions
    "EntityNotFoundException",
    # Validation
    "ValidationError",
    # Startup / wiring
    "ConfigurationError",
    "UnsupportedOperationError",
    # Provider exceptions
    "ScrobbleProviderError",
    "ProviderTransportError",
    "ProviderHttpError",
    "UserNotFoundError",
    "PrivateProfileError",
    "ProviderApiError",
    "MalformedResponseError",
]
