"""Status-gated, optionally caching HTTP transport shared by all provider adapters.

Hey future me - there are exactly TWO of these per process, built once in bootstrap:

    cached = ScrobbleHttpClient.cached(settings.http)      # charts, profiles, details
    uncached = ScrobbleHttpClient.uncached(settings.http)  # album art downloads for collages

Adapters only ever call get_json(). It returns decoded JSON or raises one of the
ScrobbleProviderError subclasses, so adapters never see httpx exceptions or status codes.
Collage renderers download album art through get_bytes().

Freshness is per call: prefer_cached=True accepts a response up to max_stale_seconds old,
prefer_cached=False skips the stored entry and refreshes it (the "now playing" probe).
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

import httpx

from scrobbleview.config.settings import HttpSettings
from scrobbleview.domain.entities import Provider
from scrobbleview.domain.exceptions import (
    GENERIC_ERROR_MESSAGE,
    MalformedResponseError,
    PrivateProfileError,
    ProviderHttpError,
    ProviderTransportError,
    UserNotFoundError,
)
from scrobbleview.infrastructure.cache.response_cache import CachedResponse, ResponseCache

logger = logging.getLogger(__name__)

NO_CACHE_DIRECTIVE = "no-cache, must-revalidate"


def freshness_header(prefer_cached: bool, max_stale_seconds: int) -> str:
    """Outgoing cache-control value for a call's freshness preference."""
    if prefer_cached:
        return f"max-stale={max_stale_seconds}"
    return NO_CACHE_DIRECTIVE


def raise_for_provider_status(response: httpx.Response, provider: Provider) -> None:
    """Turn a non-2xx response into the matching typed error.

    Raises:
        UserNotFoundError: 404
        PrivateProfileError: 403, with the provider's own wording
        ProviderHttpError: any other non-2xx, message = HTTP reason phrase
    """
    if response.is_success:
        return

    status = response.status_code
    if status == 404:
        raise UserNotFoundError(provider=provider)
    if status == 403:
        raise PrivateProfileError(provider.private_profile_message, provider=provider)

    reason = response.reason_phrase or GENERIC_ERROR_MESSAGE
    raise ProviderHttpError(reason, status_code=status, provider=provider)


class CachingTransport(httpx.AsyncBaseTransport):
    """Transport wrapper that answers GETs from a ResponseCache.

    Requests without ``no-cache`` get ``max-stale`` appended and are served from
    the cache when a live entry exists. Responses get their ``cache-control``
    rewritten to ``max-age=<ttl>, public, immutable`` so every provider answer is
    treated as cacheable for the TTL regardless of what the provider sent.
    Only 2xx responses are stored, and never when the provider said ``no-store``.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport,
        cache: ResponseCache,
        max_stale_seconds: int = 300,
    ) -> None:
        self._transport = transport
        self.cache = cache
        self.max_stale_seconds = max_stale_seconds

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET":
            return await self._transport.handle_async_request(request)

        key = ResponseCache.key_for(request)
        directives = request.headers.get("cache-control", "")
        bypass = "no-cache" in directives

        if not bypass:
            if "max-stale" not in directives:
                stale = f"max-stale={self.max_stale_seconds}"
                request.headers["cache-control"] = (
                    f"{directives}, {stale}" if directives else stale
                )
            cached = await self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit: %s", request.url)
                return cached.to_response(request)
            logger.debug("Cache miss: %s", request.url)
        else:
            logger.debug("Cache bypass: %s", request.url)

        response = await self._transport.handle_async_request(request)
        try:
            await response.aread()
        finally:
            await response.aclose()

        upstream_directives = response.headers.get("cache-control", "")
        snapshot = CachedResponse.from_response(response)
        snapshot = replace(
            snapshot,
            headers=_with_cache_control(
                snapshot.headers,
                f"max-age={int(self.cache.ttl_seconds)}, public, immutable",
            ),
        )

        if response.is_success and "no-store" not in upstream_directives:
            await self.cache.set(key, snapshot)

        return snapshot.to_response(request)

    async def aclose(self) -> None:
        await self._transport.aclose()


def _with_cache_control(
    headers: tuple[tuple[str, str], ...], value: str
) -> tuple[tuple[str, str], ...]:
    kept = tuple((k, v) for k, v in headers if k.lower() != "cache-control")
    return kept + (("cache-control", value),)


class ScrobbleHttpClient:
    """Async JSON GET client with provider aware error mapping."""

    def __init__(
        self,
        settings: HttpSettings,
        cache: ResponseCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client. Prefer the cached()/uncached() constructors.

        Args:
            settings: Shared transport settings
            cache: Response cache; None disables caching
            transport: Network transport to wrap (tests may pass a mock transport)
        """
        self.settings = settings
        self.cache = cache
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def cached(cls, settings: HttpSettings) -> "ScrobbleHttpClient":
        """Client whose GETs go through a fresh ResponseCache."""
        cache = ResponseCache(
            max_entries=settings.cache_max_entries,
            ttl_seconds=settings.cache_ttl_seconds,
        )
        return cls(settings, cache=cache)

    @classmethod
    def uncached(cls, settings: HttpSettings) -> "ScrobbleHttpClient":
        """Client that always hits the network."""
        return cls(settings)

    @property
    def is_caching(self) -> bool:
        return self.cache is not None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            transport = self._transport or httpx.AsyncHTTPTransport()
            if self.cache is not None:
                transport = CachingTransport(
                    transport, self.cache, self.settings.max_stale_seconds
                )
            self._client = httpx.AsyncClient(
                transport=transport,
                timeout=self.settings.timeout_seconds,
                headers={
                    "User-Agent": self.settings.user_agent,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # Hey future me, EVERY provider call funnels through here, so this is where httpx's
    # exception zoo becomes our taxonomy: timeouts and connection trouble -> ProviderTransportError,
    # non-2xx -> raise_for_provider_status, unparsable or undecodable body -> MalformedResponseError.
    # Any other httpx request error (redirect loops too) is a transport error. A 204 (or any
    # empty 2xx body) returns None; ListenBrainz uses that for "stats not computed yet".
    async def get_json(
        self,
        url: str,
        provider: Provider,
        params: Mapping[str, Any] | None = None,
        prefer_cached: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        GET ``url`` and decode the JSON body.

        Args:
            url: Absolute https URL
            provider: Provider the URL belongs to (selects error wording)
            params: Query parameters
            prefer_cached: Accept a cached response up to max_stale_seconds old
            headers: Extra request headers (e.g. Authorization)

        Returns:
            Decoded JSON, or None for an empty 2xx body

        Raises:
            ProviderTransportError: Non-https URL, network failure, timeout or redirect loop
            ProviderHttpError: Non-2xx status (see raise_for_provider_status)
            MalformedResponseError: Body is not JSON or its content-encoding is broken
        """
        if self.settings.https_only and httpx.URL(url).scheme != "https":
            raise ProviderTransportError(
                f"Refusing non-HTTPS URL: {url}", provider=provider
            )

        request_headers = {
            "cache-control": freshness_header(
                prefer_cached, self.settings.max_stale_seconds
            ),
            **(headers or {}),
        }

        client = await self._get_client()
        try:
            response = await client.get(
                url, params=dict(params) if params else None, headers=request_headers
            )
        except httpx.TimeoutException as e:
            logger.warning("%s request timed out: %s", provider.display_name, url)
            raise ProviderTransportError(
                f"Request timed out after {self.settings.timeout_seconds}s",
                provider=provider,
            ) from e
        except httpx.TransportError as e:
            logger.warning("%s request failed: %s (%s)", provider.display_name, url, e)
            raise ProviderTransportError(str(e) or GENERIC_ERROR_MESSAGE, provider=provider) from e
        except httpx.DecodingError as e:
            logger.warning("%s sent an undecodable body: %s", provider.display_name, url)
            raise MalformedResponseError(
                f"{provider.display_name} returned a body that could not be decoded",
                provider=provider,
            ) from e
        except httpx.RequestError as e:
            logger.warning("%s request failed: %s (%s)", provider.display_name, url, e)
            raise ProviderTransportError(str(e) or GENERIC_ERROR_MESSAGE, provider=provider) from e

        if not response.is_success:
            logger.warning(
                "%s answered %d for %s",
                provider.display_name,
                response.status_code,
                response.url,
            )
        raise_for_provider_status(response, provider)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"{provider.display_name} returned a response that is not JSON",
                provider=provider,
            ) from e

    async def get_bytes(self, url: str) -> bytes:
        """
        GET ``url`` and return the raw body (album art for collages).

        Raises:
            ProviderTransportError: Non-https URL, network failure or timeout
            ProviderHttpError: Non-2xx status
            MalformedResponseError: Body could not be decoded
        """
        if self.settings.https_only and httpx.URL(url).scheme != "https":
            raise ProviderTransportError(f"Refusing non-HTTPS URL: {url}")

        client = await self._get_client()
        try:
            response = await client.get(url, headers={"Accept": "image/*"})
        except httpx.DecodingError as e:
            logger.warning("Undecodable download: %s", url)
            raise MalformedResponseError(f"Could not decode body of {url}") from e
        except httpx.RequestError as e:
            logger.warning("Download failed: %s (%s)", url, e)
            raise ProviderTransportError(str(e) or GENERIC_ERROR_MESSAGE) from e

        if not response.is_success:
            raise ProviderHttpError(
                response.reason_phrase or GENERIC_ERROR_MESSAGE,
                status_code=response.status_code,
            )
        return response.content

    async def __aenter__(self) -> "ScrobbleHttpClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
