"""Composition root: builds the transport clients, adapters and the facade once.

Usage:
    async with build_scrobble_service() as runtime:
        tracks = await runtime.service.fetch_recent_tracks("rj", Provider.LASTFM)
"""

import logging
from dataclasses import dataclass
from typing import Any

from scrobbleview.application.services.scrobble_service import ScrobbleService
from scrobbleview.config.settings import Settings, get_settings
from scrobbleview.domain.entities import Provider
from scrobbleview.infrastructure.integrations.http_client import ScrobbleHttpClient
from scrobbleview.infrastructure.integrations.lastfm_client import LastfmClient
from scrobbleview.infrastructure.integrations.listenbrainz_client import (
    ListenBrainzClient,
)
from scrobbleview.infrastructure.observability.logging import configure_logging

logger = logging.getLogger(__name__)


@dataclass
class ScrobbleRuntime:
    """Everything built at startup, plus ownership of the HTTP clients.

    ``image_http`` is the uncached client, handed to the collage renderer for
    album art downloads.
    """

    service: ScrobbleService
    http: ScrobbleHttpClient
    image_http: ScrobbleHttpClient

    async def close(self) -> None:
        """Close both HTTP clients."""
        await self.http.close()
        await self.image_http.close()
        stats = self.http.cache.get_stats() if self.http.cache is not None else {}
        logger.info("Scrobble HTTP clients closed", extra={"cache_stats": stats})

    async def __aenter__(self) -> "ScrobbleRuntime":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


def build_scrobble_service(
    settings: Settings | None = None, setup_logging: bool = True
) -> ScrobbleRuntime:
    """
    Wire the facade from settings.

    Args:
        settings: Settings to use (defaults to get_settings())
        setup_logging: Configure the root logger from settings.logging

    Returns:
        ScrobbleRuntime; close it (or use ``async with``) at shutdown
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(
            log_level=settings.logging.level,
            json_format=settings.logging.json_format,
            app_name=settings.app_name,
        )

    http = ScrobbleHttpClient.cached(settings.http)
    image_http = ScrobbleHttpClient.uncached(settings.http)

    service = ScrobbleService.from_adapters(
        LastfmClient(http, Provider.LASTFM, settings.lastfm),
        LastfmClient(http, Provider.LIBREFM, settings.librefm),
        ListenBrainzClient(http, settings.listenbrainz),
    )
    logger.info(
        "Scrobble service ready (cache=%d entries, ttl=%ds)",
        settings.http.cache_max_entries,
        settings.http.cache_ttl_seconds,
    )
    return ScrobbleRuntime(service=service, http=http, image_http=image_http)
