"""Aggregation facade over the provider adapters.

Hey future me - this is the ONLY thing the chat layer talks to. Every call takes the
Provider the user linked and is routed to the adapter registered for it:

    service = ScrobbleService.from_adapters(lastfm, librefm, listenbrainz)
    tracks = await service.fetch_recent_tracks("rj", Provider.LASTFM, limit=1)

Errors from adapters pass through UNCHANGED. The chat layer picks its wording from the
exception type (UserNotFoundError, PrivateProfileError, ...) and the provider attribute.
"""

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import Any

from scrobbleview.domain.entities import (
    Album,
    Artist,
    EntryType,
    Provider,
    ScrobbleUser,
    TimePeriod,
    Track,
    TrackContext,
    UserPreferences,
)
from scrobbleview.domain.exceptions import (
    ConfigurationError,
    EntityNotFoundException,
    UnsupportedOperationError,
)
from scrobbleview.domain.ports import (
    ICollageRenderer,
    IScrobbleProvider,
    IUserPreferenceStore,
)
from scrobbleview.domain.value_objects.chart_args import ChartArgs
from scrobbleview.domain.value_objects.compatibility import (
    Compatibility,
    compute_compatibility,
)

logger = logging.getLogger(__name__)


class ScrobbleService:
    """Routes listening-history requests to the adapter of the user's provider."""

    def __init__(self, providers: Mapping[Provider, IScrobbleProvider]) -> None:
        """
        Initialize the facade.

        Args:
            providers: Adapter per provider; every Provider must be present

        Raises:
            ConfigurationError: If a provider has no adapter
        """
        missing = [provider.value for provider in Provider if provider not in providers]
        if missing:
            raise ConfigurationError(
                "No adapter registered for: " + ", ".join(missing)
            )
        self._providers = dict(providers)

    @classmethod
    def from_adapters(cls, *adapters: IScrobbleProvider) -> "ScrobbleService":
        """Build the routing table from each adapter's ``providers``."""
        providers: dict[Provider, IScrobbleProvider] = {}
        for adapter in adapters:
            for provider in adapter.providers:
                if provider in providers:
                    raise ConfigurationError(
                        f"Two adapters registered for {provider.value}"
                    )
                providers[provider] = adapter
        return cls(providers)

    def adapter_for(self, provider: Provider) -> IScrobbleProvider:
        return self._providers[provider]

    async def fetch_recent_tracks(
        self,
        username: str,
        provider: Provider,
        prefer_cached: bool = True,
        limit: int = 3,
    ) -> list[Track]:
        """
        Get the user's latest listens, the now playing one first.

        Args:
            username: Provider account name
            provider: Where the account lives
            prefer_cached: Accept a response up to a few minutes old
            limit: Number of history entries; 1 means "just what's playing"

        Returns:
            Tracks newest first
        """
        logger.debug("recent tracks: %s@%s limit=%d", username, provider.value, limit)
        return await self.adapter_for(provider).fetch_recent_tracks(
            username, prefer_cached=prefer_cached, limit=limit
        )

    async def fetch_loved_tracks(
        self, username: str, provider: Provider, limit: int = 5
    ) -> list[Track]:
        logger.debug("loved tracks: %s@%s", username, provider.value)
        return await self.adapter_for(provider).fetch_loved_tracks(username, limit=limit)

    async def fetch_albums(
        self,
        username: str,
        provider: Provider,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Album]:
        logger.debug("top albums: %s@%s %s", username, provider.value, period.value)
        return await self.adapter_for(provider).fetch_top_albums(
            username, period, limit=limit, page=page
        )

    async def fetch_artists(
        self,
        username: str,
        provider: Provider,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Artist]:
        logger.debug("top artists: %s@%s %s", username, provider.value, period.value)
        return await self.adapter_for(provider).fetch_top_artists(
            username, period, limit=limit, page=page
        )

    async def fetch_tracks(
        self,
        username: str,
        provider: Provider,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Track]:
        logger.debug("top tracks: %s@%s %s", username, provider.value, period.value)
        return await self.adapter_for(provider).fetch_top_tracks(
            username, period, limit=limit, page=page
        )

    async def fetch_top(
        self,
        username: str,
        provider: Provider,
        entry_type: EntryType,
        period: TimePeriod,
        limit: int | None = None,
    ) -> list[Album] | list[Artist] | list[Track]:
        """Chart of ``entry_type`` (the /top command's entity switch)."""
        if entry_type is EntryType.ARTIST:
            return await self.fetch_artists(username, provider, period, limit)
        if entry_type is EntryType.TRACK:
            return await self.fetch_tracks(username, provider, period, limit)
        return await self.fetch_albums(username, provider, period, limit)

    async def fetch_user_info(self, username: str, provider: Provider) -> ScrobbleUser:
        logger.debug("user info: %s@%s", username, provider.value)
        return await self.adapter_for(provider).fetch_user_info(username)

    async def fetch_track_info(
        self, username: str, provider: Provider, artist: str, track: str
    ) -> Track:
        return await self.adapter_for(provider).fetch_track_info(username, artist, track)

    async def fetch_album_info(
        self, username: str, provider: Provider, artist: str, album: str
    ) -> Album:
        return await self.adapter_for(provider).fetch_album_info(username, artist, album)

    async def fetch_artist_info(
        self, username: str, provider: Provider, artist: str
    ) -> Artist:
        return await self.adapter_for(provider).fetch_artist_info(username, artist)

    # Yo, both lookups run concurrently - the panel is shown right after "now playing" and
    # waiting for them one after the other doubles the reply latency. A side the provider
    # can't answer ("not found", or no detail endpoint at all) becomes None so the panel
    # still renders the other half. Transport and status errors still fail the whole call.
    async def fetch_track_context(
        self, username: str, provider: Provider, artist: str, track: str
    ) -> TrackContext:
        """
        Fetch artist and track details for the "now playing" info panel.

        Args:
            username: Account whose personal play counts to include
            provider: Where the account lives
            artist: Artist name of the playing track
            track: Title of the playing track

        Returns:
            TrackContext; a side is None when the provider has no details for it
        """
        adapter = self.adapter_for(provider)
        track_info, artist_info = await asyncio.gather(
            _optional(adapter.fetch_track_info(username, artist, track)),
            _optional(adapter.fetch_artist_info(username, artist)),
        )
        return TrackContext(track=track_info, artist=artist_info)

    async def fetch_compatibility(
        self,
        user_a: UserPreferences,
        user_b: UserPreferences,
        period: TimePeriod = TimePeriod.ONE_YEAR,
    ) -> Compatibility:
        """
        Compare the top artists of two linked accounts (possibly on different providers).

        Both charts are fetched concurrently.
        """
        artists_a, artists_b = await asyncio.gather(
            self.fetch_artists(user_a.username, user_a.provider, period),
            self.fetch_artists(user_b.username, user_b.provider, period),
        )
        return compute_compatibility(artists_a, artists_b)

    async def fetch_collage_albums(
        self, username: str, provider: Provider, args: ChartArgs
    ) -> list[Album]:
        """Albums for a ``args.size`` x ``args.size`` collage: chart order, art only."""
        albums = await self.fetch_albums(username, provider, args.period)
        with_art = [album for album in albums if album.album_art_url]
        return with_art[: args.size * args.size]

    async def build_collage(
        self,
        renderer: ICollageRenderer,
        username: str,
        provider: Provider,
        args: ChartArgs,
    ) -> Any:
        """Fetch the album chart and hand it to the collage renderer."""
        albums = await self.fetch_collage_albums(username, provider, args)
        return await renderer.render(albums, args.size, clean=args.clean)

    @staticmethod
    async def resolve_account(
        store: IUserPreferenceStore, user_id: int
    ) -> UserPreferences:
        """
        Look up the provider account linked to a chat user.

        Raises:
            EntityNotFoundException: If the user never linked an account
        """
        preferences = await store.get(user_id)
        if preferences is None:
            raise EntityNotFoundException("User", user_id)
        return preferences


async def _optional[T](lookup: Awaitable[T]) -> T | None:
    try:
        return await lookup
    except (EntityNotFoundException, UnsupportedOperationError) as e:
        logger.debug("Detail lookup skipped: %s", e.message)
        return None
