"""ListenBrainz adapter.

Separate code path from Last.fm: plain REST URLs with the username in the path,
``count``/``offset`` paging and numeric JSON. Statistics endpoints answer
``204 No Content`` until the nightly job has computed them for a user.
"""

import asyncio
import logging
from typing import Any
from urllib.parse import quote

from scrobbleview.config.settings import ListenBrainzSettings
from scrobbleview.domain.entities import (
    Album,
    Artist,
    Provider,
    ScrobbleUser,
    TimePeriod,
    Track,
)
from scrobbleview.domain.exceptions import UnsupportedOperationError
from scrobbleview.domain.ports import IScrobbleProvider
from scrobbleview.domain.value_objects.period_vocabulary import period_to_api_string
from scrobbleview.infrastructure.integrations import listenbrainz_parsing
from scrobbleview.infrastructure.integrations.http_client import ScrobbleHttpClient

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 100


class ListenBrainzClient(IScrobbleProvider):
    """Adapter for the ListenBrainz API."""

    def __init__(
        self, http: ScrobbleHttpClient, settings: ListenBrainzSettings | None = None
    ) -> None:
        """
        Initialize the adapter.

        Args:
            http: Shared transport client
            settings: Base URL and optional user token
        """
        self.http = http
        self.settings = settings or ListenBrainzSettings()

    @property
    def providers(self) -> tuple[Provider, ...]:
        return (Provider.LISTENBRAINZ,)

    def _user_url(self, username: str, *segments: str) -> str:
        # Usernames may contain "/" or spaces, they must stay one path segment
        return self.settings.base_url + "/".join(
            ("user", quote(username, safe=""), *segments)
        )

    def _stats_url(self, username: str, kind: str) -> str:
        return f"{self.settings.base_url}stats/user/{quote(username, safe='')}/{kind}"

    async def _get(
        self, url: str, params: dict[str, Any] | None = None, prefer_cached: bool = True
    ) -> Any:
        headers = {}
        if self.settings.token:
            headers["Authorization"] = f"Token {self.settings.token}"
        logger.debug("ListenBrainz GET %s", url)
        return await self.http.get_json(
            url,
            Provider.LISTENBRAINZ,
            params=params,
            prefer_cached=prefer_cached,
            headers=headers,
        )

    # Hey future me, the playing-now probe comes FIRST and for the common "what am I listening
    # to" command (limit=1) it's the only call when something is playing. Don't merge the two
    # requests or reorder them - the bot's "now playing" reply depends on that first entry.
    async def fetch_recent_tracks(
        self, username: str, prefer_cached: bool = True, limit: int = 3
    ) -> list[Track]:
        data = await self._get(
            self._user_url(username, "playing-now"), prefer_cached=prefer_cached
        )
        tracks = listenbrainz_parsing.parse_listens_payload(data, now_playing=True)
        if tracks and limit == 1:
            return tracks

        data = await self._get(
            self._user_url(username, "listens"),
            params={"count": limit},
            prefer_cached=prefer_cached,
        )
        tracks.extend(listenbrainz_parsing.parse_listens_payload(data))
        return tracks

    async def fetch_loved_tracks(self, username: str, limit: int = 5) -> list[Track]:
        url = (
            f"{self.settings.base_url}feedback/user/"
            f"{quote(username, safe='')}/get-feedback"
        )
        data = await self._get(
            url, params={"score": 1, "metadata": "true", "count": limit}
        )
        return listenbrainz_parsing.parse_feedback(data)

    async def _fetch_stats(
        self,
        username: str,
        kind: str,
        period: TimePeriod,
        limit: int | None,
        page: int,
    ) -> Any:
        count = limit if limit is not None else DEFAULT_TOP_LIMIT
        params = {
            "range": period_to_api_string(period, Provider.LISTENBRAINZ),
            "count": count,
            "offset": (max(page, 1) - 1) * count,
        }
        return await self._get(self._stats_url(username, kind), params=params)

    async def fetch_top_albums(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Album]:
        data = await self._fetch_stats(username, "releases", period, limit, page)
        return listenbrainz_parsing.parse_top_releases(data)

    async def fetch_top_artists(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Artist]:
        data = await self._fetch_stats(username, "artists", period, limit, page)
        return listenbrainz_parsing.parse_top_artists(data)

    async def fetch_top_tracks(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Track]:
        data = await self._fetch_stats(username, "recordings", period, limit, page)
        return listenbrainz_parsing.parse_top_recordings(data)

    async def fetch_user_info(self, username: str) -> ScrobbleUser:
        """
        Assemble a profile summary from four independent calls, run concurrently.

        ListenBrainz has no single "user info" endpoint. The first failing call
        fails the whole lookup; partial profiles are never returned.

        Args:
            username: ListenBrainz account name

        Returns:
            ScrobbleUser with play, artist, album (release) and track (recording) counts
        """
        listen_count, artists, releases, recordings = await asyncio.gather(
            self._get(self._user_url(username, "listen-count")),
            self._get(self._stats_url(username, "artists")),
            self._get(self._stats_url(username, "releases")),
            self._get(self._stats_url(username, "recordings")),
        )
        return ScrobbleUser(
            username=username,
            playcount=listenbrainz_parsing.parse_listen_count(listen_count),
            artist_count=listenbrainz_parsing.parse_total_count(artists, "artist"),
            album_count=listenbrainz_parsing.parse_total_count(releases, "release"),
            track_count=listenbrainz_parsing.parse_total_count(recordings, "recording"),
        )

    async def fetch_track_info(self, username: str, artist: str, track: str) -> Track:
        raise UnsupportedOperationError("ListenBrainz has no track detail lookup")

    async def fetch_album_info(self, username: str, artist: str, album: str) -> Album:
        raise UnsupportedOperationError("ListenBrainz has no album detail lookup")

    async def fetch_artist_info(self, username: str, artist: str) -> Artist:
        raise UnsupportedOperationError("ListenBrainz has no artist detail lookup")
