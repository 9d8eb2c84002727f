"""Last.fm / Libre.fm adapter.

Libre.fm is an API mirror of Last.fm: same methods, same parameters, same JSON.
One class serves both; the ``provider`` flag picks base URL, API key and the
wording of errors.
"""

import logging
from typing import Any

from scrobbleview.config.settings import LastfmSettings, LibrefmSettings
from scrobbleview.domain.entities import (
    Album,
    Artist,
    Provider,
    ScrobbleUser,
    TimePeriod,
    Track,
)
from scrobbleview.domain.exceptions import (
    EntityNotFoundException,
    MalformedResponseError,
    PrivateProfileError,
    ProviderApiError,
    UserNotFoundError,
)
from scrobbleview.domain.ports import IScrobbleProvider
from scrobbleview.domain.value_objects.period_vocabulary import period_to_api_string
from scrobbleview.infrastructure.integrations import lastfm_parsing
from scrobbleview.infrastructure.integrations.http_client import ScrobbleHttpClient
from scrobbleview.infrastructure.integrations.json_access import (
    get_optional_int,
    get_optional_str,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 200

# Body-level error codes, see https://www.last.fm/api/errorcodes
ERROR_INVALID_PARAMETERS = 6  # "User not found", "Track not found", ...
ERROR_LOGIN_REQUIRED = 17  # user hides their recent listening


class LastfmClient(IScrobbleProvider):
    """Adapter for the Last.fm protocol (Last.fm and Libre.fm)."""

    def __init__(
        self,
        http: ScrobbleHttpClient,
        provider: Provider = Provider.LASTFM,
        settings: LastfmSettings | LibrefmSettings | None = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            http: Shared transport client
            provider: LASTFM or LIBREFM
            settings: API key and base URL of that provider
        """
        if not provider.shares_lastfm_protocol:
            raise ValueError(f"{provider.value} does not speak the Last.fm protocol")
        self.http = http
        self.provider = provider
        self.settings = settings or (
            LastfmSettings() if provider is Provider.LASTFM else LibrefmSettings()
        )

    @property
    def providers(self) -> tuple[Provider, ...]:
        return (self.provider,)

    # Hey future me, Last.fm reports many failures INSIDE a 200 response, e.g.
    # {"error": 6, "message": "User not found"}. Libre.fm sometimes nests it as
    # {"error": {"code": 6, "#text": "..."}}. Both shapes are read here. Code 6 is ambiguous
    # ("invalid parameters") - it means "no such user" for user.* calls, and "no such
    # track/album/artist" for detail calls, which is why callers pass not_found.
    async def _make_request(
        self,
        method: str,
        params: dict[str, Any],
        prefer_cached: bool = True,
        not_found: tuple[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Make a request to the Last.fm API.

        Args:
            method: API method name, e.g. "user.getRecentTracks"
            params: Method parameters
            prefer_cached: Accept a cached response
            not_found: (entity_type, entity_id) to report for detail lookups

        Returns:
            Decoded response body

        Raises:
            EntityNotFoundException: Detail lookup of something unknown
            UserNotFoundError: User scoped call for an unknown user
            PrivateProfileError: The user's history is hidden
            ProviderApiError: Any other body-level error
            MalformedResponseError: Empty or non-object body
        """
        request_params = {
            "method": method,
            "api_key": self.settings.api_key,
            "format": "json",
            **params,
        }
        logger.debug("%s %s", self.provider.display_name, method)

        try:
            data = await self.http.get_json(
                self.settings.base_url,
                self.provider,
                params=request_params,
                prefer_cached=prefer_cached,
            )
        except UserNotFoundError as e:
            if not_found is not None:
                raise EntityNotFoundException(*not_found) from e
            raise

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"{self.provider.display_name} returned an empty response for {method}",
                provider=self.provider,
            )

        if "error" in data:
            self._raise_api_error(data, not_found)

        return data

    def _raise_api_error(
        self, data: dict[str, Any], not_found: tuple[str, str] | None
    ) -> None:
        code = get_optional_int(data, "error")
        message = get_optional_str(data, "message")
        if code is None:
            code = get_optional_int(data, "error", "code")
            message = message or get_optional_str(data, "error", "#text")

        if code == ERROR_LOGIN_REQUIRED:
            raise PrivateProfileError(
                self.provider.private_profile_message, provider=self.provider
            )
        if code == ERROR_INVALID_PARAMETERS:
            if not_found is not None:
                raise EntityNotFoundException(*not_found)
            raise UserNotFoundError(provider=self.provider)

        logger.warning(
            "%s API error %s: %s", self.provider.display_name, code, message
        )
        raise ProviderApiError(
            message or f"{self.provider.display_name} API error {code}",
            error_code=code,
            provider=self.provider,
        )

    async def fetch_recent_tracks(
        self, username: str, prefer_cached: bool = True, limit: int = 3
    ) -> list[Track]:
        data = await self._make_request(
            "user.getRecentTracks",
            {"user": username, "extended": "1", "limit": str(limit)},
            prefer_cached=prefer_cached,
        )
        return lastfm_parsing.parse_tracks(data, "recenttracks", self.provider)

    async def fetch_loved_tracks(self, username: str, limit: int = 5) -> list[Track]:
        data = await self._make_request(
            "user.getLovedTracks", {"user": username, "limit": str(limit)}
        )
        return lastfm_parsing.parse_tracks(data, "lovedtracks", self.provider)

    def _chart_params(
        self, username: str, period: TimePeriod, limit: int | None, page: int
    ) -> dict[str, Any]:
        return {
            "user": username,
            "period": period_to_api_string(period, self.provider),
            "limit": str(limit if limit is not None else DEFAULT_TOP_LIMIT),
            "page": str(page),
        }

    async def fetch_top_albums(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Album]:
        params = self._chart_params(username, period, limit, page)
        data = await self._make_request("user.getTopAlbums", params)
        return lastfm_parsing.parse_top_albums(data, self.provider)

    async def fetch_top_artists(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Artist]:
        params = self._chart_params(username, period, limit, page)
        data = await self._make_request("user.getTopArtists", params)
        return lastfm_parsing.parse_top_artists(data, self.provider)

    async def fetch_top_tracks(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Track]:
        params = self._chart_params(username, period, limit, page)
        data = await self._make_request("user.getTopTracks", params)
        return lastfm_parsing.parse_top_tracks(data, self.provider)

    async def fetch_user_info(self, username: str) -> ScrobbleUser:
        data = await self._make_request("user.getInfo", {"user": username})
        return lastfm_parsing.parse_user_info(data, username, self.provider)

    async def fetch_track_info(self, username: str, artist: str, track: str) -> Track:
        """
        Get track details with the user's play count and loved flag.

        Args:
            username: Account whose userplaycount/userloved to include
            artist: Artist name
            track: Track title

        Returns:
            Track with listeners, playcount, duration and tags filled in

        Raises:
            EntityNotFoundException: If Last.fm doesn't know the track
        """
        entity = ("Track", f"{artist} - {track}")
        data = await self._make_request(
            "track.getInfo",
            {"artist": artist, "track": track, "user": username},
            not_found=entity,
        )
        parsed = lastfm_parsing.parse_track_info(data)
        if parsed is None:
            raise EntityNotFoundException(*entity)
        return parsed

    async def fetch_album_info(self, username: str, artist: str, album: str) -> Album:
        entity = ("Album", f"{artist} - {album}")
        data = await self._make_request(
            "album.getInfo",
            {"artist": artist, "album": album, "user": username},
            not_found=entity,
        )
        parsed = lastfm_parsing.parse_album_info(data)
        if parsed is None:
            raise EntityNotFoundException(*entity)
        return parsed

    async def fetch_artist_info(self, username: str, artist: str) -> Artist:
        entity = ("Artist", artist)
        data = await self._make_request(
            "artist.getInfo",
            {"artist": artist, "user": username},
            not_found=entity,
        )
        parsed = lastfm_parsing.parse_artist_info(data)
        if parsed is None:
            raise EntityNotFoundException(*entity)
        return parsed
