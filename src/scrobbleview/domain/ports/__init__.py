"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from scrobbleview.domain.entities import (
    Album,
    Artist,
    Provider,
    ScrobbleUser,
    TimePeriod,
    Track,
    UserPreferences,
)


class IScrobbleProvider(ABC):
    """Port for one scrobble provider adapter.

    Implementations translate the provider's native JSON into domain entities
    and raise the typed errors from ``scrobbleview.domain.exceptions``.
    """

    @property
    @abstractmethod
    def providers(self) -> tuple[Provider, ...]:
        """Providers this adapter serves."""
        pass

    @abstractmethod
    async def fetch_recent_tracks(
        self, username: str, prefer_cached: bool = True, limit: int = 3
    ) -> list[Track]:
        """
        Get the user's most recent listens, now playing entry first.

        Args:
            username: Provider account name
            prefer_cached: Accept a response up to a few minutes stale
            limit: Number of history entries to request

        Returns:
            Tracks newest first
        """
        pass

    @abstractmethod
    async def fetch_loved_tracks(self, username: str, limit: int = 5) -> list[Track]:
        """
        Get the user's most recently loved tracks.

        Args:
            username: Provider account name
            limit: Maximum number of tracks

        Returns:
            Loved tracks, newest first
        """
        pass

    @abstractmethod
    async def fetch_top_albums(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Album]:
        """
        Get the user's album chart for a period.

        Args:
            username: Provider account name
            period: Aggregation window
            limit: Page size (provider default when None)
            page: 1-based page number

        Returns:
            Albums in provider rank order
        """
        pass

    @abstractmethod
    async def fetch_top_artists(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Artist]:
        """Get the user's artist chart for a period, in provider rank order."""
        pass

    @abstractmethod
    async def fetch_top_tracks(
        self,
        username: str,
        period: TimePeriod,
        limit: int | None = None,
        page: int = 1,
    ) -> list[Track]:
        """Get the user's track chart for a period, in provider rank order."""
        pass

    @abstractmethod
    async def fetch_user_info(self, username: str) -> ScrobbleUser:
        """Get the profile summary (play and library counts) of a user."""
        pass

    @abstractmethod
    async def fetch_track_info(self, username: str, artist: str, track: str) -> Track:
        """
        Get details of one track, including the user's own play count.

        Raises:
            EntityNotFoundException: If the provider doesn't know the track
            UnsupportedOperationError: If the provider has no detail lookup
        """
        pass

    @abstractmethod
    async def fetch_album_info(self, username: str, artist: str, album: str) -> Album:
        """Get details of one album. Raises EntityNotFoundException when unknown."""
        pass

    @abstractmethod
    async def fetch_artist_info(self, username: str, artist: str) -> Artist:
        """Get details of one artist. Raises EntityNotFoundException when unknown."""
        pass


class IUserPreferenceStore(ABC):
    """Port for the chat-user -> provider account mapping (external collaborator)."""

    @abstractmethod
    async def get(self, user_id: int) -> UserPreferences | None:
        """
        Look up the linked account of a chat user.

        Args:
            user_id: Chat platform user ID

        Returns:
            Stored preferences or None if the user never linked an account
        """
        pass


class ICollageRenderer(ABC):
    """Port for the album-art collage renderer (external collaborator)."""

    @abstractmethod
    async def render(
        self, albums: Sequence[Album], size: int, clean: bool = False
    ) -> Any:
        """
        Compose a size x size grid of album art.

        Args:
            albums: Albums in chart order, all with album art, at most size * size
            size: Grid edge length (1-7)
            clean: Leave out the artist/album captions

        Returns:
            Renderer specific image object
        """
        pass


__all__ = [
    "ICollageRenderer",
    "IScrobbleProvider",
    "IUserPreferenceStore",
]
