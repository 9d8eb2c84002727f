"""Domain entities."""

from dataclasses import dataclass
from enum import Enum


# Hey future me, the enum VALUE is what the user-preference table stores ("lastfm",
# "librefm", "listenbrainz"). Don't rename the values or every stored account breaks!
class Provider(str, Enum):
    """Scrobble tracking service a user's history lives on."""

    LASTFM = "lastfm"
    LIBREFM = "librefm"  # API mirror of Last.fm, same parameters and JSON shapes
    LISTENBRAINZ = "listenbrainz"  # Different REST API, separate code path

    @property
    def base_url(self) -> str:
        """Fixed API root for this provider (trailing slash included)."""
        return _BASE_URLS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def private_profile_message(self) -> str:
        """Text shown when the provider answers 403 for a user's data."""
        return _PRIVATE_MESSAGES[self]

    @property
    def shares_lastfm_protocol(self) -> bool:
        """Whether the Last.fm style adapter serves this provider."""
        return self in (Provider.LASTFM, Provider.LIBREFM)

    def profile_url(self, username: str) -> str:
        """Public profile page of ``username`` on this provider."""
        return _PROFILE_URLS[self].format(username=username)

    @classmethod
    def parse(cls, value: str | None) -> "Provider":
        """Parse a stored provider name, falling back to Last.fm.

        Stored rows predating multi-provider support have odd or empty values;
        they were all Last.fm accounts.
        """
        if value:
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.LASTFM


_BASE_URLS = {
    Provider.LASTFM: "https://ws.audioscrobbler.com/2.0/",
    Provider.LIBREFM: "https://libre.fm/2.0/",
    Provider.LISTENBRAINZ: "https://api.listenbrainz.org/1/",
}

_DISPLAY_NAMES = {
    Provider.LASTFM: "Last.fm",
    Provider.LIBREFM: "Libre.fm",
    Provider.LISTENBRAINZ: "ListenBrainz",
}

_PROFILE_URLS = {
    Provider.LASTFM: "https://www.last.fm/user/{username}",
    Provider.LIBREFM: "https://libre.fm/user/{username}",
    Provider.LISTENBRAINZ: "https://listenbrainz.org/user/{username}",
}

_PRIVATE_MESSAGES = {
    Provider.LASTFM: (
        "Your scrobbles are hidden. To use the bot, disable that at "
        "https://www.last.fm/settings/privacy"
    ),
    Provider.LIBREFM: "Your Libre.fm profile is private.",
    Provider.LISTENBRAINZ: "Your ListenBrainz listens are not public.",
}


class TimePeriod(str, Enum):
    """Aggregation window for top-N charts."""

    ONE_WEEK = "one_week"
    ONE_MONTH = "one_month"
    THREE_MONTHS = "three_months"
    SIX_MONTHS = "six_months"
    ONE_YEAR = "one_year"
    ALL_TIME = "all_time"

    @property
    def label(self) -> str:
        """Human label, e.g. "3 months"."""
        return _PERIOD_LABELS[self]


_PERIOD_LABELS = {
    TimePeriod.ONE_WEEK: "1 week",
    TimePeriod.ONE_MONTH: "1 month",
    TimePeriod.THREE_MONTHS: "3 months",
    TimePeriod.SIX_MONTHS: "6 months",
    TimePeriod.ONE_YEAR: "1 year",
    TimePeriod.ALL_TIME: "All time",
}


class EntryType(str, Enum):
    """Which chart (and which entity shape) a top-N query asks for."""

    ARTIST = "artist"
    ALBUM = "album"
    TRACK = "track"


# Hey future me - entities are built per request and thrown away after rendering. Only the raw
# HTTP bytes get cached (transport layer), never these objects. Numeric fields default to 0 and
# callers must NOT read 0 as "zero plays" vs "provider doesn't report it" - they're the same here.
@dataclass(frozen=True)
class Track:
    """A track as reported by any provider."""

    name: str
    artist: str
    album: str | None = None
    album_art_url: str | None = None
    timestamp: int | None = None  # Epoch seconds of the scrobble/listen
    duration_ms: int = 0
    listeners: int = 0
    playcount: int = 0
    user_playcount: int = 0
    user_loved: bool = False
    now_playing: bool = False
    tags: tuple[str, ...] | None = None

    @property
    def formatted_duration(self) -> str:
        """Duration as ``m:ss``, or ``??:??`` when the provider didn't say."""
        return format_duration(self.duration_ms)


@dataclass(frozen=True)
class Album:
    """An album (release) as reported by any provider."""

    name: str
    artist: str
    album_art_url: str | None = None
    playcount: int = 0
    listeners: int = 0
    user_playcount: int = 0
    tags: tuple[str, ...] | None = None


@dataclass(frozen=True)
class Artist:
    """An artist as reported by any provider."""

    name: str
    playcount: int = 0
    listeners: int = 0
    user_playcount: int = 0
    tags: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ScrobbleUser:
    """Profile summary of a provider account."""

    username: str
    playcount: int = 0
    artist_count: int = 0
    album_count: int = 0
    track_count: int = 0
    profile_pic_url: str | None = None
    registered_at: int | None = None  # Epoch seconds


@dataclass(frozen=True)
class TrackContext:
    """Artist and track details fetched together for a "now playing" panel.

    Either side is None when its lookup found nothing.
    """

    track: Track | None = None
    artist: Artist | None = None


@dataclass(frozen=True)
class UserPreferences:
    """One row of the user-preference store (chat user -> provider account)."""

    user_id: int
    username: str
    provider: Provider = Provider.LASTFM
    profile_shown: bool = False

    @property
    def profile_url(self) -> str:
        return self.provider.profile_url(self.username)


def format_duration(duration_ms: int) -> str:
    """Render milliseconds as ``m:ss``; unknown (0) renders as ``??:??``."""
    if duration_ms <= 0:
        return "??:??"
    seconds = duration_ms // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"


__all__ = [
    "Album",
    "Artist",
    "EntryType",
    "Provider",
    "ScrobbleUser",
    "TimePeriod",
    "Track",
    "TrackContext",
    "UserPreferences",
    "format_duration",
]
