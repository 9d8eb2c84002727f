"""Pure parsers for ListenBrainz JSON.

ListenBrainz sends real numbers (no "42" strings) and puts everything under
``payload``. Listens and statistics rows share field names (``artist_name``,
``release_name``, ``track_name``, ``release_mbid``, ``listen_count``), but
listens nest them under ``track_metadata`` and statistics rows don't.
"""

from typing import Any

from scrobbleview.domain.entities import Album, Artist, Provider, Track
from scrobbleview.domain.exceptions import MalformedResponseError
from scrobbleview.infrastructure.integrations.json_access import (
    as_list,
    get_int,
    get_optional_int,
    get_optional_str,
    get_path,
    get_str,
)

COVER_ART_URL = "https://coverartarchive.org/release/{mbid}/front-{size}"
TRACK_ART_SIZE = 250
ALBUM_ART_SIZE = 500


def cover_art_url(release_mbid: str | None, size: int = TRACK_ART_SIZE) -> str | None:
    """Cover Art Archive front image of a release, None without an MBID."""
    if not release_mbid:
        return None
    return COVER_ART_URL.format(mbid=release_mbid, size=size)


def _payload(data: Any) -> dict[str, Any]:
    payload = get_path(data, "payload")
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            "ListenBrainz response has no 'payload' object",
            provider=Provider.LISTENBRAINZ,
        )
    return payload


def _parse_listen(item: Any, now_playing: bool, loved: bool) -> Track:
    metadata = get_path(item, "track_metadata")
    if not isinstance(metadata, dict):
        metadata = item if isinstance(item, dict) else {}

    release_mbid = (
        get_optional_str(metadata, "release_mbid")
        or get_optional_str(metadata, "additional_info", "release_mbid")
        or get_optional_str(metadata, "mbid_mapping", "release_mbid")
    )
    return Track(
        name=get_str(metadata, "track_name"),
        artist=get_str(metadata, "artist_name"),
        album=get_optional_str(metadata, "release_name"),
        album_art_url=cover_art_url(release_mbid, TRACK_ART_SIZE),
        timestamp=get_optional_int(item, "listened_at") or get_optional_int(item, "created"),
        duration_ms=get_int(metadata, "additional_info", "duration_ms"),
        user_playcount=get_int(metadata, "listen_count"),
        user_loved=loved,
        now_playing=now_playing,
    )


def parse_listens(
    items: Any, now_playing: bool = False, loved: bool = False
) -> list[Track]:
    """Parse a list of listens, feedback rows or recording statistics.

    Args:
        items: The raw list (``payload.listens``, ``feedback``, ``payload.recordings``)
        now_playing: Mark every track as playing now
        loved: Mark every track as loved (feedback with score 1)
    """
    return [_parse_listen(item, now_playing, loved) for item in as_list(items)]


def parse_listens_payload(data: Any, now_playing: bool = False) -> list[Track]:
    """Parse a ``playing-now`` or ``listens`` response."""
    return parse_listens(_payload(data).get("listens"), now_playing=now_playing)


def parse_feedback(data: Any) -> list[Track]:
    """Parse ``get-feedback``; the list sits at top level, not under payload."""
    if not isinstance(data, dict) or "feedback" not in data:
        raise MalformedResponseError(
            "ListenBrainz response has no 'feedback' list",
            provider=Provider.LISTENBRAINZ,
        )
    return parse_listens(data["feedback"], loved=True)


# A None body means 204 No Content: the statistics aren't computed yet.
def parse_top_releases(data: Any) -> list[Album]:
    if data is None:
        return []
    return [
        Album(
            name=get_str(item, "release_name"),
            artist=get_str(item, "artist_name"),
            album_art_url=cover_art_url(
                get_optional_str(item, "release_mbid"), ALBUM_ART_SIZE
            ),
            user_playcount=get_int(item, "listen_count"),
        )
        for item in as_list(_payload(data).get("releases"))
    ]


def parse_top_artists(data: Any) -> list[Artist]:
    if data is None:
        return []
    return [
        Artist(
            name=get_str(item, "artist_name"),
            user_playcount=get_int(item, "listen_count"),
        )
        for item in as_list(_payload(data).get("artists"))
    ]


def parse_top_recordings(data: Any) -> list[Track]:
    if data is None:
        return []
    return parse_listens(_payload(data).get("recordings"))


def parse_listen_count(data: Any) -> int:
    """``payload.count`` of ``listen-count``."""
    return get_int(_payload(data), "count")


def parse_total_count(data: Any, entity: str) -> int:
    """``payload.total_<entity>_count`` of a statistics response; 0 when not computed yet.

    Args:
        data: Decoded body, None for 204
        entity: "artist", "release" or "recording"
    """
    if data is None:
        return 0
    return get_int(_payload(data), f"total_{entity}_count")
