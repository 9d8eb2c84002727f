"""Pure parsers for Last.fm (and Libre.fm) JSON.

No I/O in here: every function takes the decoded response body and returns
domain entities. Missing optional fields fall back to the entity defaults,
a missing top-level container raises MalformedResponseError.

Last.fm quirks handled here:
    - every number is a string ("1234"), sometimes ""
    - a one-item list arrives as the bare object
    - "no image" is a real URL pointing at a star placeholder
    - artist is {"#text": ...} in recent tracks, {"name": ...} in extended mode and charts
"""

from dataclasses import replace
from typing import Any

from scrobbleview.domain.entities import Album, Artist, Provider, ScrobbleUser, Track
from scrobbleview.domain.exceptions import MalformedResponseError
from scrobbleview.infrastructure.integrations.json_access import (
    as_list,
    get_int,
    get_optional_int,
    get_optional_str,
    get_path,
    get_str,
)

# Fingerprint of the grey star Last.fm serves when there is no artwork
PLACEHOLDER_IMAGE_HASH = "2a96cbd8b46e442fc41c2b86b821562f"


def biggest_image_url(data: Any) -> str | None:
    """Largest image of an ``image`` list (ordered small -> extralarge).

    Returns None when there is no image, the URL is empty or it is the
    placeholder star.
    """
    images = as_list(get_path(data, "image"))
    if not images:
        return None
    url = get_optional_str(images[-1], "#text")
    if not url or PLACEHOLDER_IMAGE_HASH in url:
        return None
    return url


def _container(data: Any, key: str, provider: Provider) -> dict[str, Any]:
    container = get_path(data, key)
    if not isinstance(container, dict):
        raise MalformedResponseError(
            f"{provider.display_name} response has no '{key}' object", provider=provider
        )
    return container


def _tag_names(tags: Any) -> tuple[str, ...]:
    names = (get_optional_str(tag, "name") for tag in as_list(tags))
    return tuple(name for name in names if name)


def _artist_name(track: Any) -> str:
    # recent tracks: {"#text": ...}; extended=1, loved and charts: {"name": ...}
    artist = get_path(track, "artist")
    if isinstance(artist, str):
        return artist
    return get_optional_str(artist, "#text") or get_str(artist, "name")


def _parse_track(track: Any) -> Track:
    return Track(
        name=get_str(track, "name"),
        artist=_artist_name(track),
        album=get_optional_str(track, "album", "#text"),
        album_art_url=biggest_image_url(track),
        timestamp=get_optional_int(track, "date", "uts"),
        user_loved=get_str(track, "loved") == "1",
        now_playing=get_str(track, "@attr", "nowplaying") == "true",
    )


def parse_tracks(
    data: Any, container_key: str, provider: Provider = Provider.LASTFM
) -> list[Track]:
    """Parse a recent-tracks or loved-tracks response.

    Args:
        data: Decoded body
        container_key: "recenttracks" or "lovedtracks"
        provider: For error messages

    Returns:
        Tracks in provider order (now playing first for recent tracks)
    """
    container = _container(data, container_key, provider)
    tracks = [_parse_track(item) for item in as_list(container.get("track"))]
    if container_key == "lovedtracks":
        tracks = [replace(track, user_loved=True) for track in tracks]
    return tracks


def parse_top_albums(data: Any, provider: Provider = Provider.LASTFM) -> list[Album]:
    """Parse ``user.getTopAlbums``. ``playcount`` is the user's own count."""
    container = _container(data, "topalbums", provider)
    return [
        Album(
            name=get_str(item, "name"),
            artist=get_str(item, "artist", "name"),
            album_art_url=biggest_image_url(item),
            user_playcount=get_int(item, "playcount"),
        )
        for item in as_list(container.get("album"))
    ]


def parse_top_artists(data: Any, provider: Provider = Provider.LASTFM) -> list[Artist]:
    container = _container(data, "topartists", provider)
    return [
        Artist(name=get_str(item, "name"), user_playcount=get_int(item, "playcount"))
        for item in as_list(container.get("artist"))
    ]


def parse_top_tracks(data: Any, provider: Provider = Provider.LASTFM) -> list[Track]:
    container = _container(data, "toptracks", provider)
    return [
        Track(
            name=get_str(item, "name"),
            artist=get_str(item, "artist", "name"),
            user_playcount=get_int(item, "playcount"),
        )
        for item in as_list(container.get("track"))
    ]


# Detail parsers below return None when the object is absent; the client turns that into
# EntityNotFoundException with the names the user asked for.
def parse_track_info(data: Any) -> Track | None:
    """Parse ``track.getInfo`` (called with ``user`` so user fields are present)."""
    track = get_path(data, "track")
    if not isinstance(track, dict):
        return None

    toptags = get_path(track, "toptags", "tag")
    return Track(
        name=get_str(track, "name"),
        artist=get_str(track, "artist", "name"),
        album=get_optional_str(track, "album", "title"),
        album_art_url=biggest_image_url(track.get("album")),
        duration_ms=get_int(track, "duration"),
        listeners=get_int(track, "listeners"),
        playcount=get_int(track, "playcount"),
        user_playcount=get_int(track, "userplaycount"),
        user_loved=get_str(track, "userloved") == "1",
        tags=_tag_names(toptags) if "toptags" in track else None,
    )


def parse_album_info(data: Any) -> Album | None:
    """Parse ``album.getInfo``."""
    album = get_path(data, "album")
    if not isinstance(album, dict):
        return None

    return Album(
        name=get_str(album, "name"),
        artist=get_str(album, "artist"),
        album_art_url=biggest_image_url(album),
        playcount=get_int(album, "playcount"),
        listeners=get_int(album, "listeners"),
        user_playcount=get_int(album, "userplaycount"),
        tags=_tag_names(get_path(album, "tags", "tag")),
    )


def parse_artist_info(data: Any) -> Artist | None:
    """Parse ``artist.getInfo``. Counts live under ``stats``."""
    artist = get_path(data, "artist")
    if not isinstance(artist, dict):
        return None

    return Artist(
        name=get_str(artist, "name"),
        playcount=get_int(artist, "stats", "playcount"),
        listeners=get_int(artist, "stats", "listeners"),
        user_playcount=get_int(artist, "stats", "userplaycount"),
        tags=_tag_names(get_path(artist, "tags", "tag")),
    )


def parse_user_info(
    data: Any, username: str, provider: Provider = Provider.LASTFM
) -> ScrobbleUser:
    """Parse ``user.getInfo``.

    ``registered`` is ``{"unixtime": "...", "#text": 1234}`` on Last.fm; either
    field is accepted.
    """
    user = _container(data, "user", provider)
    registered_at = get_optional_int(user, "registered", "unixtime")
    if registered_at is None:
        registered_at = get_optional_int(user, "registered", "#text")

    return ScrobbleUser(
        username=get_optional_str(user, "name") or username,
        playcount=get_int(user, "playcount"),
        artist_count=get_int(user, "artist_count"),
        album_count=get_int(user, "album_count"),
        track_count=get_int(user, "track_count"),
        profile_pic_url=biggest_image_url(user),
        registered_at=registered_at,
    )
