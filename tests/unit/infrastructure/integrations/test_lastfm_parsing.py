"""Tests for the pure Last.fm JSON parsers."""

import pytest

from scrobbleview.domain.entities import Provider
from scrobbleview.domain.exceptions import MalformedResponseError
from scrobbleview.infrastructure.integrations.lastfm_parsing import (
    PLACEHOLDER_IMAGE_HASH,
    biggest_image_url,
    parse_album_info,
    parse_artist_info,
    parse_top_albums,
    parse_top_artists,
    parse_top_tracks,
    parse_track_info,
    parse_tracks,
    parse_user_info,
)

PLACEHOLDER_URL = f"https://lastfm.freetls.fastly.net/i/u/300x300/{PLACEHOLDER_IMAGE_HASH}.png"


def _images(url: str) -> list[dict[str, str]]:
    return [
        {"size": "small", "#text": "https://img/small.jpg"},
        {"size": "extralarge", "#text": url},
    ]


RECENT_TRACKS = {
    "recenttracks": {
        "track": [
            {
                "name": "Everything In Its Right Place",
                "artist": {"name": "Radiohead", "#text": "Radiohead"},
                "album": {"#text": "Kid A"},
                "image": _images("https://img/kida.jpg"),
                "loved": "1",
                "@attr": {"nowplaying": "true"},
            },
            {
                "name": "Idioteque",
                "artist": {"#text": "Radiohead"},
                "album": {"#text": ""},
                "image": _images(PLACEHOLDER_URL),
                "date": {"uts": "1700000000", "#text": "14 Nov 2023, 22:13"},
                "loved": "0",
            },
        ],
        "@attr": {"user": "rj", "total": "2"},
    }
}


class TestBiggestImageUrl:
    """Test image selection."""

    def test_last_image_wins(self) -> None:
        """Test that the largest (last) image is picked."""
        assert biggest_image_url({"image": _images("https://img/xl.jpg")}) == "https://img/xl.jpg"

    def test_placeholder_is_none(self) -> None:
        """Test that the grey star placeholder counts as no image."""
        assert biggest_image_url({"image": _images(PLACEHOLDER_URL)}) is None

    @pytest.mark.parametrize(
        "data",
        [{}, {"image": []}, {"image": _images("")}, {"image": None}],
    )
    def test_absent_or_empty_is_none(self, data: dict) -> None:
        """Test missing image lists and empty URLs."""
        assert biggest_image_url(data) is None


class TestParseTracks:
    """Test recent and loved track parsing."""

    def test_recent_tracks(self) -> None:
        """Test now playing flag, album, art, loved flag and timestamp."""
        playing, previous = parse_tracks(RECENT_TRACKS, "recenttracks")

        assert playing.name == "Everything In Its Right Place"
        assert playing.artist == "Radiohead"
        assert playing.album == "Kid A"
        assert playing.album_art_url == "https://img/kida.jpg"
        assert playing.now_playing is True
        assert playing.user_loved is True
        assert playing.timestamp is None

        assert previous.album is None
        assert previous.album_art_url is None
        assert previous.timestamp == 1700000000
        assert previous.now_playing is False
        assert previous.user_loved is False

    def test_single_track_collapsed_to_object(self) -> None:
        """Test that a lone track sent as an object still parses."""
        data = {"recenttracks": {"track": RECENT_TRACKS["recenttracks"]["track"][1]}}

        tracks = parse_tracks(data, "recenttracks")

        assert [t.name for t in tracks] == ["Idioteque"]

    def test_empty_history(self) -> None:
        """Test that a user without scrobbles yields an empty list."""
        assert parse_tracks({"recenttracks": {"track": []}}, "recenttracks") == []

    def test_loved_tracks_marked_loved(self) -> None:
        """Test that loved tracks are flagged even without a loved field."""
        data = {
            "lovedtracks": {
                "track": [
                    {
                        "name": "Karma Police",
                        "artist": {"name": "Radiohead"},
                        "date": {"uts": "1600000000"},
                    }
                ]
            }
        }

        (track,) = parse_tracks(data, "lovedtracks")

        assert track.artist == "Radiohead"
        assert track.user_loved is True
        assert track.timestamp == 1600000000

    def test_missing_container_is_malformed(self) -> None:
        """Test that a body without the expected object raises."""
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_tracks({"foo": {}}, "recenttracks", Provider.LIBREFM)

        assert exc_info.value.provider is Provider.LIBREFM


class TestCharts:
    """Test top album, artist and track parsing."""

    def test_top_albums(self) -> None:
        """Test that playcount is the user's own count and strings parse."""
        data = {
            "topalbums": {
                "album": [
                    {
                        "name": "In Rainbows",
                        "artist": {"name": "Radiohead"},
                        "playcount": "42",
                        "image": _images("https://img/ir.jpg"),
                    },
                    {
                        "name": "Unknown",
                        "artist": {"name": "Nobody"},
                        "playcount": "",
                        "image": _images(PLACEHOLDER_URL),
                    },
                ]
            }
        }

        first, second = parse_top_albums(data)

        assert first.name == "In Rainbows"
        assert first.artist == "Radiohead"
        assert first.user_playcount == 42
        assert first.playcount == 0
        assert first.album_art_url == "https://img/ir.jpg"
        assert second.user_playcount == 0
        assert second.album_art_url is None

    def test_top_artists(self) -> None:
        """Test artist chart rows."""
        data = {"topartists": {"artist": [{"name": "Björk", "playcount": "7"}]}}

        (artist,) = parse_top_artists(data)

        assert artist.name == "Björk"
        assert artist.user_playcount == 7

    def test_top_tracks(self) -> None:
        """Test track chart rows (no album in this endpoint)."""
        data = {
            "toptracks": {
                "track": [
                    {"name": "Hyperballad", "artist": {"name": "Björk"}, "playcount": "3"}
                ]
            }
        }

        (track,) = parse_top_tracks(data)

        assert track.name == "Hyperballad"
        assert track.artist == "Björk"
        assert track.user_playcount == 3
        assert track.album is None

    def test_missing_inner_list_is_empty(self) -> None:
        """Test that a chart object without entries yields an empty list."""
        assert parse_top_artists({"topartists": {"@attr": {"total": "0"}}}) == []


class TestDetails:
    """Test single entity detail parsing."""

    def test_track_info(self) -> None:
        """Test all fields of track.getInfo."""
        data = {
            "track": {
                "name": "Reckoner",
                "duration": "290000",
                "listeners": "900000",
                "playcount": "8000000",
                "artist": {"name": "Radiohead"},
                "album": {"title": "In Rainbows", "image": _images("https://img/ir.jpg")},
                "userplaycount": "55",
                "userloved": "1",
                "toptags": {"tag": [{"name": "alternative"}, {"name": ""}, {"name": "rock"}]},
            }
        }

        track = parse_track_info(data)

        assert track is not None
        assert track.name == "Reckoner"
        assert track.artist == "Radiohead"
        assert track.album == "In Rainbows"
        assert track.album_art_url == "https://img/ir.jpg"
        assert track.duration_ms == 290000
        assert track.listeners == 900000
        assert track.playcount == 8000000
        assert track.user_playcount == 55
        assert track.user_loved is True
        assert track.tags == ("alternative", "rock")

    def test_track_info_without_album_or_tags(self) -> None:
        """Test that optional parts are None, not errors."""
        track = parse_track_info({"track": {"name": "x", "artist": {"name": "y"}}})

        assert track is not None
        assert track.album is None
        assert track.tags is None
        assert track.user_playcount == 0

    def test_track_info_absent(self) -> None:
        """Test that a body without a track object gives None."""
        assert parse_track_info({"error": 6}) is None

    def test_album_info_single_tag_object(self) -> None:
        """Test album.getInfo with a tag list collapsed to one object."""
        data = {
            "album": {
                "name": "OK Computer",
                "artist": "Radiohead",
                "listeners": "1000",
                "playcount": "2000",
                "userplaycount": 12,
                "tags": {"tag": {"name": "90s"}},
                "image": _images("https://img/okc.jpg"),
            }
        }

        album = parse_album_info(data)

        assert album is not None
        assert album.artist == "Radiohead"
        assert album.listeners == 1000
        assert album.playcount == 2000
        assert album.user_playcount == 12
        assert album.tags == ("90s",)
        assert album.album_art_url == "https://img/okc.jpg"

    def test_album_info_empty_tags_string(self) -> None:
        """Test that Last.fm's "" for no tags gives an empty tuple."""
        album = parse_album_info({"album": {"name": "a", "artist": "b", "tags": ""}})

        assert album is not None
        assert album.tags == ()

    def test_artist_info(self) -> None:
        """Test that counts are read from stats."""
        data = {
            "artist": {
                "name": "Portishead",
                "stats": {"listeners": "10", "playcount": "20", "userplaycount": "3"},
                "tags": {"tag": [{"name": "trip-hop"}]},
            }
        }

        artist = parse_artist_info(data)

        assert artist is not None
        assert artist.listeners == 10
        assert artist.playcount == 20
        assert artist.user_playcount == 3
        assert artist.tags == ("trip-hop",)

    def test_artist_info_absent(self) -> None:
        """Test that a missing artist object gives None."""
        assert parse_artist_info({}) is None


class TestUserInfo:
    """Test user.getInfo parsing."""

    def test_user_info(self) -> None:
        """Test counts, registration time and profile picture."""
        data = {
            "user": {
                "name": "RJ",
                "playcount": "150316",
                "artist_count": "1200",
                "album_count": "3400",
                "track_count": "9800",
                "registered": {"unixtime": "1037793040", "#text": 1037793040},
                "image": _images("https://img/rj.png"),
            }
        }

        user = parse_user_info(data, "rj")

        assert user.username == "RJ"
        assert user.playcount == 150316
        assert user.artist_count == 1200
        assert user.album_count == 3400
        assert user.track_count == 9800
        assert user.registered_at == 1037793040
        assert user.profile_pic_url == "https://img/rj.png"

    def test_registered_text_only(self) -> None:
        """Test the #text fallback for the registration time."""
        user = parse_user_info({"user": {"registered": {"#text": 1037793040}}}, "rj")

        assert user.username == "rj"
        assert user.registered_at == 1037793040
        assert user.playcount == 0

    def test_missing_user_is_malformed(self) -> None:
        """Test that a body without a user object raises."""
        with pytest.raises(MalformedResponseError):
            parse_user_info({}, "rj")
