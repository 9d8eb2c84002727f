"""Tests for the pure ListenBrainz JSON parsers."""

import pytest

from scrobbleview.domain.exceptions import MalformedResponseError
from scrobbleview.infrastructure.integrations.listenbrainz_parsing import (
    cover_art_url,
    parse_feedback,
    parse_listen_count,
    parse_listens_payload,
    parse_top_artists,
    parse_top_recordings,
    parse_top_releases,
    parse_total_count,
)

MBID = "6b1c3a1e-6d3b-4f5e-9c5e-0123456789ab"

LISTENS = {
    "payload": {
        "count": 2,
        "listens": [
            {
                "listened_at": 1700000000,
                "track_metadata": {
                    "artist_name": "Boards of Canada",
                    "release_name": "Geogaddi",
                    "track_name": "Julie and Candy",
                    "additional_info": {"release_mbid": MBID, "duration_ms": 330000},
                },
            },
            {
                "listened_at": 1699990000,
                "track_metadata": {
                    "artist_name": "Autechre",
                    "track_name": "Gantz Graf",
                },
            },
        ],
    }
}


class TestCoverArtUrl:
    """Test Cover Art Archive URLs."""

    def test_url(self) -> None:
        """Test the URL template."""
        assert (
            cover_art_url(MBID, 500)
            == f"https://coverartarchive.org/release/{MBID}/front-500"
        )

    @pytest.mark.parametrize("mbid", [None, ""])
    def test_no_mbid(self, mbid: str | None) -> None:
        """Test that a missing MBID gives no URL."""
        assert cover_art_url(mbid) is None


class TestListens:
    """Test listen parsing."""

    def test_history(self) -> None:
        """Test metadata, art and timestamps of listens."""
        first, second = parse_listens_payload(LISTENS)

        assert first.name == "Julie and Candy"
        assert first.artist == "Boards of Canada"
        assert first.album == "Geogaddi"
        assert first.album_art_url == f"https://coverartarchive.org/release/{MBID}/front-250"
        assert first.timestamp == 1700000000
        assert first.duration_ms == 330000
        assert first.now_playing is False

        assert second.album is None
        assert second.album_art_url is None

    def test_playing_now(self) -> None:
        """Test that playing-now entries are flagged and have no timestamp."""
        data = {
            "payload": {
                "playing_now": True,
                "listens": [
                    {
                        "playing_now": True,
                        "track_metadata": {"artist_name": "Low", "track_name": "Words"},
                    }
                ],
            }
        }

        (track,) = parse_listens_payload(data, now_playing=True)

        assert track.now_playing is True
        assert track.timestamp is None

    def test_missing_payload_is_malformed(self) -> None:
        """Test that a body without payload raises."""
        with pytest.raises(MalformedResponseError):
            parse_listens_payload({"listens": []})


class TestFeedback:
    """Test loved track (feedback) parsing."""

    def test_feedback(self) -> None:
        """Test that feedback rows become loved tracks."""
        data = {
            "count": 1,
            "feedback": [
                {
                    "created": 1650000000,
                    "score": 1,
                    "recording_mbid": "rec-1",
                    "track_metadata": {
                        "artist_name": "Slowdive",
                        "release_name": "Souvlaki",
                        "track_name": "Alison",
                        "mbid_mapping": {"release_mbid": MBID},
                    },
                }
            ],
        }

        (track,) = parse_feedback(data)

        assert track.name == "Alison"
        assert track.album_art_url == f"https://coverartarchive.org/release/{MBID}/front-250"
        assert track.user_loved is True
        assert track.timestamp == 1650000000

    def test_missing_feedback_is_malformed(self) -> None:
        """Test that a body without the feedback list raises."""
        with pytest.raises(MalformedResponseError):
            parse_feedback({"payload": {}})


class TestStatistics:
    """Test statistics parsing."""

    def test_top_releases(self) -> None:
        """Test album rows with 500px art."""
        data = {
            "payload": {
                "releases": [
                    {
                        "artist_name": "Stereolab",
                        "release_name": "Dots and Loops",
                        "release_mbid": MBID,
                        "listen_count": 88,
                    },
                    {"artist_name": "Broadcast", "release_name": "Tender Buttons"},
                ],
                "total_release_count": 2,
            }
        }

        first, second = parse_top_releases(data)

        assert first.name == "Dots and Loops"
        assert first.artist == "Stereolab"
        assert first.user_playcount == 88
        assert first.album_art_url == f"https://coverartarchive.org/release/{MBID}/front-500"
        assert second.album_art_url is None
        assert second.user_playcount == 0

    def test_top_artists(self) -> None:
        """Test artist rows."""
        data = {"payload": {"artists": [{"artist_name": "Can", "listen_count": 12}]}}

        (artist,) = parse_top_artists(data)

        assert artist.name == "Can"
        assert artist.user_playcount == 12

    def test_top_recordings(self) -> None:
        """Test that recording rows (no track_metadata wrapper) parse as tracks."""
        data = {
            "payload": {
                "recordings": [
                    {
                        "artist_name": "Neu!",
                        "track_name": "Hallogallo",
                        "release_name": "Neu!",
                        "release_mbid": MBID,
                        "listen_count": 40,
                    }
                ]
            }
        }

        (track,) = parse_top_recordings(data)

        assert track.name == "Hallogallo"
        assert track.user_playcount == 40
        assert track.album_art_url == f"https://coverartarchive.org/release/{MBID}/front-250"

    @pytest.mark.parametrize(
        "parser", [parse_top_releases, parse_top_artists, parse_top_recordings]
    )
    def test_not_computed_yet(self, parser) -> None:
        """Test that a 204 (None body) means an empty chart."""
        assert parser(None) == []

    def test_listen_count(self) -> None:
        """Test payload.count."""
        assert parse_listen_count({"payload": {"count": 12345}}) == 12345

    def test_total_counts(self) -> None:
        """Test the total_*_count fields, and 0 for a 204."""
        data = {"payload": {"total_artist_count": 321}}

        assert parse_total_count(data, "artist") == 321
        assert parse_total_count(data, "release") == 0
        assert parse_total_count(None, "recording") == 0
