"""Tests for the composition root."""

import logging

import pytest
from pytest_httpx import HTTPXMock
from pytest_mock import MockerFixture

from scrobbleview.bootstrap import build_scrobble_service
from scrobbleview.config.settings import LastfmSettings, Settings
from scrobbleview.domain.entities import Provider
from scrobbleview.infrastructure.integrations.lastfm_client import LastfmClient
from scrobbleview.infrastructure.integrations.listenbrainz_client import (
    ListenBrainzClient,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, lastfm=LastfmSettings(api_key="k"))


class TestBuildScrobbleService:
    """Test wiring of clients, adapters and facade."""

    async def test_every_provider_routed(self, settings: Settings) -> None:
        """Test the adapter type behind each provider."""
        async with build_scrobble_service(settings, setup_logging=False) as runtime:
            service = runtime.service

            lastfm = service.adapter_for(Provider.LASTFM)
            librefm = service.adapter_for(Provider.LIBREFM)

            assert isinstance(lastfm, LastfmClient)
            assert isinstance(librefm, LastfmClient)
            assert lastfm is not librefm
            assert librefm.provider is Provider.LIBREFM
            assert isinstance(service.adapter_for(Provider.LISTENBRAINZ), ListenBrainzClient)

    async def test_logging_configured_from_settings(
        self, settings: Settings, mocker: MockerFixture
    ) -> None:
        """Test that startup applies the logging section."""
        configure = mocker.patch("scrobbleview.bootstrap.configure_logging")

        async with build_scrobble_service(settings):
            pass

        configure.assert_called_once_with(
            log_level="INFO", json_format=False, app_name="scrobbleview"
        )

    async def test_logging_left_alone_when_disabled(
        self, settings: Settings, mocker: MockerFixture
    ) -> None:
        configure = mocker.patch("scrobbleview.bootstrap.configure_logging")

        async with build_scrobble_service(settings, setup_logging=False):
            pass

        configure.assert_not_called()

    async def test_two_clients(self, settings: Settings) -> None:
        """Test that adapters share the caching client and images get the other one."""
        async with build_scrobble_service(settings, setup_logging=False) as runtime:
            assert runtime.http.is_caching is True
            assert runtime.image_http.is_caching is False

    async def test_end_to_end_through_cache(
        self, settings: Settings, httpx_mock: HTTPXMock
    ) -> None:
        """Test that a repeated call is answered from the cache."""
        httpx_mock.add_response(
            json={"user": {"name": "rj", "playcount": "42", "registered": {"unixtime": "1"}}}
        )

        async with build_scrobble_service(settings, setup_logging=False) as runtime:
            first = await runtime.service.fetch_user_info("rj", Provider.LASTFM)
            second = await runtime.service.fetch_user_info("rj", Provider.LASTFM)

        assert first == second
        assert first.playcount == 42
        assert len(httpx_mock.get_requests()) == 1

    async def test_close_logs_cache_stats(
        self, settings: Settings, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that shutdown reports how the response cache did."""
        runtime = build_scrobble_service(settings, setup_logging=False)

        with caplog.at_level(logging.INFO, logger="scrobbleview.bootstrap"):
            await runtime.close()

        record = next(r for r in caplog.records if r.message == "Scrobble HTTP clients closed")
        assert record.cache_stats["max_entries"] == 100  # type: ignore[attr-defined]
        assert record.cache_stats["hits"] == 0  # type: ignore[attr-defined]
