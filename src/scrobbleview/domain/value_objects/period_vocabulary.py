"""Provider specific spelling of chart periods.

Every provider names the same aggregation windows differently ("7day" vs
"week", "overall" vs "all_time"). The table below is the only place these
strings live. It is validated when this module is imported, so a provider or
period added without a spelling fails at startup instead of in the middle of a
user's request.
"""

from collections.abc import Mapping

from scrobbleview.domain.entities import Provider, TimePeriod
from scrobbleview.domain.exceptions import ConfigurationError

_LASTFM_PERIODS: Mapping[TimePeriod, str] = {
    TimePeriod.ONE_WEEK: "7day",
    TimePeriod.ONE_MONTH: "1month",
    TimePeriod.THREE_MONTHS: "3month",
    TimePeriod.SIX_MONTHS: "6month",
    TimePeriod.ONE_YEAR: "12month",
    TimePeriod.ALL_TIME: "overall",
}

_LISTENBRAINZ_RANGES: Mapping[TimePeriod, str] = {
    TimePeriod.ONE_WEEK: "week",
    TimePeriod.ONE_MONTH: "month",
    TimePeriod.THREE_MONTHS: "quarter",
    TimePeriod.SIX_MONTHS: "half_yearly",
    TimePeriod.ONE_YEAR: "year",
    TimePeriod.ALL_TIME: "all_time",
}

PERIOD_VOCABULARY: Mapping[Provider, Mapping[TimePeriod, str]] = {
    Provider.LASTFM: _LASTFM_PERIODS,
    Provider.LIBREFM: _LASTFM_PERIODS,
    Provider.LISTENBRAINZ: _LISTENBRAINZ_RANGES,
}


def validate_vocabulary(
    vocabulary: Mapping[Provider, Mapping[TimePeriod, str]],
) -> None:
    """Check that every (provider, period) pair has a non-empty spelling.

    Raises:
        ConfigurationError: listing every missing pair
    """
    missing = [
        f"{provider.value}/{period.name}"
        for provider in Provider
        for period in TimePeriod
        if not vocabulary.get(provider, {}).get(period)
    ]
    if missing:
        raise ConfigurationError(
            "Period vocabulary is incomplete: " + ", ".join(missing)
        )


def period_to_api_string(period: TimePeriod, provider: Provider) -> str:
    """Spell ``period`` the way ``provider`` expects it in a query string."""
    return PERIOD_VOCABULARY[provider][period]


validate_vocabulary(PERIOD_VOCABULARY)
