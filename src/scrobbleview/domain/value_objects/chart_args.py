"""Parser for free-text chart arguments like "clean 4 alltime" or "3 1m artist".

Hey future me - users type these in any order, abbreviate, and add junk. The parser never
fails: anything it can't classify is ignored and the defaults stay. It is greedy and
order sensitive on purpose. Each token is offered to the checks in a FIXED order
(entry type, then size, then period) and the first unclaimed check that accepts it wins.
So a bare "3" becomes the size if the size is still free, and "three months" only once the
size is taken. Don't "fix" that - users rely on "collage 5 3m" meaning 5x5 over 3 months.

Usage:
    from scrobbleview.domain.value_objects.chart_args import parse_chart_args

    args = parse_chart_args("clean 4 alltime")
    args.size        # 4
    args.period      # TimePeriod.ALL_TIME
    args.clean       # True
    args.render()    # "album 4 alltime clean"
"""

import re
from dataclasses import dataclass

from scrobbleview.domain.entities import EntryType, TimePeriod
from scrobbleview.domain.exceptions import ValidationError

MIN_SIZE = 1
MAX_SIZE = 7
DEFAULT_SIZE = 3
MAX_TOKENS = 4
FRAGMENT_LENGTH = 4

CLEAN_FLAGS = frozenset({"notext", "nonames", "clean"})

# Prefix -> entry type. "artists", "albums", "tracks" all match.
ENTRY_TYPE_PREFIXES: tuple[tuple[str, EntryType], ...] = (
    ("artist", EntryType.ARTIST),
    ("album", EntryType.ALBUM),
    ("track", EntryType.TRACK),
)

# Digits only, optional leading "+", like an unsigned integer literal
SIZE_PATTERN = re.compile(r"^\+?[0-9]+$")

# Canonical spelling of each period, used by render(). Every spelling must parse back
# to its own period.
PERIOD_TOKENS: dict[TimePeriod, str] = {
    TimePeriod.ONE_WEEK: "7d",
    TimePeriod.ONE_MONTH: "1m",
    TimePeriod.THREE_MONTHS: "3m",
    TimePeriod.SIX_MONTHS: "6m",
    TimePeriod.ONE_YEAR: "1y",
    TimePeriod.ALL_TIME: "alltime",
}


@dataclass(frozen=True)
class ChartArgs:
    """Grid size, period, entry type and the "no text" flag for a chart request."""

    size: int = DEFAULT_SIZE
    period: TimePeriod = TimePeriod.ALL_TIME
    entry_type: EntryType = EntryType.ALBUM
    clean: bool = False

    def __post_init__(self) -> None:
        if not MIN_SIZE <= self.size <= MAX_SIZE:
            raise ValidationError(
                f"Chart size must be between {MIN_SIZE} and {MAX_SIZE}, got {self.size}"
            )

    def render(self) -> str:
        """Canonical phrase that parses back to these exact arguments."""
        parts = [self.entry_type.value, str(self.size), PERIOD_TOKENS[self.period]]
        if self.clean:
            parts.append("clean")
        return " ".join(parts)


def parse_chart_args(phrase: str) -> ChartArgs:
    """Classify the tokens of ``phrase`` into chart arguments.

    Args:
        phrase: Command arguments with the command word already stripped

    Returns:
        ChartArgs with defaults for everything not confidently recognised
    """
    tokens = phrase.split(maxsplit=MAX_TOKENS - 1)

    size = DEFAULT_SIZE
    period = TimePeriod.ALL_TIME
    entry_type = EntryType.ALBUM
    clean = any(token in CLEAN_FLAGS for token in tokens)

    size_found = False
    period_found = False
    entry_type_found = False

    for token in tokens:
        if not entry_type_found:
            matched_type = _match_entry_type(token)
            if matched_type is not None:
                entry_type = matched_type
                entry_type_found = True
                continue

        fragment = token[:FRAGMENT_LENGTH]

        if not size_found:
            matched_size = _match_size(fragment)
            if matched_size is not None:
                size = matched_size
                size_found = True
                continue

        if not period_found:
            matched_period = _match_period(token, fragment)
            if matched_period is not None:
                period = matched_period
                period_found = True

    return ChartArgs(size=size, period=period, entry_type=entry_type, clean=clean)


def _match_entry_type(token: str) -> EntryType | None:
    for prefix, entry_type in ENTRY_TYPE_PREFIXES:
        if token.startswith(prefix):
            return entry_type
    return None


def _match_size(fragment: str) -> int | None:
    # "5x5" -> "5"; "5" -> "5"
    head = fragment.split("x", 1)[0]
    if not SIZE_PATTERN.match(head):
        return None
    size = int(head)
    if MIN_SIZE <= size <= MAX_SIZE:
        return size
    return None


def _match_period(token: str, fragment: str) -> TimePeriod | None:
    is_day = "d" in fragment
    is_week = "w" in fragment
    is_month = "m" in fragment
    is_year = "y" in fragment
    is_all = "o" in fragment or "all" in fragment

    lead = token[:1]
    if lead.isascii() and lead.isdigit():
        digit = int(lead)
        matched: TimePeriod | None = None

        if (is_day and digit == 7) or (is_week and digit == 1):
            matched = TimePeriod.ONE_WEEK

        # A leading 3 or 6 means months even without the "m": "3", "6mo", "3months"
        if (is_month and digit == 1) or digit in (3, 6):
            matched = {
                1: TimePeriod.ONE_MONTH,
                3: TimePeriod.THREE_MONTHS,
                6: TimePeriod.SIX_MONTHS,
            }[digit]

        if is_year and digit == 1:
            matched = TimePeriod.ONE_YEAR

        return matched

    if is_week:
        return TimePeriod.ONE_WEEK
    if is_month:
        return TimePeriod.ONE_MONTH
    if is_year:
        return TimePeriod.ONE_YEAR
    if is_all:
        return TimePeriod.ALL_TIME
    return None
