"""Taste compatibility between two users, based on their top artists."""

from collections.abc import Sequence
from dataclasses import dataclass

from scrobbleview.domain.entities import Artist

MAX_COMPARED_ARTISTS = 40
MAX_MUTUAL_SHOWN = 8
MIN_DENOMINATOR = 3


@dataclass(frozen=True)
class Compatibility:
    """Score in percent (0-100) and a short list of shared artists."""

    score: int
    mutual_artists: tuple[str, ...]
    common_count: int = 0

    @property
    def has_overlap(self) -> bool:
        return self.score > 0 and bool(self.mutual_artists)


def compute_compatibility(
    artists_a: Sequence[Artist], artists_b: Sequence[Artist]
) -> Compatibility:
    """Compare two top-artist charts by exact name match.

    The denominator is the shorter chart, capped at 40 artists, so two heavy
    listeners aren't punished for long tails. Charts with fewer than three
    artists score 0.
    """
    names_b = {artist.name for artist in artists_b}

    common = 0
    mutual: list[str] = []
    for artist in artists_a:
        if artist.name in names_b:
            common += 1
            if len(mutual) < MAX_MUTUAL_SHOWN:
                mutual.append(artist.name)

    denominator = min(len(artists_a), len(artists_b), MAX_COMPARED_ARTISTS)
    score = 0
    if denominator >= MIN_DENOMINATOR:
        score = min(common * 100 // denominator, 100)

    return Compatibility(score=score, mutual_artists=tuple(mutual), common_count=common)
