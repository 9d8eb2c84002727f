"""scrobbleview - listening history from Last.fm, Libre.fm and ListenBrainz."""

__version__ = "0.1.0"
