"""Application services."""

from scrobbleview.application.services.scrobble_service import ScrobbleService

__all__ = ["ScrobbleService"]
