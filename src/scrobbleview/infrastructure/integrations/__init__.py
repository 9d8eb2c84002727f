"""Provider adapters and the shared HTTP transport."""

from scrobbleview.infrastructure.integrations.http_client import (
    CachingTransport,
    ScrobbleHttpClient,
)
from scrobbleview.infrastructure.integrations.lastfm_client import LastfmClient
from scrobbleview.infrastructure.integrations.listenbrainz_client import (
    ListenBrainzClient,
)

__all__ = [
    "CachingTransport",
    "LastfmClient",
    "ListenBrainzClient",
    "ScrobbleHttpClient",
]
