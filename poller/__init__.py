"""Feed polling: payload parsing, deduplication and the background poll loop."""

from .oref_poller import Deduplicator, FeedClient, FeedError, OrefPoller
from .payload import normalize_body, parse_payload

__all__ = [
    "Deduplicator",
    "FeedClient",
    "FeedError",
    "OrefPoller",
    "normalize_body",
    "parse_payload",
]
