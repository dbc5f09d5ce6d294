"""Web search: local hidden-browser scraping plus remote API engines."""

from nanosearch.search.cancel import CancellationToken
from nanosearch.search.client import SearchClient
from nanosearch.search.errors import (
    ExtractionError,
    NavigationError,
    SearchCancelledError,
    SearchError,
)
from nanosearch.search.models import (
    LocalSearchResponse,
    SearchCandidate,
    SearchResponse,
    SearchResultItem,
)

__all__ = [
    "CancellationToken",
    "ExtractionError",
    "LocalSearchResponse",
    "NavigationError",
    "SearchCancelledError",
    "SearchCandidate",
    "SearchClient",
    "SearchError",
    "SearchResponse",
    "SearchResultItem",
]
