"""Search error taxonomy."""

CANCELLED_MESSAGE = "Operation cancelled"


class SearchError(Exception):
    """Base class for search failures."""


class SearchCancelledError(SearchError):
    """Raised when a cancellation token fires before or during a search."""

    def __init__(self, message: str = CANCELLED_MESSAGE):
        super().__init__(message)


class NavigationError(SearchError):
    """Raised when a page cannot be loaded or never becomes ready."""


class ExtractionError(SearchError):
    """Raised when in-page script evaluation fails or returns malformed data."""
