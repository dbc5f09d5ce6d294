"""Hidden-browser web search."""

from nanosearch.search.local.controller import LocalSearchController
from nanosearch.search.local.surface import PlaywrightSurfaceProvider, Surface, SurfaceProvider

__all__ = [
    "LocalSearchController",
    "PlaywrightSurfaceProvider",
    "Surface",
    "SurfaceProvider",
]
