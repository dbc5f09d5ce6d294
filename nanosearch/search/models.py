"""Shared search models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from nanosearch.search.errors import ExtractionError


@dataclass(slots=True)
class SearchCandidate:
    """Title/URL pair harvested from a results page."""

    title: str
    url: str


@dataclass(slots=True)
class SearchResultItem:
    """Search result with page content (raw HTML or text)."""

    title: str
    url: str
    content: str | None = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title, "url": self.url}
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass(slots=True)
class LocalSearchResponse:
    """Successful outcome of a local search."""

    results: list[SearchResultItem] = field(default_factory=list)


@dataclass(slots=True)
class SearchResponse:
    """Engine-independent search response."""

    query: str | None = None
    results: list[SearchResultItem] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None or self.results is None:
            return {"error": self.error}
        return {
            "query": self.query,
            "results": [result.to_dict() for result in self.results],
        }


def parse_candidates(raw: Any, limit: int | None = None) -> list[SearchCandidate]:
    """Validate untyped script output into candidates."""
    if not isinstance(raw, list):
        raise ExtractionError(
            f"results script returned {type(raw).__name__}, expected a list"
        )

    candidates: list[SearchCandidate] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        url = item.get("url")
        if not isinstance(url, str) or not url.strip():
            continue
        title = item.get("title")
        if not isinstance(title, str):
            title = ""
        candidates.append(SearchCandidate(title=title.strip(), url=url.strip()))
        if limit is not None and len(candidates) >= limit:
            break
    return candidates


def dedupe_candidates(
    candidates: Iterable[SearchCandidate],
    max_results: int,
) -> list[SearchCandidate]:
    """Drop repeated URLs (first occurrence wins) and cap to max_results."""
    seen: set[str] = set()
    unique: list[SearchCandidate] = []
    for candidate in candidates:
        if len(unique) >= max_results:
            break
        if candidate.url in seen:
            continue
        seen.add(candidate.url)
        unique.append(candidate)
    return unique
