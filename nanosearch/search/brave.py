"""Brave Search API adapter."""

import httpx

from nanosearch.search.models import SearchResultItem


async def search_brave(
    *,
    query: str,
    count: int,
    api_key: str,
    base_url: str,
) -> list[SearchResultItem]:
    """Search with Brave API; content is the short description only."""
    async with httpx.AsyncClient() as client:
        response = await client.get(
            base_url,
            params={"q": query, "count": count},
            headers={
                "Accept": "application/json",
                "X-Subscription-Token": api_key,
            },
            timeout=10.0,
        )
        response.raise_for_status()

    results = (response.json().get("web") or {}).get("results") or []
    return [
        SearchResultItem(
            title=item.get("title", ""),
            url=item.get("url", ""),
            content=item.get("description", ""),
        )
        for item in results[:count]
    ]
