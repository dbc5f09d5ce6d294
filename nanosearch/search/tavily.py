"""Tavily Search API adapter."""

import httpx

from nanosearch.search.models import SearchResultItem


async def search_tavily(
    *,
    query: str,
    count: int,
    api_key: str,
    base_url: str,
) -> list[SearchResultItem]:
    """Search with Tavily; `content` is an extract, callers enrich it."""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            base_url,
            json={
                "api_key": api_key,
                "query": query,
                "max_results": count,
            },
            headers={"Content-Type": "application/json"},
            timeout=10.0,
        )
        response.raise_for_status()

    return [
        SearchResultItem(
            title=item.get("title") or "",
            url=item.get("url") or "",
            content=item.get("content") or item.get("snippet") or "",
        )
        for item in response.json().get("results", [])[:count]
    ]
