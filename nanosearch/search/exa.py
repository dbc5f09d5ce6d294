"""Exa Search API adapter."""

import httpx

from nanosearch.search.models import SearchResultItem


async def search_exa(
    *,
    query: str,
    count: int,
    api_key: str,
    base_url: str,
) -> list[SearchResultItem]:
    """Search with Exa; full page text comes back with each hit."""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            base_url,
            json={
                "query": query,
                "numResults": count,
                "contents": {"text": True},
            },
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
            },
            timeout=30.0,
        )
        response.raise_for_status()

    results = response.json().get("results", [])
    return [
        SearchResultItem(
            title=item.get("title") or "",
            url=item.get("url", ""),
            content=item.get("text") or "",
        )
        for item in results[:count]
    ]
