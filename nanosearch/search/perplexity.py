"""Perplexity Search API adapter."""

import httpx

from nanosearch.search.models import SearchResultItem


async def search_perplexity(
    *,
    query: str,
    count: int,
    api_key: str,
    base_url: str,
) -> list[SearchResultItem]:
    """Search with Perplexity; snippets are short so callers enrich content."""
    async with httpx.AsyncClient() as client:
        response = await client.post(
            base_url,
            json={"query": query, "max_results": count},
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            timeout=15.0,
        )
        response.raise_for_status()

    results = response.json().get("results", [])
    return [
        SearchResultItem(
            title=item.get("title", ""),
            url=item.get("url", ""),
            content=item.get("snippet", ""),
        )
        for item in results[:count]
    ]
