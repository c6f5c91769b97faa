#!/usr/bin/env python3
"""
Demo script for creator search.

Warms the creator cache from Redis, then runs the same query in every
search mode and a similar-creators lookup for the top hit.

Usage:
    python scripts/demo.py "street food" --category food --limit 5
"""

import argparse
import asyncio
import time

from creator_search import (
    CreatorNotFoundError,
    SearchEngine,
    SearchHandler,
    SearchRequest,
    SimilarRequest,
    UpstreamUnavailableError,
)
from creator_search.config import configure_logging
from creator_search.entities import SearchMode


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_search(handler: SearchHandler, query: str, limit: int, filters: dict) -> str | None:
    """Run the query in every mode and return the best hybrid hit."""
    top_id = None
    for mode in (SearchMode.HYBRID, SearchMode.SEMANTIC, SearchMode.KEYWORD):
        print_section(f"{mode.value.title()} search: {query!r}")
        try:
            response = await handler.search(
                SearchRequest(query=query, mode=mode, limit=limit, filters=filters)
            )
        except UpstreamUnavailableError as e:
            print(f"  ✗ {mode.value} search failed: {e}")
            continue

        for item in response.results:
            print(
                f"  {item.combined_score:.3f}  {item.name or item.id}"
                f"  (semantic={item.semantic_score:.3f}, keyword={item.keyword_score:.3f})"
            )
        print(f"\n  {response.meta.result_count} results in {response.meta.lookup_time_ms:.1f}ms")

        if mode is SearchMode.HYBRID and response.results:
            top_id = response.results[0].id
    return top_id


async def demo_similar(handler: SearchHandler, creator_id: str) -> None:
    """Show similar creators for ``creator_id``."""
    print_section(f"Creators similar to {creator_id}")
    try:
        response = await handler.similar(SimilarRequest(creator_id=creator_id))
    except CreatorNotFoundError as e:
        print(f"  ✗ {e}")
        return

    source = "precomputed" if response.precomputed else "category fallback" if response.fallback else "vector search"
    print(f"  Source: {source}")
    for item in response.results:
        print(f"  {item.similarity:.3f}  {item.name or item.id}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Creator search demo")
    parser.add_argument("query", nargs="?", default="cooking")
    parser.add_argument("--limit", type=int, default=5)
    parser.add_argument("--category")
    parser.add_argument("--region")
    parser.add_argument("--language")
    parser.add_argument("--gender")
    args = parser.parse_args()

    configure_logging()
    engine = SearchEngine.create()
    handler = SearchHandler(engine=engine)

    try:
        print_section("Warming caches")
        start = time.time()
        count = await engine.warm()
        print(f"  ✓ {count} published creators loaded in {(time.time() - start) * 1000:.1f}ms")

        start = time.time()
        await engine.creator_cache.get_snapshot()
        print(f"  ✓ Warm snapshot read in {(time.time() - start) * 1000:.3f}ms")

        filters = {
            "category": args.category,
            "region": args.region,
            "language": args.language,
            "gender": args.gender,
        }
        top_id = await demo_search(handler, args.query, args.limit, filters)
        if top_id:
            await demo_similar(handler, top_id)
    finally:
        await engine.aclose()


if __name__ == "__main__":
    asyncio.run(main())
