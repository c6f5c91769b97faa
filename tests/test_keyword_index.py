"""
Tests for fuzzy matching and the keyword index caches.
"""

import asyncio

import pytest

from conftest import SAMPLE_CREATORS
from creator_search.entities import CreatorFilters, CreatorRecord
from creator_search.services import FuzzyIndex, KeywordIndex
from creator_search.services import keyword_index as keyword_index_module
from creator_search.services.keyword_index import INDEX_CACHE_KEY


@pytest.fixture
def build_counter(monkeypatch):
    """Count fuzzy indices built from scratch (restores are not counted)."""
    builds = []

    class CountingFuzzyIndex(FuzzyIndex):
        def __init__(self, records, *args, _values=None, **kwargs):
            super().__init__(records, *args, _values=_values, **kwargs)
            if _values is None:
                builds.append(self)

    monkeypatch.setattr(keyword_index_module, "FuzzyIndex", CountingFuzzyIndex)
    return builds


def records():
    return tuple(CreatorRecord.from_document(doc) for doc in SAMPLE_CREATORS[:3])


def test_fuzzy_index_matches_weighted_fields():
    index = FuzzyIndex(records())

    matches = index.search("yoga")

    assert [m.id for m in matches] == ["b2"]
    assert 0.0 < matches[0].score <= 1.0


def test_fuzzy_index_scores_are_descending_and_bounded():
    index = FuzzyIndex(records())

    matches = index.search("cooking")

    assert {m.id for m in matches} == {"a1", "c3"}
    scores = [m.score for m in matches]
    assert scores == sorted(scores, reverse=True)
    assert all(0.0 <= s <= 1.0 for s in scores)


def test_fuzzy_index_tolerates_typos():
    index = FuzzyIndex(records())

    assert [m.id for m in index.search("sourdogh")] == ["c3"]


def test_fuzzy_index_ignores_too_short_queries():
    index = FuzzyIndex(records())

    assert index.search("y") == []
    assert index.search("  ") == []


def test_fuzzy_index_respects_limit():
    index = FuzzyIndex(records())

    assert len(index.search("cooking", limit=1)) == 1


def test_fuzzy_index_restore_requires_identical_records():
    original = FuzzyIndex(records())
    payload = original.to_dict()

    restored = FuzzyIndex.from_dict(payload, records())
    assert restored is not None
    assert [m.id for m in restored.search("yoga")] == ["b2"]

    changed = records()[:2]
    assert FuzzyIndex.from_dict(payload, changed) is None
    assert FuzzyIndex.from_dict(payload, records(), threshold=0.2) is None
    assert FuzzyIndex.from_dict({"version": 99}, records()) is None


@pytest.mark.asyncio
async def test_full_index_reused_while_snapshot_unchanged(keyword_index, build_counter, clock):
    await keyword_index.search("yoga", limit=5)
    clock.advance(200)
    await keyword_index.search("cooking", limit=5)

    assert len(build_counter) == 1


@pytest.mark.asyncio
async def test_full_index_rebuilt_when_snapshot_refreshes(
    keyword_index, creator_cache, store, background, build_counter
):
    await keyword_index.search("yoga", limit=5)
    await background.drain()

    store.documents["b2"]["name"] = "Leo Park Jr"
    creator_cache.invalidate()
    await background.drain()
    matches = await keyword_index.search("yoga", limit=5)

    assert [m.creator.name for m in matches] == ["Leo Park Jr"]
    assert len(build_counter) == 2


@pytest.mark.asyncio
async def test_full_index_is_persisted_and_restored(
    creator_cache, remote, background, clock, build_counter
):
    first = KeywordIndex(creator_cache=creator_cache, clock=clock)
    await first.search("yoga", limit=5)
    await background.drain()
    assert INDEX_CACHE_KEY in remote.data
    assert len(build_counter) == 1

    # A fresh process sharing the same distributed cache
    second = KeywordIndex(creator_cache=creator_cache, clock=clock)
    matches = await second.search("yoga", limit=5)

    assert [m.id for m in matches] == ["b2"]
    assert len(build_counter) == 1


@pytest.mark.asyncio
async def test_unreadable_persisted_index_triggers_rebuild(keyword_index, remote, build_counter):
    remote.fail_reads = True

    matches = await keyword_index.search("yoga", limit=5)

    assert [m.id for m in matches] == ["b2"]
    assert len(build_counter) == 1


@pytest.mark.asyncio
async def test_filtered_search_only_returns_matching_subset(keyword_index):
    matches = await keyword_index.search("cooking", limit=10, filters=CreatorFilters(region="br"))

    assert [m.id for m in matches] == ["c3"]


@pytest.mark.asyncio
async def test_filtered_index_reused_within_ttl(keyword_index, build_counter, clock):
    filters = CreatorFilters(category="cooking")

    await keyword_index.search("food", limit=5, filters=filters)
    clock.advance(120)
    await keyword_index.search("baking", limit=5, filters=filters)

    assert len(build_counter) == 1
    assert keyword_index.filtered_count == 1


@pytest.mark.asyncio
async def test_filtered_index_rebuilt_after_ttl(keyword_index, build_counter, clock):
    filters = CreatorFilters(category="cooking")

    await keyword_index.search("food", limit=5, filters=filters)
    clock.advance(301)
    await keyword_index.search("food", limit=5, filters=filters)

    assert len(build_counter) == 2
    assert keyword_index.filtered_count == 1


@pytest.mark.asyncio
async def test_filtered_index_rebuilt_when_snapshot_changes(
    keyword_index, creator_cache, build_counter
):
    filters = CreatorFilters(gender="female")

    await keyword_index.search("food", limit=5, filters=filters)
    creator_cache.invalidate()
    await keyword_index.search("food", limit=5, filters=filters)

    assert len(build_counter) == 2


@pytest.mark.asyncio
async def test_filtered_cache_evicts_least_recently_used(keyword_index):
    for i in range(20):
        await keyword_index.search("food", limit=5, filters=CreatorFilters(region=f"r{i}"))
    assert keyword_index.filtered_count == 20

    # Touch r0 so r1 becomes the least recently used entry
    await keyword_index.search("food", limit=5, filters=CreatorFilters(region="r0"))
    await keyword_index.search("food", limit=5, filters=CreatorFilters(region="r20"))

    keys = keyword_index.filtered_keys
    assert len(keys) == 20
    assert CreatorFilters(region="r1").cache_key() not in keys
    assert CreatorFilters(region="r0").cache_key() in keys
    assert keys[-1] == CreatorFilters(region="r20").cache_key()


def test_filter_key_is_deterministic():
    assert CreatorFilters(category="a", gender="f").cache_key() == "a|||f"
    assert CreatorFilters().cache_key() == "|||"
    assert CreatorFilters(region="").cache_key() == CreatorFilters().cache_key()


@pytest.mark.asyncio
async def test_invalidate_cancels_in_flight_index_write_back(keyword_index, remote, background):
    remote.write_delay = 0.05

    await keyword_index.search("yoga", limit=5)
    await asyncio.sleep(0)
    keyword_index.invalidate()
    await background.drain()

    assert INDEX_CACHE_KEY not in remote.data
