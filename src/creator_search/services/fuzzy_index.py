"""Weighted multi-field fuzzy matching over creator records.

Each configured key contributes a distance in [0, 1] (0 = perfect) from
rapidfuzz's normalized ratios. Keys within the threshold multiply into
the record distance, each raised to its normalized weight, so records
matching on several heavy fields rank first. The keyword score handed
to callers is ``1 - distance``.
"""

import hashlib
import json
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from rapidfuzz import fuzz

from creator_search.entities import CreatorRecord

INDEX_FORMAT_VERSION = 1

# Smallest factor a perfect key match contributes, so the product stays ordered
EPSILON = sys.float_info.epsilon

DEFAULT_KEYS: tuple[tuple[str, float], ...] = (
    ("name", 1.0),
    ("profile.displayName", 1.0),
    ("topics", 0.8),
    ("categories", 0.6),
    ("category", 0.4),
    ("profile.shortBio", 0.5),
    ("profile.bio", 0.3),
)
DEFAULT_THRESHOLD = 0.4
MIN_MATCH_CHAR_LENGTH = 2


@dataclass(frozen=True)
class KeywordMatch:
    """A record matched by the fuzzy index, with its similarity in [0, 1]."""

    creator: CreatorRecord
    score: float

    @property
    def id(self) -> str:
        return self.creator.id


def _extract(document: dict[str, Any], path: str) -> list[str]:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict):
            return []
        value = value.get(part)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        values = value
    else:
        values = [value]
    return [str(v).strip().lower() for v in values if v is not None and str(v).strip()]


def snapshot_fingerprint(records: Iterable[CreatorRecord]) -> str:
    """Content hash identifying a record sequence, order included."""
    payload = json.dumps([record.to_dict() for record in records], sort_keys=True)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def _distance(query: str, value: str, cutoff: float) -> float:
    # partial_ratio would let a short value match a longer query wholesale
    if len(value) >= len(query):
        ratio = fuzz.partial_ratio(query, value, score_cutoff=cutoff)
    else:
        ratio = fuzz.ratio(query, value, score_cutoff=cutoff)
    return 1.0 - ratio / 100.0


class FuzzyIndex:
    """Searchable fuzzy index over a sequence of creator records.

    Example:
        ```python
        index = FuzzyIndex(snapshot)
        for match in index.search("yoga", limit=10):
            print(match.id, match.score)
        ```
    """

    def __init__(
        self,
        records: Iterable[CreatorRecord],
        keys: tuple[tuple[str, float], ...] = DEFAULT_KEYS,
        threshold: float = DEFAULT_THRESHOLD,
        _values: list[dict[str, list[str]]] | None = None,
    ) -> None:
        """Build the index.

        Args:
            records: Records to index; their order breaks score ties.
            keys: (dotted path, weight) pairs.
            threshold: Maximum per-key distance that still counts as a match.
        """
        self._records = tuple(records)
        self._keys = tuple(keys)
        self._threshold = threshold
        total = sum(weight for _, weight in self._keys) or 1.0
        self._weights = {path: weight / total for path, weight in self._keys}

        if _values is None:
            documents = [record.to_dict() for record in self._records]
            _values = [{path: _extract(doc, path) for path, _ in self._keys} for doc in documents]
        self._values = _values

    def __len__(self) -> int:
        return len(self._records)

    def search(self, query: str, limit: int | None = None) -> list[KeywordMatch]:
        """Return matches sorted by descending similarity.

        Ties keep build order (Python's sort is stable).
        """
        needle = query.strip().lower()
        if len(needle) < MIN_MATCH_CHAR_LENGTH:
            return []

        cutoff = (1.0 - self._threshold) * 100.0
        scored: list[tuple[float, CreatorRecord]] = []
        for record, fields in zip(self._records, self._values):
            total = 1.0
            matched = False
            for path, values in fields.items():
                if not values:
                    continue
                best = min(_distance(needle, value, cutoff) for value in values)
                if best <= self._threshold:
                    matched = True
                    total *= max(best, EPSILON) ** self._weights[path]
            if matched:
                scored.append((total, record))

        scored.sort(key=lambda item: item[0])
        if limit is not None:
            scored = scored[:limit]
        return [KeywordMatch(creator=record, score=1.0 - distance) for distance, record in scored]

    def to_dict(self) -> dict[str, Any]:
        """Serialize the prepared field values. Records are not included."""
        return {
            "version": INDEX_FORMAT_VERSION,
            "keys": [[path, weight] for path, weight in self._keys],
            "threshold": self._threshold,
            "fingerprint": snapshot_fingerprint(self._records),
            "values": self._values,
        }

    @classmethod
    def from_dict(
        cls,
        payload: Any,
        records: tuple[CreatorRecord, ...],
        keys: tuple[tuple[str, float], ...] = DEFAULT_KEYS,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> "FuzzyIndex | None":
        """Restore a serialized index for ``records``.

        Returns None when the payload is malformed, was built with other
        options, or does not describe exactly these records in this order.
        """
        if not isinstance(payload, dict) or payload.get("version") != INDEX_FORMAT_VERSION:
            return None
        try:
            stored_keys = tuple((str(path), float(weight)) for path, weight in payload["keys"])
            stored_threshold = float(payload["threshold"])
            fingerprint = payload["fingerprint"]
            values = payload["values"]
        except (KeyError, TypeError, ValueError):
            return None

        if stored_keys != tuple(keys) or stored_threshold != threshold:
            return None
        if fingerprint != snapshot_fingerprint(records) or len(values) != len(records):
            return None
        return cls(records, keys=keys, threshold=threshold, _values=values)

    @property
    def records(self) -> tuple[CreatorRecord, ...]:
        return self._records

    @property
    def threshold(self) -> float:
        return self._threshold
