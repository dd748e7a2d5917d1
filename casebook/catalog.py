from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from casebook.models import Category, IncidentRecord


def _searchable_fields(record: IncidentRecord) -> Iterable[str]:
    yield record.title
    yield record.content
    yield record.company
    yield record.airport
    yield from record.causes
    yield from record.countermeasures


def matches_query(record: IncidentRecord, query: str) -> bool:
    """Plain case-insensitive substring match; a blank query matches everything."""
    q = (query or "").strip().lower()
    if not q:
        return True
    return any(q in text.lower() for text in _searchable_fields(record))


def filter_records(
    records: Iterable[IncidentRecord],
    query: str = "",
    category: Optional[Category] = None,
) -> List[IncidentRecord]:
    return [
        r for r in records
        if (category is None or r.category is category) and matches_query(r, query)
    ]


def category_counts(records: Iterable[IncidentRecord]) -> Dict[Category, int]:
    counts = {c: 0 for c in Category}
    for r in records:
        counts[r.category] += 1
    return counts
