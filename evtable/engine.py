from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd

from evtable.facets import FacetIndex, compute_facets
from evtable.filters import QueryParameters
from evtable.records import Record, RecordStore
from evtable.schema import FieldType, Schema


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    records: Tuple[Record, ...]
    total_count: int
    total_pages: int
    page: int
    page_size: int

    @property
    def start_index(self) -> int:
        """1-based position of the first row on this page (0 when the page is empty)."""
        if not self.records:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if not self.records:
            return 0
        return self.start_index + len(self.records) - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_payload(self) -> Dict[str, Any]:
        return {
            "records": [dict(r) for r in self.records],
            "total_count": self.total_count,
            "total_pages": self.total_pages,
            "page": self.page,
            "page_size": self.page_size,
            "start_index": self.start_index,
            "end_index": self.end_index,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
        }


def _filter_mask(store: RecordStore, params: QueryParameters) -> pd.Series:
    frame = store.frame
    mask = pd.Series(True, index=frame.index)
    for name, value in params.active_filters.items():
        spec = store.schema.get(name)
        if spec is None:
            # an undeclared field reads as "" on every record, so no row can match
            logger.warning("filter on unknown field %r matches nothing", name)
            mask &= False
            continue
        if spec.type is not FieldType.CATEGORICAL:
            logger.warning("ignoring filter on non-categorical field %r", name)
            continue
        mask &= frame[name] == value
    return mask


def _search_mask(store: RecordStore, term: str, candidates: pd.Series) -> pd.Series:
    needle = term.strip().lower()
    if not needle:
        return candidates
    text = store.search_text
    hit = pd.Series(False, index=candidates.index)
    for col in text.columns:
        hit |= text[col].str.contains(needle, regex=False).astype(bool)
    return candidates & hit


def _sorted_positions(store: RecordStore, mask: pd.Series, sort_field: str, ascending: bool) -> list:
    subset = store.frame.loc[mask]
    spec = store.schema.get(sort_field)
    if spec is None or not spec.sortable or subset.empty:
        return subset.index.tolist()
    if spec.type is FieldType.CATEGORICAL:
        ordered = subset.sort_values(sort_field, ascending=ascending, kind="mergesort", key=lambda s: s.str.casefold())
    else:
        ordered = subset.sort_values(sort_field, ascending=ascending, kind="mergesort")
    return ordered.index.tolist()


def run_query(store: RecordStore, params: QueryParameters) -> QueryResult:
    """Filter, search, sort and paginate ``store``.

    Pure: the result depends only on the store and the parameters. Nothing here
    raises for bad input; out-of-range pages come back empty and unknown sort
    fields keep input order.
    """
    mask = _filter_mask(store, params)
    if params.search:
        mask = _search_mask(store, params.search, mask)
    positions = _sorted_positions(store, mask, params.sort_field, params.sort_direction != "desc")

    page_size = max(1, int(params.page_size))
    page = max(1, int(params.page))
    total = len(positions)
    total_pages = max(1, math.ceil(total / page_size))
    start = (page - 1) * page_size
    end = start + page_size

    return QueryResult(
        records=store.take(positions[start:end]),
        total_count=total,
        total_pages=total_pages,
        page=page,
        page_size=page_size,
    )


class QueryEngine:
    """Holds the current record store and its facet index.

    ``load`` builds the new store and facets before swapping them in, so a
    query always sees one consistent pair.
    """

    def __init__(self, schema: Schema, records: Optional[Iterable[Mapping[str, Any]]] = None) -> None:
        self.schema = schema
        self._state: Tuple[RecordStore, FacetIndex] = self._build(records or [])

    def _build(self, records: Iterable[Mapping[str, Any]]) -> Tuple[RecordStore, FacetIndex]:
        store = RecordStore.from_records(records, self.schema)
        facets = compute_facets(store)
        logger.debug("built store with %d records, facets=%s", len(store), list(facets))
        return store, facets

    def load(self, records: Iterable[Mapping[str, Any]]) -> None:
        self._state = self._build(records)

    @property
    def store(self) -> RecordStore:
        return self._state[0]

    def query(self, params: QueryParameters) -> QueryResult:
        return run_query(self._state[0], params)

    def facets(self) -> FacetIndex:
        return dict(self._state[1])
