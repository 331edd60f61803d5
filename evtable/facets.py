from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from evtable.records import RecordStore

FacetIndex = Dict[str, Tuple[str, ...]]


def compute_facets(store: RecordStore, fields: Optional[Iterable[str]] = None) -> FacetIndex:
    """Sorted distinct non-empty values of each facet field."""
    names = list(fields) if fields is not None else store.schema.facets
    out: FacetIndex = {}
    for name in names:
        if name not in store.frame.columns:
            out[name] = ()
            continue
        values = store.frame[name]
        out[name] = tuple(sorted(str(v) for v in values[values != ""].unique().tolist()))
    return out
