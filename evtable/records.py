from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from evtable.schema import FieldType, Schema


logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

NA_TOKENS = {"nan", "none", "null", "<na>", "na", "n/a"}


def normalize_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    s = str(value).strip()
    if not s or s.lower() in NA_TOKENS:
        return None
    return s


def coerce_number(value: object) -> float | int:
    """Parse a numeric field value, defaulting anything unparseable to 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    try:
        out = float(value)  # type: ignore[arg-type]
    except Exception:
        return 0
    if math.isnan(out) or math.isinf(out):
        return 0
    return int(out) if out.is_integer() else out


def normalize_records(rows: Iterable[Mapping[str, Any]], schema: Schema) -> Tuple[List[Dict[str, Any]], int]:
    """Prepare raw rows for loading: drop rows without an identifier, coerce numeric fields.

    Returns the cleaned rows and the number of rows dropped.
    """
    numeric_cols = schema.of_type(FieldType.NUMERIC)
    text_cols = [c for c in schema.names if c not in numeric_cols]
    out: List[Dict[str, Any]] = []
    dropped = 0
    for row in rows:
        if normalize_text(row.get(schema.identifier)) is None:
            dropped += 1
            continue
        clean = dict(row)
        for c in numeric_cols:
            clean[c] = coerce_number(row.get(c))
        for c in text_cols:
            clean[c] = normalize_text(row.get(c)) or ""
        out.append(clean)
    if dropped:
        logger.info("dropped %d rows without %s", dropped, schema.identifier)
    return out, dropped


def _text_column(values: List[object]) -> pd.Series:
    series = pd.Series(values, dtype=object)
    series = series.where(series.notna(), "")
    return series.astype(str)


def _numeric_column(values: List[object]) -> pd.Series:
    return pd.to_numeric(pd.Series(values, dtype=object), errors="coerce").fillna(0)


def number_text(value: object) -> str:
    out = float(value)  # type: ignore[arg-type]
    return str(int(out)) if out.is_integer() else str(value)


def build_frame(records: Sequence[Record], schema: Schema) -> pd.DataFrame:
    """Materialize every schema field as a column; missing values become the type's zero value."""
    columns: Dict[str, pd.Series] = {}
    for spec in schema:
        values = [r.get(spec.name) for r in records]
        if spec.type is FieldType.NUMERIC:
            columns[spec.name] = _numeric_column(values)
        else:
            columns[spec.name] = _text_column(values)
    return pd.DataFrame(columns, index=pd.RangeIndex(len(records)))


def build_search_text(frame: pd.DataFrame, schema: Schema) -> pd.DataFrame:
    """Lower-cased string form of every searchable field, aligned with ``frame``."""
    columns: Dict[str, pd.Series] = {}
    for name in schema.searchable:
        spec = schema.get(name)
        if spec is not None and spec.type is FieldType.NUMERIC:
            columns[name] = frame[name].map(number_text).astype(str)
        else:
            columns[name] = frame[name].str.lower()
    return pd.DataFrame(columns, index=frame.index)


@dataclass(frozen=True, eq=False)
class RecordStore:
    """Immutable set of records for one session.

    ``frame`` and ``search_text`` are positional views of ``records``: row ``i``
    of either frame describes ``records[i]``.
    """

    schema: Schema
    records: Tuple[Record, ...] = ()
    frame: pd.DataFrame = field(default_factory=pd.DataFrame)
    search_text: pd.DataFrame = field(default_factory=pd.DataFrame)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], schema: Schema) -> "RecordStore":
        rows = list(records)
        frozen = tuple(MappingProxyType(dict(r)) for r in rows if normalize_text(r.get(schema.identifier)) is not None)
        if len(frozen) != len(rows):
            logger.debug("skipped %d records without %s", len(rows) - len(frozen), schema.identifier)
        frame = build_frame(frozen, schema)
        return cls(schema=schema, records=frozen, frame=frame, search_text=build_search_text(frame, schema))

    @classmethod
    def empty(cls, schema: Schema) -> "RecordStore":
        return cls.from_records([], schema)

    def __len__(self) -> int:
        return len(self.records)

    def take(self, positions: Iterable[int]) -> Tuple[Record, ...]:
        return tuple(self.records[i] for i in positions)
