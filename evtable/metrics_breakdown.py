from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from evtable.metrics_summary import round_half_up
from evtable.records import RecordStore
from evtable.schema import VEHICLE_TYPE_LABELS

TOP_N = 10
YEAR_WINDOW = 10

RANGE_BUCKETS: List[Tuple[str, int, int]] = [
    ("0-50", 0, 50),
    ("51-100", 51, 100),
    ("101-200", 101, 200),
    ("201-300", 201, 300),
    ("300+", 301, 1000),
]


def _top_counts(series: pd.Series, label: str, top_n: int = TOP_N) -> List[Dict[str, Any]]:
    # groupby(sort=False) keeps first-appearance order, so equal counts stay in that order
    counts = series.groupby(series, sort=False).size().sort_values(ascending=False, kind="mergesort").head(top_n)
    return [{label: str(k), "count": int(v)} for k, v in counts.items()]


def _vehicle_types(series: pd.Series) -> List[Dict[str, Any]]:
    total = len(series)
    labels = series.map(VEHICLE_TYPE_LABELS).fillna("Other")
    counts = labels.groupby(labels, sort=False).size()
    return [
        {"name": str(k), "value": int(v), "percentage": int(round_half_up(v / total * 100) or 0)}
        for k, v in counts.items()
    ]


def _year_distribution(series: pd.Series, reference_year: int) -> List[Dict[str, Any]]:
    recent = series[(series >= reference_year - YEAR_WINDOW) & (series <= reference_year)].astype(int)
    counts = recent.value_counts().sort_index()
    return [{"year": int(k), "count": int(v)} for k, v in counts.items()]


def _range_buckets(series: pd.Series) -> List[Dict[str, Any]]:
    return [
        {"range": label, "count": int(((series >= lo) & (series <= hi)).sum())}
        for label, lo, hi in RANGE_BUCKETS
    ]


def compute_breakdowns(store: RecordStore, *, reference_year: Optional[int] = None) -> Dict[str, Any]:
    """Chart-ready aggregates over the whole store (data only, no chart specs)."""
    df = store.frame
    reference_year = int(reference_year or date.today().year)
    if df.empty:
        return {
            "reference_year": reference_year,
            "top_makes": [],
            "vehicle_types": [],
            "years": [],
            "top_counties": [],
            "electric_range": _range_buckets(pd.Series(dtype=float)),
        }
    return {
        "reference_year": reference_year,
        "top_makes": _top_counts(df["make"], "make"),
        "vehicle_types": _vehicle_types(df["electric_vehicle_type"]),
        "years": _year_distribution(df["model_year"], reference_year),
        "top_counties": _top_counts(df["county"], "county"),
        "electric_range": _range_buckets(df["electric_range"]),
    }
