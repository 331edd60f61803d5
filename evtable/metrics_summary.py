from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

import pandas as pd

from evtable.records import RecordStore
from evtable.schema import BEV, CAFV_STATUS, PHEV


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def _positive_mean(series: pd.Series) -> int:
    positive = series[series > 0]
    if positive.empty:
        return 0
    return int(round_half_up(positive.mean()) or 0)


def _as_int(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def cafv_status(series: pd.Series) -> pd.Series:
    """Map raw CAFV eligibility values onto eligible / not_eligible / unknown."""
    return series.map(CAFV_STATUS).fillna("unknown")


def compute_summary(store: RecordStore) -> Dict[str, Any]:
    df = store.frame
    total = int(len(df))
    if total == 0:
        return {
            "total_vehicles": 0,
            "unique_makes": 0,
            "unique_models": 0,
            "unique_counties": 0,
            "avg_electric_range": 0,
            "vehicle_types": {"bev": 0, "phev": 0},
            "cafv": {"eligible": 0, "not_eligible": 0, "unknown": 0, "eligible_pct": 0},
            "year_range": {"min": None, "max": None},
            "avg_msrp": 0,
        }

    status_counts = cafv_status(df["cafv_eligibility"]).value_counts()
    eligible = int(status_counts.get("eligible", 0))
    years = df.loc[df["model_year"] > 0, "model_year"]

    return {
        "total_vehicles": total,
        "unique_makes": int(df["make"].nunique()),
        "unique_models": int(df["model"].nunique()),
        "unique_counties": int(df["county"].nunique()),
        "avg_electric_range": _positive_mean(df["electric_range"]),
        "vehicle_types": {
            "bev": int((df["electric_vehicle_type"] == BEV).sum()),
            "phev": int((df["electric_vehicle_type"] == PHEV).sum()),
        },
        "cafv": {
            "eligible": eligible,
            "not_eligible": int(status_counts.get("not_eligible", 0)),
            "unknown": int(status_counts.get("unknown", 0)),
            "eligible_pct": int(round_half_up(eligible / total * 100) or 0),
        },
        "year_range": {
            "min": _as_int(years.min()) if not years.empty else None,
            "max": _as_int(years.max()) if not years.empty else None,
        },
        "avg_msrp": _positive_mean(df["base_msrp"]),
    }
