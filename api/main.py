from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import FacetsResponse, LoadResponse, QueryParametersModel, RecordsPayload
from evtable.engine import QueryEngine
from evtable.filters import QueryParameters, TableSettings, normalize_query
from evtable.metrics_breakdown import compute_breakdowns
from evtable.metrics_summary import compute_summary
from evtable.records import normalize_records
from evtable.schema import EV_SCHEMA


app = FastAPI(title="EV Registrations Table API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SETTINGS = TableSettings()
engine = QueryEngine(EV_SCHEMA)


def _params_from_model(model: QueryParametersModel) -> QueryParameters:
    return normalize_query(model.model_dump(), settings=SETTINGS)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.post("/records")
def load_records(payload: RecordsPayload):
    try:
        rows, dropped = normalize_records(payload.records, EV_SCHEMA)
        engine.load(rows)
        logger.info("loaded %d records (%d dropped)", len(rows), dropped)
        return _json(LoadResponse(loaded=len(rows), dropped=dropped).model_dump())
    except Exception as exc:
        logger.exception("load_records failed")
        return _error(exc)


@app.post("/query")
def query(params: QueryParametersModel):
    try:
        p = _params_from_model(params)
        result = engine.query(p)
        return _json({"params": p.to_payload(), **result.to_payload()})
    except Exception as exc:
        logger.exception("query failed")
        return _error(exc)


@app.get("/meta/facets")
def meta_facets():
    try:
        return _json(FacetsResponse(facets={k: list(v) for k, v in engine.facets().items()}).model_dump())
    except Exception as exc:
        logger.exception("meta_facets failed")
        return _error(exc)


@app.get("/meta/schema")
def meta_schema():
    return _json({"identifier": EV_SCHEMA.identifier, "fields": EV_SCHEMA.describe(), "searchable": EV_SCHEMA.searchable})


@app.get("/metrics/summary")
def metrics_summary():
    try:
        return _json(compute_summary(engine.store))
    except Exception as exc:
        logger.exception("metrics_summary failed")
        return _error(exc)


@app.get("/metrics/breakdowns")
def metrics_breakdowns(reference_year: Optional[int] = Query(default=None)):
    try:
        return _json(compute_breakdowns(engine.store, reference_year=reference_year))
    except Exception as exc:
        logger.exception("metrics_breakdowns failed")
        return _error(exc)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
