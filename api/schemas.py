from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

from evtable.filters import DEFAULT_PAGE_SIZE, DEFAULT_SORT_DIRECTION, DEFAULT_SORT_FIELD


class QueryParametersModel(BaseModel):
    filters: Dict[str, str] = Field(default_factory=dict)
    search: str = ""
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: Literal["asc", "desc"] = DEFAULT_SORT_DIRECTION
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


class RecordsPayload(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)


class LoadResponse(BaseModel):
    loaded: int
    dropped: int


class FacetsResponse(BaseModel):
    facets: Dict[str, List[str]]
