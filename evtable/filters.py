from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional

SortDirection = Literal["asc", "desc"]

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200
DEFAULT_SORT_FIELD = "model_year"
DEFAULT_SORT_DIRECTION: SortDirection = "desc"


@dataclass(frozen=True)
class TableSettings:
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE
    default_sort_field: str = DEFAULT_SORT_FIELD
    default_sort_direction: SortDirection = DEFAULT_SORT_DIRECTION


@dataclass(frozen=True)
class QueryParameters:
    filters: Mapping[str, str] = field(default_factory=dict)
    search: str = ""
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: SortDirection = DEFAULT_SORT_DIRECTION
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", MappingProxyType(dict(self.filters)))

    def __hash__(self) -> int:
        return hash(
            (
                tuple(sorted(self.filters.items())),
                self.search,
                self.sort_field,
                self.sort_direction,
                self.page,
                self.page_size,
            )
        )

    @property
    def active_filters(self) -> Dict[str, str]:
        return {k: v for k, v in self.filters.items() if v}

    def to_payload(self) -> Dict[str, Any]:
        return {
            "filters": dict(self.filters),
            "search": self.search,
            "sort_field": self.sort_field,
            "sort_direction": self.sort_direction,
            "page": self.page,
            "page_size": self.page_size,
        }


def _as_int(value: object, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_query(raw: Mapping[str, Any], *, settings: Optional[TableSettings] = None) -> QueryParameters:
    settings = settings or TableSettings()

    filters = {
        str(k): str(v).strip()
        for k, v in (raw.get("filters") or {}).items()
        if v is not None and str(v).strip()
    }
    search = str(raw.get("search") or "").strip()

    sort_field = str(raw.get("sort_field") or settings.default_sort_field)
    sort_direction = str(raw.get("sort_direction") or "").lower()
    if sort_direction not in ("asc", "desc"):
        sort_direction = settings.default_sort_direction

    page = max(1, _as_int(raw.get("page"), 1))
    page_size = _as_int(raw.get("page_size"), settings.default_page_size)
    page_size = max(1, min(settings.max_page_size, page_size))

    return QueryParameters(
        filters=filters,
        search=search,
        sort_field=sort_field,
        sort_direction=sort_direction,  # type: ignore[arg-type]
        page=page,
        page_size=page_size,
    )


def toggle_sort(params: QueryParameters, sort_field: str) -> QueryParameters:
    """Column-header click: same column flips direction, a new column starts ascending."""
    if params.sort_field == sort_field:
        direction: SortDirection = "asc" if params.sort_direction == "desc" else "desc"
    else:
        direction = "asc"
    return replace(params, sort_field=sort_field, sort_direction=direction, page=1)


def with_filter(params: QueryParameters, name: str, value: str) -> QueryParameters:
    filters = dict(params.filters)
    if value:
        filters[name] = value
    else:
        filters.pop(name, None)
    return replace(params, filters=filters, page=1)


def with_search(params: QueryParameters, search: str) -> QueryParameters:
    return replace(params, search=search, page=1)


def with_page(params: QueryParameters, page: int) -> QueryParameters:
    return replace(params, page=page)


def clear_filters(params: QueryParameters) -> QueryParameters:
    return replace(params, filters={}, search="", page=1)
