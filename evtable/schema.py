from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class FieldType(str, Enum):
    CATEGORICAL = "categorical"
    NUMERIC = "numeric"
    IDENTIFIER = "identifier"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    type: FieldType
    searchable: bool = False
    facet: bool = False

    @property
    def sortable(self) -> bool:
        return self.type is not FieldType.IDENTIFIER


@dataclass(frozen=True)
class Schema:
    """Ordered field declarations plus the field that keys a row.

    The type tag on each field picks the comparator used for sorting and the
    way the field is matched; nothing inspects values at query time.
    """

    fields: Tuple[FieldSpec, ...]
    identifier: str

    def __post_init__(self) -> None:
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate field names in schema: {names}")
        spec = self.get(self.identifier)
        if spec is None or spec.type is not FieldType.IDENTIFIER:
            raise ValueError(f"identifier field {self.identifier!r} must be declared as an identifier")

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def get(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.fields]

    def of_type(self, field_type: FieldType) -> List[str]:
        return [f.name for f in self.fields if f.type is field_type]

    @property
    def searchable(self) -> List[str]:
        return [f.name for f in self.fields if f.searchable and f.type is not FieldType.IDENTIFIER]

    @property
    def facets(self) -> List[str]:
        return [f.name for f in self.fields if f.facet and f.type is FieldType.CATEGORICAL]

    def describe(self) -> Dict[str, str]:
        return {f.name: f.type.value for f in self.fields}


def categorical(name: str, *, searchable: bool = False, facet: bool = False) -> FieldSpec:
    return FieldSpec(name, FieldType.CATEGORICAL, searchable=searchable, facet=facet)


def numeric(name: str, *, searchable: bool = False) -> FieldSpec:
    return FieldSpec(name, FieldType.NUMERIC, searchable=searchable)


def identifier(name: str) -> FieldSpec:
    return FieldSpec(name, FieldType.IDENTIFIER)


EV_SCHEMA = Schema(
    fields=(
        identifier("vin"),
        categorical("county", searchable=True, facet=True),
        categorical("city", searchable=True),
        categorical("state", searchable=True),
        categorical("postal_code"),
        numeric("model_year", searchable=True),
        categorical("make", searchable=True, facet=True),
        categorical("model", searchable=True),
        categorical("electric_vehicle_type", searchable=True, facet=True),
        categorical("cafv_eligibility", searchable=True, facet=True),
        numeric("electric_range", searchable=True),
        numeric("base_msrp"),
        numeric("legislative_district"),
        identifier("dol_vehicle_id"),
        categorical("vehicle_location"),
        categorical("electric_utility", searchable=True),
        categorical("census_tract"),
    ),
    identifier="vin",
)

# Source values of the enumerated categorical fields.
BEV = "Battery Electric Vehicle (BEV)"
PHEV = "Plug-in Hybrid Electric Vehicle (PHEV)"

CAFV_ELIGIBLE = "Clean Alternative Fuel Vehicle Eligible"
CAFV_NOT_ELIGIBLE = "Not eligible due to low battery range"
CAFV_UNKNOWN = "Eligibility unknown as battery range has not been researched"

CAFV_STATUS = {
    CAFV_ELIGIBLE: "eligible",
    CAFV_NOT_ELIGIBLE: "not_eligible",
    CAFV_UNKNOWN: "unknown",
}

VEHICLE_TYPE_LABELS = {BEV: "BEV", PHEV: "PHEV"}
