from __future__ import annotations

import pytest

from evtable.records import RecordStore
from evtable.schema import BEV, CAFV_ELIGIBLE, CAFV_NOT_ELIGIBLE, CAFV_UNKNOWN, PHEV, Schema, categorical, identifier, numeric


@pytest.fixture
def small_schema() -> Schema:
    return Schema(
        fields=(
            identifier("id"),
            categorical("make", searchable=True, facet=True),
            numeric("year", searchable=True),
            numeric("range", searchable=True),
        ),
        identifier="id",
    )


@pytest.fixture
def small_records() -> list[dict]:
    return [
        {"make": "Tesla", "year": 2020, "range": 250, "id": "A"},
        {"make": "Nissan", "year": 2019, "range": 150, "id": "B"},
        {"make": "Tesla", "year": 2022, "range": 300, "id": "C"},
    ]


@pytest.fixture
def small_store(small_schema: Schema, small_records: list[dict]) -> RecordStore:
    return RecordStore.from_records(small_records, small_schema)


def _ev(vin, make, model, year, vtype, cafv, rng, msrp=0, county="King", city="Seattle"):
    return {
        "vin": vin,
        "county": county,
        "city": city,
        "state": "WA",
        "postal_code": "98101",
        "model_year": year,
        "make": make,
        "model": model,
        "electric_vehicle_type": vtype,
        "cafv_eligibility": cafv,
        "electric_range": rng,
        "base_msrp": msrp,
        "legislative_district": 43,
        "dol_vehicle_id": f"DOL-{vin}",
        "vehicle_location": "POINT (-122.3 47.6)",
        "electric_utility": "CITY OF SEATTLE - (WA)",
        "census_tract": "53033008100",
    }


@pytest.fixture
def ev_rows() -> list[dict]:
    return [
        _ev("5YJ3E1EA0K", "TESLA", "MODEL 3", 2019, BEV, CAFV_ELIGIBLE, 220, county="King", city="Seattle"),
        _ev("1N4AZ0CP5D", "NISSAN", "LEAF", 2013, BEV, CAFV_ELIGIBLE, 75, county="Pierce", city="Tacoma"),
        _ev("WBY8P6C05L", "BMW", "I3", 2020, PHEV, CAFV_ELIGIBLE, 126, msrp=0, county="King", city="Bellevue"),
        _ev("5YJYGDEE1M", "TESLA", "MODEL Y", 2021, BEV, CAFV_UNKNOWN, 0, county="Snohomish", city="Everett"),
        _ev("1G1FW6S08H", "CHEVROLET", "BOLT EV", 2017, BEV, CAFV_ELIGIBLE, 238, county="King", city="Kent"),
        _ev("JTDKARFP1K", "TOYOTA", "PRIUS PRIME", 2019, PHEV, CAFV_NOT_ELIGIBLE, 25, msrp=27600, county="Clark", city="Vancouver"),
        _ev("KNDCC3LG9P", "KIA", "NIRO", 2023, BEV, CAFV_UNKNOWN, 0, county="Pierce", city="Puyallup"),
        _ev("5YJSA1E26H", "TESLA", "MODEL S", 2017, BEV, CAFV_ELIGIBLE, 210, msrp=69900, county="King", city="Redmond"),
    ]
