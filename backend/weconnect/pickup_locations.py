from typing import Optional

from pydantic import BaseModel


class PickupLocationEntry(BaseModel):
    name: str
    time: str
    address: str
    value: str
    note: Optional[str] = None


# ================== STOPS ==================
BROOKLYN_ENM = {
    "name": "Brooklyn: East New York McDonald's",
    "address": "12 Pennsylvania Avenue",
    "value": "brooklyn-enm",
}
QUEENS_JAMAICA = {
    "name": "Queens: Jamaica Station LIRR",
    "address": "Corner of Sutphin BLVD",
    "value": "queens-jamaica",
}
BRONX_YANKEE = {
    "name": "Bronx: 161 McDonald's - Yankee Stadium",
    "address": "51-67 161st St",
    "value": "bronx-yankee",
}
BRONX_GATE6 = {
    "name": "Bronx: 161 Yankee Stadium Gate 6",
    "address": "51-67 161st St",
    "value": "bronx-gate6",
}

# ================== REGIONS ==================
# Each region shares one ordered route; the order is the pickup sequence.
REGIONS = {
    "southern": {
        "label": "Southern Facilities",
        "band": "4:00 AM - 5:00 AM",
        "facilities": [
            "Coxsackie Correctional Facility",
            "Greene Correctional Facility",
            "Washington Correctional Facility",
        ],
        "route": [
            {**BROOKLYN_ENM, "time": "4:00 AM"},
            {**QUEENS_JAMAICA, "time": "4:15 AM"},
            {**BRONX_YANKEE, "time": "5:00 AM"},
        ],
    },
    "northern": {
        "label": "Northern Facilities",
        "band": "12:00 AM - 12:30 AM",
        "facilities": [
            "Clinton Correctional Facility",
            "Altona Correctional Facility",
            "Franklin Correctional Facility",
            "Barehill Correctional Facility",
            "Upstate Correctional Facility",
            "Adirondack Correctional Facility",
            "Raybrook Correctional Facility",
        ],
        "route": [
            {**BROOKLYN_ENM, "time": "12:00 AM"},
            {**BRONX_YANKEE, "time": "12:30 AM"},
        ],
    },
    "central": {
        "label": "Central Facilities",
        "band": "2:00 AM - 3:00 AM",
        "facilities": [
            "Mohawk Correctional Facility",
            "Mid-State Correctional Facility",
            "Marcy Correctional Facility",
        ],
        "route": [
            {**BROOKLYN_ENM, "time": "2:00 AM"},
            {**QUEENS_JAMAICA, "time": "2:15 AM"},
            {**BRONX_YANKEE, "time": "3:00 AM"},
        ],
    },
    "western": {
        "label": "Western Facilities",
        "band": "12:00 AM - 12:30 AM (Sunday Only)",
        "facilities": [
            "Collins Correctional Facility",
            "Lakeview Correctional Facility",
        ],
        "route": [
            {**BROOKLYN_ENM, "time": "12:00 AM", "note": "Sunday Only"},
            {**BRONX_GATE6, "time": "12:30 AM", "note": "Sunday Only"},
        ],
    },
    "sunday_only": {
        "label": "Sunday-Only Facilities",
        "band": "12:00 AM - 12:30 AM (Sunday Only)",
        "facilities": [
            "Riverview Correctional Facility",
            "Gouverneur Correctional Facility",
            "Cape Vincent Correctional Facility",
        ],
        "route": [
            {**BROOKLYN_ENM, "time": "12:00 AM", "note": "Sunday Only"},
            {**BRONX_GATE6, "time": "12:30 AM", "note": "Sunday Only"},
        ],
    },
}

PICKUP_LOCATIONS = {
    facility: [PickupLocationEntry(**stop) for stop in region["route"]]
    for region in REGIONS.values()
    for facility in region["facilities"]
}

FACILITY_REGIONS = {
    facility: key
    for key, region in REGIONS.items()
    for facility in region["facilities"]
}


def pickup_options_for(facility: Optional[str]) -> list:
    """Ordered pickup stops for ``facility``; empty when the facility is not served."""
    if not facility:
        return []
    return list(PICKUP_LOCATIONS.get(facility, []))


def find_pickup(facility: Optional[str], value: Optional[str]) -> Optional[PickupLocationEntry]:
    for entry in pickup_options_for(facility):
        if entry.value == value:
            return entry
    return None


def is_known_facility(facility: Optional[str]) -> bool:
    return facility in PICKUP_LOCATIONS


def describe_pickup(facility: Optional[str], value: Optional[str]) -> str:
    entry = find_pickup(facility, value)
    if entry is None:
        return value or ""
    return f"{entry.name} - {entry.time}"


def facilities() -> list:
    result = []
    for key, region in REGIONS.items():
        for facility in region["facilities"]:
            result.append({
                "name": facility,
                "region": key,
                "region_label": region["label"],
                "pickup_window": region["band"],
            })
    return result
