from weconnect.pickup_locations import (
    describe_pickup,
    facilities,
    find_pickup,
    is_known_facility,
    pickup_options_for,
)


def test_southern_route_order():
    stops = pickup_options_for("Coxsackie Correctional Facility")
    assert [(s.value, s.time) for s in stops] == [
        ("brooklyn-enm", "4:00 AM"),
        ("queens-jamaica", "4:15 AM"),
        ("bronx-yankee", "5:00 AM"),
    ]


def test_northern_route_skips_queens():
    stops = pickup_options_for("Clinton Correctional Facility")
    assert [s.value for s in stops] == ["brooklyn-enm", "bronx-yankee"]
    assert stops[1].time == "12:30 AM"


def test_sunday_only_facilities_carry_note():
    for facility in ("Lakeview Correctional Facility", "Cape Vincent Correctional Facility"):
        stops = pickup_options_for(facility)
        assert stops
        assert all(s.note == "Sunday Only" for s in stops)


def test_unknown_facility_is_empty():
    assert pickup_options_for("Unknown Facility") == []
    assert pickup_options_for(None) == []
    assert not is_known_facility("Unknown Facility")


def test_lookup_is_exact():
    assert pickup_options_for("clinton correctional facility") == []


def test_returned_list_is_a_copy():
    pickup_options_for("Marcy Correctional Facility").clear()
    assert len(pickup_options_for("Marcy Correctional Facility")) == 3


def test_find_and_describe_pickup():
    entry = find_pickup("Mohawk Correctional Facility", "queens-jamaica")
    assert entry.time == "2:15 AM"
    assert describe_pickup("Mohawk Correctional Facility", "queens-jamaica") == (
        "Queens: Jamaica Station LIRR - 2:15 AM"
    )
    assert find_pickup("Mohawk Correctional Facility", "bronx-gate6") is None
    assert describe_pickup("Unknown Facility", "somewhere") == "somewhere"


def test_facilities_cover_every_region():
    listed = facilities()
    assert len(listed) == 18
    assert {f["region"] for f in listed} == {"southern", "northern", "central", "western", "sunday_only"}
    assert all(pickup_options_for(f["name"]) for f in listed)
