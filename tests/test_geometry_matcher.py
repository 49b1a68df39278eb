from euro_metrics.matchers.geometry_matcher import feature_matches, find_feature, join_geometry
from euro_metrics.provider.schemas import CountryRecord


def _feature(admin, formal_en=None, geometry="poly"):
    properties = {"admin": admin}
    if formal_en is not None:
        properties["formal_en"] = formal_en
    return {"type": "Feature", "properties": properties, "geometry": {"type": "Polygon", "id": geometry}}


def test_exact_admin_match():
    features = [_feature("France"), _feature("United Kingdom", geometry="uk")]
    joined = join_geometry([CountryRecord(name="United Kingdom", metric=1.0)], features, aliases={})
    assert len(joined) == 1
    assert joined[0]["geometry"]["id"] == "uk"
    assert joined[0]["properties"]["name"] == "United Kingdom"
    assert joined[0]["type"] == "Feature"


def test_substring_match_both_directions():
    assert feature_matches("Bosnia", _feature("Bosnia and Herzegovina"))
    assert feature_matches("FYR Macedonia", _feature("Macedonia"))
    assert feature_matches("Slovak Republic", _feature("Slovakia", formal_en="Slovak Republic"))
    assert not feature_matches("Spain", _feature("Portugal"))


def test_empty_admin_never_matches_by_substring():
    assert not feature_matches("Spain", {"properties": {"admin": ""}})
    assert not feature_matches("Spain", {"properties": {}})


def test_first_match_in_iteration_order_wins():
    features = [_feature("Northern Ireland", geometry="ni"), _feature("Ireland", geometry="ie")]
    assert find_feature("Ireland", features, aliases={})["geometry"]["id"] == "ni"


def test_alias_is_tried_before_raw_name():
    features = [_feature("Czech Republic Old", geometry="old"), _feature("Czechia", geometry="cz")]
    match = find_feature("Czech Republic", features, aliases={"Czech Republic": "Czechia"})
    assert match["geometry"]["id"] == "cz"


def test_unmatched_records_are_dropped():
    records = [CountryRecord(name="Kosovo"), CountryRecord(name="Malta", metric=3.0)]
    collection = {"type": "FeatureCollection", "features": [_feature("Malta")]}
    joined = join_geometry(records, collection, aliases={})
    assert [f["properties"]["name"] for f in joined] == ["Malta"]


def test_feature_without_geometry_is_dropped():
    feature = {"properties": {"admin": "Malta"}, "geometry": None}
    assert join_geometry([CountryRecord(name="Malta")], [feature], aliases={}) == []


def test_record_extras_travel_into_properties():
    record = CountryRecord(name="Malta", metric=3.0, ISO="MT")
    joined = join_geometry([record], [_feature("Malta")], aliases={})
    assert joined[0]["properties"]["ISO"] == "MT"
    assert joined[0]["properties"]["metric"] == 3.0
