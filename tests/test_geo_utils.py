import json

import pytest

from conftest import make_feature, make_record
from grievance_map.config import DEFAULT_MAP_CENTER
from grievance_map.geo_utils import (
    build_block_lookup,
    compute_map_center,
    extract_block_features,
    find_unmatched_blocks,
    load_blocks_geojson,
    normalize_block_name,
    suggest_block_match,
)
from grievance_map.models import BoundaryFeature


def test_normalize_block_name():
    assert normalize_block_name(" Foo ") == normalize_block_name("foo") == "foo"
    assert normalize_block_name("Dhenkanal Sadar") == "dhenkanal sadar"


@pytest.mark.parametrize("name", ["", None, "   ", "\t\n", float('nan'), 12])
def test_normalize_invalid_names(name):
    assert normalize_block_name(name) == ""


def test_extract_block_features():
    geojson = {
        'type': 'FeatureCollection',
        'features': [
            {'type': 'Feature', 'properties': {'block_name': 'Hindol'}, 'geometry': {'type': 'Polygon', 'coordinates': []}},
            {'type': 'Feature', 'properties': None, 'geometry': None},
            "garbage",
        ],
    }

    features = extract_block_features(geojson)

    assert len(features) == 2
    assert features[0] == BoundaryFeature(
        properties={'block_name': 'Hindol'},
        geometry={'type': 'Polygon', 'coordinates': []},
    )
    assert features[1].properties == {}


@pytest.mark.parametrize("geojson", [
    None,
    [],
    {},
    {'features': None},
    {'features': "Hindol"},
    {'features': {'block_name': 'Hindol'}},
])
def test_extract_from_malformed_geojson(geojson):
    assert extract_block_features(geojson) == []


def test_load_blocks_geojson(tmp_path):
    path = tmp_path / "blocks.geojson"
    path.write_text(json.dumps({'type': 'FeatureCollection', 'features': []}), encoding='utf-8')

    assert load_blocks_geojson(path) == {'type': 'FeatureCollection', 'features': []}


def test_load_blocks_geojson_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_blocks_geojson(tmp_path / "missing.geojson")

    bad = tmp_path / "bad.geojson"
    bad.write_text("{not json", encoding='utf-8')
    with pytest.raises(ValueError):
        load_blocks_geojson(bad)


def test_build_block_lookup_keeps_first_duplicate():
    first = make_feature("Hindol")
    second = make_feature(" HINDOL ")

    lookup = build_block_lookup([first, second, make_feature("")])

    assert list(lookup) == ["hindol"]
    assert lookup["hindol"] is first


def test_suggest_block_match():
    assert suggest_block_match("kamakhya nagar", ["kamakhyanagar", "hindol"]) == (
        "kamakhyanagar", pytest.approx(96.3, abs=0.1)
    )
    assert suggest_block_match("xyz", ["kamakhyanagar", "hindol"]) is None
    assert suggest_block_match("hindol", []) is None


def test_find_unmatched_blocks():
    records = [
        make_record(1, "Kamakhya Nagar"),
        make_record(2, "kamakhya nagar"),
        make_record(3, "Hindol"),
        make_record(4, "Atlantis"),
        make_record(5, None),
    ]
    features = [make_feature("Kamakhyanagar"), make_feature("Hindol")]

    unmatched = find_unmatched_blocks(records, features)

    assert [(u['block'], u['complaints'], u['suggestion']) for u in unmatched] == [
        ("Kamakhya Nagar", 2, "kamakhyanagar"),
        ("Atlantis", 1, None),
    ]


def test_map_center_is_mean_coordinate():
    records = [make_record(1, "A", 20.0, 85.0), make_record(2, "B", 21.0, 86.0)]

    assert compute_map_center(records) == pytest.approx((20.5, 85.5))


def test_map_center_fallback():
    assert compute_map_center([]) == DEFAULT_MAP_CENTER
    assert compute_map_center([], fallback=(19.0, 84.0)) == (19.0, 84.0)
