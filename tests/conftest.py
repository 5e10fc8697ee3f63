import pytest

from grievance_map.models import BoundaryFeature, GrievanceRecord


def make_record(record_id, block, lat=20.5, lng=85.5, grievance="Hand pump not working"):
    return GrievanceRecord(id=record_id, block=block, grievance=grievance, lat=lat, lng=lng)


def make_feature(name, prop="block_name", geometry=None):
    if geometry is None:
        geometry = {
            'type': 'Polygon',
            'coordinates': [[[85.0, 20.0], [85.1, 20.0], [85.1, 20.1], [85.0, 20.1], [85.0, 20.0]]],
        }
    return BoundaryFeature(properties={prop: name}, geometry=geometry)


@pytest.fixture
def kamakhyanagar_scenario():
    records = [
        make_record(1, "Kamakhyanagar", 20.93, 85.54),
        make_record(2, "kamakhyanagar", 20.92, 85.53),
        make_record(3, " KAMAKHYANAGAR ", 20.94, 85.55),
    ]
    features = [make_feature("Kamakhyanagar"), make_feature("Hindol")]
    return records, features
