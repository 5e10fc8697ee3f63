import pytest

from grievance_map.severity import Severity, classify_severity, validate_thresholds


@pytest.mark.parametrize("total, expected", [
    (0, Severity.LOW),
    (3, Severity.LOW),
    (4, Severity.MEDIUM),
    (5, Severity.MEDIUM),
    (6, Severity.HIGH),
    (250, Severity.HIGH),
])
def test_default_tiers(total, expected):
    assert classify_severity(total) is expected


def test_tiers_have_no_gap_or_overlap():
    tiers = [classify_severity(n) for n in range(0, 50)]

    assert tiers[:4] == [Severity.LOW] * 4
    assert tiers[4:6] == [Severity.MEDIUM] * 2
    assert tiers[6:] == [Severity.HIGH] * 44


def test_custom_thresholds():
    thresholds = {'low_max': 1, 'medium_max': 10}

    assert classify_severity(1, thresholds) is Severity.LOW
    assert classify_severity(2, thresholds) is Severity.MEDIUM
    assert classify_severity(10, thresholds) is Severity.MEDIUM
    assert classify_severity(11, thresholds) is Severity.HIGH


def test_severity_is_a_string_value():
    assert Severity.MEDIUM == 'medium'
    assert Severity.HIGH.display_name == 'High'


@pytest.mark.parametrize("bad_total", [-1, 2.5, "3", None, True])
def test_invalid_totals_fail_loudly(bad_total):
    with pytest.raises(ValueError):
        classify_severity(bad_total)


@pytest.mark.parametrize("thresholds", [
    {'low_max': 5, 'medium_max': 5},
    {'low_max': 6, 'medium_max': 5},
    {'low_max': -1, 'medium_max': 5},
    {'low_max': 3},
    {'low_max': 3.0, 'medium_max': 5},
])
def test_invalid_thresholds(thresholds):
    with pytest.raises(ValueError):
        validate_thresholds(thresholds)
