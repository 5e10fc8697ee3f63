from pathlib import Path

import pytest

from grievance_map.config import BLOCK_NAME_PROP, DEFAULT_MAP_CENTER, DashboardConfig


def test_defaults():
    config = DashboardConfig()

    assert config.severity_thresholds == {'low_max': 3, 'medium_max': 5}
    assert config.block_name_property == BLOCK_NAME_PROP == "block_name"
    assert config.map_center == DEFAULT_MAP_CENTER


def test_from_env_overrides():
    config = DashboardConfig.from_env({
        'GRIEVANCE_LOW_MAX': '2',
        'GRIEVANCE_MEDIUM_MAX': ' 8 ',
        'GRIEVANCE_BLOCK_NAME_PROP': 'BLOCK',
        'GRIEVANCE_MAP_CENTER': '20.1, 85.2',
        'GRIEVANCE_MAP_ZOOM': '10',
        'GRIEVANCE_COMPLAINTS_PATH': '/tmp/c.csv',
        'GRIEVANCE_BLOCKS_PATH': '',
    })

    assert config.severity_thresholds == {'low_max': 2, 'medium_max': 8}
    assert config.block_name_property == 'BLOCK'
    assert config.map_center == (20.1, 85.2)
    assert config.map_zoom == 10.0
    assert config.complaints_path == Path('/tmp/c.csv')
    assert config.blocks_path == DashboardConfig().blocks_path


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv('GRIEVANCE_LOW_MAX', '1')

    assert DashboardConfig.from_env().low_max == 1


@pytest.mark.parametrize("env", [
    {'GRIEVANCE_LOW_MAX': 'three'},
    {'GRIEVANCE_MAP_CENTER': '20.1'},
    {'GRIEVANCE_MAP_CENTER': 'a,b'},
    {'GRIEVANCE_LOW_MAX': '6'},
])
def test_from_env_invalid(env):
    with pytest.raises(ValueError):
        DashboardConfig.from_env(env)


def test_invalid_thresholds_rejected():
    with pytest.raises(ValueError):
        DashboardConfig(low_max=5, medium_max=5)


def test_empty_name_property_rejected():
    with pytest.raises(ValueError):
        DashboardConfig(block_name_property="")
