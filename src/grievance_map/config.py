"""
Configuration for the grievance map.

All tunable values live here so that callers never hard-code a threshold,
a GeoJSON property name or a map center. Module-level constants hold the
defaults; DashboardConfig bundles them and can be overridden from the
environment.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# Severity tiers (inclusive upper bounds)
DEFAULT_SEVERITY_THRESHOLDS = {
    'low_max': 3,       # 0-3: Low
    'medium_max': 5,    # 4-5: Medium
                        # 6+:  High
}

# Property in the boundary GeoJSON that holds the block name
BLOCK_NAME_PROP = "block_name"

# Fallback map center (Dhenkanal district) used when there are no complaints
DEFAULT_MAP_CENTER = (20.65, 85.6)
DEFAULT_MAP_ZOOM = 9

DEFAULT_COMPLAINTS_PATH = DATA_DIR / "complaints.csv"
DEFAULT_BLOCKS_PATH = DATA_DIR / "dhenkanal_blocks.geojson"

ENV_PREFIX = "GRIEVANCE_"


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def _parse_center(name: str, value: str) -> Tuple[float, float]:
    parts = [p.strip() for p in value.split(',')]
    if len(parts) != 2:
        raise ValueError(f"{name} must look like 'lat,lng', got {value!r}")
    return (_parse_float(name, parts[0]), _parse_float(name, parts[1]))


@dataclass(frozen=True)
class DashboardConfig:
    """
    Runtime settings for aggregation, classification and display.

    Attributes:
        low_max: Highest complaint count still classified as Low
        medium_max: Highest complaint count still classified as Medium
        block_name_property: GeoJSON property holding the block name
        map_center: (lat, lng) used when there are no complaint coordinates
        map_zoom: Initial zoom level of the map
        complaints_path: Default grievance dataset file
        blocks_path: Default boundary GeoJSON file
    """
    low_max: int = DEFAULT_SEVERITY_THRESHOLDS['low_max']
    medium_max: int = DEFAULT_SEVERITY_THRESHOLDS['medium_max']
    block_name_property: str = BLOCK_NAME_PROP
    map_center: Tuple[float, float] = DEFAULT_MAP_CENTER
    map_zoom: float = DEFAULT_MAP_ZOOM
    complaints_path: Path = field(default=DEFAULT_COMPLAINTS_PATH)
    blocks_path: Path = field(default=DEFAULT_BLOCKS_PATH)

    def __post_init__(self):
        # Imported here: severity imports this module for its defaults
        from .severity import validate_thresholds
        validate_thresholds(self.severity_thresholds)

        if not self.block_name_property:
            raise ValueError("block_name_property must not be empty")

    @property
    def severity_thresholds(self) -> Dict[str, int]:
        return {'low_max': self.low_max, 'medium_max': self.medium_max}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DashboardConfig":
        """
        Build a config from GRIEVANCE_* environment variables.

        Unset or empty variables keep their defaults.

        Raises:
            ValueError: If a variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        overrides = {}

        def get(suffix: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + suffix)
            return value.strip() if value and value.strip() else None

        if get('LOW_MAX') is not None:
            overrides['low_max'] = _parse_int(ENV_PREFIX + 'LOW_MAX', get('LOW_MAX'))
        if get('MEDIUM_MAX') is not None:
            overrides['medium_max'] = _parse_int(ENV_PREFIX + 'MEDIUM_MAX', get('MEDIUM_MAX'))
        if get('BLOCK_NAME_PROP') is not None:
            overrides['block_name_property'] = get('BLOCK_NAME_PROP')
        if get('MAP_CENTER') is not None:
            overrides['map_center'] = _parse_center(ENV_PREFIX + 'MAP_CENTER', get('MAP_CENTER'))
        if get('MAP_ZOOM') is not None:
            overrides['map_zoom'] = _parse_float(ENV_PREFIX + 'MAP_ZOOM', get('MAP_ZOOM'))
        if get('COMPLAINTS_PATH') is not None:
            overrides['complaints_path'] = Path(get('COMPLAINTS_PATH'))
        if get('BLOCKS_PATH') is not None:
            overrides['blocks_path'] = Path(get('BLOCKS_PATH'))

        if overrides:
            logger.info(f"Config overrides from environment: {sorted(overrides)}")

        return cls(**overrides)
