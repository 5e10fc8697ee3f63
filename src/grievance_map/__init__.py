"""
Grievance map for Dhenkanal district.

Reconciles citizen grievance records with block boundary polygons into a
ranked per-block statistics table and drives block selection for the
dashboard.
"""

from .config import DashboardConfig
from .models import BoundaryFeature, GrievanceRecord, RegionStats, SelectionState
from .geo_utils import (
    compute_map_center,
    extract_block_features,
    find_unmatched_blocks,
    load_blocks_geojson,
    normalize_block_name,
)
from .severity import Severity, classify_severity
from .aggregation import aggregate_blocks, build_stats_lookup, stats_to_frame, summarize_blocks
from .selection import SelectionController, apply_map_click
from .data_loading import load_grievances

__all__ = [
    'DashboardConfig',
    'BoundaryFeature',
    'GrievanceRecord',
    'RegionStats',
    'SelectionState',
    'compute_map_center',
    'extract_block_features',
    'find_unmatched_blocks',
    'load_blocks_geojson',
    'normalize_block_name',
    'Severity',
    'classify_severity',
    'aggregate_blocks',
    'build_stats_lookup',
    'stats_to_frame',
    'summarize_blocks',
    'SelectionController',
    'apply_map_click',
    'load_grievances',
]
