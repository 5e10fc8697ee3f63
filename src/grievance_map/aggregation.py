"""
Aggregation module for block-level complaint statistics.

Merges citizen grievance records with block boundary features into one
table keyed by normalized block name. Every block that appears in either
input gets exactly one RegionStats entry; blocks with a polygon but no
complaints are kept with a total of zero so that the whole district is
always represented.
"""

import logging
import unicodedata
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .config import BLOCK_NAME_PROP
from .geo_utils import coerce_feature_list, feature_block_name, normalize_block_name
from .models import GrievanceRecord, RegionStats
from .severity import Severity, classify_severity

# Configure logging
logger = logging.getLogger(__name__)


class _BlockEntry:
    """Mutable accumulator used while a pass is running."""

    __slots__ = ('key', 'label', 'records')

    def __init__(self, key: str, label: str):
        self.key = key
        self.label = label
        self.records: List[GrievanceRecord] = []

    def freeze(self) -> RegionStats:
        return RegionStats(key=self.key, label=self.label, records=tuple(self.records))


def _label_sort_key(label: str) -> Tuple[str, str]:
    # Case-insensitive first; on case-only ties lowercase sorts first
    return (unicodedata.normalize('NFKD', label).casefold(), label.swapcase())


def sort_block_stats(stats: Iterable[RegionStats]) -> List[RegionStats]:
    """
    Rank blocks: most complaints first, then alphabetically by label.

    Example:
        totals [1, 5, 5] with labels ["Zeta", "Alpha", "Beta"]
        -> Alpha (5), Beta (5), Zeta (1)
    """
    return sorted(stats, key=lambda s: (-s.total, _label_sort_key(s.label)))


def aggregate_blocks(
    records: Sequence[GrievanceRecord],
    features: Any,
    name_property: str = BLOCK_NAME_PROP
) -> List[RegionStats]:
    """
    Build per-block complaint statistics from complaints and boundaries.

    Aggregation strategy (order matters):
    1. Complaints, in input order: each record is appended to the entry for
       its normalized block name. A new entry takes the complaint's raw
       block name as its label.
    2. Boundary features, in input order: a block with no complaints gets a
       new entry with total 0. A block that already has complaints takes
       the feature's raw name as its label, since the boundary dataset's
       naming is authoritative.
    3. Sort by total descending, then label ascending.

    Records or features with an empty name are skipped. A malformed feature
    collection is treated as empty.

    Args:
        records: Grievance records
        features: BoundaryFeature objects or GeoJSON feature dicts
        name_property: Feature property holding the block name

    Returns:
        List[RegionStats]: One entry per distinct block key, ranked

    Example:
        >>> stats = aggregate_blocks(records, extract_block_features(geojson))
        >>> [(s.label, s.total) for s in stats]
        [('Kamakhyanagar', 3), ('Hindol', 0)]
    """
    table: Dict[str, _BlockEntry] = {}

    # Pass 1: complaints
    skipped_records = 0
    for record in records:
        key = normalize_block_name(record.block)
        if not key:
            skipped_records += 1
            continue

        entry = table.get(key)
        if entry is None:
            entry = _BlockEntry(key, record.block)
            table[key] = entry
        entry.records.append(record)

    # Pass 2: boundary features
    feature_list = coerce_feature_list(features)
    skipped_features = 0
    relabelled = 0
    for feature in feature_list:
        raw_name = feature_block_name(feature, name_property)
        key = normalize_block_name(raw_name)
        if not key:
            skipped_features += 1
            continue

        entry = table.get(key)
        if entry is None:
            table[key] = _BlockEntry(key, raw_name)
        elif raw_name:
            if entry.label != raw_name:
                relabelled += 1
            entry.label = raw_name

    if skipped_records:
        logger.debug(f"Skipped {skipped_records} complaints with no block name")
    if skipped_features:
        logger.debug(f"Skipped {skipped_features} boundary features with no '{name_property}'")

    stats = sort_block_stats(entry.freeze() for entry in table.values())

    logger.info(
        f"Aggregated {len(records)} complaints and {len(feature_list)} boundary features "
        f"into {len(stats)} blocks ({relabelled} labels taken from boundaries)"
    )

    return stats


def build_stats_lookup(stats: Iterable[RegionStats]) -> Dict[str, RegionStats]:
    """Index aggregated stats by block key."""
    return {s.key: s for s in stats}


def summarize_blocks(
    records: Sequence[GrievanceRecord],
    stats: Sequence[RegionStats],
    thresholds: Optional[Dict[str, int]] = None
) -> Dict[str, Any]:
    """
    Headline counters for the dashboard.

    Args:
        records: Grievance records that were aggregated
        stats: Output of aggregate_blocks
        thresholds: Severity thresholds (default: DEFAULT_SEVERITY_THRESHOLDS)

    Returns:
        dict with:
        - total_complaints: number of input records
        - total_blocks: number of aggregated blocks
        - mapped_complaints: complaints attached to a block
        - blocks_without_complaints: blocks with a total of zero
        - severity_counts: blocks per severity value
    """
    severity_counts = {severity.value: 0 for severity in Severity}
    for s in stats:
        severity_counts[classify_severity(s.total, thresholds).value] += 1

    return {
        'total_complaints': len(records),
        'total_blocks': len(stats),
        'mapped_complaints': sum(s.total for s in stats),
        'blocks_without_complaints': sum(1 for s in stats if s.total == 0),
        'severity_counts': severity_counts,
    }


def stats_to_frame(
    stats: Sequence[RegionStats],
    thresholds: Optional[Dict[str, int]] = None
) -> pd.DataFrame:
    """
    Ranked block table as a DataFrame.

    Columns: rank, key, label, total, severity. Row order follows the
    input order, which for aggregate_blocks output is the ranking.
    """
    columns = ['rank', 'key', 'label', 'total', 'severity']
    if not stats:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame({
        'rank': range(1, len(stats) + 1),
        'key': [s.key for s in stats],
        'label': [s.label for s in stats],
        'total': [s.total for s in stats],
        'severity': [classify_severity(s.total, thresholds).value for s in stats],
    })
    return df[columns]
