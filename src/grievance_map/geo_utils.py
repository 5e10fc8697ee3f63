"""
Geospatial utilities for block-level grievance mapping.

Handles:
- Block name normalization (the join key between complaints and polygons)
- Boundary GeoJSON loading and feature extraction
- Block lookup and unmatched-block diagnostics
- Map center estimation from complaint coordinates
"""

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from rapidfuzz import fuzz, process

from .config import BLOCK_NAME_PROP, DEFAULT_MAP_CENTER
from .models import BoundaryFeature, GrievanceRecord

logger = logging.getLogger(__name__)

FeatureLike = Union[BoundaryFeature, Mapping]


def normalize_block_name(name: Any) -> str:
    """
    Normalize a block name for matching.

    Rules:
    1. Non-string or missing input becomes ""
    2. Strip surrounding whitespace
    3. Convert to lowercase

    An empty result means the name is invalid and the item must be skipped.

    Args:
        name: Raw block name

    Returns:
        Normalized block key

    Example:
        >>> normalize_block_name("  Kamakhyanagar ")
        'kamakhyanagar'
    """
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


def feature_block_name(feature: FeatureLike, name_property: str = BLOCK_NAME_PROP) -> Optional[Any]:
    """
    Read the raw block name from a feature.

    Accepts BoundaryFeature objects as well as plain GeoJSON feature dicts.
    """
    if isinstance(feature, BoundaryFeature):
        return feature.name(name_property)
    if isinstance(feature, Mapping):
        props = feature.get('properties') or {}
        if isinstance(props, Mapping):
            return props.get(name_property)
    return None


def coerce_feature_list(features: Any) -> List[FeatureLike]:
    """
    Turn a feature collection into a list, treating malformed input as empty.

    Strings, mappings and other non-sequences are not feature collections.
    """
    if features is None:
        logger.warning("Boundary features missing, continuing with complaints only")
        return []
    if isinstance(features, (str, bytes, Mapping)) or not isinstance(features, Sequence):
        logger.warning(
            f"Boundary features are not a sequence ({type(features).__name__}), "
            f"continuing with complaints only"
        )
        return []
    return list(features)


def extract_block_features(geojson: Any) -> List[BoundaryFeature]:
    """
    Extract BoundaryFeature objects from a GeoJSON FeatureCollection.

    A missing or malformed 'features' member yields an empty list. Entries
    that are not feature objects are skipped.

    Args:
        geojson: Parsed GeoJSON dict

    Returns:
        List of BoundaryFeature in file order
    """
    if not isinstance(geojson, Mapping):
        logger.warning(f"Boundary GeoJSON is not an object ({type(geojson).__name__})")
        return []

    raw_features = coerce_feature_list(geojson.get('features'))

    features = []
    skipped = 0
    for raw in raw_features:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        props = raw.get('properties')
        features.append(BoundaryFeature(
            properties=dict(props) if isinstance(props, Mapping) else {},
            geometry=raw.get('geometry'),
        ))

    if skipped:
        logger.warning(f"Skipped {skipped} malformed entries in boundary GeoJSON")

    logger.info(f"Extracted {len(features)} block features from GeoJSON")
    return features


def load_blocks_geojson(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load the block boundary GeoJSON from disk.

    Args:
        path: Path to a .geojson / .json file

    Returns:
        Parsed GeoJSON dict

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
    """
    geojson_file = Path(path)

    if not geojson_file.exists():
        logger.error(f"Boundary GeoJSON not found: {geojson_file}")
        raise FileNotFoundError(f"File does not exist: {geojson_file}")

    try:
        with open(geojson_file, 'r', encoding='utf-8') as f:
            geojson = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {geojson_file}: {e}")
        raise ValueError(f"Invalid GeoJSON file {geojson_file}: {e}") from e

    feature_count = len(geojson.get('features') or []) if isinstance(geojson, dict) else 0
    logger.info(f"✓ Loaded boundary GeoJSON with {feature_count} features from {geojson_file}")
    return geojson


def build_block_lookup(
    features: Any,
    name_property: str = BLOCK_NAME_PROP
) -> Dict[str, FeatureLike]:
    """
    Build a lookup from normalized block name to feature.

    Features with an empty name are skipped. When two features share a key
    the first one wins.

    Args:
        features: Sequence of BoundaryFeature or GeoJSON feature dicts
        name_property: Property holding the block name

    Returns:
        Dict mapping block key -> feature
    """
    block_lookup = {}

    for feature in coerce_feature_list(features):
        key = normalize_block_name(feature_block_name(feature, name_property))
        if not key:
            continue
        if key in block_lookup:
            logger.warning(f"Duplicate boundary feature for block '{key}', keeping the first")
            continue
        block_lookup[key] = feature

    logger.debug(f"Built lookup for {len(block_lookup)} blocks from GeoJSON")
    return block_lookup


def suggest_block_match(
    key: str,
    candidates: List[str],
    score_cutoff: float = 80.0
) -> Optional[Tuple[str, float]]:
    """
    Find the closest boundary key for an unmatched complaint block.

    This is a diagnostic hint only; it never changes how blocks are joined.

    Returns:
        (candidate, score) or None if nothing scores above score_cutoff
    """
    if not key or not candidates:
        return None

    match = process.extractOne(key, candidates, scorer=fuzz.ratio, score_cutoff=score_cutoff)
    if match is None:
        return None

    candidate, score, _ = match
    return candidate, float(score)


def find_unmatched_blocks(
    records: List[GrievanceRecord],
    features: Any,
    name_property: str = BLOCK_NAME_PROP,
    score_cutoff: float = 80.0
) -> List[Dict[str, Any]]:
    """
    Find complaint blocks that have no boundary polygon.

    Complaints for such blocks still appear in the aggregated table, but they
    cannot be drawn on the map. Typical causes are spelling variants
    ("Kamakhya Nagar" vs "Kamakhyanagar").

    Args:
        records: Grievance records
        features: Boundary features
        name_property: Property holding the block name
        score_cutoff: Minimum rapidfuzz ratio for a suggestion

    Returns:
        List of dicts with 'block', 'key', 'complaints', 'suggestion', 'score',
        in order of first appearance
    """
    block_lookup = build_block_lookup(features, name_property)
    known_keys = list(block_lookup.keys())

    unmatched: Dict[str, Dict[str, Any]] = {}
    for record in records:
        key = normalize_block_name(record.block)
        if not key or key in block_lookup:
            continue
        if key not in unmatched:
            unmatched[key] = {'block': record.block, 'key': key, 'complaints': 0}
        unmatched[key]['complaints'] += 1

    for entry in unmatched.values():
        suggestion = suggest_block_match(entry['key'], known_keys, score_cutoff)
        entry['suggestion'] = suggestion[0] if suggestion else None
        entry['score'] = suggestion[1] if suggestion else None

        if suggestion:
            logger.warning(
                f"✗ No polygon for block '{entry['block']}' "
                f"({entry['complaints']} complaints) - closest: '{suggestion[0]}' ({suggestion[1]:.0f})"
            )
        else:
            logger.warning(
                f"✗ No polygon for block '{entry['block']}' ({entry['complaints']} complaints)"
            )

    return list(unmatched.values())


def compute_map_center(
    records: List[GrievanceRecord],
    fallback: Optional[Tuple[float, float]] = None
) -> Tuple[float, float]:
    """
    Estimate a map center as the mean complaint coordinate.

    Latitude and longitude are averaged independently with no projection
    correction; the result only frames the initial view.

    Args:
        records: Grievance records
        fallback: Center used when there are no records
            (default: DEFAULT_MAP_CENTER)

    Returns:
        (lat, lng)
    """
    if not records:
        center = fallback if fallback is not None else DEFAULT_MAP_CENTER
        return (float(center[0]), float(center[1]))

    coords = np.array([(r.lat, r.lng) for r in records], dtype=float)
    lat, lng = coords.mean(axis=0)
    return (float(lat), float(lng))
