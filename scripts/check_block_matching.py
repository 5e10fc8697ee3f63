#!/usr/bin/env python3
"""
Block matching analysis.

Lists every block named in the complaint dataset, whether it has a
boundary polygon, and the closest boundary name for the ones that do not.

Usage:
    python scripts/check_block_matching.py [complaints.csv] [blocks.geojson]
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from grievance_map.config import DashboardConfig
from grievance_map.data_loading import load_grievances
from grievance_map.geo_utils import (
    build_block_lookup,
    extract_block_features,
    find_unmatched_blocks,
    load_blocks_geojson,
    normalize_block_name,
)


def main() -> int:
    config = DashboardConfig.from_env()
    complaints_path = Path(sys.argv[1]) if len(sys.argv) > 1 else config.complaints_path
    blocks_path = Path(sys.argv[2]) if len(sys.argv) > 2 else config.blocks_path

    records = load_grievances(complaints_path)
    features = extract_block_features(load_blocks_geojson(blocks_path))
    block_lookup = build_block_lookup(features, config.block_name_property)

    data_blocks = sorted({r.block for r in records if normalize_block_name(r.block)})

    print("=" * 70)
    print("Block Matching Analysis")
    print("=" * 70)
    print(f"\nComplaint blocks: {len(data_blocks)}")
    print(f"GeoJSON blocks: {len(block_lookup)}\n")

    for block in data_blocks:
        key = normalize_block_name(block)
        if key in block_lookup:
            print(f"✓ '{block}' → '{key}'")
        else:
            print(f"✗ '{block}' (normalized: '{key}') - NO MATCH")

    unmatched = find_unmatched_blocks(records, features, config.block_name_property)
    print(f"\n\nMatched: {len(data_blocks) - len(unmatched)}/{len(data_blocks)}")
    print(f"Unmatched: {len(unmatched)}")

    for entry in unmatched:
        print(f"  - {entry['block']} ({entry['complaints']} complaints)")
        if entry['suggestion']:
            print(f"    Similar in GeoJSON: {entry['suggestion']} (score {entry['score']:.0f})")

    return 0 if not unmatched else 1


if __name__ == "__main__":
    sys.exit(main())
