"""
Grievance Report Script

Loads the complaint dataset and block boundaries, aggregates complaints per
block and logs a ranked summary.

Stages:
1. Load grievances (CSV/JSON) and boundary GeoJSON
2. Aggregate per block
3. Report headline counters, ranking and unmatched blocks
4. Optionally show the complaint details of one block

Usage:
    grievance-report
    grievance-report --complaints data/complaints.csv --blocks data/dhenkanal_blocks.geojson
    grievance-report --block hindol
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .aggregation import aggregate_blocks, build_stats_lookup, stats_to_frame, summarize_blocks
from .config import DashboardConfig
from .data_loading import load_grievances
from .geo_utils import (
    compute_map_center,
    extract_block_features,
    find_unmatched_blocks,
    load_blocks_geojson,
    normalize_block_name,
)
from .presentation import build_block_detail, legend_entries
from .selection import SelectionController

logger = logging.getLogger(__name__)


def _block_key(value: str) -> str:
    key = normalize_block_name(value)
    if not key:
        raise argparse.ArgumentTypeError("block name must not be blank")
    return key


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='grievance-report',
        description="Summarize grievances per block.",
    )
    parser.add_argument('--complaints', type=Path, help="Grievance CSV/JSON file")
    parser.add_argument('--blocks', type=Path, help="Block boundary GeoJSON file")
    parser.add_argument('--block', type=_block_key, help="Show complaint details for this block")
    parser.add_argument('--verbose', action='store_true', help="Enable debug logging")
    return parser.parse_args(argv)


def log_block_detail(controller: SelectionController, lookup, config: DashboardConfig) -> None:
    detail = build_block_detail(controller, lookup, config)
    if detail is None:
        logger.warning(f"No detail available for block '{controller.selected_key}'")
        return

    logger.info("=" * 80)
    logger.info(detail.title)
    logger.info("=" * 80)
    logger.info(f"Total complaints: {detail.total} ({detail.severity.display_name})")

    if not detail.has_complaints:
        logger.info(detail.empty_message)
    for card in detail.complaints:
        logger.info(f"  {card.complaint_id} [{card.status}] {card.issue} ({card.lat}, {card.lng})")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the report.

    Returns:
        int: Exit code (0 = success, 1 = failure, 130 = interrupted)
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    try:
        config = DashboardConfig.from_env()
        complaints_path = args.complaints or config.complaints_path
        blocks_path = args.blocks or config.blocks_path

        logger.info("=" * 80)
        logger.info("GRIEVANCE REPORT")
        logger.info("=" * 80)

        records = load_grievances(complaints_path)
        features = extract_block_features(load_blocks_geojson(blocks_path))

        stats = aggregate_blocks(records, features, config.block_name_property)
        summary = summarize_blocks(records, stats, config.severity_thresholds)
        center = compute_map_center(records, config.map_center)

        logger.info(f"Total complaints: {summary['total_complaints']}")
        logger.info(f"Blocks: {summary['total_blocks']}")
        logger.info(f"Blocks without complaints: {summary['blocks_without_complaints']}")
        logger.info(f"Map center: ({center[0]:.4f}, {center[1]:.4f})")

        for severity, label in legend_entries(config.severity_thresholds):
            logger.info(f"  {label}: {summary['severity_counts'][severity]} blocks")

        logger.info("\nComplaints by block:\n" + stats_to_frame(stats, config.severity_thresholds).to_string(index=False))

        unmatched = find_unmatched_blocks(records, features, config.block_name_property)
        if unmatched:
            logger.warning(f"{len(unmatched)} complaint block(s) have no boundary polygon")

        if args.block:
            controller = SelectionController()
            controller.select(args.block)
            log_block_detail(controller, build_stats_lookup(stats), config)

        return 0

    except KeyboardInterrupt:
        logger.warning("Report interrupted by user (Ctrl+C)")
        return 130

    except Exception as e:
        logger.error(f"❌ REPORT FAILED: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
