"""
Dhenkanal Grievance Dashboard

Streamlit front end for the block-level grievance map:
- Sidebar: headline counters and the ranked list of blocks
- Main: severity legend and interactive block choropleth
- Detail panel for the selected block

Design Principles:
- All statistics come from grievance_map; this file only lays them out
- Inputs are cached; aggregation is rebuilt whenever they change
- The selection lives in session state and holds only a block key
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grievance_map.aggregation import aggregate_blocks, build_stats_lookup, summarize_blocks
from grievance_map.config import DashboardConfig
from grievance_map.data_loading import load_grievances, records_to_frame
from grievance_map.geo_utils import (
    compute_map_center,
    extract_block_features,
    find_unmatched_blocks,
    load_blocks_geojson,
)
from grievance_map.models import BoundaryFeature, GrievanceRecord, RegionStats
from grievance_map.presentation import (
    SEVERITY_COLORS,
    build_block_detail,
    build_block_map,
    legend_entries,
)
from grievance_map.selection import SelectionController, apply_map_click
from grievance_map.severity import classify_severity

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SELECTION_KEY = 'block_selection'


# ============================================================================
# Data Loading Functions
# ============================================================================

@st.cache_data(ttl=300)
def load_grievances_cached(path: str) -> Optional[List[GrievanceRecord]]:
    """
    Load grievance records from disk.

    Returns:
        List of records or None if loading failed
    """
    try:
        return load_grievances(path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Error loading grievances: {e}")
        return None


@st.cache_data(ttl=3600, show_spinner="Loading block boundaries...")
def load_block_features_cached(path: str) -> List[BoundaryFeature]:
    """
    Load block boundary features from disk.

    A missing or invalid file yields no features; the dashboard then shows
    complaint blocks without polygons.
    """
    try:
        return extract_block_features(load_blocks_geojson(path))
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Error loading block boundaries: {e}")
        return []


def get_selection() -> SelectionController:
    if SELECTION_KEY not in st.session_state:
        st.session_state[SELECTION_KEY] = SelectionController()
    return st.session_state[SELECTION_KEY]


def selected_key_from_event(event: Any) -> Optional[str]:
    """Block key of the first clicked polygon in a plotly selection event."""
    try:
        points = event.selection.points
    except AttributeError:
        return None

    for point in points or []:
        customdata = point.get('customdata')
        if customdata and customdata[0]:
            return customdata[0]
    return None


# ============================================================================
# Page Sections
# ============================================================================

def render_sidebar(
    stats: List[RegionStats],
    summary: Dict[str, Any],
    config: DashboardConfig,
    selection: SelectionController
) -> None:
    st.sidebar.title("Dhenkanal District")
    st.sidebar.markdown("**Grievance Dashboard**")

    col1, col2 = st.sidebar.columns(2)
    with col1:
        st.metric("Total Complaints", summary['total_complaints'])
    with col2:
        st.metric("Blocks", summary['total_blocks'])

    st.sidebar.markdown("---")
    st.sidebar.subheader("Complaints by Block")

    for block in stats:
        severity = classify_severity(block.total, config.severity_thresholds)
        marker = {'low': '🟢', 'medium': '🟠', 'high': '🔴'}[severity.value]
        if st.sidebar.button(
            f"{marker} {block.label} · {block.total}",
            key=f"block_pill_{block.key}",
            width="stretch",
        ):
            selection.select(block.key)


def render_legend(config: DashboardConfig) -> None:
    items = []
    for severity, label in legend_entries(config.severity_thresholds):
        color = SEVERITY_COLORS[severity]
        items.append(
            f"<span style='margin-right:16px'>"
            f"<span style='display:inline-block;width:10px;height:10px;border-radius:50%;"
            f"background:{color};margin-right:6px'></span>{label}</span>"
        )
    st.markdown("".join(items), unsafe_allow_html=True)


def render_map(
    stats: List[RegionStats],
    features: List[BoundaryFeature],
    config: DashboardConfig,
    center: Tuple[float, float],
    selection: SelectionController
) -> None:
    fig = build_block_map(stats, features, config, center)

    if fig is None:
        st.warning("No block boundaries available to draw.")
        return

    event = st.plotly_chart(
        fig,
        width="stretch",
        config={'displayModeBar': False},
        on_select='rerun',
        selection_mode='points',
        key='block_map',
    )

    st.session_state['last_clicked_block'] = apply_map_click(
        selection,
        selected_key_from_event(event),
        st.session_state.get('last_clicked_block'),
    )


def render_block_detail(
    lookup: Dict[str, RegionStats],
    config: DashboardConfig,
    selection: SelectionController
) -> None:
    if not selection.is_selected:
        return

    detail = build_block_detail(selection, lookup, config)

    with st.container(border=True):
        if detail is None:
            st.info("No detail available for the selected block.")
        else:
            st.subheader(detail.title)
            st.metric("Total Complaints", detail.total)

            st.markdown("#### Recent Complaints")
            if not detail.has_complaints:
                st.caption(detail.empty_message)

            for card in detail.complaints:
                st.markdown(
                    f"**{card.complaint_id}** · `{card.status}`  \n"
                    f"**Issue:** {card.issue}  \n"
                    f"**Lat:** {card.lat} · **Lng:** {card.lng}"
                )

        if st.button("Close", key='close_block_detail'):
            selection.dismiss()
            st.rerun()


def main():
    """
    Main application entry point.
    """
    st.set_page_config(
        page_title="Dhenkanal Grievance Dashboard",
        page_icon="🗺️",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    try:
        config = DashboardConfig.from_env()
    except ValueError as e:
        st.error(f"❌ Invalid configuration: {e}")
        return

    records = load_grievances_cached(str(config.complaints_path))
    if records is None:
        st.error(f"❌ Grievance data not found or invalid: {config.complaints_path}")
        return

    features = load_block_features_cached(str(config.blocks_path))

    stats = aggregate_blocks(records, features, config.block_name_property)
    lookup = build_stats_lookup(stats)
    summary = summarize_blocks(records, stats, config.severity_thresholds)
    center = compute_map_center(records, config.map_center)
    selection = get_selection()

    render_sidebar(stats, summary, config, selection)

    st.title("Dhenkanal - Interactive Grievance Map")
    st.markdown("Click any block to view detailed complaints.")
    render_legend(config)

    render_map(stats, features, config, center, selection)
    render_block_detail(lookup, config, selection)

    unmatched = find_unmatched_blocks(records, features, config.block_name_property)
    if unmatched:
        with st.expander(f"⚠️ {len(unmatched)} complaint block(s) without a boundary polygon"):
            st.dataframe(unmatched, hide_index=True, width="stretch")

    with st.expander("All complaints"):
        st.dataframe(records_to_frame(records), hide_index=True, width="stretch")


if __name__ == "__main__":
    main()
