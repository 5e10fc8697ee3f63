"""
Presentation helpers for the grievance map.

Turns aggregated block stats into what the dashboard draws: polygon
styles, tooltip and legend text, the block detail panel and the plotly
choropleth. Nothing here changes the statistics.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .config import DashboardConfig
from .geo_utils import FeatureLike, coerce_feature_list, feature_block_name, normalize_block_name
from .models import BoundaryFeature, RegionStats
from .selection import SelectionController
from .severity import Severity, classify_severity

logger = logging.getLogger(__name__)


SEVERITY_COLORS = {
    Severity.LOW.value: '#22c55e',      # green
    Severity.MEDIUM.value: '#f97316',   # orange
    Severity.HIGH.value: '#ef4444',     # red
}

OUTLINE_COLOR = '#0000ff'
OUTLINE_WEIGHT = 2
FILL_OPACITY = 0.6

UNKNOWN_BLOCK_LABEL = "Unknown block"
NO_COMPLAINTS_MESSAGE = "No complaints recorded for this block yet."


def format_block_tooltip(label: str, total: int) -> str:
    """
    Tooltip text for a block.

    Example:
        >>> format_block_tooltip("Hindol", 1)
        'Hindol – 1 complaint'
    """
    return f"{label} – {total} complaint{'' if total == 1 else 's'}"


def format_complaint_id(complaint_id: int) -> str:
    """Display id for a complaint, e.g. 7 -> 'CMP-007'."""
    return f"CMP-{complaint_id:03d}"


def legend_entries(thresholds: Optional[Dict[str, int]] = None) -> List[Tuple[str, str]]:
    """
    Legend labels derived from the severity thresholds.

    Returns:
        List of (severity value, label), e.g. ('low', 'Low (≤ 3)')
    """
    if thresholds is None:
        thresholds = DashboardConfig().severity_thresholds

    low_max = thresholds['low_max']
    medium_max = thresholds['medium_max']

    if medium_max == low_max + 1:
        medium_label = f"Medium ({medium_max})"
    else:
        medium_label = f"Medium ({low_max + 1} – {medium_max})"

    return [
        (Severity.LOW.value, f"Low (≤ {low_max})"),
        (Severity.MEDIUM.value, medium_label),
        (Severity.HIGH.value, f"High ({medium_max + 1}+)"),
    ]


def _feature_stats(
    feature: FeatureLike,
    lookup: Mapping[str, RegionStats],
    config: DashboardConfig
) -> Tuple[Any, str, Optional[RegionStats]]:
    raw_name = feature_block_name(feature, config.block_name_property) or ""
    key = normalize_block_name(raw_name)
    return raw_name, key, lookup.get(key) if key else None


def style_block_feature(
    feature: FeatureLike,
    lookup: Mapping[str, RegionStats],
    config: Optional[DashboardConfig] = None
) -> Dict[str, Any]:
    """
    Polygon style for one boundary feature.

    The fill color follows the block's severity. A polygon without stats is
    styled as having no complaints and logged.
    """
    config = config or DashboardConfig()
    raw_name, key, stats = _feature_stats(feature, lookup, config)

    if stats is None:
        logger.warning(f"[Map] Boundary block has no stats (no complaints and no name match): {raw_name!r}")

    total = stats.total if stats else 0
    severity = classify_severity(total, config.severity_thresholds)

    return {
        'color': OUTLINE_COLOR,
        'weight': OUTLINE_WEIGHT,
        'fillColor': SEVERITY_COLORS[severity.value],
        'fillOpacity': FILL_OPACITY,
    }


def tooltip_for_feature(
    feature: FeatureLike,
    lookup: Mapping[str, RegionStats],
    config: Optional[DashboardConfig] = None
) -> str:
    """Tooltip for a boundary feature, preferring the aggregated label."""
    config = config or DashboardConfig()
    raw_name, key, stats = _feature_stats(feature, lookup, config)

    total = stats.total if stats else 0
    label = (stats.label if stats else None) or raw_name or UNKNOWN_BLOCK_LABEL
    return format_block_tooltip(label, total)


@dataclass(frozen=True)
class ComplaintCard:
    complaint_id: str
    issue: str
    lat: str
    lng: str
    status: str = "Reported"


@dataclass(frozen=True)
class BlockDetail:
    """Everything the detail panel shows for the selected block."""
    key: str
    title: str
    total: int
    severity: Severity
    complaints: Tuple[ComplaintCard, ...]

    @property
    def has_complaints(self) -> bool:
        return len(self.complaints) > 0

    @property
    def empty_message(self) -> Optional[str]:
        return None if self.has_complaints else NO_COMPLAINTS_MESSAGE


def build_block_detail(
    controller: SelectionController,
    lookup: Mapping[str, RegionStats],
    config: Optional[DashboardConfig] = None
) -> Optional[BlockDetail]:
    """
    Detail view for the selected block.

    Returns None when nothing is selected or the selection is stale; the
    caller renders that as "no detail available".
    """
    stats = controller.resolve(lookup)
    if stats is None:
        return None

    config = config or DashboardConfig()
    cards = tuple(
        ComplaintCard(
            complaint_id=format_complaint_id(r.id),
            issue=r.grievance,
            lat=f"{r.lat:.6f}",
            lng=f"{r.lng:.6f}",
        )
        for r in stats.records
    )

    return BlockDetail(
        key=stats.key,
        title=f"{stats.label} Block – Complaint Details",
        total=stats.total,
        severity=classify_severity(stats.total, config.severity_thresholds),
        complaints=cards,
    )


def _feature_geometry(feature: FeatureLike) -> Optional[Mapping[str, Any]]:
    if isinstance(feature, BoundaryFeature):
        return feature.geometry
    if isinstance(feature, Mapping):
        return feature.get('geometry')
    return None


def build_block_frame(
    features: Any,
    lookup: Mapping[str, RegionStats],
    config: Optional[DashboardConfig] = None
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    One row per drawable polygon plus a GeoJSON copy keyed by row id.

    The input features are not modified; each polygon gets a synthetic
    feature id so that unnamed polygons are still drawn.

    Returns:
        (DataFrame with feature_id, key, label, total, severity, tooltip,
         fill_color; FeatureCollection dict)
    """
    config = config or DashboardConfig()

    rows = []
    geo_features = []
    for idx, feature in enumerate(coerce_feature_list(features)):
        geometry = _feature_geometry(feature)
        if not geometry:
            continue

        raw_name, key, stats = _feature_stats(feature, lookup, config)
        style = style_block_feature(feature, lookup, config)
        total = stats.total if stats else 0
        feature_id = str(idx)

        rows.append({
            'feature_id': feature_id,
            'key': key,
            'label': (stats.label if stats else None) or raw_name or UNKNOWN_BLOCK_LABEL,
            'total': total,
            'severity': classify_severity(total, config.severity_thresholds).value,
            'tooltip': tooltip_for_feature(feature, lookup, config),
            'fill_color': style['fillColor'],
        })
        geo_features.append({
            'type': 'Feature',
            'id': feature_id,
            'properties': {'block_key': key},
            'geometry': geometry,
        })

    df = pd.DataFrame(rows, columns=['feature_id', 'key', 'label', 'total', 'severity', 'tooltip', 'fill_color'])
    return df, {'type': 'FeatureCollection', 'features': geo_features}


def build_block_map(
    stats: Sequence[RegionStats],
    features: Any,
    config: Optional[DashboardConfig] = None,
    center: Optional[Tuple[float, float]] = None
) -> Optional[go.Figure]:
    """
    Choropleth of complaint severity per block.

    Args:
        stats: Aggregated block stats
        features: Boundary features (BoundaryFeature or GeoJSON dicts)
        config: Dashboard config (thresholds, name property, zoom)
        center: (lat, lng) to center on (default: config.map_center)

    Returns:
        Plotly figure, or None if no feature has a geometry
    """
    config = config or DashboardConfig()
    lookup = {s.key: s for s in stats}
    df, geojson = build_block_frame(features, lookup, config)

    if df.empty:
        logger.warning("No drawable block polygons, skipping map")
        return None

    lat, lng = center if center is not None else config.map_center

    fig = px.choropleth_map(
        df,
        geojson=geojson,
        locations='feature_id',
        featureidkey='id',
        color='severity',
        color_discrete_map=dict(zip(df['severity'], df['fill_color'])),
        category_orders={'severity': [s.value for s in Severity]},
        hover_name='tooltip',
        hover_data={'feature_id': False, 'severity': False, 'fill_color': False},
        custom_data=['key'],
        map_style='carto-positron',
        center={'lat': lat, 'lon': lng},
        zoom=config.map_zoom,
        opacity=FILL_OPACITY,
    )

    fig.update_traces(marker_line_color=OUTLINE_COLOR, marker_line_width=OUTLINE_WEIGHT)

    legend_names = dict(legend_entries(config.severity_thresholds))
    fig.for_each_trace(lambda t: t.update(name=legend_names.get(t.name, t.name)))

    fig.update_layout(
        height=650,
        margin=dict(l=0, r=0, t=0, b=0),
        legend=dict(title=None, orientation='h', y=1.02, x=0),
        clickmode='event+select',
    )

    logger.debug(f"Built block map with {len(df)} polygons")
    return fig
