"""
Severity classification for block complaint counts.

A block's complaint total maps onto three tiers using inclusive upper
bounds taken from configuration:

    total <= low_max               -> low
    low_max < total <= medium_max  -> medium
    total > medium_max             -> high

With the default thresholds (3, 5) this gives 0-3 Low, 4-5 Medium, 6+ High.
"""

import logging
from enum import Enum
from numbers import Integral
from typing import Dict, Optional

from .config import DEFAULT_SEVERITY_THRESHOLDS

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def validate_thresholds(thresholds: Dict[str, int]) -> Dict[str, int]:
    """
    Check that a thresholds dict is usable for classification.

    Args:
        thresholds: Dict with 'low_max' and 'medium_max'

    Returns:
        The same thresholds dict

    Raises:
        ValueError: On missing keys, non-integer or negative bounds, or
            low_max >= medium_max
    """
    missing = [k for k in ('low_max', 'medium_max') if k not in thresholds]
    if missing:
        raise ValueError(f"Missing severity thresholds: {missing}")

    low_max = thresholds['low_max']
    medium_max = thresholds['medium_max']

    for name, value in (('low_max', low_max), ('medium_max', medium_max)):
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValueError(f"Severity threshold {name} must be an integer, got {value!r}")
        if value < 0:
            raise ValueError(f"Severity threshold {name} must be non-negative, got {value}")

    if low_max >= medium_max:
        raise ValueError(
            f"low_max ({low_max}) must be lower than medium_max ({medium_max})"
        )

    return thresholds


def classify_severity(
    total: int,
    thresholds: Optional[Dict[str, int]] = None
) -> Severity:
    """
    Classify a complaint total into a severity tier.

    Args:
        total: Number of complaints for a block (non-negative integer)
        thresholds: Custom thresholds (default: DEFAULT_SEVERITY_THRESHOLDS)

    Returns:
        Severity: LOW, MEDIUM or HIGH

    Raises:
        ValueError: If total is negative or not an integer. Counts come from
            len() of a record list, so this only happens on a programming error.

    Example:
        >>> classify_severity(4)
        <Severity.MEDIUM: 'medium'>
    """
    if isinstance(total, bool) or not isinstance(total, Integral):
        raise ValueError(f"Complaint total must be an integer, got {total!r}")
    if total < 0:
        raise ValueError(f"Complaint total must be non-negative, got {total}")

    if thresholds is None:
        thresholds = DEFAULT_SEVERITY_THRESHOLDS

    if total <= thresholds['low_max']:
        return Severity.LOW
    if total <= thresholds['medium_max']:
        return Severity.MEDIUM
    return Severity.HIGH
