"""
Block selection state.

The dashboard inspects at most one block at a time. The controller only
remembers the selected block key; the stats for that key are looked up in
whatever table is current, so a selection survives re-aggregation and a
selection whose block has disappeared simply resolves to nothing.
"""

import logging
from typing import Mapping, Optional

from .models import RegionStats, SelectionState

logger = logging.getLogger(__name__)


class SelectionController:
    """
    Two-state machine: Unselected (initial) and Selected(key).

    Example:
        >>> controller = SelectionController()
        >>> controller.select("hindol")
        >>> controller.dismiss()
        >>> controller.is_selected
        False
    """

    def __init__(self):
        self._state = SelectionState()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_key(self) -> Optional[str]:
        return self._state.key

    @property
    def is_selected(self) -> bool:
        return self._state.is_selected

    def select(self, key: str) -> None:
        """
        Select a block by key. Re-selecting the current block is allowed.

        Raises:
            ValueError: If key is empty
        """
        if not key:
            raise ValueError("Cannot select a block with an empty key")

        if key != self._state.key:
            logger.info(f"Selected block: {key}")
        self._state = SelectionState(key=key)

    def dismiss(self) -> None:
        """Clear the selection."""
        if self._state.is_selected:
            logger.info(f"Dismissed block: {self._state.key}")
        self._state = SelectionState()

    def resolve(self, lookup: Mapping[str, RegionStats]) -> Optional[RegionStats]:
        """
        Stats for the selected block, or None.

        None is returned both when nothing is selected and when the selected
        key is missing from the lookup (for example after the inputs changed).
        """
        if not self._state.is_selected:
            return None

        stats = lookup.get(self._state.key)
        if stats is None:
            logger.debug(f"Selected block '{self._state.key}' not in current table")
        return stats

    def __repr__(self) -> str:
        return f"SelectionController(selected_key={self._state.key!r})"


def apply_map_click(
    controller: SelectionController,
    clicked: Optional[str],
    last_clicked: Optional[str]
) -> Optional[str]:
    """
    Feed a map click into the controller.

    The map widget keeps reporting its last selected polygon on every rerun,
    so only a click on a different block than last time selects it. Closing
    the detail panel therefore does not reopen it, while clicking another
    block (or the same block after the map selection was cleared) does.

    Args:
        controller: Selection to update
        clicked: Block key reported by the map, or None if nothing is selected
        last_clicked: Key returned by the previous call

    Returns:
        The key to pass as last_clicked next time
    """
    if not clicked:
        return None

    if clicked != last_clicked:
        controller.select(clicked)
    return clicked
