"""
Swap Planning

Decides which tiled window a dragged window would trade places with,
and produces the exchange when the drag is released.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ..geometry import Rect, point_in_rect

if TYPE_CHECKING:
    from ..registry import TileRegistry, WindowId

log = logging.getLogger(__name__)


@dataclass
class SwapPlan:
    """Position exchange between a dragged window and its target."""

    dragged_id: "WindowId"
    target_id: "WindowId"
    dragged_rect: Rect
    target_rect: Rect
    dragged_zone: str
    target_zone: str


class SwapPlanner:
    """Stateless swap target lookup and plan construction."""

    def __init__(self, registry: "TileRegistry"):
        self.registry = registry

    def find_target(
        self, dragged_id: "WindowId", live_rect: Rect
    ) -> Optional["WindowId"]:
        """
        First tiled window whose stored rect contains the dragged
        window's current center.

        Stored rects are used rather than live ones so the window being
        dragged over does not shift the test while the drag is running.
        """
        center = live_rect.center
        for tiled in self.registry.get_tiled_windows():
            if tiled.id == dragged_id:
                continue
            if point_in_rect(center, tiled.rect):
                return tiled.id
        return None

    def plan(
        self,
        dragged_id: "WindowId",
        target_id: "WindowId",
        drag_start_rect: Rect,
    ) -> Optional[SwapPlan]:
        """
        Build the exchange for a committed swap.

        The dragged window takes the target's current rect; the target
        takes the dragged window's rect from when the drag started.

        Returns:
            The plan, or None if either window is no longer tracked
        """
        target = self.registry.get_window(target_id)
        dragged = self.registry.get_window(dragged_id)
        if target is None or dragged is None:
            log.warning("Swap between %s and %s no longer possible", dragged_id, target_id)
            return None

        return SwapPlan(
            dragged_id=dragged_id,
            target_id=target_id,
            dragged_rect=target.rect,
            target_rect=drag_start_rect,
            dragged_zone=target.zone or "swapped",
            target_zone=dragged.zone or "swapped",
        )


class SwapTracker:
    """
    Pending swap state for a single drag.

    Created at grab begin for tiled windows only. ``update`` is called on
    every poll and reports whether the pending target changed.
    """

    def __init__(self, planner: SwapPlanner, dragged_id: "WindowId", drag_start_rect: Rect):
        self.planner = planner
        self.dragged_id = dragged_id
        self.drag_start_rect = drag_start_rect
        self.target_id: Optional["WindowId"] = None

    def update(self, live_rect: Rect) -> bool:
        """Re-check the target. Returns True if it changed."""
        target = self.planner.find_target(self.dragged_id, live_rect)
        if target == self.target_id:
            return False
        self.target_id = target
        log.debug("Potential swap target: %s", target)
        return True

    def release(self, in_edge_zone: bool) -> Optional[SwapPlan]:
        """
        Finish the drag.

        Returns:
            A swap plan, or None when nothing is pending or the cursor
            was released in a snap edge zone
        """
        if self.target_id is None:
            return None
        if in_edge_zone:
            log.debug("Swap cancelled, cursor in edge zone")
            return None
        return self.planner.plan(self.dragged_id, self.target_id, self.drag_start_rect)
