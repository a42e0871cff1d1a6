"""
Resize Propagation

When one edge of a tiled window moves, neighbors on that side give up
(or take back) the same amount of space, never dropping below the
configured minimum size.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, TYPE_CHECKING

from ..config import TilingConfig
from ..geometry import Direction, Number, Rect, WindowEdges

if TYPE_CHECKING:
    from ..registry import TileRegistry, WindowId

log = logging.getLogger(__name__)

# Edges are processed in this order within one tick
_EDGE_ORDER = (Direction.RIGHT, Direction.LEFT, Direction.BOTTOM, Direction.TOP)


@dataclass
class ResizePlan:
    """New rectangles produced by one resize tick."""

    window_id: "WindowId"
    neighbor_rects: Dict["WindowId", Rect] = field(default_factory=dict)
    # Set when the resizing window must go back to its last rect
    revert_rect: Optional[Rect] = None

    @property
    def reverted(self) -> bool:
        return self.revert_rect is not None


def edge_deltas(last: Rect, current: Rect) -> Dict[Direction, Number]:
    """Growth of each edge between two rects (positive = grew outward)."""
    return {
        Direction.RIGHT: current.right - last.right,
        Direction.LEFT: last.x - current.x,
        Direction.BOTTOM: current.bottom - last.bottom,
        Direction.TOP: last.y - current.y,
    }


class ResizePropagator:
    """
    Computes neighbor rectangles for a manual resize.

    Horizontal edges may revert the resizing window when a neighbor is
    already at minimum width. Vertical edges only clamp the neighbor;
    a neighbor already at minimum height is left alone and the resize
    goes through.
    """

    def __init__(self, registry: "TileRegistry", config: Optional[TilingConfig] = None):
        self.registry = registry
        self.config = config or registry.config

    def propagate_rect_change(
        self,
        window_id: "WindowId",
        edges: WindowEdges,
        last_rect: Rect,
        current_rect: Rect,
    ) -> ResizePlan:
        """
        Plan neighbor updates for a window that went from *last_rect* to
        *current_rect* while the given edges were being dragged.
        """
        plan = ResizePlan(window_id)
        deltas = edge_deltas(last_rect, current_rect)

        for direction in _EDGE_ORDER:
            if not edges & direction.edge:
                continue
            delta = deltas[direction]
            if delta == 0:
                continue
            self.propagate(window_id, direction, delta, last_rect, plan)
            if plan.reverted:
                break

        return plan

    def propagate(
        self,
        window_id: "WindowId",
        edge: Direction,
        delta: Number,
        last_rect: Rect,
        plan: Optional[ResizePlan] = None,
    ) -> ResizePlan:
        """
        Adjust the neighbors on one side of a resized window.

        Args:
            window_id: Window being resized
            edge: Edge that moved
            delta: Pixels the edge moved outward (negative = moved inward)
            last_rect: Resizing window's rect before this tick
            plan: Plan to extend, a new one by default

        Returns:
            The plan, with ``revert_rect`` set when the resize has to be
            undone
        """
        if plan is None:
            plan = ResizePlan(window_id)

        edge = Direction(edge)
        neighbors = self.registry.get_neighbors(window_id, edge)
        if not neighbors:
            return plan

        log.debug("Adjusting %d %s neighbors by %s", len(neighbors), edge.value, delta)

        for neighbor in neighbors:
            rect = plan.neighbor_rects.get(neighbor.id, neighbor.rect)

            if edge in (Direction.LEFT, Direction.RIGHT):
                new_rect = self._adjust_width(edge, rect, delta)
                if new_rect is None:
                    log.debug(
                        "Neighbor %s at minimum width, reverting %s", neighbor.id, window_id
                    )
                    # Earlier neighbors in this tick are dropped as well, the
                    # resizer goes back to last_rect so none of them may move
                    plan.neighbor_rects.clear()
                    plan.revert_rect = last_rect
                    return plan
            else:
                new_rect = self._adjust_height(edge, rect, delta)
                if new_rect is None:
                    continue

            plan.neighbor_rects[neighbor.id] = new_rect

        return plan

    def _adjust_width(self, edge: Direction, rect: Rect, delta: Number) -> Optional[Rect]:
        """New rect for a left/right neighbor, or None if it cannot give way."""
        min_width = self.config.min_window_width
        new_width = rect.width - delta

        if new_width < min_width and delta > 0:
            max_delta = rect.width - min_width
            if max_delta <= 0:
                return None
            # Partial concession: absorb what the neighbor can spare
            if edge == Direction.RIGHT:
                return Rect(rect.x + max_delta, rect.y, min_width, rect.height)
            return rect.resized(width=min_width)

        if edge == Direction.RIGHT:
            return Rect(rect.x + delta, rect.y, new_width, rect.height)
        return rect.resized(width=new_width)

    def _adjust_height(self, edge: Direction, rect: Rect, delta: Number) -> Optional[Rect]:
        """New rect for a top/bottom neighbor, or None to leave it as is."""
        min_height = self.config.min_window_height
        new_height = rect.height - delta

        if new_height < min_height and delta > 0:
            max_delta = rect.height - min_height
            if max_delta <= 0:
                return None
            if edge == Direction.BOTTOM:
                return Rect(rect.x, rect.y + max_delta, rect.width, min_height)
            return rect.resized(height=min_height)

        if edge == Direction.BOTTOM:
            return Rect(rect.x, rect.y + delta, rect.width, new_height)
        return rect.resized(height=new_height)
