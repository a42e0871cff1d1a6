"""
Insert Zone Detection

Finds the seam between two adjacent tiled windows that the cursor is
hovering over, so a dragged window can be dropped between them.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..config import TilingConfig
from ..geometry import Number, Point, Rect
from ..registry import WindowId, WindowState


@dataclass(frozen=True)
class InsertZone:
    """A seam between side-by-side windows."""

    orientation: str
    # X coordinate of the seam
    position: Number
    affected_ids: Tuple[WindowId, ...]
    preview_rect: Rect


class InsertZonePlanner:
    """Stateless seam lookup."""

    def __init__(self, config: Optional[TilingConfig] = None):
        self.config = config or TilingConfig()

    def find_insert_zone(
        self,
        point: Point,
        tiled: Sequence[WindowState],
        work_area: Rect,
    ) -> Optional[InsertZone]:
        """
        Seam under the cursor.

        A window edge qualifies when the cursor is within the boundary
        threshold of it and another window's opposing edge lies within
        two gaps of it.

        Args:
            point: Cursor position
            tiled: Tiled windows, the dragged one excluded
            work_area: Monitor work area used for the preview rect
        """
        threshold = self.config.boundary_threshold
        reach = self.config.inner_gap * 2

        for window in tiled:
            right = window.rect.right
            if abs(point.x - right) < threshold:
                others = [
                    w.id
                    for w in tiled
                    if w.id != window.id and abs(w.rect.x - right) < reach
                ]
                if others:
                    return self._zone(right, (window.id, *others), work_area)

            left = window.rect.x
            if abs(point.x - left) < threshold:
                others = [
                    w.id
                    for w in tiled
                    if w.id != window.id and abs(w.rect.right - left) < reach
                ]
                if others:
                    return self._zone(left, (window.id, *others), work_area)

        return None

    def _zone(
        self, position: Number, affected: Tuple[WindowId, ...], work_area: Rect
    ) -> InsertZone:
        width = self.config.min_window_width
        outer = self.config.outer_gap
        preview = Rect(
            position - width / 2,
            work_area.y + outer,
            width,
            work_area.height - outer * 2,
        )
        return InsertZone("vertical", position, affected, preview)
