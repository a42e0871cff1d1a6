"""
Gap Planning

Finds empty columns between (or beside) tiled windows that are wide
enough to hold another window.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config import TilingConfig
from ..geometry import Number, Point, Rect, point_in_rect
from ..registry import WindowState

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GapZone:
    """A fillable gap and the rect a window dropped there would get."""

    rect: Rect
    orientation: str = "horizontal"


class GapPlanner:
    """Stateless gap lookup over one work area."""

    def __init__(self, config: Optional[TilingConfig] = None):
        self.config = config or TilingConfig()

    def find_gap(
        self,
        point: Point,
        tiled: Sequence[WindowState],
        work_area: Rect,
    ) -> Optional[GapZone]:
        """
        Gap under the cursor, if any.

        Args:
            point: Cursor position
            tiled: Tiled windows on the work area, the dragged one excluded
            work_area: Monitor work area

        Returns:
            The gap the cursor is in, or None when the cursor is over a
            window or no qualifying gap contains it
        """
        if not tiled:
            return None

        for window in tiled:
            if point_in_rect(point, window.rect):
                return None

        for start, end in self.candidate_spans(tiled, work_area):
            if end - start < self.config.min_window_width:
                continue
            if start <= point.x <= end:
                return self._zone(start, end, work_area)
        return None

    def candidate_spans(
        self, tiled: Sequence[WindowState], work_area: Rect
    ) -> List[tuple]:
        """(start, end) x spans checked in order: left edge, between windows, right edge."""
        gap = self.config.gap
        ordered = sorted(tiled, key=lambda w: w.rect.x)

        spans = [(work_area.x + gap, ordered[0].rect.x - gap)]
        for left, right in zip(ordered, ordered[1:]):
            spans.append((left.rect.right + gap, right.rect.x - gap))
        spans.append((ordered[-1].rect.right + gap, work_area.right - gap))
        return spans

    def _zone(self, start: Number, end: Number, work_area: Rect) -> GapZone:
        gap = self.config.gap
        rect = Rect(start, work_area.y + gap, end - start, work_area.height - gap * 2)
        return GapZone(rect)
