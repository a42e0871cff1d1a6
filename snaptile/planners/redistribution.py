"""
Redistribution Planner

Full-row re-layouts for when the number of tiled windows changes:
equal distribution on add/remove, proportional scaling on insert, and
post-hoc overlap correction against the rectangles the host actually
applied.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import TilingConfig
from ..geometry import Number, Rect
from ..layout_calculator import LayoutCalculator, SnapZone
from ..registry import WindowId, WindowState

log = logging.getLogger(__name__)

# Gaps this much smaller than expected count as overlap
GAP_TOLERANCE = 5
# Position differences at or below this are not worth a move
POSITION_TOLERANCE = 2


@dataclass
class InsertPlan:
    """Result of planning an insertion at a seam."""

    window_id: WindowId
    rects: Dict[WindowId, Rect] = field(default_factory=dict)
    index: int = 0
    # Zone recorded for the inserted window
    zone: str = "inserted"
    # Windows whose scaled width was raised to the minimum
    clamped: int = 0

    @property
    def new_rect(self) -> Rect:
        return self.rects[self.window_id]


@dataclass
class CorrectionPlan:
    """Moves (and at most one shrink) needed to remove overlaps."""

    rects: Dict[WindowId, Rect] = field(default_factory=dict)
    overflow: Number = 0
    shrunk_primary: bool = False

    @property
    def needed(self) -> bool:
        return bool(self.rects)


class RedistributionPlanner:
    """
    Computes full-row layouts for the tiled windows of one work area.

    Nothing here applies rectangles; callers apply the returned plans
    and report the results back to the registry.
    """

    def __init__(
        self,
        config: Optional[TilingConfig] = None,
        calculator: Optional[LayoutCalculator] = None,
    ):
        self.config = config or TilingConfig()
        self.calculator = calculator or LayoutCalculator(self.config)

    @property
    def gap(self) -> int:
        return self.config.gap

    # ------------------------------------------------------------------
    # Equal distribution
    # ------------------------------------------------------------------
    def equal_widths(self, count: int, work_area: Rect) -> List[Rect]:
        """
        Lay out *count* equal columns from left to right.

        Args:
            count: Number of windows
            work_area: Monitor work area

        Returns:
            One rect per column, left to right
        """
        if count <= 0:
            return []

        gap = self.gap
        width = math.floor((work_area.width - gap * (count + 1)) / count)
        height = work_area.height - gap * 2
        y = work_area.y + gap

        rects = []
        x = work_area.x + gap
        for _ in range(count):
            rects.append(Rect(x, y, width, height))
            x += width + gap
        return rects

    def redistribute(
        self, windows: Sequence[WindowState], work_area: Rect
    ) -> Dict[WindowId, Rect]:
        """Equal-width layout for the given windows, kept in x order."""
        ordered = sorted(windows, key=lambda w: w.rect.x)
        return {
            w.id: rect for w, rect in zip(ordered, self.equal_widths(len(ordered), work_area))
        }

    def plan_auto_tile(
        self,
        window_id: WindowId,
        existing: Sequence[WindowState],
        work_area: Rect,
    ) -> Tuple[Dict[WindowId, Rect], str]:
        """
        Layout after a new window is tiled automatically.

        The first window on a work area is maximized; any later one is
        appended on the right and every column gets an equal share.

        Returns:
            (rects, zone for the new window)
        """
        others = [w for w in existing if w.id != window_id]
        if not others:
            rect = self.calculator.calculate_zone_rect(SnapZone.MAXIMIZE, work_area)
            return {window_id: rect}, SnapZone.MAXIMIZE.value

        ids = [w.id for w in sorted(others, key=lambda w: w.rect.x)] + [window_id]
        rects = self.equal_widths(len(ids), work_area)
        return dict(zip(ids, rects)), "auto"

    # ------------------------------------------------------------------
    # Proportional insert
    # ------------------------------------------------------------------
    def plan_insert(
        self,
        window_id: WindowId,
        boundary: Number,
        existing: Sequence[WindowState],
        work_area: Rect,
    ) -> InsertPlan:
        """
        Insert a window at a seam, scaling existing columns to make room.

        Args:
            window_id: Window being inserted
            boundary: X coordinate of the seam the window was dropped on
            existing: Tiled windows on the work area (the inserted one
                is ignored if present)
            work_area: Monitor work area

        Returns:
            Plan with a rect for every window, the new one included
        """
        gap = self.gap
        min_width = self.config.min_window_width
        y = work_area.y + gap
        height = work_area.height - gap * 2

        tiled = sorted(
            (w for w in existing if w.id != window_id), key=lambda w: w.rect.x
        )
        if not tiled:
            rect = self.calculator.calculate_zone_rect(SnapZone.MAXIMIZE, work_area)
            return InsertPlan(window_id, {window_id: rect}, zone=SnapZone.MAXIMIZE.value)

        total_windows = len(tiled) + 1
        available = work_area.width - (gap * 2 + gap * (total_windows - 1))
        new_width = max(min_width, math.floor(available / total_windows))

        current_total = sum(w.rect.width for w in tiled)
        remaining = available - new_width
        scale = remaining / current_total if current_total > 0 else 0

        widths = []
        clamped = 0
        for w in tiled:
            scaled = math.floor(w.rect.width * scale)
            if scaled < min_width:
                scaled = min_width
                clamped += 1
            widths.append(scaled)

        # Windows at the floor never shrink further
        excess = sum(widths) + new_width - available
        shrinkable = [i for i, width in enumerate(widths) if width > min_width]
        if excess > 0 and shrinkable:
            shrink = math.ceil(excess / len(shrinkable))
            for i in shrinkable:
                widths[i] = max(min_width, widths[i] - shrink)

        log.info(
            "Insert: %d windows, new=%spx, excess=%spx", total_windows, new_width, excess
        )

        index = self.insert_index(boundary, tiled)

        order: List[Tuple[WindowId, Number]] = list(
            zip((w.id for w in tiled), widths)
        )
        order.insert(index, (window_id, new_width))

        rects = {}
        x = work_area.x + gap
        for wid, width in order:
            rects[wid] = Rect(x, y, width, height)
            x += width + gap

        return InsertPlan(window_id, rects, index=index, clamped=clamped)

    @staticmethod
    def insert_index(boundary: Number, ordered: Sequence[WindowState]) -> int:
        """Position before the first window whose center lies past the boundary."""
        for i, w in enumerate(ordered):
            if boundary < w.rect.x + w.rect.width / 2:
                return i
        return len(ordered)

    # ------------------------------------------------------------------
    # Overlap correction
    # ------------------------------------------------------------------
    def correct_overlaps(
        self,
        primary_id: Optional[WindowId],
        actual_rects: Dict[WindowId, Rect],
        work_area: Rect,
    ) -> CorrectionPlan:
        """
        Re-pack windows whose real rects crowd each other.

        Widths are taken as the host reports them. If the packed row no
        longer fits the work area, the primary window absorbs the
        overflow as long as it stays at or above the minimum width.

        Args:
            primary_id: Window that was just inserted or resized
            actual_rects: Rects read back from the host
            work_area: Monitor work area

        Returns:
            Plan holding only the windows that have to change
        """
        plan = CorrectionPlan()
        if len(actual_rects) < 2:
            return plan

        gap = self.gap
        ordered = sorted(actual_rects.items(), key=lambda item: item[1].x)

        crowded = False
        for (cur_id, cur), (next_id, nxt) in zip(ordered, ordered[1:]):
            actual_gap = nxt.x - cur.right
            if actual_gap < gap - GAP_TOLERANCE:
                crowded = True
                log.debug(
                    "Overlap detected: %s overlaps %s by %spx",
                    cur_id,
                    next_id,
                    gap - actual_gap,
                )

        if not crowded:
            return plan

        log.info("Correcting layout overlaps")

        widths = {wid: rect.width for wid, rect in ordered}
        end = self._pack(ordered, widths, work_area.x + gap, plan)
        overflow = end - work_area.right
        plan.overflow = overflow

        if overflow > 0 and primary_id in widths:
            primary_width = widths[primary_id]
            if primary_width - overflow >= self.config.min_window_width:
                log.debug("Layout overflow: %spx, shrinking %s", overflow, primary_id)
                widths[primary_id] = primary_width - overflow
                plan.rects.clear()
                end = self._pack(ordered, widths, work_area.x + gap, plan)
                plan.overflow = end - work_area.right
                plan.shrunk_primary = True
            else:
                log.warning(
                    "Layout overflows by %spx and %s cannot shrink further",
                    overflow,
                    primary_id,
                )

        return plan

    def _pack(
        self,
        ordered: Sequence[Tuple[WindowId, Rect]],
        widths: Dict[WindowId, Number],
        start: Number,
        plan: CorrectionPlan,
    ) -> Number:
        """Place windows contiguously; record the ones that change. Returns the row's right end."""
        gap = self.gap
        x = start
        for wid, rect in ordered:
            width = widths[wid]
            if abs(x - rect.x) > POSITION_TOLERANCE or width != rect.width:
                plan.rects[wid] = Rect(x, rect.y, width, rect.height)
            x += width + gap
        return x - gap
