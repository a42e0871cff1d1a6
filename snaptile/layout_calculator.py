"""
Layout Calculator

Maps named snap zones onto target rectangles inside a work area.
"""

from __future__ import annotations
import logging
import math
from enum import Enum
from typing import Optional, Union

from .config import TilingConfig
from .geometry import Point, Rect

log = logging.getLogger(__name__)

# Width/height ratio above which a monitor counts as ultrawide (21:9 is 2.33)
ULTRAWIDE_RATIO = 2.0


class SnapZone(Enum):
    """Named snap targets."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    MAXIMIZE = "maximize"
    LEFT_TOP = "left-top"
    RIGHT_TOP = "right-top"
    LEFT_BOTTOM = "left-bottom"
    RIGHT_BOTTOM = "right-bottom"


class ThirdPosition(Enum):
    """Column positions for thirds layouts."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


ZoneLike = Union[SnapZone, str]


def parse_zone(zone: ZoneLike) -> Optional[SnapZone]:
    """Resolve a zone name, returning None for unknown names."""
    if isinstance(zone, SnapZone):
        return zone
    try:
        return SnapZone(zone)
    except ValueError:
        return None


class LayoutCalculator:
    """
    Snap zone geometry.

    All calculations are pure functions of the work area and the
    configured gap; nothing here touches windows.
    """

    def __init__(self, config: Optional[TilingConfig] = None):
        self.config = config or TilingConfig()

    def calculate_zone_rect(
        self, zone: ZoneLike, work_area: Rect, gap: Optional[int] = None
    ) -> Rect:
        """
        Calculate the target rectangle for a snap zone.

        Args:
            zone: Snap zone (enum or its string value)
            work_area: Monitor work area
            gap: Gap override, defaults to the configured gap

        Returns:
            Target rectangle. Unknown zones fall back to maximize.
        """
        if gap is None:
            gap = self.config.gap

        resolved = parse_zone(zone)
        if resolved is None:
            log.warning("Unknown snap zone %r, falling back to maximize", zone)
            return self._maximized(work_area, gap)

        if resolved == SnapZone.LEFT:
            return self._half(work_area, gap, left=True)
        if resolved == SnapZone.RIGHT:
            return self._half(work_area, gap, left=False)
        if resolved in (SnapZone.TOP, SnapZone.MAXIMIZE):
            return self._maximized(work_area, gap)
        if resolved == SnapZone.LEFT_TOP:
            return self._quadrant(work_area, gap, left=True, top=True)
        if resolved == SnapZone.RIGHT_TOP:
            return self._quadrant(work_area, gap, left=False, top=True)
        if resolved == SnapZone.LEFT_BOTTOM:
            return self._quadrant(work_area, gap, left=True, top=False)
        return self._quadrant(work_area, gap, left=False, top=False)

    def _half(self, work_area: Rect, gap: int, left: bool) -> Rect:
        half_width = math.floor((work_area.width - gap * 3) / 2)
        if left:
            x = work_area.x + gap
        else:
            x = work_area.x + work_area.width - half_width - gap
        return Rect(x, work_area.y + gap, half_width, work_area.height - gap * 2)

    def _maximized(self, work_area: Rect, gap: int) -> Rect:
        return Rect(
            work_area.x + gap,
            work_area.y + gap,
            work_area.width - gap * 2,
            work_area.height - gap * 2,
        )

    def _quadrant(self, work_area: Rect, gap: int, left: bool, top: bool) -> Rect:
        half_width = math.floor((work_area.width - gap * 3) / 2)
        half_height = math.floor((work_area.height - gap * 3) / 2)

        x = (
            work_area.x + gap
            if left
            else work_area.x + work_area.width - half_width - gap
        )
        y = (
            work_area.y + gap
            if top
            else work_area.y + work_area.height - half_height - gap
        )
        return Rect(x, y, half_width, half_height)

    def _third_width(self, work_area: Rect, gap: int) -> int:
        return math.floor((work_area.width - gap * 4) / 3)

    def calculate_third(
        self,
        work_area: Rect,
        position: Union[ThirdPosition, str],
        gap: Optional[int] = None,
    ) -> Rect:
        """One of three equal columns separated by the gap."""
        if gap is None:
            gap = self.config.gap

        try:
            position = ThirdPosition(position)
        except ValueError:
            log.warning("Unknown third position %r, falling back to maximize", position)
            return self._maximized(work_area, gap)

        third = self._third_width(work_area, gap)
        if position == ThirdPosition.LEFT:
            x = work_area.x + gap
        elif position == ThirdPosition.CENTER:
            x = work_area.x + gap * 2 + third
        else:
            x = work_area.x + gap * 3 + third * 2

        return Rect(x, work_area.y + gap, third, work_area.height - gap * 2)

    def calculate_two_thirds(
        self,
        work_area: Rect,
        side: Union[ThirdPosition, str],
        gap: Optional[int] = None,
    ) -> Rect:
        """Two adjacent thirds plus the gap between them, on the given side."""
        if gap is None:
            gap = self.config.gap

        try:
            side = ThirdPosition(side)
        except ValueError:
            side = None
        if side not in (ThirdPosition.LEFT, ThirdPosition.RIGHT):
            log.warning("Unknown two-thirds side, falling back to maximize")
            return self._maximized(work_area, gap)

        width = self._third_width(work_area, gap) * 2 + gap
        if side == ThirdPosition.LEFT:
            x = work_area.x + gap
        else:
            x = work_area.x + work_area.width - width - gap

        return Rect(x, work_area.y + gap, width, work_area.height - gap * 2)

    @staticmethod
    def is_ultrawide(work_area: Rect) -> bool:
        """Check if a work area is ultrawide (aspect ratio > 2:1)."""
        if work_area.height <= 0:
            return False
        return work_area.width / work_area.height > ULTRAWIDE_RATIO

    def detect_zone(self, point: Point, work_area: Rect) -> Optional[SnapZone]:
        """
        Detect which snap zone a cursor position falls in.

        Corners take priority over edges. The bottom edge alone is not a
        zone, only as part of a bottom corner.
        """
        threshold = self.config.snap_threshold
        left = point.x < work_area.x + threshold
        right = point.x > work_area.x + work_area.width - threshold
        top = point.y < work_area.y + threshold
        bottom = point.y > work_area.y + work_area.height - threshold

        if left and top:
            return SnapZone.LEFT_TOP
        if right and top:
            return SnapZone.RIGHT_TOP
        if left and bottom:
            return SnapZone.LEFT_BOTTOM
        if right and bottom:
            return SnapZone.RIGHT_BOTTOM

        if top:
            return SnapZone.TOP
        if left:
            return SnapZone.LEFT
        if right:
            return SnapZone.RIGHT
        return None

    def in_edge_zone(self, point: Point, work_area: Rect) -> bool:
        """True if the cursor sits in the left, right or top snap band."""
        threshold = self.config.snap_threshold
        return (
            point.x < work_area.x + threshold
            or point.x > work_area.x + work_area.width - threshold
            or point.y < work_area.y + threshold
        )
