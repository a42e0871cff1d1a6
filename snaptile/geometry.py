"""
Geometry Primitives

Immutable rectangle/point types and the pure functions the tiling engine
uses for overlap, edge and adjacency tests.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Optional, Union

Number = Union[int, float]

# Minimum projected overlap for two rects to count as side by side
DEFAULT_MIN_OVERLAP = 50

# Maximum distance between facing edges for two rects to count as touching
DEFAULT_EDGE_TOLERANCE = 10


class WindowEdges(IntFlag):
    """Window edge flags."""

    NONE = 0
    TOP = 1
    BOTTOM = 2
    LEFT = 4
    RIGHT = 8


class Direction(Enum):
    """Neighbor direction relative to a window."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def edge(self) -> WindowEdges:
        return _EDGE_FLAGS[self]


_OPPOSITES = {
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.TOP: Direction.BOTTOM,
    Direction.BOTTOM: Direction.TOP,
}

_EDGE_FLAGS = {
    Direction.LEFT: WindowEdges.LEFT,
    Direction.RIGHT: WindowEdges.RIGHT,
    Direction.TOP: WindowEdges.TOP,
    Direction.BOTTOM: WindowEdges.BOTTOM,
}


@dataclass(frozen=True)
class Point:
    """Position in logical coordinate space."""

    x: Number = 0
    y: Number = 0


@dataclass(frozen=True)
class Rect:
    """
    Immutable rectangle in pixel coordinates.

    Width and height are validated on construction; a negative dimension
    raises ValueError.
    """

    x: Number = 0
    y: Number = 0
    width: Number = 0
    height: Number = 0

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rect dimensions must be non-negative, got "
                f"{self.width}x{self.height}"
            )

    @property
    def right(self) -> Number:
        return self.x + self.width

    @property
    def bottom(self) -> Number:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def moved(self, x: Optional[Number] = None, y: Optional[Number] = None) -> Rect:
        """Return a copy with a new origin, keeping the size."""
        return Rect(
            self.x if x is None else x,
            self.y if y is None else y,
            self.width,
            self.height,
        )

    def resized(
        self, width: Optional[Number] = None, height: Optional[Number] = None
    ) -> Rect:
        """Return a copy with a new size, keeping the origin."""
        return Rect(
            self.x,
            self.y,
            self.width if width is None else width,
            self.height if height is None else height,
        )

    def __str__(self) -> str:
        return f"Rect({self.width}x{self.height}+{self.x}+{self.y})"


ZERO_RECT = Rect(0, 0, 0, 0)


def vertical_overlap(a: Rect, b: Rect, min_overlap: Number = DEFAULT_MIN_OVERLAP) -> bool:
    """True if the rects share at least *min_overlap* pixels on the y axis."""
    overlap = min(a.bottom, b.bottom) - max(a.y, b.y)
    return overlap >= min_overlap


def horizontal_overlap(
    a: Rect, b: Rect, min_overlap: Number = DEFAULT_MIN_OVERLAP
) -> bool:
    """True if the rects share at least *min_overlap* pixels on the x axis."""
    overlap = min(a.right, b.right) - max(a.x, b.x)
    return overlap >= min_overlap


def right_edge(rect: Rect) -> Number:
    return rect.right


def bottom_edge(rect: Rect) -> Number:
    return rect.bottom


def center(rect: Rect) -> Point:
    return rect.center


def point_in_rect(point: Point, rect: Rect) -> bool:
    """Boundary-inclusive containment test."""
    return (
        rect.x <= point.x <= rect.x + rect.width
        and rect.y <= point.y <= rect.y + rect.height
    )


def is_near_edge(
    position: Number, edge: Number, threshold: Number = DEFAULT_EDGE_TOLERANCE
) -> bool:
    return abs(position - edge) <= threshold
