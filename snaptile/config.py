"""
Tiling Configuration

Read-only settings consumed by the layout engine.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field, fields
from typing import List

log = logging.getLogger(__name__)


def _debug_from_env() -> bool:
    return bool(os.getenv("SNAPTILE_DEBUG"))


def _default_excluded_apps() -> List[str]:
    return [
        "org.gnome.Calculator",
        "org.gnome.Settings",
        "gnome-screenshot",
    ]


# Numeric settings that must be >= 0; bad values fall back to the default
_NON_NEGATIVE = (
    "inner_gap",
    "outer_gap",
    "snap_threshold",
    "neighbor_overlap_min",
    "edge_tolerance",
    "boundary_threshold",
)

# Numeric settings that must be > 0
_POSITIVE = (
    "min_window_width",
    "min_window_height",
    "resize_poll_interval",
    "drag_poll_interval",
)


@dataclass
class TilingConfig:
    """Tiling engine configuration."""

    # Gap between windows in pixels
    inner_gap: int = 8
    # Gap from work area edges in pixels
    outer_gap: int = 8

    # Distance from a work area edge that triggers a snap zone
    snap_threshold: int = 50

    # Neighbor detection
    neighbor_overlap_min: int = 50
    edge_tolerance: int = 10

    # Window size floor enforced by every planner
    min_window_width: int = 200
    min_window_height: int = 100

    # Cursor distance from a window edge that counts as an insert seam
    boundary_threshold: int = 20

    # WM_CLASS substrings that never enter the registry
    excluded_apps: List[str] = field(default_factory=_default_excluded_apps)

    # Tile new windows automatically (first maximizes, others redistribute)
    auto_tile: bool = True

    # Poll intervals in milliseconds
    resize_poll_interval: int = 50
    drag_poll_interval: int = 100

    debug: bool = field(default_factory=_debug_from_env)

    def __post_init__(self):
        """Replace invalid numeric values with their defaults."""
        defaults = {f.name: f.default for f in fields(self) if f.name in _NON_NEGATIVE + _POSITIVE}

        for name in _NON_NEGATIVE:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                log.warning(
                    "Invalid %s=%r, falling back to %r", name, value, defaults[name]
                )
                setattr(self, name, defaults[name])

        for name in _POSITIVE:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value <= 0:
                log.warning(
                    "Invalid %s=%r, falling back to %r", name, value, defaults[name]
                )
                setattr(self, name, defaults[name])

        if self.excluded_apps is None:
            self.excluded_apps = []

    @property
    def gap(self) -> int:
        """Gap used by the layout calculations."""
        return self.inner_gap

    def is_excluded_app(self, wm_class: str | None) -> bool:
        """Check if an app should be kept out of tiling.

        Args:
            wm_class: Window manager class (app identifier)

        Returns:
            True if any excluded entry is a case-insensitive substring
        """
        if not wm_class:
            return False
        lowered = wm_class.lower()
        return any(excluded.lower() in lowered for excluded in self.excluded_apps)
