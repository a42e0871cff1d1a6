"""
Tile Registry

Single source of truth for tiled-window rectangles and their neighbor
adjacency graph.
"""

from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Optional, Tuple

from pubsub import pub
from pubsub.core import Publisher

from . import topics
from .config import TilingConfig
from .geometry import (
    Direction,
    Rect,
    ZERO_RECT,
    horizontal_overlap,
    is_near_edge,
    vertical_overlap,
)

log = logging.getLogger(__name__)

WindowId = Hashable


@dataclass
class Neighbors:
    """Adjacent window ids, one ordered list per direction."""

    left: List[WindowId] = field(default_factory=list)
    right: List[WindowId] = field(default_factory=list)
    top: List[WindowId] = field(default_factory=list)
    bottom: List[WindowId] = field(default_factory=list)

    def get(self, direction: Direction) -> List[WindowId]:
        return getattr(self, direction.value)

    def discard(self, window_id: WindowId):
        """Drop an id from every direction."""
        self.left = [i for i in self.left if i != window_id]
        self.right = [i for i in self.right if i != window_id]
        self.top = [i for i in self.top if i != window_id]
        self.bottom = [i for i in self.bottom if i != window_id]

    def copy(self) -> Neighbors:
        return Neighbors(
            list(self.left), list(self.right), list(self.top), list(self.bottom)
        )


@dataclass
class WindowState:
    """Tiling state of one window."""

    id: WindowId
    rect: Rect = ZERO_RECT
    original_rect: Optional[Rect] = None
    zone: str = "none"
    is_tiled: bool = False
    neighbors: Neighbors = field(default_factory=Neighbors)


class ObserverErrorLogger:
    """Listener exception handler: log the failure and keep delivering."""

    def __call__(self, listener_id: str, topic_obj):
        log.exception(
            "Observer %s failed handling %s", listener_id, topic_obj.getName()
        )


_UNSET = object()


class TileRegistry:
    """
    Registry of window tiling state.

    Every mutation publishes on ``self.bus`` so observers can react. A
    failing observer is logged and never affects the registry or the
    other observers.

    Responsibilities:
    - Upsert/remove window state
    - Keep neighbor lists free of removed ids
    - Recompute the neighbor graph over all tiled windows
    """

    def __init__(self, config: Optional[TilingConfig] = None, bus: Optional[Publisher] = None):
        """Initialize the registry.

        Args:
            config: Tiling configuration (tolerance and overlap thresholds)
            bus: Event bus (Pypubsub publisher), a private one by default
        """
        self.config = config or TilingConfig()
        self.bus = bus if bus is not None else Publisher()
        self.bus.setListenerExcHandler(ObserverErrorLogger())
        self._windows: Dict[WindowId, WindowState] = {}
        self._batch_depth = 0
        self._pending: List[Tuple[str, dict]] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, listener: Callable, topic: str = topics.WINDOW_CHANGED):
        """Register a listener for a topic (held by weak reference)."""
        listener_obj, _ = self.bus.subscribe(listener, topic)
        return listener_obj

    def unsubscribe(self, listener: Callable, topic: str = topics.WINDOW_CHANGED):
        self.bus.unsubscribe(listener, topic)

    def unsubscribe_all(self):
        """Drop every observer registration on the bus."""
        self.bus.unsubAll()

    def publish(self, topic: str, **data):
        """Send a message, or queue it while a batch is open."""
        if self._batch_depth:
            self._pending.append((topic, data))
            return
        self.bus.sendMessage(topic, **data)

    @contextmanager
    def batch(self):
        """
        Hold back notifications until the outermost batch exits.

        Multi-window operations run inside a batch so observers never see
        a half-applied layout.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                pending, self._pending = self._pending, []
                for topic, data in pending:
                    self.bus.sendMessage(topic, **data)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    def set_window(
        self,
        window_id: WindowId,
        rect: Optional[Rect] = None,
        original_rect: Optional[Rect] = None,
        zone: Optional[str] = None,
        is_tiled: Optional[bool] = None,
        neighbors: Optional[Neighbors] = None,
    ) -> WindowState:
        """
        Add or update a window.

        Arguments left as None keep the existing value, or the baseline
        (zero rect, untiled, no neighbors) for a new entry. The original
        rect is recorded once and kept until the window is removed.

        Returns:
            The stored state
        """
        existing = self._windows.get(window_id)

        if existing is not None and existing.original_rect is not None:
            if original_rect is not None and original_rect != existing.original_rect:
                log.debug(
                    "Keeping original rect of %s, ignoring %s", window_id, original_rect
                )
            original_rect = existing.original_rect

        state = WindowState(
            id=window_id,
            rect=_pick(rect, existing.rect if existing else _UNSET, ZERO_RECT),
            original_rect=original_rect,
            zone=_pick(zone, existing.zone if existing else _UNSET, "none"),
            is_tiled=_pick(is_tiled, existing.is_tiled if existing else _UNSET, False),
            neighbors=_pick(
                neighbors,
                existing.neighbors if existing else _UNSET,
                Neighbors(),
            ),
        )

        self._windows[window_id] = state
        self.publish(topics.WINDOW_CHANGED, window_id=window_id, state=state)
        return state

    def get_window(self, window_id: WindowId) -> Optional[WindowState]:
        return self._windows.get(window_id)

    def __contains__(self, window_id: WindowId) -> bool:
        return window_id in self._windows

    def __len__(self) -> int:
        return len(self._windows)

    def remove_window(self, window_id: WindowId) -> Optional[WindowState]:
        """
        Remove a window and purge its id from all neighbor lists.

        Returns:
            The removed state, or None if the window was not tracked
        """
        state = self._windows.pop(window_id, None)
        if state is None:
            return None

        for other in self._windows.values():
            other.neighbors.discard(window_id)

        self.publish(topics.WINDOW_REMOVED, window_id=window_id)
        return state

    def untile_window(self, window_id: WindowId) -> Optional[Rect]:
        """
        Stop tracking a window and hand back its pre-tiling rectangle.

        Returns:
            The original rect, or None if there is nothing to restore
            (the window then stays tracked)
        """
        state = self._windows.get(window_id)
        if state is None or state.original_rect is None:
            return None
        self.remove_window(window_id)
        return state.original_rect

    def get_tiled_windows(self) -> List[WindowState]:
        """All tiled windows, in registration order."""
        return [w for w in self._windows.values() if w.is_tiled]

    def get_all_windows(self) -> List[WindowState]:
        return list(self._windows.values())

    def get_neighbors(
        self, window_id: WindowId, direction: Direction
    ) -> List[WindowState]:
        """Resolve a neighbor list to live states, skipping stale ids."""
        state = self._windows.get(window_id)
        if state is None:
            return []

        direction = Direction(direction)
        resolved = []
        for neighbor_id in state.neighbors.get(direction):
            neighbor = self._windows.get(neighbor_id)
            if neighbor is not None:
                resolved.append(neighbor)
        return resolved

    def clear(self):
        """Forget every window."""
        self._windows.clear()
        self.publish(topics.REGISTRY_CLEARED)

    # ------------------------------------------------------------------
    # Neighbor graph
    # ------------------------------------------------------------------
    def recalculate_neighbors(self):
        """
        Recompute neighbor lists for all tiled windows.

        Each ordered pair is classified independently, so the resulting
        graph is not guaranteed to be symmetric.
        """
        tiled = self.get_tiled_windows()

        for window in tiled:
            window.neighbors = self._find_neighbors(window, tiled)

        log.debug("Recalculated neighbors for %d windows", len(tiled))
        self.publish(topics.NEIGHBORS_RECALCULATED, count=len(tiled))

    def _find_neighbors(
        self, window: WindowState, candidates: List[WindowState]
    ) -> Neighbors:
        neighbors = Neighbors()
        tolerance = self.config.edge_tolerance
        min_overlap = self.config.neighbor_overlap_min
        w = window.rect

        for other in candidates:
            if other.id == window.id:
                continue
            o = other.rect

            if is_near_edge(w.right, o.x, tolerance) and vertical_overlap(w, o, min_overlap):
                neighbors.right.append(other.id)

            if is_near_edge(w.x, o.right, tolerance) and vertical_overlap(w, o, min_overlap):
                neighbors.left.append(other.id)

            if is_near_edge(w.bottom, o.y, tolerance) and horizontal_overlap(
                w, o, min_overlap
            ):
                neighbors.bottom.append(other.id)

            if is_near_edge(w.y, o.bottom, tolerance) and horizontal_overlap(
                w, o, min_overlap
            ):
                neighbors.top.append(other.id)

        return neighbors

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        """Return a summary of the registry."""
        lines = [f"=== TileRegistry ({len(self._windows)} windows) ==="]
        for window_id, state in self._windows.items():
            r = state.rect
            n = state.neighbors
            lines.append(
                f"    Window {window_id}: {r.width}x{r.height} at ({r.x}, {r.y}) "
                f"zone={state.zone} tiled={state.is_tiled}"
            )
            lines.append(
                f"      Neighbors: L={n.left} R={n.right} T={n.top} B={n.bottom}"
            )
        return "\n".join(lines)


def _pick(given, existing, default):
    if given is not None:
        return given
    if existing is not _UNSET:
        return existing
    return default


def log_all_events(topic=pub.AUTO_TOPIC, **kwargs):
    """Log every message published on a bus (debug tracing)."""
    data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items() if k != "topic")
    log.debug("EVENT: %s | %s", topic.getName(), data_str)
