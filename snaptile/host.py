"""
Host Bridge

The window-management capability the engine is given at construction,
the grab operation kinds it reports, and a cancellable periodic task
built on the host's timers.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Callable, List, Optional

from .geometry import Point, Rect, WindowEdges
from .registry import WindowId

log = logging.getLogger(__name__)


class GrabOp(Enum):
    """Kind of user grab reported by the host."""

    NONE = auto()
    MOVING = auto()
    RESIZING_N = auto()
    RESIZING_NE = auto()
    RESIZING_E = auto()
    RESIZING_SE = auto()
    RESIZING_S = auto()
    RESIZING_SW = auto()
    RESIZING_W = auto()
    RESIZING_NW = auto()


_GRAB_EDGES = {
    GrabOp.RESIZING_N: WindowEdges.TOP,
    GrabOp.RESIZING_NE: WindowEdges.TOP | WindowEdges.RIGHT,
    GrabOp.RESIZING_E: WindowEdges.RIGHT,
    GrabOp.RESIZING_SE: WindowEdges.BOTTOM | WindowEdges.RIGHT,
    GrabOp.RESIZING_S: WindowEdges.BOTTOM,
    GrabOp.RESIZING_SW: WindowEdges.BOTTOM | WindowEdges.LEFT,
    GrabOp.RESIZING_W: WindowEdges.LEFT,
    GrabOp.RESIZING_NW: WindowEdges.TOP | WindowEdges.LEFT,
}


def is_resize_op(op: GrabOp) -> bool:
    return op in _GRAB_EDGES


def edges_for_grab_op(op: GrabOp) -> WindowEdges:
    """Edges being dragged for a resize grab (NONE for anything else)."""
    return _GRAB_EDGES.get(op, WindowEdges.NONE)


class WindowHost(ABC):
    """
    Window management operations the engine needs from its host.

    Implementations wrap a compositor or window manager. Gesture events
    (window created/removed, grab begin/end) are delivered by publishing
    the ``host.*`` topics on the registry's bus.
    """

    @abstractmethod
    def get_rect(self, window_id: WindowId) -> Optional[Rect]:
        """Current on-screen rect, or None if the window is gone."""
        pass

    @abstractmethod
    def move_resize(self, window_id: WindowId, rect: Rect):
        """Ask the host to place a window. The host may adjust the size."""
        pass

    @abstractmethod
    def raise_window(self, window_id: WindowId):
        pass

    @abstractmethod
    def get_work_area(self, monitor: int) -> Rect:
        pass

    @abstractmethod
    def get_monitor_for_window(self, window_id: WindowId) -> int:
        pass

    @abstractmethod
    def get_monitor_for_point(self, x: float, y: float) -> int:
        """Monitor index under a point, negative when outside every monitor."""
        pass

    @abstractmethod
    def list_windows(self) -> List[WindowId]:
        """Ids of the normal windows on the active workspace."""
        pass

    @abstractmethod
    def get_pointer(self) -> Point:
        pass

    @abstractmethod
    def add_timer(self, interval_ms: int, callback: Callable[[], bool]) -> Any:
        """
        Call *callback* every *interval_ms* until it returns False.

        Returns:
            Handle accepted by remove_timer
        """
        pass

    @abstractmethod
    def remove_timer(self, handle: Any):
        pass

    def window_exists(self, window_id: WindowId) -> bool:
        return window_id in self.list_windows()

    def get_wm_class(self, window_id: WindowId) -> str:
        return ""


class PeriodicTask:
    """
    Cancellable repeating task on a host timer.

    The body runs once per tick. Returning False, or raising, stops the
    task; an exception is logged and never reaches the host loop.
    """

    def __init__(self, host: WindowHost, interval_ms: int, body: Callable[[], Optional[bool]], name: str = "task"):
        self.host = host
        self.interval_ms = interval_ms
        self.body = body
        self.name = name
        self._handle = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self):
        """Start ticking. Returns the timer ticket."""
        if self._handle is None:
            self._handle = self.host.add_timer(self.interval_ms, self._tick)
        return self._handle

    def cancel(self):
        """Stop ticking; safe to call more than once."""
        if self._handle is not None:
            self.host.remove_timer(self._handle)
            self._handle = None

    def _tick(self) -> bool:
        if self._handle is None:
            return False
        try:
            keep_going = self.body()
        except Exception:
            log.exception("Periodic %s failed, stopping", self.name)
            keep_going = False

        if keep_going is False:
            self.cancel()
            return False
        return True
