"""
Operation Manager

Tracks the interactive move or resize currently in progress.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from .geometry import Rect, WindowEdges

if TYPE_CHECKING:
    from .planners.resize import ResizePlan, ResizePropagator
    from .registry import WindowId


class OpType(Enum):
    """Type of interactive operation."""

    NONE = auto()
    MOVE = auto()
    RESIZE = auto()


@dataclass
class Operation:
    """Represents an active interactive operation."""

    type: OpType
    window_id: "WindowId"
    start_rect: Rect
    last_rect: Rect
    resize_edges: WindowEdges = WindowEdges.NONE


class OperationManager:
    """Manages interactive move and resize operations."""

    def __init__(self, resize_propagator: "ResizePropagator"):
        """Initialize operation manager.

        Args:
            resize_propagator: Planner consulted on every resize update
        """
        self.current: Optional[Operation] = None
        self.resize_propagator = resize_propagator

    def is_active(self) -> bool:
        """Check if an operation is currently active."""
        return self.current is not None

    def get_operation_type(self) -> OpType:
        """Get the current operation type."""
        return self.current.type if self.current else OpType.NONE

    def start_move(self, window_id: "WindowId", rect: Rect) -> bool:
        """Start an interactive move operation.

        Args:
            window_id: The window to move
            rect: Its rect when the drag started

        Returns:
            True if operation started, False if operation already active
        """
        if self.current is not None:
            return False

        self.current = Operation(
            type=OpType.MOVE,
            window_id=window_id,
            start_rect=rect,
            last_rect=rect,
        )
        return True

    def start_resize(self, window_id: "WindowId", rect: Rect, edges: WindowEdges) -> bool:
        """Start an interactive resize operation.

        Args:
            window_id: The window to resize
            rect: Its rect when the resize started
            edges: Which edges to resize from

        Returns:
            True if operation started, False if operation already active
        """
        if self.current is not None:
            return False

        self.current = Operation(
            type=OpType.RESIZE,
            window_id=window_id,
            start_rect=rect,
            last_rect=rect,
            resize_edges=edges if edges else WindowEdges.NONE,
        )
        return True

    def handle_resize_update(self, current_rect: Rect) -> Optional["ResizePlan"]:
        """Plan neighbor updates for the latest rect of the resizing window.

        Args:
            current_rect: Rect the host reports for the window now

        Returns:
            The plan, or None when no resize is active or nothing moved
        """
        op = self.current
        if op is None or op.type != OpType.RESIZE:
            return None
        if current_rect == op.last_rect:
            return None

        plan = self.resize_propagator.propagate_rect_change(
            op.window_id, op.resize_edges, op.last_rect, current_rect
        )

        # A reverted resize leaves the window where it was last tick
        op.last_rect = plan.revert_rect if plan.reverted else current_rect
        return plan

    def end_operation(self) -> Optional[Operation]:
        """End the current operation and return it."""
        op, self.current = self.current, None
        return op

    def get_current_window(self) -> Optional["WindowId"]:
        """Get the window involved in the current operation."""
        return self.current.window_id if self.current else None
