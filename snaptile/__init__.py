"""
snaptile

An automatic tiling engine for desktop windows: edge snapping,
neighbor-aware resizing, redistribution on add/remove, drag-to-swap,
drag-to-insert and gap filling.

This package provides:
- Geometry primitives and snap zone calculations
- A registry of tiled windows and their neighbor graph
- Planners that compute new layouts without touching windows
- A TileManager that drives the planners from host events

Example usage:
    from snaptile import TileManager, TilingConfig

    config = TilingConfig(inner_gap=8, outer_gap=8)
    manager = TileManager(host, config)  # host implements WindowHost
    manager.enable()

The host reports gestures by publishing the ``snaptile.topics.HOST_*``
topics on ``manager.bus``.
"""

__version__ = "0.1.0"

from .geometry import (
    Direction,
    Point,
    Rect,
    WindowEdges,
    horizontal_overlap,
    point_in_rect,
    vertical_overlap,
)

from .config import TilingConfig

from .layout_calculator import LayoutCalculator, SnapZone, ThirdPosition

from .registry import Neighbors, TileRegistry, WindowState

from .planners import (
    CorrectionPlan,
    GapPlanner,
    GapZone,
    InsertPlan,
    InsertZone,
    InsertZonePlanner,
    RedistributionPlanner,
    ResizePlan,
    ResizePropagator,
    SwapPlan,
    SwapPlanner,
    SwapTracker,
)

from .host import GrabOp, PeriodicTask, WindowHost, edges_for_grab_op

from .operation_manager import Operation, OperationManager, OpType

from .tile_manager import TileManager

from . import topics

__all__ = [
    # Version
    "__version__",
    # Geometry
    "Direction",
    "Point",
    "Rect",
    "WindowEdges",
    "horizontal_overlap",
    "point_in_rect",
    "vertical_overlap",
    # Configuration
    "TilingConfig",
    # Layout
    "LayoutCalculator",
    "SnapZone",
    "ThirdPosition",
    # Registry
    "Neighbors",
    "TileRegistry",
    "WindowState",
    # Planners
    "CorrectionPlan",
    "GapPlanner",
    "GapZone",
    "InsertPlan",
    "InsertZone",
    "InsertZonePlanner",
    "RedistributionPlanner",
    "ResizePlan",
    "ResizePropagator",
    "SwapPlan",
    "SwapPlanner",
    "SwapTracker",
    # Host
    "GrabOp",
    "PeriodicTask",
    "WindowHost",
    "edges_for_grab_op",
    # Operations
    "Operation",
    "OperationManager",
    "OpType",
    # Orchestration
    "TileManager",
    # Event topics
    "topics",
]
