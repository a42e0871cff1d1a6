"""
Layout planners

Each planner reads registry state and returns proposed rectangles; none
of them moves a window.
"""

from .gaps import GapPlanner, GapZone
from .insert_zone import InsertZone, InsertZonePlanner
from .redistribution import CorrectionPlan, InsertPlan, RedistributionPlanner
from .resize import ResizePlan, ResizePropagator
from .swap import SwapPlan, SwapPlanner, SwapTracker

__all__ = [
    "GapPlanner",
    "GapZone",
    "InsertZone",
    "InsertZonePlanner",
    "CorrectionPlan",
    "InsertPlan",
    "RedistributionPlanner",
    "ResizePlan",
    "ResizePropagator",
    "SwapPlan",
    "SwapPlanner",
    "SwapTracker",
]
