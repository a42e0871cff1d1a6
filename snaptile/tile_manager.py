"""
Tile Manager

Wires the registry, calculator and planners to a window host: reacts to
host events, runs the drag and resize polls, and applies the plans the
planners produce.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from pubsub import pub

from . import topics
from .config import TilingConfig
from .geometry import Rect, vertical_overlap
from .host import GrabOp, PeriodicTask, WindowHost, edges_for_grab_op, is_resize_op
from .layout_calculator import LayoutCalculator, SnapZone
from .operation_manager import OperationManager, OpType
from .planners import (
    GapPlanner,
    GapZone,
    InsertZone,
    InsertZonePlanner,
    RedistributionPlanner,
    ResizePropagator,
    SwapPlan,
    SwapPlanner,
    SwapTracker,
)
from .registry import TileRegistry, WindowId, WindowState, log_all_events

log = logging.getLogger(__name__)

# Overlap correction passes per trigger (the first pass plus one re-check)
MAX_CORRECTION_PASSES = 2


@dataclass
class DragPreview:
    """Preview state of the move drag in progress."""

    window_id: WindowId
    start_rect: Rect
    swap: Optional[SwapTracker] = None
    snap_zone: Optional[SnapZone] = None
    snap_monitor: Optional[int] = None
    insert_zone: Optional[InsertZone] = None
    gap_zone: Optional[GapZone] = None


class TileManager:
    """
    Tiling orchestrator.

    Responsibilities:
    - Auto-tile new windows and redistribute after removal or untile
    - Poll move drags for snap, insert, swap and gap previews
    - Commit the drop with precedence snap > insert > swap > gap
    - Poll resizes and push neighbors out of the way
    - Correct overlaps left behind by host size constraints
    """

    def __init__(
        self,
        host: WindowHost,
        config: Optional[TilingConfig] = None,
        registry: Optional[TileRegistry] = None,
    ):
        """Initialize the manager.

        Args:
            host: Window management capability
            config: Tiling configuration (the registry's when omitted)
            registry: Shared registry, a new one by default
        """
        self.host = host
        if config is None:
            config = registry.config if registry is not None else TilingConfig()
        self.config = config
        self.registry = registry if registry is not None else TileRegistry(config)
        self.bus = self.registry.bus

        self.calculator = LayoutCalculator(config)
        self.resize_propagator = ResizePropagator(self.registry, config)
        self.redistribution = RedistributionPlanner(config, self.calculator)
        self.swap_planner = SwapPlanner(self.registry)
        self.gap_planner = GapPlanner(config)
        self.insert_planner = InsertZonePlanner(config)
        self.operations = OperationManager(self.resize_propagator)

        self.enabled = False
        self._drag: Optional[DragPreview] = None
        self._poll: Optional[PeriodicTask] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def enable(self):
        """Start listening to host events."""
        if self.enabled:
            return

        self.registry.subscribe(self.handle_window_created, topics.HOST_WINDOW_CREATED)
        self.registry.subscribe(self.handle_window_removed, topics.HOST_WINDOW_REMOVED)
        self.registry.subscribe(self.handle_grab_begin, topics.HOST_GRAB_BEGIN)
        self.registry.subscribe(self.handle_grab_end, topics.HOST_GRAB_END)

        if self.config.debug:
            self.registry.subscribe(log_all_events, pub.ALL_TOPICS)

        self.enabled = True
        log.info("Tiling enabled")

    def disable(self):
        """Stop polling, drop all state and every bus subscription."""
        self._cancel_poll()
        self._drag = None
        self.operations.end_operation()

        self.registry.clear()
        self.registry.unsubscribe_all()

        self.enabled = False
        log.info("Tiling disabled")

    # ------------------------------------------------------------------
    # Window lifecycle
    # ------------------------------------------------------------------
    def handle_window_created(self, window_id: WindowId):
        wm_class = self.host.get_wm_class(window_id)
        if self.config.is_excluded_app(wm_class):
            log.debug("Excluding app: %s", wm_class)
            return

        if window_id in self.registry:
            return

        if self.config.auto_tile:
            self.auto_tile_window(window_id)

    def auto_tile_window(self, window_id: WindowId) -> Dict[WindowId, Rect]:
        """
        Tile a new window: maximized when alone on its monitor, otherwise
        appended and every column redistributed equally.

        Returns:
            The applied rects
        """
        original = self.host.get_rect(window_id)
        if original is None:
            log.warning("Cannot auto-tile %s, window is gone", window_id)
            return {}

        monitor = self.host.get_monitor_for_window(window_id)
        work_area = self.host.get_work_area(monitor)
        existing = self._live_tiled(monitor, exclude=window_id)

        rects, zone = self.redistribution.plan_auto_tile(window_id, existing, work_area)

        with self.registry.batch():
            self.registry.set_window(
                window_id,
                rect=rects[window_id],
                original_rect=original,
                zone=zone,
                is_tiled=True,
            )
            self._apply_rects(rects)
            self.registry.recalculate_neighbors()
            self.registry.publish(
                topics.LAYOUT_REDISTRIBUTED, reason="auto-tile", rects=rects
            )

        log.info("Auto-tiled %s (%s) with %d windows", window_id, zone, len(rects))
        self._log_state()
        return rects

    def handle_window_removed(self, window_id: WindowId):
        if self._drag is not None and self._drag.window_id == window_id:
            self._cancel_drag()
        if self.operations.get_current_window() == window_id:
            self._cancel_poll()
            self.operations.end_operation()

        state = self.registry.remove_window(window_id)
        if state is None:
            return

        log.info("Window removed: %s", window_id)
        if state.is_tiled:
            self.redistribute("removal", self._monitor_near(state.rect))

    def untile_window(self, window_id: WindowId) -> Optional[Rect]:
        """
        Restore a window to its pre-tiling rect and close the hole it
        leaves behind.

        Returns:
            The restored rect, or None if the window cannot be untiled
        """
        state = self.registry.get_window(window_id)
        if state is None or state.original_rect is None:
            return None
        if not self.host.window_exists(window_id):
            log.warning("Cannot untile %s, window is gone", window_id)
            return None

        monitor = self.host.get_monitor_for_window(window_id)
        rect = self.registry.untile_window(window_id)
        self.host.move_resize(window_id, rect)
        self.redistribute("untile", monitor)

        log.info("Untiled window %s", window_id)
        return rect

    # ------------------------------------------------------------------
    # Redistribution
    # ------------------------------------------------------------------
    def redistribute(
        self, reason: str, monitor: Optional[int] = None
    ) -> Dict[WindowId, Rect]:
        """
        Give every live tiled window on a monitor an equal column.

        Args:
            reason: Recorded on the layout.redistributed message
            monitor: Monitor to re-layout, the first tiled window's when None

        Returns:
            The applied rects
        """
        if monitor is None:
            live = self._live_tiled()
            if not live:
                return {}
            monitor = self.host.get_monitor_for_window(live[0].id)

        windows = self._live_tiled(monitor)
        if not windows:
            return {}

        work_area = self.host.get_work_area(monitor)
        rects = self.redistribution.redistribute(windows, work_area)

        with self.registry.batch():
            self._apply_rects(rects)
            self.registry.recalculate_neighbors()
            self.registry.publish(topics.LAYOUT_REDISTRIBUTED, reason=reason, rects=rects)

        log.info("Redistributed %d windows after %s", len(rects), reason)
        self._log_state()
        return rects

    def correct_layout_overlaps(
        self,
        primary_id: WindowId,
        monitor: int,
        passes_left: int = MAX_CORRECTION_PASSES,
    ) -> Dict[WindowId, Rect]:
        """
        Re-read the real rects of the primary window's row and re-pack
        them if the host's size constraints made them overlap.

        Returns:
            Every rect changed, across all passes
        """
        work_area = self.host.get_work_area(monitor)
        actual = self._row_rects(primary_id, monitor)

        # The host may have overridden requested sizes
        with self.registry.batch():
            for window_id, rect in actual.items():
                if self.registry.get_window(window_id).rect != rect:
                    self.registry.set_window(window_id, rect=rect)

        plan = self.redistribution.correct_overlaps(primary_id, actual, work_area)
        if not plan.needed:
            return {}
        if passes_left <= 0:
            log.warning(
                "Layout still overlaps after %d passes", MAX_CORRECTION_PASSES
            )
            return {}

        with self.registry.batch():
            self._apply_rects(plan.rects)
            self.registry.recalculate_neighbors()
            self.registry.publish(
                topics.LAYOUT_CORRECTED, primary_id=primary_id, rects=dict(plan.rects)
            )

        changed = dict(plan.rects)
        if plan.shrunk_primary:
            changed.update(
                self.correct_layout_overlaps(primary_id, monitor, passes_left - 1)
            )
        return changed

    def _row_rects(self, primary_id: WindowId, monitor: int) -> Dict[WindowId, Rect]:
        """Live rects of the tiled windows sharing the primary's row."""
        actual = {}
        for window in self._live_tiled(monitor):
            rect = self.host.get_rect(window.id)
            if rect is not None:
                actual[window.id] = rect

        primary = actual.get(primary_id)
        if primary is None:
            return actual

        min_overlap = self.config.neighbor_overlap_min
        return {
            wid: rect
            for wid, rect in actual.items()
            if wid == primary_id or vertical_overlap(primary, rect, min_overlap)
        }

    # ------------------------------------------------------------------
    # Commits
    # ------------------------------------------------------------------
    def snap_window(
        self,
        window_id: WindowId,
        zone: Union[SnapZone, str],
        monitor: int,
        original_rect: Optional[Rect] = None,
    ) -> Rect:
        """Tile a window into a snap zone and return its new rect."""
        work_area = self.host.get_work_area(monitor)
        target = self.calculator.calculate_zone_rect(zone, work_area)
        if original_rect is None:
            original_rect = self.host.get_rect(window_id)
        zone_name = zone.value if isinstance(zone, SnapZone) else str(zone)

        with self.registry.batch():
            self.registry.set_window(
                window_id,
                rect=target,
                original_rect=original_rect,
                zone=zone_name,
                is_tiled=True,
            )
            self.host.move_resize(window_id, target)
            self.registry.recalculate_neighbors()

        log.info("Snapped %s to %s: %s", window_id, zone_name, target)
        self._log_state()
        return target

    def swap_windows(self, plan: SwapPlan) -> bool:
        """Exchange two windows' positions and zones."""
        if not self.host.window_exists(plan.target_id):
            log.warning("Target window %s not found for swap", plan.target_id)
            return False

        with self.registry.batch():
            self.host.move_resize(plan.dragged_id, plan.dragged_rect)
            self.host.move_resize(plan.target_id, plan.target_rect)
            self.registry.set_window(
                plan.dragged_id, rect=plan.dragged_rect, zone=plan.dragged_zone
            )
            self.registry.set_window(
                plan.target_id, rect=plan.target_rect, zone=plan.target_zone
            )
            self.registry.recalculate_neighbors()

        log.info("Swapped %s <-> %s", plan.dragged_id, plan.target_id)
        self._log_state()
        return True

    def insert_window(
        self,
        window_id: WindowId,
        zone: InsertZone,
        monitor: int,
        original_rect: Optional[Rect] = None,
    ) -> Dict[WindowId, Rect]:
        """Drop a window into a seam, scaling the row to make room."""
        work_area = self.host.get_work_area(monitor)
        existing = self._live_tiled(monitor, exclude=window_id)
        if original_rect is None:
            original_rect = self.host.get_rect(window_id)

        plan = self.redistribution.plan_insert(
            window_id, zone.position, existing, work_area
        )

        with self.registry.batch():
            self.registry.set_window(
                window_id,
                rect=plan.new_rect,
                original_rect=original_rect,
                zone=plan.zone,
                is_tiled=True,
            )
            self._apply_rects(plan.rects)
            self.registry.recalculate_neighbors()
            self.registry.publish(
                topics.LAYOUT_REDISTRIBUTED, reason="insert", rects=plan.rects
            )

        log.info("Inserted %s at %s", window_id, zone.position)
        self.correct_layout_overlaps(window_id, monitor)
        self._log_state()
        return plan.rects

    def fill_gap(
        self,
        window_id: WindowId,
        zone: GapZone,
        original_rect: Optional[Rect] = None,
    ) -> Rect:
        """Place a window so it exactly fills a gap."""
        if original_rect is None:
            original_rect = self.host.get_rect(window_id)

        with self.registry.batch():
            self.host.move_resize(window_id, zone.rect)
            self.registry.set_window(
                window_id,
                rect=zone.rect,
                original_rect=original_rect,
                zone="gap-fill",
                is_tiled=True,
            )
            self.registry.recalculate_neighbors()

        log.info("Gap fill: %s is %spx wide", window_id, zone.rect.width)
        self._log_state()
        return zone.rect

    # ------------------------------------------------------------------
    # Grabs
    # ------------------------------------------------------------------
    def handle_grab_begin(self, window_id: WindowId, op: GrabOp):
        if op == GrabOp.MOVING:
            self._begin_drag(window_id)
        elif is_resize_op(op):
            self._begin_resize(window_id, op)

    def handle_grab_end(self, window_id: WindowId, op: GrabOp):
        if self._drag is not None and self._drag.window_id == window_id:
            self._end_drag()
        elif (
            self.operations.get_operation_type() == OpType.RESIZE
            and self.operations.get_current_window() == window_id
        ):
            self._end_resize()

    def _begin_drag(self, window_id: WindowId):
        if self.config.is_excluded_app(self.host.get_wm_class(window_id)):
            return
        rect = self.host.get_rect(window_id)
        if rect is None:
            return
        if not self.operations.start_move(window_id, rect):
            log.debug("Ignoring drag of %s, another operation is active", window_id)
            return

        state = self.registry.get_window(window_id)
        swap = None
        if state is not None and state.is_tiled:
            swap = SwapTracker(self.swap_planner, window_id, state.rect)

        self._drag = DragPreview(window_id=window_id, start_rect=rect, swap=swap)
        self._start_poll(self.config.drag_poll_interval, self._drag_tick, "drag poll")
        log.debug("Drag started: %s", window_id)

    def _drag_tick(self) -> bool:
        drag = self._drag
        if drag is None:
            return False
        if not self.host.window_exists(drag.window_id):
            log.debug("Dragged window %s is gone", drag.window_id)
            self._cancel_drag()
            return False

        pointer = self.host.get_pointer()
        monitor = self.host.get_monitor_for_point(pointer.x, pointer.y)
        if monitor < 0:
            self._set_snap(drag, None, None)
            self._set_insert(drag, None)
            self._set_gap(drag, None)
            return True

        work_area = self.host.get_work_area(monitor)
        self._set_snap(drag, self.calculator.detect_zone(pointer, work_area), monitor)

        if drag.swap is not None:
            live = self.host.get_rect(drag.window_id)
            if live is not None and drag.swap.update(live):
                self._publish_swap_target(drag)

        if self.calculator.in_edge_zone(pointer, work_area):
            self._set_insert(drag, None)
            self._set_gap(drag, None)
            return True

        others = self._live_tiled(monitor, exclude=drag.window_id)
        self._set_insert(
            drag, self.insert_planner.find_insert_zone(pointer, others, work_area)
        )
        self._set_gap(drag, self.gap_planner.find_gap(pointer, others, work_area))
        return True

    def _end_drag(self):
        drag = self._drag
        # Final tick so the drop uses the cursor position at release
        self._drag_tick()
        self._cancel_poll()
        self._drag = None
        self.operations.end_operation()

        if not self.host.window_exists(drag.window_id):
            return

        pointer = self.host.get_pointer()
        monitor = self.host.get_monitor_for_point(pointer.x, pointer.y)
        in_edge = monitor >= 0 and self.calculator.in_edge_zone(
            pointer, self.host.get_work_area(monitor)
        )

        snap_zone, snap_monitor = drag.snap_zone, drag.snap_monitor
        insert_zone, gap_zone = drag.insert_zone, drag.gap_zone
        swap_plan = drag.swap.release(in_edge) if drag.swap is not None else None
        self._clear_previews(drag)

        if snap_zone is not None:
            self.snap_window(drag.window_id, snap_zone, snap_monitor, drag.start_rect)
        elif insert_zone is not None:
            self.insert_window(drag.window_id, insert_zone, monitor, drag.start_rect)
        elif swap_plan is not None:
            self.swap_windows(swap_plan)
        elif gap_zone is not None:
            self.fill_gap(drag.window_id, gap_zone, drag.start_rect)

    def _cancel_drag(self):
        drag = self._drag
        self._cancel_poll()
        self._drag = None
        self.operations.end_operation()
        if drag is not None:
            self._clear_previews(drag)

    def _begin_resize(self, window_id: WindowId, op: GrabOp):
        state = self.registry.get_window(window_id)
        if state is None or not state.is_tiled:
            log.debug("Resize ignored, %s is not tiled", window_id)
            return
        rect = self.host.get_rect(window_id)
        if rect is None:
            return

        edges = edges_for_grab_op(op)
        if not self.operations.start_resize(window_id, rect, edges):
            return

        self._start_poll(self.config.resize_poll_interval, self._resize_tick, "resize poll")
        log.info("Resize started: %s edges=%r", window_id, edges)

    def _resize_tick(self) -> bool:
        op = self.operations.current
        if op is None or op.type != OpType.RESIZE:
            return False
        if not self.host.window_exists(op.window_id):
            log.debug("Resized window %s is gone", op.window_id)
            self.operations.end_operation()
            return False

        current = self.host.get_rect(op.window_id)
        plan = self.operations.handle_resize_update(current)
        if plan is None:
            return True

        with self.registry.batch():
            for neighbor_id, rect in plan.neighbor_rects.items():
                if not self.host.window_exists(neighbor_id):
                    log.warning("Skipping stale neighbor %s", neighbor_id)
                    continue
                self.host.move_resize(neighbor_id, rect)
                self.host.raise_window(neighbor_id)
                self.registry.set_window(neighbor_id, rect=rect)

            if plan.reverted:
                self.host.move_resize(op.window_id, plan.revert_rect)
                self.registry.set_window(op.window_id, rect=plan.revert_rect)
            else:
                self.registry.set_window(op.window_id, rect=current)
        return True

    def _end_resize(self):
        self._resize_tick()
        self._cancel_poll()
        op = self.operations.end_operation()
        if op is None or not self.host.window_exists(op.window_id):
            return

        final = self.host.get_rect(op.window_id)
        with self.registry.batch():
            self.registry.set_window(op.window_id, rect=final)
            self.registry.recalculate_neighbors()

        log.info("Resize complete: %s %sx%s", op.window_id, final.width, final.height)
        monitor = self.host.get_monitor_for_window(op.window_id)
        self.correct_layout_overlaps(op.window_id, monitor)
        self._log_state()

    # ------------------------------------------------------------------
    # Previews
    # ------------------------------------------------------------------
    def _set_snap(self, drag: DragPreview, zone: Optional[SnapZone], monitor: Optional[int]):
        if zone == drag.snap_zone and (zone is None or monitor == drag.snap_monitor):
            return
        drag.snap_zone = zone
        drag.snap_monitor = monitor if zone is not None else None

        rect = None
        if zone is not None:
            rect = self.calculator.calculate_zone_rect(
                zone, self.host.get_work_area(monitor)
            )
        log.debug("Snap zone: %s on monitor %s", zone, monitor)
        self.bus.sendMessage(
            topics.SNAP_ZONE_CHANGED, zone=zone, monitor=drag.snap_monitor, rect=rect
        )

    def _set_insert(self, drag: DragPreview, zone: Optional[InsertZone]):
        if zone == drag.insert_zone:
            return
        drag.insert_zone = zone
        if zone is not None:
            log.debug("Insert zone: %s at %s", zone.orientation, zone.position)
        self.bus.sendMessage(topics.INSERT_ZONE_CHANGED, zone=zone)

    def _set_gap(self, drag: DragPreview, zone: Optional[GapZone]):
        if zone == drag.gap_zone:
            return
        drag.gap_zone = zone
        self.bus.sendMessage(topics.GAP_ZONE_CHANGED, zone=zone)

    def _publish_swap_target(self, drag: DragPreview):
        target_id = drag.swap.target_id if drag.swap is not None else None
        target = self.registry.get_window(target_id) if target_id is not None else None
        self.bus.sendMessage(
            topics.SWAP_TARGET_CHANGED,
            dragged_id=drag.window_id,
            target_id=target_id,
            target_rect=target.rect if target is not None else None,
            drag_start_rect=drag.swap.drag_start_rect if drag.swap is not None else None,
        )

    def _clear_previews(self, drag: DragPreview):
        """Withdraw every preview still shown for a finished drag."""
        self._set_snap(drag, None, None)
        self._set_insert(drag, None)
        self._set_gap(drag, None)
        if drag.swap is not None and drag.swap.target_id is not None:
            drag.swap.target_id = None
            self._publish_swap_target(drag)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _start_poll(self, interval_ms: int, body, name: str):
        self._cancel_poll()
        self._poll = PeriodicTask(self.host, interval_ms, body, name)
        self._poll.start()

    def _cancel_poll(self):
        if self._poll is not None:
            self._poll.cancel()
            self._poll = None

    def _live_tiled(
        self, monitor: Optional[int] = None, exclude: Optional[WindowId] = None
    ) -> List[WindowState]:
        """Tiled windows that still exist on the host, optionally on one monitor."""
        existing = set(self.host.list_windows())
        result = []
        for window in self.registry.get_tiled_windows():
            if window.id == exclude or window.id not in existing:
                continue
            if monitor is not None and self.host.get_monitor_for_window(window.id) != monitor:
                continue
            result.append(window)
        return result

    def _apply_rects(self, rects: Dict[WindowId, Rect]):
        for window_id, rect in rects.items():
            if not self.host.window_exists(window_id):
                log.warning("Window %s not found, skipping", window_id)
                continue
            self.host.move_resize(window_id, rect)
            self.registry.set_window(window_id, rect=rect)

    def _monitor_near(self, rect: Rect) -> Optional[int]:
        """Monitor under a rect's center, None when off-screen."""
        point = rect.center
        monitor = self.host.get_monitor_for_point(point.x, point.y)
        return monitor if monitor >= 0 else None

    def _log_state(self):
        if log.isEnabledFor(logging.DEBUG):
            log.debug("%s", self.registry.dump_state())
