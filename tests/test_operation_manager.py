"""
Unit tests for OperationManager.
"""

import pytest
from snaptile.geometry import Rect, WindowEdges
from snaptile.operation_manager import OperationManager, OpType
from snaptile.planners.resize import ResizePropagator

LEFT = Rect(8, 8, 948, 1064)
RIGHT = Rect(964, 8, 948, 1064)


@pytest.mark.unit
class TestOperationManager:
    """Test OperationManager state management."""

    @pytest.fixture
    def manager(self, registry):
        return OperationManager(ResizePropagator(registry))

    @pytest.fixture
    def halves(self, registry, tiled):
        tiled(1, LEFT)
        tiled(2, RIGHT)
        registry.recalculate_neighbors()

    def test_initial_state(self, manager):
        """Test OperationManager starts with no active operation."""
        assert not manager.is_active()
        assert manager.get_operation_type() == OpType.NONE
        assert manager.get_current_window() is None

    def test_start_move_operation(self, manager):
        """Test starting a move operation."""
        success = manager.start_move(1, LEFT)

        assert success is True
        assert manager.is_active()
        assert manager.get_operation_type() == OpType.MOVE
        assert manager.get_current_window() == 1
        assert manager.current.start_rect == LEFT

    def test_start_move_blocks_when_operation_active(self, manager):
        """Test starting move when operation already active."""
        manager.start_move(1, LEFT)

        assert manager.start_move(2, RIGHT) is False
        assert manager.get_current_window() == 1

    def test_start_resize_blocks_when_operation_active(self, manager):
        """Test starting resize when a move is running."""
        manager.start_move(1, LEFT)

        assert manager.start_resize(2, RIGHT, WindowEdges.LEFT) is False
        assert manager.get_operation_type() == OpType.MOVE

    def test_start_resize_operation(self, manager):
        """Test starting a resize operation."""
        success = manager.start_resize(1, LEFT, WindowEdges.RIGHT | WindowEdges.BOTTOM)

        assert success is True
        assert manager.get_operation_type() == OpType.RESIZE
        assert manager.current.resize_edges == WindowEdges.RIGHT | WindowEdges.BOTTOM

    def test_start_resize_with_no_edges(self, manager):
        """Test resize without edges defaults to NONE."""
        manager.start_resize(1, LEFT, None)

        assert manager.current.resize_edges == WindowEdges.NONE

    def test_end_operation(self, manager):
        """Test ending clears the operation and returns it."""
        manager.start_move(1, LEFT)

        op = manager.end_operation()

        assert op.window_id == 1
        assert not manager.is_active()
        assert manager.end_operation() is None

    @pytest.mark.usefixtures("halves")
    def test_resize_update_tracks_last_rect(self, manager):
        """Test each tick measures against the previous rect."""
        manager.start_resize(1, LEFT, WindowEdges.RIGHT)

        first = manager.handle_resize_update(LEFT.resized(width=998))
        second = manager.handle_resize_update(LEFT.resized(width=1048))

        assert first.neighbor_rects[2] == Rect(1014, 8, 898, 1064)
        # Nothing wrote the first plan back, so the registry rect is reused
        assert second.neighbor_rects[2].x == 964 + 50
        assert manager.current.last_rect == LEFT.resized(width=1048)

    @pytest.mark.usefixtures("halves")
    def test_resize_update_without_change(self, manager):
        """Test an unchanged rect produces no plan."""
        manager.start_resize(1, LEFT, WindowEdges.RIGHT)

        assert manager.handle_resize_update(LEFT) is None

    def test_resize_update_during_move(self, manager):
        """Test resize updates are ignored for moves."""
        manager.start_move(1, LEFT)

        assert manager.handle_resize_update(RIGHT) is None

    def test_revert_keeps_last_rect(self, manager, registry, tiled):
        """Test a reverted tick leaves last_rect at the reverted rect."""
        tiled(1, Rect(8, 8, 1696, 1064))
        tiled(2, Rect(1712, 8, 200, 1064))
        registry.recalculate_neighbors()
        start = Rect(8, 8, 1696, 1064)
        manager.start_resize(1, start, WindowEdges.RIGHT)

        plan = manager.handle_resize_update(start.resized(width=1750))

        assert plan.reverted
        assert manager.current.last_rect == start
