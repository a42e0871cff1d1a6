"""
Unit tests for gap and insert zone detection.
"""

import pytest
from snaptile.geometry import Point, Rect
from snaptile.planners.gaps import GapPlanner, GapZone
from snaptile.planners.insert_zone import InsertZonePlanner
from snaptile.registry import WindowState


def state(window_id, rect):
    return WindowState(id=window_id, rect=rect, is_tiled=True)


@pytest.fixture
def gap_planner(config):
    return GapPlanner(config)


@pytest.fixture
def insert_planner(config):
    return InsertZonePlanner(config)


@pytest.mark.unit
class TestGapPlanner:
    """Test fillable gap lookup."""

    def test_gap_between_windows(self, gap_planner, standard_area):
        """Test the middle gap between two narrow windows."""
        tiled = [state(1, Rect(8, 8, 600, 1064)), state(2, Rect(1312, 8, 600, 1064))]

        zone = gap_planner.find_gap(Point(960, 500), tiled, standard_area)

        assert zone == GapZone(Rect(616, 8, 688, 1064))

    def test_left_edge_gap(self, gap_planner, standard_area):
        """Test the gap between the work area edge and the first window."""
        tiled = [state(1, Rect(700, 8, 1212, 1064))]

        zone = gap_planner.find_gap(Point(300, 500), tiled, standard_area)

        assert zone.rect == Rect(8, 8, 684, 1064)

    def test_right_edge_gap(self, gap_planner, standard_area):
        """Test the gap after the last window."""
        tiled = [state(1, Rect(8, 8, 948, 1064))]

        zone = gap_planner.find_gap(Point(1400, 500), tiled, standard_area)

        assert zone.rect == Rect(964, 8, 948, 1064)

    def test_cursor_inside_window(self, gap_planner, standard_area):
        """Test a cursor over a window rejects every gap."""
        tiled = [state(1, Rect(8, 8, 600, 1064))]

        assert gap_planner.find_gap(Point(300, 500), tiled, standard_area) is None

    def test_narrow_gap_rejected(self, gap_planner, standard_area):
        """Test gaps narrower than the minimum width."""
        tiled = [state(1, Rect(8, 8, 900, 1064)), state(2, Rect(1100, 8, 812, 1064))]

        assert gap_planner.find_gap(Point(1000, 500), tiled, standard_area) is None

    def test_unsorted_input(self, gap_planner, standard_area):
        """Test windows are ordered by x before scanning."""
        tiled = [state(2, Rect(1312, 8, 600, 1064)), state(1, Rect(8, 8, 600, 1064))]

        zone = gap_planner.find_gap(Point(960, 500), tiled, standard_area)

        assert zone.rect.x == 616

    def test_no_windows(self, gap_planner, standard_area):
        """Test an empty work area has no gap to fill."""
        assert gap_planner.find_gap(Point(960, 500), [], standard_area) is None

    def test_seam_of_full_row_is_not_a_gap(self, gap_planner, standard_area):
        """Test the 8px seam of a full row is not a gap."""
        tiled = [state(1, Rect(8, 8, 948, 1064)), state(2, Rect(964, 8, 948, 1064))]

        assert gap_planner.find_gap(Point(960, 500), tiled, standard_area) is None


@pytest.mark.unit
class TestInsertZonePlanner:
    """Test seam detection."""

    def test_seam_at_right_edge(self, insert_planner, standard_area):
        """Test cursor near the right edge of a window with a neighbor beyond."""
        tiled = [state(1, Rect(8, 8, 948, 1064)), state(2, Rect(964, 8, 948, 1064))]

        zone = insert_planner.find_insert_zone(Point(950, 500), tiled, standard_area)

        assert zone.orientation == "vertical"
        assert zone.position == 956
        assert zone.affected_ids == (1, 2)
        assert zone.preview_rect == Rect(856, 8, 200, 1064)

    def test_seam_at_left_edge(self, insert_planner, standard_area):
        """Test cursor near the left edge of the second window."""
        tiled = [state(2, Rect(964, 8, 948, 1064)), state(1, Rect(8, 8, 948, 1064))]

        zone = insert_planner.find_insert_zone(Point(970, 500), tiled, standard_area)

        assert zone.position == 964
        assert zone.affected_ids == (2, 1)

    def test_threshold_is_strict(self, insert_planner, standard_area):
        """Test the cursor must be closer than the boundary threshold."""
        tiled = [state(1, Rect(8, 8, 948, 1064)), state(2, Rect(964, 8, 948, 1064))]

        assert insert_planner.find_insert_zone(Point(936, 500), tiled, standard_area) is None

    def test_edge_without_neighbor(self, insert_planner, standard_area):
        """Test an outer edge is not a seam."""
        tiled = [state(1, Rect(8, 8, 948, 1064))]

        assert insert_planner.find_insert_zone(Point(950, 500), tiled, standard_area) is None

    def test_far_neighbor_is_not_a_seam(self, insert_planner, standard_area):
        """Test windows farther apart than two gaps."""
        tiled = [state(1, Rect(8, 8, 900, 1064)), state(2, Rect(930, 8, 982, 1064))]

        assert insert_planner.find_insert_zone(Point(910, 500), tiled, standard_area) is None
