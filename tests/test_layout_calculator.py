"""
Unit tests for snap zone geometry.
"""

import logging

import pytest
from snaptile.config import TilingConfig
from snaptile.geometry import Point, Rect
from snaptile.layout_calculator import LayoutCalculator, SnapZone, ThirdPosition


@pytest.fixture
def calculator(config):
    return LayoutCalculator(config)


@pytest.mark.unit
class TestZoneRects:
    """Test calculate_zone_rect."""

    def test_left_half(self, calculator, standard_area):
        """Test left half on 1920x1080 with gap 8."""
        rect = calculator.calculate_zone_rect("left", standard_area)

        assert rect == Rect(8, 8, 948, 1064)

    def test_right_half(self, calculator, standard_area):
        """Test right half mirrors the left with the same gap."""
        rect = calculator.calculate_zone_rect(SnapZone.RIGHT, standard_area)

        assert rect == Rect(964, 8, 948, 1064)
        assert standard_area.right - rect.right == 8

    def test_maximize_and_top(self, calculator, standard_area):
        """Test full work area minus gap on each side."""
        expected = Rect(8, 8, 1904, 1064)

        assert calculator.calculate_zone_rect("maximize", standard_area) == expected
        assert calculator.calculate_zone_rect("top", standard_area) == expected

    def test_quadrants(self, calculator, standard_area):
        """Test each corner zone."""
        half_w = (1920 - 24) // 2
        half_h = (1080 - 24) // 2

        assert calculator.calculate_zone_rect("left-top", standard_area) == Rect(
            8, 8, half_w, half_h
        )
        assert calculator.calculate_zone_rect("right-bottom", standard_area) == Rect(
            1920 - half_w - 8, 1080 - half_h - 8, half_w, half_h
        )
        assert calculator.calculate_zone_rect("left-bottom", standard_area).x == 8
        assert calculator.calculate_zone_rect("right-top", standard_area).y == 8

    def test_offset_work_area(self, calculator):
        """Test zone placement honors the work area origin."""
        area = Rect(1920, 32, 1920, 1048)

        rect = calculator.calculate_zone_rect("left", area)

        assert rect.x == 1928
        assert rect.y == 40

    def test_unknown_zone_falls_back_to_maximize(self, calculator, standard_area, caplog):
        """Test unknown zones are logged and maximized."""
        with caplog.at_level(logging.WARNING):
            rect = calculator.calculate_zone_rect("diagonal", standard_area)

        assert rect == Rect(8, 8, 1904, 1064)
        assert "diagonal" in caplog.text

    def test_gap_override(self, calculator, standard_area):
        """Test explicit gap argument."""
        rect = calculator.calculate_zone_rect("left", standard_area, gap=0)

        assert rect == Rect(0, 0, 960, 1080)

    def test_minimum_work_area_gives_positive_rects(self, calculator):
        """Test every zone stays at least 1px at 6x gap."""
        area = Rect(0, 0, 48, 48)

        for zone in SnapZone:
            rect = calculator.calculate_zone_rect(zone, area)
            assert rect.width >= 1
            assert rect.height >= 1


@pytest.mark.unit
class TestThirds:
    """Test thirds and two-thirds."""

    def test_thirds_are_equal_and_gapped(self, calculator, standard_area):
        """Test three columns separated by the gap."""
        left = calculator.calculate_third(standard_area, ThirdPosition.LEFT)
        middle = calculator.calculate_third(standard_area, "center")
        right = calculator.calculate_third(standard_area, "right")

        assert left.width == middle.width == right.width == (1920 - 32) // 3
        assert middle.x - left.right == 8
        assert right.x - middle.right == 8

    def test_two_thirds_spans_two_columns(self, calculator, standard_area):
        """Test two-thirds merges two thirds plus the gap."""
        third = calculator.calculate_third(standard_area, "left")
        two = calculator.calculate_two_thirds(standard_area, "left")

        assert two.width == third.width * 2 + 8
        assert two.x == 8

    def test_two_thirds_right(self, calculator, standard_area):
        """Test right-aligned two-thirds keeps the outer gap."""
        two = calculator.calculate_two_thirds(standard_area, "right")

        assert standard_area.right - two.right == 8

    def test_unknown_positions_fall_back(self, calculator, standard_area):
        """Test invalid positions maximize."""
        maximized = Rect(8, 8, 1904, 1064)

        assert calculator.calculate_third(standard_area, "nowhere") == maximized
        assert calculator.calculate_two_thirds(standard_area, "center") == maximized


@pytest.mark.unit
class TestUltrawide:
    """Test aspect ratio classification."""

    def test_ultrawide(self, ultrawide_area):
        """Test 21:9 counts as ultrawide."""
        assert LayoutCalculator.is_ultrawide(ultrawide_area)

    def test_standard(self, standard_area):
        """Test 16:9 does not."""
        assert not LayoutCalculator.is_ultrawide(standard_area)

    def test_exactly_two_to_one(self):
        """Test the ratio must exceed 2.0."""
        assert not LayoutCalculator.is_ultrawide(Rect(0, 0, 2000, 1000))


@pytest.mark.unit
class TestDetectZone:
    """Test cursor zone detection."""

    def test_edges(self, calculator, standard_area):
        """Test plain edges."""
        assert calculator.detect_zone(Point(10, 500), standard_area) == SnapZone.LEFT
        assert calculator.detect_zone(Point(1900, 500), standard_area) == SnapZone.RIGHT
        assert calculator.detect_zone(Point(900, 10), standard_area) == SnapZone.TOP

    def test_corners_win(self, calculator, standard_area):
        """Test corners take priority over edges."""
        assert calculator.detect_zone(Point(10, 10), standard_area) == SnapZone.LEFT_TOP
        assert (
            calculator.detect_zone(Point(1900, 1070), standard_area)
            == SnapZone.RIGHT_BOTTOM
        )

    def test_bottom_edge_alone_is_not_a_zone(self, calculator, standard_area):
        """Test the bottom band outside the corners."""
        assert calculator.detect_zone(Point(900, 1070), standard_area) is None
        assert not calculator.in_edge_zone(Point(900, 1070), standard_area)

    def test_center_is_not_a_zone(self, calculator, standard_area):
        """Test the middle of the screen."""
        assert calculator.detect_zone(Point(960, 540), standard_area) is None
        assert not calculator.in_edge_zone(Point(960, 540), standard_area)

    def test_threshold_from_config(self, standard_area):
        """Test snap_threshold drives the band width."""
        calculator = LayoutCalculator(TilingConfig(snap_threshold=100, debug=False))

        assert calculator.detect_zone(Point(80, 500), standard_area) == SnapZone.LEFT
        assert calculator.in_edge_zone(Point(80, 500), standard_area)
