"""
Shared pytest fixtures for snaptile tests.
"""

import pytest

from snaptile.config import TilingConfig
from snaptile.geometry import Point, Rect
from snaptile.host import WindowHost
from snaptile.registry import TileRegistry


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without a real host")


class FakeHost(WindowHost):
    """In-memory window host with manually stepped timers."""

    def __init__(self, work_areas=None):
        self.work_areas = work_areas or [Rect(0, 0, 1920, 1080)]
        self.rects = {}
        self.wm_classes = {}
        self.pointer = Point(960, 540)
        self.raised = []
        self.moves = []
        # Minimum width the "compositor" enforces on move_resize
        self.min_widths = {}
        self.timers = {}
        self._next_timer = 1

    def add_window(self, window_id, rect, wm_class=""):
        self.rects[window_id] = rect
        self.wm_classes[window_id] = wm_class

    def close_window(self, window_id):
        self.rects.pop(window_id, None)

    def get_rect(self, window_id):
        return self.rects.get(window_id)

    def move_resize(self, window_id, rect):
        min_width = self.min_widths.get(window_id)
        if min_width is not None and rect.width < min_width:
            rect = rect.resized(width=min_width)
        self.moves.append((window_id, rect))
        self.rects[window_id] = rect

    def raise_window(self, window_id):
        self.raised.append(window_id)

    def get_work_area(self, monitor):
        return self.work_areas[monitor]

    def get_monitor_for_window(self, window_id):
        rect = self.rects.get(window_id)
        if rect is None:
            return 0
        center = rect.center
        return max(self.get_monitor_for_point(center.x, center.y), 0)

    def get_monitor_for_point(self, x, y):
        for index, area in enumerate(self.work_areas):
            if area.x <= x < area.right and area.y <= y < area.bottom:
                return index
        return -1

    def list_windows(self):
        return list(self.rects)

    def get_wm_class(self, window_id):
        return self.wm_classes.get(window_id, "")

    def get_pointer(self):
        return self.pointer

    def add_timer(self, interval_ms, callback):
        handle = self._next_timer
        self._next_timer += 1
        self.timers[handle] = callback
        return handle

    def remove_timer(self, handle):
        self.timers.pop(handle, None)

    def tick(self, times=1):
        """Run every active timer callback."""
        for _ in range(times):
            for handle, callback in list(self.timers.items()):
                if handle in self.timers and not callback():
                    self.timers.pop(handle, None)


@pytest.fixture
def standard_area():
    """Standard 1920x1080 work area."""
    return Rect(0, 0, 1920, 1080)


@pytest.fixture
def ultrawide_area():
    """Ultrawide 3440x1440 work area."""
    return Rect(0, 0, 3440, 1440)


@pytest.fixture
def config():
    """Default configuration with debug tracing off."""
    return TilingConfig(debug=False)


@pytest.fixture
def registry(config):
    """Empty registry on a private bus."""
    return TileRegistry(config)


@pytest.fixture
def fake_host():
    """Single-monitor 1920x1080 fake host."""
    return FakeHost()


@pytest.fixture
def tiled(registry):
    """Factory fixture registering a tiled window."""

    def _tiled(window_id, rect, zone="left", original_rect=None):
        return registry.set_window(
            window_id,
            rect=rect,
            original_rect=original_rect,
            zone=zone,
            is_tiled=True,
        )

    return _tiled


@pytest.fixture
def host_factory():
    """Factory fixture for fake hosts with custom work areas."""
    return FakeHost
