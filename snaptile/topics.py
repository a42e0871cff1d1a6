"""
Event Topics for the snaptile engine

All pub/sub topics are defined here for easy discovery and documentation.
Topic naming convention: <category>.<action>

Every publisher of a topic sends the same keyword arguments, listed in
the topic's docstring. Listeners must accept those names (or **kwargs).
"""

# Registry events
WINDOW_CHANGED = "registry.window_changed"
"""Published after set_window. Params: window_id, state (WindowState)"""

WINDOW_REMOVED = "registry.window_removed"
"""Published after a tracked window is removed. Params: window_id"""

REGISTRY_CLEARED = "registry.cleared"
"""Published after the registry is cleared. No params."""

NEIGHBORS_RECALCULATED = "registry.neighbors_recalculated"
"""Published after a full neighbor recompute. Params: count (tiled windows)"""

# Preview events (advisory, carry no mutation)
SNAP_ZONE_CHANGED = "preview.snap_zone"
"""Snap zone under the cursor changed. Params: zone (SnapZone or None), monitor, rect (Rect or None)"""

SWAP_TARGET_CHANGED = "preview.swap_target"
"""Pending swap target changed. Params: dragged_id, target_id (or None), target_rect, drag_start_rect"""

INSERT_ZONE_CHANGED = "preview.insert_zone"
"""Insert seam under the cursor changed. Params: zone (InsertZone or None)"""

GAP_ZONE_CHANGED = "preview.gap_zone"
"""Fillable gap under the cursor changed. Params: zone (GapZone or None)"""

# Layout events
LAYOUT_REDISTRIBUTED = "layout.redistributed"
"""Published after a full-row re-layout was applied. Params: reason (str), rects (dict id -> Rect)"""

LAYOUT_CORRECTED = "layout.corrected"
"""Published after overlap correction moved windows. Params: primary_id, rects (dict id -> Rect)"""

# Host bridge events (published by the host adapter, consumed by TileManager)
HOST_WINDOW_CREATED = "host.window_created"
"""A window appeared on the host. Params: window_id"""

HOST_WINDOW_REMOVED = "host.window_removed"
"""A window was destroyed on the host. Params: window_id"""

HOST_GRAB_BEGIN = "host.grab_begin"
"""User started a move/resize grab. Params: window_id, op (GrabOp)"""

HOST_GRAB_END = "host.grab_end"
"""User released a move/resize grab. Params: window_id, op (GrabOp)"""
