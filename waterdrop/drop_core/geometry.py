"""
Geometry
========

Collision helpers shared by the rules and the tests.
"""

from __future__ import annotations


def circle_intersects_rect(
    cx: float,
    cy: float,
    r: float,
    rx: float,
    ry: float,
    rw: float,
    rh: float
) -> bool:
    """
    Test a circle against an axis-aligned rectangle.

    The circle centre is clamped into the rectangle to find the nearest
    rectangle point; touching counts as a hit. Zero-size rectangles are
    valid and collapse to an edge or corner.

    Args:
        cx, cy: Circle centre.
        r: Circle radius.
        rx, ry: Rectangle top-left corner.
        rw, rh: Rectangle width and height.

    Returns:
        True if the circle and rectangle overlap.
    """
    closest_x = max(rx, min(cx, rx + rw))
    closest_y = max(ry, min(cy, ry + rh))
    dx = cx - closest_x
    dy = cy - closest_y
    return dx * dx + dy * dy <= r * r
