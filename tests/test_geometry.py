"""
Tests for circle vs rectangle collision.
"""

import pytest

from waterdrop.drop_core.geometry import circle_intersects_rect


class TestCircleIntersectsRect:
    """Test the clamp-and-measure collision helper."""

    def test_drop_below_top_pipe_hits(self):
        """Nearest point (110, 90) is 10 away from a radius-14 circle."""
        assert circle_intersects_rect(110, 100, 14, 100, 0, 84, 90)

    def test_drop_inside_gap_misses_both_pipes(self):
        """A gap from 50 to 190 fully contains a drop at y=100."""
        board_height = 640
        gap_y, gap_h = 50, 140
        assert not circle_intersects_rect(110, 100, 14, 100, 0, 84, gap_y)
        assert not circle_intersects_rect(
            110, 100, 14, 100, gap_y + gap_h, 84, board_height - (gap_y + gap_h)
        )

    def test_touching_counts_as_hit(self):
        """Distance exactly equal to the radius is a collision."""
        assert circle_intersects_rect(0, -14, 14, -5, 0, 10, 10)

    def test_just_outside_misses(self):
        assert not circle_intersects_rect(0, -14.001, 14, -5, 0, 10, 10)

    def test_centre_inside_rect(self):
        assert circle_intersects_rect(50, 50, 1, 0, 0, 100, 100)

    def test_corner_distance(self):
        """Diagonal from a corner uses both axes."""
        # Corner at (10, 10), centre at (20, 20): distance ~14.14
        assert not circle_intersects_rect(20, 20, 14, 0, 0, 10, 10)
        assert circle_intersects_rect(20, 20, 14.2, 0, 0, 10, 10)

    def test_zero_size_rect_is_a_point(self):
        """Degenerate rectangles are valid input."""
        assert circle_intersects_rect(3, 4, 5, 0, 0, 0, 0)
        assert not circle_intersects_rect(3, 4, 4.9, 0, 0, 0, 0)

    def test_zero_height_rect_is_a_segment(self):
        """A top pipe with gap_y == 0 has no height but still an edge."""
        assert circle_intersects_rect(50, 10, 14, 0, 0, 100, 0)
        assert not circle_intersects_rect(50, 20, 14, 0, 0, 100, 0)

    @pytest.mark.parametrize("cx,cy", [(-20, 50), (150, 50), (50, -20), (50, 150)])
    def test_far_on_each_side(self, cx, cy):
        assert not circle_intersects_rect(cx, cy, 14, 0, 0, 100, 100)
