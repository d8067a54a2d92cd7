"""
Unit tests for the crop geometry: primitives, convexity, layout and projection
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cardcrop.geometry import (
    CornerRole,
    CornerSet,
    Point2D,
    Rect,
    Size,
    clamp_to_rect,
    compute_display_rect,
    cross_product,
    is_convex,
    project_corners,
    project_to_source_space,
)


@pytest.fixture
def display_rect():
    """A 100x100 image letterboxed into a 200x100 container"""
    return Rect(50.0, 0.0, 100.0, 100.0)


class TestPrimitives:
    """Tests for points, rects and the cross product"""

    def test_rect_edges(self):
        rect = Rect(10, 20, 30, 40)
        assert (rect.min_x, rect.max_x, rect.min_y, rect.max_y) == (10, 40, 20, 60)
        assert rect.center == Point2D(25, 40)

    def test_cross_product_sign(self):
        """Turning one way is positive, the other negative, collinear is zero"""
        a, b = Point2D(0, 0), Point2D(10, 0)
        assert cross_product(a, b, Point2D(10, 10)) > 0
        assert cross_product(a, b, Point2D(10, -10)) < 0
        assert cross_product(a, b, Point2D(20, 0)) == 0

    def test_aspect_ratio_rejects_empty_size(self):
        with pytest.raises(ValueError, match="must be positive"):
            Size(0, 10).aspect_ratio


class TestClamp:
    """Tests for clamping drag positions"""

    def test_inside_point_unchanged(self, display_rect):
        assert clamp_to_rect(Point2D(75, 30), display_rect) == Point2D(75, 30)

    def test_clamps_to_nearest_corner(self, display_rect):
        assert clamp_to_rect(Point2D(10, -5), display_rect) == Point2D(50, 0)
        assert clamp_to_rect(Point2D(400, 400), display_rect) == Point2D(150, 100)

    def test_clamps_each_axis_independently(self, display_rect):
        """Only the offending axis moves"""
        assert clamp_to_rect(Point2D(0, 40), display_rect) == Point2D(50, 40)
        assert clamp_to_rect(Point2D(80, 250), display_rect) == Point2D(80, 100)

    def test_letterbox_margin_is_not_reachable(self, display_rect):
        """A point inside the container margin still lands on the image edge"""
        clamped = clamp_to_rect(Point2D(190, 50), display_rect)
        assert clamped.x == display_rect.max_x


class TestConvexity:
    """Tests for the convexity validator"""

    def test_rectangle_is_convex(self):
        corners = CornerSet.from_rect(Rect(0, 0, 10, 10))
        assert is_convex(corners)

    def test_perspective_quad_is_convex(self):
        corners = CornerSet.from_points([(120, 80), (480, 120), (440, 320), (180, 280)])
        assert is_convex(corners)

    def test_reverse_winding_is_convex(self):
        """Mirrored handles wind the other way but are still accepted"""
        corners = CornerSet.from_points([(10, 0), (0, 0), (0, 10), (10, 10)])
        assert is_convex(corners)

    def test_bowtie_is_not_convex(self):
        corners = CornerSet.from_points([(0, 0), (10, 0), (0, 10), (10, 10)])
        assert not is_convex(corners)

    def test_indented_corner_is_not_convex(self):
        corners = CornerSet.from_points([(0, 0), (10, 0), (5, 3), (0, 10)])
        assert not is_convex(corners)

    def test_collinear_corners_are_rejected(self):
        """A zero turn at one vertex counts as a mismatch"""
        corners = CornerSet.from_points([(0, 0), (10, 0), (20, 0), (0, 10)])
        assert not is_convex(corners)

    def test_collinear_first_vertex_is_rejected(self):
        corners = CornerSet.from_points([(5, 0), (10, 0), (10, 10), (0, 0)])
        assert not is_convex(corners)

    def test_all_points_equal_is_rejected(self):
        corners = CornerSet.from_points([(3, 3)] * 4)
        assert not is_convex(corners)


class TestCornerSet:
    """Tests for corner roles"""

    def test_from_rect_roles(self):
        corners = CornerSet.from_rect(Rect(1, 2, 3, 4))
        assert corners.top_left == Point2D(1, 2)
        assert corners.top_right == Point2D(4, 2)
        assert corners.bottom_right == Point2D(4, 6)
        assert corners.bottom_left == Point2D(1, 6)

    def test_with_corner_moves_one_role(self):
        corners = CornerSet.from_rect(Rect(0, 0, 10, 10))
        moved = corners.with_corner(CornerRole.BOTTOM_RIGHT, Point2D(7, 8))
        assert moved.bottom_right == Point2D(7, 8)
        assert moved.top_left == corners.top_left
        assert corners.bottom_right == Point2D(10, 10)

    def test_cycle_order(self):
        corners = CornerSet.from_rect(Rect(0, 0, 10, 10))
        assert corners.to_array().tolist() == [[0, 0], [10, 0], [10, 10], [0, 10]]

    def test_from_points_requires_four(self):
        with pytest.raises(ValueError, match="Expected 4 points"):
            CornerSet.from_points([(0, 0), (1, 0), (1, 1)])


class TestViewportMapper:
    """Tests for aspect-fit layout"""

    def test_square_in_square_fills_container(self):
        rect = compute_display_rect(Size(100, 100), Size(50, 50))
        assert rect == Rect(0, 0, 100, 100)

    def test_square_in_wide_container_is_centered(self):
        rect = compute_display_rect(Size(200, 100), Size(1000, 1000))
        assert rect == Rect(50, 0, 100, 100)
        # Equal margins on both sides
        assert rect.min_x == 200 - rect.max_x

    def test_wide_image_in_tall_container(self):
        rect = compute_display_rect(Size(256, 256), Size(64, 32))
        assert rect == Rect(0, 64, 256, 128)

    def test_tall_image_in_wide_container(self):
        rect = compute_display_rect(Size(400, 200), Size(50, 100))
        assert rect == Rect(150, 0, 100, 200)

    def test_equal_aspect_uses_width_branch(self):
        rect = compute_display_rect(Size(300, 200), Size(150, 100))
        assert rect.x == 0
        assert rect.width == 300

    def test_rejects_empty_container(self):
        with pytest.raises(ValueError):
            compute_display_rect(Size(0, 100), Size(10, 10))


class TestProjector:
    """Tests for the view to source projection"""

    def test_display_corners_map_to_image_corners(self, display_rect):
        """Full display rect maps onto the full image with the y axis inverted"""
        source = Size(400, 400)
        projected = project_corners(CornerSet.from_rect(display_rect), display_rect, source)

        assert projected.top_left == Point2D(0, 400)
        assert projected.top_right == Point2D(400, 400)
        assert projected.bottom_right == Point2D(400, 0)
        assert projected.bottom_left == Point2D(0, 0)

    def test_non_uniform_scale(self):
        rect = Rect(0, 64, 256, 128)
        point = project_to_source_space(Point2D(128, 96), rect, Size(64, 32))
        assert point == Point2D(32, 24)

    def test_no_pixel_snapping(self, display_rect):
        point = project_to_source_space(Point2D(50.5, 0.25), display_rect, Size(400, 400))
        assert point.x == pytest.approx(2.0)
        assert point.y == pytest.approx(399.0)

    def test_rejects_empty_display_rect(self):
        with pytest.raises(ValueError, match="positive size"):
            project_to_source_space(Point2D(0, 0), Rect(0, 0, 0, 10), Size(10, 10))
