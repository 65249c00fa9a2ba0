"""Tests for polygon math."""

import pytest
import numpy as np

from py_voronoid.core.polygon import (
    BoundingBox, bounding_box, cell_areas, clip_half_plane, inset_polygon,
    point_in_polygon, polygon_area, polygon_centroid, polygon_to_list, signed_area
)

SQUARE = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=float)
TRIANGLE = np.array([[0, 0], [6, 0], [0, 6]], dtype=float)


class TestArea:
    """Test area computation."""

    def test_square(self):
        assert polygon_area(SQUARE) == pytest.approx(100.0)

    def test_winding_independent(self):
        """Test that reversing the vertex order keeps the area."""
        assert polygon_area(SQUARE[::-1]) == pytest.approx(100.0)
        assert signed_area(SQUARE) == pytest.approx(-signed_area(SQUARE[::-1]))

    def test_degenerate(self):
        assert polygon_area([[0, 0], [1, 1]]) == 0.0
        assert polygon_area([]) == 0.0

    def test_cell_areas_with_collapsed(self):
        assert cell_areas([SQUARE, None, TRIANGLE]) == pytest.approx((100.0, 0.0, 18.0))


class TestCentroid:
    """Test centroid computation."""

    def test_square(self):
        np.testing.assert_allclose(polygon_centroid(SQUARE), [5, 5])

    def test_triangle(self):
        np.testing.assert_allclose(polygon_centroid(TRIANGLE), [2, 2])

    def test_collinear_falls_back_to_mean(self):
        """Test that a zero-area polygon returns the vertex mean."""
        line = np.array([[0, 0], [2, 0], [4, 0]], dtype=float)
        np.testing.assert_allclose(polygon_centroid(line), [2, 0])


class TestClipHalfPlane:
    """Test Sutherland-Hodgman clipping against one line."""

    def test_clip_in_half(self):
        """Test clipping a square down the middle keeps the left half."""
        clipped = clip_half_plane(SQUARE, (5, 0), (-1, 0))

        assert polygon_area(clipped) == pytest.approx(50.0)
        assert clipped[:, 0].max() == pytest.approx(5.0)

    def test_fully_inside(self):
        clipped = clip_half_plane(SQUARE, (20, 0), (-1, 0))
        np.testing.assert_allclose(clipped, SQUARE)

    def test_fully_outside(self):
        clipped = clip_half_plane(SQUARE, (-5, 0), (-1, 0))
        assert clipped.shape == (0, 2)

    def test_diagonal(self):
        """Test clipping along the diagonal keeps a triangle."""
        clipped = clip_half_plane(SQUARE, (0, 0), (1, -1))

        assert polygon_area(clipped) == pytest.approx(50.0)

    def test_input_unchanged(self):
        poly = SQUARE.copy()
        clip_half_plane(poly, (5, 5), (0, 1))
        np.testing.assert_array_equal(poly, SQUARE)


class TestInset:
    """Test polygon inset for the visual gap."""

    def test_square_inset(self):
        inset = inset_polygon(SQUARE, 1)

        assert polygon_area(inset) == pytest.approx(64.0)
        assert bounding_box(inset) == pytest.approx((1, 1, 9, 9))

    @pytest.mark.parametrize("poly", [SQUARE, SQUARE[::-1]])
    def test_inset_either_winding(self, poly):
        """Test that the inset moves inward regardless of winding."""
        assert polygon_area(inset_polygon(poly, 2)) == pytest.approx(36.0)

    def test_collapse_returns_original(self):
        """Test that an inset eating the whole polygon gives the input back."""
        assert inset_polygon(SQUARE, 6) is SQUARE

    def test_none_and_zero(self):
        assert inset_polygon(None, 5) is None
        assert inset_polygon(SQUARE, 0) is SQUARE


class TestPointInPolygon:

    def test_inside_and_outside(self):
        assert point_in_polygon((5, 5), SQUARE)
        assert not point_in_polygon((15, 5), SQUARE)
        assert not point_in_polygon((5, 5), None)


class TestHelpers:

    def test_bounding_box(self):
        box = bounding_box(TRIANGLE)

        assert box == BoundingBox(0, 0, 6, 6)
        assert box.width == 6
        assert box.height == 6

    def test_bounding_box_empty(self):
        with pytest.raises(ValueError):
            bounding_box([])

    def test_polygon_to_list(self):
        assert polygon_to_list(TRIANGLE) == [[0.0, 0.0], [6.0, 0.0], [0.0, 6.0]]
        assert polygon_to_list(None) is None


class TestUnitSquare:
    """Test closed-form values on the unit square."""

    def test_area_and_centroid(self):
        unit = [[0, 0], [1, 0], [1, 1], [0, 1]]

        assert polygon_area(unit) == 1.0
        np.testing.assert_allclose(polygon_centroid(unit), [0.5, 0.5])
        assert point_in_polygon(polygon_centroid(unit), unit)
        assert not point_in_polygon((1.5, 0.5), unit)
