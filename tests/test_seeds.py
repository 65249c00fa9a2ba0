"""Tests for initial seed placement."""

import math

import pytest
import numpy as np

from py_voronoid.core.dataset import prepare_sites
from py_voronoid.core.seeds import (
    category_centers_from_seeds, init_seeds, place_category_centers, rank_categories
)
from py_voronoid.utils.random import make_rng


class TestRankCategories:
    """Test category ordering by total share."""

    def test_heaviest_first(self):
        sites = prepare_sites([
            {"label": "a", "value": 10, "category": "trauma"},
            {"label": "b", "value": 30, "category": "oncology"},
            {"label": "c", "value": 15, "category": "trauma"},
        ])

        assert rank_categories(sites)[:2] == ["oncology", "trauma"]

    def test_absent_categories_rank_last(self):
        """Test that every known category is ranked, empty ones in table order."""
        sites = prepare_sites([{"label": "a", "value": 1, "category": "infection"}])

        assert rank_categories(sites) == ["infection", "oncology", "degenerative", "digestive",
                                          "trauma", "reproductive", "other"]

    def test_ties_keep_table_order(self):
        sites = prepare_sites([
            {"label": "a", "value": 5, "category": "trauma"},
            {"label": "b", "value": 5, "category": "digestive"},
        ])

        assert rank_categories(sites)[:2] == ["digestive", "trauma"]


class TestCategoryCenters:
    """Test golden-angle spiral placement."""

    def test_single_category_at_center(self):
        centers = place_category_centers(["other"], 1200, 850)

        np.testing.assert_allclose(centers["other"], [600, 425])

    def test_spiral(self):
        centers = place_category_centers(["a", "b", "c"], 1000, 1000)

        np.testing.assert_allclose(centers["a"], [500, 500])
        # Half the max radius (0.3 * 1000) at one golden angle
        np.testing.assert_allclose(centers["b"], [500 + 150 * math.cos(2.4),
                                                  500 + 150 * math.sin(2.4)])
        np.testing.assert_allclose(centers["c"], [500 + 300 * math.cos(4.8),
                                                  500 + 300 * math.sin(4.8)])


class TestInitSeeds:
    """Test seed placement around category centers."""

    def test_second_category_center(self):
        """Test that the runner-up sits one sixth of the way out along the spiral."""
        sites = prepare_sites([
            {"label": "a", "value": 70, "category": "oncology"},
            {"label": "b", "value": 30, "category": "trauma"},
        ])

        layout = init_seeds(sites, 1000, 1000, 40, make_rng(1))

        np.testing.assert_allclose(layout.category_centers["oncology"], [500, 500])
        np.testing.assert_allclose(layout.category_centers["trauma"],
                                   [500 + 50 * math.cos(2.4), 500 + 50 * math.sin(2.4)])
        assert len(layout.category_centers) == 7

    def test_scripted_positions(self, twin_sites, twin_rng):
        layout = init_seeds(twin_sites, 1000, 1000, 40, twin_rng)

        assert layout.seeds.shape == (2, 2)
        np.testing.assert_allclose(layout.seeds, [[590, 500], [410, 500]], atol=1e-3)
        np.testing.assert_allclose(layout.category_centers["oncology"], [500, 500])

    def test_radius_range(self, twin_sites, scripted_random):
        """Test that a zero radius draw still lands 30px from the center."""
        layout = init_seeds(twin_sites, 1000, 1000, 40, scripted_random([0.0, 0.0]))

        np.testing.assert_allclose(layout.seeds[0], [530, 500])

    def test_clamped_inside_margin(self, twin_sites, scripted_random):
        layout = init_seeds(twin_sites, 250, 250, 40, scripted_random([0.0, 0.999999]))

        # 125 + 90 would overshoot; the limit is 250 - 40 - 20
        assert layout.seeds[0, 0] == pytest.approx(190)

    def test_reproducible_with_seeded_rng(self, three_sites):
        a = init_seeds(three_sites, 1200, 850, 40, make_rng(42))
        b = init_seeds(three_sites, 1200, 850, 40, make_rng(42))

        np.testing.assert_array_equal(a.seeds, b.seeds)

    def test_within_bounds(self, three_sites):
        for seed in range(10):
            layout = init_seeds(three_sites, 1200, 850, 40, make_rng(seed))

            assert np.all(layout.seeds[:, 0] >= 60) and np.all(layout.seeds[:, 0] <= 1140)
            assert np.all(layout.seeds[:, 1] >= 60) and np.all(layout.seeds[:, 1] <= 790)


class TestCentersFromSeeds:

    def test_mean_per_category(self):
        sites = prepare_sites([
            {"label": "a", "value": 1, "category": "trauma"},
            {"label": "b", "value": 1, "category": "trauma"},
            {"label": "c", "value": 1, "category": "oncology"},
        ])
        seeds = np.array([[100, 100], [300, 200], [700, 700]], dtype=float)

        centers = category_centers_from_seeds(seeds, sites)

        np.testing.assert_allclose(centers["trauma"], [200, 150])
        np.testing.assert_allclose(centers["oncology"], [700, 700])
