"""
Initial seed placement clustered by category.

Category centers sit on a golden-angle spiral around the canvas center:
the heaviest category in the middle, lighter ones further out. Each
site starts at a random offset from its category center.
"""

import math
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np
import structlog

from .constants import (
    CATEGORY_SPREAD, EDGE_MARGIN, FULL_TURN, GOLDEN_ANGLE,
    SEED_RADIUS_MAX, SEED_RADIUS_MIN
)
from .categories import CATEGORIES
from .dataset import Site
from ..utils.random import RandomSource, make_rng

logger = structlog.get_logger()


class SeedLayout(NamedTuple):
    """Starting positions plus the per-category attractors."""
    seeds: np.ndarray
    category_centers: Dict[str, np.ndarray]


def rank_categories(sites: Sequence[Site]) -> List[str]:
    """Every known category, heaviest total target first.

    Categories without sites count as 0 and end up furthest out. Ties
    keep the order of CATEGORIES.
    """
    totals: Dict[str, float] = {}
    for site in sites:
        totals[site.category] = totals.get(site.category, 0.0) + site.target
    return sorted(CATEGORIES, key=lambda cat: -totals.get(cat, 0.0))


def place_category_centers(categories: Sequence[str], width: float,
                           height: float) -> Dict[str, np.ndarray]:
    """
    Spread category centers on a golden-angle spiral.

    Args:
        categories: Category keys, largest first
        width: Canvas width
        height: Canvas height

    Returns:
        Mapping of category key to [x, y] center
    """
    cx = width / 2
    cy = height / 2
    max_radius = min(width, height) * CATEGORY_SPREAD
    steps = (len(categories) - 1) or 1

    centers = {}
    for i, cat in enumerate(categories):
        radius = (i / steps) * max_radius
        angle = i * GOLDEN_ANGLE
        centers[cat] = np.array([cx + math.cos(angle) * radius,
                                 cy + math.sin(angle) * radius])
    return centers


def init_seeds(sites: Sequence[Site], width: float, height: float, pad: float,
               rng: Optional[RandomSource] = None) -> SeedLayout:
    """
    Place one seed per site near its category center.

    Args:
        sites: Sites to place
        width: Canvas width
        height: Canvas height
        pad: Canvas padding
        rng: Random source; a fresh numpy Generator when omitted

    Returns:
        SeedLayout with an (N, 2) seed array and the category centers
    """
    rng = rng if rng is not None else make_rng()
    centers = place_category_centers(rank_categories(sites), width, height)

    lo_x, hi_x = pad + EDGE_MARGIN, width - pad - EDGE_MARGIN
    lo_y, hi_y = pad + EDGE_MARGIN, height - pad - EDGE_MARGIN

    seeds = np.zeros((len(sites), 2))
    for i, site in enumerate(sites):
        center = centers[site.category]
        angle = rng.random() * FULL_TURN
        r = SEED_RADIUS_MIN + rng.random() * (SEED_RADIUS_MAX - SEED_RADIUS_MIN)

        seeds[i, 0] = min(max(center[0] + math.cos(angle) * r, lo_x), hi_x)
        seeds[i, 1] = min(max(center[1] + math.sin(angle) * r, lo_y), hi_y)

    logger.debug("Seeds initialized", sites=len(sites), categories=len(centers))
    return SeedLayout(seeds=seeds, category_centers=centers)


def category_centers_from_seeds(seeds, sites: Sequence[Site]) -> Dict[str, np.ndarray]:
    """Mean seed position of every category, used before a drag re-optimization."""
    seeds = np.asarray(seeds, dtype=float)
    grouped: Dict[str, List[int]] = {}
    for i, site in enumerate(sites):
        grouped.setdefault(site.category, []).append(i)
    return {cat: seeds[idx].mean(axis=0) for cat, idx in grouped.items()}
