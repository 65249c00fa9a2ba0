"""Lloyd relaxation with a pull toward each site's category center."""

import numpy as np
from typing import Dict, Optional, Sequence

from .constants import CATEGORY_CLUSTER_STRENGTH, LLOYD_STEP_RATIO
from .dataset import Site
from .polygon import polygon_centroid


def lloyd_step(seeds, cells: Sequence[Optional[np.ndarray]],
               category_centers: Dict[str, np.ndarray], sites: Sequence[Site],
               step_ratio: float = LLOYD_STEP_RATIO,
               cluster_strength: float = CATEGORY_CLUSTER_STRENGTH) -> np.ndarray:
    """
    Perform one step of Lloyd's relaxation.

    Each seed moves step_ratio of the way to its cell centroid, then
    cluster_strength of the remaining way to its category center. Seeds
    of collapsed cells stay put.

    Args:
        seeds: (N, 2) current seed positions
        cells: Cell polygons from the last build
        category_centers: Attractor per category key
        sites: Sites, for their categories
        step_ratio: Fraction of the way toward the centroid
        cluster_strength: Fraction of the way toward the category center

    Returns:
        New (N, 2) seed array
    """
    seeds = np.asarray(seeds, dtype=float)
    relaxed = seeds.copy()

    for i, cell in enumerate(cells):
        if cell is None or len(cell) < 3:
            continue

        centroid = polygon_centroid(cell)
        moved = seeds[i] + (centroid - seeds[i]) * step_ratio

        center = category_centers.get(sites[i].category)
        if center is not None:
            moved = moved + (center - moved) * cluster_strength

        relaxed[i] = moved

    return relaxed
