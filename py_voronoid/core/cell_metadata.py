"""Per-cell metadata handed to the rendering layer."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from .categories import CATEGORIES
from .colors import category_color_variation
from .constants import LARGE_CELL_THRESHOLD, MEDIUM_CELL_THRESHOLD, SMALL_CELL_THRESHOLD
from .dataset import Site
from .polygon import cell_areas


class CellTier(str, Enum):
    """Size class of a cell, drives how much labelling it gets."""

    LARGE = "large"
    MEDIUM = "medium"
    SMALL = "small"
    TINY = "tiny"
    HIDDEN = "hidden"  # collapsed cell


@dataclass(frozen=True)
class CellMetadata:
    """Display data for one site, in input order."""
    index: int
    label: str
    display_label: str
    category: str
    percentage: str
    color: str
    text_color: Optional[str]
    area_fraction: float
    tier: CellTier


def classify_cell(area_fraction: float, collapsed: bool = False) -> CellTier:
    """Size tier from a cell's share of the total area."""
    if collapsed:
        return CellTier.HIDDEN
    if area_fraction > LARGE_CELL_THRESHOLD:
        return CellTier.LARGE
    if area_fraction > MEDIUM_CELL_THRESHOLD:
        return CellTier.MEDIUM
    if area_fraction > SMALL_CELL_THRESHOLD:
        return CellTier.SMALL
    return CellTier.TINY


def format_percentage(value: float, total: float) -> str:
    """Share as a percentage string: whole numbers from 1% up, one decimal below."""
    share = value / total if total else 0.0
    return f"{share * 100:.{0 if share >= 0.01 else 1}f}"


def build_cell_metadata(sites: Sequence[Site], raw_cells: Sequence[Optional[np.ndarray]],
                        total_area: float) -> List[CellMetadata]:
    """
    Build display metadata for every site.

    Colours vary within a category so neighbouring cells of the same
    group stay distinguishable.

    Args:
        sites: Sites in input order
        raw_cells: Cells before inset, used for the size tier
        total_area: Area of the bounds

    Returns:
        One CellMetadata per site
    """
    total_value = sum(s.value for s in sites)
    areas = cell_areas(raw_cells)
    seen: Dict[str, int] = {}

    metadata = []
    for site, cell, area in zip(sites, raw_cells, areas):
        count = seen.get(site.category, 0)
        seen[site.category] = count + 1

        fraction = area / total_area if total_area else 0.0
        metadata.append(CellMetadata(
            index=site.index,
            label=site.label,
            display_label=site.display_label or site.label,
            category=site.category,
            percentage=format_percentage(site.value, total_value),
            color=category_color_variation(CATEGORIES[site.category].color, count),
            text_color=site.text_color,
            area_fraction=fraction,
            tier=classify_cell(fraction, collapsed=cell is None),
        ))
    return metadata
