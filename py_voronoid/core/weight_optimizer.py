"""Weight correction step for matching cell areas to target fractions."""

import numpy as np
import structlog
from typing import List, NamedTuple, Optional, Sequence

from .constants import WEIGHT_GAIN
from .polygon import polygon_area
from .power_diagram import compute_power_diagram

logger = structlog.get_logger()


class WeightStep(NamedTuple):
    """Outcome of one optimization step."""
    weights: np.ndarray
    cells: List[Optional[np.ndarray]]
    max_error: float


def calculate_targets(values: Sequence[float]) -> np.ndarray:
    """
    Convert raw values to target area fractions.

    Args:
        values: Non-negative item values with a positive sum

    Returns:
        Fractions that sum to 1
    """
    values = np.asarray(values, dtype=float)
    total = values.sum()
    if total <= 0:
        raise ValueError("Values must have a positive total")
    return values / total


def area_errors(cells: Sequence[Optional[np.ndarray]], targets, total_area: float) -> np.ndarray:
    """
    Relative area error of every cell: (target * total - area) / total.

    Collapsed cells get NaN so callers can mask them out.
    """
    errors = np.full(len(cells), np.nan)
    for i, cell in enumerate(cells):
        if cell is not None:
            errors[i] = (targets[i] * total_area - polygon_area(cell)) / total_area
    return errors


def max_abs_error(errors: np.ndarray) -> float:
    """Largest absolute error among non-collapsed cells, 0 if none."""
    alive = errors[~np.isnan(errors)]
    return float(np.max(np.abs(alive))) if len(alive) else 0.0


def optimize_weights(seeds, weights, targets, bounds, total_area: float,
                     gain: float = WEIGHT_GAIN) -> WeightStep:
    """
    Perform one weight correction step.

    Builds the diagram with the current weights, then moves each weight
    by its relative area error scaled by the total area and the gain.
    Collapsed cells are skipped: they neither get corrected nor count
    toward max_error.

    Args:
        seeds: (N, 2) site positions
        weights: Current weights
        targets: Target area fractions (sum to 1)
        bounds: Clip rectangle
        total_area: Area of the bounds
        gain: Correction gain

    Returns:
        WeightStep with the new weights, the cells measured this step and
        the largest absolute error among non-collapsed cells
    """
    cells = compute_power_diagram(seeds, weights, bounds)
    errors = area_errors(cells, targets, total_area)
    alive = ~np.isnan(errors)

    new_weights = np.array(weights, dtype=float, copy=True)
    new_weights[alive] += errors[alive] * total_area * gain

    collapsed = int(np.count_nonzero(~alive))
    if collapsed:
        # Collapsed cells get no correction; relaxation has to revive them
        logger.debug("Collapsed cells skipped", collapsed=collapsed)

    return WeightStep(weights=new_weights, cells=cells, max_error=max_abs_error(errors))
