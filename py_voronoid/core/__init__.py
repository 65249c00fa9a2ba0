"""
Core layout engine functionality.
"""

from . import constants
from .polygon import (
    BoundingBox, polygon_area, polygon_centroid, clip_half_plane,
    inset_polygon, point_in_polygon, bounding_box
)
from .power_diagram import compute_power_diagram, get_bounds, calculate_total_area
from .weight_optimizer import WeightStep, optimize_weights, calculate_targets
from .dataset import DataItem, Site, prepare_sites
from .seeds import SeedLayout, init_seeds, category_centers_from_seeds
from .relaxation import lloyd_step
from .orchestrator import LayoutEngine, LayoutResult, LayoutStatus, RunProgress, RunState
from .errors import LayoutError, InvalidDatasetError, LayoutNotReadyError

__all__ = ['constants', 'BoundingBox', 'polygon_area', 'polygon_centroid', 'clip_half_plane',
           'inset_polygon', 'point_in_polygon', 'bounding_box',
           'compute_power_diagram', 'get_bounds', 'calculate_total_area',
           'WeightStep', 'optimize_weights', 'calculate_targets',
           'DataItem', 'Site', 'prepare_sites',
           'SeedLayout', 'init_seeds', 'category_centers_from_seeds', 'lloyd_step',
           'LayoutEngine', 'LayoutResult', 'LayoutStatus', 'RunProgress', 'RunState',
           'LayoutError', 'InvalidDatasetError', 'LayoutNotReadyError']
