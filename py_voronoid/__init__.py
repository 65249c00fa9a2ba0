"""
Proportional weighted-Voronoi layouts.

Partitions a rectangle into one convex cell per data item, with cell
areas matching the items' shares and same-category cells kept together.
"""

from .core import LayoutEngine, LayoutResult, LayoutStatus, DataItem, prepare_sites

__version__ = "0.1.0"

__all__ = ['LayoutEngine', 'LayoutResult', 'LayoutStatus', 'DataItem', 'prepare_sites']
