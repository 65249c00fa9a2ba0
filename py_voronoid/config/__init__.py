"""
Configuration modules for layout generation.
"""

from .layout_settings import CanvasSettings, OptimizerSettings, Orientation
from .config import Settings, settings

__all__ = ['CanvasSettings', 'OptimizerSettings', 'Orientation', 'Settings', 'settings']
