"""
Typed settings for the layout engine.

Defaults come from core.constants; the models add validation so that
settings arriving from the API or a saved style cannot break a run.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from ..core import constants as c


class Orientation(str, Enum):
    """Canvas orientation."""

    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


ORIENTATION_SIZES = {
    Orientation.LANDSCAPE: (c.LANDSCAPE_WIDTH, c.LANDSCAPE_HEIGHT),
    Orientation.PORTRAIT: (c.PORTRAIT_WIDTH, c.PORTRAIT_HEIGHT),
}


class CanvasSettings(BaseModel):
    """Canvas size and padding. Explicit width/height win over orientation."""

    orientation: Orientation = Field(default=Orientation.LANDSCAPE, description="Canvas orientation")
    width: Optional[float] = Field(default=None, gt=0, description="Canvas width in pixels")
    height: Optional[float] = Field(default=None, gt=0, description="Canvas height in pixels")
    padding: float = Field(default=c.PAD, ge=0, description="Padding around the chart area")

    @model_validator(mode="after")
    def fill_dimensions(self):
        default_w, default_h = ORIENTATION_SIZES[self.orientation]
        if self.width is None:
            self.width = float(default_w)
        if self.height is None:
            self.height = float(default_h)
        margin = 2 * (self.padding + c.EDGE_MARGIN)
        if self.width <= margin or self.height <= margin:
            raise ValueError(f"Canvas must be larger than {margin} pixels in both directions")
        return self

    @classmethod
    def from_orientation(cls, orientation: Orientation) -> "CanvasSettings":
        return cls(orientation=orientation)


class OptimizerSettings(BaseModel):
    """Tunables of the optimization loop."""

    max_iterations: int = Field(default=c.MAX_ITERATIONS, ge=1, description="Iteration budget of a full run")
    drag_iterations: int = Field(default=c.DRAG_ITERATIONS, ge=1, description="Iteration budget after a drag")
    min_iterations: int = Field(default=c.MIN_ITERATIONS, ge=0, description="Iterations before an early stop is allowed")
    error_threshold: float = Field(default=c.ERROR_THRESHOLD, gt=0, lt=1, description="Max area error for convergence")
    gain: float = Field(default=c.WEIGHT_GAIN, gt=0, description="Weight correction gain")
    relax_every: int = Field(default=c.RELAX_EVERY, ge=1, description="Iterations between Lloyd steps")
    lloyd_step_ratio: float = Field(default=c.LLOYD_STEP_RATIO, ge=0, le=1, description="Move toward cell centroid")
    cluster_strength: float = Field(default=c.CATEGORY_CLUSTER_STRENGTH, ge=0, le=1, description="Pull toward category center")
    gap: float = Field(default=c.GAP, ge=0, description="Visual gap between cells")
    edge_margin: float = Field(default=c.EDGE_MARGIN, ge=0, description="Closest a dragged seed may get to the bounds")
