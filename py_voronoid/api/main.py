"""FastAPI main application."""

from collections import OrderedDict
from typing import List, Optional
import uuid

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError
import structlog

from .. import __version__
from ..config import CanvasSettings, Orientation, settings
from ..core.categories import CATEGORIES
from ..core.errors import InvalidDatasetError, LayoutNotReadyError
from ..core.orchestrator import LayoutEngine, LayoutResult
from ..core.polygon import polygon_to_list
from ..core.dataset import prepare_sites
from ..logging_config import configure_logging
from ..utils.random import make_rng

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Voronoid Layout API",
    description="Proportional weighted-Voronoi layouts for categorical data",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Layouts live in memory only; the oldest is evicted past the limit
layouts: "OrderedDict[str, LayoutEngine]" = OrderedDict()


# Request/Response models
class ItemModel(BaseModel):
    """One data item."""

    label: str = Field(..., min_length=1, description="Item label")
    value: float = Field(..., ge=0, description="Item value, converted to an area share")
    category: Optional[str] = Field(None, description="Category key; unknown keys map to 'other'")
    display_label: Optional[str] = Field(None, description="Label override, may contain newlines")
    text_color: Optional[str] = Field(None, description="Label colour override")


class LayoutRequest(BaseModel):
    """Request to generate a new layout."""

    items: List[ItemModel] = Field(..., description="Items to lay out")
    orientation: Optional[Orientation] = Field(None, description="Canvas orientation")
    width: Optional[float] = Field(None, gt=0, le=5000, description="Canvas width, overrides orientation")
    height: Optional[float] = Field(None, gt=0, le=5000, description="Canvas height, overrides orientation")
    seed: Optional[str] = Field(None, description="Random seed for reproducible placement")


class MoveSeedRequest(BaseModel):
    """New position of a dragged seed."""

    x: float
    y: float


class ReoptimizeRequest(BaseModel):
    """Seed to keep pinned during re-optimization."""

    locked_index: int = Field(..., ge=0)


class CellMetadataModel(BaseModel):
    index: int
    label: str
    display_label: str
    category: str
    percentage: str
    color: str
    text_color: Optional[str] = None
    area_fraction: float
    tier: str


class LayoutResponse(BaseModel):
    """A layout snapshot."""

    layout_id: str
    status: str
    status_text: str
    iterations: int
    max_error: float
    width: float
    height: float
    cells: List[Optional[List[List[float]]]]
    seeds: List[List[float]]
    metadata: List[CellMetadataModel]


class CategoryInfo(BaseModel):
    key: str
    label: str
    color: str


def to_response(layout_id: str, result: LayoutResult) -> LayoutResponse:
    """Serialize a LayoutResult."""
    return LayoutResponse(
        layout_id=layout_id,
        status=result.status.value,
        status_text=result.status_text,
        iterations=result.iterations,
        max_error=result.max_error,
        width=result.width,
        height=result.height,
        cells=[polygon_to_list(c) for c in result.cells],
        seeds=[[float(x), float(y)] for x, y in result.seeds],
        metadata=[
            CellMetadataModel(
                index=m.index,
                label=m.label,
                display_label=m.display_label,
                category=m.category,
                percentage=m.percentage,
                color=m.color,
                text_color=m.text_color,
                area_fraction=m.area_fraction,
                tier=m.tier.value,
            )
            for m in result.metadata
        ],
    )


def get_engine(layout_id: str) -> LayoutEngine:
    engine = layouts.get(layout_id)
    if engine is None:
        raise HTTPException(status_code=404, detail="Layout not found")
    return engine


def remember(layout_id: str, engine: LayoutEngine) -> None:
    layouts[layout_id] = engine
    while len(layouts) > settings.max_concurrent_layouts:
        evicted, _ = layouts.popitem(last=False)
        logger.info("Layout evicted", layout_id=evicted)


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Voronoid Layout API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "layouts": len(layouts)}


@app.get("/categories", response_model=List[CategoryInfo])
async def list_categories():
    """List the fixed category set."""
    return [CategoryInfo(key=key, label=cat.label, color=cat.color) for key, cat in CATEGORIES.items()]


@app.post("/layouts", response_model=LayoutResponse)
async def create_layout(request: LayoutRequest):
    """
    Generate a new layout.

    The optimization yields to the event loop between iterations, so
    other requests keep being served while it runs.
    """
    logger.info("Layout requested", items=len(request.items), orientation=request.orientation)

    try:
        canvas = CanvasSettings(
            orientation=request.orientation or settings.default_orientation,
            width=request.width,
            height=request.height,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        sites = prepare_sites([item.model_dump() for item in request.items],
                              max_items=settings.max_items)
    except InvalidDatasetError as e:
        raise HTTPException(status_code=422, detail=str(e))

    engine = LayoutEngine(rng=make_rng(request.seed), padding=canvas.padding,
                          max_items=settings.max_items)
    result = await engine.generate_async(sites, canvas.width, canvas.height)

    layout_id = str(uuid.uuid4())
    remember(layout_id, engine)

    logger.info("Layout created", layout_id=layout_id, status=result.status.value,
                iterations=result.iterations, max_error=result.max_error)
    return to_response(layout_id, result)


@app.get("/layouts/{layout_id}", response_model=LayoutResponse)
async def get_layout(layout_id: str):
    """Get the current snapshot of a layout."""
    engine = get_engine(layout_id)
    if engine.result is None:
        raise HTTPException(status_code=409, detail="Layout is still being generated")
    return to_response(layout_id, engine.result)


@app.post("/layouts/{layout_id}/seeds/{index}", response_model=LayoutResponse)
async def move_seed(layout_id: str, index: int, request: MoveSeedRequest):
    """Drag a seed. Areas are not re-optimized; see /reoptimize."""
    engine = get_engine(layout_id)
    try:
        result = engine.move_seed(index, request.x, request.y)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LayoutNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result is None:
        raise HTTPException(status_code=409, detail="Layout is being optimized")
    return to_response(layout_id, result)


@app.post("/layouts/{layout_id}/reoptimize", response_model=LayoutResponse)
async def reoptimize(layout_id: str, request: ReoptimizeRequest):
    """Re-optimize a layout after a drag, keeping the dragged seed in place."""
    engine = get_engine(layout_id)
    try:
        result = await engine.reoptimize_after_drag_async(request.locked_index)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LayoutNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result is None:
        raise HTTPException(status_code=409, detail="Layout is being optimized")
    return to_response(layout_id, result)


@app.delete("/layouts/{layout_id}")
async def delete_layout(layout_id: str):
    """Forget a layout."""
    get_engine(layout_id)
    del layouts[layout_id]
    return {"deleted": layout_id}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
