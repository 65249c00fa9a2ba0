"""
Convergence loop for proportional power-diagram layouts.

A LayoutEngine drives the build -> correct -> relax loop one iteration
at a time. Hosts either call generate() to run to completion or call
step() themselves (generate_async() does this, yielding to the event
loop between iterations) so an interactive surface stays responsive.

The engine also supports dragging: move_seed() gives a cheap preview
with unchanged weights, reoptimize_after_drag() re-runs a shorter loop
with the dragged seed pinned.
"""

import asyncio
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

import numpy as np
import structlog

from .cell_metadata import CellMetadata, build_cell_metadata
from .constants import PAD
from .dataset import MAX_ITEMS, Site, prepare_sites
from .errors import LayoutError, LayoutNotReadyError
from .polygon import bounding_box, inset_polygon
from .power_diagram import calculate_total_area, compute_power_diagram, get_bounds
from .relaxation import lloyd_step
from .seeds import category_centers_from_seeds, init_seeds
from .weight_optimizer import area_errors, max_abs_error, optimize_weights
from ..config.layout_settings import OptimizerSettings
from ..utils.random import RandomSource, make_rng

logger = structlog.get_logger()

ProgressCallback = Callable[["RunProgress"], None]


class LayoutStatus(str, Enum):
    """Lifecycle of a LayoutEngine.

    CONVERGED and EXHAUSTED persist after a run as the status of the held
    snapshot; a new run can start from either. reset() goes back to IDLE.
    """

    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass
class RunState:
    """Mutable state of one optimization run, owned by the engine.

    A new run always gets a new RunState; nothing is shared across runs.
    """
    sites: List[Site]
    bounds: np.ndarray
    total_area: float
    width: float
    height: float
    targets: np.ndarray
    seeds: np.ndarray
    weights: np.ndarray
    category_centers: Dict[str, np.ndarray]
    max_iterations: int
    iteration: int = 0
    best_error: float = float("inf")
    best_cells: Optional[List[Optional[np.ndarray]]] = None
    best_seeds: Optional[np.ndarray] = None
    best_weights: Optional[np.ndarray] = None
    locked_index: Optional[int] = None
    locked_position: Optional[np.ndarray] = field(default=None)


class RunProgress(NamedTuple):
    """Progress report emitted after every iteration."""
    iteration: int
    max_iterations: int
    max_error: float
    best_error: float
    status_text: str


@dataclass(frozen=True, eq=False)
class LayoutResult:
    """Immutable snapshot of a finished layout.

    cells have the visual gap applied; raw_cells are the best cells
    as built, and are the ones max_error was measured on. seeds and
    weights are the ones that produced raw_cells.
    """
    cells: List[Optional[np.ndarray]]
    raw_cells: List[Optional[np.ndarray]]
    seeds: np.ndarray
    weights: np.ndarray
    category_centers: Dict[str, np.ndarray]
    max_error: float
    iterations: int
    status: LayoutStatus
    status_text: str
    metadata: List[CellMetadata]
    bounds: np.ndarray
    total_area: float
    width: float
    height: float


def _copy_cells(cells):
    return [None if c is None else c.copy() for c in cells]


def progress_text(iteration: int, max_iterations: int, best_error: float) -> str:
    return f"Optimizing... {iteration}/{max_iterations} (error: {best_error * 100:.1f}%)"


def done_text(iterations: int, best_error: float) -> str:
    return f"Done ({iterations} iterations, {best_error * 100:.2f}% max error)"


class LayoutEngine:
    """
    Runs and holds one proportional layout at a time.

    Calls that would start or change a layout while a run is in flight
    are rejected: they log a warning and return None (False for the
    start methods) without touching the running state.
    """

    def __init__(self, settings: Optional[OptimizerSettings] = None,
                 rng: Optional[RandomSource] = None, padding: float = PAD,
                 max_items: int = MAX_ITEMS):
        self.settings = settings or OptimizerSettings()
        self.padding = padding
        self.max_items = max_items
        self._rng = rng
        self._status = LayoutStatus.IDLE
        self._run: Optional[RunState] = None
        self._result: Optional[LayoutResult] = None
        self._sites: List[Site] = []

    @property
    def status(self) -> LayoutStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status == LayoutStatus.RUNNING

    @property
    def result(self) -> Optional[LayoutResult]:
        """Last finished (or dragged) snapshot."""
        return self._result

    @property
    def sites(self) -> List[Site]:
        """Copies of the sites, weights taken from the last snapshot."""
        if self._result is None:
            return [dataclasses.replace(s) for s in self._sites]
        return [dataclasses.replace(s, weight=float(w)) for s, w in zip(self._sites, self._result.weights)]

    def _reject(self, operation: str) -> None:
        logger.warning("Layout run in progress, request rejected", operation=operation,
                       iteration=self._run.iteration if self._run else None)

    # Full generation

    def start(self, sites: Sequence, width: float, height: float,
              rng: Optional[RandomSource] = None) -> bool:
        """
        Begin a new run without iterating.

        Args:
            sites: Sites or raw items, validated with prepare_sites; targets
                are always derived from the values
            width: Canvas width
            height: Canvas height
            rng: Random source for seed placement, overriding the engine's

        Returns:
            False if a run is already in progress, True otherwise

        Raises:
            InvalidDatasetError: Empty or invalid input
        """
        if self.is_running:
            self._reject("generate")
            return False

        sites = prepare_sites(sites, self.max_items)

        bounds = get_bounds(width, height, self.padding)
        if rng is None:
            rng = self._rng if self._rng is not None else make_rng()
        layout = init_seeds(sites, width, height, self.padding, rng)

        self._sites = sites
        self._run = RunState(
            sites=sites,
            bounds=bounds,
            total_area=calculate_total_area(width, height, self.padding),
            width=width,
            height=height,
            targets=np.array([s.target for s in sites]),
            seeds=layout.seeds,
            weights=np.zeros(len(sites)),
            category_centers=layout.category_centers,
            max_iterations=self.settings.max_iterations,
        )
        self._status = LayoutStatus.RUNNING

        logger.info("Layout generation started", sites=len(sites), width=width,
                    height=height, max_iterations=self.settings.max_iterations)
        return True

    def step(self) -> RunProgress:
        """
        Run one optimization iteration.

        Returns:
            Progress of the iteration just completed

        Raises:
            LayoutError: No run in progress
        """
        run = self._run
        if run is None or not self.is_running:
            raise LayoutError("No layout run in progress. Call start() first!")

        opts = self.settings
        result = optimize_weights(run.seeds, run.weights, run.targets, run.bounds,
                                  run.total_area, opts.gain)

        # Keep the best snapshot; the loop is not monotonic
        if result.max_error < run.best_error:
            run.best_error = result.max_error
            run.best_cells = result.cells
            run.best_seeds = run.seeds.copy()
            run.best_weights = np.array(run.weights, copy=True)

        run.weights = result.weights

        if run.iteration % opts.relax_every == 0:
            run.seeds = lloyd_step(run.seeds, result.cells, run.category_centers, run.sites,
                                   opts.lloyd_step_ratio, opts.cluster_strength)
            if run.locked_index is not None:
                run.seeds[run.locked_index] = run.locked_position

        run.iteration += 1
        progress = RunProgress(
            iteration=run.iteration,
            max_iterations=run.max_iterations,
            max_error=result.max_error,
            best_error=run.best_error,
            status_text=progress_text(run.iteration, run.max_iterations, run.best_error),
        )
        logger.debug("Layout iteration", iteration=run.iteration, max_error=result.max_error,
                     best_error=run.best_error)

        if run.iteration >= opts.min_iterations and result.max_error <= opts.error_threshold:
            self._finish(LayoutStatus.CONVERGED)
        elif run.iteration >= run.max_iterations:
            self._finish(LayoutStatus.EXHAUSTED)

        return progress

    def _finish(self, status: LayoutStatus) -> None:
        run = self._run
        self._result = self._snapshot(
            run, run.best_cells, run.best_seeds, run.best_weights, run.best_error,
            iterations=run.iteration, status=status,
            status_text=done_text(run.iteration, run.best_error),
        )
        self._status = status
        self._run = None

        log = logger.info if status == LayoutStatus.CONVERGED else logger.warning
        log("Layout finished", status=status.value, iterations=run.iteration,
            max_error=round(run.best_error, 6), locked_index=run.locked_index)

    def _snapshot(self, run: RunState, raw_cells, seeds, weights, max_error: float,
                  iterations: int, status: LayoutStatus, status_text: str) -> LayoutResult:
        gap = self.settings.gap / 2
        return LayoutResult(
            cells=[inset_polygon(c, gap) for c in raw_cells],
            raw_cells=_copy_cells(raw_cells),
            seeds=np.array(seeds, copy=True),
            weights=np.array(weights, copy=True),
            category_centers={k: v.copy() for k, v in run.category_centers.items()},
            max_error=float(max_error),
            iterations=iterations,
            status=status,
            status_text=status_text,
            metadata=build_cell_metadata(run.sites, raw_cells, run.total_area),
            bounds=run.bounds.copy(),
            total_area=run.total_area,
            width=run.width,
            height=run.height,
        )

    def _drive(self, on_progress: Optional[ProgressCallback]) -> Optional[LayoutResult]:
        while self.is_running:
            progress = self.step()
            if on_progress is not None:
                on_progress(progress)
        return self._result

    async def _drive_async(self, on_progress: Optional[ProgressCallback]) -> Optional[LayoutResult]:
        while self.is_running:
            progress = self.step()
            if on_progress is not None:
                on_progress(progress)
            await asyncio.sleep(0)
        return self._result

    def generate(self, sites: Sequence, width: float, height: float,
                 rng: Optional[RandomSource] = None,
                 on_progress: Optional[ProgressCallback] = None) -> Optional[LayoutResult]:
        """
        Generate a layout, blocking until it converges or the budget runs out.

        Returns:
            The final LayoutResult, or None if a run was already in progress
        """
        if not self.start(sites, width, height, rng):
            return None
        return self._drive(on_progress)

    async def generate_async(self, sites: Sequence, width: float, height: float,
                             rng: Optional[RandomSource] = None,
                             on_progress: Optional[ProgressCallback] = None) -> Optional[LayoutResult]:
        """Like generate(), yielding to the event loop after every iteration."""
        if not self.start(sites, width, height, rng):
            return None
        return await self._drive_async(on_progress)

    # Dragging

    def _require_result(self, index: int) -> LayoutResult:
        if self._result is None:
            raise LayoutNotReadyError("No layout available. Call generate() first!")
        if not 0 <= index < len(self._sites):
            raise IndexError(f"Site index {index} out of range (0-{len(self._sites) - 1})")
        return self._result

    def move_seed(self, index: int, x: float, y: float) -> Optional[LayoutResult]:
        """
        Move one seed and rebuild the diagram once with unchanged weights.

        The position is clamped to stay edge_margin inside the bounds.
        Areas drift off target until reoptimize_after_drag() runs.

        Returns:
            The updated snapshot, or None if a run is in progress

        Raises:
            LayoutNotReadyError: No finished layout yet
            IndexError: Bad site index
        """
        if self.is_running:
            self._reject("move_seed")
            return None
        current = self._require_result(index)

        box = bounding_box(current.bounds)
        margin = self.settings.edge_margin
        x = min(max(x, box.min_x + margin), box.max_x - margin)
        y = min(max(y, box.min_y + margin), box.max_y - margin)

        seeds = np.array(current.seeds, copy=True)
        seeds[index] = (x, y)
        cells = compute_power_diagram(seeds, current.weights, current.bounds)
        targets = np.array([s.target for s in self._sites])
        max_error = max_abs_error(area_errors(cells, targets, current.total_area))

        view = RunState(
            sites=self._sites, bounds=current.bounds, total_area=current.total_area,
            width=current.width, height=current.height, targets=targets, seeds=seeds,
            weights=current.weights, category_centers=current.category_centers,
            max_iterations=0,
        )
        self._result = self._snapshot(view, cells, seeds, current.weights, max_error,
                                      iterations=0, status=current.status,
                                      status_text="Dragging...")

        logger.debug("Seed moved", index=index, x=x, y=y, max_error=max_error)
        return self._result

    def start_reoptimization(self, locked_index: int) -> bool:
        """
        Begin a shorter run from the current snapshot with one seed pinned.

        Category centers are re-derived from the current seed positions so
        the clustering pull follows the user's arrangement.

        Returns:
            False if a run is already in progress, True otherwise

        Raises:
            LayoutNotReadyError: No finished layout yet
            IndexError: Bad site index
        """
        if self.is_running:
            self._reject("reoptimize_after_drag")
            return False
        current = self._require_result(locked_index)

        seeds = np.array(current.seeds, copy=True)
        self._run = RunState(
            sites=self._sites,
            bounds=current.bounds.copy(),
            total_area=current.total_area,
            width=current.width,
            height=current.height,
            targets=np.array([s.target for s in self._sites]),
            seeds=seeds,
            weights=np.array(current.weights, copy=True),
            category_centers=category_centers_from_seeds(seeds, self._sites),
            max_iterations=self.settings.drag_iterations,
            locked_index=locked_index,
            locked_position=seeds[locked_index].copy(),
        )
        self._status = LayoutStatus.RUNNING

        logger.info("Re-optimization after drag started", locked_index=locked_index,
                    max_iterations=self.settings.drag_iterations)
        return True

    def reoptimize_after_drag(self, locked_index: int,
                              on_progress: Optional[ProgressCallback] = None) -> Optional[LayoutResult]:
        """Re-equilibrate every other seed and all weights around a pinned seed."""
        if not self.start_reoptimization(locked_index):
            return None
        return self._drive(on_progress)

    async def reoptimize_after_drag_async(self, locked_index: int,
                                          on_progress: Optional[ProgressCallback] = None) -> Optional[LayoutResult]:
        if not self.start_reoptimization(locked_index):
            return None
        return await self._drive_async(on_progress)

    def reset(self) -> bool:
        """Drop the current snapshot and return to IDLE."""
        if self.is_running:
            self._reject("reset")
            return False
        self._status = LayoutStatus.IDLE
        self._result = None
        self._sites = []
        return True
