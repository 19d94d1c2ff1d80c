# evenstream/tracking/placement.py
"""
Evenly-spaced streamline placement (Jobard & Lefer, 1997).

A first streamline is grown from a random seed. Every accepted line queues
a batch of candidate seeds offset by ``d_sep`` on both sides. Batches are
consumed in FIFO order, the candidates of one batch in random order. A
candidate closer than ``d_sep`` to an accepted line is dropped; otherwise a
line is grown from it, trimmed back to where it stays ``d_test`` away from
accepted lines, and committed. The loop ends when the queue is empty.

References
----------
Jobard, B., & Lefer, W. (1997). Creating Evenly-Spaced Streamlines of
Arbitrary Density. In Visualization in Scientific Computing '97
(pp. 43-55). Springer Vienna. https://doi.org/10.1007/978-3-7091-6876-9_5
"""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Deque, List, Optional
import numpy as np

from ..density.distance import assemble_streamline_set
from ..density.lines import StreamlineSet
from ..density.neighbors import KDTreeNeighbors, NeighborIndex
from ..fields.base import VectorField
from ..fields.structured import StructuredGridField2D
from ..integrators import get_integrator
from ..utils.config import get_config
from ..utils.logging import Timer
from ..utils.random import KeyLike, permutation, rng_key
from .seeding import random_field_seed, seed_candidates
from .streamline import StreamlineTracer, trim_streamline


def _check_positive(name: str, value: float) -> float:
    value = float(value)
    if not (np.isfinite(value) and value > 0):
        raise ValueError(f"{name} must be positive and finite, got {value}")
    return value


@dataclass
class PlacementOptions:
    """
    Constants for one placement run.

    d_sep and d_test are independent: d_sep governs where new lines may
    start, d_test how close a growing line may come to existing ones.
    """
    d_sep: float
    d_test: float
    step_size: float = 0.1              # fraction of a grid cell
    max_steps: int = 10_000             # per direction
    integrator: str = "rk4"             # 'euler' | 'rk2' | 'rk4'
    max_lines: Optional[int] = None     # None: run until the queue is empty
    verbose: Optional[bool] = None      # None: package default

    def __post_init__(self):
        self.d_sep = _check_positive("d_sep", self.d_sep)
        self.d_test = _check_positive("d_test", self.d_test)
        self.step_size = _check_positive("step_size", self.step_size)
        if int(self.max_steps) < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")
        self.max_steps = int(self.max_steps)
        get_integrator(self.integrator)
        if self.max_lines is not None and int(self.max_lines) < 1:
            raise ValueError(f"max_lines must be >= 1 or None, got {self.max_lines}")
        if self.verbose is None:
            self.verbose = get_config().verbose
        if not isinstance(self.verbose, bool):
            raise ValueError(f"verbose must be a bool or None, got {type(self.verbose).__name__}")


class PlacementState(Enum):
    IDLE = "idle"
    POP_CANDIDATE_BATCH = "pop_candidate_batch"
    TEST_CANDIDATE = "test_candidate"
    GROW_CANDIDATE = "grow_candidate"
    TRIM_NEW_LINE = "trim_new_line"
    COMMIT_LINE = "commit_line"
    DONE = "done"


@dataclass
class PlacementStats:
    """Counters collected during one run."""
    seed_attempts: int = 0
    batches_processed: int = 0
    candidates_tested: int = 0
    rejected_separation: int = 0
    rejected_empty: int = 0
    rejected_trimmed: int = 0
    lines_committed: int = 0


@dataclass(frozen=True)
class CommittedLine:
    """An accepted streamline and the seed it was grown from."""
    points: np.ndarray
    seed: np.ndarray
    seed_distance: float    # inf for the first line
    batch_id: int


class EvenStreamlinePlacer:
    """
    Seeding/growth/trimming loop over one field.

    Parameters
    ----------
    field : VectorField
        Field to place streamlines in
    options : PlacementOptions
        Separation distances and integration settings
    rng : None, int or np.random.Generator
        Random source for the first seed and batch permutations
    index : NeighborIndex, optional
        Empty point index; a :class:`KDTreeNeighbors` by default
    """

    def __init__(
        self,
        field: VectorField,
        options: PlacementOptions,
        rng: KeyLike = None,
        index: Optional[NeighborIndex] = None,
    ):
        self.field = field
        self.options = options
        self.rng = rng_key(rng)
        self.index = index if index is not None else KDTreeNeighbors()
        if len(self.index):
            raise ValueError("index must be empty before placement")

        self.tracer = StreamlineTracer(
            field, options.step_size, options.max_steps, options.integrator
        )
        self.lines: List[CommittedLine] = []
        self.queue: Deque[np.ndarray] = deque()
        self.stats = PlacementStats()
        self.state = PlacementState.IDLE

    # ------------------------ Main loop ------------------------

    def run(self) -> StreamlineSet:
        """Place streamlines until the candidate queue is exhausted."""
        if self.state is not PlacementState.IDLE:
            raise RuntimeError("placement has already run; create a new placer")

        verbose = self.options.verbose
        with Timer(f"{__name__}: placement", track_memory=verbose, report=verbose):
            self._initialize()
            while self.queue and not self._line_limit_reached():
                self.state = PlacementState.POP_CANDIDATE_BATCH
                self._process_batch(self.queue.popleft())

            result = assemble_streamline_set(self.index, [line.batch_id for line in self.lines])
            self.state = PlacementState.DONE

        result.metadata.update(
            d_sep=self.options.d_sep,
            d_test=self.options.d_test,
            step_size=self.options.step_size,
            integrator=self.options.integrator,
            stats=asdict(self.stats),
        )
        return result

    def _initialize(self) -> None:
        """Grow and commit the first line from a random defined point."""
        while True:
            seed = random_field_seed(self.field, self.rng)
            self.stats.seed_attempts += 1
            line = self.tracer.grow(seed)
            if line.is_valid:
                break
        self._commit(line.points, seed, np.inf)

    def _process_batch(self, batch: np.ndarray) -> None:
        self.stats.batches_processed += 1
        for k in permutation(self.rng, batch.shape[0]):
            if self._line_limit_reached():
                return
            self._try_candidate(batch[k])

    def _try_candidate(self, seed: np.ndarray) -> bool:
        """Test, grow, trim and possibly commit one candidate."""
        opts = self.options
        self.stats.candidates_tested += 1

        self.state = PlacementState.TEST_CANDIDATE
        d_min = float(self.index.nearest_distance(seed)[0])
        if d_min < opts.d_sep:
            self.stats.rejected_separation += 1
            return False

        self.state = PlacementState.GROW_CANDIDATE
        grown = self.tracer.grow(seed)
        if not grown.is_valid:
            self.stats.rejected_empty += 1
            return False

        self.state = PlacementState.TRIM_NEW_LINE
        trimmed = trim_streamline(grown, self.index.nearest_distance(grown.points), opts.d_test)
        if not trimmed.is_valid:
            self.stats.rejected_trimmed += 1
            return False

        self._commit(trimmed.points, seed, d_min)
        return True

    def _commit(self, points: np.ndarray, seed: np.ndarray, seed_distance: float) -> None:
        self.state = PlacementState.COMMIT_LINE
        batch_id = self.index.insert(points)
        self.lines.append(CommittedLine(points, np.asarray(seed, dtype=np.float64), seed_distance, batch_id))
        self.queue.append(seed_candidates(points, self.options.d_sep))
        self.stats.lines_committed += 1

        if self.options.verbose:
            print(
                f"{__name__}: line {len(self.lines)} committed "
                f"({points.shape[0]} points, {len(self.queue)} batches queued)"
            )

    def _line_limit_reached(self) -> bool:
        limit = self.options.max_lines
        return limit is not None and len(self.lines) >= limit


def evenly_spaced_streamlines(
    xx: np.ndarray,
    yy: np.ndarray,
    uu: np.ndarray,
    vv: np.ndarray,
    d_sep: float,
    d_test: float,
    step_size: float = 0.1,
    *,
    rng: KeyLike = None,
    **options,
) -> StreamlineSet:
    """
    Compute evenly-spaced streamlines for a gridded 2-D vector field.

    Parameters
    ----------
    xx, yy : np.ndarray
        Sample coordinates, meshgrid layout
    uu, vv : np.ndarray
        Velocity components at the samples; NaN marks undefined regions
    d_sep : float
        Minimum distance between a new seed and existing streamlines
    d_test : float
        Minimum distance a growing streamline keeps from existing ones
    step_size : float
        Integration step as a fraction of a grid cell
    rng : None, int or np.random.Generator
        Random source; fix it for reproducible output
    **options
        Further :class:`PlacementOptions` fields (max_steps, integrator,
        max_lines, verbose)

    Returns
    -------
    StreamlineSet
        xs, ys, ds (distance to nearest other line) and ls (arc length),
        each line followed by a NaN.
    """
    field = StructuredGridField2D(xx, yy, uu, vv)
    opts = PlacementOptions(d_sep=d_sep, d_test=d_test, step_size=step_size, **options)
    return EvenStreamlinePlacer(field, opts, rng=rng).run()
