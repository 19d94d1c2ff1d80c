"""
Tests for evenly-spaced streamline placement.
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from scipy.spatial import cKDTree

from evenstream import configure, evenly_spaced_streamlines, streamline_distances
from evenstream.density import KDTreeNeighbors
from evenstream.fields import StructuredGridField2D
from evenstream.tracking import EvenStreamlinePlacer, PlacementOptions, PlacementState, seed_candidates

D_SEP = 0.08
D_TEST = 0.04


@dataclass
class RecordingNeighbors(KDTreeNeighbors):
    """KD-tree index that logs every single-point query, i.e. every candidate test."""
    queried: List[np.ndarray] = field(default_factory=list, init=False, repr=False)

    def nearest_distance(self, points):
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if pts.shape[0] == 1:
            self.queried.append(pts[0].copy())
        return super().nearest_distance(points)


def _place(field, rng=0, **kw):
    opts = dict(d_sep=D_SEP, d_test=D_TEST, step_size=0.25, max_steps=2000)
    opts.update(kw)
    placer = EvenStreamlinePlacer(field, PlacementOptions(**opts), rng=rng)
    return placer, placer.run()


class TestPlacementOptions:

    @pytest.mark.parametrize(
        "kw",
        [
            dict(d_sep=0.0),
            dict(d_sep=np.nan),
            dict(d_test=-1.0),
            dict(step_size=0.0),
            dict(max_steps=0),
            dict(integrator="leapfrog"),
            dict(max_lines=0),
            dict(verbose="yes"),
            dict(verbose=1),
        ],
    )
    def test_invalid(self, kw):
        args = dict(d_sep=0.1, d_test=0.05)
        args.update(kw)
        with pytest.raises(ValueError):
            PlacementOptions(**args)

    def test_verbose_defaults_to_package_config(self):
        assert PlacementOptions(0.1, 0.05).verbose is False
        configure(verbose=True)
        assert PlacementOptions(0.1, 0.05).verbose is True
        assert PlacementOptions(0.1, 0.05, verbose=False).verbose is False


class TestPlacement:

    def test_uniform_field_coarse_spacing(self, uniform_field):
        placer, result = _place(uniform_field, rng=1, d_sep=0.6, d_test=0.3)
        assert 1 <= result.n_lines <= 2
        for block in result.lines():
            assert block.shape[0] >= 2
            assert_allclose(block[:, 1], block[0, 1], atol=1e-6)
        assert placer.state is PlacementState.DONE

    def test_lines_are_evenly_spaced(self, wavy_field):
        placer, result = _place(wavy_field)
        lines = [block[:, :2] for block in result.lines()]
        assert len(lines) > 3
        assert all(line.shape[0] >= 2 for line in lines)

        # Only the trimmed ends of a later line may come closer than d_test
        for j in range(1, len(lines)):
            earlier = cKDTree(np.vstack(lines[:j]))
            d, _ = earlier.query(lines[j][1:-1])
            assert np.all(d >= D_TEST - 1e-9)

        # Every seed kept d_sep from the lines committed before it
        for line in placer.lines[1:]:
            assert line.seed_distance >= D_SEP
        assert np.isinf(placer.lines[0].seed_distance)

    def test_output_columns(self, wavy_field):
        _, result = _place(wavy_field)
        assert np.isnan(result.xs[-1])
        for block in result.lines():
            assert block[0, 3] == 0.0
            assert np.all(np.diff(block[:, 3]) >= 0)
            assert np.all(block[:, 2] >= 0)

    def test_distances_match_standalone_routine(self, wavy_field):
        _, result = _place(wavy_field)
        d = streamline_distances(result.separated_xy())
        assert_allclose(d, result.ds[:-1], equal_nan=True)

    def test_reproducible(self, wavy_field):
        _, a = _place(wavy_field, rng=42)
        _, b = _place(wavy_field, rng=42)
        assert_array_equal(a.xs, b.xs)
        assert_array_equal(a.ys, b.ys)

    def test_metadata_and_stats(self, wavy_field):
        placer, result = _place(wavy_field)
        stats = result.metadata["stats"]
        assert stats["lines_committed"] == result.n_lines == len(placer.lines)
        assert stats["batches_processed"] >= 1
        assert stats["candidates_tested"] == (
            stats["rejected_separation"] + stats["rejected_empty"]
            + stats["rejected_trimmed"] + stats["lines_committed"] - 1
        )
        assert result.metadata["d_sep"] == D_SEP
        assert result.metadata["integrator"] == "rk4"

    def test_batches_visited_fifo_each_in_full(self, wavy_field):
        index = RecordingNeighbors()
        opts = PlacementOptions(D_SEP, D_TEST, step_size=0.25, max_steps=2000)
        placer = EvenStreamlinePlacer(wavy_field, opts, rng=3, index=index)
        placer.run()

        batches = [seed_candidates(line.points, D_SEP) for line in placer.lines]
        visited = np.array(index.queried)
        assert visited.shape[0] == sum(b.shape[0] for b in batches) == placer.stats.candidates_tested
        assert placer.stats.batches_processed == len(batches)

        shuffled = False
        start = 0
        for batch in batches:
            chunk = visited[start:start + batch.shape[0]]
            start += batch.shape[0]
            assert_array_equal(chunk[np.lexsort(chunk.T)], batch[np.lexsort(batch.T)])
            shuffled = shuffled or not np.array_equal(chunk, batch)
        assert shuffled

    def test_max_lines(self, wavy_field):
        _, result = _place(wavy_field, max_lines=2)
        assert result.n_lines == 2

    def test_partially_undefined_field(self, unit_grid):
        xx, yy = unit_grid
        hole = (xx - 0.5) ** 2 + (yy - 0.5) ** 2 < 0.04
        uu = np.where(hole, np.nan, 1.0)
        vv = np.where(hole, np.nan, 0.3 * np.sin(2 * np.pi * xx))
        field = StructuredGridField2D(xx, yy, uu, vv)

        _, result = _place(field)
        pts = result.separated_xy()
        pts = pts[~np.isnan(pts[:, 0])]
        # Lines may end a fraction of a step inside an undefined cell, never deeper
        assert np.all(np.hypot(pts[:, 0] - 0.5, pts[:, 1] - 0.5) > 0.18)

    def test_verbose_output(self, wavy_field, capsys):
        _place(wavy_field, max_lines=2, verbose=True)
        out = capsys.readouterr().out
        assert "line 1 committed" in out
        assert "placement" in out
        assert "MB RSS)" in out

    def test_quiet_run_prints_nothing(self, wavy_field, capsys):
        _place(wavy_field, max_lines=2, verbose=False)
        assert capsys.readouterr().out == ""

    def test_run_only_once(self, uniform_field):
        placer, _ = _place(uniform_field, d_sep=0.6, d_test=0.3)
        with pytest.raises(RuntimeError):
            placer.run()

    def test_index_must_be_empty(self, uniform_field):
        index = KDTreeNeighbors()
        index.insert(np.zeros((2, 2)))
        with pytest.raises(ValueError):
            EvenStreamlinePlacer(uniform_field, PlacementOptions(0.1, 0.05), index=index)


def test_functional_entry_point(unit_grid):
    xx, yy = unit_grid
    uu = np.ones_like(xx)
    vv = 0.3 * np.sin(2 * np.pi * xx)
    result = evenly_spaced_streamlines(xx, yy, uu, vv, D_SEP, D_TEST, 0.25, rng=5, max_steps=2000)
    assert result.n_lines > 3
    assert len(result.xs) == len(result.ys) == len(result.ds) == len(result.ls)
    with pytest.raises(ValueError):
        evenly_spaced_streamlines(xx, yy, uu, vv, D_SEP, D_TEST, rng=5, integrator="nope")
