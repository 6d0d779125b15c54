#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Tests for the online chain statistics.
"""

import math

import numpy as np
import numpy.testing as npt
import pytest

from clustercmd.analysis.accumulator import (
    EPS,
    ChainStatistics,
    PhotometryAccumulator,
    RunningStats,
)
from clustercmd.utils.photometry import SENTINEL_MAG


def _summarize(values, eps=EPS):
    stats = RunningStats(eps)
    for v in values:
        stats.update(v)
    return stats.finalize()


class TestRunningStats:

    def test_empty(self):
        summ = RunningStats().finalize()
        assert summ.count == 0
        assert summ.mean == 0.0
        assert summ.variance == 0.0
        assert summ.mean_step == 0.0
        assert summ.min == math.inf
        assert summ.max == -math.inf

    def test_single_value(self):
        summ = _summarize([4.2])
        assert summ.mean == pytest.approx(4.2)
        assert summ.variance == 0.0
        assert summ.stuck == 0
        assert summ.mean_step == 0.0
        assert summ.min == summ.max == 4.2

    def test_small_sequence(self):
        summ = _summarize([1.0, 2.0, 3.0])
        assert summ.mean == pytest.approx(2.0)
        assert summ.variance == pytest.approx(1.0)
        assert summ.sigma == pytest.approx(1.0)
        assert summ.stuck == 0
        assert summ.mean_step == pytest.approx(1.0)
        assert (summ.min, summ.max) == (1.0, 3.0)

    def test_matches_two_pass(self):
        rng = np.random.default_rng(42)
        values = rng.normal(10.0, 3.0, size=500)
        summ = _summarize(values)
        assert summ.mean == pytest.approx(np.mean(values))
        assert summ.variance == pytest.approx(np.var(values, ddof=1))
        assert summ.min == values.min()
        assert summ.max == values.max()
        assert summ.mean_step == pytest.approx(np.mean(np.abs(np.diff(values))))

    def test_large_offset(self):
        """Values with a large common offset keep their variance."""
        values = 1e8 + np.array([0.1, 0.2, 0.3, 0.4])
        summ = _summarize(values)
        assert summ.variance == pytest.approx(np.var(values, ddof=1), rel=1e-6)

    def test_stuck_steps(self):
        summ = _summarize([5.0, 5.0, 5.0, 6.0, 6.0])
        assert summ.stuck == 3
        assert summ.mean_step == pytest.approx(0.25)

    def test_stuck_tolerance(self):
        summ = _summarize([1.0, 1.0 + 1e-3, 1.0], eps=1e-2)
        assert summ.stuck == 2

    def test_stuck_never_decreases(self):
        stats = RunningStats()
        counts = []
        for v in [1.0, 1.0, 2.0, 2.0, 2.0, 3.0]:
            stats.update(v)
            counts.append(stats.stuck)
        assert counts == sorted(counts)
        assert counts[-1] == 3

    def test_step_sum_is_a_sum(self):
        stats = RunningStats()
        for v in [0.0, 2.0, 1.0]:
            stats.update(v)
        assert stats.step_sum == pytest.approx(3.0)
        assert stats.n_steps == 2
        assert stats.finalize().mean_step == pytest.approx(1.5)


class TestPhotometryAccumulator:

    def test_mean_and_variance(self):
        acc = PhotometryAccumulator(1, 2)
        rows = np.array([[15.0, 14.0], [15.2, 14.1], [15.4, 14.5]])
        for row in rows:
            acc.add(0, row)
        mean, var = acc.finalize(0)
        npt.assert_allclose(mean, rows.mean(axis=0))
        npt.assert_allclose(var, rows.var(axis=0, ddof=1), rtol=1e-6)

    def test_single_row(self):
        acc = PhotometryAccumulator(1, 2)
        acc.add(0, [15.0, 14.0])
        mean, var = acc.finalize(0)
        npt.assert_allclose(mean, [15.0, 14.0])
        npt.assert_array_equal(var, [0.0, 0.0])

    def test_no_rows(self):
        mean, var = PhotometryAccumulator(2, 3).finalize(1)
        npt.assert_array_equal(mean, [SENTINEL_MAG] * 3)
        npt.assert_array_equal(var, [0.0] * 3)

    def test_undetectable_mean(self):
        acc = PhotometryAccumulator(1, 2)
        acc.add(0, [15.0, SENTINEL_MAG])
        acc.add(0, [15.1, SENTINEL_MAG])
        mean, var = acc.finalize(0)
        assert mean[1] == SENTINEL_MAG
        assert var[1] == 0.0
        assert mean[0] == pytest.approx(15.05)

    def test_stars_are_separate(self):
        acc = PhotometryAccumulator(2, 1)
        acc.add(0, [10.0])
        acc.add(1, [20.0])
        assert acc.finalize(0)[0][0] == pytest.approx(10.0)
        assert acc.finalize(1)[0][0] == pytest.approx(20.0)


class TestChainStatistics:

    def test_membership_probability(self):
        stats = ChainStatistics(n_stars=2, n_filters=1)
        for member in (False, True, True, False):
            stats.add_params([9.5, 0.27, -0.2, 10.0, 0.1])
            if member:
                stats.add_masses(0, 1.2, 0.0)
            stats.add_masses(1, 0.8, 0.4)
            stats.end_row()
        assert stats.nrows == 4
        assert stats.member_rows(0) == 2
        assert stats.membership_probability(0) == pytest.approx(0.5)
        assert stats.membership_probability(1) == pytest.approx(1.0)

    def test_no_rows(self):
        stats = ChainStatistics(n_stars=1, n_filters=1)
        assert stats.membership_probability(0) == 0.0

    def test_mean_params(self):
        stats = ChainStatistics(n_stars=1, n_filters=1)
        stats.add_params([9.0, 0.25, -0.2, 10.0, 0.1])
        stats.add_params([10.0, 0.29, 0.0, 11.0, 0.3])
        npt.assert_allclose(stats.mean_params(), [9.5, 0.27, -0.1, 10.5, 0.2])

    def test_eps_is_shared(self):
        stats = ChainStatistics(n_stars=1, n_filters=1, eps=0.5)
        assert stats.params[0].eps == 0.5
        assert stats.masses[1][0].eps == 0.5
