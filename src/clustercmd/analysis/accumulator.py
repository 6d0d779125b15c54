#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Online statistics over MCMC chain rows.

Chains are usually too long to hold in memory alongside the photometry
synthesized for every star, so every tracked quantity is summarized one
row at a time.

Classes
-------
RunningStats : Scalar summary
    Running mean and variance with extrema and two mixing diagnostics:
    the number of "stuck" steps (consecutive values closer than `eps`)
    and the mean absolute step between consecutive values.

PhotometryAccumulator : Per-star photometry summary
    Sums and sums of squares of synthesized magnitudes per star and filter.

ChainStatistics : Everything tracked for one chain
    A `RunningStats` per cluster parameter and per star component, the
    photometry sums, and the row count.

Notes
-----
The variance follows Welford's recurrence,

    mean_n = mean_{n-1} + (x_n - mean_{n-1}) / n
    M2_n   = M2_{n-1} + (x_n - mean_{n-1}) * (x_n - mean_n)

and `finalize` reports the Bessel-corrected sample variance
``M2_n / (n - 1)``, which matches a two-pass computation over the same
values up to rounding.
"""

import math
from collections import namedtuple

import numpy as np

from ..core.cluster import NPARAMS
from ..utils.photometry import SENTINEL_MAG

__all__ = [
    "EPS",
    "RunningSummary",
    "RunningStats",
    "PhotometryAccumulator",
    "ChainStatistics",
]

# Consecutive samples closer than this count as "stuck".
EPS = 1e-10

RunningSummary = namedtuple(
    "RunningSummary",
    ["count", "mean", "variance", "sigma", "min", "max", "stuck", "mean_step"],
)


class RunningStats(object):
    """
    Running summary of one scalar quantity.

    The object is a two-state machine: before the first `update` there is no
    previous value; afterwards `prev` holds the most recent one and every
    new value is compared against it.

    Parameters
    ----------
    eps : float, optional
        Tolerance below which a step counts as stuck. Default is `EPS`.

    Attributes
    ----------
    count : int
        Number of values seen.

    mean : float
        Running mean (0 before the first value).

    min, max : float
        Extremes, starting at `+inf` / `-inf`.

    prev : float or None
        Previous value, `None` before the first update.

    stuck : int
        Steps with `|x_n - x_{n-1}| < eps`.

    step_sum : float
        Sum of `|x_n - x_{n-1}|`. This is a sum, not a mean, until
        `finalize` divides it by `n_steps`.

    n_steps : int
        Number of steps compared so far (`count - 1` once started).
    """

    def __init__(self, eps=EPS):
        self.eps = eps
        self.count = 0
        self.mean = 0.0
        self._m2 = 0.0
        self.min = math.inf
        self.max = -math.inf
        self.prev = None
        self.stuck = 0
        self.step_sum = 0.0
        self.n_steps = 0

    def __repr__(self):
        return "RunningStats(count={}, mean={:g})".format(self.count, self.mean)

    def update(self, value):
        """Add one observation."""
        value = float(value)

        self.count += 1
        delta = value - self.mean
        self.mean += delta / self.count
        self._m2 += delta * (value - self.mean)

        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value

        # Mixing diagnostics need the previous value.
        if self.prev is not None:
            step = abs(value - self.prev)
            if step < self.eps:
                self.stuck += 1
            self.step_sum += step
            self.n_steps += 1
        self.prev = value

    @property
    def variance(self):
        """Sample variance of the values so far (0 for fewer than two)."""
        if self.count > 1:
            return self._m2 / (self.count - 1)
        return 0.0

    def finalize(self):
        """
        Summarize the values seen so far.

        Returns
        -------
        summary : `RunningSummary`
            `mean` is 0 when no value was seen, `variance` and `sigma` are 0
            for fewer than two values, and `mean_step` is 0 when no step
            was taken.
        """
        variance = self.variance
        mean_step = self.step_sum / self.n_steps if self.n_steps > 0 else 0.0

        return RunningSummary(
            count=self.count,
            mean=self.mean,
            variance=variance,
            sigma=math.sqrt(variance),
            min=self.min,
            max=self.max,
            stuck=self.stuck,
            mean_step=mean_step,
        )


class PhotometryAccumulator(object):
    """
    Sums of synthesized magnitudes per star and filter.

    Parameters
    ----------
    n_stars : int
        Number of stars.

    n_filters : int
        Number of active filters.

    Attributes
    ----------
    sum, sum_sq : `~numpy.ndarray` of shape `(n_stars, n_filters)`
        Sum and sum of squares of the magnitudes added so far.

    count : `~numpy.ndarray` of int with shape `(n_stars,)`
        Number of rows added per star.
    """

    def __init__(self, n_stars, n_filters):
        self.sum = np.zeros((n_stars, n_filters))
        self.sum_sq = np.zeros((n_stars, n_filters))
        self.count = np.zeros(n_stars, dtype=int)

    def add(self, j, mags):
        """Add one row of magnitudes for star `j`."""
        mags = np.asarray(mags, dtype=float)
        self.sum[j] += mags
        self.sum_sq[j] += mags * mags
        self.count[j] += 1

    def finalize(self, j):
        """
        Mean and sample variance of the magnitudes of star `j`.

        Returns
        -------
        mean : `~numpy.ndarray` of shape `(n_filters,)`
            Mean magnitude. Undetectable means (99 or fainter) and stars
            with no rows are reported as `SENTINEL_MAG`.

        variance : `~numpy.ndarray` of shape `(n_filters,)`
            Sample variance; 0 for fewer than two rows or an undetectable
            mean.
        """
        n = self.count[j]
        if n < 1:
            nfilt = self.sum.shape[1]
            return np.full(nfilt, SENTINEL_MAG), np.zeros(nfilt)

        mean = self.sum[j] / n
        if n > 1:
            variance = (n * self.sum_sq[j] - self.sum[j] ** 2) / (n * (n - 1))
        else:
            variance = np.zeros_like(mean)

        bad = mean >= 99.0
        mean = np.where(bad, SENTINEL_MAG, mean)
        variance = np.where(bad, 0.0, variance)

        return mean, variance


class ChainStatistics(object):
    """
    Every running summary kept while walking a chain.

    Parameters
    ----------
    n_stars : int
        Number of cataloged stars.

    n_filters : int
        Number of active filters.

    nparams : int, optional
        Number of cluster parameters. Default is `NPARAMS`.

    eps : float, optional
        Stuck tolerance passed to every `RunningStats`. Default is `EPS`.

    Attributes
    ----------
    params : list of `RunningStats`
        One per cluster parameter, updated on every row.

    masses : list of list of `RunningStats`
        ``masses[m][j]`` summarizes component `m` (0 primary, 1 secondary)
        of star `j` over the rows in which the star was a cluster member.

    photometry : `PhotometryAccumulator`
        Synthesized photometry over the same member rows.

    nrows : int
        Number of completed rows.
    """

    def __init__(self, n_stars, n_filters, nparams=NPARAMS, eps=EPS):
        self.n_stars = n_stars
        self.params = [RunningStats(eps) for _ in range(nparams)]
        self.masses = [[RunningStats(eps) for _ in range(n_stars)] for _ in range(2)]
        self.photometry = PhotometryAccumulator(n_stars, n_filters)
        self.nrows = 0

    def add_params(self, values):
        for stats, value in zip(self.params, values):
            stats.update(value)

    def add_masses(self, j, mass1, mass2):
        """Record a member row for star `j`."""
        self.masses[0][j].update(mass1)
        self.masses[1][j].update(mass2)

    def add_photometry(self, j, mags):
        self.photometry.add(j, mags)

    def end_row(self):
        self.nrows += 1

    def member_rows(self, j):
        return self.masses[0][j].count

    def membership_probability(self, j):
        """Fraction of rows in which star `j` was a cluster member."""
        if self.nrows == 0:
            return 0.0
        return self.member_rows(j) / self.nrows

    def mean_params(self):
        return np.array([stats.finalize().mean for stats in self.params])
