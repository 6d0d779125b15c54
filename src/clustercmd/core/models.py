#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Main-sequence / red-giant stellar model grids.

This module provides the stellar models used to turn a star's initial mass
and the cluster's age, metallicity and helium abundance into absolute
magnitudes. Every model family shares the same interpolation engine and
differs only in grid shape and supported photometric systems.

Classes
-------
StellarModel : Capability interface
    `is_supported(filter_set_name)` and `lookup(age, feh, y, mass)`.

MsRgbModel : Tabulated isochrone grid
    Linear interpolation in [Fe/H], Y and log(age) between tabulated
    isochrones, followed by linear interpolation in initial mass along the
    derived isochrone.

ChabMsModel : Chaboyer-Dotter isochrones
    4 metallicities x 5 helium abundances x 19 ages in UBVRIJHK.

Examples
--------
>>> from clustercmd.core.models import make_model
>>> model = make_model("chaboyer", "chaboyer_ubvrijhk.h5")
>>> model.is_supported("UBVRIJHK")
True
>>> mags = model.lookup(age=9.6, feh=-0.2, y=0.27, mass=1.05)

Notes
-----
Isochrone entries are equivalent evolutionary points, so the same entry
index refers to the same evolutionary phase on every tabulated isochrone.
Derived isochrones are built by blending these entries; an entry that is
missing on any of the blended isochrones is dropped.
"""

import sys
from functools import lru_cache

import numpy as np
from numba import jit
from scipy.interpolate import interp1d

from ..data.loader import load_model_grid
from ..errors import OutOfGridRange

__all__ = ["StellarModel", "MsRgbModel", "ChabMsModel", "MODELS", "make_model"]


@jit(nopython=True, cache=True)
def _blend_isochrones(weights, masses, mags):
    """
    Weighted sum of EEP-aligned isochrones.

    Parameters
    ----------
    weights : `~numpy.ndarray` of shape `(Ncorner,)`
        Interpolation weights. Corners with zero weight are skipped, so
        their missing entries do not leak into the result.

    masses : `~numpy.ndarray` of shape `(Ncorner, Neep)`
        Initial masses along each isochrone.

    mags : `~numpy.ndarray` of shape `(Ncorner, Neep, Nfilt)`
        Absolute magnitudes along each isochrone.

    Returns
    -------
    mass : `~numpy.ndarray` of shape `(Neep,)`

    mag : `~numpy.ndarray` of shape `(Neep, Nfilt)`

    """
    ncorner, neep = masses.shape
    nfilt = mags.shape[2]
    mass = np.zeros(neep)
    mag = np.zeros((neep, nfilt))

    for k in range(ncorner):
        w = weights[k]
        if w == 0.0:
            continue
        for i in range(neep):
            mass[i] += w * masses[k, i]
            for j in range(nfilt):
                mag[i, j] += w * mags[k, i, j]

    return mass, mag


def _bracket(nodes, value, label):
    """
    Locate `value` between two grid nodes.

    Returns
    -------
    lo, hi : int
        Indices of the bracketing nodes (equal when `value` sits on a node).

    frac : float
        Fractional distance from `nodes[lo]` towards `nodes[hi]`.
    """
    if not np.isfinite(value) or value < nodes[0] or value > nodes[-1]:
        raise OutOfGridRange(
            "{} = {} outside grid range [{}, {}]".format(
                label, value, nodes[0], nodes[-1]
            )
        )

    hi = int(np.searchsorted(nodes, value))
    if nodes[hi] == value:
        return hi, hi, 0.0
    lo = hi - 1

    return lo, hi, (value - nodes[lo]) / (nodes[hi] - nodes[lo])


class StellarModel(object):
    """
    Interface shared by every stellar model family.

    Subclasses answer which photometric systems they tabulate and return
    absolute magnitudes for a star of a given initial mass in a cluster of
    given age, metallicity and helium abundance.
    """

    def is_supported(self, filter_set_name):
        raise NotImplementedError

    def lookup(self, age, feh, y, mass):
        raise NotImplementedError

    def agb_tip_mass(self, age, feh, y):
        raise NotImplementedError


class MsRgbModel(StellarModel):
    """
    Interpolates absolute magnitudes from a tabulated isochrone grid.

    Parameters
    ----------
    feh_grid : `~numpy.ndarray` of shape `(Nz,)`
        Sorted [Fe/H] nodes.

    y_grid : `~numpy.ndarray` of shape `(Ny,)`
        Sorted helium mass fraction nodes.

    age_grid : `~numpy.ndarray` of shape `(Nage,)`
        Sorted log10(age/yr) nodes.

    masses : `~numpy.ndarray` of shape `(Nz, Ny, Nage, Neep)`
        Initial mass of each isochrone entry. NaN marks a missing entry.

    mags : `~numpy.ndarray` of shape `(Nz, Ny, Nage, Neep, Nfilt)`
        Absolute magnitude of each isochrone entry.

    filters : list of str
        Names of the tabulated filters.

    filter_set : str, optional
        Name of the photometric system the grid is tabulated in. Default is
        `"UBVRIJHK"`.

    Attributes
    ----------
    xgrid : tuple of `~numpy.ndarray`
        The `(feh, y, logage)` node arrays.

    Examples
    --------
    >>> model = MsRgbModel.from_file("isochrones.h5")
    >>> model.lookup(age=9.0, feh=0.0, y=0.27, mass=1.0)
    """

    def __init__(self, feh_grid, y_grid, age_grid, masses, mags, filters,
                 filter_set="UBVRIJHK"):

        self.feh_grid = np.asarray(feh_grid, dtype=float)
        self.y_grid = np.asarray(y_grid, dtype=float)
        self.age_grid = np.asarray(age_grid, dtype=float)
        self.masses = np.ascontiguousarray(masses, dtype=float)
        self.mags = np.ascontiguousarray(mags, dtype=float)
        self.filters = list(filters)
        self.filter_set = filter_set
        self.xgrid = (self.feh_grid, self.y_grid, self.age_grid)

        # Check grid consistency
        for nodes in self.xgrid:
            if nodes.ndim != 1 or len(nodes) == 0 or np.any(np.diff(nodes) <= 0):
                raise ValueError("Grid nodes must be non-empty and strictly increasing.")
        shape = tuple(len(nodes) for nodes in self.xgrid)
        if self.masses.ndim != 4 or self.masses.shape[:3] != shape:
            raise ValueError(
                "Mass table shape {} does not match grid {}".format(
                    self.masses.shape, shape
                )
            )
        if self.mags.shape != self.masses.shape + (len(self.filters),):
            raise ValueError(
                "Magnitude table shape {} does not match masses {} and {} filters".format(
                    self.mags.shape, self.masses.shape, len(self.filters)
                )
            )

        # Memoize derived isochrones; the grid itself is never modified.
        self._derive = lru_cache(maxsize=64)(self._derive_isochrone)

    @classmethod
    def from_file(cls, gridfile, verbose=True):
        """
        Build the model from an HDF5 grid written by
        `~clustercmd.data.loader.save_model_grid`.
        """
        grid = load_model_grid(gridfile, verbose=verbose)

        model = cls(
            grid["feh"],
            grid["y"],
            grid["logage"],
            grid["mass"],
            grid["mags"],
            grid["filters"],
            filter_set=grid["filter_set"],
        )

        if verbose:
            sys.stderr.write("done!\n")

        return model

    @property
    def n_filters(self):
        return len(self.filters)

    def is_supported(self, filter_set_name):
        """Whether the grid is tabulated in photometric system `filter_set_name`."""
        return filter_set_name == self.filter_set

    def _derive_isochrone(self, age, feh, y):
        """
        Interpolate an isochrone at `(age, feh, y)`.

        Returns
        -------
        mass : `~numpy.ndarray` of shape `(Npts,)`
            Strictly increasing initial masses.

        mags : `~numpy.ndarray` of shape `(Npts, Nfilt)`
            Absolute magnitudes at those masses.
        """
        brackets = [
            _bracket(self.feh_grid, feh, "[Fe/H]"),
            _bracket(self.y_grid, y, "Y"),
            _bracket(self.age_grid, age, "logAge"),
        ]

        # Gather the (up to 8) corner isochrones with their weights.
        idx, weights = [], []
        for corner in np.ndindex(2, 2, 2):
            w = 1.0
            node = []
            for (lo, hi, frac), side in zip(brackets, corner):
                node.append(hi if side else lo)
                w *= frac if side else 1.0 - frac
            idx.append(tuple(node))
            weights.append(w)

        corner_masses = np.ascontiguousarray([self.masses[i] for i in idx])
        corner_mags = np.ascontiguousarray([self.mags[i] for i in idx])
        mass, mags = _blend_isochrones(
            np.array(weights, dtype=float), corner_masses, corner_mags
        )

        # Drop missing entries, then keep only entries above every mass
        # already kept so the isochrone is strictly increasing in mass.
        sel = np.isfinite(mass) & np.all(np.isfinite(mags), axis=1)
        mass, mags = mass[sel], mags[sel]
        if len(mass) > 1:
            running_max = np.maximum.accumulate(np.r_[-np.inf, mass[:-1]])
            keep = mass > running_max
            mass, mags = mass[keep], mags[keep]

        return mass, mags

    def derive_isochrone(self, age, feh, y):
        """
        Return the interpolated isochrone `(mass, mags)` at the given cluster
        age, metallicity and helium abundance.

        Raises
        ------
        OutOfGridRange
            If any of the inputs falls outside the tabulated nodes.
        """
        mass, mags = self._derive(float(age), float(feh), float(y))
        return mass.copy(), mags.copy()

    def agb_tip_mass(self, age, feh, y):
        """
        Largest initial mass still on the derived isochrone (the tip of the
        asymptotic giant branch). Stars above it have left the MS/RG phase.
        """
        mass, _ = self._derive(float(age), float(feh), float(y))
        if len(mass) == 0:
            raise OutOfGridRange(
                "No isochrone entries at logAge={}, [Fe/H]={}, Y={}".format(age, feh, y)
            )
        return mass[-1]

    def lookup(self, age, feh, y, mass):
        """
        Absolute magnitudes of a star of initial mass `mass`.

        Parameters
        ----------
        age : float
            log10(age/yr) of the cluster.

        feh : float
            Cluster [Fe/H].

        y : float
            Cluster helium mass fraction.

        mass : float
            Initial stellar mass in solar masses.

        Returns
        -------
        mags : `~numpy.ndarray` of shape `(Nfilt,)`
            Absolute magnitudes in every tabulated filter.

        Raises
        ------
        OutOfGridRange
            If `(age, feh, y)` lies outside the grid or `mass` lies outside
            the mass range of the derived isochrone.
        """
        iso_mass, iso_mags = self._derive(float(age), float(feh), float(y))

        if len(iso_mass) < 2 or not iso_mass[0] <= mass <= iso_mass[-1]:
            raise OutOfGridRange(
                "Mass {} outside isochrone range at logAge={}, [Fe/H]={}, Y={}".format(
                    mass, age, feh, y
                )
            )

        interpolator = interp1d(
            iso_mass, iso_mags, axis=0, kind="linear", assume_sorted=True
        )

        return interpolator(mass)


N_CHAB_FILTS = 8
N_CHAB_Z = 4
N_CHAB_Y = 5
N_CHAB_AGES = 19
MAX_CHAB_ENTRIES = 280


class ChabMsModel(MsRgbModel):
    """
    Chaboyer-Dotter main-sequence / red-giant isochrones.

    The grid spans 4 metallicities, 5 helium abundances and 19 ages with up
    to 280 entries per isochrone, tabulated in UBVRIJHK only.
    """

    def __init__(self, feh_grid, y_grid, age_grid, masses, mags, filters,
                 filter_set="UBVRIJHK"):
        super(ChabMsModel, self).__init__(
            feh_grid, y_grid, age_grid, masses, mags, filters, filter_set=filter_set
        )

        expected = (N_CHAB_Z, N_CHAB_Y, N_CHAB_AGES)
        if self.masses.shape[:3] != expected:
            raise ValueError(
                "Chaboyer grid must be {} but got {}".format(
                    expected, self.masses.shape[:3]
                )
            )
        if self.masses.shape[3] > MAX_CHAB_ENTRIES:
            raise ValueError(
                "Chaboyer isochrones hold at most {} entries".format(MAX_CHAB_ENTRIES)
            )
        if self.n_filters != N_CHAB_FILTS:
            raise ValueError(
                "Chaboyer grid has {} filters, expected {}".format(
                    self.n_filters, N_CHAB_FILTS
                )
            )

    def is_supported(self, filter_set_name):
        return filter_set_name == "UBVRIJHK"


MODELS = {
    "grid": MsRgbModel,
    "chaboyer": ChabMsModel,
}


def make_model(name, gridfile, verbose=True):
    """
    Build the stellar model family `name` from `gridfile`.

    Raises
    ------
    KeyError
        If `name` is not a known model family.
    """
    try:
        cls = MODELS[name.lower()]
    except KeyError:
        raise KeyError(
            "Unknown model family {!r}; available: {}".format(
                name, ", ".join(sorted(MODELS))
            )
        )

    if verbose:
        sys.stderr.write("Constructing {} isochrones...\n".format(name))

    return cls.from_file(gridfile, verbose=verbose)
