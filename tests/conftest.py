#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test configuration and fixtures for clustercmd test suite.

This module provides common test fixtures, utilities, and configuration
for all clustercmd tests.

The toy isochrone grid used throughout is linear in every coordinate, so
interpolated magnitudes are known exactly:

    M_f = 10 - 5 * mass + 0.5 * f + [Fe/H] + 2 * (Y - 0.25) + 0.1 * (logAge - 9)

and the AGB-tip mass of an isochrone is ``2 - 0.5 * (logAge - 9)``.
"""

import os
from pathlib import Path

import numpy as np
import pytest

# Use a writable cache directory for numba-compiled kernels
os.environ["NUMBA_CACHE_DIR"] = "/tmp/numba_cache"

from clustercmd.core.models import ChabMsModel, MsRgbModel
from clustercmd.data.filters import FILTERS

TOY_FEH = np.array([-0.5, 0.0])
TOY_Y = np.array([0.25, 0.30])
TOY_AGES = np.array([9.0, 9.5, 10.0])
MIN_MASS = 0.4
N_EEP = 6


def toy_tip(age):
    """AGB-tip mass of the toy grid."""
    return 2.0 - 0.5 * (age - 9.0)


def toy_mags(age, feh, y, mass):
    """Exact absolute magnitudes of the toy grid in all 8 filters."""
    return (
        10.0
        - 5.0 * mass
        + 0.5 * np.arange(len(FILTERS))
        + feh
        + 2.0 * (y - 0.25)
        + 0.1 * (age - 9.0)
    )


def make_toy_grid(feh_grid, y_grid, age_grid, n_eep=N_EEP, n_pad=1):
    """
    Build EEP-aligned mass and magnitude tables for the toy grid.

    `n_pad` trailing NaN entries are appended to every isochrone.
    """
    shape = (len(feh_grid), len(y_grid), len(age_grid), n_eep + n_pad)
    masses = np.full(shape, np.nan)
    mags = np.full(shape + (len(FILTERS),), np.nan)

    for i, feh in enumerate(feh_grid):
        for j, y in enumerate(y_grid):
            for k, age in enumerate(age_grid):
                m = np.linspace(MIN_MASS, toy_tip(age), n_eep)
                masses[i, j, k, :n_eep] = m
                mags[i, j, k, :n_eep] = [toy_mags(age, feh, y, mm) for mm in m]

    return masses, mags


@pytest.fixture(scope="session")
def toy_model():
    """Small 2 x 2 x 3 isochrone grid in UBVRIJHK."""
    masses, mags = make_toy_grid(TOY_FEH, TOY_Y, TOY_AGES)
    return MsRgbModel(TOY_FEH, TOY_Y, TOY_AGES, masses, mags, FILTERS)


@pytest.fixture(scope="session")
def chab_grid():
    """Nodes and tables shaped like the Chaboyer-Dotter grid."""
    feh = np.linspace(-1.0, 0.5, 4)
    y = np.linspace(0.23, 0.35, 5)
    ages = np.linspace(8.0, 10.16, 19)
    masses, mags = make_toy_grid(feh, y, ages)
    return feh, y, ages, masses, mags


@pytest.fixture(scope="session")
def chab_model(chab_grid):
    feh, y, ages, masses, mags = chab_grid
    return ChabMsModel(feh, y, ages, masses, mags, FILTERS)


# ============================================================================
# Chain files
# ============================================================================


def write_chain_files(
    directory,
    params,
    mass1,
    mass2,
    scatter,
    use_param=(1, 1, 1, 1, 1),
    initial=(9.5, 0.27, -0.2, 10.0, 0.1),
    filter_flags=(0, 1, 1, 0, 0, 0, 0, 0),
    base="run",
):
    """
    Write a set of chain files in the sampler's format.

    Parameters
    ----------
    directory : Path
        Output directory.

    params : list of list of float
        Values of the active parameters for every row.

    mass1, mass2 : list of list of float
        Primary / secondary mass of every star for every row.

    scatter : list of (name, mags, status)
        Scatter-file records; `mags` has one entry per active filter.

    Returns
    -------
    output_base : str

    scatter_file : str
    """
    directory = Path(directory)
    output_base = str(directory / base)
    nstars = len(mass1[0]) if mass1 else len(mass2[0])

    with open(output_base + ".cluster", "w") as f:
        f.write("logAge Y [Fe/H] modulus absorption logPost\n")
        pairs = " ".join("{} {}".format(u, v) for u, v in zip(use_param, initial))
        f.write("start {}\n".format(pairs))
        for i, row in enumerate(params):
            f.write("{} {}\n".format(i, " ".join(str(v) for v in row)))

    for suffix, rows in ((".mass1", mass1), (".mass2", mass2)):
        with open(output_base + suffix, "w") as f:
            f.write("masses of the cluster stars nStars {}\n".format(nstars))
            for row in rows:
                f.write(" ".join(str(v) for v in row) + "\n")

    scatter_file = str(directory / (base + ".scatter"))
    with open(scatter_file, "w") as f:
        f.write("id U B V R I J H K sigU sigB sigV sigR sigI sigJ sigH sigK\n")
        f.write(" ".join(str(flag) for flag in filter_flags) + "\n")
        f.write("id mags sigmas mass1 massRatio stage\n")
        for name, mags, status in scatter:
            f.write(
                "{} {} {} 1.0 0.0 {}\n".format(
                    name,
                    " ".join(str(m) for m in mags),
                    " ".join("0.01" for _ in mags),
                    status,
                )
            )

    return output_base, scatter_file


@pytest.fixture
def chain_writer(tmp_path):
    """Write chain files into the test's temporary directory."""

    def _write(*args, **kwargs):
        return write_chain_files(tmp_path, *args, **kwargs)

    return _write
