#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Data loading utilities for clustercmd.

This module contains functions for loading tabulated main-sequence /
red-giant isochrone grids into memory for use by the stellar models.
"""

import sys

import h5py
import numpy as np

# Import filter definitions
from .filters import FILTERS

__all__ = ["load_model_grid", "save_model_grid"]


def load_model_grid(filepath, verbose=True):
    """
    Loads a tabulated isochrone grid stored in HDF5 format.

    The file holds one isochrone per `(feh, y, logage)` node. Isochrone
    entries are equivalent evolutionary points (EEPs) and are aligned
    across nodes; missing entries are NaN.

    Parameters
    ----------
    filepath : str
        The filepath of the grid file (typically .h5 format).

    verbose : bool, optional
        Whether to print progress messages. Default is `True`.

    Returns
    -------
    grid : dict
        Dictionary with keys:

        - ``"feh"``: `~numpy.ndarray` of shape `(Nz,)`, sorted [Fe/H] nodes
        - ``"y"``: `~numpy.ndarray` of shape `(Ny,)`, sorted helium nodes
        - ``"logage"``: `~numpy.ndarray` of shape `(Nage,)`, sorted log(age)
        - ``"mass"``: `~numpy.ndarray` of shape `(Nz, Ny, Nage, Neep)`,
          initial mass along each isochrone
        - ``"mags"``: `~numpy.ndarray` of shape `(Nz, Ny, Nage, Neep, Nfilt)`,
          absolute magnitudes
        - ``"filters"``: list of filter names
        - ``"filter_set"``: name of the photometric system

    Raises
    ------
    RuntimeError
        If the file cannot be read or misses a required dataset.

    ValueError
        If the dataset shapes are inconsistent.

    Examples
    --------
    >>> from clustercmd.data import load_model_grid
    >>> grid = load_model_grid('./data/chaboyer_ubvrijhk.h5')
    >>> print(grid["mags"].shape)
    """
    if verbose:
        sys.stderr.write("Reading isochrone grid {}...\n".format(filepath))

    try:
        with h5py.File(filepath, "r") as f:
            grid = {
                "feh": f["feh"][:].astype(float),
                "y": f["y"][:].astype(float),
                "logage": f["logage"][:].astype(float),
                "mass": f["mass"][:].astype(float),
                "mags": f["mags"][:].astype(float),
            }
            filters = f["mags"].attrs.get("filters", FILTERS)
            filter_set = f.attrs.get("filter_set", "UBVRIJHK")
    except (OSError, KeyError) as e:
        raise RuntimeError(f"Failed to load isochrone grid from {filepath}: {e}")

    # h5py hands back attribute strings as bytes for some writers.
    grid["filters"] = [
        filt.decode() if isinstance(filt, bytes) else str(filt) for filt in filters
    ]
    if isinstance(filter_set, bytes):
        filter_set = filter_set.decode()
    grid["filter_set"] = str(filter_set)

    # Check dimensions.
    shape = (len(grid["feh"]), len(grid["y"]), len(grid["logage"]))
    if grid["mass"].shape[:3] != shape:
        raise ValueError(
            "Mass table has shape {} but the grid nodes give {}".format(
                grid["mass"].shape, shape
            )
        )
    if grid["mags"].shape[:4] != grid["mass"].shape:
        raise ValueError("Magnitude and mass tables are not aligned.")
    if grid["mags"].shape[-1] != len(grid["filters"]):
        raise ValueError(
            "Magnitude table has {} filters but {} names were given".format(
                grid["mags"].shape[-1], len(grid["filters"])
            )
        )

    if verbose:
        sys.stderr.write(
            "Loaded {} x {} x {} isochrones in {} filters\n".format(
                *shape, len(grid["filters"])
            )
        )

    return grid


def save_model_grid(filepath, feh, y, logage, mass, mags, filters=None,
                    filter_set="UBVRIJHK"):
    """
    Write an isochrone grid in the layout read by `load_model_grid`.

    Parameters
    ----------
    filepath : str
        Output HDF5 path.

    feh, y, logage : `~numpy.ndarray`
        Sorted grid nodes.

    mass : `~numpy.ndarray` of shape `(Nz, Ny, Nage, Neep)`
        Initial masses.

    mags : `~numpy.ndarray` of shape `(Nz, Ny, Nage, Neep, Nfilt)`
        Absolute magnitudes.

    filters : list of str, optional
        Filter names. Defaults to the UBVRIJHK system.

    filter_set : str, optional
        Name of the photometric system. Default is `"UBVRIJHK"`.
    """
    if filters is None:
        filters = FILTERS

    with h5py.File(filepath, "w") as f:
        f.attrs["filter_set"] = filter_set
        f.create_dataset("feh", data=np.asarray(feh, dtype=float))
        f.create_dataset("y", data=np.asarray(y, dtype=float))
        f.create_dataset("logage", data=np.asarray(logage, dtype=float))
        f.create_dataset("mass", data=np.asarray(mass, dtype=float))
        dset = f.create_dataset("mags", data=np.asarray(mags, dtype=float))
        dset.attrs["filters"] = [str(filt) for filt in filters]
