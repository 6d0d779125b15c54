#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Photometric utility functions for clustercmd.

This module contains functions for converting between magnitudes and fluxes,
combining the light of unresolved components, and shifting absolute model
magnitudes to apparent magnitudes.
"""

import numpy as np

__all__ = [
    "SENTINEL_MAG",
    "UNDETECTABLE_MAG",
    "mag_to_flux",
    "flux_to_mag",
    "add_mag",
    "apparent_mags",
    "is_detectable",
]

# Magnitude assigned to anything the models cannot produce.
SENTINEL_MAG = 99.999

# Magnitudes at or beyond this are treated as undetectable.
UNDETECTABLE_MAG = 90.0


def mag_to_flux(mag, zeropoints=1.0):
    """
    Convert magnitudes to flux densities.

    Parameters
    ----------
    mag : float or `~numpy.ndarray`
        Magnitudes.

    zeropoints : float or `~numpy.ndarray` with shape (Nfilt,)
        Flux density zero-points. Default is `1.`.

    Returns
    -------
    flux : float or `~numpy.ndarray`
        Flux densities corresponding to `mag`.

    """
    return 10 ** (-0.4 * np.asarray(mag, dtype=float)) * zeropoints


def flux_to_mag(flux, zeropoints=1.0):
    """
    Convert flux densities to magnitudes.

    Parameters
    ----------
    flux : float or `~numpy.ndarray`
        Flux densities.

    zeropoints : float or `~numpy.ndarray` with shape (Nfilt,)
        Flux density zero-points. Default is `1.`.

    Returns
    -------
    mag : float or `~numpy.ndarray`
        Magnitudes corresponding to `flux`.

    """
    return -2.5 * np.log10(np.asarray(flux, dtype=float) / zeropoints)


def add_mag(mag1, mag2):
    """
    Add magnitudes.

    Parameters
    ----------
    mag1 : float or `~numpy.ndarray`
        First set of magnitudes.

    mag2 : float or `~numpy.ndarray`
        Second set of magnitudes.

    Returns
    -------
    mag_combined : float or `~numpy.ndarray`
        Combined magnitudes corresponding to the combined flux from
        `mag1` and `mag2`.

    """
    # Compute combined flux.
    flux_combined = mag_to_flux(mag1) + mag_to_flux(mag2)

    # Convert back to magnitudes.
    return flux_to_mag(flux_combined)


def apparent_mags(abs_mags, modulus, absorption, abs_coeffs):
    """
    Shift absolute magnitudes to apparent magnitudes.

    Parameters
    ----------
    abs_mags : `~numpy.ndarray` with shape (Nfilt,)
        Absolute magnitudes.

    modulus : float
        Distance modulus `(m - M)_0`.

    absorption : float
        V-band absorption A(V).

    abs_coeffs : `~numpy.ndarray` with shape (Nfilt,)
        Relative absorption `A_f / A_V` in each filter.

    Returns
    -------
    mags : `~numpy.ndarray` with shape (Nfilt,)
        Apparent magnitudes.

    """
    return np.asarray(abs_mags, dtype=float) + modulus + absorption * np.asarray(
        abs_coeffs, dtype=float
    )


def is_detectable(mag):
    """Whether `mag` is brighter than the undetectable threshold."""
    return np.asarray(mag) < UNDETECTABLE_MAG
