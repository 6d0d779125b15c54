#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
clustercmd utilities module: Photometric utilities.
"""

# Photometry functions
from .photometry import (
    SENTINEL_MAG,
    UNDETECTABLE_MAG,
    add_mag,
    apparent_mags,
    flux_to_mag,
    is_detectable,
    mag_to_flux,
)

__all__ = [
    "SENTINEL_MAG",
    "UNDETECTABLE_MAG",
    "mag_to_flux",
    "flux_to_mag",
    "add_mag",
    "apparent_mags",
    "is_detectable",
]
