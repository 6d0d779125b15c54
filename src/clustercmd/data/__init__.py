#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
clustercmd data module: Input streams, model grids and filter sets.

This module provides the readers for the sampler's chain output and scatter
file, the isochrone-grid loader, and the photometric system definitions.
"""

# Chain readers
from .chains import (
    ChainReader,
    ChainRow,
    ScatterRecord,
    read_mass_header,
    read_param_header,
    read_scatter_header,
)

# Filter definitions
from .filters import FILTER_SETS, FILTERS, FilterSet, get_filter_set

# Grid loading
from .loader import load_model_grid, save_model_grid

__all__ = [
    # Chain readers
    "ChainReader",
    "ChainRow",
    "ScatterRecord",
    "read_mass_header",
    "read_param_header",
    "read_scatter_header",
    # Filters
    "FilterSet",
    "FILTER_SETS",
    "FILTERS",
    "get_filter_set",
    # Grid loading
    "load_model_grid",
    "save_model_grid",
]
