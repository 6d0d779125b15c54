#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Photometric filter set definitions.

A filter set is an ordered list of filter names together with the
extinction in each filter relative to the V band (``A_f / A_V``). The
cluster `absorption` parameter is A_V, so the apparent magnitude in filter
`f` is ``M_f + modulus + absorption * A_f / A_V``.

The UBVRIJHK coefficients are the Cardelli, Clayton & Mathis (1989)
values for R_V = 3.1.
"""

import numpy as np

__all__ = ["FilterSet", "FILTER_SETS", "FILTERS", "get_filter_set"]


class FilterSet(object):
    """
    Named photometric system.

    Parameters
    ----------
    name : str
        Name of the photometric system (e.g. ``"UBVRIJHK"``).

    filters : iterable of str
        Filter names in storage order.

    abs_coeffs : iterable of float
        ``A_f / A_V`` for each filter.
    """

    def __init__(self, name, filters, abs_coeffs):
        self.name = name
        self.filters = tuple(filters)
        self.abs_coeffs = tuple(abs_coeffs)
        if len(self.filters) != len(self.abs_coeffs):
            raise ValueError("Each filter needs exactly one absorption coefficient.")

    def __len__(self):
        return len(self.filters)

    def __repr__(self):
        return "FilterSet({!r}, {})".format(self.name, list(self.filters))

    def get_filter_name(self, i):
        return self.filters[i]

    def absorption(self, indices=None):
        """
        Return the `A_f / A_V` coefficients as an array.

        Parameters
        ----------
        indices : iterable of int, optional
            Active filter indices. Defaults to every filter in the set.
        """
        coeffs = np.asarray(self.abs_coeffs, dtype=float)
        if indices is None:
            return coeffs
        return coeffs[list(indices)]


FILTER_SETS = {
    "UBVRIJHK": FilterSet(
        "UBVRIJHK",
        ("U", "B", "V", "R", "I", "J", "H", "K"),
        (1.569, 1.337, 1.000, 0.751, 0.479, 0.282, 0.190, 0.114),
    ),
}

# Default photometric system
FILTERS = FILTER_SETS["UBVRIJHK"].filters


def get_filter_set(name):
    """
    Look up a filter set by name.

    Raises
    ------
    KeyError
        If `name` is not a known photometric system.
    """
    try:
        return FILTER_SETS[name]
    except KeyError:
        raise KeyError(
            "Unknown filter set {!r}; available: {}".format(
                name, ", ".join(sorted(FILTER_SETS))
            )
        )
