#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Combined-light photometry of (possibly binary) cluster stars.

`CombinedLightSynth` evaluates a stellar model for each component of a star
at the cluster's age, metallicity and helium abundance, moves the result to
the cluster's distance and extinction, and adds the component fluxes.

Examples
--------
>>> from clustercmd.core import Cluster, Star, CombinedLightSynth
>>> from clustercmd.data.filters import get_filter_set
>>> synth = CombinedLightSynth(model, get_filter_set("UBVRIJHK"), [1, 2])
>>> mags = synth.get_mags(Cluster([9.6, 0.27, -0.2, 10.0, 0.1]),
...                       Star(primary_mass=1.1, mass_ratio=0.5))
"""

import numpy as np

from ..errors import OutOfGridRange
from ..utils.photometry import SENTINEL_MAG, add_mag, apparent_mags
from .star import StarStatus, get_status

__all__ = ["CombinedLightSynth"]


class CombinedLightSynth(object):
    """
    Synthesizes the observed magnitudes of a star system.

    The synthesizer holds no per-call state: `get_mags` is a pure function
    of the cluster parameters, the star and the (read-only) model.

    Parameters
    ----------
    model : `~clustercmd.core.models.StellarModel`
        Main-sequence / red-giant model used for MS/RG components.

    filter_set : `~clustercmd.data.filters.FilterSet`
        Photometric system of the model grid.

    filters : iterable of int, optional
        Indices of the active filters within `filter_set`. Defaults to all.

    wd_photometry : callable, optional
        ``wd_photometry(cluster, mass) -> absolute magnitudes`` in every
        filter of `filter_set`, for white-dwarf components. Without it
        white dwarfs are reported as undetectable.

    Raises
    ------
    ValueError
        If `model` does not tabulate `filter_set`.
    """

    def __init__(self, model, filter_set, filters=None, wd_photometry=None):

        if not model.is_supported(filter_set.name):
            raise ValueError(
                "Model does not support the {} filter set".format(filter_set.name)
            )

        if filters is None:
            filters = range(len(filter_set))
        self.model = model
        self.filter_set = filter_set
        self.filters = list(filters)
        self.abs_coeffs = filter_set.absorption(self.filters)
        self.wd_photometry = wd_photometry

    @property
    def n_filters(self):
        return len(self.filters)

    def _component_mags(self, cluster, mass):
        """Apparent magnitudes of a single component in the active filters."""
        status = get_status(mass, cluster, self.model)
        sentinel = np.full(self.n_filters, SENTINEL_MAG)

        if status == StarStatus.MSRG:
            try:
                abs_mags = self.model.lookup(
                    cluster.log_age, cluster.feh, cluster.y, mass
                )
            except OutOfGridRange:
                return sentinel
        elif status == StarStatus.WD and self.wd_photometry is not None:
            abs_mags = self.wd_photometry(cluster, mass)
        else:
            return sentinel

        abs_mags = np.asarray(abs_mags, dtype=float)[self.filters]

        return apparent_mags(
            abs_mags, cluster.modulus, cluster.absorption, self.abs_coeffs
        )

    def get_mags(self, cluster, star):
        """
        Combined apparent magnitudes of `star` in the active filters.

        Parameters
        ----------
        cluster : `~clustercmd.core.cluster.Cluster`
            Cluster parameters.

        star : `~clustercmd.core.star.Star`
            Star whose primary mass and mass ratio are used.

        Returns
        -------
        mags : `~numpy.ndarray` of shape `(Nactive,)`
            Apparent magnitudes. Values of 90 or more mean the system is
            undetectable (outside the model grid, or a remnant without
            photometry); this is a valid result, not an error.
        """
        mags = self._component_mags(cluster, star.primary_mass)

        mass2 = star.secondary_mass
        if mass2 > 0.0:
            mags = add_mag(mags, self._component_mags(cluster, mass2))

        return mags
