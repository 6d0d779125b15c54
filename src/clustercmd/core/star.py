#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Cataloged stars and their evolutionary status.

A `Star` is one (possibly unresolved binary) system: a primary component
of initial mass `primary_mass` and a secondary of mass
`mass_ratio * primary_mass`. Its evolutionary status follows from its
mass, the cluster parameters and the stellar model.
"""

from enum import IntEnum

import numpy as np

from ..errors import OutOfGridRange

__all__ = ["StarStatus", "Star", "get_status"]


class StarStatus(IntEnum):
    """Evolutionary status codes, as written to the debug CMD track."""

    MSRG = 1  # main sequence or red giant
    WD = 3  # white dwarf
    NSBH = 4  # neutron star or black hole


def get_status(mass, cluster, model):
    """
    Evolutionary status of a component of initial mass `mass`.

    Components up to the AGB-tip mass of the cluster isochrone are still on
    the main sequence or giant branches; above it, up to the cluster's
    `m_wd_up`, they are white dwarfs; heavier stars end as neutron stars or
    black holes. When the cluster lies outside the model grid the AGB tip
    is unknown and everything up to `m_wd_up` is treated as MS/RG (the
    magnitude lookup then reports it as undetectable).
    """
    try:
        agb_tip = model.agb_tip_mass(cluster.log_age, cluster.feh, cluster.y)
    except OutOfGridRange:
        agb_tip = cluster.m_wd_up

    if mass <= agb_tip:
        return StarStatus.MSRG
    elif mass <= cluster.m_wd_up:
        return StarStatus.WD
    else:
        return StarStatus.NSBH


class Star(object):
    """
    One cataloged star.

    Parameters
    ----------
    name : str, optional
        Identifier read from the scatter file.

    n_filters : int, optional
        Number of active filters. Sets the length of `obs_phot`.

    primary_mass : float, optional
        Initial mass of the primary component. Default is `0.`.

    mass_ratio : float, optional
        Secondary-to-primary mass ratio. Default is `0.`.

    Attributes
    ----------
    obs_phot : `~numpy.ndarray` of shape `(n_filters,)`
        Observed magnitudes in the active filters.

    observed_status : int
        Status code from the scatter file.
    """

    def __init__(self, name="", n_filters=0, primary_mass=0.0, mass_ratio=0.0):
        self.name = name
        self.primary_mass = primary_mass
        self.mass_ratio = mass_ratio
        self.obs_phot = np.zeros(n_filters)
        self.observed_status = 0

    def __repr__(self):
        return "Star({!r}, mass={:g}, q={:g})".format(
            self.name, self.primary_mass, self.mass_ratio
        )

    @property
    def secondary_mass(self):
        return self.mass_ratio * self.primary_mass

    def set_mass_ratio(self, ratio):
        self.mass_ratio = ratio

    def get_status(self, cluster, model):
        """Evolutionary status of the primary component."""
        return get_status(self.primary_mass, cluster, model)
