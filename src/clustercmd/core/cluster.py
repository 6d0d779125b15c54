#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Cluster-level parameters.

The sampler varies five cluster parameters, always stored in the order
given by `PARAM_NAMES`. A `Cluster` also carries two fixed quantities used
when classifying stars: the carbon fraction of white-dwarf cores and the
largest precursor mass that still ends as a white dwarf.
"""

import numpy as np

__all__ = [
    "PARAM_NAMES",
    "NPARAMS",
    "AGE",
    "YYY",
    "FEH",
    "MOD",
    "ABS",
    "Cluster",
]

PARAM_NAMES = ("logAge", "Y", "[Fe/H]", "modulus", "absorption")
NPARAMS = len(PARAM_NAMES)

# Parameter indices
AGE, YYY, FEH, MOD, ABS = range(NPARAMS)


class Cluster(object):
    """
    Cluster parameter vector with its derived bounds.

    Parameters
    ----------
    params : iterable of float with length `NPARAMS`, optional
        Initial parameter values in `PARAM_NAMES` order. Defaults to zeros.

    carbonicity : float, optional
        Carbon mass fraction of white-dwarf cores. Default is `0.38`.

    m_wd_up : float, optional
        Largest initial mass that produces a white dwarf, in solar
        masses. Default is `8.0`.
    """

    def __init__(self, params=None, carbonicity=0.38, m_wd_up=8.0):
        if params is None:
            params = np.zeros(NPARAMS)
        params = np.array(params, dtype=float)
        if params.shape != (NPARAMS,):
            raise ValueError(
                "Expected {} cluster parameters, got {}".format(NPARAMS, params.shape)
            )
        self.params = params
        self.carbonicity = carbonicity
        self.m_wd_up = m_wd_up

    def __repr__(self):
        vals = ", ".join(
            "{}={:g}".format(n, v) for n, v in zip(PARAM_NAMES, self.params)
        )
        return "Cluster({})".format(vals)

    def set_param(self, p, value):
        self.params[p] = value

    def get_param(self, p):
        return self.params[p]

    def set_params(self, values):
        """Replace the whole parameter vector."""
        self.params[:] = values

    def copy(self):
        return Cluster(self.params, carbonicity=self.carbonicity, m_wd_up=self.m_wd_up)

    @property
    def log_age(self):
        return self.params[AGE]

    @property
    def y(self):
        return self.params[YYY]

    @property
    def feh(self):
        return self.params[FEH]

    @property
    def modulus(self):
        return self.params[MOD]

    @property
    def absorption(self):
        return self.params[ABS]
