#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
clustercmd core module: Cluster, star and stellar-model machinery.

This module contains the cluster parameter container, cataloged stars,
the isochrone-grid stellar models, the combined-light photometry
synthesizer and the white-dwarf initial-final mass relations.
"""

from .cluster import NPARAMS, PARAM_NAMES, Cluster
from .ifmr import IFMRS, get_ifmr, salaris_ifmr, williams_ifmr
from .models import MODELS, ChabMsModel, MsRgbModel, StellarModel, make_model
from .star import Star, StarStatus, get_status
from .synthesis import CombinedLightSynth

__all__ = [
    "PARAM_NAMES",
    "NPARAMS",
    "Cluster",
    "Star",
    "StarStatus",
    "get_status",
    "StellarModel",
    "MsRgbModel",
    "ChabMsModel",
    "MODELS",
    "make_model",
    "CombinedLightSynth",
    "IFMRS",
    "get_ifmr",
    "williams_ifmr",
    "salaris_ifmr",
]
