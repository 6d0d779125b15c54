#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
clustercmd: Summary statistics and synthetic CMDs from cluster MCMC chains

A Pure Python package for post-processing the output of a Bayesian
stellar-cluster sampler: running statistics of the cluster parameters and
of every star's sampled masses, cluster-membership probabilities, and
synthetic photometry from tabulated isochrone grids.

The package is organized in modules for:
- Cluster, star and stellar-model machinery (`clustercmd.core`)
- Chain readers, model grids and filter sets (`clustercmd.data`)
- Running statistics, reporting and the pipeline (`clustercmd.analysis`)
- Photometric utilities (`clustercmd.utils`)

Usage
-----
For a full run::

    from clustercmd import MakeCMD, Settings
    settings = Settings(scatter_file="ngc188.scatter", output_base="ngc188",
                        model_file="chaboyer_ubvrijhk.h5")
    stats = MakeCMD(settings).run()

For photometry of a single system::

    from clustercmd.core import Cluster, CombinedLightSynth, Star, make_model
    from clustercmd.data import get_filter_set
    model = make_model("chaboyer", "chaboyer_ubvrijhk.h5")
    synth = CombinedLightSynth(model, get_filter_set("UBVRIJHK"))
    mags = synth.get_mags(Cluster([9.6, 0.27, -0.2, 10.0, 0.1]),
                          Star(primary_mass=1.1, mass_ratio=0.5))
"""

__version__ = "0.9.0"

from .analysis import MakeCMD, RunningStats, ReportGenerator
from .config import Settings
from .core import Cluster, CombinedLightSynth, Star, make_model
from .errors import FileNotFound, InvalidConfiguration, OutOfGridRange, ParseError
from .utils import add_mag

__all__ = [
    # Version
    "__version__",
    # Pipeline
    "MakeCMD",
    "Settings",
    "ReportGenerator",
    "RunningStats",
    # Core classes
    "Cluster",
    "Star",
    "CombinedLightSynth",
    "make_model",
    # Errors
    "FileNotFound",
    "ParseError",
    "InvalidConfiguration",
    "OutOfGridRange",
    # Photometry utilities
    "add_mag",
]
