#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Run settings for clustercmd.

`Settings` collects everything a `makecmd` run needs: input and output
locations, the stellar model, the photometric window used to select stars,
and the white-dwarf assumptions. Settings can be built directly or from
command-line arguments, and are checked by `Settings.validate` before any
file is opened.
"""

import argparse

from .analysis.accumulator import EPS
from .core.ifmr import IFMRS
from .core.models import MODELS
from .data.filters import FILTER_SETS
from .errors import InvalidConfiguration

__all__ = ["Settings", "build_parser"]


class Settings(object):
    """
    Settings of a `makecmd` run.

    Parameters
    ----------
    scatter_file : str
        Path of the scatter (photometry) file the sampler was run on.

    output_base : str
        Base path of the chain files; ``<base>.cluster``, ``<base>.mass1``
        and ``<base>.mass2`` are read and the reports are written next to
        them.

    model_file : str
        HDF5 isochrone grid.

    model : str, optional
        Stellar model family. Default is `"chaboyer"`.

    filter_set : str, optional
        Photometric system. Default is `"UBVRIJHK"`.

    min_mag, max_mag : float, optional
        Photometric window in the reference filter. MS/RG stars outside it
        are skipped in the scatter file. Defaults are `0.` and `30.`.

    mag_index : int, optional
        Index (0, 1 or 2) of the reference filter among the active
        filters. Default is `0`.

    m_wd_up : float, optional
        Largest initial mass that ends as a white dwarf. Default is `8.0`.

    carbonicity : float, optional
        Carbon fraction of white-dwarf cores. Default is `0.38`.

    ifmr : str, optional
        Initial-final mass relation. Default is `"williams"`.

    eps : float, optional
        Stuck tolerance and field-star mass threshold. Default is `1e-10`.

    verbose : bool, optional
        Whether to print progress messages. Default is `True`.
    """

    def __init__(
        self,
        scatter_file=None,
        output_base=None,
        model_file=None,
        model="chaboyer",
        filter_set="UBVRIJHK",
        min_mag=0.0,
        max_mag=30.0,
        mag_index=0,
        m_wd_up=8.0,
        carbonicity=0.38,
        ifmr="williams",
        eps=EPS,
        verbose=True,
    ):
        self.scatter_file = scatter_file
        self.output_base = output_base
        self.model_file = model_file
        self.model = model
        self.filter_set = filter_set
        self.min_mag = min_mag
        self.max_mag = max_mag
        self.mag_index = mag_index
        self.m_wd_up = m_wd_up
        self.carbonicity = carbonicity
        self.ifmr = ifmr
        self.eps = eps
        self.verbose = verbose

    def __repr__(self):
        return "Settings({})".format(
            ", ".join("{}={!r}".format(k, v) for k, v in sorted(vars(self).items()))
        )

    def validate(self):
        """
        Check the settings.

        Raises
        ------
        InvalidConfiguration
            On the first inconsistent or out-of-range setting.
        """
        for name in ("scatter_file", "output_base"):
            if not getattr(self, name):
                raise InvalidConfiguration("No {} given.".format(name))

        if self.mag_index not in (0, 1, 2):
            raise InvalidConfiguration(
                "{} not a valid magnitude index.  Choose 0,1,or 2.".format(self.mag_index)
            )
        if self.min_mag > self.max_mag:
            raise InvalidConfiguration(
                "min_mag ({}) is fainter than max_mag ({})".format(
                    self.min_mag, self.max_mag
                )
            )
        if self.filter_set not in FILTER_SETS:
            raise InvalidConfiguration("Unknown filter set {!r}".format(self.filter_set))
        if self.model.lower() not in MODELS:
            raise InvalidConfiguration("Unknown model family {!r}".format(self.model))
        if self.ifmr.lower() not in IFMRS:
            raise InvalidConfiguration("Unknown IFMR {!r}".format(self.ifmr))
        if not self.m_wd_up > 0:
            raise InvalidConfiguration("m_wd_up must be positive")
        if not self.eps > 0:
            raise InvalidConfiguration("eps must be positive")

        return self

    @classmethod
    def from_args(cls, argv=None):
        """Build settings from command-line arguments (`sys.argv` by default)."""
        args = build_parser().parse_args(argv)

        return cls(
            scatter_file=args.scatter,
            output_base=args.output,
            model_file=args.model_file,
            model=args.model,
            filter_set=args.filter_set,
            min_mag=args.min_mag,
            max_mag=args.max_mag,
            mag_index=args.index,
            m_wd_up=args.m_wd_up,
            carbonicity=args.carbonicity,
            ifmr=args.ifmr,
            eps=args.eps,
            verbose=not args.quiet,
        )


def build_parser():
    defaults = Settings()
    parser = argparse.ArgumentParser(
        prog="makecmd",
        description="Summarize stellar-cluster MCMC chains and build a synthetic CMD",
    )
    parser.add_argument(
        "--scatter", required=True, help="Scatter (photometry) file used by the sampler"
    )
    parser.add_argument(
        "--output", required=True, help="Base path of the .cluster/.mass1/.mass2 chains"
    )
    parser.add_argument(
        "--model-file", required=True, help="HDF5 isochrone grid"
    )
    parser.add_argument(
        "--model", default=defaults.model, choices=sorted(MODELS),
        help="Stellar model family",
    )
    parser.add_argument(
        "--filter-set", default=defaults.filter_set, help="Photometric system"
    )
    parser.add_argument("--min-mag", type=float, default=defaults.min_mag)
    parser.add_argument("--max-mag", type=float, default=defaults.max_mag)
    parser.add_argument(
        "--index", type=int, default=defaults.mag_index,
        help="Reference filter among the active filters (0, 1 or 2)",
    )
    parser.add_argument("--m-wd-up", type=float, default=defaults.m_wd_up)
    parser.add_argument("--carbonicity", type=float, default=defaults.carbonicity)
    parser.add_argument(
        "--ifmr", default=defaults.ifmr, choices=sorted(IFMRS),
        help="White-dwarf initial-final mass relation",
    )
    parser.add_argument("--eps", type=float, default=defaults.eps)
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress progress messages"
    )

    return parser
