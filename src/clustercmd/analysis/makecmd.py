#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
End-to-end processing of a stellar-cluster MCMC run.

`MakeCMD` reads the sampler's chains row by row, keeps running statistics
of every cluster parameter and of every star's sampled masses and
synthesized photometry, and finally writes the summary tables and the
synthetic CMD track.

Examples
--------
>>> from clustercmd import MakeCMD, Settings
>>> settings = Settings(scatter_file="ngc188.scatter", output_base="ngc188",
...                     model_file="chaboyer_ubvrijhk.h5")
>>> stats = MakeCMD(settings).run()
"""

import sys
from contextlib import ExitStack

from ..core.cluster import Cluster
from ..core.ifmr import get_ifmr
from ..core.models import make_model
from ..core.star import StarStatus
from ..core.synthesis import CombinedLightSynth
from ..data.chains import ChainReader
from ..data.filters import get_filter_set
from ..errors import FileNotFound, InvalidConfiguration
from .accumulator import ChainStatistics
from .membership import is_cluster_member
from .report import ReportGenerator

__all__ = ["MakeCMD", "open_input"]


def open_input(path, verbose=True):
    """
    Open a text input file.

    Raises
    ------
    FileNotFound
        If the file is missing or unreadable.
    """
    if verbose:
        sys.stderr.write("Reading file  : {} (r)\n".format(path))
    try:
        return open(path, "r")
    except OSError as e:
        raise FileNotFound("File {} was not available: {}".format(path, e))


class MakeCMD(object):
    """
    Chain post-processing pipeline.

    Parameters
    ----------
    settings : `~clustercmd.config.Settings`
        Run settings; validated on construction.

    model : `~clustercmd.core.models.StellarModel`, optional
        Pre-built stellar model. If not provided it is loaded from
        `settings.model_file`.

    wd_photometry : callable, optional
        White-dwarf photometry collaborator handed to the synthesizer.

    Raises
    ------
    InvalidConfiguration
        If the settings are invalid, the model grid is malformed, or the
        model does not tabulate the requested filter set.
    """

    def __init__(self, settings, model=None, wd_photometry=None):

        self.settings = settings.validate()
        self.filter_set = get_filter_set(settings.filter_set)
        self.ifmr = get_ifmr(settings.ifmr)

        if model is None:
            if not settings.model_file:
                raise InvalidConfiguration("No model_file given.")
            try:
                model = make_model(
                    settings.model, settings.model_file, verbose=settings.verbose
                )
            except ValueError as e:
                raise InvalidConfiguration(
                    "Malformed {} grid {}: {}".format(
                        settings.model, settings.model_file, e
                    )
                )
        if not model.is_supported(self.filter_set.name):
            raise InvalidConfiguration(
                "The {} model does not support the {} filter set".format(
                    settings.model, self.filter_set.name
                )
            )
        self.model = model
        self.wd_photometry = wd_photometry

    def _skip_star(self, cluster):
        """Predicate selecting scatter records the sampler did not use."""
        min_mag = self.settings.min_mag
        max_mag = self.settings.max_mag
        i_mag = self.settings.mag_index
        model = self.model

        def skip_star(star):
            if star.get_status(cluster, model) != StarStatus.MSRG:
                return False
            return not min_mag <= star.obs_phot[i_mag] <= max_mag

        return skip_star

    def process(self, reader, synth, cluster):
        """
        Accumulate statistics over every row of `reader`.

        Parameters
        ----------
        reader : `~clustercmd.data.chains.ChainReader`
            Chain reader; its `stars` are updated in place.

        synth : `~clustercmd.core.synthesis.CombinedLightSynth`
            Photometry synthesizer.

        cluster : `~clustercmd.core.cluster.Cluster`
            Updated in place to the parameters of each row.

        Returns
        -------
        stats : `~clustercmd.analysis.accumulator.ChainStatistics`
        """
        eps = self.settings.eps
        stars = reader.stars
        stats = ChainStatistics(reader.n_stars, len(reader.filters), eps=eps)
        verbose = self.settings.verbose

        for row in reader.rows():
            stats.add_params(row.params)
            cluster.set_params(row.params)

            members = []
            for j, star in enumerate(stars):
                mass1, mass2 = row.masses[0, j], row.masses[1, j]
                if not is_cluster_member(mass1, eps=eps):
                    continue
                stats.add_masses(j, mass1, mass2)
                star.primary_mass = mass1
                star.set_mass_ratio(mass2 / mass1)
                members.append(j)

            for j in members:
                stats.add_photometry(j, synth.get_mags(cluster, stars[j]))

            stats.end_row()
            if verbose and stats.nrows % 1000 == 0:
                sys.stderr.write("\rProcessed {} rows".format(stats.nrows))

        if verbose:
            sys.stderr.write("\rProcessed {} rows\n".format(stats.nrows))

        return stats

    def run(self):
        """
        Process the chains and write the reports.

        Returns
        -------
        stats : `~clustercmd.analysis.accumulator.ChainStatistics`
            Final statistics.

        Raises
        ------
        FileNotFound, ParseError, InvalidConfiguration
            Fatal errors; no report is written.
        """
        settings = self.settings
        base = settings.output_base
        verbose = settings.verbose

        with ExitStack() as stack:
            scatter = stack.enter_context(open_input(settings.scatter_file, verbose))
            chain = stack.enter_context(open_input(base + ".cluster", verbose))
            mass1 = stack.enter_context(open_input(base + ".mass1", verbose))
            mass2 = stack.enter_context(open_input(base + ".mass2", verbose))

            reader = ChainReader(chain, (mass1, mass2), scatter, len(self.filter_set))
            if settings.mag_index >= len(reader.filters):
                raise InvalidConfiguration(
                    "Magnitude index {} but only {} active filters".format(
                        settings.mag_index, len(reader.filters)
                    )
                )

            cluster = Cluster(
                reader.initial_params,
                carbonicity=settings.carbonicity,
                m_wd_up=settings.m_wd_up,
            )
            reader.skip_star = self._skip_star(cluster)
            synth = CombinedLightSynth(
                self.model,
                self.filter_set,
                reader.filters,
                wd_photometry=self.wd_photometry,
            )

            stats = self.process(reader, synth, cluster)

        report = ReportGenerator(synth, ifmr=self.ifmr)
        report.write(base, stats, reader.stars, cluster, verbose=verbose)

        if verbose:
            sys.stderr.write("done!\n")

        return stats
