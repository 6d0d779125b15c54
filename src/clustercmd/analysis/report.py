#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Fixed-width summary tables of a processed chain.

Three tables are produced, each written to a file named after the run's
output base:

- ``<base>.cmd``: per-star mass, membership and photometry statistics,
- ``<base>.cluster.stat``: per-parameter statistics,
- ``<base>.cmd.debug``: a synthetic CMD track at the mean cluster
  parameters.

The column layouts are read by downstream analysis scripts and must not
change. Formatting is pure: the same statistics always give the same text.
"""

import sys

from ..core.cluster import PARAM_NAMES
from ..core.ifmr import williams_ifmr
from ..core.star import Star, StarStatus
from ..utils.photometry import is_detectable

__all__ = ["ReportGenerator"]


class ReportGenerator(object):
    """
    Formats and writes the summary tables.

    Parameters
    ----------
    synth : `~clustercmd.core.synthesis.CombinedLightSynth`
        Photometry synthesizer; its model and active filters are used for
        the debug track and for the white-dwarf status test.

    ifmr : callable, optional
        ``ifmr(cluster, precursor_mass) -> final mass`` used for stars whose
        primary is a white dwarf. Default is `williams_ifmr`.

    mass_step : float, optional
        Mass spacing of the synthetic debug track. Default is `0.01`.
    """

    def __init__(self, synth, ifmr=None, mass_step=0.01):
        self.synth = synth
        self.ifmr = williams_ifmr if ifmr is None else ifmr
        self.mass_step = mass_step

    @property
    def filter_names(self):
        fs = self.synth.filter_set
        return [fs.get_filter_name(f) for f in self.synth.filters]

    def star_table(self, stats, stars, cluster):
        """
        Per-star table.

        Parameters
        ----------
        stats : `~clustercmd.analysis.accumulator.ChainStatistics`
            Final chain statistics.

        stars : list of `~clustercmd.core.star.Star`
            Star records as left by the last row (names and last sampled
            masses).

        cluster : `~clustercmd.core.cluster.Cluster`
            Cluster parameters of the last row, used to decide whether a
            star is a white dwarf.

        Returns
        -------
        table : str
        """
        lines = []

        # Header
        head = "     Star    "
        for m in (1, 2):
            head += "meanmass%d  sigmass%d   minmass%d   maxmass%d stuck%d meanStep%d " % (
                (m,) * 6
            )
            if m == 1:
                head += "meanWDMass%d sigWDmass%d " % (m, m)
            head += "CSprob%d Niter%d   " % (m, m)
        for name in self.filter_names:
            head += "%8s " % ("mean" + name)
            head += "  %8s   " % ("var" + name)
        lines.append(head)

        for j, star in enumerate(stars):
            row = "%9s  " % star.name
            cs_prob = stats.membership_probability(j)

            for m in range(2):
                summ = stats.masses[m][j].finalize()
                row += "%11.5f %9.5f %10.5f %10.5f %6d  %8.6f  " % (
                    summ.mean,
                    summ.sigma,
                    summ.min,
                    summ.max,
                    summ.stuck,
                    summ.mean_step,
                )
                if m == 0:
                    row += self._wd_columns(star, cluster, summ)
                row += "%6.4f %6.0f " % (cs_prob, summ.count)

            mean, variance = stats.photometry.finalize(j)
            for mu, var in zip(mean, variance):
                row += "%10f %10.4e " % (mu, var)
            lines.append(row)

        return "\n".join(lines) + "\n"

    def _wd_columns(self, star, cluster, summ):
        """Final white-dwarf mass and its 1-sigma lower difference."""
        if star.get_status(cluster, self.synth.model) == StarStatus.WD:
            final = self.ifmr(cluster, summ.mean)
            lower = self.ifmr(cluster, summ.mean - summ.sigma)
            return "%10.5f  %9.3e  " % (final, final - lower)
        return "%10.5f  %9.3e  " % (0.0, 0.0)

    def param_table(self, stats):
        """Per-parameter table."""
        lines = ["Parameter     mean     sigma       min      max    stuck  meanStep"]
        for name, pstats in zip(PARAM_NAMES, stats.params):
            summ = pstats.finalize()
            lines.append(
                "%-10s %8.5f %9.5f %10.5f %8.5f %6d  %8.5f"
                % (
                    name,
                    summ.mean,
                    summ.sigma,
                    summ.min,
                    summ.max,
                    summ.stuck,
                    summ.mean_step,
                )
            )

        return "\n".join(lines) + "\n"

    def track(self, stats, cluster):
        """
        Synthetic CMD track at the mean cluster parameters.

        Single stars from mass 0 up to `m_wd_up` in steps of `mass_step`
        are synthesized. Undetectable points are dropped. Main-sequence and
        giant points are kept only while each one is brighter (in the first
        active filter) than the last one kept; after the first point that
        turns back, the rest of that branch is dropped. Remnants are always
        kept.

        Returns
        -------
        points : list of (float, `~clustercmd.core.star.StarStatus`, `~numpy.ndarray`)
            Mass, status and magnitudes of every kept point.
        """
        mean_cluster = cluster.copy()
        mean_cluster.set_params(stats.mean_params())

        npts = int(mean_cluster.m_wd_up / self.mass_step + 1e-9) + 1
        points = []
        prev_mag = 100.0

        for i in range(npts):
            star = Star(primary_mass=i * self.mass_step, mass_ratio=0.0)
            mags = self.synth.get_mags(mean_cluster, star)
            if not is_detectable(mags[0]):
                continue

            status = star.get_status(mean_cluster, self.synth.model)
            if status == StarStatus.MSRG:
                if prev_mag > mags[0]:
                    points.append((star.primary_mass, status, mags))
                    prev_mag = mags[0]
                else:
                    prev_mag = 0.0
            else:
                points.append((star.primary_mass, status, mags))

        return points

    def debug_track(self, stats, cluster):
        """Debug CMD table built from `track`."""
        head = " mass stage1" + "".join(
            "          %s" % name for name in self.filter_names
        )
        lines = [head]

        for mass, status, mags in self.track(stats, cluster):
            if status == StarStatus.MSRG:
                row = "%5.2f %6d " % (mass, status)
            else:
                row = "%5.2f %3d " % (mass, status)
            row += "".join("%10f " % mag for mag in mags)
            lines.append(row)

        return "\n".join(lines) + "\n"

    def write(self, output_base, stats, stars, cluster, verbose=True):
        """
        Write all three tables next to `output_base`.

        Returns
        -------
        paths : list of str
            Files written.
        """
        outputs = [
            (output_base + ".cmd", self.star_table(stats, stars, cluster)),
            (output_base + ".cluster.stat", self.param_table(stats)),
            (output_base + ".cmd.debug", self.debug_track(stats, cluster)),
        ]

        for path, text in outputs:
            if verbose:
                sys.stderr.write("Writing file  : {} (w)\n".format(path))
            with open(path, "w") as f:
                f.write(text)

        return [path for path, _ in outputs]
