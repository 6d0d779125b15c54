#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Readers for MCMC chain output.

The sampler leaves four synchronized text streams behind:

- ``<base>.cluster``: one row of cluster parameters per iteration,
- ``<base>.mass1`` / ``<base>.mass2``: one primary / secondary mass per
  star per iteration,
- the scatter (photometry) file the sampler was run on.

`ChainReader` walks them in lock step and yields one `ChainRow` per MCMC
iteration. Any malformed numeric or count field raises
`~clustercmd.errors.ParseError`.
"""

import warnings
from collections import namedtuple

import numpy as np

from ..core.cluster import NPARAMS
from ..core.star import Star
from ..errors import ParseError

__all__ = [
    "ChainRow",
    "ScatterRecord",
    "ChainReader",
    "read_mass_header",
    "read_param_header",
    "read_scatter_header",
]

ChainRow = namedtuple("ChainRow", ["params", "masses"])
ChainRow.__doc__ = """\
One MCMC iteration.

params : `~numpy.ndarray` of shape `(NPARAMS,)`
    Cluster parameters, inactive ones held at their initial values.
masses : `~numpy.ndarray` of shape `(2, Nstars)`
    Primary (row 0) and secondary (row 1) mass of every star.
"""

ScatterRecord = namedtuple("ScatterRecord", ["name", "obs_phot", "observed_status"])


def _to_float(token, label, lineno):
    try:
        return float(token)
    except ValueError:
        raise ParseError(
            "{}, line {}: cannot read {!r} as a number".format(label, lineno, token)
        )


def _to_int(token, label, lineno):
    try:
        return int(token)
    except ValueError:
        raise ParseError(
            "{}, line {}: cannot read {!r} as an integer".format(label, lineno, token)
        )


class _LineStream(object):
    """Numbered, non-blank lines of a text stream, split into tokens."""

    def __init__(self, fileobj, label):
        self.fileobj = fileobj
        self.label = label
        self.lineno = 0

    def next_tokens(self):
        """Tokens of the next non-blank line, or `None` at end of stream."""
        for line in self.fileobj:
            self.lineno += 1
            tokens = line.split()
            if tokens:
                return tokens
        return None

    def skip_line(self):
        """Discard one line (blank or not). Returns `False` at end of stream."""
        line = self.fileobj.readline()
        if not line:
            return False
        self.lineno += 1
        return True


class _TokenStream(_LineStream):
    """Whitespace-separated numbers, ignoring line breaks."""

    def __init__(self, fileobj, label):
        super(_TokenStream, self).__init__(fileobj, label)
        self._pending = []

    def next_float(self):
        """Next value in the stream, or `None` at end of stream."""
        if not self._pending:
            tokens = self.next_tokens()
            if tokens is None:
                return None
            self._pending = tokens[::-1]
        return _to_float(self._pending.pop(), self.label, self.lineno)


def read_mass_header(stream):
    """
    Read the header of a mass chain and return its star count.

    The header is a single line whose last token is the number of stars.
    """
    tokens = stream.next_tokens()
    if tokens is None:
        raise ParseError("{}: missing header".format(stream.label))

    return _to_int(tokens[-1], stream.label, stream.lineno)


def read_param_header(stream, nparams=NPARAMS):
    """
    Read the header of the cluster-parameter chain.

    The first line is skipped. The second holds a label followed by one
    `(active-flag, value)` pair per cluster parameter.

    Returns
    -------
    use_param : `~numpy.ndarray` of bool with shape `(nparams,)`
        Which parameters were sampled (and so appear in every row).

    params : `~numpy.ndarray` of shape `(nparams,)`
        Starting values; inactive parameters keep these throughout.
    """
    if not stream.skip_line():
        raise ParseError("{}: missing header".format(stream.label))
    tokens = stream.next_tokens()
    if tokens is None or len(tokens) < 1 + 2 * nparams:
        raise ParseError(
            "{}, line {}: expected {} (flag, value) pairs".format(
                stream.label, stream.lineno, nparams
            )
        )

    pairs = tokens[1 : 1 + 2 * nparams]
    use_param = np.array(
        [_to_int(t, stream.label, stream.lineno) != 0 for t in pairs[0::2]]
    )
    params = np.array([_to_float(t, stream.label, stream.lineno) for t in pairs[1::2]])

    return use_param, params


def read_scatter_header(stream, n_filters):
    """
    Read the header of the scatter file.

    The first line is skipped; the second holds one integer "use this
    filter" flag per filter of the photometric system; the third is
    skipped.

    Returns
    -------
    filters : list of int
        Indices of the active filters, in increasing order.
    """
    if not stream.skip_line():
        raise ParseError("{}: missing header".format(stream.label))
    tokens = stream.next_tokens()
    if tokens is None or len(tokens) < n_filters:
        raise ParseError(
            "{}, line {}: expected {} filter flags".format(
                stream.label, stream.lineno, n_filters
            )
        )
    flags = [_to_int(t, stream.label, stream.lineno) for t in tokens[:n_filters]]
    stream.skip_line()

    return [filt for filt, use in enumerate(flags) if use]


class ChainReader(object):
    """
    Synchronized reader over the parameter, mass and scatter streams.

    All headers are read on construction. Iterating `rows()` then yields
    one `ChainRow` per MCMC iteration; the sequence ends as soon as either
    mass stream or the parameter stream runs out, and a row that is only
    partially available is dropped. It cannot be restarted.

    Parameters
    ----------
    cluster_file : file-like
        Open ``.cluster`` stream.

    mass_files : 2-tuple of file-like
        Open ``.mass1`` and ``.mass2`` streams.

    scatter_file : file-like
        Open scatter (photometry) stream.

    n_filters : int
        Number of filters in the photometric system (flags in the scatter
        header).

    skip_star : callable, optional
        ``skip_star(star) -> bool``. Called after each scatter record is
        assigned to a star slot; while it returns `True` the record is
        discarded and the next one is read into the same slot.

    Attributes
    ----------
    n_stars : int
        Number of stars, from the mass-chain headers.

    stars : list of `~clustercmd.core.star.Star`
        One record per star slot, refreshed from the scatter stream on
        every row.

    filters : list of int
        Active filter indices.

    use_param : `~numpy.ndarray` of bool
        Which cluster parameters vary along the chain.

    initial_params : `~numpy.ndarray`
        Parameter values from the chain header.
    """

    def __init__(self, cluster_file, mass_files, scatter_file, n_filters,
                 skip_star=None):

        self._cluster = _LineStream(cluster_file, "cluster chain")
        self._mass = (
            _TokenStream(mass_files[0], "mass1 chain"),
            _TokenStream(mass_files[1], "mass2 chain"),
        )
        self._scatter = _LineStream(scatter_file, "scatter file")
        self.skip_star = skip_star

        # Star count
        counts = [read_mass_header(stream) for stream in self._mass]
        if counts[0] < 1:
            raise ParseError("Need at least one star in the mass chains.")
        if counts[0] != counts[1]:
            raise ParseError(
                "Different numbers of stars in mass1 ({}) and mass2 ({}) chains".format(
                    *counts
                )
            )
        self.n_stars = counts[0]

        # Sampled parameters and active filters
        self.use_param, self.initial_params = read_param_header(self._cluster)
        self.filters = read_scatter_header(self._scatter, n_filters)

        self.stars = [Star(n_filters=len(self.filters)) for _ in range(self.n_stars)]
        self._scatter_done = False
        self.nrows = 0

    def _next_scatter_record(self):
        tokens = self._scatter.next_tokens()
        if tokens is None:
            self._scatter_done = True
            return None

        label, lineno = self._scatter.label, self._scatter.lineno
        nfilt = len(self.filters)
        if len(tokens) < 2 * nfilt + 4:
            raise ParseError(
                "{}, line {}: expected {} fields, found {}".format(
                    label, lineno, 2 * nfilt + 4, len(tokens)
                )
            )

        # name, mags, sigmas (ignored), two ignored floats, status
        obs_phot = np.array([_to_float(t, label, lineno) for t in tokens[1 : 1 + nfilt]])
        for t in tokens[1 + nfilt : 3 + 2 * nfilt]:
            _to_float(t, label, lineno)
        status = _to_int(tokens[3 + 2 * nfilt], label, lineno)

        return ScatterRecord(tokens[0], obs_phot, status)

    def _read_star(self, j):
        """Refresh star slot `j` from the scatter stream."""
        star = self.stars[j]
        while not self._scatter_done:
            record = self._next_scatter_record()
            if record is None:
                if self.nrows == 0:
                    warnings.warn(
                        "Scatter file ran out before star slot {} was filled".format(j)
                    )
                break
            star.name = record.name
            star.obs_phot = record.obs_phot
            star.observed_status = record.observed_status
            if self.skip_star is None or not self.skip_star(star):
                break

    def _read_params(self, params):
        """Update `params` in place from the next chain row."""
        tokens = self._cluster.next_tokens()
        if tokens is None:
            return False

        active = np.flatnonzero(self.use_param)
        if len(tokens) < 1 + len(active):
            raise ParseError(
                "{}, line {}: expected {} parameter values".format(
                    self._cluster.label, self._cluster.lineno, len(active)
                )
            )
        # The leading token is the iteration counter.
        for p, token in zip(active, tokens[1:]):
            params[p] = _to_float(token, self._cluster.label, self._cluster.lineno)

        return True

    def rows(self):
        """
        Generate the chain rows.

        Yields
        ------
        row : `ChainRow`
        """
        params = self.initial_params.copy()

        while True:
            masses = np.zeros((2, self.n_stars))
            for j in range(self.n_stars):
                m1 = self._mass[0].next_float()
                m2 = self._mass[1].next_float()
                if m1 is None or m2 is None:
                    return
                masses[0, j] = m1
                masses[1, j] = m2
                self._read_star(j)

            if not self._read_params(params):
                return

            self.nrows += 1
            yield ChainRow(params.copy(), masses)

    def __iter__(self):
        return self.rows()
