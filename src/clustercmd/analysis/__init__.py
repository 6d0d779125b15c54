#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
clustercmd analysis module: Chain statistics and reporting.

This module contains the online statistics kept while walking a chain,
the cluster-membership classifier, the report generator and the
end-to-end `MakeCMD` pipeline.
"""

from .accumulator import (
    EPS,
    ChainStatistics,
    PhotometryAccumulator,
    RunningStats,
    RunningSummary,
)
from .makecmd import MakeCMD, open_input
from .membership import Membership, classify_membership, is_cluster_member
from .report import ReportGenerator

__all__ = [
    # Online statistics
    "EPS",
    "RunningStats",
    "RunningSummary",
    "PhotometryAccumulator",
    "ChainStatistics",
    # Membership
    "Membership",
    "classify_membership",
    "is_cluster_member",
    # Reporting
    "ReportGenerator",
    # Pipeline
    "MakeCMD",
    "open_input",
]
