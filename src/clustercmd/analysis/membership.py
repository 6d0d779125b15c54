#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Cluster membership of sampled stars.

The sampler writes a primary mass of zero for every iteration in which a
star was assigned to the field population rather than the cluster.
"""

from enum import Enum

from .accumulator import EPS

__all__ = ["Membership", "classify_membership", "is_cluster_member"]


class Membership(Enum):
    MEMBER = "member"
    FIELD = "field"


def classify_membership(primary_mass, eps=EPS):
    """
    Classify one sampled star.

    Parameters
    ----------
    primary_mass : float
        Sampled primary mass for the row.

    eps : float, optional
        Masses at or below this mark a field star. Default is `EPS`.

    Returns
    -------
    membership : `Membership`
    """
    if primary_mass > eps:
        return Membership.MEMBER
    return Membership.FIELD


def is_cluster_member(primary_mass, eps=EPS):
    return classify_membership(primary_mass, eps=eps) is Membership.MEMBER
