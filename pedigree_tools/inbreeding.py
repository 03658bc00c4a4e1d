"""Inbreeding coefficients straight from a pedigree.

Implements the path-weight recursion of Meuwissen and Luo (1992) with the
longest-ancestral-path (LAP) grouping compared by Sargolzaei and Iwaisaki
(2005), "Comparison of four direct algorithms for computing inbreeding
coefficients", Animal Science Journal 76, 401-406.

For an individual i, every ancestor j gets a weight w_j: the expected
fraction of j's genome in i, accumulated from progeny to parents. Then

    F_i = sum_j w_j**2 * D_j - 1

where D_j is the Mendelian sampling variance of j (w_i = 1, D_i included).
Ancestors are visited from the highest LAP group down; a parent always sits
in a lower group than its progeny, so each ancestor's weight is final when
it is reached and is only visited once per individual.
"""
import logging

import numpy as np
import pandas as pd

from .definitions import DefaultFloat, DefaultInt, UNKNOWN
from .pedigree import InbredPedigree, PedigreeLike, unpack

logger = logging.getLogger(__name__)


def longest_ancestral_paths(sire: np.ndarray, dam: np.ndarray) -> np.ndarray:
    """
    Length of the longest path from each individual up to a founder.

    Founders are 0. Requires parents to precede progeny.
    """
    n = len(sire)
    # slot n stands for the unknown parent
    lap = np.empty(n + 1, dtype=DefaultInt)
    lap[n] = -1
    for i in range(n):
        lap[i] = max(lap[sire[i]], lap[dam[i]]) + 1
    return lap[:n]


def compute_inbreeding(sire: np.ndarray, dam: np.ndarray) -> np.ndarray:
    """
    Inbreeding coefficients for parent id arrays ordered parents-first.

    Args:
        sire (np.ndarray): Sire id per individual, ``UNKNOWN`` (-1) if unknown.
        dam (np.ndarray): Dam id per individual, ``UNKNOWN`` if unknown.

    Returns:
        np.ndarray: F per individual.
    """
    n = len(sire)
    # Index n holds the unknown parent (F = -1); UNKNOWN == -1 indexes it directly.
    f = np.zeros(n + 1, dtype=DefaultFloat)
    f[n] = -1.0
    d = np.zeros(n, dtype=DefaultFloat)
    weight = np.zeros(n, dtype=DefaultFloat)
    # membership in the LAP groups; weights can underflow to 0 on deep pedigrees
    queued = np.zeros(n, dtype=bool)
    lap = longest_ancestral_paths(sire, dam)

    for i in range(n):
        s, m = sire[i], dam[i]
        d[i] = 0.5 - 0.25 * (f[s] + f[m])
        if s == UNKNOWN or m == UNKNOWN:
            f[i] = 0.0
            continue
        if i > 0 and s == sire[i - 1] and m == dam[i - 1]:
            # full sib of the previous individual
            f[i] = f[i - 1]
            continue

        groups = [[] for _ in range(lap[i] + 1)]
        groups[lap[i]].append(i)
        weight[i] = 1.0
        queued[i] = True
        fi = -1.0
        for t in range(lap[i], -1, -1):
            # parents land in lower groups, so groups[t] is complete here
            for j in groups[t]:
                for parent in (sire[j], dam[j]):
                    if parent == UNKNOWN:
                        continue
                    if not queued[parent]:
                        queued[parent] = True
                        groups[lap[parent]].append(parent)
                    weight[parent] += 0.5 * weight[j]
                fi += weight[j] * weight[j] * d[j]
                weight[j] = 0.0
                queued[j] = False
        f[i] = fi

    logger.debug("Computed inbreeding for %d individuals (max LAP %d).",
                 n, int(lap.max()) if n else -1)
    return f[:n]


def inbreeding(ped: PedigreeLike) -> pd.Series:
    """
    Inbreeding coefficients of every individual in a pedigree.

    Args:
        ped: Pedigree, or InbredPedigree whose stored F is returned as is.

    Returns:
        pd.Series: F indexed by label.
    """
    ped, f = unpack(ped)
    if f is None:
        f = compute_inbreeding(ped.sire, ped.dam)
    return pd.Series(np.asarray(f, dtype=DefaultFloat),
                     index=pd.Index(ped.label, dtype=object), name="F")


def with_inbreeding(ped: PedigreeLike) -> InbredPedigree:
    """Bundles a pedigree with its inbreeding coefficients, computing them once."""
    if isinstance(ped, InbredPedigree):
        return ped
    ped, _ = unpack(ped)
    f = compute_inbreeding(ped.sire, ped.dam)
    f.flags.writeable = False
    return InbredPedigree(pedigree=ped, f=f)
