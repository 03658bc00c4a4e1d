"""Gene-flow matrix T and its sparse inverse.

T^-1 is lower unit-triangular with -0.5 at (i, sire(i)) and (i, dam(i)), so
it has at most 3n non-zeros. T itself (the expected genome fraction each
ancestor passes to each individual) can fill up to n^2 entries.
"""
import logging

import numpy as np
import pandas as pd
from scipy.sparse import csc_matrix, identity, issparse
from scipy.sparse.linalg import spsolve

from .definitions import DefaultFloat, DefaultInt, UNKNOWN
from .labelled import labelled_matrix
from .pedigree import PedigreeLike, unpack

logger = logging.getLogger(__name__)


def build_tinv(ped: PedigreeLike) -> csc_matrix:
    """Sparse inverse gene-flow matrix T^-1 of a pedigree."""
    ped, _ = unpack(ped)
    n = ped.n
    own = np.arange(n, dtype=DefaultInt)
    rows = np.concatenate([own, own])
    cols = np.concatenate([ped.sire, ped.dam])
    known = cols != UNKNOWN
    # selfing puts both -0.5 in the same cell; coo -> csc sums them to -1
    off = csc_matrix((np.full(known.sum(), -0.5, dtype=DefaultFloat), (rows[known], cols[known])),
                     shape=(n, n))
    tinv = (identity(n, dtype=DefaultFloat, format="csc") + off).tocsc()
    tinv.sort_indices()
    logger.debug("Built T^-1 for %d individuals with %d non-zeros.", n, tinv.nnz)
    return tinv


def invert_tinv(tinv) -> csc_matrix:
    """
    Gene-flow matrix T from T^-1 by a sparse solve.

    The sparse identity is solved against the unit lower-triangular T^-1 with
    a sparse LU factorisation; the result is built column by column as a
    sparse matrix, so no dense n x n array is allocated.
    """
    n = tinv.shape[0]
    if n == 0:
        return csc_matrix((0, 0), dtype=DefaultFloat)
    t = spsolve(csc_matrix(tinv, dtype=DefaultFloat), identity(n, dtype=DefaultFloat, format="csc"))
    # a single column comes back as a dense vector
    t = csc_matrix(t) if issparse(t) else csc_matrix(np.asarray(t).reshape(n, 1))
    t.eliminate_zeros()
    logger.debug("Inverted T^-1 into T with %d non-zeros.", t.nnz)
    return t


def gene_flow_inverse(ped: PedigreeLike) -> pd.DataFrame:
    """Labelled sparse T^-1."""
    ped, _ = unpack(ped)
    return labelled_matrix(build_tinv(ped), ped.label)


def gene_flow(ped: PedigreeLike) -> pd.DataFrame:
    """Labelled sparse T."""
    ped, _ = unpack(ped)
    return labelled_matrix(invert_tinv(build_tinv(ped)), ped.label)
