"""Additive relationship matrix A, its inverse and its Cholesky factors.

All of them come from the sparse factors of Henderson's decomposition

    A = T D T' = R'R = L L',  with R = sqrt(D) T' and L = R',
    A^-1 = (T^-1)' D^-1 T^-1 = (L^-1)' L^-1,  with L^-1 = sqrt(D^-1) T^-1.

T^-1 and D have O(n) non-zeros, so A^-1 is assembled directly and stays
sparse however dense A is. Sub-matrices of A are taken with Colleau's
indirect method: solving A^-1 Y = X for an indicator matrix X gives the
requested columns of A without building A.

References:
    Henderson, C. R. (1976). A simple method for computing the inverse of a
    numerator relationship matrix used in prediction of breeding values.
    Biometrics 32, 69-83.
    Colleau, J.-J. (2002). An indirect approach to the extensive calculation
    of relationship coefficients. Genet Sel Evol 34, 409.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import scipy.linalg
from scipy.sparse import csc_matrix, diags, issparse
from scipy.sparse.linalg import spsolve

from .definitions import DefaultFloat
from .exceptions import ValidationError
from .geneflow import build_tinv, invert_tinv
from .inbreeding import compute_inbreeding
from .labelled import labelled_matrix
from .mendelian import compute_d
from .pedigree import Pedigree, PedigreeLike, normalize_value, unpack

logger = logging.getLogger(__name__)


def assemble_a(t, d: np.ndarray) -> csc_matrix:
    """A = T diag(D) T' as the crossproduct R'R of R = sqrt(D) T'."""
    r = diags(np.sqrt(d)) @ csc_matrix(t).T
    return csc_matrix(r.T @ r)


def assemble_a_inverse(tinv, dinv: np.ndarray) -> csc_matrix:
    """A^-1 = (T^-1)' diag(D^-1) T^-1 as the crossproduct of L^-1 = sqrt(D^-1) T^-1."""
    linv = diags(np.sqrt(dinv)) @ csc_matrix(tinv)
    return csc_matrix(linv.T @ linv)


def _mendelian(ped: PedigreeLike) -> Tuple[Pedigree, np.ndarray]:
    ped, f = unpack(ped)
    if f is None:
        f = compute_inbreeding(ped.sire, ped.dam)
    return ped, compute_d(f, ped.sire, ped.dam)


def _sparse_a_inverse(ped: PedigreeLike) -> Tuple[Pedigree, csc_matrix]:
    ped, d = _mendelian(ped)
    ainv = assemble_a_inverse(build_tinv(ped), 1.0 / d)
    logger.debug("Assembled A^-1 for %d individuals with %d non-zeros.", ped.n, ainv.nnz)
    return ped, ainv


def _subset(ped: PedigreeLike, labs: Sequence) -> Tuple[list, np.ndarray]:
    """Labels (normalised, in request order) and the dense block A[labs, labs]."""
    store, _ = unpack(ped)
    labs = list(labs) if not isinstance(labs, (str, bytes)) else [labs]
    if not labs:
        raise ValidationError("labs must name at least one individual.")
    ids = store.ids_of(labs)
    labels = [store.label[i] for i in ids]
    k = len(ids)

    store, ainv = _sparse_a_inverse(ped)
    # column j of X is the unit vector of individual labs[j]
    x = csc_matrix((np.ones(k, dtype=DefaultFloat), (ids, np.arange(k))), shape=(store.n, k))
    y = spsolve(ainv, x)
    # a single right-hand side comes back as a dense vector
    y = y.toarray() if issparse(y) else np.asarray(y).reshape(store.n, k)
    block = y[ids, :]
    # keep the upper triangle and mirror it
    block = np.triu(block) + np.triu(block, 1).T
    logger.debug("Extracted a %d x %d block of A from %d individuals.", k, k, store.n)
    return labels, block


def extract_subset(ped: PedigreeLike, labs: Sequence) -> pd.DataFrame:
    """
    Relationship matrix restricted to ``labs``, without building the full A.

    Args:
        ped: Pedigree or InbredPedigree.
        labs: Labels to keep; the output follows this order exactly.

    Returns:
        pd.DataFrame: Symmetric labelled sparse block A[labs, labs].

    Raises:
        UnknownLabelError: Listing every label absent from the pedigree.
        ValidationError: If ``labs`` is empty or repeats a label.
    """
    labels, block = _subset(ped, labs)
    return labelled_matrix(block, labels)


def relationship_coefficient(ped: PedigreeLike, x, y) -> float:
    """Additive relationship between two individuals (1 + F when ``x == y``)."""
    if normalize_value(x) == normalize_value(y):
        _, block = _subset(ped, [x])
        return float(block[0, 0])
    _, block = _subset(ped, [x, y])
    return float(block[0, 1])


def relationship_matrix(ped: PedigreeLike, labs: Optional[Sequence] = None) -> pd.DataFrame:
    """
    Additive relationship matrix A.

    Args:
        ped: Pedigree or InbredPedigree.
        labs: Optional labels restricting (and ordering) the matrix; the block
            is then computed by :func:`extract_subset`.

    Returns:
        pd.DataFrame: Labelled sparse symmetric A.
    """
    if labs is not None:
        return extract_subset(ped, labs)
    store, d = _mendelian(ped)
    a = assemble_a(invert_tinv(build_tinv(store)), d)
    return labelled_matrix(a, store.label)


def relationship_matrix_inverse(ped: PedigreeLike, labs: Optional[Sequence] = None) -> pd.DataFrame:
    """
    Inverse of the additive relationship matrix.

    Without ``labs`` this is Henderson's sparse A^-1 of the whole pedigree.
    With ``labs`` it is the inverse of the block A[labs, labs] (not a block
    of A^-1), solved through the block's Cholesky factor.
    """
    if labs is None:
        store, ainv = _sparse_a_inverse(ped)
        return labelled_matrix(ainv, store.label)
    labels, block = _subset(ped, labs)
    inverse = scipy.linalg.cho_solve(scipy.linalg.cho_factor(block, lower=True),
                                     np.eye(len(labels), dtype=DefaultFloat))
    inverse = np.triu(inverse) + np.triu(inverse, 1).T
    return labelled_matrix(inverse, labels)


def relationship_factor(ped: PedigreeLike, labs: Optional[Sequence] = None,
                        upper: bool = True) -> pd.DataFrame:
    """
    Cholesky factor of the relationship matrix.

    The right (upper-triangular) factor R with A = R'R is returned by
    default; ``upper=False`` gives the left factor L = R'. For the whole
    pedigree R = sqrt(D) T' is built from the gene-flow factors directly.
    With ``labs`` the factor is the Cholesky factor of A[labs, labs], in the
    same sparse labelled triangular form.

    Raises:
        UnknownLabelError: If ``labs`` names individuals absent from the pedigree.
    """
    if labs is None:
        store, d = _mendelian(ped)
        factor = diags(np.sqrt(d)) @ invert_tinv(build_tinv(store)).T
        labels = store.label
    else:
        labels, block = _subset(ped, labs)
        factor = scipy.linalg.cholesky(block, lower=False)
    factor = csc_matrix(factor)
    if not upper:
        factor = csc_matrix(factor.T)
    return labelled_matrix(factor, labels)


def relationship_factor_inverse(ped: PedigreeLike, labs: Optional[Sequence] = None) -> pd.DataFrame:
    """
    Inverse of the left Cholesky factor, L^-1, lower triangular.

    For the whole pedigree L^-1 = sqrt(D^-1) T^-1, reusing the sparse
    factors, so A^-1 = (L^-1)' L^-1. With ``labs`` it is the inverse of the
    left factor of A[labs, labs], by triangular solve.
    """
    if labs is None:
        store, d = _mendelian(ped)
        factor = diags(np.sqrt(1.0 / d)) @ build_tinv(store)
        labels = store.label
    else:
        labels, block = _subset(ped, labs)
        lower = scipy.linalg.cholesky(block, lower=True)
        factor = scipy.linalg.solve_triangular(lower, np.eye(len(labels), dtype=DefaultFloat),
                                               lower=True)
    return labelled_matrix(csc_matrix(factor), labels)
