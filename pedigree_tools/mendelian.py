"""Mendelian sampling variance, the diagonal D of A = T D T'."""
import logging

import numpy as np
from scipy.sparse import diags

from .definitions import DefaultFloat
from .inbreeding import compute_inbreeding
from .labelled import labelled_matrix, labelled_vector
from .pedigree import PedigreeLike, unpack

logger = logging.getLogger(__name__)


def compute_d(f: np.ndarray, sire: np.ndarray, dam: np.ndarray) -> np.ndarray:
    """
    Mendelian sampling variance per individual.

    D_i = 1 - 0.25 * (2 + F_sire + F_dam), an unknown parent counting as
    F = -1. So D is 1 for founders, 0.75 - 0.25 F_p with one known parent p
    and 0.5 - 0.25 (F_s + F_d) with both.
    """
    f = np.append(np.asarray(f, dtype=DefaultFloat), -1.0)  # unknown parent at index -1
    return 1.0 - 0.25 * (2.0 + f[sire] + f[dam])


def _d_vector(ped: PedigreeLike) -> tuple:
    ped, f = unpack(ped)
    if f is None:
        f = compute_inbreeding(ped.sire, ped.dam)
    return ped, compute_d(f, ped.sire, ped.dam)


def _present(values: np.ndarray, labels, as_diagonal: bool, name: str):
    if as_diagonal:
        return labelled_matrix(diags(values, format="csc"), labels)
    return labelled_vector(values, labels, name=name)


def meiosis_variance(ped: PedigreeLike, as_diagonal: bool = False):
    """
    Mendelian sampling variance D of every individual.

    Args:
        ped: Pedigree or InbredPedigree (its F is reused).
        as_diagonal (bool): Return a sparse diagonal matrix instead of a vector.

    Returns:
        pd.Series indexed by label, or a labelled sparse diagonal DataFrame.
    """
    ped, d = _d_vector(ped)
    return _present(d, ped.label, as_diagonal, "D")


def meiosis_precision(ped: PedigreeLike, as_diagonal: bool = False):
    """Mendelian sampling precision D^-1 (elementwise reciprocal of D)."""
    ped, d = _d_vector(ped)
    return _present(1.0 / d, ped.label, as_diagonal, "DInv")
