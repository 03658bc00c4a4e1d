"""Wrap sparse matrices and vectors with pedigree labels.

Matrices are returned as pandas DataFrames with sparse columns so the labels
travel with the values while the storage stays sparse. ``to_sparse`` recovers
the scipy matrix.
"""
import numpy as np
import pandas as pd
from scipy.sparse import csc_matrix, issparse

from .definitions import DefaultFloat


def labelled_matrix(matrix, row_labels, col_labels=None) -> pd.DataFrame:
    """Return ``matrix`` as a sparse DataFrame indexed by the given labels."""
    if col_labels is None:
        col_labels = row_labels
    if not issparse(matrix):
        matrix = csc_matrix(np.asarray(matrix, dtype=DefaultFloat))
    return pd.DataFrame.sparse.from_spmatrix(
        csc_matrix(matrix, dtype=DefaultFloat),
        index=pd.Index(list(row_labels), dtype=object),
        columns=pd.Index(list(col_labels), dtype=object),
    )


def labelled_vector(values, labels, name=None) -> pd.Series:
    return pd.Series(np.asarray(values, dtype=DefaultFloat),
                     index=pd.Index(list(labels), dtype=object), name=name)


def to_sparse(frame: pd.DataFrame) -> csc_matrix:
    """Scipy CSC matrix behind a labelled sparse frame."""
    return csc_matrix(frame.sparse.to_coo())
