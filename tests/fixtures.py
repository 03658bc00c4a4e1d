# tests/fixtures.py
"""Shared pedigrees and reference computations for the test-suite."""
import numpy as np

# Canonical 6-individual pedigree; None marks an unknown parent.
SIRE = [None, None, 1, 1, 4, 5]
DAM = [None, None, 2, None, 3, 2]
LABEL = [1, 2, 3, 4, 5, 6]

F_EXPECTED = np.array([0.0, 0.0, 0.0, 0.0, 0.125, 0.125])
D_EXPECTED = np.array([1.0, 1.0, 0.5, 0.75, 0.5, 0.46875])

TINV_EXPECTED = np.array([
    [1.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [0.0, 1.0, 0.0, 0.0, 0.0, 0.0],
    [-0.5, -0.5, 1.0, 0.0, 0.0, 0.0],
    [-0.5, 0.0, 0.0, 1.0, 0.0, 0.0],
    [0.0, 0.0, -0.5, -0.5, 1.0, 0.0],
    [0.0, -0.5, 0.0, 0.0, -0.5, 1.0],
])

T_EXPECTED = np.array([
    [1.00, 0.000, 0.00, 0.00, 0.0, 0.0],
    [0.00, 1.000, 0.00, 0.00, 0.0, 0.0],
    [0.50, 0.500, 1.00, 0.00, 0.0, 0.0],
    [0.50, 0.000, 0.00, 1.00, 0.0, 0.0],
    [0.50, 0.250, 0.50, 0.50, 1.0, 0.0],
    [0.25, 0.625, 0.25, 0.25, 0.5, 1.0],
])

A_EXPECTED = np.array([
    [1.0000, 0.0000, 0.5000, 0.5000, 0.5000, 0.2500],
    [0.0000, 1.0000, 0.5000, 0.0000, 0.2500, 0.6250],
    [0.5000, 0.5000, 1.0000, 0.2500, 0.6250, 0.5625],
    [0.5000, 0.0000, 0.2500, 1.0000, 0.6250, 0.3125],
    [0.5000, 0.2500, 0.6250, 0.6250, 1.1250, 0.6875],
    [0.2500, 0.6250, 0.5625, 0.3125, 0.6875, 1.1250],
])

# Rounded to 3 decimals
AINV_ROUNDED = np.array([
    [1.833, 0.500, -1.000, -0.667, 0.000, 0.000],
    [0.500, 2.033, -1.000, 0.000, 0.533, -1.067],
    [-1.000, -1.000, 2.500, 0.500, -1.000, 0.000],
    [-0.667, 0.000, 0.500, 1.833, -1.000, 0.000],
    [0.000, 0.533, -1.000, -1.000, 2.533, -1.067],
    [0.000, -1.067, 0.000, 0.000, -1.067, 2.133],
])

# Right (upper) Cholesky factor, rounded to 4 decimals
R_ROUNDED = np.array([
    [1.0000, 0.0000, 0.5000, 0.5000, 0.5000, 0.2500],
    [0.0000, 1.0000, 0.5000, 0.0000, 0.2500, 0.6250],
    [0.0000, 0.0000, 0.7071, 0.0000, 0.3536, 0.1768],
    [0.0000, 0.0000, 0.0000, 0.8660, 0.4330, 0.2165],
    [0.0000, 0.0000, 0.0000, 0.0000, 0.7071, 0.3536],
    [0.0000, 0.0000, 0.0000, 0.0000, 0.0000, 0.6847],
])

# Inverse of the left factor, rounded to 4 decimals
LINV_ROUNDED = np.array([
    [1.0000, 0.0000, 0.0000, 0.0000, 0.0000, 0.0000],
    [0.0000, 1.0000, 0.0000, 0.0000, 0.0000, 0.0000],
    [-0.7071, -0.7071, 1.4142, 0.0000, 0.0000, 0.0000],
    [-0.5774, 0.0000, 0.0000, 1.1547, 0.0000, 0.0000],
    [0.0000, 0.0000, -0.7071, -0.7071, 1.4142, 0.0000],
    [0.0000, -0.7303, 0.0000, 0.0000, -0.7303, 1.4606],
])

# Ten-animal pedigree with selfing (J) and repeated inbreeding
LETTERS_LABEL = ["A", "B", "C", "D", "E", "F", "G", "H", "I", "J"]
LETTERS_SIRE = [None, None, "A", "A", "D", "D", "E", "G", "H", "C"]
LETTERS_DAM = [None, None, "B", "C", "B", "C", "F", None, "G", "C"]


def dense(frame):
    """Dense float array behind a labelled (possibly sparse) frame."""
    if hasattr(frame, "sparse"):
        frame = frame.sparse.to_dense()
    return np.asarray(frame, dtype=float)


def tabular_a(sire_ids, dam_ids):
    """
    Dense relationship matrix by Henderson's tabular method.

    Parent ids are 0-based with -1 for unknown and must precede progeny.
    """
    n = len(sire_ids)
    a = np.zeros((n, n))
    for i in range(n):
        s, d = sire_ids[i], dam_ids[i]
        for j in range(i):
            a_js = a[j, s] if s >= 0 else 0.0
            a_jd = a[j, d] if d >= 0 else 0.0
            a[i, j] = a[j, i] = 0.5 * (a_js + a_jd)
        a[i, i] = 1.0 + (0.5 * a[s, d] if s >= 0 and d >= 0 else 0.0)
    return a


def random_pedigree(n, seed, n_founders=4, p_unknown=0.15, window=None):
    """
    Random parents-first pedigree as (sire, dam, label) label lists.

    Labels are strings unrelated to ids so tests cannot confuse the two.
    """
    rng = np.random.default_rng(seed)
    labels = [f"ind{k:04d}" for k in rng.permutation(n)]
    sire, dam = [], []
    for i in range(n):
        if i < n_founders:
            sire.append(None)
            dam.append(None)
            continue
        low = 0 if window is None else max(0, i - window)
        s = int(rng.integers(low, i))
        d = int(rng.integers(low, i))
        sire.append(None if rng.random() < p_unknown else labels[s])
        dam.append(None if rng.random() < p_unknown else labels[d])
    return sire, dam, labels
