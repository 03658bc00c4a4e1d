import numpy as np

# Float and integer precision used for every array and sparse matrix built by
# the package.
DefaultFloat = np.float64
DefaultInt = np.int64

# Internal marker for an unknown parent in the integer sire/dam arrays.
UNKNOWN = -1

# Values reserved for "unknown parent"; never valid as labels.
ZERO_LABELS = (0, "0")

# Strings treated as an unknown parent when reading pedigree tables.
MISSING_STRINGS = ("0", "0.0", "NA", "nan", "missing", "")

# Column names of the pedigree row tables returned by completion and pruning.
LABEL_COL = "label"
SIRE_COL = "sire"
DAM_COL = "dam"
GENERATION_COL = "generation"

DEFAULT_PRUNE_GENERATIONS = 2
