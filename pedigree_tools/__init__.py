# pedigree_tools package initialization
"""
Additive relationship structure from pedigrees: inbreeding, Mendelian
sampling variances, gene-flow factors, the relationship matrix A, its sparse
inverse and Cholesky factors, sub-matrix extraction and pedigree editing.
"""
import logging

from .definitions import UNKNOWN
from .editing import complete_pedigree, generation_numbers, pedigree_generations, prune_pedigree
from .exceptions import CyclicPedigreeError, PedigreeError, UnknownLabelError, ValidationError
from .geneflow import build_tinv, gene_flow, gene_flow_inverse, invert_tinv
from .inbreeding import compute_inbreeding, inbreeding, with_inbreeding
from .io import read_pedigree
from .labelled import to_sparse
from .mendelian import compute_d, meiosis_precision, meiosis_variance
from .pedigree import InbredPedigree, Pedigree, pedigree, pedigree_from_frame
from .relationship import (assemble_a, assemble_a_inverse, extract_subset,
                           relationship_coefficient, relationship_factor,
                           relationship_factor_inverse, relationship_matrix,
                           relationship_matrix_inverse)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "UNKNOWN",
    "Pedigree",
    "InbredPedigree",
    "pedigree",
    "pedigree_from_frame",
    "read_pedigree",
    "complete_pedigree",
    "generation_numbers",
    "pedigree_generations",
    "prune_pedigree",
    "inbreeding",
    "compute_inbreeding",
    "with_inbreeding",
    "meiosis_variance",
    "meiosis_precision",
    "compute_d",
    "gene_flow",
    "gene_flow_inverse",
    "build_tinv",
    "invert_tinv",
    "relationship_matrix",
    "relationship_matrix_inverse",
    "relationship_factor",
    "relationship_factor_inverse",
    "relationship_coefficient",
    "extract_subset",
    "assemble_a",
    "assemble_a_inverse",
    "to_sparse",
    "PedigreeError",
    "ValidationError",
    "CyclicPedigreeError",
    "UnknownLabelError",
]

__version__ = "0.1.0"
