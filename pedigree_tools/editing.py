"""Pedigree editing: completion, generation numbers and pruning.

Every function here returns new row tables; a ``Pedigree`` is never changed.
"""
import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .definitions import (DAM_COL, DEFAULT_PRUNE_GENERATIONS, DefaultInt, GENERATION_COL,
                          LABEL_COL, SIRE_COL, UNKNOWN, ZERO_LABELS)
from .exceptions import CyclicPedigreeError, ValidationError
from .pedigree import PedigreeLike, _as_list, is_unknown, normalize_value, unpack

logger = logging.getLogger(__name__)

# Visit states for the generation traversal
_NEW, _IN_PROGRESS, _DONE = 0, 1, 2


def generation_numbers(sire: Iterable[int], dam: Iterable[int], labels=None) -> np.ndarray:
    """
    Computes the generation number of every individual.

    Founders are generation 0; anyone else is one more than the larger
    generation of its known parents. Parent ids may point anywhere in the
    arrays (no ordering is assumed). The traversal keeps an explicit stack
    and a memo per id, so deep pedigrees cannot exhaust the call stack.

    Args:
        sire: Sire id per individual, ``UNKNOWN`` (-1) when unknown.
        dam: Dam id per individual, ``UNKNOWN`` when unknown.
        labels: Optional labels, only used to name the individual in errors.

    Returns:
        np.ndarray: Generation number per individual.

    Raises:
        CyclicPedigreeError: If an individual is its own ancestor.
    """
    sire = np.asarray(sire, dtype=DefaultInt)
    dam = np.asarray(dam, dtype=DefaultInt)
    n = len(sire)
    generation = np.full(n, UNKNOWN, dtype=DefaultInt)
    state = np.zeros(n, dtype=np.int8)

    for root in range(n):
        if state[root] == _DONE:
            continue
        stack = [root]
        while stack:
            i = stack[-1]
            if state[i] == _DONE:
                stack.pop()
            elif state[i] == _NEW:
                state[i] = _IN_PROGRESS
                for parent in (sire[i], dam[i]):
                    if parent == UNKNOWN:
                        continue
                    if state[parent] == _IN_PROGRESS:
                        raise CyclicPedigreeError(labels[parent] if labels is not None else int(parent))
                    if state[parent] == _NEW:
                        stack.append(parent)
            else:
                # parents are all done by now
                gen = 0
                for parent in (sire[i], dam[i]):
                    if parent != UNKNOWN:
                        gen = max(gen, generation[parent] + 1)
                generation[i] = gen
                state[i] = _DONE
                stack.pop()
    return generation


def pedigree_generations(ped: PedigreeLike) -> pd.Series:
    """Generation number of every individual of a pedigree, indexed by label."""
    ped, _ = unpack(ped)
    gens = generation_numbers(ped.sire, ped.dam, ped.label)
    return pd.Series(gens, index=pd.Index(ped.label, dtype=object), name=GENERATION_COL)


def complete_pedigree(sire, dam, label) -> pd.DataFrame:
    """
    Completes and orders a pedigree.

    Parents referenced in ``sire`` or ``dam`` but missing from ``label`` are
    added as founders ahead of the listed individuals, then rows are stably
    sorted by generation so parents precede their progeny.

    Args:
        sire: Sire label per individual (None, NaN, 0 or "0" when unknown).
        dam: Dam label per individual.
        label: Label per individual.

    Returns:
        pd.DataFrame: Columns label, sire, dam and generation, ordered by
        generation. Unknown parents are None.

    Raises:
        ValidationError: If the sequences differ in length or a label is
            missing or duplicated.
        CyclicPedigreeError: If an individual is its own ancestor.
    """
    sire = [None if is_unknown(v) else normalize_value(v) for v in _as_list(sire, "sire")]
    dam = [None if is_unknown(v) else normalize_value(v) for v in _as_list(dam, "dam")]
    label = [normalize_value(v) for v in _as_list(label, "label")]
    if len(sire) != len(dam):
        raise ValidationError("sire and dam have to be of the same length.")
    if len(sire) != len(label):
        raise ValidationError("label has to be of the same length as sire and dam.")
    if any(lab is None for lab in label):
        raise ValidationError("Labels must not be missing.")
    if any(lab in ZERO_LABELS for lab in label):
        raise ValidationError("0 is not an allowed label.")
    if len(set(label)) != len(label):
        raise ValidationError("Labels must be unique.")

    listed = set(label)
    added = [p for p in dict.fromkeys(sire + dam) if p is not None and p not in listed]
    if added:
        logger.debug("Adding %d parents missing from the label list.", len(added))

    labels = added + label
    sires = [None] * len(added) + sire
    dams = [None] * len(added) + dam
    index = {lab: k for k, lab in enumerate(labels)}
    sire_ids = np.array([UNKNOWN if s is None else index[s] for s in sires], dtype=DefaultInt)
    dam_ids = np.array([UNKNOWN if d is None else index[d] for d in dams], dtype=DefaultInt)

    generation = generation_numbers(sire_ids, dam_ids, labels)
    order = np.argsort(generation, kind="stable")
    logger.debug("Ordered %d individuals over %d generations.",
                 len(labels), int(generation.max()) + 1 if len(labels) else 0)

    frame = pd.DataFrame({
        LABEL_COL: pd.Series(labels, dtype=object),
        SIRE_COL: pd.Series(sires, dtype=object),
        DAM_COL: pd.Series(dams, dtype=object),
        GENERATION_COL: generation,
    })
    return frame.iloc[order].reset_index(drop=True)


def prune_pedigree(ped: PedigreeLike, select: Iterable,
                   ngen: Optional[int] = DEFAULT_PRUNE_GENERATIONS) -> pd.DataFrame:
    """
    Restricts a pedigree to selected individuals and their recent ancestors.

    The selection is generation 0. Each step adds the parents of the previous
    step's individuals that are not kept yet; the expansion stops after
    ``ngen`` steps or as soon as no new parent turns up.

    Args:
        ped: Pedigree (or InbredPedigree) to prune.
        select: Labels of the individuals to keep.
        ngen: Number of ancestor generations to keep; None keeps them all.

    Returns:
        pd.DataFrame: Rows label, sire, dam of the kept individuals in the
        pedigree's order. Parent labels are left as recorded, so the oldest
        kept individuals may reference parents that were cut off.

    Raises:
        ValueError: If ``ngen`` is negative.
        UnknownLabelError: If a selected label is absent from the pedigree.
    """
    if ngen is not None and ngen < 0:
        raise ValueError(f"ngen must be a non-negative number of generations, got {ngen}.")
    ped, _ = unpack(ped)
    select = list(dict.fromkeys(normalize_value(lab) for lab in _as_list(select, "select")))
    frontier = ped.ids_of(select)

    keep = np.zeros(ped.n, dtype=bool)
    keep[frontier] = True
    step = 0
    while len(frontier) and (ngen is None or step < ngen):
        parents = np.concatenate([ped.sire[frontier], ped.dam[frontier]])
        parents = np.unique(parents[parents != UNKNOWN])
        frontier = parents[~keep[parents]]
        keep[frontier] = True
        step += 1

    logger.debug("Pruned pedigree to %d of %d individuals after %d generations.",
                 int(keep.sum()), ped.n, step)
    return ped.to_frame().loc[keep].reset_index(drop=True)
