"""Validated, immutable pedigree store.

A pedigree is held as two integer arrays of parent ids plus the tuple of
external labels. The id of an individual is its position in the label
sequence, so ``label[k]`` has id ``k``. Parents always have a smaller id than
their progeny; a parent that would break this is stored as unknown.
"""
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .definitions import DAM_COL, DefaultInt, LABEL_COL, SIRE_COL, UNKNOWN, ZERO_LABELS
from .exceptions import UnknownLabelError, ValidationError

logger = logging.getLogger(__name__)


def normalize_value(value: Any) -> Optional[Hashable]:
    """
    Normalises a raw label or parent value.

    Missing values (None, NaN, pd.NA) become None, numpy scalars become plain
    Python scalars and integral floats become ints, so ``3.0`` read from a
    pandas column with missing parents matches the label ``3``.
    """
    if value is None:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if not isinstance(value, str) and pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def is_unknown(value: Any) -> bool:
    """True for every encoding of an unknown parent (missing or zero)."""
    value = normalize_value(value)
    return value is None or value in ZERO_LABELS


def _as_list(values, name: str) -> list:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise TypeError(f"{name} must be a sequence of labels, got {type(values).__name__}.")
    return list(values)


def _normalize_label(value: Any, position: int) -> Union[int, str]:
    label = normalize_value(value)
    if label is None:
        raise ValidationError(f"Label at position {position} is missing.")
    if label in ZERO_LABELS:
        raise ValidationError("0 is not an allowed label.")
    if isinstance(label, bool) or not isinstance(label, (int, str)):
        raise ValidationError(
            f"Label {value!r} at position {position} must be an integer or a string."
        )
    return label


def _resolve_parents(values: list, index: Mapping, role: str) -> np.ndarray:
    ids = np.full(len(values), UNKNOWN, dtype=DefaultInt)
    unresolved = []
    for i, value in enumerate(values):
        parent = normalize_value(value)
        if isinstance(parent, bool):
            raise ValidationError(f"{role.capitalize()} value {value!r} at position {i} is not a label.")
        if parent is None or parent in ZERO_LABELS:
            continue
        try:
            ids[i] = index[parent]
        except (KeyError, TypeError):
            unresolved.append(value)
    if unresolved:
        raise ValidationError(
            f"{role.capitalize()} labels not found among the individual labels: "
            f"{list(dict.fromkeys(unresolved))}"
        )
    return ids


@dataclass(frozen=True, eq=False)
class Pedigree:
    """
    Immutable pedigree: parent ids per individual and the label map.

    Use :meth:`construct` (or :func:`pedigree`) rather than the dataclass
    constructor; it validates the input and builds the label map.

    Attributes:
        sire (np.ndarray): Sire id per individual, ``UNKNOWN`` (-1) if unknown.
        dam (np.ndarray): Dam id per individual, ``UNKNOWN`` (-1) if unknown.
        label (tuple): External label per individual, in id order.
        index (Mapping): Read-only label -> id map.
    """
    sire: np.ndarray
    dam: np.ndarray
    label: Tuple[Union[int, str], ...]
    index: Mapping = field(repr=False)

    @classmethod
    def construct(cls, sire, dam, label) -> "Pedigree":
        """
        Validates three parallel sequences and builds a pedigree.

        Args:
            sire: Sire label per individual; None, NaN, 0 or "0" when unknown.
            dam: Dam label per individual, encoded like ``sire``.
            label: Unique label per individual. The order of this sequence
                defines the ids and must list parents before their progeny.

        Returns:
            Pedigree: The validated store.

        Raises:
            TypeError: If an argument is not a sequence.
            ValidationError: On length mismatch, a zero, missing or duplicated
                label, or a parent label that does not occur in ``label``.
        """
        sire = _as_list(sire, "sire")
        dam = _as_list(dam, "dam")
        label = _as_list(label, "label")
        n = len(label)
        if len(sire) != n or len(dam) != n:
            raise ValidationError(
                f"sire ({len(sire)}), dam ({len(dam)}) and label ({n}) must have the same length."
            )

        labels = tuple(_normalize_label(value, k) for k, value in enumerate(label))
        index = {}
        for k, lab in enumerate(labels):
            if lab in index:
                raise ValidationError(f"Label {lab!r} is duplicated (positions {index[lab]} and {k}).")
            index[lab] = k

        sire_ids = _resolve_parents(sire, index, "sire")
        dam_ids = _resolve_parents(dam, index, "dam")

        # Parents must precede progeny; later (or self) references are dropped.
        own = np.arange(n, dtype=DefaultInt)
        late = (sire_ids >= own) | (dam_ids >= own)
        if late.any():
            logger.warning(
                "%d individuals list a parent that does not precede them; "
                "those parents are stored as unknown: %s",
                int(late.sum()), [labels[i] for i in np.flatnonzero(late)[:10]],
            )
            sire_ids[sire_ids >= own] = UNKNOWN
            dam_ids[dam_ids >= own] = UNKNOWN

        sire_ids.flags.writeable = False
        dam_ids.flags.writeable = False
        logger.debug("Constructed pedigree with %d individuals.", n)
        return cls(sire=sire_ids, dam=dam_ids, label=labels, index=MappingProxyType(index))

    @property
    def n(self) -> int:
        return len(self.label)

    def __len__(self) -> int:
        return len(self.label)

    def __repr__(self) -> str:
        return f"<Pedigree with {self.n} individuals>"

    @property
    def is_founder(self) -> np.ndarray:
        return (self.sire == UNKNOWN) & (self.dam == UNKNOWN)

    def ids_of(self, labels: Sequence) -> np.ndarray:
        """
        Maps labels to ids, keeping the given order.

        Raises:
            UnknownLabelError: Listing every label absent from the pedigree.
            ValidationError: If a label is requested twice.
        """
        labels = [normalize_value(lab) for lab in _as_list(labels, "labels")]
        missing = [lab for lab in labels if lab not in self.index]
        if missing:
            raise UnknownLabelError(missing)
        if len(set(labels)) != len(labels):
            duplicated = [lab for lab in dict.fromkeys(labels) if labels.count(lab) > 1]
            raise ValidationError(f"Labels requested more than once: {duplicated}")
        return np.array([self.index[lab] for lab in labels], dtype=DefaultInt)

    def label_of(self, ids: Iterable[int]) -> List[Optional[Union[int, str]]]:
        """Labels for the given ids; ``UNKNOWN`` maps to None."""
        return [None if i == UNKNOWN else self.label[i] for i in ids]

    @property
    def sire_labels(self) -> List[Optional[Union[int, str]]]:
        return self.label_of(self.sire)

    @property
    def dam_labels(self) -> List[Optional[Union[int, str]]]:
        return self.label_of(self.dam)

    def to_frame(self) -> pd.DataFrame:
        """Pedigree rows as a DataFrame with label, sire and dam columns."""
        return pd.DataFrame({
            LABEL_COL: pd.Series(self.label, dtype=object),
            SIRE_COL: pd.Series(self.sire_labels, dtype=object),
            DAM_COL: pd.Series(self.dam_labels, dtype=object),
        })


@dataclass(frozen=True, eq=False)
class InbredPedigree:
    """A pedigree bundled with its inbreeding coefficients."""
    pedigree: Pedigree
    f: np.ndarray

    def __post_init__(self):
        if len(self.f) != self.pedigree.n:
            raise ValidationError(
                f"Inbreeding vector has {len(self.f)} values for {self.pedigree.n} individuals."
            )

    @property
    def label(self):
        return self.pedigree.label

    @property
    def n(self) -> int:
        return self.pedigree.n

    def __len__(self) -> int:
        return self.pedigree.n

    def __repr__(self) -> str:
        return f"<InbredPedigree with {self.n} individuals>"


PedigreeLike = Union[Pedigree, InbredPedigree]


def unpack(ped: PedigreeLike) -> Tuple[Pedigree, Optional[np.ndarray]]:
    """Splits either store state into the pedigree and its F (None if not computed)."""
    if isinstance(ped, InbredPedigree):
        return ped.pedigree, ped.f
    if isinstance(ped, Pedigree):
        return ped, None
    raise TypeError(f"Expected a Pedigree or InbredPedigree, got {type(ped).__name__}.")


def pedigree(sire, dam, label) -> Pedigree:
    """Shorthand for :meth:`Pedigree.construct`."""
    return Pedigree.construct(sire, dam, label)


def pedigree_from_frame(frame: pd.DataFrame,
                        label_col: str = LABEL_COL,
                        sire_col: str = SIRE_COL,
                        dam_col: str = DAM_COL) -> Pedigree:
    """Builds a pedigree from a row table such as the one returned by ``complete_pedigree``."""
    if not isinstance(frame, pd.DataFrame):
        raise TypeError("frame must be a pandas DataFrame.")
    required = [label_col, sire_col, dam_col]
    absent = [col for col in required if col not in frame.columns]
    if absent:
        raise ValidationError(f"Pedigree frame is missing columns: {absent}")
    return Pedigree.construct(frame[sire_col].tolist(), frame[dam_col].tolist(),
                              frame[label_col].tolist())
