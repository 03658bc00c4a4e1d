"""Exceptions raised by pedigree_tools.

All of them derive from ``ValueError`` so code written against plain
``ValueError`` checks keeps working.
"""


class PedigreeError(ValueError):
    """Base class for pedigree errors."""


class ValidationError(PedigreeError):
    """Invalid pedigree input: length mismatch, bad label or unresolved parent."""


class CyclicPedigreeError(PedigreeError):
    """An individual is its own ancestor."""

    def __init__(self, label, message=None):
        self.label = label
        if message is None:
            message = f"Pedigree contains a cycle: individual {label!r} is its own ancestor."
        super().__init__(message)


class UnknownLabelError(PedigreeError, KeyError):
    """Requested labels are not present in the pedigree."""

    def __init__(self, labels):
        self.labels = list(labels)
        super().__init__(f"These labels are not present in the pedigree: {self.labels}")

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]
