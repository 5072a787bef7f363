"""Error taxonomy and exit code mapping.

Mismatches between the compared values are never errors: they come back as
ordinary diff lines.  The exceptions here flag programming errors (a value
kind the inspector has no rule for, a map key of an illegal kind) and
failures to load the documents handed to the command line.
"""

from __future__ import annotations


class StructDiffError(Exception):
    """Base error for structdiff."""

    exit_code: int = 1


class UnsupportedKindError(StructDiffError, TypeError):
    """A value fell outside the kind taxonomy of the value inspector.

    The taxonomy has to be extended (see ``structdiff.values.register_scalar``),
    the condition is not something to recover from.
    """

    exit_code = 70


class InvalidKeyError(StructDiffError, TypeError):
    """Key matching reached a kind that cannot be a mapping key."""

    exit_code = 70


class LoadError(StructDiffError):
    """A document could not be read or parsed."""

    exit_code = 3


def exit_code_for_exception(exc: BaseException) -> int:
    """Resolve a deterministic exit code for an exception."""
    if isinstance(exc, StructDiffError):
        return exc.exit_code
    if isinstance(exc, OSError):
        return LoadError.exit_code
    return StructDiffError.exit_code
