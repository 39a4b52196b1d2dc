"""
Error kinds reported by interval list construction.

Every fatal condition of a conversion run maps to one ErrorKind. The
IntervalError value travels inside an Err and renders as its message.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Distinct failure categories for a conversion run."""

    # Pre-flight file access
    UNREADABLE_INPUT = "unreadable_input"
    UNREADABLE_DICTIONARY = "unreadable_dictionary"
    UNWRITABLE_OUTPUT = "unwritable_output"
    # Per-record validation
    UNKNOWN_SEQUENCE = "unknown_sequence"
    INVALID_START = "invalid_start"
    START_PAST_END = "start_past_end"
    INVALID_END = "invalid_end"
    END_PAST_END = "end_past_end"
    RANGE_INVERTED = "range_inverted"
    # Parsing
    MALFORMED_RECORD = "malformed_record"


@dataclass(frozen=True, slots=True)
class IntervalError:
    """
    A fatal conversion error.

    Attributes:
        kind: Failure category
        message: Human-readable description naming sequence, field and values
    """
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message
