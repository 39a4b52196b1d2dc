"""
Core module for intervaltools.

Contains the interval data model, the interval list collection, result
and error types, and readers for BED files and sequence dictionaries.
"""

from intervaltools.core.result import Result, Ok, Err
from intervaltools.core.errors import ErrorKind, IntervalError
from intervaltools.core.models import (
    Strand,
    SequenceRecord,
    SequenceDictionary,
    Interval,
    NameMerge,
    MergePolicy,
)
from intervaltools.core.interval_list import IntervalList
from intervaltools.core.bed import BedRecord, read_bed_records
from intervaltools.core.dictionary import load_sequence_dictionary

__all__ = [
    "Result",
    "Ok",
    "Err",
    "ErrorKind",
    "IntervalError",
    "Strand",
    "SequenceRecord",
    "SequenceDictionary",
    "Interval",
    "NameMerge",
    "MergePolicy",
    "IntervalList",
    "BedRecord",
    "read_bed_records",
    "load_sequence_dictionary",
]
