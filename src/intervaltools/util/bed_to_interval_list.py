"""
BED to interval list conversion.

Reads BED features, remaps them from 0-based half-open to 1-based
inclusive coordinates, validates every record against a sequence
dictionary, then optionally sorts and merges before writing an
interval list.

The stages are kept separate:
  bed_record_to_interval  - remap + validate one record
  build_interval_list     - consume all records into an IntervalList
  normalize               - sort / unique
and run_bed_to_interval_list wires them to files. Nothing is written
unless every record converts.
"""

import logging
import os
from contextlib import closing
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from intervaltools.core.result import Result, Ok, Err
from intervaltools.core.errors import ErrorKind, IntervalError
from intervaltools.core.models import Interval, MergePolicy, SequenceDictionary, Strand
from intervaltools.core.interval_list import IntervalList
from intervaltools.core.bed import BedRecord, read_bed_records
from intervaltools.core.dictionary import load_sequence_dictionary
from intervaltools.util.progress import ProgressLogger

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]
BedItem = Union[BedRecord, Result[BedRecord, IntervalError]]


def _fail(kind: ErrorKind, message: str) -> Err:
    return Err(IntervalError(kind, message))


def bed_record_to_interval(
    record: BedRecord,
    dictionary: SequenceDictionary,
) -> Result[Interval, IntervalError]:
    """
    Convert one BED record to a validated 1-based Interval.

    BED starts are 0-based so one is added; BED ends are exclusive,
    which is numerically the 1-based inclusive end. Checks run in a
    fixed order and the first violation is returned.

    Args:
        record: Raw BED record
        dictionary: Sequence dictionary to validate against

    Returns:
        Ok(Interval) or Err(IntervalError) naming sequence and values
    """
    sequence_name = record.contig
    start = record.start + 1
    end = record.end
    # Empty names are never attached to an interval
    name = record.name if record.name else None

    sequence = dictionary.lookup(sequence_name)
    if sequence is None:
        return _fail(
            ErrorKind.UNKNOWN_SEQUENCE,
            f"Sequence '{sequence_name}' was not found in the sequence dictionary",
        )
    if start < 1:
        return _fail(
            ErrorKind.INVALID_START,
            f"Start on sequence '{sequence_name}' was less than one: {start}",
        )
    if sequence.length < start:
        return _fail(
            ErrorKind.START_PAST_END,
            f"Start on sequence '{sequence_name}' was past the end: {sequence.length} < {start}",
        )
    if end < 1:
        return _fail(
            ErrorKind.INVALID_END,
            f"End on sequence '{sequence_name}' was less than one: {end}",
        )
    if sequence.length < end:
        return _fail(
            ErrorKind.END_PAST_END,
            f"End on sequence '{sequence_name}' was past the end: {sequence.length} < {end}",
        )
    if end < start - 1:
        return _fail(
            ErrorKind.RANGE_INVERTED,
            f"On sequence '{sequence_name}', end < start-1: {end} < {start - 1}",
        )

    return Ok(Interval(
        contig=sequence_name,
        start=start,
        end=end,
        strand=Strand.from_bed(record.strand),
        name=name,
    ))


def build_interval_list(
    records: Iterable[BedItem],
    dictionary: SequenceDictionary,
    progress: Optional[ProgressCallback] = None,
) -> Result[IntervalList, IntervalError]:
    """
    Convert BED records into an IntervalList, preserving input order.

    Stops at the first malformed or invalid record.

    Args:
        records: BedRecords, or Results of BedRecords as yielded by read_bed_records
        dictionary: Sequence dictionary
        progress: Optional callback receiving (sequence name, start) per record

    Returns:
        Ok(IntervalList) or the first Err encountered
    """
    interval_list = IntervalList(dictionary)

    for item in records:
        if isinstance(item, Err):
            return item
        record = item.unwrap() if isinstance(item, Ok) else item

        result = bed_record_to_interval(record, dictionary)
        if result.is_err():
            if record.line_number:
                error = result.unwrap_err()
                return _fail(error.kind, f"Line {record.line_number}: {error.message}")
            return result

        interval = result.unwrap()
        interval_list.add(interval)

        if progress is not None:
            progress(interval.contig, interval.start)

    return Ok(interval_list)


def normalize(
    interval_list: IntervalList,
    sort: bool = True,
    unique: bool = True,
    policy: Optional[MergePolicy] = None,
) -> IntervalList:
    """
    Apply sort and unique-merge. Unique implies sort.
    """
    out = interval_list
    if sort and not unique:
        out = out.sorted()
    if unique:
        out = out.uniqued(policy)
    return out


def check_readable(path: Path, kind: ErrorKind, description: str) -> Result[Path, IntervalError]:
    """Pre-flight check that path is an existing, readable file."""
    if not path.exists():
        return _fail(kind, f"{description} does not exist: {path}")
    if not path.is_file():
        return _fail(kind, f"{description} is not a regular file: {path}")
    if not os.access(path, os.R_OK):
        return _fail(kind, f"{description} is not readable: {path}")
    return Ok(path)


def check_writable(path: Path) -> Result[Path, IntervalError]:
    """
    Pre-flight check that path can be created or overwritten.

    Nothing is created here. Missing parent directories are made when the
    output is written, so the nearest existing ancestor must be a
    writable directory.
    """
    kind = ErrorKind.UNWRITABLE_OUTPUT
    if path.exists():
        if path.is_dir():
            return _fail(kind, f"Output is a directory: {path}")
        if not os.access(path, os.W_OK):
            return _fail(kind, f"Output file is not writable: {path}")

    ancestor = path.absolute().parent
    while not ancestor.exists() and ancestor != ancestor.parent:
        ancestor = ancestor.parent
    if not ancestor.is_dir():
        return _fail(kind, f"Cannot create output directory {path.parent}: {ancestor} is not a directory")
    if not os.access(ancestor, os.W_OK | os.X_OK):
        return _fail(kind, f"Output directory is not writable: {ancestor}")
    return Ok(path)


def run_bed_to_interval_list(
    input_path: Path,
    dictionary_path: Path,
    output_path: Path,
    sort: bool = True,
    unique: bool = True,
    policy: Optional[MergePolicy] = None,
    progress_every: int = 1_000_000,
    verbose: bool = False,
) -> Result[Dict[str, Any], IntervalError]:
    """
    Convert a BED file to an interval list file.

    Args:
        input_path: Input BED file
        dictionary_path: Sequence dictionary source (.dict, .fai, FASTA, SAM/BAM, VCF)
        output_path: Output interval list
        sort: Sort the output by dictionary order, start, end
        unique: Merge overlapping/abutting intervals (implies sort)
        policy: Name/strand handling for merged intervals
        progress_every: Log progress every N records
        verbose: Enable verbose logging

    Returns:
        Result containing conversion statistics
    """
    if verbose:
        logger.setLevel(logging.DEBUG)

    input_path = Path(input_path)
    dictionary_path = Path(dictionary_path)
    output_path = Path(output_path)

    for check in (
        check_readable(input_path, ErrorKind.UNREADABLE_INPUT, "Input BED file"),
        check_readable(dictionary_path, ErrorKind.UNREADABLE_DICTIONARY, "Sequence dictionary"),
        check_writable(output_path),
    ):
        if check.is_err():
            return check

    dict_result = load_sequence_dictionary(dictionary_path)
    if dict_result.is_err():
        return dict_result
    dictionary = dict_result.unwrap()
    logger.info(f"Loaded {len(dictionary)} sequences from {dictionary_path}")

    logger.info(f"Reading BED records from {input_path}")
    progress = ProgressLogger(logger, every=progress_every, noun="BED records")
    try:
        with closing(read_bed_records(input_path)) as records:
            build_result = build_interval_list(records, dictionary, progress=progress)
    except (OSError, UnicodeDecodeError) as e:
        return _fail(ErrorKind.UNREADABLE_INPUT, f"Failed to read {input_path}: {e}")

    if build_result.is_err():
        return build_result
    intervals = build_result.unwrap()
    logger.info(f"Read {len(intervals)} intervals")

    out = normalize(intervals, sort=sort, unique=unique, policy=policy)
    if unique:
        logger.info(f"Merged {len(intervals)} intervals into {len(out)} unique intervals")

    write_result = out.write(output_path)
    if write_result.is_err():
        return _fail(ErrorKind.UNWRITABLE_OUTPUT, write_result.unwrap_err())

    logger.info(f"Wrote {len(out)} intervals to {output_path}")

    stats = {
        "input_records": len(intervals),
        "output_intervals": len(out),
        "sorted": sort or unique,
        "uniqued": unique,
        "output_file": str(output_path),
    }

    return Ok(stats)
