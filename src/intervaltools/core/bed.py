"""
BED record source.

Lazily parses BED lines into BedRecord objects. Coordinates are kept
exactly as written (0-based start, exclusive end); remapping to 1-based
intervals is the converter's job.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from intervaltools.core.result import Result, Ok, Err
from intervaltools.core.errors import ErrorKind, IntervalError

logger = logging.getLogger(__name__)

HEADER_PREFIXES = ("#", "track", "browser")


@dataclass(frozen=True, slots=True)
class BedRecord:
    """Raw BED feature as read from the file."""
    contig: str
    start: int  # 0-based
    end: int    # 0-based, exclusive
    name: Optional[str] = None
    score: Optional[str] = None
    strand: Optional[str] = None
    line_number: int = 0

    @property
    def length(self) -> int:
        return self.end - self.start


def parse_bed_line(line: str, line_number: int = 0) -> Result[BedRecord, IntervalError]:
    """
    Parse one BED data line.

    Fields are tab-separated; lines without tabs are split on whitespace.
    Columns beyond strand are ignored.
    """
    parts = line.rstrip("\r\n").split("\t") if "\t" in line else line.split()

    if len(parts) < 3:
        return Err(IntervalError(
            ErrorKind.MALFORMED_RECORD,
            f"Line {line_number}: expected at least 3 columns, found {len(parts)}",
        ))

    try:
        start = int(parts[1])
        end = int(parts[2])
    except ValueError:
        return Err(IntervalError(
            ErrorKind.MALFORMED_RECORD,
            f"Line {line_number}: non-integer coordinates '{parts[1]}' '{parts[2]}'",
        ))

    contig = parts[0].strip()
    if not contig:
        return Err(IntervalError(
            ErrorKind.MALFORMED_RECORD,
            f"Line {line_number}: empty sequence name",
        ))

    return Ok(BedRecord(
        contig=contig,
        start=start,
        end=end,
        name=parts[3].strip() if len(parts) > 3 else None,
        score=parts[4] if len(parts) > 4 else None,
        strand=parts[5].strip() if len(parts) > 5 else None,
        line_number=line_number,
    ))


def read_bed_records(bed_path: Path | str) -> Iterator[Result[BedRecord, IntervalError]]:
    """
    Lazily read a BED file.

    Blank lines and track/browser/comment lines are skipped. Each data
    line yields Ok(BedRecord) or Err(MALFORMED_RECORD). The file is
    closed when the generator is exhausted or closed.

    Args:
        bed_path: Path to BED file

    Yields:
        Result for each data line, in file order
    """
    with open(bed_path) as f:
        for line_num, line in enumerate(f, 1):
            stripped = line.strip()

            # Skip empty lines and headers
            if not stripped or stripped.startswith(HEADER_PREFIXES):
                continue

            yield parse_bed_line(line, line_num)
