"""
Interval list collection and file format.

An IntervalList is an ordered collection of Intervals bound to one
SequenceDictionary. Sorting and merging return new collections; the
original is left untouched.

File format (1-based, end-inclusive):

    @HD	VN:1.6	SO:coordinate
    @SQ	SN:chr1	LN:248956422
    chr1	1	100	+	geneA
    chr1	201	300	-	.
"""

from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

import pysam

from intervaltools.core.result import Result, Ok, Err, collect_results
from intervaltools.core.models import (
    Interval,
    MergePolicy,
    SequenceDictionary,
    Strand,
)
from intervaltools.core.dictionary import dictionary_from_header_text

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.6"
NO_NAME = "."
SORTED = "coordinate"
UNSORTED = "unsorted"


def _merge_run(run: Sequence[Interval], policy: MergePolicy) -> Interval:
    """Collapse a run of overlapping/abutting intervals into one."""
    if len(run) == 1:
        return run[0]
    first = run[0]
    return Interval(
        contig=first.contig,
        start=min(iv.start for iv in run),
        end=max(iv.end for iv in run),
        strand=first.strand,
        name=policy.merge_names(iv.name for iv in run),
    )


def merge_sorted(intervals: Iterable[Interval], policy: MergePolicy) -> list[Interval]:
    """
    Merge coordinate-sorted intervals in one pass.

    Consecutive intervals on the same sequence merge when the next one
    starts at or before the current run's end + 1 (overlap or abutment).
    """
    merged: list[Interval] = []
    run: list[Interval] = []
    run_end = 0

    for interval in intervals:
        if run and interval.contig == run[0].contig and interval.start <= run_end + 1:
            run.append(interval)
            run_end = max(run_end, interval.end)
        else:
            if run:
                merged.append(_merge_run(run, policy))
            run = [interval]
            run_end = interval.end

    if run:
        merged.append(_merge_run(run, policy))
    return merged


class IntervalList:
    """
    Ordered collection of intervals over one sequence dictionary.

    Attributes:
        dictionary: Shared, read-only sequence dictionary
        sort_order: 'coordinate' once sorted, otherwise 'unsorted'
    """

    def __init__(
        self,
        dictionary: SequenceDictionary,
        intervals: Iterable[Interval] = (),
        sort_order: str = UNSORTED,
    ) -> None:
        self.dictionary = dictionary
        self._intervals: list[Interval] = []
        for interval in intervals:
            self.add(interval)
        self.sort_order = sort_order

    def add(self, interval: Interval) -> None:
        """Append an interval; its sequence must be in the dictionary."""
        if interval.contig not in self.dictionary:
            raise ValueError(f"Sequence '{interval.contig}' is not in the sequence dictionary")
        self._intervals.append(interval)
        self.sort_order = UNSORTED

    @property
    def intervals(self) -> list[Interval]:
        """Copy of the interval list, in collection order."""
        return list(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self._intervals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalList):
            return NotImplemented
        return self.dictionary == other.dictionary and self._intervals == other._intervals

    def __repr__(self) -> str:
        return f"IntervalList({len(self._intervals)} intervals, SO:{self.sort_order})"

    def sort_key(self, interval: Interval) -> tuple[int, int, int]:
        return (self.dictionary.ordinal(interval.contig), interval.start, interval.end)

    def sorted(self) -> IntervalList:
        """New collection ordered by (sequence ordinal, start, end); stable."""
        ordered = sorted(self._intervals, key=self.sort_key)
        return IntervalList(self.dictionary, ordered, sort_order=SORTED)

    def uniqued(self, policy: Optional[MergePolicy] = None) -> IntervalList:
        """
        New sorted collection with overlapping or abutting intervals merged.

        Args:
            policy: Name/strand merge rules (default: concatenate names,
                merge across strands keeping the first strand)
        """
        policy = policy or MergePolicy()
        ordered = self.sorted().intervals

        if policy.same_strand:
            merged = []
            for strand in Strand:
                merged.extend(merge_sorted((iv for iv in ordered if iv.strand is strand), policy))
            merged.sort(key=self.sort_key)
        else:
            merged = merge_sorted(ordered, policy)

        return IntervalList(self.dictionary, merged, sort_order=SORTED)

    @property
    def base_count(self) -> int:
        """Sum of interval lengths, counting overlaps more than once."""
        return sum(iv.length for iv in self._intervals)

    @property
    def unique_base_count(self) -> int:
        """Number of distinct bases covered (territory)."""
        return self.uniqued(MergePolicy()).base_count

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def header_text(self) -> str:
        """SAM-style header with sort order and one @SQ line per sequence."""
        header = pysam.AlignmentHeader.from_dict({
            "HD": {"VN": FORMAT_VERSION, "SO": self.sort_order},
            "SQ": [{"SN": record.name, "LN": record.length} for record in self.dictionary],
        })
        text = str(header)
        return text if text.endswith("\n") else text + "\n"

    @staticmethod
    def format_interval(interval: Interval) -> str:
        return "\t".join([
            interval.contig,
            str(interval.start),
            str(interval.end),
            interval.strand.value,
            interval.name if interval.name is not None else NO_NAME,
        ])

    def to_text(self) -> str:
        body = "".join(self.format_interval(iv) + "\n" for iv in self._intervals)
        return self.header_text() + body

    def write(self, path: Path | str) -> Result[Path, str]:
        """
        Write the interval list atomically.

        Missing parent directories are created. Content goes to a
        temporary file in the destination directory which then replaces
        the destination, so the destination never holds a partial result.

        Returns:
            Ok(path) on success, Err(message) on failure
        """
        path = Path(path)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(self.to_text())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return Err(f"Failed to write interval list {path}: {e}")

        logger.debug(f"Wrote {len(self)} intervals to {path}")
        return Ok(path)

    @classmethod
    def read(cls, path: Path | str) -> Result[IntervalList, str]:
        """
        Read an interval list file.

        Returns:
            Ok(IntervalList) on success, Err(message) on unreadable file,
            bad header or malformed interval line
        """
        path = Path(path)
        if not path.is_file():
            return Err(f"Interval list not found: {path}")

        header_lines: list[str] = []
        body: list[tuple[int, str]] = []
        try:
            with open(path) as f:
                for line_num, line in enumerate(f, 1):
                    if line.startswith("@"):
                        header_lines.append(line)
                    elif line.strip():
                        body.append((line_num, line.rstrip("\r\n")))
            dictionary = dictionary_from_header_text("".join(header_lines))
        except (OSError, ValueError) as e:
            return Err(f"Failed to read interval list {path}: {e}")

        sort_order = UNSORTED
        for line in header_lines:
            if line.startswith("@HD"):
                for field in line.rstrip("\r\n").split("\t")[1:]:
                    if field.startswith("SO:"):
                        sort_order = field[3:]

        intervals = []
        for line_num, line in body:
            parts = line.split("\t")
            if len(parts) < 5:
                return Err(f"{path}, line {line_num}: expected 5 columns, found {len(parts)}")
            contig, start, end, strand, name = parts[:5]
            if contig not in dictionary:
                return Err(f"{path}, line {line_num}: sequence '{contig}' not in header")
            try:
                intervals.append(Interval(
                    contig=contig,
                    start=int(start),
                    end=int(end),
                    strand=Strand.from_symbol(strand),
                    name=None if name in (NO_NAME, "") else name,
                ))
            except ValueError as e:
                return Err(f"{path}, line {line_num}: {e}")

        return Ok(cls(dictionary, intervals, sort_order=sort_order))

    @classmethod
    def from_files(cls, paths: Sequence[Path | str]) -> Result[IntervalList, str]:
        """
        Concatenate interval lists that share one sequence dictionary.

        Intervals keep file order, then line order. The result is unsorted.
        """
        if not paths:
            return Err("No interval list files given")

        loaded = collect_results(cls.read(path) for path in paths)
        if loaded.is_err():
            return loaded

        lists = loaded.unwrap()
        first = lists[0]
        for path, current in zip(paths[1:], lists[1:]):
            if current.dictionary != first.dictionary:
                return Err(f"Sequence dictionary of {path} differs from {paths[0]}")

        combined = IntervalList(first.dictionary)
        for current in lists:
            for interval in current:
                combined.add(interval)
        return Ok(combined)
