"""
Core data models for intervaltools.

Defines immutable data classes for reference sequences, the sequence
dictionary, genomic intervals and the interval merge policy.
All coordinates held here are 1-based and end-inclusive.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class Strand(Enum):
    """Orientation of an interval."""
    FORWARD = "+"
    REVERSE = "-"

    @classmethod
    def from_bed(cls, flag: Optional[str]) -> Strand:
        """
        Map a BED strand column to a Strand.

        Only '-' means reverse; '+', '.', empty or missing are forward.
        """
        return cls.REVERSE if flag == "-" else cls.FORWARD

    @classmethod
    def from_symbol(cls, symbol: str) -> Strand:
        """Parse '+' or '-' strictly (interval list files)."""
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Invalid strand: {symbol!r}") from None


@dataclass(frozen=True, slots=True)
class SequenceRecord:
    """
    A named reference sequence.

    Attributes:
        name: Sequence name, unique within its dictionary
        length: Sequence length in bases
    """
    name: str
    length: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Sequence name must not be empty")
        if self.length < 1:
            raise ValueError(f"Sequence length must be >= 1, got {self.length} for {self.name}")


class SequenceDictionary:
    """
    Ordered, read-only catalog of reference sequences.

    Defines which sequence names exist, their lengths (upper bound for
    coordinates) and their ordinal position (primary sort key).
    """

    __slots__ = ("_records", "_index")

    def __init__(self, records: Iterable[SequenceRecord] = ()) -> None:
        self._records: tuple[SequenceRecord, ...] = tuple(records)
        self._index: dict[str, int] = {}
        for i, record in enumerate(self._records):
            if record.name in self._index:
                raise ValueError(f"Duplicate sequence in dictionary: {record.name}")
            self._index[record.name] = i

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, int]]) -> SequenceDictionary:
        """Build from (name, length) pairs."""
        return cls(SequenceRecord(name=name, length=int(length)) for name, length in pairs)

    def lookup(self, name: str) -> Optional[SequenceRecord]:
        """Return the record for name, or None when absent."""
        i = self._index.get(name)
        return None if i is None else self._records[i]

    def length(self, name: str) -> int:
        """Length of a sequence; KeyError when absent."""
        return self._records[self._index[name]].length

    def ordinal(self, name: str) -> int:
        """Position of a sequence in declared order; KeyError when absent."""
        return self._index[name]

    @property
    def names(self) -> list[str]:
        return [record.name for record in self._records]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[SequenceRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequenceDictionary):
            return NotImplemented
        return self._records == other._records

    def __hash__(self) -> int:
        return hash(self._records)

    def __repr__(self) -> str:
        return f"SequenceDictionary({len(self._records)} sequences)"


@dataclass(frozen=True, slots=True)
class Interval:
    """
    Immutable genomic interval.

    Attributes:
        contig: Sequence name
        start: 1-based start position
        end: 1-based inclusive end; start - 1 denotes a zero-length interval
        strand: Orientation
        name: Optional interval name, never the empty string
    """
    contig: str
    start: int
    end: int
    strand: Strand = Strand.FORWARD
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start < 1:
            raise ValueError(f"Start must be >= 1, got {self.start}")
        if self.end < self.start - 1:
            raise ValueError(f"End must be >= start - 1, got {self.contig}:{self.start}-{self.end}")
        if self.name == "":
            raise ValueError("Interval name must be None rather than empty")

    @property
    def length(self) -> int:
        """Number of bases covered (0 for zero-length intervals)."""
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"{self.contig}:{self.start}-{self.end}"


class NameMerge(Enum):
    """How names are combined when intervals are merged."""
    CONCATENATE = "concatenate"  # distinct names, first-seen order, joined by '|'
    FIRST = "first"              # first non-empty name
    DROP = "drop"                # merged interval has no name


@dataclass(frozen=True, slots=True)
class MergePolicy:
    """
    Policy applied by IntervalList.uniqued().

    Attributes:
        names: Name combination rule
        same_strand: Only merge intervals on the same strand. When False,
            the merged interval keeps the strand of its first interval.
    """
    names: NameMerge = NameMerge.CONCATENATE
    same_strand: bool = False

    def merge_names(self, names: Iterable[Optional[str]]) -> Optional[str]:
        """Combine the names of a run of merged intervals."""
        if self.names is NameMerge.DROP:
            return None
        present = [n for n in names if n]
        if not present:
            return None
        if self.names is NameMerge.FIRST:
            return present[0]
        return "|".join(dict.fromkeys(present))
