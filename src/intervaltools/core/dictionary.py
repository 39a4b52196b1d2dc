"""
Sequence dictionary loading.

Builds a read-only SequenceDictionary from the reference descriptions
commonly found next to a genome:

    .dict / .interval_list      SAM-style header text (pysam)
    .sam / .bam / .cram         alignment file header (pysam)
    .vcf / .vcf.gz / .bcf       VCF contig header lines (pysam)
    .fai                        FASTA index (pandas)
    .fa / .fasta / .fna [.gz]   FASTA sequences (Biopython), or their .fai
"""

from __future__ import annotations
import gzip
import logging
from pathlib import Path

import pandas as pd
import pysam
from Bio import SeqIO

from intervaltools.core.result import Result, Ok, Err
from intervaltools.core.errors import ErrorKind, IntervalError
from intervaltools.core.models import SequenceDictionary

logger = logging.getLogger(__name__)

HEADER_TEXT_SUFFIXES = {".dict", ".interval_list", ".il"}
ALIGNMENT_SUFFIXES = {".sam", ".bam", ".cram"}
VARIANT_SUFFIXES = {".vcf", ".bcf"}
FASTA_SUFFIXES = {".fa", ".fasta", ".fna"}


def _base_suffix(path: Path) -> str:
    """Lower-cased suffix, looking through a trailing .gz / .bgz."""
    suffixes = [s.lower() for s in path.suffixes]
    if suffixes and suffixes[-1] in (".gz", ".bgz") and len(suffixes) > 1:
        return suffixes[-2]
    return suffixes[-1] if suffixes else ""


def dictionary_from_header_text(text: str) -> SequenceDictionary:
    """
    Parse @SQ lines of a SAM-style header into a SequenceDictionary.

    Raises ValueError when the header cannot be parsed.
    """
    header = pysam.AlignmentHeader.from_text(text)
    return SequenceDictionary.from_pairs(zip(header.references, header.lengths))


def read_header_text(path: Path) -> str:
    """Collect the leading '@' lines of a header-bearing text file."""
    lines = []
    with open(path) as f:
        for line in f:
            if not line.startswith("@"):
                break
            lines.append(line)
    return "".join(lines)


def _from_alignment_file(path: Path) -> SequenceDictionary:
    with pysam.AlignmentFile(str(path), check_sq=False) as af:
        return SequenceDictionary.from_pairs(zip(af.header.references, af.header.lengths))


def _from_variant_file(path: Path) -> SequenceDictionary:
    pairs = []
    with pysam.VariantFile(str(path)) as vf:
        for name, contig in vf.header.contigs.items():
            if contig.length is None:
                raise ValueError(f"Contig {name} has no length in VCF header")
            pairs.append((name, contig.length))
    return SequenceDictionary.from_pairs(pairs)


def _from_fai(path: Path) -> SequenceDictionary:
    df = pd.read_csv(
        path,
        sep="\t",
        header=None,
        usecols=[0, 1],
        names=["name", "length"],
        dtype={"name": str, "length": int},
    )
    return SequenceDictionary.from_pairs(zip(df["name"], df["length"]))


def _from_fasta(path: Path) -> SequenceDictionary:
    fai_path = Path(str(path) + ".fai")
    if fai_path.exists():
        logger.debug(f"Using FASTA index {fai_path}")
        return _from_fai(fai_path)

    opener = gzip.open if path.suffix.lower() == ".gz" else open
    with opener(path, "rt") as handle:
        pairs = [(record.id, len(record.seq)) for record in SeqIO.parse(handle, "fasta")]
    return SequenceDictionary.from_pairs(pairs)


def load_sequence_dictionary(path: Path | str) -> Result[SequenceDictionary, IntervalError]:
    """
    Load a sequence dictionary from a reference description file.

    Args:
        path: .dict, SAM/BAM/CRAM, VCF/BCF, interval list, .fai or FASTA file

    Returns:
        Ok(SequenceDictionary) on success,
        Err(IntervalError(UNREADABLE_DICTIONARY)) on failure or when no
        sequences are found
    """
    path = Path(path)
    if not path.is_file():
        return Err(IntervalError(
            ErrorKind.UNREADABLE_DICTIONARY,
            f"Sequence dictionary not found: {path}",
        ))

    suffix = _base_suffix(path)
    try:
        if suffix in HEADER_TEXT_SUFFIXES:
            dictionary = dictionary_from_header_text(read_header_text(path))
        elif suffix in ALIGNMENT_SUFFIXES:
            dictionary = _from_alignment_file(path)
        elif suffix in VARIANT_SUFFIXES:
            dictionary = _from_variant_file(path)
        elif suffix == ".fai":
            dictionary = _from_fai(path)
        elif suffix in FASTA_SUFFIXES:
            dictionary = _from_fasta(path)
        else:
            return Err(IntervalError(
                ErrorKind.UNREADABLE_DICTIONARY,
                f"Cannot determine sequence dictionary format from file name: {path}",
            ))
    except (OSError, ValueError) as e:
        return Err(IntervalError(
            ErrorKind.UNREADABLE_DICTIONARY,
            f"Failed to read sequence dictionary {path}: {e}",
        ))

    if len(dictionary) == 0:
        return Err(IntervalError(
            ErrorKind.UNREADABLE_DICTIONARY,
            f"No sequences found in sequence dictionary: {path}",
        ))

    logger.debug(f"Loaded {len(dictionary)} sequences from {path}")
    return Ok(dictionary)
