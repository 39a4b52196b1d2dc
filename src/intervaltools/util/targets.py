"""
Bait and target intervals for targeted sequencing assays.

Loads the probe (bait or amplicon) and target interval lists that a
targeted-metrics collector consumes, and derives the probe set name.
The assay flavour is a tag on the configuration rather than a type.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from intervaltools.core.result import Result, Ok, Err
from intervaltools.core.interval_list import IntervalList

logger = logging.getLogger(__name__)


class AssayKind(Enum):
    """Targeted assay flavour."""
    HYBRID_SELECTION = "hybrid-selection"  # probes are baits
    TARGETED_PCR = "targeted-pcr"          # probes are amplicons

    @property
    def probe_label(self) -> str:
        return "bait" if self is AssayKind.HYBRID_SELECTION else "amplicon"


@dataclass(frozen=True)
class TargetedAssay:
    """
    Inputs for a targeted-metrics run.

    Attributes:
        kind: Assay flavour
        probe_intervals: Baits (hybrid selection) or amplicons (PCR)
        target_intervals: Regions of interest
        probe_set_name: Name reported for the probe set
    """
    kind: AssayKind
    probe_intervals: IntervalList
    target_intervals: IntervalList
    probe_set_name: str


def render_probe_name_from_file(path: Path | str) -> str:
    """File name with its last extension removed (baits.interval_list -> baits)."""
    name = Path(path).name
    pos = name.rfind(".")
    return name if pos < 0 else name[:pos]


def probe_set_name(paths: Sequence[Path | str], explicit: Optional[str] = None) -> str:
    """
    Name for a probe set.

    An explicit name wins. Otherwise the distinct rendered file names are
    sorted and joined with '.'.
    """
    if explicit:
        return explicit
    return ".".join(sorted({render_probe_name_from_file(p) for p in paths}))


def load_targeted_assay(
    probe_paths: Sequence[Path],
    target_paths: Sequence[Path],
    kind: AssayKind = AssayKind.HYBRID_SELECTION,
    name: Optional[str] = None,
) -> Result[TargetedAssay, str]:
    """
    Load probe and target interval lists.

    Probe and target lists must share one sequence dictionary.

    Returns:
        Ok(TargetedAssay) or Err(message)
    """
    probe_result = IntervalList.from_files(probe_paths)
    if probe_result.is_err():
        return Err(f"Failed to load {kind.probe_label} intervals: {probe_result.unwrap_err()}")

    target_result = IntervalList.from_files(target_paths)
    if target_result.is_err():
        return Err(f"Failed to load target intervals: {target_result.unwrap_err()}")

    probes = probe_result.unwrap()
    targets = target_result.unwrap()
    if probes.dictionary != targets.dictionary:
        return Err(f"{kind.probe_label.capitalize()} and target interval lists have different sequence dictionaries")

    return Ok(TargetedAssay(
        kind=kind,
        probe_intervals=probes,
        target_intervals=targets,
        probe_set_name=probe_set_name(probe_paths, name),
    ))


def summarize_assay(assay: TargetedAssay) -> Dict[str, Any]:
    """Interval counts and territory (distinct bases) for probes and targets."""
    return {
        "assay": assay.kind.value,
        "probe_set_name": assay.probe_set_name,
        "probe_intervals": len(assay.probe_intervals),
        "probe_territory": assay.probe_intervals.unique_base_count,
        "target_intervals": len(assay.target_intervals),
        "target_territory": assay.target_intervals.unique_base_count,
    }


def run_targets(
    probe_paths: Sequence[Path],
    target_paths: Sequence[Path],
    kind: AssayKind = AssayKind.HYBRID_SELECTION,
    name: Optional[str] = None,
    verbose: bool = False,
) -> Result[Dict[str, Any], str]:
    """
    Load a targeted assay and summarize its interval inputs.
    """
    if verbose:
        logger.setLevel(logging.DEBUG)

    logger.info(f"Loading {len(probe_paths)} {kind.probe_label} and {len(target_paths)} target interval files")

    result = load_targeted_assay(probe_paths, target_paths, kind=kind, name=name)
    if result.is_err():
        return Err(result.unwrap_err())

    summary = summarize_assay(result.unwrap())
    logger.info(f"Probe set {summary['probe_set_name']}: "
                f"{summary['probe_territory']} {kind.probe_label} bases, "
                f"{summary['target_territory']} target bases")
    return Ok(summary)
