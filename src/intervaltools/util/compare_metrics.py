"""
Compare two metrics files.

A metrics file has three parts, separated by blank lines:

    ## htsjdk.samtools.metrics.StringHeader
    # CollectHsMetrics INPUT=sample.bam ...

    ## METRICS CLASS	picard.analysis.directed.HsMetrics
    BAIT_SET	TOTAL_READS	PCT_SELECTED_BASES
    baits	1000	0.85

    ## HISTOGRAM	java.lang.Integer
    coverage	count
    0	10

Headers are informational only. Two files are EQUAL when their metric
rows and histograms match exactly after numeric typing.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from intervaltools.core.result import Result, Ok, Err

logger = logging.getLogger(__name__)

METRICS_MARKER = "## METRICS CLASS"
HISTOGRAM_MARKER = "## HISTOGRAM"


@dataclass
class MetricsDocument:
    """Parsed metrics file."""
    headers: List[Tuple[str, str]] = field(default_factory=list)
    metrics_class: Optional[str] = None
    metrics: pd.DataFrame = field(default_factory=pd.DataFrame)
    histogram_class: Optional[str] = None
    histogram: Optional[pd.DataFrame] = None


def _typed_frame(columns: List[str], rows: List[List[str]]) -> pd.DataFrame:
    """Build a DataFrame, converting numeric columns to numbers."""
    cleaned = [[value if value != "" else None for value in row] for row in rows]

    df = pd.DataFrame(cleaned, columns=columns, dtype=object)
    for column in df.columns:
        try:
            df[column] = pd.to_numeric(df[column])
        except (ValueError, TypeError):
            pass  # text column
    return df


def _section_class(line: str, marker: str) -> str:
    return line[len(marker):].strip()


def parse_metrics_text(text: str) -> Result[MetricsDocument, str]:
    """
    Parse metrics file content.

    Every row of a section must have exactly as many cells as its
    column line.

    Returns:
        Ok(MetricsDocument) or Err(message) when a section is malformed
    """
    doc = MetricsDocument()
    lines = text.splitlines()
    i = 0

    def read_table(start: int, section: str) -> Tuple[Result[pd.DataFrame, str], int]:
        """Column line plus rows up to the next blank or '##' line."""
        j = start
        while j < len(lines) and not lines[j].strip():
            j += 1
        if j >= len(lines) or lines[j].startswith("#"):
            return Err(f"{section} has no column header"), j
        columns = lines[j].split("\t")
        rows = []
        j += 1
        while j < len(lines) and lines[j].strip() and not lines[j].startswith("#"):
            row = lines[j].split("\t")
            if len(row) != len(columns):
                return Err(f"{section}, line {j + 1}: expected {len(columns)} columns, "
                           f"found {len(row)}"), j
            rows.append(row)
            j += 1
        return Ok(_typed_frame(columns, rows)), j

    while i < len(lines):
        line = lines[i]

        if line.startswith(METRICS_MARKER):
            doc.metrics_class = _section_class(line, METRICS_MARKER)
            table, i = read_table(i + 1, f"Metrics section {doc.metrics_class}")
            if table.is_err():
                return table
            doc.metrics = table.unwrap()
            continue

        if line.startswith(HISTOGRAM_MARKER):
            doc.histogram_class = _section_class(line, HISTOGRAM_MARKER)
            table, i = read_table(i + 1, f"Histogram section {doc.histogram_class}")
            if table.is_err():
                return table
            doc.histogram = table.unwrap()
            continue

        if line.startswith("## "):
            header_class = line[3:].strip()
            value = ""
            if i + 1 < len(lines) and lines[i + 1].startswith("# "):
                value = lines[i + 1][2:]
                i += 1
            doc.headers.append((header_class, value))
        elif line.strip() and not line.startswith("#"):
            return Err(f"Unexpected content outside a section at line {i + 1}: {line[:50]}")

        i += 1

    return Ok(doc)


def read_metrics_file(path: Path) -> Result[MetricsDocument, str]:
    """Read and parse a metrics file."""
    path = Path(path)
    if not path.is_file():
        return Err(f"Metrics file not found: {path}")
    try:
        text = path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        return Err(f"Failed to read metrics file {path}: {e}")

    result = parse_metrics_text(text)
    if result.is_err():
        return Err(f"{path}: {result.unwrap_err()}")
    return result


def frames_equal(a: Optional[pd.DataFrame], b: Optional[pd.DataFrame]) -> bool:
    """
    Exact equality of two typed tables.

    Column names and order, row count and every value must match.
    Missing values match each other; 1 and 1.0 are equal.
    """
    if a is None or b is None:
        return a is None and b is None
    if list(a.columns) != list(b.columns) or len(a) != len(b):
        return False

    a = a.reset_index(drop=True)
    b = b.reset_index(drop=True)
    for column in a.columns:
        left = a[column]
        right = b[column]
        same = (left == right) | (left.isna() & right.isna())
        if not bool(same.all()):
            return False
    return True


def metrics_equal(a: MetricsDocument, b: MetricsDocument) -> bool:
    return a.metrics_class == b.metrics_class and frames_equal(a.metrics, b.metrics)


def histograms_equal(a: MetricsDocument, b: MetricsDocument) -> bool:
    if a.histogram is None and b.histogram is None:
        return True
    return a.histogram_class == b.histogram_class and frames_equal(a.histogram, b.histogram)


def run_compare_metrics(
    path_a: Path,
    path_b: Path,
    verbose: bool = False,
) -> Result[Dict[str, Any], str]:
    """
    Compare two metrics files.

    Args:
        path_a: First metrics file
        path_b: Second metrics file
        verbose: Enable verbose logging

    Returns:
        Result containing the verdict and per-section equality
    """
    if verbose:
        logger.setLevel(logging.DEBUG)

    docs = []
    for path in (path_a, path_b):
        result = read_metrics_file(path)
        if result.is_err():
            return Err(result.unwrap_err())
        doc = result.unwrap()
        logger.debug(f"{path}: {len(doc.metrics)} metric rows, "
                     f"histogram={'yes' if doc.histogram is not None else 'no'}")
        docs.append(doc)

    doc_a, doc_b = docs
    rows_equal = metrics_equal(doc_a, doc_b)
    hist_equal = histograms_equal(doc_a, doc_b)
    equal = rows_equal and hist_equal
    status = "EQUAL" if equal else "NOT EQUAL"

    logger.info(f"Files {path_a} and {path_b} are {status}")

    return Ok({
        "equal": equal,
        "status": status,
        "metrics_equal": rows_equal,
        "histograms_equal": hist_equal,
        "file_a": str(path_a),
        "file_b": str(path_b),
    })
