"""
Command implementation modules.

  bed_to_interval_list - BED to interval list conversion
  compare_metrics      - Metrics file comparison
  targets              - Bait/target interval inputs for targeted assays
"""

from intervaltools.util.bed_to_interval_list import run_bed_to_interval_list
from intervaltools.util.compare_metrics import run_compare_metrics
from intervaltools.util.targets import run_targets

__all__ = [
    "run_bed_to_interval_list",
    "run_compare_metrics",
    "run_targets",
]
