"""
intervaltools: BED to interval list conversion and related genomics utilities.

This package provides tools for:
- Building validated, sorted and merged interval lists from BED files
- Comparing tab-delimited metrics files
- Loading bait/target interval lists for targeted sequencing assays
"""

__version__ = "0.1.0"
__author__ = "Zi-Hao Huang"
__email__ = "zh384@cam.ac.uk"

from intervaltools.core.result import Result, Ok, Err

__all__ = [
    "__version__",
    "Result",
    "Ok",
    "Err",
]
