"""
Progress logging for long record loops.
"""

import logging
from typing import Optional


class ProgressLogger:
    """
    Logs a progress line every `every` records.

    Usage:
        progress = ProgressLogger(logger, every=1_000_000, noun="records")
        for record in records:
            ...
            progress.record(record.contig, record.start)
    """

    def __init__(self, log: logging.Logger, every: int = 1_000_000, noun: str = "records") -> None:
        if every < 1:
            raise ValueError(f"every must be >= 1, got {every}")
        self.log = log
        self.every = every
        self.noun = noun
        self.count = 0
        self.last_position: Optional[str] = None

    def record(self, contig: str, start: int) -> None:
        self.count += 1
        self.last_position = f"{contig}:{start:,}"
        if self.count % self.every == 0:
            self.log.info(f"Processed {self.count:,} {self.noun}. Last read position: {self.last_position}")

    def __call__(self, contig: str, start: int) -> None:
        self.record(contig, start)
