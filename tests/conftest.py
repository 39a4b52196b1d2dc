"""
Test configuration and fixtures.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from intervaltools.core.models import SequenceDictionary


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir)


@pytest.fixture
def dictionary():
    """Two-sequence dictionary: chr1 (1000 bp) then chr2 (500 bp)."""
    return SequenceDictionary.from_pairs([("chr1", 1000), ("chr2", 500)])


@pytest.fixture
def dict_file(temp_dir):
    """Sequence dictionary file matching the `dictionary` fixture."""
    dict_path = temp_dir / "ref.dict"
    dict_path.write_text(
        "@HD\tVN:1.6\n"
        "@SQ\tSN:chr1\tLN:1000\n"
        "@SQ\tSN:chr2\tLN:500\n"
    )
    return dict_path


@pytest.fixture
def write_bed(temp_dir):
    """Factory writing BED lines to a file and returning its path."""
    def _write(lines, name="input.bed"):
        bed_path = temp_dir / name
        bed_path.write_text("".join(line + "\n" for line in lines))
        return bed_path
    return _write


@pytest.fixture
def interval_list_file(temp_dir):
    """Factory writing an interval list over the `dictionary` fixture."""
    def _write(body_lines, name="intervals.interval_list", sort_order="coordinate"):
        path = temp_dir / name
        path.write_text(
            f"@HD\tVN:1.6\tSO:{sort_order}\n"
            "@SQ\tSN:chr1\tLN:1000\n"
            "@SQ\tSN:chr2\tLN:500\n"
            + "".join(line + "\n" for line in body_lines)
        )
        return path
    return _write
