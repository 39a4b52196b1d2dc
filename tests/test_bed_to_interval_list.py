"""
Tests for BED parsing and intervaltools.util.bed_to_interval_list.
"""

import logging

import pytest
from intervaltools.core.bed import BedRecord, parse_bed_line, read_bed_records
from intervaltools.core.errors import ErrorKind
from intervaltools.core.interval_list import IntervalList
from intervaltools.core.models import MergePolicy, NameMerge, Strand
from intervaltools.core.result import Ok
from intervaltools.util.bed_to_interval_list import (
    bed_record_to_interval,
    build_interval_list,
    normalize,
    run_bed_to_interval_list,
)
from intervaltools.util.progress import ProgressLogger


class TestBedParsing:
    """Tests for the BED record source."""

    def test_full_record(self):
        """All six leading columns are read; extras ignored."""
        record = parse_bed_line("chr1\t0\t100\tgeneA\t0\t+\t0\t100\n", 3).unwrap()
        assert record == BedRecord("chr1", 0, 100, "geneA", "0", "+", 3)

    def test_bed3(self):
        """Name, score and strand are optional."""
        record = parse_bed_line("chr1\t5\t10").unwrap()
        assert record.name is None
        assert record.strand is None
        assert record.length == 5

    def test_whitespace_delimited(self):
        """Lines without tabs are split on whitespace."""
        record = parse_bed_line("chr1  0   50 geneB").unwrap()
        assert (record.contig, record.start, record.end, record.name) == ("chr1", 0, 50, "geneB")

    def test_empty_name_field(self):
        """An empty name column is read as an empty string."""
        assert parse_bed_line("chr1\t0\t50\t\t0\t-").unwrap().name == ""

    def test_name_whitespace_stripped(self):
        """Surrounding whitespace is trimmed from the name like contig and strand."""
        assert parse_bed_line("chr1\t0\t50\tgeneA \t0\t+").unwrap().name == "geneA"
        assert parse_bed_line("chr1\t0\t50\t \t0\t+").unwrap().name == ""

    def test_too_few_columns(self):
        """Fewer than three columns is MALFORMED_RECORD."""
        result = parse_bed_line("chr1\t0", 7)
        assert result.unwrap_err().kind is ErrorKind.MALFORMED_RECORD
        assert "Line 7" in str(result.unwrap_err())

    def test_non_integer_coordinates(self):
        """Non-numeric coordinates are MALFORMED_RECORD."""
        result = parse_bed_line("chr1\tzero\t50")
        assert result.unwrap_err().kind is ErrorKind.MALFORMED_RECORD

    def test_skips_headers_and_blank_lines(self, write_bed):
        """track/browser/comment and blank lines are skipped."""
        path = write_bed([
            "browser position chr1:1-100",
            'track name="baits"',
            "# comment",
            "",
            "chr1\t0\t10",
            "chr2\t5\t15",
        ])
        records = [r.unwrap() for r in read_bed_records(path)]
        assert [(r.contig, r.line_number) for r in records] == [("chr1", 5), ("chr2", 6)]


class TestRecordConversion:
    """Tests for coordinate remapping and validation."""

    def test_remap(self, dictionary):
        """start = raw_start + 1, end = raw_end."""
        for raw_start, raw_end in [(0, 1), (0, 100), (99, 1000), (499, 500)]:
            interval = bed_record_to_interval(BedRecord("chr1", raw_start, raw_end), dictionary).unwrap()
            assert interval.start == raw_start + 1
            assert interval.end == raw_end

    def test_concrete_record(self, dictionary):
        """chr1 0 100 geneA 0 + becomes chr1 1 100 + geneA."""
        record = parse_bed_line("chr1\t0\t100\tgeneA\t0\t+").unwrap()
        interval = bed_record_to_interval(record, dictionary).unwrap()
        assert (interval.contig, interval.start, interval.end, interval.strand, interval.name) == \
            ("chr1", 1, 100, Strand.FORWARD, "geneA")

    def test_reverse_strand(self, dictionary):
        """'-' in the strand column gives a reverse-strand interval."""
        interval = bed_record_to_interval(BedRecord("chr1", 0, 10, strand="-"), dictionary).unwrap()
        assert interval.strand is Strand.REVERSE

    def test_empty_name_normalized(self, dictionary):
        """Empty names are not attached."""
        interval = bed_record_to_interval(BedRecord("chr1", 0, 10, name=""), dictionary).unwrap()
        assert interval.name is None

    def test_unknown_sequence(self, dictionary):
        """Sequences absent from the dictionary are UNKNOWN_SEQUENCE."""
        result = bed_record_to_interval(BedRecord("chrZ", 0, 10), dictionary)
        assert result.unwrap_err().kind is ErrorKind.UNKNOWN_SEQUENCE
        assert "chrZ" in str(result.unwrap_err())

    @pytest.mark.parametrize("raw_start, raw_end, kind", [
        (-1, 10, ErrorKind.INVALID_START),
        (1000, 1000, ErrorKind.START_PAST_END),
        (-1, 0, ErrorKind.INVALID_START),
        (0, 0, ErrorKind.INVALID_END),
        (0, 1001, ErrorKind.END_PAST_END),
        (5, 4, ErrorKind.RANGE_INVERTED),
    ])
    def test_validation_errors(self, dictionary, raw_start, raw_end, kind):
        """Each violation maps to its error kind, first check wins."""
        result = bed_record_to_interval(BedRecord("chr1", raw_start, raw_end), dictionary)
        assert result.unwrap_err().kind is kind

    def test_start_boundary(self, dictionary):
        """start = 1 is accepted; start = 0 is rejected."""
        assert bed_record_to_interval(BedRecord("chr1", 0, 10), dictionary).is_ok()
        assert bed_record_to_interval(BedRecord("chr1", -1, 10), dictionary).unwrap_err().kind \
            is ErrorKind.INVALID_START

    def test_end_boundary(self, dictionary):
        """end = sequence length is accepted; one past is rejected."""
        assert bed_record_to_interval(BedRecord("chr2", 400, 500), dictionary).is_ok()
        result = bed_record_to_interval(BedRecord("chr2", 400, 501), dictionary)
        assert result.unwrap_err().kind is ErrorKind.END_PAST_END

    def test_zero_length_boundary(self, dictionary):
        """raw 5-5 (start 6, end 5) is accepted; raw 5-4 is RANGE_INVERTED."""
        interval = bed_record_to_interval(BedRecord("chr1", 5, 5), dictionary).unwrap()
        assert (interval.start, interval.end, interval.length) == (6, 5, 0)
        result = bed_record_to_interval(BedRecord("chr1", 5, 4), dictionary)
        assert result.unwrap_err().kind is ErrorKind.RANGE_INVERTED


class TestPipelineStages:
    """Tests for build_interval_list and normalize."""

    def test_build_preserves_order(self, dictionary):
        """Intervals appear in input order."""
        records = [BedRecord("chr2", 0, 10), Ok(BedRecord("chr1", 0, 10))]
        result = build_interval_list(records, dictionary)
        assert [iv.contig for iv in result.unwrap()] == ["chr2", "chr1"]

    def test_build_fails_fast(self, dictionary):
        """The first invalid record stops consumption."""
        consumed = []

        def records():
            for r in [BedRecord("chr1", 0, 10), BedRecord("chrZ", 0, 10), BedRecord("chr1", 20, 30)]:
                consumed.append(r)
                yield r

        result = build_interval_list(records(), dictionary)
        assert result.unwrap_err().kind is ErrorKind.UNKNOWN_SEQUENCE
        assert len(consumed) == 2

    def test_line_number_in_message(self, dictionary, write_bed):
        """Errors from file records name the line."""
        path = write_bed(["chr1\t0\t10", "chr1\t0\t2000"])
        result = build_interval_list(read_bed_records(path), dictionary)
        assert str(result.unwrap_err()).startswith("Line 2:")

    def test_progress_callback(self, dictionary):
        """Progress receives sequence name and 1-based start."""
        seen = []
        build_interval_list(
            [BedRecord("chr1", 0, 10), BedRecord("chr2", 4, 10)],
            dictionary,
            progress=lambda contig, start: seen.append((contig, start)),
        )
        assert seen == [("chr1", 1), ("chr2", 5)]

    def test_progress_logger(self, caplog):
        """ProgressLogger logs every N records."""
        log = logging.getLogger("test.progress")
        progress = ProgressLogger(log, every=2)
        with caplog.at_level(logging.INFO, logger="test.progress"):
            for start in (1, 2, 3, 4, 5):
                progress("chr1", start)
        assert len(caplog.records) == 2
        assert "chr1:4" in caplog.records[-1].getMessage()

    def test_normalize_unique_implies_sort(self, dictionary):
        """unique=True sorts even when sort=False."""
        il = build_interval_list([BedRecord("chr1", 40, 90), BedRecord("chr1", 0, 50)], dictionary).unwrap()
        out = normalize(il, sort=False, unique=True)
        assert [(iv.start, iv.end) for iv in out] == [(1, 90)]

    def test_normalize_sort_only(self, dictionary):
        """sort without unique keeps overlaps."""
        il = build_interval_list([BedRecord("chr1", 40, 90), BedRecord("chr1", 0, 50)], dictionary).unwrap()
        out = normalize(il, sort=True, unique=False)
        assert [(iv.start, iv.end) for iv in out] == [(1, 50), (41, 90)]

    def test_normalize_neither(self, dictionary):
        """Without sort or unique the list is returned as-is."""
        il = build_interval_list([BedRecord("chr2", 0, 10), BedRecord("chr1", 0, 10)], dictionary).unwrap()
        assert normalize(il, sort=False, unique=False) is il


class TestRunBedToIntervalList:
    """End-to-end conversion tests."""

    def test_concrete_scenario(self, temp_dir, write_bed):
        """chr1 0 100 geneA 0 + against {chr1: 1000}."""
        dict_path = temp_dir / "chr1.dict"
        dict_path.write_text("@HD\tVN:1.6\n@SQ\tSN:chr1\tLN:1000\n")
        bed = write_bed(["chr1\t0\t100\tgeneA\t0\t+"])
        out = temp_dir / "out.interval_list"

        result = run_bed_to_interval_list(bed, dict_path, out)
        assert result.is_ok()
        lines = out.read_text().splitlines()
        assert "@SQ\tSN:chr1\tLN:1000" in lines
        assert lines[-1] == "chr1\t1\t100\t+\tgeneA"

    def test_merge_scenario(self, dict_file, temp_dir, write_bed):
        """chr1 0 50 and chr1 40 90 merge into chr1 1 90."""
        bed = write_bed(["chr1\t0\t50", "chr1\t40\t90"])
        out = temp_dir / "out.interval_list"

        stats = run_bed_to_interval_list(bed, dict_file, out, sort=True, unique=True).unwrap()
        assert stats["input_records"] == 2
        assert stats["output_intervals"] == 1
        assert out.read_text().splitlines()[-1] == "chr1\t1\t90\t+\t."

    def test_empty_name_placeholder(self, dict_file, temp_dir, write_bed):
        """An empty BED name is written as the placeholder."""
        bed = write_bed(["chr1\t0\t50\t\t0\t+"])
        out = temp_dir / "out.interval_list"
        run_bed_to_interval_list(bed, dict_file, out).unwrap()
        assert out.read_text().splitlines()[-1] == "chr1\t1\t50\t+\t."

    def test_padded_names_trimmed(self, dict_file, temp_dir, write_bed):
        """Padded names are written trimmed; blank ones become the placeholder."""
        bed = write_bed(["chr1\t0\t50\tgeneA \t0\t+", "chr2\t0\t50\t  \t0\t+"])
        out = temp_dir / "out.interval_list"
        run_bed_to_interval_list(bed, dict_file, out).unwrap()
        assert out.read_text().splitlines()[-2:] == ["chr1\t1\t50\t+\tgeneA", "chr2\t1\t50\t+\t."]

    def test_round_trip_unsorted(self, dict_file, temp_dir, write_bed):
        """Sorted, non-overlapping input survives sort=False, unique=False unchanged."""
        rows = [("chr1", 0, 10, "a"), ("chr1", 20, 30, "b"), ("chr2", 0, 5, "c")]
        bed = write_bed([f"{c}\t{s}\t{e}\t{n}" for c, s, e, n in rows])
        out = temp_dir / "out.interval_list"

        run_bed_to_interval_list(bed, dict_file, out, sort=False, unique=False).unwrap()
        intervals = IntervalList.read(out).unwrap()
        assert [(iv.contig, iv.start - 1, iv.end, iv.name) for iv in intervals] == rows

    def test_policy_passed_through(self, dict_file, temp_dir, write_bed):
        """The merge policy controls merged names."""
        bed = write_bed(["chr1\t0\t50\ta", "chr1\t40\t90\tb"])
        out = temp_dir / "out.interval_list"
        run_bed_to_interval_list(
            bed, dict_file, out, policy=MergePolicy(names=NameMerge.FIRST),
        ).unwrap()
        assert out.read_text().splitlines()[-1] == "chr1\t1\t90\t+\ta"

    def test_unknown_sequence_writes_nothing(self, dict_file, temp_dir, write_bed):
        """A validation failure leaves no output file."""
        bed = write_bed(["chr1\t0\t50", "chrZ\t0\t10"])
        out = temp_dir / "out.interval_list"

        result = run_bed_to_interval_list(bed, dict_file, out)
        assert result.unwrap_err().kind is ErrorKind.UNKNOWN_SEQUENCE
        assert not out.exists()

    def test_failure_keeps_existing_output(self, dict_file, temp_dir, write_bed):
        """A failed run leaves a previous output byte-identical."""
        out = temp_dir / "out.interval_list"
        out.write_text("previous\n")
        bed = write_bed(["chr1\t0\t5000"])

        result = run_bed_to_interval_list(bed, dict_file, out)
        assert result.unwrap_err().kind is ErrorKind.END_PAST_END
        assert out.read_text() == "previous\n"

    def test_malformed_record(self, dict_file, temp_dir, write_bed):
        """Unparseable lines abort the run."""
        bed = write_bed(["chr1\t0\t50", "chr1\tx\t90"])
        result = run_bed_to_interval_list(bed, dict_file, temp_dir / "out.interval_list")
        assert result.unwrap_err().kind is ErrorKind.MALFORMED_RECORD

    def test_unreadable_input(self, dict_file, temp_dir):
        """Missing input is UNREADABLE_INPUT."""
        result = run_bed_to_interval_list(temp_dir / "missing.bed", dict_file, temp_dir / "out.il")
        assert result.unwrap_err().kind is ErrorKind.UNREADABLE_INPUT

    def test_unreadable_dictionary(self, temp_dir, write_bed):
        """Missing dictionary is UNREADABLE_DICTIONARY."""
        bed = write_bed(["chr1\t0\t50"])
        result = run_bed_to_interval_list(bed, temp_dir / "missing.dict", temp_dir / "out.il")
        assert result.unwrap_err().kind is ErrorKind.UNREADABLE_DICTIONARY

    def test_unwritable_output(self, dict_file, temp_dir, write_bed):
        """A directory as output is UNWRITABLE_OUTPUT."""
        bed = write_bed(["chr1\t0\t50"])
        result = run_bed_to_interval_list(bed, dict_file, temp_dir)
        assert result.unwrap_err().kind is ErrorKind.UNWRITABLE_OUTPUT

    def test_creates_output_directory(self, dict_file, temp_dir, write_bed):
        """Missing parent directories are created."""
        bed = write_bed(["chr1\t0\t50"])
        out = temp_dir / "nested" / "dir" / "out.interval_list"
        assert run_bed_to_interval_list(bed, dict_file, out).is_ok()
        assert out.exists()

    def test_failed_run_creates_no_directory(self, dict_file, temp_dir, write_bed):
        """A run that fails validation leaves no new directories behind."""
        bed = write_bed(["chrZ\t0\t50"])
        out = temp_dir / "nested" / "dir" / "out.interval_list"
        result = run_bed_to_interval_list(bed, dict_file, out)
        assert result.unwrap_err().kind is ErrorKind.UNKNOWN_SEQUENCE
        assert not (temp_dir / "nested").exists()

    def test_parent_is_a_file(self, dict_file, temp_dir, write_bed):
        """An output path below a regular file is UNWRITABLE_OUTPUT."""
        bed = write_bed(["chr1\t0\t50"])
        blocker = temp_dir / "blocker"
        blocker.write_text("")
        result = run_bed_to_interval_list(bed, dict_file, blocker / "sub" / "out.interval_list")
        assert result.unwrap_err().kind is ErrorKind.UNWRITABLE_OUTPUT
