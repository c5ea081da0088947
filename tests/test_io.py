"""Tests for fqprimers.io modules."""

from pathlib import Path

import pytest
from fqprimers.core.primers import Direction, InvalidPrimerError
from fqprimers.core.samples import PrimerPair
from fqprimers.io.fastq import FastqRecord, FastqWriter, read_fastq
from fqprimers.io.primer_table import (
    PrimerTableError,
    parse_direction,
    read_primer_table,
)
from fqprimers.io.sample_table import (
    SampleTableError,
    read_long_table,
    read_sample_table,
    read_wide_table,
)


DATA_DIR = Path(__file__).parent / "data"
SAMPLES_FILE_GOOD = DATA_DIR / "samples_good.tsv"
SAMPLES_FILE_EMPTY = DATA_DIR / "samples_empty.tsv"
PRIMERS_FILE = DATA_DIR / "primers.tsv"


def write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


class TestParseDirection:
    """Test direction token normalization."""

    def test_forward(self):
        assert parse_direction("F") == Direction.FORWARD

    def test_reverse(self):
        assert parse_direction("R") == Direction.REVERSE

    def test_unknown_defaults_to_reverse(self):
        assert parse_direction("forward") == Direction.REVERSE
        assert parse_direction("f") == Direction.REVERSE

    def test_unknown_rejected_when_strict(self):
        with pytest.raises(InvalidPrimerError):
            parse_direction("X", strict=True)

    def test_strict_accepts_known_tokens(self):
        assert parse_direction("F", strict=True) == Direction.FORWARD
        assert parse_direction("R", strict=True) == Direction.REVERSE


class TestReadPrimerTable:
    """Test primer table loading."""

    def test_read_primer_table(self):
        table = read_primer_table(PRIMERS_FILE)
        # oVK003 has an invalid sequence and is dropped
        assert table.labels() == ["oVK001", "oVK002", "oVK010", "oVK020"]
        assert table[0].direction == Direction.FORWARD
        assert table[2].direction == Direction.REVERSE
        assert table[0].barcode == "GACT"

    def test_invalid_primer_logged(self, caplog):
        with caplog.at_level("WARNING"):
            read_primer_table(PRIMERS_FILE)
        assert "Invalid DNA sequence" in caplog.text

    def test_unknown_direction_lenient(self, tmp_path):
        path = write(tmp_path / "p.tsv", "p1\tACGT\tAA\tF\np2\tTTGG\tAA\tX\n")
        table = read_primer_table(path)
        assert len(table) == 2
        assert table[1].direction == Direction.REVERSE

    def test_unknown_direction_strict(self, tmp_path):
        path = write(tmp_path / "p.tsv", "p1\tACGT\tAA\tF\np2\tTTGG\tAA\tX\n")
        table = read_primer_table(path, strict_direction=True)
        assert table.labels() == ["p1"]

    def test_empty_barcode_allowed(self, tmp_path):
        path = write(tmp_path / "p.tsv", "p1\tACGT\t\tF\n")
        table = read_primer_table(path)
        assert table[0].barcode == ""

    def test_hash_inside_field_is_data(self, tmp_path):
        path = write(
            tmp_path / "p.tsv",
            "# label\tsequence\tbarcode\tdirection\n"
            "F1\tACTGACTG\tGA#CT\tF\n"
            "R#1\tGGGGCCCC\tTT\tR\n",
        )
        table = read_primer_table(path)
        assert table.labels() == ["F1", "R#1"]
        assert table[0].barcode == "GA#CT"

    def test_comments_only(self, tmp_path):
        path = write(tmp_path / "p.tsv", "# nothing here\n#p1\tACGT\tAA\tF\n")
        table = read_primer_table(path)
        assert len(table) == 0

    def test_empty_file(self, tmp_path):
        path = write(tmp_path / "p.tsv", "")
        table = read_primer_table(path)
        assert len(table) == 0

    def test_wrong_column_count(self, tmp_path):
        path = write(tmp_path / "p.tsv", "p1\tACGT\tF\np2\tTTGG\tR\n")
        with pytest.raises(PrimerTableError):
            read_primer_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            read_primer_table(tmp_path / "missing.tsv")


class TestReadWideTable:
    """Test wide sample table loading."""

    def test_read_sample_table_good(self):
        table = read_wide_table(SAMPLES_FILE_GOOD)
        assert table.contains_sample(PrimerPair("oVK790", "oVK791"))
        assert table.get(("oVK790", "oVK791")).name == "sample_8"
        assert table.get(("oVK001", "oVK010")).name == "sample_1"
        assert table.get(("oVK002", "oVK020")).name == "sample_5"

    def test_short_row_leaves_pairs_absent(self):
        table = read_wide_table(SAMPLES_FILE_GOOD)
        assert table.get(("oVK002", "oVK791")) is None
        assert len(table) == 8

    def test_primer_sets(self):
        table = read_wide_table(SAMPLES_FILE_GOOD)
        assert table.forward_primers == {"oVK001", "oVK002", "oVK790"}
        assert table.reverse_primers == {"oVK010", "oVK020", "oVK791"}

    def test_read_sample_table_empty(self):
        with pytest.raises(SampleTableError):
            read_wide_table(SAMPLES_FILE_EMPTY)

    def test_header_must_start_with_whitespace(self, tmp_path):
        path = write(tmp_path / "s.tsv", "oVK010\toVK020\noVK001\ts1\ts2\n")
        with pytest.raises(SampleTableError, match="whitespace"):
            read_wide_table(path)

    def test_too_many_cells(self, tmp_path):
        path = write(tmp_path / "s.tsv", "\toVK010\noVK001\ts1\ts2\n")
        with pytest.raises(SampleTableError):
            read_wide_table(path)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            read_wide_table(SAMPLES_FILE_EMPTY)


class TestReadLongTable:
    """Test long sample table loading."""

    def test_read_long_table(self, tmp_path):
        path = write(
            tmp_path / "s.tsv",
            "forward\treverse\tsample\tis_control\n"
            "oVK001\toVK010\tsample 1\tno\n"
            "oVK002\toVK010\tblank\tyes\n",
        )
        table = read_long_table(path)
        assert len(table) == 2
        assert table.get(("oVK001", "oVK010")).name == "sample 1"
        assert table.get(("oVK002", "oVK010")).is_control
        assert not table.get(("oVK001", "oVK010")).is_control

    def test_is_control_optional(self, tmp_path):
        path = write(tmp_path / "s.tsv", "forward\treverse\tsample\np1\tp2\ts\n")
        table = read_long_table(path)
        assert table.get(("p1", "p2")).is_control is False

    def test_missing_columns(self, tmp_path):
        path = write(tmp_path / "s.tsv", "forward\tsample\np1\ts\n")
        with pytest.raises(SampleTableError, match="reverse"):
            read_long_table(path)

    def test_empty_file(self, tmp_path):
        path = write(tmp_path / "s.tsv", "")
        with pytest.raises(SampleTableError):
            read_long_table(path)

    def test_dispatch(self, tmp_path):
        path = write(tmp_path / "s.tsv", "forward\treverse\tsample\np1\tp2\ts\n")
        assert len(read_sample_table(path, "long")) == 1
        assert len(read_sample_table(SAMPLES_FILE_GOOD, "wide")) == 8

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            read_sample_table(SAMPLES_FILE_GOOD, "matrix")


class TestFastqRecord:
    """Test FASTQ record validation and formatting."""

    def test_valid_record(self):
        rec = FastqRecord("read1", "ACGT", "IIII")
        assert rec.check() == []
        assert rec.is_valid()

    def test_empty_id(self):
        assert not FastqRecord("", "ACGT", "IIII").is_valid()

    def test_length_mismatch(self):
        errors = FastqRecord("read1", "ACGT", "III").check()
        assert len(errors) == 1
        assert "Unequal length" in errors[0]

    def test_non_ascii_sequence(self):
        assert not FastqRecord("read1", "ACGÅ", "IIII").is_valid()

    def test_format_with_description(self):
        rec = FastqRecord("read1", "ACGT", "IIII", "primers:F1-R1")
        assert rec.format() == "@read1 primers:F1-R1\nACGT\n+\nIIII\n"

    def test_format_without_description(self):
        assert FastqRecord("read1", "ACGT", "IIII").format() == "@read1\nACGT\n+\nIIII\n"


class TestFastqIO:
    """Test FASTQ reading and writing."""

    def test_read_fastq(self, tmp_path):
        path = write(
            tmp_path / "reads.fastq",
            "@r1 first read\nACGTACGT\n+\nIIIIIIII\n@r2\nGGGG\n+\nJJJJ\n",
        )
        records = list(read_fastq(path))
        assert [r.id for r in records] == ["r1", "r2"]
        assert records[0].seq == "ACGTACGT"
        assert records[0].qual == "IIIIIIII"
        assert records[0].desc == "first read"
        assert records[1].desc is None

    def test_read_gzipped_fastq(self, tmp_path):
        import gzip

        path = tmp_path / "reads.fastq.gz"
        with gzip.open(path, "wt") as f:
            f.write("@r1\nACGT\n+\nIIII\n")
        records = list(read_fastq(path))
        assert len(records) == 1
        assert records[0].seq == "ACGT"

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "out.fastq"
        with open(path, "w") as f:
            writer = FastqWriter(f)
            writer.write_record(FastqRecord("r1", "ACGT", "IIII", "primers:invalid"))
            writer.write_record(FastqRecord("r2", "GG", "II"))
        assert writer.records_written == 2

        records = list(read_fastq(path))
        assert records[0].desc == "primers:invalid"
        assert records[1].seq == "GG"

    def test_short_quality_does_not_consume_next_record(self, tmp_path):
        path = write(
            tmp_path / "reads.fastq",
            "@r1\nACTGACTGGGGGCCCC\n+\nIIII\n@r2\nACGT\n+\nIIII\n",
        )
        records = list(read_fastq(path))

        assert [r.id for r in records] == ["r1", "r2"]
        assert not records[0].is_valid()
        assert "Unequal length" in records[0].check()[0]
        assert records[1].is_valid()

    def test_truncated_last_record(self, tmp_path):
        path = write(tmp_path / "reads.fastq", "@r1\nACGT\n+\nIIII\n@r2\nACGTACGT\n")
        records = list(read_fastq(path))

        assert len(records) == 2
        assert records[0].is_valid()
        assert records[1].qual == ""
        assert not records[1].is_valid()

    def test_missing_markers(self, tmp_path):
        path = write(tmp_path / "reads.fastq", "r1\nACGT\nIIII\nIIII\n")
        problems = next(read_fastq(path)).check()

        assert any("'@'" in p for p in problems)
        assert any("'+'" in p for p in problems)

    def test_blank_lines_between_records(self, tmp_path):
        path = write(tmp_path / "reads.fastq", "@r1\nACGT\n+\nIIII\n\n@r2\nGG\n+\nII\n\n")
        assert [r.id for r in read_fastq(path)] == ["r1", "r2"]

    def test_crlf_line_endings(self, tmp_path):
        path = tmp_path / "reads.fastq"
        path.write_bytes(b"@r1 desc\r\nACGT\r\n+\r\nIIII\r\n")
        rec = next(read_fastq(path))
        assert rec.desc == "desc"
        assert rec.is_valid()

    def test_undecodable_bytes_flagged(self, tmp_path):
        path = tmp_path / "reads.fastq"
        path.write_bytes(b"@r1\nAC\xffT\n+\nIIII\n@r2\nACGT\n+\nIIII\n")
        records = list(read_fastq(path))
        assert not records[0].is_valid()
        assert records[1].is_valid()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
