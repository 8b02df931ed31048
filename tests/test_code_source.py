"""
Tests for code source resolution.
"""

from apps.backend.services.vouchers.code_source import (
    SAMPLE_CODES,
    parse_inline,
    read_codes_file,
    resolve_codes,
)


class TestParsing:
    def test_inline_trims_and_drops_blanks(self):
        assert parse_inline(" A1 , ,A2,, ") == ["A1", "A2"]

    def test_inline_collapses_duplicates(self):
        assert parse_inline("A1,A1,a1") == ["A1", "a1"]

    def test_inline_none(self):
        assert parse_inline(None) == []

    def test_file_lines(self, tmp_path):
        path = tmp_path / "codes.csv"
        path.write_text("C1\r\n  C2  \n\nC3\n")
        assert read_codes_file(str(path)) == ["C1", "C2", "C3"]

    def test_missing_file(self, tmp_path):
        assert read_codes_file(str(tmp_path / "nope.csv")) == []

    def test_undecodable_file_is_absent(self, tmp_path):
        path = tmp_path / "codes.csv"
        path.write_bytes(b"\xff\xfe\xfa\x00bad")
        assert read_codes_file(str(path)) == []


class TestPriority:
    def test_inline_wins(self, tmp_path):
        path = tmp_path / "codes.csv"
        path.write_text("F1\n")
        loaded = resolve_codes("I1", str(path))
        assert loaded.source == "inline"
        assert loaded.codes == ["I1"]

    def test_file_when_inline_empty(self, tmp_path):
        path = tmp_path / "codes.csv"
        path.write_text("F1\nF2\n")
        loaded = resolve_codes(" , ", str(path))
        assert loaded.source == "file"
        assert loaded.codes == ["F1", "F2"]

    def test_sample_fallback(self, tmp_path):
        empty = tmp_path / "codes.csv"
        empty.write_text("\n\n")
        loaded = resolve_codes(None, str(empty))
        assert loaded.source == "sample"
        assert loaded.codes == SAMPLE_CODES
        assert "valid" in loaded.codes
