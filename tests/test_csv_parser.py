"""Tests for CSV decoding and parsing"""
import pytest

from src.prospect_tool.exceptions import CSVDecodeError, UploadRejected
from src.prospect_tool.services.csv_parser import decode_csv_content, parse_csv, split_row, validate_upload


class TestSplitRow:
    def test_quoted_comma_stays_in_field(self):
        assert split_row('a,"b,c",d') == ["a", "b,c", "d"]

    def test_doubled_quote_is_literal(self):
        assert split_row('"He said ""hi""."') == ['He said "hi".']

    def test_cells_are_trimmed(self):
        assert split_row('  Acme ,  "acme.com" , x ') == ["Acme", "acme.com", "x"]

    def test_trailing_separator_yields_empty_cell(self):
        assert split_row("a,b,") == ["a", "b", ""]

    def test_unbalanced_quote_does_not_raise(self):
        assert split_row('a,"b') == ["a", "b"]

    def test_quote_inside_a_field_toggles_quoting(self):
        assert split_row('Acme,He said "hi, there" ok,x') == ["Acme", "He said hi, there ok", "x"]

    def test_empty_line_is_one_empty_cell(self):
        assert split_row("") == [""]


class TestParseCSV:
    def test_plain_input_round_trips(self):
        text = "company,domain\nAcme,acme.com\nGlobex,globex.com\n"
        parsed = parse_csv(text)

        assert parsed.headers == ["company", "domain"]
        rebuilt = [",".join(parsed.headers)] + [",".join(row[h] for h in parsed.headers) for row in parsed.rows]
        assert rebuilt == text.strip().split("\n")

    def test_blank_lines_and_crlf_are_ignored(self):
        parsed = parse_csv("h1,h2\r\n\r\na,b\r\n   \nc,d\n\n")

        assert len(parsed.rows) == 2
        assert parsed.rows[1] == {"h1": "c", "h2": "d"}

    def test_short_rows_are_padded(self):
        parsed = parse_csv("a,b,c\n1\n")

        assert parsed.rows == [{"a": "1", "b": "", "c": ""}]

    def test_extra_tokens_are_dropped(self):
        parsed = parse_csv("a\n1,2,3\n")

        assert parsed.rows == [{"a": "1"}]

    def test_duplicate_headers_last_value_wins(self):
        parsed = parse_csv("email,email\nx@a.com,y@b.com\n")

        assert parsed.headers == ["email", "email"]
        assert parsed.rows == [{"email": "y@b.com"}]

    def test_quoted_cells_in_rows(self):
        parsed = parse_csv('name,notes\nAcme,"Met at expo, follow up"\n')

        assert parsed.rows[0]["notes"] == "Met at expo, follow up"

    def test_mid_field_quote_keeps_later_columns_aligned(self):
        parsed = parse_csv('company,notes,email\nAcme,Met "Dana, VP" at expo,dana@acme.com\n')

        assert parsed.rows == [
            {"company": "Acme", "notes": "Met Dana, VP at expo", "email": "dana@acme.com"}
        ]

    @pytest.mark.parametrize("text", ["", "\n\n", "  \r\n \n"])
    def test_empty_input_is_not_an_error(self, text):
        parsed = parse_csv(text)

        assert parsed.headers == []
        assert parsed.rows == []

    def test_header_only_has_no_rows(self):
        parsed = parse_csv("company,email\n")

        assert parsed.headers == ["company", "email"]
        assert parsed.rows == []


class TestDecodeAndValidate:
    def test_utf8_bom_is_stripped(self):
        assert decode_csv_content(b"\xef\xbb\xbfname\nAcme") == "name\nAcme"

    def test_cp1252_fallback(self):
        assert decode_csv_content("Café".encode("cp1252")) == "Café"

    def test_undecodable_bytes_raise(self):
        with pytest.raises(CSVDecodeError):
            decode_csv_content(b"\x81\x8d\xff")

    def test_extension_check_is_case_insensitive(self):
        validate_upload("Prospects.CSV", 10, 1024)

    def test_non_csv_is_rejected(self):
        with pytest.raises(UploadRejected, match="CSV"):
            validate_upload("prospects.xlsx", 10, 1024)

    def test_oversized_file_is_rejected(self):
        with pytest.raises(UploadRejected, match="too large"):
            validate_upload("prospects.csv", 3 * 1024 * 1024, 1024 * 1024)
