"""Tests for file name sanitizing and delimited line encoding."""

import pytest

from ..storage.delimited import parse_line, serialize_fields
from ..storage.filenames import sanitize_filename


class TestSanitizeFilename:
    """Test file name sanitizing."""

    @pytest.mark.parametrize("name,expected", [
        ("Sea*Star", "Sea_Star"),
        ("A/B\\C:D", "A_B_C_D"),
        ('Q?"<>|', "Q_____"),
        ("Tab\tBell\x07", "Tab_Bell_"),
        ("Del\x7f", "Del_"),
        ("NORDIC STAR", "NORDIC STAR"),
        ("Ærø Ø", "Ærø Ø"),
    ])
    def test_invalid_characters_replaced(self, name, expected):
        """Only forbidden characters are replaced, one for one."""
        assert sanitize_filename(name) == expected

    def test_empty_name(self):
        """An empty name still gives a usable file name part."""
        assert sanitize_filename("") == "_"

    def test_idempotent(self):
        """Sanitizing twice changes nothing further."""
        once = sanitize_filename('Sea*Star<1>\n')
        assert sanitize_filename(once) == once


class TestSerializeFields:
    """Test delimited line encoding."""

    def test_plain_fields(self):
        """Fields without special characters are written verbatim."""
        assert serialize_fields(["123456789", "Sea_Star", "60.5", "5.3"]) == "123456789;Sea_Star;60.5;5.3"

    def test_trailing_empty_field(self):
        """An empty last field leaves a trailing delimiter."""
        assert serialize_fields(["T1", ""]) == "T1;"

    @pytest.mark.parametrize("field,expected", [
        ("a;b", '"a;b"'),
        ('say "hi"', '"say ""hi"""'),
        ("line\nbreak", '"line\nbreak"'),
        ("carriage\rreturn", '"carriage\rreturn"'),
    ])
    def test_special_fields_quoted(self, field, expected):
        """Delimiter, quote and line breaks force quoting."""
        assert serialize_fields([field]) == expected

    def test_single_empty_field(self):
        """A lone empty field is quoted so the line is not blank."""
        assert serialize_fields([""]) == '""'
        assert parse_line('""') == [""]

    def test_custom_delimiter(self):
        """Quoting follows the configured delimiter."""
        assert serialize_fields(["a,b", "c;d"], ",") == '"a,b",c;d'

    def test_parse_restores_fields(self):
        """A written line splits back into the original fields."""
        fields = ["1", 'He said "x; y"', "multi\nline", ""]

        assert parse_line(serialize_fields(fields)) == fields

    def test_parse_empty_line(self):
        """An empty line has no fields."""
        assert parse_line("") == []
