"""
Tests for CSV rendering and export files.
"""

from datetime import date

import pytest

from clientdesk.domain.errors import InvalidInputError
from clientdesk.services.export_service import export_filename, records_to_csv, save_export, to_csv


class TestCsv:

    def test_plain_values_are_not_quoted(self):
        assert to_csv(["a", "b"], [[1, "x"]]) == "a,b\n1,x"

    @pytest.mark.parametrize("value,cell", [
        ("a,b", '"a,b"'),
        ('say "hi"', '"say ""hi"""'),
        ("two\nlines", '"two\nlines"'),
    ])
    def test_special_values_are_quoted(self, value, cell):
        assert to_csv(["col"], [[value]]) == f"col\n{cell}"

    def test_none_is_empty(self):
        assert to_csv(["a", "b"], [[None, 0]]) == "a,b\n,0"

    def test_records_use_first_keys_as_columns(self):
        records = [{"ID": "1", "Name": "Acme"}, {"ID": "2", "Name": "Globex"}]
        assert records_to_csv(records) == "ID,Name\n1,Acme\n2,Globex"

    def test_no_records(self):
        with pytest.raises(InvalidInputError, match="No data"):
            records_to_csv([])


def test_export_filename():
    assert export_filename("invoices_report", "csv", date(2026, 1, 31)) == "invoices_report_2026-01-31.csv"


def test_save_export(tmp_path):
    text = save_export("a,b\n1,2", "r.csv", tmp_path / "reports")
    binary = save_export(b"%PDF-1.4", "r.pdf", tmp_path / "reports")
    assert text.read_text(encoding="utf-8") == "a,b\n1,2"
    assert binary.read_bytes() == b"%PDF-1.4"
