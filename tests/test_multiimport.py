import zipfile

import pytest

from oskar.multiimport import MultiImport, SpreadsheetError, trim_cells

WORKBOOK = '<workbook><sheets><sheet name="Liste" sheetId="1" id="rId1"/></sheets></workbook>'
RELS = '<Relationships><Relationship Id="rId1" Target="worksheets/sheet1.xml"/></Relationships>'


def _write_xlsx(path, sheet_rows, shared=()):
    shared_xml = "<sst>" + "".join(f"<si><t>{text}</t></si>" for text in shared) + "</sst>"
    sheet_xml = "<worksheet><sheetData>" + "".join(sheet_rows) + "</sheetData></worksheet>"
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("xl/workbook.xml", WORKBOOK)
        archive.writestr("xl/_rels/workbook.xml.rels", RELS)
        archive.writestr("xl/sharedStrings.xml", shared_xml)
        archive.writestr("xl/worksheets/sheet1.xml", sheet_xml)
    return path


def test_trim_cells_collapses_whitespace_and_drops_empty():
    assert trim_cells(["  Ali   Veli ", "", "   ", "\tKaya\n"]) == ["Ali Veli", "Kaya"]


def test_trim_cells_of_empty_row_is_empty():
    assert trim_cells(["", " "]) == []


def test_reads_shared_inline_and_numeric_cells(tmp_path):
    path = _write_xlsx(
        tmp_path / "liste.xlsx",
        [
            '<row r="1"><c r="A1" t="s"><v>0</v></c>'
            '<c r="B1" t="inlineStr"><is><t>  Ayşe   Nur </t></is></c>'
            '<c r="C1"><v>101</v></c></row>',
        ],
        shared=["Ali"],
    )
    assert MultiImport(path).trimmed_lines() == [["Ali", "Ayşe Nur", "101"]]


def test_fractional_numbers_are_truncated(tmp_path):
    path = _write_xlsx(tmp_path / "liste.xlsx", ['<row r="1"><c r="A1"><v>12.7</v></c></row>'])
    assert MultiImport(path).trimmed_lines() == [["12"]]


def test_empty_rows_and_cells_are_dropped_and_columns_ordered(tmp_path):
    path = _write_xlsx(
        tmp_path / "liste.xlsx",
        [
            '<row r="1"><c r="C1" t="s"><v>1</v></c><c r="A1" t="s"><v>0</v></c></row>',
            '<row r="2"><c r="A2" t="inlineStr"><is><t>   </t></is></c></row>',
            '<row r="3"><c r="B3" t="s"><v>1</v></c></row>',
        ],
        shared=["first", "second"],
    )
    assert MultiImport(path).trimmed_lines() == [["first", "second"], ["second"]]


def test_is_readable(tmp_path):
    present = _write_xlsx(tmp_path / "liste.xlsx", [])
    assert MultiImport(present).is_readable() is True
    assert MultiImport(tmp_path / "missing.xlsx").is_readable() is False


def test_corrupt_xlsx_raises(tmp_path):
    path = tmp_path / "bozuk.xlsx"
    path.write_bytes(b"this is not a zip archive")
    with pytest.raises(SpreadsheetError):
        MultiImport(path).trimmed_lines()


def test_corrupt_xls_raises(tmp_path):
    path = tmp_path / "bozuk.xls"
    path.write_bytes(b"\x00" * 1024)
    with pytest.raises(SpreadsheetError):
        MultiImport(path).trimmed_lines()


def test_missing_file_raises(tmp_path):
    with pytest.raises(SpreadsheetError):
        MultiImport(tmp_path / "missing.xlsx").trimmed_lines()