"""Reading the rows of the first worksheet of an Excel file."""

from __future__ import annotations

import math
import os
import struct
import xml.etree.ElementTree as ET
import zipfile
from collections.abc import Iterable, Iterator
from pathlib import Path


class SpreadsheetError(Exception):
    """The spreadsheet could not be read."""


def trim_cells(cells: Iterable[str]) -> list[str]:
    """Collapse whitespace in every cell and drop the cells that end up empty."""
    return [text for text in (" ".join(cell.split()) for cell in cells) if text]


def _number_text(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    return str(int(value)) if math.isfinite(value) else ""


def _rows_to_lines(cells: dict[int, dict[int, str]]) -> list[list[str]]:
    lines = []
    for row in sorted(cells):
        columns = cells[row]
        trimmed = trim_cells(columns[col] for col in sorted(columns))
        if trimmed:
            lines.append(trimmed)
    return lines


# ---------------------------------------------------------------- xlsx


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _text_of(element: ET.Element) -> str:
    return "".join(node.text or "" for node in element.iter() if _local(node.tag) == "t")


def _column_index(reference: str) -> int | None:
    letters = "".join(ch for ch in reference if ch.isalpha()).upper()
    if not letters:
        return None
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def _first_sheet_member(archive: zipfile.ZipFile) -> str:
    default = "xl/worksheets/sheet1.xml"
    try:
        workbook = ET.fromstring(archive.read("xl/workbook.xml"))
        rels = ET.fromstring(archive.read("xl/_rels/workbook.xml.rels"))
    except KeyError:
        return default
    sheet = next((node for node in workbook.iter() if _local(node.tag) == "sheet"), None)
    if sheet is None:
        return default
    rel_id = next((value for key, value in sheet.attrib.items() if _local(key) == "id"), None)
    for rel in rels.iter():
        if _local(rel.tag) == "Relationship" and rel.get("Id") == rel_id:
            target = rel.get("Target", "")
            return target.lstrip("/") if target.startswith("/") else "xl/" + target
    return default


def _read_xlsx(path: Path) -> list[list[str]]:
    with zipfile.ZipFile(path) as archive:
        shared: list[str] = []
        if "xl/sharedStrings.xml" in archive.namelist():
            root = ET.fromstring(archive.read("xl/sharedStrings.xml"))
            shared = [_text_of(item) for item in root if _local(item.tag) == "si"]
        sheet = ET.fromstring(archive.read(_first_sheet_member(archive)))

    cells: dict[int, dict[int, str]] = {}
    row_elements = (node for node in sheet.iter() if _local(node.tag) == "row")
    for row_number, row in enumerate(row_elements):
        columns = cells.setdefault(row_number, {})
        next_col = 0
        for cell in row:
            if _local(cell.tag) != "c":
                continue
            col = _column_index(cell.get("r", ""))
            col = next_col if col is None else col
            next_col = col + 1
            kind = cell.get("t", "n")
            value = next((node.text or "" for node in cell if _local(node.tag) == "v"), None)
            if kind == "inlineStr":
                columns[col] = _text_of(cell)
            elif value is None:
                continue
            elif kind == "s":
                columns[col] = shared[int(value)]
            elif kind in ("str", "b", "e"):
                columns[col] = value
            else:
                columns[col] = _number_text(float(value))
    return _rows_to_lines(cells)


# ---------------------------------------------------------------- xls

_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
_SPECIAL_SECTOR = 0xFFFFFFFA


def _sector_chain(table: tuple[int, ...] | list[int], start: int) -> Iterator[int]:
    seen = set()
    while start < _SPECIAL_SECTOR:
        if start in seen or start >= len(table):
            raise SpreadsheetError("broken sector chain")
        seen.add(start)
        yield start
        start = table[start]


def _ole_workbook_stream(data: bytes) -> bytes:
    if len(data) < 512 or data[:8] != _OLE_MAGIC:
        raise SpreadsheetError("not a compound document")
    sector_shift, mini_shift = struct.unpack_from("<HH", data, 30)
    num_fat, dir_start = struct.unpack_from("<II", data, 44)
    mini_cutoff, minifat_start, _, difat_start, num_difat = struct.unpack_from("<5I", data, 56)
    size = 1 << sector_shift
    per_sector = size // 4

    def sector(index: int) -> bytes:
        chunk = data[(index + 1) * size:(index + 2) * size]
        if len(chunk) != size:
            raise SpreadsheetError("truncated compound document")
        return chunk

    difat = list(struct.unpack_from("<109I", data, 76))
    next_difat = difat_start
    for _ in range(num_difat):
        values = struct.unpack(f"<{per_sector}I", sector(next_difat))
        difat.extend(values[:-1])
        next_difat = values[-1]
    fat: list[int] = []
    for fat_sector in difat[:num_fat]:
        fat.extend(struct.unpack(f"<{per_sector}I", sector(fat_sector)))

    def read(start: int) -> bytes:
        return b"".join(sector(index) for index in _sector_chain(fat, start))

    directory = read(dir_start)
    entries = [directory[offset:offset + 128] for offset in range(0, len(directory) - 127, 128)]
    if not entries:
        raise SpreadsheetError("empty directory")

    def entry(raw: bytes) -> tuple[str, int, int, int]:
        name_length = struct.unpack_from("<H", raw, 64)[0]
        name = raw[:max(name_length - 2, 0)].decode("utf-16-le", errors="replace")
        start, length = struct.unpack_from("<II", raw, 116)
        return name, raw[66], start, length

    root_start = entry(entries[0])[2]
    for raw in entries:
        name, kind, start, length = entry(raw)
        if kind == 2 and name in ("Workbook", "Book"):
            break
    else:
        raise SpreadsheetError("no workbook stream")

    if length < mini_cutoff:
        minifat_raw = read(minifat_start)
        minifat = struct.unpack(f"<{len(minifat_raw) // 4}I", minifat_raw)
        mini_stream = read(root_start)
        mini_size = 1 << mini_shift
        stream = b"".join(
            mini_stream[index * mini_size:(index + 1) * mini_size] for index in _sector_chain(minifat, start)
        )
    else:
        stream = read(start)
    return stream[:length]


def _records(stream: bytes, offset: int = 0) -> Iterator[tuple[int, bytes]]:
    pos = offset
    while pos + 4 <= len(stream):
        kind, length = struct.unpack_from("<HH", stream, pos)
        yield kind, stream[pos + 4:pos + 4 + length]
        pos += 4 + length


class _ChunkReader:
    """Reads BIFF8 strings that may run on into CONTINUE records."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks
        self._index = 0
        self._pos = 0

    def raw(self, count: int) -> bytes:
        out = bytearray()
        while count > 0:
            while self._index < len(self._chunks) and self._pos >= len(self._chunks[self._index]):
                self._index += 1
                self._pos = 0
            if self._index >= len(self._chunks):
                raise SpreadsheetError("truncated string data")
            piece = self._chunks[self._index][self._pos:self._pos + count]
            out += piece
            self._pos += len(piece)
            count -= len(piece)
        return bytes(out)

    def string(self) -> str:
        count, flags = struct.unpack("<HB", self.raw(3))
        runs = struct.unpack("<H", self.raw(2))[0] if flags & 0x08 else 0
        extra = struct.unpack("<I", self.raw(4))[0] if flags & 0x04 else 0
        wide = bool(flags & 0x01)
        parts = []
        while count > 0:
            chunk = self._chunks[self._index]
            if self._pos >= len(chunk):
                self._index += 1
                if self._index >= len(self._chunks):
                    raise SpreadsheetError("truncated string data")
                wide = bool(self._chunks[self._index][0] & 0x01)
                self._pos = 1
                continue
            width = 2 if wide else 1
            take = min(count, (len(chunk) - self._pos) // width)
            if take == 0:
                raise SpreadsheetError("malformed string data")
            piece = chunk[self._pos:self._pos + take * width]
            parts.append(piece.decode("utf-16-le" if wide else "latin-1"))
            self._pos += take * width
            count -= take
        self.raw(4 * runs + extra)
        return "".join(parts)


def _rk_value(rk: int) -> int | float:
    if rk & 0x02:
        value: int | float = struct.unpack("<i", struct.pack("<I", rk))[0] >> 2
    else:
        value = struct.unpack("<d", struct.pack("<Q", (rk & 0xFFFFFFFC) << 32))[0]
    if rk & 0x01:
        value = value / 100
    return value


def _read_xls(path: Path) -> list[list[str]]:
    stream = _ole_workbook_stream(path.read_bytes())
    records = list(_records(stream))
    if not records or records[0][0] != 0x0809 or struct.unpack_from("<H", records[0][1])[0] != 0x0600:
        raise SpreadsheetError("unsupported workbook version")

    shared: list[str] = []
    sheet_offset = None
    for index, (kind, body) in enumerate(records):
        if kind == 0x000A:
            break
        if kind == 0x0085 and sheet_offset is None:
            sheet_offset = struct.unpack_from("<I", body)[0]
        elif kind == 0x00FC:
            unique = struct.unpack_from("<I", body, 4)[0]
            chunks = [body[8:]]
            for next_kind, next_body in records[index + 1:]:
                if next_kind != 0x003C:
                    break
                chunks.append(next_body)
            reader = _ChunkReader(chunks)
            shared = [reader.string() for _ in range(unique)]
    if sheet_offset is None:
        raise SpreadsheetError("workbook has no worksheet")

    cells: dict[int, dict[int, str]] = {}

    def put(row: int, col: int, text: str) -> None:
        cells.setdefault(row, {})[col] = text

    pending_formula = None
    for position, (kind, body) in enumerate(_records(stream, sheet_offset)):
        if kind == 0x000A and position > 0:
            break
        if kind == 0x00FD:
            row, col, _, sst_index = struct.unpack_from("<HHHI", body)
            put(row, col, shared[sst_index])
        elif kind == 0x0203:
            row, col, _, number = struct.unpack_from("<HHHd", body)
            put(row, col, _number_text(number))
        elif kind == 0x027E:
            row, col, _, rk = struct.unpack_from("<HHHI", body)
            put(row, col, _number_text(_rk_value(rk)))
        elif kind == 0x00BD:
            row, first_col = struct.unpack_from("<HH", body)
            for offset in range(4, len(body) - 2, 6):
                rk = struct.unpack_from("<I", body, offset + 2)[0]
                put(row, first_col + (offset - 4) // 6, _number_text(_rk_value(rk)))
        elif kind == 0x0204:
            row, col = struct.unpack_from("<HH", body)
            put(row, col, _ChunkReader([body[6:]]).string())
        elif kind == 0x0006:
            row, col = struct.unpack_from("<HH", body)
            result = body[6:14]
            if result[6:8] != b"\xff\xff":
                put(row, col, _number_text(struct.unpack("<d", result)[0]))
            elif result[0] == 0:
                pending_formula = (row, col)
        elif kind == 0x0207 and pending_formula is not None:
            put(*pending_formula, _ChunkReader([body]).string())
            pending_formula = None
    return _rows_to_lines(cells)


class MultiImport:
    """Reads the rows of an .xls or .xlsx file as lists of non-empty cell texts."""

    def __init__(self, xls_file_path: str | os.PathLike[str]) -> None:
        self.path = Path(xls_file_path)

    def is_readable(self) -> bool:
        """Whether the file exists and can be opened for reading."""
        try:
            with self.path.open("rb"):
                return True
        except OSError:
            return False

    def trimmed_lines(self) -> list[list[str]]:
        """Rows of the first worksheet with empty cells and empty rows left out."""
        try:
            if self.path.suffix.lower() == ".xls":
                return _read_xls(self.path)
            return _read_xlsx(self.path)
        except SpreadsheetError:
            raise
        except (OSError, zipfile.BadZipFile, ET.ParseError, KeyError, IndexError,
                ValueError, struct.error, UnicodeDecodeError) as err:
            raise SpreadsheetError(f"could not read {self.path}: {err}") from err