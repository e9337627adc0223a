"""Turning the rows of a class list spreadsheet into students."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Sequence

from oskar.database import Student
from oskar.multiimport import MultiImport, SpreadsheetError

HEADER_ROW = ("S.No", "Öğrenci No", "Adı", "Soyadı", "Cinsiyeti")
SECTION_FOOTER = "Öğrenci Sayısı"

_INTEGER = re.compile(r"\s*[+-]?\d+\s*")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


class ImportFormatError(Exception):
    """The spreadsheet cannot be imported; the message is meant for the user."""


def matches_header_row(line: Sequence[str]) -> bool:
    """Whether the row is the column header row of the standard class list."""
    return len(line) >= len(HEADER_ROW) and tuple(line[: len(HEADER_ROW)]) == HEADER_ROW


def matches_section_footer(line: Sequence[str]) -> bool:
    """Whether the row closes a class section."""
    return bool(line) and SECTION_FOOTER in line[0]


def matches_file_footer(lines: Sequence[Sequence[str]]) -> bool:
    """Whether one of the last two rows has the three cells of the file footer."""
    return len(lines) >= 3 and (len(lines[-1]) == 3 or len(lines[-2]) == 3)


def _parse_id(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    return value if _INT_MIN <= value <= _INT_MAX else None


def parse_lines(
    lines: Sequence[Sequence[str]],
    id_exists: Callable[[int], bool] | None = None,
) -> list[Student]:
    """Build students from trimmed rows, ordered by id; raises ImportFormatError."""
    lines = [list(line) for line in lines]
    if len(lines) < 2:
        raise ImportFormatError("Hata: Excel dosyası boş!")

    starting = next((i for i, line in enumerate(lines) if matches_header_row(line)), 0)
    ending = next(
        (i for i in range(len(lines) - 1, 0, -1) if matches_section_footer(lines[i])),
        len(lines) - 1,
    )
    standard = (
        matches_header_row(lines[starting])
        and matches_section_footer(lines[ending])
        and matches_file_footer(lines)
    )
    if standard:
        starting += 1

    students: dict[int, Student] = {}
    for index, line in enumerate(lines[starting:ending + 1], start=starting):
        if not line:
            continue
        if standard and matches_section_footer(line):
            if index == ending:
                break
            raise ImportFormatError(
                "Hata: Excel dosyası birden fazla sınıf/şube içeriyor. "
                "Tek seferde birden fazla sınıf/şube eklenemez!"
            )

        prefix = f"Excel dosyasındaki {index + 1}. satırda hata oluştu: "
        if len(line) < 4:
            raise ImportFormatError(
                prefix + "Öğrenci bilgisi içeren her satırda en az 4 sütun bulunmalıdır! "
                "(Sınıf sıra no, okul no, ad, soyad, ...)"
            )

        student_id = _parse_id(line[1])
        first_name, last_name = line[2], line[3]
        if student_id is None:
            raise ImportFormatError(prefix + "Öğrenci numarası bir sayı olmalıdır!")
        if not first_name:
            raise ImportFormatError(prefix + "Öğrenci adı boş olamaz!")
        if not last_name:
            raise ImportFormatError(prefix + "Öğrenci soyadı boş olamaz!")
        if student_id in students:
            raise ImportFormatError(
                prefix + f"Bu Excel dosyasında aynı öğrenci no'ya ({student_id}) "
                "sahip birden fazla öğrenci var!"
            )
        if id_exists is not None and id_exists(student_id):
            raise ImportFormatError(
                prefix + f"Sisteme kayıtlı öğrenciler arasında aynı okul no'ya ({student_id}) "
                "sahip başka bir öğrenci daha var!"
            )
        students[student_id] = Student(student_id, first_name, last_name)

    return [students[key] for key in sorted(students)]


class MultiImportHelper:
    """Reads a class list spreadsheet and returns the students in it."""

    def __init__(
        self,
        xls_file_path: str | os.PathLike[str],
        id_exists: Callable[[int], bool] | None = None,
    ) -> None:
        self._reader = MultiImport(xls_file_path)
        self._id_exists = id_exists

    def parse(self) -> list[Student]:
        """Read the file and parse it; raises ImportFormatError on any problem."""
        if not self._reader.is_readable():
            raise ImportFormatError("Hata: Excel dosyası okunamadı! Dosya yok ya da okuma izni yok.")
        try:
            lines = self._reader.trimmed_lines()
        except SpreadsheetError as err:
            raise ImportFormatError("Hata: Excel dosyası okunamadı! Dosya arızalı.") from err
        return parse_lines(lines, self._id_exists)