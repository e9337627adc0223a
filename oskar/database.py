"""SQLite storage for students."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DATABASE_FILE_NAME = "database.db"

_CREATE_STUDENTS = (
    "CREATE TABLE IF NOT EXISTS students ("
    "id integer PRIMARY KEY,"
    "firstname text,"
    "lastname text,"
    "grade integer,"
    "section text )"
)
_CREATE_HALLS = (
    "CREATE TABLE IF NOT EXISTS halls ("
    "name text PRIMARY KEY,"
    "capacity integer,"
    "layout text )"
)
_END_OF_THE_YEAR = (
    "DELETE FROM students WHERE grade=12",
    "UPDATE students SET grade=12 WHERE grade=11",
    "UPDATE students SET grade=11 WHERE grade=10",
    "UPDATE students SET grade=10 WHERE grade=9",
)


@dataclass
class Student:
    """A student registered at the school."""

    id: int
    first_name: str
    last_name: str
    grade: int = 0
    section: str = ""


class DatabaseError(Exception):
    """A database operation failed; the message is meant for the user."""


def database_file_path(root: str | os.PathLike[str]) -> Path:
    """The path of the database file inside the data directory."""
    return Path(root) / DATABASE_FILE_NAME


class Database:
    """The student table of the application database."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.path = database_file_path(root)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = sqlite3.connect(self.path, isolation_level=None)

        errors = []
        for statement in (_CREATE_STUDENTS, _CREATE_HALLS):
            try:
                self._connection.execute(statement)
            except sqlite3.Error as err:
                errors.append(str(err))
        if errors:
            self._connection.close()
            raise DatabaseError("Veri tabanı oluşturulamadı: " + "\n".join(errors))

    def _execute(self, message: str, statement: str, parameters: dict[str, Any]) -> None:
        try:
            self._connection.execute(statement, parameters)
        except sqlite3.Error as err:
            raise DatabaseError(f"{message}\n{err}") from err

    def get_all_students(self) -> dict[int, Student]:
        """All students, keyed by their id."""
        rows = self._connection.execute(
            "SELECT id, firstname, lastname, grade, section FROM students ORDER BY id"
        )
        return {
            row[0]: Student(row[0], row[1] or "", row[2] or "", row[3] or 0, row[4] or "")
            for row in rows
        }

    def add(self, student: Student) -> None:
        """Insert a student; raises DatabaseError if it cannot be stored."""
        self._execute(
            "DAL.Add() fonksiyonunda bir hata oluştu, öğrenci eklenemedi",
            "INSERT INTO students (id, firstname, lastname, grade, section) "
            "VALUES (:id, :firstname, :lastname, :grade, :section)",
            {
                "id": student.id,
                "firstname": student.first_name,
                "lastname": student.last_name,
                "grade": student.grade,
                "section": student.section,
            },
        )

    def update(self, student: Student, old_id: int) -> None:
        """Overwrite the student stored under old_id with the given data."""
        self._execute(
            "DAL.Update() fonksiyonunda bir hata oluştu, öğrenci bilgileri güncellenemedi",
            "UPDATE students SET firstname=(:firstname), lastname=(:lastname), "
            "grade=(:grade), section=(:section), id=(:newId) WHERE id=(:oldId)",
            {
                "oldId": old_id,
                "newId": student.id,
                "firstname": student.first_name,
                "lastname": student.last_name,
                "grade": student.grade,
                "section": student.section,
            },
        )

    def delete(self, student_id: int) -> None:
        """Remove the student with the given id."""
        self._execute(
            "DAL.Delete() fonksiyonunda bir hata oluştu, öğrenci silinemedi",
            "DELETE FROM students WHERE id = (:id)",
            {"id": student_id},
        )

    def end_of_the_year(self) -> None:
        """Graduate the 12th grade and move every other grade up by one."""
        failed_steps = []
        errors = []
        for step, statement in enumerate(_END_OF_THE_YEAR):
            try:
                self._connection.execute(statement)
            except sqlite3.Error as err:
                failed_steps.append(f"{step},")
                errors.append(str(err))
        if errors:
            raise DatabaseError(
                "Yıl sonu işlemleri yapılırken şu numaralı adım(lar)da hata oluştu: "
                + "".join(failed_steps)
                + "".join(errors)
            )

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()