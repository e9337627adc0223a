"""Student bookkeeping on top of the database, with a cache of all students."""

from __future__ import annotations

from dataclasses import replace

from oskar.database import Database, DatabaseError, Student
from oskar.naming import format_first_name, format_last_name, parse_class_name, sort_classnames


class DatabaseHelperError(Exception):
    """A student operation failed; the message is meant for the user."""


def _formatted(student: Student) -> Student:
    return replace(
        student,
        first_name=format_first_name(student.first_name),
        last_name=format_last_name(student.last_name),
    )


class DatabaseHelper:
    """Checks student operations, runs them against the database and keeps a cache."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._students: dict[int, Student] = database.get_all_students()

    def add(self, student: Student) -> Student:
        """Store a new student with normalised names and return the stored record."""
        stored = _formatted(student)
        if self.id_exists(stored.id):
            raise DatabaseHelperError(
                f"{stored.id} okul no'suna sahip başka bir öğrenci var. "
                "Bu nedenle yeni öğrenci eklenemedi!"
            )
        try:
            self._db.add(stored)
        except DatabaseError as err:
            raise DatabaseHelperError(str(err)) from err
        self._students[stored.id] = stored
        return stored

    def add_all(self, students: list[Student]) -> list[Student]:
        """Store many students at once; duplicates are assumed to be checked already.

        Every student that can be stored is stored; if any fail, a single
        DatabaseHelperError lists them after the others were added.
        """
        added: list[Student] = []
        problematic_ids: list[int] = []
        error_log = ""
        for student in students:
            stored = _formatted(student)
            try:
                self._db.add(stored)
            except DatabaseError as err:
                problematic_ids.append(stored.id)
                error_log += f"{err}\n"
                continue
            self._students[stored.id] = stored
            added.append(stored)

        if problematic_ids:
            header = (
                "okul no'suna sahip öğrenci(ler)de hata oluştu, bu öğrenci(ler) "
                "veri tabanına eklenemedi. Hata detayları: \n"
            )
            for student_id in problematic_ids:
                header = f"{student_id} {header}"
            raise DatabaseHelperError(header + error_log)
        return added

    def update(self, student: Student, old_id: int) -> Student:
        """Replace the student stored under old_id; empty fields keep their old values."""
        if old_id != student.id and self.id_exists(student.id):
            raise DatabaseHelperError(
                f"{student.id} okul no'suna sahip başka bir öğrenci var. "
                "Öğrenci bilgileri güncellenemedi!"
            )
        if not self.id_exists(old_id):
            raise DatabaseHelperError(
                f"{old_id} okul no'su sistemde kayıtlı değil. "
                "Öğrenci bilgileri güncellenemedi!"
            )

        old = self._students[old_id]
        updated = _formatted(
            Student(
                id=student.id,
                first_name=student.first_name or old.first_name,
                last_name=student.last_name or old.last_name,
                grade=student.grade or old.grade,
                section=student.section or old.section,
            )
        )
        try:
            self._db.update(updated, old_id)
        except DatabaseError as err:
            raise DatabaseHelperError(str(err)) from err
        if old_id != updated.id:
            del self._students[old_id]
        self._students[updated.id] = updated
        return updated

    def delete(self, student_id: int) -> None:
        """Remove the student with the given id."""
        if not self.id_exists(student_id):
            raise DatabaseHelperError(
                f"{student_id} okul no'su sistemde kayıtlı değil. "
                "Bu nedenle öğrenci silinemedi!"
            )
        try:
            self._db.delete(student_id)
        except DatabaseError as err:
            raise DatabaseHelperError(str(err)) from err
        del self._students[student_id]

    def id_exists(self, student_id: int) -> bool:
        return student_id in self._students

    def all_ids(self) -> list[int]:
        return list(self._students)

    def end_of_the_year(self) -> None:
        """Move every student up a grade and graduate the 12th grade."""
        try:
            self._db.end_of_the_year()
        except DatabaseError as err:
            raise DatabaseHelperError(str(err)) from err
        self._students = self._db.get_all_students()

    def class_names(self) -> list[str]:
        """Every class that has students, as "<grade>-<section>", in class order."""
        return sort_classnames({f"{s.grade}-{s.section}" for s in self._students.values()})

    def students_by_class(self, grade: int, section: str) -> list[Student]:
        return [s for s in self._students.values() if s.grade == grade and s.section == section]

    def students_by_class_name(self, class_name: str) -> list[Student]:
        grade, section = parse_class_name(class_name)
        return self.students_by_class(grade, section)

    def student_by_id(self, student_id: int) -> Student:
        try:
            return self._students[student_id]
        except KeyError:
            raise DatabaseHelperError(f"{student_id} okul no'suna sahip öğrenci bulunamadı!") from None

    def number_of_students(self) -> int:
        return len(self._students)

    def delete_entire_class(self, class_name: str) -> None:
        """Remove every student of the given class."""
        for student in self.students_by_class_name(class_name):
            self.delete(student.id)