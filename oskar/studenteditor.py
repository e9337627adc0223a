"""Validation of student data entered by the user."""

from __future__ import annotations

from oskar.database import Student
from oskar.databasehelper import DatabaseHelper

MAX_NAME_LENGTH = 40


class ValidationError(Exception):
    """The entered student data is not acceptable; the message is meant for the user."""


class StudentEditor:
    """Checks entered student data before handing it to the database helper."""

    def __init__(self, helper: DatabaseHelper) -> None:
        self._helper = helper

    def _check_id(self, student_id: int) -> None:
        if student_id < 0:
            raise ValidationError("Okul no negatif bir sayı olamaz.")
        if self._helper.id_exists(student_id):
            raise ValidationError(
                "Bu okul no'ya sahip başka bir öğrenci var. Lütfen başka bir okul no kullanın."
            )

    @staticmethod
    def _check_name(name: str) -> str:
        name = name.strip()
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError("Ad veya soyad 40 harften daha uzun olamaz.")
        if len(name) < 1:
            raise ValidationError("Ad veya soyad 1 harften daha kısa olamaz.")
        return name

    def create_student(
        self, student_id: int, first_name: str, last_name: str, grade: int, section: str
    ) -> Student:
        """Validate and store a new student; returns the stored record."""
        self._check_id(student_id)
        first_name = self._check_name(first_name)
        last_name = self._check_name(last_name)
        return self._helper.add(Student(student_id, first_name, last_name, grade, section))

    def update_student(
        self,
        original: Student,
        student_id: int,
        first_name: str,
        last_name: str,
        grade: int,
        section: str,
    ) -> Student:
        """Validate and apply new data for an existing student; returns the stored record."""
        if original.id != student_id:
            self._check_id(student_id)
        first_name = self._check_name(first_name)
        last_name = self._check_name(last_name)
        return self._helper.update(
            Student(student_id, first_name, last_name, grade, section), original.id
        )