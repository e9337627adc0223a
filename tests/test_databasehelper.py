import pytest

from oskar.database import Database, Student
from oskar.databasehelper import DatabaseHelper, DatabaseHelperError
from oskar.naming import format_first_name, format_last_name


@pytest.fixture
def database(tmp_path):
    db = Database(tmp_path)
    yield db
    db.close()


@pytest.fixture
def helper(database):
    return DatabaseHelper(database)


def test_add_formats_names_and_caches(helper):
    stored = helper.add(Student(5, "  ali   veli ", "yılmaz", 9, "A"))
    assert stored.first_name == format_first_name("  ali   veli ")
    assert stored.last_name == format_last_name("yılmaz")
    assert helper.student_by_id(5) == stored
    assert helper.id_exists(5)


def test_add_persists_to_database(tmp_path):
    with Database(tmp_path) as db:
        DatabaseHelper(db).add(Student(7, "ayşe", "kaya", 10, "B"))
    with Database(tmp_path) as db:
        reloaded = DatabaseHelper(db)
        assert reloaded.all_ids() == [7]
        assert reloaded.student_by_id(7).last_name == format_last_name("kaya")


def test_add_duplicate_id_raises(helper):
    helper.add(Student(1, "a", "b", 9, "A"))
    with pytest.raises(DatabaseHelperError, match="Bu nedenle yeni öğrenci eklenemedi!"):
        helper.add(Student(1, "c", "d", 9, "A"))
    assert helper.number_of_students() == 1


def test_add_all_adds_every_student(helper):
    students = [Student(i, "ad", "soyad", 11, "C") for i in (3, 1, 2)]
    added = helper.add_all(students)
    assert len(added) == 3
    assert sorted(helper.all_ids()) == [1, 2, 3]


def test_add_all_reports_failures_and_keeps_the_rest(helper):
    students = [Student(4, "a", "b", 9, "A"), Student(4, "c", "d", 9, "A"), Student(6, "e", "f", 9, "A")]
    with pytest.raises(DatabaseHelperError) as info:
        helper.add_all(students)
    assert str(info.value).startswith("4 okul no'suna sahip öğrenci(ler)de hata oluştu")
    assert sorted(helper.all_ids()) == [4, 6]


def test_update_changes_id(helper):
    helper.add(Student(1, "ali", "kaya", 9, "A"))
    updated = helper.update(Student(2, "veli", "kaya", 9, "A"), 1)
    assert helper.id_exists(2)
    assert not helper.id_exists(1)
    assert updated.first_name == format_first_name("veli")


def test_update_keeps_empty_fields(helper):
    helper.add(Student(1, "ali", "kaya", 9, "A"))
    updated = helper.update(Student(1, "", "", 0, ""), 1)
    assert updated.first_name == helper.student_by_id(1).first_name
    assert (updated.grade, updated.section) == (9, "A")
    assert updated.last_name == format_last_name("kaya")


def test_update_to_taken_id_raises(helper):
    helper.add(Student(1, "a", "b", 9, "A"))
    helper.add(Student(2, "c", "d", 9, "A"))
    with pytest.raises(DatabaseHelperError, match="başka bir öğrenci var"):
        helper.update(Student(2, "x", "y", 9, "A"), 1)


def test_update_unknown_id_raises(helper):
    with pytest.raises(DatabaseHelperError, match="sistemde kayıtlı değil"):
        helper.update(Student(9, "x", "y", 9, "A"), 9)


def test_delete(helper):
    helper.add(Student(1, "a", "b", 9, "A"))
    helper.delete(1)
    assert helper.number_of_students() == 0
    with pytest.raises(DatabaseHelperError, match="Bu nedenle öğrenci silinemedi!"):
        helper.delete(1)


def test_student_by_id_missing(helper):
    with pytest.raises(DatabaseHelperError, match="öğrenci bulunamadı"):
        helper.student_by_id(42)


def test_class_names_sorted_by_length_then_text(helper):
    helper.add(Student(1, "a", "b", 10, "A"))
    helper.add(Student(2, "a", "b", 9, "B"))
    helper.add(Student(3, "a", "b", 9, "A"))
    helper.add(Student(4, "a", "b", 9, "A"))
    assert helper.class_names() == ["9-A", "9-B", "10-A"]


def test_students_by_class_name(helper):
    helper.add(Student(1, "a", "b", 10, "A"))
    helper.add(Student(2, "a", "b", 9, "A"))
    assert [s.id for s in helper.students_by_class_name("10-A")] == [1]
    assert [s.id for s in helper.students_by_class(9, "A")] == [2]


def test_end_of_the_year(helper):
    helper.add(Student(1, "a", "b", 12, "A"))
    helper.add(Student(2, "a", "b", 9, "A"))
    helper.add(Student(3, "a", "b", 11, "B"))
    helper.end_of_the_year()
    assert sorted(helper.all_ids()) == [2, 3]
    assert helper.student_by_id(2).grade == 10
    assert helper.student_by_id(3).grade == 12


def test_delete_entire_class(helper):
    helper.add(Student(1, "a", "b", 9, "A"))
    helper.add(Student(2, "a", "b", 9, "A"))
    helper.add(Student(3, "a", "b", 9, "B"))
    helper.delete_entire_class("9-A")
    assert helper.all_ids() == [3]