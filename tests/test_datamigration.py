import zipfile

import pytest

from oskar.datamigration import BACKUP_FILE, DATABASE_FILE, DataMigration


@pytest.fixture
def source_root(tmp_path):
    root = tmp_path / "source"
    (root / "2024" / "exam").mkdir(parents=True)
    (root / DATABASE_FILE).write_bytes(b"new database")
    (root / "2024" / "exam" / "list.xlsx").write_bytes(b"sheet data")
    return root


def test_export_contains_all_files_with_relative_names(source_root, tmp_path):
    migration = DataMigration(source_root, tmp_path / "out" / "export.zip")
    path = migration.export_zip()
    with zipfile.ZipFile(path) as archive:
        assert sorted(archive.namelist()) == ["2024/exam/list.xlsx", DATABASE_FILE]
        assert archive.read(DATABASE_FILE) == b"new database"


def test_export_missing_root_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DataMigration(tmp_path / "missing", tmp_path / "x.zip").export_zip()


def test_round_trip_and_backup(source_root, tmp_path):
    archive = DataMigration(source_root, tmp_path / "export.zip").export_zip()
    target = tmp_path / "target"
    target.mkdir()
    (target / DATABASE_FILE).write_bytes(b"old database")

    DataMigration(target, tmp_path / "unused.zip").import_zip(archive)

    assert (target / DATABASE_FILE).read_bytes() == b"new database"
    assert (target / BACKUP_FILE).read_bytes() == b"old database"
    assert (target / "2024" / "exam" / "list.xlsx").read_bytes() == b"sheet data"


def test_import_rejects_bad_archive(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_bytes(b"not a zip")
    with pytest.raises(zipfile.BadZipFile):
        DataMigration(tmp_path / "root").import_zip(bogus)


def test_import_rejects_escaping_entries(tmp_path):
    evil = tmp_path / "evil.zip"
    with zipfile.ZipFile(evil, "w") as archive:
        archive.writestr("../outside.txt", b"x")
    root = tmp_path / "root"
    root.mkdir()
    with pytest.raises(ValueError):
        DataMigration(root).import_zip(evil)
    assert not (tmp_path / "outside.txt").exists()


def test_is_zip_file_valid(source_root, tmp_path):
    migration = DataMigration(source_root, tmp_path / "export.zip")
    assert migration.is_zip_file_valid(migration.export_zip()) is True

    other = tmp_path / "other.zip"
    with zipfile.ZipFile(other, "w") as archive:
        archive.writestr("notes.txt", b"x")
    assert migration.is_zip_file_valid(other) is False
    assert migration.is_zip_file_valid(tmp_path / "missing.zip") is False


def test_copy_zip_file_into_replaces_existing(source_root, tmp_path):
    migration = DataMigration(source_root, tmp_path / "export.zip")
    migration.export_zip()
    destination = tmp_path / "copy.zip"
    destination.write_bytes(b"stale")
    result = migration.copy_zip_file_into(destination)
    assert result == destination
    assert destination.read_bytes() == (tmp_path / "export.zip").read_bytes()