"""Moving the application data between machines as a zip archive."""

from __future__ import annotations

import os
import shutil
import tempfile
import zipfile
from pathlib import Path

DATABASE_FILE = "database.db"
BACKUP_FILE = "eski-database.db"
EXPORT_FILE_NAME = "ikoOSKAR-veriler.zip"


class DataMigration:
    """Exports the data directory to a zip file and imports it back."""

    def __init__(
        self,
        root: str | os.PathLike[str],
        export_path: str | os.PathLike[str] | None = None,
    ) -> None:
        self.root = Path(root)
        self.export_path = (
            Path(export_path) if export_path is not None else Path(tempfile.gettempdir()) / EXPORT_FILE_NAME
        )

    def _backup_database(self) -> None:
        database = self.root / DATABASE_FILE
        backup = self.root / BACKUP_FILE
        # An existing backup is never overwritten.
        if database.is_file() and not backup.exists():
            shutil.copyfile(database, backup)

    def _target_for(self, name: str) -> Path:
        root = self.root.resolve()
        target = (root / name).resolve()
        if not target.is_relative_to(root):
            raise ValueError(f"archive entry escapes the data directory: {name}")
        return target

    def import_zip(self, zip_path: str | os.PathLike[str]) -> None:
        """Back up the database, then extract the archive over the data directory.

        Raises zipfile.BadZipFile or OSError if the archive cannot be read.
        """
        self._backup_database()
        with zipfile.ZipFile(zip_path) as archive:
            for info in archive.infolist():
                target = self._target_for(info.filename)
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as source, target.open("wb") as destination:
                    shutil.copyfileobj(source, destination)

    def export_zip(self) -> Path:
        """Write every file under the data directory into the export archive and return its path."""
        if not self.root.is_dir():
            raise FileNotFoundError(f"data directory does not exist: {self.root}")
        export = self.export_path.resolve()
        files = sorted(
            path for path in self.root.rglob("*") if path.is_file() and path.resolve() != export
        )
        self.export_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(self.export_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for path in files:
                archive.write(path, path.relative_to(self.root).as_posix())
        return self.export_path

    def is_zip_file_valid(self, zip_path: str | os.PathLike[str]) -> bool:
        """Whether the file is a readable zip archive holding a database file."""
        try:
            with zipfile.ZipFile(zip_path) as archive:
                return DATABASE_FILE in archive.namelist()
        except (zipfile.BadZipFile, OSError):
            return False

    def copy_zip_file_into(self, new_path: str | os.PathLike[str]) -> Path:
        """Copy the exported archive to a new location, replacing any file there."""
        destination = Path(new_path)
        destination.unlink(missing_ok=True)
        shutil.copyfile(self.export_path, destination)
        return destination