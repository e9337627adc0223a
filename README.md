# oskar

A library for keeping a school's student records. It stores students in an
SQLite database, keeps class lists in order, imports whole classes from
spreadsheets, moves the data directory between machines as a zip archive,
and tracks whether the installation runs on a licence key or on a limited
number of free demo runs.

It has no dependencies outside the Python standard library.

User-facing messages are in Turkish, and names are formatted with Turkish
casing rules (dotted and dotless i are kept apart).

## What is inside

| Module | Purpose |
| --- | --- |
| `oskar.database` | `Database`, `Student`, `DatabaseError` and `database_file_path`: the SQLite store under a data directory |
| `oskar.databasehelper` | `DatabaseHelper` and `DatabaseHelperError`: cached, checked access to students and classes |
| `oskar.studenteditor` | `StudentEditor` and `ValidationError`: checks ids and names before creating or updating a student |
| `oskar.naming` | class-name parsing and sorting, Turkish upper/lower case, name formatting |
| `oskar.multiimport` | `MultiImport`, `SpreadsheetError` and `trim_cells`: reads the rows of an `.xls` or `.xlsx` file |
| `oskar.multiimporthelper` | `MultiImportHelper`, `parse_lines` and `ImportFormatError`: turns those rows into students |
| `oskar.datamigration` | `DataMigration`: export the data directory to a zip file and import it back |
| `oskar.cloudauth` | `CloudAuth`, `CloudAuthResponse`, `StatusCode` and `mac_address`: talks to the licence server |
| `oskar.localauth` | `LocalAuth`: the licence and demo state, kept in a JSON file |
| `oskar.authenticator` | `Authenticator` and `AuthError`: login and sign-up flow |
| `oskar.licensestatus` | `LicenseStatus`: `ACTIVATED`, `DEMO` or `END_OF_DEMO`, each with a caption, icon name and style |

Failures are reported by raising exceptions (`DatabaseError`,
`DatabaseHelperError`, `ValidationError`, `ImportFormatError`,
`SpreadsheetError`, `AuthError`) whose messages are ready to show to the user.

## Working with students

```python
from oskar.database import Database
from oskar.databasehelper import DatabaseHelper
from oskar.studenteditor import StudentEditor, ValidationError

with Database("/path/to/data") as database:
    helper = DatabaseHelper(database)
    editor = StudentEditor(helper)

    try:
        editor.create_student(1234, "ayşe nur", "yılmaz", 9, "A")
    except ValidationError as exc:
        print(exc)

    print(helper.class_names())          # ['9-A', ...], shortest names first
    for student in helper.students_by_class_name("9-A"):
        print(student)

    helper.end_of_the_year()             # 12th grades leave, everyone else moves up
```

`Database` creates `database.db` inside the given directory, creating the
directory if needed. First names are stored in title case and last names in
upper case, so `"ayşe nur"` / `"yılmaz"` becomes `Ayşe Nur` / `YILMAZ`.

`StudentEditor` refuses negative or already used ids and names that are
empty or longer than 40 characters after trimming. When updating through
`DatabaseHelper.update`, empty fields (and a grade of 0) keep their old
values.

## Class names

```python
from oskar.naming import parse_class_name, sort_classnames

parse_class_name("11-D")                    # (11, 'D')
sort_classnames(["10-A", "9-B", "9-A"])     # ['9-A', '9-B', '10-A']
```

A class name without a dash falls back to `(9, 'Z')`.

## Importing a class from a spreadsheet

```python
from oskar.multiimporthelper import MultiImportHelper, ImportFormatError

importer = MultiImportHelper("9-A.xlsx", helper.id_exists)
try:
    students = importer.parse()
except ImportFormatError as exc:
    print(exc)
else:
    helper.add_all(students)
```

Files ending in `.xls` are read as Excel 97–2003 workbooks; any other file is
read as `.xlsx`. Only the first worksheet is used.

The standard class-list layout (a header row of `S.No`, `Öğrenci No`, `Adı`,
`Soyadı`, `Cinsiyeti`, a section footer containing `Öğrenci Sayısı`, and a
file footer) is recognised; plain sheets whose rows start with a running
number, a student id, a first name and a last name work as well. A file may
hold only one class, and ids must be numbers that are unique both in the file
and, when a check is given, in the database. The students come back ordered
by id, without grade or section; set those before adding them.

## Moving data between machines

```python
from oskar.datamigration import DataMigration

migration = DataMigration("/path/to/data", "/tmp/oskar-data.zip")
archive = migration.export_zip()
migration.copy_zip_file_into("/media/usb/oskar-data.zip")

if migration.is_zip_file_valid("/media/usb/oskar-data.zip"):
    migration.import_zip("/media/usb/oskar-data.zip")
```

Without an export path the archive is written to the system temporary
directory as `ikoOSKAR-veriler.zip`. An archive is valid when it contains
`database.db`. Before importing, the current database is copied to
`eski-database.db` unless that backup already exists; entries that would land
outside the data directory are refused.

## Licences and demo runs

```python
from oskar.authenticator import Authenticator, AuthError
from oskar.cloudauth import CloudAuth, mac_address
from oskar.localauth import LocalAuth

cloud = CloudAuth("http://licence.example.com", mac_address(), 10)
local = LocalAuth("/path/to/data/auth.json")
auth = Authenticator(cloud, local)

try:
    print(auth.login())
except AuthError as exc:
    print(exc)

print(auth.license_status())
```

`signup_licensed(serial)` activates a key and stores it, `signup_demo()`
starts the free trial, and `decrease_demo_remainings()` uses up one demo run
and returns what is left. A fresh installation has three demo runs. When the
server is reachable the demo count is kept in step with it; when it is not,
the local count decides.

## What this package does not do

The database file contains a `halls` table, but the package offers no
operations on exam halls, does not generate seating plans and does not write
class lists or hall layouts to spreadsheets. It has no command-line or
graphical interface; it is a library to be called from other code.