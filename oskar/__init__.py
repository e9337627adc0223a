"""Student records, class lists, spreadsheet imports, data migration and licensing for school exam planning."""

__version__ = "0.1.0"