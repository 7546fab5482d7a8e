from .csv_io import CsvImportResult, CsvRowError, csv_template, export_entries_csv, parse_entries_csv
from .storage import PriceEntrySQLiteRepository

__all__ = [
    "CsvImportResult",
    "CsvRowError",
    "PriceEntrySQLiteRepository",
    "csv_template",
    "export_entries_csv",
    "parse_entries_csv",
]
