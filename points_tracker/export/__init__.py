"""CSV export package."""

from points_tracker.export.csv_exporter import (
    CSV_HEADER,
    MIME_TYPE,
    CSVExporter,
    export_filename,
)

__all__ = ["CSV_HEADER", "MIME_TYPE", "CSVExporter", "export_filename"]
