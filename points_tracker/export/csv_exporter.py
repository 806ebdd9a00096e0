"""
CSV Export

Renders a ledger as `Date,Description,Points,Total`, one row per entry in
ledger order. `Total` is a running sum starting from the base points and
is computed here from the entries, not taken from the store's balance.
"""

import csv
import io
from typing import Iterable

from points_tracker.models.catalog import BASE_POINTS
from points_tracker.models.entry import Entry


CSV_HEADER = ("Date", "Description", "Points", "Total")
MIME_TYPE = "text/csv"


def export_filename(period_key: str) -> str:
    """Download name for a period's export, e.g. 'points-October 2026.csv'."""
    return f"points-{period_key}.csv"


class CSVExporter:
    """Ledger to CSV text."""

    def __init__(self, delimiter: str = ","):
        self._delimiter = delimiter

    def rows(self, entries: Iterable[Entry]) -> list[tuple]:
        """Data rows with running totals, without the header."""
        total = BASE_POINTS
        rows = []
        for entry in entries:
            total += entry.delta
            rows.append((entry.date, entry.description, entry.delta, total))
        return rows

    def render(self, entries: Iterable[Entry]) -> str:
        # QUOTE_MINIMAL quotes any field holding the delimiter, a quote or a newline
        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=self._delimiter,
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        writer.writerow(CSV_HEADER)
        writer.writerows(self.rows(entries))
        return buffer.getvalue()
