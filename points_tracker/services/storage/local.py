"""
Local Storage Implementations

InMemoryLedgerStorage keeps serialized records in a dict, so a round trip
goes through the same JSON encoding as the file backend.

JsonFileLedgerStorage keeps one JSON file per month in a directory,
named after the record key `points-<period key>`.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from points_tracker.models.entry import LedgerState
from points_tracker.services.storage.interface import (
    LedgerStorageInterface,
    StorageConnectionError,
    StorageError,
    parse_record,
)


logger = structlog.get_logger(__name__)


def record_key(period_key: str) -> str:
    """Storage key for a period, e.g. 'points-October 2026'."""
    return f"points-{period_key}"


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Process-local storage; contents are lost when the process exits."""

    def __init__(self):
        self._records: dict[str, str] = {}

    def load(self, period_key: str) -> Optional[LedgerState]:
        return parse_record(period_key, self._records.get(record_key(period_key)))

    def save(self, period_key: str, state: LedgerState) -> None:
        self._records[record_key(period_key)] = state.to_record_json()

    def put_raw(self, period_key: str, raw: str) -> None:
        """Store a raw record as-is (used to seed or inspect storage)."""
        self._records[record_key(period_key)] = raw

    def get_raw(self, period_key: str) -> Optional[str]:
        return self._records.get(record_key(period_key))


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    One JSON file per period in a data directory.

    Writes go to a temporary file in the same directory which then
    replaces the target, so a crash mid-write never leaves a torn record.
    A write blocked by a permission error is retried a few times.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, period_key: str) -> Path:
        # Period keys come from strftime and may contain separators
        safe = "".join(
            ch if ch.isalnum() or ch in " -_." else "_"
            for ch in record_key(period_key)
        )
        return self._directory / f"{safe}.json"

    def load(self, period_key: str) -> Optional[LedgerState]:
        path = self.path_for(period_key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning("malformed_ledger_record", period_key=period_key, error=str(e))
            return None
        except OSError as e:
            raise StorageConnectionError(f"Failed to read ledger {path}: {e}") from e
        return parse_record(period_key, raw)

    def save(self, period_key: str, state: LedgerState) -> None:
        path = self.path_for(period_key)
        try:
            self._write(path, state.to_record_json())
        except OSError as e:
            raise StorageError(f"Failed to save ledger {path}: {e}") from e

    @retry(
        retry=retry_if_exception_type(PermissionError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.05, max=0.5),
        reraise=True,
    )
    def _write(self, path: Path, payload: str) -> None:
        # A reader or virus scanner holding the target can briefly block os.replace
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=".points-", suffix=".tmp", dir=self._directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
