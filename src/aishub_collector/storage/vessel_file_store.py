"""Append-only per-vessel position files."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import structlog

from .delimited import serialize_fields
from .filenames import sanitize_filename
from ..exceptions import PersistError
from ..models.config import CollectorSettings, DEFAULT_DELIMITER
from ..models.schemas import VesselRecord

logger = structlog.get_logger(__name__)

HEADER_COLUMNS = ("MMSI", "NAME", "LATITUDE", "LONGITUDE", "SPEED", "COURSE", "TIMESTAMP", "NOTES")
FILE_EXTENSION = ".csv"


@dataclass(frozen=True)
class AppendResult:
    """Outcome of writing one record."""

    vessel_id: int
    path: Path
    created: bool = False
    error: Optional[PersistError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class VesselFileStore:
    """
    Owns the vessel files below ``output_dir``.

    A file is created with the header on the first record for a vessel and only
    appended to afterwards. Existing content is never read or rewritten.
    """

    def __init__(self, output_dir: Path, delimiter: str = DEFAULT_DELIMITER):
        self.output_dir = Path(output_dir)
        self.delimiter = delimiter

    @classmethod
    def from_settings(cls, settings: CollectorSettings) -> "VesselFileStore":
        return cls(settings.output_directory, settings.delimiter)

    def path_for(self, vessel_id: int, vessel_name: str) -> Path:
        """Deterministic file path; the identifier keeps same-named vessels apart."""
        return self.output_dir / f"{sanitize_filename(vessel_name)}_{vessel_id}{FILE_EXTENSION}"

    def append(self, vessel_id: int, vessel_name: str, record_fields: Sequence[str]) -> AppendResult:
        """
        Append one row for a vessel, creating the file with its header if needed.

        Args:
            vessel_id: MMSI of the vessel
            vessel_name: Name as reported, sanitized for the path and name column
            record_fields: Columns following the name column, in header order

        Returns:
            AppendResult: Success, or the PersistError that prevented the write
        """
        path = self.path_for(vessel_id, vessel_name)
        row = serialize_fields(
            [str(vessel_id), sanitize_filename(vessel_name), *record_fields],
            self.delimiter,
        )

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            created = self._write_row(path, row)
        except OSError as e:
            logger.error("Failed to append vessel record",
                         vessel_id=vessel_id,
                         path=str(path),
                         error=str(e))
            return AppendResult(vessel_id, path, error=PersistError(f"Cannot write {path}: {e}"))

        if created:
            logger.info("Vessel file created", vessel_id=vessel_id, path=str(path))
        return AppendResult(vessel_id, path, created=created)

    def append_record(self, record: VesselRecord) -> AppendResult:
        return self.append(record.mmsi, record.name, record.position_fields())

    def header_line(self) -> str:
        return serialize_fields(HEADER_COLUMNS, self.delimiter)

    def _write_row(self, path: Path, row: str) -> bool:
        # Exclusive create never truncates a file left by an earlier run
        try:
            handle = open(path, "x", encoding="utf-8", newline="")
        except FileExistsError:
            with open(path, "a", encoding="utf-8", newline="") as f:
                f.write(row + "\n")
            return False

        try:
            with handle:
                handle.write(self.header_line() + "\n" + row + "\n")
        except OSError:
            path.unlink(missing_ok=True)
            raise
        return True
