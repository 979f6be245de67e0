"""Vessel watch list read from a ships CSV file."""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import structlog

from ..exceptions import SettingsLoadError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class WatchList:
    """IMO and MMSI numbers to restrict the AISHub query to."""

    imo: List[int] = field(default_factory=list)
    mmsi: List[int] = field(default_factory=list)


def _parse_identifier(raw: str) -> Optional[int]:
    value = raw.strip()
    if not value:
        return None
    number = int(value)
    if number <= 0:
        raise ValueError(f"identifier must be positive, got {number}")
    return number


def load_watch_list(ships_file: Path) -> WatchList:
    """
    Read a ships file with a header row, IMO in the first column and MMSI in
    the second.

    A row with an IMO number contributes only its IMO; a row with just an MMSI
    contributes the MMSI. Rows with neither are skipped, malformed rows are
    logged and skipped.

    Raises:
        SettingsLoadError: If the file cannot be read.
    """
    imo: List[int] = []
    mmsi: List[int] = []

    try:
        with open(ships_file, "r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for line_number, row in enumerate(reader, start=2):
                padded = (row + ["", ""])[:2]
                try:
                    imo_number = _parse_identifier(padded[0])
                    mmsi_number = _parse_identifier(padded[1])
                except ValueError as e:
                    logger.warning("Skipping malformed ships file row",
                                   ships_file=str(ships_file),
                                   line=line_number,
                                   error=str(e))
                    continue

                if imo_number is not None:
                    imo.append(imo_number)
                elif mmsi_number is not None:
                    mmsi.append(mmsi_number)
    except (OSError, csv.Error) as e:
        raise SettingsLoadError(f"Cannot read ships file {ships_file}: {e}") from e
    except UnicodeDecodeError as e:
        raise SettingsLoadError(f"Ships file {ships_file} is not valid UTF-8: {e}") from e

    logger.debug("Watch list loaded", ships_file=str(ships_file), imo_count=len(imo), mmsi_count=len(mmsi))
    return WatchList(imo=imo, mmsi=mmsi)
