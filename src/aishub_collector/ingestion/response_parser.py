"""Decoding of AISHub responses into vessel records."""

import bz2
import csv
import gzip
import io
import json
import zipfile
from typing import Any, Iterable, List, Mapping, Optional

import structlog

from ..exceptions import FetchError, ParseError
from ..models.config import CollectorSettings
from ..models.schemas import VesselRecord

logger = structlog.get_logger(__name__)

# AIS format scaling, see https://www.aishub.net/api
AIS_POSITION_SCALE = 600000.0
AIS_MOTION_SCALE = 10.0

# "Not available" markers in human readable units
SOG_NOT_AVAILABLE = 102.4
COG_NOT_AVAILABLE = 360.0

REQUIRED_COLUMNS = ("MMSI", "LATITUDE", "LONGITUDE")
TIMESTAMP_COLUMNS = ("TIME", "TSTAMP")


def decompress_body(body: bytes, compression: int) -> bytes:
    """Undo the ``compress`` option AISHub applied to the payload."""
    try:
        if compression == 0:
            return body
        if compression == 1:
            with zipfile.ZipFile(io.BytesIO(body)) as archive:
                names = archive.namelist()
                if not names:
                    raise ParseError("ZIP response contains no files")
                return archive.read(names[0])
        if compression == 2:
            return gzip.decompress(body)
        if compression == 3:
            return bz2.decompress(body)
    except (zipfile.BadZipFile, OSError, EOFError, ValueError) as e:
        raise ParseError(f"Cannot decompress response (compress={compression}): {e}") from e
    raise ParseError(f"Unsupported compression mode {compression}")


def _first_present(row: Mapping[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = row.get(name)
        if value not in (None, ""):
            return value
    raise KeyError("/".join(names))


def _number(row: Mapping[str, Any], name: str, default: Optional[float] = None) -> float:
    value = row.get(name)
    if value in (None, ""):
        if default is None:
            raise KeyError(name)
        return default
    return float(value)


def record_from_row(row: Mapping[str, Any], ais_units: bool) -> VesselRecord:
    """
    Convert one AISHub row into a VesselRecord.

    Rows in AIS units (``format=0``) are scaled to degrees and knots so every
    vessel file uses the same units.
    """
    row = {str(key).strip().upper(): value for key, value in row.items() if key is not None}

    latitude = _number(row, "LATITUDE")
    longitude = _number(row, "LONGITUDE")
    if ais_units:
        speed = _number(row, "SOG", SOG_NOT_AVAILABLE * AIS_MOTION_SCALE) / AIS_MOTION_SCALE
        course = _number(row, "COG", COG_NOT_AVAILABLE * AIS_MOTION_SCALE) / AIS_MOTION_SCALE
        latitude /= AIS_POSITION_SCALE
        longitude /= AIS_POSITION_SCALE
    else:
        speed = _number(row, "SOG", SOG_NOT_AVAILABLE)
        course = _number(row, "COG", COG_NOT_AVAILABLE)

    return VesselRecord(
        mmsi=int(float(row["MMSI"])),
        name=str(row.get("NAME") or "").strip(),
        latitude=latitude,
        longitude=longitude,
        speed=speed,
        course=course,
        timestamp=str(_first_present(row, TIMESTAMP_COLUMNS)).strip(),
    )


def _rows_from_csv(text: str) -> List[Mapping[str, Any]]:
    reader = csv.DictReader(io.StringIO(text))
    try:
        if reader.fieldnames is None:
            raise ParseError("CSV response is empty")
        columns = {name.strip().upper() for name in reader.fieldnames}
        missing = [name for name in REQUIRED_COLUMNS if name not in columns]
        if missing:
            raise ParseError(f"CSV response lacks columns {missing}")
        return list(reader)
    except csv.Error as e:
        raise ParseError(f"Malformed CSV response: {e}") from e


def _rows_from_json(text: str) -> List[Mapping[str, Any]]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed JSON response: {e}") from e

    if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
        raise ParseError("JSON response does not start with a status object")

    status = payload[0]
    if status.get("ERROR"):
        raise FetchError(f"AISHub reported an error: {status.get('ERROR_MESSAGE', 'unknown error')}")

    if len(payload) < 2:
        return []
    rows = payload[1]
    if not isinstance(rows, list):
        raise ParseError("JSON response records are not a list")
    return [row for row in rows if isinstance(row, dict)]


def parse_response(body: bytes, settings: CollectorSettings) -> List[VesselRecord]:
    """
    Decode a raw AISHub body according to the request settings.

    Rows that cannot be converted are logged and skipped; a payload that cannot
    be decoded at all raises ParseError.

    Raises:
        ParseError: If the payload is malformed
        FetchError: If the payload is an AISHub error report
    """
    raw = decompress_body(body, settings.compression)
    text = raw.decode("utf-8", errors="replace")

    if settings.output_format == "json":
        rows = _rows_from_json(text)
    else:
        rows = _rows_from_csv(text)

    ais_units = settings.data_value_format == 0
    records: List[VesselRecord] = []
    for index, row in enumerate(rows):
        try:
            records.append(record_from_row(row, ais_units))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Skipping unreadable AISHub row",
                           row_index=index,
                           mmsi=row.get("MMSI"),
                           error=str(e))

    logger.debug("AISHub response parsed", rows=len(rows), records=len(records))
    return records
