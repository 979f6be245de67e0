"""Delimiter separated lines with RFC 4180 style quoting.

A field is wrapped in double quotes when it contains the delimiter, a double
quote, ``\\r`` or ``\\n``; embedded double quotes are doubled. Every other field
is written verbatim, so plain numeric rows stay unquoted.
"""

import csv
import io
from typing import List, Sequence

from ..models.config import DEFAULT_DELIMITER

# A terminator holding both characters makes the writer quote fields containing either
_LINE_TERMINATOR = "\r\n"


def serialize_fields(fields: Sequence[str], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Join ``fields`` into one line without a trailing delimiter or newline."""
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        doublequote=True,
        lineterminator=_LINE_TERMINATOR,
    )
    writer.writerow(fields)
    return buffer.getvalue()[:-len(_LINE_TERMINATOR)]


def parse_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """Split a line written by :func:`serialize_fields` back into its fields."""
    reader = csv.reader(
        io.StringIO(line, newline=""),
        delimiter=delimiter,
        quotechar='"',
        doublequote=True,
        strict=True,
    )
    return next(reader, [])
