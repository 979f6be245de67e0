"""On-disk storage of vessel position history."""

from .delimited import parse_line, serialize_fields
from .filenames import sanitize_filename
from .vessel_file_store import AppendResult, VesselFileStore

__all__ = [
    "parse_line",
    "serialize_fields",
    "sanitize_filename",
    "AppendResult",
    "VesselFileStore",
]
