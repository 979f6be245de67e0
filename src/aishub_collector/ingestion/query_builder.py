"""AISHub request URL construction."""

import re
from typing import List, Sequence, Tuple
from urllib.parse import quote, urlencode

from ..models.config import CollectorSettings
from ..utils.formatting import format_number

_USERNAME_PATTERN = re.compile(r"(username=)[^&]*")


def _comma_separated(numbers: Sequence[int]) -> str:
    return ",".join(str(number) for number in numbers)


def query_parameters(settings: CollectorSettings) -> List[Tuple[str, str]]:
    """
    Map settings onto AISHub query parameters in a fixed order.

    ``username``, ``format``, ``output`` and ``compress`` are always sent; the
    area, vessel and age filters only when configured. See
    https://www.aishub.net/api for the parameter reference.
    """
    params = [
        ("username", settings.api_credential),
        ("format", str(settings.data_value_format)),
        ("output", settings.output_format),
        ("compress", str(settings.compression)),
    ]

    optional = (
        ("latmin", settings.lat_min),
        ("latmax", settings.lat_max),
        ("lonmin", settings.lon_min),
        ("lonmax", settings.lon_max),
    )
    for name, value in optional:
        if value is not None:
            params.append((name, format_number(value)))

    if settings.mmsi:
        params.append(("mmsi", _comma_separated(settings.mmsi)))
    if settings.imo:
        params.append(("imo", _comma_separated(settings.imo)))
    if settings.age_max_minutes is not None:
        params.append(("interval", str(settings.age_max_minutes)))

    return params


def build_query(settings: CollectorSettings) -> str:
    """Build the full request URL. Equal settings always give the same string."""
    query = urlencode(query_parameters(settings), safe=",", quote_via=quote)
    return f"{settings.base_url}?{query}"


def redact_query(query: str) -> str:
    """Mask the credential so the URL can be logged."""
    return _USERNAME_PATTERN.sub(r"\1***", query)
