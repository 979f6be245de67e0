"""AISHub request construction, transport and response decoding."""

from .aishub_client import AISHubClient
from .query_builder import build_query, redact_query
from .response_parser import parse_response
from .watch_list import WatchList, load_watch_list

__all__ = [
    "AISHubClient",
    "build_query",
    "redact_query",
    "parse_response",
    "WatchList",
    "load_watch_list",
]
