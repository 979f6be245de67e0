"""
AISHub Collector

Polls the AISHub vessel tracking service and keeps one append-only,
delimiter separated history file per vessel.

Features:
- Settings reloaded every cycle, falling back to the last valid copy
- Deterministic AISHub query construction, including a ships watch list
- Collision-safe file names built from sanitized vessel name and MMSI
- Failures in fetching, parsing or writing never stop the loop
"""

__version__ = "1.0.0"

from .models.config import CollectorSettings
from .models.settings_manager import SettingsManager
from .utils.logging import setup_logging

__all__ = [
    "CollectorSettings",
    "SettingsManager",
    "setup_logging",
]
