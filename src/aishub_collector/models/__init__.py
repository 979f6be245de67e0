"""Data models and configuration classes."""

from .config import CollectorSettings
from .schemas import VesselRecord
from .settings_manager import SettingsManager

__all__ = [
    "CollectorSettings",
    "VesselRecord",
    "SettingsManager",
]
