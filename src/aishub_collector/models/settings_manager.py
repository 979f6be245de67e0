"""Ownership of the process-wide settings with last known good fallback."""

import json
import os
from pathlib import Path
from typing import Any, List, Optional, Tuple

import structlog
import yaml

from .config import CollectorSettings, read_settings_document
from ..exceptions import FatalStartupError, SettingsLoadError, SettingsReloadError
from ..ingestion.watch_list import load_watch_list

logger = structlog.get_logger(__name__)


def _merge_identifiers(configured: List[int], listed: List[int]) -> List[int]:
    merged: List[int] = []
    for number in [*configured, *listed]:
        if number not in merged:
            merged.append(number)
    return merged


class SettingsManager:
    """
    Loads settings from the configuration file and keeps the last valid copy.

    The first load must succeed, otherwise FatalStartupError is raised. A later
    reload that fails is logged and the previously held settings are returned
    unchanged.
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        self._current: Optional[CollectorSettings] = None
        self.last_reload_error: Optional[SettingsReloadError] = None
        # Backoff that could not be written to the file: (interval in the file, raised interval)
        self._pending_backoff: Optional[Tuple[int, int]] = None

    @property
    def current(self) -> CollectorSettings:
        """The settings in effect."""
        if self._current is None:
            raise SettingsLoadError("Settings have not been loaded yet")
        return self._current

    def load(self) -> CollectorSettings:
        """
        Load the configuration file and replace the current settings when valid.

        Returns:
            CollectorSettings: The freshly loaded settings, or the last known
            good settings if the reload failed

        Raises:
            FatalStartupError: If no settings have ever been loaded and this
                load fails
        """
        try:
            settings = self._read_settings()
        except SettingsLoadError as e:
            if self._current is None:
                logger.error("Initial settings load failed",
                             config_path=str(self.config_path),
                             error=str(e))
                raise FatalStartupError(
                    f"Cannot start without valid settings from {self.config_path}: {e}"
                ) from e

            self.last_reload_error = SettingsReloadError(str(e))
            logger.warning("Settings reload failed, keeping last known good settings",
                           config_path=str(self.config_path),
                           error=str(e))
            return self._current

        settings = self._apply_pending_backoff(settings)

        if self._current is None:
            logger.info("Settings loaded", config_path=str(self.config_path))
        elif settings != self._current:
            changed = [
                name for name in CollectorSettings.model_fields
                if getattr(settings, name) != getattr(self._current, name)
            ]
            logger.info("Settings changed", config_path=str(self.config_path), changed_fields=changed)

        self._current = settings
        self.last_reload_error = None
        return settings

    def increase_polling_interval(self, increment_seconds: Optional[int] = None) -> CollectorSettings:
        """
        Raise the polling interval and write it back to the configuration file.

        A failure to write the file is logged; the in-memory interval is raised
        either way and kept across reloads until the file is edited.
        """
        current = self.current
        increment = increment_seconds or current.rate_limit_increment_seconds
        new_interval = current.polling_interval_seconds + increment

        try:
            self._persist_field("polling_interval_seconds", new_interval)
        except (SettingsLoadError, OSError, yaml.YAMLError) as e:
            logger.error("Failed to persist increased polling interval",
                         config_path=str(self.config_path),
                         polling_interval_seconds=new_interval,
                         error=str(e))
            file_interval = (self._pending_backoff[0] if self._pending_backoff
                             else current.polling_interval_seconds)
            self._pending_backoff = (file_interval, new_interval)
        else:
            self._pending_backoff = None

        self._current = current.model_copy(update={"polling_interval_seconds": new_interval})
        logger.warning("Polling interval increased",
                       previous_seconds=current.polling_interval_seconds,
                       polling_interval_seconds=new_interval)
        return self._current

    def _apply_pending_backoff(self, settings: CollectorSettings) -> CollectorSettings:
        if self._pending_backoff is None:
            return settings

        file_interval, raised_interval = self._pending_backoff
        if settings.polling_interval_seconds != file_interval:
            # The file was edited since the backoff, its value wins
            self._pending_backoff = None
            return settings
        return settings.model_copy(update={"polling_interval_seconds": raised_interval})

    def _read_settings(self) -> CollectorSettings:
        settings = CollectorSettings.from_file(self.config_path)
        if settings.ships_file is None:
            return settings

        ships_file = settings.ships_file
        if not ships_file.is_absolute():
            ships_file = self.config_path.parent / ships_file

        watch_list = load_watch_list(ships_file)
        return settings.model_copy(update={
            "imo": _merge_identifiers(settings.imo, watch_list.imo),
            "mmsi": _merge_identifiers(settings.mmsi, watch_list.mmsi),
        })

    def _persist_field(self, key: str, value: Any) -> None:
        document = read_settings_document(self.config_path)
        document[key] = value

        if self.config_path.suffix.lower() == ".json":
            text = json.dumps(document, indent=2) + "\n"
        else:
            text = yaml.safe_dump(document, sort_keys=False)

        tmp_path = self.config_path.with_name(self.config_path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.config_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
