"""Configuration model for the AISHub collector."""

from typing import List, Literal, Optional
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import SettingsLoadError

AISHUB_API_URL = "https://data.aishub.net/ws.php"
DEFAULT_DELIMITER = ";"

_FORBIDDEN_DELIMITERS = {'"', "\r", "\n"}


class CollectorSettings(BaseModel):
    """Immutable snapshot of everything one polling cycle needs.

    Fields that AISHub accepts map one to one onto query parameters; the
    remaining fields drive the loop and the output files.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # AISHub request parameters
    api_credential: str = Field(..., min_length=1, description="AISHub username")
    base_url: str = AISHUB_API_URL
    data_value_format: Literal[0, 1] = Field(1, description="0 = AIS units, 1 = human readable")
    output_format: Literal["csv", "json"] = "csv"
    compression: Literal[0, 1, 2, 3] = Field(0, description="0 none, 1 zip, 2 gzip, 3 bzip2")
    lat_min: Optional[float] = Field(None, ge=-90, le=90)
    lat_max: Optional[float] = Field(None, ge=-90, le=90)
    lon_min: Optional[float] = Field(None, ge=-180, le=180)
    lon_max: Optional[float] = Field(None, ge=-180, le=180)
    mmsi: List[int] = Field(default_factory=list)
    imo: List[int] = Field(default_factory=list)
    age_max_minutes: Optional[int] = Field(None, gt=0, description="Maximum age of returned positions")
    ships_file: Optional[Path] = Field(None, description="CSV watch list with IMO and MMSI columns")

    # Client-side filtering
    speed_min: Optional[float] = Field(None, ge=0)
    speed_max: Optional[float] = Field(None, ge=0)

    # Loop and output settings
    polling_interval_seconds: int = Field(..., gt=0, description="Seconds between polls")
    rate_limit_increment_seconds: int = Field(60, gt=0)
    request_timeout_seconds: float = Field(30.0, gt=0)
    output_directory: Path = Path("data")
    delimiter: str = DEFAULT_DELIMITER
    skip_repeated_timestamps: bool = False

    @field_validator("mmsi", "imo")
    @classmethod
    def _positive_identifiers(cls, values: List[int]) -> List[int]:
        for value in values:
            if value <= 0:
                raise ValueError(f"vessel identifiers must be positive, got {value}")
        return values

    @field_validator("delimiter")
    @classmethod
    def _single_character_delimiter(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        if value in _FORBIDDEN_DELIMITERS:
            raise ValueError(f"delimiter {value!r} would make quoted fields ambiguous")
        return value

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "CollectorSettings":
        for low_name, high_name in (
            ("lat_min", "lat_max"),
            ("lon_min", "lon_max"),
            ("speed_min", "speed_max"),
        ):
            low = getattr(self, low_name)
            high = getattr(self, high_name)
            if low is not None and high is not None and low > high:
                raise ValueError(f"{low_name} ({low}) must not exceed {high_name} ({high})")
        return self

    def accepts_speed(self, speed: float) -> bool:
        """Return True when ``speed`` lies inside the configured speed bounds."""
        if self.speed_min is not None and speed < self.speed_min:
            return False
        if self.speed_max is not None and speed > self.speed_max:
            return False
        return True

    @classmethod
    def from_file(cls, config_path: Path) -> "CollectorSettings":
        """Load settings from a YAML or JSON file.

        Raises:
            SettingsLoadError: If the file is unreadable, is not a mapping or
                fails validation.
        """
        raw = read_settings_document(config_path)
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise SettingsLoadError(f"Invalid settings in {config_path}: {e}") from e


def read_settings_document(config_path: Path) -> dict:
    """Read the raw configuration mapping from ``config_path``."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except OSError as e:
        raise SettingsLoadError(f"Cannot read settings file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"Cannot parse settings file {config_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise SettingsLoadError(f"Settings file {config_path} is not valid UTF-8: {e}") from e

    if not isinstance(config_data, dict):
        raise SettingsLoadError(f"Settings file {config_path} must contain a mapping")
    return config_data
