"""Shared fixtures for the collector tests."""

import json

import pytest
import yaml

from ..models.config import CollectorSettings

SCENARIO_CSV = (
    "MMSI,TIME,LONGITUDE,LATITUDE,COG,SOG,HEADING,NAVSTAT,IMO,NAME\n"
    "123456789,T1,5.3,60.5,90,12,91,0,0,Sea*Star\n"
)


@pytest.fixture
def output_dir(tmp_path):
    """Directory the vessel files are written to."""
    return tmp_path / "data"


@pytest.fixture
def write_config(tmp_path, output_dir):
    """Factory writing a settings file; extension picks YAML or JSON."""
    def _write(name="settings.yaml", **overrides):
        data = {"api_credential": "tester", "polling_interval_seconds": 60, "output_directory": str(output_dir)}
        data.update(overrides)
        path = tmp_path / name
        if name.endswith(".json"):
            path.write_text(json.dumps(data), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def test_settings(output_dir):
    """Minimal valid settings."""
    return CollectorSettings(api_credential="tester", polling_interval_seconds=60, output_directory=output_dir)


@pytest.fixture
def scenario_body():
    """AISHub CSV body with a single report for vessel Sea*Star."""
    return SCENARIO_CSV.encode("utf-8")
