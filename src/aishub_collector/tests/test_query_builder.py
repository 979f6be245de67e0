"""Tests for AISHub query construction."""

from ..ingestion.query_builder import build_query, query_parameters, redact_query
from ..models.config import AISHUB_API_URL, CollectorSettings


class TestBuildQuery:
    """Test URL construction."""

    def test_minimal_query(self):
        """Only the mandatory parameters are sent."""
        settings = CollectorSettings(api_credential="tester", polling_interval_seconds=60)

        assert build_query(settings) == (
            f"{AISHUB_API_URL}?username=tester&format=1&output=csv&compress=0"
        )

    def test_bounding_box(self):
        """Bounds appear in latmin, latmax, lonmin, lonmax order."""
        settings = CollectorSettings(
            api_credential="tester", polling_interval_seconds=60,
            lat_min=60, lat_max=61.5, lon_min=4.25, lon_max=6,
        )

        assert build_query(settings).endswith(
            "compress=0&latmin=60&latmax=61.5&lonmin=4.25&lonmax=6"
        )

    def test_vessel_lists_and_age(self):
        """Vessel identifiers are comma separated without escaping."""
        settings = CollectorSettings(
            api_credential="tester", polling_interval_seconds=60,
            mmsi=[257111020, 257000001], imo=[9123456], age_max_minutes=30,
        )

        query = build_query(settings)

        assert "mmsi=257111020,257000001" in query
        assert "imo=9123456" in query
        assert query.endswith("interval=30")

    def test_speed_bounds_not_sent(self):
        """Speed filtering happens locally."""
        settings = CollectorSettings(api_credential="tester", polling_interval_seconds=60, speed_min=1, speed_max=20)

        names = [name for name, _ in query_parameters(settings)]

        assert names == ["username", "format", "output", "compress"]

    def test_credential_escaped(self):
        """Reserved characters in the credential are percent-encoded."""
        settings = CollectorSettings(api_credential="a b&c", polling_interval_seconds=60)

        assert "username=a%20b%26c&" in build_query(settings)

    def test_deterministic(self):
        """Equal settings give identical URLs."""
        first = CollectorSettings(api_credential="tester", polling_interval_seconds=60, lat_min=1, mmsi=[5])
        second = CollectorSettings(api_credential="tester", polling_interval_seconds=60, lat_min=1, mmsi=[5])

        assert build_query(first) == build_query(second)

    def test_custom_base_url(self):
        """The endpoint can be overridden."""
        settings = CollectorSettings(api_credential="tester", polling_interval_seconds=60, base_url="http://localhost:8080/ws.php")

        assert build_query(settings).startswith("http://localhost:8080/ws.php?username=tester")


class TestRedactQuery:
    """Test credential masking."""

    def test_username_masked(self):
        """The credential never shows up in logged URLs."""
        url = f"{AISHUB_API_URL}?username=secret&format=1"

        assert redact_query(url) == f"{AISHUB_API_URL}?username=***&format=1"

    def test_without_username(self):
        """URLs without credential are untouched."""
        assert redact_query("http://example.com/?a=1") == "http://example.com/?a=1"
