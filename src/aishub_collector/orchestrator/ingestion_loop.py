"""Polling loop that turns AISHub responses into vessel files."""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import structlog

from ..exceptions import FatalStartupError, FetchError, ParseError, RateLimitedError
from ..ingestion.aishub_client import AISHubClient
from ..ingestion.query_builder import build_query, redact_query
from ..ingestion.response_parser import parse_response
from ..models.config import CollectorSettings
from ..models.schemas import VesselRecord
from ..models.settings_manager import SettingsManager
from ..storage.vessel_file_store import VesselFileStore

logger = structlog.get_logger(__name__)


class LoopState(str, Enum):
    """States of the ingestion loop."""
    STARTUP = "startup"
    FETCHING = "fetching"
    PERSISTING = "persisting"
    SLEEPING = "sleeping"
    FATAL = "fatal"


class CycleStatus(str, Enum):
    """How a polling cycle ended."""
    PERSISTED = "persisted"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"


@dataclass
class CycleReport:
    """Counters for one polling cycle."""

    cycle: int
    status: CycleStatus
    records_received: int = 0
    records_written: int = 0
    records_failed: int = 0
    records_filtered: int = 0
    records_repeated: int = 0
    error: Optional[str] = None


class IngestionLoop:
    """
    Drives the fetch, parse, persist and sleep cycle.

    Only the initial settings load can end the loop with an error. Fetch and
    parse failures skip the cycle, a failed record write only drops that record.
    """

    def __init__(self,
                 settings_manager: SettingsManager,
                 client: Optional[AISHubClient] = None,
                 stop_event: Optional[threading.Event] = None):
        self.settings_manager = settings_manager
        self.client = client or AISHubClient()
        self.stop_event = stop_event or threading.Event()
        self.state = LoopState.STARTUP
        self.cycle_count = 0
        self._started_at: Optional[float] = None
        self._last_timestamps: Dict[int, str] = {}

    def start(self) -> CollectorSettings:
        """
        Load the initial settings.

        Raises:
            FatalStartupError: If the configuration is unusable
        """
        self.state = LoopState.STARTUP
        try:
            settings = self.settings_manager.load()
        except FatalStartupError:
            self.state = LoopState.FATAL
            raise

        self._started_at = time.monotonic()
        self.state = LoopState.FETCHING
        logger.info("Collector started",
                    output_directory=str(settings.output_directory),
                    polling_interval_seconds=settings.polling_interval_seconds)
        return settings

    def run_cycle(self) -> CycleReport:
        """Run one fetch and persist pass with freshly reloaded settings."""
        if self.state in (LoopState.STARTUP, LoopState.FATAL):
            raise RuntimeError("start() must succeed before cycles can run")

        self.cycle_count += 1
        cycle = self.cycle_count
        self.state = LoopState.FETCHING

        settings = self.settings_manager.load()
        url = build_query(settings)
        logger.info("Polling AISHub",
                    cycle=cycle,
                    url=redact_query(url),
                    uptime_seconds=round(time.monotonic() - self._started_at, 1))

        try:
            body = self.client.fetch(url, settings.request_timeout_seconds)
            records = parse_response(body, settings)
        except RateLimitedError as e:
            logger.warning("AISHub rate limit hit, backing off", cycle=cycle, error=str(e))
            self.settings_manager.increase_polling_interval()
            return CycleReport(cycle, CycleStatus.FETCH_FAILED, error=str(e))
        except FetchError as e:
            logger.error("Fetch failed, skipping cycle", cycle=cycle, error=str(e))
            return CycleReport(cycle, CycleStatus.FETCH_FAILED, error=str(e))
        except ParseError as e:
            logger.error("Response could not be parsed, skipping cycle", cycle=cycle, error=str(e))
            return CycleReport(cycle, CycleStatus.PARSE_FAILED, error=str(e))

        return self._persist(cycle, settings, records)

    def _persist(self, cycle: int, settings: CollectorSettings, records: List[VesselRecord]) -> CycleReport:
        self.state = LoopState.PERSISTING
        store = VesselFileStore.from_settings(settings)
        report = CycleReport(cycle, CycleStatus.PERSISTED, records_received=len(records))

        for record in records:
            if not settings.accepts_speed(record.speed):
                report.records_filtered += 1
                logger.debug("Record outside speed bounds", cycle=cycle, vessel_id=record.mmsi, speed=record.speed)
                continue

            if settings.skip_repeated_timestamps and self._last_timestamps.get(record.mmsi) == record.timestamp:
                report.records_repeated += 1
                continue

            result = store.append_record(record)
            if result.ok:
                report.records_written += 1
                self._last_timestamps[record.mmsi] = record.timestamp
            else:
                report.records_failed += 1
                logger.warning("Record dropped",
                               cycle=cycle,
                               vessel_id=record.mmsi,
                               path=str(result.path),
                               error=str(result.error))

        logger.info("Cycle completed",
                    cycle=cycle,
                    received=report.records_received,
                    written=report.records_written,
                    failed=report.records_failed,
                    filtered=report.records_filtered,
                    repeated=report.records_repeated)
        return report

    def sleep(self) -> bool:
        """
        Wait for the polling interval.

        Returns:
            bool: False if a stop was requested while waiting
        """
        self.state = LoopState.SLEEPING
        interval = self.settings_manager.current.polling_interval_seconds
        logger.debug("Sleeping until next poll", seconds=interval)
        return not self.stop_event.wait(interval)

    def stop(self) -> None:
        """Request the loop to finish after the current record write."""
        self.stop_event.set()

    def run_forever(self) -> None:
        """
        Start and poll until stop() is called.

        Raises:
            FatalStartupError: If the initial settings cannot be loaded
        """
        try:
            self.start()
            while not self.stop_event.is_set():
                try:
                    self.run_cycle()
                except Exception as e:
                    logger.exception("Unexpected error during cycle", cycle=self.cycle_count, error=str(e))
                if not self.sleep():
                    break
        finally:
            self.client.close()
            logger.info("Collector stopped", cycles=self.cycle_count)
