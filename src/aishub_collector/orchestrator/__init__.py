"""Polling loop orchestration."""

from .ingestion_loop import CycleReport, CycleStatus, IngestionLoop, LoopState

__all__ = [
    "CycleReport",
    "CycleStatus",
    "IngestionLoop",
    "LoopState",
]
