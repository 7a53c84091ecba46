"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Callable

import pytest

# Settings are read at import time; keep tests off the real database and speech API
os.environ.setdefault("PROGRESS_STORE", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SPEECH_ENABLED", "false")

from storyscore import deps  # noqa: E402
from storyscore.progress import ProgressAggregator  # noqa: E402
from storyscore.schemas import PracticeType, ProgressRecord, StoryMetrics  # noqa: E402
from storyscore.store import MemoryProgressStore  # noqa: E402

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_app_aggregator() -> ProgressAggregator:
	# Each test gets its own empty, memory-backed history behind the API
	return deps.init_aggregator(MemoryProgressStore())


@pytest.fixture
def memory_store() -> MemoryProgressStore:
	return MemoryProgressStore()


@pytest.fixture
def make_record() -> Callable[..., ProgressRecord]:
	def _make(
		score: float = 0.5,
		*,
		date: datetime = NOW,
		duration: float = 60.0,
		type: PracticeType = PracticeType.FREE_PRACTICE,
		**kwargs,
	) -> ProgressRecord:
		metrics = StoryMetrics(
			similarity=score,
			fluency=min(1.0, score + 0.1),
			coherence=max(0.3, score),
			vocabulary=score / 2,
			overall=score,
			suggestions=["Keep going."],
		)
		return ProgressRecord(date=date, metrics=metrics, duration=duration, type=type, **kwargs)

	return _make


@pytest.fixture
def now() -> datetime:
	return NOW
