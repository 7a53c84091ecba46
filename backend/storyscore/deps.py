from __future__ import annotations

import logging
import threading
from typing import Optional

from fastapi import HTTPException

from .db import DATABASE_URL
from .progress import ProgressAggregator
from .settings import settings
from .store import ProgressLoadError, ProgressStore, build_store

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_aggregator: Optional[ProgressAggregator] = None
# Set when the persisted history exists but cannot be read; cleared by a reset
_load_error: Optional[ProgressLoadError] = None


def init_aggregator(store: Optional[ProgressStore] = None) -> ProgressAggregator:
	"""Build the process-wide aggregator and load the persisted log once."""
	global _aggregator, _load_error
	with _lock:
		store = store or build_store(settings.progress_store, url=DATABASE_URL)
		aggregator = ProgressAggregator(store)
		try:
			aggregator.load()
			_load_error = None
		except ProgressLoadError as e:
			logger.error("Stored progress history is unreadable; waiting for a reset: %s", e)
			_load_error = e
		_aggregator = aggregator
		return aggregator


def current_aggregator() -> ProgressAggregator:
	return _aggregator or init_aggregator()


def load_error() -> Optional[ProgressLoadError]:
	return _load_error


def clear_load_error() -> None:
	global _load_error
	_load_error = None


def get_aggregator() -> ProgressAggregator:
	"""FastAPI dependency for routes that need readable history."""
	aggregator = current_aggregator()
	if _load_error is not None:
		raise HTTPException(
			status_code=503,
			detail=f"Progress history could not be loaded ({_load_error}). DELETE /progress to reset it.",
		)
	return aggregator
