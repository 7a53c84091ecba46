"""
Progress Aggregator
===================

Owns the append-only log of scored practice sessions and the OverallProgress
summary derived from it.

OverallProgress is a cache: after every mutation it is rebuilt from the full
record set by ``recompute`` rather than patched incrementally, so deletes and
clears are trivially correct and no floating-point drift accumulates. The log
is bounded by a human's practice cadence, so the O(n) rebuild is cheap.

Every mutation, its recompute and its persist step run under one lock; no
reader can observe a record list and a summary that disagree.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from .schemas import OverallProgress, ProgressRecord, TimeWindow, utcnow
from .store import ProgressSaveError, ProgressStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class DuplicateRecordError(ValueError):
	pass


def recompute(records: Sequence[ProgressRecord]) -> OverallProgress:
	"""Build OverallProgress from scratch; the zero value for no records."""
	if not records:
		return OverallProgress()
	count = len(records)

	def _mean(field: str) -> float:
		return sum(getattr(r.metrics, field) for r in records) / count

	return OverallProgress(
		total_sessions=count,
		average_similarity=_mean("similarity"),
		average_fluency=_mean("fluency"),
		average_coherence=_mean("coherence"),
		average_vocabulary=_mean("vocabulary"),
		average_overall=_mean("overall"),
		total_practice_time=sum(r.duration for r in records),
		last_practice_date=max(r.date for r in records),
	)


def filter_window(
	records: Sequence[ProgressRecord],
	window: Union[TimeWindow, str],
	now: Optional[datetime] = None,
) -> List[ProgressRecord]:
	"""Records stamped within ``[now - window, now]``; every record for ``all``."""
	window = TimeWindow(window)
	span = window.span
	if span is None:
		return list(records)
	now = now or utcnow()
	if now.tzinfo is None:
		now = now.replace(tzinfo=timezone.utc)
	lower = now - span
	return [r for r in records if lower <= r.date <= now]


class ProgressAggregator:
	def __init__(self, store: Optional[ProgressStore] = None) -> None:
		self._store = store
		self._lock = threading.RLock()
		self._records: "OrderedDict[uuid.UUID, ProgressRecord]" = OrderedDict()
		self._progress = OverallProgress()

	@property
	def store(self) -> Optional[ProgressStore]:
		return self._store

	@property
	def records(self) -> List[ProgressRecord]:
		with self._lock:
			return list(self._records.values())

	@property
	def progress(self) -> OverallProgress:
		with self._lock:
			return self._progress.model_copy()

	def get(self, record_id: uuid.UUID) -> Optional[ProgressRecord]:
		with self._lock:
			return self._records.get(record_id)

	def load(self) -> None:
		"""Read the persisted log once at startup.

		An unreachable store leaves the aggregator empty; losing cached progress
		beats failing a practice session. Malformed stored data raises
		``ProgressLoadError`` instead so the host can decide to reset or alert.
		"""
		if self._store is None:
			return
		with self._lock:
			try:
				records, cached = self._store.load()
			except StoreUnavailableError as e:
				logger.warning("Progress store unavailable, starting with empty history: %s", e)
				records, cached = [], None
			self._records = OrderedDict((r.id, r) for r in records)
			self._progress = recompute(list(self._records.values()))
			if cached is not None and cached != self._progress:
				logger.info("Stored overall progress was stale; rebuilt from %d records", len(self._records))
			logger.debug("Loaded %d progress records", len(self._records))

	def append(self, record: ProgressRecord) -> ProgressRecord:
		with self._lock:
			if record.id in self._records:
				raise DuplicateRecordError(f"Progress record {record.id} already exists")
			self._records[record.id] = record
			self._refresh()
			logger.debug("Appended progress record %s (%s)", record.id, record.type.value)
			return record

	def remove(self, record_id: uuid.UUID) -> bool:
		"""Delete one record; deleting an unknown id is a no-op. Returns whether it existed."""
		with self._lock:
			existed = self._records.pop(record_id, None) is not None
			self._refresh()
			logger.debug("Removed progress record %s (existed=%s)", record_id, existed)
			return existed

	def clear(self) -> None:
		with self._lock:
			self._records.clear()
			self._refresh()
			logger.debug("Cleared all progress records")

	def query(self, window: Union[TimeWindow, str] = TimeWindow.ALL, now: Optional[datetime] = None) -> List[ProgressRecord]:
		with self._lock:
			return filter_window(list(self._records.values()), window, now)

	def summary(self, window: Union[TimeWindow, str] = TimeWindow.ALL, now: Optional[datetime] = None) -> OverallProgress:
		if TimeWindow(window) is TimeWindow.ALL:
			return self.progress
		return recompute(self.query(window, now))

	def _refresh(self) -> None:
		self._progress = recompute(list(self._records.values()))
		self._persist()

	def _persist(self) -> None:
		if self._store is None:
			return
		try:
			self._store.save(list(self._records.values()), self._progress)
		except ProgressSaveError:
			logger.exception("Failed to persist %d progress records", len(self._records))
			raise

