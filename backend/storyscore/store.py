"""Persistence collaborators for the progress log.

A store writes and reads two opaque JSON blobs: the record list and the
cached OverallProgress. Failures are split into two kinds so the aggregator
can treat them differently:

- StoreUnavailableError: the backend could not be reached at all
- ProgressLoadError: the backend answered but the stored data is malformed
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import ensure_schema, make_engine, make_sessionmaker
from .models import ProgressEntry
from .schemas import OverallProgress, ProgressRecord

RECORDS_KEY = "ProgressRecords"
OVERALL_KEY = "OverallProgress"

_records_adapter = TypeAdapter(List[ProgressRecord])


class ProgressStoreError(Exception):
	pass


class StoreUnavailableError(ProgressStoreError):
	pass


class ProgressLoadError(ProgressStoreError):
	pass


class ProgressSaveError(ProgressStoreError):
	pass


def dump_records(records: Sequence[ProgressRecord]) -> str:
	return _records_adapter.dump_json(list(records), exclude_none=True).decode("utf-8")


def parse_records(raw: str) -> List[ProgressRecord]:
	try:
		return _records_adapter.validate_json(raw)
	except ValidationError as e:
		raise ProgressLoadError(f"Stored progress records are unreadable: {e}") from e


def dump_progress(progress: OverallProgress) -> str:
	return progress.model_dump_json(exclude_none=True)


def parse_progress(raw: str) -> OverallProgress:
	try:
		return OverallProgress.model_validate_json(raw)
	except ValidationError as e:
		raise ProgressLoadError(f"Stored overall progress is unreadable: {e}") from e


def _decode(blobs: Dict[str, str]) -> Tuple[List[ProgressRecord], Optional[OverallProgress]]:
	raw_records = blobs.get(RECORDS_KEY)
	raw_progress = blobs.get(OVERALL_KEY)
	records = parse_records(raw_records) if raw_records else []
	progress = parse_progress(raw_progress) if raw_progress else None
	return records, progress


class ProgressStore(ABC):
	backend = "abstract"

	@abstractmethod
	def save(self, records: Sequence[ProgressRecord], progress: OverallProgress) -> None:
		...

	@abstractmethod
	def load(self) -> Tuple[List[ProgressRecord], Optional[OverallProgress]]:
		"""Return the stored records and cached progress (None when never saved)."""


class MemoryProgressStore(ProgressStore):
	"""Keeps serialized blobs in process memory."""
	backend = "memory"

	def __init__(self) -> None:
		self.blobs: Dict[str, str] = {}

	def save(self, records: Sequence[ProgressRecord], progress: OverallProgress) -> None:
		self.blobs = {
			RECORDS_KEY: dump_records(records),
			OVERALL_KEY: dump_progress(progress),
		}

	def load(self) -> Tuple[List[ProgressRecord], Optional[OverallProgress]]:
		return _decode(self.blobs)


class SqlProgressStore(ProgressStore):
	"""Key/value rows in the ``progress_kv`` table, one per structure."""
	backend = "sql"

	def __init__(self, engine: Optional[Engine] = None, *, url: Optional[str] = None) -> None:
		self.engine = engine or (make_engine(url) if url else make_engine())
		self._sessionmaker = make_sessionmaker(self.engine)
		self._schema_ready = False

	def _ensure_schema(self) -> None:
		if not self._schema_ready:
			ensure_schema(self.engine)
			self._schema_ready = True

	def save(self, records: Sequence[ProgressRecord], progress: OverallProgress) -> None:
		payload = {
			RECORDS_KEY: dump_records(records),
			OVERALL_KEY: dump_progress(progress),
		}
		db = None
		try:
			self._ensure_schema()
			db = self._sessionmaker()
			# Both rows go in one transaction so records and progress never disagree on disk
			for key, value in payload.items():
				db.merge(ProgressEntry(key=key, value_json=value))
			db.commit()
		except SQLAlchemyError as e:
			if db is not None:
				db.rollback()
			raise ProgressSaveError(f"Failed to persist progress: {e}") from e
		finally:
			if db is not None:
				db.close()

	def load(self) -> Tuple[List[ProgressRecord], Optional[OverallProgress]]:
		try:
			self._ensure_schema()
			with self._sessionmaker() as db:
				rows = db.query(ProgressEntry).filter(ProgressEntry.key.in_([RECORDS_KEY, OVERALL_KEY])).all()
				blobs = {row.key: row.value_json for row in rows}
		except (SQLAlchemyError, OSError) as e:
			raise StoreUnavailableError(f"Progress store unavailable: {e}") from e
		return _decode(blobs)


def build_store(kind: str, *, url: Optional[str] = None) -> ProgressStore:
	kind = (kind or "sql").strip().lower()
	if kind == "memory":
		return MemoryProgressStore()
	if kind == "sql":
		return SqlProgressStore(url=url)
	raise ValueError(f"Unknown progress store: {kind!r} (expected 'sql' or 'memory')")
