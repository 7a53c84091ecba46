"""
Data model shared by the scoring engine, the progress aggregator and the API.

Every type here is a pydantic model so that records round-trip through JSON
without loss: ``model_dump_json(exclude_none=True)`` drops absent optional
fields and ``model_validate_json`` restores them as ``None``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
	# Naive timestamps are taken to be UTC so window comparisons never mix kinds
	if value.tzinfo is None:
		return value.replace(tzinfo=timezone.utc)
	return value


class PracticeType(str, Enum):
	RETELLING = "retelling"
	FREE_PRACTICE = "free_practice"


class TimeWindow(str, Enum):
	ALL = "all"
	WEEK = "week"
	MONTH = "month"
	YEAR = "year"

	@property
	def span(self) -> Optional[timedelta]:
		"""Length of the window, or None for the all-time window."""
		return _WINDOW_SPANS.get(self)


_WINDOW_SPANS = {
	TimeWindow.WEEK: timedelta(days=7),
	TimeWindow.MONTH: timedelta(days=30),
	TimeWindow.YEAR: timedelta(days=365),
}


class StoryMetrics(BaseModel):
	"""
	Multi-dimensional quality report for one retelling or narration.

	All scores lie in [0, 1]. ``overall`` is the unweighted mean of the four
	component scores, except for an empty free-practice transcript which
	scores 0.0 overall.
	"""
	model_config = ConfigDict(frozen=True)

	similarity: float = Field(ge=0.0, le=1.0)
	fluency: float = Field(ge=0.0, le=1.0)
	coherence: float = Field(ge=0.0, le=1.0)
	vocabulary: float = Field(ge=0.0, le=1.0)
	overall: float = Field(ge=0.0, le=1.0)
	suggestions: List[str] = Field(min_length=1)

	@property
	def overall_percentage(self) -> int:
		return int(self.overall * 100)

	@property
	def similarity_percentage(self) -> int:
		return int(self.similarity * 100)

	@property
	def fluency_percentage(self) -> int:
		return int(self.fluency * 100)

	@property
	def coherence_percentage(self) -> int:
		return int(self.coherence * 100)

	@property
	def vocabulary_percentage(self) -> int:
		return int(self.vocabulary * 100)


class ProgressRecord(BaseModel):
	"""One scored practice session. Created once, never edited."""
	model_config = ConfigDict(frozen=True)

	id: uuid.UUID = Field(default_factory=uuid.uuid4)
	date: datetime = Field(default_factory=utcnow)
	story_id: Optional[uuid.UUID] = None
	prompt_id: Optional[uuid.UUID] = None
	metrics: StoryMetrics
	duration: float = Field(ge=0.0)
	type: PracticeType

	@field_validator("date")
	@classmethod
	def _date_is_utc(cls, value: datetime) -> datetime:
		return _as_utc(value)


class OverallProgress(BaseModel):
	"""Aggregate over the record log. A cache: rebuilt, never patched."""
	total_sessions: int = Field(default=0, ge=0)
	average_similarity: float = 0.0
	average_fluency: float = 0.0
	average_coherence: float = 0.0
	average_vocabulary: float = 0.0
	average_overall: float = 0.0
	total_practice_time: float = Field(default=0.0, ge=0.0)
	last_practice_date: Optional[datetime] = None

	@field_validator("last_practice_date")
	@classmethod
	def _last_date_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
		return _as_utc(value) if value is not None else None


# ============================================================================
# REFERENCE CONTENT
# ============================================================================

class StoryCategory(str, Enum):
	TECHNOLOGY = "Technology"
	FASHION = "Fashion"
	FANTASY = "Fantasy"
	SOCIAL_INTERACTIONS = "Social Interactions"
	SPORTS = "Sports"


class Story(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: uuid.UUID = Field(default_factory=uuid.uuid4)
	title: str
	content: str
	category: StoryCategory
	# Narration length of the reference audio, in seconds
	duration: float = Field(default=0.0, ge=0.0)


class StoryPrompt(BaseModel):
	model_config = ConfigDict(frozen=True)

	id: uuid.UUID = Field(default_factory=uuid.uuid4)
	text: str
	category: Optional[StoryCategory] = None
	created_at: datetime = Field(default_factory=utcnow)
