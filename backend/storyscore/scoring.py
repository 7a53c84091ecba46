from __future__ import annotations

import logging
from typing import Callable, Optional

from . import text_metrics
from .schemas import PracticeType, StoryMetrics
from .text_metrics import SuggestionContext

logger = logging.getLogger(__name__)

PairMetric = Callable[[str, str], float]
TextMetric = Callable[[str], float]


class ScoringEngine:
	"""
	Assemble StoryMetrics for the two practice modes.

	The metric callables default to the lexical heuristics in
	``text_metrics``; any replacement must keep the same signature and
	return a value in [0, 1]. The engine holds no mutable state, so one
	instance can be shared between concurrent callers.
	"""

	def __init__(
		self,
		*,
		similarity: Optional[PairMetric] = None,
		fluency: Optional[TextMetric] = None,
		coherence: Optional[TextMetric] = None,
		vocabulary: Optional[TextMetric] = None,
	) -> None:
		self.similarity = similarity or text_metrics.similarity
		self.fluency = fluency or text_metrics.fluency
		self.coherence = coherence or text_metrics.coherence
		self.vocabulary = vocabulary or text_metrics.vocabulary

	def score_retelling(self, reference: str, candidate: str) -> StoryMetrics:
		reference = reference or ""
		candidate = candidate or ""
		sim = self.similarity(reference, candidate)
		flu = self.fluency(candidate)
		coh = self.coherence(candidate)
		voc = self.vocabulary(candidate)
		overall = (sim + flu + coh + voc) / 4.0
		context = SuggestionContext(
			similarity=sim,
			fluency=flu,
			coherence=coh,
			vocabulary=voc,
			candidate=candidate,
			reference=reference,
		)
		logger.debug("Scored retelling: similarity=%.3f overall=%.3f", sim, overall)
		return StoryMetrics(
			similarity=sim,
			fluency=flu,
			coherence=coh,
			vocabulary=voc,
			overall=overall,
			suggestions=text_metrics.suggestions(context, PracticeType.RETELLING),
		)

	def score_practice(self, transcript: str, duration: float) -> StoryMetrics:
		transcript = transcript or ""
		flu = self.fluency(transcript)
		coh = self.coherence(transcript)
		voc = self.vocabulary(transcript)
		if text_metrics.word_count(transcript) == 0:
			# Nothing was narrated: the composite is zero even though coherence keeps its floor
			sim = 0.0
			overall = 0.0
		else:
			# No reference exists, so similarity is a self-consistency proxy
			sim = (flu + coh + voc) / 3.0
			overall = (sim + flu + coh + voc) / 4.0
		context = SuggestionContext(
			similarity=sim,
			fluency=flu,
			coherence=coh,
			vocabulary=voc,
			candidate=transcript,
			duration=max(0.0, float(duration or 0.0)),
		)
		logger.debug("Scored free practice: duration=%.1fs overall=%.3f", context.duration, overall)
		return StoryMetrics(
			similarity=sim,
			fluency=flu,
			coherence=coh,
			vocabulary=voc,
			overall=overall,
			suggestions=text_metrics.suggestions(context, PracticeType.FREE_PRACTICE),
		)


default_engine = ScoringEngine()


def score_retelling(reference: str, candidate: str) -> StoryMetrics:
	return default_engine.score_retelling(reference, candidate)


def score_practice(transcript: str, duration: float) -> StoryMetrics:
	return default_engine.score_practice(transcript, duration)
