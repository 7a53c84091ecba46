"""
Text Metrics
============

Lexical heuristics that turn a transcript (and, for retellings, the reference
story) into four component scores in [0, 1], plus the rule tables that turn
those scores into improvement suggestions.

Every metric is a pure function ``(text...) -> float``. A learned backend can
replace any of them as long as it keeps that shape.

Metrics:
- similarity: Jaccard index of the case-folded word sets
- fluency: regularity of sentence lengths
- coherence: density of discourse connectives, floored at 0.3
- vocabulary: type/token ratio
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Sequence, Tuple

from .schemas import PracticeType


# ============================================================================
# CONSTANTS
# ============================================================================

TRANSITION_WORDS: FrozenSet[str] = frozenset(
	[
		"however",
		"therefore",
		"meanwhile",
		"furthermore",
		"consequently",
		"additionally",
		"moreover",
		"nevertheless",
		"thus",
		"hence",
	]
)

COHERENCE_FLOOR = 0.3

_SENTENCE_SPLIT = re.compile(r"[.!?]")


# ============================================================================
# TOKENIZATION
# ============================================================================

def tokenize(text: str) -> List[str]:
	"""Case-folded whitespace tokens, empty tokens dropped."""
	return (text or "").lower().split()


def sentences(text: str) -> List[str]:
	parts = (p.strip() for p in _SENTENCE_SPLIT.split(text or ""))
	return [p for p in parts if p]


def word_count(text: str) -> int:
	return len(tokenize(text))


def _clamp(value: float, low: float, high: float) -> float:
	return max(low, min(high, value))


# ============================================================================
# METRICS
# ============================================================================

def similarity(reference: str, candidate: str) -> float:
	"""Jaccard index of the two token sets; 0.0 when both texts are blank."""
	ref_words = set(tokenize(reference))
	cand_words = set(tokenize(candidate))
	union = ref_words | cand_words
	if not union:
		return 0.0
	return len(ref_words & cand_words) / len(union)


def fluency(text: str) -> float:
	"""Score sentence-length regularity.

	Uniform sentence lengths score close to 1.0, erratic ones close to 0.0.
	The score is ``1 - variance / 100`` clamped to [0, 1], where the variance
	is the population variance of sentence lengths in characters.
	"""
	lengths = [len(s) for s in sentences(text)]
	if not lengths:
		return 0.0
	mean = sum(lengths) / len(lengths)
	variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
	return _clamp(1.0 - variance / 100.0, 0.0, 1.0)


def coherence(text: str) -> float:
	count = sum(1 for word in tokenize(text) if word in TRANSITION_WORDS)
	return _clamp(count / 10.0, COHERENCE_FLOOR, 1.0)


def vocabulary(text: str) -> float:
	words = tokenize(text)
	if not words:
		return 0.0
	return len(set(words)) / len(words)


# ============================================================================
# SUGGESTIONS
# ============================================================================

@dataclass(frozen=True)
class SuggestionContext:
	"""Everything a suggestion rule may look at."""
	similarity: float
	fluency: float
	coherence: float
	vocabulary: float
	candidate: str = ""
	reference: str = ""
	duration: float = 0.0

	@property
	def word_count(self) -> int:
		return word_count(self.candidate)


Rule = Tuple[Callable[[SuggestionContext], bool], str]


RETELLING_RULES: Sequence[Rule] = (
	(
		lambda c: c.similarity < 0.6,
		"Try to include more key details and themes from the original story.",
	),
	(
		lambda c: c.fluency < 0.6,
		"Work on varying your sentence length to create better flow.",
	),
	(
		lambda c: c.coherence < 0.6,
		"Use transition words to better connect your ideas and create a smoother narrative.",
	),
	(
		lambda c: c.vocabulary < 0.5,
		"Try using more diverse vocabulary to make your story more engaging.",
	),
	(
		lambda c: len(c.candidate) < int(len(c.reference) * 0.5),
		"Your retelling is quite brief. Try to expand on the details and add more context.",
	),
)

RETELLING_FALLBACK = (
	"Great job! Your retelling captures the essence of the story well. "
	"Keep practicing to refine your skills."
)

PRACTICE_RULES: Sequence[Rule] = (
	(
		lambda c: c.duration < 30,
		"Try to speak for a bit longer to develop your story more fully.",
	),
	(
		lambda c: c.fluency < 0.6,
		"Work on speaking more smoothly and reducing pauses.",
	),
	(
		lambda c: c.coherence < 0.6,
		"Use connecting words and phrases to link your ideas together.",
	),
	(
		lambda c: c.vocabulary < 0.5,
		"Experiment with different words to make your story more vivid and engaging.",
	),
	(
		lambda c: c.word_count < 50,
		"Try to expand your story with more details and descriptions.",
	),
)

PRACTICE_FALLBACK = "Excellent storytelling! You're doing great. Keep practicing to continue improving."

_TABLES = {
	PracticeType.RETELLING: (RETELLING_RULES, RETELLING_FALLBACK),
	PracticeType.FREE_PRACTICE: (PRACTICE_RULES, PRACTICE_FALLBACK),
}


def evaluate_rules(rules: Sequence[Rule], context: SuggestionContext, fallback: str) -> List[str]:
	"""Run every rule in order; each firing rule adds its message once."""
	found = [message for predicate, message in rules if predicate(context)]
	return found or [fallback]


def suggestions(context: SuggestionContext, mode: PracticeType) -> List[str]:
	rules, fallback = _TABLES[mode]
	return evaluate_rules(rules, context, fallback)
