"""
Keyword Discovery — free-text question → galaxy topic ids
----------------------------------------------------------
"Ask a question to unlock a topic."  A deterministic lookup, not search:

  1. Exact pass    — every keyword phrase found as a substring of the
                     lower-cased, trimmed query contributes its topic ids.
  2. Fallback pass — only when pass 1 found nothing: for each token longer
                     than 3 characters, a phrase matches if it contains the
                     token or if the phrase's first word occurs in the token.

The keyword table is a multimap built once from (phrase, ids) pairs; a
phrase listed twice contributes the union of both id lists.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import lru_cache

from graph import GalaxyGraph
from record import ProgressRecord

log = logging.getLogger(__name__)

_MIN_TOKEN_LEN = 4  # tokens must be longer than 3 characters


# ═══════════════════════════════════════════════════════════════════════
# Static keyword table  (phrase, topic ids)
# ═══════════════════════════════════════════════════════════════════════
KEYWORD_TOPICS: list[tuple[str, tuple[str, ...]]] = [
	# algebra
	("algebra",               ("algebra-overview",)),
	("linear equation",       ("linear-equations",)),
	("system of equations",   ("systems-of-equations", "matrices")),
	("matrix",                ("matrices", "systems-of-equations")),
	("polynomial",            ("polynomials", "rational-functions")),
	("rational function",     ("rational-functions",)),
	("vector",                ("matrices",)),

	# quadratics
	("quadratic",             ("quadratic-equations",)),
	("quadratic formula",     ("quadratic-formula", "quadratic-equations")),
	("quadratic equation",    ("quadratic-equations",)),
	("parabola",              ("parabola-graphs", "quadratic-equations")),
	("vertex form",           ("vertex-form", "parabola-graphs")),
	("vertex",                ("vertex-form", "parabola-graphs")),
	("completing square",     ("completing-square", "vertex-form")),
	("completing the square", ("completing-square", "vertex-form")),
	("discriminant",          ("discriminant", "quadratic-formula")),
	("factorization",         ("factorization", "quadratic-equations")),
	("factoring",             ("factorization", "quadratic-equations")),
	("complex root",          ("complex-roots", "discriminant")),
	("imaginary root",        ("complex-roots", "discriminant")),
	("real world",            ("real-world-applications", "parabola-graphs")),

	# geometry
	("geometry",              ("geometry-basics",)),
	("triangle",              ("triangles", "geometry-basics")),
	("pythagorean",           ("triangles", "geometry-basics")),
	("pythagorean theorem",   ("triangles", "geometry-basics")),
	("quadrilateral",         ("quadrilaterals", "geometry-basics")),
	("circle",                ("circles", "area-volume")),
	("area",                  ("area-volume", "geometry-basics")),
	("volume",                ("area-volume", "geometry-basics")),
	("coordinate geometry",   ("coordinate-geometry", "area-volume")),

	# trigonometry
	("trigonometry",          ("trigonometric-functions", "triangles")),
	("trig",                  ("trigonometric-functions", "triangles")),
	("sine",                  ("trigonometric-functions", "triangles")),
	("cosine",                ("trigonometric-functions", "triangles")),
	("tangent",               ("trigonometric-functions", "triangles")),
	("sin",                   ("trigonometric-functions", "triangles")),
	("cos",                   ("trigonometric-functions", "triangles")),
	("tan",                   ("trigonometric-functions", "triangles")),
	("trig identity",         ("trig-identities", "trigonometric-functions")),
	("trig equation",         ("trig-equations", "trig-identities")),
	("inverse trig",          ("inverse-trig", "trigonometric-functions")),

	# calculus
	("calculus",              ("limits", "functions-analysis")),
	("limit",                 ("limits", "functions-analysis")),
	("continuity",            ("limits", "functions-analysis")),
	("derivative",            ("derivatives", "limits")),
	("integral",              ("integrals", "derivatives")),
	("integration",           ("integrals", "derivatives")),
	("differentiation",       ("derivatives", "limits")),
	("fundamental theorem",   ("integrals", "derivatives")),
	("optimization",          ("applications-derivatives",)),
	("related rates",         ("applications-derivatives",)),
	("maxima",                ("applications-derivatives",)),
	("minima",                ("applications-derivatives",)),
	("area integration",      ("applications-integrals",)),
	("volume integration",    ("applications-integrals",)),

	# statistics
	("statistics",            ("basic-statistics",)),
	("probability",           ("probability", "basic-statistics")),
	("mean",                  ("basic-statistics",)),
	("median",                ("basic-statistics",)),
	("mode",                  ("basic-statistics",)),
	("average",               ("basic-statistics",)),
	("standard deviation",    ("basic-statistics",)),
	("data analysis",         ("data-analysis", "basic-statistics")),
	("regression",            ("regression", "data-analysis")),
	("statistical inference", ("statistics-inference", "probability")),
	("hypothesis testing",    ("statistics-inference",)),
	("confidence interval",   ("statistics-inference",)),
]


# ═══════════════════════════════════════════════════════════════════════
# Matcher
# ═══════════════════════════════════════════════════════════════════════
class KeywordMatcher:
	"""
	Stateless after construction: match_topics() depends on its argument
	only, so identical queries always give identical sets.
	"""

	__slots__ = ("_table", "_first_words")

	def __init__(self, entries: Iterable[tuple[str, Iterable[str]]]) -> None:
		table: dict[str, set[str]] = {}
		for phrase, ids in entries:
			key = " ".join(phrase.lower().split())
			if not key:
				raise ValueError("keyword phrase must not be blank")
			table.setdefault(key, set()).update(ids)
		# frozen, phrase order preserved from the source table
		self._table: dict[str, frozenset[str]] = {k: frozenset(v) for k, v in table.items()}
		self._first_words: dict[str, str] = {k: k.split(" ", 1)[0] for k in self._table}

	@property
	def phrases(self) -> list[str]:
		return list(self._table)

	def topics_for(self, phrase: str) -> frozenset[str]:
		return self._table.get(phrase.lower(), frozenset())

	def keywords_for(self, topic_id: str) -> list[str]:
		"""Reverse lookup: every phrase that leads to *topic_id*."""
		return [k for k, ids in self._table.items() if topic_id in ids]

	def validate_against(self, graph: GalaxyGraph) -> list[str]:
		"""Log and return mapped ids that the graph does not know."""
		missing = sorted({tid for ids in self._table.values() for tid in ids if tid not in graph})
		for tid in missing:
			log.warning("keyword table maps to unknown topic %r", tid)
		return missing

	# ---- matching ----------------------------------------------------------
	def match_topics(self, query: str) -> set[str]:
		q = query.lower().strip()
		if not q:
			return set()

		matched: set[str] = set()
		for phrase, ids in self._table.items():
			if phrase in q:
				matched.update(ids)
		if matched:
			return matched

		tokens = [w for w in q.split() if len(w) >= _MIN_TOKEN_LEN]
		for phrase, ids in self._table.items():
			first = self._first_words[phrase]
			if any(tok in phrase or first in tok for tok in tokens):
				matched.update(ids)
		return matched


def newly_unlocked(matched: Iterable[str], progress: ProgressRecord) -> list[str]:
	"""Matched ids the learner has not unlocked or captured yet (sorted)."""
	return sorted(
		tid for tid in set(matched)
		if tid not in progress.unlocked_topics and tid not in progress.captured_topics
	)


# ═══════════════════════════════════════════════════════════════════════
# Module-level default matcher  (built once)
# ═══════════════════════════════════════════════════════════════════════
@lru_cache(maxsize=1)
def get_matcher() -> KeywordMatcher:
	return KeywordMatcher(KEYWORD_TOPICS)


def match_topics(query: str) -> set[str]:
	"""Topic ids suggested by *query* using the built-in keyword table."""
	return get_matcher().match_topics(query)
