"""
ProgressRecord: the single unit of persisted user state.

Records are values: every quiz completion or discovery event produces a
new record (see unlock.py) and nothing mutates one in place.  The
serialised layout uses the camelCase keys the browser UI already stores:

    capturedTopics  unlockedTopics  quizAttempts  quizScores
    lastActivity (epoch ms)  completionRate (0–100)
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any

# snake_case field → camelCase document key
_WIRE_KEYS: dict[str, str] = {
    "captured_topics": "capturedTopics",
    "unlocked_topics": "unlockedTopics",
    "quiz_attempts":   "quizAttempts",
    "quiz_scores":     "quizScores",
    "last_activity":   "lastActivity",
    "completion_rate": "completionRate",
}


def now_ms() -> int:
    return int(time.time() * 1000)


class CorruptRecordError(ValueError):
    """Stored document does not describe a valid ProgressRecord."""


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    captured_topics: frozenset[str] = frozenset()
    unlocked_topics: frozenset[str] = frozenset()
    quiz_attempts: dict[str, int] = field(default_factory=dict)
    quiz_scores: dict[str, float] = field(default_factory=dict)
    last_activity: int = 0
    completion_rate: float = 0.0

    @classmethod
    def default(cls, root_id: str | None) -> "ProgressRecord":
        """First-run state: only the root topic is unlocked."""
        return cls(
            unlocked_topics=frozenset([root_id]) if root_id else frozenset(),
            last_activity=now_ms(),
        )

    # ---- serialisation -----------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """camelCase document; id lists are sorted so saves are stable."""
        return {
            "capturedTopics": sorted(self.captured_topics),
            "unlockedTopics": sorted(self.unlocked_topics),
            "quizAttempts":   dict(self.quiz_attempts),
            "quizScores":     dict(self.quiz_scores),
            "lastActivity":   self.last_activity,
            "completionRate": self.completion_rate,
        }

    @classmethod
    def from_dict(cls, doc: Any, root_id: str | None = None) -> "ProgressRecord":
        """
        Validate and convert a stored document.

        Missing keys fall back to first-run values; anything present but of
        the wrong shape raises CorruptRecordError.
        """
        if not isinstance(doc, dict):
            raise CorruptRecordError(f"expected an object, got {type(doc).__name__}")

        default = cls.default(root_id)
        captured = _id_set(doc, "capturedTopics", default.captured_topics)
        unlocked = _id_set(doc, "unlockedTopics", default.unlocked_topics)
        attempts = _number_map(doc, "quizAttempts", integral=True)
        scores = _number_map(doc, "quizScores", integral=False)
        for tid, score in scores.items():
            if not 0 <= score <= 100:
                raise CorruptRecordError(f"quizScores[{tid!r}] out of range: {score}")

        last_activity = doc.get("lastActivity", default.last_activity)
        completion = doc.get("completionRate", 0.0)
        for key, value in (("lastActivity", last_activity), ("completionRate", completion)):
            if not _is_number(value):
                raise CorruptRecordError(f"{key} must be a number, got {value!r}")

        return cls(
            captured_topics=captured,
            unlocked_topics=unlocked,
            quiz_attempts=attempts,
            quiz_scores=scores,
            last_activity=int(last_activity),
            completion_rate=float(completion),
        )


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------
def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _id_set(doc: dict, key: str, fallback: frozenset[str]) -> frozenset[str]:
    if key not in doc:
        return fallback
    value = doc[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CorruptRecordError(f"{key} must be a list of topic ids")
    return frozenset(value)


def _number_map(doc: dict, key: str, integral: bool) -> dict:
    value = doc.get(key, {})
    if not isinstance(value, dict):
        raise CorruptRecordError(f"{key} must be an object")
    out: dict = {}
    for tid, n in value.items():
        if not _is_number(n) or n < 0:
            raise CorruptRecordError(f"{key}[{tid!r}] is not a non-negative number: {n!r}")
        if integral:
            if n != int(n):
                raise CorruptRecordError(f"{key}[{tid!r}] must be a whole number: {n!r}")
            n = int(n)
        out[tid] = n
    return out


_FIELD_FOR_KEY: dict[str, str] = {
    **{name: name for name in _WIRE_KEYS},
    **{wire: name for name, wire in _WIRE_KEYS.items()},
}


def field_for_key(key: str) -> str | None:
    """Accept either spelling (``quiz_scores`` / ``quizScores``)."""
    return _FIELD_FOR_KEY.get(key)
