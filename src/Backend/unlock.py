"""
Unlock / Capture Engine  (pure functions + vectorised recomputation)
--------------------------------------------------------------------
Decides which stars on the galaxy map are open to the learner and applies
the effect of a quiz result to a ProgressRecord.

Rules:
  1. A topic is unlocked if it was explicitly unlocked (sticky), if it is
     the graph root, or if ANY id in its *own* connected_topics list has
     been captured.  One hop, directional: the neighbour does not have to
     list this topic back.
  2. A passed quiz captures the topic.  Capture is never reversed; retries
     only accumulate attempts and raise the best score.
  3. Nothing here mutates a ProgressRecord — every change returns a new one.

The recomputation pass evaluates rule 1 for every node at once: one boolean
reduction over the (N, N) adjacency matrix instead of N Python lookups.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np

from discovery import newly_unlocked
from galaxy import get_galaxy
from graph import GalaxyGraph, TopicNode
from record import ProgressRecord

log = logging.getLogger(__name__)

# passed <=> score >= PASS_THRESHOLD; enforced by callers of record_quiz_result
PASS_THRESHOLD = 60
MAX_SCORE = 100


def _resolve(graph: GalaxyGraph | None) -> GalaxyGraph:
    return graph if graph is not None else get_galaxy()


# ---------------------------------------------------------------------------
# Scoring helpers
# ---------------------------------------------------------------------------
def is_passing(score: float) -> bool:
    return score >= PASS_THRESHOLD


def score_quiz(correct: int, total: int) -> int:
    """Percentage score, rounded half-up (3 of 8 → 38)."""
    if total <= 0:
        raise ValueError("a quiz needs at least one question")
    if not 0 <= correct <= total:
        raise ValueError(f"correct answers must be in [0, {total}], got {correct}")
    return math.floor(correct * MAX_SCORE / total + 0.5)


def _check_score(score: Any) -> float:
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        raise ValueError(f"score must be a number, got {score!r}")
    if not 0 <= score <= MAX_SCORE:
        raise ValueError(f"score must be in [0, {MAX_SCORE}], got {score}")
    return score


def completion_rate(captured: Iterable[str], graph: GalaxyGraph | None = None) -> float:
    """Captured share of the live topic count, as a percentage."""
    g = _resolve(graph)
    if g.num_topics == 0:
        return 0.0
    known = sum(1 for tid in set(captured) if tid in g)
    return known / g.num_topics * 100


# ---------------------------------------------------------------------------
# Per-topic rule
# ---------------------------------------------------------------------------
def should_unlock(
    topic_id: str,
    progress: ProgressRecord,
    graph: GalaxyGraph | None = None,
) -> bool:
    """True when *topic_id* is open for learning under *progress*."""
    g = _resolve(graph)
    topic = g.get_topic_by_id(topic_id)
    if topic is None:
        return False
    if topic_id in progress.unlocked_topics or topic_id == g.root_id:
        return True
    return any(cid in progress.captured_topics for cid in topic.connected_topics)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------
def record_quiz_result(
    topic_id: str,
    score: float,
    passed: bool,
    progress: ProgressRecord,
    graph: GalaxyGraph | None = None,
) -> ProgressRecord:
    """
    Apply one quiz submission.

    Attempts +1, best score kept, topic captured if *passed*.  The *passed*
    flag is trusted as given.  Unknown topics leave the record unchanged.
    """
    score = _check_score(score)
    g = _resolve(graph)
    if topic_id not in g:
        log.warning("quiz result for unknown topic %r ignored", topic_id)
        return progress

    attempts = dict(progress.quiz_attempts)
    attempts[topic_id] = attempts.get(topic_id, 0) + 1

    scores = dict(progress.quiz_scores)
    scores[topic_id] = max(scores.get(topic_id, 0), score)

    captured = progress.captured_topics
    if passed and topic_id not in captured:
        captured = captured | {topic_id}

    return dataclasses.replace(
        progress,
        captured_topics=captured,
        quiz_attempts=attempts,
        quiz_scores=scores,
        completion_rate=completion_rate(captured, g),
    )


def unlock_topics(
    topic_ids: Iterable[str],
    progress: ProgressRecord,
    graph: GalaxyGraph | None = None,
) -> tuple[ProgressRecord, list[str]]:
    """
    Merge discovered ids into unlocked_topics.

    Returns (new record, newly unlocked ids).  Ids that are unknown, already
    unlocked or already captured are not reported again.
    """
    g = _resolve(graph)
    fresh = [tid for tid in newly_unlocked(topic_ids, progress) if tid in g]
    if not fresh:
        return progress, []
    return (
        dataclasses.replace(progress, unlocked_topics=progress.unlocked_topics | set(fresh)),
        fresh,
    )


# ---------------------------------------------------------------------------
# Derived view  (never stored, recomputed from the record every time)
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class TopicView:
    node: TopicNode
    unlocked: bool
    captured: bool

    def to_dict(self) -> dict[str, Any]:
        n = self.node
        return {
            "id":              n.id,
            "name":            n.name,
            "description":     n.description,
            "difficulty":      n.difficulty.value,
            "position":        {"x": n.position[0], "y": n.position[1]},
            "connectedTopics": list(n.connected_topics),
            "color":           n.color,
            "unlocked":        self.unlocked,
            "captured":        self.captured,
        }


def _membership(ids: Iterable[str], graph: GalaxyGraph) -> np.ndarray:
    vec = np.zeros(graph.num_topics, dtype=bool)
    idx = [i for i in (graph.index_of(tid) for tid in ids) if i is not None]
    if idx:
        vec[np.array(idx)] = True
    return vec


def unlock_vector(progress: ProgressRecord, graph: GalaxyGraph | None = None) -> np.ndarray:
    """
    (N,) bool, entry i <=> should_unlock(node i).

    explicit | root | any(adj[i, j] & captured[j])
    """
    g = _resolve(graph)
    if g.num_topics == 0:
        return np.zeros(0, dtype=bool)
    captured = _membership(progress.captured_topics, g)
    explicit = _membership(progress.unlocked_topics, g)
    if g.root_id is not None:
        explicit[g.index_of(g.root_id)] = True
    adj = g.build_adjacency_numpy()
    return explicit | (adj & captured[np.newaxis, :]).any(axis=1)


def recompute_nodes(progress: ProgressRecord, graph: GalaxyGraph | None = None) -> list[TopicView]:
    """Full sweep: flags for every node, in definition order."""
    g = _resolve(graph)
    unlocked = unlock_vector(progress, g)
    captured = _membership(progress.captured_topics, g)
    return [
        TopicView(node=node, unlocked=bool(unlocked[i]), captured=bool(captured[i]))
        for i, node in enumerate(g)
    ]


def newly_unlocked_by(
    before: ProgressRecord,
    after: ProgressRecord,
    graph: GalaxyGraph | None = None,
) -> list[str]:
    """Ids locked under *before* and unlocked under *after* (definition order)."""
    g = _resolve(graph)
    opened = unlock_vector(after, g) & ~unlock_vector(before, g)
    ids = g.ids
    return [ids[i] for i in np.flatnonzero(opened)]
