"""
MathGalaxy — Flask REST API
===========================
Exposes the galaxy map, keyword discovery, quiz capture and explanations
as JSON endpoints that the React frontend consumes.  Every response that
changes progress carries the freshly recomputed node list, so the map can
re-render straight from it.

Endpoints
---------
GET    /api/health          — Health check
GET    /api/galaxy          — All topics with unlocked / captured flags + stats
GET    /api/topics/<id>     — One topic, its flags and its connected topics
POST   /api/discover        — Free-text question → matched + newly unlocked topics
POST   /api/quiz-result     — Record a quiz submission on an unlocked topic (captures on score >= 60)
POST   /api/explain         — Explanation for a topic (AI, or static fallback)
POST   /api/hint            — Hint for a quiz question
GET    /api/progress        — The stored progress record
DELETE /api/progress        — Forget all progress
"""
from __future__ import annotations

import logging
import time
import traceback
from typing import Any

from flask import Flask, jsonify, request
from flask_cors import CORS

# ── Backend imports ─────────────────────────────────────────────────
from ai_service import ExplanationService, TextGenerationClient
from config import AppConfig
from discovery import KeywordMatcher, get_matcher
from galaxy import get_galaxy
from graph import GalaxyGraph
from progress import JsonFileStorage, ProgressManager
from record import ProgressRecord
from unlock import (
    PASS_THRESHOLD,
    TopicView,
    is_passing,
    newly_unlocked_by,
    recompute_nodes,
    score_quiz,
    should_unlock,
)

# ── App setup ───────────────────────────────────────────────────────
app = Flask(__name__)
CORS(app)  # allow requests from the Vite dev server

logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(message)s")
log = logging.getLogger(__name__)

_config = AppConfig.from_env()
_graph: GalaxyGraph = get_galaxy()
_matcher: KeywordMatcher = get_matcher()
_matcher.validate_against(_graph)
for _src, _dst in _graph.dangling_edges():
    log.info("galaxy: %s lists unknown topic %s (ignored)", _src, _dst)

_progress = ProgressManager(JsonFileStorage(_config.data_dir), _graph)
_explainer = ExplanationService(TextGenerationClient(
    _config.ai_base_url,
    api_key=_config.ai_api_key,
    model=_config.ai_model,
    probe_timeout=_config.ai_probe_timeout,
    timeout=_config.ai_timeout,
))
log.info(
    "Galaxy loaded: %d topics, root=%s, text generation %s",
    _graph.num_topics, _graph.root_id,
    "configured" if _config.ai_base_url else "not configured (fallback content only)",
)


def configure(
    progress: ProgressManager | None = None,
    explainer: ExplanationService | None = None,
) -> None:
    """Swap collaborators (tests, embedding in another server)."""
    global _progress, _explainer
    if progress is not None:
        _progress = progress
    if explainer is not None:
        _explainer = explainer


# ═══════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════
def _stats(views: list[TopicView]) -> dict[str, int]:
    total = len(views)
    captured = sum(1 for v in views if v.captured)
    return {
        "totalTopics":          total,
        "capturedTopics":       captured,
        "unlockedTopics":       sum(1 for v in views if v.unlocked),
        "completionPercentage": int(captured / total * 100 + 0.5) if total else 0,
    }


def _galaxy_payload(record: ProgressRecord) -> dict[str, Any]:
    views = recompute_nodes(record, _graph)
    return {
        "nodes": [v.to_dict() for v in views],
        "stats": _stats(views),
    }


def _names(topic_ids) -> list[str]:
    """Display names in map order, unknown ids skipped."""
    wanted = set(topic_ids)
    return [n.name for n in _graph if n.id in wanted]


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════
@app.route("/api/health", methods=["GET"])
def health():
    return jsonify({
        "status":       "ok",
        "topics":       _graph.num_topics,
        "aiConfigured": bool(_config.ai_base_url),
    })


@app.route("/api/galaxy", methods=["GET"])
def galaxy():
    """
    Response JSON: { "nodes": [...], "stats": {...}, "rootTopic": "..." }
    """
    try:
        payload = _galaxy_payload(_progress.load())
        payload["rootTopic"] = _graph.root_id
        return jsonify(payload)
    except Exception as exc:
        log.error("galaxy failed: %s\n%s", exc, traceback.format_exc())
        return jsonify({"error": str(exc)}), 500


@app.route("/api/topics/<topic_id>", methods=["GET"])
def topic_detail(topic_id: str):
    i = _graph.index_of(topic_id)
    if i is None:
        return jsonify({"error": f"topic {topic_id!r} not found"}), 404

    record = _progress.load()
    views = recompute_nodes(record, _graph)
    view = views[i]
    connected = [views[_graph.index_of(n.id)].to_dict() for n in _graph.get_connected_topics(topic_id)]
    return jsonify({
        "topic":      view.to_dict(),
        "connected":  connected,
        "bestScore":  record.quiz_scores.get(topic_id),
        "attempts":   record.quiz_attempts.get(topic_id, 0),
    })


@app.route("/api/discover", methods=["POST"])
def discover():
    """
    Unlock topics from a free-text question.

    Request JSON:  { "query": "what is the pythagorean theorem" }
    Response JSON: { "matched": [...], "newlyUnlocked": [...], "message": "...",
                     "messageSource": "ai" | "fallback", "nodes": [...], "stats": {...} }
    """
    body = request.get_json(silent=True) or {}
    query = (body.get("query") or "").strip()
    if not query:
        return jsonify({"error": "missing 'query' field"}), 400

    log.info("discover  query=%r", query)
    t0 = time.time()

    try:
        matched = _matcher.match_topics(query)
        record, fresh = _progress.discover(matched)
        message, source = _explainer.discovery_reply(query, _names(matched))

        log.info(
            "discover  query=%r  matched=%d  new=%d  elapsed=%.2fs",
            query, len(matched), len(fresh), time.time() - t0,
        )
        payload = _galaxy_payload(record)
        payload.update({
            "query":         query,
            "matched":       sorted(matched),
            "newlyUnlocked": fresh,
            "message":       message,
            "messageSource": source,
        })
        return jsonify(payload)

    except Exception as exc:
        log.error("discover failed: %s\n%s", exc, traceback.format_exc())
        return jsonify({"error": str(exc)}), 500


@app.route("/api/quiz-result", methods=["POST"])
def quiz_result():
    """
    Record one quiz submission.

    Request JSON:  { "topicId": "quadratic-equations", "score": 75 }
                or { "topicId": "quadratic-equations", "correct": 3, "total": 4 }
    Response JSON: { "passed": true, "captured": true, "newlyUnlocked": [...],
                     "progress": {...}, "nodes": [...], "stats": {...} }
    409 when the topic is neither captured nor unlocked yet.
    """
    body = request.get_json(silent=True) or {}
    topic_id = (body.get("topicId") or "").strip()
    if not topic_id:
        return jsonify({"error": "missing 'topicId' field"}), 400
    if topic_id not in _graph:
        return jsonify({"error": f"topic {topic_id!r} not found"}), 404

    try:
        if "score" in body:
            score = body["score"]
        elif "correct" in body and "total" in body:
            score = score_quiz(int(body["correct"]), int(body["total"]))
        else:
            return jsonify({"error": "missing 'score' (or 'correct' and 'total')"}), 400
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            return jsonify({"error": f"invalid score: {score!r}"}), 400
    except (ValueError, TypeError) as exc:
        return jsonify({"error": str(exc)}), 400

    passed = is_passing(score)
    log.info("quiz-result  topic=%r  score=%s  passed=%s", topic_id, score, passed)

    before = _progress.load()
    if topic_id not in before.captured_topics and not should_unlock(topic_id, before, _graph):
        return jsonify({"error": f"topic {topic_id!r} is still locked"}), 409

    try:
        after = _progress.record_quiz_result(topic_id, score, passed)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:
        log.error("quiz-result failed: %s\n%s", exc, traceback.format_exc())
        return jsonify({"error": str(exc)}), 500

    payload = _galaxy_payload(after)
    payload.update({
        "topicId":       topic_id,
        "score":         score,
        "passed":        passed,
        "passThreshold": PASS_THRESHOLD,
        "captured":      topic_id in after.captured_topics,
        "newlyUnlocked": newly_unlocked_by(before, after, _graph),
        "progress":      after.to_dict(),
    })
    return jsonify(payload)


@app.route("/api/explain", methods=["POST"])
def explain():
    """
    Request JSON:  { "topicId": "discriminant", "query": "I didn't get it" }
    Response JSON: { "topic", "explanation", "keyPoints", "examples", "source" }
    """
    body = request.get_json(silent=True) or {}
    topic_id = (body.get("topicId") or "").strip()
    if not topic_id:
        return jsonify({"error": "missing 'topicId' field"}), 400
    node = _graph.get_topic_by_id(topic_id)
    if node is None:
        return jsonify({"error": f"topic {topic_id!r} not found"}), 404

    user_query = (body.get("query") or "").strip() or None
    log.info("explain  topic=%r", topic_id)
    try:
        explanation = _explainer.explain(node.name, node.description, user_query)
        return jsonify(explanation.to_dict())
    except Exception as exc:
        log.error("explain failed: %s\n%s", exc, traceback.format_exc())
        return jsonify({"error": str(exc)}), 500


@app.route("/api/hint", methods=["POST"])
def hint():
    body = request.get_json(silent=True) or {}
    question = (body.get("question") or "").strip()
    options = body.get("options") or []
    if not question:
        return jsonify({"error": "missing 'question' field"}), 400
    if not isinstance(options, list):
        return jsonify({"error": "'options' must be a list"}), 400

    text, source = _explainer.hint(question, [str(o) for o in options])
    return jsonify({"hint": text, "source": source})


@app.route("/api/progress", methods=["GET"])
def get_progress():
    record = _progress.load()
    return jsonify({
        "progress": record.to_dict(),
        "stats":    _stats(recompute_nodes(record, _graph)),
    })


@app.route("/api/progress", methods=["DELETE"])
def reset_progress():
    if not _progress.clear():
        return jsonify({"error": "could not clear stored progress"}), 500
    return jsonify(_galaxy_payload(_progress.load()))


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════
if __name__ == "__main__":
    app.run(host=_config.host, port=_config.port, debug=_config.debug)
