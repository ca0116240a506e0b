"""
Progress Record Manager
=======================
The single gateway between the engine and the persistence collaborator.

  load()    → stored record, or the first-run default when nothing is stored
              or the stored document is unreadable / structurally invalid
  save()    → best effort; failures are logged and reported as False
  update()  → field-level replace on the loaded record
  clear()   → forget everything (first-run condition)

The record lives as one JSON document under PROGRESS_STORAGE_KEY.

update() is a read-modify-write with no locking: one writer (the single
interactive session) is assumed.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

from galaxy import get_galaxy
from graph import GalaxyGraph
from record import CorruptRecordError, ProgressRecord, field_for_key, now_ms
from unlock import completion_rate, record_quiz_result, unlock_topics

log = logging.getLogger(__name__)

PROGRESS_STORAGE_KEY = "mathgalaxy-progress"


# ═══════════════════════════════════════════════════════════════════
# Storage collaborators
# ═══════════════════════════════════════════════════════════════════
class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage (tests, throwaway sessions)."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage:
    """
    One ``<key>.json`` file per key inside *directory*.

    Writes go to a temp file in the same directory and are moved into place,
    so a crash mid-write never leaves a half-written document behind.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


# ═══════════════════════════════════════════════════════════════════
# Manager
# ═══════════════════════════════════════════════════════════════════
class ProgressManager:

    def __init__(
        self,
        storage: KeyValueStorage,
        graph: GalaxyGraph | None = None,
        key: str = PROGRESS_STORAGE_KEY,
    ) -> None:
        self.storage = storage
        self.graph = graph if graph is not None else get_galaxy()
        self.key = key

    def default(self) -> ProgressRecord:
        return ProgressRecord.default(self.graph.root_id)

    # ---- load / save / clear ----------------------------------------------
    def load(self) -> ProgressRecord:
        try:
            raw = self.storage.get(self.key)
        except (OSError, ValueError) as exc:
            log.warning("progress unreadable (%s) — using defaults", exc)
            return self.default()
        if raw is None:
            return self.default()
        try:
            record = ProgressRecord.from_dict(json.loads(raw), root_id=self.graph.root_id)
        except (json.JSONDecodeError, CorruptRecordError) as exc:
            log.warning("progress record corrupt (%s) — using defaults", exc)
            return self.default()
        # completion_rate always describes captured_topics, whatever was stored
        return dataclasses.replace(
            record, completion_rate=completion_rate(record.captured_topics, self.graph),
        )

    def stamp(self, record: ProgressRecord) -> ProgressRecord:
        """The record as it will be written: fresh timestamp, recomputed rate."""
        return dataclasses.replace(
            record,
            last_activity=now_ms(),
            completion_rate=completion_rate(record.captured_topics, self.graph),
        )

    def save(self, record: ProgressRecord) -> bool:
        """Persist *record*; returns False (after logging) when the write fails."""
        return self._write(self.stamp(record))

    def _write(self, stamped: ProgressRecord) -> bool:
        try:
            self.storage.set(self.key, json.dumps(stamped.to_dict()))
        except (OSError, ValueError, TypeError) as exc:
            log.error("failed to save progress: %s", exc)
            return False
        return True

    def _commit(self, record: ProgressRecord) -> ProgressRecord:
        stamped = self.stamp(record)
        self._write(stamped)
        return stamped

    def clear(self) -> bool:
        try:
            self.storage.remove(self.key)
        except (OSError, ValueError) as exc:
            log.error("failed to clear progress: %s", exc)
            return False
        log.info("progress cleared")
        return True

    # ---- partial update ----------------------------------------------------
    def update(self, partial: Mapping[str, Any]) -> ProgressRecord:
        """
        Replace whole fields of the loaded record.  Keys may be snake_case or
        the stored camelCase; maps replace their prior value wholesale.
        """
        changes: dict[str, Any] = {}
        for key, value in partial.items():
            name = field_for_key(key)
            if name is None:
                raise ValueError(f"unknown progress field: {key!r}")
            if name in ("captured_topics", "unlocked_topics"):
                value = frozenset(value)
            elif name in ("quiz_attempts", "quiz_scores"):
                value = dict(value)
            changes[name] = value

        return self._commit(dataclasses.replace(self.load(), **changes))

    # ---- engine round-trips  (load → transition → save) -------------------
    def record_quiz_result(self, topic_id: str, score: float, passed: bool) -> ProgressRecord:
        record = record_quiz_result(topic_id, score, passed, self.load(), self.graph)
        return self._commit(record)

    def discover(self, topic_ids: Iterable[str]) -> tuple[ProgressRecord, list[str]]:
        """Unlock discovered ids; returns (record, newly unlocked ids)."""
        record, fresh = unlock_topics(topic_ids, self.load(), self.graph)
        if fresh:
            record = self._commit(record)
        return record, fresh
