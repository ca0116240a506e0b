from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

"""
MathGalaxy Topic Graph  (immutable, built once per process)
-----------------------------------------------------------
The galaxy map is a directed graph of topic nodes:

  • TopicNode is a frozen, slotted record → safe to share between views
  • Adjacency is the node's own ordered ``connected_topics`` list;
    edges need not be symmetric and dangling ids are tolerated
  • id index dict → O(1) lookup; duplicate ids rejected at build time
  • Name index dict → O(1) lookup by display name (case-insensitive)
  • Dense adjacency matrix is cached for the vectorised unlock sweep

Derived per-user flags (unlocked / captured) are *not* stored here; see
unlock.recompute_nodes().
"""


# ---------------------------------------------------------------------------
# Difficulty labels (informational only, never used in unlock logic)
# ---------------------------------------------------------------------------
class Difficulty(Enum):
	BEGINNER = "beginner"
	INTERMEDIATE = "intermediate"
	ADVANCED = "advanced"

# Mapping from string → enum for spec-based construction
_DIFFICULTY_MAP: dict[str, Difficulty] = {d.value: d for d in Difficulty}


# ---------------------------------------------------------------------------
# Topic node
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class TopicNode:
	"""A single star on the galaxy map."""
	id: str
	name: str
	description: str = ""
	difficulty: Difficulty = Difficulty.BEGINNER
	position: tuple[float, float] = (0.0, 0.0)
	connected_topics: tuple[str, ...] = ()
	color: str = "#6b7280"

	def __repr__(self) -> str:
		return f"TopicNode({self.id!r}, '{self.name}', {self.difficulty.name})"


# ---------------------------------------------------------------------------
# Lightweight spec type used by from_spec()
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class TopicSpec:
	"""Plain-data description of a topic — what galaxy.py is written in."""
	id: str
	name: str
	description: str = ""
	difficulty: str = "beginner"                # key into _DIFFICULTY_MAP
	position: tuple[float, float] = (0.0, 0.0)
	connected_topics: list[str] = field(default_factory=list)
	color: str = "#6b7280"


# ---------------------------------------------------------------------------
# GalaxyGraph
# ---------------------------------------------------------------------------
class GalaxyGraph:
	"""
	Read-only store of TopicNodes in definition order.

	A missing id is never an error: lookups return None / empty lists and
	callers skip the topic.
	"""

	__slots__ = ("_nodes", "_index", "_name_index", "_root_id", "_adjacency_cache")

	def __init__(self, nodes: Iterable[TopicNode], root_id: str | None = None) -> None:
		self._nodes: tuple[TopicNode, ...] = tuple(nodes)
		self._index: dict[str, int] = {}
		self._name_index: dict[str, str] = {}          # lower(name) → id (first wins)
		for i, node in enumerate(self._nodes):
			if node.id in self._index:
				raise ValueError(f"topic id {node.id!r} already exists")
			self._index[node.id] = i
			self._name_index.setdefault(node.name.lower(), node.id)

		if root_id is None and self._nodes:
			root_id = self._nodes[0].id
		if root_id is not None and root_id not in self._index:
			raise ValueError(f"root topic {root_id!r} is not in the graph")
		self._root_id = root_id
		self._adjacency_cache: np.ndarray | None = None

	# ---- helpers -----------------------------------------------------------
	@property
	def num_topics(self) -> int:
		return len(self._nodes)

	@property
	def root_id(self) -> str | None:
		"""The topic unlocked before any progress exists."""
		return self._root_id

	@property
	def ids(self) -> list[str]:
		return [n.id for n in self._nodes]

	def __len__(self) -> int:
		return len(self._nodes)

	def __iter__(self) -> Iterator[TopicNode]:
		return iter(self._nodes)

	def __contains__(self, topic_id: object) -> bool:
		return topic_id in self._index

	def index_of(self, topic_id: str) -> int | None:
		"""Dense position of *topic_id* in definition order."""
		return self._index.get(topic_id)

	# ---- lookups -----------------------------------------------------------
	def get_topic_by_id(self, topic_id: str) -> TopicNode | None:
		i = self._index.get(topic_id)
		return self._nodes[i] if i is not None else None

	def get_topic_by_name(self, name: str) -> TopicNode | None:
		"""O(1) lookup by display name (case-insensitive)."""
		tid = self._name_index.get(name.strip().lower())
		return self.get_topic_by_id(tid) if tid is not None else None

	def get_connected_topics(self, topic_id: str) -> list[TopicNode]:
		"""Resolve the adjacency list, silently dropping dangling ids."""
		topic = self.get_topic_by_id(topic_id)
		if topic is None:
			return []
		return [
			self._nodes[self._index[cid]]
			for cid in topic.connected_topics
			if cid in self._index
		]

	def dangling_edges(self) -> list[tuple[str, str]]:
		"""(node, missing neighbour) pairs — tolerated, but worth reporting."""
		return [
			(n.id, cid)
			for n in self._nodes
			for cid in n.connected_topics
			if cid not in self._index
		]

	# ---- matrices ----------------------------------------------------------
	def build_adjacency_numpy(self) -> np.ndarray:
		"""
		(N, N) bool matrix, adj[i, j] <=> node i lists node j as connected.
		Directional — exactly the raw adjacency, never symmetrised.
		"""
		if self._adjacency_cache is not None:
			return self._adjacency_cache
		n = len(self._nodes)
		adj = np.zeros((n, n), dtype=bool)
		rows: list[int] = []
		cols: list[int] = []
		for i, node in enumerate(self._nodes):
			for cid in node.connected_topics:
				j = self._index.get(cid)
				if j is not None:
					rows.append(i)
					cols.append(j)
		if rows:
			adj[np.array(rows), np.array(cols)] = True
		adj.setflags(write=False)
		self._adjacency_cache = adj
		return adj

	# ---- spec-based build ---------------------------------------------------
	@classmethod
	def from_spec(
		cls,
		specs: Iterable[TopicSpec] | Iterable[dict],
		root_id: str | None = None,
	) -> "GalaxyGraph":
		"""
		Build a graph from a list of specs.
		Each spec is either a TopicSpec or a dict with keys:
			id, name, description, difficulty, position, connected_topics, color
		"""
		nodes: list[TopicNode] = []
		for s in specs:
			if isinstance(s, dict):
				s = TopicSpec(
					id=s["id"],
					name=s["name"],
					description=s.get("description", ""),
					difficulty=s.get("difficulty", "beginner"),
					position=tuple(s.get("position", (0.0, 0.0))),
					connected_topics=list(s.get("connected_topics", [])),
					color=s.get("color", "#6b7280"),
				)
			try:
				difficulty = _DIFFICULTY_MAP[s.difficulty.lower()]
			except KeyError:
				raise ValueError(
					f"unknown difficulty {s.difficulty!r} for topic {s.id!r}"
				) from None
			nodes.append(TopicNode(
				id=s.id,
				name=s.name,
				description=s.description,
				difficulty=difficulty,
				position=(float(s.position[0]), float(s.position[1])),
				connected_topics=tuple(s.connected_topics),
				color=s.color,
			))
		return cls(nodes, root_id=root_id)

	# ---- pretty printing ---------------------------------------------------
	def print_galaxy(self) -> None:
		print("=== MathGalaxy Topics ===")
		for i, n in enumerate(self._nodes, 1):
			links = ", ".join(n.connected_topics) or "none"
			root = " (root)" if n.id == self._root_id else ""
			print(f"  {i}. {n.id}{root} [{n.difficulty.value}] → {links}")
		print(f"\n{self.num_topics} topics, {len(self.dangling_edges())} dangling edge(s)")


# ---------------------------------------------------------------------------
# Demo
# ---------------------------------------------------------------------------
if __name__ == "__main__":
	from galaxy import get_galaxy

	g = get_galaxy()
	g.print_galaxy()
	for src, dst in g.dangling_edges():
		print(f"  dangling: {src} → {dst}")
