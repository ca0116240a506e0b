"""
Static fallback content
=======================
What the learner sees when the text-generation service cannot answer:
canned explanations keyed by topic *name*, a generic explanation for every
other topic, and canned hint / discovery messages.

ContentBank refuses duplicate keys when it is built — a second entry for
the same key is a data bug, not an override.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class Explanation:
    topic: str
    explanation: str
    key_points: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    source: str = "fallback"          # "ai" | "fallback"

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic":       self.topic,
            "explanation": self.explanation,
            "keyPoints":   list(self.key_points),
            "examples":    list(self.examples),
            "source":      self.source,
        }


class ContentBank(Mapping[str, V], Generic[V]):
    """Read-only, case-insensitive lookup table built from (key, value) pairs."""

    def __init__(self, entries: Iterable[tuple[str, V]]) -> None:
        self._items: dict[str, V] = {}
        for key, value in entries:
            norm = key.strip().lower()
            if norm in self._items:
                raise ValueError(f"duplicate content key: {key!r}")
            self._items[norm] = value

    def __getitem__(self, key: str) -> V:
        return self._items[key.strip().lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Explanations
# ---------------------------------------------------------------------------
def _explanation(topic: str, text: str, key_points: list[str], examples: list[str]) -> tuple[str, Explanation]:
    return topic, Explanation(topic, text, tuple(key_points), tuple(examples))


FALLBACK_EXPLANATIONS: ContentBank[Explanation] = ContentBank([
    _explanation(
        "Quadratic Equations",
        "A quadratic equation describes a curve called a parabola, like the path of a "
        "ball thrown in the air. The standard form is ax² + bx + c = 0, where a, b and c "
        "are numbers and x is the unknown. The x² term is what makes it quadratic. These "
        "equations show up in projectile motion, bridge design and profit calculations.",
        [
            "Standard form: ax² + bx + c = 0, where a ≠ 0",
            "The x² term is what makes it quadratic",
            "Solutions are where the parabola crosses the x-axis",
            "Can have 0, 1, or 2 real solutions",
        ],
        [
            "x² - 5x + 6 = 0 (simple quadratic)",
            "2x² + 3x - 2 = 0 (with coefficient)",
            "x² = 16 (missing linear term)",
        ],
    ),
    _explanation(
        "Quadratic Formula",
        "The quadratic formula solves any quadratic equation, even when factoring looks "
        "impossible: x = (-b ± √(b²-4ac)) / 2a. Read off a, b and c from ax² + bx + c = 0, "
        "substitute, and simplify. The ± gives two answers; the part under the square root "
        "is the discriminant.",
        [
            "Works for ANY quadratic equation",
            "Formula: x = (-b ± √(b²-4ac)) / 2a",
            "The ± gives you two solutions",
            "The discriminant (b²-4ac) determines the nature of solutions",
        ],
        [
            "For x² - 5x + 6 = 0: a=1, b=-5, c=6",
            "For 2x² + 3x - 2 = 0: a=2, b=3, c=-2",
            "Plug values into formula and simplify",
        ],
    ),
    _explanation(
        "Parabola Graphs",
        "A parabola is the U-shaped graph of y = ax² + bx + c. If a is positive it opens "
        "upward, if negative it opens downward. The turning point is the vertex, and the "
        "x-intercepts are the solutions of the equation.",
        [
            "Parabolas are U-shaped curves",
            "a > 0: opens upward, a < 0: opens downward",
            "Vertex is the highest/lowest point",
            "x-intercepts are the solutions to the equation",
        ],
        [
            "y = x² (simplest parabola, vertex at origin)",
            "y = -x² + 4 (opens downward, vertex at (0,4))",
            "y = (x-2)² + 1 (shifted right 2, up 1)",
        ],
    ),
    _explanation(
        "Vertex Form",
        "Vertex form writes a quadratic as y = a(x-h)² + k, so the vertex (h, k) can be "
        "read off directly. The value of a still controls direction and width.",
        [
            "Form: y = a(x-h)² + k",
            "Vertex is at point (h, k)",
            "a determines direction and width",
            "Easy to graph from this form",
        ],
        [
            "y = (x-3)² + 2 has vertex at (3, 2)",
            "y = -2(x+1)² - 4 has vertex at (-1, -4)",
            "y = ½(x-0)² + 5 has vertex at (0, 5)",
        ],
    ),
    _explanation(
        "Completing the Square",
        "Completing the square rewrites a quadratic as a perfect square plus a constant, "
        "which turns standard form into vertex form. Halve the b coefficient, square it, "
        "add and subtract it, then factor. It is also how the quadratic formula is derived.",
        [
            "Converts standard form to vertex form",
            "Creates a perfect square trinomial",
            "Used to derive the quadratic formula",
            "Steps: isolate x terms, complete square, factor",
        ],
        [
            "x² + 6x + 5 → (x+3)² - 4",
            "x² - 8x + 10 → (x-4)² - 6",
            "2x² + 12x + 14 → 2(x+3)² - 4",
        ],
    ),
    _explanation(
        "Discriminant",
        "The discriminant b² - 4ac tells you what kind of solutions a quadratic has before "
        "you solve it: positive means two real roots, zero means one repeated root, "
        "negative means two complex roots.",
        [
            "Discriminant: Δ = b² - 4ac",
            "Δ > 0: two distinct real solutions",
            "Δ = 0: one repeated real solution",
            "Δ < 0: two complex solutions",
        ],
        [
            "x² - 5x + 6 = 0: Δ = 25-24 = 1 (two solutions)",
            "x² - 4x + 4 = 0: Δ = 16-16 = 0 (one solution)",
            "x² + 2x + 5 = 0: Δ = 4-20 = -16 (complex)",
        ],
    ),
    _explanation(
        "Factorization",
        "Factorization writes ax² + bx + c as a product of two simpler factors. By the "
        "zero product property, each factor set to zero gives a solution. Look for two "
        "numbers that multiply to ac and add to b.",
        [
            "Breaks quadratic into product of two factors",
            "Form: (x + p)(x + q) = 0",
            "Solutions are x = -p and x = -q",
            "Only works when factors are rational",
        ],
        [
            "x² + 5x + 6 = (x+2)(x+3)",
            "x² - 9 = (x+3)(x-3) (difference of squares)",
            "2x² + 7x + 3 = (2x+1)(x+3)",
        ],
    ),
    _explanation(
        "Real-World Applications",
        "Anything that follows a curved path or has a best value is a candidate for a "
        "quadratic model: projectiles, arches and satellite dishes, and profit functions "
        "with an optimal price.",
        [
            "Projectile motion in physics",
            "Profit optimization in business",
            "Architectural design (arches, bridges)",
            "Area and perimeter problems",
        ],
        [
            "Ball trajectory: h(t) = -16t² + 64t + 5",
            "Profit function: P(x) = -2x² + 100x - 500",
            "Bridge arch: y = -0.01x² + 50",
        ],
    ),
    _explanation(
        "Complex Roots",
        "When the discriminant is negative the solutions involve the imaginary unit i, "
        "where i² = -1. Complex roots of a real quadratic always come in conjugate pairs "
        "a ± bi and appear throughout engineering and physics.",
        [
            "Occur when discriminant < 0",
            "Involve imaginary unit i where i² = -1",
            "Always come in conjugate pairs",
            "Form: x = a ± bi",
        ],
        [
            "x² + 4 = 0 has solutions x = ±2i",
            "x² - 2x + 5 = 0 has solutions x = 1 ± 2i",
            "Used in electrical engineering and quantum physics",
        ],
    ),
])


def generic_explanation(topic: str) -> Explanation:
    return Explanation(
        topic=topic,
        explanation="This topic explores important mathematical concepts that build on your existing knowledge.",
        key_points=("Understanding the fundamentals", "Applying to problems", "Connecting to other topics"),
        examples=("Example 1", "Example 2"),
    )


def fallback_explanation(topic: str) -> Explanation:
    """Keyed content for *topic* (by display name), else the generic text."""
    return FALLBACK_EXPLANATIONS.get(topic) or generic_explanation(topic)


# ---------------------------------------------------------------------------
# Canned messages
# ---------------------------------------------------------------------------
FALLBACK_HINT = (
    "Think about the key concepts we just learned. "
    "Try eliminating options that don't make sense first."
)


def discovery_message(topic_names: list[str]) -> str:
    """Canned reply to a discovery question."""
    if not topic_names:
        return (
            "I couldn't find a matching star yet. Try asking about quadratics, "
            "geometry, trigonometry, calculus or statistics."
        )
    if len(topic_names) == 1:
        return f"Great question! That's part of {topic_names[0]}. Open it on the map to start learning."
    listed = ", ".join(topic_names[:-1]) + f" and {topic_names[-1]}"
    return f"Great question! It touches {listed}. Open them on the map to start learning."

