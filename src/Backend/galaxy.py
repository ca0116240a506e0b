"""
The canonical MathGalaxy topic map.

Six curriculum clusters (algebra, quadratics, geometry, trigonometry,
calculus, statistics) around the quadratics starting point, plus the
"Under Construction" expansion systems on the outer rim.  Plain data;
get_galaxy() builds the process-wide GalaxyGraph once.
"""
from __future__ import annotations

from functools import lru_cache

from graph import GalaxyGraph

ROOT_TOPIC_ID = "quadratic-equations"

_PLACEHOLDER_NAME = "Under Construction"
_PLACEHOLDER_DESC = "Future mathematical topic coming soon!"
_PLACEHOLDER_COLOR = "#6b7280"


# ---------------------------------------------------------------------------
# Curriculum clusters
# ---------------------------------------------------------------------------
GALAXY_TOPICS: list[dict] = [
    # === Algebra (top-left) ===
    {"id": "algebra-overview",   "name": "Introduction to Algebra", "description": "Foundation of algebraic thinking and operations",          "difficulty": "beginner",     "position": (-400, -300), "connected_topics": ["linear-equations", "systems-of-equations", "polynomials"], "color": "#3b82f6"},
    {"id": "linear-equations",   "name": "Linear Equations",        "description": "Mastering ax + b = c equations",                            "difficulty": "beginner",     "position": (-500, -200), "connected_topics": ["algebra-overview", "systems-of-equations"], "color": "#60a5fa"},
    {"id": "systems-of-equations", "name": "Systems of Equations",  "description": "Solving multiple equations simultaneously",                 "difficulty": "intermediate", "position": (-400, -150), "connected_topics": ["linear-equations", "algebra-overview", "matrices"], "color": "#93c5fd"},
    {"id": "polynomials",        "name": "Polynomials",             "description": "Operations with polynomial expressions",                    "difficulty": "intermediate", "position": (-300, -250), "connected_topics": ["algebra-overview", "rational-functions"], "color": "#dbeafe"},
    {"id": "matrices",           "name": "Matrices & Vectors",      "description": "Matrix operations and vector spaces",                       "difficulty": "advanced",     "position": (-350, -100), "connected_topics": ["systems-of-equations"], "color": "#1e40af"},
    {"id": "rational-functions", "name": "Rational Functions",      "description": "Functions with polynomials in numerator and denominator",   "difficulty": "advanced",     "position": (-250, -200), "connected_topics": ["polynomials"], "color": "#1d4ed8"},

    # === Quadratics (centre, the starting point) ===
    {"id": "quadratic-equations", "name": "Quadratic Equations",    "description": "Understanding equations of the form ax² + bx + c = 0",      "difficulty": "beginner",     "position": (0, 0),       "connected_topics": ["quadratic-formula", "parabola-graphs", "factorization", "algebra-overview"], "color": "#8b5cf6"},
    {"id": "quadratic-formula",  "name": "Quadratic Formula",       "description": "Solving quadratics using x = (-b ± √(b²-4ac)) / 2a",        "difficulty": "beginner",     "position": (120, -80),   "connected_topics": ["quadratic-equations", "discriminant", "complex-roots"], "color": "#a78bfa"},
    {"id": "parabola-graphs",    "name": "Parabola Graphs",         "description": "Visual representation of quadratic functions",              "difficulty": "beginner",     "position": (-120, -80),  "connected_topics": ["quadratic-equations", "vertex-form", "real-world-applications"], "color": "#c4b5fd"},
    {"id": "vertex-form",        "name": "Vertex Form",             "description": "Expressing quadratics as a(x-h)² + k",                      "difficulty": "intermediate", "position": (-160, 40),   "connected_topics": ["parabola-graphs", "completing-square"], "color": "#ddd6fe"},
    {"id": "completing-square",  "name": "Completing the Square",   "description": "Algebraic technique to convert to vertex form",             "difficulty": "intermediate", "position": (-80, 120),   "connected_topics": ["vertex-form", "quadratic-formula", "quadratic-equations"], "color": "#f0e5ff"},
    {"id": "discriminant",       "name": "Discriminant",            "description": "Understanding b² - 4ac and nature of roots",                "difficulty": "intermediate", "position": (160, 40),    "connected_topics": ["quadratic-formula", "complex-roots"], "color": "#9c6ade"},
    {"id": "factorization",      "name": "Factorization",           "description": "Breaking down quadratics into (x-p)(x-q) form",             "difficulty": "beginner",     "position": (80, 120),    "connected_topics": ["quadratic-equations", "quadratic-formula"], "color": "#b794f6"},
    {"id": "real-world-applications", "name": "Real-World Applications", "description": "Using quadratics in physics, engineering, and economics", "difficulty": "advanced", "position": (-200, -160), "connected_topics": ["parabola-graphs", "vertex-form"], "color": "#6b21a8"},
    {"id": "complex-roots",      "name": "Complex Roots",           "description": "Understanding solutions when discriminant is negative",     "difficulty": "advanced",     "position": (200, -160),  "connected_topics": ["discriminant", "quadratic-formula"], "color": "#7c2d92"},

    # === Geometry (top-right) ===
    {"id": "geometry-basics",    "name": "Geometry Foundations",    "description": "Points, lines, polygons, and basic shapes",                 "difficulty": "beginner",     "position": (400, -300),  "connected_topics": ["triangles", "quadrilaterals", "circles", "area-volume"], "color": "#10b981"},
    {"id": "triangles",          "name": "Triangles & Trigonometry", "description": "Triangle properties and trigonometric functions",          "difficulty": "beginner",     "position": (500, -200),  "connected_topics": ["geometry-basics", "trigonometric-functions"], "color": "#34d399"},
    {"id": "quadrilaterals",     "name": "Quadrilaterals",          "description": "Properties of four-sided polygons",                         "difficulty": "beginner",     "position": (300, -250),  "connected_topics": ["geometry-basics"], "color": "#6ee7b7"},
    {"id": "circles",            "name": "Circles & Arcs",          "description": "Circle theorems and circle geometry",                       "difficulty": "intermediate", "position": (400, -150),  "connected_topics": ["geometry-basics", "area-volume"], "color": "#4ade80"},
    {"id": "area-volume",        "name": "Area & Volume",           "description": "Surface areas and volumes of 2D/3D shapes",                 "difficulty": "intermediate", "position": (350, -100),  "connected_topics": ["geometry-basics", "circles", "coordinate-geometry"], "color": "#16a34a"},
    {"id": "coordinate-geometry", "name": "Coordinate Geometry",    "description": "Geometry using coordinate planes and formulas",             "difficulty": "advanced",     "position": (280, -50),   "connected_topics": ["area-volume"], "color": "#15803d"},

    # === Trigonometry (right) ===
    {"id": "trigonometric-functions", "name": "Trig Functions",     "description": "Sin, cos, tan and their properties",                        "difficulty": "intermediate", "position": (350, 0),     "connected_topics": ["triangles", "trig-identities", "trig-equations", "inverse-trig"], "color": "#f59e0b"},
    {"id": "trig-identities",    "name": "Trig Identities",         "description": "Fundamental relationships between trigonometric functions", "difficulty": "intermediate", "position": (280, 50),    "connected_topics": ["trigonometric-functions", "trig-equations"], "color": "#fbbf24"},
    {"id": "trig-equations",     "name": "Trig Equations",          "description": "Solving equations involving trigonometric functions",       "difficulty": "advanced",     "position": (320, 80),    "connected_topics": ["trig-identities", "trigonometric-functions"], "color": "#f59e0b"},
    {"id": "inverse-trig",       "name": "Inverse Trig Functions",  "description": "Arcsin, arccos, arctan and their applications",             "difficulty": "advanced",     "position": (400, 50),    "connected_topics": ["trigonometric-functions"], "color": "#d97706"},

    # === Calculus (bottom-right); "calculus-overview" is a known dangling edge ===
    {"id": "limits",             "name": "Limits & Continuity",     "description": "Understanding limits and continuous functions",             "difficulty": "intermediate", "position": (400, 300),   "connected_topics": ["derivatives", "calculus-overview", "functions-analysis"], "color": "#ef4444"},
    {"id": "functions-analysis", "name": "Functions Analysis",      "description": "Analyzing functions before calculus concepts",              "difficulty": "beginner",     "position": (300, 250),   "connected_topics": ["limits", "series-sequences"], "color": "#f87171"},
    {"id": "derivatives",        "name": "Derivatives",             "description": "Rates of change, slopes, and tangent lines",                "difficulty": "intermediate", "position": (450, 200),   "connected_topics": ["limits", "integrals", "applications-derivatives"], "color": "#dc2626"},
    {"id": "integrals",          "name": "Integrals",               "description": "Anti-derivatives, definite integrals, and areas",           "difficulty": "advanced",     "position": (350, 150),   "connected_topics": ["derivatives", "applications-integrals"], "color": "#b91c1c"},
    {"id": "applications-derivatives", "name": "Applications of Derivatives", "description": "Optimization, rates, and related rates problems", "difficulty": "advanced", "position": (500, 250), "connected_topics": ["derivatives"], "color": "#991b1b"},
    {"id": "applications-integrals", "name": "Applications of Integrals", "description": "Areas, volumes, and other integration applications", "difficulty": "advanced",  "position": (450, 120),   "connected_topics": ["integrals"], "color": "#7f1a1a"},

    # === Statistics (bottom-left) ===
    {"id": "basic-statistics",   "name": "Descriptive Statistics",  "description": "Mean, median, mode, standard deviation, and data visualization", "difficulty": "beginner", "position": (-400, 300), "connected_topics": ["probability", "data-analysis", "regression"], "color": "#0ea5e9"},
    {"id": "probability",        "name": "Probability",             "description": "Basic probability concepts and calculations",               "difficulty": "beginner",     "position": (-500, 200),  "connected_topics": ["basic-statistics", "statistics-inference"], "color": "#0284c7"},
    {"id": "data-analysis",      "name": "Data Analysis",           "description": "Analyzing and interpreting statistical data",               "difficulty": "intermediate", "position": (-300, 250),  "connected_topics": ["basic-statistics", "regression"], "color": "#0369a1"},
    {"id": "regression",         "name": "Regression Analysis",     "description": "Understanding relationships between variables",             "difficulty": "intermediate", "position": (-350, 200),  "connected_topics": ["data-analysis", "basic-statistics"], "color": "#075985"},
    {"id": "statistics-inference", "name": "Statistical Inference", "description": "Hypothesis testing and confidence intervals",                "difficulty": "advanced",     "position": (-450, 150),  "connected_topics": ["probability"], "color": "#1e3a8a"},
]


# ---------------------------------------------------------------------------
# Expansion systems: (number, difficulty, x, y, connected-to)
# ---------------------------------------------------------------------------
_EXPANSION: list[tuple[int, str, int, int, str]] = [
    # upper-left
    (1,  "beginner",     -600,  -400, "algebra-overview"),
    (2,  "beginner",     -700,  -250, "linear-equations"),
    (3,  "intermediate", -550,  -150, "systems-of-equations"),
    (4,  "intermediate", -650,     0, "matrices"),
    # lower-right
    (5,  "advanced",      700,   400, "limits"),
    (6,  "advanced",      600,   550, "derivatives"),
    (7,  "beginner",      750,   300, "integrals"),
    # lower-left
    (8,  "beginner",     -600,   400, "basic-statistics"),
    (9,  "intermediate", -700,   550, "probability"),
    (10, "intermediate", -800,   300, "regression"),
    # outer rings
    (11, "advanced",     -800,  -500, "future-topic-1"),
    (12, "advanced",      800,   650, "future-topic-6"),
    (13, "beginner",     -850,   650, "future-topic-9"),
    (14, "beginner",      850,  -400, "trigonometric-functions"),
    (15, "intermediate",  400,  -500, "parabola-graphs"),
    # deep space, far upper-left
    (16, "advanced",    -1000,  -800, "future-topic-11"),
    (17, "beginner",     -900,  -900, "future-topic-1"),
    (18, "intermediate", -1100, -600, "future-topic-3"),
    (19, "advanced",    -1200,  -400, "future-topic-4"),
    (20, "beginner",     -950,  -300, "future-topic-1"),
    # deep space, far upper-right
    (21, "advanced",     1200,  -600, "future-topic-14"),
    (22, "intermediate", 1000,  -800, "future-topic-15"),
    (23, "beginner",     1100,  -300, "trigonometric-functions"),
    (24, "advanced",      950,  -500, "future-topic-14"),
    # deep space, far lower-right
    (25, "intermediate", 1000,   800, "future-topic-12"),
    (26, "beginner",      900,   950, "future-topic-5"),
    (27, "advanced",     1200,   700, "future-topic-7"),
    # deep space, far lower-left
    (28, "intermediate", -1000,  900, "future-topic-13"),
    (29, "advanced",    -1200,   600, "future-topic-10"),
    (30, "beginner",     -950,   750, "future-topic-8"),
    # hyper-remote, upper-left
    (31, "advanced",    -1300, -1000, "future-topic-16"),
    (32, "intermediate", -1200, -1100, "future-topic-17"),
    (33, "advanced",    -1400,  -800, "future-topic-18"),
    (34, "beginner",    -1150, -1200, "future-topic-19"),
    (35, "intermediate", -1050,  -950, "future-topic-20"),
    # hyper-remote, upper-right
    (36, "advanced",     1400,  -800, "future-topic-21"),
    (37, "intermediate", 1300, -1000, "future-topic-22"),
    (38, "beginner",     1500,  -500, "future-topic-23"),
    (39, "advanced",     1250,  -600, "future-topic-24"),
    # hyper-remote, lower-right
    (40, "intermediate", 1300,  1000, "future-topic-25"),
    (41, "beginner",     1150,  1100, "future-topic-26"),
    (42, "advanced",     1500,   900, "future-topic-27"),
    # hyper-remote, lower-left
    (43, "intermediate", -1300, 1100, "future-topic-28"),
    (44, "advanced",    -1500,   800, "future-topic-29"),
    (45, "beginner",    -1150,   950, "future-topic-30"),
]

EXPANSION_TOPICS: list[dict] = [
    {
        "id": f"future-topic-{n}",
        "name": _PLACEHOLDER_NAME,
        "description": _PLACEHOLDER_DESC,
        "difficulty": difficulty,
        "position": (x, y),
        "connected_topics": [link],
        "color": _PLACEHOLDER_COLOR,
    }
    for n, difficulty, x, y, link in _EXPANSION
]


def galaxy_spec() -> list[dict]:
    """Curriculum clusters followed by the expansion systems."""
    return GALAXY_TOPICS + EXPANSION_TOPICS


@lru_cache(maxsize=1)
def get_galaxy() -> GalaxyGraph:
    """Process-wide galaxy graph (built on first use, never mutated)."""
    return GalaxyGraph.from_spec(galaxy_spec(), root_id=ROOT_TOPIC_ID)
