import logging
import re
from dataclasses import dataclass
from enum import Enum

import requests

from content import Explanation, FALLBACK_HINT, discovery_message, fallback_explanation

"""
Text generation for explanations, hints and discovery replies
-------------------------------------------------------------
Talks to any OpenAI-compatible endpoint (``{base_url}/chat/completions``).

Every call is probe-then-call:
  1. GET {base_url}/models with a hard ~2 s timeout — is anybody there?
  2. POST the completion request with its own bounded timeout.

There is no retry, no queue, no cancellation.  The outcome is typed, so
callers can tell "the service is down" from "the service answered with
nothing".  ExplanationService turns every non-OK outcome into static
content from content.py; the learner never sees a raw network error.
"""

log = logging.getLogger(__name__)

PROBE_TIMEOUT = 2.0     # seconds, availability check
REQUEST_TIMEOUT = 20.0  # seconds, the real generation call
SNIPPET_MAX_TOKENS = 120
EXPLANATION_MAX_TOKENS = 900


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------
class GenerationStatus(Enum):
	OK = "ok"                    # non-empty text
	EMPTY = "empty"              # answered, but with nothing
	UNAVAILABLE = "unavailable"  # not configured / timeout / network / HTTP error
	MALFORMED = "malformed"      # answered with a body we cannot read


@dataclass(frozen=True, slots=True)
class GenerationResult:
	status: GenerationStatus
	text: str = ""

	@property
	def ok(self) -> bool:
		return self.status is GenerationStatus.OK


_UNAVAILABLE = GenerationResult(GenerationStatus.UNAVAILABLE)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------
class TextGenerationClient:
	"""Single outstanding request at a time; one requests.Session per client."""

	def __init__(
		self,
		base_url: str | None,
		api_key: str | None = None,
		model: str = "gpt-4o-mini",
		probe_timeout: float = PROBE_TIMEOUT,
		timeout: float = REQUEST_TIMEOUT,
		session: requests.Session | None = None,
	) -> None:
		self.base_url = base_url.rstrip("/") if base_url else None
		self.model = model
		self.probe_timeout = probe_timeout
		self.timeout = timeout
		self._session = session or requests.Session()
		self._session.headers.update({
			"User-Agent": "MathGalaxy/1.0 (educational math tutor) Python-requests",
			"Content-Type": "application/json",
		})
		if api_key:
			self._session.headers["Authorization"] = f"Bearer {api_key}"

	@property
	def configured(self) -> bool:
		return bool(self.base_url)

	def probe(self) -> bool:
		"""True when the endpoint answers within probe_timeout."""
		if not self.configured:
			return False
		try:
			resp = self._session.get(f"{self.base_url}/models", timeout=self.probe_timeout)
		except requests.exceptions.RequestException as e:
			log.warning("text generation probe failed: %s", e)
			return False
		if resp.status_code >= 500:
			log.warning("text generation probe got HTTP %d", resp.status_code)
			return False
		return True

	def complete(self, prompt: str, short: bool = False) -> GenerationResult:
		"""
		Probe, then ask for a completion of *prompt*.

		*short* asks for a discovery-sized snippet instead of a full
		explanation.
		"""
		if not self.probe():
			return _UNAVAILABLE

		payload = {
			"model": self.model,
			"messages": [
				{"role": "system", "content": "You are a friendly math tutor."},
				{"role": "user", "content": prompt},
			],
			"max_tokens": SNIPPET_MAX_TOKENS if short else EXPLANATION_MAX_TOKENS,
		}
		try:
			resp = self._session.post(
				f"{self.base_url}/chat/completions", json=payload, timeout=self.timeout,
			)
			resp.raise_for_status()
		except requests.exceptions.RequestException as e:
			log.warning("text generation call failed: %s", e)
			return _UNAVAILABLE

		try:
			content = resp.json()["choices"][0]["message"]["content"]
		except (ValueError, KeyError, IndexError, TypeError) as e:
			log.warning("text generation response unreadable: %r", e)
			return GenerationResult(GenerationStatus.MALFORMED)
		if content is None:
			return GenerationResult(GenerationStatus.EMPTY)
		if not isinstance(content, str):
			log.warning("text generation content is %s, not text", type(content).__name__)
			return GenerationResult(GenerationStatus.MALFORMED)

		text = content.strip()
		if not text:
			return GenerationResult(GenerationStatus.EMPTY)
		return GenerationResult(GenerationStatus.OK, text)


# ---------------------------------------------------------------------------
# Sectioned response parsing  (EXPLANATION / KEY POINTS / EXAMPLES)
# ---------------------------------------------------------------------------
_HEADER = re.compile(
	r"^[#*\t ]*(EXPLANATION|KEY POINTS|EXAMPLES)[*\t ]*(?::[*\t ]*(.*))?$",
	re.IGNORECASE | re.MULTILINE,
)
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")


def _items(block: str) -> tuple[str, ...]:
	out = []
	for line in block.splitlines():
		line = _BULLET.sub("", line).strip()
		if line:
			out.append(line)
	return tuple(out)


def parse_sections(text: str) -> tuple[str, tuple[str, ...], tuple[str, ...]] | None:
	"""
	Split a sectioned reply into (explanation, key points, examples).
	Returns None when there is no non-empty EXPLANATION section.
	"""
	headers = list(_HEADER.finditer(text))
	if not headers:
		return None
	sections: dict[str, str] = {}
	for i, m in enumerate(headers):
		end = headers[i + 1].start() if i + 1 < len(headers) else len(text)
		body = ((m.group(2) or "") + "\n" + text[m.end():end]).strip()
		sections.setdefault(m.group(1).upper(), body)

	explanation = sections.get("EXPLANATION", "").strip()
	if not explanation:
		return None
	return (
		explanation,
		_items(sections.get("KEY POINTS", "")),
		_items(sections.get("EXAMPLES", "")),
	)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------
def explanation_prompt(topic: str, description: str, user_query: str | None = None) -> str:
	said = f' The student said: "{user_query}".' if user_query else ""
	return (
		f'Explain "{topic}" ({description}) in a clear, engaging way.{said}\n\n'
		"Answer in exactly three sections:\n"
		"EXPLANATION:\n<2-3 short paragraphs>\n"
		"KEY POINTS:\n- <3-4 points to remember>\n"
		"EXAMPLES:\n- <2-3 concrete examples>\n\n"
		"Use simple language and build intuition before formulas."
	)


def discovery_prompt(query: str, topic_names: list[str]) -> str:
	related = ", ".join(topic_names) if topic_names else "none found"
	return (
		f'A student asked: "{query}". Related topics on their map: {related}. '
		"Reply in at most two sentences, encouraging them to explore."
	)


def hint_prompt(question: str, options: list[str]) -> str:
	listed = "\n".join(f"- {o}" for o in options)
	return (
		f"Give a short hint for this quiz question without revealing the answer.\n"
		f"Question: {question}\nOptions:\n{listed}"
	)


# ---------------------------------------------------------------------------
# Service with static fallback
# ---------------------------------------------------------------------------
class ExplanationService:
	"""Always returns something usable; AI output when available, static otherwise."""

	def __init__(self, client: TextGenerationClient) -> None:
		self.client = client

	def explain(self, topic: str, description: str = "", user_query: str | None = None) -> Explanation:
		result = self.client.complete(explanation_prompt(topic, description, user_query))
		if not result.ok:
			log.info("explanation for %r from fallback (%s)", topic, result.status.value)
			return fallback_explanation(topic)

		parsed = parse_sections(result.text)
		if parsed is None:
			return Explanation(topic=topic, explanation=result.text, source="ai")
		text, key_points, examples = parsed
		return Explanation(topic, text, key_points, examples, source="ai")

	def discovery_reply(self, query: str, topic_names: list[str]) -> tuple[str, str]:
		"""(message, source) for a discovery question."""
		result = self.client.complete(discovery_prompt(query, topic_names), short=True)
		if result.ok:
			return result.text, "ai"
		return discovery_message(topic_names), "fallback"

	def hint(self, question: str, options: list[str]) -> tuple[str, str]:
		result = self.client.complete(hint_prompt(question, options), short=True)
		if result.ok:
			return result.text, "ai"
		return FALLBACK_HINT, "fallback"
