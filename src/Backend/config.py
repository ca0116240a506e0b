"""
Deployment configuration for the MathGalaxy backend.

Fixed rules live next to the code that enforces them (PASS_THRESHOLD in
unlock.py, PROGRESS_STORAGE_KEY in progress.py, timeouts in ai_service.py).
What differs between deployments is read from the environment here:

    MATHGALAXY_DATA_DIR        where progress documents are written
    MATHGALAXY_AI_URL          OpenAI-compatible base URL (unset → fallback only)
    MATHGALAXY_AI_KEY          bearer token for that endpoint
    MATHGALAXY_AI_MODEL        model name sent with each request
    MATHGALAXY_AI_PROBE_TIMEOUT  seconds, availability probe
    MATHGALAXY_AI_TIMEOUT      seconds, generation call
    MATHGALAXY_HOST / MATHGALAXY_PORT / MATHGALAXY_DEBUG
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_DATA_DIR = Path.home() / ".mathgalaxy"
_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path = _DEFAULT_DATA_DIR
    ai_base_url: str | None = None
    ai_api_key: str | None = None
    ai_model: str = "gpt-4o-mini"
    ai_probe_timeout: float = 2.0
    ai_timeout: float = 20.0
    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if env is None else env
        try:
            cfg = cls(
                data_dir=Path(env.get("MATHGALAXY_DATA_DIR") or _DEFAULT_DATA_DIR),
                ai_base_url=env.get("MATHGALAXY_AI_URL") or None,
                ai_api_key=env.get("MATHGALAXY_AI_KEY") or None,
                ai_model=env.get("MATHGALAXY_AI_MODEL") or "gpt-4o-mini",
                ai_probe_timeout=float(env.get("MATHGALAXY_AI_PROBE_TIMEOUT", 2.0)),
                ai_timeout=float(env.get("MATHGALAXY_AI_TIMEOUT", 20.0)),
                host=env.get("MATHGALAXY_HOST", "0.0.0.0"),
                port=int(env.get("MATHGALAXY_PORT", 5000)),
                debug=env.get("MATHGALAXY_DEBUG", "").strip().lower() in _TRUE,
            )
        except ValueError as exc:
            raise ValueError(f"invalid MathGalaxy environment: {exc}") from None
        cfg.validate()
        return cfg

    def validate(self) -> None:
        """Raise ``ValueError`` if any field is out of valid range."""
        if self.ai_probe_timeout <= 0:
            raise ValueError(f"ai_probe_timeout must be > 0, got {self.ai_probe_timeout}")
        if self.ai_timeout <= 0:
            raise ValueError(f"ai_timeout must be > 0, got {self.ai_timeout}")
        if not (0 < self.port < 65536):
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.ai_base_url and not self.ai_base_url.startswith(("http://", "https://")):
            raise ValueError(f"ai_base_url must be an http(s) URL, got {self.ai_base_url!r}")
