"""
Configuration for the CTRM Advisor.

Sources, lowest to highest precedence:
  1. ``config/default.toml``      committed defaults
  2. ``config/local.toml``        per-machine overrides, next to the file in use (gitignored)
  3. ``.env`` at the project root secrets such as ``GEMINI_API_KEY`` (gitignored)
  4. ``CTRM_ADVISOR_*`` env vars  see ``ENV_OVERRIDES``

``load_config()`` returns one frozen ``AppConfig``.  The justification
generator and the feedback sink are built from its sections; neither holds
an endpoint or key of its own.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sections ──────────────────────────────────────────────────────────────────


class JustificationConfig(BaseModel):
    """Text-generation service settings.

    Any OpenAI-compatible chat endpoint works; the default is Gemini's
    OpenAI-compatible API.  The key is never written to a config file:
    ``api_key_env`` names the environment variable that holds it.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    api_key_env: str = "GEMINI_API_KEY"
    timeout_seconds: float = 30.0
    max_retries: int = 1
    temperature: float = 0.7

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"max_retries must be >= 0, got {v}.")
        return v

    def api_key(self) -> Optional[str]:
        """The API key from the environment, or ``None`` when unset or blank."""
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


class StorageConfig(BaseModel):
    """Feedback sink settings.

    ``script_url`` is the spreadsheet web-app endpoint (one row per POST).
    Leave it empty to log feedback records instead of storing them.
    """

    model_config = ConfigDict(frozen=True)

    script_url: str = ""
    timeout_seconds: float = 15.0

    @field_validator("script_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith(("https://", "http://")):
            raise ValueError(f"script_url must be an http(s) URL, got '{v}'.")
        return v


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{v}'.")
        return level


class AppConfig(BaseModel):
    """All settings for one process."""

    model_config = ConfigDict(frozen=True)

    justification: JustificationConfig = JustificationConfig()
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loading ───────────────────────────────────────────────────────────────────


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# env var -> (section or None for top level, key, converter)
ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "CTRM_ADVISOR_SCRIPT_URL": ("storage",       "script_url", str),
    "CTRM_ADVISOR_MODEL":      ("justification", "model",      str),
    "CTRM_ADVISOR_LOG_LEVEL":  ("logging",       "level",      str),
    "CTRM_ADVISOR_DEBUG":      (None,            "debug",      _as_bool),
}


def project_root() -> Path:
    """Nearest ancestor of this package holding ``pyproject.toml``.

    Falls back to the package's parent directory when none is found.
    """
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").is_file():
            return candidate
    return here.parent


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build the ``AppConfig`` from every source, highest precedence last.

    Args:
        config_path: TOML file to start from; ``config/default.toml`` under
            the project root when omitted.

    Raises:
        FileNotFoundError: ``config_path`` does not exist.
        pydantic.ValidationError: A merged value is invalid.
    """
    root = project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / "config" / "default.toml"
    if not path.is_file():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(path)
    local = path.parent / "local.toml"
    if local.is_file() and local != path:
        raw = _deep_merge(raw, _read_toml(local))

    raw = _apply_env_overrides(raw)
    return AppConfig.model_validate(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Overlay every set (non-empty) ``ENV_OVERRIDES`` variable onto ``raw``."""
    for env_var, (section, key, convert) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if not value:
            continue
        target = raw if section is None else raw.setdefault(section, {})
        target[key] = convert(value)
    return raw
