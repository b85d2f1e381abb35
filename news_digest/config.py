from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

import requests
from dotenv import load_dotenv

from .exceptions import ConfigError
from .translators import DEEPL_FREE_URL

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
WEBHOOK_MODES = ("text", "json")
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Everything a run needs; built once per invocation and passed down explicitly."""
    webhook_url: str
    translate: bool = False
    translation_provider: str = "deepl"
    deepl_api_key: Optional[str] = None
    deepl_api_url: str = DEEPL_FREE_URL
    openai_api_key: Optional[str] = None
    openai_model: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: Optional[str] = None
    source_lang: str = "ES"
    target_lang: str = "RU"
    webhook_mode: str = "text"
    max_items: int = 5
    request_timeout: float = 30.0
    max_workers: int = 8
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"

    def make_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({"User-Agent": self.user_agent})
        return session


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> Settings:
    """
    Read settings from the environment (after loading `.env` when `dotenv` is set).

    Raises ConfigError before any network activity when a required value is
    missing: WEBHOOK_URL always, and the provider key when translation is on.
    """
    if dotenv:
        load_dotenv()
    if env is None:
        env = os.environ

    webhook_url = (env.get("WEBHOOK_URL") or "").strip()
    if not webhook_url:
        raise ConfigError("WEBHOOK_URL environment variable is not set")

    translate = (env.get("TRANSLATE") or "").strip().lower() in _TRUTHY
    provider = (env.get("TRANSLATION_PROVIDER") or "deepl").strip().lower()
    deepl_api_key = (env.get("DEEPL_API_KEY") or "").strip() or None
    openai_api_key = (env.get("OPENAI_API_KEY") or "").strip() or None
    gemini_api_key = (env.get("GOOGLE_API_KEY") or env.get("GEMINI_API_KEY") or "").strip() or None

    if translate:
        required = {"deepl": ("DEEPL_API_KEY", deepl_api_key),
                    "openai": ("OPENAI_API_KEY", openai_api_key),
                    "gemini": ("GOOGLE_API_KEY", gemini_api_key)}
        if provider not in required:
            raise ConfigError(f"Unknown TRANSLATION_PROVIDER: {provider}")
        name, value = required[provider]
        if not value:
            raise ConfigError(f"{name} environment variable is not set (required when TRANSLATE is on)")

    mode = (env.get("WEBHOOK_MODE") or "text").strip().lower()
    if mode not in WEBHOOK_MODES:
        raise ConfigError(f"WEBHOOK_MODE must be one of {', '.join(WEBHOOK_MODES)}, got {mode!r}")

    return Settings(
        webhook_url=webhook_url,
        translate=translate,
        translation_provider=provider,
        deepl_api_key=deepl_api_key,
        deepl_api_url=(env.get("DEEPL_API_URL") or DEEPL_FREE_URL).strip(),
        openai_api_key=openai_api_key,
        openai_model=(env.get("OPENAI_MODEL") or "").strip() or None,
        gemini_api_key=gemini_api_key,
        gemini_model=(env.get("GEMINI_MODEL") or "").strip() or None,
        source_lang=(env.get("SOURCE_LANG") or "ES").strip().upper(),
        target_lang=(env.get("TARGET_LANG") or "RU").strip().upper(),
        webhook_mode=mode,
        max_items=_int(env, "MAX_NEWS_ITEMS", 5),
        request_timeout=float(_int(env, "REQUEST_TIMEOUT", 30)),
        max_workers=_int(env, "MAX_WORKERS", 8),
        user_agent=(env.get("USER_AGENT") or DEFAULT_USER_AGENT).strip(),
        log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
    )
