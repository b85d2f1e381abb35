from __future__ import annotations

import json
import logging
from typing import Iterable, List, Optional, Protocol, Sequence

import requests

from .exceptions import ConfigError, TranslationError
from .models import NewsItem

logger = logging.getLogger(__name__)

DEEPL_FREE_URL = "https://api-free.deepl.com/v2/translate"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
# keeps title/description batches index-aligned when an item has no description
EMPTY_DESCRIPTION = "No description available"


class Translator(Protocol):
    def translate(self, texts: Sequence[str], *, source_lang: str, target_lang: str) -> List[str]:  # pragma: no cover - interface
        ...


class NullTranslator:
    def translate(self, texts: Sequence[str], *, source_lang: str, target_lang: str) -> List[str]:
        return list(texts)


class DeepLTranslator:
    def __init__(
        self,
        *,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        url: str = DEEPL_FREE_URL,
        timeout_sec: float = 30.0,
    ) -> None:
        if not api_key:
            raise ConfigError("DEEPL_API_KEY not set.")
        self._api_key = api_key
        self._session = session or requests.Session()
        self._url = url
        self._timeout = timeout_sec

    def translate(self, texts: Sequence[str], *, source_lang: str, target_lang: str) -> List[str]:
        if not texts:
            return []
        body = {
            "text": list(texts),
            "target_lang": target_lang.upper(),
            "source_lang": source_lang.upper(),
        }
        headers = {"Authorization": f"DeepL-Auth-Key {self._api_key}"}
        try:
            resp = self._session.post(self._url, json=body, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise TranslationError(f"DeepL request failed: {e}") from e
        if resp.status_code != 200:
            raise TranslationError(f"DeepL API error: {resp.status_code} - {resp.text}")
        try:
            data = resp.json()
        except ValueError as e:
            raise TranslationError(f"DeepL returned invalid JSON: {e}") from e
        return [t.get("text", "") for t in data.get("translations") or []]


def _batch_prompt(texts: Sequence[str], source_lang: str, target_lang: str) -> str:
    return (
        f"Translate each string of the JSON array below from {source_lang} to {target_lang}. "
        "Return only a JSON array of strings with the same length and order. No preface.\n"
        f"{json.dumps(list(texts), ensure_ascii=False)}"
    )


def _parse_batch(content: Optional[str]) -> List[str]:
    if not content:
        raise TranslationError("Empty response from translation model")
    text = content.strip()
    # models sometimes wrap the array in a markdown fence
    if text.startswith("```"):
        text = text.strip("`")
        if text.startswith("json"):
            text = text[4:]
    try:
        data = json.loads(text)
    except ValueError as e:
        raise TranslationError(f"Translation model returned invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise TranslationError("Translation model did not return a JSON array")
    return [str(x) for x in data]


class OpenAITranslator:
    def __init__(self, *, api_key: Optional[str], model: Optional[str], timeout_sec: float) -> None:
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as e:  # pragma: no cover - optional dep
            raise ConfigError("openai package is required for OpenAI translation. Install with `pip install news-digest[openai]`.") from e
        if not api_key:
            raise ConfigError("OPENAI_API_KEY not set.")
        self._client = OpenAI(api_key=api_key)
        self._model = model or DEFAULT_OPENAI_MODEL
        self._timeout = timeout_sec

    def translate(self, texts: Sequence[str], *, source_lang: str, target_lang: str) -> List[str]:
        if not texts:
            return []
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": "You are a precise news translator."},
                    {"role": "user", "content": _batch_prompt(texts, source_lang, target_lang)},
                ],
                timeout=self._timeout,
            )
        except Exception as e:
            raise TranslationError(f"OpenAI request failed: {e}") from e
        content = resp.choices[0].message.content if resp and resp.choices else None
        return _parse_batch(content)


class GeminiTranslator:
    def __init__(self, *, api_key: Optional[str], model: Optional[str], timeout_sec: float) -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as e:  # pragma: no cover - optional dep
            raise ConfigError("google-generativeai package is required for Gemini translation. Install with `pip install news-digest[gemini]`.") from e
        if not api_key:
            raise ConfigError("GOOGLE_API_KEY (or GEMINI_API_KEY) not set.")
        genai.configure(api_key=api_key)
        self._model_name = model or DEFAULT_GEMINI_MODEL
        self._timeout = timeout_sec
        self._genai = genai

    def translate(self, texts: Sequence[str], *, source_lang: str, target_lang: str) -> List[str]:
        if not texts:
            return []
        try:
            model = self._genai.GenerativeModel(self._model_name)
            resp = model.generate_content(
                _batch_prompt(texts, source_lang, target_lang),
                request_options={"timeout": self._timeout},
            )
        except Exception as e:
            raise TranslationError(f"Gemini request failed: {e}") from e
        return _parse_batch(getattr(resp, "text", None))


def build_translator(settings, session: Optional[requests.Session] = None) -> Translator:
    """Pick the provider named in settings; translation disabled -> NullTranslator."""
    if not settings.translate:
        return NullTranslator()
    provider = (settings.translation_provider or "").lower()
    if provider == "deepl":
        return DeepLTranslator(
            api_key=settings.deepl_api_key,
            session=session,
            url=settings.deepl_api_url,
            timeout_sec=settings.request_timeout,
        )
    if provider == "openai":
        return OpenAITranslator(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_sec=settings.request_timeout,
        )
    if provider in {"gemini", "google", "googleai"}:
        return GeminiTranslator(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout_sec=settings.request_timeout,
        )
    raise ConfigError(f"Unknown translation provider: {settings.translation_provider}")


def _apply(items: List[NewsItem], translated: Optional[List[str]], attr: str, original: str) -> None:
    for i, item in enumerate(items):
        value = getattr(item, original)
        if translated is not None and i < len(translated) and value:
            value = translated[i]
        setattr(item, attr, value)


def translate_items(
    items: Iterable[NewsItem],
    translator: Translator,
    *,
    source_lang: str,
    target_lang: str,
) -> List[NewsItem]:
    """
    Translate titles and descriptions with one batch call each.

    A failed batch leaves every item with its original text in the translated
    field; items past the end of a short batch fall back individually.
    """
    items = list(items)
    if not items:
        return items

    titles = [it.title for it in items]
    descriptions = [it.description or EMPTY_DESCRIPTION for it in items]

    translated_titles: Optional[List[str]] = None
    try:
        translated_titles = translator.translate(titles, source_lang=source_lang, target_lang=target_lang)
    except Exception as e:  # provider failures never abort the run
        logger.warning("Error translating titles: %s", e)
    _apply(items, translated_titles, "translated_title", "title")

    translated_descriptions: Optional[List[str]] = None
    try:
        translated_descriptions = translator.translate(descriptions, source_lang=source_lang, target_lang=target_lang)
    except Exception as e:
        logger.warning("Error translating descriptions: %s", e)
    _apply(items, translated_descriptions, "translated_description", "description")

    return items
