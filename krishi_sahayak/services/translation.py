"""
Translation Service

Translates UI phrases through the backend translation endpoint. Successful
results are memoized; backend failures fall back to a static phrase table
and finally to the original text, so callers never see an exception.
"""

import asyncio
import logging

from krishi_sahayak.core.state import DEFAULT_LANGUAGE
from krishi_sahayak.exceptions import KrishiSahayakError, TranslationError

from .api_client import ApiClient

logger = logging.getLogger(__name__)

COMMON_PHRASES = (
    "Hello",
    "Thank you",
    "Price",
    "Crop",
    "Disease",
    "Weather",
    "Search",
    "Login",
    "Signup",
    "Dashboard",
    "Loading...",
)

FALLBACK_TRANSLATIONS: dict[str, dict[str, str]] = {
    "hi": {
        "Hello": "नमस्ते",
        "Thank you": "धन्यवाद",
        "Price": "कीमत",
        "Crop": "फसल",
        "Disease": "रोग",
        "Weather": "मौसम",
        "Loading...": "लोड हो रहा है...",
        "Search": "खोजें",
        "Login": "लॉग इन",
        "Signup": "साइन अप",
    },
    "te": {
        "Hello": "నమస్కారం",
        "Thank you": "ధన్యవాదాలు",
        "Price": "ధర",
        "Crop": "పంట",
        "Disease": "వ్యాధి",
        "Weather": "వాతావరణం",
    },
    "ta": {
        "Hello": "வணக்கம்",
        "Thank you": "நன்றி",
        "Price": "விலை",
        "Crop": "பயிர்",
        "Disease": "நோய்",
        "Weather": "வானிலை",
    },
}

RTL_LANGUAGES = {"ar", "ur", "fa"}


def get_fallback_translation(text: str, language: str) -> str | None:
    return FALLBACK_TRANSLATIONS.get(language, {}).get(text)


def get_language_direction(language: str) -> str:
    return "rtl" if language in RTL_LANGUAGES else "ltr"


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_indian_number(number: float, language: str = DEFAULT_LANGUAGE) -> str:
    """
    Format a number with Indian digit grouping (lakh/crore), e.g. 12,34,567.

    At most three fractional digits are kept, trailing zeros dropped.
    """
    sign = "-" if number < 0 else ""
    text = f"{abs(number):.3f}".rstrip("0").rstrip(".")
    integer, _, fraction = text.partition(".")
    grouped = _group_indian(integer)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


class TranslationService:
    """Backend-backed phrase translation with static fallbacks."""

    def __init__(self, api_client: ApiClient | None = None):
        self.api_client = api_client
        self._cache: dict[tuple[str, str, str], str] = {}

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _translate_remote(self, text: str, from_language: str, to_language: str) -> str:
        if self.api_client is None:
            raise TranslationError(
                "No translation backend configured",
                source_language=from_language,
                target_language=to_language,
            )
        data = await self.api_client.translate(text, from_language, to_language)
        if not isinstance(data, dict) or "translated_text" not in data:
            raise TranslationError(
                "Translation response missing translated_text",
                source_language=from_language,
                target_language=to_language,
            )
        return str(data["translated_text"])

    async def translate_text(
        self,
        text: str,
        from_language: str = DEFAULT_LANGUAGE,
        to_language: str = "hi",
    ) -> str:
        """
        Translate one phrase.

        Args:
            text: Phrase in ``from_language``
            from_language: Source language code
            to_language: Target language code

        Returns:
            Translated text, the static fallback, or ``text`` unchanged
        """
        if from_language == to_language:
            return text

        cache_key = (text, from_language, to_language)
        if cache_key in self._cache:
            return self._cache[cache_key]

        try:
            translated = await self._translate_remote(text, from_language, to_language)
        except KrishiSahayakError as e:
            logger.warning(f"Translation error for '{text}' -> {to_language}: {e}")
            return get_fallback_translation(text, to_language) or text

        self._cache[cache_key] = translated
        return translated

    async def translate_batch(
        self,
        texts: list[str],
        from_language: str = DEFAULT_LANGUAGE,
        to_language: str = "hi",
    ) -> list[str]:
        if from_language == to_language or self.api_client is None:
            return list(texts)

        try:
            data = await self.api_client.translate_batch(texts, from_language, to_language)
            translated = data["translated_texts"]
        except (KrishiSahayakError, KeyError, TypeError) as e:
            logger.error(f"Batch translation error: {e}")
            return list(texts)

        if not isinstance(translated, list) or len(translated) != len(texts):
            logger.error("Batch translation returned a mismatched result")
            return list(texts)
        return [str(item) for item in translated]

    async def detect_language(self, text: str) -> str:
        if self.api_client is None:
            return DEFAULT_LANGUAGE
        try:
            data = await self.api_client.detect_language(text)
            return str(data["language"])
        except (KrishiSahayakError, KeyError, TypeError) as e:
            logger.error(f"Language detection error: {e}")
            return DEFAULT_LANGUAGE

    async def load_common_translations(self, language: str) -> dict[str, str]:
        """Translate ``COMMON_PHRASES`` from English into ``language``."""
        results = await asyncio.gather(
            *(
                self.translate_text(phrase, DEFAULT_LANGUAGE, language)
                for phrase in COMMON_PHRASES
            )
        )
        return dict(zip(COMMON_PHRASES, results))
