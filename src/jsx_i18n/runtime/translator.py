"""
Runtime translation lookups for the dictionaries this tool maintains.

The rewritten components call ``i18n.t("KEY")``; this module is the Python
side of that contract, useful for server-side rendering, previews and tests
of the generated dictionaries.

Usage Examples:
    Basic setup:
        >>> from jsx_i18n.runtime import i18n
        >>> i18n.load_locales_dir(Path("src/locales"))
        >>> i18n.set_language("ko")
        >>> i18n.t("HELLO_WORLD")
        '안녕하세요'

    With interpolation:
        >>> i18n.t("WELCOME_NAME", {"name": "Alice"})
        'Welcome Alice'

    Language switching:
        >>> unsubscribe = i18n.on_language_change(lambda: print("changed"))
        >>> i18n.set_language("en")
        changed
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Mapping
from pathlib import Path

from ..dictionaries.store import FlatDictionary, read_dictionary
from ..utils.core.exceptions import DictionaryCorruptError

logger = logging.getLogger(__name__)

LanguageChangeCallback = Callable[[], None]

DEFAULT_CACHE_TIMEOUT = 5 * 60.0


class Translator:
    """Key/value lookup with interpolation, language switching and a TTL cache."""

    def __init__(
        self,
        language: str = "en",
        fallback_language: str | None = None,
        cache_timeout: float = DEFAULT_CACHE_TIMEOUT,
        prefix: str = "{",
        suffix: str = "}",
    ) -> None:
        self._language: str = language
        self.fallback_language: str | None = fallback_language
        self._translations: dict[str, FlatDictionary] = {}
        self._listeners: list[LanguageChangeCallback] = []
        self._cache: dict[tuple[str, str], tuple[str, float]] = {}
        self._cache_timeout: float = cache_timeout
        self._placeholder: re.Pattern[str] = re.compile(
            re.escape(prefix) + r"(\w+)" + re.escape(suffix)
        )

    def t(self, key: str, params: Mapping[str, object] | None = None) -> str:
        """
        Translate a key in the current language.

        Missing or empty values fall back to the fallback language and then
        to the key itself. Results without parameters are cached per
        ``(language, key)`` until the cache timeout passes.
        """
        if params:
            return self.translate(key, params)

        cache_key = (self._language, key)
        cached = self._cache.get(cache_key)
        now = time.monotonic()
        if cached is not None and now - cached[1] < self._cache_timeout:
            return cached[0]

        value = self._lookup(key)
        self._cache[cache_key] = (value, now)
        return value

    def translate(self, key: str, params: Mapping[str, object]) -> str:
        """Translate and interpolate ``{name}`` placeholders; never cached."""
        return self._interpolate(self._lookup(key), params)

    def _lookup(self, key: str) -> str:
        value = self._translations.get(self._language, {}).get(key)
        if not value and self.fallback_language and self.fallback_language != self._language:
            value = self._translations.get(self.fallback_language, {}).get(key)
        return value or key

    def _interpolate(self, text: str, params: Mapping[str, object]) -> str:
        def substitute(match: re.Match[str]) -> str:
            value = params.get(match.group(1))
            return "" if value is None else str(value)

        return self._placeholder.sub(substitute, text)

    def set_language(self, language: str) -> bool:
        """
        Switch the current language.

        Returns:
            False if the language was already active, True otherwise
        """
        if language == self._language:
            return False
        self._language = language
        self.clear_cache()
        logger.debug(f"Switched language to {language}")
        for callback in list(self._listeners):
            callback()
        return True

    def get_language(self) -> str:
        return self._language

    def on_language_change(self, callback: LanguageChangeCallback) -> Callable[[], None]:
        """Register a listener; the returned function unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def clear_cache(self) -> None:
        self._cache.clear()

    def set_cache_timeout(self, timeout: float) -> None:
        self._cache_timeout = timeout

    def set_translations(self, translations: Mapping[str, Mapping[str, str]]) -> None:
        """Replace all loaded dictionaries."""
        self._translations = {language: dict(values) for language, values in translations.items()}
        self.clear_cache()

    def load_translations(self, language: str, translations: Mapping[str, str]) -> None:
        """Add or replace the dictionary of one language."""
        self._translations[language] = dict(translations)
        self.clear_cache()

    def load_locales_dir(self, locales_dir: Path, separator: str = ".") -> list[str]:
        """
        Load every ``<locale>.json`` file from a directory.

        Nested files are flattened with the separator. Corrupt files are
        skipped with a warning.

        Returns:
            The locales that were loaded
        """
        loaded: list[str] = []
        for path in sorted(locales_dir.glob("*.json")):
            try:
                self.load_translations(path.stem, read_dictionary(path, separator))
                loaded.append(path.stem)
            except DictionaryCorruptError as e:
                logger.warning(f"Skipping {path}: {e.reason}")
        logger.info(f"Loaded translations for: {', '.join(loaded) or 'none'}")
        return loaded


# Process-wide instance used by application code
i18n = Translator()
