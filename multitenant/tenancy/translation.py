"""
Tenant Translations
===================

File-based translation loading with locale fallback.

Language files live at ``{lang_path}/{locale}/{group}.yaml`` (``.yml`` and
``.json`` are accepted too). A key such as ``messages.welcome`` reads item
``welcome`` from group ``messages``; deeper segments walk nested mappings.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config.config_manager import MAPPING_FILE_EXTENSIONS, read_mapping_file

logger = logging.getLogger(__name__)


class FileLoader:
    """Loads translation groups from one or more language directories."""

    def __init__(self, paths: Sequence[str]):
        # earlier paths win
        self.paths: List[str] = [p for p in paths if p]
        self._loaded: Dict[Tuple[str, str], Dict[str, Any]] = {}

    def _group_file(self, path: str, locale: str, group: str) -> Optional[str]:
        for extension in MAPPING_FILE_EXTENSIONS:
            candidate = os.path.join(path, locale, f"{group}{extension}")
            if os.path.isfile(candidate):
                return candidate
        return None

    def load(self, locale: str, group: str) -> Dict[str, Any]:
        """Load a translation group, merging all paths."""
        cache_key = (locale, group)
        if cache_key in self._loaded:
            return self._loaded[cache_key]

        lines: Dict[str, Any] = {}
        for path in reversed(self.paths):
            group_file = self._group_file(path, locale, group)
            if group_file:
                lines.update(read_mapping_file(group_file))

        self._loaded[cache_key] = lines
        return lines

    def flush(self):
        """Drop loaded groups."""
        self._loaded.clear()


class Translator:
    """Looks up translation lines for a locale with an optional fallback locale."""

    def __init__(self, loader: FileLoader, locale: str, fallback: Optional[str] = None):
        self.loader = loader
        self.locale = locale
        self.fallback = fallback

    def set_locale(self, locale: str):
        self.locale = locale

    def set_fallback(self, fallback: Optional[str]):
        self.fallback = fallback

    def _line(self, locale: str, key: str) -> Optional[Any]:
        group, _, item = key.partition(".")
        if not item:
            return None

        current: Any = self.loader.load(locale, group)
        for segment in item.split("."):
            if not isinstance(current, dict) or segment not in current:
                return None
            current = current[segment]
        return current

    def _locales(self, locale: Optional[str]) -> List[str]:
        locales = [locale or self.locale]
        if self.fallback and self.fallback not in locales:
            locales.append(self.fallback)
        return locales

    def has(self, key: str, locale: Optional[str] = None) -> bool:
        return any(self._line(loc, key) is not None for loc in self._locales(locale))

    def get(self, key: str, replace: Optional[Dict[str, Any]] = None,
            locale: Optional[str] = None) -> Any:
        """
        Get the translation for a key.

        Returns the key itself when no locale has a line for it. String lines
        are formatted with ``replace`` using ``{name}`` placeholders.
        """
        for loc in self._locales(locale):
            line = self._line(loc, key)
            if line is None:
                continue
            if replace and isinstance(line, str):
                try:
                    return line.format(**replace)
                except (KeyError, IndexError):
                    logger.warning(f"Missing replacement for translation {key} ({loc})")
                    return line
            return line

        logger.debug(f"No translation for {key} in {self._locales(locale)}")
        return key
