#!/usr/bin/env python3
"""
Runtime lookup facade with a selectable current language.

LanguageRegistry is an ordinary object: create one per application (or
per window, or per test) and pass it to whoever needs translations.
UI code registers text targets against keys; every target only needs a
``set_text(str)`` method. When the current language changes, all bound
targets receive their new text and listeners are notified.

    registry = LanguageRegistry.from_file("english", "languages.xml")
    registry.bind("hello_world", label, button)
    registry.add_listener(lambda language: print("Language:", language))
    registry.set_current_language("portuguese")
"""

import logging
from typing import Callable, Optional, Protocol

from . import formatter
from .builder import CatalogBuilder
from .catalog import TranslationCatalog
from .config import CatalogSettings

logger = logging.getLogger(__name__)

LanguageListener = Callable[[str], None]


class SettableText(Protocol):
    """Anything that can display a translated string."""

    def set_text(self, text: str) -> None:
        ...


class LanguageRegistry:
    """
    Current-language selection, lookups and text bindings over one catalog.
    """

    def __init__(self, catalog: Optional[TranslationCatalog] = None, current_language: str = ""):
        """
        Initialize registry.

        Args:
            catalog: Catalog to read from (a new empty one if not provided)
            current_language: Language used by ``get`` and bindings
        """
        self.catalog = catalog if catalog is not None else TranslationCatalog()
        self._current_language = current_language
        self._bindings: list[tuple[SettableText, str]] = []
        self._listeners: list[LanguageListener] = []

    @classmethod
    def from_file(
        cls,
        default_language: str,
        path,
        settings: Optional[CatalogSettings] = None,
    ) -> "LanguageRegistry":
        """Create a registry from a document file (best-effort unless settings are strict)."""
        builder = CatalogBuilder(settings)
        builder.load_from_file(path)
        return cls(builder.catalog, default_language)

    @classmethod
    def from_resource(
        cls,
        default_language: str,
        package: str,
        resource: str,
        settings: Optional[CatalogSettings] = None,
    ) -> "LanguageRegistry":
        """Create a registry from a document shipped as package data."""
        builder = CatalogBuilder(settings)
        builder.load_from_resource(package, resource)
        return cls(builder.catalog, default_language)

    # Current language

    @property
    def current_language(self) -> str:
        return self._current_language

    def set_current_language(self, language: str, default_language: Optional[str] = None) -> None:
        """
        Switch language, refresh bound targets and notify listeners.

        Args:
            language: Requested language
            default_language: Used instead when ``language`` is not in the catalog
        """
        selected = language
        if default_language is not None and not self.exists_language(language):
            selected = default_language
        self._current_language = selected
        self.apply()
        for listener in list(self._listeners):
            listener(language)

    def add_listener(self, listener: LanguageListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: LanguageListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # Lookups

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Translation of key in the current language."""
        return self.catalog.get_value(self._current_language, key, default)

    def getf(self, key: str, *values: str) -> str:
        """Translation of key in the current language with ``$N`` placeholders filled."""
        return formatter.format_text(self.get(key), *values)

    def get_value(self, language: str, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.catalog.get_value(language, key, default)

    def resolve(self, key: str) -> str:
        """Text shown for key: its translation, or the key itself when missing."""
        value = self.get(key)
        return key if value is None else value

    def exists_language(self, language: str) -> bool:
        return self.catalog.exists_language(language)

    def exists_key(self, key: str) -> bool:
        """True if key exists in the current language."""
        return self.catalog.exists_key(self._current_language, key)

    def get_languages(self) -> set[str]:
        return set(self.catalog.languages)

    def get_keys(self, language: Optional[str] = None) -> set[str]:
        return set(self.catalog.keys(self._current_language if language is None else language))

    @staticmethod
    def format(text: Optional[str], *values: str) -> str:
        return formatter.format_text(text, *values)

    @staticmethod
    def is_formattable(text: Optional[str]) -> bool:
        return formatter.is_formattable(text)

    # Bindings

    def bind(self, key: str, *targets: SettableText) -> None:
        """Register targets for key and give them their text right away."""
        for target in targets:
            self._bindings.append((target, key))
            self._apply_one(target, key)

    def unbind(self, target: SettableText) -> None:
        """Forget every binding of a target."""
        self._bindings = [(t, k) for t, k in self._bindings if t is not target]

    def bound_keys(self, target: Optional[SettableText] = None) -> list[str]:
        """Keys bound to a target, or to any target when None."""
        return [k for t, k in self._bindings if target is None or t is target]

    def apply(self) -> None:
        """Push current translations to every bound target."""
        for target, key in list(self._bindings):
            self._apply_one(target, key)

    def _apply_one(self, target: SettableText, key: str) -> None:
        try:
            target.set_text(self.resolve(key))
        except Exception:
            # One broken target must not block the others
            logger.debug("Could not set text for key '%s' on %r", key, target, exc_info=True)

    def close(self) -> None:
        """Drop all bindings and listeners."""
        self._bindings.clear()
        self._listeners.clear()


__all__ = ["LanguageRegistry", "LanguageListener", "SettableText"]
