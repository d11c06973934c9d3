#!/usr/bin/env python3
"""
In-memory translation catalog.

A catalog maps language -> key -> text. After every mutation the catalog
is normalized: each language holds every key known to any language, with
an empty string where no translation exists yet. Languages and keys keep
their insertion order so that exported documents are stable.

The catalog is a plain single-owner object with no locking; callers that
share one across threads must serialize access themselves.
"""

from typing import Any, Iterator, Mapping, Optional

from .formatter import validate_placeholders

# Separator between a base key and its tense in composite keys
TENSE_SEPARATOR = "~"

LanguageMap = dict[str, str]


def composite_key(key: str, tense: str) -> str:
    """Build the composite key for a tense-tagged value (``read~gerund``)."""
    return f"{key}{TENSE_SEPARATOR}{tense}"


def is_composite_key(key: str) -> bool:
    """Return True if key is already tense-disambiguated."""
    return TENSE_SEPARATOR in key


class TranslationCatalog:
    """
    Two-level translation store: language -> key -> text.

    Mutators apply immediately and renormalize the key sets, except
    ``remove_language`` which leaves the remaining languages untouched.
    """

    def __init__(self, languages: Optional[Mapping[str, Mapping[str, Optional[str]]]] = None):
        """
        Initialize a catalog.

        Args:
            languages: Optional initial language -> key -> text mapping
        """
        self._languages: dict[str, LanguageMap] = {}
        if languages:
            self.merge(languages)

    # Mutators

    def put_language(self, language: str) -> None:
        """Create a language if absent."""
        self._languages.setdefault(language, {})
        self.normalize()

    def remove_language(self, language: str) -> None:
        """Delete a language and all of its translations."""
        self._languages.pop(language, None)

    def put_translation(self, language: str, key: str, value: Optional[str]) -> None:
        """Set one translation, creating the language if needed."""
        self._languages.setdefault(language, {})[key] = "" if value is None else value
        self.normalize()

    def remove_translation(self, language: str, key: str) -> None:
        """
        Delete one translation from one language.

        When other languages still define the key, normalization puts it
        back with an empty value. Use ``remove_key`` to drop a key entirely.
        """
        language_map = self._languages.get(language)
        if language_map is None or key not in language_map:
            return
        del language_map[key]
        self.normalize()

    def remove_key(self, key: str) -> None:
        """Delete a key from every language."""
        for language_map in self._languages.values():
            language_map.pop(key, None)

    def merge(self, other: Any) -> None:
        """
        Overlay another catalog onto this one.

        Args:
            other: TranslationCatalog, ParsedDocument, or a mapping of
                language -> key -> text. Values from ``other`` win.
        """
        for language, values in _language_items(other):
            target = self._languages.setdefault(language, {})
            for key, value in values.items():
                target[key] = "" if value is None else value
        self.normalize()

    def normalize(self) -> None:
        """Give every language an entry (possibly empty) for every known key."""
        all_keys = dict.fromkeys(
            key for language_map in self._languages.values() for key in language_map
        )
        for language_map in self._languages.values():
            for key in all_keys:
                language_map.setdefault(key, "")

    def clear(self) -> None:
        """Remove all languages."""
        self._languages.clear()

    # Queries

    @property
    def languages(self) -> list[str]:
        """Language identifiers in stored order."""
        return list(self._languages)

    def keys(self, language: str) -> list[str]:
        """Keys of a language in stored order (empty for unknown languages)."""
        return list(self._languages.get(language, ()))

    def translations(self, language: str) -> LanguageMap:
        """Copy of one language's key -> text mapping."""
        return dict(self._languages.get(language, {}))

    def get_value(self, language: str, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a translation, returning default for unknown language or key."""
        language_map = self._languages.get(language)
        if language_map is None:
            return default
        return language_map.get(key, default)

    def exists_language(self, language: str) -> bool:
        return language in self._languages

    def exists_key(self, language: str, key: str) -> bool:
        return key in self._languages.get(language, ())

    def missing_translations(self, language: str) -> list[str]:
        """Keys of a language whose translation is still empty."""
        return [key for key, value in self._languages.get(language, {}).items() if not value]

    def placeholder_mismatches(self, reference_language: str) -> dict[str, list[str]]:
        """
        Compare ``$N`` placeholders of every language against a reference.

        Empty translations are skipped, they are reported by
        ``missing_translations`` instead.

        Args:
            reference_language: Language whose texts define the expected placeholders

        Returns:
            Map of ``language~key`` -> list of error messages
        """
        reference = self._languages.get(reference_language, {})
        problems: dict[str, list[str]] = {}
        for language, language_map in self._languages.items():
            if language == reference_language:
                continue
            for key, source in reference.items():
                translation = language_map.get(key, "")
                if not translation:
                    continue
                errors = validate_placeholders(source, translation)
                if errors:
                    problems[f"{language}{TENSE_SEPARATOR}{key}"] = errors
        return problems

    def to_dict(self) -> dict[str, LanguageMap]:
        """Deep copy of the catalog contents."""
        return {language: dict(values) for language, values in self._languages.items()}

    def __len__(self) -> int:
        return len(self._languages)

    def __contains__(self, language: object) -> bool:
        return language in self._languages

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._languages))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TranslationCatalog):
            return NotImplemented
        return self._languages == other._languages

    def __repr__(self) -> str:
        return f"TranslationCatalog(languages={self.languages!r})"


def _language_items(other: Any):
    """Yield (language, key -> text mapping) pairs from any supported source."""
    if isinstance(other, TranslationCatalog):
        source = other._languages
    elif isinstance(getattr(other, "languages", None), Mapping):
        # ParsedDocument
        source = other.languages
    elif isinstance(other, Mapping):
        source = other
    else:
        raise TypeError(f"Cannot merge object of type {type(other).__name__}")
    return list(source.items())


__all__ = [
    "TENSE_SEPARATOR",
    "LanguageMap",
    "TranslationCatalog",
    "composite_key",
    "is_composite_key",
]
