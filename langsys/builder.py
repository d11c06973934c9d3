#!/usr/bin/env python3
"""
Catalog editing workflow: load, edit, save.

CatalogBuilder ties the document parser, the catalog and the document
writer together. By default loading and saving are best-effort: a
missing or broken document leaves the catalog empty or partially
merged, and write failures are only logged. This supports the
create-on-save workflow:

    builder = CatalogBuilder()
    builder.load_from_file("languages.xml")   # file may not exist yet
    builder.put_translation("english", "hello_world", "Hello, World!")
    builder.put_translation("portuguese", "hello_world", "Olá, Mundo!")
    builder.save()

With ``strict=True`` every load/save error is raised instead.
"""

import logging
from importlib import resources
from pathlib import Path
from typing import Callable, Optional, Union

from .catalog import TranslationCatalog
from .config import CatalogSettings
from .document import CatalogDocumentParser, CatalogDocumentWriter, ParsedDocument
from .errors import CatalogError, DocumentNotFound, IOWriteFailure

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CatalogBuilder:
    """
    Edit-then-save facade over a TranslationCatalog.

    Handles:
    - Loading documents from files, strings and package resources
    - Editing languages and translations (always renormalized)
    - Saving to an explicit path or to the last used path
    """

    def __init__(
        self,
        settings: Optional[CatalogSettings] = None,
        strict: Optional[bool] = None,
        catalog: Optional[TranslationCatalog] = None,
    ):
        """
        Initialize builder.

        Args:
            settings: Catalog settings (defaults if not provided)
            strict: Overrides ``settings.strict`` when given
            catalog: Existing catalog to edit (a new empty one if not provided)
        """
        settings = settings or CatalogSettings()
        if strict is not None:
            settings = settings.replace(strict=strict)
        self.settings = settings
        self.catalog = catalog if catalog is not None else TranslationCatalog()
        self.parser = CatalogDocumentParser.from_settings(settings)
        self.writer = CatalogDocumentWriter.from_settings(settings)
        self._file_path: Optional[Path] = None

    @property
    def strict(self) -> bool:
        return self.settings.strict

    @property
    def file_path(self) -> Optional[str]:
        """Path used by ``save()``: the last path loaded from or saved to."""
        return None if self._file_path is None else str(self._file_path)

    # Loading

    def load_from_file(self, path: PathLike) -> bool:
        """
        Parse a document file and merge it into the catalog.

        The path is remembered for ``save()`` even if the file does not exist.

        Returns:
            True if the document and all of its imports were merged
        """
        self._file_path = Path(path)
        return self._load(lambda: self.parser.parse_file(path), str(path))

    load = load_from_file

    def load_from_string(self, content: str, base_dir: Optional[PathLike] = None) -> bool:
        """Parse document text and merge it into the catalog."""
        return self._load(
            lambda: self.parser.parse_string(content, base_dir=base_dir),
            "<string>",
        )

    def load_from_resource(self, package: str, resource: str) -> bool:
        """
        Parse a document shipped as package data and merge it into the catalog.

        Args:
            package: Importable package name holding the resource
            resource: Resource path relative to the package
        """
        label = f"{package}:{resource}"

        def _parse() -> ParsedDocument:
            try:
                traversable = resources.files(package).joinpath(resource)
            except (ModuleNotFoundError, TypeError) as e:
                raise DocumentNotFound(label, f"Resource package not found: {package}") from e
            if not traversable.is_file():
                raise DocumentNotFound(label, f"Resource not found: {label}")
            with resources.as_file(traversable) as path:
                return self.parser.parse_file(path)

        return self._load(_parse, label)

    def _load(self, parse: Callable[[], ParsedDocument], label: str) -> bool:
        try:
            document = parse()
            if self.strict and document.errors:
                raise document.errors[0]
        except CatalogError:
            if self.strict:
                raise
            logger.debug("Best-effort load of %s failed", label, exc_info=True)
            return False

        self.catalog.merge(document)
        logger.debug(
            "Loaded %s: %d languages, %d imports",
            label,
            len(document.languages),
            len(document.imports),
        )
        return document.ok

    # Editing

    def put_language(self, language: str) -> None:
        self.catalog.put_language(language)

    def remove_language(self, language: str) -> None:
        self.catalog.remove_language(language)

    def put_translation(self, language: str, key: str, value: Optional[str]) -> None:
        self.catalog.put_translation(language, key, value)

    def remove_translation(self, language: str, key: str) -> None:
        self.catalog.remove_translation(language, key)

    def remove_key(self, key: str) -> None:
        self.catalog.remove_key(key)

    # Reading

    def get_value(self, language: str, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.catalog.get_value(language, key, default)

    def languages(self) -> list[str]:
        return self.catalog.languages

    def keys(self, language: str) -> list[str]:
        return self.catalog.keys(language)

    # Saving

    def to_document_string(self) -> str:
        """
        Serialize the catalog to document text.

        Raises:
            ValueError: A name or value cannot be represented in the document
        """
        return self.writer.write(self.catalog)

    def save_to_file(self, path: PathLike) -> bool:
        """
        Write the catalog to a file and remember the path for ``save()``.

        Returns:
            True if the file was written
        """
        self._file_path = Path(path)
        return self._save(self._file_path)

    def save(self) -> bool:
        """Write the catalog to the last loaded or saved path."""
        return self._save(self._file_path)

    def _save(self, path: Optional[Path]) -> bool:
        try:
            if path is None:
                raise IOWriteFailure(None)
            self.writer.write_file(self.catalog, path)
        except IOWriteFailure:
            if self.strict:
                raise
            logger.debug("Could not save catalog", exc_info=True)
            return False

        logger.debug("Saved %d languages to %s", len(self.catalog), path)
        return True


__all__ = ["CatalogBuilder"]
