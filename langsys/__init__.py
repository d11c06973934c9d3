"""
langsys - multilingual translation catalogs backed by XML documents

Maintains a language -> key -> text catalog, reads and writes it as an
XML document (with ``<import-language>`` directives and tense-tagged
values), and fills ``$1``, ``$2`` placeholders at lookup time.

Quick start:
    builder = CatalogBuilder()
    builder.load_from_file("languages.xml")
    builder.put_translation("english", "greeting", "Hello $1!")
    builder.save()

    registry = LanguageRegistry(builder.catalog, "english")
    registry.getf("greeting", "Alice")   # 'Hello Alice!'
"""

__version__ = "1.0.0"

from .builder import CatalogBuilder
from .catalog import TranslationCatalog
from .config import CatalogSettings, load_settings
from .document import CatalogDocumentParser, CatalogDocumentWriter, ParsedDocument
from .errors import (
    CatalogError,
    ConfigurationError,
    DocumentNotFound,
    ImportCycleDetected,
    ImportDepthExceeded,
    ImportFailed,
    IOWriteFailure,
    MalformedDocument,
)
from .formatter import count_placeholders, format_text, has_placeholders
from .registry import LanguageRegistry, SettableText

__all__ = [
    "CatalogBuilder",
    "TranslationCatalog",
    "CatalogSettings",
    "load_settings",
    "CatalogDocumentParser",
    "CatalogDocumentWriter",
    "ParsedDocument",
    "CatalogError",
    "ConfigurationError",
    "DocumentNotFound",
    "ImportCycleDetected",
    "ImportDepthExceeded",
    "ImportFailed",
    "IOWriteFailure",
    "MalformedDocument",
    "count_placeholders",
    "format_text",
    "has_placeholders",
    "LanguageRegistry",
    "SettableText",
]
