#!/usr/bin/env python3
"""
Catalog document format: XML parsing and serialization.

- CatalogDocumentParser: document (and its imports) -> ParsedDocument
- CatalogDocumentWriter: TranslationCatalog -> document text
"""

from .parser import CatalogDocumentParser, ParsedDocument, ParserState
from .writer import CatalogDocumentWriter, escape_xml

__all__ = [
    "CatalogDocumentParser",
    "CatalogDocumentWriter",
    "ParsedDocument",
    "ParserState",
    "escape_xml",
]
