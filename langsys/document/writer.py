#!/usr/bin/env python3
"""
Serializer for catalog documents.

Exports are always flat: no import directives, one ``<value>`` per key.
Composite keys are written under their literal stored name
(``read~participle``), the tense attribute is not reconstructed.

Attribute values are written unescaped, so language names and keys may
not contain ``"``, ``<`` or ``&``. Such names, and any character XML 1.0
cannot represent, are rejected instead of producing a document that can
no longer be read back.
"""

import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..catalog import TranslationCatalog
from ..config import PRODUCT_NAME
from ..errors import IOWriteFailure
from .. import __version__

# Complement of the XML 1.0 Char production
INVALID_XML_CHARS = re.compile(r'[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]')
UNSAFE_ATTRIBUTE_CHARS = re.compile('[<&"]')


def _check_text(text: str, what: str) -> None:
    match = INVALID_XML_CHARS.search(text)
    if match:
        raise ValueError(f"{what} contains a character XML cannot represent: {match.group()!r}")


def _check_attribute(name: str, what: str) -> None:
    _check_text(name, what)
    match = UNSAFE_ATTRIBUTE_CHARS.search(name)
    if match:
        raise ValueError(f"{what} {name!r} contains {match.group()!r}, which is not allowed in a name")


def _file_mode(path: Path) -> int:
    """Permissions for the saved file: those of the file it replaces, or 0o644."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o644


def escape_xml(value: Optional[str]) -> str:
    """Escape text content for XML. None becomes an empty string."""
    if value is None:
        return ""
    # Ampersand first so entities are not escaped twice
    text = value.replace('&', '&amp;')
    text = text.replace('<', '&lt;')
    text = text.replace('>', '&gt;')
    text = text.replace('"', '&quot;')
    text = text.replace("'", '&apos;')
    return text


class CatalogDocumentWriter:
    """Writes a TranslationCatalog in the catalog document format."""

    def __init__(
        self,
        product_name: str = PRODUCT_NAME,
        product_version: str = __version__,
        indent: str = "  ",
        encoding: str = "utf-8",
    ):
        """
        Initialize writer.

        Args:
            product_name: Name written in the header comment
            product_version: Version written in the header comment
            indent: Indentation unit
            encoding: Encoding used by ``write_file``
        """
        self.product_name = product_name
        self.product_version = product_version
        self.indent = indent
        self.encoding = encoding

    @classmethod
    def from_settings(cls, settings) -> "CatalogDocumentWriter":
        return cls(
            product_name=settings.product_name,
            product_version=settings.product_version,
            indent=settings.indent,
            encoding=settings.encoding,
        )

    def write(self, catalog: TranslationCatalog) -> str:
        """
        Serialize a catalog.

        Args:
            catalog: Catalog to serialize (languages and keys in stored order)

        Returns:
            Complete document text

        Raises:
            ValueError: A name or value cannot be represented in the document
        """
        one, two, three = self.indent, self.indent * 2, self.indent * 3
        lines = [
            f'<?xml version="1.0" encoding="{self.encoding}"?>',
            f'<!--{self.product_name} {self.product_version}-->',
            f'<!--LANGUAGES: {len(catalog)}-->',
            '<languages>',
        ]

        for language in catalog.languages:
            _check_attribute(language, "Language")
            lines.append(f'{one}<language value="{language}">')
            for key, value in catalog.translations(language).items():
                _check_attribute(key, "Key")
                _check_text(value, f"Value of '{language}/{key}'")
                lines.append(f'{two}<translated value="{key}">')
                lines.append(f'{three}<value>{escape_xml(value)}</value>')
                lines.append(f'{two}</translated>')
            lines.append(f'{one}</language>')

        lines.append('</languages>')
        return '\n'.join(lines) + '\n'

    def write_file(self, catalog: TranslationCatalog, path: Union[str, Path]) -> None:
        """
        Serialize a catalog to a file, replacing its contents.

        The document is encoded completely before anything touches the
        disk, then written to a temporary file beside the target and
        renamed over it. A failed save leaves the previous file intact.

        Raises:
            IOWriteFailure: The catalog could not be encoded or the file could not be written
        """
        path = Path(path)
        try:
            data = self.write(catalog).encode(self.encoding)
        except (ValueError, LookupError) as e:
            # UnicodeEncodeError is a ValueError, an unknown codec a LookupError
            raise IOWriteFailure(str(path), cause=e) from e

        try:
            fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.chmod(temp_name, _file_mode(path))
                os.replace(temp_name, path)
            except OSError:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise IOWriteFailure(str(path), cause=e) from e


__all__ = ["CatalogDocumentWriter", "escape_xml"]
