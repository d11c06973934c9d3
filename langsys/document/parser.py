#!/usr/bin/env python3
"""
Streaming parser for catalog documents.

Document structure:
```xml
<languages>
  <import-language file="common.xml"/>
  <language value="english">
    <translated value="greeting">
      <value>Hello</value>
    </translated>
    <translated value="read">
      <value tense="participle">read</value>
      <value tense="gerund">reading</value>
    </translated>
  </language>
</languages>
```

Values tagged with a ``tense`` attribute are stored under composite keys
(``read~participle``). Imports are parsed recursively when their element
is reached and merged into the document at that point, so later values
in the importing document override imported ones. A failed import is
recorded in ``ParsedDocument.errors`` and skipped.
"""

import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, Optional, Union
from xml.etree import ElementTree as ET

from ..catalog import LanguageMap, composite_key, is_composite_key
from ..errors import (
    CatalogError,
    DocumentNotFound,
    ImportCycleDetected,
    ImportDepthExceeded,
    ImportFailed,
    MalformedDocument,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ParserState(Enum):
    """Position of the parser within the document structure."""
    IDLE = "idle"
    IN_LANGUAGE = "in_language"
    IN_TRANSLATED = "in_translated"
    IN_VALUE = "in_value"


@dataclass
class ParsedDocument:
    """
    Raw result of one parse pass, imports included.

    Attributes:
        source: Resolved path or label of the parsed document
        languages: language -> key -> text, not normalized
        imports: Resolved paths of successfully imported documents, in order
        errors: Import failures that were skipped
    """
    source: str = "<string>"
    languages: dict[str, LanguageMap] = field(default_factory=dict)
    imports: list[str] = field(default_factory=list)
    errors: list[CatalogError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def language(self, name: str) -> LanguageMap:
        """Return the key -> text map of a language, creating it if needed."""
        return self.languages.setdefault(name, {})

    def merge(self, other: "ParsedDocument") -> None:
        """Overlay another document; its values win on conflict."""
        for name, values in other.languages.items():
            self.language(name).update(values)
        self.imports.extend(other.imports)
        self.errors.extend(other.errors)


class CatalogDocumentParser:
    """
    Event-driven parser turning a catalog document into a ParsedDocument.

    The parser is stateless between calls; each parse starts from scratch.
    Import chains are guarded against cycles and against nesting deeper
    than ``max_import_depth``.
    """

    IMPORT_TAG = "import-language"
    LANGUAGE_TAG = "language"
    TRANSLATED_TAG = "translated"
    VALUE_TAG = "value"

    def __init__(self, max_import_depth: int = 16):
        """
        Initialize parser.

        Args:
            max_import_depth: Maximum nesting of import directives
        """
        self.max_import_depth = max_import_depth

    @classmethod
    def from_settings(cls, settings) -> "CatalogDocumentParser":
        return cls(max_import_depth=settings.max_import_depth)

    def parse_file(self, path: PathLike) -> ParsedDocument:
        """
        Parse a document from the filesystem.

        Relative import paths are resolved against the document's directory.

        Raises:
            DocumentNotFound: The file is missing or unreadable
            MalformedDocument: The file is not well-formed XML
        """
        return self._parse_file(Path(path), chain=(), depth=0)

    def parse_string(
        self,
        content: str,
        base_dir: Optional[PathLike] = None,
        source: str = "<string>",
    ) -> ParsedDocument:
        """
        Parse a document held in memory.

        Args:
            content: XML text
            base_dir: Directory for relative imports (current directory if None)
            source: Label used in error messages
        """
        return self.parse_stream(io.StringIO(content), base_dir=base_dir, source=source)

    def parse_stream(
        self,
        stream: IO,
        base_dir: Optional[PathLike] = None,
        source: str = "<stream>",
    ) -> ParsedDocument:
        """
        Parse a document from an open text or binary stream.

        The stream is read to the end but not closed.
        """
        base = Path(base_dir) if base_dir is not None else None
        return self._parse_source(stream, source, base, chain=(), depth=0)

    def _parse_file(self, path: Path, chain: tuple[str, ...], depth: int) -> ParsedDocument:
        resolved = path.resolve()
        try:
            handle = resolved.open("rb")
        except OSError as e:
            raise DocumentNotFound(str(path), f"Cannot open document {path}: {e.strerror or e}") from e

        with handle:
            return self._parse_source(
                handle,
                str(resolved),
                resolved.parent,
                chain=chain + (str(resolved),),
                depth=depth,
            )

    def _parse_source(
        self,
        stream: IO,
        source: str,
        base_dir: Optional[Path],
        chain: tuple[str, ...],
        depth: int,
    ) -> ParsedDocument:
        document = ParsedDocument(source=source)
        state = ParserState.IDLE
        current_language: Optional[str] = None
        current_key: Optional[str] = None
        tense: Optional[str] = None

        try:
            for event, elem in ET.iterparse(stream, events=("start", "end")):
                tag = _local_name(elem.tag)

                if event == "start":
                    if tag == self.IMPORT_TAG:
                        target = elem.get("file")
                        if target:
                            self._import(target, base_dir, chain, depth, document)

                    elif tag == self.LANGUAGE_TAG:
                        current_language = elem.get("value")
                        current_key = None
                        tense = None
                        if current_language is None:
                            logger.debug("Ignoring <language> without value in %s", source)
                            state = ParserState.IDLE
                        else:
                            document.language(current_language)
                            state = ParserState.IN_LANGUAGE

                    elif tag == self.TRANSLATED_TAG:
                        tense = None
                        if state is ParserState.IN_LANGUAGE and elem.get("value") is not None:
                            current_key = elem.get("value")
                            state = ParserState.IN_TRANSLATED
                        else:
                            logger.debug("Ignoring stray <translated> in %s", source)

                    elif tag == self.VALUE_TAG:
                        if state is ParserState.IN_TRANSLATED:
                            tense = elem.get("tense")
                            state = ParserState.IN_VALUE
                        else:
                            logger.debug("Ignoring stray <value> in %s", source)

                else:
                    if tag == self.VALUE_TAG and state is ParserState.IN_VALUE:
                        text = "".join(elem.itertext()).strip()
                        key = self._effective_key(current_key, tense)
                        document.language(current_language)[key] = text
                        tense = None
                        state = ParserState.IN_TRANSLATED

                    elif tag == self.TRANSLATED_TAG:
                        if state is ParserState.IN_TRANSLATED:
                            state = ParserState.IN_LANGUAGE
                        current_key = None
                        elem.clear()

                    elif tag == self.LANGUAGE_TAG:
                        current_language = None
                        state = ParserState.IDLE
                        elem.clear()

        except ET.ParseError as e:
            line, column = getattr(e, "position", (None, None))
            raise MalformedDocument(source, str(e), line, column) from e

        return document

    @staticmethod
    def _effective_key(key: str, tense: Optional[str]) -> str:
        """Key under which a value is stored, tense-suffixed when tagged."""
        if is_composite_key(key) or not tense:
            return key
        return composite_key(key, tense)

    def _import(
        self,
        target: str,
        base_dir: Optional[Path],
        chain: tuple[str, ...],
        depth: int,
        document: ParsedDocument,
    ) -> None:
        """Parse an imported document and merge it, or record why it failed."""
        path = Path(target)
        if not path.is_absolute():
            path = (base_dir or Path.cwd()) / path
        resolved = str(path.resolve())

        error: ImportFailed
        if resolved in chain:
            error = ImportCycleDetected(resolved, chain)
        elif depth + 1 > self.max_import_depth:
            error = ImportDepthExceeded(resolved, self.max_import_depth, chain)
        else:
            try:
                imported = self._parse_file(path, chain, depth + 1)
            except CatalogError as e:
                error = ImportFailed(resolved, cause=e)
                error.__cause__ = e
            else:
                document.imports.append(resolved)
                document.merge(imported)
                return

        logger.warning("Skipping import '%s' in %s: %s", target, document.source, error)
        document.errors.append(error)


def _local_name(tag) -> str:
    """Lower-cased tag name without namespace."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1].lower()


__all__ = ["CatalogDocumentParser", "ParsedDocument", "ParserState"]
