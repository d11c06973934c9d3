#!/usr/bin/env python3
"""
Settings shared by the parser, writer and builder.

Settings are plain dataclass values. They can be built in code or read
from a YAML file:

```yaml
strict: true
max_import_depth: 8
encoding: utf-8
product_name: my-app
product_version: "2.1"
```
"""

from dataclasses import dataclass, fields, replace as _replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from . import __version__
from .errors import ConfigurationError, DocumentNotFound

PRODUCT_NAME = "langsys"


@dataclass(frozen=True)
class CatalogSettings:
    """
    Catalog behaviour settings.

    Attributes:
        strict: Raise load/save errors from CatalogBuilder instead of logging them
        max_import_depth: Maximum nesting of ``<import-language>`` directives
        encoding: Encoding of exported documents (reading follows each document's own XML declaration)
        product_name: Name written in the header comment of exported documents
        product_version: Version written in the header comment
        indent: Indentation unit used by the writer
    """
    strict: bool = False
    max_import_depth: int = 16
    encoding: str = "utf-8"
    product_name: str = PRODUCT_NAME
    product_version: str = __version__
    indent: str = "  "

    def __post_init__(self):
        if self.max_import_depth < 1:
            raise ConfigurationError("max_import_depth must be at least 1")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CatalogSettings":
        """
        Build settings from a mapping, rejecting unknown keys and bad types.

        Args:
            data: Mapping of setting name -> value

        Returns:
            CatalogSettings instance
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

        values = {}
        for name, value in data.items():
            expected = type(getattr(cls, name))
            # bool is an int subclass, keep them apart
            if expected is int and isinstance(value, bool):
                raise ConfigurationError(f"Setting '{name}' must be an integer")
            if expected is str and isinstance(value, (int, float)) and not isinstance(value, bool):
                value = str(value)
            if not isinstance(value, expected):
                raise ConfigurationError(
                    f"Setting '{name}' must be of type {expected.__name__}, got {type(value).__name__}"
                )
            values[name] = value
        return cls(**values)

    def replace(self, **changes: Any) -> "CatalogSettings":
        """Return a copy with the given settings changed."""
        return _replace(self, **changes)


def load_settings(path) -> CatalogSettings:
    """
    Load settings from a YAML file.

    Args:
        path: Path to the YAML settings file

    Returns:
        CatalogSettings instance (defaults for keys not present)
    """
    settings_path = Path(path)
    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as e:
        raise DocumentNotFound(str(settings_path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {settings_path}: {e}") from e

    if data is None:
        return CatalogSettings()
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must define a mapping at the top level")
    return CatalogSettings.from_mapping(data)


__all__ = ["CatalogSettings", "PRODUCT_NAME", "load_settings"]
