#!/usr/bin/env python3
"""
Tests for CatalogBuilder.

Tests verify:
1. Best-effort load/save never raises and logs to the debug channel
2. Strict mode raises every error kind
3. Create-on-save workflow with the remembered path
4. Loading from package resources
"""

import logging
import uuid

import pytest

from langsys.builder import CatalogBuilder
from langsys.config import CatalogSettings
from langsys.errors import DocumentNotFound, ImportFailed, IOWriteFailure, MalformedDocument


BASE_XML = """<languages>
  <language value="english">
    <translated value="greeting"><value>Hi</value></translated>
  </language>
  <import-language file="extra.xml"/>
</languages>"""

EXTRA_XML = """<languages>
  <language value="english">
    <translated value="greeting"><value>Hello</value></translated>
    <translated value="farewell"><value>Bye</value></translated>
  </language>
  <language value="portuguese">
    <translated value="greeting"><value>Olá</value></translated>
  </language>
</languages>"""


@pytest.fixture
def catalog_dir(tmp_path):
    (tmp_path / "base.xml").write_text(BASE_XML, encoding="utf-8")
    (tmp_path / "extra.xml").write_text(EXTRA_XML, encoding="utf-8")
    return tmp_path


def test_load_merges_and_normalizes(catalog_dir):
    builder = CatalogBuilder()
    assert builder.load_from_file(catalog_dir / "base.xml") is True
    assert builder.get_value("english", "greeting") == "Hello"
    assert builder.get_value("portuguese", "farewell") == ""
    assert builder.languages() == ["english", "portuguese"]


def test_load_missing_file_is_silent(tmp_path, caplog):
    builder = CatalogBuilder()
    with caplog.at_level(logging.DEBUG, logger="langsys.builder"):
        assert builder.load_from_file(tmp_path / "nope.xml") is False
    assert builder.catalog.languages == []
    assert builder.file_path == str(tmp_path / "nope.xml")
    assert "Best-effort load" in caplog.text


def test_load_malformed_file_is_silent(tmp_path):
    path = tmp_path / "bad.xml"
    path.write_text("<languages>", encoding="utf-8")
    builder = CatalogBuilder()
    builder.put_translation("english", "kept", "yes")
    assert builder.load_from_file(path) is False
    assert builder.catalog.to_dict() == {"english": {"kept": "yes"}}


def test_load_with_failed_import_merges_partial(tmp_path):
    path = tmp_path / "main.xml"
    path.write_text(
        '<languages><import-language file="gone.xml"/>'
        '<language value="en"><translated value="k"><value>v</value></translated></language></languages>',
        encoding="utf-8",
    )
    builder = CatalogBuilder()
    assert builder.load_from_file(path) is False
    assert builder.get_value("en", "k") == "v"


def test_strict_missing_file_raises(tmp_path):
    builder = CatalogBuilder(strict=True)
    with pytest.raises(DocumentNotFound):
        builder.load_from_file(tmp_path / "nope.xml")


def test_strict_malformed_raises():
    builder = CatalogBuilder(strict=True)
    with pytest.raises(MalformedDocument):
        builder.load_from_string("<languages><language></languages>")


def test_strict_failed_import_raises_without_merging(tmp_path):
    builder = CatalogBuilder(settings=CatalogSettings(strict=True))
    with pytest.raises(ImportFailed):
        builder.load_from_string(
            '<languages><import-language file="gone.xml"/>'
            '<language value="en"><translated value="k"><value>v</value></translated></language></languages>',
            base_dir=tmp_path,
        )
    assert builder.catalog.languages == []


def test_create_on_save_workflow(tmp_path):
    path = tmp_path / "languages.xml"
    builder = CatalogBuilder()
    builder.load_from_file(path)
    builder.put_language("english")
    builder.put_language("portuguese")
    builder.put_translation("english", "hello_world", "Hello, World!")
    builder.put_translation("portuguese", "hello_world", "Olá, Mundo!")
    assert builder.save() is True

    reloaded = CatalogBuilder(strict=True)
    reloaded.load_from_file(path)
    assert reloaded.catalog == builder.catalog


def test_save_to_file_remembers_path(tmp_path):
    builder = CatalogBuilder()
    builder.put_translation("english", "k", "v")
    first = tmp_path / "first.xml"
    assert builder.save_to_file(first) is True
    builder.put_translation("english", "k", "w")
    assert builder.save() is True
    assert "<value>w</value>" in first.read_text(encoding="utf-8")


def test_save_without_path_is_silent(caplog):
    builder = CatalogBuilder()
    with caplog.at_level(logging.DEBUG, logger="langsys.builder"):
        assert builder.save() is False
    assert "Could not save catalog" in caplog.text


def test_save_failure_is_silent(tmp_path):
    builder = CatalogBuilder()
    assert builder.save_to_file(tmp_path / "no-such-dir" / "out.xml") is False


def test_strict_save_failure_raises(tmp_path):
    builder = CatalogBuilder(strict=True)
    with pytest.raises(IOWriteFailure):
        builder.save_to_file(tmp_path / "no-such-dir" / "out.xml")
    with pytest.raises(IOWriteFailure):
        CatalogBuilder(strict=True).save()


def test_unencodable_save_is_silent_and_keeps_file(tmp_path):
    path = tmp_path / "languages.xml"
    builder = CatalogBuilder()
    builder.put_translation("english", "k", "v")
    assert builder.save_to_file(path) is True
    before = path.read_bytes()

    builder.put_translation("english", "bad", "\ud800")
    assert builder.save() is False
    assert path.read_bytes() == before


def test_strict_unencodable_save_raises(tmp_path):
    path = tmp_path / "languages.xml"
    builder = CatalogBuilder(CatalogSettings(encoding="latin-1", strict=True))
    builder.put_translation("english", "k", "v")
    builder.save_to_file(path)
    before = path.read_bytes()

    builder.put_translation("russian", "k", "Привет")
    with pytest.raises(IOWriteFailure) as info:
        builder.save()
    assert isinstance(info.value.cause, UnicodeEncodeError)
    assert path.read_bytes() == before


def test_control_character_save_fails_and_document_stays_loadable(tmp_path):
    path = tmp_path / "languages.xml"
    builder = CatalogBuilder()
    builder.put_translation("english", "k", "ok")
    assert builder.save_to_file(path) is True

    builder.put_translation("english", "k", "a\x0bb")
    assert builder.save() is False

    reloaded = CatalogBuilder()
    assert reloaded.load_from_file(path) is True
    assert reloaded.get_value("english", "k") == "ok"


def test_unsafe_key_save_fails(tmp_path):
    builder = CatalogBuilder(strict=True)
    builder.put_translation("english", 'say "hi"', "v")
    with pytest.raises(IOWriteFailure):
        builder.save_to_file(tmp_path / "languages.xml")
    assert not (tmp_path / "languages.xml").exists()


def test_mutators_renormalize():
    builder = CatalogBuilder()
    builder.put_translation("english", "a", "A")
    builder.put_language("german")
    assert builder.keys("german") == ["a"]
    builder.remove_translation("german", "a")
    assert builder.get_value("german", "a") == ""
    builder.remove_key("a")
    assert builder.keys("english") == []
    builder.remove_language("german")
    assert builder.languages() == ["english"]


def test_to_document_string_uses_settings():
    settings = CatalogSettings(product_name="demo", product_version="9.9")
    builder = CatalogBuilder(settings)
    builder.put_translation("english", "k", "v")
    output = builder.to_document_string()
    assert "<!--demo 9.9-->" in output
    assert "<!--LANGUAGES: 1-->" in output


def test_load_from_resource(tmp_path, monkeypatch):
    package = f"res_{uuid.uuid4().hex[:8]}"
    package_dir = tmp_path / package
    package_dir.mkdir()
    (package_dir / "__init__.py").write_text("", encoding="utf-8")
    (package_dir / "base.xml").write_text(BASE_XML, encoding="utf-8")
    (package_dir / "extra.xml").write_text(EXTRA_XML, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))

    builder = CatalogBuilder(strict=True)
    assert builder.load_from_resource(package, "base.xml") is True
    assert builder.get_value("english", "greeting") == "Hello"
    assert builder.file_path is None


def test_load_from_missing_resource():
    builder = CatalogBuilder()
    assert builder.load_from_resource("langsys", "no-such-catalog.xml") is False
    assert builder.load_from_resource("no_such_package_xyz", "languages.xml") is False

    with pytest.raises(DocumentNotFound):
        CatalogBuilder(strict=True).load_from_resource("no_such_package_xyz", "languages.xml")
