"""Tests for tenant translation loading."""

import os

import pytest

from multitenant.error_handling import ConfigFileError
from multitenant.tenancy.translation import FileLoader, Translator


def write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


@pytest.fixture
def lang_paths(tmp_path):
    tenant = str(tmp_path / "tenant")
    app = str(tmp_path / "app")
    write(f"{tenant}/en/messages.yaml", "welcome: Hi {name}\nnested:\n  title: Tenant title\n")
    write(f"{tenant}/nl/messages.yml", "welcome: Hallo {name}\n")
    write(f"{app}/en/messages.yaml", "welcome: App welcome\nfooter: App footer\n")
    write(f"{app}/en/errors.json", '{"not_found": "Page not found"}')
    return tenant, app


class TestFileLoader:
    """Test loading translation groups."""

    def test_earlier_paths_win(self, lang_paths):
        """Test tenant language lines override host lines."""
        loader = FileLoader(list(lang_paths))
        lines = loader.load("en", "messages")

        assert lines["welcome"] == "Hi {name}"
        assert lines["footer"] == "App footer"

    def test_missing_group(self, lang_paths):
        """Test a missing group loads as empty."""
        assert FileLoader(list(lang_paths)).load("fr", "messages") == {}

    def test_invalid_file(self, tmp_path):
        """Test a language file that is not a mapping."""
        write(str(tmp_path / "en" / "broken.yaml"), "just a string\n")
        with pytest.raises(ConfigFileError):
            FileLoader([str(tmp_path)]).load("en", "broken")


class TestTranslator:
    """Test translation lookup."""

    @pytest.fixture
    def translator(self, lang_paths):
        return Translator(FileLoader(list(lang_paths)), "nl", fallback="en")

    def test_locale_line(self, translator):
        """Test lookup in the current locale with replacements."""
        assert translator.get("messages.welcome", {"name": "Ann"}) == "Hallo Ann"

    def test_fallback_locale(self, translator):
        """Test lookup falls back to the fallback locale."""
        assert translator.get("messages.footer") == "App footer"
        assert translator.get("errors.not_found") == "Page not found"
        assert translator.get("messages.nested.title") == "Tenant title"

    def test_missing_key_returns_key(self, translator):
        """Test unknown keys translate to themselves."""
        assert translator.get("messages.unknown") == "messages.unknown"
        assert translator.get("messages") == "messages"
        assert not translator.has("messages.unknown")

    def test_explicit_locale(self, translator):
        """Test lookup in an explicitly requested locale."""
        assert translator.get("messages.welcome", {"name": "Ann"}, locale="en") == "Hi Ann"

    def test_missing_replacement_keeps_line(self, translator):
        """Test a missing replacement leaves the line unformatted."""
        assert translator.get("messages.welcome", {"other": "x"}) == "Hallo {name}"

    def test_without_fallback(self, lang_paths):
        """Test lookup without a fallback locale."""
        translator = Translator(FileLoader(list(lang_paths)), "nl")
        assert translator.get("messages.footer") == "messages.footer"

        translator.set_fallback("en")
        assert translator.has("messages.footer")
