"""
End-to-end tests for the extraction workflow.

These tests run the full cycle on a small project: extract into the locale
files, translate by hand, rewrite the sources, extract again, and check the
reports and the runtime lookups against the result.
"""

from __future__ import annotations

from jsx_i18n.config.schema import I18nConfig
from jsx_i18n.dictionaries.analyzer import KeyAnalyzer
from jsx_i18n.extraction.exclusions import ExclusionPolicy
from jsx_i18n.extraction.transformer import Transformer
from jsx_i18n.manager import TranslationManager
from jsx_i18n.runtime.translator import Translator

from tests.utils.helpers import config_with, read_json, write_json, write_source

FORM = """export const Form = () => (
  <form>
    <input placeholder="Enter your name" type="text" />
    <div>Hello World</div>
  </form>
);
"""

HEADER = """export const Header = () => (
  <header>
    <div>Hello World</div>
    <a href="https://example.com" target="_blank">Docs</a>
  </header>
);
"""


class TestExtractionWorkflow:
    """Test the complete extract, translate, transform cycle."""

    def test_placeholder_extracted_type_ignored(self, base_config: I18nConfig) -> None:
        """Test the input element scenario end to end."""
        _ = write_source(base_config.source_dir, "Form.tsx", FORM)

        scan, result = TranslationManager(base_config).extract_and_update()

        keys = [entry.key for entry in scan.entries]
        assert "ENTER_YOUR_NAME" in keys
        assert "TEXT" not in keys
        assert result.dictionaries["en"]["ENTER_YOUR_NAME"] == "Enter your name"

    def test_full_cycle(self, base_config: I18nConfig) -> None:
        form = write_source(base_config.source_dir, "Form.tsx", FORM)
        header = write_source(base_config.source_dir, "Header.tsx", HEADER)
        en_path = base_config.locales_dir / "en.json"
        ko_path = base_config.locales_dir / "ko.json"

        # First extraction creates the dictionaries with placeholders
        _ = TranslationManager(base_config).extract_and_update()
        assert read_json(en_path) == {
            "ENTER_YOUR_NAME": "Enter your name",
            "HELLO_WORLD": "Hello World",
            "DOCS": "Docs",
        }
        assert read_json(ko_path) == {"ENTER_YOUR_NAME": "", "HELLO_WORLD": "", "DOCS": ""}

        # A translator fills in Korean
        _ = write_json(ko_path, {"ENTER_YOUR_NAME": "", "HELLO_WORLD": "안녕하세요", "DOCS": "문서"})

        # Rewrite the sources
        run = Transformer(base_config, ExclusionPolicy()).transform_directory()
        assert run.changed_files == [form, header]
        assert '<div>{i18n.t("HELLO_WORLD")}</div>' in header.read_text(encoding="utf-8")
        assert 'href="https://example.com" target="_blank"' in header.read_text(encoding="utf-8")

        # Extracting again from rewritten sources keeps every translation
        scan, _ = TranslationManager(base_config).extract_and_update()
        assert scan.entries == []
        assert read_json(ko_path) == {"ENTER_YOUR_NAME": "", "HELLO_WORLD": "안녕하세요", "DOCS": "문서"}

        # Reports run over the rewritten sources
        analyzer = KeyAnalyzer(base_config)
        # The injected import moved every line down by one
        assert analyzer.find_duplicates() == {"HELLO_WORLD": [f"{form}:5", f"{header}:4"]}
        assert analyzer.find_unused() == []
        assert analyzer.find_missing() == []

        # The runtime reads what was written
        translator = Translator(language="ko", fallback_language="en")
        _ = translator.load_locales_dir(base_config.locales_dir)
        assert translator.t("HELLO_WORLD") == "안녕하세요"
        assert translator.t("ENTER_YOUR_NAME") == "Enter your name"

    def test_source_change_keeps_stale_keys(self, base_config: I18nConfig) -> None:
        """Test that removed text stays in the dictionaries until cleaned."""
        path = write_source(base_config.source_dir, "A.tsx", "export const A = () => <p>Old text</p>;\n")
        manager = TranslationManager(base_config)
        _ = manager.extract_and_update()

        _ = path.write_text("export const A = () => <p>New text</p>;\n", encoding="utf-8")
        _ = manager.extract_and_update()

        en_path = base_config.locales_dir / "en.json"
        assert read_json(en_path) == {"OLD_TEXT": "Old text", "NEW_TEXT": "New text"}

        # Only the sources that call the runtime count as references
        _ = Transformer(base_config).transform_directory()
        result = KeyAnalyzer(base_config).remove_unused()
        assert result.unused_keys == ["OLD_TEXT"]
        assert read_json(en_path) == {"NEW_TEXT": "New text"}

    def test_namespaced_nested_project(self, base_config: I18nConfig) -> None:
        config = config_with(base_config, namespace="form", output_format="nested")
        path = write_source(config.source_dir, "Form.tsx", FORM)

        _ = TranslationManager(config).extract_and_update()
        _ = Transformer(config).transform_directory()

        assert read_json(config.locales_dir / "en.json") == {
            "form": {"ENTER_YOUR_NAME": "Enter your name", "HELLO_WORLD": "Hello World"}
        }
        assert 'i18n.t("form.HELLO_WORLD")' in path.read_text(encoding="utf-8")
        assert KeyAnalyzer(config).find_unused() == []

    def test_exclusion_rules_from_config(self, base_config: I18nConfig) -> None:
        _ = write_source(base_config.source_dir, "Header.tsx", HEADER)
        _ = ExclusionPolicy(base_config.exclusions_file).add_rule("Docs", "product name")

        scan, _ = TranslationManager(base_config).extract_and_update()

        assert [entry.key for entry in scan.entries] == ["HELLO_WORLD"]
