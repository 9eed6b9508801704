"""
Tests for extraction of translatable text from component sources.

This module tests JSX text and attribute extraction, built-in and user
exclusions, template literals, source file discovery and per-file failure
isolation.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from jsx_i18n.config.schema import I18nConfig
from jsx_i18n.extraction.exclusions import ExclusionPolicy
from jsx_i18n.extraction.matching import decode_escape_sequence, is_builtin_excluded, normalize_jsx_text
from jsx_i18n.extraction.scanner import CandidateEntry, Scanner, find_source_files

from tests.utils.helpers import config_with, write_source


def scan(config: I18nConfig, source: str, policy: ExclusionPolicy | None = None) -> list[CandidateEntry]:
    return Scanner(config, policy).scan_source(source, "App.tsx")


class TestBuiltinExclusions:
    """Test the exclusions that apply regardless of user rules."""

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "\n\t", "123", "2024", "http://example.com", "https://example.com/a", "_blank", "noopener noreferrer"],
    )
    def test_excluded(self, text: str) -> None:
        assert is_builtin_excluded(text)

    @pytest.mark.parametrize("text", ["Hello", "Page 2", "Visit http://x.y", "blank"])
    def test_not_excluded(self, text: str) -> None:
        assert not is_builtin_excluded(text)

    def test_builtins_apply_without_user_rules(self, base_config: I18nConfig) -> None:
        """Test that digits and URLs are never extracted."""
        source = """const A = () => (
  <div>
    <p>42</p>
    <a title="https://example.com">http://example.com</a>
    <p>   </p>
  </div>
);
"""
        assert scan(base_config, source) == []

    def test_normalize_jsx_text(self) -> None:
        assert normalize_jsx_text("Hello\n      World") == "Hello World"
        assert normalize_jsx_text("  Hello   there ") == "Hello   there"


class TestEscapeDecoding:
    """Test decoding of single JavaScript escape sequences."""

    @pytest.mark.parametrize(
        ("sequence", "expected"),
        [
            ("\\n", "\n"),
            ("\\t", "\t"),
            ("\\'", "'"),
            ('\\"', '"'),
            ("\\\\", "\\"),
            ("\\x41", "A"),
            ("\\u00e9", "é"),
            ("\\u{1F600}", "\U0001f600"),
            ("\\\n", ""),
            ("\\d", "d"),
        ],
    )
    def test_decode(self, sequence: str, expected: str) -> None:
        assert decode_escape_sequence(sequence) == expected


class TestTextExtraction:
    """Test extraction of JSX text nodes."""

    def test_simple_text(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = () => <div>Hello World</div>;\n")

        assert entries == [
            CandidateEntry(key="HELLO_WORLD", default_value="Hello World", file="App.tsx", line=1)
        ]

    def test_text_is_trimmed_and_lines_reported(self, base_config: I18nConfig) -> None:
        """Test that surrounding whitespace is dropped and the text's own line is used."""
        source = """const A = () => (
  <section>
    Welcome back
  </section>
);
"""
        entries = scan(base_config, source)

        assert [(entry.default_value, entry.line) for entry in entries] == [("Welcome back", 3)]

    def test_multiline_text_is_collapsed(self, base_config: I18nConfig) -> None:
        source = """const A = () => (
  <p>
    Read the
    documentation
  </p>
);
"""
        entries = scan(base_config, source)

        assert entries[0].default_value == "Read the documentation"
        assert entries[0].key == "READ_THE_DOCUMENTATION"

    def test_text_around_expressions(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = ({ n }) => <p>Total: {n} items</p>;\n")

        assert [entry.default_value for entry in entries] == ["Total:", "items"]

    def test_same_text_on_different_lines(self, base_config: I18nConfig) -> None:
        """Test that identical text yields one entry per location."""
        source = """const A = () => (
  <div>
    <p>Save</p>
    <p>Save</p>
  </div>
);
"""
        entries = scan(base_config, source)

        assert [(entry.key, entry.line) for entry in entries] == [("SAVE", 3), ("SAVE", 4)]

    def test_same_key_on_one_line_is_deduplicated(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = () => <p><b>Save</b><i>Save</i></p>;\n")
        assert len(entries) == 1

    def test_non_latin_text_skipped_in_text_mode(
        self, base_config: I18nConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that text producing an empty key is skipped with a warning."""
        entries = scan(base_config, "const A = () => <p>안녕하세요</p>;\n")

        assert entries == []
        assert "hash key generation" in caplog.text

    def test_non_latin_text_in_hash_mode(self, base_config: I18nConfig) -> None:
        config = config_with(base_config, key_generation="hash")
        entries = scan(config, "const A = () => <p>안녕하세요</p>;\n")

        assert len(entries) == 1
        assert len(entries[0].key) == 8

    def test_namespace_recorded(self, base_config: I18nConfig) -> None:
        config = config_with(base_config, namespace="home")
        entries = scan(config, "const A = () => <p>Hello</p>;\n")

        assert entries[0].key == "HELLO"
        assert entries[0].namespace == "home"

    def test_character_references_join_the_text(self, base_config: I18nConfig) -> None:
        """Test that text split by an entity is extracted once, decoded."""
        entries = scan(base_config, "const A = () => <p>Tom &amp; Jerry</p>;\n")

        assert [(entry.key, entry.default_value) for entry in entries] == [("TOM_JERRY", "Tom & Jerry")]

    def test_leading_character_reference(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = () => <p>&quot;Quoted&quot; words</p>;\n")

        assert [(entry.key, entry.default_value) for entry in entries] == [("QUOTED_WORDS", '"Quoted" words')]

    def test_non_breaking_space_reference(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = () => <p>Tom&nbsp;Jerry</p>;\n")

        assert [(entry.key, entry.default_value) for entry in entries] == [("TOM_JERRY", "Tom\xa0Jerry")]

    def test_reference_only_whitespace_ignored(self, base_config: I18nConfig) -> None:
        assert scan(base_config, "const A = () => <p>&nbsp;</p>;\n") == []

    def test_transformed_source_yields_no_text(self, base_config: I18nConfig) -> None:
        """Test that runtime calls are not extracted again."""
        source = 'const A = () => <p title={i18n.t("HELLO")}>{i18n.t("HELLO")}</p>;\n'
        assert scan(base_config, source) == []


class TestAttributeExtraction:
    """Test extraction of attribute values."""

    def test_placeholder_extracted_type_ignored(self, base_config: I18nConfig) -> None:
        """Test the allow-list: placeholder is extracted, type is not."""
        entries = scan(base_config, 'const A = () => <input placeholder="Enter your name" type="text" />;\n')

        assert [(entry.key, entry.default_value) for entry in entries] == [
            ("ENTER_YOUR_NAME", "Enter your name")
        ]

    def test_unlisted_attributes_ignored(self, base_config: I18nConfig) -> None:
        source = 'const A = () => <div className="Card" id="Main" data-testid="Card" aria-label="Menu" />;\n'
        assert scan(base_config, source) == []

    def test_braced_string_literal(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = () => <img alt={'Company logo'} />;\n")
        assert [entry.default_value for entry in entries] == ["Company logo"]

    def test_braced_string_escapes_decoded(self, base_config: I18nConfig) -> None:
        """Test that JavaScript escapes are decoded in braced string literals."""
        source = r"""const A = () => (
  <div>
    <img alt={'Don\'t go'} />
    <img alt={"Caf\u00e9 au lait"} />
    <img alt={"Smile \u{1F600}"} />
  </div>
);
"""
        entries = scan(base_config, source)

        assert [(entry.key, entry.default_value) for entry in entries] == [
            ("DON_T_GO", "Don't go"),
            ("CAF_AU_LAIT", "Caf\u00e9 au lait"),
            ("SMILE", "Smile \U0001f600"),
        ]

    def test_plain_attribute_decodes_entities_not_backslashes(self, base_config: I18nConfig) -> None:
        source = r'const A = () => <input placeholder="Fish &amp; Chips" title="C:\Users" />;' + "\n"

        entries = scan(base_config, source)

        assert [entry.default_value for entry in entries] == ["Fish & Chips", "C:\\Users"]

    def test_expression_values_ignored(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = ({ t }) => <input placeholder={t} title={t + '!'} />;\n")
        assert entries == []

    def test_custom_allow_list(self, base_config: I18nConfig) -> None:
        """Test that the allow-list is configurable but the deny-list still wins."""
        config = config_with(base_config, attributes_to_translate=["aria-label", "className"])
        source = 'const A = () => <button aria-label="Close" className="Primary" title="Ignored" />;\n'

        entries = scan(config, source)

        assert [entry.default_value for entry in entries] == ["Close"]

    def test_template_literal(self, base_config: I18nConfig) -> None:
        """Test that template literals become interpolated text."""
        source = "const A = ({ user }) => <input placeholder={`Hello ${user.name}, welcome`} />;\n"

        entries = scan(base_config, source)

        assert len(entries) == 1
        assert entries[0].default_value == "Hello {name}, welcome"
        assert entries[0].key == "HELLO_NAME_WELCOME"
        assert entries[0].is_template

    def test_template_without_literal_text_ignored(self, base_config: I18nConfig) -> None:
        entries = scan(base_config, "const A = ({ a }) => <input title={`${a}`} />;\n")
        assert entries == []


class TestUserExclusions:
    """Test that user rules are applied after the built-ins."""

    def test_literal_and_regex_rules(self, base_config: I18nConfig) -> None:
        policy = ExclusionPolicy()
        _ = policy.add_rule("Acme")
        _ = policy.add_rule("/^[A-Z]{2,}$/")
        source = """const A = () => (
  <div>
    <h1>Acme</h1>
    <p>API</p>
    <p>Dashboard</p>
  </div>
);
"""
        entries = scan(base_config, source, policy)

        assert [entry.default_value for entry in entries] == ["Dashboard"]


class TestSourceDiscovery:
    """Test finding the files to scan."""

    def test_find_source_files(self, base_config: I18nConfig) -> None:
        src = base_config.source_dir
        expected = [
            write_source(src, "App.tsx", ""),
            write_source(src, "components/Button.jsx", ""),
            write_source(src, "lib/util.ts", ""),
        ]
        _ = write_source(src, "node_modules/pkg/index.js", "")
        _ = write_source(src, "App.test.tsx", "")
        _ = write_source(src, "types.d.ts", "")
        _ = write_source(src, "styles.css", "")

        assert find_source_files(base_config) == sorted(expected)

    def test_ignore_patterns(self, base_config: I18nConfig) -> None:
        src = base_config.source_dir
        keep = write_source(src, "App.tsx", "")
        _ = write_source(src, "generated/api.ts", "")
        _ = write_source(src, "stories/Button.stories.tsx", "")
        config = config_with(base_config, ignore_patterns=["**/generated/**", "*.stories.tsx"])

        assert find_source_files(config) == [keep]

    def test_missing_source_dir(self, base_config: I18nConfig, tmp_path: Path) -> None:
        config = config_with(base_config, source_dir=tmp_path / "nope")
        assert find_source_files(config) == []


class TestScanDirectory:
    """Test scanning a whole project."""

    def test_parse_failure_is_isolated(self, base_config: I18nConfig) -> None:
        """Test that one broken file does not stop the others from being scanned."""
        src = base_config.source_dir
        good = write_source(src, "Good.tsx", "export const G = () => <p>Hello</p>;\n")
        bad = write_source(src, "Bad.tsx", "export const B = () => <p>Broken;\n")
        other = write_source(src, "Other.tsx", "export const O = () => <p>World</p>;\n")

        result = Scanner(base_config).scan_directory()

        assert [entry.key for entry in result.entries] == ["HELLO", "WORLD"]
        assert result.scanned_files == [good, other]
        assert [path for path, _ in result.failed_files] == [bad]
        assert result.failure_count == 1
        assert result.success_rate == pytest.approx(200 / 3)
        assert str(result) == "Scan Results: 2 file(s) scanned, 1 failed, 2 entries"

    def test_entries_record_file_path(self, base_config: I18nConfig) -> None:
        path = write_source(base_config.source_dir, "App.tsx", "const A = () => <p>Hi</p>;\n")

        entries = Scanner(base_config).scan_file(path)

        assert entries[0].file == str(path)
        assert entries[0].location == f"{path}:1"

    def test_empty_project(self, base_config: I18nConfig) -> None:
        result = Scanner(base_config).scan_directory()
        assert result.entries == []
        assert result.success_rate == 100.0

    def test_invalid_utf8_file_is_isolated(self, base_config: I18nConfig) -> None:
        """Test that a file that is not UTF-8 is reported without stopping the scan."""
        src = base_config.source_dir
        _ = write_source(src, "A.tsx", "export const A = () => <p>Hello</p>;\n")
        latin1 = src / "B.tsx"
        _ = latin1.write_bytes(b"export const B = () => <div>Caf\xe9 menu</div>;\n")

        result = Scanner(base_config).scan_directory()

        assert [entry.key for entry in result.entries] == ["HELLO"]
        assert [path for path, _ in result.failed_files] == [latin1]
        assert "invalid UTF-8" in result.failed_files[0][1].reason
