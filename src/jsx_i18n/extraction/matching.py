"""
Shared decision of what counts as translatable text.

The scanner and the transformer both go through ``TranslationMatcher`` so
that the text extracted into the dictionaries and the text rewritten in the
sources can never disagree. Built-in exclusions live here rather than in
``ExclusionPolicy`` so they cannot be removed by editing the rules file.
"""

from __future__ import annotations

import codecs
import html
import logging
import re
from dataclasses import dataclass
from typing import Literal

from tree_sitter import Node

from ..config.schema import I18nConfig
from .exclusions import ExclusionPolicy
from .keys import generate_key
from .syntax import SourceTree

logger = logging.getLogger(__name__)

# Link targets, rel values and similar tokens that are never prose
BUILTIN_EXCLUDED_TOKENS = frozenset(
    {
        "_blank",
        "_self",
        "_parent",
        "_top",
        "noopener",
        "noreferrer",
        "nofollow",
        "noopener noreferrer",
    }
)

# Structural, styling and identifier attributes; these win over the allow-list
NON_TRANSLATABLE_ATTRIBUTES = frozenset(
    {
        "className",
        "class",
        "style",
        "id",
        "key",
        "ref",
        "type",
        "name",
        "href",
        "src",
        "srcSet",
        "htmlFor",
        "rel",
        "target",
        "role",
        "method",
        "action",
        "autoComplete",
        "inputMode",
        "pattern",
        "lang",
        "dir",
        "data-testid",
        "testID",
        "nativeID",
    }
)

_DIGITS_ONLY = re.compile(r"\d+")
_URL_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*://")
_LINE_BREAK_WHITESPACE = re.compile(r"[ \t]*\r?\n\s*")
_CONTROL_ESCAPES = frozenset({"n", "r", "t", "b", "f", "v", "0"})

# Sibling node types that together make up one piece of JSX text
JSX_TEXT_RUN_TYPES = frozenset({"jsx_text", "html_character_reference"})


def is_builtin_excluded(text: str) -> bool:
    """
    Exclusions applied regardless of user rules.

    Whitespace-only text, digits-only text, URLs and link keywords are
    never translated.
    """
    stripped = text.strip()
    if not stripped:
        return True
    if _DIGITS_ONLY.fullmatch(stripped):
        return True
    if _URL_SCHEME.match(stripped):
        return True
    return stripped in BUILTIN_EXCLUDED_TOKENS


def normalize_jsx_text(text: str) -> str:
    """Collapse line breaks and their indentation the way JSX renders them."""
    return _LINE_BREAK_WHITESPACE.sub(" ", text.strip())


def decode_escape_sequence(sequence: str) -> str:
    """
    Decode one JavaScript escape sequence such as ``\\n``, ``\\u00e9`` or
    ``\\u{1F600}``. Identity escapes (``\\'``, ``\\"``, ``\\\\``) yield the
    escaped character and a line continuation yields nothing.
    """
    body = sequence[1:]
    if not body or body[0] in "\r\n\u2028\u2029":
        return ""
    if body.startswith("u{") and body.endswith("}"):
        return chr(int(body[2:-1], 16))
    if body[0] in "ux" or body in _CONTROL_ESCAPES:
        return codecs.decode(sequence.encode("ascii"), "unicode_escape")
    return body


def string_literal_value(tree: SourceTree, node: Node) -> str:
    """The value of a JavaScript string literal with its escapes decoded."""
    parts: list[str] = []
    for child in node.named_children:
        match child.type:
            case "escape_sequence":
                parts.append(decode_escape_sequence(tree.text_of(child)))
            case "html_character_reference":
                parts.append(html.unescape(tree.text_of(child)))
            case _:
                parts.append(tree.text_of(child))
    return "".join(parts)


@dataclass(frozen=True)
class TextMatch:
    """A piece of source text that qualifies for translation."""

    text: str
    key: str
    line: int
    start: int
    end: int
    kind: Literal["text", "attribute"]
    is_template: bool = False
    params: tuple[tuple[str, str], ...] = ()


class TranslationMatcher:
    """Qualifies JSX text nodes and attributes for translation."""

    def __init__(self, config: I18nConfig, exclusions: ExclusionPolicy | None = None) -> None:
        self.config: I18nConfig = config
        self.exclusions: ExclusionPolicy = exclusions or ExclusionPolicy()
        self.translatable_attributes: frozenset[str] = (
            frozenset(config.attributes_to_translate) - NON_TRANSLATABLE_ATTRIBUTES
        )

    def is_translatable_attribute(self, name: str) -> bool:
        return name in self.translatable_attributes

    def is_runtime_call(self, tree: SourceTree, node: Node | None) -> bool:
        """Whether the node is a ``<runtime>.t(...)`` call."""
        if node is None or node.type != "call_expression":
            return False
        function = node.child_by_field_name("function")
        if function is None or function.type != "member_expression":
            return False
        obj = function.child_by_field_name("object")
        prop = function.child_by_field_name("property")
        if obj is None or prop is None or obj.type != "identifier":
            return False
        return tree.text_of(obj) == self.config.runtime.identifier and tree.text_of(prop) == "t"

    def inside_runtime_call(self, tree: SourceTree, node: Node) -> bool:
        """Whether the node is an argument of a runtime call (already transformed)."""
        parent = tree.parent_of(node)
        if parent is not None and parent.type == "arguments":
            parent = tree.parent_of(parent)
        return self.is_runtime_call(tree, parent)

    def match_text(self, tree: SourceTree, node: Node) -> TextMatch | None:
        """
        Qualify the run of JSX text starting at a ``jsx_text`` or
        ``html_character_reference`` node.

        The parser splits ``Tom &amp; Jerry`` into three sibling nodes; they
        form one sentence, so the whole run is matched at its first node and
        later nodes of the same run yield nothing. Character references are
        decoded for the key and the default value. The match covers the
        trimmed run only.
        """
        parent = tree.parent_of(node)
        if parent is not None and parent.type == "string":
            return None
        previous = node.prev_sibling
        if previous is not None and previous.type in JSX_TEXT_RUN_TYPES:
            return None

        run_end = node
        following = node.next_sibling
        while following is not None and following.type in JSX_TEXT_RUN_TYPES:
            run_end = following
            following = following.next_sibling

        raw = tree.source[node.start_byte : run_end.end_byte].decode("utf-8")
        stripped = raw.strip()
        if not stripped:
            return None

        leading = raw[: len(raw) - len(raw.lstrip())]
        start = node.start_byte + len(leading.encode("utf-8"))
        end = start + len(stripped.encode("utf-8"))
        return self._qualify(
            tree,
            normalize_jsx_text(html.unescape(stripped)),
            line=tree.line_at(start),
            start=start,
            end=end,
            kind="text",
        )

    def match_attribute(self, tree: SourceTree, node: Node) -> TextMatch | None:
        """
        Qualify a ``jsx_attribute`` node.

        Only attributes on the allow-list whose value is a string literal,
        a string literal in braces or a template literal qualify. The match
        covers the whole attribute value.
        """
        named = node.named_children
        if len(named) < 2:
            return None
        name = tree.text_of(named[0])
        if not self.is_translatable_attribute(name):
            return None

        value = named[-1]
        match value.type:
            case "string":
                # JSX attribute strings have no backslash escapes, only entities
                text = html.unescape(tree.text_of(value)[1:-1])
                return self._qualify_value(tree, value, text.strip())
            case "jsx_expression":
                inner = value.named_children
                if len(inner) != 1:
                    return None
                expression = inner[0]
                if expression.type == "string":
                    if self.inside_runtime_call(tree, expression):
                        return None
                    text = string_literal_value(tree, expression)
                    return self._qualify_value(tree, value, text.strip())
                if expression.type == "template_string":
                    return self._match_template(tree, value, expression)
                return None
            case _:
                return None

    def _qualify_value(self, tree: SourceTree, value: Node, text: str) -> TextMatch | None:
        if not text:
            return None
        return self._qualify(
            tree,
            text,
            line=tree.line_of(value),
            start=value.start_byte,
            end=value.end_byte,
            kind="attribute",
        )

    def _match_template(self, tree: SourceTree, value: Node, template: Node) -> TextMatch | None:
        prefix = self.config.interpolation.prefix
        suffix = self.config.interpolation.suffix
        parts: list[str] = []
        literal_parts: list[str] = []
        params: list[tuple[str, str]] = []
        used: set[str] = set()

        # Literal text is read from the gaps between substitutions, after the
        # opening backtick and before the closing one.
        position = template.start_byte + 1
        for child in template.children:
            if child.type != "template_substitution":
                continue
            fragment = tree.source[position : child.start_byte].decode("utf-8")
            parts.append(fragment)
            literal_parts.append(fragment)

            expression = child.named_children[0] if child.named_children else None
            if expression is None:
                return None
            name = self._param_name(tree, expression, len(params))
            if name in used:
                name = f"{name}{len(params)}"
            used.add(name)
            params.append((name, tree.text_of(expression)))
            parts.append(f"{prefix}{name}{suffix}")
            position = child.end_byte

        fragment = tree.source[position : template.end_byte - 1].decode("utf-8")
        parts.append(fragment)
        literal_parts.append(fragment)

        if not "".join(literal_parts).strip():
            return None

        text = "".join(parts).strip()
        return self._qualify(
            tree,
            text,
            line=tree.line_of(value),
            start=value.start_byte,
            end=value.end_byte,
            kind="attribute",
            is_template=bool(params),
            params=tuple(params),
        )

    @staticmethod
    def _param_name(tree: SourceTree, expression: Node, index: int) -> str:
        if expression.type == "identifier":
            return tree.text_of(expression)
        if expression.type == "member_expression":
            prop = expression.child_by_field_name("property")
            if prop is not None:
                return tree.text_of(prop)
        return f"arg{index}"

    def _qualify(
        self,
        tree: SourceTree,
        text: str,
        *,
        line: int,
        start: int,
        end: int,
        kind: Literal["text", "attribute"],
        is_template: bool = False,
        params: tuple[tuple[str, str], ...] = (),
    ) -> TextMatch | None:
        if is_builtin_excluded(text):
            return None
        if self.exclusions.should_exclude(text, {"file": str(tree.path), "line": line}):
            return None

        key = generate_key(text, self.config.key_generation)
        if not key:
            logger.warning(
                f"{tree.path}:{line}: {text!r} yields an empty key in text mode and is skipped; "
                "use hash key generation for text without Latin letters or digits"
            )
            return None

        return TextMatch(
            text=text,
            key=key,
            line=line,
            start=start,
            end=end,
            kind=kind,
            is_template=is_template,
            params=params,
        )
