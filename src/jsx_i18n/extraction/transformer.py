"""
Source-to-source rewriting of translatable text into runtime lookups.

Every text node and attribute value the scanner would extract is replaced by
a call to the runtime translation object::

    <input placeholder="Enter your name" />
    <input placeholder={i18n.t("ENTER_YOUR_NAME")} />

When a file received at least one replacement, a single import of the
runtime object is added at the top unless the file already imports or
requires the configured module. Running the transformer over its own
output changes nothing.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import override

from tree_sitter import Node

from ..config.schema import I18nConfig
from ..utils.core.exceptions import ParseFailureError
from ..utils.core.file_utils import atomic_write_text
from .exclusions import ExclusionPolicy
from .keys import qualify_key
from .matching import TextMatch, TranslationMatcher
from .scanner import find_source_files
from .syntax import SourceTree

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """What a single transformation pass changed in one file."""

    replacements: list[TextMatch] = field(default_factory=list)
    import_added: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.replacements) or self.import_added


class TransformRunResult:
    """Result of transforming a set of files."""

    def __init__(self) -> None:
        self.changed_files: list[Path] = []
        self.unchanged_files: list[Path] = []
        self.failed_files: list[tuple[Path, Exception]] = []
        self.replacement_count: int = 0

    @property
    def failure_count(self) -> int:
        return len(self.failed_files)

    @override
    def __str__(self) -> str:
        return (
            f"Transform Results: "
            f"{len(self.changed_files)} changed, "
            f"{len(self.unchanged_files)} unchanged, "
            f"{self.failure_count} failed "
            f"({self.replacement_count} replacement(s))"
        )


class Transformer:
    """Rewrites qualifying JSX text and attributes into runtime calls."""

    def __init__(self, config: I18nConfig, exclusions: ExclusionPolicy | None = None) -> None:
        self.config: I18nConfig = config
        self.matcher: TranslationMatcher = TranslationMatcher(config, exclusions)

    def transform(self, tree: SourceTree) -> TransformResult:
        """
        Record the replacements for one parsed file on the tree.

        The tree is edited in place; call ``tree.render()`` for the output.
        """
        result = TransformResult()

        def on_text(node: Node) -> None:
            match = self.matcher.match_text(tree, node)
            if match is None:
                return
            tree.replace_range(match.start, match.end, "{" + self.build_call(match) + "}")
            result.replacements.append(match)

        def on_attribute(node: Node) -> None:
            match = self.matcher.match_attribute(tree, node)
            if match is None:
                return
            tree.replace_range(match.start, match.end, "{" + self.build_call(match) + "}")
            result.replacements.append(match)

        tree.visit({"jsx_text": on_text, "html_character_reference": on_text, "jsx_attribute": on_attribute})

        if result.replacements and not self.has_runtime_import(tree):
            self._insert_import(tree)
            result.import_added = True

        return result

    def build_call(self, match: TextMatch) -> str:
        """Render the runtime call expression for a match."""
        key = qualify_key(match.key, self.config.namespace, self.config.namespace_separator)
        call = f"{self.config.runtime.identifier}.t({json.dumps(key, ensure_ascii=False)}"
        if match.params:
            fields = ", ".join(
                name if name == expression else f"{name}: {expression}"
                for name, expression in match.params
            )
            call += f", {{ {fields} }}"
        return call + ")"

    def build_import(self) -> str:
        runtime = self.config.runtime
        module = json.dumps(runtime.module)
        if runtime.import_style == "require":
            return f"const {{ {runtime.identifier} }} = require({module});"
        return f"import {{ {runtime.identifier} }} from {module};"

    def has_runtime_import(self, tree: SourceTree) -> bool:
        """Whether the file already imports or requires the runtime module."""
        module = self.config.runtime.module
        for statement in tree.root.named_children:
            match statement.type:
                case "import_statement":
                    source = statement.child_by_field_name("source")
                    if source is not None and tree.text_of(source)[1:-1] == module:
                        return True
                case "lexical_declaration" | "variable_declaration" | "expression_statement":
                    if self._requires_module(tree, statement, module):
                        return True
                case _:
                    pass
        return False

    @staticmethod
    def _requires_module(tree: SourceTree, statement: Node, module: str) -> bool:
        stack = [statement]
        while stack:
            node = stack.pop()
            if node.type == "call_expression":
                function = node.child_by_field_name("function")
                arguments = node.child_by_field_name("arguments")
                if (
                    function is not None
                    and arguments is not None
                    and tree.text_of(function) == "require"
                    and arguments.named_children
                    and arguments.named_children[0].type == "string"
                    and tree.text_of(arguments.named_children[0])[1:-1] == module
                ):
                    return True
            stack.extend(node.named_children)
        return False

    def _insert_import(self, tree: SourceTree) -> None:
        """Insert the import after a hashbang and any directive prologue."""
        anchor: Node | None = None
        for statement in tree.root.children:
            if statement.type in ("hash_bang_line", "comment"):
                if statement.type == "hash_bang_line":
                    anchor = statement
                continue
            if self._is_directive(statement):
                anchor = statement
                continue
            break

        line = self.build_import()
        if anchor is None:
            tree.insert(0, line + "\n")
        else:
            tree.insert(anchor.end_byte, "\n" + line)

    @staticmethod
    def _is_directive(statement: Node) -> bool:
        return (
            statement.type == "expression_statement"
            and len(statement.named_children) == 1
            and statement.named_children[0].type == "string"
        )

    def transform_source(self, source: str | bytes, path: Path | str) -> tuple[str, TransformResult]:
        """
        Transform in-memory source.

        Raises:
            ParseFailureError: If the source cannot be parsed
        """
        tree = SourceTree.parse(source, path)
        result = self.transform(tree)
        return tree.render(), result

    def transform_file(self, path: Path, write: bool = True) -> TransformResult:
        """
        Transform one file, writing it back when it changed.

        Raises:
            ParseFailureError: If the file cannot be read or parsed
            OSError: If writing the file fails
        """
        tree = SourceTree.from_file(path)
        result = self.transform(tree)
        if result.changed and write:
            atomic_write_text(path, tree.render())
            logger.info(f"Rewrote {path} ({len(result.replacements)} replacement(s))")
        return result

    def transform_directory(
        self, paths: list[Path] | None = None, write: bool = True
    ) -> TransformRunResult:
        """
        Transform a set of files, by default every source file.

        Failures are isolated per file.
        """
        run = TransformRunResult()
        files = paths if paths is not None else find_source_files(self.config)

        for path in files:
            try:
                result = self.transform_file(path, write=write)
            except (ParseFailureError, OSError) as e:
                logger.error(f"Skipping {path}: {e}")
                run.failed_files.append((path, e))
                continue

            run.replacement_count += len(result.replacements)
            if result.changed:
                run.changed_files.append(path)
            else:
                run.unchanged_files.append(path)

        logger.info(str(run))
        return run
