"""
Reading and writing per-locale dictionary files.

Each locale is stored as ``<locales_dir>/<locale>.json``. In memory every
dictionary is flat (``{"home.HELLO": "Hello"}``); the nested on-disk form
(``{"home": {"HELLO": "Hello"}}``) is produced and read back through
``expand_dictionary`` and ``flatten_dictionary``.
"""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path

from ..utils.core.exceptions import DictionaryCorruptError, DictionaryWriteError
from ..utils.core.file_utils import atomic_write_json

logger = logging.getLogger(__name__)

FlatDictionary = dict[str, str]


def locale_file_path(locales_dir: Path, locale: str) -> Path:
    """Path of the dictionary file for a locale."""
    return locales_dir / f"{locale}.json"


def flatten_dictionary(data: dict[str, object], separator: str = ".") -> FlatDictionary:
    """
    Flatten a possibly nested dictionary into separator-joined keys.

    Non-string leaf values are converted with ``str``; ``None`` becomes an
    empty string.
    """
    flat: FlatDictionary = {}

    def walk(node: dict[str, object], prefix: str) -> None:
        for key, value in node.items():
            path = f"{prefix}{separator}{key}" if prefix else key
            if isinstance(value, dict):
                walk(value, path)  # pyright: ignore[reportUnknownArgumentType]
            elif value is None:
                flat[path] = ""
            elif isinstance(value, str):
                flat[path] = value
            else:
                logger.debug(f"Converting non-string value at {path} to text")
                flat[path] = str(value)

    walk(data, "")
    return flat


def expand_dictionary(flat: FlatDictionary, separator: str = ".") -> dict[str, object]:
    """
    Expand separator-joined keys into nested objects.

    When a key is both a value and a prefix of other keys (``"a"`` and
    ``"a.b"``), the conflicting key is kept flat at the level where the
    conflict occurs, so flattening the result gives back the input.
    """
    result: dict[str, object] = {}
    leaf_keys = set(flat)

    for key, value in flat.items():
        parts = key.split(separator)
        current = result
        for index, part in enumerate(parts[:-1]):
            prefix = separator.join(parts[: index + 1])
            if prefix in leaf_keys:
                remainder = separator.join(parts[index:])
                logger.warning(
                    f"Key {key!r} conflicts with the value at {prefix!r}; storing it as {remainder!r}"
                )
                current[remainder] = value
                break
            child = current.setdefault(part, {})
            current = child  # pyright: ignore[reportAssignmentType]
        else:
            current[parts[-1]] = value

    return result


def read_dictionary(path: Path, separator: str = ".") -> FlatDictionary:
    """
    Read a locale dictionary and return it flattened.

    Returns:
        The flat dictionary, or an empty one when the file does not exist

    Raises:
        DictionaryCorruptError: If the file is not a JSON object
    """
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            data: object = json.load(f)  # pyright: ignore[reportAny]
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DictionaryCorruptError(path, str(e)) from e
    except OSError as e:
        raise DictionaryCorruptError(path, f"unreadable: {e}") from e

    if not isinstance(data, dict):
        raise DictionaryCorruptError(path, f"expected a JSON object, got {type(data).__name__}")

    return flatten_dictionary(data, separator)  # pyright: ignore[reportUnknownArgumentType]


def write_dictionary(path: Path, data: dict[str, object] | FlatDictionary, locale: str | None = None) -> None:
    """
    Write a dictionary as pretty-printed UTF-8 JSON, replacing the whole file.

    Raises:
        DictionaryWriteError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_json(path, data)
    except OSError as e:
        raise DictionaryWriteError(locale or path.stem, path, str(e)) from e


def backup_dictionaries(locales_dir: Path, locales: list[str], backup_dir: Path) -> list[Path]:
    """
    Copy existing locale files into a backup directory.

    Backups are named ``<locale>_<timestamp>.json``.

    Returns:
        Paths of the backups that were created
    """
    timestamp = datetime.now().isoformat().replace(":", "-").replace(".", "-")
    backup_dir.mkdir(parents=True, exist_ok=True)

    backups: list[Path] = []
    for locale in locales:
        source = locale_file_path(locales_dir, locale)
        if not source.exists():
            continue
        target = backup_dir / f"{locale}_{timestamp}.json"
        _ = shutil.copy2(source, target)
        backups.append(target)
        logger.info(f"Backed up {source} -> {target}")

    return backups
