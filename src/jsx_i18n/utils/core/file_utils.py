"""
File helpers shared by the dictionary store, exclusion policy and config manager.

All persisted files are rewritten whole through a temporary file in the
target directory followed by an atomic replace, so readers never observe a
partially written file. The replaced file keeps its permission bits; new
files get the usual umask-derived mode rather than the private mode of a
temporary file.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def _default_file_mode() -> int:
    umask = os.umask(0)
    _ = os.umask(umask)
    return 0o666 & ~umask


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write text to a file atomically.

    Args:
        path: Destination file; its parent directory must exist
        content: Full file content

    Raises:
        OSError: If the temporary file cannot be written or moved into place
    """
    temp_file = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            _ = temp_file.write(content)
            temp_file.flush()
            temp_path = Path(temp_file.name)

        if path.exists():
            shutil.copymode(path, temp_path)
        else:
            temp_path.chmod(_default_file_mode())

        # Atomic move
        _ = temp_path.replace(path)
        logger.debug(f"Wrote {path}")

    except Exception as e:
        # Clean up temporary file if it exists
        if temp_file and Path(temp_file.name).exists():
            Path(temp_file.name).unlink(missing_ok=True)
        raise OSError(f"Failed to write {path}: {e}") from e


def dump_json(data: object) -> str:
    """Serialize data the way every JSON file of the tool is stored."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def atomic_write_json(path: Path, data: object) -> None:
    """Serialize data as pretty-printed UTF-8 JSON and write it atomically."""
    atomic_write_text(path, dump_json(data))
