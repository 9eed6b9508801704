"""
Translation key generation.

Keys are derived from the text alone so the same string always maps to the
same key, whichever file or line it was found on:

    >>> generate_key("Hello World! 123")
    'HELLO_WORLD_123'
    >>> generate_key("Hello World", "hash")
    'b10a8db1'

Text mode can map different strings to one key ("Save" and "Save!"). That
collision is accepted; the reconciler only reports it.
"""

from __future__ import annotations

import hashlib
import re
from typing import Literal

KeyGenerationMode = Literal["text", "hash"]

HASH_KEY_LENGTH = 8

_NON_KEY_CHARS = re.compile(r"[^A-Z0-9]+")


def generate_key(text: str, mode: KeyGenerationMode = "text") -> str:
    """
    Turn free text into a translation key.

    Args:
        text: Source text
        mode: ``"text"`` for an upper-case slug, ``"hash"`` for the first
            8 hex digits of the MD5 digest of the untrimmed text

    Returns:
        The key. In text mode it may be empty when the text has no ASCII
        letters or digits; callers decide what to do with that.

    Raises:
        ValueError: If the mode is unknown
    """
    match mode:
        case "text":
            slug = _NON_KEY_CHARS.sub("_", text.strip().upper())
            return slug.strip("_")
        case "hash":
            return hashlib.md5(text.encode("utf-8")).hexdigest()[:HASH_KEY_LENGTH]
        case _:
            raise ValueError(f"Unknown key generation mode: {mode!r}")


def qualify_key(key: str, namespace: str | None, separator: str = ".") -> str:
    """Prefix a key with its namespace, if any."""
    if namespace:
        return f"{namespace}{separator}{key}"
    return key
