"""App identifier validation.

An app id is a reverse-domain name (``org.example.app``).  Every
dot-separated segment has to be a usable Java identifier because the id ends
up as the Android package name.
"""

from __future__ import annotations

import re

__all__ = ["RESERVED_WORDS", "is_valid_identifier"]

RESERVED_WORDS: frozenset[str] = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double",
        "else", "enum", "extends", "final", "finally", "float", "for", "goto",
        "if", "implements", "import", "instanceof", "int", "interface", "long",
        "native", "new", "package", "private", "protected", "public", "return",
        "short", "static", "strictfp", "super", "switch", "synchronized",
        "this", "throw", "throws", "transient", "try", "void", "volatile",
        "while", "true", "false", "null",
    }
)

_SEGMENT = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_valid_identifier(identifier: str) -> bool:
    """Return ``True`` if *identifier* is a valid, non-reserved app id.

    Examples::

        is_valid_identifier("org.testing")  -> True
        is_valid_identifier("int.bob")      -> False  (reserved word)
        is_valid_identifier("org..app")     -> False  (empty segment)
    """
    if not isinstance(identifier, str) or not identifier:
        return False
    for segment in identifier.split("."):
        if not _SEGMENT.match(segment):
            return False
        if segment in RESERVED_WORDS:
            return False
    return True
