"""Decide whether a template reference must be fetched or read from disk."""

from __future__ import annotations

import os
from urllib.parse import urlparse

__all__ = ["is_url", "needs_remote_fetch"]


def is_url(reference: str) -> bool:
    """``True`` for ``scheme://host...`` references.

    Single-letter schemes are Windows drive letters (``C:\\templates``), not
    URLs.
    """
    try:
        parsed = urlparse(reference)
    except ValueError:
        return False
    return len(parsed.scheme) > 1 and bool(parsed.netloc)


def needs_remote_fetch(reference: str) -> bool:
    """Return ``True`` if *reference* has to go through the fetch collaborator.

    A reference is remote when it is a URL, when it contains ``@`` and is not
    an existing local path (``pkg@1.2.3``, ``@scope/pkg``), or when nothing
    exists on disk at that path (a bare npm package name).
    """
    if is_url(reference):
        return True
    exists = os.path.exists(reference)
    if "@" in reference and not exists:
        return True
    return not exists
