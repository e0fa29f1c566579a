"""Locate the content root inside acquired template content."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..errors import InvalidTemplateError
from ..utils import load_json
from .acquirer import AcquiredContent

__all__ = ["ContentRoot", "find_pointer", "resolve_content_root"]

# ``dirname: path.join(__dirname, 'template_src')`` in an npm template's index.js
_INDEX_POINTER = re.compile(
    r"""dirname\s*:\s*path\.join\(\s*__dirname\s*,\s*(['"])(?P<sub>[^'"]+)\1\s*\)"""
)


@dataclass(frozen=True)
class ContentRoot:
    """The directory actually copied or linked into the destination.

    ``is_www`` marks a bare asset folder, ``is_subdirectory`` a template that
    pointed at a curated sub-directory (no exclusion filter applies).
    """

    path: Path
    is_www: bool = False
    is_subdirectory: bool = False


def find_pointer(template_dir: Path) -> Path | None:
    """Return the sub-directory a template package points at, if any.

    ``package.json`` may declare a ``dirname`` field; npm-style templates
    export the same pointer from ``index.js``.

    Raises:
        InvalidTemplateError: If ``package.json`` exists but cannot be read.
    """
    manifest = template_dir / "package.json"
    if manifest.is_file():
        try:
            data = load_json(manifest)
        except (ValueError, OSError) as exc:
            raise InvalidTemplateError(
                f"{template_dir} is not a valid template", path=template_dir
            ) from exc
        pointer = data.get("dirname")
        if isinstance(pointer, str) and pointer:
            return (template_dir / pointer).resolve()

    index_js = template_dir / "index.js"
    if index_js.is_file():
        match = _INDEX_POINTER.search(index_js.read_text(encoding="utf-8", errors="replace"))
        if match:
            return (template_dir / match.group("sub")).resolve()
    return None


def resolve_content_root(acquired: AcquiredContent) -> ContentRoot:
    """Pick the directory to materialize from *acquired*.

    Raises:
        InvalidTemplateError: If the resolved directory does not exist.
    """
    path = acquired.path
    if path.name == "www":
        root = ContentRoot(path=path, is_www=True)
    else:
        pointer = find_pointer(path) if path.is_dir() else None
        if pointer is not None:
            root = ContentRoot(path=pointer, is_subdirectory=True)
        else:
            root = ContentRoot(path=path)

    if not root.path.is_dir():
        raise InvalidTemplateError(f"Could not find directory: {root.path}", path=root.path)
    return root
