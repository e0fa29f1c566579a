"""Template acquisition.

Turns a :class:`TemplateSpec` into a local directory.  Remote references are
handed to the fetch collaborator together with a scratch directory that is
removed when the process exits; local references are only resolved to an
absolute path.  Whether that path actually exists is checked later by the
layout resolver.
"""

from __future__ import annotations

import atexit
import inspect
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ..config import CreateConfig
from ..events import EventSink, NullEventSink
from .classifier import is_url, needs_remote_fetch
from .fetch import FetchFunc, TemplateFetcher

__all__ = [
    "AcquiredContent",
    "TemplateAcquirer",
    "TemplateSpec",
    "make_scratch_dir",
    "with_latest_tag",
]


@dataclass(frozen=True)
class TemplateSpec:
    """Where project content comes from."""

    reference: str
    is_default: bool = False

    @classmethod
    def default(cls, config: CreateConfig) -> "TemplateSpec":
        """The bundled stock hello-world template."""
        return cls(reference=str(config.stock_template_dir), is_default=True)


@dataclass(frozen=True)
class AcquiredContent:
    """A local directory holding acquired template content."""

    path: Path
    is_scratch: bool = False


def make_scratch_dir(config: CreateConfig) -> Path:
    """Create a scratch directory that is deleted when the process exits."""
    parent = None
    if config.cache_dir is not None:
        config.cache_dir.mkdir(parents=True, exist_ok=True)
        parent = str(config.cache_dir)
    path = Path(tempfile.mkdtemp(prefix=config.scratch_prefix, dir=parent))
    atexit.register(shutil.rmtree, path, ignore_errors=True)
    return path


def with_latest_tag(reference: str) -> str:
    """Pin a bare package name to ``@latest``.

    URLs and references that already carry a version are returned unchanged.
    A leading ``@`` is a scope marker, not a version separator.
    """
    if is_url(reference) or "@" in reference[1:]:
        return reference
    if ":" in reference or reference.endswith(".git"):
        return reference
    if "/" in reference and not reference.startswith("@"):
        return reference
    return f"{reference}@latest"


class TemplateAcquirer:
    """Produce a local directory for a template reference."""

    def __init__(
        self,
        config: CreateConfig | None = None,
        fetch: FetchFunc | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.config = config or CreateConfig()
        self.fetch = fetch or TemplateFetcher(timeout=self.config.fetch_timeout)
        self.events = events or NullEventSink()

    async def acquire(self, spec: TemplateSpec) -> AcquiredContent:
        """Return the local directory for *spec*.

        Raises:
            Whatever the fetch collaborator raises, unchanged and without
            retrying.
        """
        if spec.is_default:
            path = Path(spec.reference).resolve()
            self.events.emit("verbose", f"Using stock template at {path}")
            return AcquiredContent(path=path, is_scratch=False)

        if needs_remote_fetch(spec.reference):
            target = with_latest_tag(spec.reference)
            self.events.emit("verbose", f"Fetching template {target}")
            scratch = make_scratch_dir(self.config)
            result = self.fetch(target, scratch, {})
            if inspect.isawaitable(result):
                result = await result
            return AcquiredContent(path=Path(result), is_scratch=True)

        path = Path(spec.reference).resolve()
        self.events.emit("verbose", f"Using local template at {path}")
        return AcquiredContent(path=path, is_scratch=False)
