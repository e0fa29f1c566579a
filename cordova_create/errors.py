"""Typed errors raised while creating a project.

Every failure surfaced by :func:`cordova_create.create` is either one of the
classes below or a plain :class:`OSError` coming straight from the
filesystem.  Nothing is swallowed on the way out.
"""

from __future__ import annotations

from pathlib import Path


class CreateError(Exception):
    """Base class for project-creation failures."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ValidationError(CreateError):
    """Raised for bad input: missing destination, non-empty destination, bad id."""


class ConflictError(CreateError):
    """Raised when the destination lies inside the template it is created from."""


class FetchError(CreateError):
    """Raised when a remote template cannot be retrieved."""

    def __init__(self, message: str, reference: str = "") -> None:
        self.reference = reference
        super().__init__(message)


class InvalidTemplateError(CreateError):
    """Raised when acquired content cannot be interpreted as a template."""


class SymlinkPermissionError(CreateError, PermissionError):
    """Raised when the OS refuses to create a symbolic link in link mode."""

    def __init__(self, source: str | Path, target: str | Path) -> None:
        self.source = Path(source)
        self.target = Path(target)
        CreateError.__init__(
            self,
            f"Permission denied while linking {self.target} -> {self.source}. "
            "Symbolic links need elevated privileges (or Developer Mode) on this "
            "system; re-run without --link to copy the template instead.",
            path=target,
        )
