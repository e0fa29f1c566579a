"""Copy or link template content into the destination project.

After the template has been copied (or linked), any of ``www``, ``hooks`` and
``config.xml`` still missing from the destination are backfilled from the
stock hello-world assets, and empty ``platforms/`` and ``plugins/``
directories are created.
"""

from __future__ import annotations

import enum
import errno
import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from ..config import CreateConfig
from ..errors import SymlinkPermissionError
from ..events import EventSink, NullEventSink
from ..utils import copy_path, ensure_dir, lexists, remove_path
from .layout import ContentRoot

__all__ = [
    "CONFIG_XML",
    "EXCLUDED_ENTRIES",
    "LinkOutcome",
    "LinkStatus",
    "Materializer",
    "create_link",
    "rename_gitignores",
    "rollback_on_error",
]

CONFIG_XML = "config.xml"

# Housekeeping files never copied from a non-curated template root.
EXCLUDED_ENTRIES: frozenset[str] = frozenset(
    {"package.json", "RELEASENOTES.md", ".git", "NOTICE", "LICENSE", "COPYRIGHT", ".npmignore"}
)

LINKED_FOLDERS: tuple[str, ...] = ("www", "merges", "hooks")
BACKFILLED_ASSETS: tuple[str, ...] = ("www", "hooks", CONFIG_XML)
SKELETON_DIRS: tuple[str, ...] = ("platforms", "plugins")


# ---------------------------------------------------------------------------
# Link primitive
# ---------------------------------------------------------------------------


class LinkStatus(enum.Enum):
    OK = "ok"
    PERMISSION_DENIED = "permission_denied"
    ERROR = "error"


@dataclass(frozen=True)
class LinkOutcome:
    status: LinkStatus
    error: OSError | None = None


def create_link(source: Path, target: Path, *, is_directory: bool) -> LinkOutcome:
    """Create ``target -> source`` and report how it went instead of raising."""
    try:
        os.symlink(source, target, target_is_directory=is_directory)
    except PermissionError as exc:
        return LinkOutcome(LinkStatus.PERMISSION_DENIED, exc)
    except OSError as exc:
        # ERROR_PRIVILEGE_NOT_HELD surfaces as a plain OSError on Windows
        if getattr(exc, "winerror", None) == 1314 or exc.errno == errno.EPERM:
            return LinkOutcome(LinkStatus.PERMISSION_DENIED, exc)
        return LinkOutcome(LinkStatus.ERROR, exc)
    return LinkOutcome(LinkStatus.OK)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _rename_gitignore(source: Path) -> Path | None:
    if source.name != "gitignore" or source.is_symlink() or not source.is_file():
        return None
    target = source.with_name(".gitignore")
    os.replace(source, target)
    return target


def rename_gitignores(path: Path) -> list[Path]:
    """Rename every regular file called ``gitignore`` to ``.gitignore``.

    *path* is either a single file or a directory walked recursively.
    Directories of that name are left alone.  Symlinked directories are not
    descended into, so linked template content is never touched.
    """
    if path.is_symlink() or not path.is_dir():
        target = _rename_gitignore(path)
        return [target] if target is not None else []

    renamed: list[Path] = []
    for current, dirnames, filenames in os.walk(path):
        if "gitignore" not in filenames:
            continue
        target = _rename_gitignore(Path(current) / "gitignore")
        if target is not None:
            renamed.append(target)
    return renamed


@contextmanager
def rollback_on_error(
    destination: Path, events: EventSink | None = None
) -> Iterator[bool]:
    """Remove *destination* if it did not exist before and the block raises.

    Yields whether the destination already existed.  The removal itself is
    best-effort; the original error always propagates.
    """
    existed = lexists(destination)
    try:
        yield existed
    except BaseException:
        if not existed and lexists(destination):
            if events is not None:
                events.emit("warn", f"Removing partially created project at {destination}")
            shutil.rmtree(destination, ignore_errors=True)
        raise


# ---------------------------------------------------------------------------
# Materializer
# ---------------------------------------------------------------------------


class Materializer:
    """Populate a destination directory from a resolved content root."""

    def __init__(
        self,
        config: CreateConfig | None = None,
        events: EventSink | None = None,
    ) -> None:
        self.config = config or CreateConfig()
        self.events = events or NullEventSink()

    def materialize(self, root: ContentRoot, destination: Path, *, link: bool = False) -> None:
        """Copy or link *root* into *destination*, then backfill stock assets.

        The destination is created when missing and removed again if anything
        fails before this method returns.

        Raises:
            SymlinkPermissionError: If link mode is refused by the OS.
            OSError: On any other filesystem failure.
        """
        with rollback_on_error(destination, self.events) as existed:
            if not existed:
                destination.mkdir(parents=True)

            if link:
                self._link(root, destination)
            else:
                self._copy(root, destination)

            self._backfill(destination)
            for name in SKELETON_DIRS:
                ensure_dir(destination / name)

    # -- Copy mode ---------------------------------------------------------

    def _copy(self, root: ContentRoot, destination: Path) -> None:
        copied: list[Path] = []
        if root.is_www:
            self.events.emit("verbose", f"Copying assets from {root.path} into www")
            copy_path(root.path, destination / "www")
            copied.append(destination / "www")
        else:
            self.events.emit("verbose", f"Copying template files from {root.path}")
            for entry in sorted(root.path.iterdir()):
                if not root.is_subdirectory and entry.name in EXCLUDED_ENTRIES:
                    continue
                copy_path(entry, destination / entry.name)
                copied.append(destination / entry.name)

        # Only entries copied above; the settings directory is left alone.
        for path in copied:
            rename_gitignores(path)
        self._hoist_www_config(destination)

    def _hoist_www_config(self, destination: Path) -> None:
        nested = destination / "www" / CONFIG_XML
        top = destination / CONFIG_XML
        www = destination / "www"
        if www.is_symlink() or lexists(top) or not nested.is_file():
            return
        self.events.emit("verbose", f"Moving {nested} to {top}")
        os.replace(nested, top)

    # -- Link mode ---------------------------------------------------------

    def _link(self, root: ContentRoot, destination: Path) -> None:
        if root.is_www:
            self._replace_with_link(root.path, destination / "www", is_directory=True)
            nested_config = root.path / CONFIG_XML
        else:
            for name in LINKED_FOLDERS:
                self._replace_with_link(root.path / name, destination / name, is_directory=True)
            self._replace_with_link(
                root.path / CONFIG_XML, destination / CONFIG_XML, is_directory=False
            )
            nested_config = root.path / "www" / CONFIG_XML

        top = destination / CONFIG_XML
        if not lexists(top) and nested_config.is_file():
            self.events.emit("verbose", f"Copying {nested_config} to {top}")
            shutil.copy2(nested_config, top)

    def _replace_with_link(self, source: Path, target: Path, *, is_directory: bool) -> None:
        remove_path(target)
        if not source.exists():
            return
        self.events.emit("verbose", f"Linking {target} -> {source}")
        outcome = create_link(source, target, is_directory=is_directory)
        if outcome.status is LinkStatus.PERMISSION_DENIED:
            raise SymlinkPermissionError(source, target) from outcome.error
        if outcome.status is LinkStatus.ERROR:
            assert outcome.error is not None
            raise outcome.error

    # -- Stock fallback ----------------------------------------------------

    def _backfill(self, destination: Path) -> None:
        for name in BACKFILLED_ASSETS:
            target = destination / name
            source = self.config.stock_asset(name)
            if lexists(target) or not lexists(source):
                continue
            self.events.emit("verbose", f"Adding stock {name}")
            copy_path(source, target)
