"""Default fetch collaborator for remote templates.

Retrieves a template reference into a local directory and returns the path
of the retrieved content.  Three strategies are supported:

* git repositories are shallow-cloned with ``git``;
* ``.tgz`` / ``.tar.gz`` URLs are downloaded with ``httpx`` and unpacked;
* anything else is treated as a registry specifier and packed with
  ``npm pack``, then unpacked.

Any failure is raised as :class:`~cordova_create.errors.FetchError` carrying
the underlying message verbatim.  Retries are left to the caller.
"""

from __future__ import annotations

import asyncio
import tarfile
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Union
from urllib.parse import urlparse

import httpx

from ..errors import FetchError
from ..utils import run_command
from .classifier import is_url

__all__ = [
    "FetchFunc",
    "TemplateFetcher",
    "is_git_reference",
    "is_tarball_url",
]

# (reference, destination directory, options) -> path of the fetched content
FetchFunc = Callable[[str, Path, Mapping[str, Any]], Union[Awaitable[Path], Path]]

_GIT_PREFIXES = ("git+", "git://", "ssh://", "git@")
_GIT_HOSTS = frozenset({"github.com", "gitlab.com", "bitbucket.org"})
_SHORTHANDS: dict[str, str] = {
    "github:": "https://github.com/",
    "gitlab:": "https://gitlab.com/",
    "bitbucket:": "https://bitbucket.org/",
}
_TARBALL_SUFFIXES = (".tgz", ".tar.gz")


# ---------------------------------------------------------------------------
# Reference helpers
# ---------------------------------------------------------------------------


def _split_fragment(reference: str) -> tuple[str, str | None]:
    base, sep, fragment = reference.partition("#")
    return base, (fragment or None) if sep else None


def is_git_reference(reference: str) -> bool:
    """``True`` if *reference* names a git repository."""
    base, _ = _split_fragment(reference)
    if base.startswith(_GIT_PREFIXES) or base.startswith(tuple(_SHORTHANDS)):
        return True
    if base.endswith(".git"):
        return True
    return is_url(base) and urlparse(base).hostname in _GIT_HOSTS


def is_tarball_url(reference: str) -> bool:
    """``True`` for ``http(s)`` URLs pointing straight at a gzipped tarball."""
    if not is_url(reference):
        return False
    parsed = urlparse(reference)
    return parsed.scheme in ("http", "https") and parsed.path.endswith(_TARBALL_SUFFIXES)


def _clone_url(base: str) -> str:
    for shorthand, prefix in _SHORTHANDS.items():
        if base.startswith(shorthand):
            return prefix + base[len(shorthand):]
    if base.startswith("git+"):
        return base[len("git+"):]
    return base


def _repo_name(url: str) -> str:
    tail = url.rstrip("/").replace(":", "/").split("/")[-1]
    if tail.endswith(".git"):
        tail = tail[: -len(".git")]
    return tail or "template"


# ---------------------------------------------------------------------------
# Archive handling
# ---------------------------------------------------------------------------


def _extract_tarball(archive: Path, destination: Path) -> Path:
    """Unpack *archive* into *destination* and return the content directory.

    npm tarballs wrap everything in a ``package/`` folder; when the archive
    holds a single top-level directory that directory is returned.
    """
    destination = destination.resolve()
    with tarfile.open(archive, "r:*") as tar:
        for member in tar.getmembers():
            target = (destination / member.name).resolve()
            if target != destination and destination not in target.parents:
                raise FetchError(f"Refusing to extract {member.name!r} outside {destination}")
        if hasattr(tarfile, "data_filter"):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)
    archive.unlink()

    package_dir = destination / "package"
    if package_dir.is_dir():
        return package_dir
    entries = list(destination.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return destination


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class TemplateFetcher:
    """Fetch remote templates with git, httpx or npm.

    Instances are callables matching :data:`FetchFunc` so they can be injected
    wherever a fetch collaborator is expected.
    """

    def __init__(
        self,
        timeout: int = 600,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    async def __call__(
        self,
        reference: str,
        dest_dir: str | Path,
        options: Mapping[str, Any] | None = None,
    ) -> Path:
        destination = Path(dest_dir)
        destination.mkdir(parents=True, exist_ok=True)

        if is_git_reference(reference):
            return await self._clone(reference, destination)
        if is_tarball_url(reference):
            return await self._download(reference, destination)
        return await self._npm_pack(reference, destination)

    # -- Strategies --------------------------------------------------------

    async def _clone(self, reference: str, destination: Path) -> Path:
        base, ref = _split_fragment(reference)
        url = _clone_url(base)
        target = destination / _repo_name(url)

        cmd = ["git", "clone", "--depth", "1"]
        if ref:
            cmd += ["--branch", ref]
        cmd += [url, str(target)]
        await self._run(cmd, reference, cwd=destination)
        return target

    async def _download(self, reference: str, destination: Path) -> Path:
        archive = destination / "template.tgz"
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                follow_redirects=True,
                timeout=httpx.Timeout(float(self.timeout), connect=10.0),
            ) as client:
                response = await client.get(reference)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(
                f"Failed to download template {reference}: {exc}", reference=reference
            ) from exc

        await asyncio.to_thread(archive.write_bytes, response.content)
        return await self._unpack(archive, destination, reference)

    async def _npm_pack(self, reference: str, destination: Path) -> Path:
        stdout = await self._run(["npm", "pack", reference], reference, cwd=destination)
        lines = [line.strip() for line in stdout.splitlines() if line.strip()]
        if not lines:
            raise FetchError(
                f"npm pack produced no archive for {reference}", reference=reference
            )
        return await self._unpack(destination / lines[-1], destination, reference)

    # -- Helpers -----------------------------------------------------------

    async def _unpack(self, archive: Path, destination: Path, reference: str) -> Path:
        try:
            return await asyncio.to_thread(_extract_tarball, archive, destination)
        except (tarfile.TarError, OSError) as exc:
            raise FetchError(
                f"Could not unpack template {reference}: {exc}", reference=reference
            ) from exc

    async def _run(self, cmd: list[str], reference: str, cwd: Path) -> str:
        try:
            returncode, stdout, stderr = await run_command(cmd, cwd=cwd, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise FetchError(
                f"'{cmd[0]}' is required to fetch {reference} but was not found",
                reference=reference,
            ) from exc
        if returncode != 0:
            raise FetchError(
                f"Failed to fetch template {reference}: {stderr or stdout}",
                reference=reference,
            )
        return stdout
