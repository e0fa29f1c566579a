"""Shared utility functions for cordova-create.

Provides async command execution, fresh-from-disk JSON I/O, file-system
helpers and Rich-based console output.  Manifest reads always go to disk so
a file rewritten earlier in the same process is never served stale.
"""

from __future__ import annotations

import asyncio
import json
import os
import shutil
from pathlib import Path
from typing import Any

from rich.console import Console

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: int = 120,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously and capture its output.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A timeout yields
        ``returncode == -1`` with an explanatory stderr.

    Raises:
        FileNotFoundError: If the executable does not exist.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Read and parse a JSON object from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not an object.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return data


def save_json(data: dict[str, Any], path: str | Path, indent: int = 4) -> None:
    """Write *data* as pretty-printed JSON, creating parent directories."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(json.dumps(data, indent=indent, ensure_ascii=False), encoding="utf-8")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def lexists(path: Path) -> bool:
    """``True`` if *path* exists or is a symbolic link (even a dangling one)."""
    return path.is_symlink() or path.exists()


def remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree; missing paths are ignored."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


def copy_path(source: Path, destination: Path) -> None:
    """Copy a file or directory tree, keeping symlinks as symlinks."""
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    else:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination, follow_symlinks=False)


def is_inside(path: Path, parent: Path) -> bool:
    """``True`` if *path* equals *parent* or lies somewhere beneath it."""
    return path == parent or parent in path.parents


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")
