"""Shared pytest fixtures for the cordova-create test suite.

Provides reusable fixtures for:
- Template trees of every supported layout (flat, www folder, sub-directory)
- A CreateConfig whose scratch directories stay inside tmp_path
- A mocked fetch collaborator that "downloads" the stock template
- A recording event sink
- Mock subprocess helpers
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from cordova_create.config import CreateConfig

STOCK_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "cordova_create" / "stock" / "hello_world"

TEMPLATE_CONFIG_XML = """<?xml version='1.0' encoding='utf-8'?>
<widget id="com.example.template" version="0.0.1" xmlns="http://www.w3.org/ns/widgets">
    <name>TemplateApp</name>
    <description>Template under test</description>
    <author email="dev@example.com">Template Author</author>
    <content src="index.html" />
</widget>
"""


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def config(tmp_path: Path) -> CreateConfig:
    """A CreateConfig whose scratch directories live under tmp_path."""
    return CreateConfig(cache_dir=tmp_path / "cache")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Destination path for the project under test (not yet created)."""
    return tmp_path / "TestBase"


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


@pytest.fixture
def flat_template(tmp_path: Path) -> Path:
    """A template whose files sit directly at its root, with housekeeping files."""
    return write_files(
        tmp_path / "templates" / "flat",
        {
            "www/index.html": "<h1>flat</h1>",
            "www/js/app.js": "console.log('flat');",
            "hooks/README.md": "hooks",
            "merges/android/extra.css": "body {}",
            "config.xml": TEMPLATE_CONFIG_XML,
            "package.json": json.dumps({"name": "flat-template", "version": "3.0.0"}),
            "RELEASENOTES.md": "notes",
            "LICENSE": "license",
            "NOTICE": "notice",
            "COPYRIGHT": "copyright",
            ".npmignore": "spec/",
            ".git/HEAD": "ref: refs/heads/main",
            "res/icon.txt": "icon",
            "gitignore": "node_modules/",
        },
    )


@pytest.fixture
def subdir_template(tmp_path: Path) -> Path:
    """An npm-style template whose package.json points at ``template_src``."""
    root = tmp_path / "templates" / "withsubdirectory_package_json"
    return write_files(
        root,
        {
            "package.json": json.dumps({"name": "sub-template", "dirname": "template_src"}),
            "index.js": "module.exports = {};",
            "template/README.md": "not the content",
            "template_src/www/index.html": "<h1>sub</h1>",
            "template_src/config.xml": TEMPLATE_CONFIG_XML,
            "template_src/package.json": json.dumps(
                {"name": "template-app", "displayName": "TemplateApp", "version": "0.0.1"}
            ),
            "template_src/LICENSE": "kept because the sub-directory is curated",
        },
    )


@pytest.fixture
def www_template(tmp_path: Path) -> Path:
    """A bare ``www`` asset folder used as the template."""
    return write_files(
        tmp_path / "templates" / "assets" / "www",
        {
            "index.html": "<h1>www only</h1>",
            "css/site.css": "h1 {}",
        },
    )


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_fetch(tmp_path: Path) -> AsyncMock:
    """A fetch collaborator that returns a copy of the stock template.

    The copy lives outside the scratch directory it is handed, like a
    package manager cache would.
    """
    fetched = tmp_path / "mockFetchDest"
    shutil.copytree(STOCK_TEMPLATE_DIR, fetched)
    return AsyncMock(return_value=fetched)


class RecordingEvents:
    """Event sink that keeps every (channel, message) pair."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def emit(self, channel: str, message: str) -> None:
        self.events.append((channel, message))

    def messages(self, channel: str) -> list[str]:
        return [message for name, message in self.events if name == channel]


@pytest.fixture
def recording_events() -> RecordingEvents:
    return RecordingEvents()


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
