"""Create new Cordova projects from templates.

A template is a local directory, an npm package or a git repository.  Its
content is copied (or symlinked) into a fresh project directory, any missing
``www``, ``hooks`` or ``config.xml`` is filled in from the bundled hello-world
app, and the app id, display name and version are written into the
manifests.

Quick usage::

    import asyncio
    from cordova_create import create

    asyncio.run(create("./hello", {"id": "org.example.hello", "name": "Hello"}))
"""

from .config import CreateConfig
from .creator import CreateOptions, create, create_legacy
from .errors import (
    ConflictError,
    CreateError,
    FetchError,
    InvalidTemplateError,
    SymlinkPermissionError,
    ValidationError,
)
from .events import ConsoleEventSink, EventSink, NullEventSink
from .identifiers import is_valid_identifier

__all__ = [
    "ConflictError",
    "ConsoleEventSink",
    "CreateConfig",
    "CreateError",
    "CreateOptions",
    "EventSink",
    "FetchError",
    "InvalidTemplateError",
    "NullEventSink",
    "SymlinkPermissionError",
    "ValidationError",
    "create",
    "create_legacy",
    "is_valid_identifier",
]

__version__ = "1.0.0"
