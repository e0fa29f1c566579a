"""Project creation entry points.

``create`` validates the request, acquires the template, resolves its
content root, materializes it into the destination and stamps the requested
identity into the manifests.  The stages run strictly one after another;
filesystem work is pushed to a worker thread so an event loop is never
blocked.

Usage::

    python -m cordova_create ./my-app --id org.example.app --name MyApp
"""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .config import CreateConfig
from .errors import ConflictError, CreateError, ValidationError
from .events import ConsoleEventSink, as_event_sink
from .identifiers import is_valid_identifier
from .template.acquirer import TemplateAcquirer, TemplateSpec
from .template.classifier import needs_remote_fetch
from .template.fetch import FetchFunc
from .template.layout import resolve_content_root
from .template.materializer import Materializer, rollback_on_error
from .template.stamper import stamp_identity
from .utils import console, is_inside, print_error, print_success

__all__ = ["CreateOptions", "create", "create_legacy", "main"]


class CreateOptions(BaseModel):
    """Options recognised by :func:`create`.

    ``url`` and its older alias ``uri`` name the template the same way
    ``template`` does; ``template`` may also be the legacy boolean flag.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    id: str | None = Field(default=None, description="Reverse-domain app id")
    name: str | None = Field(default=None, description="Display name")
    template: str | bool | None = Field(default=None)
    url: str | None = Field(default=None)
    uri: str | None = Field(default=None)
    link: bool = Field(default=False, description="Symlink template content instead of copying")
    events: Any = Field(default=None, exclude=True)

    @property
    def template_reference(self) -> str | None:
        """The explicitly requested template, if any."""
        reference = self.url or self.uri
        if not reference and isinstance(self.template, str):
            reference = self.template
        return reference or None


def _coerce_options(options: Any) -> CreateOptions:
    if options is None:
        return CreateOptions()
    if isinstance(options, CreateOptions):
        return options.model_copy()
    if not isinstance(options, Mapping):
        raise ValidationError("Given options must be an object")
    try:
        return CreateOptions.model_validate(dict(options))
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid options: {exc}") from exc


def _check_destination(destination: Path, config: CreateConfig) -> None:
    if not os.path.lexists(destination):
        return
    if not destination.is_dir():
        raise ValidationError(
            f"Path already exists and is not empty: {destination}", path=destination
        )
    entries = set(os.listdir(destination)) - {config.settings_dir_name}
    if entries:
        raise ValidationError(
            f"Path already exists and is not empty: {destination}", path=destination
        )


async def create(
    dest: str | os.PathLike[str] | None,
    options: CreateOptions | Mapping[str, Any] | None = None,
    *,
    config: CreateConfig | None = None,
    fetch: FetchFunc | None = None,
) -> None:
    """Create a new project in *dest*.

    Args:
        dest: Directory for the new project.  It must not exist, be empty,
            or contain only the settings directory.
        options: ``id``, ``name``, ``template`` (or ``url``/``uri``),
            ``link`` and ``events``.
        config: Creation settings; defaults to :class:`CreateConfig`.
        fetch: Fetch collaborator for remote templates; defaults to
            :class:`~cordova_create.template.fetch.TemplateFetcher`.

    Raises:
        ValidationError: Bad destination, options or app id.
        ConflictError: The destination lies inside the template.
        FetchError: A remote template could not be fetched.
        InvalidTemplateError: The template content could not be located.
        SymlinkPermissionError: Link mode was refused by the OS.
        OSError: Any other filesystem failure.
    """
    if not dest:
        raise ValidationError("Directory not specified. See `cordova help`.")

    opts = _coerce_options(options)
    config = config or CreateConfig()
    events = as_event_sink(opts.events)
    events.emit("verbose", "Using detached cordova-create")

    destination = Path(os.path.abspath(os.path.expanduser(os.fspath(dest))))
    _check_destination(destination, config)

    if opts.id and not is_valid_identifier(opts.id):
        raise ValidationError(
            "App id contains a reserved word, or is not a valid identifier."
        )

    reference = opts.template_reference
    spec = TemplateSpec(reference=reference) if reference else TemplateSpec.default(config)

    is_local = spec.is_default or not needs_remote_fetch(spec.reference)
    if is_local and is_inside(destination, Path(os.path.abspath(spec.reference))):
        raise ConflictError(
            f'Cannot create project "{destination}" inside the template used to '
            f'create it "{spec.reference}".',
            path=destination,
        )

    events.emit("log", "Creating a new cordova project.")

    acquirer = TemplateAcquirer(config=config, fetch=fetch, events=events)
    acquired = await acquirer.acquire(spec)
    root = await asyncio.to_thread(resolve_content_root, acquired)

    materializer = Materializer(config=config, events=events)
    with rollback_on_error(destination, events):
        await asyncio.to_thread(materializer.materialize, root, destination, link=opts.link)
        await asyncio.to_thread(
            stamp_identity, destination, opts.id, opts.name, config, events
        )


async def create_legacy(
    dir: str | os.PathLike[str] | None,
    id: str | None = None,
    name: str | None = None,
    cfg: Mapping[str, Any] | None = None,
    events: Any = None,
    *,
    config: CreateConfig | None = None,
    fetch: FetchFunc | None = None,
) -> None:
    """Positional calling convention: ``(dir, id, name, cfg, events)``.

    ``cfg["lib"]["www"]`` supplies ``url`` (or ``uri``), ``template`` and
    ``link``; it is shallow-copied, never mutated.
    """
    lib = cfg.get("lib") if isinstance(cfg, Mapping) else None
    www = lib.get("www") if isinstance(lib, Mapping) else None
    opts: dict[str, Any] = dict(www) if isinstance(www, Mapping) else {}

    if id:
        opts["id"] = id
    if name:
        opts["name"] = name
    if events:
        opts["events"] = events

    await create(dir, opts, config=config, fetch=fetch)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m cordova_create``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="cordova-create",
        description="Create a new Cordova project from a template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m cordova_create ./hello --id org.example.hello --name Hello\n"
            "  python -m cordova_create ./app --template cordova-template-foo@2\n"
            "  python -m cordova_create ./app --template ../my-template --link\n"
        ),
    )
    parser.add_argument("destination", help="Directory for the new project")
    parser.add_argument("--id", default=None, help="Reverse-domain app id")
    parser.add_argument("--name", default=None, help="Display name of the app")
    parser.add_argument(
        "--template",
        default=None,
        help="Local path, npm package or git URL of the template (default: hello world)",
    )
    parser.add_argument(
        "--link",
        action="store_true",
        help="Symlink www, merges, hooks and config.xml instead of copying",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show verbose output")

    args = parser.parse_args(argv)

    options = {
        "id": args.id,
        "name": args.name,
        "template": args.template,
        "link": args.link,
        "events": ConsoleEventSink(console=console, verbose=args.verbose),
    }

    try:
        asyncio.run(create(args.destination, options, config=CreateConfig.from_env()))
    except (CreateError, OSError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    print_success(f"Project created at {Path(args.destination).resolve()}")
