"""Write the requested project identity into the generated manifests."""

from __future__ import annotations

from pathlib import Path

from ..config import CreateConfig
from ..events import EventSink, NullEventSink
from .manifest import ConfigParser, PackageManifest
from .materializer import CONFIG_XML

__all__ = ["stamp_identity", "stamp_config_xml", "stamp_package_json"]


def stamp_package_json(
    destination: Path,
    app_id: str | None,
    app_name: str | None,
    config: CreateConfig,
) -> bool:
    """Update ``package.json`` name, displayName and version.

    Returns ``False`` when the destination has no ``package.json``.
    """
    path = destination / "package.json"
    if not path.is_file():
        return False

    manifest = PackageManifest(path)
    if app_name:
        manifest["displayName"] = app_name
    manifest["name"] = app_id.lower() if app_id else config.fallback_package_name
    manifest["version"] = config.default_version
    manifest.write()
    return True


def stamp_config_xml(
    destination: Path,
    app_id: str | None,
    app_name: str | None,
    config: CreateConfig,
) -> bool:
    """Update the widget id, name and version in ``config.xml``.

    A symlinked ``config.xml`` belongs to the template it points into and is
    left untouched.  Returns whether the file was written.
    """
    path = destination / CONFIG_XML
    if path.is_symlink():
        return False

    conf = ConfigParser(path)
    if app_id:
        conf.set_package_name(app_id)
    if app_name:
        conf.set_name(app_name)
    conf.set_version(config.default_version)
    conf.write()
    return True


def stamp_identity(
    destination: Path,
    app_id: str | None = None,
    app_name: str | None = None,
    config: CreateConfig | None = None,
    events: EventSink | None = None,
) -> None:
    """Stamp *app_id*, *app_name* and the default version into both manifests."""
    config = config or CreateConfig()
    events = events or NullEventSink()

    if stamp_package_json(destination, app_id, app_name, config):
        events.emit("verbose", "Updated package.json")
    if stamp_config_xml(destination, app_id, app_name, config):
        events.emit("verbose", f"Updated {CONFIG_XML}")
    else:
        events.emit("verbose", f"{CONFIG_XML} is a symbolic link; leaving it unchanged")
