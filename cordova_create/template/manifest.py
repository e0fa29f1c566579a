"""Project manifests: the ``config.xml`` widget document and ``package.json``.

Both classes read from disk when constructed and write back on ``write()``.
Nothing is cached between instances.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from ..utils import load_json, save_json

__all__ = ["ConfigParser", "PackageManifest", "WIDGET_NS", "CDV_NS"]

WIDGET_NS = "http://www.w3.org/ns/widgets"
CDV_NS = "http://cordova.apache.org/ns/1.0"

ET.register_namespace("", WIDGET_NS)
ET.register_namespace("cdv", CDV_NS)


def _tag(name: str) -> str:
    return f"{{{WIDGET_NS}}}{name}"


class ConfigParser:
    """Read and update the identity fields of a ``config.xml`` file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        self.tree = ET.parse(self.path, parser=parser)
        self.root = self.tree.getroot()

    # -- Lookup ------------------------------------------------------------

    def _find(self, name: str) -> ET.Element | None:
        element = self.root.find(_tag(name))
        if element is None:
            element = self.root.find(name)
        return element

    def _text(self, name: str) -> str:
        element = self._find(name)
        if element is None or element.text is None:
            return ""
        return element.text.strip()

    # -- Identity fields ---------------------------------------------------

    def package_name(self) -> str:
        return self.root.get("id", "")

    def set_package_name(self, identifier: str) -> None:
        self.root.set("id", identifier)

    def name(self) -> str:
        return self._text("name")

    def set_name(self, name: str) -> None:
        element = self._find("name")
        if element is None:
            element = ET.SubElement(self.root, _tag("name"))
        element.text = name

    def version(self) -> str:
        return self.root.get("version", "")

    def set_version(self, version: str) -> None:
        self.root.set("version", version)

    def author(self) -> str:
        return self._text("author")

    def description(self) -> str:
        return self._text("description")

    # -- Persistence -------------------------------------------------------

    def write(self) -> None:
        """Write the document back to :attr:`path`."""
        self.tree.write(self.path, encoding="utf-8", xml_declaration=True)


class PackageManifest:
    """A ``package.json`` file loaded as a plain dictionary."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.data: dict[str, Any] = load_json(self.path)

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def write(self) -> None:
        save_json(self.data, self.path, indent=4)
