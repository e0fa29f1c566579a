"""cordova-create configuration.

Typed settings for one or more project creations.  The values that used to
live in process-wide state (the settings home, the scratch location for
fetched templates) are explicit fields here and are handed to the acquirer,
materializer and stamper at construction time.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field

_STOCK_TEMPLATE_DIR = Path(__file__).parent / "stock" / "hello_world"


class CreateConfig(BaseModel):
    """Settings shared by every stage of the creation pipeline."""

    cache_dir: Path | None = Field(
        default=None,
        description="Parent of scratch fetch directories; None uses the system temp dir",
    )
    settings_dir_name: str = Field(
        default=".cordova",
        description="Settings entry a destination may hold and still count as empty",
    )
    default_version: str = Field(default="1.0.0", min_length=1)
    fallback_package_name: str = Field(default="helloworld", min_length=1)
    scratch_prefix: str = Field(default="cordova-create-")
    fetch_timeout: int = Field(
        default=600, ge=10, description="Per-command timeout for template fetches in seconds"
    )
    stock_template_dir: Path = Field(default=_STOCK_TEMPLATE_DIR)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def stock_asset_dir(self) -> Path:
        """Directory holding the stock fallback assets (www, hooks, config.xml).

        Follows the ``dirname`` pointer declared by the stock template's
        ``package.json``; falls back to the template directory itself.
        """
        manifest = self.stock_template_dir / "package.json"
        if manifest.is_file():
            data = json.loads(manifest.read_text(encoding="utf-8"))
            pointer = data.get("dirname") if isinstance(data, dict) else None
            if pointer:
                return (self.stock_template_dir / pointer).resolve()
        return self.stock_template_dir.resolve()

    def stock_asset(self, name: str) -> Path:
        """Path of one stock fallback asset."""
        return self.stock_asset_dir / name

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "CreateConfig":
        """Build a ``CreateConfig`` from environment variables.

        Recognised variables (all optional):
            CORDOVA_HOME, CORDOVA_CREATE_DEFAULT_VERSION,
            CORDOVA_CREATE_FETCH_TIMEOUT.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("CORDOVA_HOME"):
            kwargs["cache_dir"] = Path(os.environ["CORDOVA_HOME"]).expanduser()
        if os.environ.get("CORDOVA_CREATE_DEFAULT_VERSION"):
            kwargs["default_version"] = os.environ["CORDOVA_CREATE_DEFAULT_VERSION"]
        if os.environ.get("CORDOVA_CREATE_FETCH_TIMEOUT"):
            kwargs["fetch_timeout"] = int(os.environ["CORDOVA_CREATE_FETCH_TIMEOUT"])
        return cls(**kwargs)
