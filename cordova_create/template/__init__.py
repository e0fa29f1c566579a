"""Template resolution and materialization.

Stages, in order::

    needs_remote_fetch -> TemplateAcquirer -> resolve_content_root
        -> Materializer -> stamp_identity
"""

from .acquirer import AcquiredContent, TemplateAcquirer, TemplateSpec
from .classifier import needs_remote_fetch
from .fetch import TemplateFetcher
from .layout import ContentRoot, resolve_content_root
from .manifest import ConfigParser, PackageManifest
from .materializer import Materializer
from .stamper import stamp_identity

__all__ = [
    "AcquiredContent",
    "ConfigParser",
    "ContentRoot",
    "Materializer",
    "PackageManifest",
    "TemplateAcquirer",
    "TemplateFetcher",
    "TemplateSpec",
    "needs_remote_fetch",
    "resolve_content_root",
    "stamp_identity",
]
