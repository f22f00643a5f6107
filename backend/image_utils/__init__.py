"""
Image Utilities Module

Helpers for image assets referenced by the calendar UI.

Features:
- Normalizing bundler image references to a URL
- Preload hints (HTML <link> and HTTP Link header)
- Load-success detection as an awaitable
"""

from .references import (
    PlainUrl,
    SrcWrapper,
    DefaultWrapper,
    Unknown,
    ImageReference,
    from_import,
    get_image_url,
)
from .preload import LinkHint, DocumentHead, preload_images
from .loader import ImageLoadError, HttpImageProbe, check_image_loaded

__all__ = [
    "PlainUrl",
    "SrcWrapper",
    "DefaultWrapper",
    "Unknown",
    "ImageReference",
    "from_import",
    "get_image_url",
    "LinkHint",
    "DocumentHead",
    "preload_images",
    "ImageLoadError",
    "HttpImageProbe",
    "check_image_loaded",
]
