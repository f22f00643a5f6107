"""
Image References

Bundlers hand out imported image assets in different shapes: a plain
URL string, an object with a ``src`` field, or a module-like object with
a ``default`` field. ``from_import`` inspects such a value once and tags
it; ``get_image_url`` then resolves the tag to a URL.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class PlainUrl:
    """Asset already given as a URL string."""
    url: str


@dataclass(frozen=True)
class SrcWrapper:
    """Asset object exposing ``src`` (optimized image metadata)."""
    src: str


@dataclass(frozen=True)
class DefaultWrapper:
    """Module namespace exposing ``default``."""
    default: str


@dataclass(frozen=True)
class Unknown:
    """Anything else. Passed through untouched."""
    value: Any


ImageReference = Union[PlainUrl, SrcWrapper, DefaultWrapper, Unknown]

_TAGGED = (PlainUrl, SrcWrapper, DefaultWrapper, Unknown)


def _field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def from_import(value: Any) -> ImageReference:
    """
    Tag a bundler image value.

    Precedence is string, then a truthy ``src``, then a truthy
    ``default``. Already tagged values are returned as they are.
    """
    if isinstance(value, _TAGGED):
        return value
    if isinstance(value, str):
        return PlainUrl(value)

    src = _field(value, "src")
    if src:
        return SrcWrapper(src)

    default = _field(value, "default")
    if default:
        return DefaultWrapper(default)

    return Unknown(value)


def get_image_url(image_import: Any) -> Any:
    """
    Get the URL of an imported image.

    Never raises: values of an unrecognized shape are returned unchanged,
    so the result is not guaranteed to be a usable URL.
    """
    ref = from_import(image_import)

    if isinstance(ref, PlainUrl):
        return ref.url
    if isinstance(ref, SrcWrapper):
        return ref.src
    if isinstance(ref, DefaultWrapper):
        return ref.default
    return ref.value
