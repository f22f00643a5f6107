"""
Image Preload Hints

Builds ``<link rel="preload" as="image">`` hints so the browser fetches
and caches images ahead of use. Hints are advisory only.
"""

from html import escape
from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass(frozen=True)
class LinkHint:
    """A single <link> element in the document head."""
    href: str
    rel: str = "preload"
    as_: str = "image"

    def to_html(self) -> str:
        return (
            f'<link rel="{escape(self.rel)}" as="{escape(self.as_)}" '
            f'href="{escape(self.href)}">'
        )

    def to_link_header(self) -> str:
        return f"<{self.href}>; rel={self.rel}; as={self.as_}"


@dataclass
class DocumentHead:
    """
    Minimal stand-in for a document head.

    Hints are kept in insertion order. Nothing is deduplicated, the
    browser cache takes care of repeated URLs.
    """
    children: List[LinkHint] = field(default_factory=list)

    def append_child(self, hint: LinkHint) -> None:
        self.children.append(hint)

    def render(self) -> str:
        return "\n".join(hint.to_html() for hint in self.children)

    def link_header(self) -> str:
        """Hints as an HTTP ``Link`` header value."""
        return ", ".join(hint.to_link_header() for hint in self.children)


def preload_images(images: Iterable[str], head: DocumentHead) -> None:
    """
    Preload images to ensure they're cached.

    Args:
        images: Image URLs to preload
        head: Document head receiving one preload hint per URL
    """
    for url in images:
        head.append_child(LinkHint(href=url))
