"""
Page location handling.

A page rendered inside an ``about:srcdoc`` frame (authoring previews) has no
URL of its own: the effective URL is the parent page's origin joined with the
parent's ``path`` query parameter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final
from urllib.parse import parse_qs, urlsplit

SRCDOC_HREF: Final[str] = "about:srcdoc"


@dataclass(frozen=True, slots=True)
class PageLocation:
    """URL of the page being assembled.

    Attributes:
        raw_href: The frame's own href (may be ``about:srcdoc``).
        parent_href: Href of the embedding page, when framed.
    """

    raw_href: str
    parent_href: str | None = None

    @property
    def is_srcdoc(self) -> bool:
        return self.raw_href == SRCDOC_HREF and self.parent_href is not None

    @property
    def href(self) -> str:
        """Effective page URL."""
        if not self.is_srcdoc:
            return self.raw_href
        parent = urlsplit(self.parent_href or "")
        path = parse_qs(parent.query).get("path", [""])[0]
        return f"{parent.scheme}://{parent.netloc}{path}"

    @property
    def origin(self) -> str:
        source = self.parent_href if self.is_srcdoc else self.raw_href
        parts = urlsplit(source or "")
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def hostname(self) -> str:
        return urlsplit(self.href).hostname or ""

    @property
    def path(self) -> str:
        return urlsplit(self.href).path or "/"

    @property
    def fragment(self) -> str:
        """URL fragment identifier without the leading '#'."""
        return urlsplit(self.href).fragment
