"""
Page-assembly protocols.

PageModel is the document surface the bootstrap writes to; PageCollaborators
is the capability set supplied by the site's block library (decorators,
section/block loaders, stylesheet loader, placeholders). Content nodes are
BeautifulSoup ``Tag`` objects.

Pattern: Protocol typing so fakes can stand in during tests.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from bs4 import Tag

    from site_runtime.resolvers.locale import TextDirection
    from site_runtime.resolvers.location import PageLocation

SectionCallback = Callable[["Tag"], Awaitable[None]]


class PageModel(Protocol):
    """Document being assembled."""

    location: PageLocation
    viewport_width: int
    is_error_page: bool
    page_type: str | None
    page_name: str | None

    @property
    def document_language(self) -> str | None: ...

    @property
    def head(self) -> Tag: ...

    @property
    def body(self) -> Tag: ...

    @property
    def main(self) -> Tag | None: ...

    @property
    def header(self) -> Tag | None: ...

    @property
    def footer(self) -> Tag | None: ...

    def set_language(self, language: str, direction: TextDirection) -> None: ...

    def mark_visible(self) -> None: ...

    def add_body_class(self, name: str) -> None: ...

    def add_head_meta(self, name: str, content: str) -> Tag: ...

    def get_element_by_id(self, element_id: str) -> Tag | None: ...

    def scroll_into_view(self, element: Tag) -> None: ...


class PageCollaborators(Protocol):
    """Externally implemented decoration and loading primitives."""

    def build_block(self, name: str, elems: Sequence[Tag]) -> Tag:
        """Build a block element named ``name`` holding ``elems``."""
        ...

    def decorate_buttons(self, container: Tag) -> None: ...

    def decorate_icons(self, container: Tag) -> None: ...

    def decorate_sections(self, container: Tag) -> None: ...

    def decorate_blocks(self, container: Tag) -> None: ...

    def decorate_template_and_theme(self, page: PageModel) -> None: ...

    async def load_header(self, header: Tag | None) -> None: ...

    async def load_footer(self, footer: Tag | None) -> None: ...

    async def load_section(
        self, section: Tag, on_loaded: SectionCallback | None = None
    ) -> None:
        """Load one section's blocks, then await ``on_loaded(section)``."""
        ...

    async def load_sections(self, container: Tag) -> None:
        """Load every section in container; resolves once blocks are ready."""
        ...

    async def load_css(self, href: str) -> None: ...

    async def fetch_placeholders(self, prefix: str = "default") -> dict[str, str]: ...

    async def wait_for_first_image(self, section: Tag) -> None: ...
