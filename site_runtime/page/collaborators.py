"""
FakeCollaborators for tests and local runs.

Implements PageCollaborators with call recording and the minimum DOM effects
the bootstrap relies on:
- decorate_sections: top-level ``div`` children become ``div.section``
- build_block: elements are moved into ``div.<name>``
Every other primitive only records its call.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from bs4 import Tag

from site_runtime.page.protocols import PageModel, SectionCallback
from site_runtime.page.soup import add_class, create_element

SECTION_CLASS = "section"


class FakeCollaborators:
    """Recording implementation of PageCollaborators.

    Attributes:
        calls: (primitive name, argument) pairs in call order.
        placeholders: Placeholder sets by prefix.
        failures: Primitive names (or string arguments, e.g. a stylesheet
            href) whose calls raise RuntimeError.
    """

    def __init__(
        self,
        placeholders: dict[str, dict[str, str]] | None = None,
        failures: set[str] | None = None,
    ) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.placeholders = placeholders or {}
        self.failures = failures or set()

    def _record(self, name: str, arg: Any = None) -> None:
        self.calls.append((name, arg))
        if name in self.failures or (isinstance(arg, str) and arg in self.failures):
            raise RuntimeError(f"{name} failed")

    def called(self, name: str) -> list[Any]:
        """Arguments of every call to ``name``."""
        return [arg for call, arg in self.calls if call == name]

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def build_block(self, name: str, elems: Sequence[Tag]) -> Tag:
        self._record("build_block", name)
        block = create_element("div", {"class": [name]})
        for elem in elems:
            block.append(elem.extract())
        return block

    def decorate_buttons(self, container: Tag) -> None:
        self._record("decorate_buttons", container)

    def decorate_icons(self, container: Tag) -> None:
        self._record("decorate_icons", container)

    def decorate_sections(self, container: Tag) -> None:
        self._record("decorate_sections", container)
        for child in container.find_all("div", recursive=False):
            add_class(child, SECTION_CLASS)

    def decorate_blocks(self, container: Tag) -> None:
        self._record("decorate_blocks", container)

    def decorate_template_and_theme(self, page: PageModel) -> None:
        self._record("decorate_template_and_theme", page)

    async def load_header(self, header: Tag | None) -> None:
        await asyncio.sleep(0)
        self._record("load_header", header)

    async def load_footer(self, footer: Tag | None) -> None:
        await asyncio.sleep(0)
        self._record("load_footer", footer)

    async def load_section(
        self, section: Tag, on_loaded: SectionCallback | None = None
    ) -> None:
        await asyncio.sleep(0)
        self._record("load_section", section)
        if on_loaded is not None:
            await on_loaded(section)

    async def load_sections(self, container: Tag) -> None:
        await asyncio.sleep(0)
        self._record("load_sections", container)

    async def load_css(self, href: str) -> None:
        await asyncio.sleep(0)
        self._record("load_css", href)

    async def fetch_placeholders(self, prefix: str = "default") -> dict[str, str]:
        await asyncio.sleep(0)
        self._record("fetch_placeholders", prefix)
        return self.placeholders.get(prefix, {})

    async def wait_for_first_image(self, section: Tag) -> None:
        await asyncio.sleep(0)
        self._record("wait_for_first_image", section)
