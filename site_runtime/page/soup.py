"""
BeautifulSoup-backed page model.

Patterns Applied:
- html.parser builder (no native parser dependency)
- Document skeleton (html/head/body) guaranteed at construction
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from site_runtime.resolvers.locale import TextDirection
from site_runtime.resolvers.location import PageLocation

HTML_PARSER = "html.parser"
VISIBLE_CLASS = "appear"


def create_element(name: str, attrs: dict[str, str | list[str]] | None = None) -> Tag:
    """Create a detached element."""
    return BeautifulSoup("", HTML_PARSER).new_tag(name, attrs=attrs or {})


def has_class(element: Tag, name: str) -> bool:
    return name in (element.get("class") or [])


def add_class(element: Tag, name: str) -> None:
    classes = list(element.get("class") or [])
    if name not in classes:
        classes.append(name)
    element["class"] = classes


class SoupPage:
    """PageModel over a parsed HTML document.

    Attributes:
        document: Parsed document.
        location: URL the page is served from.
        viewport_width: Client viewport width in CSS pixels.
        is_error_page: Set when the requested resource was not found.
        scrolled_to: Element last scrolled into view.
    """

    def __init__(
        self,
        html: str,
        location: PageLocation,
        viewport_width: int = 1280,
        is_error_page: bool = False,
    ) -> None:
        self.document = BeautifulSoup(html, HTML_PARSER)
        self.location = location
        self.viewport_width = viewport_width
        self.is_error_page = is_error_page
        self.page_type: str | None = None
        self.page_name: str | None = None
        self.scrolled_to: Tag | None = None
        self._ensure_skeleton()

    def _ensure_skeleton(self) -> None:
        root = self.document.find("html")
        if root is None:
            root = self.document.new_tag("html")
            for node in list(self.document.contents):
                root.append(node.extract())
            self.document.append(root)
        if root.find("head", recursive=False) is None:
            root.insert(0, self.document.new_tag("head"))
        if root.find("body", recursive=False) is None:
            body = self.document.new_tag("body")
            for node in list(root.contents):
                if not (isinstance(node, Tag) and node.name == "head"):
                    body.append(node.extract())
            root.append(body)

    @property
    def root(self) -> Tag:
        return self.document.find("html")

    @property
    def document_language(self) -> str | None:
        return self.root.get("lang") or None

    @property
    def head(self) -> Tag:
        return self.root.find("head", recursive=False)

    @property
    def body(self) -> Tag:
        return self.root.find("body", recursive=False)

    @property
    def main(self) -> Tag | None:
        return self.document.find("main")

    @property
    def header(self) -> Tag | None:
        return self.document.find("header")

    @property
    def footer(self) -> Tag | None:
        return self.document.find("footer")

    def set_language(self, language: str, direction: TextDirection) -> None:
        self.root["lang"] = language
        self.root["dir"] = direction.value

    def mark_visible(self) -> None:
        add_class(self.body, VISIBLE_CLASS)

    def add_body_class(self, name: str) -> None:
        add_class(self.body, name)

    def add_head_meta(self, name: str, content: str) -> Tag:
        meta = self.document.new_tag("meta", attrs={"name": name, "content": content})
        self.head.append(meta)
        return meta

    def get_element_by_id(self, element_id: str) -> Tag | None:
        return self.document.find(id=element_id)

    def scroll_into_view(self, element: Tag) -> None:
        self.scrolled_to = element

    def render(self) -> str:
        return str(self.document)
