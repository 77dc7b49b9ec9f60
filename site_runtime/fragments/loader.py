"""
Fragment Loader.

Fetches externally authored HTML documents and turns the children of their
``main`` element into a decorated container ready for embedding.

Media authored next to a fragment is referenced as ``./media_<hash>``; those
references are resolved against the fragment's own URL so they keep working
once embedded into a page at another path.

Patterns Applied:
- Connection pooling (shared httpx.AsyncClient)
- Invalid path / failed fetch surfaced as None, never raised
"""

from __future__ import annotations

from typing import Final
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from site_runtime.core.exceptions import FragmentUnavailableError
from site_runtime.core.logging import get_logger
from site_runtime.page.decoration import decorate_main
from site_runtime.page.protocols import PageCollaborators, PageModel
from site_runtime.page.soup import HTML_PARSER, add_class, create_element
from site_runtime.resolvers.locale import DEFAULT_LANGUAGE
from site_runtime.resolvers.location import PageLocation

logger = get_logger(__name__)

LOCAL_MEDIA_PREFIX: Final[str] = "./media_"
MEDIA_ATTRIBUTES: Final[tuple[tuple[str, str], ...]] = (
    ("img", "src"),
    ("source", "srcset"),
)

NOT_FOUND: Final[int] = 404
ERROR_PAGE_TYPE: Final[str] = "page-not-found"
ERROR_BODY_CLASS: Final[str] = "error-page"
ERROR_CONTENT_CLASS: Final[str] = "errorPageContent"
ERROR_SECTION_SELECTOR: Final[str] = (
    ".section[data-path]:not(.recommendations-container):has(.default-content-wrapper)"
)
ERROR_TITLE_SELECTOR: Final[str] = ".default-content-wrapper"


def rewrite_media_paths(container: Tag, base_url: str) -> int:
    """Resolve ``./media_`` references in container against base_url.

    Args:
        container: Fragment content.
        base_url: Absolute URL of the fragment document.

    Returns:
        Number of attributes rewritten.
    """
    rewritten = 0
    for tag, attr in MEDIA_ATTRIBUTES:
        for element in container.select(f'{tag}[{attr}^="{LOCAL_MEDIA_PREFIX}"]'):
            element[attr] = urljoin(base_url, element[attr])
            rewritten += 1
    return rewritten


class FragmentLoader:
    """Loads site-rooted fragments and error pages.

    Usage:
        loader = FragmentLoader(client, collaborators, location)
        footer_links = await loader.load_fragment("/en/fragments/footer-links")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        collaborators: PageCollaborators,
        location: PageLocation,
    ) -> None:
        self._client = client
        self._collaborators = collaborators
        self._location = location

    async def load_fragment(self, path: str | None) -> Tag | None:
        """Load a fragment.

        Args:
            path: Site-rooted path such as ``/en/fragments/404``.

        Returns:
            Decorated container with the fragment's content, or None when the
            path is not site-rooted or the fragment could not be fetched.
        """
        try:
            return await self._load(path)
        except FragmentUnavailableError as e:
            logger.warning(
                "fragment_unavailable",
                path=e.path,
                status_code=e.status_code,
                reason=e.reason,
            )
            return None

    async def _load(self, path: str | None) -> Tag:
        if not path or not path.startswith("/"):
            raise FragmentUnavailableError(path)

        url = urljoin(self._location.href, path)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise FragmentUnavailableError(path, reason=str(e)) from e
        if not response.is_success:
            raise FragmentUnavailableError(path, response.status_code)

        document = BeautifulSoup(response.text, HTML_PARSER)
        main = document.find("main")
        if main is None:
            main = document.find(attrs={"role": "main"})
        if main is None:
            raise FragmentUnavailableError(path, response.status_code)

        container = create_element("div")
        for child in main.find_all(recursive=False):
            container.append(child.extract())

        rewrite_media_paths(container, url)
        decorate_main(container, self._collaborators)
        await self._collaborators.load_sections(container)

        logger.debug("fragment_loaded", path=path)
        return container

    async def show_error_page(self, page: PageModel, code: int = NOT_FOUND) -> Tag | None:
        """Render the error fragment for ``code`` into the page.

        The fragment's content section is tagged as error content and its
        title is demoted to an ``h5``. A 404 also marks the page noindex so
        crawlers do not record a soft 404.

        Returns:
            The embedded fragment, or None when it could not be loaded.
        """
        page.page_type = ERROR_PAGE_TYPE
        page.page_name = ERROR_PAGE_TYPE

        language = page.document_language or DEFAULT_LANGUAGE
        fragment = await self.load_fragment(f"/{language}/fragments/{code}")

        if fragment is not None:
            section = fragment.select_one(ERROR_SECTION_SELECTOR)
            if section is not None:
                add_class(section, ERROR_CONTENT_CLASS)

            title = fragment.select_one(ERROR_TITLE_SELECTOR)
            if title is not None:
                heading = create_element("h5", {"class": ["default-content-wrapper"]})
                for node in list(title.contents):
                    heading.append(node.extract())
                title.replace_with(heading)

        if code == NOT_FOUND:
            page.add_head_meta("robots", "noindex")

        page.add_body_class(ERROR_BODY_CLASS)

        main = page.main
        if fragment is not None and main is not None:
            main.append(fragment)
        elif fragment is None:
            logger.error("error_fragment_missing", code=code)
        return fragment
