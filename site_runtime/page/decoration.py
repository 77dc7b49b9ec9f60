"""
Shared main-content decoration.

Used for the page's own ``main`` and for every loaded fragment, so both go
through the same button/icon/auto-block/section/block pipeline.
"""

from __future__ import annotations

from bs4 import Tag

from site_runtime.core.exceptions import AutoBlockConstructionError
from site_runtime.core.logging import get_logger
from site_runtime.page.protocols import PageCollaborators
from site_runtime.page.soup import create_element

logger = get_logger(__name__)

HERO_BLOCK = "hero"


def _precedes(first: Tag, second: Tag) -> bool:
    """True when ``first`` comes before ``second`` in document order."""
    return any(node is second for node in first.next_elements)


def build_hero_block(main: Tag, collaborators: PageCollaborators) -> Tag | None:
    """Wrap the leading heading and picture into a hero block.

    When the first ``h1`` precedes the first ``picture``, both are moved into
    a ``hero`` block inside a new section prepended to ``main``.

    Returns:
        The new section, or None when the content has no hero candidate.

    Raises:
        AutoBlockConstructionError: If the block library fails to build it.
    """
    heading = main.find("h1")
    picture = main.find("picture")
    if heading is None or picture is None or not _precedes(heading, picture):
        return None

    try:
        block = collaborators.build_block(HERO_BLOCK, [picture, heading])
    except Exception as e:
        raise AutoBlockConstructionError(HERO_BLOCK, str(e)) from e

    section = create_element("div")
    section.append(block)
    main.insert(0, section)
    return section


def build_auto_blocks(main: Tag, collaborators: PageCollaborators) -> None:
    """Build all synthetic blocks. Failures are logged, never raised."""
    try:
        build_hero_block(main, collaborators)
    except Exception as e:
        logger.error("auto_block_failed", error=str(e), exc_info=True)


def decorate_main(main: Tag, collaborators: PageCollaborators) -> None:
    """Decorate a main-content container in place."""
    collaborators.decorate_buttons(main)
    collaborators.decorate_icons(main)
    build_auto_blocks(main, collaborators)
    collaborators.decorate_sections(main)
    collaborators.decorate_blocks(main)
