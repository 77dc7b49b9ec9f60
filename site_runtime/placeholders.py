"""Locale-aware placeholder lookup for content blocks."""

from __future__ import annotations

from site_runtime.page.protocols import PageCollaborators, PageModel


async def fetch_placeholders_for_locale(
    page: PageModel, collaborators: PageCollaborators
) -> dict[str, str]:
    """Fetch placeholders for the document's language.

    Uses the ``/<lang>`` placeholder set when the document declares a
    language, else the default set.
    """
    language = page.document_language
    if not language:
        return await collaborators.fetch_placeholders()
    return await collaborators.fetch_placeholders(f"/{language.lower()}")
