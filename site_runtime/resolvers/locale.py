"""Language and text direction of the page."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final

DEFAULT_LANGUAGE: Final[str] = "en"
DEFAULT_RTL_LANGUAGES: Final[tuple[str, ...]] = ("ar",)


class TextDirection(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


@dataclass(frozen=True, slots=True)
class Locale:
    """Language code plus layout direction."""

    language: str
    direction: TextDirection = TextDirection.LTR


def resolve_locale(
    href: str,
    document_language: str | None = None,
    rtl_languages: Iterable[str] = DEFAULT_RTL_LANGUAGES,
) -> Locale:
    """Resolve the page locale.

    A right-to-left language segment in the URL path (``/ar/``) wins and sets
    the direction to rtl. Otherwise the document's declared language is used,
    falling back to ``en``.

    Args:
        href: Effective page URL.
        document_language: The document's ``lang`` attribute, if any.
        rtl_languages: Language codes laid out right-to-left.

    Returns:
        Locale for the page.
    """
    for language in rtl_languages:
        if f"/{language}/" in href:
            return Locale(language=language, direction=TextDirection.RTL)
    return Locale(language=document_language or DEFAULT_LANGUAGE)
