"""
Deployment environment detection.

The environment is derived from the page URL by an ordered list of
hostname patterns; the first match wins and anything unmatched is prod.
Outside prod, a session-stored ``environment`` value may override the
detected tier.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from site_runtime.storage.protocols import SessionStorage

ENVIRONMENT_OVERRIDE_KEY: Final[str] = "environment"


class Environment(str, Enum):
    """Deployment tier governing which configuration resource is fetched."""

    PROD = "prod"
    PPROD = "pprod"
    AEM = "aem"
    STAGE = "stage"
    DEV = "dev"
    PREVIEW = "preview"


# Order matters: the first matching pattern decides.
HOST_PATTERNS: Final[tuple[tuple[tuple[str, ...], Environment], ...]] = (
    ((".hlx.page", ".aem.page"), Environment.AEM),
    (("-stage.factory.alshayauat.com",), Environment.STAGE),
    (("localhost",), Environment.DEV),
    (("-eds.factory.alshayauat.com",), Environment.PREVIEW),
    (("-pprod.factory.alshayauat.com",), Environment.PPROD),
)


def detect_environment(href: str) -> Environment:
    """Match the URL against HOST_PATTERNS, defaulting to prod."""
    for patterns, environment in HOST_PATTERNS:
        if any(pattern in href for pattern in patterns):
            return environment
    return Environment.PROD


def resolve_environment(
    href: str, session: SessionStorage | None = None
) -> Environment:
    """Resolve the active environment for a page URL.

    A stored override applies only when the URL-derived environment is not
    prod and the stored value is a recognized environment identifier, so a
    production page can never be pointed at another tier.

    Args:
        href: Effective page URL.
        session: Session storage holding the optional override.

    Returns:
        The active Environment.
    """
    detected = detect_environment(href)
    if detected is Environment.PROD or session is None:
        return detected

    override = session.get_item(ENVIRONMENT_OVERRIDE_KEY)
    if override in {env.value for env in Environment}:
        return Environment(override)
    return detected
