"""Environment, locale and page-location resolution."""

from site_runtime.resolvers.environment import Environment, resolve_environment
from site_runtime.resolvers.locale import Locale, TextDirection, resolve_locale
from site_runtime.resolvers.location import PageLocation

__all__ = [
    "Environment",
    "Locale",
    "PageLocation",
    "TextDirection",
    "resolve_environment",
    "resolve_locale",
]
