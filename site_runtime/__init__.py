"""site-runtime: page assembly for block-based content sites.

This package resolves per-environment, per-locale site configuration and
drives the staged page bootstrap:
- Environment and locale detection from the page URL
- Single-flight, session-cached configuration loading
- Fragment loading with media path rewriting
- Eager / Lazy / Delayed page assembly phases

Content blocks, header/footer markup and styling are supplied by external
collaborators.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
