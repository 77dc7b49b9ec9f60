"""Fragment loading and error pages."""

from site_runtime.fragments.loader import FragmentLoader, rewrite_media_paths

__all__ = ["FragmentLoader", "rewrite_media_paths"]
