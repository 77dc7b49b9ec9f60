"""
site-runtime - Custom Exceptions

Anti-Patterns Avoided:
- Exception Shadowing: namespaced exceptions instead of builtins like
  ConnectionError or LookupError
"""

from __future__ import annotations


class SiteRuntimeError(Exception):
    """Base exception for site-runtime.

    All custom exceptions inherit from this base class.
    """


class ConfigFetchError(SiteRuntimeError):
    """Raised when a configuration resource cannot be fetched.

    Covers transport failures and non-success responses. Recovered inside
    ConfigStore; never surfaces to config consumers.
    """

    def __init__(self, url: str, status_code: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else reason
        super().__init__(f"Config fetch failed for {url}: {detail}")


class ConfigParseError(SiteRuntimeError):
    """Raised when a configuration blob is not valid config JSON."""

    def __init__(self, scope: str, message: str) -> None:
        self.scope = scope
        self.message = message
        super().__init__(f"Config '{scope}' could not be parsed: {message}")


class FragmentUnavailableError(SiteRuntimeError):
    """Raised when a fragment path is invalid or its fetch did not succeed.

    FragmentLoader converts this into a None result.
    """

    def __init__(
        self, path: str | None, status_code: int | None = None, reason: str = ""
    ) -> None:
        self.path = path
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Fragment unavailable: {path!r} (status={status_code})")


class AutoBlockConstructionError(SiteRuntimeError):
    """Raised when a synthetic block (e.g. hero) cannot be assembled."""

    def __init__(self, block_name: str, message: str) -> None:
        self.block_name = block_name
        self.message = message
        super().__init__(f"Auto block '{block_name}' failed: {message}")


class PhaseTransitionError(SiteRuntimeError):
    """Raised when a bootstrap phase is re-entered, skipped or reversed."""

    def __init__(self, current: str | None, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot enter phase '{requested}' from '{current or 'start'}'"
        )
