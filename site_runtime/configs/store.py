"""
Configuration store.

Resolves the merged global + locale configuration for the active
environment, at most once per environment per store.

Resolution:
1. Read the persisted global and locale blobs from session storage
2. Fetch whichever is missing, both concurrently
3. Persist each fetched blob before parsing it
4. Parse the global set and merge the locale set into it

Fetch and parse failures are logged and recovered: the store falls back to
whatever blob was persisted earlier (stale-if-error) or to an empty set.
Callers never see an exception; unknown keys resolve to None.

Patterns Applied:
- Connection pooling (shared httpx.AsyncClient)
- Single-flight per environment (SingleFlightCache)
- Custom namespaced exceptions, recovered locally
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Final

import httpx

from site_runtime.configs.blobs import ConfigBlobStore, config_storage_key
from site_runtime.configs.models import ConfigSet
from site_runtime.configs.single_flight import SingleFlightCache
from site_runtime.core.exceptions import ConfigFetchError, ConfigParseError
from site_runtime.core.logging import get_logger, log_context
from site_runtime.resolvers.environment import Environment, resolve_environment
from site_runtime.resolvers.locale import DEFAULT_RTL_LANGUAGES, resolve_locale
from site_runtime.resolvers.location import PageLocation
from site_runtime.storage.protocols import SessionStorage

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE: Final[str] = "configs.json"
# Environments that publish their own configs-<env>.json
SEPARATE_CONFIG_ENVIRONMENTS: Final[frozenset[Environment]] = frozenset(
    {Environment.STAGE, Environment.PREVIEW, Environment.PPROD}
)


def build_config_url(
    origin: str, environment: Environment, locale: str | None = None
) -> str:
    """Build the URL of a configuration resource.

    Args:
        origin: Site origin, e.g. ``https://www.example.com``.
        environment: Active environment.
        locale: Language code for the locale overlay; None for the global file.

    Returns:
        ``{origin}/[{locale}/]configs[-{env}].json``
    """
    file_name = DEFAULT_CONFIG_FILE
    if environment in SEPARATE_CONFIG_ENVIRONMENTS:
        file_name = f"configs-{environment.value}.json"
    locale_path = f"{locale}/" if locale else ""
    return f"{origin.rstrip('/')}/{locale_path}{file_name}"


class ConfigStore:
    """Merged, cached site configuration for the current page.

    Usage:
        store = ConfigStore(client, session, location)
        api_url = await store.get_config_value("commerce-endpoint")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        session: SessionStorage,
        location: PageLocation,
        document_language: Callable[[], str | None] | None = None,
        config_origin: str | None = None,
        rtl_languages: Iterable[str] = DEFAULT_RTL_LANGUAGES,
        cache: SingleFlightCache[ConfigSet] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            client: Shared HTTP client used for config fetches.
            session: Session storage for blobs and the environment override.
            location: URL of the page being served.
            document_language: Returns the document's declared language.
            config_origin: Origin to fetch configs from; defaults to the page origin.
            rtl_languages: Language codes detected from the URL path.
            cache: Single-flight cache; a private one is created when omitted.
        """
        self._client = client
        self._session = session
        self._blobs = ConfigBlobStore(session)
        self._location = location
        self._document_language = document_language or (lambda: None)
        self._config_origin = config_origin
        self._rtl_languages = tuple(rtl_languages)
        self._cache: SingleFlightCache[ConfigSet] = (
            cache if cache is not None else SingleFlightCache()
        )

    @property
    def origin(self) -> str:
        return self._config_origin or self._location.origin

    async def get_config_value(self, key: str) -> str | None:
        """Return the configured value for key, or None when not configured."""
        config = await asyncio.shield(self._current_config())
        return config.get(key)

    async def get_all_configs(self) -> dict[str, str]:
        """Return every configured key/value pair."""
        config = await asyncio.shield(self._current_config())
        return config.as_dict()

    def _current_config(self) -> asyncio.Task[ConfigSet]:
        # Registration happens before the caller's first await. Callers shield
        # the shared task so one cancelled caller cannot cancel the resolution.
        environment = resolve_environment(self._location.href, self._session)
        return self._cache.get_or_create(
            environment, lambda: self._load_config(environment)
        )

    async def _load_config(self, environment: Environment) -> ConfigSet:
        with log_context(environment=environment.value):
            return await self._resolve(environment)

    async def _resolve(self, environment: Environment) -> ConfigSet:
        language = resolve_locale(
            self._location.href,
            self._document_language(),
            self._rtl_languages,
        ).language

        global_blob, locale_blob = await asyncio.gather(
            self._read_or_fetch(environment, None),
            self._read_or_fetch(environment, language),
        )

        config = self._parse(global_blob, config_storage_key())
        if locale_blob is not None:
            config = config.merge(self._parse(locale_blob, config_storage_key(language)))

        logger.info(
            "config_resolved",
            locale=language,
            entries=len(config.data),
        )
        return config

    async def _read_or_fetch(
        self, environment: Environment, locale: str | None
    ) -> str | None:
        stored = self._blobs.get(environment, locale)
        if stored is not None:
            return stored

        url = build_config_url(self.origin, environment, locale)
        try:
            blob = await self._fetch(url)
        except ConfigFetchError as e:
            logger.error(
                "config_fetch_failed",
                url=url,
                status_code=e.status_code,
                error=str(e),
            )
            # Stale-if-error. The key was empty before the fetch, so this only
            # finds a blob written meanwhile by another store sharing the session.
            return self._blobs.get(environment, locale)

        self._blobs.set(environment, locale, blob)
        return blob

    async def _fetch(self, url: str) -> str:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise ConfigFetchError(url, reason=str(e)) from e
        if not response.is_success:
            raise ConfigFetchError(url, status_code=response.status_code)
        return response.text

    def _parse(self, blob: str | None, scope: str) -> ConfigSet:
        if blob is None:
            return ConfigSet()
        try:
            return ConfigSet.parse(blob, scope)
        except ConfigParseError as e:
            logger.error("config_parse_failed", scope=scope, error=e.message)
            return ConfigSet()
