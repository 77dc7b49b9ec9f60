"""
ConfigStore Tests

Tests for:
- Config resource URLs per environment and locale
- Merged lookups (get_config_value / get_all_configs)
- Single-flight: concurrent callers share one pair of fetches
- Session persistence: blobs read before fetching, written after fetching
- Stale-if-error and parse-failure recovery
"""

import asyncio

import httpx
import pytest
import structlog

from site_runtime.configs.blobs import config_storage_key
from site_runtime.configs.single_flight import SingleFlightCache
from site_runtime.configs.store import ConfigStore, build_config_url
from site_runtime.resolvers.environment import ENVIRONMENT_OVERRIDE_KEY, Environment
from site_runtime.resolvers.location import PageLocation

ORIGIN = "https://www.example.com"
GLOBAL_URL = f"{ORIGIN}/configs.json"
LOCALE_URL = f"{ORIGIN}/en/configs.json"


def _store(scripted, session, href=f"{ORIGIN}/en/", language=None, **kwargs) -> ConfigStore:
    return ConfigStore(
        scripted.client(),
        session,
        PageLocation(href),
        document_language=lambda: language,
        **kwargs,
    )


# =============================================================================
# build_config_url
# =============================================================================


class TestBuildConfigUrl:
    """Tests for config resource addressing."""

    def test_global_prod_config(self) -> None:
        assert build_config_url(ORIGIN, Environment.PROD) == GLOBAL_URL

    def test_locale_prod_config(self) -> None:
        assert build_config_url(ORIGIN, Environment.PROD, "en") == LOCALE_URL

    @pytest.mark.parametrize("env", [Environment.STAGE, Environment.PREVIEW, Environment.PPROD])
    def test_environment_specific_files(self, env: Environment) -> None:
        """Stage, preview and pprod publish configs-<env>.json."""
        assert (
            build_config_url(ORIGIN + "/", env, "ar")
            == f"{ORIGIN}/ar/configs-{env.value}.json"
        )

    @pytest.mark.parametrize("env", [Environment.AEM, Environment.DEV])
    def test_other_environments_use_default_file(self, env: Environment) -> None:
        assert build_config_url(ORIGIN, env) == GLOBAL_URL


# =============================================================================
# Lookups
# =============================================================================


class TestConfigLookup:
    """Tests for merged config lookups."""

    @pytest.mark.asyncio
    async def test_locale_overrides_global(self, scripted, session, config_json) -> None:
        """Locale values win; missing keys are None."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"a": "1", "b": "2"}))
        scripted.routes[LOCALE_URL] = (200, config_json({"b": "20", "c": "3"}))
        store = _store(scripted, session)

        assert await store.get_config_value("b") == "20"
        assert await store.get_config_value("missing") is None
        assert await store.get_all_configs() == {"a": "1", "b": "20", "c": "3"}

    @pytest.mark.asyncio
    async def test_rtl_path_selects_locale_resource(self, scripted, session, config_json) -> None:
        """An /ar/ page fetches the ar overlay."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"dir": "ltr"}))
        scripted.routes[f"{ORIGIN}/ar/configs.json"] = (200, config_json({"dir": "rtl"}))
        store = _store(scripted, session, href=f"{ORIGIN}/ar/home")

        assert await store.get_config_value("dir") == "rtl"

    @pytest.mark.asyncio
    async def test_document_language_selects_locale_resource(
        self, scripted, session, config_json
    ) -> None:
        """The declared document language picks the overlay."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"currency": "USD"}))
        scripted.routes[f"{ORIGIN}/fr/configs.json"] = (200, config_json({"currency": "EUR"}))
        store = _store(scripted, session, href=f"{ORIGIN}/fr/", language="fr")

        assert await store.get_config_value("currency") == "EUR"

    @pytest.mark.asyncio
    async def test_config_origin_override(self, scripted, session, config_json) -> None:
        """config_origin replaces the page origin for config fetches."""
        scripted.routes["https://cdn.example.com/configs.json"] = (200, config_json({"k": "v"}))
        store = _store(scripted, session, config_origin="https://cdn.example.com")

        assert await store.get_config_value("k") == "v"
        assert "https://cdn.example.com/en/configs.json" in scripted.requests

    @pytest.mark.asyncio
    async def test_session_override_selects_environment_files(
        self, scripted, session, config_json
    ) -> None:
        """A dev page overridden to stage fetches configs-stage.json."""
        session.set_item(ENVIRONMENT_OVERRIDE_KEY, "stage")
        scripted.routes["http://localhost:3000/configs-stage.json"] = (
            200,
            config_json({"tier": "stage"}),
        )
        store = _store(scripted, session, href="http://localhost:3000/en/")

        assert await store.get_config_value("tier") == "stage"


# =============================================================================
# Single-flight
# =============================================================================


class TestSingleFlight:
    """Tests for per-environment request deduplication."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch_pair(
        self, scripted, session, config_json
    ) -> None:
        """Two concurrent lookups issue exactly one global + one locale fetch."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"a": "1"}))
        scripted.routes[LOCALE_URL] = (200, config_json({"b": "2"}))
        store = _store(scripted, session)

        first, second = await asyncio.gather(
            store.get_config_value("a"),
            store.get_config_value("b"),
        )

        assert (first, second) == ("1", "2")
        assert sorted(scripted.requests) == sorted([GLOBAL_URL, LOCALE_URL])

    @pytest.mark.asyncio
    async def test_resolution_is_reused_after_completion(
        self, scripted, session, config_json
    ) -> None:
        """Later lookups never refetch, even with an empty session."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"a": "1"}))
        store = _store(scripted, session)

        await store.get_config_value("a")
        session.remove_item(config_storage_key())
        await store.get_all_configs()

        assert len(scripted.requests) == 2

    @pytest.mark.asyncio
    async def test_shared_cache_across_stores(self, scripted, session, config_json) -> None:
        """Stores sharing a cache share resolutions."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"a": "1"}))
        cache = SingleFlightCache()
        first = _store(scripted, session, cache=cache)
        second = _store(scripted, session, cache=cache)

        await asyncio.gather(first.get_config_value("a"), second.get_config_value("a"))

        assert len(scripted.requests) == 2
        assert Environment.PROD in cache

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_resolution(
        self, session, config_json
    ) -> None:
        """A caller timing out leaves the shared resolution running for others."""
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await release.wait()
            if str(request.url) == GLOBAL_URL:
                return httpx.Response(200, text=config_json({"a": "1"}))
            return httpx.Response(404, text="Not Found")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        store = ConfigStore(client, session, PageLocation(f"{ORIGIN}/en/"))

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(store.get_config_value("a"), 0.05)
        release.set()

        assert await store.get_config_value("a") == "1"
        assert await store.get_all_configs() == {"a": "1"}

    @pytest.mark.asyncio
    async def test_resolution_binds_environment_to_logs(
        self, session, config_json
    ) -> None:
        """Fetches run with the resolved environment in the log context."""
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(structlog.contextvars.get_contextvars())
            return httpx.Response(200, text=config_json({"a": "1"}))

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        store = ConfigStore(client, session, PageLocation("http://localhost:3000/en/"))

        await store.get_config_value("a")

        assert [context["environment"] for context in seen] == ["dev", "dev"]
        assert "environment" not in structlog.contextvars.get_contextvars()


# =============================================================================
# Persistence and recovery
# =============================================================================


class TestPersistence:
    """Tests for session persistence and error recovery."""

    @pytest.mark.asyncio
    async def test_fetched_blobs_are_persisted_raw(self, scripted, session, config_json) -> None:
        """Blobs are stored verbatim under config / config:<locale>."""
        global_body = config_json({"a": "1"})
        locale_body = config_json({"b": "2"})
        scripted.routes[GLOBAL_URL] = (200, global_body)
        scripted.routes[LOCALE_URL] = (200, locale_body)

        await _store(scripted, session).get_all_configs()

        assert session.get_item("config") == global_body
        assert session.get_item("config:en") == locale_body

    @pytest.mark.asyncio
    async def test_persisted_blobs_skip_network(self, scripted, session, config_json) -> None:
        """Both blobs present means zero fetches."""
        session.set_item("config", config_json({"a": "1"}))
        session.set_item("config:en", config_json({"a": "2"}))

        value = await _store(scripted, session).get_config_value("a")

        assert value == "2"
        assert scripted.requests == []

    @pytest.mark.asyncio
    async def test_only_missing_blob_is_fetched(self, scripted, session, config_json) -> None:
        """A persisted global blob is reused; only the locale is fetched."""
        session.set_item("config", config_json({"a": "1"}))
        scripted.routes[LOCALE_URL] = (200, config_json({"b": "2"}))

        configs = await _store(scripted, session).get_all_configs()

        assert configs == {"a": "1", "b": "2"}
        assert scripted.requests == [LOCALE_URL]

    @pytest.mark.asyncio
    async def test_stale_if_error(self, session, config_json) -> None:
        """A failed fetch serves a blob persisted by another store meanwhile."""
        stored = config_json({"endpoint": "https://api.example.com"})

        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == LOCALE_URL:
                # Another store sharing the session finished first.
                session.set_item("config:en", stored)
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        store = ConfigStore(client, session, PageLocation(f"{ORIGIN}/en/"))

        value = await store.get_config_value("endpoint")

        assert value == "https://api.example.com"

    @pytest.mark.asyncio
    async def test_non_success_response_is_a_fetch_failure(
        self, scripted, session, config_json
    ) -> None:
        """Error responses are not persisted."""
        scripted.routes[GLOBAL_URL] = (500, "Internal Server Error")
        scripted.routes[LOCALE_URL] = (200, config_json({"b": "2"}))

        configs = await _store(scripted, session).get_all_configs()

        assert configs == {"b": "2"}
        assert session.get_item("config") is None

    @pytest.mark.asyncio
    async def test_total_failure_resolves_to_empty(self, scripted, session) -> None:
        """Nothing fetched and nothing persisted: every key is None."""
        scripted.broken.update({GLOBAL_URL, LOCALE_URL})
        store = _store(scripted, session)

        assert await store.get_config_value("a") is None
        assert await store.get_all_configs() == {}

    @pytest.mark.asyncio
    async def test_malformed_blob_is_ignored(self, scripted, session, config_json) -> None:
        """A malformed locale blob leaves the global config in effect."""
        scripted.routes[GLOBAL_URL] = (200, config_json({"a": "1"}))
        scripted.routes[LOCALE_URL] = (200, "<html>not json</html>")

        configs = await _store(scripted, session).get_all_configs()

        assert configs == {"a": "1"}
        assert session.get_item("config:en") == "<html>not json</html>"
