"""
site-runtime - Runtime Wiring

Builds the components for one page session:
- Logging and tracing configured once from Settings
- One pooled httpx.AsyncClient shared by ConfigStore and FragmentLoader
- PageBootstrapper driving the page

Usage:
    page = SoupPage(html, PageLocation("https://www.example.com/en/"))
    async with SiteRuntime(page, collaborators) as runtime:
        result = await runtime.load_page()
        endpoint = await runtime.config_store.get_config_value("commerce-endpoint")
"""

from __future__ import annotations

from typing import Any

import httpx

from site_runtime.bootstrap.bootstrapper import PageBootstrapper, import_delayed_module
from site_runtime.bootstrap.state import BootstrapResult
from site_runtime.configs.store import ConfigStore
from site_runtime.core.config import Settings, get_settings
from site_runtime.core.exceptions import SiteRuntimeError
from site_runtime.core.logging import configure_logging, get_logger
from site_runtime.core.tracing import configure_tracing
from site_runtime.fragments.loader import FragmentLoader
from site_runtime.page.protocols import PageCollaborators, PageModel
from site_runtime.storage.memory import InMemorySessionStorage
from site_runtime.storage.protocols import SessionStorage

logger = get_logger(__name__)


class SiteRuntime:
    """Per-page runtime; use as an async context manager."""

    def __init__(
        self,
        page: PageModel,
        collaborators: PageCollaborators,
        session: SessionStorage | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the runtime.

        Args:
            page: Document being assembled.
            collaborators: Block library primitives.
            session: Session storage; a fresh in-memory one when omitted.
            settings: Runtime settings; loaded from the environment when omitted.
            transport: Optional httpx transport (tests, custom networking).
        """
        self.settings = settings or get_settings()
        self.page = page
        self.collaborators = collaborators
        self.session: SessionStorage = (
            session if session is not None else InMemorySessionStorage()
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._config_store: ConfigStore | None = None
        self._fragment_loader: FragmentLoader | None = None
        self._bootstrapper: PageBootstrapper | None = None

        configure_logging(
            log_level=self.settings.log_level,
            json_output=self.settings.log_json,
        )
        if self.settings.tracing_enabled:
            configure_tracing(
                service_name=self.settings.service_name,
                console_export=self.settings.tracing_console_export,
            )

    async def __aenter__(self) -> SiteRuntime:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.http_timeout),
            transport=self._transport,
        )
        location = self.page.location
        self._config_store = ConfigStore(
            self._client,
            self.session,
            location,
            document_language=lambda: self.page.document_language,
            config_origin=self.settings.config_origin,
            rtl_languages=self.settings.rtl_languages,
        )
        self._fragment_loader = FragmentLoader(self._client, self.collaborators, location)
        self._bootstrapper = PageBootstrapper(
            self.page,
            self.collaborators,
            self._fragment_loader,
            self.session,
            code_base_path=self.settings.code_base_path,
            delayed_delay_ms=self.settings.delayed_phase_delay_ms,
            fonts_min_viewport_width=self.settings.fonts_min_viewport_width,
            rtl_languages=self.settings.rtl_languages,
            delayed_loader=import_delayed_module(self.settings.delayed_module),
        )
        logger.info(
            "runtime_started",
            service=self.settings.service_name,
            version=self.settings.version,
            href=location.href,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._bootstrapper is not None:
            await self._bootstrapper.aclose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("runtime_stopped", service=self.settings.service_name)

    def _require(self, component: Any, name: str) -> Any:
        if component is None:
            raise SiteRuntimeError(f"{name} not initialized. Use async context manager.")
        return component

    @property
    def config_store(self) -> ConfigStore:
        return self._require(self._config_store, "ConfigStore")

    @property
    def fragment_loader(self) -> FragmentLoader:
        return self._require(self._fragment_loader, "FragmentLoader")

    @property
    def bootstrapper(self) -> PageBootstrapper:
        return self._require(self._bootstrapper, "PageBootstrapper")

    async def load_page(self) -> BootstrapResult:
        return await self.bootstrapper.load_page()
