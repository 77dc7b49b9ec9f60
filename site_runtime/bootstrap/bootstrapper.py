"""
Page Bootstrapper.

Drives page assembly in three phases:
1. eager: language, decoration, first section (largest contentful paint)
2. lazy: remaining sections, header/footer, secondary styles, fonts
3. delayed: deferred behavior module, scheduled after a fixed delay

Eager and lazy are awaited in order. The delayed phase is submitted as a
background task: load_page() returns without waiting for it and its
failures stay inside the task.

Patterns Applied:
- Explicit phase state machine (PhaseTracker)
- One OpenTelemetry span per phase
- Best-effort lazy steps: failures are logged and recorded, never raised
"""

from __future__ import annotations

import asyncio
import importlib
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Final

from site_runtime.bootstrap.state import BootstrapResult, Phase, PhaseTracker
from site_runtime.core.logging import get_logger, log_context
from site_runtime.core.tracing import get_tracer
from site_runtime.fragments.loader import NOT_FOUND, FragmentLoader
from site_runtime.page.decoration import decorate_main
from site_runtime.page.protocols import PageCollaborators, PageModel
from site_runtime.resolvers.locale import DEFAULT_RTL_LANGUAGES, resolve_locale
from site_runtime.storage.protocols import SessionStorage

logger = get_logger(__name__)
tracer = get_tracer(__name__)

FONTS_LOADED_KEY: Final[str] = "fonts-loaded"
DEFAULT_DELAYED_DELAY_MS: Final[int] = 3000
DEFAULT_FONTS_MIN_VIEWPORT_WIDTH: Final[int] = 900

DelayedLoader = Callable[[], Awaitable[Any]]


def import_delayed_module(module_name: str | None) -> DelayedLoader:
    """Build a delayed loader that imports ``module_name`` off the event loop.

    With no module name the loader does nothing.
    """

    async def _load() -> Any:
        if module_name is None:
            return None
        return await asyncio.to_thread(importlib.import_module, module_name)

    return _load


class PageBootstrapper:
    """Three-phase page assembly.

    Usage:
        bootstrapper = PageBootstrapper(page, collaborators, fragment_loader, session)
        result = await bootstrapper.load_page()
    """

    def __init__(
        self,
        page: PageModel,
        collaborators: PageCollaborators,
        fragment_loader: FragmentLoader,
        session: SessionStorage,
        *,
        code_base_path: str = "",
        delayed_delay_ms: int = DEFAULT_DELAYED_DELAY_MS,
        fonts_min_viewport_width: int = DEFAULT_FONTS_MIN_VIEWPORT_WIDTH,
        rtl_languages: Iterable[str] = DEFAULT_RTL_LANGUAGES,
        delayed_loader: DelayedLoader | None = None,
    ) -> None:
        """Initialize the bootstrapper.

        Args:
            page: Document being assembled.
            collaborators: Decoration and loading primitives.
            fragment_loader: Loader used for the error page.
            session: Session storage (fonts marker).
            code_base_path: Prefix for the site's stylesheet URLs.
            delayed_delay_ms: Delay before the deferred module loads.
            fonts_min_viewport_width: Viewport width from which fonts load eagerly.
            rtl_languages: Language codes detected from the URL path.
            delayed_loader: Coroutine function run by the delayed phase.
        """
        self._page = page
        self._collaborators = collaborators
        self._fragment_loader = fragment_loader
        self._session = session
        self._code_base_path = code_base_path.rstrip("/")
        self._delayed_delay_ms = delayed_delay_ms
        self._fonts_min_viewport_width = fonts_min_viewport_width
        self._rtl_languages = tuple(rtl_languages)
        self._delayed_loader = delayed_loader or import_delayed_module(None)

        self._phases = PhaseTracker()
        self._fonts_task: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[Any]] = set()
        self._errors: list[str] = []

    @property
    def phases(self) -> PhaseTracker:
        return self._phases

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    async def load_page(self) -> BootstrapResult:
        """Run eager, then lazy, then schedule delayed.

        Returns:
            BootstrapResult; its delayed_task has not necessarily run yet.
        """
        start_time = time.time()
        logger.info("bootstrap_start", href=self._page.location.href)

        with log_context(href=self._page.location.href):
            await self.load_eager()
            await self.load_lazy()
            delayed_task = self.load_delayed()

        result = BootstrapResult(
            phases_completed=[phase.value for phase in self._phases.completed],
            errors=list(self._errors),
            delayed_task=delayed_task,
            processing_time_ms=(time.time() - start_time) * 1000,
        )
        logger.info(
            "bootstrap_complete",
            phases=result.phases_completed,
            error_count=len(result.errors),
            processing_time_ms=result.processing_time_ms,
        )
        return result

    # =========================================================================
    # Eager
    # =========================================================================

    async def load_eager(self) -> None:
        """Load everything needed to get to the first meaningful paint."""
        self._phases.enter(Phase.EAGER)
        logger.debug("phase_started", phase=Phase.EAGER.value)
        with log_context(phase=Phase.EAGER.value), tracer.start_as_current_span(
            "bootstrap.eager", attributes={"bootstrap.phase": Phase.EAGER.value}
        ):
            page = self._page
            locale = resolve_locale(
                page.location.href, page.document_language, self._rtl_languages
            )
            page.set_language(locale.language, locale.direction)
            self._collaborators.decorate_template_and_theme(page)

            main = page.main
            if main is not None:
                if page.is_error_page:
                    main.clear()
                    await self._fragment_loader.show_error_page(page, NOT_FOUND)
                else:
                    decorate_main(main, self._collaborators)
                page.mark_visible()

                first_section = main.select_one(".section")
                if first_section is not None:
                    await self._collaborators.load_section(
                        first_section, self._collaborators.wait_for_first_image
                    )

            # Desktop is a proxy for a fast connection
            if (
                page.viewport_width >= self._fonts_min_viewport_width
                or self._session.get_item(FONTS_LOADED_KEY)
            ):
                self._start_fonts()

        self._phases.complete(Phase.EAGER)
        logger.debug("phase_completed", phase=Phase.EAGER.value)

    # =========================================================================
    # Lazy
    # =========================================================================

    async def load_lazy(self) -> None:
        """Load everything that does not need to be delayed."""
        self._phases.enter(Phase.LAZY)
        logger.debug("phase_started", phase=Phase.LAZY.value)
        with log_context(phase=Phase.LAZY.value), tracer.start_as_current_span(
            "bootstrap.lazy", attributes={"bootstrap.phase": Phase.LAZY.value}
        ):
            page = self._page
            main = page.main
            if main is not None:
                await self._best_effort("sections", self._collaborators.load_sections(main))

            fragment = page.location.fragment
            element = page.get_element_by_id(fragment) if fragment else None
            if element is not None:
                page.scroll_into_view(element)

            await self._best_effort("header", self._collaborators.load_header(page.header))
            await self._best_effort("footer", self._collaborators.load_footer(page.footer))
            await self._best_effort(
                "lazy_styles",
                self._collaborators.load_css(f"{self._code_base_path}/styles/lazy-styles.css"),
            )
            await self.load_fonts()

        self._phases.complete(Phase.LAZY)
        logger.debug("phase_completed", phase=Phase.LAZY.value)

    async def _best_effort(self, step: str, operation: Awaitable[Any]) -> None:
        try:
            await operation
        except Exception as e:
            logger.warning("lazy_step_failed", step=step, error=str(e))
            self._errors.append(f"{step}: {e}")

    # =========================================================================
    # Fonts
    # =========================================================================

    async def load_fonts(self) -> None:
        """Load fonts.css; later calls await the first load."""
        await self._start_fonts()

    def _start_fonts(self) -> asyncio.Task[None]:
        if self._fonts_task is None:
            self._fonts_task = asyncio.get_running_loop().create_task(self._load_fonts())
        return self._fonts_task

    async def _load_fonts(self) -> None:
        try:
            await self._collaborators.load_css(f"{self._code_base_path}/styles/fonts.css")
        except Exception as e:
            logger.warning("fonts_load_failed", error=str(e))
            self._errors.append(f"fonts: {e}")
            return
        if "localhost" not in self._page.location.hostname:
            self._session.set_item(FONTS_LOADED_KEY, "true")

    # =========================================================================
    # Delayed
    # =========================================================================

    def load_delayed(self) -> asyncio.Task[None]:
        """Schedule the deferred module load and return its task.

        The task sleeps for the configured delay, measured from this call,
        then runs the delayed loader. It never raises.
        """
        self._phases.enter(Phase.DELAYED)
        task = asyncio.get_running_loop().create_task(self._run_delayed())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        self._phases.complete(Phase.DELAYED)
        logger.debug(
            "phase_scheduled",
            phase=Phase.DELAYED.value,
            delay_ms=self._delayed_delay_ms,
        )
        return task

    async def _run_delayed(self) -> None:
        await asyncio.sleep(self._delayed_delay_ms / 1000)
        with log_context(phase=Phase.DELAYED.value), tracer.start_as_current_span(
            "bootstrap.delayed", attributes={"bootstrap.phase": Phase.DELAYED.value}
        ):
            try:
                await self._delayed_loader()
            except Exception as e:
                logger.error("delayed_task_failed", error=str(e), exc_info=True)
                return
            logger.debug("phase_completed")

    async def aclose(self) -> None:
        """Cancel background work (the delayed phase, fonts) still pending.

        Called when the owning runtime shuts down, before its HTTP client closes.
        """
        pending = [task for task in self._background if not task.done()]
        if self._fonts_task is not None and not self._fonts_task.done():
            pending.append(self._fonts_task)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if pending:
            logger.debug("background_tasks_cancelled", count=len(pending))
