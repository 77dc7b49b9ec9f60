"""Three-phase page bootstrap: Eager, Lazy, Delayed."""

from site_runtime.bootstrap.bootstrapper import PageBootstrapper, import_delayed_module
from site_runtime.bootstrap.state import BootstrapResult, Phase, PhaseTracker

__all__ = [
    "BootstrapResult",
    "PageBootstrapper",
    "Phase",
    "PhaseTracker",
    "import_delayed_module",
]
