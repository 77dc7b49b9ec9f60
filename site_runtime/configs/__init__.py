"""Site configuration: models, single-flight cache, and the config store."""

from site_runtime.configs.blobs import ConfigBlobStore
from site_runtime.configs.models import ConfigEntry, ConfigSet
from site_runtime.configs.single_flight import SingleFlightCache
from site_runtime.configs.store import ConfigStore, build_config_url

__all__ = [
    "ConfigBlobStore",
    "ConfigEntry",
    "ConfigSet",
    "ConfigStore",
    "SingleFlightCache",
    "build_config_url",
]
