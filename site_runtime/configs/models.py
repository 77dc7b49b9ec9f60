"""
Configuration data models.

The resource format is a spreadsheet export: ``{"data": [{"key": ..., "value": ...}]}``.
Additional top-level fields (``total``, ``offset``, ``:type``...) are ignored.

Patterns Applied:
- Pydantic BaseModel for validation of external JSON
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from site_runtime.core.exceptions import ConfigParseError


class ConfigEntry(BaseModel):
    """A single key/value configuration row."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    key: str
    value: str


class ConfigSet(BaseModel):
    """Ordered configuration rows for one environment (and optional locale)."""

    data: list[ConfigEntry] = Field(default_factory=list)

    @classmethod
    def parse(cls, blob: str, scope: str = "config") -> ConfigSet:
        """Parse a raw config blob.

        Args:
            blob: JSON text as fetched or persisted.
            scope: Label used in the error (e.g. ``config:ar``).

        Raises:
            ConfigParseError: If the blob is not valid config JSON.
        """
        try:
            return cls.model_validate_json(blob)
        except ValidationError as e:
            raise ConfigParseError(scope, str(e)) from e

    def merge(self, overlay: ConfigSet) -> ConfigSet:
        """Return a new set with overlay applied.

        Keys already present keep their position and take the overlay value;
        new keys are appended in the overlay's order.
        """
        merged = [entry.model_copy() for entry in self.data]
        positions: dict[str, int] = {}
        for index, entry in enumerate(merged):
            positions.setdefault(entry.key, index)

        for entry in overlay.data:
            if entry.key in positions:
                merged[positions[entry.key]].value = entry.value
            else:
                positions[entry.key] = len(merged)
                merged.append(entry.model_copy())

        return ConfigSet(data=merged)

    def get(self, key: str) -> str | None:
        """Value of the first entry with this key, or None."""
        for entry in self.data:
            if entry.key == key:
                return entry.value
        return None

    def as_dict(self) -> dict[str, str]:
        configs: dict[str, str] = {}
        for entry in self.data:
            configs[entry.key] = entry.value
        return configs
