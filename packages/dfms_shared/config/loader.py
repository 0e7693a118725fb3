"""Settings loading with the DFMS precedence cascade.

The cascade is always:
1) Explicit init params (CLI flags)
2) Environment variables
3) ``~/.config/dfms/dfms.yaml`` (or an explicit ``config_path``)
4) Built-in model defaults

Environment variable format:
- Prefix: ``DFMS_``
- Nested keys: ``__`` separator
- Example: ``DFMS_API__BASE_URL=http://10.0.0.5:8080`` -> ``api.base_url``
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from pydantic_settings import SettingsConfigDict

from .models import DfmsSettings


def load_settings(
    *,
    init_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> DfmsSettings:
    """Resolve settings, reading YAML from ``config_path`` when given."""
    params = _drop_unset(init_params or {})
    if config_path is None:
        return DfmsSettings(**params)

    class _PathScopedSettings(DfmsSettings):
        model_config = SettingsConfigDict(yaml_file=Path(config_path))

    return _PathScopedSettings(**params)


def _drop_unset(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop ``None`` leaves so unset CLI flags do not shadow lower sources."""
    output: dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, Mapping):
            nested = _drop_unset(value)
            if nested:
                output[key] = nested
        elif value is not None:
            output[key] = value
    return output
