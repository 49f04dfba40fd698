"""Configuration helpers for the planview viewer."""

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .core.viewport import ZoomLimits

ENV_DATA_DIR = "PLANVIEW_DATA_DIR"
ENV_DEBUG = "PLANVIEW_DEBUG"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class ViewerSettings:
    """Values used to bootstrap the viewer."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    metadata_file: str = "metadata.json"
    default_zoom: int = 35
    zoom_min: int = 20
    zoom_max: int = 100
    zoom_step: int = 5
    overlay_opacity: int = 55
    polygon_opacity: int = 35
    log_retention: int = 5
    debug: bool = False

    @property
    def metadata_path(self) -> Path:
        return self.data_dir / self.metadata_file

    @property
    def zoom_limits(self) -> ZoomLimits:
        return ZoomLimits(minimum=self.zoom_min, maximum=self.zoom_max, step=self.zoom_step)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ViewerSettings":
        """Create an instance from a decoded settings file, per-field fallbacks."""
        defaults = cls()

        def _int(key: str, fallback: int, minimum: int = 0) -> int:
            try:
                return max(minimum, int(data.get(key, fallback)))
            except (TypeError, ValueError):
                return fallback

        def _flag(key: str, fallback: bool) -> bool:
            value = data.get(key, fallback)
            if isinstance(value, str):
                return value.strip().lower() in _TRUE_VALUES
            if isinstance(value, (bool, int)):
                return bool(value)
            return fallback

        data_dir = data.get("data_dir")
        settings = cls(
            data_dir=Path(data_dir) if isinstance(data_dir, str) and data_dir else defaults.data_dir,
            metadata_file=str(data.get("metadata_file") or defaults.metadata_file),
            default_zoom=_int("default_zoom", defaults.default_zoom, 1),
            zoom_min=_int("zoom_min", defaults.zoom_min, 1),
            zoom_max=_int("zoom_max", defaults.zoom_max, 1),
            zoom_step=_int("zoom_step", defaults.zoom_step, 1),
            overlay_opacity=min(100, _int("overlay_opacity", defaults.overlay_opacity, 10)),
            polygon_opacity=min(100, _int("polygon_opacity", defaults.polygon_opacity)),
            log_retention=_int("log_retention", defaults.log_retention, 1),
            debug=_flag("debug", defaults.debug),
        )
        if settings.zoom_min > settings.zoom_max:
            settings.zoom_min, settings.zoom_max = defaults.zoom_min, defaults.zoom_max
        settings.default_zoom = settings.zoom_limits.clamp(settings.default_zoom)
        return settings

    def as_dict(self) -> Dict[str, Any]:
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result["data_dir"] = str(self.data_dir)
        return result


def load_settings(settings_path: Optional[Path]) -> ViewerSettings:
    """Read settings from a JSON file if it exists, defaults otherwise."""
    if settings_path is None:
        return ViewerSettings()
    try:
        raw = Path(settings_path).read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return ViewerSettings()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return ViewerSettings()
    if not isinstance(data, dict):
        return ViewerSettings()
    return ViewerSettings.from_payload(data)


def apply_env_overrides(
    settings: ViewerSettings, env: Optional[Mapping[str, str]] = None
) -> ViewerSettings:
    """Return settings with PLANVIEW_* environment variables applied."""
    env = os.environ if env is None else env
    result = settings
    data_dir = env.get(ENV_DATA_DIR)
    if data_dir:
        result = replace(result, data_dir=Path(data_dir).expanduser())
    debug = env.get(ENV_DEBUG)
    if debug is not None:
        result = replace(result, debug=debug.strip().lower() in _TRUE_VALUES)
    return result
