"""
Viewer configuration.
"""
import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from .core.geometry import POINTS_PER_INCH, REFERENCE_DPI, effective_dpi
from .core.providers.default import Color, TextStyle
from .utils.resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"


@dataclass
class ViewerSettings:
    """
    Inputs for effective DPI, zoom bounds and rendering behaviour.
    """

    device_pixel_ratio: float = 1.0
    reference_dpi: float = REFERENCE_DPI
    points_per_inch: float = POINTS_PER_INCH
    unit_points: float = 1.0  # PDF points per overlay unit (72 for inches)

    zoom: float = 1.0
    min_zoom: float = 0.3
    max_zoom: float = 3.0
    zoom_step: float = 1.2

    fallback_enabled: bool = True

    outline_color: Color = (255, 0, 0, 255)
    highlight_fill: Color = (255, 0, 0, 51)
    highlight_stroke: Color = (255, 0, 0, 255)

    text_style: TextStyle = field(default_factory=TextStyle)

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def render_scale(self, zoom: float) -> float:
        """Pixels per PDF point for rasterising a page at a zoom."""
        return self.device_pixel_ratio * self.reference_dpi * zoom / self.points_per_inch

    def effective_dpi(self, zoom: float) -> float:
        """Pixels per overlay unit at a zoom."""
        return effective_dpi(
            self.device_pixel_ratio, zoom,
            reference_dpi=self.reference_dpi,
            points_per_inch=self.points_per_inch,
            unit_points=self.unit_points,
        )

    # ===== Persistence =====

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewerSettings":
        """Build settings from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and k != "text_style"}

        for key in ("outline_color", "highlight_fill", "highlight_stroke"):
            if key in values:
                values[key] = tuple(values[key])

        style_data = data.get("text_style") or {}
        style_known = {f.name for f in fields(TextStyle)}
        style_values = {k: v for k, v in style_data.items() if k in style_known}
        for key in ("text_color", "background_color", "border_color"):
            if key in style_values:
                style_values[key] = tuple(style_values[key])

        settings = cls(**values, text_style=TextStyle(**style_values))
        settings.zoom = settings.clamp_zoom(settings.zoom)
        return settings

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ViewerSettings":
        """
        Load settings from a JSON file.

        Args:
            path: Settings file; defaults to the per-user config directory

        Returns:
            Loaded settings, or defaults if the file is missing or invalid
        """
        if path is None:
            path = os.path.join(str(get_config_dir()), SETTINGS_FILE_NAME)

        if not os.path.exists(path):
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings file must hold a JSON object")
            return cls.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Ignoring settings file %s: %s", path, e)
            return cls()
