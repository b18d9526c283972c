from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..annotations.models import OverlayAnnotation
from ..geometry import BoundingBox
from ..geometry.transform import Point

DEFAULT_PROVIDER_ID = "default"


def _always_current() -> bool:
    return True


@dataclass
class RenderContext:
    """Everything a provider needs for one draw attempt."""

    surface: Any  # QImage layer the size of the page raster
    annotation: OverlayAnnotation
    effective_dpi: float
    page_number: int  # 1-based
    bbox: BoundingBox  # Raster pixels
    polygon: List[Point] = field(default_factory=list)  # Raster pixels

    # Hover generation the render belongs to
    generation: int = 0
    is_current: Callable[[], bool] = _always_current


RenderFn = Callable[[RenderContext], Optional[Awaitable[None]]]
OverlayFn = Callable[[RenderContext], Union[Optional[str], Awaitable[Optional[str]]]]


@dataclass
class AnnotationProvider:
    """
    A pluggable strategy for drawing annotations.

    ``render`` and ``create_overlay`` may be plain functions or coroutine
    functions. ``create_overlay`` returns HTML for an overlay widget, or
    None when the provider does not want one for this annotation.
    """

    id: str
    name: str
    can_handle: Callable[[OverlayAnnotation], bool]
    render: RenderFn
    priority: int = 0
    description: Optional[str] = None
    create_overlay: Optional[OverlayFn] = None

    @property
    def is_default(self) -> bool:
        return self.id == DEFAULT_PROVIDER_ID

    @property
    def wants_overlay(self) -> bool:
        return self.create_overlay is not None

    def __repr__(self) -> str:
        return f"AnnotationProvider(id={self.id!r}, priority={self.priority})"
