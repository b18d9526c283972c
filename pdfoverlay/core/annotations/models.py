from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# JSON-LD keys carried over from semantic overlay files
LINKED_DATA_KEYS = ("@id", "@type", "@context", "semanticProperties")


def normalize_page(value: Any) -> str:
    """
    Page number as stored on an annotation.

    JSON numbers, including integral floats such as ``1.0``, map to their
    integer form so they match page lookups.

    Raises:
        ValueError: for a number with a fractional part
    """
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"page is not a whole number: {value!r}")
        value = int(value)
    return str(value)


@dataclass(frozen=True)
class OverlayAnnotation:
    """A polygonal region of a page, loaded from an overlay file."""

    page: str  # 1-based page number, as stored in overlay files
    line: int  # Ordering key, unique within a page
    content: str
    rect: Tuple[float, ...]  # Flat x0, y0, x1, y1, ... pairs in document space

    type: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    linked_data: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def identity(self) -> Tuple[str, int]:
        return self.page, self.line

    @property
    def key(self) -> str:
        """String form of the identity, used to key caches and overlays."""
        return f"annotation-{self.page}-{self.line}"

    @property
    def page_index(self) -> int:
        """0-based page index."""
        return int(self.page) - 1

    @property
    def points(self) -> Tuple[Tuple[float, float], ...]:
        """Coordinate pairs of the polygon (a trailing odd value is dropped)."""
        return tuple(
            (self.rect[i], self.rect[i + 1]) for i in range(0, len(self.rect) - 1, 2)
        )

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "OverlayAnnotation":
        """
        Create an annotation from an overlay record.

        Raises:
            KeyError, TypeError, ValueError: if a required field is missing
                or malformed.
        """
        linked = {k: data[k] for k in LINKED_DATA_KEYS if k in data}

        return OverlayAnnotation(
            page=normalize_page(data["page"]),
            line=int(data["line"]),
            content=str(data.get("content") or ""),
            rect=tuple(float(v) for v in data["rect"]),
            type=data.get("type"),
            metadata=dict(data.get("metadata") or {}),
            linked_data=linked,
        )
