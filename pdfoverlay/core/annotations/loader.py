"""
Loads overlay annotation records from JSON files.
"""
import json
import logging
import os
from typing import Any, List, Optional
from urllib.parse import unquote, urlparse

from ..errors import AnnotationLoadError
from .models import OverlayAnnotation

logger = logging.getLogger(__name__)


class AnnotationSource:
    """
    Reads overlay annotations for a document.

    A document id is a path (or ``file://`` URL) to a JSON file holding
    either ``{"overlay": [...]}`` or a bare list of records. Any failure
    yields an empty annotation set.
    """

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = base_dir

    def resolve_path(self, doc_id: str) -> str:
        """
        Turn a document id into a filesystem path.

        Args:
            doc_id: Path, relative path, or file:// URL

        Returns:
            Absolute path to the overlay file
        """
        parsed = urlparse(doc_id)
        if parsed.scheme == "file":
            path = unquote(parsed.path)
        else:
            path = doc_id

        if not os.path.isabs(path) and self.base_dir:
            path = os.path.join(self.base_dir, path)
        return os.path.abspath(path)

    def load(self, doc_id: str) -> List[OverlayAnnotation]:
        """
        Load annotations, substituting an empty list on failure.

        Args:
            doc_id: Identifier of the overlay file

        Returns:
            Annotations in file order
        """
        try:
            annotations = self.load_or_raise(doc_id)
        except AnnotationLoadError as e:
            logger.error("%s", e)
            return []

        logger.info("Loaded %d annotations from %s", len(annotations), doc_id)
        return annotations

    def load_or_raise(self, doc_id: str) -> List[OverlayAnnotation]:
        """
        Load annotations, raising on unreadable or malformed files.

        Raises:
            AnnotationLoadError: if the file cannot be read or parsed
        """
        path = self.resolve_path(doc_id)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise AnnotationLoadError(doc_id, str(e)) from e

        return self.parse(data, doc_id)

    def parse(self, data: Any, source: str = "<memory>") -> List[OverlayAnnotation]:
        """
        Convert decoded JSON into annotations.

        Individual malformed records are skipped with a warning.
        """
        if isinstance(data, dict):
            records = data.get("overlay") or []
        elif isinstance(data, list):
            records = data
        else:
            raise AnnotationLoadError(source, f"unexpected top-level {type(data).__name__}")

        if not isinstance(records, list):
            raise AnnotationLoadError(source, "'overlay' is not a list")

        annotations = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("Skipping overlay record %d: not an object", i)
                continue
            try:
                annotations.append(OverlayAnnotation.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping overlay record %d: %r", i, e)

        return annotations
