"""Per-conference registry of contents keyed by media type."""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Dict, List

from ..models.content import ContentRecord
from ..models.media import MediaType

if TYPE_CHECKING:
    from ..models.conference import Conference


class ContentRegistry:
    """Hold exactly one content per media type for a conference."""

    def __init__(self, conference: "Conference") -> None:
        self._conference = conference
        self._contents: Dict[MediaType, ContentRecord] = {}
        self._lock = threading.Lock()

    def get_or_create(self, media_type: MediaType) -> ContentRecord:
        """Return the content for ``media_type``, creating it on first request."""

        with self._lock:
            content = self._contents.get(media_type)
            if content is None:
                content = ContentRecord(self._conference, media_type)
                self._contents[media_type] = content
            return content

    def list(self) -> List[ContentRecord]:
        """Return a point-in-time copy of the registered contents."""

        with self._lock:
            return list(self._contents.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._contents)
