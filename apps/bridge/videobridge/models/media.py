"""Media type domain."""
from __future__ import annotations

import enum


class MediaType(str, enum.Enum):
    AUDIO = "audio"
    VIDEO = "video"
    DATA = "data"

    def __str__(self) -> str:
        return self.value
