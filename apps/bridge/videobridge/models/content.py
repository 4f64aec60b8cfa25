"""Per-media-type contents and the channels they own."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional
from uuid import uuid4

from .conference import Endpoint
from .media import MediaType

if TYPE_CHECKING:
    from ..schemas.colibri import ChannelDescription
    from .conference import Conference


def _channel_id() -> str:
    return uuid4().hex[:16]


@dataclass
class ChannelRecord:
    """A single media transceiver configuration within a content."""

    media_type: MediaType
    endpoint_id: str | None = None
    expire: int = 60
    direction: str = "sendrecv"
    last_n: int | None = None
    id: str = field(default_factory=_channel_id)

    def describe(self, channel: ChannelDescription) -> None:
        channel.id = self.id
        channel.endpoint = self.endpoint_id
        channel.expire = self.expire
        channel.direction = self.direction
        channel.last_n = self.last_n
        channel.channel_bundle_id = self.endpoint_id


class ContentRecord:
    """Channels of one media type within a conference."""

    def __init__(self, conference: "Conference", media_type: MediaType) -> None:
        self.conference = conference
        self.media_type = media_type
        self._channels: Dict[str, ChannelRecord] = {}
        self._lock = threading.Lock()

    def create_channel(
        self,
        endpoint_id: str | None = None,
        expire: int = 60,
        direction: str = "sendrecv",
        last_n: int | None = None,
    ) -> ChannelRecord:
        channel = ChannelRecord(
            media_type=self.media_type,
            endpoint_id=endpoint_id,
            expire=expire,
            direction=direction,
            last_n=last_n,
        )
        with self._lock:
            self._channels[channel.id] = channel

        if endpoint_id is not None:
            endpoint = self.conference.get_endpoint(endpoint_id)
            if isinstance(endpoint, Endpoint):
                endpoint.attach_content(self)
        return channel

    def get_channel(self, channel_id: str) -> Optional[ChannelRecord]:
        with self._lock:
            return self._channels.get(channel_id)

    def get_channels(self) -> List[ChannelRecord]:
        """Return a copy of the channel list."""

        with self._lock:
            return list(self._channels.values())

    def __repr__(self) -> str:
        return f"ContentRecord(media_type={self.media_type.value!r}, channels={len(self._channels)})"
