"""Conference and endpoint domain objects."""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol

from .tentacle import OctoTentacle

if TYPE_CHECKING:
    from ..schemas.colibri import ChannelBundleDescription
    from .content import ContentRecord


class Describable(Protocol):
    """An endpoint that can describe its channel bundle.

    ``describe`` may raise ``OSError`` when the endpoint's transport state
    cannot be read.
    """

    id: str
    display_name: str | None
    stats_id: str | None

    def describe(self, bundle: "ChannelBundleDescription") -> None: ...


class Endpoint:
    """A local conference participant."""

    def __init__(
        self,
        endpoint_id: str,
        display_name: str | None = None,
        stats_id: str | None = None,
    ) -> None:
        self.id = endpoint_id
        self.display_name = display_name
        self.stats_id = stats_id
        self._contents: List["ContentRecord"] = []

    def attach_content(self, content: "ContentRecord") -> None:
        """Called by a content when it creates a channel for this endpoint."""

        if content not in self._contents:
            self._contents.append(content)

    def describe(self, bundle: "ChannelBundleDescription") -> None:
        bundle.id = self.id
        bundle.channel_ids = [
            channel.id
            for content in self._contents
            for channel in content.get_channels()
            if channel.endpoint_id == self.id
        ]

    def __repr__(self) -> str:
        return f"Endpoint(id={self.id!r})"


class Conference:
    """Conference state owned by the lifecycle manager."""

    def __init__(self, conference_id: str, name: str | None = None) -> None:
        self.id = conference_id
        self.name = name
        self._endpoints: Dict[str, Describable] = {}
        self._lock = threading.Lock()
        self._tentacle: Optional[OctoTentacle] = None

    def add_endpoint(self, endpoint: Describable) -> None:
        with self._lock:
            self._endpoints[endpoint.id] = endpoint

    def remove_endpoint(self, endpoint_id: str) -> None:
        with self._lock:
            self._endpoints.pop(endpoint_id, None)

    def get_endpoint(self, endpoint_id: str) -> Optional[Describable]:
        with self._lock:
            return self._endpoints.get(endpoint_id)

    def get_endpoints(self) -> List[Describable]:
        with self._lock:
            return list(self._endpoints.values())

    def get_tentacle(self) -> OctoTentacle:
        """Return the conference's relay transport, creating it on first use."""

        with self._lock:
            if self._tentacle is None:
                self._tentacle = OctoTentacle(self.id)
            return self._tentacle
