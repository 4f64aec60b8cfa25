"""In-memory Octo relay transport ("tentacle").

The tentacle owns the relay configuration applied for a conference. It does
not forward media; it holds the state a forwarding implementation reads.
"""
from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Protocol, Sequence, Tuple

from .rtp import PayloadType, RtpExtension

if TYPE_CHECKING:
    from ..schemas.colibri import SourceDescription, SourceGroupDescription

logger = logging.getLogger(__name__)


class RelayTransport(Protocol):
    def expire(self) -> None: ...

    def set_relays(self, relays: Iterable[str]) -> None: ...

    def has_rtp_extension(self, ext_id: int) -> bool: ...

    def add_rtp_extension(self, ext_id: int, extension: RtpExtension) -> None: ...

    def add_payload_type(self, payload_type: PayloadType) -> None: ...

    def set_sources(
        self,
        audio_sources: Sequence[SourceDescription],
        video_sources: Sequence[SourceDescription],
        video_source_groups: Sequence[SourceGroupDescription],
    ) -> None: ...


class OctoTentacle:
    """Relay configuration of one conference.

    Relays are replaced wholesale. RTP extensions and payload types are only
    ever added: the first entry registered for an id stays for the lifetime
    of the conference.
    """

    def __init__(self, conference_id: str) -> None:
        self.conference_id = conference_id
        self._lock = threading.RLock()
        self._relays: FrozenSet[str] = frozenset()
        self._rtp_extensions: Dict[int, RtpExtension] = {}
        self._payload_types: Dict[int, PayloadType] = {}
        self._audio_sources: Tuple[SourceDescription, ...] = ()
        self._video_sources: Tuple[SourceDescription, ...] = ()
        self._video_source_groups: Tuple[SourceGroupDescription, ...] = ()
        self._expired = False

    @property
    def lock(self) -> threading.RLock:
        """Serializes reconciliations against this tentacle."""

        return self._lock

    @property
    def expired(self) -> bool:
        with self._lock:
            return self._expired

    @property
    def relays(self) -> FrozenSet[str]:
        with self._lock:
            return self._relays

    @property
    def rtp_extensions(self) -> Dict[int, RtpExtension]:
        with self._lock:
            return dict(self._rtp_extensions)

    @property
    def payload_types(self) -> Dict[int, PayloadType]:
        with self._lock:
            return dict(self._payload_types)

    @property
    def audio_sources(self) -> Tuple[SourceDescription, ...]:
        with self._lock:
            return self._audio_sources

    @property
    def video_sources(self) -> Tuple[SourceDescription, ...]:
        with self._lock:
            return self._video_sources

    @property
    def video_source_groups(self) -> Tuple[SourceGroupDescription, ...]:
        with self._lock:
            return self._video_source_groups

    def has_rtp_extension(self, ext_id: int) -> bool:
        with self._lock:
            return ext_id in self._rtp_extensions

    def expire(self) -> None:
        with self._lock:
            already_expired = self._expired
            self._expired = True
            self._relays = frozenset()
            self._audio_sources = ()
            self._video_sources = ()
            self._video_source_groups = ()
        if not already_expired:
            logger.info("Expired octo tentacle for conference %s", self.conference_id)

    def set_relays(self, relays: Iterable[str]) -> None:
        relays = frozenset(relays)
        with self._lock:
            self._relays = relays
            if relays:
                self._expired = False

    def add_rtp_extension(self, ext_id: int, extension: RtpExtension) -> None:
        with self._lock:
            self._rtp_extensions.setdefault(ext_id, extension)

    def add_payload_type(self, payload_type: PayloadType) -> None:
        with self._lock:
            self._payload_types.setdefault(payload_type.pt, payload_type)

    def set_sources(
        self,
        audio_sources: Sequence[SourceDescription],
        video_sources: Sequence[SourceDescription],
        video_source_groups: Sequence[SourceGroupDescription],
    ) -> None:
        with self._lock:
            self._audio_sources = tuple(audio_sources)
            self._video_sources = tuple(video_sources)
            self._video_source_groups = tuple(video_source_groups)
