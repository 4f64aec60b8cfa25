"""Structured RTP records applied to relay transports."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .media import MediaType


@dataclass(frozen=True, slots=True)
class RtpExtension:
    uri: str


@dataclass(frozen=True, slots=True)
class RtcpFeedback:
    type: str
    subtype: str | None = None


@dataclass(frozen=True, slots=True)
class PayloadType:
    """A negotiated codec mapping for one payload type number."""

    pt: int
    encoding: str
    media_type: MediaType
    clock_rate: int
    channels: int = 1
    parameters: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    rtcp_feedback: tuple[RtcpFeedback, ...] = ()

    @property
    def is_rtx(self) -> bool:
        return self.encoding == "rtx"

    @property
    def associated_pt(self) -> int | None:
        """Payload type an rtx stream retransmits, when this is rtx."""

        if not self.is_rtx:
            return None
        return int(self.parameters["apt"])
