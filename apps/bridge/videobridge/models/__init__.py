"""Expose domain models."""
from .conference import Conference, Describable, Endpoint
from .content import ChannelRecord, ContentRecord
from .media import MediaType
from .rtp import PayloadType, RtcpFeedback, RtpExtension
from .tentacle import OctoTentacle, RelayTransport

__all__ = [
    "ChannelRecord",
    "Conference",
    "ContentRecord",
    "Describable",
    "Endpoint",
    "MediaType",
    "OctoTentacle",
    "PayloadType",
    "RelayTransport",
    "RtcpFeedback",
    "RtpExtension",
]
