"""Build structured payload types from raw declarations."""
from __future__ import annotations

from types import MappingProxyType

from ..models.media import MediaType
from ..models.rtp import PayloadType, RtcpFeedback
from ..schemas.colibri import PayloadTypeDescription

AUDIO_ENCODINGS: dict[str, str] = {
    "opus": "opus",
    "telephone-event": "telephone-event",
    "pcmu": "PCMU",
    "pcma": "PCMA",
    "g722": "G722",
    "isac": "ISAC",
}
VIDEO_ENCODINGS: dict[str, str] = {
    "vp8": "VP8",
    "vp9": "VP9",
    "h264": "H264",
    "av1": "AV1",
}
# Usable with either media type.
GENERIC_ENCODINGS: dict[str, str] = {
    "rtx": "rtx",
    "red": "red",
    "ulpfec": "ulpfec",
    "flexfec-03": "flexfec-03",
}


def _canonical_encoding(name: str, media_type: MediaType) -> str | None:
    key = name.strip().lower()
    if key in GENERIC_ENCODINGS:
        return GENERIC_ENCODINGS[key]
    if media_type is MediaType.AUDIO:
        return AUDIO_ENCODINGS.get(key)
    if media_type is MediaType.VIDEO:
        return VIDEO_ENCODINGS.get(key)
    return None


def build_payload_type(
    declaration: PayloadTypeDescription,
    media_type: MediaType,
) -> PayloadType | None:
    """Return the structured payload type, or ``None`` if the declaration is unusable."""

    encoding = _canonical_encoding(declaration.name, media_type)
    if encoding is None:
        return None
    if not 0 <= declaration.id <= 127 or declaration.clockrate <= 0:
        return None

    parameters = dict(declaration.parameters)
    if encoding == "rtx":
        try:
            parameters["apt"] = str(int(parameters["apt"]))
        except (KeyError, ValueError):
            return None

    return PayloadType(
        pt=declaration.id,
        encoding=encoding,
        media_type=media_type,
        clock_rate=declaration.clockrate,
        channels=declaration.channels,
        parameters=MappingProxyType(parameters),
        rtcp_feedback=tuple(
            RtcpFeedback(type=fb.type, subtype=fb.subtype) for fb in declaration.rtcp_feedback
        ),
    )
