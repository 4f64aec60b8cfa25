"""Reconcile a conference's audio and video Octo channels into one relay configuration."""
from __future__ import annotations

import logging
from typing import Dict, Hashable, Tuple

from ..models.media import MediaType
from ..models.rtp import RtpExtension
from ..models.tentacle import RelayTransport
from ..schemas.colibri import OctoChannelDescription, PayloadTypeDescription
from .payload_types import build_payload_type

logger = logging.getLogger(__name__)


def _payload_type_key(declaration: PayloadTypeDescription) -> Hashable:
    return (
        declaration.id,
        declaration.name.lower(),
        declaration.clockrate,
        declaration.channels,
        tuple(sorted(declaration.parameters.items())),
        tuple((fb.type, fb.subtype) for fb in declaration.rtcp_feedback),
    )


class OctoReconciler:
    """Apply merged Octo channel state to a relay transport.

    The relay set is replaced on every call. RTP header extensions and
    payload types accumulate: entries are never removed, even when a later
    call no longer declares them.
    """

    def __init__(self, transport: RelayTransport) -> None:
        self.transport = transport

    def reconcile(self, audio: OctoChannelDescription, video: OctoChannelDescription) -> None:
        expire = min(audio.expire, video.expire)
        if expire == 0:
            logger.debug("Octo channels expired, tearing down relay")
            self.transport.expire()
            return

        relays = set(audio.relays) | set(video.relays)
        logger.debug("Setting octo relays: %s", sorted(relays))
        self.transport.set_relays(relays)

        self._merge_header_extensions(audio, video)
        self._merge_payload_types(audio, video)

        self.transport.set_sources(audio.sources, video.sources, video.source_groups)

    def _merge_header_extensions(
        self, audio: OctoChannelDescription, video: OctoChannelDescription
    ) -> None:
        extensions: Dict[int, str] = {}
        for ext in (*audio.rtp_header_extensions, *video.rtp_header_extensions):
            extensions.setdefault(ext.id, ext.uri)

        for ext_id, uri in extensions.items():
            if not self.transport.has_rtp_extension(ext_id):
                self.transport.add_rtp_extension(ext_id, RtpExtension(uri))

    def _merge_payload_types(
        self, audio: OctoChannelDescription, video: OctoChannelDescription
    ) -> None:
        declarations: Dict[Hashable, Tuple[PayloadTypeDescription, MediaType]] = {}
        for declaration in audio.payload_types:
            declarations[_payload_type_key(declaration)] = (declaration, MediaType.AUDIO)
        for declaration in video.payload_types:
            declarations[_payload_type_key(declaration)] = (declaration, MediaType.VIDEO)

        for declaration, media_type in declarations.values():
            payload_type = build_payload_type(declaration, media_type)
            if payload_type is None:
                logger.warning(
                    "Unrecognized payload type %s",
                    declaration.model_dump_json(exclude_defaults=True),
                )
                continue
            self.transport.add_payload_type(payload_type)


def process_octo_channels(
    transport: RelayTransport,
    audio: OctoChannelDescription,
    video: OctoChannelDescription,
) -> None:
    """Reconcile ``audio`` and ``video`` against ``transport`` in one update."""

    OctoReconciler(transport).reconcile(audio, video)
