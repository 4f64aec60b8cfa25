"""Tests for Octo relay reconciliation."""
from __future__ import annotations

import logging

from videobridge.models.media import MediaType
from videobridge.models.tentacle import OctoTentacle
from videobridge.schemas.colibri import (
    OctoChannelDescription,
    PayloadTypeDescription,
    RtcpFeedbackDescription,
    RtpHeaderExtensionDescription,
    SourceDescription,
    SourceGroupDescription,
)
from videobridge.services.octo import OctoReconciler, process_octo_channels


class RecordingTransport:
    """Relay transport stub that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.extensions: dict[int, object] = {}

    def expire(self) -> None:
        self.calls.append(("expire",))

    def set_relays(self, relays) -> None:
        self.calls.append(("set_relays", set(relays)))

    def has_rtp_extension(self, ext_id: int) -> bool:
        return ext_id in self.extensions

    def add_rtp_extension(self, ext_id, extension) -> None:
        self.calls.append(("add_rtp_extension", ext_id, extension.uri))
        self.extensions[ext_id] = extension

    def add_payload_type(self, payload_type) -> None:
        self.calls.append(("add_payload_type", payload_type.pt, payload_type.media_type))

    def set_sources(self, audio_sources, video_sources, video_source_groups) -> None:
        self.calls.append(("set_sources", list(audio_sources), list(video_sources), list(video_source_groups)))


def _channel(expire: int = 60, **kwargs) -> OctoChannelDescription:
    return OctoChannelDescription(expire=expire, **kwargs)


def test_zero_expire_on_either_side_tears_down():
    transport = RecordingTransport()
    audio = _channel(
        expire=0,
        relays={"relay-a"},
        rtp_header_extensions=[RtpHeaderExtensionDescription(id=1, uri="urn:a")],
        payload_types=[PayloadTypeDescription(id=111, name="opus", clockrate=48000)],
    )
    video = _channel(expire=5, relays={"relay-b"})

    OctoReconciler(transport).reconcile(audio, video)

    assert transport.calls == [("expire",)]


def test_relays_are_union_and_replaced_each_call():
    tentacle = OctoTentacle("conf-1")

    process_octo_channels(tentacle, _channel(relays={"A"}), _channel(relays={"B"}))
    assert tentacle.relays == {"A", "B"}

    process_octo_channels(tentacle, _channel(relays={"C"}), _channel())
    assert tentacle.relays == {"C"}


def test_header_extensions_accumulate_across_calls():
    tentacle = OctoTentacle("conf-1")

    process_octo_channels(
        tentacle,
        _channel(rtp_header_extensions=[RtpHeaderExtensionDescription(id=1, uri="urn:a")]),
        _channel(),
    )
    process_octo_channels(
        tentacle,
        _channel(),
        _channel(rtp_header_extensions=[RtpHeaderExtensionDescription(id=2, uri="urn:b")]),
    )

    extensions = tentacle.rtp_extensions
    assert set(extensions) == {1, 2}
    assert extensions[1].uri == "urn:a"
    assert extensions[2].uri == "urn:b"


def test_existing_header_extension_is_not_overwritten():
    transport = RecordingTransport()
    reconciler = OctoReconciler(transport)

    reconciler.reconcile(
        _channel(rtp_header_extensions=[RtpHeaderExtensionDescription(id=3, uri="urn:first")]),
        _channel(rtp_header_extensions=[RtpHeaderExtensionDescription(id=3, uri="urn:first")]),
    )
    reconciler.reconcile(
        _channel(rtp_header_extensions=[RtpHeaderExtensionDescription(id=3, uri="urn:second")]),
        _channel(),
    )

    added = [call for call in transport.calls if call[0] == "add_rtp_extension"]
    assert added == [("add_rtp_extension", 3, "urn:first")]


def test_payload_types_are_tagged_with_their_media_type():
    transport = RecordingTransport()

    OctoReconciler(transport).reconcile(
        _channel(payload_types=[PayloadTypeDescription(id=111, name="opus", clockrate=48000, channels=2)]),
        _channel(payload_types=[PayloadTypeDescription(id=100, name="VP8", clockrate=90000)]),
    )

    added = sorted(call[1:] for call in transport.calls if call[0] == "add_payload_type")
    assert added == [(100, MediaType.VIDEO), (111, MediaType.AUDIO)]


def test_unrecognized_payload_type_is_skipped(caplog):
    tentacle = OctoTentacle("conf-1")
    audio = _channel(
        payload_types=[
            PayloadTypeDescription(id=111, name="opus", clockrate=48000, channels=2),
            PayloadTypeDescription(id=120, name="mystery-codec", clockrate=8000),
        ]
    )
    video = _channel(payload_types=[PayloadTypeDescription(id=100, name="VP8", clockrate=90000)])

    with caplog.at_level(logging.WARNING, logger="videobridge.services.octo"):
        process_octo_channels(tentacle, audio, video)

    assert set(tentacle.payload_types) == {100, 111}
    assert any("Unrecognized payload type" in record.getMessage() for record in caplog.records)
    assert any("mystery-codec" in record.getMessage() for record in caplog.records)


def test_payload_types_accumulate_across_calls():
    tentacle = OctoTentacle("conf-1")

    process_octo_channels(
        tentacle,
        _channel(payload_types=[PayloadTypeDescription(id=111, name="opus", clockrate=48000)]),
        _channel(),
    )
    process_octo_channels(
        tentacle,
        _channel(),
        _channel(payload_types=[PayloadTypeDescription(id=100, name="VP8", clockrate=90000)]),
    )

    assert set(tentacle.payload_types) == {100, 111}


def test_sources_are_propagated_with_video_groups_only():
    transport = RecordingTransport()
    audio_source = SourceDescription(ssrc=1111)
    video_sources = [SourceDescription(ssrc=2222), SourceDescription(ssrc=3333)]
    video_group = SourceGroupDescription(semantics="FID", sources=video_sources)
    audio_group = SourceGroupDescription(semantics="FID", sources=[audio_source])

    OctoReconciler(transport).reconcile(
        _channel(sources=[audio_source], source_groups=[audio_group]),
        _channel(sources=video_sources, source_groups=[video_group]),
    )

    assert transport.calls[-1] == ("set_sources", [audio_source], video_sources, [video_group])


def test_steps_run_in_order():
    transport = RecordingTransport()

    OctoReconciler(transport).reconcile(
        _channel(
            relays={"A"},
            rtp_header_extensions=[RtpHeaderExtensionDescription(id=1, uri="urn:a")],
            payload_types=[PayloadTypeDescription(id=111, name="opus", clockrate=48000)],
        ),
        _channel(),
    )

    assert [call[0] for call in transport.calls] == [
        "set_relays",
        "add_rtp_extension",
        "add_payload_type",
        "set_sources",
    ]


def test_expire_clears_relays_and_sources_but_keeps_tables():
    tentacle = OctoTentacle("conf-1")
    process_octo_channels(
        tentacle,
        _channel(
            relays={"A"},
            rtp_header_extensions=[RtpHeaderExtensionDescription(id=1, uri="urn:a")],
            sources=[SourceDescription(ssrc=1)],
        ),
        _channel(payload_types=[PayloadTypeDescription(id=100, name="VP8", clockrate=90000)]),
    )

    process_octo_channels(tentacle, _channel(expire=0), _channel(expire=0))

    assert tentacle.expired
    assert tentacle.relays == frozenset()
    assert tentacle.audio_sources == ()
    assert set(tentacle.rtp_extensions) == {1}
    assert set(tentacle.payload_types) == {100}

    process_octo_channels(tentacle, _channel(relays={"B"}), _channel())
    assert not tentacle.expired
    assert tentacle.relays == {"B"}


def test_repeated_expire_clears_sources_set_while_expired():
    tentacle = OctoTentacle("conf-1")

    process_octo_channels(tentacle, _channel(expire=0), _channel(expire=0))
    process_octo_channels(tentacle, _channel(sources=[SourceDescription(ssrc=1)]), _channel())
    process_octo_channels(tentacle, _channel(expire=0), _channel(expire=0))

    assert tentacle.expired
    assert tentacle.audio_sources == ()
    assert tentacle.video_sources == ()


def test_expire_on_expired_tentacle_logs_once(caplog):
    tentacle = OctoTentacle("conf-1")

    with caplog.at_level(logging.INFO, logger="videobridge.models.tentacle"):
        tentacle.expire()
        tentacle.expire()

    assert tentacle.expired
    assert tentacle.relays == frozenset()
    expired_logs = [r for r in caplog.records if "Expired octo tentacle" in r.getMessage()]
    assert len(expired_logs) == 1


def test_empty_relay_update_keeps_tentacle_expired():
    tentacle = OctoTentacle("conf-1")
    tentacle.expire()

    process_octo_channels(
        tentacle,
        _channel(rtp_header_extensions=[RtpHeaderExtensionDescription(id=1, uri="urn:a")]),
        _channel(),
    )

    assert tentacle.expired
    assert tentacle.relays == frozenset()
    assert set(tentacle.rtp_extensions) == {1}


def test_payload_types_differing_only_in_feedback_keep_both_tags():
    transport = RecordingTransport()
    audio_red = PayloadTypeDescription(id=63, name="red", clockrate=48000)
    video_red = PayloadTypeDescription(
        id=63, name="red", clockrate=48000, rtcp_feedback=[RtcpFeedbackDescription(type="nack")]
    )

    OctoReconciler(transport).reconcile(_channel(payload_types=[audio_red]), _channel(payload_types=[video_red]))

    added = sorted(call[2].value for call in transport.calls if call[0] == "add_payload_type")
    assert added == ["audio", "video"]
