"""Description records exchanged with the Colibri signalling layer.

These are plain data carriers: the signalling layer parses requests into
them and serializes responses out of them. Nothing here knows about XML.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from ..models.media import MediaType


class RtpHeaderExtensionDescription(BaseModel):
    id: int = Field(..., ge=1, le=255, description="Negotiated extension id")
    uri: str = Field(..., min_length=1)


class RtcpFeedbackDescription(BaseModel):
    type: str
    subtype: str | None = None


class PayloadTypeDescription(BaseModel):
    id: int = Field(..., ge=0, le=127, description="RTP payload type number")
    name: str = Field(..., description="Encoding name, e.g. opus or VP8")
    clockrate: int = Field(default=0, ge=0)
    channels: int = Field(default=1, ge=1)
    parameters: dict[str, str] = Field(default_factory=dict)
    rtcp_feedback: list[RtcpFeedbackDescription] = Field(default_factory=list)


class SourceDescription(BaseModel):
    ssrc: int = Field(..., ge=0, le=0xFFFFFFFF)
    name: str | None = None
    parameters: dict[str, str] = Field(default_factory=dict)


class SourceGroupDescription(BaseModel):
    semantics: str = Field(..., description="Grouping semantics such as SIM or FID")
    sources: list[SourceDescription] = Field(default_factory=list)


class ChannelDescription(BaseModel):
    id: str | None = None
    endpoint: str | None = None
    expire: int | None = Field(default=None, ge=0)
    direction: str | None = None
    last_n: int | None = None
    channel_bundle_id: str | None = None


class OctoChannelDescription(BaseModel):
    """Octo channel of one media type, as received for a conference."""

    id: str | None = None
    expire: int = Field(..., ge=0, description="Seconds; zero tears the relay down")
    relays: set[str] = Field(default_factory=set)
    rtp_header_extensions: list[RtpHeaderExtensionDescription] = Field(default_factory=list)
    payload_types: list[PayloadTypeDescription] = Field(default_factory=list)
    sources: list[SourceDescription] = Field(default_factory=list)
    source_groups: list[SourceGroupDescription] = Field(default_factory=list)


class ContentDescription(BaseModel):
    name: str
    channels: list[ChannelDescription] = Field(default_factory=list)

    def add_channel(self, channel: ChannelDescription) -> None:
        self.channels.append(channel)


class EndpointDescription(BaseModel):
    id: str | None = None
    stats_id: str | None = None
    display_name: str | None = None


class ChannelBundleDescription(BaseModel):
    id: str
    channel_ids: list[str] = Field(default_factory=list)


class ConferenceDescription(BaseModel):
    """Mutable response record a conference describes itself into."""

    id: str | None = None
    name: str | None = None
    contents: list[ContentDescription] = Field(default_factory=list)
    endpoints: list[EndpointDescription] = Field(default_factory=list)
    channel_bundles: list[ChannelBundleDescription] = Field(default_factory=list)

    def get_content(self, name: str) -> ContentDescription | None:
        for content in self.contents:
            if content.name == name:
                return content
        return None

    def get_or_create_content(self, name: str | MediaType) -> ContentDescription:
        key = str(name)
        content = self.get_content(key)
        if content is None:
            content = ContentDescription(name=key)
            self.contents.append(content)
        return content

    def add_endpoint(self, endpoint: EndpointDescription) -> None:
        self.endpoints.append(endpoint)

    def add_channel_bundle(self, bundle: ChannelBundleDescription) -> None:
        self.channel_bundles.append(bundle)
