"""Colibri-facing logic for a conference.

Creates contents, describes the conference into response records and
applies Octo channel updates to the conference's relay transport.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, List

from ..core.config import Settings, settings as default_settings
from ..core.errors import ErrorCondition, ProcessingError
from ..models.conference import Conference
from ..models.content import ContentRecord
from ..models.media import MediaType
from ..schemas.colibri import (
    ChannelBundleDescription,
    ChannelDescription,
    ConferenceDescription,
    EndpointDescription,
    OctoChannelDescription,
)
from .contents import ContentRegistry
from .octo import process_octo_channels

logger = logging.getLogger(__name__)


class ColibriConference:
    """Colibri view of a single :class:`Conference`."""

    def __init__(self, conference: Conference, settings: Settings | None = None) -> None:
        self.conference = conference
        self._settings = settings or default_settings
        self._contents = ContentRegistry(conference)

    def get_id(self) -> str:
        return self.conference.id

    def get_or_create_content(self, media_type: MediaType) -> ContentRecord:
        return self._contents.get_or_create(media_type)

    def get_contents(self) -> List[ContentRecord]:
        """Return a copy of the list of contents."""

        return self._contents.list()

    def describe_shallow(self, iq: ConferenceDescription) -> None:
        iq.id = self.conference.id
        iq.name = self.conference.name

    def describe_deep(self, iq: ConferenceDescription) -> None:
        """Describe the conference and, recursively, its contents and their channels."""

        self.describe_shallow(iq)

        for content in self.get_contents():
            content_iq = iq.get_or_create_content(content.media_type)
            for channel in content.get_channels():
                channel_iq = ChannelDescription()
                channel.describe(channel_iq)
                content_iq.add_channel(channel_iq)

    def describe_endpoints(self, iq: ConferenceDescription) -> None:
        for endpoint in self.conference.get_endpoints():
            iq.add_endpoint(
                EndpointDescription(
                    id=endpoint.id,
                    stats_id=endpoint.stats_id,
                    display_name=endpoint.display_name,
                )
            )

    def describe_channel_bundles(
        self, iq: ConferenceDescription, endpoint_ids: AbstractSet[str]
    ) -> None:
        """Add a channel bundle for each listed endpoint.

        Raises :class:`ProcessingError` as soon as one endpoint fails to
        describe itself; later endpoints are not described.
        """

        for endpoint in self.conference.get_endpoints():
            if endpoint.id not in endpoint_ids:
                continue
            bundle = ChannelBundleDescription(id=endpoint.id)
            try:
                endpoint.describe(bundle)
            except OSError as exc:
                logger.warning("Failed to describe channel bundle for endpoint %s: %s", endpoint.id, exc)
                raise ProcessingError(ErrorCondition.INTERNAL_SERVER_ERROR, str(exc)) from exc
            iq.add_channel_bundle(bundle)

    def process_octo_channels(
        self, audio: OctoChannelDescription, video: OctoChannelDescription
    ) -> None:
        if not self._settings.octo_enabled:
            raise ProcessingError(ErrorCondition.FEATURE_NOT_IMPLEMENTED, "Octo is not enabled")

        tentacle = self.conference.get_tentacle()
        with tentacle.lock:
            process_octo_channels(tentacle, audio, video)

    def update_endpoint(self, description: EndpointDescription) -> None:
        """Copy display name and stats id onto the endpoint with the same id, if there is one."""

        if description.id is None:
            return

        endpoint = self.conference.get_endpoint(description.id)
        if endpoint is None:
            logger.debug("Ignoring update for unknown endpoint %s", description.id)
            return

        endpoint.display_name = description.display_name
        endpoint.stats_id = description.stats_id
