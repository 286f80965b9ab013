"""Building episodes and writing the RSS document."""

import datetime as dt
from collections.abc import Iterable
from xml.etree import ElementTree as ET

from dircast.feeds.models import (
    ChannelMetadata,
    Enclosure,
    Episode,
    FeedChannel,
    RemoteFile,
)
from dircast.utils.errors import SerializationError

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"


def format_rfc2822(value: dt.datetime) -> str:
    """Format a timestamp like ``Mon, 02 Jan 2006 15:04:05 -0700``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.strftime("%a, %d %b %Y %H:%M:%S %z")


class FeedAssembler:
    """Turns resolved files into a channel and serializes it."""

    def build_episode(self, file: RemoteFile, link: str) -> Episode:
        """Map a file and its direct-download URL to a feed item."""
        return Episode(
            title=file.display_name,
            link=link,
            guid=link,
            publication_date=format_rfc2822(file.modified_at),
            enclosure=Enclosure(
                url=link,
                length_bytes=file.size_bytes,
                mime_type=file.content_kind.mime_type,
            ),
        )

    def assemble(self, metadata: ChannelMetadata, episodes: Iterable[Episode]) -> FeedChannel:
        """Wrap episodes, in the given order, with channel metadata."""
        return FeedChannel(**metadata.model_dump(), items=list(episodes))

    def serialize(self, channel: FeedChannel) -> bytes:
        """Render the channel as an RSS 2.0 document.

        Element and attribute order is fixed, so identical input gives
        byte-identical output.

        Raises:
            SerializationError: If the document cannot be produced or is not
                well-formed XML (e.g. control characters in a file name)
        """
        try:
            rss = self._build_document(channel)
            ET.indent(rss, space="  ")
            document = ET.tostring(rss, encoding="utf-8", xml_declaration=True)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize feed: {e}") from e

        try:
            ET.fromstring(document)
        except ET.ParseError as e:
            raise SerializationError(f"Generated feed is not well-formed XML: {e}") from e

        return document

    def _build_document(self, channel: FeedChannel) -> ET.Element:
        rss = ET.Element(
            "rss",
            attrib={
                "version": "2.0",
                "xmlns:itunes": ITUNES_NS,
            },
        )
        channel_el = ET.SubElement(rss, "channel")
        ET.SubElement(channel_el, "title").text = channel.title
        ET.SubElement(channel_el, "link").text = channel.link
        ET.SubElement(channel_el, "description").text = channel.description
        ET.SubElement(channel_el, "itunes:author").text = channel.author
        ET.SubElement(channel_el, "itunes:image", attrib={"href": channel.image_url})

        for episode in channel.items:
            entry = ET.SubElement(channel_el, "item")
            ET.SubElement(entry, "title").text = episode.title
            ET.SubElement(entry, "link").text = episode.link
            ET.SubElement(entry, "guid").text = episode.guid
            ET.SubElement(entry, "pubDate").text = episode.publication_date

            enclosure = ET.SubElement(entry, "enclosure")
            enclosure.set("url", episode.enclosure.url)
            enclosure.set("length", str(episode.enclosure.length_bytes))
            enclosure.set("type", episode.enclosure.mime_type)

        return rss
