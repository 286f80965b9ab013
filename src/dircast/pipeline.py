"""Pipeline from a remote folder listing to a serialized feed.

Fatal errors (listing, serialization) propagate. Share link and URL
problems only drop the affected file; the feed is built from whatever
could be resolved.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel, Field

from dircast.config.schema import GlobalConfig
from dircast.feeds.assembler import FeedAssembler
from dircast.feeds.catalog import FileCatalog
from dircast.feeds.links import ShareLinkResolver
from dircast.feeds.models import ChannelMetadata, Episode, FeedChannel, RemoteFile
from dircast.feeds.urls import to_direct_download
from dircast.storage.client import DropboxClient
from dircast.utils.errors import NormalizationError, ShareLinkError

logger = logging.getLogger(__name__)


class PipelineOptions(BaseModel):
    """Inputs for one feed generation run."""

    directory_path: str
    channel: ChannelMetadata
    workers: int = Field(default=1, ge=1)


class EpisodeFailure(BaseModel):
    """A file that was left out of the feed."""

    path: str
    display_name: str
    error_kind: str
    message: str


class PipelineResult(BaseModel):
    """Outcome of a run."""

    channel: FeedChannel
    document: bytes
    failures: list[EpisodeFailure] = Field(default_factory=list)

    @property
    def episode_count(self) -> int:
        return len(self.channel.items)


class PipelineOrchestrator:
    """Runs catalog -> share links -> episodes -> RSS."""

    def __init__(
        self,
        catalog: FileCatalog,
        resolver: ShareLinkResolver,
        assembler: FeedAssembler | None = None,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver
        self.assembler = assembler or FeedAssembler()

    def run(self, options: PipelineOptions) -> PipelineResult:
        """Generate the feed for ``options.directory_path``.

        Raises:
            CatalogError: If the folder cannot be listed
            SerializationError: If the feed cannot be written
        """
        files = self.catalog.list_audio_files(options.directory_path)

        outcomes = self._resolve_all(files, options.workers)

        episodes: list[Episode] = []
        failures: list[EpisodeFailure] = []
        for outcome in outcomes:
            if isinstance(outcome, EpisodeFailure):
                failures.append(outcome)
            else:
                episodes.append(outcome)

        channel = self.assembler.assemble(options.channel, episodes)
        document = self.assembler.serialize(channel)

        if failures:
            logger.warning(
                "Skipped %d of %d audio file(s) that could not be shared",
                len(failures),
                len(files),
            )
        logger.info("Feed contains %d episode(s)", len(episodes))

        return PipelineResult(channel=channel, document=document, failures=failures)

    def _resolve_all(
        self, files: list[RemoteFile], workers: int
    ) -> list[Episode | EpisodeFailure]:
        if workers <= 1 or len(files) <= 1:
            return [self._resolve_one(file) for file in files]

        # Results are collected by position so the feed keeps listing order
        with ThreadPoolExecutor(max_workers=min(workers, len(files))) as executor:
            return list(executor.map(self._resolve_one, files))

    def _resolve_one(self, file: RemoteFile) -> Episode | EpisodeFailure:
        try:
            share_link = self.resolver.resolve(file.path)
            download_url = to_direct_download(share_link)
        except (ShareLinkError, NormalizationError) as e:
            logger.warning("Failed to create or get shared link for %s: %s", file.display_name, e)
            return EpisodeFailure(
                path=file.path,
                display_name=file.display_name,
                error_kind=e.reason.value,
                message=str(e),
            )
        return self.assembler.build_episode(file, download_url)

    def close(self) -> None:
        """Release the HTTP sessions held by the storage client."""
        self.catalog.client.close()


def build_pipeline(config: GlobalConfig, access_token: str) -> PipelineOrchestrator:
    """Wire an authenticated Dropbox client into a pipeline."""
    client = DropboxClient(access_token, timeout=config.http_timeout_seconds)
    return PipelineOrchestrator(
        catalog=FileCatalog(client, case_sensitive=config.extensions_case_sensitive),
        resolver=ShareLinkResolver(client),
    )
