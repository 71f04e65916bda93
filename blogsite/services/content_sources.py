"""Pluggable blog content sources.

Each source answers the same three questions (summaries, one detail, all
slugs). ``FallbackSource`` composes a remote source with a local one so the
site still builds when the CMS is unreachable.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from blogsite.errors import LocalContentError, NotFoundError
from blogsite.repos.local_posts_repo import LocalPostsRepo
from blogsite.schemas.blog import (
    BlogPostDetail,
    BlogPostSummary,
    LocalPostDetail,
    LocalPostSummary,
    MicroCMSPostDetail,
    MicroCMSPostSummary,
)
from blogsite.services.microcms import MicroCMSClient

logger = logging.getLogger(__name__)


class ContentSource(Protocol):
    name: str

    def is_available(self) -> bool: ...

    async def summaries(self) -> List[BlogPostSummary]: ...

    async def detail(
        self, slug: str, draft_key: Optional[str] = None
    ) -> BlogPostDetail: ...

    async def slugs(self) -> List[str]: ...


class MicroCMSSource:
    name = "microcms"

    def __init__(self, client: MicroCMSClient):
        self.client = client

    def is_available(self) -> bool:
        return self.client.is_enabled()

    async def summaries(self) -> List[BlogPostSummary]:
        return [
            MicroCMSPostSummary(**s.model_dump())
            for s in await self.client.fetch_summaries()
        ]

    async def detail(self, slug: str, draft_key: Optional[str] = None) -> BlogPostDetail:
        d = await self.client.fetch_detail(slug, draft_key=draft_key)
        return MicroCMSPostDetail(**d.model_dump())

    async def slugs(self) -> List[str]:
        return await self.client.fetch_slugs()


class LocalSource:
    name = "local"

    def __init__(self, repo: LocalPostsRepo):
        self.repo = repo

    def is_available(self) -> bool:
        return True

    async def summaries(self) -> List[BlogPostSummary]:
        return [LocalPostSummary.from_entry(e) for e in self.repo.list_entries()]

    async def detail(self, slug: str, draft_key: Optional[str] = None) -> BlogPostDetail:
        entry = self.repo.get_entry(slug)
        if entry is None:
            raise NotFoundError(slug)
        return LocalPostDetail.from_entry(entry)

    async def slugs(self) -> List[str]:
        return [e.slug for e in self.repo.list_entries()]


class FallbackSource:
    """Use ``primary`` when available, degrading to ``fallback`` on any error.

    The primary is attempted at most once per call.
    """

    def __init__(self, primary: ContentSource, fallback: ContentSource):
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}>{fallback.name}"

    def is_available(self) -> bool:
        return self.primary.is_available() or self.fallback.is_available()

    async def summaries(self) -> List[BlogPostSummary]:
        if self.primary.is_available():
            try:
                return await self.primary.summaries()
            except LocalContentError:
                raise
            except Exception as e:
                self._log_fallback("summaries", e)
        return await self.fallback.summaries()

    async def detail(self, slug: str, draft_key: Optional[str] = None) -> BlogPostDetail:
        if self.primary.is_available():
            try:
                return await self.primary.detail(slug, draft_key=draft_key)
            except LocalContentError:
                raise
            except Exception as e:
                self._log_fallback(f"detail {slug}", e)
        return await self.fallback.detail(slug, draft_key=draft_key)

    async def slugs(self) -> List[str]:
        if self.primary.is_available():
            try:
                return await self.primary.slugs()
            except LocalContentError:
                raise
            except Exception as e:
                self._log_fallback("slugs", e)
        return await self.fallback.slugs()

    def _log_fallback(self, operation: str, error: Exception) -> None:
        logger.warning(
            f"{self.primary.name} {operation} failed, using {self.fallback.name}: {error}"
        )


class MergedSource:
    """Concatenate several sources. On a slug collision the first source wins."""

    def __init__(self, sources: Sequence[ContentSource]):
        self.sources = list(sources)
        self.name = "+".join(s.name for s in self.sources)

    def _available(self) -> List[ContentSource]:
        return [s for s in self.sources if s.is_available()]

    def is_available(self) -> bool:
        return bool(self._available())

    async def summaries(self) -> List[BlogPostSummary]:
        seen = set()
        merged = []
        for source in self._available():
            for summary in await source.summaries():
                if summary.slug in seen:
                    logger.info(
                        f"Skipping duplicate slug {summary.slug} from {source.name}"
                    )
                    continue
                seen.add(summary.slug)
                merged.append(summary)
        return merged

    async def detail(self, slug: str, draft_key: Optional[str] = None) -> BlogPostDetail:
        for source in self._available():
            try:
                return await source.detail(slug, draft_key=draft_key)
            except NotFoundError:
                continue
        raise NotFoundError(slug)

    async def slugs(self) -> List[str]:
        seen = set()
        slugs = []
        for source in self._available():
            for slug in await source.slugs():
                if slug not in seen:
                    seen.add(slug)
                    slugs.append(slug)
        return slugs


def build_content_source(
    client: MicroCMSClient, repo: LocalPostsRepo, merge_local: bool = False
) -> ContentSource:
    local = LocalSource(repo)
    remote = MicroCMSSource(client)
    if merge_local:
        return FallbackSource(MergedSource([remote, local]), local)
    return FallbackSource(remote, local)
