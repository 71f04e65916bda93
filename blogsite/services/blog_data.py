from typing import Dict, List, Optional

from blogsite.schemas.blog import BlogPostDetail, BlogPostSummary
from blogsite.services.content_sources import ContentSource


class BlogDataService:
    def __init__(self, source: ContentSource):
        self.source = source

    async def get_all_summaries(self) -> List[BlogPostSummary]:
        return sort_by_pub_date(await self.source.summaries())

    async def get_latest_summaries(self, n: int) -> List[BlogPostSummary]:
        if n <= 0:
            return []
        return (await self.get_all_summaries())[:n]

    async def get_summaries_by_category(self) -> Dict[str, List[BlogPostSummary]]:
        groups: Dict[str, List[BlogPostSummary]] = {}
        for post in await self.get_all_summaries():
            if post.category is None:
                continue
            groups.setdefault(post.category, []).append(post)
        return {category: sort_by_pub_date(posts) for category, posts in groups.items()}

    async def get_detail(
        self, slug: str, draft_key: Optional[str] = None
    ) -> BlogPostDetail:
        return await self.source.detail(slug, draft_key=draft_key)

    async def get_slugs(self) -> List[str]:
        return await self.source.slugs()


def sort_by_pub_date(posts: List[BlogPostSummary]) -> List[BlogPostSummary]:
    return sorted(posts, key=lambda p: p.pubDate, reverse=True)
