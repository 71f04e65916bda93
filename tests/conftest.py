import textwrap
from pathlib import Path

import httpx

from blogsite.errors import NotFoundError
from blogsite.services.microcms import MicroCMSClient

API_PREFIX = "/api/v1/blogs"


class FakeMicroCMS:
    """
    Minimal in-memory microCMS stand-in, mounted through httpx.MockTransport.
    Set fail_status to answer every request with that status code.
    """

    def __init__(self, records: list, fail_status: int | None = None):
        self.records = records
        self.fail_status = fail_status
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.fail_status:
            return httpx.Response(self.fail_status, text="upstream exploded")

        record_id = request.url.path.removeprefix(API_PREFIX).strip("/")
        if record_id:
            for record in self.records:
                if record["id"] == record_id:
                    return httpx.Response(200, json=record)
            return httpx.Response(404, json={"message": "Content is not found."})

        return httpx.Response(200, json=self._list(request.url.params))

    def _list(self, params) -> dict:
        records = self.records
        filters = params.get("filters")
        if filters and filters.startswith("slug[equals]"):
            wanted = filters.removeprefix("slug[equals]")
            records = [r for r in records if r.get("slug") == wanted]

        offset = int(params.get("offset", 0))
        limit = int(params.get("limit", 10))
        page = records[offset : offset + limit]

        fields = params.get("fields")
        if fields:
            keys = fields.split(",")
            page = [{k: r[k] for k in keys if k in r} for r in page]

        return {
            "contents": page,
            "totalCount": len(records),
            "offset": offset,
            "limit": limit,
        }

    def client(self, **kwargs) -> MicroCMSClient:
        return MicroCMSClient(
            service_domain="example",
            api_key="secret",
            transport=httpx.MockTransport(self),
            **kwargs,
        )

    def list_calls(self) -> list[httpx.Request]:
        return [c for c in self.calls if c.url.path == API_PREFIX]


def make_record(record_id: str, published_at: str | None = None, **fields) -> dict:
    record = {"id": record_id, "title": f"Title {record_id}", **fields}
    if published_at is not None:
        record["publishedAt"] = published_at
    return record


def write_post(directory: Path, name: str, text: str) -> Path:
    """Write a markdown post (frontmatter + body) under directory."""
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


class FakeSource:
    """
    Minimal ContentSource stand-in. Pass error to make every call raise it.
    """

    def __init__(
        self,
        name="fake",
        summaries=None,
        details=None,
        slugs=None,
        available=True,
        error: Exception | None = None,
    ):
        self.name = name
        self._summaries = summaries or []
        self._details = details or {}
        self._slugs = slugs
        self.available = available
        self.error = error
        self.calls = []

    def is_available(self):
        return self.available

    async def summaries(self):
        self.calls.append("summaries")
        if self.error:
            raise self.error
        return list(self._summaries)

    async def detail(self, slug, draft_key=None):
        self.calls.append(("detail", slug, draft_key))
        if self.error:
            raise self.error
        if slug not in self._details:
            raise NotFoundError(slug)
        return self._details[slug]

    async def slugs(self):
        self.calls.append("slugs")
        if self.error:
            raise self.error
        if self._slugs is not None:
            return list(self._slugs)
        return [s.slug for s in self._summaries]


class FakeBlogDataService:
    """
    Minimal BlogDataService stand-in for router tests.
    """

    def __init__(self, summaries=None, detail=None, slugs=None, error=None):
        self.summaries = summaries or []
        self.detail = detail
        self.slugs = slugs or []
        self.error = error
        self.calls = []

    async def get_all_summaries(self):
        self.calls.append("all")
        if self.error:
            raise self.error
        return self.summaries

    async def get_latest_summaries(self, n):
        self.calls.append(("latest", n))
        return self.summaries[:n]

    async def get_summaries_by_category(self):
        groups = {}
        for post in self.summaries:
            if post.category:
                groups.setdefault(post.category, []).append(post)
        return groups

    async def get_detail(self, slug, draft_key=None):
        self.calls.append(("detail", slug, draft_key))
        if self.error:
            raise self.error
        if self.detail is None:
            raise NotFoundError(slug)
        return self.detail

    async def get_slugs(self):
        return self.slugs
