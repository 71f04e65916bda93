import datetime
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import httpx

from blogsite.errors import (
    ConfigurationMissingError,
    NotFoundError,
    UpstreamRequestError,
)
from blogsite.schemas.blog import BlogDetail, BlogSummary, MicroCMSListResponse
from blogsite.settings import Settings
from blogsite.utils import parse_datetime, utcnow

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-MICROCMS-API-KEY"
MAX_PAGE_SIZE = 100  # microCMS list endpoint limit
DEFAULT_ORDERS = "-publishedAt"

IMAGE_FIELDS = ("heroImage", "eyecatch", "thumbnail", "cover")
PUBLISHED_DATE_FIELDS = ("publishedAt", "createdAt", "updatedAt")
UPDATED_DATE_FIELDS = ("revisedAt", "updatedAt")
CONTENT_FIELDS = ("body", "content")


class MicroCMSClient:
    """Read-only client for a microCMS list/detail API endpoint."""

    def __init__(
        self,
        service_domain: str = "",
        api_key: str = "",
        api_version: str = "v1",
        endpoint: str = "blogs",
        page_size: int = MAX_PAGE_SIZE,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.service_domain = service_domain
        self.api_key = api_key
        self.api_version = api_version
        self.endpoint = endpoint
        self.page_size = max(1, min(page_size, MAX_PAGE_SIZE))
        self._transport = transport
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "MicroCMSClient":
        return cls(
            service_domain=settings.MICROCMS_SERVICE_DOMAIN,
            api_key=settings.MICROCMS_API_KEY,
            api_version=settings.MICROCMS_API_VERSION,
            endpoint=settings.MICROCMS_BLOG_ENDPOINT,
            page_size=settings.MICROCMS_PAGE_SIZE,
            **kwargs,
        )

    @property
    def base_url(self) -> Optional[str]:
        if not self.service_domain:
            return None
        return f"https://{self.service_domain}.microcms.io/api/{self.api_version}"

    def is_enabled(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _get_client(self) -> httpx.AsyncClient:
        # Created on first use and kept for the lifetime of this client.
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(transport=self._transport)
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(self, path: str, params: Optional[Dict[str, Any]] = None):
        if not self.is_enabled():
            raise ConfigurationMissingError()

        query = {k: str(v) for k, v in (params or {}).items() if v is not None}
        url = f"{self.base_url}/{path}"
        response = await self._get_client().get(
            url, params=query, headers={API_KEY_HEADER: self.api_key}
        )

        if not response.is_success:
            raise UpstreamRequestError(
                response.status_code, response.text, str(response.request.url)
            )
        return response.json()

    async def _list(self, params: Dict[str, Any]) -> MicroCMSListResponse:
        data = await self._request(self.endpoint, params)
        return MicroCMSListResponse.model_validate(data)

    async def _list_all(self, params: Dict[str, Any]) -> List[dict]:
        """Page through the list endpoint until totalCount records are collected."""
        contents: List[dict] = []
        offset = 0
        while True:
            page = await self._list(
                {**params, "limit": self.page_size, "offset": offset}
            )
            contents.extend(page.contents)
            offset += len(page.contents)
            if not page.contents or len(contents) >= page.totalCount:
                break
        logger.debug(f"Fetched {len(contents)} records from {self.endpoint}")
        return contents

    async def fetch_summaries(
        self,
        limit: Optional[int] = None,
        orders: Optional[str] = None,
        draft_key: Optional[str] = None,
    ) -> List[BlogSummary]:
        params = {"orders": orders or DEFAULT_ORDERS, "draftKey": draft_key}
        if limit is None:
            contents = await self._list_all(params)
        else:
            contents = (await self._list({**params, "limit": limit})).contents
        return [to_summary(entry) for entry in contents]

    async def fetch_detail(
        self, id_or_slug: str, draft_key: Optional[str] = None
    ) -> BlogDetail:
        if not id_or_slug:
            raise NotFoundError(id_or_slug)

        try:
            path = f"{self.endpoint}/{urllib.parse.quote(id_or_slug, safe='')}"
            entry = await self._request(path, {"draftKey": draft_key})
        except (UpstreamRequestError, httpx.HTTPError) as e:
            # The id and the human readable slug differ; retry via search.
            logger.debug(f"Direct lookup failed for {id_or_slug}, searching by slug: {e}")
            page = await self._list(
                {
                    "filters": f"slug[equals]{id_or_slug}",
                    "limit": 1,
                    "draftKey": draft_key,
                }
            )
            if not page.contents:
                raise NotFoundError(id_or_slug) from e
            entry = page.contents[0]

        return to_detail(entry)

    async def fetch_slugs(self) -> List[str]:
        contents = await self._list_all({"fields": "id,slug"})
        return [_resolve_slug(entry) for entry in contents]


def to_summary(entry: dict) -> BlogSummary:
    slug = _resolve_slug(entry)
    pub_date = _first_date(entry, PUBLISHED_DATE_FIELDS)
    if pub_date is None:
        logger.warning(f"Entry {entry.get('id')} has no usable publish date, using now")
        pub_date = utcnow()

    title = entry.get("title")
    description = entry.get("description")
    return BlogSummary(
        id=entry["id"],
        slug=slug,
        title=title if isinstance(title, str) else slug,
        description=description if isinstance(description, str) else "",
        category=resolve_category(entry),
        pubDate=pub_date,
        updatedDate=_first_date(entry, UPDATED_DATE_FIELDS),
        heroImage=pick_image_url(entry),
        raw=entry,
    )


def to_detail(entry: dict) -> BlogDetail:
    content = pick_content(entry)
    return BlogDetail(
        **to_summary(entry).model_dump(),
        contentHtml=content,
        contentRaw=content,
    )


def pick_image_url(entry: dict) -> Optional[str]:
    candidate = next(
        (entry[f] for f in IMAGE_FIELDS if entry.get(f) is not None), None
    )
    if isinstance(candidate, dict):
        return candidate.get("url")
    return None


def resolve_category(entry: dict) -> Optional[str]:
    category = entry.get("category")
    if not category:
        return None
    if isinstance(category, str):
        return category
    if isinstance(category, dict) and isinstance(category.get("id"), str):
        return category["id"]
    return None


def pick_content(entry: dict) -> Optional[str]:
    for field in CONTENT_FIELDS:
        if isinstance(entry.get(field), str):
            return entry[field]
    return None


def _first_date(entry: dict, fields) -> Optional[datetime.datetime]:
    for field in fields:
        value = entry.get(field)
        parsed = parse_datetime(value) if isinstance(value, str) else None
        if parsed is not None:
            return parsed
    return None


def _resolve_slug(entry: dict) -> str:
    slug = entry.get("slug")
    if isinstance(slug, str) and slug:
        return slug
    return entry["id"]
