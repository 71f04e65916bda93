import datetime
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

import markdown
from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogsite.utils import parse_datetime

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


class MicroCMSListResponse(BaseModel):
    contents: List[Dict[str, Any]] = Field(default_factory=list)
    totalCount: int = 0
    offset: int = 0
    limit: int = 0


class BlogSummary(BaseModel):
    id: str
    slug: str
    title: str
    description: str = ""
    category: Optional[str] = None
    pubDate: datetime.datetime
    updatedDate: Optional[datetime.datetime] = None
    heroImage: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class BlogDetail(BlogSummary):
    contentHtml: Optional[str] = None
    contentRaw: Optional[str] = None


class LocalPostMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    description: str
    category: Optional[str] = None
    pubDate: datetime.datetime
    updatedDate: Optional[datetime.datetime] = None
    heroImage: Optional[str] = None
    slug: Optional[str] = None

    @field_validator("pubDate", "updatedDate", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        if value is None:
            return None
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValueError(f"invalid date: {value!r}")
        return parsed


class LocalEntry(BaseModel):
    slug: str
    path: Path
    data: LocalPostMetadata
    body: str = ""

    def render(self) -> str:
        """Render the markdown body to HTML."""
        return markdown.markdown(self.body, extensions=MARKDOWN_EXTENSIONS)


class MicroCMSPostSummary(BlogSummary):
    source: Literal["microcms"] = "microcms"


class MicroCMSPostDetail(BlogDetail):
    source: Literal["microcms"] = "microcms"


class LocalPostSummary(BaseModel):
    source: Literal["local"] = "local"
    slug: str
    title: str
    description: str = ""
    category: Optional[str] = None
    pubDate: datetime.datetime
    updatedDate: Optional[datetime.datetime] = None
    heroImage: Optional[str] = None
    entry: Optional[LocalEntry] = Field(default=None, exclude=True)

    @classmethod
    def from_entry(cls, entry: LocalEntry) -> "LocalPostSummary":
        data = entry.data
        return cls(
            slug=entry.slug,
            title=data.title,
            description=data.description,
            category=data.category,
            pubDate=data.pubDate,
            updatedDate=data.updatedDate,
            heroImage=data.heroImage,
            entry=entry,
        )


class LocalPostDetail(LocalPostSummary):
    contentHtml: Optional[str] = None
    contentRaw: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: LocalEntry) -> "LocalPostDetail":
        summary = LocalPostSummary.from_entry(entry)
        return cls(
            **summary.model_dump(),
            entry=entry,
            contentHtml=entry.render(),
            contentRaw=entry.body,
        )


BlogPostSummary = Annotated[
    Union[MicroCMSPostSummary, LocalPostSummary], Field(discriminator="source")
]
BlogPostDetail = Annotated[
    Union[MicroCMSPostDetail, LocalPostDetail], Field(discriminator="source")
]
