import pytest

from blogsite.errors import NotFoundError
from blogsite.repos.local_posts_repo import LocalPostsRepo
from blogsite.services.blog_data import BlogDataService
from blogsite.services.content_sources import build_content_source
from blogsite.services.microcms import MicroCMSClient
from tests.conftest import FakeMicroCMS, make_record, write_post

REMOTE_RECORDS = [
    make_record("jan", "2024-01-01T00:00:00Z", slug="january", category={"id": "news"}),
    make_record("mar", "2024-03-01T00:00:00Z", slug="march", category="news"),
    make_record("feb", "2024-02-01T00:00:00Z", slug="february"),
]


def _write_local_posts(directory):
    write_post(
        directory,
        "older.md",
        """
        ---
        title: Older
        description: d
        category: diary
        pubDate: 2023-12-01
        ---
        older body
        """,
    )
    write_post(
        directory,
        "newer.md",
        """
        ---
        title: Newer
        description: d
        category: diary
        pubDate: 2024-02-15
        ---
        newer body
        """,
    )
    write_post(
        directory,
        "uncategorized.md",
        """
        ---
        title: Uncategorized
        description: d
        pubDate: 2024-01-20T08:00:00
        ---
        plain body
        """,
    )


def _service(client, tmp_path, merge_local=False) -> BlogDataService:
    _write_local_posts(tmp_path)
    return BlogDataService(
        build_content_source(client, LocalPostsRepo(tmp_path), merge_local=merge_local)
    )


@pytest.mark.asyncio
async def test_latest_summaries_sorted_by_pub_date(tmp_path):
    service = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path)

    latest = await service.get_latest_summaries(2)

    assert [p.slug for p in latest] == ["march", "february"]
    assert all(p.source == "microcms" for p in latest)


@pytest.mark.asyncio
async def test_latest_summaries_is_prefix_of_all(tmp_path):
    service = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path)

    everything = await service.get_all_summaries()

    assert [p.slug for p in everything] == ["march", "february", "january"]
    for n in range(0, 5):
        latest = await service.get_latest_summaries(n)
        assert [p.slug for p in latest] == [p.slug for p in everything][:n]
    assert await service.get_latest_summaries(-1) == []


@pytest.mark.asyncio
async def test_all_summaries_use_local_when_remote_disabled(tmp_path):
    service = _service(MicroCMSClient(), tmp_path)

    result = await service.get_all_summaries()

    assert [p.slug for p in result] == ["newer", "uncategorized", "older"]
    assert all(p.source == "local" for p in result)


@pytest.mark.asyncio
async def test_all_summaries_use_local_when_remote_fails(tmp_path, caplog):
    fake = FakeMicroCMS(REMOTE_RECORDS, fail_status=500)
    service = _service(fake.client(), tmp_path)

    result = await service.get_all_summaries()

    assert [p.slug for p in result] == ["newer", "uncategorized", "older"]
    assert len(fake.calls) == 1
    assert "microcms summaries failed, using local" in caplog.text


@pytest.mark.asyncio
async def test_get_detail_uses_local_when_remote_fails(tmp_path, caplog):
    fake = FakeMicroCMS(REMOTE_RECORDS, fail_status=500)
    service = _service(fake.client(), tmp_path)

    detail = await service.get_detail("older")

    assert detail.source == "local"
    assert detail.title == "Older"
    # direct lookup plus the single slug search
    assert len(fake.calls) == 2
    assert "microcms detail older failed, using local" in caplog.text


@pytest.mark.asyncio
async def test_summaries_by_category_drops_uncategorized(tmp_path):
    service = _service(MicroCMSClient(), tmp_path)

    groups = await service.get_summaries_by_category()

    assert list(groups) == ["diary"]
    assert [p.slug for p in groups["diary"]] == ["newer", "older"]


@pytest.mark.asyncio
async def test_summaries_by_category_groups_remote_posts(tmp_path):
    service = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path)

    groups = await service.get_summaries_by_category()

    assert [p.slug for p in groups["news"]] == ["march", "january"]
    assert "february" not in {p.slug for posts in groups.values() for p in posts}


@pytest.mark.asyncio
async def test_get_detail_prefers_remote_then_local(tmp_path):
    service = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path)

    remote = await service.get_detail("march")
    local = await service.get_detail("older")

    assert remote.source == "microcms"
    assert remote.id == "mar"
    assert local.source == "local"
    assert local.contentRaw == "older body"


@pytest.mark.asyncio
async def test_get_detail_raises_not_found_when_no_source_has_it(tmp_path):
    service = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path)

    with pytest.raises(NotFoundError):
        await service.get_detail("nowhere")


@pytest.mark.asyncio
async def test_get_slugs_falls_back_to_local(tmp_path):
    healthy = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path)
    broken = _service(FakeMicroCMS(REMOTE_RECORDS, fail_status=502).client(), tmp_path)

    assert await healthy.get_slugs() == ["january", "march", "february"]
    assert sorted(await broken.get_slugs()) == ["newer", "older", "uncategorized"]


@pytest.mark.asyncio
async def test_merged_sources_sort_across_timezones(tmp_path):
    service = _service(FakeMicroCMS(REMOTE_RECORDS).client(), tmp_path, merge_local=True)

    result = await service.get_all_summaries()

    assert [p.slug for p in result] == [
        "march",
        "newer",
        "february",
        "uncategorized",
        "january",
        "older",
    ]
