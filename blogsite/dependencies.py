from fastapi import Depends, Request

from blogsite.repos.local_posts_repo import LocalPostsRepo
from blogsite.services.blog_data import BlogDataService
from blogsite.services.content_sources import build_content_source
from blogsite.services.microcms import MicroCMSClient
from blogsite.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_microcms_client(request: Request) -> MicroCMSClient:
    # Created once in the app lifespan and shared across requests.
    return request.app.state.microcms_client


def get_local_posts_repo(current_settings: Settings = Depends(get_settings)):
    return LocalPostsRepo(current_settings.LOCAL_CONTENT_DIR)


def get_content_source(
    client=Depends(get_microcms_client),
    repo=Depends(get_local_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    return build_content_source(
        client, repo, merge_local=current_settings.MERGE_LOCAL_CONTENT
    )


def get_blog_data_service(source=Depends(get_content_source)):
    return BlogDataService(source)
