import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from blogsite.routers import feeds, posts
from blogsite.services.microcms import MicroCMSClient
from blogsite.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blogsite API", description="Blog content for the public site")


def create_microcms_client() -> MicroCMSClient:
    return MicroCMSClient.from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = create_microcms_client()
    app.state.microcms_client = client
    if client.is_enabled():
        logger.info(f"microCMS enabled ({client.base_url}/{client.endpoint})")
    else:
        logger.info("microCMS not configured, serving local content only")

    try:
        yield
    finally:
        await client.aclose()
        logger.info("microCMS client closed")


app.router.lifespan_context = lifespan

app.include_router(posts.router)
app.include_router(feeds.router)


@app.get("/")
async def root():
    return {"message": "Blogsite API is running"}
