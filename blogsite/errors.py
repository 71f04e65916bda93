from typing import Optional


class BlogDataError(Exception):
    """Base class for blog content failures."""


class ConfigurationMissingError(BlogDataError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "microCMS is not configured (MICROCMS_SERVICE_DOMAIN, MICROCMS_API_KEY)"
        )


class UpstreamRequestError(BlogDataError):
    """Non-2xx response from the CMS API."""

    def __init__(self, status_code: int, body: str = "", url: str = ""):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"microCMS request failed ({status_code}): {body}")


class NotFoundError(BlogDataError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Post not found (slug: {slug})")


class LocalContentError(BlogDataError):
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Invalid local post {path}: {reason}")
