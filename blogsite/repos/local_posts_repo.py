import logging
from pathlib import Path
from typing import List, Optional

import frontmatter
import yaml
from pydantic import ValidationError

from blogsite.errors import LocalContentError
from blogsite.schemas.blog import LocalEntry, LocalPostMetadata

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")


class LocalPostsRepo:
    def __init__(self, content_dir):
        self.content_dir = Path(content_dir)

    def list_entries(self) -> List[LocalEntry]:
        if not self.content_dir.is_dir():
            return []
        entries = [self._load(path) for path in self._markdown_files()]
        logger.debug(f"Loaded {len(entries)} local posts from {self.content_dir}")
        return entries

    def get_entry(self, slug: str) -> Optional[LocalEntry]:
        return next(
            (entry for entry in self.list_entries() if entry.slug == slug), None
        )

    def _markdown_files(self) -> List[Path]:
        return sorted(
            path
            for path in self.content_dir.rglob("*")
            if path.is_file() and path.suffix.lower() in MARKDOWN_SUFFIXES
        )

    def _load(self, path: Path) -> LocalEntry:
        try:
            post = frontmatter.load(path)
            metadata = LocalPostMetadata.model_validate(post.metadata or {})
        except ValidationError as e:
            raise LocalContentError(path, str(e)) from e
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise LocalContentError(path, f"unreadable frontmatter: {e}") from e

        return LocalEntry(
            slug=metadata.slug or self._path_to_slug(path),
            path=path,
            data=metadata,
            body=post.content,
        )

    def _path_to_slug(self, path: Path) -> str:
        return path.relative_to(self.content_dir).with_suffix("").as_posix()
