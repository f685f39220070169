import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from portal.exceptions import ContentStoreError
from portal.utils.filesystem import ensure_storage_dirs, resolve_inside, sanitize_filename
from portal.utils.timestamps import epoch_millis

logger = logging.getLogger("portal")


def resume_path(job_id: str, filename: str, timestamp: int | None = None) -> str:
    """Storage path for an uploaded resume: resumes/{jobId}/{millis}-{name}."""
    stamp = timestamp if timestamp is not None else epoch_millis()
    return f"resumes/{sanitize_filename(job_id)}/{stamp}-{sanitize_filename(filename)}"


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    content_type: str | None = None


class ContentStore:
    """Binary attachments on the local filesystem, served back over HTTP."""

    def __init__(self, root: Path, download_base_url: str):
        self.root = root
        self.download_base_url = download_base_url.rstrip("/")

    def upload(self, path: str, content: bytes) -> str:
        """Write ``content`` at ``path`` and return its download URL."""
        target = resolve_inside(self.root, path)
        if target is None:
            raise ContentStoreError(f"Refusing to write outside the store: {path}")
        try:
            ensure_storage_dirs(self.root)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as exc:
            raise ContentStoreError(f"Could not store {path}: {exc}") from exc
        logger.info("Stored attachment %s (%d bytes)", path, len(content))
        return self.url_for(path)

    def url_for(self, path: str) -> str:
        return f"{self.download_base_url}/{quote(path)}"

    def open_path(self, path: str) -> Path | None:
        target = resolve_inside(self.root, path)
        if target is None or not target.is_file():
            return None
        return target
