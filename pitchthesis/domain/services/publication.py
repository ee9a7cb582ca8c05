# pitchthesis/domain/services/publication.py
import re
import time
from enum import Enum
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from pitchthesis.adapters.storage.s3_store import S3BlobStore
from pitchthesis.core.errors import StorageError
from pitchthesis.core.logging import get_logger

log = get_logger("publication")

SIGNED_URL_TTL_SECONDS = 24 * 60 * 60


class ArtifactCategory(str, Enum):
    ORIGINAL = "original"
    REPORT = "report"


def _safe_name(filename: str) -> str:
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", (filename or "").strip()).strip("._")
    return name or "deck"


def storage_key(category: ArtifactCategory, millis: int, filename: Optional[str] = None) -> str:
    """
    decks/<ms>-<filename>     for archived uploads
    reports/report-<ms>.pdf   for rendered theses
    """
    if category is ArtifactCategory.REPORT:
        return f"reports/report-{millis}.pdf"
    return f"decks/{millis}-{_safe_name(filename)}"


class ArtifactPublisher:
    """Uploads bytes to the blob store and mints a 24h signed read url."""

    def __init__(self, store: S3BlobStore, clock: Callable[[], float] = time.time):
        self.store = store
        self._clock = clock

    async def publish(
        self,
        data: bytes,
        category: ArtifactCategory,
        *,
        content_type: str,
        filename: Optional[str] = None,
    ) -> str:
        key = storage_key(category, int(self._clock() * 1000), filename)
        await run_in_threadpool(self.store.put, key, data, content_type)
        try:
            url = await run_in_threadpool(self.store.signed_url, key, SIGNED_URL_TTL_SECONDS)
        except StorageError:
            # don't leave an object nobody can be handed a link to
            try:
                await run_in_threadpool(self.store.delete, key)
            except StorageError as cleanup_err:
                log.warning("orphan_cleanup_failed", extra={"key": key, "error": str(cleanup_err)})
            raise
        log.info("artifact_published", extra={"key": key, "category": category.value, "bytes": len(data)})
        return url
