# pitchthesis/domain/services/extraction.py
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from pitchthesis.core.errors import ExtractionError
from pitchthesis.core.logging import get_logger
from pitchthesis.domain.services.publication import ArtifactCategory, ArtifactPublisher
from pitchthesis.utils.deck_loader import DeckExtractor, extractor_for, flatten_slides

log = get_logger("extraction")


@dataclass(frozen=True)
class UploadedDeck:
    data: bytes
    filename: str
    media_type: str = "application/octet-stream"


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    download_url: str
    slide_count: int


class ExtractionStage:
    """
    Deck bytes -> flattened slide text, plus an archived copy of the original.

    The payload goes to a scratch file the extractor reads; the file is removed
    on every exit path. The original is archived only after extraction succeeds.
    """

    def __init__(
        self,
        publisher: ArtifactPublisher,
        scratch_dir: Optional[str] = None,
        pick_extractor: Callable[[str, Optional[str]], DeckExtractor] = extractor_for,
    ):
        self.publisher = publisher
        self.scratch_dir = scratch_dir or None
        self._pick_extractor = pick_extractor

    def _extract_from_scratch(self, deck: UploadedDeck) -> list:
        extractor = self._pick_extractor(deck.filename, deck.media_type)
        suffix = os.path.splitext(deck.filename or "")[1] or ".bin"
        if self.scratch_dir:
            os.makedirs(self.scratch_dir, exist_ok=True)
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix, dir=self.scratch_dir) as tmp:
            tmp.write(deck.data)
            tmp_path = tmp.name
        try:
            return extractor.extract(tmp_path)
        finally:
            os.unlink(tmp_path)

    async def run(self, deck: UploadedDeck) -> ExtractionResult:
        if not deck.data:
            raise ExtractionError(f"{deck.filename}: empty deck payload")

        slides = await run_in_threadpool(self._extract_from_scratch, deck)
        text = flatten_slides(slides)
        log.info("extraction_done", extra={"deck_name": deck.filename, "slides": len(slides), "chars": len(text)})

        url = await self.publisher.publish(
            deck.data,
            ArtifactCategory.ORIGINAL,
            content_type=deck.media_type or "application/octet-stream",
            filename=deck.filename,
        )
        return ExtractionResult(text=text, download_url=url, slide_count=len(slides))
