import asyncio
from typing import Callable

import pytest

from pitchthesis.core.errors import StorageError
from pitchthesis.domain.services.publication import (
    SIGNED_URL_TTL_SECONDS,
    ArtifactCategory,
    ArtifactPublisher,
    storage_key,
)


class TestStorageKey:
    def test_report_key(self) -> None:
        assert storage_key(ArtifactCategory.REPORT, 1700000000000) == "reports/report-1700000000000.pdf"

    def test_original_key_keeps_filename(self) -> None:
        assert storage_key(ArtifactCategory.ORIGINAL, 42, "Seed Deck.pptx") == "decks/42-Seed_Deck.pptx"

    def test_original_key_strips_path_tricks(self) -> None:
        assert storage_key(ArtifactCategory.ORIGINAL, 42, "../../etc/passwd") == "decks/42-etc_passwd"

    def test_original_key_without_filename(self) -> None:
        assert storage_key(ArtifactCategory.ORIGINAL, 7, "") == "decks/7-deck"


class TestArtifactPublisher:
    @pytest.mark.parametrize("category", list(ArtifactCategory))
    def test_url_always_expires_in_24h(self, blob_store, category: ArtifactCategory) -> None:
        publisher = ArtifactPublisher(blob_store, clock=lambda: 1700000000.0)
        url = asyncio.run(publisher.publish(b"bytes", category, content_type="application/pdf", filename="d.pptx"))
        assert SIGNED_URL_TTL_SECONDS == 86400
        assert blob_store.signed[-1][1] == 86400
        assert "X-Amz-Expires=86400" in url

    def test_put_then_sign(self, blob_store) -> None:
        publisher = ArtifactPublisher(blob_store, clock=lambda: 1.5)
        url = asyncio.run(publisher.publish(b"%PDF", ArtifactCategory.REPORT, content_type="application/pdf"))
        assert blob_store.objects["reports/report-1500.pdf"] == (b"%PDF", "application/pdf")
        assert blob_store.body_for_url(url) == b"%PDF"

    def test_put_failure_propagates(self, make_blob_store: Callable) -> None:
        store = make_blob_store(fail_put=True)
        publisher = ArtifactPublisher(store)
        with pytest.raises(StorageError):
            asyncio.run(publisher.publish(b"x", ArtifactCategory.REPORT, content_type="application/pdf"))
        assert store.signed == []

    def test_sign_failure_deletes_orphan(self, make_blob_store: Callable) -> None:
        store = make_blob_store(fail_sign=True)
        publisher = ArtifactPublisher(store, clock=lambda: 2.0)
        with pytest.raises(StorageError):
            asyncio.run(publisher.publish(b"x", ArtifactCategory.REPORT, content_type="application/pdf"))
        assert store.deleted == ["reports/report-2000.pdf"]
        assert store.objects == {}
