import io
from typing import Callable, Dict, List, Optional, Tuple

import pytest
from pptx import Presentation
from pptx.util import Inches
from pypdf import PdfReader
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from pitchthesis.config import Settings
from pitchthesis.core.errors import StorageError


class FakeBlobStore:
    """In-memory stand-in for S3BlobStore."""

    def __init__(self, fail_put: bool = False, fail_sign: bool = False) -> None:
        self.objects: Dict[str, Tuple[bytes, str]] = {}
        self.signed: List[Tuple[str, int]] = []
        self.deleted: List[str] = []
        self.fail_put = fail_put
        self.fail_sign = fail_sign

    def put(self, key: str, body: bytes, content_type: str) -> None:
        if self.fail_put:
            raise StorageError(f"upload of {key} failed")
        self.objects[key] = (body, content_type)

    def signed_url(self, key: str, expires_in: int) -> str:
        if self.fail_sign:
            raise StorageError(f"signing {key} failed")
        self.signed.append((key, expires_in))
        return f"https://test-bucket.s3.amazonaws.com/{key}?X-Amz-Expires={expires_in}"

    def delete(self, key: str) -> None:
        self.deleted.append(key)
        self.objects.pop(key, None)

    def body_for_url(self, url: str) -> bytes:
        key = url.split(".amazonaws.com/", 1)[1].split("?", 1)[0]
        return self.objects[key][0]


def _pdf_text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join((p.extract_text() or "") for p in reader.pages)


@pytest.fixture()
def pdf_text() -> Callable[[bytes], str]:
    return _pdf_text


@pytest.fixture()
def make_blob_store() -> Callable[..., FakeBlobStore]:
    return FakeBlobStore


@pytest.fixture()
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        xai_api_key="",
        s3_bucket_name="test-bucket",
        database_url="sqlite://",
        jwt_secret="test-secret",
        llm_timeout_seconds=2,
    )


@pytest.fixture()
def engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def make_pptx() -> Callable[[List[List[str]]], bytes]:
    """Build a .pptx in memory: one blank slide per entry, one text box per fragment."""

    def _make(slides: List[List[str]]) -> bytes:
        prs = Presentation()
        blank = prs.slide_layouts[6]
        for fragments in slides:
            slide = prs.slides.add_slide(blank)
            for i, fragment in enumerate(fragments):
                box = slide.shapes.add_textbox(Inches(1), Inches(1 + i), Inches(6), Inches(1))
                box.text_frame.text = fragment
        buf = io.BytesIO()
        prs.save(buf)
        return buf.getvalue()

    return _make


@pytest.fixture()
def deck_pdf_bytes() -> bytes:
    """Two-page PDF deck with known lines on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Market")
    c.drawString(72, 700, "Large and growing")
    c.showPage()
    c.drawString(72, 720, "Team")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def completion_returning() -> Callable[[Optional[str]], Callable[[str, str], str]]:
    def _factory(content: Optional[str]) -> Callable[[str, str], str]:
        def _complete(system: str, user: str) -> str:
            return content  # type: ignore[return-value]
        return _complete
    return _factory


@pytest.fixture()
def completion_raising() -> Callable[[Exception], Callable[[str, str], str]]:
    def _factory(exc: Exception) -> Callable[[str, str], str]:
        def _complete(system: str, user: str) -> str:
            raise exc
        return _complete
    return _factory
