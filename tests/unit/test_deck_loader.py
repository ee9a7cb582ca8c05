from pathlib import Path
from typing import Callable

import pytest

from pitchthesis.core.errors import ExtractionError
from pitchthesis.utils.deck_loader import (
    PdfDeckExtractor,
    PptxDeckExtractor,
    extractor_for,
    flatten_slides,
)


def _write(tmp_path: Path, name: str, data: bytes) -> str:
    p = tmp_path / name
    p.write_bytes(data)
    return str(p)


class TestFlattenSlides:
    def test_three_slide_scenario(self) -> None:
        slides = [["Market"], ["Problem: X"], ["Solution: Y"]]
        assert flatten_slides(slides) == "Market\n\nProblem: X\n\nSolution: Y"

    def test_fragments_joined_by_newline(self) -> None:
        assert flatten_slides([["a", "b"], ["c"]]) == "a\nb\n\nc"

    def test_no_slides(self) -> None:
        assert flatten_slides([]) == ""


class TestPptxDeckExtractor:
    def test_reads_slides_in_order(self, tmp_path: Path, make_pptx: Callable) -> None:
        path = _write(tmp_path, "deck.pptx", make_pptx([["Market"], ["Problem: X"], ["Solution: Y"]]))
        assert PptxDeckExtractor().extract(path) == [["Market"], ["Problem: X"], ["Solution: Y"]]

    def test_multiple_fragments_per_slide(self, tmp_path: Path, make_pptx: Callable) -> None:
        path = _write(tmp_path, "deck.pptx", make_pptx([["Traction", "10k MAU"]]))
        assert PptxDeckExtractor().extract(path) == [["Traction", "10k MAU"]]

    def test_empty_slide_yields_no_fragments(self, tmp_path: Path, make_pptx: Callable) -> None:
        path = _write(tmp_path, "deck.pptx", make_pptx([["Intro"], []]))
        assert PptxDeckExtractor().extract(path) == [["Intro"], []]

    @pytest.mark.parametrize("data", [b"", b"this is not a zip", b"PK\x03\x04garbage"])
    def test_garbage_raises_extraction_error(self, tmp_path: Path, data: bytes) -> None:
        path = _write(tmp_path, "deck.pptx", data)
        with pytest.raises(ExtractionError):
            PptxDeckExtractor().extract(path)


class TestPdfDeckExtractor:
    def test_pages_are_slides(self, tmp_path: Path, deck_pdf_bytes: bytes) -> None:
        slides = PdfDeckExtractor().extract(_write(tmp_path, "deck.pdf", deck_pdf_bytes))
        assert len(slides) == 2
        assert slides[0] == ["Market", "Large and growing"]
        assert slides[1] == ["Team"]

    def test_garbage_raises_extraction_error(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError):
            PdfDeckExtractor().extract(_write(tmp_path, "deck.pdf", b"not a pdf"))


class TestExtractorFor:
    def test_by_extension(self) -> None:
        assert isinstance(extractor_for("deck.PPTX"), PptxDeckExtractor)
        assert isinstance(extractor_for("deck.pdf"), PdfDeckExtractor)

    def test_by_media_type_when_extension_unknown(self) -> None:
        assert isinstance(extractor_for("upload", "application/pdf"), PdfDeckExtractor)

    def test_unknown_defaults_to_pptx(self) -> None:
        assert isinstance(extractor_for("blob.bin", "application/octet-stream"), PptxDeckExtractor)
