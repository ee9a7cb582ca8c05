from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pypdf import PdfReader

from pitchthesis.core.errors import ExtractionError

# ordered slides, each an ordered list of text fragments
Slides = List[List[str]]


class DeckExtractor(ABC):
    """Contract for deck text extractors: file path in, slides of fragments out."""

    @abstractmethod
    def extract(self, path: str) -> Slides:
        """
        Raises:
            ExtractionError: if the file cannot be parsed as this deck format.
        """


def _clean(fragment: str) -> str:
    # python-pptx renders soft line breaks as vertical tabs
    return (fragment or "").replace("\v", "\n").strip()


def _shape_fragments(shapes: Iterable) -> List[str]:
    out: List[str] = []
    for shape in shapes:
        if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
            out.extend(_shape_fragments(shape.shapes))
        elif shape.has_text_frame:
            out.extend(t for t in (_clean(p.text) for p in shape.text_frame.paragraphs) if t)
        elif shape.has_table:
            for row in shape.table.rows:
                out.extend(t for t in (_clean(c.text) for c in row.cells) if t)
    return out


class PptxDeckExtractor(DeckExtractor):
    """PowerPoint decks via python-pptx; shapes are read in slide z-order."""

    def extract(self, path: str) -> Slides:
        try:
            prs = Presentation(path)
            return [_shape_fragments(slide.shapes) for slide in prs.slides]
        except Exception as e:
            raise ExtractionError(f"Could not read PPTX deck: {e}") from e


class PdfDeckExtractor(DeckExtractor):
    """PDF exports of decks: one page is one slide, each text line a fragment."""

    def extract(self, path: str) -> Slides:
        try:
            with open(path, "rb") as f:
                reader = PdfReader(f)
                slides: Slides = []
                for page in reader.pages:
                    lines = (page.extract_text() or "").splitlines()
                    slides.append([ln.strip() for ln in lines if ln.strip()])
            return slides
        except Exception as e:
            raise ExtractionError(f"Could not read PDF deck: {e}") from e


_BY_EXTENSION: Dict[str, type[DeckExtractor]] = {
    ".pptx": PptxDeckExtractor,
    ".pdf": PdfDeckExtractor,
}

_BY_MEDIA_TYPE: Dict[str, type[DeckExtractor]] = {
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": PptxDeckExtractor,
    "application/pdf": PdfDeckExtractor,
}


def extractor_for(filename: str, media_type: Optional[str] = None) -> DeckExtractor:
    """
    Pick an extractor by file extension, then by declared media type.
    Anything unrecognised goes to the PPTX extractor, which rejects non-decks.
    """
    ext = os.path.splitext(filename or "")[1].lower()
    cls = _BY_EXTENSION.get(ext) or _BY_MEDIA_TYPE.get((media_type or "").lower())
    return (cls or PptxDeckExtractor)()


def flatten_slides(slides: Slides) -> str:
    """Fragments joined by newline, slides separated by a blank line."""
    return "\n\n".join("\n".join(fragments) for fragments in slides)
