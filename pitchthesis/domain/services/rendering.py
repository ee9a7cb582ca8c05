# pitchthesis/domain/services/rendering.py
import re
from io import BytesIO
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, XPreformatted

REPORT_TITLE = "Investment Thesis Report"
REPORT_FILENAME = "report.pdf"
TAB = "    "

_base = getSampleStyleSheet()
TITLE_STYLE = ParagraphStyle(
    "ThesisTitle", parent=_base["Title"], fontName="Helvetica", fontSize=25, leading=30, alignment=TA_CENTER
)
BODY_STYLE = ParagraphStyle(
    "ThesisBody", parent=_base["Normal"], fontName="Helvetica", fontSize=16, leading=20
)


def _fits(text: str, width: float) -> bool:
    return stringWidth(text, BODY_STYLE.fontName, BODY_STYLE.fontSize) <= width


def wrap_line(line: str, width: float) -> List[str]:
    """
    Greedy wrap at whitespace. Runs of spaces inside a line are kept as written;
    the run a line breaks on is dropped. A word wider than the frame is cut.
    """
    out: List[str] = []
    current = ""
    for token in re.findall(r"\s+|\S+", line):
        if _fits(current + token, width):
            current += token
            continue
        if token.isspace():
            out.append(current)
            current = ""
            continue
        if current.strip():
            out.append(current.rstrip())
        while not _fits(token, width):
            cut = max(len(token) - 1, 1)
            while cut > 1 and not _fits(token[:cut], width):
                cut -= 1
            out.append(token[:cut])
            token = token[cut:]
        current = token
    out.append(current)
    return out


def body_markup(thesis: str, width: float) -> str:
    # XPreformatted keeps spacing but never wraps, so lines are broken to the frame here
    lines = thesis.replace("\r\n", "\n").replace("\t", TAB).split("\n")
    return "\n".join(escape(part) for line in lines for part in wrap_line(line, width))


def render_report_pdf(thesis: str) -> bytes:
    """
    Render a thesis narrative as a PDF and return the finished document bytes.

    Layout: centred title, a paragraph break, then the body in smaller type with
    its spacing and line breaks intact. invariant=1 pins the creation date and
    document id, so equal input gives byte-identical output.
    """
    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=letter, title=REPORT_TITLE, invariant=1)
    story = [Paragraph(REPORT_TITLE, TITLE_STYLE), Spacer(1, BODY_STYLE.leading)]
    if (thesis or "").strip():
        story.append(XPreformatted(body_markup(thesis, doc.width), BODY_STYLE))
    doc.build(story)
    return buf.getvalue()
