# pitchthesis/domain/services/lookup.py
from sqlmodel import Session

from pitchthesis.core.errors import NotFoundError
from pitchthesis.core.logging import get_logger
from pitchthesis.domain.services.rendering import render_report_pdf
from pitchthesis.repositories.theses import get_thesis

log = get_logger("lookup")


def render_stored_report(db: Session, thesis_id: int) -> bytes:
    """
    Re-render a persisted thesis to PDF. Nothing is read from or written to blob storage.
    """
    row = get_thesis(db, thesis_id)
    if row is None:
        raise NotFoundError(f"thesis {thesis_id} not found")
    pdf = render_report_pdf(row.thesis)
    log.info("report_rendered", extra={"thesis_id": thesis_id, "bytes": len(pdf)})
    return pdf
