# pitchthesis/api/v1/routers/reports.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from pitchthesis.core.errors import NotFoundError
from pitchthesis.db.core import get_session
from pitchthesis.domain.services.lookup import render_stored_report
from pitchthesis.domain.services.rendering import REPORT_FILENAME

router = APIRouter(tags=["reports"])


@router.get("/report/{thesis_id}")
def download_report(thesis_id: str, db: Session = Depends(get_session)):
    """
    GET /report/{id}
    Freshly rendered PDF of a stored thesis, sent as an attachment.
    """
    try:
        if not thesis_id.isdigit():
            raise NotFoundError(thesis_id)
        pdf = render_stored_report(db, int(thesis_id))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Report not found")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
    )
