# pitchthesis/api/v1/routers/pipeline.py
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session

from pitchthesis.api.v1.deps import (
    enforce_rate_limit,
    get_analysis_stage,
    get_extraction_stage,
    get_publisher,
)
from pitchthesis.api.v1.routers.auth import get_optional_user
from pitchthesis.api.v1.schemas import AnalyzeReq, AnalyzeResp, UploadResp, User
from pitchthesis.core.errors import ExtractionError, StorageError, ValidationError
from pitchthesis.core.logging import get_logger
from pitchthesis.db.core import get_session
from pitchthesis.domain.services.analysis import AnalysisStage
from pitchthesis.domain.services.extraction import ExtractionStage, UploadedDeck
from pitchthesis.domain.services.publication import ArtifactCategory, ArtifactPublisher
from pitchthesis.domain.services.rendering import render_report_pdf
from pitchthesis.repositories.theses import create_thesis

log = get_logger("pipeline")

router = APIRouter(tags=["pipeline"], dependencies=[Depends(enforce_rate_limit)])


@router.post("/upload", response_model=UploadResp)
async def upload_deck(
    file: Optional[UploadFile] = File(default=None),
    stage: ExtractionStage = Depends(get_extraction_stage),
):
    """
    POST /upload (multipart, field `file`)
    Extracts slide text and archives the original deck behind a 24h link.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    deck = UploadedDeck(
        data=await file.read(),
        filename=file.filename or "deck.pptx",
        media_type=file.content_type or "application/octet-stream",
    )
    try:
        result = await stage.run(deck)
    except (ExtractionError, StorageError) as e:
        log.error("upload_failed", extra={"deck_name": deck.filename, "error": str(e)})
        raise HTTPException(status_code=500, detail="Error uploading or parsing deck file")

    return UploadResp(
        message="File uploaded and parsed successfully",
        text=result.text,
        download_url=result.download_url,
    )


@router.post("/analyze", response_model=AnalyzeResp)
async def analyze_text(
    req: AnalyzeReq,
    stage: AnalysisStage = Depends(get_analysis_stage),
    publisher: ArtifactPublisher = Depends(get_publisher),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_session),
):
    """
    POST /analyze { text }
    Thesis -> PDF -> blob store; the thesis is also saved so /report/{id} can re-render it.
    """
    try:
        result = await stage.run(req.text)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    pdf = render_report_pdf(result.thesis)
    try:
        url = await publisher.publish(pdf, ArtifactCategory.REPORT, content_type="application/pdf")
    except StorageError as e:
        log.error("analysis_publish_failed", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="An error occurred during analysis.")

    row = await run_in_threadpool(
        create_thesis,
        db,
        text=req.text,
        thesis=result.thesis,
        user_id=user.id if user else None,
        provenance=result.provenance.value,
    )
    return AnalyzeResp(download_url=url, report_id=row.id)
