# pitchthesis/api/v1/deps.py
from fastapi import Depends, HTTPException, Request, Response

from pitchthesis.config import Settings
from pitchthesis.core.errors import RateLimitError
from pitchthesis.core.observability import ADMISSION_DENIED
from pitchthesis.domain.services.admission import AdmissionGate
from pitchthesis.domain.services.analysis import AnalysisStage
from pitchthesis.domain.services.extraction import ExtractionStage
from pitchthesis.domain.services.publication import ArtifactPublisher

# Everything below reads collaborators off app.state, which create_app() fills once.

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_gate(request: Request) -> AdmissionGate:
    return request.app.state.gate

def get_publisher(request: Request) -> ArtifactPublisher:
    return ArtifactPublisher(request.app.state.blob_store)

def get_extraction_stage(
    request: Request,
    publisher: ArtifactPublisher = Depends(get_publisher),
) -> ExtractionStage:
    return ExtractionStage(publisher, scratch_dir=request.app.state.settings.upload_dir)

def get_analysis_stage(request: Request) -> AnalysisStage:
    return AnalysisStage(request.app.state.settings, completion=request.app.state.completion)

def client_identity(request: Request) -> str:
    return request.client.host if request.client else "unknown"

def enforce_rate_limit(
    request: Request,
    response: Response,
    gate: AdmissionGate = Depends(get_gate),
) -> None:
    """
    Admission gate for the expensive routes. Same budget for /upload and /analyze.
    """
    identity = client_identity(request)
    try:
        gate.require(identity)
    except RateLimitError as e:
        ADMISSION_DENIED.inc()
        raise HTTPException(status_code=429, detail=str(e))
    response.headers["X-RateLimit-Limit"] = str(gate.limit)
    response.headers["X-RateLimit-Remaining"] = str(gate.remaining(identity))
