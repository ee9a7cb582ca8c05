# pitchthesis/main.py
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from pitchthesis.adapters.storage.s3_store import S3BlobStore, build_blob_store
from pitchthesis.api.v1.routers import auth, pipeline, reports
from pitchthesis.config import Settings, settings as default_settings
from pitchthesis.core.logging import get_logger
from pitchthesis.core.observability import ObservabilityMiddleware, metrics_router
from pitchthesis.db.core import build_engine, init_db
from pitchthesis.domain.services.admission import AdmissionGate
from pitchthesis.domain.services.analysis import Completion

log = get_logger("main")


def create_app(
    settings: Optional[Settings] = None,
    *,
    blob_store: Optional[S3BlobStore] = None,
    completion: Optional[Completion] = None,
    engine: Optional[Engine] = None,
    gate: Optional[AdmissionGate] = None,
) -> FastAPI:
    """
    Build the API with its collaborators. Anything not passed in is built from settings;
    the admission gate lives exactly as long as the app.
    """
    cfg = settings or default_settings
    app = FastAPI(title="Pitch Deck Thesis Generator")

    app.state.settings = cfg
    app.state.gate = gate or AdmissionGate()
    app.state.blob_store = blob_store or build_blob_store(cfg)
    app.state.completion = completion
    app.state.engine = engine or build_engine(cfg)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ObservabilityMiddleware)

    @app.on_event("startup")
    def on_startup():
        init_db(app.state.engine)
        log.info("startup", extra={"env": cfg.app_env, "bucket_configured": bool(cfg.s3_bucket_name)})

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.gate.reset()

    # Routers
    app.include_router(auth.router)
    app.include_router(pipeline.router)
    app.include_router(reports.router)
    app.include_router(metrics_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
