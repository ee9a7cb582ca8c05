from pathlib import Path
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from pitchthesis.config import Settings
from pitchthesis.domain.services.admission import AdmissionGate
from pitchthesis.main import create_app


@pytest.fixture()
def make_client(settings: Settings, engine, blob_store, tmp_path: Path) -> Callable[..., TestClient]:
    """
    Build a TestClient around a fresh app. Use it as a context manager so
    startup (table creation) runs.
    """

    def _make(
        *,
        completion: Optional[Callable[[str, str], str]] = None,
        store=None,
        **overrides,
    ) -> TestClient:
        cfg = settings.model_copy(update={"upload_dir": str(tmp_path / "scratch"), **overrides})
        app = create_app(
            cfg,
            blob_store=store or blob_store,
            completion=completion,
            engine=engine,
            gate=AdmissionGate(),
        )
        return TestClient(app)

    return _make


@pytest.fixture()
def client(make_client: Callable[..., TestClient]):
    with make_client() as c:
        yield c
