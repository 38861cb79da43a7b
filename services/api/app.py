from __future__ import annotations

import tempfile
import time
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, generate_latest

from modules.imaging.persistence import default_output_dir
from .config import get_settings
from .metrics import REGISTRY
from .routes import router as v1_router


_HEALTH_HITS = Counter("ig_api_healthz_hits", "Health endpoint hits", registry=REGISTRY)
_READY_GAUGE = Gauge("ig_api_ready", "Readiness status (1=ready, 0=not)", registry=REGISTRY)


def _check_credentials(api_key: str | None) -> None:
    if not api_key:
        raise RuntimeError("credentials readiness requested but OPENAI_API_KEY not set")


def _check_storage(output_dir: str | None) -> None:
    target = Path(output_dir) if output_dir else default_output_dir()
    target.mkdir(parents=True, exist_ok=True)
    # Probe write access with a throwaway file
    with tempfile.NamedTemporaryFile(dir=target, prefix=".ready-", delete=True):
        pass


def create_app() -> FastAPI:
    app = FastAPI(title="Image Generation Server", version="1.0.0", docs_url=None, redoc_url=None)

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        _HEALTH_HITS.inc()
        return {"status": "ok", "ts": int(time.time())}

    @app.get("/readyz")
    def readyz() -> Any:
        settings = get_settings()
        checks = {c.strip() for c in settings.ready_checks.split(",") if c.strip()}
        try:
            if "credentials" in checks:
                _check_credentials(settings.openai_api_key)
            if "storage" in checks:
                _check_storage(settings.output_dir)
            _READY_GAUGE.set(1)
            return {"status": "ready"}
        except Exception as exc:  # noqa: BLE001
            _READY_GAUGE.set(0)
            return Response(content=f"not ready: {exc}", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    if get_settings().metrics_enabled:

        @app.get("/metrics")
        def metrics() -> Response:
            output = generate_latest(REGISTRY)
            return Response(output, media_type=CONTENT_TYPE_LATEST)

    app.include_router(v1_router)

    return app


app = create_app()
