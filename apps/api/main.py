from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from apps.api.routers.assess import router as assess_router
from packages.caselogic.drugs import classify_drug

logger = logging.getLogger(__name__)

app = FastAPI(title="Doctor Portal Case Logic API")
app.include_router(assess_router)


@app.get("/")
def root() -> dict:
    return {
        "name": "doctor-portal-caselogic",
        "status": "ok",
        "endpoints": ["/healthz", "/readyz", "/v1/cases/assess", "/v1/drugs/classify"],
    }


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


@app.get("/readyz")
def readyz() -> JSONResponse:
    try:
        # reference lists must load and keep controlled precedence
        if classify_drug("Paracetamol with Codeine").type != "Controlled":
            raise RuntimeError("drug reference lists are inconsistent")
    except Exception as exc:
        logger.error("readiness check failed: %s", exc)
        return JSONResponse(status_code=500, content={"status": "error", "detail": str(exc)})
    return JSONResponse(status_code=200, content={"status": "ok"})


__all__ = ["app"]
