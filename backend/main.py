"""Spine Match Backend: FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routes import spine
from spine_engine import __version__
from spine_engine.calibration import calibration_from_env
from spine_engine.match import SpineMatchEngine

load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    # SPINE_* variables override the default calibration
    calibration = calibration_from_env()
    app.state.engine = SpineMatchEngine(calibration)
    logger.info("Spine match engine ready (K_spine=%.3f, tolerance=%.2f)",
                calibration.k_spine_calibration, calibration.match_tolerance)
    yield


app = FastAPI(
    title="Spine Match API",
    description="Arrow spine, launch speed and FOC calculator for compound and traditional bows",
    version=__version__,
    lifespan=lifespan,
)

# CORS: allow frontend origins
_frontend_url = os.getenv("FRONTEND_URL")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(spine.router, prefix="/api", tags=["Spine Match"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "spine-match-backend"}
