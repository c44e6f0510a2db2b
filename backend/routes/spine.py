"""Spine match routes: form snapshot → SpineMatchResult."""

import logging

from fastapi import APIRouter, HTTPException, Request

from backend.models import (
    CalibrationResponse,
    PointSweepEntry,
    PointSweepRequest,
    PointSweepResponse,
    SpineMatchRequest,
)
from spine_engine.match import SpineMatchEngine
from spine_engine.models import SpineMatchResult

logger = logging.getLogger(__name__)

router = APIRouter()

_fallback_engine = SpineMatchEngine()


def get_engine(request: Request) -> SpineMatchEngine:
    """Engine built at startup, or the default-calibrated one when running without lifespan."""
    return getattr(request.app.state, "engine", None) or _fallback_engine


@router.post("/spine-match", response_model=SpineMatchResult)
async def spine_match(request: Request, body: SpineMatchRequest):
    """Evaluate how well an arrow matches a bow. Missing inputs yield null fields, not errors."""
    engine = get_engine(request)
    try:
        return engine.compute(body.bow, body.arrow, body.string_weights, body.temperature_f)
    except Exception:
        logger.error("Spine match calculation failed", exc_info=True)
        raise HTTPException(status_code=500, detail="Spine match calculation failed. Please try again.")


@router.post("/spine-match/point-sweep", response_model=PointSweepResponse)
async def point_sweep(request: Request, body: PointSweepRequest):
    """Evaluate the same setup across several point weights."""
    engine = get_engine(request)
    try:
        results = engine.sweep_point_weights(
            body.bow, body.arrow, body.string_weights, body.point_weights, body.temperature_f,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.error("Point weight sweep failed", exc_info=True)
        raise HTTPException(status_code=500, detail="Point weight sweep failed. Please try again.")

    return PointSweepResponse(results=[
        PointSweepEntry(point_weight=weight, result=result)
        for weight, result in zip(body.point_weights, results)
    ])


@router.get("/calibration", response_model=CalibrationResponse)
async def get_calibration(request: Request):
    """Calibration constants the engine is running with."""
    return CalibrationResponse(values=get_engine(request).calibration.to_dict())
