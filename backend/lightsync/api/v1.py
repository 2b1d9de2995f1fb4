"""
LightSync v1 API Routes
Accent color extraction for uploaded images, sync status, and metrics.
"""
import asyncio
import time

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile

from lightsync.config import config
from lightsync.schemas import AccentResponse, ErrorResponse, SyncStatusResponse
from lightsync.services.colors.accent import analyze_accent
from lightsync.services.colors.conversion import rgb_to_hex
from lightsync.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Accent Colors"])


@router.post("/accent", response_model=AccentResponse,
             responses={400: {"model": ErrorResponse, "description": "Unreadable or oversized upload"}},
             summary="Accent color for an image",
             description="Extract a palette, pick the most pleasant color, and normalize its brightness")
async def accent(
    file: UploadFile = File(..., description="Album art or any raster image"),
    k: int = Query(config.COLOR_COUNT, ge=config.MIN_COLOR_COUNT, le=config.MAX_COLOR_COUNT,
                   description="Palette size"),
    target_luma: float = Query(config.TARGET_LUMA, gt=0.0, le=1.0, description="Target luminance"),
):
    try:
        image_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    if len(image_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    # CPU-bound; runs off the event loop
    result = await asyncio.to_thread(analyze_accent, image_bytes, k, target_luma)
    return AccentResponse(**result.to_dict())


@router.get("/status", response_model=SyncStatusResponse)
def status(request: Request):
    """Authorization, polling, and device backoff state."""
    session = request.app.state.session
    last_color = None
    if session.last_color is not None:
        last_color = {"hex": rgb_to_hex(session.last_color), "rgb": list(session.last_color)}

    return SyncStatusResponse(
        authorized=session.authorized,
        polling=session.polling,
        last_track_id=session.last_track_id,
        last_color=last_color,
        backoff_remaining_s=session.backoff_remaining(time.time()),
    )


@router.get("/metrics")
def metrics():
    """In-process metrics summary."""
    return get_metrics().get_summary()
