"""POST /api/segment — region-growing segmentation of an uploaded image."""

from __future__ import annotations

import base64
import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException

from regiongrow.config import Settings
from regiongrow.dependencies import get_settings
from regiongrow.engine.config import SegmentationConfig
from regiongrow.engine.errors import SegmentationError
from regiongrow.engine.growth import segment_with_config
from regiongrow.engine.traversal import get_traversal
from regiongrow.imaging.overlay import overlay_png_bytes
from regiongrow.imaging.source import decode_image
from regiongrow.models.requests import SegmentRequest
from regiongrow.models.responses import RegionInfo, SegmentResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _config_for(req: SegmentRequest, settings: Settings) -> SegmentationConfig:
    defaults = SegmentationConfig.from_settings(settings)
    traversal = req.traversal or defaults.traversal
    try:
        get_traversal(traversal)
    except KeyError as e:
        raise HTTPException(status_code=422, detail=e.args[0]) from e
    return SegmentationConfig(
        grid_exponent=req.grid_exponent if req.grid_exponent is not None else defaults.grid_exponent,
        threshold=req.threshold if req.threshold is not None else defaults.threshold,
        traversal=traversal,
        selection=req.selection or defaults.selection,
    )


@router.post("/segment", response_model=SegmentResponse)
def segment_image(
    req: SegmentRequest,
    settings: Settings = Depends(get_settings),
) -> SegmentResponse:
    try:
        image = decode_image(base64.b64decode(req.image_b64, validate=True))
    except (binascii.Error, OSError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Could not decode image: {e}") from e

    config = _config_for(req, settings)
    try:
        result = segment_with_config(image, config)
    except SegmentationError as e:
        logger.warning("Segmentation rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    overlay = None
    if req.include_overlay:
        png = overlay_png_bytes(image, result, scale=settings.overlay_scale)
        overlay = base64.b64encode(png).decode("ascii")

    return SegmentResponse(
        grid_exponent=config.grid_exponent,
        threshold=config.threshold,
        traversal=config.traversal,
        selection=config.selection,
        region_count=result.region_count,
        merges=len(result.merges),
        sweeps=result.sweeps,
        labels=result.labels().tolist(),
        regions=[RegionInfo(**vars(s)) for s in result.summaries()],
        processing_time_ms=result.elapsed_ms,
        overlay_png_b64=overlay,
    )
