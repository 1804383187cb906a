# fleet_overlay/api/routes/localization.py
"""
Marker sighting and alignment routes.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..deps import get_shared
from ...models import AlignmentResponse, LocalizationResponse, MarkerBatch
from ...services.localization_service import get_alignment_service, localize_service

router = APIRouter(tags=["localization"])


@router.post("/markers", response_model=LocalizationResponse)
def markers(batch: MarkerBatch):
    """Feed one frame's marker sightings to the localizer."""
    try:
        return localize_service(get_shared(), batch)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})


@router.get("/alignment", response_model=AlignmentResponse)
def alignment():
    """Active device->world transform."""
    out = get_alignment_service(get_shared())
    if out is None:
        return JSONResponse(status_code=404, content={"error": "not localized"})
    return out
