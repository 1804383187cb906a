# fleet_overlay/api/routes/trajectory.py
"""
Trajectory server exchange and overlay routes.
"""
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from ..deps import get_shared
from ...models import OverlayResponse, TimeResponse, TrajectoryRequest, TrajectoryResponse
from ...services.overlay_service import get_overlay_service, is_localized
from ...services.trajectory_service import (
    MissingBatchError,
    ResponseTagError,
    build_time_request,
    build_trajectory_request,
    ingest_time_response,
    ingest_trajectory_response,
)

router = APIRouter(prefix="/trajectory", tags=["trajectory"])


@router.get("/request", response_model=TrajectoryRequest)
def trajectory_request():
    """Payload to send to the trajectory server for the localized level."""
    req = build_trajectory_request(get_shared())
    if req is None:
        return JSONResponse(status_code=404, content={"error": "no level known yet"})
    return req


@router.get("/time_request")
def time_request():
    """Payload asking the trajectory server for its clock."""
    return build_time_request()


@router.post("/response")
def trajectory_response(resp: TrajectoryResponse):
    """Body: the server's trajectory response."""
    try:
        n = ingest_trajectory_response(get_shared(), resp)
    except ResponseTagError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    return {"ok": True, "count": n}


@router.post("/time", response_model=OverlayResponse)
def time_response(resp: TimeResponse):
    """
    Body: the server's time response; pairs it with the parked batch.
    The batch is stored either way, the overlay is only returned once localized.
    """
    shared = get_shared()
    try:
        out = ingest_time_response(shared, resp)
    except ResponseTagError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except MissingBatchError as e:
        return JSONResponse(status_code=409, content={"error": str(e)})
    if not is_localized(shared):
        return JSONResponse(status_code=409, content={"error": "not localized"})
    return out


@router.get("/overlay", response_model=OverlayResponse)
def overlay(
    highlight: Optional[str] = Query(None, description="Robot name to highlight"),
):
    """Overlay for the latest batch; only once the world frame is known."""
    shared = get_shared()
    if not is_localized(shared):
        return JSONResponse(status_code=409, content={"error": "not localized"})
    out = get_overlay_service(shared, highlight)
    if out is None:
        return JSONResponse(status_code=404, content={"error": "no trajectory batch"})
    return out
