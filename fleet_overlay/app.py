import asyncio
import json
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from . import config as C
from .api.deps import get_shared
from .api.routes import router
from .services.overlay_service import get_overlay_service, is_localized

logger = logging.getLogger(__name__)

app = FastAPI(title="Fleet AR Overlay")

# CORS for both HTTP and WS (allow all origins; credentials False to keep wildcard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


# ---------------------- WS: Overlay stream ---------------
@app.websocket("/ws/overlay")
async def ws_overlay(ws: WebSocket):
    """
    Pushes localizer events as they are queued, and the overlay whenever a
    new trajectory batch has been paired (only once localized).
    """
    await ws.accept()
    shared = get_shared()
    period = 1.0 / C.OVERLAY_WS_HZ
    last_sent_t = None

    try:
        while True:
            events: List[Dict[str, Any]] = []
            with shared.lock:
                while shared.events:
                    events.append(shared.events.popleft())
                t = shared.query_time_ms

            for ev in events:
                await ws.send_text(json.dumps(ev))

            if t is not None and t != last_sent_t and is_localized(shared):
                overlay = get_overlay_service(shared)
                if overlay is not None:
                    await ws.send_text(json.dumps({"type": "overlay", **overlay.model_dump()}))
                    last_sent_t = t

            await asyncio.sleep(period)
    except WebSocketDisconnect:
        logger.debug("[ws] overlay client disconnected")
        return
