# stockroom/routes/websockets.py
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from stockroom.services.websockets.manager import manager
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/stock-updates")
async def stock_updates_endpoint(websocket: WebSocket):
    await manager.connect(websocket)
    try:
        while True:
            # Clients only listen; inbound frames just keep the connection alive
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.info("Stock updates client disconnected")
