from fastapi import APIRouter, WebSocket, WebSocketDisconnect


from app.services import notification_service


router = APIRouter()


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket):
    """
    Stream admin notifications (carCreated, carUpdated, carDeleted, newOrder, newMessage)
    as ``{"event", "data"}`` JSON messages. Incoming messages are ignored.
    """
    await notification_service.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        notification_service.disconnect(websocket)
