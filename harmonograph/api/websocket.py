"""
WebSocket endpoint for live canvas control.
"""

from typing import Dict
import asyncio
import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from harmonograph.core.exceptions import HarmonographError, SessionError, ValidationError
from harmonograph.core.logging import bind_session, clear_session, get_logger
from harmonograph.visual.session import CanvasSession

logger = get_logger(__name__)

router = APIRouter()


class ConnectionManager:
    """
    Manages WebSocket connections and their canvas sessions.
    """

    def __init__(self) -> None:
        self.active_connections: Dict[str, WebSocket] = {}
        self.sessions: Dict[str, CanvasSession] = {}

    async def connect(self, websocket: WebSocket, session_id: str) -> CanvasSession:
        """
        Accept a connection and give it a fresh canvas session.

        Raises:
            SessionError: If the session id is already connected
        """
        await websocket.accept()
        if session_id in self.active_connections:
            await websocket.send_json({
                "type": "error",
                "code": "SESSION_ALREADY_ACTIVE",
                "message": "Session is already connected"
            })
            await websocket.close(code=1008)
            raise SessionError(f"Session already connected: {session_id}")

        self.active_connections[session_id] = websocket
        session = CanvasSession()
        self.sessions[session_id] = session
        logger.info("websocket_connected", session_id=session_id)
        return session

    def disconnect(self, session_id: str) -> None:
        """Remove a WebSocket connection and drop its session."""
        self.active_connections.pop(session_id, None)
        self.sessions.pop(session_id, None)
        logger.info("websocket_disconnected", session_id=session_id)

    async def send_message(self, session_id: str, message: dict) -> bool:
        """
        Send message to a specific session.

        Returns:
            True if sent successfully, False if connection doesn't exist
        """
        websocket = self.active_connections.get(session_id)
        if websocket and websocket.client_state == WebSocketState.CONNECTED:
            await websocket.send_json(message)
            return True
        return False


# Global connection manager
manager = ConnectionManager()


async def send_render(session_id: str, session: CanvasSession) -> None:
    """Send the current state of a session to its canvas."""
    await manager.send_message(session_id, {
        "type": "render",
        "data": session.state(),
        "timestamp": asyncio.get_event_loop().time()
    })


async def send_error(session_id: str, code: str, message: str) -> None:
    await manager.send_message(session_id, {
        "type": "error",
        "code": code,
        "message": message
    })


@router.websocket("/ws/canvas/{session_id}")
async def websocket_endpoint(websocket: WebSocket, session_id: str):
    """
    WebSocket endpoint for live parameter control.

    Client sends:
    - set_parameter: {name, value} change one control
    - set_parameters: {parameters} change several controls
    - randomize: draw random parameters
    - reset: restore defaults
    - get_state: resend the current render
    - export_svg: request the SVG document

    Server sends:
    - render: parameters and smoothed path data
    - svg_export: filename and SVG text
    - error: error messages
    """
    try:
        session = await manager.connect(websocket, session_id)
    except SessionError as e:
        logger.warning("websocket_rejected", session_id=session_id, error=e.message)
        return

    bind_session(session_id)

    try:
        session.render()
        await send_render(session_id, session)

        while True:
            text = await websocket.receive_text()
            message_type = None

            try:
                message = parse_message(text)
                message_type = message.get("type")

                if message_type == "set_parameter":
                    await handle_set_parameter(session_id, session, message)

                elif message_type == "set_parameters":
                    await handle_set_parameters(session_id, session, message)

                elif message_type == "randomize":
                    session.randomize()
                    await send_render(session_id, session)

                elif message_type == "reset":
                    session.reset()
                    await send_render(session_id, session)

                elif message_type == "get_state":
                    await send_render(session_id, session)

                elif message_type == "export_svg":
                    await handle_export_svg(session_id, session)

                else:
                    await send_error(
                        session_id,
                        "UNKNOWN_MESSAGE_TYPE",
                        f"Unknown message type: {message_type}"
                    )

            except HarmonographError as e:
                logger.warning(
                    "websocket_message_rejected",
                    message_type=message_type,
                    error_code=e.code,
                    error=e.message
                )
                await send_error(session_id, e.code, e.message)

    except WebSocketDisconnect:
        logger.info("websocket_client_disconnected", session_id=session_id)

    except Exception as e:
        logger.exception(
            "websocket_error",
            session_id=session_id,
            error=str(e)
        )
        await send_error(session_id, "WEBSOCKET_ERROR", str(e))
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close(code=1011)

    finally:
        manager.disconnect(session_id)
        clear_session()


def parse_message(text: str) -> dict:
    """
    Decode one client message.

    Raises:
        ValidationError: If the text is not a JSON object
    """
    try:
        message = json.loads(text)
    except json.JSONDecodeError:
        raise ValidationError("Message is not valid JSON")

    if not isinstance(message, dict):
        raise ValidationError("Message must be a JSON object")
    return message


async def handle_set_parameter(session_id: str, session: CanvasSession, message: dict) -> None:
    """Handle set_parameter message."""
    name = message.get("name")
    if not isinstance(name, str) or "value" not in message:
        raise ValidationError("set_parameter requires 'name' and 'value'")

    session.set_parameter(name, message["value"])
    await send_render(session_id, session)


async def handle_set_parameters(session_id: str, session: CanvasSession, message: dict) -> None:
    """Handle set_parameters message."""
    parameters = message.get("parameters")
    if not isinstance(parameters, dict):
        raise ValidationError("set_parameters requires a 'parameters' object")

    session.update(parameters)
    await send_render(session_id, session)


async def handle_export_svg(session_id: str, session: CanvasSession) -> None:
    """Handle export_svg message."""
    filename, svg = session.export_svg()
    await manager.send_message(session_id, {
        "type": "svg_export",
        "data": {
            "filename": filename,
            "svg": svg
        }
    })
