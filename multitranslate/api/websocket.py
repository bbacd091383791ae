"""
WebSocket handlers and stream event delivery
"""
import logging

from flask import request
from flask_socketio import emit

from multitranslate.config import STREAM_EVENT_NAME
from multitranslate.core.events import CallbackEventSink
from multitranslate.core.models import StreamEvent

logger = logging.getLogger('websocket')


def configure_websocket_handlers(socketio):
    """Configure WebSocket event handlers"""

    @socketio.on('connect')
    def handle_websocket_connect():
        logger.info(f'WebSocket client connected: {request.sid}')
        emit('connected', {'message': 'Connected to translation server via WebSocket'})

    @socketio.on('disconnect')
    def handle_websocket_disconnect():
        logger.info(f'WebSocket client disconnected: {request.sid}')


def emit_stream_event(socketio, event: StreamEvent, event_name: str = STREAM_EVENT_NAME):
    """
    Broadcast one stream event to every connected client

    Clients filter on `request_id`; nothing here tracks whether anyone is listening.

    Args:
        socketio: SocketIO instance
        event: Event to send
        event_name: Socket.IO event name
    """
    socketio.emit(event_name, event.to_dict(), namespace='/')


def create_stream_sink(socketio, event_name: str = STREAM_EVENT_NAME) -> CallbackEventSink:
    """Event sink that forwards every StreamEvent over Socket.IO."""
    return CallbackEventSink(lambda event: emit_stream_event(socketio, event, event_name))
