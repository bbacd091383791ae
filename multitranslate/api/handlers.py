"""
Dispatch job handlers

Flask views are synchronous, so every dispatch runs on its own event loop: inline
for the aggregate endpoint, on a daemon thread for streaming jobs.
"""
import asyncio
import threading

from multitranslate.core.dispatcher import TranslationDispatcher
from multitranslate.core.models import TranslationRequest, TranslationResponse
from multitranslate.utils.unified_logger import get_logger, LogType
from .websocket import create_stream_sink


def run_dispatch(dispatcher: TranslationDispatcher, request: TranslationRequest) -> TranslationResponse:
    """
    Run an aggregate dispatch to completion on a fresh event loop

    Raises:
        AllProvidersFailedError: no provider produced a translation
    """
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(dispatcher.dispatch(request))
    finally:
        loop.close()


def run_stream_async_wrapper(dispatcher, request, request_id, socketio):
    """
    Wrapper for running a streaming dispatch in its own event loop

    Args:
        dispatcher (TranslationDispatcher): Dispatcher to use
        request (TranslationRequest): Request to translate
        request_id (str): Caller correlation token
        socketio: SocketIO instance
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(
            dispatcher.dispatch_stream(request, request_id, create_stream_sink(socketio))
        )
    except Exception as e:
        get_logger().error(f"Uncaught error in stream dispatch {request_id}: {e}",
                           LogType.ERROR_DETAIL, {'details': repr(e)})
    finally:
        loop.close()
        asyncio.set_event_loop(None)


def start_stream_job(dispatcher, request, request_id, socketio):
    """
    Start a streaming dispatch in a separate thread

    Args:
        dispatcher (TranslationDispatcher): Dispatcher to use
        request (TranslationRequest): Request to translate
        request_id (str): Caller correlation token
        socketio: SocketIO instance
    """
    thread = threading.Thread(
        target=run_stream_async_wrapper,
        args=(dispatcher, request, request_id, socketio)
    )
    thread.daemon = True
    thread.start()
    return thread
