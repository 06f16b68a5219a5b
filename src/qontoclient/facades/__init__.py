"""Blocking, callback, future and stream versions of the Qonto client."""

from qontoclient.facades.blocking import BlockingQontoClient
from qontoclient.facades.callback import CallbackQontoClient, Result
from qontoclient.facades.future import FutureQontoClient
from qontoclient.facades.loop import EventLoopThread, get_default_loop_thread
from qontoclient.facades.stream import StreamQontoClient

__all__ = [
    "BlockingQontoClient",
    "CallbackQontoClient",
    "EventLoopThread",
    "FutureQontoClient",
    "Result",
    "StreamQontoClient",
    "get_default_loop_thread",
]
