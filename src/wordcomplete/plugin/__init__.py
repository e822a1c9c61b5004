"""Plugin contract, dispatcher and the word-complete plugin."""

from .base import Plugin
from .dispatcher import CallbackDispatcher, DispatchState
from .errors import RemoteError
from .sample import WordCompletePlugin

__all__ = [
    "CallbackDispatcher",
    "DispatchState",
    "Plugin",
    "RemoteError",
    "WordCompletePlugin",
]
