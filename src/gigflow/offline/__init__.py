"""
Offline - Store-and-forward of vendor updates made without connectivity
"""

from gigflow.offline.models import QueuedAction, ReplayError
from gigflow.offline.queue import Connectivity, OfflineActionQueue, SQLiteActionStore

__all__ = [
    "Connectivity",
    "OfflineActionQueue",
    "QueuedAction",
    "ReplayError",
    "SQLiteActionStore",
]
