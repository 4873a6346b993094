"""
Simulator system context and FastAPI dependency
"""

import time
from typing import Optional

from fastapi import Request

from ..config import CBSConfig, get_config
from ..fixtures import create_seeded_store
from ..ledger import LedgerStore
from ..postings import PostingEngine
from ..transfers import TransferEngine


class SimulatorSystem:
    """Ledger store and engines wired together"""

    def __init__(self, store: Optional[LedgerStore] = None,
                 config: Optional[CBSConfig] = None):
        self.config = config or get_config()
        self.store = store if store is not None else create_seeded_store()
        self.transfer_engine = TransferEngine(
            self.store, self.config.reject_non_positive_amounts
        )
        self.posting_engine = PostingEngine(
            self.store, self.config.reject_non_positive_amounts
        )
        self._started = time.monotonic()

    @property
    def uptime(self) -> float:
        """Seconds since the system was created"""
        return time.monotonic() - self._started


def get_system(request: Request) -> SimulatorSystem:
    return request.app.state.system
