"""
Progress Notifier - Operator feedback and backoff suspension

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/notifier.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Notifier capability used by the retry loop and
                                the PSA planner.
2026-10-17  core        UPDATE  Mirror operator messages to the logger at DEBUG.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO
import logging
import sys
import time

logger = logging.getLogger(__name__)


class ProgressNotifier(ABC):
    """Capability for operator messages and backoff sleeps"""

    @abstractmethod
    def print(self, message: str) -> None:
        """Fire-and-forget operator message"""

    @abstractmethod
    def sleep(self, milliseconds: float) -> None:
        """Suspend the calling flow"""


class ConsoleProgressNotifier(ProgressNotifier):
    """Writes messages to a stream and sleeps with time.sleep"""

    def __init__(self, stream: Optional[TextIO] = None,
                 sleeper: Callable[[float], None] = time.sleep):
        self._stream = stream
        self._sleeper = sleeper

    def print(self, message: str) -> None:
        logger.debug(message)
        stream = self._stream or sys.stdout
        stream.write(message + "\n")
        stream.flush()

    def sleep(self, milliseconds: float) -> None:
        self._sleeper(milliseconds / 1000.0)
