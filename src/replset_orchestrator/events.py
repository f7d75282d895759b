"""
API Call Events - Explicit telemetry emitted at orchestrator call sites

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/events.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Injected event emitter for public API calls.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List
import logging

logger = logging.getLogger(__name__)


@dataclass
class ApiCallEvent:
    """A single public API invocation"""
    method: str
    class_name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


Listener = Callable[[ApiCallEvent], None]


class ApiCallEmitter:
    """
    Fans API call events out to subscribed listeners.

    Listener failures are logged and do not interrupt the API call.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, method: str, class_name: str, arguments: Dict[str, Any]) -> None:
        if not self.enabled:
            return
        event = ApiCallEvent(method=method, class_name=class_name, arguments=arguments)
        logger.debug(f"API call {class_name}.{method}: {arguments}")
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(f"API call listener failed for {class_name}.{method}: {e}")
