"""
Orchestrator Settings - Retry policy and client configuration

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/settings.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Configuration

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Backoff policy and orchestrator settings
                                dataclasses loaded from plain dictionaries.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class BackoffPolicy:
    """
    Retry schedule for reconfig submission.

    The interval grows by `multiplier` after every failed attempt with no
    upper bound. Twelve attempts at the defaults sleep about 56s in total.
    """
    max_attempts: int = 12
    initial_interval_ms: float = 1000
    multiplier: float = 1.3
    notice_threshold_ms: float = 2500

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_interval_ms < 0:
            raise ValueError("initial_interval_ms must not be negative")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "BackoffPolicy":
        defaults = cls()
        return cls(
            max_attempts=int(config.get("max_attempts", defaults.max_attempts)),
            initial_interval_ms=float(config.get("initial_interval_ms", defaults.initial_interval_ms)),
            multiplier=float(config.get("multiplier", defaults.multiplier)),
            notice_threshold_ms=float(config.get("notice_threshold_ms", defaults.notice_threshold_ms)),
        )


@dataclass
class OrchestratorSettings:
    """Top-level orchestrator configuration"""
    client_type: str = "mongodb"
    connection: Dict[str, Any] = field(default_factory=dict)
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)
    emit_api_calls: bool = True

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "OrchestratorSettings":
        """
        Build settings from a configuration dictionary.

        Example:
            {
                "client_type": "mongodb",
                "connection": {"host": "db1", "port": 27017, "replica_set": "rs0"},
                "backoff": {"max_attempts": 12},
            }
        """
        return cls(
            client_type=config.get("client_type", "mongodb"),
            connection=dict(config.get("connection", {})),
            backoff=BackoffPolicy.from_dict(config.get("backoff", {})),
            emit_api_calls=bool(config.get("emit_api_calls", True)),
        )
