"""
Base Admin Client - Abstract cluster administration interface

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/clients/base.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Abstract base class defining the admin client
                                interface used by the orchestrator.
-------------------------------------------------------------------------------

License: MIT

CLIENT CONTRACT:
- run_admin_command() raises CommandFailedError for retryable failures
- CommandNotFoundError / APIStrictError signal the metadata fallback read
- Driver exceptions never escape a client untranslated
===============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ClusterConnectionConfig:
    """
    Connection settings for a replica set.

    Transport concerns (pooling, timeouts, retryable reads) are left to the
    driver; these values are passed through unchanged.
    """
    name: str = "default"
    host: str = "localhost"
    port: int = 27017
    username: Optional[str] = None
    password: Optional[str] = None
    auth_source: str = "admin"
    replica_set: Optional[str] = None
    use_tls: bool = False
    direct_connection: bool = False
    connect_timeout_ms: int = 10000
    server_selection_timeout_ms: int = 30000
    server_api_version: Optional[str] = None
    server_api_strict: bool = False


class ClusterAdminClient(ABC):
    """
    Abstract base class for cluster admin clients.

    Usage:
        with MongoClusterAdminClient(config) as client:
            client.run_admin_command({"replSetGetStatus": 1})
    """

    def __init__(self, connection: Optional[ClusterConnectionConfig] = None):
        self.connection = connection or ClusterConnectionConfig()
        self._connected = False

    @property
    def name(self) -> str:
        return self.connection.name

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Establish the connection (no-op by default)"""
        self._connected = True

    def close(self) -> None:
        """Release the connection (no-op by default)"""
        self._connected = False

    def __enter__(self) -> "ClusterAdminClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def redacted_uri(self) -> str:
        """Connection URI with credentials removed"""
        host_port = f"{self.connection.host}:{self.connection.port}"
        if self.connection.username:
            return f"mongodb://<credentials>@{host_port}/"
        return f"mongodb://{host_port}/"

    @abstractmethod
    def run_admin_command(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run a command against the admin database.

        Args:
            document: Command document, command name as the first key

        Returns:
            Command result document

        Raises:
            CommandFailedError: Generic, retryable failure
            CommandNotFoundError: Server does not support the command
            APIStrictError: Command blocked by strict API mode
        """

    @abstractmethod
    def read_system_replset_document(self) -> Optional[Dict[str, Any]]:
        """
        Read the configuration from local.system.replset.

        Returns:
            The stored configuration document, or None if absent
        """
