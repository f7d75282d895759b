"""
MongoDB Admin Client - pymongo-backed cluster administration

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/clients/mongodb.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Admin client issuing replSet* commands through
                                pymongo and translating driver errors into the
                                orchestrator error taxonomy.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from typing import Any, Dict, Optional
import logging

from pymongo import MongoClient
from pymongo.errors import OperationFailure, PyMongoError
from pymongo.server_api import ServerApi

from ..errors import APIStrictError, CommandFailedError, CommandNotFoundError
from .base import ClusterAdminClient, ClusterConnectionConfig

logger = logging.getLogger(__name__)

# Server error codes that select a non-retryable error variant
COMMAND_NOT_FOUND = 59
API_STRICT_ERROR = 323

_CODE_TO_ERROR = {
    COMMAND_NOT_FOUND: CommandNotFoundError,
    API_STRICT_ERROR: APIStrictError,
}


def translate_error(command_name: str, exc: PyMongoError) -> CommandFailedError:
    """Map a pymongo exception onto the orchestrator error taxonomy"""
    if isinstance(exc, OperationFailure):
        details = exc.details or {}
        error_class = _CODE_TO_ERROR.get(exc.code, CommandFailedError)
        return error_class(
            f"{command_name} failed: {exc}",
            code=exc.code,
            code_name=details.get("codeName"),
            details=dict(details),
        )
    return CommandFailedError(f"{command_name} failed: {exc}")


class MongoClusterAdminClient(ClusterAdminClient):
    """
    Admin client for MongoDB replica sets.

    Commands run against the admin database of whichever member the driver
    selects (the primary for a replica set connection).
    """

    def __init__(self, connection: Optional[ClusterConnectionConfig] = None,
                 client: Optional[MongoClient] = None):
        """
        Initialize MongoDB admin client.

        Args:
            connection: Connection settings
            client: Pre-built MongoClient, used as-is instead of connecting
        """
        super().__init__(connection)
        self._client = client
        self._owns_client = client is None
        if client is not None:
            self._connected = True

    def _build_connection_string(self) -> str:
        """Build MongoDB connection string without credentials"""
        host_port = f"{self.connection.host}:{self.connection.port}"

        options = []
        if self.connection.replica_set:
            options.append(f"replicaSet={self.connection.replica_set}")
        if self.connection.username and self.connection.auth_source:
            options.append(f"authSource={self.connection.auth_source}")

        option_str = "&".join(options)
        if option_str:
            option_str = "?" + option_str

        return f"mongodb://{host_port}/{option_str}"

    def _client_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "connectTimeoutMS": self.connection.connect_timeout_ms,
            "serverSelectionTimeoutMS": self.connection.server_selection_timeout_ms,
            "directConnection": self.connection.direct_connection,
            "tls": self.connection.use_tls,
        }
        if self.connection.username:
            kwargs["username"] = self.connection.username
            kwargs["password"] = self.connection.password
        if self.connection.server_api_version:
            kwargs["server_api"] = ServerApi(
                self.connection.server_api_version,
                strict=self.connection.server_api_strict,
            )
        return kwargs

    def connect(self) -> None:
        """Create the MongoClient (the driver connects lazily)"""
        if self._client is not None:
            return
        logger.info(f"Connecting to MongoDB: {self.connection.host}:{self.connection.port}")
        self._client = MongoClient(self._build_connection_string(), **self._client_kwargs())
        self._owns_client = True
        self._connected = True

    def close(self) -> None:
        """Close the MongoClient if this instance created it"""
        if self._client is not None and self._owns_client:
            self._client.close()
            logger.info("Disconnected from MongoDB")
        self._client = None
        self._connected = False

    def redacted_uri(self) -> str:
        uri = self._build_connection_string()
        if self.connection.username:
            return uri.replace("mongodb://", "mongodb://<credentials>@", 1)
        return uri

    def _ensure_client(self) -> MongoClient:
        if self._client is None:
            self.connect()
        return self._client

    def run_admin_command(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Run a command against the admin database"""
        command_name = next(iter(document), "<empty>")
        logger.debug(f"Running admin command {command_name}: {document}")
        try:
            return dict(self._ensure_client().get_database("admin").command(document))
        except PyMongoError as e:
            error = translate_error(command_name, e)
            logger.debug(f"Admin command {command_name} raised {type(error).__name__}: {e}")
            raise error from e

    def read_system_replset_document(self) -> Optional[Dict[str, Any]]:
        """Read the stored config from local.system.replset"""
        try:
            collection = self._ensure_client().get_database("local").get_collection("system.replset")
            doc = collection.find_one()
        except PyMongoError as e:
            raise translate_error("find(local.system.replset)", e) from e
        return dict(doc) if doc is not None else None
