"""
Config Repository - Reads the current replica set configuration

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/config_repository.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  replSetGetConfig read with fallback to the
                                local.system.replset metadata collection.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

import logging

from .clients.base import ClusterAdminClient
from .errors import (
    APIStrictError,
    CommandFailedError,
    CommandNotFoundError,
    ConfigUnavailableError,
)
from .models import ReplicaSetConfig

logger = logging.getLogger(__name__)


class ConfigRepository:
    """
    Source of the current replica set configuration.

    Every call goes to the cluster; nothing is cached between calls.
    """

    def __init__(self, client: ClusterAdminClient):
        self.client = client

    def get_current_config(self) -> ReplicaSetConfig:
        """
        Fetch the current configuration.

        Servers that do not know replSetGetConfig, or that reject it under
        strict API mode, are read directly from local.system.replset.

        Returns:
            Fresh configuration snapshot

        Raises:
            CommandFailedError: replSetGetConfig failed or returned no config
            ConfigUnavailableError: Fallback read found no document
        """
        try:
            result = self.client.run_admin_command({"replSetGetConfig": 1})
        except (CommandNotFoundError, APIStrictError) as e:
            logger.info(f"replSetGetConfig unavailable ({type(e).__name__}), "
                        f"reading local.system.replset")
            return self._read_from_metadata()

        if result.get("config") is None:
            raise CommandFailedError(
                "Document returned from command replSetGetConfig does not contain 'config'"
            )
        return ReplicaSetConfig.from_document(result["config"])

    def _read_from_metadata(self) -> ReplicaSetConfig:
        doc = self.client.read_system_replset_document()
        if doc is None:
            logger.error("No documents in local.system.replset")
            raise ConfigUnavailableError("No documents in local.system.replset")
        return ReplicaSetConfig.from_document(doc)
