"""
Client Factory - Creates admin clients based on client type

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/clients/factory.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Client factory building admin clients from
                                plain configuration dictionaries.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from typing import Dict, Type

from .base import ClusterAdminClient, ClusterConnectionConfig
from .mongodb import MongoClusterAdminClient


class ClientFactory:
    """
    Factory for creating admin clients.

    Maps client types to client implementations and creates
    configured client instances.
    """

    CLIENT_TYPES: Dict[str, Type[ClusterAdminClient]] = {
        "mongodb": MongoClusterAdminClient,
    }

    @classmethod
    def create(cls, client_type: str, config: Dict) -> ClusterAdminClient:
        """
        Create a client for the given client type.

        Args:
            client_type: Type of client (e.g., "mongodb")
            config: Connection configuration dictionary

        Returns:
            Configured client instance

        Raises:
            ValueError: If client type is unknown
        """
        if client_type not in cls.CLIENT_TYPES:
            raise ValueError(f"Unknown client type: {client_type}")

        defaults = ClusterConnectionConfig()
        connection = ClusterConnectionConfig(
            name=config.get("name", defaults.name),
            host=config.get("host", defaults.host),
            port=int(config.get("port", defaults.port)),
            username=config.get("username"),
            password=config.get("password"),
            auth_source=config.get("auth_source", defaults.auth_source),
            replica_set=config.get("replica_set"),
            use_tls=config.get("use_tls", defaults.use_tls),
            direct_connection=config.get("direct_connection", defaults.direct_connection),
            connect_timeout_ms=config.get("connect_timeout_ms", defaults.connect_timeout_ms),
            server_selection_timeout_ms=config.get(
                "server_selection_timeout_ms", defaults.server_selection_timeout_ms
            ),
            server_api_version=config.get("server_api_version"),
            server_api_strict=config.get("server_api_strict", defaults.server_api_strict),
        )

        return cls.CLIENT_TYPES[client_type](connection)

    @classmethod
    def get_supported_types(cls) -> list:
        """Get list of supported client types"""
        return list(cls.CLIENT_TYPES.keys())

    @classmethod
    def register_client(cls, client_type: str, client_class: Type[ClusterAdminClient]):
        """
        Register a new client type.

        Args:
            client_type: Type identifier
            client_class: Client implementation class
        """
        cls.CLIENT_TYPES[client_type] = client_class
