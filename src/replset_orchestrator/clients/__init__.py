"""
Admin Clients Package

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/clients/__init__.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Package Initialization

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Initial package structure
-------------------------------------------------------------------------------
===============================================================================
"""

from .base import ClusterAdminClient, ClusterConnectionConfig
from .mongodb import MongoClusterAdminClient
from .factory import ClientFactory

__all__ = [
    "ClusterAdminClient",
    "ClusterConnectionConfig",
    "MongoClusterAdminClient",
    "ClientFactory",
]
