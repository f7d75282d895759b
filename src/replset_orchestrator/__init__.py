"""
Replset Orchestrator - Safe reconfiguration of MongoDB replica sets

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/__init__.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Package Initialization

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Main package initialization with version
                                and public API exports.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

__version__ = "1.0.0"
__author__ = "Replset Orchestrator Contributors"
__license__ = "MIT"

from .errors import (
    APIStrictError,
    CommandFailedError,
    CommandNotFoundError,
    ConfigUnavailableError,
    DeprecatedError,
    InvalidArgumentError,
    OrchestratorError,
    PartialReconfigError,
)
from .models import MemberConfig, ReplicaSetConfig
from .clients import ClientFactory, ClusterAdminClient, ClusterConnectionConfig, MongoClusterAdminClient
from .config_repository import ConfigRepository
from .events import ApiCallEmitter, ApiCallEvent
from .notifier import ConsoleProgressNotifier, ProgressNotifier
from .psa_planner import PSATransitionPlan, PSATransitionPlanner
from .replica_set import ReplicaSetOrchestrator
from .retry import BackoffRetryExecutor
from .settings import BackoffPolicy, OrchestratorSettings

__all__ = [
    # Facade
    "ReplicaSetOrchestrator",
    # Components
    "ConfigRepository",
    "BackoffRetryExecutor",
    "PSATransitionPlanner",
    "PSATransitionPlan",
    # Models
    "ReplicaSetConfig",
    "MemberConfig",
    # Clients
    "ClusterAdminClient",
    "ClusterConnectionConfig",
    "MongoClusterAdminClient",
    "ClientFactory",
    # Capabilities
    "ProgressNotifier",
    "ConsoleProgressNotifier",
    "ApiCallEmitter",
    "ApiCallEvent",
    # Settings
    "BackoffPolicy",
    "OrchestratorSettings",
    # Errors
    "OrchestratorError",
    "InvalidArgumentError",
    "ConfigUnavailableError",
    "CommandFailedError",
    "CommandNotFoundError",
    "APIStrictError",
    "DeprecatedError",
    "PartialReconfigError",
    "__version__",
]
