"""
Orchestrator Errors - Tagged error variants for replica set operations

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/errors.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Error taxonomy shared by the admin clients,
                                the retry executor and the PSA planner.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from typing import Any, Dict, Optional


class OrchestratorError(Exception):
    """Base class for all orchestrator errors"""
    retryable: bool = False


class InvalidArgumentError(OrchestratorError):
    """Caller-supplied request violates a precondition"""


class ConfigUnavailableError(OrchestratorError):
    """Neither replSetGetConfig nor local.system.replset produced a config"""


class DeprecatedError(OrchestratorError):
    """A deprecated operation was invoked"""


class CommandFailedError(OrchestratorError):
    """
    An administrative command failed.

    Generic command failures are retryable inside the reconfig backoff loop.
    Subclasses mark failures that must not be retried in the same form.
    """
    retryable = True

    def __init__(self, message: str, code: Optional[int] = None,
                 code_name: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.code_name = code_name
        self.details = details or {}


class CommandNotFoundError(CommandFailedError):
    """The server does not know the command (signals the fallback read path)"""
    retryable = False


class APIStrictError(CommandFailedError):
    """The command is blocked by strict stable-API mode"""
    retryable = False


class PartialReconfigError(OrchestratorError):
    """
    Second PSA reconfig failed after the first one succeeded.

    The cluster is left in the safe { votes: 1, priority: 0 } state. The
    follow-up command completes the priority change manually.
    """

    def __init__(self, message: str, follow_up_command: str,
                 first_result: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.follow_up_command = follow_up_command
        self.first_result = first_result or {}
