"""
Backoff Retry Executor - Submits reconfigs against a moving target version

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/retry.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  replSetReconfig submission loop with mild
                                exponential backoff and per-attempt re-read
                                of the current configuration.
2026-10-17  core        UPDATE  Record the last built command.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from typing import Any, Callable, Dict, Optional
import logging

from .clients.base import ClusterAdminClient
from .config_repository import ConfigRepository
from .errors import OrchestratorError
from .models import ReplicaSetConfig
from .notifier import ProgressNotifier
from .result import AttemptResult, Err, Ok, unwrap
from .settings import BackoffPolicy
from .validators import validate_submission

logger = logging.getLogger(__name__)

TargetBuilder = Callable[[ReplicaSetConfig], ReplicaSetConfig]

RETRY_NOTICE = "Reconfig did not succeed yet, starting new attempt..."


def next_version(current: ReplicaSetConfig) -> int:
    """Version to submit after observing `current`"""
    return current.version + 1 if current.version else 1


def is_retryable(error: Exception) -> bool:
    """Only command failures flagged retryable are absorbed by the loop"""
    return isinstance(error, OrchestratorError) and error.retryable


class BackoffRetryExecutor:
    """
    Drives replSetReconfig attempts until one succeeds or the budget is spent.

    The configuration is re-read on every attempt. Other admin clients and
    automatic failovers may bump the version between attempts, and a stale
    version would be rejected forever.
    """

    def __init__(self, client: ClusterAdminClient, repository: ConfigRepository,
                 notifier: ProgressNotifier, policy: Optional[BackoffPolicy] = None):
        self.client = client
        self.repository = repository
        self.notifier = notifier
        self.policy = policy or BackoffPolicy()
        # Command built by the most recent attempt of the current reconfig()
        self.last_command: Optional[Dict[str, Any]] = None

    def build_command(self, builder: TargetBuilder,
                      options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Read the current config and turn it into a replSetReconfig command.

        The builder receives a private copy of the current config.
        """
        current = self.repository.get_current_config()
        target = builder(current.copy())
        target.version = next_version(current)
        if target.protocol_version is None:
            # mongod 4.0 requires protocolVersion on every reconfig
            target.protocol_version = current.protocol_version
        validate_submission(target)

        command: Dict[str, Any] = {"replSetReconfig": target.to_document()}
        command.update(options or {})
        self.last_command = command
        return command

    def _attempt(self, builder: TargetBuilder,
                 options: Optional[Dict[str, Any]]) -> AttemptResult:
        try:
            command = self.build_command(builder, options)
            logger.debug(f"Submitting replSetReconfig version "
                         f"{command['replSetReconfig'].get('version')}")
            return Ok(self.client.run_admin_command(command))
        except OrchestratorError as e:
            return Err(e)

    def reconfig(self, builder: TargetBuilder,
                 options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Submit a reconfig built from the freshest config.

        Args:
            builder: Pure function mapping the current config to the target
            options: Extra replSetReconfig fields (e.g. {"force": True})

        Returns:
            replSetReconfig result document

        Raises:
            The last attempt's error, unchanged, once attempts are exhausted.
            Non-retryable errors are raised from the attempt that hit them.
        """
        self.last_command = None
        interval = self.policy.initial_interval_ms
        result: AttemptResult = Err(RuntimeError("reconfig was not attempted"))

        for attempt in range(self.policy.max_attempts):
            if attempt > 0:
                self.notifier.sleep(interval)
                interval *= self.policy.multiplier
                if interval > self.policy.notice_threshold_ms:
                    self.notifier.print(RETRY_NOTICE)

            result = self._attempt(builder, options)
            if result.is_ok:
                logger.info(f"Reconfig succeeded on attempt {attempt + 1}")
                return result.value

            if not is_retryable(result.error):
                logger.error(f"Reconfig failed with non-retryable error: {result.error}")
                raise result.error
            logger.warning(f"Reconfig attempt {attempt + 1}/{self.policy.max_attempts} "
                           f"failed: {result.error}")

        logger.error(f"Reconfig failed after {self.policy.max_attempts} attempts")
        return unwrap(result)
