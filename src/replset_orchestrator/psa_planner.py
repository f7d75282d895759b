"""
PSA Transition Planner - Primary-Arbiter to Primary-Secondary-Arbiter

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/psa_planner.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Two-phase reconfig promoting a non-voting
                                member to a voting secondary.
2026-10-17  core        UPDATE  Follow-up command renders the last submitted payload.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import logging

from .config_repository import ConfigRepository
from .errors import PartialReconfigError
from .models import MemberConfig, ReplicaSetConfig, coerce_config
from .notifier import ProgressNotifier
from .retry import BackoffRetryExecutor
from .validators import (
    host_collision_warning,
    render_document,
    require_member,
    require_non_voting,
    require_voting,
)

logger = logging.getLogger(__name__)


@dataclass
class PSATransitionPlan:
    """
    Reconfig sequence for adding a voting member to an arbiter-only set.

    Phase one gives the member { votes: 1, priority: 0 }. A member that
    cannot win an election can gain a vote without triggering a failover.
    Phase two, when present, restores the requested priority.
    """
    member_index: int
    member_id: Optional[int]
    requested_priority: Optional[float]
    phase_one: ReplicaSetConfig
    phase_two: Optional[ReplicaSetConfig] = None

    @property
    def submissions(self) -> int:
        return 1 if self.phase_two is None else 2


def _overlay_builder(target: ReplicaSetConfig):
    partial = target.to_document()
    partial.pop("version", None)
    return lambda current: current.overlay(partial)


class PSATransitionPlanner:
    """Plans and executes the PA -> PSA reconfig sequence"""

    def __init__(self, repository: ConfigRepository, executor: BackoffRetryExecutor,
                 notifier: ProgressNotifier):
        self.repository = repository
        self.executor = executor
        self.notifier = notifier

    def plan(self, new_member_index: int, proposed: Any) -> PSATransitionPlan:
        """
        Build the plan without touching the cluster.

        Raises:
            InvalidArgumentError: No member at the index, or its votes are not 1
        """
        config = ReplicaSetConfig.from_document(coerce_config(proposed))
        member = require_member(config, new_member_index)
        require_voting(member, new_member_index)

        requested_priority = member.priority

        phase_one = config.copy()
        target = phase_one.members[new_member_index]
        target.votes = 1
        target.priority = 0

        phase_two = None
        if requested_priority != 0:
            phase_two = config.copy()
            phase_two.members[new_member_index].votes = 1
            phase_two.members[new_member_index].priority = requested_priority

        return PSATransitionPlan(
            member_index=new_member_index,
            member_id=member.id,
            requested_priority=requested_priority,
            phase_one=phase_one,
            phase_two=phase_two,
        )

    def _check_against_current(self, plan: PSATransitionPlan) -> None:
        current = self.repository.get_current_config()
        new_member: MemberConfig = plan.phase_one.members[plan.member_index]
        existing = current.find_member_by_id(new_member.id)

        if existing is None:
            # Adding a brand new member; only warn about a reused host
            warning = host_collision_warning(current, new_member, plan.member_index)
            if warning:
                logger.warning(warning)
                self.notifier.print(warning)
        else:
            require_non_voting(existing, plan.member_index)

    def plan_and_execute(self, new_member_index: int, proposed: Any,
                         options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run the PSA transition.

        Args:
            new_member_index: Index of the member gaining a vote
            proposed: Full target config (ReplicaSetConfig or wire document)
            options: Extra replSetReconfig fields

        Returns:
            Result of the last reconfig submitted

        Raises:
            InvalidArgumentError: Preconditions failed; nothing was submitted
            PartialReconfigError: Phase two failed after phase one succeeded
        """
        options = dict(options or {})
        plan = self.plan(new_member_index, proposed)
        self._check_against_current(plan)

        index = plan.member_index
        logger.info(f"PSA transition for member index {index}: phase 1 of {plan.submissions}")
        self.notifier.print(
            f"Running first reconfig to give member at index {index} {{ votes: 1, priority: 0 }}"
        )
        first_result = self.executor.reconfig(_overlay_builder(plan.phase_one), options)

        if plan.phase_two is None:
            self.notifier.print("No second reconfig necessary because .priority = 0")
            return first_result

        priority = "undefined" if plan.requested_priority is None else plan.requested_priority
        logger.info(f"PSA transition for member index {index}: phase 2 of 2")
        self.notifier.print(
            f"Running second reconfig to give member at index {index} {{ priority: {priority} }}"
        )
        try:
            return self.executor.reconfig(_overlay_builder(plan.phase_two), options)
        except Exception as e:
            attempted = self.executor.last_command
            if attempted is not None:
                attempted_config = attempted["replSetReconfig"]
            else:
                # Failed before any command was built
                attempted_config = plan.phase_two.to_document()
            follow_up = (
                f"rs.reconfig({render_document(attempted_config)}, "
                f"{json.dumps(options, default=str)})"
            )
            logger.error(f"Second PSA reconfig failed, cluster left at priority 0: {e}")
            self.notifier.print("Second reconfig did not succeed, giving up")
            self.notifier.print(f"Attempted command: {follow_up}")
            raise PartialReconfigError(
                f"Second reconfig for member at index {index} did not succeed: {e}",
                follow_up_command=follow_up,
                first_result=first_result,
            ) from e
