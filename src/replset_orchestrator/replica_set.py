"""
Replica Set Orchestrator - Public facade for replica set administration

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/replica_set.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Facade composing the config repository, the
                                retry executor and the PSA planner, plus the
                                one-shot membership and pass-through commands.
2026-10-17  core        UPDATE  print_secondary_replication_info.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from typing import Any, Dict, Optional, Union
import json
import logging

from .clients.base import ClusterAdminClient
from .clients.factory import ClientFactory
from .config_repository import ConfigRepository
from .errors import DeprecatedError, InvalidArgumentError
from .events import ApiCallEmitter
from .models import MemberConfig, ReplicaSetConfig, coerce_config, coerce_member
from .notifier import ConsoleProgressNotifier, ProgressNotifier
from .psa_planner import PSATransitionPlanner
from .retry import BackoffRetryExecutor
from .settings import BackoffPolicy, OrchestratorSettings
from .validators import assert_arg_types, host_collision_warning, validate_submission

logger = logging.getLogger(__name__)

ConfigInput = Union[ReplicaSetConfig, Dict[str, Any]]
MemberInput = Union[str, MemberConfig, Dict[str, Any]]

DEFAULT_STEPDOWN_SECS = 60

# replSetGetStatus member states
STATE_PRIMARY = 1
STATE_ARBITER = 7


def secondary_lag_report(status: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Per-member replication lag from a replSetGetStatus document.

    Lag is measured against the primary's optimeDate. Without a primary the
    most recent member is used instead.
    """
    members = [m for m in status.get("members", []) if m.get("optimeDate") is not None]
    primary = next((m for m in members if m.get("state") == STATE_PRIMARY), None)
    if primary is not None:
        reference = primary["optimeDate"]
        behind = "behind the primary"
    elif members:
        reference = max(m["optimeDate"] for m in members)
        behind = "behind the freshest member (no primary available at the moment)"
    else:
        return {}

    report: Dict[str, Dict[str, Any]] = {}
    for member in members:
        if member.get("state") in (STATE_PRIMARY, STATE_ARBITER):
            continue
        lag_secs = int((reference - member["optimeDate"]).total_seconds())
        report[f"source: {member.get('name')}"] = {
            "syncedTo": member["optimeDate"],
            "replLag": f"{lag_secs} secs ({round(lag_secs / 3600, 2)} hrs) {behind}",
        }
    return report


class ReplicaSetOrchestrator:
    """
    Replica set administration in the style of the shell's `rs` helpers.

    The orchestrator keeps no state between calls. Every mutation reads the
    configuration from the cluster immediately before building its target.

    Usage:
        rs = ReplicaSetOrchestrator(MongoClusterAdminClient(connection))
        rs.add("db4.example.net:27017")
        rs.reconfig_for_psa_set(2, proposed_config)
    """

    CLASS_NAME = "ReplicaSet"

    def __init__(self, client: ClusterAdminClient,
                 notifier: Optional[ProgressNotifier] = None,
                 emitter: Optional[ApiCallEmitter] = None,
                 policy: Optional[BackoffPolicy] = None):
        self.client = client
        self.notifier = notifier or ConsoleProgressNotifier()
        self.emitter = emitter or ApiCallEmitter()
        self.repository = ConfigRepository(client)
        self.executor = BackoffRetryExecutor(client, self.repository, self.notifier, policy)
        self.planner = PSATransitionPlanner(self.repository, self.executor, self.notifier)

    @classmethod
    def from_settings(cls, settings: OrchestratorSettings,
                      notifier: Optional[ProgressNotifier] = None) -> "ReplicaSetOrchestrator":
        """Build an orchestrator and its admin client from settings"""
        client = ClientFactory.create(settings.client_type, settings.connection)
        return cls(
            client,
            notifier=notifier,
            emitter=ApiCallEmitter(enabled=settings.emit_api_calls),
            policy=settings.backoff,
        )

    def _emit_api_call(self, method: str, arguments: Optional[Dict[str, Any]] = None) -> None:
        self.emitter.emit(method, self.CLASS_NAME, arguments or {})

    def describe(self) -> str:
        """Printable form with credentials redacted"""
        return f"{self.CLASS_NAME} class connected to {self.client.redacted_uri()}"

    def __repr__(self) -> str:
        return f"<{self.describe()}>"

    # =========================================================================
    # Configuration
    # =========================================================================

    def initiate(self, config: Optional[ConfigInput] = None) -> Dict[str, Any]:
        """Run replSetInitiate; no retry, no prior config expected"""
        assert_arg_types([config], [(ReplicaSetConfig, dict, None)], "ReplicaSet.initiate")
        document = coerce_config(config) if config is not None else {}
        self._emit_api_call("initiate", {"config": document})
        logger.info(f"Initiating replica set {document.get('_id', '<server default>')}")
        return self.client.run_admin_command({"replSetInitiate": document})

    def config(self) -> ReplicaSetConfig:
        """Current replica set configuration"""
        self._emit_api_call("config")
        return self.repository.get_current_config()

    def conf(self) -> ReplicaSetConfig:
        """Alias of config()"""
        self._emit_api_call("conf")
        return self.repository.get_current_config()

    def reconfig(self, config: ConfigInput,
                 options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Submit a new configuration with backoff retries.

        The caller's top-level fields are laid over the current config read
        on each attempt; version is always derived from that read.
        """
        assert_arg_types([config, options], [(ReplicaSetConfig, dict), (dict, None)],
                         "ReplicaSet.reconfig")
        partial = coerce_config(config)
        partial.pop("version", None)
        self._emit_api_call("reconfig", {"config": partial, "options": options or {}})

        return self.executor.reconfig(lambda current: current.overlay(partial), options)

    def reconfig_for_psa_set(self, new_member_index: int, config: ConfigInput,
                             options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Give a non-voting (or new) member a vote in an arbiter-only set.

        See PSATransitionPlanner for the two-phase sequence.
        """
        assert_arg_types([new_member_index, config, options],
                         [int, (ReplicaSetConfig, dict), (dict, None)],
                         "ReplicaSet.reconfigForPSASet")
        self._emit_api_call("reconfigForPSASet", {
            "newMemberIndex": new_member_index,
            "config": coerce_config(config),
            "options": options or {},
        })
        return self.planner.plan_and_execute(new_member_index, config, options)

    # =========================================================================
    # Membership
    # =========================================================================

    def add(self, host_or_member: MemberInput, arbiter: Optional[bool] = None) -> Dict[str, Any]:
        """
        Append a member in a single reconfig.

        A host string or a member without _id gets max(existing ids) + 1.
        Submitted once with the version read at call time.
        """
        assert_arg_types([host_or_member, arbiter],
                         [(str, MemberConfig, dict), (bool, None)], "ReplicaSet.add")
        self._emit_api_call("add", {"hostport": host_or_member, "arb": arbiter})

        current = self.repository.get_current_config()
        target = current.copy()
        target.version = (current.version or 0) + 1
        next_id = current.next_member_id()

        if isinstance(host_or_member, str):
            member = MemberConfig(host=host_or_member, id=next_id)
            if arbiter:
                member.arbiter_only = True
        elif arbiter is True:
            raise InvalidArgumentError(
                f"Expected first parameter to be a host-and-port string of arbiter, "
                f"but got {json.dumps(coerce_member(host_or_member).to_document(), default=str)}"
            )
        else:
            member = coerce_member(host_or_member)
            if member.id is None:
                member.id = next_id

        warning = host_collision_warning(current, member, len(target.members))
        if warning:
            logger.warning(warning)
            self.notifier.print(warning)

        target.members.append(member)
        validate_submission(target)
        logger.info(f"Adding member {member.host} with _id {member.id} at version {target.version}")
        return self.client.run_admin_command({"replSetReconfig": target.to_document()})

    def add_arb(self, host: str) -> Dict[str, Any]:
        """Add an arbiter"""
        self._emit_api_call("addArb", {"hostname": host})
        return self.add(host, True)

    def remove(self, host: str) -> Dict[str, Any]:
        """Remove the first member at `host` in a single reconfig"""
        assert_arg_types([host], [str], "ReplicaSet.remove")
        self._emit_api_call("remove", {"hostname": host})

        current = self.repository.get_current_config()
        target = current.without_host(host)
        if target is None:
            members = json.dumps([m.to_document() for m in current.members], default=str)
            raise InvalidArgumentError(
                f"Couldn't find {host} in {members}. Is {host} a member of this replset?"
            )
        target.version = (current.version or 0) + 1
        validate_submission(target)
        logger.info(f"Removing member {host} at version {target.version}")
        return self.client.run_admin_command({"replSetReconfig": target.to_document()})

    # =========================================================================
    # Pass-through Commands
    # =========================================================================

    def status(self) -> Dict[str, Any]:
        self._emit_api_call("status")
        return self.client.run_admin_command({"replSetGetStatus": 1})

    def hello(self) -> Dict[str, Any]:
        self._emit_api_call("hello")
        return self.client.run_admin_command({"hello": 1})

    def is_master(self) -> Dict[str, Any]:
        self._emit_api_call("isMaster")
        return self.client.run_admin_command({"isMaster": 1})

    def freeze(self, seconds: Union[int, float]) -> Dict[str, Any]:
        """Prevent this member from seeking election for `seconds`"""
        assert_arg_types([seconds], [(int, float)], "ReplicaSet.freeze")
        self._emit_api_call("freeze", {"secs": seconds})
        return self.client.run_admin_command({"replSetFreeze": seconds})

    def step_down(self, stepdown_secs: Optional[Union[int, float]] = None,
                  catch_up_secs: Optional[Union[int, float]] = None) -> Dict[str, Any]:
        """Ask the primary to step down (60 seconds by default)"""
        assert_arg_types([stepdown_secs, catch_up_secs],
                         [(int, float, None), (int, float, None)], "ReplicaSet.stepDown")
        self._emit_api_call("stepDown", {"stepdownSecs": stepdown_secs,
                                         "catchUpSecs": catch_up_secs})
        command: Dict[str, Any] = {
            "replSetStepDown": DEFAULT_STEPDOWN_SECS if stepdown_secs is None else stepdown_secs,
        }
        if catch_up_secs is not None:
            command["secondaryCatchUpPeriodSecs"] = catch_up_secs
        return self.client.run_admin_command(command)

    def sync_from(self, host: str) -> Dict[str, Any]:
        """Override the sync source of this member"""
        assert_arg_types([host], [str], "ReplicaSet.syncFrom")
        self._emit_api_call("syncFrom", {"host": host})
        return self.client.run_admin_command({"replSetSyncFrom": host})

    def print_secondary_replication_info(self) -> Dict[str, Dict[str, Any]]:
        """Print and return how far each secondary lags behind the primary"""
        self._emit_api_call("printSecondaryReplicationInfo")
        status = self.client.run_admin_command({"replSetGetStatus": 1})
        report = secondary_lag_report(status)
        for source, info in report.items():
            self.notifier.print(source)
            self.notifier.print(f"\tsyncedTo: {info['syncedTo']}")
            self.notifier.print(f"\treplLag: {info['replLag']}")
        return report

    def print_slave_replication_info(self) -> None:
        raise DeprecatedError(
            "printSlaveReplicationInfo has been deprecated. "
            "Use printSecondaryReplicationInfo instead"
        )
