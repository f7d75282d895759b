"""
Unit tests for the replica set orchestrator facade

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: tests/unit/test_replica_set.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Unit Test Suite

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Membership, reconfig, pass-through command,
                                API event and construction tests.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from datetime import datetime, timedelta

import pytest

from replset_orchestrator import (
    ApiCallEmitter,
    CommandFailedError,
    DeprecatedError,
    InvalidArgumentError,
    MemberConfig,
    MongoClusterAdminClient,
    OrchestratorSettings,
    ReplicaSetConfig,
    ReplicaSetOrchestrator,
)
from replset_orchestrator.replica_set import secondary_lag_report


def methods(events):
    return [e.method for e in events]


# =============================================================================
# Add / Remove
# =============================================================================

class TestAdd:
    """One-shot member addition"""

    def test_add_host_string_gets_next_id(self, orchestrator, fake_client):
        result = orchestrator.add("db3.example.net:1234")

        assert result == {"ok": 1}
        submitted = fake_client.submissions[0]
        assert submitted["version"] == 6
        assert submitted["members"][-1] == {"_id": 3, "host": "db3.example.net:1234"}
        assert submitted["settings"] == {"chainingAllowed": True}

    def test_add_member_document_without_id(self, orchestrator, fake_client):
        orchestrator.add({"host": "db3.example.net:27017", "priority": 0, "votes": 0})

        assert fake_client.submissions[0]["members"][-1] == {
            "_id": 3, "host": "db3.example.net:27017", "priority": 0, "votes": 0,
        }

    def test_add_member_keeps_explicit_id(self, orchestrator, fake_client):
        orchestrator.add(MemberConfig(host="db7.example.net:27017", id=7))

        assert fake_client.submissions[0]["members"][-1]["_id"] == 7

    def test_add_id_ignores_gaps(self, orchestrator, fake_client):
        fake_client.config["members"][2]["_id"] = 10

        orchestrator.add("db3.example.net:27017")

        assert fake_client.submissions[0]["members"][-1]["_id"] == 11

    def test_add_host_string_as_arbiter(self, orchestrator, fake_client):
        orchestrator.add("arb2.example.net:27017", True)

        assert fake_client.submissions[0]["members"][-1] == {
            "_id": 3, "host": "arb2.example.net:27017", "arbiterOnly": True,
        }

    def test_add_object_as_arbiter_is_rejected(self, orchestrator, fake_client):
        with pytest.raises(InvalidArgumentError, match="host-and-port string of arbiter"):
            orchestrator.add({"host": "arb2.example.net:27017"}, True)
        assert fake_client.submissions == []

    def test_add_reused_host_warns(self, orchestrator, fake_client, notifier):
        orchestrator.add("db2.example.net:27017")

        assert notifier.messages[0].startswith("Warning: Node at index 3")
        assert len(fake_client.submissions) == 1

    def test_add_is_not_retried(self, orchestrator, fake_client, notifier):
        fake_client.on_get_config = lambda client: client.bump_version()

        with pytest.raises(CommandFailedError) as exc_info:
            orchestrator.add("db3.example.net:27017")

        assert exc_info.value.code == 103
        assert len(fake_client.submissions) == 1
        assert notifier.sleeps == []

    def test_add_arb(self, orchestrator, fake_client, api_events):
        orchestrator.add_arb("arb2.example.net:27017")

        assert fake_client.submissions[0]["members"][-1]["arbiterOnly"] is True
        assert methods(api_events) == ["addArb", "add"]

    def test_add_rejects_wrong_type(self, orchestrator, fake_client):
        with pytest.raises(InvalidArgumentError, match="ReplicaSet.add"):
            orchestrator.add(27017)
        assert fake_client.network_calls == 0


class TestRemove:
    """One-shot member removal"""

    def test_remove_existing_host(self, orchestrator, fake_client):
        orchestrator.remove("arb.example.net:27017")

        submitted = fake_client.submissions[0]
        assert [m["_id"] for m in submitted["members"]] == [0, 2]
        assert submitted["version"] == 6

    def test_remove_missing_host_submits_nothing(self, orchestrator, fake_client):
        with pytest.raises(InvalidArgumentError) as exc_info:
            orchestrator.remove("nowhere:27017")

        message = str(exc_info.value)
        assert message.startswith("Couldn't find nowhere:27017 in [")
        assert message.endswith("Is nowhere:27017 a member of this replset?")
        assert fake_client.submissions == []

    def test_remove_first_match_only(self, orchestrator, fake_client):
        fake_client.config["members"].append({"_id": 3, "host": "db0.example.net:27017"})

        orchestrator.remove("db0.example.net:27017")

        assert [m["_id"] for m in fake_client.submissions[0]["members"]] == [1, 2, 3]


# =============================================================================
# Reconfig
# =============================================================================

class TestReconfig:
    """Caller-driven reconfig with retries"""

    def test_reconfig_overlays_caller_fields(self, orchestrator, fake_client, pa_config):
        pa_config["settings"] = {"chainingAllowed": False}
        pa_config["version"] = 1

        orchestrator.reconfig(pa_config)

        submitted = fake_client.submissions[0]
        assert submitted["version"] == 6
        assert submitted["settings"] == {"chainingAllowed": False}

    def test_reconfig_accepts_dataclass(self, orchestrator, fake_client, pa_config):
        config = ReplicaSetConfig.from_document(pa_config)
        config.members = config.members[:2]

        orchestrator.reconfig(config, {"force": True})

        command = [c for c in fake_client.commands if "replSetReconfig" in c][0]
        assert len(command["replSetReconfig"]["members"]) == 2
        assert command["force"] is True

    def test_reconfig_retries_transient_failure(self, orchestrator, fake_client, notifier,
                                                pa_config):
        fake_client.reconfig_failures = [CommandFailedError("election in progress", code=91)]

        orchestrator.reconfig(pa_config)

        assert [s["version"] for s in fake_client.submissions] == [6, 6]
        assert notifier.sleeps == [1000]

    def test_reconfig_for_psa_set(self, orchestrator, fake_client, psa_proposal, api_events):
        orchestrator.reconfig_for_psa_set(2, psa_proposal)

        assert len(fake_client.submissions) == 2
        assert methods(api_events) == ["reconfigForPSASet"]
        assert api_events[0].arguments["newMemberIndex"] == 2

    def test_reconfig_for_psa_set_rejects_non_integer_index(self, orchestrator, psa_proposal):
        with pytest.raises(InvalidArgumentError, match="reconfigForPSASet"):
            orchestrator.reconfig_for_psa_set("2", psa_proposal)


# =============================================================================
# Reads and Pass-through Commands
# =============================================================================

class TestCommands:
    """Single-command operations"""

    def test_config_and_conf_agree(self, orchestrator, api_events):
        assert orchestrator.config() == orchestrator.conf()
        assert methods(api_events) == ["config", "conf"]

    def test_initiate(self, orchestrator, fake_client):
        orchestrator.initiate({"_id": "rs1", "members": [{"_id": 0, "host": "a:27017"}]})

        assert fake_client.commands[-1] == {
            "replSetInitiate": {"_id": "rs1", "members": [{"_id": 0, "host": "a:27017"}]}
        }

    def test_initiate_without_config(self, orchestrator, fake_client):
        orchestrator.initiate()

        assert fake_client.commands[-1] == {"replSetInitiate": {}}

    @pytest.mark.parametrize("call,expected", [
        (lambda rs: rs.status(), {"replSetGetStatus": 1}),
        (lambda rs: rs.hello(), {"hello": 1}),
        (lambda rs: rs.is_master(), {"isMaster": 1}),
        (lambda rs: rs.freeze(30), {"replSetFreeze": 30}),
        (lambda rs: rs.step_down(), {"replSetStepDown": 60}),
        (lambda rs: rs.step_down(120, 10),
         {"replSetStepDown": 120, "secondaryCatchUpPeriodSecs": 10}),
        (lambda rs: rs.sync_from("db2.example.net:27017"),
         {"replSetSyncFrom": "db2.example.net:27017"}),
    ])
    def test_pass_through_commands(self, orchestrator, fake_client, call, expected):
        assert call(orchestrator) == {"ok": 1}
        assert fake_client.commands == [expected]

    def test_freeze_rejects_string(self, orchestrator, fake_client):
        with pytest.raises(InvalidArgumentError, match="ReplicaSet.freeze"):
            orchestrator.freeze("30")
        assert fake_client.network_calls == 0

    def test_print_slave_replication_info_is_deprecated(self, orchestrator):
        with pytest.raises(DeprecatedError, match="printSecondaryReplicationInfo"):
            orchestrator.print_slave_replication_info()


# =============================================================================
# Events and Construction
# =============================================================================

class TestEventsAndConstruction:
    """API events, printable form and settings-based construction"""

    def test_events_carry_class_and_arguments(self, orchestrator, api_events):
        orchestrator.freeze(5)

        event = api_events[0]
        assert event.class_name == "ReplicaSet"
        assert event.method == "freeze"
        assert event.arguments == {"secs": 5}

    def test_disabled_emitter_is_silent(self, fake_client, notifier):
        received = []
        emitter = ApiCallEmitter(enabled=False)
        emitter.subscribe(received.append)

        ReplicaSetOrchestrator(fake_client, notifier=notifier, emitter=emitter).status()

        assert received == []

    def test_failing_listener_does_not_break_call(self, fake_client, notifier):
        emitter = ApiCallEmitter()

        def broken(event):
            raise RuntimeError("listener down")

        emitter.subscribe(broken)
        rs = ReplicaSetOrchestrator(fake_client, notifier=notifier, emitter=emitter)

        assert rs.status() == {"ok": 1}

    def test_describe_hides_credentials(self):
        settings = OrchestratorSettings.from_dict({
            "connection": {"host": "db1", "port": 27018, "replica_set": "rs0",
                           "username": "admin", "password": "s3cret"},
        })
        rs = ReplicaSetOrchestrator.from_settings(settings)

        assert isinstance(rs.client, MongoClusterAdminClient)
        assert "s3cret" not in repr(rs)
        assert rs.describe() == (
            "ReplicaSet class connected to "
            "mongodb://<credentials>@db1:27018/?replicaSet=rs0&authSource=admin"
        )

    def test_from_settings_uses_backoff(self):
        settings = OrchestratorSettings.from_dict({"backoff": {"max_attempts": 3}})
        rs = ReplicaSetOrchestrator.from_settings(settings)

        assert rs.executor.policy.max_attempts == 3


# =============================================================================
# Replication Info
# =============================================================================

NOW = datetime(2026, 10, 17, 12, 0, 0)


def make_status(primary_state: int = 1):
    return {
        "set": "rs0",
        "members": [
            {"name": "db0.example.net:27017", "state": primary_state, "optimeDate": NOW},
            {"name": "arb.example.net:27017", "state": 7},
            {"name": "db2.example.net:27017", "state": 2,
             "optimeDate": NOW - timedelta(seconds=5400)},
        ],
        "ok": 1,
    }


class TestReplicationInfo:
    """Secondary lag derived from replSetGetStatus"""

    def test_lag_behind_primary(self):
        report = secondary_lag_report(make_status())

        assert list(report) == ["source: db2.example.net:27017"]
        entry = report["source: db2.example.net:27017"]
        assert entry["syncedTo"] == NOW - timedelta(seconds=5400)
        assert entry["replLag"] == "5400 secs (1.5 hrs) behind the primary"

    def test_lag_without_primary_uses_freshest_member(self):
        report = secondary_lag_report(make_status(primary_state=2))

        assert report["source: db0.example.net:27017"]["replLag"].startswith("0 secs")
        assert report["source: db2.example.net:27017"]["replLag"].endswith(
            "behind the freshest member (no primary available at the moment)"
        )

    def test_empty_status(self):
        assert secondary_lag_report({"ok": 1}) == {}

    def test_print_secondary_replication_info(self, orchestrator, fake_client, notifier,
                                              api_events):
        fake_client.status_document = make_status()

        report = orchestrator.print_secondary_replication_info()

        assert fake_client.commands == [{"replSetGetStatus": 1}]
        assert methods(api_events) == ["printSecondaryReplicationInfo"]
        assert notifier.messages[0] == "source: db2.example.net:27017"
        assert notifier.messages[2] == "\treplLag: 5400 secs (1.5 hrs) behind the primary"
        assert len(report) == 1
