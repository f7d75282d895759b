"""
pytest configuration and fixtures for orchestrator tests

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: tests/conftest.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Test Configuration

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  In-memory cluster admin client, recording
                                notifier and sample replica set configs.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest

from replset_orchestrator import (
    ApiCallEmitter,
    BackoffPolicy,
    CommandFailedError,
    ReplicaSetOrchestrator,
)
from replset_orchestrator.clients.base import ClusterAdminClient, ClusterConnectionConfig
from replset_orchestrator.notifier import ProgressNotifier


# =============================================================================
# Test Data Fixtures
# =============================================================================

def make_pa_config() -> Dict[str, Any]:
    """Primary + arbiter + a non-voting secondary waiting for promotion"""
    return {
        "_id": "rs0",
        "version": 5,
        "protocolVersion": 1,
        "members": [
            {"_id": 0, "host": "db0.example.net:27017", "priority": 1, "votes": 1},
            {"_id": 1, "host": "arb.example.net:27017", "arbiterOnly": True, "priority": 0, "votes": 1},
            {"_id": 2, "host": "db2.example.net:27017", "priority": 0, "votes": 0},
        ],
        "settings": {"chainingAllowed": True},
    }


@pytest.fixture
def pa_config() -> Dict[str, Any]:
    """Sample PA replica set configuration document"""
    return make_pa_config()


@pytest.fixture
def psa_proposal(pa_config) -> Dict[str, Any]:
    """Proposed config giving member index 2 a vote and priority 1"""
    proposal = copy.deepcopy(pa_config)
    proposal["members"][2]["votes"] = 1
    proposal["members"][2]["priority"] = 1
    return proposal


# =============================================================================
# Fake Cluster Admin Client
# =============================================================================

class FakeClusterAdminClient(ClusterAdminClient):
    """
    In-memory replica set that behaves like a primary's admin database.

    replSetReconfig is accepted only when its version is exactly one above
    the stored version, mirroring the server's check.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(ClusterConnectionConfig(name="fake", host="db0.example.net"))
        self.config: Optional[Dict[str, Any]] = copy.deepcopy(config)
        self.system_replset: Optional[Dict[str, Any]] = copy.deepcopy(config)
        self.commands: List[Dict[str, Any]] = []
        self.reconfig_failures: List[Exception] = []
        self.get_config_error: Optional[Exception] = None
        self.get_config_failures: List[Exception] = []
        self.get_config_without_config = False
        self.on_get_config: Optional[Callable[["FakeClusterAdminClient"], None]] = None
        self.status_document: Optional[Dict[str, Any]] = None
        self.config_reads = 0
        self.fallback_reads = 0

    @property
    def submissions(self) -> List[Dict[str, Any]]:
        """Every replSetReconfig config document received, failed or not"""
        return [c["replSetReconfig"] for c in self.commands if "replSetReconfig" in c]

    @property
    def network_calls(self) -> int:
        return len(self.commands) + self.fallback_reads

    def bump_version(self) -> None:
        """Simulate another admin client committing a reconfig"""
        self.config["version"] += 1
        self.system_replset = copy.deepcopy(self.config)

    def run_admin_command(self, document: Dict[str, Any]) -> Dict[str, Any]:
        self.commands.append(copy.deepcopy(document))
        name = next(iter(document))

        if name == "replSetGetConfig":
            self.config_reads += 1
            if self.get_config_failures:
                raise self.get_config_failures.pop(0)
            if self.get_config_error:
                raise self.get_config_error
            if self.get_config_without_config:
                return {"ok": 1}
            snapshot = copy.deepcopy(self.config)
            # Runs after the snapshot, like a writer racing the caller
            if self.on_get_config:
                self.on_get_config(self)
            return {"config": snapshot, "ok": 1}

        if name == "replSetReconfig":
            if self.reconfig_failures:
                raise self.reconfig_failures.pop(0)
            proposed = document["replSetReconfig"]
            expected = (self.config.get("version") or 0) + 1
            if proposed.get("version") != expected:
                raise CommandFailedError(
                    f"version field value of {proposed.get('version')} is out of date "
                    f"with current version {expected - 1}",
                    code=103,
                    code_name="NewReplicaSetConfigurationIncompatible",
                )
            self.config = copy.deepcopy(proposed)
            self.system_replset = copy.deepcopy(proposed)
            return {"ok": 1}

        if name == "replSetGetStatus" and self.status_document is not None:
            return copy.deepcopy(self.status_document)

        if name == "replSetInitiate":
            self.config = copy.deepcopy(document["replSetInitiate"])
            self.config.setdefault("version", 1)
            return {"ok": 1}

        return {"ok": 1}

    def read_system_replset_document(self) -> Optional[Dict[str, Any]]:
        self.fallback_reads += 1
        return copy.deepcopy(self.system_replset)


@dataclass
class RecordingNotifier(ProgressNotifier):
    """Notifier that records messages and never actually sleeps"""
    messages: List[str] = field(default_factory=list)
    sleeps: List[float] = field(default_factory=list)

    def print(self, message: str) -> None:
        self.messages.append(message)

    def sleep(self, milliseconds: float) -> None:
        self.sleeps.append(milliseconds)


@pytest.fixture
def fake_client(pa_config) -> FakeClusterAdminClient:
    """Fake cluster holding the PA config"""
    return FakeClusterAdminClient(pa_config)


@pytest.fixture
def fake_client_factory() -> Callable[..., FakeClusterAdminClient]:
    """Build additional fake clusters inside a test"""
    return FakeClusterAdminClient


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def api_events() -> List[Any]:
    return []


@pytest.fixture
def orchestrator(fake_client, notifier, api_events) -> ReplicaSetOrchestrator:
    """Orchestrator wired to the fake cluster with the default backoff policy"""
    emitter = ApiCallEmitter()
    emitter.subscribe(api_events.append)
    return ReplicaSetOrchestrator(fake_client, notifier=notifier, emitter=emitter,
                                  policy=BackoffPolicy())
