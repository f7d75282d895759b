"""
Replica Set Models - Configuration documents exchanged with the cluster

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/models.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  ReplicaSetConfig and MemberConfig dataclasses
                                with wire document conversion.
2026-10-17  core        UPDATE  Drop unused is_voting helper.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import copy


# =============================================================================
# Member Configuration
# =============================================================================

@dataclass
class MemberConfig:
    """
    A single replica set member.

    Fields left as None are omitted from the wire document so the server
    applies its protocol defaults (priority 1, votes 1).
    """
    host: str
    id: Optional[int] = None
    priority: Optional[float] = None
    votes: Optional[int] = None
    arbiter_only: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "MemberConfig":
        """Build a member from its wire document"""
        known = {"_id", "host", "priority", "votes", "arbiterOnly"}
        return cls(
            host=doc.get("host", ""),
            id=doc.get("_id"),
            priority=doc.get("priority"),
            votes=doc.get("votes"),
            arbiter_only=doc.get("arbiterOnly"),
            extra={k: copy.deepcopy(v) for k, v in doc.items() if k not in known},
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert to the wire document, `_id` first"""
        doc: Dict[str, Any] = {}
        if self.id is not None:
            doc["_id"] = self.id
        doc["host"] = self.host
        if self.arbiter_only is not None:
            doc["arbiterOnly"] = self.arbiter_only
        if self.priority is not None:
            doc["priority"] = self.priority
        if self.votes is not None:
            doc["votes"] = self.votes
        doc.update(copy.deepcopy(self.extra))
        return doc

    def copy(self) -> "MemberConfig":
        return copy.deepcopy(self)


# =============================================================================
# Replica Set Configuration
# =============================================================================

@dataclass
class ReplicaSetConfig:
    """
    Snapshot of a replica set configuration.

    The cluster is the only owner of configuration state. Instances are
    fetched, copied into a target, submitted and discarded.
    """
    id: str
    version: Optional[int] = None
    members: List[MemberConfig] = field(default_factory=list)
    protocol_version: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ReplicaSetConfig":
        """Build a configuration from its wire document"""
        known = {"_id", "version", "members", "protocolVersion"}
        return cls(
            id=doc.get("_id", ""),
            version=doc.get("version"),
            members=[MemberConfig.from_document(m) for m in doc.get("members", [])],
            protocol_version=doc.get("protocolVersion"),
            extra={k: copy.deepcopy(v) for k, v in doc.items() if k not in known},
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert to the wire document"""
        doc: Dict[str, Any] = {"_id": self.id}
        if self.version is not None:
            doc["version"] = self.version
        if self.protocol_version is not None:
            doc["protocolVersion"] = self.protocol_version
        doc["members"] = [m.to_document() for m in self.members]
        doc.update(copy.deepcopy(self.extra))
        return doc

    def copy(self) -> "ReplicaSetConfig":
        return copy.deepcopy(self)

    def overlay(self, partial: Dict[str, Any]) -> "ReplicaSetConfig":
        """
        Return a new configuration with the top-level fields of a partial
        wire document laid over this one.
        """
        doc = self.to_document()
        doc.update(copy.deepcopy(partial))
        return ReplicaSetConfig.from_document(doc)

    def member_ids(self) -> List[int]:
        return [m.id for m in self.members if m.id is not None]

    def next_member_id(self) -> int:
        """max(existing ids) + 1, or 0 for a set without members"""
        return max(self.member_ids(), default=-1) + 1

    def find_member_by_id(self, member_id: Optional[int]) -> Optional[MemberConfig]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def find_member_by_host(self, host: str) -> Optional[MemberConfig]:
        for member in self.members:
            if member.host == host:
                return member
        return None

    def without_host(self, host: str) -> Optional["ReplicaSetConfig"]:
        """
        Copy of this configuration without the first member at `host`.

        Returns None if no member matches.
        """
        for index, member in enumerate(self.members):
            if member.host == host:
                result = self.copy()
                result.members = [m.copy() for i, m in enumerate(self.members) if i != index]
                return result
        return None


def coerce_config(config: Any) -> Dict[str, Any]:
    """Accept a ReplicaSetConfig or a (partial) wire document"""
    if isinstance(config, ReplicaSetConfig):
        return config.to_document()
    return copy.deepcopy(dict(config))


def coerce_member(member: Any) -> MemberConfig:
    """Accept a MemberConfig or a member wire document"""
    if isinstance(member, MemberConfig):
        return member.copy()
    return MemberConfig.from_document(member)
