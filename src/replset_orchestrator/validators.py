"""
Reconfig Validators - Pure checks applied before a config is submitted

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/validators.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Member presence, vote and uniqueness checks.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from typing import Any, Optional, Sequence, Tuple, Type, Union
import json

from .errors import InvalidArgumentError
from .models import MemberConfig, ReplicaSetConfig

TypeSpec = Union[Type, Tuple[Type, ...]]


# =============================================================================
# Argument Checks
# =============================================================================

def assert_arg_types(args: Sequence[Any], expected: Sequence[TypeSpec], func_name: str) -> None:
    """
    Check argument types for a public operation.

    `None` inside an expected tuple marks an optional argument.

    Raises:
        InvalidArgumentError: An argument has the wrong type
    """
    for position, (arg, spec) in enumerate(zip(args, expected)):
        allowed = spec if isinstance(spec, tuple) else (spec,)
        if arg is None and None in allowed:
            continue
        types = tuple(t for t in allowed if t is not None)
        # bool is an int subclass; never accept it where a number is expected
        if isinstance(arg, bool) and bool not in types:
            matches = False
        else:
            matches = isinstance(arg, types)
        if not matches:
            names = ", ".join("None" if t is None else t.__name__ for t in allowed)
            raise InvalidArgumentError(
                f"Argument at position {position} must be of type {names}, "
                f"got {type(arg).__name__} instead ({func_name})"
            )


# =============================================================================
# Member Checks
# =============================================================================

def require_member(config: ReplicaSetConfig, index: int) -> MemberConfig:
    """Return the member at `index` of a proposed config"""
    if index < 0 or index >= len(config.members):
        raise InvalidArgumentError(f"Node at index {index} does not exist in the new config")
    return config.members[index]


def require_voting(member: MemberConfig, index: int) -> None:
    """The member must have { votes: 1 } in the proposed config"""
    if member.votes != 1:
        actual = "undefined" if member.votes is None else member.votes
        raise InvalidArgumentError(
            f"Node at index {index} must have {{ votes: 1 }} in the new config "
            f"(actual: {{ votes: {actual} }})"
        )


def require_non_voting(existing: MemberConfig, index: int) -> None:
    """
    The member must not vote in the existing config.

    Only an explicit falsy `votes` counts as non-voting here; an unset
    value in a stored config is left alone, as the server always writes it.
    """
    if existing.votes:
        raise InvalidArgumentError(
            f"Node at index {index} must have {{ votes: 0 }} in the old config "
            f"(actual: {{ votes: {existing.votes} }})"
        )


def host_collision_warning(existing: ReplicaSetConfig, member: MemberConfig,
                           index: int) -> Optional[str]:
    """Warning text when `member.host` is already used under another _id"""
    other = existing.find_member_by_host(member.host)
    if other is None or other.id == member.id:
        return None
    return (
        f'Warning: Node at index {index} has {{ host: "{member.host}" }}, '
        f"which is also present in the old config, but with a different _id field."
    )


# =============================================================================
# Submission Checks
# =============================================================================

def validate_submission(config: ReplicaSetConfig) -> None:
    """
    Invariants every submitted configuration must satisfy.

    Raises:
        InvalidArgumentError: Duplicate member ids or a non-voting arbiter
    """
    seen = set()
    for member in config.members:
        if member.id is None:
            raise InvalidArgumentError(f"Member {member.host} has no _id")
        if member.id in seen:
            raise InvalidArgumentError(f"Duplicate member _id {member.id} in config")
        seen.add(member.id)
        if member.arbiter_only and member.votes is not None and member.votes != 1:
            raise InvalidArgumentError(
                f"Arbiter {member.host} must have {{ votes: 1 }} "
                f"(actual: {{ votes: {member.votes} }})"
            )


def render_document(doc: Any) -> str:
    """Stable JSON rendering for operator-facing messages"""
    return json.dumps(doc, indent=2, default=str)
