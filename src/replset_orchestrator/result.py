"""
Attempt Results - Ok/Err outcome of a single reconfig attempt

===============================================================================
PROVENANCE TRACKING
===============================================================================
File: src/replset_orchestrator/result.py
Created: 2026-10-17
Author: Replset Orchestrator Contributors
Type: Core Implementation

Change History:
-------------------------------------------------------------------------------
Date        Author      Type    Description
-------------------------------------------------------------------------------
2026-10-17  core        CREATE  Discriminated result used to drive the
                                reconfig retry loop.
2026-10-17  core        UPDATE  unwrap uses is_ok.
-------------------------------------------------------------------------------

License: MIT
===============================================================================
"""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Ok:
    """Successful attempt carrying the command result"""
    value: Dict[str, Any]

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed attempt carrying the raised error"""
    error: Exception

    @property
    def is_ok(self) -> bool:
        return False


AttemptResult = Union[Ok, Err]


def unwrap(result: AttemptResult) -> Dict[str, Any]:
    """Return the value of an Ok, re-raise the error of an Err unchanged"""
    if not result.is_ok:
        raise result.error
    return result.value
