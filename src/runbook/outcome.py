# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Classify Sensu API status codes into dispatch outcomes."""

from dataclasses import dataclass
from enum import Enum

import httpx


class Phase(Enum):
    """The two requests of a dispatch run."""

    CREATE = "create"
    INVOKE = "invoke"


class OutcomeKind(Enum):
    """How a response moves the run forward.

    SUCCESS: the expected status for the phase
    SOFT_SUCCESS: not what was asked for, but safe to continue (409 on create)
    INFORMATIONAL: some other 2xx; the body is shown and the run continues
    FATAL: the run stops
    """

    SUCCESS = "success"
    SOFT_SUCCESS = "soft_success"
    INFORMATIONAL = "informational"
    FATAL = "fatal"


# Expected status per phase
EXPECTED_STATUS = {
    Phase.CREATE: httpx.codes.CREATED,
    Phase.INVOKE: httpx.codes.ACCEPTED,
}


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    status_code: int
    reason: str

    @property
    def ok(self) -> bool:
        return self.kind is not OutcomeKind.FATAL


def classify(phase: Phase, status_code: int) -> Outcome:
    """Map a phase and HTTP status code to an Outcome."""
    reason = httpx.codes.get_reason_phrase(status_code)

    if status_code == httpx.codes.NOT_FOUND:
        kind = OutcomeKind.FATAL
    elif phase is Phase.CREATE and status_code == httpx.codes.CONFLICT:
        kind = OutcomeKind.SOFT_SUCCESS
    elif status_code >= 300:
        kind = OutcomeKind.FATAL
    elif status_code == EXPECTED_STATUS[phase]:
        kind = OutcomeKind.SUCCESS
    elif status_code >= 200:
        kind = OutcomeKind.INFORMATIONAL
    else:
        kind = OutcomeKind.FATAL

    return Outcome(kind=kind, status_code=status_code, reason=reason)
