# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Job definition and execution request schemas.

Follows the Sensu Go core/v2 API:
- JobDefinition → POST .../checks (an unpublished, unscheduled check)
- ExecutionRequest → POST .../checks/{name}/execute (ad-hoc run)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Tuple


# Provenance labels attached to every runbook job
RUNBOOK_LABELS = {
    "check_type": "runbook",
    "source": "Sensu Runbook",
}

# Sensu requires an interval even for checks that are never scheduled
JOB_INTERVAL = 10

# Subscription placeholder so the definition never matches a real agent
NO_SUBSCRIPTIONS = ("none",)


class ExitOutcome(IntEnum):
    """Sensu check states, used as process exit statuses."""

    OK = 0
    WARNING = 1
    CRITICAL = 2


@dataclass(frozen=True)
class JobDefinition:
    """A one-shot check definition registered with the Sensu API."""
    name: str
    namespace: str
    command: str
    timeout: int
    runtime_assets: Tuple[str, ...] = ()
    labels: Dict[str, str] = field(default_factory=lambda: dict(RUNBOOK_LABELS))

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body for the create request."""
        payload: Dict[str, Any] = {
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
            },
            "command": self.command,
            "publish": False,
            "subscriptions": list(NO_SUBSCRIPTIONS),
            "interval": JOB_INTERVAL,
            "timeout": self.timeout,
        }
        if self.runtime_assets:
            payload["runtime_assets"] = list(self.runtime_assets)
        return payload


@dataclass(frozen=True)
class ExecutionRequest:
    """An ad-hoc execution request for a registered job."""
    check: str
    subscriptions: Tuple[str, ...]

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body for the execute request."""
        return {
            "check": self.check,
            "subscriptions": list(self.subscriptions),
        }
