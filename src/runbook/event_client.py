# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""JSONL record of runbook dispatch phases.

One line per create/invoke request, for auditing which jobs were sent
where and what the Sensu API answered.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class PhaseEvent:
    """Result of one request against the Sensu API.

    status_code and reason are None when no response arrived.
    """
    phase: str  # "create" or "invoke"
    job_id: str
    namespace: str
    url: str
    result: str  # OutcomeKind value, or "failed"
    status_code: Optional[int] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=_utcnow)

    @property
    def event_type(self) -> str:
        return f"runbook.{self.phase}"

    def to_record(self) -> dict:
        record = {"event_type": self.event_type}
        record.update({k: v for k, v in asdict(self).items() if v is not None})
        return record


class EventClient:
    """Appends PhaseEvents to a JSONL file."""

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path).expanduser()
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, event: PhaseEvent) -> None:
        with open(self.log_path, "a") as f:
            f.write(json.dumps(event.to_record()) + "\n")
