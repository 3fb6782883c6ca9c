# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Runbook job schemas."""

from runbook.schemas.job_def import (
    RUNBOOK_LABELS,
    ExecutionRequest,
    ExitOutcome,
    JobDefinition,
)

__all__ = [
    "RUNBOOK_LABELS",
    "ExecutionRequest",
    "ExitOutcome",
    "JobDefinition",
]
