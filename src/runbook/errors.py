# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy for runbook dispatch."""

from typing import Optional


class RunbookError(Exception):
    """Base class for all runbook failures."""

    pass


class InputError(RunbookError):
    """Raised when required configuration is missing or invalid."""

    pass


class TransportError(RunbookError):
    """Raised when the trust store or the HTTP connection fails."""

    pass


class RemoteRejected(RunbookError):
    """Raised when the Sensu API answers with a fatal status code."""

    def __init__(self, status_code: int, reason: str, url: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason
        self.url = url
        message = f"{status_code} {reason}"
        if url:
            message = f"{message} ({url})"
        super().__init__(message)
