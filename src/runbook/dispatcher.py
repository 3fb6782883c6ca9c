# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""
Dispatcher - register a runbook job and request its execution.

Two one-shot phases against the Sensu core/v2 API, no retries:
- create: POST /namespaces/{ns}/checks (409 means the job already exists)
- invoke: POST /namespaces/{ns}/checks/{name}/execute

dispatch() turns a DispatchConfig into a Sensu check state.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from runbook.config import DispatchConfig, with_job_id
from runbook.errors import InputError, RemoteRejected, RunbookError, TransportError
from runbook.event_client import EventClient, PhaseEvent
from runbook.outcome import Outcome, OutcomeKind, Phase, classify
from runbook.schemas import ExecutionRequest, ExitOutcome, JobDefinition
from runbook.transport import build_client


logger = logging.getLogger(__name__)

CHECKS_PATH = "/api/core/v2/namespaces/{namespace}/checks"
EXECUTE_PATH = CHECKS_PATH + "/{name}/execute"


def _segment(value: str) -> str:
    """Percent-encode a single URL path segment (namespace or job id)."""
    return quote(value, safe="")


# =============================================================================
# Payload Construction
# =============================================================================

def build_job_definition(config: DispatchConfig) -> JobDefinition:
    """Build the check definition for a config whose job id is set."""
    return JobDefinition(
        name=config.job_id,
        namespace=config.namespace,
        command=config.command,
        timeout=config.timeout,
        runtime_assets=config.runtime_assets,
    )


def build_execution_request(config: DispatchConfig) -> ExecutionRequest:
    """Build the execute request for a config whose job id is set."""
    return ExecutionRequest(check=config.job_id, subscriptions=config.subscriptions)


# =============================================================================
# Dispatcher
# =============================================================================

class Dispatcher:
    """Runs the create and invoke phases over a single HTTP client."""

    def __init__(
        self,
        config: DispatchConfig,
        client: httpx.Client,
        events: Optional[EventClient] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            config: Validated config with a fixed job id
            client: HTTP client from build_client() (or a test transport)
            events: Optional event log for phase results
        """
        if not config.job_id:
            raise InputError("dispatcher requires a job id; call with_job_id() first")
        self.config = config
        self.client = client
        self.events = events

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.sensu_access_token}",
            "Content-Type": "application/json",
        }

    def _record(
        self,
        phase: Phase,
        url: str,
        result: str,
        outcome: Optional[Outcome] = None,
        error: Optional[str] = None,
    ) -> None:
        if self.events is None:
            return
        self.events.record(PhaseEvent(
            phase=phase.value,
            job_id=self.config.job_id,
            namespace=self.config.namespace,
            url=url,
            result=result,
            status_code=outcome.status_code if outcome else None,
            reason=outcome.reason if outcome else None,
            error=error,
        ))

    def _post(self, phase: Phase, path: str, payload: Dict[str, Any]) -> Outcome:
        """POST a payload and classify the response.

        Raises:
            TransportError: If the request never got a response
            RemoteRejected: If the status is fatal for this phase
        """
        url = f"{self.config.api_base_url}{path}"
        try:
            response = self.client.post(url, content=json.dumps(payload), headers=self._headers())
        except httpx.HTTPError as e:
            self._record(phase, url, "failed", error=str(e))
            raise TransportError(f"{phase.value} request failed ({url}): {e}") from e

        outcome = classify(phase, response.status_code)
        if not outcome.ok:
            error = RemoteRejected(outcome.status_code, outcome.reason, url)
            self._record(phase, url, "failed", outcome, str(error))
            raise error

        if outcome.kind is OutcomeKind.INFORMATIONAL:
            logger.debug(f"unexpected {outcome.status_code} {outcome.reason} from {url}")
            print(response.text)

        self._record(phase, url, outcome.kind.value, outcome)
        return outcome

    def create(self, job: JobDefinition) -> Outcome:
        """Register the job definition. A 409 leaves the existing job in place."""
        path = CHECKS_PATH.format(namespace=_segment(job.namespace))
        outcome = self._post(Phase.CREATE, path, job.to_payload())
        if outcome.kind is OutcomeKind.SOFT_SUCCESS:
            logger.info(f'runbook job "{job.name}" already exists ({outcome.status_code}: {outcome.reason})')
        elif outcome.kind is OutcomeKind.SUCCESS:
            logger.info(f'registered runbook job "{job.name}"')
        return outcome

    def invoke(self, request: ExecutionRequest) -> Outcome:
        """Request execution of the job on the given subscriptions."""
        path = EXECUTE_PATH.format(namespace=_segment(self.config.namespace), name=_segment(request.check))
        outcome = self._post(Phase.INVOKE, path, request.to_payload())
        if outcome.kind is OutcomeKind.SUCCESS:
            logger.info(
                f'requested runbook job "{request.check}" execution on subscriptions: '
                f'{",".join(request.subscriptions)}'
            )
        return outcome


# =============================================================================
# Dispatch
# =============================================================================

def dispatch(
    config: DispatchConfig,
    client: Optional[httpx.Client] = None,
    events: Optional[EventClient] = None,
    dry_run: bool = False,
) -> ExitOutcome:
    """
    Run both phases for a config.

    Returns:
        WARNING if the config is incomplete (no request is made),
        CRITICAL if either phase fails, OK otherwise.
    """
    try:
        config.validate()
    except InputError as e:
        logger.warning(str(e))
        return ExitOutcome.WARNING

    config = with_job_id(config)
    job = build_job_definition(config)
    request = build_execution_request(config)

    if dry_run:
        print(json.dumps({"create": job.to_payload(), "execute": request.to_payload()}, indent=2))
        return ExitOutcome.OK

    owns_client = client is None
    try:
        if events is None and config.event_log:
            events = EventClient(config.event_log)
        if client is None:
            client = build_client(config.sensu_trusted_ca_file)

        dispatcher = Dispatcher(config, client, events=events)
        logger.info(f"registering runbook job ID {job.namespace}/{job.name} with --command {job.command}")
        dispatcher.create(job)
        dispatcher.invoke(request)
    except (RunbookError, OSError) as e:
        logger.error(f"ERROR: {e}")
        return ExitOutcome.CRITICAL
    finally:
        if owns_client and client is not None:
            client.close()

    return ExitOutcome.OK
