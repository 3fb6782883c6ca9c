"""Tests for job definition and execution request payloads."""

from runbook.schemas import RUNBOOK_LABELS, ExecutionRequest, ExitOutcome, JobDefinition


class TestJobDefinition:
    """Tests for the check definition payload."""

    def test_payload_shape(self):
        """Payload should be an unpublished check with the runbook labels."""
        job = JobDefinition(name="job-1", namespace="ops", command="uptime", timeout=15)

        assert job.to_payload() == {
            "metadata": {
                "name": "job-1",
                "namespace": "ops",
                "labels": {"check_type": "runbook", "source": "Sensu Runbook"},
            },
            "command": "uptime",
            "publish": False,
            "subscriptions": ["none"],
            "interval": 10,
            "timeout": 15,
        }

    def test_runtime_assets_included_when_set(self):
        """runtime_assets should appear only when assets were requested."""
        job = JobDefinition(
            name="job-1",
            namespace="ops",
            command="check.sh",
            timeout=10,
            runtime_assets=("scripts", "jq"),
        )

        assert job.to_payload()["runtime_assets"] == ["scripts", "jq"]

    def test_labels_are_not_shared(self):
        """Each job gets its own copy of the labels."""
        job = JobDefinition(name="a", namespace="ops", command="true", timeout=10)
        job.labels["extra"] = "x"

        assert "extra" not in RUNBOOK_LABELS
        assert "extra" not in JobDefinition(name="b", namespace="ops", command="true", timeout=10).labels


class TestExecutionRequest:
    """Tests for the execute payload."""

    def test_payload_preserves_order_and_duplicates(self):
        request = ExecutionRequest(check="job-1", subscriptions=("web", "web", "db"))

        assert request.to_payload() == {"check": "job-1", "subscriptions": ["web", "web", "db"]}


class TestExitOutcome:
    def test_values_match_sensu_check_states(self):
        assert int(ExitOutcome.OK) == 0
        assert int(ExitOutcome.WARNING) == 1
        assert int(ExitOutcome.CRITICAL) == 2
