"""Tests for the job and step state transition contract and response models."""

import pydantic
import pytest

from mapprism.models import (
    CreatedResponse,
    Job,
    JobStatus,
    JobStepStatus,
    can_transition_job,
    can_transition_step,
)


@pytest.mark.parametrize(
    ("current", "new", "allowed"),
    [
        (JobStatus.pending, JobStatus.running, True),
        (JobStatus.running, JobStatus.partial, True),
        (JobStatus.pending, JobStatus.completed, False),
        (JobStatus.completed, JobStatus.running, False),
    ],
)
def test_job_transitions(current, new, allowed):
    assert can_transition_job(current, new) is allowed


@pytest.mark.parametrize(
    ("current", "new", "allowed"),
    [
        (JobStepStatus.pending, JobStepStatus.running, True),
        (JobStepStatus.running, JobStepStatus.skipped, True),
        (JobStepStatus.failed, JobStepStatus.running, True),
        (JobStepStatus.pending, JobStepStatus.success, False),
        (JobStepStatus.success, JobStepStatus.running, False),
    ],
)
def test_step_transitions(current, new, allowed):
    assert can_transition_step(current, new) is allowed


def test_accepts_raw_status_values():
    assert can_transition_step("failed", JobStepStatus.running)


def test_created_response_reads_row_id():
    assert CreatedResponse.model_validate(Job(id=5, recipe_id=1)).id == 5


def test_created_response_rejects_unsaved_row():
    with pytest.raises(pydantic.ValidationError):
        CreatedResponse.model_validate(Job(recipe_id=1))
