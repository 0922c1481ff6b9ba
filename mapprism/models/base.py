"""
Base models for MapPrism.

This module provides the status enumerations shared by the job tables and
the state transition contract that execution workers build on.
"""

import enum
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class JobStatus(str, enum.Enum):
    """Enumeration of possible job status values."""

    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"
    partial = "partial"


class JobStepStatus(str, enum.Enum):
    """Enumeration of possible job step status values."""

    pending = "pending"
    running = "running"
    success = "success"
    failed = "failed"
    skipped = "skipped"


# Transitions written by the execution subsystem. The engine only ever
# creates rows in the ``pending`` state.
JOB_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.pending: frozenset({JobStatus.running}),
    JobStatus.running: frozenset({JobStatus.completed, JobStatus.failed, JobStatus.partial}),
    JobStatus.completed: frozenset(),
    JobStatus.failed: frozenset(),
    JobStatus.partial: frozenset(),
}

# failed -> running is a retry; the executor increments ``attempt`` on re-entry.
JOB_STEP_TRANSITIONS: dict[JobStepStatus, frozenset[JobStepStatus]] = {
    JobStepStatus.pending: frozenset({JobStepStatus.running}),
    JobStepStatus.running: frozenset(
        {JobStepStatus.success, JobStepStatus.failed, JobStepStatus.skipped}
    ),
    JobStepStatus.failed: frozenset({JobStepStatus.running}),
    JobStepStatus.success: frozenset(),
    JobStepStatus.skipped: frozenset(),
}


def can_transition_job(current: JobStatus, new: JobStatus) -> bool:
    """Check whether a job may move from ``current`` to ``new``."""
    return new in JOB_TRANSITIONS[JobStatus(current)]


def can_transition_step(current: JobStepStatus, new: JobStepStatus) -> bool:
    """Check whether a job step may move from ``current`` to ``new``."""
    return new in JOB_STEP_TRANSITIONS[JobStepStatus(current)]
