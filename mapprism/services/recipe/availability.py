"""
Artifact availability within a recipe.

:func:`derive_artifacts` is the one place that decides which artifacts a
recipe produces internally and which must be supplied when a job is created;
both recipe validation and job materialization call it.
"""

from collections.abc import Collection, Iterable
from dataclasses import dataclass

from mapprism.exceptions.domain import ValidationError

from .definition import StepDefinition


@dataclass(frozen=True)
class ArtifactSets:
    """Artifact names of a recipe.

    Args:
        outputs: Every artifact declared as a step output.
        referenced: Every artifact consumed by some step input.
        initial_inputs: Consumed but never produced; supplied with the job.
    """

    outputs: frozenset[str]
    referenced: frozenset[str]
    initial_inputs: frozenset[str]


def derive_artifacts(steps: Iterable[StepDefinition]) -> ArtifactSets:
    """Compute output, referenced and initial-input artifact sets.

    The result depends only on the set of steps, not on their order.
    """
    outputs: set[str] = set()
    referenced: set[str] = set()
    for step in steps:
        outputs.update(step.outputs)
        referenced.update(step.input_artifacts)

    return ArtifactSets(
        outputs=frozenset(outputs),
        referenced=frozenset(referenced),
        initial_inputs=frozenset(referenced - outputs),
    )


def check_availability(
    ordered_steps: Iterable[StepDefinition],
    artifacts: ArtifactSets,
    external_inputs: Collection[str] = (),
) -> None:
    """Walk steps in dependency order and check each input is already available.

    Args:
        ordered_steps: Steps in topological order.
        artifacts: Result of :func:`derive_artifacts` for the same steps.
        external_inputs: Extra artifact names the caller allows as available.

    Raises:
        ValidationError: For the first input that is not yet available.
    """
    available = set(artifacts.initial_inputs) | set(external_inputs)
    for step in ordered_steps:
        for name in step.input_artifacts:
            if name not in available:
                raise ValidationError(f"Unresolved input artifact: {name}")
        available.update(step.outputs)
