"""
Structural validation of raw recipe definitions.

A definition arrives as decoded JSON of the form ``{"recipe": [step, ...]}``.
:func:`parse_definition` checks its shape and returns typed steps, failing on
the first violation found while scanning steps in declaration order.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mapprism.exceptions.domain import ValidationError

STEPS_KEY = "recipe"


@dataclass(frozen=True)
class StepDefinition:
    """One node of a recipe graph.

    Args:
        id: Step identifier, unique within the recipe.
        type: Step type naming a registered capability contract.
        inputs: Slot name -> artifact name.
        outputs: Names of the artifacts the step produces.
        params: Opaque configuration passed through to the executor.
    """

    id: str
    type: str
    inputs: Mapping[str, str] = field(default_factory=dict)
    outputs: tuple[str, ...] = ()
    params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def input_artifacts(self) -> list[str]:
        """Artifact names consumed by this step, in slot order."""
        return list(self.inputs.values())


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _parse_step(position: int, raw: Any) -> StepDefinition:
    if not isinstance(raw, dict):
        raise ValidationError(f"Step at position {position} must be an object")

    step_id = raw.get("id")
    if not _is_name(step_id):
        raise ValidationError('Step must have a non-empty string "id"')

    if not _is_name(raw.get("type")):
        raise ValidationError(f'Step "{step_id}" must have a non-empty string "type"')

    inputs = raw.get("inputs")
    if not isinstance(inputs, dict) or not all(
        isinstance(slot, str) and isinstance(artifact, str) for slot, artifact in inputs.items()
    ):
        raise ValidationError(
            f'Step "{step_id}" must have an "inputs" object mapping slot names to artifact names'
        )

    outputs = raw.get("outputs")
    if not isinstance(outputs, list) or not all(isinstance(name, str) for name in outputs):
        raise ValidationError(f'Step "{step_id}" must have an "outputs" array of strings')
    if not outputs:
        raise ValidationError(f'Step "{step_id}" must have at least one output')

    params = raw.get("params")
    if not isinstance(params, dict):
        raise ValidationError(f'Step "{step_id}" must have a "params" object')

    return StepDefinition(
        id=step_id,
        type=raw["type"],
        inputs=dict(inputs),
        outputs=tuple(outputs),
        params=dict(params),
    )


def parse_definition(definition: Any) -> list[StepDefinition]:
    """Check the shape of a raw recipe definition and parse its steps.

    Args:
        definition: Decoded JSON definition.

    Returns:
        Steps in declaration order.

    Raises:
        ValidationError: On the first structural violation.
    """
    if not isinstance(definition, dict) or not isinstance(definition.get(STEPS_KEY), list):
        raise ValidationError(f'Recipe definition must contain a "{STEPS_KEY}" array')

    raw_steps = definition[STEPS_KEY]
    if not raw_steps:
        raise ValidationError("Recipe must contain at least one step")

    steps: list[StepDefinition] = []
    seen_ids: set[str] = set()
    for position, raw in enumerate(raw_steps):
        step = _parse_step(position, raw)
        if step.id in seen_ids:
            raise ValidationError(f"Duplicate step ID: {step.id}")
        seen_ids.add(step.id)
        steps.append(step)

    return steps
