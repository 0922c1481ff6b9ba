"""
Matching recipe steps against registered capability contracts.

Every step type used by a recipe must have a registered contract, and each
step must bind exactly the contract's input slots and declare exactly the
contract's outputs. Partial binding is a configuration error.
"""

from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import Protocol

from mapprism.exceptions.domain import ValidationError

from .definition import StepDefinition


class CapabilityContract(Protocol):
    """What a step type accepts and produces (artifact types by name)."""

    accepts: Mapping[str, str]
    produces: Mapping[str, str]


class CapabilityRegistry(Protocol):
    """Read-only source of capability contracts."""

    async def get_many(self, step_types: Collection[str]) -> Mapping[str, CapabilityContract]:
        """Return the contracts registered for ``step_types``; unknown types are omitted."""
        ...


def distinct_types(steps: Iterable[StepDefinition]) -> list[str]:
    """Step types in order of first use."""
    return list(dict.fromkeys(step.type for step in steps))


async def load_contracts(
    registry: CapabilityRegistry, steps: Sequence[StepDefinition]
) -> dict[str, CapabilityContract]:
    """Fetch contracts for all step types with a single registry call.

    Raises:
        ValidationError: For the first step type without a contract.
    """
    types = distinct_types(steps)
    contracts = await registry.get_many(types)
    for step_type in types:
        if step_type not in contracts:
            raise ValidationError(f"Unsupported step type: {step_type}")
    return {step_type: contracts[step_type] for step_type in types}


def _check_names(
    step_id: str,
    declared: Collection[str],
    expected: Collection[str],
    label: str,
    listing_label: str,
) -> None:
    missing = sorted(set(expected) - set(declared))
    if missing:
        raise ValidationError(f'Step "{step_id}" missing required {label}: {missing[0]}')

    invalid = sorted(set(declared) - set(expected))
    if invalid:
        raise ValidationError(
            f'Step "{step_id}" has invalid {label}: {invalid[0]}. '
            f"{listing_label}: {', '.join(sorted(expected))}"
        )


def match_step(step: StepDefinition, contract: CapabilityContract) -> None:
    """Check one step's slots and outputs against its contract (set equality).

    Raises:
        ValidationError: On the first missing or undeclared slot/output.
    """
    _check_names(
        step.id,
        step.inputs.keys(),
        contract.accepts.keys(),
        "input slot",
        "Accepted slots",
    )
    _check_names(
        step.id,
        step.outputs,
        contract.produces.keys(),
        "output",
        "Produced outputs",
    )


def match_capabilities(
    steps: Iterable[StepDefinition], contracts: Mapping[str, CapabilityContract]
) -> None:
    """Check every step against the contract of its type."""
    for step in steps:
        match_step(step, contracts[step.type])
