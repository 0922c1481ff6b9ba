"""Recipe validation pipeline: structure, graph, capabilities, availability."""

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any

from mapprism.utils.logger import logger

from .availability import ArtifactSets, check_availability, derive_artifacts
from .capabilities import CapabilityRegistry, load_contracts, match_capabilities
from .definition import StepDefinition, parse_definition
from .graph import build_producer_index, resolve_order


@dataclass(frozen=True)
class ValidatedRecipe:
    """A definition that passed every check.

    Args:
        steps: Steps in declaration order.
        order: Steps in dependency order.
        artifacts: Derived artifact sets.
    """

    steps: list[StepDefinition]
    order: list[StepDefinition]
    artifacts: ArtifactSets

    @property
    def initial_inputs(self) -> frozenset[str]:
        return self.artifacts.initial_inputs


class RecipeValidator:
    """Validates recipe definitions against the capability registry."""

    def __init__(self, registry: CapabilityRegistry):
        self.registry = registry

    async def validate(
        self, definition: Any, external_inputs: Collection[str] = ()
    ) -> ValidatedRecipe:
        """Run every check on a raw definition, stopping at the first failure.

        Args:
            definition: Decoded JSON definition ``{"recipe": [...]}``.
            external_inputs: Artifact names treated as available up front.

        Returns:
            The validated recipe.

        Raises:
            ValidationError: Describing the first violation found.
        """
        steps = parse_definition(definition)
        producers = build_producer_index(steps)
        order = resolve_order(steps, producers)

        contracts = await load_contracts(self.registry, steps)
        match_capabilities(order, contracts)

        artifacts = derive_artifacts(steps)
        check_availability(order, artifacts, external_inputs)

        logger.debug(
            f"Recipe validated: {len(steps)} step(s), "
            f"initial inputs: {sorted(artifacts.initial_inputs)}"
        )
        return ValidatedRecipe(steps=steps, order=order, artifacts=artifacts)
