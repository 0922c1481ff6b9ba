"""
Recipe validation engine.

Example:
    from mapprism.services.recipe import RecipeValidator

    validator = RecipeValidator(StepExecutorRepository(session))
    validated = await validator.validate({"recipe": [...]})
    validated.initial_inputs  # artifacts to supply when creating a job
"""

from .availability import ArtifactSets, check_availability, derive_artifacts
from .capabilities import (
    CapabilityContract,
    CapabilityRegistry,
    load_contracts,
    match_capabilities,
    match_step,
)
from .definition import StepDefinition, parse_definition
from .graph import build_producer_index, resolve_order
from .validator import RecipeValidator, ValidatedRecipe

__all__ = [
    "ArtifactSets",
    "CapabilityContract",
    "CapabilityRegistry",
    "RecipeValidator",
    "StepDefinition",
    "ValidatedRecipe",
    "build_producer_index",
    "check_availability",
    "derive_artifacts",
    "load_contracts",
    "match_capabilities",
    "match_step",
    "parse_definition",
    "resolve_order",
]
