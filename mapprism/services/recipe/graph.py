"""
Dependency graph of a recipe.

Edges run from a step to the producer of each artifact it consumes. Inputs
without a producer are graph sources. The producer index is built once so
every lookup during traversal is constant time.
"""

from collections.abc import Iterable, Mapping, Sequence

from mapprism.exceptions.domain import ValidationError

from .definition import StepDefinition


def build_producer_index(steps: Iterable[StepDefinition]) -> dict[str, StepDefinition]:
    """Map every output artifact name to the step that produces it.

    Raises:
        ValidationError: If an artifact is declared as output more than once,
            whether by two steps or by the same step twice.
    """
    producers: dict[str, StepDefinition] = {}
    for step in steps:
        for name in step.outputs:
            if name in producers:
                raise ValidationError(f"Duplicate artifact output: {name}")
            producers[name] = step
    return producers


def dependencies_of(
    step: StepDefinition, producers: Mapping[str, StepDefinition]
) -> list[StepDefinition]:
    """Steps whose outputs ``step`` consumes, in slot order."""
    return [producers[name] for name in step.input_artifacts if name in producers]


def resolve_order(
    steps: Sequence[StepDefinition], producers: Mapping[str, StepDefinition]
) -> list[StepDefinition]:
    """Order steps so that every producer precedes its consumers.

    Iterative depth-first search with an explicit stack; a step met again
    while still on the current path closes a cycle.

    Args:
        steps: Steps in declaration order (used as traversal roots).
        producers: Index from :func:`build_producer_index`.

    Returns:
        Every step exactly once, dependencies first.

    Raises:
        ValidationError: If the graph contains a cycle.
    """
    visited: set[str] = set()
    on_path: set[str] = set()
    order: list[StepDefinition] = []

    for root in steps:
        if root.id in visited:
            continue

        # Each frame is a step plus the iterator over its remaining dependencies.
        stack = [(root, iter(dependencies_of(root, producers)))]
        on_path.add(root.id)

        while stack:
            step, pending = stack[-1]
            dependency = next(pending, None)

            if dependency is None:
                stack.pop()
                on_path.discard(step.id)
                visited.add(step.id)
                order.append(step)
                continue

            if dependency.id in on_path:
                raise ValidationError("Recipe contains a cycle")
            if dependency.id in visited:
                continue

            on_path.add(dependency.id)
            stack.append((dependency, iter(dependencies_of(dependency, producers))))

    return order
