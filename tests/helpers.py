"""Shared builders for recipe and job test data."""

from collections.abc import Collection, Mapping
from typing import Any

from mapprism.models.step_executor import StepExecutor

TEST_TOKEN = "test-token"

# step_type -> (accepts, produces)
EXECUTORS: dict[str, tuple[dict[str, str], dict[str, str]]] = {
    "resize": ({"src": "image"}, {"thumb": "image"}),
    "blur": ({"src": "image"}, {"blurred": "image"}),
    "merge": ({"left": "image", "right": "image"}, {"merged": "image"}),
}


class InMemoryRegistry:
    """Capability registry backed by a dict, counting lookups."""

    def __init__(self, executors: Mapping[str, tuple[dict[str, str], dict[str, str]]]):
        self.contracts = {
            step_type: StepExecutor(step_type=step_type, accepts=accepts, produces=produces)
            for step_type, (accepts, produces) in executors.items()
        }
        self.calls = 0

    async def get_many(self, step_types: Collection[str]) -> dict[str, StepExecutor]:
        self.calls += 1
        return {t: self.contracts[t] for t in step_types if t in self.contracts}


def step(
    step_id: str,
    step_type: str,
    inputs: dict[str, str] | None = None,
    outputs: list[str] | None = None,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Raw step definition as it appears in a recipe."""
    return {
        "id": step_id,
        "type": step_type,
        "inputs": inputs or {},
        "outputs": outputs if outputs is not None else [],
        "params": params or {},
    }


def artifact(uri: str = "s3://bucket/raw.png", type_: str = "image") -> dict[str, Any]:
    """Raw artifact as supplied in a job request."""
    return {"type": type_, "uri": uri, "hash": "sha256:abc"}
