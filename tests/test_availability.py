"""Tests for artifact derivation and availability checks."""

import random

import pytest

from mapprism.exceptions import ValidationError
from mapprism.services.recipe import StepDefinition, check_availability, derive_artifacts


def make(step_id: str, inputs: dict[str, str], outputs: list[str]) -> StepDefinition:
    return StepDefinition(id=step_id, type="t", inputs=inputs, outputs=tuple(outputs))


STEPS = [
    make("s1", {"x": "raw"}, ["a"]),
    make("s2", {"x": "a", "y": "mask"}, ["b"]),
    make("s3", {"x": "b", "y": "raw"}, ["c", "d"]),
]


def test_derive_artifacts():
    artifacts = derive_artifacts(STEPS)

    assert artifacts.outputs == {"a", "b", "c", "d"}
    assert artifacts.referenced == {"raw", "a", "mask", "b"}
    assert artifacts.initial_inputs == {"raw", "mask"}


def test_derive_artifacts_ignores_order():
    shuffled = STEPS[:]
    random.Random(7).shuffle(shuffled)
    assert derive_artifacts(shuffled) == derive_artifacts(reversed(STEPS))


def test_check_availability_in_dependency_order():
    check_availability(STEPS, derive_artifacts(STEPS))


def test_unresolved_input():
    consumer_first = [STEPS[1], STEPS[0]]
    artifacts = derive_artifacts(STEPS[:1])  # only "raw" is an initial input
    with pytest.raises(ValidationError, match="Unresolved input artifact: a"):
        check_availability(consumer_first, artifacts)


def test_external_inputs_count_as_available():
    steps = [make("s1", {"x": "ext"}, ["a"])]
    artifacts = derive_artifacts([make("s0", {}, ["unused"])])
    check_availability(steps, artifacts, external_inputs={"ext"})
