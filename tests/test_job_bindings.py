"""Tests for binding job inputs and outputs to a recipe's artifacts."""

import pytest

from mapprism.exceptions import ValidationError
from mapprism.services.job_service import check_job_bindings, parse_artifact_inputs
from mapprism.services.recipe import derive_artifacts, parse_definition

from helpers import artifact, step

ARTIFACTS = derive_artifacts(
    parse_definition(
        {
            "recipe": [
                step("s1", "resize", {"src": "raw"}, ["thumb"]),
                step("s2", "merge", {"left": "thumb", "right": "mask"}, ["merged"]),
            ]
        }
    )
)


class TestParseArtifactInputs:
    def test_valid_artifacts(self):
        parsed = parse_artifact_inputs(
            {"raw": {**artifact(), "metadata": {"width": 512}}, "mask": artifact("s3://m")}
        )
        assert parsed["raw"].metadata == {"width": 512}
        assert parsed["mask"].uri == "s3://m"
        assert parsed["mask"].metadata is None

    @pytest.mark.parametrize(
        "raw",
        [
            "s3://bucket/raw.png",
            {"type": "image", "uri": "s3://x"},
            {"type": "image", "uri": "s3://x", "hash": 12},
            {"type": "", "uri": "s3://x", "hash": "h"},
        ],
    )
    def test_malformed_artifact_named(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            parse_artifact_inputs({"raw": raw})
        assert str(exc_info.value) == (
            'Invalid artifact "raw": must have type, uri, and hash as strings'
        )


class TestCheckJobBindings:
    def test_exact_inputs(self):
        check_job_bindings(ARTIFACTS, {"raw": 1, "mask": 2}, {"merged": 3, "thumb": 4})

    def test_missing_input(self):
        with pytest.raises(ValidationError, match="Missing required initial input artifact: mask"):
            check_job_bindings(ARTIFACTS, {"raw": 1}, None)

    def test_unexpected_input(self):
        with pytest.raises(ValidationError) as exc_info:
            check_job_bindings(ARTIFACTS, {"raw": 1, "mask": 2, "extra": 3}, None)
        assert str(exc_info.value) == (
            'Unexpected input artifact "extra": not required by recipe. '
            "Required inputs: mask, raw"
        )

    def test_intermediate_artifact_is_not_an_input(self):
        with pytest.raises(ValidationError, match='Unexpected input artifact "thumb"'):
            check_job_bindings(ARTIFACTS, {"raw": 1, "mask": 2, "thumb": 3}, None)

    def test_missing_checked_before_unexpected(self):
        with pytest.raises(ValidationError, match="Missing required"):
            check_job_bindings(ARTIFACTS, {"raw": 1, "extra": 3}, None)

    def test_output_must_be_producible(self):
        with pytest.raises(ValidationError) as exc_info:
            check_job_bindings(ARTIFACTS, {"raw": 1, "mask": 2}, {"raw": 1})
        assert str(exc_info.value) == (
            'Invalid job output "raw": artifact is not producible by recipe. '
            "Producible artifacts: merged, thumb"
        )
