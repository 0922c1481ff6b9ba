"""Tests for the CLI helpers against a SQLite file database."""

import json

import pytest

from mapprism.cli.main import (
    add_executors,
    build_parser,
    init_database,
    main,
    validate_recipe_file,
)
from mapprism.settings import Settings

from helpers import step


@pytest.fixture
def file_settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")


def test_parser_commands():
    parser = build_parser()

    args = parser.parse_args(["run", "--port", "9000", "--reload"])
    assert (args.command, args.port, args.reload) == ("run", 9000, True)

    args = parser.parse_args(["db", "migrate"])
    assert (args.db_command, args.target) == ("migrate", "head")

    args = parser.parse_args(["recipe", "validate", "recipe.json"])
    assert (args.recipe_command, args.path) == ("validate", "recipe.json")


def test_unknown_command_exits():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_register_and_validate(file_settings: Settings):
    await init_database(file_settings)

    count = await add_executors(
        file_settings,
        [{"step_type": "resize", "accepts": {"src": "image"}, "produces": {"thumb": "image"}}],
    )
    valid = await validate_recipe_file(
        file_settings, {"recipe": [step("s1", "resize", {"src": "raw"}, ["thumb"])]}
    )
    invalid = await validate_recipe_file(
        file_settings, {"recipe": [step("s1", "blur", {"src": "raw"}, ["b"])]}
    )

    assert count == 1
    assert valid is True
    assert invalid is False


@pytest.mark.asyncio
async def test_add_executors_replaces(file_settings: Settings):
    await init_database(file_settings)
    entry = {"step_type": "resize", "accepts": {"src": "image"}, "produces": {"thumb": "image"}}

    await add_executors(file_settings, entry)
    await add_executors(file_settings, {**entry, "produces": {"small": "image"}})

    assert await validate_recipe_file(
        file_settings, {"recipe": [step("s1", "resize", {"src": "raw"}, ["small"])]}
    )


def test_validate_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        main(["recipe", "validate", str(tmp_path / "absent.json")])
    assert exc_info.value.code == 1


def test_validate_malformed_json_exits(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"recipe": []})[:-2])
    with pytest.raises(SystemExit) as exc_info:
        main(["recipe", "validate", str(path)])
    assert exc_info.value.code == 1
