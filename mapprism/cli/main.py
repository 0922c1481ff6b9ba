#!/usr/bin/env python3
"""MapPrism CLI - management utility for the MapPrism service."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from mapprism.exceptions import MapprismError
from mapprism.models.step_executor import StepExecutor, StepExecutorCreate
from mapprism.repositories.step_executor_repository import StepExecutorRepository
from mapprism.services.recipe import RecipeValidator
from mapprism.settings import Settings, get_settings
from mapprism.utils.db_manager import DatabaseManager
from mapprism.utils.logger import logger


def load_json_file(path: str) -> Any:
    """Read and decode a JSON file, exiting with status 1 on failure."""
    try:
        return json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {path}: {e}")
        sys.exit(1)


def run_server(
    settings: Settings, host: str | None = None, port: int | None = None, reload: bool = False
) -> None:
    """Run the MapPrism API server."""
    import uvicorn

    host = host or settings.host
    port = port or settings.port

    logger.info(f"Starting MapPrism server at http://{host}:{port}")

    uvicorn.run(
        "mapprism.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if settings.debug else "info",
        log_config=None,
    )


async def init_database(settings: Settings) -> None:
    """Create all tables directly from the models."""
    db_manager = DatabaseManager(settings)
    try:
        await db_manager.create_db_and_tables_async()
    finally:
        await db_manager.close()
    logger.info("Database initialized successfully")


async def show_database_status(settings: Settings) -> None:
    """Log the applied and the newest known migration revision."""
    from mapprism.utils.migrations import get_current_revision, get_head_revision

    current = await get_current_revision(settings)
    head = get_head_revision(settings)
    logger.info(f"Current revision: {current or 'none'}; head: {head}")


async def add_executors(settings: Settings, raw: Any) -> int:
    """Register or replace step executors from decoded JSON.

    Args:
        settings: Settings providing the database
        raw: One executor object or a list of them

    Returns:
        Number of executors registered
    """
    entries = raw if isinstance(raw, list) else [raw]
    executors = [
        StepExecutor.model_validate(StepExecutorCreate.model_validate(entry).model_dump())
        for entry in entries
    ]

    db_manager = DatabaseManager(settings)
    try:
        async with db_manager.get_async_session_context() as session:
            repo = StepExecutorRepository(session)
            for executor in executors:
                await repo.upsert(executor)
                logger.info(f"Registered step executor: {executor.step_type}")
    finally:
        await db_manager.close()
    return len(executors)


async def validate_recipe_file(settings: Settings, definition: Any) -> bool:
    """Validate a definition against the registry in the configured database.

    Returns:
        True when the definition is valid
    """
    db_manager = DatabaseManager(settings)
    try:
        async with db_manager.get_async_session_context() as session:
            validator = RecipeValidator(StepExecutorRepository(session))
            try:
                validated = await validator.validate(definition)
            except MapprismError as e:
                logger.error(f"Invalid recipe: {e.message}")
                return False
    finally:
        await db_manager.close()

    logger.info(
        f"Recipe is valid: {len(validated.steps)} step(s), "
        f"initial inputs: {', '.join(sorted(validated.initial_inputs)) or 'none'}"
    )
    return True


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``mapprism`` command."""
    parser = argparse.ArgumentParser(
        prog="mapprism", description="MapPrism CLI - recipe validation and job materialization"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_parser = subparsers.add_parser("run", help="Run the API server")
    run_parser.add_argument("--host", type=str, default=None, help="Host to bind to")
    run_parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    run_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # db command
    db_parser = subparsers.add_parser("db", help="Database management")
    db_subparsers = db_parser.add_subparsers(dest="db_command")
    migrate_parser = db_subparsers.add_parser("migrate", help="Apply migrations")
    migrate_parser.add_argument(
        "--target", type=str, default="head", help="Migration target (default: head)"
    )
    db_subparsers.add_parser("init", help="Create tables directly from the models")
    db_subparsers.add_parser("status", help="Show the current migration revision")

    # executor command
    executor_parser = subparsers.add_parser("executor", help="Step executor registry")
    executor_subparsers = executor_parser.add_subparsers(dest="executor_command")
    executor_add = executor_subparsers.add_parser(
        "add", help="Register step executors from a JSON file"
    )
    executor_add.add_argument("path", help="JSON file with one executor or a list of them")

    # recipe command
    recipe_parser = subparsers.add_parser("recipe", help="Recipe tools")
    recipe_subparsers = recipe_parser.add_subparsers(dest="recipe_command")
    recipe_validate = recipe_subparsers.add_parser(
        "validate", help="Validate a recipe definition file"
    )
    recipe_validate.add_argument("path", help="JSON file containing the definition")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    if args.command == "run":
        run_server(settings, args.host, args.port, args.reload)
    elif args.command == "db":
        if args.db_command == "migrate":
            from mapprism.utils.migrations import run_migrations

            run_migrations(args.target, settings)
        elif args.db_command == "init":
            asyncio.run(init_database(settings))
        elif args.db_command == "status":
            asyncio.run(show_database_status(settings))
        else:
            parser.parse_args(["db", "--help"])
    elif args.command == "executor":
        if args.executor_command == "add":
            raw = load_json_file(args.path)
            try:
                asyncio.run(add_executors(settings, raw))
            except PydanticValidationError as e:
                logger.error(f"Invalid step executor: {e}")
                sys.exit(1)
        else:
            parser.parse_args(["executor", "--help"])
    elif args.command == "recipe":
        if args.recipe_command == "validate":
            definition = load_json_file(args.path)
            if not asyncio.run(validate_recipe_file(settings, definition)):
                sys.exit(1)
        else:
            parser.parse_args(["recipe", "--help"])
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
