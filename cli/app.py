from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn, Optional

import pymongo
import typer
from pymongo.errors import PyMongoError

from cli.config import load_options
from cli.render import render_report
from datastore.memory_collection import build_memory_collection
from datastore.mongo import StoreSetupError, connect_store
from logging_config import configure_logging
from models.schemas import GenerationMode, ResetMode
from services.seeder import build_default_seeder
from settings import ConfigurationError, Settings, get_settings, load_env_file


@dataclass
class CLIState:
    settings: Settings


app = typer.Typer(
    help="Seed a MongoDB collection with synthetic IoT temperature readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        _fail("CLI state is uninitialized.")
    return state


def _open_collection(ctx: typer.Context, settings: Settings, dry_run: bool) -> Any:
    if dry_run:
        collection = build_memory_collection(settings)
        ctx.call_on_close(collection.flush)
        return collection
    try:
        store = connect_store(settings)
    except StoreSetupError as exc:
        _fail(str(exc))
    ctx.call_on_close(store.close)
    return store.collection


@app.callback()
def main(
    ctx: typer.Context,
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Load environment variables from this file (defaults to ./.env when present).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    try:
        load_env_file(env_file)
        get_settings.cache_clear()
        settings = get_settings()
    except ConfigurationError as exc:
        _fail(f"Configuration error: {exc}")
    configure_logging(log_level or settings.log_level)
    ctx.obj = CLIState(settings=settings)


@app.command("seed")
def seed_command(
    ctx: typer.Context,
    devices: Optional[int] = typer.Option(
        None, "--devices", help="How many mock devices to create (default 1)."
    ),
    readings_per_device: Optional[int] = typer.Option(
        None,
        "--readings-per-device",
        "--readingsPerDevice",
        help="Readings per device in flat mode (default 10).",
    ),
    days: Optional[int] = typer.Option(
        None,
        "--days",
        help="Days of per-minute readings in time-series mode (default 365).",
    ),
    mode: Optional[GenerationMode] = typer.Option(
        None,
        "--mode",
        case_sensitive=False,
        help="Generation mode; --days alone implies time-series.",
    ),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size", min=1, help="Readings per insert request (default LOADER_BATCH_SIZE)."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", min=1, help="Concurrent batch submissions (default LOADER_WORKER_COUNT)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds allowed per store request (default LOADER_TIMEOUT_SECONDS)."
    ),
    reset_mode: Optional[ResetMode] = typer.Option(
        None,
        "--reset-mode",
        case_sensitive=False,
        help="Truncate or drop the collection before loading (default COLLECTION_RESET_MODE).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for the temperature random source."
    ),
    temp_min: Optional[float] = typer.Option(None, "--temp-min", help="Lowest temperature (default 0)."),
    temp_max: Optional[float] = typer.Option(None, "--temp-max", help="Highest temperature (default 100)."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Load into an in-memory collection (persisted to MEMORY_STORE_PATH when set).",
    ),
) -> None:
    """Replace the collection's contents with freshly generated readings."""
    state = _get_state(ctx)
    settings = state.settings
    try:
        options = load_options(
            devices=devices,
            readings_per_device=readings_per_device,
            days=days,
            mode=mode,
            temp_min=temp_min,
            temp_max=temp_max,
            random_seed=seed,
        )
        seeder = build_default_seeder(
            settings,
            random_seed=options.random_seed,
            temperature_range=options.temperature_range,
            batch_size=batch_size,
            workers=workers,
            timeout=timeout,
            reset_mode=reset_mode,
        )
    except ValueError as exc:
        _fail(f"Configuration error: {exc}")
    ctx.call_on_close(seeder.loader.shutdown)

    collection = _open_collection(ctx, settings, dry_run)
    generation = options.generation
    typer.echo(
        f"Creating {generation.devices} devices ({generation.mode.value}) - "
        f"{generation.expected_readings} readings total"
    )
    try:
        report = seeder.run(generation, collection)
    except StoreSetupError as exc:
        _fail(str(exc))
    render_report(report)


@app.command("count")
def count_command(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Count the in-memory collection instead of MongoDB."
    ),
) -> None:
    """Print how many documents the destination collection holds."""
    state = _get_state(ctx)
    settings = state.settings
    collection = _open_collection(ctx, settings, dry_run)
    try:
        with pymongo.timeout(settings.request_timeout):
            count = collection.count_documents({})
    except PyMongoError as exc:
        _fail(f"Could not count documents: {exc}")
    typer.echo(f"{settings.mongo_db}.{settings.mongo_collection}: {count} documents")
