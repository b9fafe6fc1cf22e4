from __future__ import annotations

from typing import Any, Iterable

import typer

from models.schemas import SeedReport


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_report(report: SeedReport) -> None:
    echo_heading("Seeding Run")
    echo_key_values(
        [
            ("mode", report.mode.value),
            ("devices", report.devices),
            ("readings_generated", report.readings_generated),
            ("batch_size", report.batch_size),
            ("reset_mode", report.reset_mode.value),
            ("deleted", report.deleted if report.deleted is not None else "n/a"),
            ("elapsed_ms", report.elapsed_ms),
        ]
    )

    load = report.load
    typer.echo()
    echo_heading("Batches")
    echo_key_values(
        [
            ("batches", load.batches),
            ("succeeded", load.succeeded),
            ("failed", len(load.failed)),
            ("documents_inserted", load.documents_inserted),
        ]
    )
    if load.failed:
        typer.echo("failures:")
        for failure in load.failed:
            label = "timeout" if failure.timed_out else "error"
            typer.secho(
                f"  - batch {failure.batch_index} [{failure.start}:{failure.end}] {label}: {failure.error}",
                fg=typer.colors.RED,
            )

    typer.echo()
    if report.final_count is not None:
        typer.secho(f"Inserted {report.final_count} records.", fg=typer.colors.GREEN)
    else:
        typer.secho(
            f"Could not count documents: {report.count_error}",
            fg=typer.colors.YELLOW,
            err=True,
        )
