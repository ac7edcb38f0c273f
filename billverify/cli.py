"""BillVerify CLI.

Commands:
- verify: Ingest a time entry file, run verification, write exports
- codes: List UTBMS task and activity codes
- profile save/show/list/delete: Manage saved billing profiles
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from billverify.classification.utbms import UTBMS_CODES, describe_code
from billverify.config import get_config
from billverify.core.logging import configure_logging
from billverify.exceptions import IngestionError, ProfileNotFoundError
from billverify.ingestion import ingest_file
from billverify.models import Confidence, RoundingDirection, VerifierSettings
from billverify.pipeline import VerificationPipeline, VerificationResult
from billverify.profiles import ProfileStore, apply_profile, profile_from_settings
from billverify.reporting import (
    export_entries_csv,
    export_results_excel,
    export_results_json,
    export_review_log_json,
    generate_statement_pdf,
)

app = typer.Typer(
    name="billverify",
    help="BillVerify - Pre-invoice verification for legal time entries",
    no_args_is_help=True,
)
profile_cli = typer.Typer(help="Saved billing profiles")
app.add_typer(profile_cli, name="profile")

console = Console()

_CONFIDENCE_STYLES = {
    Confidence.HIGH: "green",
    Confidence.MEDIUM: "yellow",
    Confidence.LOW: "red",
}


def _build_settings(
    profile: str | None = None,
    rate: float | None = None,
    long_threshold: float | None = None,
    day_threshold: float | None = None,
    increment: float | None = None,
    direction: RoundingDirection | None = None,
    client: str | None = None,
    start: str | None = None,
    end: str | None = None,
) -> VerifierSettings:
    """Config defaults, then the named profile, then explicit options."""
    config = get_config()
    settings = config.default_settings()

    if profile:
        settings = apply_profile(settings, ProfileStore(config.profiles_dir).load(profile))

    overrides = {
        "hourly_rate": rate,
        "long_threshold": long_threshold,
        "day_threshold": day_threshold,
        "rounding_increment": increment,
        "rounding_direction": direction,
        "client_name": client,
        "start_date": start,
        "end_date": end,
    }
    update = {k: v for k, v in overrides.items() if v is not None}
    if not update:
        return settings
    return VerifierSettings.model_validate({**settings.model_dump(), **update})


@app.command()
def verify(
    file: Path = typer.Argument(..., help="Time entry file (CSV/TSV, JSON or text)"),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Saved profile to apply"),
    rate: float | None = typer.Option(None, "--rate", help="Default hourly rate"),
    long_threshold: float | None = typer.Option(None, "--long-threshold", help="Long entry hours"),
    day_threshold: float | None = typer.Option(None, "--day-threshold", help="Daily total hours"),
    increment: float | None = typer.Option(None, "--increment", help="Rounding increment (0 = off)"),
    direction: RoundingDirection | None = typer.Option(None, "--direction", help="Rounding direction"),
    client: str | None = typer.Option(None, "--client", help="Client name for leak detection"),
    start: str | None = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)"),
    end: str | None = typer.Option(None, "--end", help="End date (YYYY-MM-DD)"),
    csv_out: Path | None = typer.Option(None, "--csv", help="Write CSV export"),
    json_out: Path | None = typer.Option(None, "--json", help="Write JSON export"),
    xlsx_out: Path | None = typer.Option(None, "--xlsx", help="Write Excel workbook"),
    pdf_out: Path | None = typer.Option(None, "--pdf", help="Write PDF billing statement"),
    review_log: Path | None = typer.Option(None, "--review-log", help="Write review log JSON"),
    show_entries: bool = typer.Option(False, "--show-entries", help="Print every entry"),
):
    """Verify a batch of time entries before invoicing."""
    config = get_config()
    configure_logging(config.log_level, json_logs=config.log_format == "json")

    try:
        settings = _build_settings(
            profile, rate, long_threshold, day_threshold, increment, direction, client, start, end
        )
        entries = ingest_file(file, settings)
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid option: {_describe_validation_error(e)}")
        raise typer.Exit(1) from e
    except (IngestionError, ProfileNotFoundError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"[bold]Verifying:[/bold] {file.name} ({len(entries)} entries)")
    result = VerificationPipeline(settings).run(entries)

    _print_summary(result)
    _print_daily(result, settings)
    if show_entries:
        _print_entries(result)

    if csv_out:
        csv_out.write_text(export_entries_csv(result.entries))
        console.print(f"[green]✓[/green] CSV saved to: {csv_out}")
    if json_out:
        json_out.write_text(export_results_json(result.entries, result.summary, settings))
        console.print(f"[green]✓[/green] JSON saved to: {json_out}")
    if review_log:
        review_log.write_text(export_review_log_json(result.entries, settings))
        console.print(f"[green]✓[/green] Review log saved to: {review_log}")
    if xlsx_out:
        xlsx_out.write_bytes(
            export_results_excel(result.entries, result.summary, result.daily).getvalue()
        )
        console.print(f"[green]✓[/green] Workbook saved to: {xlsx_out}")
    if pdf_out:
        pdf_out.write_bytes(
            generate_statement_pdf(result.entries, result.summary, settings).getvalue()
        )
        console.print(f"[green]✓[/green] Statement saved to: {pdf_out}")


def _describe_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def _print_summary(result: VerificationResult) -> None:
    s = result.summary
    table = Table(title="Verification Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Entries", str(s.total))
    table.add_row("Total Hours", f"{s.total_hours:.2f}")
    table.add_row("Adjusted Hours", f"{s.adjusted_hours:.2f}")
    table.add_row("Total Amount", f"${s.total_amount:,.2f}")
    table.add_row("Flagged", str(s.flagged))
    table.add_row("Quality Issues", str(s.quality_issues))
    table.add_row("Confidence (H/M/L)", f"{s.high_confidence}/{s.medium_confidence}/{s.low_confidence}")
    table.add_row("UTBMS Coverage", f"{s.utbms_coverage}/{s.total}")
    table.add_row("Rounding Delta", f"{s.rounding_delta:+.2f}h")
    console.print(table)


def _print_daily(result: VerificationResult, settings: VerifierSettings) -> None:
    table = Table(title=f"Daily Totals (threshold {settings.day_threshold:g}h)")
    table.add_column("Date")
    table.add_column("Entries", justify="right")
    table.add_column("Hours", justify="right")
    table.add_column("Amount", justify="right")
    table.add_column("Flags", justify="right")

    for day in result.daily:
        style = "red" if day.over_threshold else None
        table.add_row(
            day.date or "(no date)",
            str(day.entries),
            f"{day.hours:.2f}",
            f"${day.amount:,.2f}",
            str(day.flag_count),
            style=style,
        )
    console.print(table)


def _print_entries(result: VerificationResult) -> None:
    table = Table(title="Entries")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Attorney")
    table.add_column("Description", max_width=40)
    table.add_column("Hours", justify="right")
    table.add_column("UTBMS", max_width=24)
    table.add_column("Conf.")
    table.add_column("Flags")

    for entry in result.entries:
        color = _CONFIDENCE_STYLES[entry.confidence]
        table.add_row(
            entry.id,
            entry.date,
            entry.attorney,
            entry.description,
            f"{entry.billable_hours:.1f}",
            describe_code(entry.utbms_code) or "-",
            f"[{color}]{entry.confidence.value}[/{color}]",
            ", ".join(f.type.value for f in entry.flags),
        )
    console.print(table)


@app.command()
def codes():
    """List UTBMS litigation task and activity codes."""
    table = Table(title="UTBMS Codes")
    table.add_column("Code", style="cyan")
    table.add_column("Phase")
    table.add_column("Description")

    for code, info in UTBMS_CODES.items():
        table.add_row(code, info["phase"], info["description"])
    console.print(table)


@profile_cli.command("save")
def profile_save(
    name: str = typer.Argument(..., help="Profile name"),
    client: str = typer.Option("", "--client", help="Client name"),
    rate: float | None = typer.Option(None, "--rate", help="Hourly rate"),
    long_threshold: float | None = typer.Option(None, "--long-threshold"),
    day_threshold: float | None = typer.Option(None, "--day-threshold"),
    increment: float | None = typer.Option(None, "--increment"),
    direction: RoundingDirection | None = typer.Option(None, "--direction"),
    alias: list[str] = typer.Option([], "--alias", help="Client alias (repeatable)"),
    key_party: list[str] = typer.Option([], "--key-party", help="Key party (repeatable)"),
):
    """Save a billing profile built from config defaults plus options."""
    try:
        settings = _build_settings(
            rate=rate,
            long_threshold=long_threshold,
            day_threshold=day_threshold,
            increment=increment,
            direction=direction,
            client=client,
        ).model_copy(update={"aliases": list(alias), "key_parties": list(key_party)})
        store = ProfileStore(get_config().profiles_dir)
        path = store.save(profile_from_settings(name, settings))
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid option: {_describe_validation_error(e)}")
        raise typer.Exit(1) from e
    except ValueError as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"[green]✓[/green] Profile '{name}' saved to: {path}")


@profile_cli.command("show")
def profile_show(name: str = typer.Argument(..., help="Profile name")):
    """Show a saved profile."""
    try:
        profile = ProfileStore(get_config().profiles_dir).load(name)
    except (ProfileNotFoundError, ValueError) as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"Profile: {profile.name}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in profile.model_dump(mode="json").items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        table.add_row(key, str(value))
    console.print(table)


@profile_cli.command("list")
def profile_list():
    """List saved profiles."""
    names = ProfileStore(get_config().profiles_dir).list_names()
    if not names:
        console.print("[yellow]No saved profiles[/yellow]")
        return
    for name in names:
        console.print(f"  {name}")


@profile_cli.command("delete")
def profile_delete(name: str = typer.Argument(..., help="Profile name")):
    """Delete a saved profile."""
    try:
        ProfileStore(get_config().profiles_dir).delete(name)
    except (ProfileNotFoundError, ValueError) as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1) from e
    console.print(f"[green]✓[/green] Profile '{name}' deleted")


if __name__ == "__main__":
    app()
