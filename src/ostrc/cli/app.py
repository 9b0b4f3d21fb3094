"""ostrc CLI application entry point.

Provides commands for building health problem case data and computing
incidence and prevalence from OSTRC questionnaire exports.

Usage:
    ostrc cases <file> --participant id --case case_id --date date
    ostrc incidence <file> --participant id --period week --type hp
    ostrc prevalence <file> --participant id --period week --type hp
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import pandas as pd
import typer
from loguru import logger
from rich.console import Console

from ostrc.models.incidence import DEFAULT_CI_LEVEL, PROBLEM_TYPE
from ostrc.models.questionnaire import DEFAULT_VERSION, ColumnRoles
from ostrc.validation.diagnostics import DiagnosticLog, ValidationError
from ostrc.validation.report import DiagnosticReport

app = typer.Typer(
    name="ostrc",
    help="Epidemiological metrics from OSTRC overuse and health problem questionnaires.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log pipeline steps to stderr"),
    ] = False,
) -> None:
    """Configure logging for every command."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "ERROR")


def _load(data_file: Path) -> pd.DataFrame:
    from ostrc.cli.display import display_dataset_info
    from ostrc.io.reader import read_responses

    try:
        df, meta = read_responses(data_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error reading {data_file}:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    display_dataset_info(meta, console)
    return df


def _finish(
    compute: Callable[[DiagnosticLog], pd.DataFrame],
    *,
    dataset: str,
    title: str,
    output: Path | None,
    report: Path | None,
) -> None:
    """Run one computation, then show its result and diagnostics.

    A ValidationError is recorded in the report, printed and turned into
    exit code 1.
    """
    from ostrc.cli.display import display_diagnostics, display_table

    log = DiagnosticLog()
    result: pd.DataFrame | None = None
    try:
        result = compute(log)
    except ValidationError as e:
        log.record(e.diagnostic)
        console.print(f"[bold red]Error ({e.code}):[/bold red] {e}")

    if result is not None:
        console.print()
        display_table(result, title, console)
    console.print()
    display_diagnostics(log.entries, console)

    if report is not None:
        diagnostic_report = DiagnosticReport.from_log(dataset, log)
        report.write_text(diagnostic_report.to_markdown())
        console.print(f"\n[green]Diagnostics written to {report}[/green]")

    if result is None:
        raise typer.Exit(code=1)

    if output is not None:
        if output.suffix.lower() == ".xlsx":
            result.to_excel(output, index=False, engine="openpyxl")
        else:
            result.to_csv(output, index=False)
        console.print(f"[green]Results written to {output}[/green]")


@app.command()
def version() -> None:
    """Show the current version."""
    from ostrc import __version__

    console.print(f"ostrc {__version__}")


@app.command()
def cases(
    data_file: Annotated[
        Path,
        typer.Argument(help="Response export (.csv, .xlsx or .sas7bdat)"),
    ],
    participant: Annotated[
        str, typer.Option("--participant", help="Participant ID column")
    ] = "id_participant",
    case: Annotated[str, typer.Option("--case", help="Case ID column")] = "id_case",
    date: Annotated[
        str, typer.Option("--date", help="Questionnaire date or week column")
    ] = "date_ostrc",
    q1: Annotated[str, typer.Option("--q1", help="Question 1 column")] = "ostrc_1",
    q2: Annotated[str, typer.Option("--q2", help="Question 2 column")] = "ostrc_2",
    q3: Annotated[str, typer.Option("--q3", help="Question 3 column")] = "ostrc_3",
    q4: Annotated[str, typer.Option("--q4", help="Question 4 column")] = "ostrc_4",
    instrument_version: Annotated[
        str,
        typer.Option("--version", help="OSTRC questionnaire version (2.0 or 1.0)"),
    ] = DEFAULT_VERSION.value,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the case table as CSV or .xlsx"),
    ] = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", "-r", help="Write diagnostics as Markdown"),
    ] = None,
) -> None:
    """Build one row per health problem case.

    Each case gets its start and end date, duration in weeks, time-loss,
    substantial-problem flag and severity score.
    """
    from ostrc.epidemiology.cases import build_cases

    roles = ColumnRoles(
        participant=participant, case=case, date=date, q1=q1, q2=q2, q3=q3, q4=q4
    )
    df = _load(data_file)

    def compute(log: DiagnosticLog) -> pd.DataFrame:
        return build_cases(
            df,
            participant_key=roles.participant,
            case_key=roles.case,
            date_key=roles.date,
            q1_key=roles.q1,
            q2_key=roles.q2,
            q3_key=roles.q3,
            q4_key=roles.q4,
            version=instrument_version,
            diagnostics=log,
        )

    _finish(
        compute,
        dataset=data_file.name,
        title="Health problem cases",
        output=output,
        report=report,
    )


def _rate_command(
    measure: str,
    data_file: Path,
    participant: str,
    period: str,
    problem_types: list[str],
    group: str | None,
    ci_level: float,
    per_period: bool,
    output: Path | None,
    report: Path | None,
) -> None:
    from ostrc.epidemiology import (
        incidence_all,
        incidence_per_period,
        prevalence_all,
        prevalence_per_period,
    )

    if measure == "incidence":
        per_period_fn, all_fn = incidence_per_period, incidence_all
    else:
        per_period_fn, all_fn = prevalence_per_period, prevalence_all
    roles = ColumnRoles(participant=participant, period=period)

    if per_period and group is not None:
        console.print("[bold red]Error:[/bold red] --per-period cannot be combined with --group.")
        raise typer.Exit(code=1)

    df = _load(data_file)

    def compute(log: DiagnosticLog) -> pd.DataFrame:
        if per_period:
            tables = [
                per_period_fn(df, roles.participant, roles.period, problem_type, log).assign(
                    **{PROBLEM_TYPE: problem_type}
                )
                for problem_type in problem_types
            ]
            return pd.concat(tables, ignore_index=True)
        return all_fn(
            df,
            roles.participant,
            roles.period,
            problem_types,
            group_key=group,
            ci_level=ci_level,
            diagnostics=log,
        )

    title = f"{measure.capitalize()} per period" if per_period else f"Mean {measure} per period"
    _finish(compute, dataset=data_file.name, title=title, output=output, report=report)


@app.command(name="incidence")
def incidence_cmd(
    data_file: Annotated[
        Path,
        typer.Argument(help="Response export (.csv, .xlsx or .sas7bdat)"),
    ],
    problem_types: Annotated[
        list[str],
        typer.Option("--type", "-t", help="Binary problem-type column (repeatable)"),
    ],
    participant: Annotated[
        str, typer.Option("--participant", help="Participant ID column")
    ] = "id_participant",
    period: Annotated[
        str, typer.Option("--period", help="Time period column")
    ] = "week_nr",
    group: Annotated[
        str | None,
        typer.Option("--group", "-g", help="Compute separately for each value of this column"),
    ] = None,
    ci_level: Annotated[
        float, typer.Option("--ci-level", help="Confidence level of the interval")
    ] = DEFAULT_CI_LEVEL,
    per_period: Annotated[
        bool,
        typer.Option("--per-period", help="Show every period instead of the summary"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result table as CSV or .xlsx"),
    ] = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", "-r", help="Write diagnostics as Markdown"),
    ] = None,
) -> None:
    """Compute the mean incidence of problem types per period with a confidence interval."""
    _rate_command(
        "incidence",
        data_file,
        participant,
        period,
        problem_types,
        group,
        ci_level,
        per_period,
        output,
        report,
    )


@app.command(name="prevalence")
def prevalence_cmd(
    data_file: Annotated[
        Path,
        typer.Argument(help="Response export (.csv, .xlsx or .sas7bdat)"),
    ],
    problem_types: Annotated[
        list[str],
        typer.Option("--type", "-t", help="Binary problem-type column (repeatable)"),
    ],
    participant: Annotated[
        str, typer.Option("--participant", help="Participant ID column")
    ] = "id_participant",
    period: Annotated[
        str, typer.Option("--period", help="Time period column")
    ] = "week_nr",
    group: Annotated[
        str | None,
        typer.Option("--group", "-g", help="Compute separately for each value of this column"),
    ] = None,
    ci_level: Annotated[
        float, typer.Option("--ci-level", help="Confidence level of the interval")
    ] = DEFAULT_CI_LEVEL,
    per_period: Annotated[
        bool,
        typer.Option("--per-period", help="Show every period instead of the summary"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result table as CSV or .xlsx"),
    ] = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", "-r", help="Write diagnostics as Markdown"),
    ] = None,
) -> None:
    """Compute the mean prevalence of problem types per period with a confidence interval."""
    _rate_command(
        "prevalence",
        data_file,
        participant,
        period,
        problem_types,
        group,
        ci_level,
        per_period,
        output,
        report,
    )
