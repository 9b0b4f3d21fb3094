"""Rich display helpers for terminal output.

Provides formatted display functions for case tables, incidence and
prevalence summaries, per-period rates, and diagnostics using Rich tables.
"""

from __future__ import annotations

import math

import pandas as pd
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ostrc.models.metadata import DatasetMetadata
from ostrc.validation.diagnostics import Diagnostic, DiagnosticSeverity


def _format_cell(value: object) -> str:
    if value is None or value is pd.NA or value is pd.NaT:
        return "-"
    if isinstance(value, float):
        if math.isnan(value):
            return "-"
        return f"{value:.4f}"
    if isinstance(value, pd.Timestamp):
        return value.date().isoformat()
    return str(value)


def display_dataset_info(meta: DatasetMetadata, console: Console) -> None:
    """Print a one-line summary of a loaded questionnaire export."""
    n_missing = sum(v.n_missing for v in meta.variables)
    console.print(
        f"[bold cyan]{meta.filename}[/bold cyan]: {meta.row_count} responses, "
        f"{meta.col_count} columns, {n_missing} missing values"
    )


def display_table(
    df: pd.DataFrame,
    title: str,
    console: Console,
    *,
    limit: int | None = 50,
) -> None:
    """Print a DataFrame as a Rich table.

    Floats are rounded to four decimals and missing values shown as "-".

    Args:
        df: Table to display.
        title: Table title.
        console: Rich Console for output.
        limit: Maximum number of rows to show, or None for all.
    """
    shown = df if limit is None else df.head(limit)
    table = Table(title=title, show_lines=False)
    for col in df.columns:
        justify = "right" if pd.api.types.is_numeric_dtype(df[col]) else "left"
        table.add_column(str(col), justify=justify, no_wrap=True)

    for row in shown.itertuples(index=False):
        table.add_row(*(_format_cell(value) for value in row))

    console.print(table)
    if len(shown) < len(df):
        console.print(f"[dim]... {len(df) - len(shown)} more rows not shown[/dim]")


def display_diagnostics(diagnostics: list[Diagnostic], console: Console) -> None:
    """Print every diagnostic of a run, errors first.

    Args:
        diagnostics: Findings to display.
        console: Rich Console for output.
    """
    if not diagnostics:
        console.print("[dim]No diagnostics raised.[/dim]")
        return

    ordered = sorted(
        diagnostics,
        key=lambda d: (0 if d.severity == DiagnosticSeverity.ERROR else 1, d.code),
    )

    table = Table(title=f"Diagnostics ({len(ordered)})", show_lines=True)
    table.add_column("Code", style="bold", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Variable", no_wrap=True)
    table.add_column("Rows", justify="right")
    table.add_column("Message", max_width=60)

    for d in ordered:
        if d.severity == DiagnosticSeverity.ERROR:
            sev_text = Text("Error", style="bold red")
        else:
            sev_text = Text("Warning", style="yellow")
        message = Text(d.message)
        if d.fix_suggestion:
            message.append(f"\n{d.fix_suggestion}", style="dim")
        table.add_row(
            d.code,
            sev_text,
            d.variable or "-",
            str(d.affected_count),
            message,
        )

    console.print(table)
