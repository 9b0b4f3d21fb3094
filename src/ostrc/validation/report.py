"""Diagnostic report model.

Aggregates the findings of one run into severity counts and a per-category
breakdown, with Markdown export for sharing alongside the result tables.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from ostrc.validation.diagnostics import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticLog,
    DiagnosticSeverity,
)


class DiagnosticReport(BaseModel):
    """Summary of every diagnostic raised while processing one dataset."""

    dataset: str = Field(..., description="Dataset or run identifier")
    results: list[Diagnostic] = Field(default_factory=list, description="All findings")
    error_count: int = Field(default=0, description="Number of ERROR findings")
    warning_count: int = Field(default=0, description="Number of WARNING findings")
    completed: bool = Field(
        default=True, description="False if an ERROR aborted the computation"
    )
    generated_at: str = Field(default="", description="ISO 8601 timestamp of report generation")
    summary_by_category: dict[str, dict[str, int]] = Field(
        default_factory=dict,
        description="Category -> {errors, warnings} counts",
    )

    @classmethod
    def from_log(cls, dataset: str, log: DiagnosticLog) -> DiagnosticReport:
        """Create a report by computing summaries from a DiagnosticLog.

        Args:
            dataset: Dataset identifier shown in the report header.
            log: Log holding every finding of the run. Errors recorded with
                DiagnosticLog.record() mark the run as not completed.

        Returns:
            A fully populated DiagnosticReport.
        """
        results = list(log.entries)
        error_count = sum(1 for r in results if r.severity == DiagnosticSeverity.ERROR)
        warning_count = sum(1 for r in results if r.severity == DiagnosticSeverity.WARNING)

        summary_by_category: dict[str, dict[str, int]] = {}
        for cat in DiagnosticCategory:
            cat_results = [r for r in results if r.category == cat]
            if cat_results:
                summary_by_category[cat.value] = {
                    "errors": sum(
                        1 for r in cat_results if r.severity == DiagnosticSeverity.ERROR
                    ),
                    "warnings": sum(
                        1 for r in cat_results if r.severity == DiagnosticSeverity.WARNING
                    ),
                }

        return cls(
            dataset=dataset,
            results=results,
            error_count=error_count,
            warning_count=warning_count,
            completed=error_count == 0,
            generated_at=datetime.now(tz=UTC).isoformat(),
            summary_by_category=summary_by_category,
        )

    def to_markdown(self) -> str:
        """Render the report as a Markdown document."""
        lines: list[str] = []

        lines.append(f"# Diagnostics: {self.dataset}")
        lines.append("")
        lines.append(f"**Generated:** {self.generated_at}")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Errors | {self.error_count} |")
        lines.append(f"| Warnings | {self.warning_count} |")
        status = "COMPLETED" if self.completed else "ABORTED"
        lines.append(f"| Status | {status} |")
        lines.append("")

        if self.summary_by_category:
            lines.append("## Per-Category Breakdown")
            lines.append("")
            lines.append("| Category | Errors | Warnings |")
            lines.append("|----------|--------|----------|")
            for cat in sorted(self.summary_by_category):
                counts = self.summary_by_category[cat]
                lines.append(f"| {cat} | {counts['errors']} | {counts['warnings']} |")
            lines.append("")

        if self.results:
            lines.append("## Findings")
            lines.append("")
            lines.append("| Code | Severity | Variable | Rows | Message |")
            lines.append("|------|----------|----------|------|---------|")
            for r in self.results:
                message = " ".join(r.message.split())
                lines.append(
                    f"| {r.code} | {r.severity.display_name} | {r.variable or '-'} | "
                    f"{r.affected_count} | {message} |"
                )
            lines.append("")

        suggested = [r for r in self.results if r.fix_suggestion]
        if suggested:
            lines.append("## Suggested Fixes")
            lines.append("")
            for r in suggested:
                lines.append(f"- **{r.code}** ({r.variable or '-'}): {r.fix_suggestion}")
            lines.append("")

        return "\n".join(lines)
