"""
Output formatters for CreatorLens results.

Rich renderables for score breakdowns, brand checks, hooks, optimization
results and usage reports, plus JSON output for any result model.
"""

import json
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.models import (
    BrandCheckResult,
    Hook,
    HookGenerationResult,
    OptimizationResult,
    OptimizationState,
    ProviderProfile,
    ScoreBreakdown,
)
from ..routing.analytics import UsageReport


class ThresholdLevel(Enum):
    """Threshold levels for color coding."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class MetricThreshold:
    """Defines thresholds for metric evaluation."""

    def __init__(self, excellent: float, good: float, fair: float):
        self.excellent = excellent
        self.good = good
        self.fair = fair

    def evaluate(self, value: float) -> ThresholdLevel:
        """Evaluate value against thresholds."""
        numeric_value = float(value) if value is not None else 0.0
        if numeric_value >= self.excellent:
            return ThresholdLevel.EXCELLENT
        if numeric_value >= self.good:
            return ThresholdLevel.GOOD
        if numeric_value >= self.fair:
            return ThresholdLevel.FAIR
        return ThresholdLevel.POOR


class ColorScheme:
    """Centralized color scheme management."""

    COLORS = {
        ThresholdLevel.EXCELLENT: "green",
        ThresholdLevel.GOOD: "blue",
        ThresholdLevel.FAIR: "yellow",
        ThresholdLevel.POOR: "red"
    }

    SEVERITY_COLORS = {
        "high": "red",
        "medium": "yellow",
        "low": "blue",
    }

    STATUS_COLORS = {
        "online": "green",
        "degraded": "yellow",
        "offline": "red",
    }

    @classmethod
    def get_color(cls, level: ThresholdLevel) -> str:
        """Get color for threshold level."""
        return cls.COLORS[level]


class MetricEvaluator:
    """Evaluates 0-100 scores against display thresholds."""

    SCORE_THRESHOLD = MetricThreshold(80.0, 65.0, 50.0)

    @classmethod
    def evaluate_score(cls, score: float) -> ThresholdLevel:
        return cls.SCORE_THRESHOLD.evaluate(score)

    @classmethod
    def score_color(cls, score: float) -> str:
        return ColorScheme.get_color(cls.evaluate_score(score))


class FormatterMixin:
    """Mixin providing common formatter functionality."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get console instance."""
        return self._console

    def format_percentage(self, value: float) -> str:
        """Format a 0-100 percentage with consistent precision."""
        return f"{value:.1f}%"

    def format_currency(self, value: float) -> str:
        """Format currency with consistent precision."""
        return f"${value:.6f}"

    def format_score(self, value: float) -> str:
        color = MetricEvaluator.score_color(value)
        return f"[{color}]{value:g}[/{color}]"


class TableBuilder:
    """Builder pattern for creating Rich tables."""

    def __init__(self, title: str):
        self._table = Table(title=title)

    def add_column(self, header: str, style: str = "white",
                   justify: str = "left", no_wrap: bool = True,
                   max_width: Optional[int] = None) -> "TableBuilder":
        """Add column with fluent interface."""
        self._table.add_column(
            header,
            style=style,
            justify=justify,
            no_wrap=no_wrap,
            max_width=max_width
        )
        return self

    def add_row(self, *values: str) -> "TableBuilder":
        """Add row with fluent interface."""
        self._table.add_row(*values)
        return self

    def build(self) -> Table:
        """Build the final table."""
        return self._table


class JSONFormatter:
    """JSON output formatter for result models."""

    class Config:
        """Configuration for JSON formatting."""
        DEFAULT_INDENT = 2
        ENSURE_ASCII = False

    @classmethod
    def format_model(cls, model: BaseModel, indent: Optional[int] = None) -> str:
        try:
            return json.dumps(
                model.model_dump(mode="json"),
                indent=indent or cls.Config.DEFAULT_INDENT,
                ensure_ascii=cls.Config.ENSURE_ASCII
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Failed to serialize result to JSON: {e}") from e


class RichFormatter(FormatterMixin):
    """Rich renderables for every CreatorLens result type."""

    def format_score_breakdown(self, breakdown: ScoreBreakdown, title: str = "Script Score") -> Table:
        builder = (TableBuilder(f"{title} ({breakdown.platform.value})")
                   .add_column("Metric", style="cyan")
                   .add_column("Score", justify="right")
                   .add_column("Rating"))

        rows = [
            ("Hook strength", breakdown.hook_strength),
            ("Engagement potential", breakdown.engagement_potential),
            ("Clarity", breakdown.clarity),
            ("Emotional impact", breakdown.emotional_impact),
            ("Call to action", breakdown.call_to_action_strength),
        ]
        for label, value in rows:
            level = MetricEvaluator.evaluate_score(value)
            builder.add_row(label, self.format_score(value), level.value.title())

        overall_level = MetricEvaluator.evaluate_score(breakdown.overall)
        builder.add_row("[bold]Overall[/bold]", f"[bold]{self.format_score(breakdown.overall)}[/bold]",
                        overall_level.value.title())

        fit = breakdown.length_fit
        band = "within band" if fit.within_band else "outside band"
        builder.add_row(
            "Length",
            f"{fit.current_length} words",
            f"{fit.min_length}-{fit.max_length}, ideal {fit.recommended_length} ({band})",
        )
        return builder.build()

    def format_improvements(self, breakdown: ScoreBreakdown) -> Optional[Panel]:
        if not breakdown.improvements:
            return None
        text = Text()
        for improvement in breakdown.improvements:
            color = ColorScheme.SEVERITY_COLORS[improvement.impact.value]
            text.append(f"[{improvement.impact.value}] ", style=color)
            text.append(f"{improvement.category.value}: {improvement.suggestion}\n")
        return Panel(text, title="[yellow]Suggested Improvements[/yellow]", border_style="yellow")

    def format_brand_check(self, result: BrandCheckResult) -> Table:
        builder = (TableBuilder("Brand Alignment")
                   .add_column("Category", style="cyan")
                   .add_column("Score", justify="right"))
        builder.add_row("Voice", self.format_score(result.voice))
        builder.add_row("Messaging", self.format_score(result.messaging))
        builder.add_row("Guidelines", self.format_score(result.guidelines))
        builder.add_row("[bold]Overall[/bold]", f"[bold]{self.format_score(result.overall)}[/bold]")
        return builder.build()

    def format_brand_issues(self, result: BrandCheckResult) -> Table:
        builder = (TableBuilder("Brand Issues")
                   .add_column("Category", style="cyan")
                   .add_column("Severity")
                   .add_column("Issue", no_wrap=False, max_width=50)
                   .add_column("Fix", no_wrap=False, max_width=50))
        for issue in result.issues:
            color = ColorScheme.SEVERITY_COLORS[issue.severity.value]
            builder.add_row(
                issue.category.value,
                f"[{color}]{issue.severity.value}[/{color}]",
                issue.description,
                issue.suggested_fix,
            )
        return builder.build()

    def format_hooks(self, hooks: List[Hook], title: str = "Hooks") -> Table:
        builder = (TableBuilder(title)
                   .add_column("#", justify="right", style="dim")
                   .add_column("Hook", no_wrap=False, max_width=70)
                   .add_column("Type", style="magenta")
                   .add_column("Score", justify="right"))
        for index, hook in enumerate(hooks, start=1):
            builder.add_row(str(index), hook.text, hook.type.value, self.format_score(hook.viral_score))
        return builder.build()

    def format_providers(self, profiles: List[ProviderProfile]) -> Table:
        builder = (TableBuilder("Providers")
                   .add_column("Provider", style="cyan")
                   .add_column("Model")
                   .add_column("USD / token", justify="right")
                   .add_column("Status")
                   .add_column("Latency", justify="right"))
        for profile in profiles:
            color = ColorScheme.STATUS_COLORS[profile.status.value]
            latency = f"{profile.latency_ms:.0f} ms" if profile.latency_ms is not None else "-"
            builder.add_row(
                profile.display_name,
                profile.model or "-",
                f"{profile.cost_per_token:.8f}",
                f"[{color}]{profile.status.value}[/{color}]",
                latency,
            )
        return builder.build()

    def format_usage(self, report: UsageReport) -> Table:
        builder = (TableBuilder("Provider Usage")
                   .add_column("Provider", style="cyan")
                   .add_column("Requests", justify="right")
                   .add_column("Cost", justify="right", style="green"))
        for record in report.snapshot.per_provider:
            builder.add_row(record.provider.value, str(record.requests), self.format_currency(record.cost))
        builder.add_row(
            "[bold]Total[/bold]",
            f"[bold]{report.snapshot.total_requests}[/bold]",
            f"[bold]{self.format_currency(report.snapshot.total_cost)}[/bold]",
        )
        return builder.build()

    def format_savings(self, report: UsageReport) -> Panel:
        savings = report.savings
        text = Text()
        text.append(f"Actual cost: {self.format_currency(savings.actual_cost)}\n")
        text.append(f"All-premium baseline: {self.format_currency(savings.baseline_cost)}\n")
        text.append(
            f"Saved: {self.format_currency(savings.absolute)} ({self.format_percentage(savings.percent)})\n",
            style="green",
        )
        if report.recommendations:
            text.append("\nRecommendations:\n", style="bold")
            for recommendation in report.recommendations:
                text.append(f"  • {recommendation.message} ", style="yellow")
                text.append(f"({recommendation.impact})\n")
        return Panel(text, title="[bold]Savings[/bold]", border_style="green")

    def format_optimization_summary(self, result: OptimizationResult) -> Panel:
        text = Text()
        if result.state == OptimizationState.FAILED:
            text.append("Optimization failed\n", style="bold red")
            if result.error is not None:
                text.append(f"{result.error.user_message or result.error.message}\n", style="red")
            attempted = ", ".join(provider.value for provider in result.attempted_providers) or "none"
            text.append(f"Attempted providers: {attempted}\n")
            return Panel(text, title="[red]Optimization[/red]", border_style="red")

        provider = result.provider.value if result.provider else "-"
        text.append(f"Provider: {provider}\n", style="bold")
        if result.original_score is not None and result.score is not None:
            text.append(f"Overall: {result.original_score.overall} -> {result.score.overall} ")
            delta = result.improvement_score
            text.append(f"({delta:+d})\n", style="green" if delta >= 0 else "red")
        for change in result.changes_applied:
            text.append(f"  • {change}\n")
        return Panel(text, title="[green]Optimization[/green]", border_style="green")

    def display_breakdown(self, breakdown: ScoreBreakdown) -> None:
        self.console.print(self.format_score_breakdown(breakdown))
        panel = self.format_improvements(breakdown)
        if panel is not None:
            self.console.print(panel)

    def display_brand_check(self, result: BrandCheckResult) -> None:
        self.console.print(self.format_brand_check(result))
        if result.issues:
            self.console.print(self.format_brand_issues(result))
        if result.rewrite is not None:
            self.console.print(Panel(result.rewrite.text, title="Suggested Rewrite", border_style="blue"))

    def display_hooks(self, result: HookGenerationResult) -> None:
        if result.state == OptimizationState.FAILED:
            message = result.error.user_message if result.error else "Hook generation failed"
            self.console.print(f"[red]{message}[/red]")
            return
        provider = result.provider.value if result.provider else "-"
        self.console.print(self.format_hooks(result.hooks, title=f"Hooks for '{result.topic}' via {provider}"))

    def display_optimization(self, result: OptimizationResult, show_diff: bool = False) -> None:
        self.console.print(self.format_optimization_summary(result))
        if result.state != OptimizationState.DONE:
            return
        if result.score is not None:
            self.display_breakdown(result.score)
        if result.brand_check is not None:
            self.display_brand_check(result.brand_check)
        if show_diff and result.diff:
            self.console.print(Panel("\n".join(result.diff), title="Diff", border_style="dim"))
        self.console.print(Panel(result.optimized_text or "", title="Optimized", border_style="green"))

    def display_usage(self, report: UsageReport) -> None:
        self.console.print(self.format_usage(report))
        self.console.print(self.format_savings(report))


def format_json(model: BaseModel, indent: int = 2) -> str:
    """Quick JSON formatting for any result model."""
    return JSONFormatter.format_model(model, indent)


__all__ = [
    "ThresholdLevel",
    "MetricThreshold",
    "ColorScheme",
    "MetricEvaluator",
    "FormatterMixin",
    "TableBuilder",
    "JSONFormatter",
    "RichFormatter",
    "format_json",
]
