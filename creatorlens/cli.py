"""Command line interface for CreatorLens."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Optional

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel

from . import __version__
from .config import load_app_config
from .core import (
    AppConfig,
    BrandGuidelines,
    ConfigurationError,
    ContentKind,
    CreatorLensError,
    Platform,
    ProviderId,
    Task,
    TaskType,
)
from .service import CreatorLensService, build_service
from .utils import RichFormatter, configure_logging, format_json, get_logger

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
PLATFORM_CHOICE = click.Choice([platform.value for platform in Platform], case_sensitive=False)
PROVIDER_CHOICE = click.Choice([provider.value for provider in ProviderId], case_sensitive=False)
TASK_TYPE_CHOICE = click.Choice([task_type.value for task_type in TaskType], case_sensitive=False)
FORMAT_CHOICE = click.Choice(["rich", "json"], case_sensitive=False)
console = Console()


def _resolve_env_file(config_file: Optional[str]) -> Optional[str]:
    if not config_file:
        return None
    path = Path(config_file)
    if path.is_dir():
        raise click.ClickException("Configuration file path must point to a file, not a directory.")
    return str(path)


def _get_logger(ctx: click.Context) -> logging.Logger:
    if ctx.obj is None:
        ctx.obj = {}
    logger = ctx.obj.get("logger")
    if logger is None:
        logger = get_logger(__name__)
        ctx.obj["logger"] = logger
    return logger


def _load_config(ctx: click.Context) -> AppConfig:
    if ctx.obj is None:
        ctx.obj = {}
    if "config" not in ctx.obj:
        env_file = ctx.obj.get("config_file")
        try:
            ctx.obj["config"] = load_app_config(env_file=env_file)
        except ConfigurationError as exc:
            _get_logger(ctx).error("Configuration loading failed", exc_info=exc)
            raise click.ClickException(f"Configuration error: {exc}") from exc
    return ctx.obj["config"]


def _get_service(ctx: click.Context) -> CreatorLensService:
    if "service" not in ctx.obj:
        config = _load_config(ctx)
        try:
            ctx.obj["service"] = build_service(config)
        except ConfigurationError as exc:
            raise click.ClickException(f"Configuration error: {exc}") from exc
    return ctx.obj["service"]


def _run_async(service: CreatorLensService, awaitable: Awaitable[Any]) -> Any:
    async def _runner() -> Any:
        try:
            return await awaitable
        finally:
            await service.aclose()

    return asyncio.run(_runner())


def _read_content(text: Optional[str], file: Optional[str]) -> str:
    if text and file:
        raise click.UsageError("Pass either TEXT or --file, not both.")
    if file:
        content = Path(file).read_text(encoding="utf-8")
    elif text == "-" or (text is None and not sys.stdin.isatty()):
        content = sys.stdin.read()
    elif text:
        content = text
    else:
        raise click.UsageError("Provide content as TEXT, --file or on stdin.")
    if not content.strip():
        raise click.UsageError("Content is empty.")
    return content


def _load_guidelines(path: Optional[str]) -> Optional[BrandGuidelines]:
    if not path:
        return None
    try:
        return BrandGuidelines.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except (OSError, PydanticValidationError) as exc:
        raise click.ClickException(f"Unable to load brand guidelines from {path}: {exc}") from exc


def _platform(ctx: click.Context, value: Optional[str]) -> Platform:
    if value:
        return Platform(value.lower())
    return _load_config(ctx).default_platform


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config-file",
    type=click.Path(path_type=str, dir_okay=False, resolve_path=True),
    default=None,
    help="Optional path to a .env file that should be loaded before running commands.",
)
@click.option(
    "--log-level",
    type=click.Choice(["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level to use for this invocation.",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=str, dir_okay=False),
    default=None,
    help="Write logs to this file in addition to stderr.",
)
@click.version_option(__version__, prog_name="CreatorLens")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: str, log_file: Optional[str]) -> None:
    """CreatorLens command-line interface."""

    ctx.ensure_object(dict)
    ctx.obj["config_file"] = _resolve_env_file(config_file)

    configure_logging(level=log_level, log_file=log_file, force=True)
    _get_logger(ctx).debug("Starting CreatorLens CLI", extra={"config_file": ctx.obj["config_file"]})


@cli.command(name="validate-config")
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate CreatorLens environment configuration."""

    logger = _get_logger(ctx)
    config = _load_config(ctx)

    providers = ", ".join(provider.value for provider in config.configured_providers)
    summary = (
        f"Providers: [bold]{providers}[/bold]\n"
        f"Default platform: [bold]{config.default_platform.value}[/bold]\n"
        f"Provider timeout: [bold]{config.routing.provider_timeout_seconds:g}s[/bold]"
    )

    console.print(Panel.fit("Configuration validated successfully", border_style="green"))
    console.print(summary)
    logger.info("Configuration validation succeeded")


@cli.command()
@click.option("--probe/--no-probe", default=False, show_default=True, help="Run provider health probes first.")
@click.pass_context
def info(ctx: click.Context, probe: bool) -> None:
    """Display active configuration and providers (without secrets)."""

    logger = _get_logger(ctx)
    service = _get_service(ctx)
    config = service.config

    if probe:
        _run_async(service, service.optimizer.refresh_health())

    lexicon = config.scoring_lexicon_file or "built-in defaults"
    console.print(
        Panel(
            f"Default platform: [cyan]{config.default_platform.value}[/cyan]\n"
            f"Cheap provider threshold: [cyan]${config.routing.cheap_provider_threshold:g}[/cyan]\n"
            f"Provider timeout: [cyan]{config.routing.provider_timeout_seconds:g}s[/cyan]\n"
            f"Budget alert: [cyan]${config.routing.budget_alert_usd:g}[/cyan]\n"
            f"Scoring lexicon: [cyan]{lexicon}[/cyan]",
            title="CreatorLens Configuration",
        )
    )
    console.print(RichFormatter(console).format_providers(service.registry.profiles()))
    logger.info("Displayed configuration summary")


@cli.command(name="route")
@click.argument("prompt")
@click.option("--task-type", type=TASK_TYPE_CHOICE, default=TaskType.UNSPECIFIED.value, show_default=True)
@click.option("--provider", type=PROVIDER_CHOICE, default=None, help="Explicit provider override.")
@click.option("--cost-ceiling", type=float, default=None, help="Maximum USD to spend on the task.")
@click.option("--max-output-tokens", type=int, default=1000, show_default=True)
@click.option("--run/--dry-run", default=False, show_default=True, help="Execute the task after routing.")
@click.pass_context
def route_command(
    ctx: click.Context,
    prompt: str,
    task_type: str,
    provider: Optional[str],
    cost_ceiling: Optional[float],
    max_output_tokens: int,
    run: bool,
) -> None:
    """Show which provider a task routes to and what it should cost."""

    logger = _get_logger(ctx)
    service = _get_service(ctx)
    task = Task(
        prompt=prompt,
        task_type=TaskType(task_type.lower()),
        override=ProviderId(provider.lower()) if provider else None,
        cost_ceiling=cost_ceiling,
        max_output_tokens=max_output_tokens,
    )

    try:
        selected = service.router.select_provider(task)
    except CreatorLensError as exc:
        raise click.ClickException(str(exc)) from exc
    breakdown = service.cost_model.breakdown(selected, prompt, max_output_tokens)
    failover = service.router.select_failover(selected)

    console.print(
        Panel(
            f"Provider: [bold cyan]{selected.value}[/bold cyan]\n"
            f"Estimated tokens: {breakdown.input_tokens} in + {breakdown.output_tokens} out\n"
            f"Estimated cost: ${breakdown.total_cost_usd:.6f}\n"
            f"Failover: {failover.value if failover else 'none'}",
            title="Routing Decision",
        )
    )

    if run:
        try:
            result = _run_async(service, service.optimizer.run_task(task))
        except CreatorLensError as exc:
            logger.error("Task execution failed", extra={"error": exc.to_dict()})
            raise click.ClickException(exc.user_message) from exc
        console.print(Panel(result.text, title=f"Output ({result.provider.value})", border_style="green"))
    logger.info("Routing decision displayed", extra={"provider": selected.value, "task_type": task.task_type.value})


@cli.command(name="score")
@click.argument("text", required=False)
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--platform", type=PLATFORM_CHOICE, default=None, help="Target platform (default from config).")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default="rich", show_default=True)
@click.pass_context
def score_command(
    ctx: click.Context,
    text: Optional[str],
    file_path: Optional[str],
    platform: Optional[str],
    output_format: str,
) -> None:
    """Score a script without calling any provider."""

    content = _read_content(text, file_path)
    service = _get_service(ctx)
    breakdown = service.scorer.analyze(content, _platform(ctx, platform))

    if output_format == "json":
        click.echo(format_json(breakdown))
    else:
        RichFormatter(console).display_breakdown(breakdown)


@cli.command(name="hooks")
@click.argument("topic")
@click.option("--platform", type=PLATFORM_CHOICE, default=None, help="Target platform (default from config).")
@click.option("--count", type=int, default=5, show_default=True)
@click.option("--provider", type=PROVIDER_CHOICE, default=None, help="Explicit provider override.")
@click.option("--timeout", type=float, default=None, help="Per-call provider timeout in seconds.")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default="rich", show_default=True)
@click.pass_context
def hooks_command(
    ctx: click.Context,
    topic: str,
    platform: Optional[str],
    count: int,
    provider: Optional[str],
    timeout: Optional[float],
    output_format: str,
) -> None:
    """Generate and rank hooks for a topic."""

    if count < 1:
        raise click.BadParameter("--count must be at least 1")

    service = _get_service(ctx)
    result = _run_async(
        service,
        service.optimizer.generate_hooks(
            topic,
            platform=_platform(ctx, platform),
            count=count,
            override=ProviderId(provider.lower()) if provider else None,
            timeout=timeout,
        ),
    )

    if output_format == "json":
        click.echo(format_json(result))
    else:
        RichFormatter(console).display_hooks(result)
    if result.error is not None:
        ctx.exit(1)


@cli.command(name="brand-check")
@click.argument("text", required=False)
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--guidelines", "guidelines_path", type=click.Path(exists=True, dir_okay=False), required=True,
              help="JSON file with brand guidelines.")
@click.option("--title", default=None, help="Optional title checked together with the content.")
@click.option("--rewrite/--no-rewrite", default=False, show_default=True, help="Include a mechanical rewrite.")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default="rich", show_default=True)
@click.pass_context
def brand_check_command(
    ctx: click.Context,
    text: Optional[str],
    file_path: Optional[str],
    guidelines_path: str,
    title: Optional[str],
    rewrite: bool,
    output_format: str,
) -> None:
    """Check content against brand guidelines."""

    content = _read_content(text, file_path)
    guidelines = _load_guidelines(guidelines_path)
    service = _get_service(ctx)
    result = service.brand_scorer.check_alignment(content, guidelines, title=title, include_rewrite=rewrite)

    if output_format == "json":
        click.echo(format_json(result))
    else:
        RichFormatter(console).display_brand_check(result)


@cli.command(name="optimize")
@click.argument("text", required=False)
@click.option("--file", "file_path", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option("--platform", type=PLATFORM_CHOICE, default=None, help="Target platform (default from config).")
@click.option("--kind", type=click.Choice([kind.value for kind in ContentKind]), default=ContentKind.SCRIPT.value,
              show_default=True)
@click.option("--guidelines", "guidelines_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Optional JSON file with brand guidelines.")
@click.option("--provider", type=PROVIDER_CHOICE, default=None, help="Explicit provider override.")
@click.option("--cost-ceiling", type=float, default=None, help="Maximum USD to spend.")
@click.option("--timeout", type=float, default=None, help="Per-call provider timeout in seconds.")
@click.option("--show-diff/--no-diff", default=False, show_default=True)
@click.option("--format", "output_format", type=FORMAT_CHOICE, default="rich", show_default=True)
@click.pass_context
def optimize_command(
    ctx: click.Context,
    text: Optional[str],
    file_path: Optional[str],
    platform: Optional[str],
    kind: str,
    guidelines_path: Optional[str],
    provider: Optional[str],
    cost_ceiling: Optional[float],
    timeout: Optional[float],
    show_diff: bool,
    output_format: str,
) -> None:
    """Rewrite a script or title through a routed provider and re-score it."""

    logger = _get_logger(ctx)
    content = _read_content(text, file_path)
    guidelines = _load_guidelines(guidelines_path)
    service = _get_service(ctx)

    result = _run_async(
        service,
        service.optimizer.optimize(
            content,
            platform=_platform(ctx, platform),
            kind=ContentKind(kind),
            guidelines=guidelines,
            override=ProviderId(provider.lower()) if provider else None,
            cost_ceiling=cost_ceiling,
            timeout=timeout,
        ),
    )

    if output_format == "json":
        click.echo(format_json(result))
    else:
        formatter = RichFormatter(console)
        formatter.display_optimization(result, show_diff=show_diff)
        formatter.display_usage(service.usage_report())

    logger.info(
        "Optimization finished",
        extra={"state": result.state.value, "provider": result.provider.value if result.provider else None},
    )
    if result.error is not None:
        ctx.exit(1)


@cli.command(name="usage")
@click.option("--probe/--no-probe", default=False, show_default=True, help="Run provider health probes first.")
@click.option("--format", "output_format", type=FORMAT_CHOICE, default="rich", show_default=True)
@click.pass_context
def usage_command(ctx: click.Context, probe: bool, output_format: str) -> None:
    """Show usage, savings and recommendations for this process."""

    service = _get_service(ctx)
    if probe:
        _run_async(service, service.optimizer.refresh_health())
    report = service.usage_report()

    if output_format == "json":
        payload = {
            "snapshot": report.snapshot.model_dump(mode="json"),
            "savings": report.savings.model_dump(mode="json"),
            "recommendations": [item.model_dump(mode="json") for item in report.recommendations],
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        RichFormatter(console).display_usage(report)


def main() -> None:  # pragma: no cover - console script entry point
    cli(prog_name="creatorlens")


__all__ = ["cli", "main"]
