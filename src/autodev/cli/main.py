"""Main CLI entry point for autodev."""

import asyncio
import json
import logging

import click
from pydantic import ValidationError
from rich.logging import RichHandler

from autodev.config.manager import ConfigManager, parse_value
from autodev.engine import AutonomousEngine, EngineRequest
from autodev.feedback.models import VALID_PRIORITIES, VALID_SOURCES, VALID_TRIGGERS, VALID_TYPES, FeedbackData
from autodev.output.formatter import get_formatter


def _setup_logging(verbose: bool) -> None:
    config = ConfigManager.get_config()
    level = logging.DEBUG if verbose else getattr(logging, config.global_.log_level.upper(), logging.WARNING)
    logging.getLogger("autodev").setLevel(level)
    if verbose:
        logging.basicConfig(format="%(message)s", handlers=[RichHandler(rich_tracebacks=True, show_path=False)])


def _build_engine(ctx: click.Context) -> AutonomousEngine:
    config = ConfigManager.get_config()
    project_root = ctx.obj.get("project_root") if ctx.obj else None
    if project_root:
        config = config.model_copy(deep=True)
        config.global_.project_root = project_root
    return AutonomousEngine(config)


def _parse_metrics(values: tuple[str, ...]) -> dict[str, float] | None:
    metrics: dict[str, float] = {}
    for item in values:
        name, sep, raw = item.partition("=")
        if not sep:
            raise click.BadParameter(f"Expected NAME=VALUE, got '{item}'", param_hint="--metric")
        try:
            metrics[name.strip()] = float(raw)
        except ValueError:
            raise click.BadParameter(f"Metric '{name}' must be numeric", param_hint="--metric") from None
    return metrics or None


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--no-color", is_flag=True, help="Disable colors")
@click.option("-C", "--project-root", type=click.Path(file_okay=False), help="Project directory")
@click.version_option(package_name="autodev")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, no_color: bool, project_root: str | None) -> None:
    """Autodev - autonomous development workflow engine.

    \b
    Examples:
        autodev plan "build a web dashboard"     # Show the plan only
        autodev run "fix the login bug asap"     # Plan and execute
        autodev feedback "checkout is slow" --type performance_issue --metric performance=55
        autodev evolve                           # Run one evolution cycle
        autodev status
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["project_root"] = project_root

    _setup_logging(verbose)
    get_formatter(color=not no_color, verbose=verbose)


@cli.command()
@click.argument("request", nargs=-1, required=True)
@click.option("--json", "output_json", is_flag=True, help="JSON output")
@click.pass_context
def plan(ctx: click.Context, request: tuple[str, ...], output_json: bool) -> None:
    """Classify a request and show the planned actions."""
    engine = _build_engine(ctx)
    result = asyncio.run(engine.plan(" ".join(request)))
    formatter = get_formatter()

    if output_json:
        formatter.console.print_json(json.dumps({
            "intent": result.intent.to_dict(),
            "project_state": result.context.describe_state(),
            "actions": [a.to_dict() for a in result.actions],
        }))
        return

    formatter.print_info(
        f"Intent: {result.intent.category} / {result.intent.domain} "
        f"({result.intent.urgency} urgency, {result.intent.scope} scope)"
    )
    formatter.print_plan(result.actions, result.reasoning)


@cli.command()
@click.argument("request", nargs=-1, required=True)
@click.option(
    "-e", "--environment",
    type=click.Choice(["auto", "terminal", "browser", "hybrid"]),
    default="auto",
    help="Execution environment",
)
@click.option("--mode", type=click.Choice(["conservative", "balanced", "aggressive"]), help="Execution mode")
@click.option("--no-visual", is_flag=True, help="Disable visual checkpoints")
@click.option("--no-evolution", is_flag=True, help="Do not feed results back into evolution")
@click.option("--json", "output_json", is_flag=True, help="JSON output")
@click.pass_context
def run(
    ctx: click.Context,
    request: tuple[str, ...],
    environment: str,
    mode: str | None,
    no_visual: bool,
    no_evolution: bool,
    output_json: bool,
) -> None:
    """Plan and execute a request."""
    engine = _build_engine(ctx)
    engine_request = EngineRequest(
        text=" ".join(request),
        environment=environment,
        mode=mode,
        visual_feedback=False if no_visual else None,
        evolution_enabled=not no_evolution,
    )
    result = asyncio.run(engine.process_request(engine_request))
    formatter = get_formatter()

    if output_json:
        formatter.console.print_json(json.dumps(result.to_dict()))
        return

    formatter.print_plan(result.plan.actions, result.plan.reasoning)
    formatter.print_execution(result.execution)
    formatter.print_list("Recommendations", result.recommendations)
    formatter.print_list("Next actions", [f"{a.command} (p{a.priority}): {a.reason}" for a in result.next_actions])

    if not result.success:
        raise SystemExit(1)


@cli.command()
@click.argument("content", nargs=-1, required=True)
@click.option("-t", "--type", "feedback_type", type=click.Choice(sorted(VALID_TYPES)), default="improvement")
@click.option("-p", "--priority", type=click.Choice(sorted(VALID_PRIORITIES)), default="medium")
@click.option("-s", "--source", type=click.Choice(sorted(VALID_SOURCES)), default="user")
@click.option("-m", "--metric", "metrics", multiple=True, help="Numeric metric as NAME=VALUE")
@click.pass_context
def feedback(
    ctx: click.Context,
    content: tuple[str, ...],
    feedback_type: str,
    priority: str,
    source: str,
    metrics: tuple[str, ...],
) -> None:
    """Submit a feedback item."""
    item = FeedbackData(
        source=source,
        type=feedback_type,
        content=" ".join(content),
        priority=priority,
        metrics=_parse_metrics(metrics),
    )
    engine = _build_engine(ctx)
    response = asyncio.run(engine.submit_feedback(item))
    get_formatter().print_feedback_response(response)


@cli.command()
@click.option("--trigger", type=click.Choice(sorted(VALID_TRIGGERS)), default="user_request")
@click.pass_context
def evolve(ctx: click.Context, trigger: str) -> None:
    """Run one evolution cycle now."""
    engine = _build_engine(ctx)
    cycle = asyncio.run(engine.evolve(trigger))
    formatter = get_formatter()

    if cycle is None:
        formatter.print_warning("An evolution cycle is already running")
        return
    formatter.print_cycle(cycle)


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="JSON output")
@click.pass_context
def status(ctx: click.Context, output_json: bool) -> None:
    """Show project state, tools and feedback loop status."""
    engine = _build_engine(ctx)
    formatter = get_formatter()

    if output_json:
        formatter.console.print_json(json.dumps(engine.status()))
        return
    formatter.print_status(engine.status())


@cli.group()
def config() -> None:
    """Manage configuration."""
    pass


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = ConfigManager.get_config()
    formatter = get_formatter()

    config_dict = config.model_dump(by_alias=True)
    formatter.console.print_json(json.dumps(config_dict, indent=2))


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set a configuration value in the user config (e.g. execution.mode aggressive)."""
    parsed = parse_value(value)
    try:
        ConfigManager.set_value(key, parsed)
    except KeyError as e:
        raise click.BadParameter(e.args[0], param_hint="KEY") from None
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="VALUE") from None
    get_formatter().print_success(f"{key} = {parsed!r}")


if __name__ == "__main__":
    cli()
