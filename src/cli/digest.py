"""CLI commands for the topic ranking system."""

import json
import logging
import sys
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, NoReturn

import click
import structlog
import yaml
from pydantic import TypeAdapter, ValidationError

from src.digest import DigestService, GoogleNewsRetriever, HeadlineSummarizer
from src.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from src.ranker import Item, Preferences, ProfileName, TopicPipeline
from src.ranker.focus import resolve_focus
from src.ranker.profiles import base_profile
from src.settings import get_settings


logger = structlog.get_logger()

COMPONENT_CLI = "cli"

_ITEMS_ADAPTER = TypeAdapter(list[Item])


def _setup_logging(json_logs: bool, verbose: bool, run_id: str, command: str) -> None:
    """Configure logging and bind the request context.

    Args:
        json_logs: Whether to emit JSON log lines.
        verbose: Whether to log at DEBUG level.
        run_id: Unique run identifier.
        command: CLI command name.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level=log_level, json_format=json_logs)
    clear_run_context()
    bind_run_context(run_id, command=command)


def _load_document(path: Path) -> Any:
    """Load a YAML or JSON document.

    Args:
        path: File path. JSON is valid YAML, so one loader reads both.

    Returns:
        Parsed document.
    """
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def _load_items(path: Path) -> list[Item]:
    data = _load_document(path)
    if isinstance(data, dict):
        data = data.get("items", [])
    return _ITEMS_ADAPTER.validate_python(data or [])


def _load_preferences(path: Path | None) -> Preferences | None:
    if path is None:
        return None
    data = _load_document(path)
    return Preferences.model_validate(data or {})


def _parse_now(value: str | None) -> datetime | None:
    """Parse the --now option.

    Args:
        value: ISO 8601 timestamp, or None.

    Returns:
        Aware datetime (naive input is treated as UTC), or None.
    """
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _fail(message: str, error: Exception) -> NoReturn:
    """Report a user-facing error and exit with status 1."""
    logger.warning("cli_input_invalid", component=COMPONENT_CLI, error=str(error))
    click.echo(f"Error: {message}", err=True)
    if isinstance(error, ValidationError):
        for err in error.errors():
            loc = ".".join(str(part) for part in err["loc"])
            click.echo(f"  - {loc}: {err['msg']}", err=True)
    else:
        click.echo(f"  - {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Signal feed topic ranking CLI."""


@cli.command()
@click.option(
    "--items",
    "items_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a JSON or YAML list of candidate items.",
)
@click.option("--topic", required=True, help="Topic text to rank against.")
@click.option(
    "--profile",
    "profile_name",
    default=None,
    help="Ranking profile (default, technology, finance, ai, sports, world).",
)
@click.option(
    "--prefs",
    "prefs_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a JSON or YAML preferences document.",
)
@click.option(
    "--now",
    "now_value",
    default=None,
    help="Reference time as ISO 8601 (defaults to the current time).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Emit logs as JSON lines.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def rank(  # noqa: PLR0913
    items_path: Path,
    topic: str,
    profile_name: str | None,
    prefs_path: Path | None,
    now_value: str | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Rank a list of candidate items for one topic."""
    run_id = str(uuid.uuid4())
    _setup_logging(json_logs, verbose, run_id, "rank")

    try:
        items = _load_items(items_path)
        preferences = _load_preferences(prefs_path)
        now = _parse_now(now_value)
    except ValidationError as e:
        _fail("Input validation failed:", e)
    except yaml.YAMLError as e:
        _fail("Could not parse input file:", e)
    except (OSError, ValueError) as e:
        _fail("Could not read input:", e)

    requested = profile_name or (preferences.default_profile if preferences else None)
    settings = get_settings()
    pipeline = TopicPipeline.for_profile(
        requested,
        preferences,
        now=now,
        max_links=settings.max_links,
        run_id=run_id,
    )
    result = pipeline.run(items, topic)

    click.echo(json.dumps(result.to_dict(), indent=2))


@cli.command()
@click.argument("query")
@click.option(
    "--profile",
    "profile_name",
    default=None,
    help="Ranking profile (default, technology, finance, ai, sports, world).",
)
@click.option(
    "--prefs",
    "prefs_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a JSON or YAML preferences document.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Emit logs as JSON lines.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def search(
    query: str,
    profile_name: str | None,
    prefs_path: Path | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Search news for QUERY and print one digest panel per topic."""
    run_id = str(uuid.uuid4())
    _setup_logging(json_logs, verbose, run_id, "search")

    try:
        preferences = _load_preferences(prefs_path)
    except ValidationError as e:
        _fail("Preferences validation failed:", e)
    except (yaml.YAMLError, OSError) as e:
        _fail("Could not read preferences:", e)

    settings = get_settings()
    retriever = GoogleNewsRetriever(
        region=settings.news_region,
        timeout=settings.request_timeout_seconds,
        user_agent=settings.user_agent,
    )
    service = DigestService(
        retriever=retriever,
        summarizer=HeadlineSummarizer(),
        settings=settings,
    )
    response = service.search(query, profile_name=profile_name, preferences=preferences)

    click.echo(json.dumps(response.model_dump(mode="json", by_alias=True), indent=2))


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def profiles(as_json: bool) -> None:
    """List ranking profiles and their focus."""
    output: dict[str, Any] = {}
    for name in ProfileName:
        profile = base_profile(name)
        focus = resolve_focus(name)
        output[name.value] = {
            **profile.model_dump(),
            "focus_keywords": list(focus.keywords),
            "focus_domains": list(focus.allow_domains),
        }

    if as_json:
        click.echo(json.dumps(output, indent=2))
        return

    click.echo("Ranking Profiles")
    click.echo("=" * 40)
    for name, values in output.items():
        click.echo(f"{name}:")
        click.echo(f"  bm25_weight: {values['bm25_weight']}")
        click.echo(f"  recency_alpha: {values['recency_alpha']}")
        click.echo(f"  per_domain_cap: {values['per_domain_cap']}")
        click.echo(f"  window_hours: {values['window_hours']}")
        click.echo(f"  focus_keywords: {len(values['focus_keywords'])}")
        click.echo(f"  focus_domains: {len(values['focus_domains'])}")


if __name__ == "__main__":
    cli()
