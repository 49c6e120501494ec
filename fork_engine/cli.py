"""
Recipe Fork Engine: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (stderr, so stdout stays valid JSON).
  3. Load the JSON snapshot into an in-memory store.
  4. Run one ``ForkEngine`` operation.
  5. Print the result as JSON to stdout.

Install and run::

    pip install -e .
    fork-engine --help
    fork-engine validate-config
    fork-engine tree r-root --max-depth 3
    fork-engine predict r-fork-1
    fork-engine autofork-preview r-root vegan
    fork-engine gallery r-root --sort newest --limit 5
    fork-engine analytics --user u-alice
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import typer

app = typer.Typer(
    name="fork-engine",
    help="Recipe fork lineage, validation and outcome-prediction CLI.",
    add_completion=False,
)

_CONFIG_HELP = "Path to TOML config file."
_SNAPSHOT_HELP = "Snapshot JSON file. Defaults to config.data.snapshot_file."


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from fork_engine.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from fork_engine.utils.logging import configure_logging
    configure_logging(config.logging)


def _engine_or_exit(config_path: Optional[str], snapshot: Optional[str]):
    """Build a ``ForkEngine`` over the snapshot; returns (engine, sink)."""
    from pydantic import ValidationError

    from fork_engine.service import ForkEngine
    from fork_engine.stores.memory import CollectingNotificationSink, load_snapshot

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    snapshot_path = Path(snapshot) if snapshot else Path(config.data.snapshot_file)
    try:
        store = load_snapshot(snapshot_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] Snapshot JSON parse error: {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Snapshot validation failed:\n{exc}", err=True)
        raise typer.Exit(code=1)

    sink = CollectingNotificationSink()
    return ForkEngine(store, store, store, notifications=sink, config=config), sink


def _run_or_exit(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call an engine operation, mapping domain errors to exit code 1."""
    from fork_engine.errors import InvalidTemplateError, NotAForkError, RecipeNotFoundError

    try:
        return operation(*args, **kwargs)
    except (RecipeNotFoundError, InvalidTemplateError, NotAForkError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    return value


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False))


# ── Config & vocabularies ─────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Snapshot file:    {config.data.snapshot_file}")
    typer.echo(f"  Max chain length: {config.lineage.max_chain_length}")
    typer.echo(f"  Children / node:  {config.lineage.max_children_per_node}")
    typer.echo(
        f"  Tree depth:       default {config.lineage.default_max_depth}, "
        f"limit {config.lineage.max_depth_limit}"
    )
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("tags")
def tags() -> None:
    """List the fork-tag vocabulary as value/label pairs."""
    from fork_engine.taxonomy.fork_tags import fork_tag_options

    _echo_json(fork_tag_options())


@app.command("templates")
def templates(
    by_category: bool = typer.Option(
        False,
        "--by-category",
        help="Group templates by category.",
    ),
) -> None:
    """List the auto-fork template catalog."""
    from fork_engine.autofork.templates import list_templates, templates_by_category

    _echo_json(templates_by_category() if by_category else list_templates())


# ── Lineage ───────────────────────────────────────────────────────────────────

@app.command("lineage")
def lineage(
    recipe_id: str = typer.Argument(..., help="Recipe id."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Show ancestors (oldest first) and the most-voted direct forks."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.lineage, recipe_id))


@app.command("tree")
def tree(
    recipe_id: str = typer.Argument(..., help="Any recipe in the fork tree."),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        help="Deepest level to expand (clamped to config.lineage.max_depth_limit).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Stop expanding after this many seconds and return the partial tree.",
    ),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Expand the whole fork tree containing a recipe, starting at its root."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.genealogy_tree, recipe_id, max_depth, timeout))


@app.command("changelog")
def changelog(
    fork_id: str = typer.Argument(..., help="Fork recipe id."),
    parent_id: Optional[str] = typer.Option(
        None,
        "--parent",
        help="Compare against this recipe instead of the fork's parent.",
    ),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Diff a fork's ingredients, steps and metadata against its parent."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.generate_changelog, fork_id, parent_id))


# ── Validation & prediction ───────────────────────────────────────────────────

@app.command("validation")
def validation(
    recipe_id: str = typer.Argument(..., help="Recipe id."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Aggregate cook trials into stats, badges and a parent comparison."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.validation_stats, recipe_id))


@app.command("top-validated")
def top_validated(
    recipe_id: str = typer.Argument(..., help="Parent recipe id."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        help="Maximum forks to list (default: config.validation.top_validated_limit).",
    ),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Rank a recipe's direct forks by success rate, then cook count."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.top_validated_forks, recipe_id, limit))


@app.command("predict")
def predict(
    recipe_id: str = typer.Argument(..., help="Recipe id."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Score the risk of cooking a recipe and print a recommendation."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.predict_outcome, recipe_id))


@app.command("suggest")
def suggest(
    recipe_id: str = typer.Argument(..., help="Recipe whose forks are ranked."),
    user_id: str = typer.Option(..., "--user", help="Requesting user id."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Rank a recipe's forks against a user's flavor profile."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.smart_suggestions, recipe_id, user_id))


# ── Browsing & analytics ──────────────────────────────────────────────────────

_GALLERY_SORTS = ("votes", "newest")


@app.command("inspired")
def inspired(
    recipe_id: str = typer.Argument(..., help="Recipe whose forks are listed."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        min=1,
        help="Page size (default: config.analytics.inspired_page_size).",
    ),
    offset: int = typer.Option(0, "--offset", min=0, help="Forks to skip."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """List recipes inspired by a recipe (its direct forks), newest first."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.inspired_recipes, recipe_id, limit, offset))


@app.command("gallery")
def gallery(
    recipe_id: str = typer.Argument(..., help="Recipe whose forks are listed."),
    sort: str = typer.Option("votes", "--sort", help="votes or newest."),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        min=1,
        help="Page size (default: config.analytics.gallery_page_size).",
    ),
    offset: int = typer.Option(0, "--offset", min=0, help="Forks to skip."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Browse a recipe's forks by votes or recency."""
    from fork_engine.stores.base import ChildOrder

    if sort not in _GALLERY_SORTS:
        typer.echo(
            f"[ERROR] --sort must be one of {list(_GALLERY_SORTS)}, got '{sort}'.",
            err=True,
        )
        raise typer.Exit(code=1)
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(
        _run_or_exit(engine.fork_gallery, recipe_id, ChildOrder(sort), limit, offset)
    )


@app.command("trending")
def trending(
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        min=1,
        help="Maximum forks to list (default: config.analytics.trending_limit).",
    ),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """List the most-voted forks across every recipe."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(engine.trending_forks(limit))


@app.command("analytics")
def analytics(
    user_id: str = typer.Option(..., "--user", help="User to report on."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Show a user's forks created and received, votes and influence score."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(engine.fork_analytics(user_id))


@app.command("compare")
def compare(
    recipe_id: str = typer.Argument(..., help="Original recipe id."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Compare a recipe with its most-voted forks field by field."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.comparison_matrix, recipe_id))


# ── Auto-fork ─────────────────────────────────────────────────────────────────

@app.command("autofork-preview")
def autofork_preview(
    recipe_id: str = typer.Argument(..., help="Recipe to fork."),
    template_id: str = typer.Argument(..., help="Template id (see `templates`)."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Show what an auto-fork template would change, without changing anything."""
    engine, _ = _engine_or_exit(config_path, snapshot)
    _echo_json(_run_or_exit(engine.preview_auto_fork, recipe_id, template_id))


@app.command("autofork-apply")
def autofork_apply(
    recipe_id: str = typer.Argument(..., help="Recipe to fork."),
    template_id: str = typer.Argument(..., help="Template id (see `templates`)."),
    user_id: str = typer.Option(..., "--user", help="Author of the new fork."),
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help=_SNAPSHOT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Apply a template and print the resulting fork draft.

    The draft is not persisted; notifications that would be sent are printed
    alongside it. Exits with code 1 when the template could not be applied.
    """
    engine, sink = _engine_or_exit(config_path, snapshot)
    result = _run_or_exit(engine.apply_auto_fork, recipe_id, template_id, user_id)
    _echo_json({"result": result, "notifications": sink.events})
    if not result.success:
        raise typer.Exit(code=1)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
