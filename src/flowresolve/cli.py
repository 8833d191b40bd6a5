# src/flowresolve/cli.py
"""
CLI do flowresolve.

Comandos:
    flowresolve validate WORKFLOW
    flowresolve plan WORKFLOW [--datasets FILE] [--config FILE] [--format text|json|html]

Erros de resolução, documento ou configuração são impressos como
payload JSON (`type`, `message`, `details`, `hint`) em stderr, com
código de saída 1.
"""

from __future__ import annotations

import json
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml

from flowresolve import __version__
from flowresolve.core.config import ConfigError, load_config
from flowresolve.core.document import DocumentError, load_workflow_document
from flowresolve.core.engine.resolve import resolve_workflow
from flowresolve.core.errors import ResolverErrorPayload
from flowresolve.core.exceptions import ResolverException
from flowresolve.core.workflow.schema import validate_workflow_document
from flowresolve.datasets.store import InMemoryDatasetStore
from flowresolve.notebook_ui import render_plan


DOCUMENT_ERROR = "DOCUMENT_ERROR"
CONFIG_ERROR = "CONFIG_ERROR"


def _error_payload(exc: Exception) -> ResolverErrorPayload:
    if isinstance(exc, ResolverException):
        return exc.to_payload()
    code = DOCUMENT_ERROR if isinstance(exc, DocumentError) else CONFIG_ERROR
    return ResolverErrorPayload(
        type=code,
        message=str(exc),
        details={"exc_type": exc.__class__.__name__},
    )


def _fail(ctx: click.Context, exc: Exception) -> None:
    payload = _error_payload(exc).to_dict()
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True), err=True)
    if ctx.obj.get("debug", False):
        traceback.print_exc()
    sys.exit(1)


def load_datasets_file(path: Path) -> InMemoryDatasetStore:
    """
    Carrega `{dataset_id: [conteúdo_v1, conteúdo_v2, ...]}` (YAML/JSON) em
    um InMemoryDatasetStore. Um valor que não é lista vira uma única versão.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (yaml.YAMLError, ValueError) as e:
        raise click.BadParameter(f"cannot parse datasets file: {e}", param_hint="--datasets") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise click.BadParameter("datasets file root must be a mapping", param_hint="--datasets")

    seed: Dict[str, Any] = {}
    for dataset_id, contents in data.items():
        seed[str(dataset_id)] = contents if isinstance(contents, list) else [contents]
    return InMemoryDatasetStore.from_mapping(seed)


@click.group()
@click.version_option(__version__, prog_name="flowresolve")
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Show stack traces on errors",
)
@click.pass_context
def cli(ctx, debug):
    """flowresolve: deterministic workflow specification resolver."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("workflow", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx, workflow):
    """Validate the structure of a workflow document (no store lookups)."""
    try:
        graph = validate_workflow_document(load_workflow_document(workflow))
    except (ResolverException, DocumentError) as e:
        _fail(ctx, e)
        return

    click.echo(f"OK: {len(graph)} job(s): {', '.join(graph.job_ids)}")


@cli.command()
@click.argument("workflow", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--datasets",
    "datasets_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML/JSON file mapping dataset id -> list of version contents",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Resolver config file (YAML/JSON) merged over the defaults",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "html"]),
    default="text",
    show_default=True,
    help="Output format for the resolved plan",
)
@click.pass_context
def plan(ctx, workflow, datasets_path, config_path, output_format):
    """Resolve a workflow document into an ordered execution plan."""
    try:
        config: Optional[Dict[str, Any]] = None
        if config_path is not None:
            config = load_config(defaults_path=str(config_path))
        store = load_datasets_file(datasets_path) if datasets_path else InMemoryDatasetStore()
        resolved = resolve_workflow(load_workflow_document(workflow), store=store, config=config)
    except (ResolverException, DocumentError, ConfigError) as e:
        _fail(ctx, e)
        return

    if output_format == "json":
        click.echo(json.dumps(resolved.to_dict(), ensure_ascii=False, indent=2, default=str))
    elif output_format == "html":
        click.echo(render_plan(resolved).html)
    else:
        click.echo(render_plan(resolved).text)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
