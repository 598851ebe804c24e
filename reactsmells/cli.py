from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from reactsmells.core.config import ConfigError, load_config
from reactsmells.pipeline import run_pipeline
from reactsmells.report.render import render_github, render_json, render_text
from reactsmells.rules.registry import RuleRegistry

app = typer.Typer(add_completion=False, help="Detect React refactoring smells in JS/JSX/TS/TSX sources.")


class OutputFormat(str, Enum):
    text = "text"
    json = "json"
    github = "github"


class ListFormat(str, Enum):
    text = "text"
    json = "json"


def _split(values: Optional[List[str]]) -> List[str]:
    # --select ST001,LC --select dom
    out: List[str] = []
    for v in values or []:
        out.extend(part.strip() for part in v.split(",") if part.strip())
    return out


@app.command()
def check(
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories to analyse"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (.reactsmells.toml or pyproject.toml)"),
    output_format: OutputFormat = typer.Option(OutputFormat.text, "--format", "-f", help="Console output format"),
    select: Optional[List[str]] = typer.Option(None, "--select", help="Only run these rules (id, name, prefix or category)"),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", help="Skip these rules"),
    min_severity: Optional[str] = typer.Option(None, "--min-severity", help="Hide findings below info|warning|error"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Exit 1 at info|warning|error, or never"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write findings.json and report.html here"),
    ai: bool = typer.Option(False, "--ai", help="Ask an OpenAI model for a refactoring plan"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """
    Analyse sources and report smells.

    Exit code 0 when no finding reaches --fail-on, 1 otherwise, 2 on usage or
    configuration errors.
    """
    # .env supplies OPENAI_API_KEY / OPENAI_MODEL; real environment wins
    load_dotenv(override=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(start=paths[0], explicit=config_file).with_overrides(
            select=_split(select),
            ignore=_split(ignore),
            min_severity=min_severity,
            fail_on=fail_on,
        )
        run = run_pipeline(paths=paths, config=config, out_dir=out, run_ai=ai)
    except (ConfigError, RuntimeError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)

    if output_format is OutputFormat.json:
        typer.echo(render_json(run.results))
    elif output_format is OutputFormat.github:
        rendered = render_github(run.results)
        if rendered:
            typer.echo(rendered)
    else:
        typer.echo(render_text(run.results))

    if out is not None:
        typer.echo(f"Report generated: {out / 'report.html'}", err=True)

    if run.fails(config.fail_on):
        raise typer.Exit(code=1)


@app.command("rules")
def list_rules(
    output_format: ListFormat = typer.Option(ListFormat.text, "--format", "-f", help="text or json"),
):
    """List the rule catalogue."""
    registry = RuleRegistry.default()
    if output_format is ListFormat.json:
        typer.echo(json.dumps([r.describe() for r in registry], indent=2))
        return
    for r in registry:
        typer.echo(f"{r.rule_id}  {r.name:<30} {r.severity:<8} {r.category:<12} {r.title}")


def main():
    app()


if __name__ == "__main__":
    main()
