from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from result import Err

from testignore.config.defaults import default_config
from testignore.config.loader import load_config
from testignore.config.schema import AppConfig
from testignore.models.context import Context, make_context, with_aliases
from testignore.models.rules import Rule
from testignore.services.conditions import unknown_tags
from testignore.services.host import detect_host
from testignore.services.index import ExclusionIndex, build_index, load_path, matching_rules, rules_for_context

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _rule_label(rule: Rule, comment_marker: str) -> str:
    label = f"line {rule.line_no}: {rule}"
    if rule.comment:
        label += f"  {comment_marker} {rule.comment}"
    return label


def _load_index(config: AppConfig) -> ExclusionIndex:
    result = load_path(config.manifest_path, comment_marker=config.comment_marker)
    if isinstance(result, Err):
        error = result.unwrap_err()
        if not config.fail_open:
            console.print(f"[red]Cannot load exclusion manifest: {escape(str(error))}[/]")
            raise typer.Exit(1)
        console.print(f"[yellow]Cannot load exclusion manifest: {escape(str(error))}. Excluding nothing.[/]")
        return build_index(())
    return result.unwrap()


def _render_rules(index: ExclusionIndex, context: Context) -> None:
    table = Table(title=f"Rules applying to {escape(str(context))}", border_style="#373b41")
    table.add_column("Line", justify="right", style="#81a2be")
    table.add_column("Condition", style="#f0c674")
    table.add_column("Pattern")
    table.add_column("Comment", style="#969896")
    for rule in rules_for_context(index, context):
        table.add_row(
            str(rule.line_no),
            escape(str(rule.condition)) or "*",
            escape(rule.pattern.value),
            escape(rule.comment or ""),
        )
    console.print(table)


def _render_queries(index: ExclusionIndex, context: Context, test_ids: list[str], comment_marker: str) -> None:
    table = Table(title=f"Context {escape(str(context))}", border_style="#373b41")
    table.add_column("Test")
    table.add_column("Status", no_wrap=True)
    table.add_column("Rule", style="#969896")
    for test_id in test_ids:
        hits = matching_rules(index, context, test_id)
        if hits:
            table.add_row(escape(test_id), "[#de935f]excluded[/]", escape(_rule_label(hits[0], comment_marker)))
        else:
            table.add_row(escape(test_id), "[#b5bd68]runs[/]", "")
    console.print(table)


def run(
    test_ids: Annotated[list[str] | None, typer.Argument(help="Test identifiers to check.")] = None,
    backend: Annotated[str | None, typer.Option("--backend", "-b", help="Active compiler backend.")] = None,
    arch: Annotated[str | None, typer.Option("--arch", "-a", help="Target architecture (default: host).")] = None,
    os_name: Annotated[str | None, typer.Option("--os", "-o", help="Target operating system (default: host).")] = None,
    tags: Annotated[list[str] | None, typer.Option("--tag", "-T", help="Extra context tag (repeatable).")] = None,
    manifest: Annotated[str | None, typer.Option("--manifest", "-m", help="Path to the exclusion manifest.")] = None,
    config_path: Annotated[str | None, typer.Option("--config", help="Path to config JSON.")] = None,
    list_rules: Annotated[bool, typer.Option("--list", "-l", help="List rules applying to the context.")] = False,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on tags outside the known vocabulary.")] = False,
    sample_config: Annotated[bool, typer.Option("--sample-config", help="Print sample config JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    if sample_config:
        console.print(json.dumps(default_config().to_dict(), indent=2))
        raise typer.Exit(0)

    _setup_logging(verbose)

    config_result = load_config(config_path)
    if isinstance(config_result, Err):
        console.print(f"[yellow]{escape(config_result.unwrap_err())} Using defaults.[/]")
        config = default_config()
    else:
        config = config_result.unwrap()
    if manifest is not None:
        config = replace(config, manifest_path=manifest)

    index = _load_index(config)

    if strict:
        unknown = unknown_tags(index.rules, config.vocabulary())
        if unknown:
            console.print(f"[red]Unknown tags in manifest: {escape(', '.join(sorted(unknown)))}[/]")
            raise typer.Exit(1)

    host_arch, host_os = detect_host()
    context = with_aliases(
        make_context(
            backend=backend or config.default_backend,
            arch=arch or host_arch,
            os=os_name or host_os,
            extra=tags or (),
        ),
        config.aliases,
    )

    if list_rules:
        _render_rules(index, context)
    if test_ids:
        _render_queries(index, context, test_ids, config.comment_marker)
    elif not list_rules:
        console.print(f"[#81a2be]Loaded {len(index):,} rules from {escape(config.manifest_path)}[/]")


def cli() -> None:
    typer.run(run)


if __name__ == "__main__":
    cli()
