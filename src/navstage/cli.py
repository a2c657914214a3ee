"""CLI interface for Navstage.

Command-line tool for validating, resolving and serving locale page maps.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from navstage.config import Config
from navstage.core.errors import NavstageError
from navstage.core.loader import PageMapLoader
from navstage.core.search import build_search_index
from navstage.core.tree import normalize_route

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover navstage.toml)",
)

_pagemap_dir_option = click.option(
    "--pagemap-dir",
    "-d",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Directory of <locale>.json page maps (overrides config)",
)


@click.group()
def cli() -> None:
    """Navstage - multilingual navigation trees for documentation sites."""


@cli.command()
@_config_option
@_pagemap_dir_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log locale fallbacks)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    pagemap_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
) -> None:
    """Start the navigation API server."""
    from navstage.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = _load_config(config_path, pagemap_dir).with_overrides(
        host=host,
        port=port,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Page map directory: {config.site.pagemap_dir}")
    click.echo(f"Default locale: {config.site.default_locale}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    try:
        run_server(config, verbose=verbose)
    except NavstageError as e:
        _fail(str(e))


@cli.command()
@_config_option
@_pagemap_dir_option
def validate(config_path: Path | None, pagemap_dir: Path | None) -> None:
    """Validate every locale page map."""
    config = _load_config(config_path, pagemap_dir)
    loader = _create_loader(config)

    try:
        resolver = loader.load()
    except NavstageError as e:
        _fail(str(e))

    for locale, name in resolver.locale_names().items():
        tree = resolver.get_tree(locale)
        click.echo(f"{locale} ({name}): {len(tree)} nodes")

        if locale == resolver.default_locale:
            continue
        missing = resolver.missing_routes(locale)
        if missing:
            click.echo(
                click.style(
                    f"  {len(missing)} route(s) fall back to {resolver.default_locale}:",
                    fg="yellow",
                )
            )
            for route in missing:
                click.echo(f"    {route}")

    click.echo(click.style("All page maps are valid.", fg="green", bold=True))


@cli.command()
@click.argument("locale")
@click.argument("route")
@_config_option
@_pagemap_dir_option
def resolve(
    locale: str,
    route: str,
    config_path: Path | None,
    pagemap_dir: Path | None,
) -> None:
    """Resolve ROUTE for LOCALE and print the navigation context as JSON."""
    config = _load_config(config_path, pagemap_dir)

    try:
        resolver = _create_loader(config).load()
        context = resolver.resolve(locale, normalize_route(route))
    except NavstageError as e:
        _fail(str(e))

    click.echo(json.dumps(context.to_dict(), ensure_ascii=False, indent=2))


@cli.command("search-index")
@click.argument("locale")
@_config_option
@_pagemap_dir_option
def search_index(
    locale: str,
    config_path: Path | None,
    pagemap_dir: Path | None,
) -> None:
    """Print the search index for LOCALE as JSON."""
    config = _load_config(config_path, pagemap_dir)

    try:
        tree = _create_loader(config).load().get_tree(locale)
    except NavstageError as e:
        _fail(str(e))

    entries = [entry.to_dict() for entry in build_search_index(tree)]
    click.echo(json.dumps({"entries": entries}, ensure_ascii=False, indent=2))


def _load_config(config_path: Path | None, pagemap_dir: Path | None) -> Config:
    try:
        config = Config.load(config_path)
    except ValueError as e:
        _fail(f"Invalid configuration: {e}")
    return config.with_overrides(pagemap_dir=pagemap_dir)


def _create_loader(config: Config) -> PageMapLoader:
    return PageMapLoader(
        config.site.pagemap_dir,
        config.site.locale_pairs(),
        config.site.default_locale,
    )


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
