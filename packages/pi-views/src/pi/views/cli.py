"""CLI entry point for pi-views. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.views.cache import ViewCache
from pi.views.config import load_config
from pi.views.host import MemoryHost
from pi.views.message import LEVELS, Message


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Logging level",
)
@click.pass_context
def main(ctx, log_level):
    """Preview how messages are laid out by the configured views."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.argument("messages", nargs=-1, required=True)
@click.option("--view", "view_name", default="popup", help="View to display the messages in")
@click.option("--config", "config_path", default=None, help="Path to a views.json settings file")
@click.option("--level", type=click.Choice(LEVELS), default="info", help="Message level")
@click.option("--title", default="", help="Message title")
def show(messages, view_name, config_path, level, title):
    """Display MESSAGES in a view and print the rendered buffer."""
    host = MemoryHost()
    notes: list[str] = []
    host.notifier = lambda text, lvl, opts: notes.append(f"[{lvl}] {text}")

    cache = ViewCache(load_config(config_path), host)
    view = cache.get_view(view_name)
    if view is None:
        click.echo(f"No backend available for view {view_name!r}", err=True)
        sys.exit(1)

    view.set([Message.from_text(text, level=level, title=title) for text in messages])
    view.display()

    for line in notes:
        click.echo(line)
    for buf in cache.renders.buffers():
        if host.buf_is_valid(buf):
            for line in host.buffer_lines(buf):
                click.echo(line)


@main.command("views")
@click.option("--config", "config_path", default=None, help="Path to a views.json settings file")
def list_views(config_path):
    """List the configured views and the backends they resolve to."""
    config = load_config(config_path)
    for name in sorted(config.views):
        opts = config.get_options(name)
        backend = opts.get("backend") or opts.get("render") or name
        if isinstance(backend, list):
            backend = ", ".join(backend)
        fallback = opts.get("fallback")
        suffix = f" (fallback: {fallback})" if fallback else ""
        click.echo(f"{name}: {backend}{suffix}")


if __name__ == "__main__":
    main()
