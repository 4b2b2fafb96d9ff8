"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from docportal.config import Settings, load_config
from docportal.core.pipeline import run_render
from docportal.core.store import FileStore
from docportal.core.topic import load_topic


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and apply the log level."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def render_cmd(
    href: Annotated[str, typer.Argument(help="Site path of the topic, e.g. /en/Content/Intro.htm")],
    root: Annotated[Optional[str], typer.Option("--content-root", help="Content root directory")] = None,
    lang: Annotated[Optional[str], typer.Option("--lang", help="Locale to prefix when href has none")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print {title, content, body} JSON")] = False,
    ):
    """Render one topic to stdout."""
    settings = _settings(overrides={"content_root": root})
    store = FileStore(settings.content_root)
    known = store.languages()
    if lang is None and known and href.strip("/").split("/")[0] not in known:
        lang = settings.default_language
    topic = load_topic(href, store, language=lang)
    if topic is None:
        _fail(f"Content not found: {href}")
    if as_json:
        typer.echo(json.dumps(topic.as_response(), indent=2, ensure_ascii=False))
        return
    typer.echo(f"# {topic.title}\n")
    typer.echo(topic.body_html)


def build_cmd(
    path: Annotated[str, typer.Argument(help="File or directory under the content root")] = "/",
    root: Annotated[Optional[str], typer.Option("--content-root", help="Content root directory")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Render every topic under PATH to HTML + sidecar JSON."""
    settings = _settings(overrides={"content_root": root, "output_dir": out})
    output_dir = Path(settings.output_dir)
    try:
        rendered, failed = run_render(Path(settings.content_root), path, output_dir, settings.skip_dirs)
    except FileNotFoundError as e:
        _fail("Nothing to render", e)

    for site_path, html_path in rendered:
        typer.echo(f"  {site_path} -> {html_path}")
    for site_path in failed:
        typer.echo(f"  failed: {site_path}", err=True)
    typer.echo(f"Rendered {len(rendered)} topic(s) to {output_dir}/ ({len(failed)} failed)")


def languages_cmd(
    root: Annotated[Optional[str], typer.Option("--content-root", help="Content root directory")] = None,
    ):
    """List locales that have a Content directory."""
    settings = _settings(overrides={"content_root": root})
    langs = FileStore(settings.content_root).languages()
    if not langs:
        typer.echo("No languages found.")
        raise typer.Exit(1)
    for lang in langs:
        typer.echo(lang)
