"""CLI entrypoint: Typer app definition and command registration"""

import typer

from docportal.cli.commands import build_cmd, languages_cmd, render_cmd


app = typer.Typer(name="docportal", no_args_is_help=True, help="Render exported help topics into clean HTML")

app.command(name="render")(render_cmd)
app.command(name="build")(build_cmd)
app.command(name="languages")(languages_cmd)
