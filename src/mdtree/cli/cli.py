"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdtree.cli.commands import build_cmd, configure_logging, images_cmd, show_cmd, text_cmd


app = typer.Typer(name="mdtree", no_args_is_help=True, help="Markdown to typed document model conversion")

app.callback()(configure_logging)
app.command(name="build")(build_cmd)
app.command(name="show")(show_cmd)
app.command(name="text")(text_cmd)
app.command(name="images")(images_cmd)
