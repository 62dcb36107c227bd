"""CLI entrypoint: Typer app definition and command registration"""

import typer

from postmatter.cli.commands import check_cmd, export_cmd, fmt_cmd, show_cmd


app = typer.Typer(name="postmatter", no_args_is_help=True, help="Front-matter document loader and collection checker")

app.command(name="check")(check_cmd)
app.command(name="show")(show_cmd)
app.command(name="export")(export_cmd)
app.command(name="fmt")(fmt_cmd)
