import click

from niri_lsp.cli.check import check
from niri_lsp.cli.lsp import lsp


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Niri KDL language server"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(lsp)
cli.add_command(check)


if __name__ == "__main__":
    cli()
