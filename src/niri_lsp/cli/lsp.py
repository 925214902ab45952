import signal
from typing import Optional

import click

from niri_lsp.cli.utils import configure_logging, fail
from niri_lsp.config.loader import load_server_config
from niri_lsp.lsp.server import DEFAULT_PORT, NiriLSPServer


@click.command(name="lsp")
@click.option("--port", type=int, help=f"Port number for LSP server (defaults to {DEFAULT_PORT})")
@click.option("--host", default="localhost", help="Host to bind to when using TCP mode (defaults to localhost)")
@click.option("--tcp", is_flag=True, help="Use TCP instead of stdio for LSP communication")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to a YAML server config file")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def lsp(port: Optional[int], host: str, tcp: bool, config_path: Optional[str], debug: bool):
    """Start the language server for Niri KDL configuration files.

    The server provides diagnostics, completion and hover documentation for
    KDL documents. By default it talks over stdio, which is what editors
    expect. Use --tcp for debugging with a client that connects over a socket.

    Examples:
        niri-lsp lsp                     # Start LSP server using stdio
        niri-lsp lsp --tcp               # Start LSP server using TCP on localhost:3000
        niri-lsp lsp --tcp --port 4000   # Start LSP server using TCP on localhost:4000
        niri-lsp lsp --config lsp.yml    # Use settings and cache limits from a file
        niri-lsp lsp --debug             # Start with detailed debug logging
    """
    configure_logging(debug)

    try:
        config = load_server_config(config_path)
        final_port = port or DEFAULT_PORT

        def signal_handler(signum, frame):
            raise KeyboardInterrupt()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        server = NiriLSPServer(config=config, port=final_port)

        if tcp:
            click.echo(f"Starting Niri LSP server on {host}:{final_port}", err=True)
            server.start(host=host, use_tcp=True)
        else:
            server.start(host=host, use_tcp=False)

    except KeyboardInterrupt:
        click.echo("\nLSP server stopped", err=True)
    except Exception as e:
        fail(e, debug=debug)
