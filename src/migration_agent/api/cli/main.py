"""Migration Pathways Agent CLI entry point."""

import typer
from rich.console import Console

from migration_agent.api.cli.commands import client, serve

app = typer.Typer(
    name="migration-agent",
    help="Migration Pathways Agent - A2A JSON-RPC server and client",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.command("serve", help="Run the agent HTTP server")(serve.serve)
app.add_typer(client.app, name="client", help="Talk to a running agent")


@app.command()
def version():
    """Show Migration Pathways Agent version."""
    from migration_agent import __version__

    console.print(
        f"[bold blue]Migration Pathways Agent[/bold blue] version [cyan]{__version__}[/cyan]"
    )


if __name__ == "__main__":
    app()
