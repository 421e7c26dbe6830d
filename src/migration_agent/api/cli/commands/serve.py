"""Serve command - Run the agent HTTP server."""

import logging
from typing import Optional

import structlog
import typer
import uvicorn

from migration_agent.settings import Settings


def configure_logging(level_name: str) -> None:
    """Route structlog and stdlib logging through the given minimum level."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: $PORT or 8080)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
):
    """Run the Migration Pathways Agent.

    Examples:
        # Serve on $PORT (or 8080)
        migration-agent serve

        # Local development
        migration-agent serve --port 9000 --reload --log-level DEBUG
    """
    settings = Settings()
    configure_logging(log_level or settings.log_level)

    uvicorn.run(
        "migration_agent.api.server:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=(log_level or settings.log_level).lower(),
    )
