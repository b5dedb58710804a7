"""Command-line interface for cmsbase.

This module provides the CLI commands for running the API server and
managing tenant namespaces.
"""

from typing import NoReturn

import click

from cmsbase import __version__
from cmsbase.core.config import get_settings
from cmsbase.core.logging import LoggingContext, configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="cmsbase")
def cli() -> None:
    """cmsbase - headless CMS engine with dynamic collections.

    Configuration is read from CMSBASE_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option("--workers", type=int, default=None, help="Number of worker processes (overrides config)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting cmsbase server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "cmsbase.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.argument("namespace")
def provision(namespace: str) -> None:
    """Create NAMESPACE and its tables. Safe to run again."""
    import asyncio

    from cmsbase.core.exceptions import NamespaceError
    from cmsbase.infrastructure.persistence.database import DatabaseManager
    from cmsbase.infrastructure.persistence.namespace import NamespaceProvisioner

    settings = get_settings()
    configure_logging(settings)

    async def run() -> bool:
        db = DatabaseManager(settings)
        try:
            with LoggingContext(namespace=namespace):
                return await NamespaceProvisioner(db).provision(namespace)
        finally:
            await db.disconnect()

    try:
        created = asyncio.run(run())
    except NamespaceError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1) from e

    if created:
        click.echo(f"Namespace '{namespace}' provisioned.")
    else:
        click.echo(f"Namespace '{namespace}' already exists.")


@cli.command(name="field-types")
def field_types() -> None:
    """List the field types available for columns."""
    from cmsbase.domain.services import get_field_type_registry

    for descriptor in get_field_type_registry():
        marker = " (system)" if descriptor.is_system else ""
        click.echo(f"{descriptor.key:<14} {descriptor.title}{marker}")


@cli.command()
def info() -> None:
    """Display cmsbase configuration."""
    settings = get_settings()

    click.echo(f"""
cmsbase v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Content:
  Namespace:    {settings.default_namespace}
  Page Size:    {settings.default_page_size} (max {settings.max_page_size})

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the ``cmsbase`` console script and ``python -m cmsbase``.
    """
    cli()


if __name__ == "__main__":
    main()
