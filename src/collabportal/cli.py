"""Command-line interface for CollabPortal.

This module provides the CLI commands for running and managing
the CollabPortal application.
"""

import asyncio
from typing import NoReturn

import click

from collabportal import __version__
from collabportal.core.config import get_settings
from collabportal.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="CollabPortal")
def cli() -> None:
    """CollabPortal - brand and influencer collaboration portal.

    Settings are read from ``COLLABPORTAL_*`` environment variables and
    an optional .env file.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Auto-reload on code changes (defaults to on in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Start the CollabPortal server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers
    if reload is None:
        reload = settings.is_development

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "ERROR: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting CollabPortal server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "collabportal.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development. Deployed environments run migrations.
    """
    from collabportal.infrastructure.persistence.database import get_db_manager
    from collabportal.infrastructure.persistence import models  # noqa: F401

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm("This will create all database tables. Continue?", abort=True, default=False)

    async def initialize() -> None:
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--email", type=str, default=None, help="Admin email (prompts if not provided)")
@click.option(
    "--password",
    type=str,
    default=None,
    help="Admin password (prompts if not provided)",
)
def create_admin(email: str | None, password: str | None) -> None:
    """Create an admin, or promote an existing account to admin."""
    from collabportal.domain.services import AdminBootstrapError, ensure_admin
    from collabportal.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    if email is None:
        email = click.prompt("Admin email", type=str)
    if "@" not in email or "." not in email.split("@")[-1]:
        click.echo("Error: Invalid email format", err=True)
        raise SystemExit(1)
    if password is None:
        password = click.prompt("Admin password", hide_input=True, confirmation_prompt=True)

    async def create() -> bool:
        db = get_db_manager()
        try:
            async with db.session() as session:
                return await ensure_admin(session=session, email=email, password=password)
        finally:
            await db.disconnect()

    try:
        created = asyncio.run(create())
    except AdminBootstrapError as e:
        click.echo(f"Error: {e}", err=True)
        logger.error("Admin creation failed", error=str(e))
        raise SystemExit(1)

    if created:
        click.echo(f"Admin created: {email}")
    else:
        click.echo(f"Existing account promoted to admin: {email}")
    logger.info("Admin ensured via CLI", email=email, created=created)


@cli.command()
def info() -> None:
    """Display CollabPortal configuration."""
    settings = get_settings()

    click.echo(f"""
CollabPortal v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}
  App URL:      {settings.app_url}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}

Storage:
  Backend:      {settings.storage_backend}

Email:
  Provider:     {settings.email_provider}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
