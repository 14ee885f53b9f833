import asyncio

import typer
import uvicorn

from dytto_api.app.config import settings

app = typer.Typer(help="Dytto site API - feedback board and blog backend")


@app.command()
def start(
    host: str = typer.Option(settings.host, help="Interface to bind."),
    port: int = typer.Option(settings.port, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
) -> None:
    """Start the API server."""
    typer.echo(f"Starting Dytto site API on {host}:{port}...")
    uvicorn.run(
        "dytto_api.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    from dytto_api.app.db import DATABASE_URL
    from dytto_api.app.db import init_db as _init_db

    asyncio.run(_init_db())
    typer.echo(f"Tables created on {DATABASE_URL.split('@')[-1]}")


if __name__ == "__main__":
    app()
