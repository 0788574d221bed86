"""Web server command."""

import rich_click as click

from ._console import console, setup_logging


@click.command()
@click.option("--host", "-h", default="0.0.0.0", help="Host to bind to")
@click.option("--port", "-p", default=8000, help="Port to bind to")
@click.option("--reload/--no-reload", default=False, help="Auto-reload on code changes")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
def serve(host: str, port: int, reload: bool, verbose: bool):
    """Start the embed server."""
    import uvicorn

    setup_logging(verbose)
    console.print(f"Starting rxembed at http://{host}:{port}")
    console.print("Press Ctrl+C to stop")

    uvicorn.run(
        "rxembed.web:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_config=None,
    )
