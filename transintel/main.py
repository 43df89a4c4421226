"""
Command-line launcher for the TransIntel backend server.
"""

import logging

import click

from transintel.app import create_app
from transintel.config import ServerDefaults, Settings


@click.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT or 3001)")
@click.option("--debug", is_flag=True, default=False, help="Run Flask in debug mode")
def main(host: str | None, port: int | None, debug: bool) -> None:
    """Run the translation backend HTTP server."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    settings = Settings.from_env()
    host = host or settings.host
    port = port or settings.port

    app = create_app(settings)
    services = app.extensions['transintel']

    logger.info("=" * 50)
    logger.info("TransIntel Backend Server")
    logger.info("=" * 50)
    logger.info(f"Server:   http://{host}:{port}")
    logger.info(f"Model:    {settings.model}")
    logger.info(f"Cache:    max {settings.cache_max_size} entries, TTL {settings.cache_ttl_seconds:g}s")
    logger.info(f"API Key:  {'configured' if settings.api_key_configured else 'missing'}")
    logger.info("=" * 50)

    if not settings.api_key_configured:
        logger.warning("GEMINI_API_KEY not found in environment or .env file")
        logger.warning(f"Get your API key from: {ServerDefaults.API_KEY_CONSOLE_URL}")

    try:
        app.run(host=host, port=port, debug=debug, threaded=True)
    finally:
        logger.info("Shutting down, clearing translation cache...")
        services.cache.clear()


if __name__ == "__main__":
    main()
