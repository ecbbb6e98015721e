"""
Unified Entry Point for Cloud Server Deployment

Starts the members API with uvicorn. The keep-alive pinger runs inside
the same process, as a task on the API's event loop, so a single
startup command is enough on free cloud hosting.
"""

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def main():
    """Run the API server on the configured port."""
    import uvicorn
    from members_api.core.config import Settings
    from members_api.main import create_app

    settings = Settings()
    app = create_app(settings)

    logger.info(f"Starting members API on 0.0.0.0:{settings.server_port}...")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.server_port,
        log_level=settings.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
