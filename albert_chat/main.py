"""Main application entry point.

Runs FastAPI with the NiceGUI chat pages mounted on the same server.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Build the services, mount the UI onto FastAPI and serve both."""
    import uvicorn
    from nicegui import ui

    from albert_chat.api import create_app
    from albert_chat.services import ChatServices
    from albert_chat.ui import register_pages

    services = ChatServices()
    app = create_app(services)
    register_pages(services)

    ui.run_with(
        app,
        title="AI Assistant",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "albert-chat-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat UI available at {services.config.site_url}/")
    logger.info(f"Health check at http://localhost:{port}/health")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
