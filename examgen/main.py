"""Main entry point for the exam question generation service."""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from examgen.config import get_settings
from examgen.generation import GenerationConfig, QuestionGenerator
from examgen.llm import create_llm_provider
from examgen.web_server import WebServer

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info(f"Starting exam question service in {settings.environment.value} mode")
    logger.info(f"Using LLM provider: {settings.llm_provider.value}")

    # Validate configuration
    try:
        settings.validate_provider_config()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    provider = create_llm_provider(settings=settings)
    if not await provider.health_check():
        logger.warning(f"{provider.name} is not reachable yet; requests will fail until it is")

    generator = QuestionGenerator(provider, GenerationConfig.from_settings(settings))
    web_server = WebServer(generator, settings)
    web_runner = await web_server.start()

    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down...")
        await web_server.stop(web_runner)
        await provider.aclose()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
