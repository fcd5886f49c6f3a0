"""HTTP surface for content chunking and question generation."""

import json
import logging
from dataclasses import asdict

from aiohttp import web
from pydantic import ValidationError

from examgen.chunking import ChunkingOptions, chunk_content, get_chunk_statistics
from examgen.config import Settings, get_settings
from examgen.errors import GenerationFailed, InvalidInput
from examgen.generation import GenerationRequest, QuestionGenerator

logger = logging.getLogger(__name__)


def _error_details(error: ValidationError) -> list[dict]:
    return error.errors(include_url=False, include_context=False, include_input=False)


class WebServer:
    """JSON HTTP server wrapping an injected question generator."""

    def __init__(self, generator: QuestionGenerator, settings: Settings | None = None):
        """Initialize web server."""
        self.generator = generator
        self.settings = settings or get_settings()
        self.app = web.Application()
        self._setup_routes()
        logger.info(f"Web server initialized on port {self.settings.server_port}")

    def _setup_routes(self):
        """Set up HTTP routes."""
        self.app.router.add_get("/", self._handle_health)
        self.app.router.add_get("/health", self._handle_health)
        self.app.router.add_post("/api/content/chunk", self._handle_chunk)
        self.app.router.add_post("/api/questions/generate", self._handle_generate)
        logger.info("Routes configured: /, /health, /api/content/chunk, /api/questions/generate")

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response(
            {
                "status": "healthy",
                "service": "examgen",
                "provider": self.generator.provider.name,
            }
        )

    async def _handle_chunk(self, request: web.Request) -> web.Response:
        """
        Split material into chunks.

        Expects JSON: {"content": "...", "options": {...}}
        """
        try:
            data = await request.json()
            if not isinstance(data, dict):
                return web.json_response({"error": "Request body must be a JSON object"}, status=400)
            options = ChunkingOptions.model_validate(data.get("options") or {})
            chunks = chunk_content(data.get("content", ""), options)
        except json.JSONDecodeError:
            return web.json_response({"error": "Request body must be JSON"}, status=400)
        except ValidationError as e:
            return web.json_response(
                {"error": "Invalid chunking options", "details": _error_details(e)},
                status=400,
            )
        except InvalidInput as e:
            return web.json_response({"error": str(e)}, status=400)

        return web.json_response(
            {
                "chunks": [asdict(chunk) for chunk in chunks],
                "statistics": get_chunk_statistics(chunks),
            }
        )

    async def _handle_generate(self, request: web.Request) -> web.Response:
        """
        Generate questions for a material.

        Expects JSON mirroring GenerationRequest. Returns the requested count,
        the generated count and the questions, which may be fewer than requested.
        """
        try:
            data = await request.json()
            generation_request = GenerationRequest.model_validate(data)
        except json.JSONDecodeError:
            return web.json_response({"error": "Request body must be JSON"}, status=400)
        except ValidationError as e:
            return web.json_response(
                {"error": "Invalid generation request", "details": _error_details(e)},
                status=400,
            )

        try:
            questions = await self.generator.generate_questions(generation_request)
        except InvalidInput as e:
            return web.json_response({"error": str(e)}, status=400)
        except GenerationFailed as e:
            logger.error(f"Question generation failed: {e}")
            return web.json_response({"error": str(e)}, status=502)

        return web.json_response(
            {
                "requested": generation_request.total_questions,
                "generated": len(questions),
                "questions": [question.model_dump(mode="json") for question in questions],
            }
        )

    async def start(self) -> web.AppRunner:
        """Start the web server."""
        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, self.settings.server_host, self.settings.server_port)
        await site.start()
        logger.info(f"Web server started on {self.settings.server_host}:{self.settings.server_port}")
        return runner

    async def stop(self, runner: web.AppRunner):
        """Stop the web server."""
        await runner.cleanup()
        logger.info("Web server stopped")
