"""Tests for the HTTP surface."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from examgen.config import Settings
from examgen.errors import GenerationFailed, InvalidRequest
from examgen.generation import DifficultyLevel, GeneratedQuestion
from examgen.web_server import WebServer

GENERATE_BODY = {
    "material_content": "# Routing\nRouting protocols choose paths.",
    "course_name": "Computer Networks",
    "material_name": "Unit 3 Notes",
    "unit": 3,
    "question_counts": {"easy": 1, "medium": 1},
}


@pytest.fixture
def generator():
    """Question generator double."""
    mock_generator = MagicMock()
    mock_generator.provider.name = "Fake"
    mock_generator.generate_questions = AsyncMock(
        return_value=[
            GeneratedQuestion(
                question_text="Define routing. (2 Marks)",
                answer_text="Routing selects paths for traffic across networks.",
                difficulty_level=DifficultyLevel.EASY,
                course_name="Computer Networks",
            )
        ]
    )
    return mock_generator


@pytest.fixture
def server(generator):
    """Web server wired to the generator double."""
    return WebServer(generator, Settings(_env_file=None))


class TestWebServer:
    """Test HTTP endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, server):
        """Test health endpoint."""
        async with TestClient(TestServer(server.app)) as client:
            response = await client.get("/health")

            assert response.status == 200
            assert await response.json() == {
                "status": "healthy",
                "service": "examgen",
                "provider": "Fake",
            }

    @pytest.mark.asyncio
    async def test_chunk_content(self, server):
        """Test chunking returns chunks and statistics."""
        content = "\n".join(f"## Part {i}\n" + "x" * 300 for i in range(3))
        body = {
            "content": content,
            "options": {"max_tokens_per_chunk": 100, "min_tokens_per_chunk": 10, "overlap_tokens": 0},
        }

        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/content/chunk", json=body)

            assert response.status == 200
            data = await response.json()
            assert [chunk["title"] for chunk in data["chunks"]] == ["Part 0", "Part 1", "Part 2"]
            assert data["chunks"][0]["metadata"]["heading_level"] == 2
            assert data["statistics"]["total_chunks"] == 3

    @pytest.mark.asyncio
    async def test_chunk_empty_content(self, server):
        """Test empty content is a client error."""
        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/content/chunk", json={"content": " "})

            assert response.status == 400
            assert (await response.json())["error"] == "Content cannot be empty"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [5, None, ["# Notes"]])
    async def test_chunk_non_string_content(self, server, content):
        """Test content that is not a string is a client error."""
        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/content/chunk", json={"content": content})

            assert response.status == 400
            assert (await response.json())["error"].startswith("Content must be a string")

    @pytest.mark.asyncio
    async def test_chunk_invalid_options(self, server):
        """Test inconsistent budgets are a client error."""
        body = {"content": "text", "options": {"max_tokens_per_chunk": 10, "min_tokens_per_chunk": 20}}

        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/content/chunk", json=body)

            assert response.status == 400
            assert (await response.json())["error"] == "Invalid chunking options"

    @pytest.mark.asyncio
    async def test_generate_questions(self, server, generator):
        """Test generation returns requested and generated counts."""
        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/questions/generate", json=GENERATE_BODY)

            assert response.status == 200
            data = await response.json()
            assert data["requested"] == 2
            assert data["generated"] == 1
            assert data["questions"][0]["difficulty_level"] == "EASY"
            assert data["questions"][0]["marks"] == "EIGHT"

        request = generator.generate_questions.await_args.args[0]
        assert request.unit == 3
        assert request.question_counts.medium == 1

    @pytest.mark.asyncio
    async def test_generate_invalid_body(self, server):
        """Test a malformed request is rejected before generation."""
        async with TestClient(TestServer(server.app)) as client:
            response = await client.post(
                "/api/questions/generate", json={"question_counts": {"easy": -1}}
            )

            assert response.status == 400
            data = await response.json()
            assert data["error"] == "Invalid generation request"
            assert data["details"]

    @pytest.mark.asyncio
    async def test_generate_not_json(self, server):
        """Test a non-JSON body is rejected."""
        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/questions/generate", data="not json")

            assert response.status == 400

    @pytest.mark.asyncio
    async def test_generate_invalid_request(self, server, generator):
        """Test request errors raised by the generator map to 400."""
        generator.generate_questions.side_effect = InvalidRequest(
            "At least one question must be requested"
        )

        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/questions/generate", json=GENERATE_BODY)

            assert response.status == 400

    @pytest.mark.asyncio
    async def test_generate_failure(self, server, generator):
        """Test generation failure maps to 502."""
        generator.generate_questions.side_effect = GenerationFailed("no valid questions")

        async with TestClient(TestServer(server.app)) as client:
            response = await client.post("/api/questions/generate", json=GENERATE_BODY)

            assert response.status == 502
            assert (await response.json())["error"] == "no valid questions"
