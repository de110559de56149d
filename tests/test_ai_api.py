"""API tests for image editing, image generation, facts and transcription."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from dreamdesk.api.deps import get_fal_service, get_openai_service
from dreamdesk.models.ai import FactLanguage, GeneratedFact, GeneratedImage
from dreamdesk.services.errors import NotConfiguredError, UpstreamError
from dreamdesk.services.fal_service import FAL_EDIT_URL, FalService
from dreamdesk.services.openai_service import LANGUAGE_PROMPTS, OpenAIService, fact_prompt

EDIT_BODY = {"prompt": "make it blue", "imageUrls": ["https://img.example.com/a.png"]}


def fal_client(make_client, handler, user_id="user_1"):
    fal = FalService(transport=httpx.MockTransport(handler))
    return make_client(user_id=user_id, overrides={get_fal_service: lambda: fal})


class TestNanoEdit:
    def test_requires_sign_in(self, make_client):
        response = make_client(user_id=None).post("/api/nano/edit", json=EDIT_BODY)
        assert response.status_code == 401

    def test_requires_prompt_and_images(self, make_client):
        client = make_client()
        for body in ({"imageUrls": ["https://x"]}, {"prompt": "p"}, {"prompt": "p", "imageUrls": []}):
            response = client.post("/api/nano/edit", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "Prompt and image URLs are required"}

    def test_missing_key(self, make_client):
        response = make_client().post("/api/nano/edit", json=EDIT_BODY)
        assert response.status_code == 500
        assert response.json() == {"error": "FAL AI API key not configured"}

    def test_relays_provider_result(self, make_client, set_env):
        set_env(FAL_API_KEY="fal-test")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"images": [{"url": "https://fal.example.com/out.jpeg"}], "description": ""})

        response = fal_client(make_client, handler).post("/api/nano/edit", json=EDIT_BODY)

        assert response.status_code == 200
        assert response.json()["images"][0]["url"] == "https://fal.example.com/out.jpeg"
        assert seen["url"] == FAL_EDIT_URL
        assert seen["auth"] == "Key fal-test"
        assert seen["body"] == {
            "prompt": "make it blue",
            "image_urls": ["https://img.example.com/a.png"],
            "num_images": 1,
            "output_format": "jpeg",
        }

    def test_relays_provider_status(self, make_client, set_env):
        set_env(FAL_API_KEY="fal-test")
        client = fal_client(make_client, lambda request: httpx.Response(422, text="bad image"))

        response = client.post("/api/nano/edit", json=EDIT_BODY)
        assert response.status_code == 422
        assert response.json() == {"error": "Failed to process image editing request"}


class TestImageGeneration:
    def test_blank_prompt(self, make_client):
        for body in ({}, {"prompt": ""}, {"prompt": "   "}):
            response = make_client().post("/api/openai/image", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "Prompt is required"}

    def test_missing_key(self, make_client):
        response = make_client().post("/api/openai/image", json={"prompt": "a red fox"})
        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API key not configured"}

    def test_success_and_failure(self, make_client):
        service = OpenAIService()
        service.generate_image = AsyncMock(
            return_value=GeneratedImage(image_url="https://oai.example.com/fox.png", prompt="a red fox", size="1024x1024")
        )
        client = make_client(overrides={get_openai_service: lambda: service})

        response = client.post("/api/openai/image", json={"prompt": "a red fox"})
        assert response.status_code == 200
        assert response.json() == {"imageUrl": "https://oai.example.com/fox.png", "prompt": "a red fox", "size": "1024x1024"}

        service.generate_image.side_effect = UpstreamError("No image URL received")
        response = client.post("/api/openai/image", json={"prompt": "a red fox"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate image"}

    def test_invalid_size(self, make_client):
        response = make_client().post("/api/openai/image", json={"prompt": "fox", "size": "10x10"})
        assert response.status_code == 400


class TestFacts:
    def test_image_url_required(self, make_client):
        response = make_client().post("/api/openai/facts", json={"language": "english"})
        assert response.status_code == 400
        assert response.json() == {"error": "Image URL is required"}

    def test_fact_is_returned_with_language(self, make_client):
        service = OpenAIService()
        service.generate_fact = AsyncMock(
            return_value=GeneratedFact(fact="Foxes use the magnetic field.", language="russian", image_url="https://x/fox.png")
        )
        client = make_client(overrides={get_openai_service: lambda: service})

        response = client.post("/api/openai/facts", json={"imageUrl": "https://x/fox.png", "language": "russian"})
        assert response.status_code == 200
        assert response.json()["language"] == "russian"
        service.generate_fact.assert_awaited_once_with("https://x/fox.png", "russian")

    def test_provider_failure(self, make_client):
        service = OpenAIService()
        service.generate_fact = AsyncMock(side_effect=UpstreamError("Failed to generate fact", 500, "boom"))
        client = make_client(overrides={get_openai_service: lambda: service})

        response = client.post("/api/openai/facts", json={"imageUrl": "https://x/fox.png"})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate fact"}

    def test_prompt_per_language(self):
        assert fact_prompt("kyrgyz") == LANGUAGE_PROMPTS[FactLanguage.KYRGYZ]
        assert fact_prompt("klingon") == LANGUAGE_PROMPTS[FactLanguage.ENGLISH]


class TestTranscription:
    def test_audio_required(self, make_client):
        response = make_client().post("/api/openai/transcribe", data={"other": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "Audio file is required"}

    def test_missing_key(self, make_client):
        response = make_client().post("/api/openai/transcribe", files={"audio": ("a.webm", b"aud", "audio/webm")})
        assert response.status_code == 500
        assert response.json() == {"error": "OpenAI API key not configured"}

    def test_success(self, make_client):
        service = OpenAIService()
        service.transcribe = AsyncMock(return_value="hello world")
        client = make_client(overrides={get_openai_service: lambda: service})

        response = client.post("/api/openai/transcribe", files={"audio": ("a.webm", b"aud", "audio/webm")})
        assert response.status_code == 200
        assert response.json() == {"transcription": "hello world", "success": True}
        service.transcribe.assert_awaited_once_with("a.webm", b"aud", "audio/webm")

    def test_failure_carries_details(self, make_client):
        service = OpenAIService()
        service.transcribe = AsyncMock(side_effect=UpstreamError("Failed to transcribe audio", 400, "Invalid file format"))
        client = make_client(overrides={get_openai_service: lambda: service})

        response = client.post("/api/openai/transcribe", files={"audio": ("a.webm", b"aud", "audio/webm")})
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to transcribe audio", "details": "Invalid file format"}


@pytest.mark.asyncio
async def test_openai_service_checks_key_before_calling():
    service = OpenAIService()
    with pytest.raises(NotConfiguredError):
        await service.generate_image("fox")
    with pytest.raises(NotConfiguredError):
        await service.transcribe("a.webm", b"x")
