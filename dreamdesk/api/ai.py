"""
AI endpoints: image editing, image generation, image facts, quotes, transcription.

Each route checks its required inputs (400) before touching the provider;
a missing provider key is a 500 "not configured"; provider failures become
a generic "Failed to ..." message while the raw error is logged.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from dreamdesk.api.auth import require_authenticated
from dreamdesk.api.deps import get_fal_service, get_openai_service, get_quote_service
from dreamdesk.models.ai import (
    FactRequest,
    GeneratedFact,
    GeneratedImage,
    ImageEditRequest,
    ImageGenerationRequest,
    MotivationalQuote,
    TranscriptionResult,
)
from dreamdesk.services.errors import NotConfiguredError, UpstreamError
from dreamdesk.services.fal_service import FalService
from dreamdesk.services.llm_service import QuoteService, fallback_quote
from dreamdesk.services.openai_service import OpenAIService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/nano/edit", summary="Edit images with a text prompt")
async def edit_image(
    body: ImageEditRequest,
    user_id: Annotated[str, Depends(require_authenticated)],
    fal: Annotated[FalService, Depends(get_fal_service)],
) -> Dict[str, Any]:
    """Returns the provider's result envelope unchanged."""
    if not body.prompt or not body.image_urls:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt and image URLs are required")
    try:
        return await fal.edit_image(
            body.prompt,
            body.image_urls,
            num_images=body.num_images,
            output_format=body.output_format,
        )
    except NotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except UpstreamError as e:
        raise HTTPException(status_code=e.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except Exception as e:
        logger.exception("Error in image edit for user %s: %s", user_id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.post("/openai/facts", response_model=GeneratedFact, summary="Generate a fact about an image")
async def generate_fact(
    body: FactRequest,
    openai: Annotated[OpenAIService, Depends(get_openai_service)],
) -> GeneratedFact:
    if not body.image_url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image URL is required")
    try:
        return await openai.generate_fact(body.image_url, body.language)
    except NotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except UpstreamError as e:
        logger.error("Error generating fact: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate fact")


@router.post("/openai/image", response_model=GeneratedImage, summary="Generate an image from a prompt")
async def generate_image(
    body: ImageGenerationRequest,
    openai: Annotated[OpenAIService, Depends(get_openai_service)],
) -> GeneratedImage:
    if not body.prompt or not body.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")
    try:
        return await openai.generate_image(body.prompt, body.size)
    except NotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except UpstreamError as e:
        logger.error("Error generating image: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate image")


@router.get(
    "/openai/quote",
    response_model=MotivationalQuote,
    response_model_exclude_none=True,
    summary="Get a motivational quote",
)
async def get_quote(
    quotes: Annotated[QuoteService, Depends(get_quote_service)],
    theme: Optional[str] = None,
) -> MotivationalQuote:
    """Always 200: any failure is answered with a local quote."""
    try:
        return await quotes.generate_quote(theme)
    except Exception as e:
        logger.exception("Quote generation failed: %s", e)
        return fallback_quote()


@router.post("/openai/transcribe", response_model=TranscriptionResult, summary="Transcribe an audio recording")
async def transcribe_audio(
    openai: Annotated[OpenAIService, Depends(get_openai_service)],
    audio: Annotated[Optional[UploadFile], File()] = None,
) -> TranscriptionResult:
    if audio is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio file is required")
    try:
        data = await audio.read()
        text = await openai.transcribe(audio.filename or "recording.webm", data, audio.content_type)
    except NotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    except Exception as e:
        logger.exception("Transcription error: %s", e)
        details = e.body if isinstance(e, UpstreamError) and e.body else str(e) or "Unknown error"
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to transcribe audio", "details": details},
        )
    return TranscriptionResult(transcription=text, success=True)
