"""
OpenAI-backed gateways: image generation (DALL-E 3), image facts (GPT-4o
vision) and audio transcription (Whisper).

Each call checks OPENAI_API_KEY first and raises NotConfiguredError without
contacting the provider when it is missing.
"""

import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from dreamdesk.config import get_settings
from dreamdesk.models.ai import FactLanguage, GeneratedFact, GeneratedImage, ImageSize
from dreamdesk.services.errors import NotConfiguredError, UpstreamError

logger = logging.getLogger(__name__)

IMAGE_MODEL = "dall-e-3"
VISION_MODEL = "gpt-4o"
TRANSCRIPTION_MODEL = "whisper-1"

LANGUAGE_PROMPTS = {
    FactLanguage.ENGLISH: "Generate a fun, interesting fact about this image. Make it educational and engaging. Keep it under 100 words.",
    FactLanguage.KYRGYZ: "Бул сүрөт жөнүндө кызыктуу, көңүл ачуучу факт жазыңыз. Билим берүүчү жана кызыктуу болсун. 100 сөзмөн аз болсун.",
    FactLanguage.RUSSIAN: "Создайте интересный, увлекательный факт об этом изображении. Сделайте его познавательным и захватывающим. Не более 100 слов.",
    FactLanguage.TURKISH: "Bu görsel hakkında eğlenceli, ilginç bir gerçek oluşturun. Eğitici ve ilgi çekici olsun. 100 kelimeden az olsun.",
}


def fact_prompt(language: str) -> str:
    """Instruction for the language; unknown languages get the English one."""
    try:
        return LANGUAGE_PROMPTS[FactLanguage(language)]
    except ValueError:
        return LANGUAGE_PROMPTS[FactLanguage.ENGLISH]


class OpenAIService:
    def _client(self) -> AsyncOpenAI:
        api_key = get_settings().openai_api_key
        if not api_key:
            logger.error("OPENAI_API_KEY is not set")
            raise NotConfiguredError("OpenAI API key not configured")
        return AsyncOpenAI(api_key=api_key)

    async def generate_image(self, prompt: str, size: ImageSize = ImageSize.SQUARE) -> GeneratedImage:
        client = self._client()
        prompt = prompt.strip()
        try:
            response = await client.images.generate(
                model=IMAGE_MODEL,
                prompt=prompt,
                size=ImageSize(size).value,
                quality="standard",
                n=1,
            )
        except OpenAIError as e:
            logger.error("OpenAI image generation failed: %s", e)
            raise UpstreamError("Failed to generate image", getattr(e, "status_code", None), str(e)) from e

        image_url: Optional[str] = response.data[0].url if response.data else None
        if not image_url:
            logger.error("No image URL received from OpenAI")
            raise UpstreamError("No image URL received")
        logger.info("Generated image (%s) for prompt of %d chars", size, len(prompt))
        return GeneratedImage(image_url=image_url, prompt=prompt, size=ImageSize(size).value)

    async def generate_fact(self, image_url: str, language: str = FactLanguage.ENGLISH.value) -> GeneratedFact:
        client = self._client()
        try:
            response = await client.chat.completions.create(
                model=VISION_MODEL,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": fact_prompt(language)},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
                max_tokens=300,
                temperature=0.7,
            )
        except OpenAIError as e:
            logger.error("OpenAI fact generation failed: %s", e)
            raise UpstreamError("Failed to generate fact", getattr(e, "status_code", None), str(e)) from e

        fact = response.choices[0].message.content if response.choices else None
        if not fact:
            raise UpstreamError("No fact generated from OpenAI")
        return GeneratedFact(fact=fact.strip(), language=language, image_url=image_url)

    async def transcribe(self, filename: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Transcribe English speech; returns plain text."""
        client = self._client()
        try:
            transcription = await client.audio.transcriptions.create(
                file=(filename, data, content_type or "audio/webm"),
                model=TRANSCRIPTION_MODEL,
                language="en",
                response_format="text",
            )
        except OpenAIError as e:
            logger.error("OpenAI transcription failed: %s", e)
            raise UpstreamError("Failed to transcribe audio", getattr(e, "status_code", None), str(e)) from e
        # response_format="text" yields a plain string
        return transcription if isinstance(transcription, str) else getattr(transcription, "text", "")


openai_service = OpenAIService()
