"""
Request and response schemas for the AI endpoints.

Request fields are optional at the schema level: the routes check them
and answer 400 with a specific message, instead of a generic 422.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from dreamdesk.models.user import CamelModel


class ImageSize(str, Enum):
    SQUARE = "1024x1024"
    LANDSCAPE = "1792x1024"
    PORTRAIT = "1024x1792"


class FactLanguage(str, Enum):
    ENGLISH = "english"
    KYRGYZ = "kyrgyz"
    RUSSIAN = "russian"
    TURKISH = "turkish"


class ImageEditRequest(CamelModel):
    prompt: Optional[str] = None
    image_urls: Optional[List[str]] = None
    num_images: int = 1
    output_format: str = "jpeg"


class ImageGenerationRequest(BaseModel):
    prompt: Optional[str] = None
    size: ImageSize = ImageSize.SQUARE


class GeneratedImage(CamelModel):
    image_url: str
    prompt: str
    size: str


class FactRequest(CamelModel):
    image_url: Optional[str] = None
    language: str = FactLanguage.ENGLISH.value


class GeneratedFact(CamelModel):
    fact: str
    language: str
    image_url: str


class MotivationalQuote(BaseModel):
    quote: str
    author: Optional[str] = None
    theme: Optional[str] = None


class TranscriptionResult(BaseModel):
    transcription: str
    success: bool = True
