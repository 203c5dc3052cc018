"""Configuration management and environment variable loading."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file (don't override existing env vars)
load_dotenv(override=False)


class Config:
    """Application configuration."""

    # Speech-to-text and chat models are served by Groq's OpenAI-compatible API
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    API_BASE_URL: str = os.getenv("API_BASE_URL", "https://api.groq.com/openai/v1")
    TRANSCRIPTION_MODEL: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-large-v3-turbo")
    ANALYSIS_MODEL: str = os.getenv("ANALYSIS_MODEL", "llama-3.3-70b-versatile")
    ANALYSIS_MAX_TOKENS: int = int(os.getenv("ANALYSIS_MAX_TOKENS", "2048"))
    TRANSLATION_MAX_TOKENS: int = int(os.getenv("TRANSLATION_MAX_TOKENS", "4096"))
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "300"))

    # Upload limits (MB)
    MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "100"))
    MAX_TRANSCRIPTION_MB: int = int(os.getenv("MAX_TRANSCRIPTION_MB", "25"))
    ACCEPTED_VIDEO_TYPES: tuple = ("video/mp4", "video/webm", "video/quicktime")

    # Containers rarely report a usable frame rate for every codec
    ASSUMED_FPS: float = float(os.getenv("ASSUMED_FPS", "30"))

    # HTTP API server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "5001"))
    SERVER_URL: str = os.getenv("DEEPPROOF_SERVER_URL", "http://localhost:5001")
    BACKEND: str = os.getenv("DEEPPROOF_BACKEND", "direct")

    OUT_DIR: Path = Path(os.getenv("OUT_DIR", "./out")).resolve()

    @classmethod
    def validate(cls) -> None:
        """Validate that required configuration is present."""
        if not cls.GROQ_API_KEY:
            raise ValueError(
                "GROQ_API_KEY is required. Please set it in your .env file or environment variables."
            )
